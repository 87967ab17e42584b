"""
Application startup validation and initialization.

Checks configuration and database connectivity, and optionally applies
pending migrations, before the server accepts requests. Any failure is
logged and the process exits with status 1.
"""

import logging
import sys
from pathlib import Path
from typing import List, Tuple

from sqlalchemy import text
from sqlalchemy.engine import Engine

from core.config import Settings

logger = logging.getLogger(__name__)

BACKEND_DIR = Path(__file__).resolve().parent.parent


def configure_logging(settings: Settings) -> None:
    """Configure root logging once from LOG_LEVEL"""
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


class StartupValidator:
    """Validates application startup requirements"""

    def __init__(self, settings: Settings, engine: Engine):
        self.settings = settings
        self.engine = engine
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def check_environment_config(self) -> bool:
        if not self.settings.MIDTRANS_SERVER_KEY:
            self.warnings.append(
                "MIDTRANS_SERVER_KEY is empty - payment intents and notifications will fail"
            )
        if not self.settings.is_production and "dev-secret" in self.settings.JWT_SECRET:
            self.warnings.append("Using development JWT_SECRET - change for production")
        return True

    def check_database_connection(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1")).fetchone()
            logger.info("Database connection successful")
            return True
        except Exception as e:
            self.errors.append(f"Database connection failed: {e}")
            return False

    def run_migrations(self) -> bool:
        if not self.settings.RUN_MIGRATIONS_ON_STARTUP:
            return True

        from alembic import command
        from alembic.config import Config

        try:
            alembic_cfg = Config(str(BACKEND_DIR / "alembic.ini"))
            alembic_cfg.set_main_option("script_location", str(BACKEND_DIR / "alembic"))
            alembic_cfg.attributes["database_url"] = self.settings.database_url
            command.upgrade(alembic_cfg, "head")
            logger.info("Database migrations applied")
            return True
        except Exception as e:
            self.errors.append(f"Database migration failed: {e}")
            return False

    def validate_all(self) -> Tuple[bool, List[str], List[str]]:
        """Run all validation checks"""
        checks = [
            ("Environment Configuration", self.check_environment_config),
            ("Database Connection", self.check_database_connection),
            ("Database Migrations", self.run_migrations),
        ]

        for check_name, check_func in checks:
            logger.info(f"Running check: {check_name}")
            if not check_func():
                # Later checks depend on the earlier ones
                return False, self.errors, self.warnings

        return True, self.errors, self.warnings


def run_startup_checks(settings: Settings, engine: Engine) -> None:
    logger.info(f"Starting bakery backend ({settings.SERVER_ENV.value})")

    validator = StartupValidator(settings, engine)
    passed, errors, warnings = validator.validate_all()

    for warning in warnings:
        logger.warning(f"Startup warning: {warning}")

    if not passed:
        for error in errors:
            logger.error(f"Startup error: {error}")
        logger.error("Startup checks failed, exiting")
        sys.exit(1)

    logger.info("All startup checks passed")
