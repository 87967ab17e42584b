"""
Application configuration.

All settings are read from environment variables (or a local ``.env``) so
secrets never live in source control. Production refuses to start with the
development defaults for secrets.
"""

from enum import Enum
from functools import lru_cache
from typing import Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_JWT_SECRET = "dev-secret-change-in-production"


class ServerEnvironment(str, Enum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server
    SERVER_ENV: ServerEnvironment = Field(
        default=ServerEnvironment.DEVELOPMENT, description="Deployment environment"
    )
    SERVER_PORT: int = Field(default=8000, description="HTTP listen port")
    LOG_LEVEL: str = Field(default="INFO", description="Root log level")

    # Database
    DB_HOST: str = Field(default="localhost")
    DB_PORT: int = Field(default=5432)
    DB_USER: str = Field(default="postgres")
    DB_PASSWORD: str = Field(default="postgres")
    DB_NAME: str = Field(default="bakery")
    DATABASE_URL: Optional[str] = Field(
        default=None, description="Full SQLAlchemy URL, overrides the DB_* parts"
    )
    DB_POOL_SIZE: int = Field(default=10)
    DB_MAX_OVERFLOW: int = Field(default=20)
    LOG_SQL_QUERIES: bool = Field(default=False)
    RUN_MIGRATIONS_ON_STARTUP: bool = Field(default=False)
    RESERVATION_ISOLATION_LEVEL: Optional[str] = Field(
        default="SERIALIZABLE",
        description="Isolation level for reservation check-and-insert, empty to disable",
    )

    # JWT Authentication - MUST be overridden in production
    JWT_SECRET: str = Field(default=DEFAULT_JWT_SECRET)
    JWT_ALGORITHM: str = Field(default="HS256")
    JWT_EXPIRE_HOURS: int = Field(default=24)

    # Midtrans
    MIDTRANS_ENDPOINT: str = Field(
        default="https://app.sandbox.midtrans.com",
        description="Base URL for Snap transaction creation",
    )
    MIDTRANS_API_ENDPOINT: Optional[str] = Field(
        default=None,
        description="Base URL for the status API, defaults to MIDTRANS_ENDPOINT",
    )
    MIDTRANS_SERVER_KEY: str = Field(default="")
    MIDTRANS_CLIENT_KEY: str = Field(default="")
    MIDTRANS_MERCHANT_ID: str = Field(default="")
    GATEWAY_TIMEOUT_SECONDS: float = Field(
        default=10.0, description="Wall-clock timeout for gateway HTTP calls"
    )

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = Field(default=True)
    RATE_LIMIT_PRUNE_INTERVAL_SECONDS: int = Field(default=300)
    AUTH_RATE_LIMIT: int = Field(default=5, description="Requests per auth window")
    AUTH_RATE_WINDOW_SECONDS: int = Field(default=60)
    PAYMENT_RATE_LIMIT: int = Field(default=100, description="Webhook calls per window")
    PAYMENT_RATE_WINDOW_SECONDS: int = Field(default=60)
    GENERAL_RATE_LIMIT: int = Field(default=200)
    GENERAL_RATE_WINDOW_SECONDS: int = Field(default=3600)

    @model_validator(mode="after")
    def validate_production_secrets(self):
        """Ensure secrets are not left at development defaults in production."""
        if self.SERVER_ENV == ServerEnvironment.PRODUCTION:
            if self.JWT_SECRET == DEFAULT_JWT_SECRET:
                raise ValueError("JWT_SECRET must be set to a secure value in production")
            if not self.MIDTRANS_SERVER_KEY:
                raise ValueError("MIDTRANS_SERVER_KEY is required in production")
        return self

    @property
    def is_production(self) -> bool:
        return self.SERVER_ENV == ServerEnvironment.PRODUCTION

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+psycopg2://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    @property
    def midtrans_api_endpoint(self) -> str:
        return (self.MIDTRANS_API_ENDPOINT or self.MIDTRANS_ENDPOINT).rstrip("/")


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Returns:
        Settings instance with environment variables loaded
    """
    return Settings()
