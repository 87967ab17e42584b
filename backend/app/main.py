import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.startup import configure_logging, run_startup_checks
from core.config import Settings, get_settings
from core.database import build_engine, build_session_factory
from core.exceptions import register_exception_handlers
from core.rate_limiter import RateLimiter
from core.response_middleware import RequestLoggingMiddleware

# ========== Customers & Authentication ==========
from modules.customers.routes.auth_routes import router as auth_router
from modules.customers.routes.customer_routes import router as customer_router
from modules.customers.routes.employee_routes import router as employee_router

# ========== Menu, Cart & Wishlist ==========
from modules.menu.routes.menu_routes import router as menu_router
from modules.cart.routes.cart_routes import router as cart_router
from modules.wishlist.routes.wishlist_routes import router as wishlist_router

# ========== Orders & Payments ==========
from modules.orders.routes.order_routes import router as order_router
from modules.payments.routes.payment_routes import (
    notification_router as payment_notification_router,
    router as payment_router,
)

# ========== Reservations & Tables ==========
from modules.reservations.routes.reservation_routes import router as reservation_router
from modules.tables.routes.table_routes import router as table_router

# ========== Inventory ==========
from modules.inventory.routes.inventory_routes import router as inventory_router

# ========== Health Monitoring ==========
from modules.health.routes.health_routes import router as health_router

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, run_checks: bool = True) -> FastAPI:
    """
    Build the application.

    ``run_checks`` runs the startup validator on launch; tests pass False and
    supply their own settings and engine.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if run_checks:
            run_startup_checks(settings, app.state.engine)
        yield

    app = FastAPI(
        title="Bakery Commerce API",
        description="""
    Ordering, payments and table reservations for a bakery/restaurant.

    ## Authentication

    Most endpoints require a bearer token. Use `/auth/login` to obtain one.
    """,
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = build_engine(settings)
    app.state.session_factory = build_session_factory(app.state.engine)
    app.state.rate_limiter = RateLimiter(
        prune_interval_seconds=settings.RATE_LIMIT_PRUNE_INTERVAL_SECONDS
    )

    # Register exception handlers for consistent error responses
    register_exception_handlers(app)

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Authentication first
    app.include_router(auth_router)
    app.include_router(customer_router)
    app.include_router(employee_router)

    app.include_router(menu_router)
    app.include_router(cart_router)
    app.include_router(wishlist_router)

    app.include_router(order_router)
    app.include_router(payment_router)
    app.include_router(payment_notification_router)

    app.include_router(reservation_router)
    app.include_router(table_router)

    app.include_router(inventory_router)

    app.include_router(health_router)

    return app


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    configure_logging(settings)
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.SERVER_PORT)
