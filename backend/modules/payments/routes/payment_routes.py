# backend/modules/payments/routes/payment_routes.py

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.auth import AuthUser, get_current_user, require_staff
from core.clock import Clock, get_clock
from core.config import Settings, get_settings
from core.database import get_db
from core.exceptions import ForbiddenError
from core.rate_limiter import RateLimitGroup, rate_limit
from core.response_models import StandardResponse
from modules.orders.services.order_service import get_order_by_id
from ..gateways.base import PaymentGatewayInterface
from ..gateways.midtrans_gateway import MidtransGateway
from ..schemas.payment_schemas import (
    MidtransNotification,
    NotificationResult,
    PaymentIntentOut,
    PaymentOut,
)
from ..services.payment_service import PaymentService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/payments",
    tags=["Payments"],
    dependencies=[Depends(rate_limit(RateLimitGroup.PAYMENT, per_user=True))],
)

# Called by the gateway, so no bearer token and no /payments prefix
notification_router = APIRouter(
    tags=["Payments"],
    dependencies=[Depends(rate_limit(RateLimitGroup.PAYMENT))],
)


def get_payment_gateway(
    settings: Settings = Depends(get_settings),
) -> PaymentGatewayInterface:
    return MidtransGateway.from_settings(settings)


def get_payment_service(
    db: Session = Depends(get_db),
    gateway: PaymentGatewayInterface = Depends(get_payment_gateway),
    clock: Clock = Depends(get_clock),
) -> PaymentService:
    return PaymentService(db, gateway, clock)


async def _ensure_order_access(db: Session, order_id: int, user: AuthUser) -> None:
    order = await get_order_by_id(db, order_id)
    if order.customer_id != user.customer_id and not user.is_staff:
        raise ForbiddenError("You do not have access to this order")


@router.get("/config", response_model=StandardResponse[Dict[str, Any]])
async def get_checkout_config(
    _: AuthUser = Depends(get_current_user),
    gateway: PaymentGatewayInterface = Depends(get_payment_gateway),
):
    """Client key and merchant id for the frontend Snap widget."""
    return StandardResponse[Dict[str, Any]].success(data=gateway.get_public_config())


@router.post("/{order_id}", response_model=StandardResponse[PaymentIntentOut])
async def create_payment_intent(
    order_id: int,
    db: Session = Depends(get_db),
    user: AuthUser = Depends(get_current_user),
    service: PaymentService = Depends(get_payment_service),
):
    """Open (or re-issue) the hosted checkout for an order."""
    await _ensure_order_access(db, order_id, user)
    intent = await service.create_payment_intent(order_id)
    return StandardResponse[PaymentIntentOut].success(
        data=intent, message="Payment intent created"
    )


@router.get("/{order_id}", response_model=StandardResponse[PaymentOut])
async def get_payment(
    order_id: int,
    db: Session = Depends(get_db),
    user: AuthUser = Depends(get_current_user),
    service: PaymentService = Depends(get_payment_service),
):
    await _ensure_order_access(db, order_id, user)
    payment = service.get_payment(order_id)
    return StandardResponse[PaymentOut].success(data=PaymentOut.model_validate(payment))


@router.post("/{order_id}/sync", response_model=StandardResponse[NotificationResult])
async def sync_payment_status(
    order_id: int,
    user: AuthUser = Depends(require_staff),
    service: PaymentService = Depends(get_payment_service),
):
    result = await service.sync_payment_status(order_id)
    logger.info(f"User {user.customer_id} synced payment for order {order_id}")
    return StandardResponse[NotificationResult].success(
        data=result, message="Payment status synchronised"
    )


@notification_router.post(
    "/payment/notification", response_model=StandardResponse[NotificationResult]
)
async def payment_notification(
    notification: MidtransNotification,
    service: PaymentService = Depends(get_payment_service),
):
    result = await service.handle_notification(notification)
    return StandardResponse[NotificationResult].success(
        data=result, message="Notification processed"
    )
