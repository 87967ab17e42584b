# backend/modules/orders/routes/order_routes.py

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from core.auth import AuthUser, get_current_user, require_admin, require_staff
from core.clock import Clock, get_clock
from core.database import get_db
from core.exceptions import ForbiddenError, GatewayError
from core.rate_limiter import RateLimitGroup, rate_limit
from core.response_models import PageParams, StandardResponse, page_params
from modules.payments.routes.payment_routes import get_payment_service
from modules.payments.services.payment_service import PaymentService
from ..enums.order_enums import OrderStatus
from ..schemas.order_schemas import (
    OrderCreate,
    OrderCreateResponse,
    OrderDetailOut,
    OrderOut,
    OrderStatusUpdate,
)
from ..services.order_service import (
    create_order_service,
    delete_order_service,
    get_order_by_id,
    list_orders_service,
    update_order_status_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/orders",
    tags=["Orders"],
    dependencies=[Depends(rate_limit(RateLimitGroup.GENERAL, per_user=True))],
)


@router.post(
    "",
    response_model=StandardResponse[OrderCreateResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_order(
    order_data: OrderCreate,
    db: Session = Depends(get_db),
    user: AuthUser = Depends(get_current_user),
    payments: PaymentService = Depends(get_payment_service),
):
    """
    Place an order and open its hosted checkout.

    If the gateway fails the order is kept as pending and the 502 body
    carries ``errors.order_id`` so the client can retry the payment.
    """
    order = await create_order_service(db, user.customer_id, order_data)
    try:
        intent = await payments.create_payment_intent(order.id)
    except GatewayError as e:
        logger.warning(f"Order {order.id} created but payment intent failed: {e.detail}")
        e.errors = {**(e.errors or {}), "order_id": order.id}
        raise

    order = await get_order_by_id(db, order.id)
    return StandardResponse[OrderCreateResponse].success(
        data=OrderCreateResponse(
            order=OrderOut.model_validate(order),
            payment=intent,
        ),
        message="Order created",
    )


@router.get("", response_model=StandardResponse[List[OrderOut]])
async def list_my_orders(
    order_status: Optional[OrderStatus] = Query(None, alias="status"),
    params: PageParams = Depends(page_params),
    db: Session = Depends(get_db),
    user: AuthUser = Depends(get_current_user),
):
    orders, meta = await list_orders_service(
        db, params, customer_id=user.customer_id, status=order_status
    )
    return StandardResponse[List[OrderOut]].paginated(
        data=[OrderOut.model_validate(o) for o in orders], meta=meta
    )


@router.get("/all", response_model=StandardResponse[List[OrderOut]])
async def list_all_orders(
    order_status: Optional[OrderStatus] = Query(None, alias="status"),
    customer_id: Optional[int] = Query(None),
    params: PageParams = Depends(page_params),
    db: Session = Depends(get_db),
    user: AuthUser = Depends(require_staff),
):
    orders, meta = await list_orders_service(
        db, params, customer_id=customer_id, status=order_status
    )
    return StandardResponse[List[OrderOut]].paginated(
        data=[OrderOut.model_validate(o) for o in orders], meta=meta
    )


@router.get("/{order_id}", response_model=StandardResponse[OrderDetailOut])
async def get_order(
    order_id: int,
    db: Session = Depends(get_db),
    user: AuthUser = Depends(get_current_user),
):
    order = await get_order_by_id(db, order_id)
    if order.customer_id != user.customer_id and not user.is_staff:
        raise ForbiddenError("You do not have access to this order")
    return StandardResponse[OrderDetailOut].success(
        data=OrderDetailOut.model_validate(order)
    )


@router.patch("/{order_id}/status", response_model=StandardResponse[OrderDetailOut])
async def update_order_status(
    order_id: int,
    data: OrderStatusUpdate,
    db: Session = Depends(get_db),
    user: AuthUser = Depends(require_admin),
):
    order = await update_order_status_service(db, order_id, data.status)
    return StandardResponse[OrderDetailOut].success(
        data=OrderDetailOut.model_validate(order), message="Order status updated"
    )


@router.delete("/{order_id}", response_model=StandardResponse[None])
async def delete_order(
    order_id: int,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    user: AuthUser = Depends(require_admin),
):
    await delete_order_service(db, order_id, clock)
    return StandardResponse[None].success(message="Order deleted")
