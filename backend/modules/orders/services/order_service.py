# backend/modules/orders/services/order_service.py

import logging
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session, joinedload, selectinload

from core.clock import Clock
from core.exceptions import (
    ConflictError,
    InvalidRequestError,
    InvalidTransitionError,
    NotFoundError,
)
from core.response_models import PageParams, PaginationMeta, paginate
from modules.customers.models.customer_models import Customer
from modules.menu.models.menu_models import Menu
from modules.payments.enums.payment_enums import PaymentStatus
from modules.payments.models.payment_models import Payment
from ..enums.order_enums import OrderStatus, StatusChangeSource
from ..models.order_models import Order, OrderItem, OrderStatusLog
from ..schemas.order_schemas import OrderCreate

logger = logging.getLogger(__name__)


VALID_TRANSITIONS = {
    OrderStatus.PENDING: [OrderStatus.PAID, OrderStatus.CANCELLED],
    OrderStatus.PAID: [OrderStatus.PREPARING, OrderStatus.CANCELLED],
    OrderStatus.PREPARING: [OrderStatus.DELIVERED, OrderStatus.CANCELLED],
    OrderStatus.DELIVERED: [],
    OrderStatus.CANCELLED: [],
}


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return target in VALID_TRANSITIONS.get(OrderStatus(current), [])


def transition_order(
    db: Session,
    order: Order,
    target: OrderStatus,
    source: StatusChangeSource,
    note: Optional[str] = None,
) -> bool:
    """
    Move ``order`` to ``target`` inside the caller's transaction.

    Returns False without writing when the order already holds ``target``.
    Raises InvalidTransitionError for a transition the table does not allow.
    The caller commits.
    """
    current = OrderStatus(order.status)
    if current == target:
        return False
    if not can_transition(current, target):
        raise InvalidTransitionError(current.value, target.value)

    order.status = target.value
    db.add(
        OrderStatusLog(
            order_id=order.id,
            from_status=current.value,
            to_status=target.value,
            source=source.value,
            note=note,
        )
    )
    logger.info(
        f"Order {order.id} status {current.value} -> {target.value} ({source.value})"
    )
    return True


def lock_order(db: Session, order_id: int) -> Order:
    """Load a live order with a row lock held until the transaction ends."""
    order = (
        db.query(Order)
        .filter(Order.id == order_id, Order.live())
        .with_for_update(of=Order)
        .first()
    )
    if not order:
        raise NotFoundError(f"Order {order_id} not found")
    return order


async def create_order_service(
    db: Session, customer_id: int, order_data: OrderCreate
) -> Order:
    if not order_data.items:
        raise InvalidRequestError("Order must contain at least one item")

    customer = (
        db.query(Customer)
        .filter(Customer.id == customer_id, Customer.live())
        .first()
    )
    if not customer:
        raise NotFoundError(f"Customer {customer_id} not found")

    address = (order_data.delivery_address or "").strip() or (customer.address or "").strip()
    if not address:
        raise InvalidRequestError("Delivery address is required")

    try:
        # Shared locks keep the menus from being deleted or repriced until commit
        menu_ids = {line.menu_id for line in order_data.items}
        menus = {
            menu.id: menu
            for menu in db.query(Menu)
            .filter(Menu.id.in_(menu_ids), Menu.live())
            .with_for_update(read=True)
            .all()
        }
        missing = sorted(menu_ids - menus.keys())
        if missing:
            raise NotFoundError(f"Menu {missing[0]} not found")

        items: List[OrderItem] = []
        total = Decimal("0")
        for line in order_data.items:
            menu = menus[line.menu_id]
            price = Decimal(menu.price)
            if line.price is not None and Decimal(line.price) != price:
                logger.warning(
                    f"Customer {customer_id} sent price {line.price} for menu {menu.id}, "
                    f"using menu price {price}"
                )
            items.append(
                OrderItem(menu_id=menu.id, quantity=line.quantity, price_at_order=price)
            )
            total += price * line.quantity

        order = Order(
            customer_id=customer_id,
            status=OrderStatus.PENDING.value,
            total_price=total,
            delivery_address=address,
            items=items,
        )
        db.add(order)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(order)
    logger.info(
        f"Created order {order.id} for customer {customer_id}: "
        f"{len(items)} items, total {order.total_price}"
    )
    return order


async def get_order_by_id(db: Session, order_id: int) -> Order:
    order = (
        db.query(Order)
        .options(
            selectinload(Order.items),
            joinedload(Order.customer),
            selectinload(Order.status_logs),
        )
        .filter(Order.id == order_id, Order.live())
        .first()
    )
    if not order:
        raise NotFoundError(f"Order {order_id} not found")
    return order


async def list_orders_service(
    db: Session,
    params: PageParams,
    customer_id: Optional[int] = None,
    status: Optional[OrderStatus] = None,
) -> Tuple[List[Order], PaginationMeta]:
    query = (
        db.query(Order)
        .options(selectinload(Order.items), joinedload(Order.customer))
        .filter(Order.live())
    )
    if customer_id is not None:
        query = query.filter(Order.customer_id == customer_id)
    if status is not None:
        query = query.filter(Order.status == status.value)
    return paginate(query.order_by(Order.id.desc()), params)


async def update_order_status_service(
    db: Session,
    order_id: int,
    target: OrderStatus,
    source: StatusChangeSource = StatusChangeSource.STAFF,
) -> Order:
    try:
        order = lock_order(db, order_id)
        if transition_order(db, order, target, source):
            db.commit()
        else:
            db.rollback()
    except Exception:
        db.rollback()
        raise
    return await get_order_by_id(db, order_id)


async def delete_order_service(db: Session, order_id: int, clock: Clock) -> None:
    try:
        order = lock_order(db, order_id)
        payment = (
            db.query(Payment)
            .filter(Payment.order_id == order_id, Payment.live())
            .first()
        )
        if payment and payment.status in (
            PaymentStatus.SUCCESS.value,
            PaymentStatus.PENDING.value,
        ):
            # Midtrans keeps notifying about pending payments
            raise ConflictError(
                f"Order {order_id} has a {payment.status} payment and cannot be deleted"
            )

        now = clock.now()
        order.deleted_at = now
        for item in order.items:
            item.deleted_at = now
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info(f"Soft deleted order {order_id}")
