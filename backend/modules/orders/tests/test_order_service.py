# backend/modules/orders/tests/test_order_service.py

from decimal import Decimal

import pytest

from core.exceptions import (
    ConflictError,
    InvalidRequestError,
    InvalidTransitionError,
    NotFoundError,
)
from core.response_models import PageParams
from modules.orders.enums.order_enums import OrderStatus, StatusChangeSource
from modules.orders.models.order_models import Order, OrderStatusLog
from modules.orders.schemas.order_schemas import OrderCreate, OrderItemCreate
from modules.orders.services.order_service import (
    VALID_TRANSITIONS,
    can_transition,
    create_order_service,
    delete_order_service,
    get_order_by_id,
    list_orders_service,
    transition_order,
    update_order_status_service,
)
from modules.payments.enums.payment_enums import PaymentStatus
from tests.factories import CustomerFactory, MenuFactory, OrderFactory, PaymentFactory


class TestTransitionTable:

    def test_terminal_statuses_have_no_exits(self):
        assert VALID_TRANSITIONS[OrderStatus.DELIVERED] == []
        assert VALID_TRANSITIONS[OrderStatus.CANCELLED] == []

    @pytest.mark.parametrize(
        "current,target",
        [
            (OrderStatus.PENDING, OrderStatus.PAID),
            (OrderStatus.PENDING, OrderStatus.CANCELLED),
            (OrderStatus.PAID, OrderStatus.PREPARING),
            (OrderStatus.PREPARING, OrderStatus.DELIVERED),
        ],
    )
    def test_allowed(self, current, target):
        assert can_transition(current, target)

    @pytest.mark.parametrize(
        "current,target",
        [
            (OrderStatus.DELIVERED, OrderStatus.CANCELLED),
            (OrderStatus.CANCELLED, OrderStatus.PAID),
            (OrderStatus.PENDING, OrderStatus.DELIVERED),
            (OrderStatus.PAID, OrderStatus.PENDING),
        ],
    )
    def test_rejected(self, current, target):
        assert not can_transition(current, target)

    def test_transition_writes_one_log_row(self, db_session):
        order = OrderFactory()
        assert transition_order(
            db_session, order, OrderStatus.PAID, StatusChangeSource.PAYMENT_WEBHOOK
        )
        db_session.commit()

        logs = db_session.query(OrderStatusLog).filter_by(order_id=order.id).all()
        assert len(logs) == 1
        assert logs[0].from_status == "pending"
        assert logs[0].to_status == "paid"
        assert logs[0].source == "payment_webhook"

    def test_same_status_is_a_no_op(self, db_session):
        order = OrderFactory(status=OrderStatus.PAID.value)
        assert not transition_order(
            db_session, order, OrderStatus.PAID, StatusChangeSource.STAFF
        )
        assert db_session.query(OrderStatusLog).count() == 0

    def test_invalid_transition_raises(self, db_session):
        order = OrderFactory(status=OrderStatus.DELIVERED.value)
        with pytest.raises(InvalidTransitionError):
            transition_order(db_session, order, OrderStatus.CANCELLED, StatusChangeSource.STAFF)


class TestCreateOrder:

    @pytest.mark.asyncio
    async def test_total_uses_menu_price(self, db_session):
        customer = CustomerFactory()
        croissant = MenuFactory(price=Decimal("25000.00"))
        baguette = MenuFactory(price=Decimal("18000.00"))

        order = await create_order_service(
            db_session,
            customer.id,
            OrderCreate(
                items=[
                    # client sent a stale price; the menu price wins
                    OrderItemCreate(menu_id=croissant.id, quantity=2, price=Decimal("1")),
                    OrderItemCreate(menu_id=baguette.id, quantity=1),
                ],
                delivery_address="Jl. Sudirman 5",
            ),
        )

        assert order.status == OrderStatus.PENDING.value
        assert Decimal(order.total_price) == Decimal("68000.00")
        assert sorted(Decimal(i.price_at_order) for i in order.items) == [
            Decimal("18000.00"),
            Decimal("25000.00"),
        ]
        assert order.delivery_address == "Jl. Sudirman 5"

    @pytest.mark.asyncio
    async def test_blank_address_falls_back_to_profile(self, db_session):
        customer = CustomerFactory(address="Jl. Thamrin 10")
        menu = MenuFactory()

        order = await create_order_service(
            db_session,
            customer.id,
            OrderCreate(items=[OrderItemCreate(menu_id=menu.id, quantity=1)], delivery_address="  "),
        )

        assert order.delivery_address == "Jl. Thamrin 10"

    @pytest.mark.asyncio
    async def test_no_address_anywhere_is_rejected(self, db_session):
        customer = CustomerFactory(address=None)
        menu = MenuFactory()

        with pytest.raises(InvalidRequestError):
            await create_order_service(
                db_session,
                customer.id,
                OrderCreate(items=[OrderItemCreate(menu_id=menu.id, quantity=1)]),
            )

    @pytest.mark.asyncio
    async def test_empty_items_rejected(self, db_session):
        customer = CustomerFactory()
        with pytest.raises(InvalidRequestError):
            await create_order_service(db_session, customer.id, OrderCreate(items=[]))

    @pytest.mark.asyncio
    async def test_soft_deleted_menu_is_not_found(self, db_session, clock):
        customer = CustomerFactory()
        menu = MenuFactory(deleted_at=clock.now())

        with pytest.raises(NotFoundError):
            await create_order_service(
                db_session,
                customer.id,
                OrderCreate(items=[OrderItemCreate(menu_id=menu.id, quantity=1)]),
            )
        assert db_session.query(Order).count() == 0


class TestReadAndUpdate:

    @pytest.mark.asyncio
    async def test_list_filters_by_customer_and_status(self, db_session):
        alice = CustomerFactory()
        bob = CustomerFactory()
        OrderFactory(customer=alice)
        OrderFactory(customer=alice, status=OrderStatus.PAID.value)
        OrderFactory(customer=bob)

        orders, meta = await list_orders_service(
            db_session, PageParams(page=1, per_page=10), customer_id=alice.id
        )
        assert meta.total == 2
        assert all(o.customer_id == alice.id for o in orders)

        paid, meta = await list_orders_service(
            db_session, PageParams(), status=OrderStatus.PAID
        )
        assert meta.total == 1
        assert paid[0].status == "paid"

    @pytest.mark.asyncio
    async def test_pagination_offset(self, db_session):
        customer = CustomerFactory()
        for _ in range(5):
            OrderFactory(customer=customer)

        orders, meta = await list_orders_service(
            db_session, PageParams(page=2, per_page=2), customer_id=customer.id
        )
        assert len(orders) == 2
        assert meta.current_page == 2
        assert meta.last_page == 3
        assert meta.has_next_page and meta.has_prev_page

    @pytest.mark.asyncio
    async def test_update_status_logs_transition(self, db_session):
        order = OrderFactory(status=OrderStatus.PAID.value)

        updated = await update_order_status_service(db_session, order.id, OrderStatus.PREPARING)

        assert updated.status == "preparing"
        assert [log.to_status for log in updated.status_logs] == ["preparing"]

    @pytest.mark.asyncio
    async def test_delivered_order_cannot_be_cancelled(self, db_session):
        order = OrderFactory(status=OrderStatus.DELIVERED.value)

        with pytest.raises(InvalidTransitionError):
            await update_order_status_service(db_session, order.id, OrderStatus.CANCELLED)

        db_session.refresh(order)
        assert order.status == "delivered"

    @pytest.mark.asyncio
    async def test_get_missing_order(self, db_session):
        with pytest.raises(NotFoundError):
            await get_order_by_id(db_session, 999)


class TestDeleteOrder:

    @pytest.mark.asyncio
    async def test_soft_delete_hides_order(self, db_session, clock):
        order = OrderFactory()

        await delete_order_service(db_session, order.id, clock)

        with pytest.raises(NotFoundError):
            await get_order_by_id(db_session, order.id)
        db_session.refresh(order)
        assert order.deleted_at == clock.now()

    @pytest.mark.asyncio
    async def test_paid_order_cannot_be_deleted(self, db_session, clock):
        payment = PaymentFactory(status=PaymentStatus.SUCCESS.value)

        with pytest.raises(ConflictError):
            await delete_order_service(db_session, payment.order_id, clock)

    @pytest.mark.asyncio
    async def test_order_with_pending_payment_cannot_be_deleted(self, db_session, clock):
        payment = PaymentFactory(status=PaymentStatus.PENDING.value)

        with pytest.raises(ConflictError):
            await delete_order_service(db_session, payment.order_id, clock)
        db_session.refresh(payment.order)
        assert payment.order.deleted_at is None

    @pytest.mark.asyncio
    async def test_order_with_expired_payment_can_be_deleted(self, db_session, clock):
        payment = PaymentFactory(status=PaymentStatus.EXPIRED.value)

        await delete_order_service(db_session, payment.order_id, clock)

        with pytest.raises(NotFoundError):
            await get_order_by_id(db_session, payment.order_id)
