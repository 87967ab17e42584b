# backend/modules/payments/services/payment_service.py

import logging
import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.clock import Clock
from core.exceptions import (
    ConflictError,
    GatewayError,
    InvalidRequestError,
    NotFoundError,
    UnauthorizedError,
)
from modules.orders.enums.order_enums import OrderStatus, StatusChangeSource
from modules.orders.models.order_models import Order
from modules.orders.services.order_service import (
    can_transition,
    lock_order,
    transition_order,
)
from ..enums.payment_enums import (
    FINAL_PAYMENT_STATUSES,
    FraudStatus,
    PaymentStatus,
    TransactionStatus,
)
from ..gateways.base import PaymentGatewayInterface, PaymentItem, PaymentRequest
from ..models.payment_models import Payment
from ..schemas.payment_schemas import (
    MidtransNotification,
    NotificationResult,
    PaymentIntentOut,
)
from .payment_metrics import (
    order_transition_skipped_total,
    payment_intent_total,
    payment_notification_total,
    payment_signature_failure_total,
)

logger = logging.getLogger(__name__)


# transaction_status -> (payment status, order status)
GATEWAY_STATUS_MAP: Dict[TransactionStatus, Tuple[PaymentStatus, OrderStatus]] = {
    TransactionStatus.SETTLEMENT: (PaymentStatus.SUCCESS, OrderStatus.PAID),
    TransactionStatus.PENDING: (PaymentStatus.PENDING, OrderStatus.PENDING),
    TransactionStatus.DENY: (PaymentStatus.FAILED, OrderStatus.CANCELLED),
    TransactionStatus.EXPIRE: (PaymentStatus.EXPIRED, OrderStatus.CANCELLED),
    TransactionStatus.CANCEL: (PaymentStatus.CANCELLED, OrderStatus.CANCELLED),
}

# capture is resolved by fraud_status; a missing fraud_status counts as accept
CAPTURE_STATUS_MAP: Dict[Optional[FraudStatus], Tuple[PaymentStatus, OrderStatus]] = {
    None: (PaymentStatus.SUCCESS, OrderStatus.PAID),
    FraudStatus.ACCEPT: (PaymentStatus.SUCCESS, OrderStatus.PAID),
    FraudStatus.CHALLENGE: (PaymentStatus.PENDING, OrderStatus.PENDING),
    FraudStatus.DENY: (PaymentStatus.FAILED, OrderStatus.CANCELLED),
}

_PREFIXED_ORDER_ID = re.compile(r"^ORDER-(\d+)(?:-.*)?$")


def map_transaction_status(
    transaction_status: Optional[str], fraud_status: Optional[str] = None
) -> Tuple[PaymentStatus, OrderStatus]:
    """Translate a gateway status pair into local payment and order statuses."""
    try:
        status = TransactionStatus((transaction_status or "").lower())
    except ValueError:
        raise InvalidRequestError(f"Unknown transaction status: {transaction_status}")

    if status != TransactionStatus.CAPTURE:
        return GATEWAY_STATUS_MAP[status]

    try:
        fraud = FraudStatus(fraud_status.lower()) if fraud_status else None
    except ValueError:
        raise InvalidRequestError(f"Unknown fraud status: {fraud_status}")
    return CAPTURE_STATUS_MAP[fraud]


def parse_gateway_order_id(raw: str) -> int:
    """Accept ``"42"`` or ``"ORDER-42-<suffix>"``."""
    value = (raw or "").strip()
    if value.isdigit():
        return int(value)
    match = _PREFIXED_ORDER_ID.match(value)
    if match:
        return int(match.group(1))
    raise InvalidRequestError(f"Unrecognised order id: {raw}")


def to_gross_amount(amount) -> int:
    """Midtrans takes whole currency units."""
    return int(Decimal(amount).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class PaymentService:
    """Hosted checkout lifecycle for orders: intent, notification and status sync"""

    def __init__(self, db: Session, gateway: PaymentGatewayInterface, clock: Clock):
        self.db = db
        self.gateway = gateway
        self.clock = clock

    def get_payment(self, order_id: int) -> Payment:
        payment = (
            self.db.query(Payment)
            .filter(Payment.order_id == order_id, Payment.live())
            .first()
        )
        if not payment:
            raise NotFoundError(f"No payment for order {order_id}")
        return payment

    def _build_request(self, order: Order) -> PaymentRequest:
        customer = order.customer
        return PaymentRequest(
            order_id=str(order.id),
            gross_amount=to_gross_amount(order.total_price),
            items=[
                PaymentItem(
                    id=str(item.menu_id),
                    name=item.menu.title if item.menu else f"Menu {item.menu_id}",
                    price=to_gross_amount(item.price_at_order),
                    quantity=item.quantity,
                )
                for item in order.items
                if item.deleted_at is None
            ],
            customer_name=customer.name if customer else None,
            customer_email=customer.email if customer else None,
            customer_phone=customer.phone if customer else None,
            billing_address=order.delivery_address,
        )

    async def create_payment_intent(self, order_id: int) -> PaymentIntentOut:
        """
        Open a hosted checkout session for a pending order.

        An existing pending payment is re-issued without a gateway call.
        The order row stays locked until the payment row is written.
        """
        try:
            order = lock_order(self.db, order_id)
            if order.status != OrderStatus.PENDING.value:
                raise ConflictError(
                    f"Order {order_id} is {order.status}; only pending orders can be paid"
                )

            existing = (
                self.db.query(Payment)
                .filter(Payment.order_id == order_id, Payment.live())
                .first()
            )
            if existing:
                if existing.status != PaymentStatus.PENDING.value:
                    raise ConflictError(
                        f"Order {order_id} already has a {existing.status} payment"
                    )
                self.db.rollback()
                payment_intent_total.labels(result="reissued").inc()
                return PaymentIntentOut(
                    order_id=order_id,
                    token=existing.payment_token,
                    redirect_url=existing.payment_url,
                    reissued=True,
                )

            try:
                checkout = await self.gateway.create_payment(self._build_request(order))
            except GatewayError:
                payment_intent_total.labels(result="gateway_error").inc()
                raise

            payment = Payment(
                order_id=order.id,
                amount=order.total_price,
                status=PaymentStatus.PENDING.value,
                payment_token=checkout.token,
                payment_url=checkout.redirect_url,
                gateway_response=checkout.raw_response,
            )
            self.db.add(payment)
            self.db.commit()
        except IntegrityError:
            # Another request inserted the payment first
            self.db.rollback()
            existing = self.get_payment(order_id)
            logger.info(f"Payment for order {order_id} created concurrently, re-issuing")
            payment_intent_total.labels(result="reissued").inc()
            return PaymentIntentOut(
                order_id=order_id,
                token=existing.payment_token,
                redirect_url=existing.payment_url,
                reissued=True,
            )
        except Exception:
            self.db.rollback()
            raise

        payment_intent_total.labels(result="created").inc()
        logger.info(f"Created payment intent for order {order_id}")
        return PaymentIntentOut(
            order_id=order_id,
            token=checkout.token,
            redirect_url=checkout.redirect_url,
        )

    async def handle_notification(
        self, notification: MidtransNotification
    ) -> NotificationResult:
        """Verify and apply an asynchronous gateway notification."""
        if not self.gateway.verify_notification(
            notification.order_id,
            notification.status_code,
            notification.gross_amount,
            notification.signature_key,
        ):
            payment_signature_failure_total.inc()
            logger.warning(
                f"Rejected notification for order {notification.order_id}: invalid signature"
            )
            raise UnauthorizedError("Invalid notification signature")

        order_id = parse_gateway_order_id(notification.order_id)
        payment_status, order_status = map_transaction_status(
            notification.transaction_status, notification.fraud_status
        )
        result = self._apply_gateway_status(
            order_id,
            payment_status,
            order_status,
            source=StatusChangeSource.PAYMENT_WEBHOOK,
            transaction_id=notification.transaction_id,
            payment_type=notification.payment_type,
            fraud_status=notification.fraud_status,
            raw=notification.model_dump(exclude={"signature_key"}),
        )
        payment_notification_total.labels(
            transaction_status=notification.transaction_status.lower(),
            result="applied" if result.changed else "unchanged",
        ).inc()
        return result

    async def sync_payment_status(self, order_id: int) -> NotificationResult:
        """Pull the transaction status from the gateway and apply it."""
        self.get_payment(order_id)
        status = await self.gateway.get_transaction_status(str(order_id))
        payment_status, order_status = map_transaction_status(
            status.transaction_status, status.fraud_status
        )
        return self._apply_gateway_status(
            order_id,
            payment_status,
            order_status,
            source=StatusChangeSource.PAYMENT_SYNC,
            transaction_id=status.transaction_id,
            payment_type=status.payment_type,
            fraud_status=status.fraud_status,
            raw=status.raw_response,
        )

    def _apply_gateway_status(
        self,
        order_id: int,
        payment_status: PaymentStatus,
        order_status: OrderStatus,
        source: StatusChangeSource,
        transaction_id: Optional[str] = None,
        payment_type: Optional[str] = None,
        fraud_status: Optional[str] = None,
        raw: Optional[dict] = None,
    ) -> NotificationResult:
        try:
            order = lock_order(self.db, order_id)
            payment = (
                self.db.query(Payment)
                .filter(Payment.order_id == order_id, Payment.live())
                .with_for_update()
                .first()
            )
            if not payment:
                raise NotFoundError(f"No payment for order {order_id}")

            changed = False
            stale = False
            current = PaymentStatus(payment.status)
            if current != payment_status:
                if current in FINAL_PAYMENT_STATUSES and payment_status == PaymentStatus.PENDING:
                    stale = True
                    logger.info(
                        f"Ignoring stale pending status for order {order_id}; "
                        f"payment is already {current.value}"
                    )
                else:
                    payment.status = payment_status.value
                    changed = True

            for attr, value in (
                ("transaction_id", transaction_id),
                ("payment_type", payment_type),
                ("fraud_status", fraud_status),
            ):
                if value is not None and getattr(payment, attr) != value:
                    setattr(payment, attr, value)
                    changed = True

            current_order = OrderStatus(order.status)
            if not stale and current_order != order_status:
                if can_transition(current_order, order_status):
                    transition_order(self.db, order, order_status, source)
                    changed = True
                else:
                    order_transition_skipped_total.labels(
                        from_status=current_order.value, to_status=order_status.value
                    ).inc()
                    logger.warning(
                        f"Order {order_id} left {current_order.value}: gateway reported "
                        f"{payment_status.value} which maps to {order_status.value}"
                    )

            if changed:
                if raw is not None:
                    payment.gateway_response = raw
                self.db.commit()
                logger.info(
                    f"Applied {source.value} for order {order_id}: "
                    f"payment={payment.status} order={order.status}"
                )
            else:
                self.db.rollback()
                logger.info(f"No change for order {order_id} from {source.value}")

            return NotificationResult(
                order_id=order_id,
                order_status=OrderStatus(order.status),
                payment_status=PaymentStatus(payment.status),
                changed=changed,
            )
        except Exception:
            self.db.rollback()
            raise
