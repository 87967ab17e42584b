from enum import Enum


class OrderStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    PREPARING = "preparing"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class StatusChangeSource(str, Enum):
    STAFF = "staff"
    PAYMENT_WEBHOOK = "payment_webhook"
    PAYMENT_SYNC = "payment_sync"
