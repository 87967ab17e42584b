from enum import Enum


class ReservationStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


INACTIVE_RESERVATION_STATUSES = (
    ReservationStatus.CANCELLED,
    ReservationStatus.COMPLETED,
)
