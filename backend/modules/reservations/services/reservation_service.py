# backend/modules/reservations/services/reservation_service.py

"""
Table reservations.

A table holds at most one active reservation per UTC calendar day. The
availability check runs in the same transaction as the write, with the table
row locked, so two concurrent bookings for the same table and day cannot both
commit. The transaction is retried once on a serialization failure.
"""

import logging
from datetime import datetime, time, timedelta
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from core.clock import Clock, to_naive_utc
from core.config import Settings
from core.database_retry import retry_on_serialization_failure
from core.exceptions import (
    InvalidRequestError,
    InvalidTransitionError,
    NotFoundError,
    TableUnavailableError,
)
from core.response_models import PageParams, PaginationMeta, paginate
from modules.tables.models.table_models import DiningTable
from ..enums.reservation_enums import INACTIVE_RESERVATION_STATUSES, ReservationStatus
from ..models.reservation_models import Reservation
from ..schemas.reservation_schemas import (
    ReservationCreate,
    ReservationFilter,
    ReservationUpdate,
)

logger = logging.getLogger(__name__)


VALID_RESERVATION_TRANSITIONS = {
    ReservationStatus.PENDING: [ReservationStatus.CONFIRMED, ReservationStatus.CANCELLED],
    ReservationStatus.CONFIRMED: [ReservationStatus.COMPLETED, ReservationStatus.CANCELLED],
    ReservationStatus.CANCELLED: [],
    ReservationStatus.COMPLETED: [],
}


def day_window(value: datetime) -> Tuple[datetime, datetime]:
    """Half-open ``[00:00, next day 00:00)`` around ``value``."""
    start = datetime.combine(value.date(), time.min)
    return start, start + timedelta(days=1)


class ReservationService:
    def __init__(self, db: Session, clock: Clock, settings: Settings):
        self.db = db
        self.clock = clock
        self.settings = settings

    def is_table_available(
        self,
        table_id: int,
        reserve_date: datetime,
        exclude_reservation_id: Optional[int] = None,
    ) -> bool:
        start, end = day_window(reserve_date)
        query = self.db.query(Reservation.id).filter(
            Reservation.table_id == table_id,
            Reservation.live(),
            Reservation.reserve_date >= start,
            Reservation.reserve_date < end,
            Reservation.status.notin_([s.value for s in INACTIVE_RESERVATION_STATUSES]),
        )
        if exclude_reservation_id is not None:
            query = query.filter(Reservation.id != exclude_reservation_id)
        return query.first() is None

    def _begin(self) -> None:
        isolation = self.settings.RESERVATION_ISOLATION_LEVEL
        # Isolation can only be chosen before the transaction starts
        if isolation and not self.db.in_transaction():
            self.db.connection(execution_options={"isolation_level": isolation})

    def _lock_table(self, table_id: int) -> DiningTable:
        table = (
            self.db.query(DiningTable)
            .filter(DiningTable.id == table_id, DiningTable.live())
            .with_for_update()
            .first()
        )
        if not table:
            raise NotFoundError(f"Table {table_id} not found")
        return table

    def _future(self, reserve_date: datetime) -> datetime:
        value = to_naive_utc(reserve_date)
        if value <= self.clock.now():
            raise InvalidRequestError(
                "Reservation date must be in the future",
                errors={"reserve_date": "must be in the future"},
            )
        return value

    def get_reservation(self, reservation_id: int) -> Reservation:
        reservation = (
            self.db.query(Reservation)
            .filter(Reservation.id == reservation_id, Reservation.live())
            .first()
        )
        if not reservation:
            raise NotFoundError(f"Reservation {reservation_id} not found")
        return reservation

    def list_reservations(
        self,
        params: PageParams,
        filters: ReservationFilter,
        customer_id: Optional[int] = None,
    ) -> Tuple[List[Reservation], PaginationMeta]:
        query = self.db.query(Reservation).filter(Reservation.live())
        if customer_id is not None:
            query = query.filter(Reservation.customer_id == customer_id)
        if filters.status is not None:
            query = query.filter(Reservation.status == filters.status.value)
        if filters.table_number is not None:
            query = query.filter(Reservation.table_number == filters.table_number)
        if filters.day is not None:
            start, end = day_window(datetime.combine(filters.day, time.min))
            query = query.filter(
                Reservation.reserve_date >= start, Reservation.reserve_date < end
            )
        return paginate(
            query.order_by(Reservation.reserve_date, Reservation.id), params
        )

    async def create_reservation(
        self, customer_id: int, data: ReservationCreate
    ) -> Reservation:
        reserve_date = self._future(data.reserve_date)
        return await retry_on_serialization_failure(
            self._create, customer_id, data, reserve_date
        )

    async def _create(
        self, customer_id: int, data: ReservationCreate, reserve_date: datetime
    ) -> Reservation:
        try:
            self._begin()
            table_number = None
            if data.table_id is not None:
                table = self._lock_table(data.table_id)
                if not self.is_table_available(table.id, reserve_date):
                    raise TableUnavailableError(
                        f"Table {table.table_number} is already reserved on "
                        f"{reserve_date.date().isoformat()}"
                    )
                table_number = table.table_number

            reservation = Reservation(
                customer_id=customer_id,
                table_id=data.table_id,
                table_number=table_number,
                guest_count=data.guest_count,
                reserve_date=reserve_date,
                status=ReservationStatus.PENDING.value,
                special_notes=data.special_notes,
            )
            self.db.add(reservation)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(reservation)
        logger.info(
            f"Created reservation {reservation.id} for customer {customer_id} "
            f"(table={table_number}, date={reserve_date.isoformat()})"
        )
        return reservation

    async def update_reservation(
        self, reservation_id: int, data: ReservationUpdate
    ) -> Reservation:
        return await retry_on_serialization_failure(self._update, reservation_id, data)

    async def _update(self, reservation_id: int, data: ReservationUpdate) -> Reservation:
        fields = data.model_dump(exclude_unset=True)
        try:
            self._begin()
            reservation = (
                self.db.query(Reservation)
                .filter(Reservation.id == reservation_id, Reservation.live())
                .with_for_update()
                .first()
            )
            if not reservation:
                raise NotFoundError(f"Reservation {reservation_id} not found")

            if data.status is not None and data.status.value != reservation.status:
                current = ReservationStatus(reservation.status)
                if data.status not in VALID_RESERVATION_TRANSITIONS[current]:
                    raise InvalidTransitionError(
                        current.value, data.status.value, entity="reservation"
                    )
                reservation.status = data.status.value

            table_changed = "table_id" in fields and data.table_id != reservation.table_id
            date_changed = "reserve_date" in fields and data.reserve_date is not None
            if date_changed:
                reservation.reserve_date = self._future(data.reserve_date)
            if "table_id" in fields:
                if data.table_id is None:
                    reservation.table_id = None
                    reservation.table_number = None
                else:
                    table = self._lock_table(data.table_id)
                    reservation.table_id = table.id
                    reservation.table_number = table.table_number

            still_active = ReservationStatus(reservation.status) not in INACTIVE_RESERVATION_STATUSES
            if (table_changed or date_changed) and reservation.table_id and still_active:
                if not self.is_table_available(
                    reservation.table_id,
                    reservation.reserve_date,
                    exclude_reservation_id=reservation.id,
                ):
                    raise TableUnavailableError(
                        f"Table {reservation.table_number} is already reserved on "
                        f"{reservation.reserve_date.date().isoformat()}"
                    )

            if data.guest_count is not None:
                reservation.guest_count = data.guest_count
            if "special_notes" in fields:
                reservation.special_notes = data.special_notes

            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(reservation)
        logger.info(f"Updated reservation {reservation_id}: {sorted(fields)}")
        return reservation

    async def delete_reservation(self, reservation_id: int) -> None:
        try:
            reservation = self.get_reservation(reservation_id)
            reservation.deleted_at = self.clock.now()
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info(f"Soft deleted reservation {reservation_id}")
