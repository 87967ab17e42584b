# backend/modules/tables/services/table_service.py

import logging
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.clock import Clock
from core.exceptions import ConflictError, NotFoundError
from core.response_models import PageParams, PaginationMeta, paginate
from modules.reservations.models.reservation_models import Reservation
from ..models.table_models import DiningTable
from ..schemas.table_schemas import TableCreate, TableUpdate

logger = logging.getLogger(__name__)


class TableService:
    def __init__(self, db: Session, clock: Clock):
        self.db = db
        self.clock = clock

    def get_table(self, table_id: int, lock: bool = False) -> DiningTable:
        query = self.db.query(DiningTable).filter(
            DiningTable.id == table_id, DiningTable.live()
        )
        if lock:
            query = query.with_for_update()
        table = query.first()
        if not table:
            raise NotFoundError(f"Table {table_id} not found")
        return table

    def list_tables(
        self,
        params: PageParams,
        is_available: Optional[bool] = None,
        min_capacity: Optional[int] = None,
    ) -> Tuple[List[DiningTable], PaginationMeta]:
        query = self.db.query(DiningTable).filter(DiningTable.live())
        if is_available is not None:
            query = query.filter(DiningTable.is_available == is_available)
        if min_capacity is not None:
            query = query.filter(DiningTable.capacity >= min_capacity)
        return paginate(query.order_by(DiningTable.table_number), params)

    def _ensure_number_free(self, table_number: int, exclude_id: Optional[int] = None):
        query = self.db.query(DiningTable.id).filter(
            DiningTable.table_number == table_number, DiningTable.live()
        )
        if exclude_id is not None:
            query = query.filter(DiningTable.id != exclude_id)
        if query.first():
            raise ConflictError(f"Table number {table_number} already exists")

    def _commit(self, table_number: int) -> None:
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(f"Table number {table_number} already exists")

    def create_table(self, data: TableCreate) -> DiningTable:
        self._ensure_number_free(data.table_number)
        table = DiningTable(**data.model_dump())
        self.db.add(table)
        self._commit(data.table_number)
        self.db.refresh(table)
        logger.info(f"Created table {table.id} (number {table.table_number})")
        return table

    def update_table(self, table_id: int, data: TableUpdate) -> DiningTable:
        table = self.get_table(table_id)
        changes = data.model_dump(exclude_unset=True)
        if "table_number" in changes and changes["table_number"] != table.table_number:
            self._ensure_number_free(changes["table_number"], exclude_id=table.id)
        for field, value in changes.items():
            setattr(table, field, value)
        self._commit(table.table_number)
        self.db.refresh(table)
        return table

    def set_availability(self, table_id: int, is_available: bool) -> DiningTable:
        table = self.get_table(table_id)
        table.is_available = is_available
        self.db.commit()
        self.db.refresh(table)
        return table

    def delete_table(self, table_id: int) -> None:
        """Soft delete; reservations keep their table_number snapshot."""
        table = self.get_table(table_id)
        table.deleted_at = self.clock.now()
        released = (
            self.db.query(Reservation)
            .filter(Reservation.table_id == table_id)
            .update({Reservation.table_id: None}, synchronize_session=False)
        )
        self.db.commit()
        logger.info(f"Soft deleted table {table_id}, detached {released} reservations")
