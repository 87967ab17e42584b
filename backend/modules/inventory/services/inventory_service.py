# backend/modules/inventory/services/inventory_service.py

"""
Ingredient stock levels.

Inventory is informational: placing orders does not deduct stock. Staff
adjust quantities explicitly and use the low-stock listing to plan restocks.
"""

import logging
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from core.clock import Clock
from core.exceptions import InvalidRequestError, NotFoundError
from core.response_models import PageParams, PaginationMeta, paginate
from ..models.inventory_models import Inventory
from ..schemas.inventory_schemas import InventoryCreate, InventoryUpdate

logger = logging.getLogger(__name__)


class InventoryService:
    def __init__(self, db: Session, clock: Clock):
        self.db = db
        self.clock = clock

    def get_item(self, item_id: int, lock: bool = False) -> Inventory:
        query = self.db.query(Inventory).filter(Inventory.id == item_id, Inventory.live())
        if lock:
            query = query.with_for_update()
        item = query.first()
        if not item:
            raise NotFoundError(f"Inventory item {item_id} not found")
        return item

    def list_items(
        self, params: PageParams, search: Optional[str] = None
    ) -> Tuple[List[Inventory], PaginationMeta]:
        query = self.db.query(Inventory).filter(Inventory.live())
        if search:
            query = query.filter(Inventory.name.ilike(f"%{search}%"))
        return paginate(query.order_by(Inventory.name), params)

    def list_low_stock(self) -> List[Inventory]:
        return (
            self.db.query(Inventory)
            .filter(Inventory.live(), Inventory.quantity <= Inventory.minimum_stock)
            .order_by(Inventory.name)
            .all()
        )

    def create_item(self, data: InventoryCreate) -> Inventory:
        item = Inventory(**data.model_dump(), last_restock_date=self.clock.now())
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)
        return item

    def update_item(self, item_id: int, data: InventoryUpdate) -> Inventory:
        item = self.get_item(item_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(item, field, value)
        self.db.commit()
        self.db.refresh(item)
        return item

    def adjust_stock(self, item_id: int, delta: Decimal) -> Inventory:
        item = self.get_item(item_id, lock=True)
        new_quantity = Decimal(item.quantity) + delta
        if new_quantity < 0:
            self.db.rollback()
            raise InvalidRequestError(
                f"Insufficient stock for {item.name}: have {item.quantity}, need {-delta}",
                error_code="INSUFFICIENT_STOCK",
            )

        item.quantity = new_quantity
        if delta > 0:
            item.last_restock_date = self.clock.now()
        self.db.commit()
        self.db.refresh(item)

        if item.is_low_stock:
            logger.warning(
                f"Inventory item {item.id} '{item.name}' is low: {item.quantity} {item.unit}"
            )
        return item

    def delete_item(self, item_id: int) -> None:
        item = self.get_item(item_id)
        item.deleted_at = self.clock.now()
        self.db.commit()
