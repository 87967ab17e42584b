# backend/modules/inventory/models/inventory_models.py

from sqlalchemy import Column, DateTime, Integer, Numeric, String

from core.database import Base
from core.mixins import SoftDeleteMixin, TimestampMixin


class Inventory(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "inventories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True)
    quantity = Column(Numeric(12, 3), nullable=False, default=0)
    unit = Column(String(50), nullable=False)
    minimum_stock = Column(Numeric(12, 3), nullable=False, default=0)
    reorder_point = Column(Numeric(12, 3), nullable=False, default=0)
    unit_price = Column(Numeric(12, 2), nullable=False, default=0)
    last_restock_date = Column(DateTime, nullable=False)

    @property
    def is_low_stock(self) -> bool:
        return self.quantity <= self.minimum_stock
