# backend/modules/inventory/schemas/inventory_schemas.py

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class InventoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    quantity: Decimal = Field(..., ge=0)
    unit: str = Field(..., min_length=1, max_length=50)
    minimum_stock: Decimal = Field(..., ge=0)
    reorder_point: Decimal = Field(..., ge=0)
    unit_price: Decimal = Field(..., ge=0)


class InventoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    quantity: Optional[Decimal] = Field(None, ge=0)
    unit: Optional[str] = Field(None, min_length=1, max_length=50)
    minimum_stock: Optional[Decimal] = Field(None, ge=0)
    reorder_point: Optional[Decimal] = Field(None, ge=0)
    unit_price: Optional[Decimal] = Field(None, ge=0)


class StockAdjustment(BaseModel):
    """Signed change applied to the on-hand quantity"""

    quantity: Decimal

    @field_validator("quantity")
    @classmethod
    def non_zero(cls, v):
        if v == 0:
            raise ValueError("Stock adjustment cannot be zero")
        return v


class InventoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    quantity: float
    unit: str
    minimum_stock: float
    reorder_point: float
    unit_price: float
    last_restock_date: datetime
    is_low_stock: bool
    created_at: datetime
    updated_at: datetime
