# backend/modules/cart/schemas/cart_schemas.py

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from modules.menu.schemas.menu_schemas import MenuOut


class CartAdd(BaseModel):
    menu_id: int = Field(..., gt=0)
    quantity: int = Field(..., ge=1)


class CartBulkDelete(BaseModel):
    cart_ids: List[int] = Field(..., min_length=1)


class CartOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    customer_id: int
    menu_id: int
    quantity: int
    unit_price: float
    subtotal: float
    menu: Optional[MenuOut] = None
    created_at: datetime
    updated_at: datetime
