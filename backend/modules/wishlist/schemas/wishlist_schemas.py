from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from modules.menu.schemas.menu_schemas import MenuOut


class WishlistAdd(BaseModel):
    menu_id: int = Field(..., gt=0)


class WishlistOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    customer_id: int
    menu_id: int
    menu: Optional[MenuOut] = None
    created_at: datetime
