# backend/modules/tables/schemas/table_schemas.py

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TableBase(BaseModel):
    """Base table schema"""

    table_number: int = Field(..., ge=1)
    capacity: int = Field(..., ge=1)
    is_available: bool = True


class TableCreate(TableBase):
    pass


class TableUpdate(BaseModel):
    table_number: Optional[int] = Field(None, ge=1)
    capacity: Optional[int] = Field(None, ge=1)
    is_available: Optional[bool] = None


class TableAvailabilityUpdate(BaseModel):
    is_available: bool


class TableResponse(TableBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime
    updated_at: datetime
