# backend/modules/reservations/schemas/reservation_schemas.py

"""
Pydantic schemas for table reservations.
"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..enums.reservation_enums import ReservationStatus


class ReservationCreate(BaseModel):
    """Table is optional; without one no availability check applies"""

    table_id: Optional[int] = Field(None, gt=0)
    guest_count: int = Field(..., ge=1, le=100)
    reserve_date: datetime
    special_notes: Optional[str] = Field(None, max_length=1000)


class ReservationUpdate(BaseModel):
    status: Optional[ReservationStatus] = None
    table_id: Optional[int] = Field(None, gt=0)
    guest_count: Optional[int] = Field(None, ge=1, le=100)
    reserve_date: Optional[datetime] = None
    special_notes: Optional[str] = Field(None, max_length=1000)

    @model_validator(mode="after")
    def at_least_one_field(self):
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided")
        return self


class ReservationFilter(BaseModel):
    status: Optional[ReservationStatus] = None
    table_number: Optional[int] = None
    day: Optional[date] = None


class ReservationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    customer_id: int
    table_id: Optional[int] = None
    table_number: Optional[int] = None
    guest_count: int
    reserve_date: datetime
    status: ReservationStatus
    special_notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime
