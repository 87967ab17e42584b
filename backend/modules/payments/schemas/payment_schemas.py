# backend/modules/payments/schemas/payment_schemas.py

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from modules.orders.enums.order_enums import OrderStatus
from ..enums.payment_enums import PaymentStatus


class PaymentIntentOut(BaseModel):
    order_id: int
    token: Optional[str] = None
    redirect_url: str
    reissued: bool = False


class PaymentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    order_id: int
    amount: float
    status: PaymentStatus
    payment_token: Optional[str] = None
    payment_url: Optional[str] = None
    transaction_id: Optional[str] = None
    payment_type: Optional[str] = None
    fraud_status: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class MidtransNotification(BaseModel):
    """Body of the HTTP notification Midtrans posts after a status change"""

    model_config = ConfigDict(extra="allow")

    order_id: str = Field(..., min_length=1)
    status_code: str = Field(..., min_length=1)
    gross_amount: str = Field(..., min_length=1)
    signature_key: str = Field(..., min_length=1)
    transaction_status: str = Field(..., min_length=1)
    fraud_status: Optional[str] = None
    transaction_id: Optional[str] = None
    transaction_time: Optional[str] = None
    settlement_time: Optional[str] = None
    status_message: Optional[str] = None
    payment_type: Optional[str] = None
    merchant_id: Optional[str] = None
    currency: Optional[str] = None

    @field_validator("status_code", "gross_amount", mode="before")
    @classmethod
    def integers_as_text(cls, v):
        # Signatures are computed over the raw text; only exact integers are safe to coerce
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class NotificationResult(BaseModel):
    order_id: int
    order_status: OrderStatus
    payment_status: PaymentStatus
    changed: bool
