from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from modules.payments.schemas.payment_schemas import PaymentIntentOut
from ..enums.order_enums import OrderStatus


class OrderItemCreate(BaseModel):
    menu_id: int = Field(..., gt=0)
    quantity: int = Field(..., ge=1)
    # Accepted for client compatibility; the menu price is authoritative
    price: Optional[Decimal] = Field(None, ge=0)


class OrderCreate(BaseModel):
    items: List[OrderItemCreate]
    delivery_address: Optional[str] = Field(None, max_length=500)


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class OrderItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    menu_id: int
    quantity: int
    price_at_order: float


class OrderCustomerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str


class OrderStatusLogOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    from_status: OrderStatus
    to_status: OrderStatus
    source: str
    created_at: datetime


class OrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    customer_id: int
    status: OrderStatus
    total_price: float
    delivery_address: str
    items: List[OrderItemOut] = []
    customer: Optional[OrderCustomerOut] = None
    created_at: datetime
    updated_at: datetime


class OrderDetailOut(OrderOut):
    status_logs: List[OrderStatusLogOut] = []


class OrderCreateResponse(BaseModel):
    order: OrderOut
    payment: PaymentIntentOut
