# backend/modules/payments/models/payment_models.py

from sqlalchemy import Column, ForeignKey, Integer, JSON, Numeric, String
from sqlalchemy.orm import relationship

from core.database import Base
from core.mixins import SoftDeleteMixin, TimestampMixin
from ..enums.payment_enums import PaymentStatus


class Payment(Base, TimestampMixin, SoftDeleteMixin):
    """Hosted checkout payment, exactly one per order"""

    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False,
                      unique=True, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    status = Column(String(20), nullable=False, index=True,
                    default=PaymentStatus.PENDING.value)
    payment_token = Column(String(255), nullable=True)
    payment_url = Column(String(500), nullable=True)

    # Gateway reported details, refreshed by notifications
    transaction_id = Column(String(255), nullable=True, index=True)
    payment_type = Column(String(50), nullable=True)
    fraud_status = Column(String(20), nullable=True)
    gateway_response = Column(JSON, nullable=True)

    order = relationship("Order", back_populates="payment")

    def __repr__(self):
        return f"<Payment(id={self.id}, order_id={self.order_id}, status='{self.status}')>"
