# backend/modules/customers/models/customer_models.py

from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.orm import relationship

from core.auth import Role
from core.database import Base
from core.mixins import SoftDeleteMixin, TimestampMixin


class Customer(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    address = Column(Text, nullable=True)
    phone = Column(String(20), nullable=True)
    role = Column(String(20), nullable=False, default=Role.CUSTOMER.value)

    orders = relationship("Order", back_populates="customer")
    reservations = relationship("Reservation", back_populates="customer")

    def __repr__(self):
        return f"<Customer(id={self.id}, email='{self.email}', role='{self.role}')>"
