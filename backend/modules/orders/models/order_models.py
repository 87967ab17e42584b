from sqlalchemy import Column, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from core.database import Base
from core.mixins import SoftDeleteMixin, TimestampMixin
from ..enums.order_enums import OrderStatus


class Order(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"),
                         nullable=False, index=True)
    status = Column(String(20), nullable=False, index=True,
                    default=OrderStatus.PENDING.value)
    total_price = Column(Numeric(12, 2), nullable=False)
    delivery_address = Column(Text, nullable=False)

    customer = relationship("Customer", back_populates="orders")
    items = relationship("OrderItem", back_populates="order",
                         cascade="all, delete-orphan",
                         order_by="OrderItem.id")
    payment = relationship("Payment", back_populates="order",
                           uselist=False)
    status_logs = relationship("OrderStatusLog", back_populates="order",
                               cascade="all, delete-orphan",
                               order_by="OrderStatusLog.id")


class OrderItem(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"),
                      nullable=False, index=True)
    menu_id = Column(Integer, ForeignKey("menus.id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    price_at_order = Column(Numeric(12, 2), nullable=False)

    order = relationship("Order", back_populates="items")
    menu = relationship("Menu")


class OrderStatusLog(Base, TimestampMixin):
    """One row per status transition actually applied to an order."""

    __tablename__ = "order_status_logs"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"),
                      nullable=False, index=True)
    from_status = Column(String(20), nullable=False)
    to_status = Column(String(20), nullable=False)
    source = Column(String(30), nullable=False)
    note = Column(Text, nullable=True)

    order = relationship("Order", back_populates="status_logs")
