# backend/modules/cart/models/cart_models.py

from sqlalchemy import Column, ForeignKey, Index, Integer, Numeric, text
from sqlalchemy.orm import relationship

from core.database import Base
from core.mixins import SoftDeleteMixin, TimestampMixin


class Cart(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "carts"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    menu_id = Column(Integer, ForeignKey("menus.id"), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    unit_price = Column(Numeric(12, 2), nullable=False)
    subtotal = Column(Numeric(12, 2), nullable=False)

    menu = relationship("Menu")

    __table_args__ = (
        # one live line per (customer, menu)
        Index(
            "uq_carts_customer_menu_live",
            "customer_id",
            "menu_id",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
    )
