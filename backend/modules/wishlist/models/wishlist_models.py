# backend/modules/wishlist/models/wishlist_models.py

from sqlalchemy import Column, ForeignKey, Index, Integer, text
from sqlalchemy.orm import relationship

from core.database import Base
from core.mixins import SoftDeleteMixin, TimestampMixin


class Wishlist(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "wishlists"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    menu_id = Column(Integer, ForeignKey("menus.id"), nullable=False)

    menu = relationship("Menu")

    __table_args__ = (
        Index(
            "uq_wishlists_customer_menu_live",
            "customer_id",
            "menu_id",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
    )
