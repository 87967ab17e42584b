# backend/modules/menu/models/menu_models.py

from sqlalchemy import Column, Float, Integer, Numeric, String, Text

from core.database import Base
from core.mixins import SoftDeleteMixin, TimestampMixin


class Menu(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "menus"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=True)
    price = Column(Numeric(12, 2), nullable=False)
    quantity = Column(Integer, nullable=False, default=0)
    category = Column(String(50), nullable=True, index=True)
    rating = Column(Float, nullable=True, default=0.0)
    image_url = Column(String(500), nullable=True)

    def __repr__(self):
        return f"<Menu(id={self.id}, title='{self.title}', price={self.price})>"
