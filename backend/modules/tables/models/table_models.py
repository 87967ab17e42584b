# backend/modules/tables/models/table_models.py

from sqlalchemy import Boolean, Column, Index, Integer, text

from core.database import Base
from core.mixins import SoftDeleteMixin, TimestampMixin


class DiningTable(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "tables"

    id = Column(Integer, primary_key=True, index=True)
    table_number = Column(Integer, nullable=False, index=True)
    capacity = Column(Integer, nullable=False)
    is_available = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        # numbers of deleted tables can be reused
        Index(
            "uq_tables_table_number_live",
            "table_number",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
    )

    def __repr__(self):
        return f"<DiningTable(id={self.id}, number={self.table_number})>"
