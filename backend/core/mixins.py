from sqlalchemy import Column, DateTime
from sqlalchemy.sql import func


class TimestampMixin:
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(),
                        onupdate=func.now(), nullable=False)


class SoftDeleteMixin:
    """Rows with ``deleted_at`` set are invisible to every read path."""
    deleted_at = Column(DateTime, nullable=True, index=True)

    @classmethod
    def live(cls):
        return cls.deleted_at.is_(None)
