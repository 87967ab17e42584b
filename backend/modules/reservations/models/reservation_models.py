# backend/modules/reservations/models/reservation_models.py

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from core.database import Base
from core.mixins import SoftDeleteMixin, TimestampMixin
from ..enums.reservation_enums import ReservationStatus


class Reservation(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "reservations"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    table_id = Column(Integer, ForeignKey("tables.id", ondelete="SET NULL"),
                      nullable=True, index=True)
    # Snapshot so the reservation still reads correctly after table deletion
    table_number = Column(Integer, nullable=True)
    guest_count = Column(Integer, nullable=False)
    reserve_date = Column(DateTime, nullable=False, index=True)
    status = Column(String(20), nullable=False, index=True,
                    default=ReservationStatus.PENDING.value)
    special_notes = Column(Text, nullable=True)

    customer = relationship("Customer", back_populates="reservations")
    table = relationship("DiningTable")

    def __repr__(self):
        return (
            f"<Reservation(id={self.id}, table_id={self.table_id}, "
            f"date={self.reserve_date}, status='{self.status}')>"
        )
