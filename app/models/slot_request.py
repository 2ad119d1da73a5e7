# app/models/slot_request.py
"""
Slot requests table — a user asking for a parking slot for one of their vehicles.
Lifecycle: PENDING -> APPROVED (slot bound) | REJECTED (no slot). Both are terminal.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, DateTime, Enum, ForeignKey, Index, text
from sqlalchemy.orm import relationship
from app.database import Base
from app.models.enums import RequestStatus


class SlotRequest(Base):
    __tablename__ = "slot_requests"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False, index=True)
    slot_id = Column(Integer, ForeignKey("parking_slots.id", ondelete="SET NULL"))
    status = Column(Enum(RequestStatus, native_enum=False), default=RequestStatus.PENDING,
                    nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="slot_requests")
    vehicle = relationship("Vehicle", back_populates="slot_requests")
    parking_slot = relationship("ParkingSlot")

    __table_args__ = (
        # At most one PENDING request per vehicle
        Index("uq_slot_requests_pending_vehicle", "vehicle_id", unique=True,
              postgresql_where=text("status = 'PENDING'"),
              sqlite_where=text("status = 'PENDING'")),
        # A slot is bound to at most one APPROVED request
        Index("uq_slot_requests_approved_slot", "slot_id", unique=True,
              postgresql_where=text("status = 'APPROVED'"),
              sqlite_where=text("status = 'APPROVED'")),
    )

    def __repr__(self):
        return f"<SlotRequest {self.id} vehicle={self.vehicle_id} slot={self.slot_id} status={self.status}>"
