# app/models/parking_slot.py
"""
Parking slots table.
A slot accepts exactly one vehicle type + size. Status flips to UNAVAILABLE
only through the request approval workflow.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Enum
from app.database import Base
from app.models.enums import VehicleType, VehicleSize, Location, SlotStatus


class ParkingSlot(Base):
    __tablename__ = "parking_slots"

    id = Column(Integer, primary_key=True, autoincrement=True)
    slot_number = Column(String(50), unique=True, nullable=False, index=True)
    vehicle_type = Column(Enum(VehicleType, native_enum=False), nullable=False)
    size = Column(Enum(VehicleSize, native_enum=False), nullable=False)
    location = Column(Enum(Location, native_enum=False), nullable=False)
    status = Column(Enum(SlotStatus, native_enum=False), default=SlotStatus.AVAILABLE,
                    nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<ParkingSlot {self.slot_number} {self.vehicle_type}/{self.size} status={self.status}>"
