# app/models/vehicle.py
"""
Registered vehicles table.
Each vehicle belongs to exactly one user and is identified by a unique plate number.
Type + size decide which parking slots it is compatible with.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Enum, ForeignKey, JSON
from sqlalchemy.orm import relationship
from app.database import Base
from app.models.enums import VehicleType, VehicleSize


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    plate_number = Column(String(50), unique=True, nullable=False, index=True)
    vehicle_type = Column(Enum(VehicleType, native_enum=False), nullable=False)
    size = Column(Enum(VehicleSize, native_enum=False), nullable=False)
    attributes = Column(JSON)                # free-form: color, model, ...
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    owner = relationship("User", back_populates="vehicles")
    slot_requests = relationship("SlotRequest", back_populates="vehicle")

    def __repr__(self):
        return f"<Vehicle {self.plate_number} type={self.vehicle_type} size={self.size}>"
