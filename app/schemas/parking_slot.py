# app/schemas/parking_slot.py
from pydantic import Field
from datetime import datetime
from app.models.enums import VehicleType, VehicleSize, Location, SlotStatus
from app.schemas.common import ApiModel


class SlotCreate(ApiModel):
    slot_number: str = Field(..., min_length=1, max_length=50)
    vehicle_type: VehicleType
    size: VehicleSize
    location: Location


class SlotUpdate(SlotCreate):
    """Full replacement of the slot's descriptive fields. Status is owned by the request workflow."""


class BulkSlotCreate(ApiModel):
    count: int = Field(..., ge=1, le=1000)
    prefix: str = Field("", max_length=20)
    start_number: int = Field(..., ge=1)
    vehicle_type: VehicleType
    size: VehicleSize
    location: Location


class BulkSlotResult(ApiModel):
    count: int
    message: str


class SlotOut(ApiModel):
    id: int
    slot_number: str
    vehicle_type: VehicleType
    size: VehicleSize
    location: Location
    status: SlotStatus
    created_at: datetime
    updated_at: datetime
