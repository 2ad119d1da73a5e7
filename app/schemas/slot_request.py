# app/schemas/slot_request.py
from pydantic import Field
from datetime import datetime
from typing import Optional
from app.models.enums import RequestStatus
from app.schemas.common import ApiModel
from app.schemas.parking_slot import SlotOut
from app.schemas.user import UserSummary
from app.schemas.vehicle import VehicleOut


class RequestCreate(ApiModel):
    vehicle_id: int = Field(..., gt=0)


class RequestStatusUpdate(ApiModel):
    status: RequestStatus
    slot_id: Optional[int] = Field(None, gt=0)


class SlotRequestOut(ApiModel):
    """Composed read view: request + vehicle + assigned slot + requester summary."""
    id: int
    user_id: int
    vehicle_id: int
    slot_id: Optional[int]
    status: RequestStatus
    created_at: datetime
    updated_at: datetime
    vehicle: Optional[VehicleOut] = None
    parking_slot: Optional[SlotOut] = None
    user: Optional[UserSummary] = None
