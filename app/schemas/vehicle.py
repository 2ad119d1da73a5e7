# app/schemas/vehicle.py
from pydantic import Field
from datetime import datetime
from typing import Any, Dict, Optional
from app.models.enums import VehicleType, VehicleSize
from app.schemas.common import ApiModel


class VehicleCreate(ApiModel):
    plate_number: str = Field(..., min_length=2, max_length=50)
    vehicle_type: VehicleType
    size: VehicleSize
    attributes: Optional[Dict[str, Any]] = None


class VehicleOut(ApiModel):
    id: int
    plate_number: str
    vehicle_type: VehicleType
    size: VehicleSize
    attributes: Optional[Dict[str, Any]]
    user_id: int
    created_at: datetime
    updated_at: datetime
