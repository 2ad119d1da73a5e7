# app/routers/vehicles.py
"""Vehicle CRUD. Every caller only sees and edits their own vehicles."""

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session
from typing import Optional
from app.authorization import Identity, Permission, require
from app.config import settings
from app.database import get_db
from app.schemas.common import Page
from app.schemas.vehicle import VehicleCreate, VehicleOut
from app.services import vehicle_service
from app.services.action_log_service import log_action

router = APIRouter()
owner = require(Permission.MANAGE_OWN_VEHICLES)


@router.post("/vehicles", response_model=VehicleOut, status_code=201, summary="Register a new vehicle")
def create_vehicle(body: VehicleCreate, identity: Identity = Depends(owner), db: Session = Depends(get_db)):
    vehicle = vehicle_service.create_vehicle(db, identity.user_id, body)
    log_action(db, identity.user_id, "VEHICLE_CREATED", f"Registered vehicle {vehicle.plate_number}")
    return vehicle


@router.get("/vehicles", response_model=Page[VehicleOut], summary="List own vehicles")
def list_vehicles(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    search: Optional[str] = None,
    identity: Identity = Depends(owner),
    db: Session = Depends(get_db),
):
    return vehicle_service.list_vehicles(db, identity.user_id, page, limit, search)


@router.get("/vehicles/{vehicle_id}", response_model=VehicleOut, summary="Get one of own vehicles")
def get_vehicle(vehicle_id: int, identity: Identity = Depends(owner), db: Session = Depends(get_db)):
    return vehicle_service.get_owned_vehicle(db, identity.user_id, vehicle_id)


@router.put("/vehicles/{vehicle_id}", response_model=VehicleOut, summary="Update one of own vehicles")
def update_vehicle(vehicle_id: int, body: VehicleCreate, identity: Identity = Depends(owner),
                   db: Session = Depends(get_db)):
    vehicle = vehicle_service.update_vehicle(db, identity.user_id, vehicle_id, body)
    log_action(db, identity.user_id, "VEHICLE_UPDATED", f"Updated vehicle ID: {vehicle_id}")
    return vehicle


@router.delete("/vehicles/{vehicle_id}", status_code=204, summary="Remove one of own vehicles")
def delete_vehicle(vehicle_id: int, identity: Identity = Depends(owner), db: Session = Depends(get_db)):
    plate = vehicle_service.delete_vehicle(db, identity.user_id, vehicle_id)
    log_action(db, identity.user_id, "VEHICLE_DELETED", f"Deleted vehicle {plate}")
    return Response(status_code=204)
