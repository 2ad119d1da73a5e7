# app/routers/slots.py
"""Parking slot endpoints. Reads are open to any signed-in user; writes are admin-only."""

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session
from typing import Optional
from app.authorization import Identity, Permission, require
from app.config import settings
from app.database import get_db
from app.models.enums import Location
from app.schemas.common import Page
from app.schemas.parking_slot import BulkSlotCreate, BulkSlotResult, SlotCreate, SlotOut, SlotUpdate
from app.services import slot_service
from app.services.action_log_service import log_action
from app.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)
admin = require(Permission.MANAGE_SLOTS)
reader = require(Permission.VIEW_SLOTS)


@router.post("/slots", response_model=SlotOut, status_code=201, summary="Create a parking slot")
def create_slot(body: SlotCreate, identity: Identity = Depends(admin), db: Session = Depends(get_db)):
    slot = slot_service.create_slot(db, body)
    log_action(db, identity.user_id, "SLOT_CREATED", f"Created parking slot: {slot.slot_number}")
    return slot


@router.post("/slots/bulk", response_model=BulkSlotResult, status_code=201,
             summary="Create a numbered batch of identical slots")
def create_bulk_slots(body: BulkSlotCreate, identity: Identity = Depends(admin), db: Session = Depends(get_db)):
    result = slot_service.create_bulk_slots(db, body)
    log_action(db, identity.user_id, "BULK_SLOTS_CREATED", f"Created {result['count']} parking slots")
    return result


@router.get("/slots", response_model=Page[SlotOut], summary="List parking slots")
def list_slots(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    search: Optional[str] = None,
    only_available: bool = Query(False, alias="onlyAvailable"),
    location: Optional[Location] = None,
    identity: Identity = Depends(reader),
    db: Session = Depends(get_db),
):
    return slot_service.list_slots(db, page, limit, search, only_available, location)


@router.get("/slots/{slot_id}", response_model=SlotOut, summary="Get a parking slot")
def get_slot(slot_id: int, identity: Identity = Depends(reader), db: Session = Depends(get_db)):
    return slot_service.get_slot(db, slot_id)


@router.put("/slots/{slot_id}", response_model=SlotOut, summary="Update a parking slot")
def update_slot(slot_id: int, body: SlotUpdate, identity: Identity = Depends(admin),
                db: Session = Depends(get_db)):
    slot = slot_service.update_slot(db, slot_id, body)
    log_action(db, identity.user_id, "SLOT_UPDATED", f"Updated parking slot: {slot.slot_number}")
    return slot


@router.delete("/slots/{slot_id}", status_code=204, summary="Delete a free parking slot")
def delete_slot(slot_id: int, identity: Identity = Depends(admin), db: Session = Depends(get_db)):
    number = slot_service.delete_slot(db, slot_id)
    log_action(db, identity.user_id, "SLOT_DELETED", f"Deleted parking slot: {number}")
    return Response(status_code=204)
