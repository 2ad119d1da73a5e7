# app/routers/requests.py
"""
Slot request endpoints.
Owners create / edit / withdraw their PENDING requests; admins see everything
and move requests to APPROVED or REJECTED via PUT /requests/{id}/status.
"""

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session
from typing import Optional
from app.authorization import Identity, Permission, require
from app.config import settings
from app.database import get_db
from app.models.enums import RequestStatus
from app.schemas.common import Page
from app.schemas.slot_request import RequestCreate, RequestStatusUpdate, SlotRequestOut
from app.services import request_service
from app.services.action_log_service import log_action

router = APIRouter()
requester = require(Permission.SUBMIT_REQUESTS)
decider = require(Permission.DECIDE_REQUESTS)


@router.post("/requests", response_model=SlotRequestOut, status_code=201, summary="Request a slot for a vehicle")
def create_request(body: RequestCreate, identity: Identity = Depends(requester), db: Session = Depends(get_db)):
    request = request_service.create_request(db, identity.user_id, body)
    log_action(db, identity.user_id, "REQUEST_CREATED",
               f"Created parking request for vehicle ID: {request.vehicle_id}")
    return request


@router.get("/requests", response_model=Page[SlotRequestOut], summary="List requests (own, or all for admins)")
def list_requests(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    search: Optional[str] = None,
    status: Optional[RequestStatus] = None,
    identity: Identity = Depends(requester),
    db: Session = Depends(get_db),
):
    return request_service.list_requests(db, identity.owner_scope, page, limit, search, status)


@router.get("/requests/{request_id}", response_model=SlotRequestOut, summary="Get one request")
def get_request(request_id: int, identity: Identity = Depends(requester), db: Session = Depends(get_db)):
    return request_service.get_request(db, request_id, identity.owner_scope)


@router.put("/requests/{request_id}", response_model=SlotRequestOut, summary="Change the vehicle of a PENDING request")
def update_request(request_id: int, body: RequestCreate, identity: Identity = Depends(requester),
                   db: Session = Depends(get_db)):
    request = request_service.update_request(db, request_id, identity.user_id, body)
    log_action(db, identity.user_id, "REQUEST_UPDATED", f"Updated parking request ID: {request_id}")
    return request


@router.put("/requests/{request_id}/status", response_model=SlotRequestOut,
            summary="Approve (optionally with a specific slot) or reject a request")
async def update_request_status(request_id: int, body: RequestStatusUpdate,
                                identity: Identity = Depends(decider), db: Session = Depends(get_db)):
    request = await request_service.update_request_status(db, request_id, body.status, body.slot_id)
    log_action(db, identity.user_id, "REQUEST_STATUS_UPDATED",
               f"Updated parking request ID: {request_id} status to {body.status.value}")
    return request


@router.delete("/requests/{request_id}", status_code=204, summary="Withdraw a PENDING request")
def delete_request(request_id: int, identity: Identity = Depends(requester), db: Session = Depends(get_db)):
    request_service.delete_request(db, request_id, identity.user_id)
    log_action(db, identity.user_id, "REQUEST_DELETED", f"Deleted parking request ID: {request_id}")
    return Response(status_code=204)
