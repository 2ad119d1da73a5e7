# app/services/request_service.py
"""
Slot request lifecycle.

    PENDING ──approve──▶ APPROVED   (slot reserved and bound, terminal)
       │
       └────reject───▶ REJECTED   (no slot, terminal)

Every status write is a guarded UPDATE (... WHERE status = 'PENDING'), and
approval reserves the slot with a guarded UPDATE (... WHERE status = 'AVAILABLE')
in the same transaction. Two racing approvals can therefore never bind the same
slot or process the same request twice: the loser sees rowcount 0, rolls back
and gets an error. Notifications go out only after commit.
"""

from datetime import datetime
from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload
from app.config import settings
from app.exceptions import BadRequestException, ConflictException, NotFoundException
from app.models.enums import RequestStatus, SlotStatus
from app.models.parking_slot import ParkingSlot
from app.models.slot_request import SlotRequest
from app.models.vehicle import Vehicle
from app.schemas.slot_request import RequestCreate
from app.services.notification_service import notify_request_approved, notify_request_rejected
from app.services.slot_service import find_compatible_slot, is_compatible, reserve_slot
from app.utils.pagination import paginate
from app.utils.logger import get_logger

logger = get_logger(__name__)

ALREADY_PROCESSED = "This request has already been processed"
PENDING_EXISTS = "A pending request already exists for this vehicle"
VEHICLE_NOT_OWNED = "Vehicle not found or does not belong to you"


# ── Reads ────────────────────────────────────────────────────────────────────

def _request_view():
    """Request joined with its vehicle, assigned slot and requester."""
    return (
        joinedload(SlotRequest.vehicle),
        joinedload(SlotRequest.parking_slot),
        joinedload(SlotRequest.user),
    )


def get_request(db: Session, request_id: int, owner_id: int = None) -> SlotRequest:
    """Load one request. With owner_id set, other users' requests are reported as not found."""
    q = db.query(SlotRequest).options(*_request_view()).filter(SlotRequest.id == request_id)
    if owner_id is not None:
        q = q.filter(SlotRequest.user_id == owner_id)
    request = q.first()
    if not request:
        raise NotFoundException("Slot request not found")
    return request


def list_requests(db: Session, owner_id: int = None, page: int = 1, limit: int = 10,
                  search: str = None, status: RequestStatus = None) -> dict:
    q = db.query(SlotRequest).options(*_request_view())
    if owner_id is not None:
        q = q.filter(SlotRequest.user_id == owner_id)
    if status:
        q = q.filter(SlotRequest.status == status)
    if search:
        q = q.filter(SlotRequest.vehicle.has(Vehicle.plate_number.ilike(f"%{search.strip()}%")))
    q = q.order_by(SlotRequest.created_at.desc(), SlotRequest.id.desc())
    return paginate(q, page, limit)


def _owned_vehicle(db: Session, user_id: int, vehicle_id: int) -> Vehicle:
    vehicle = db.query(Vehicle).filter(Vehicle.id == vehicle_id, Vehicle.user_id == user_id).first()
    if not vehicle:
        raise NotFoundException(VEHICLE_NOT_OWNED)
    return vehicle


def _has_pending_request(db: Session, vehicle_id: int) -> bool:
    return db.query(SlotRequest.id).filter(
        SlotRequest.vehicle_id == vehicle_id,
        SlotRequest.status == RequestStatus.PENDING,
    ).first() is not None


def _guarded_pending_update(db: Session, request_id: int, *conditions, **values) -> bool:
    """UPDATE the request only while it is still PENDING (plus any extra `conditions`). Does not commit."""
    result = db.execute(
        update(SlotRequest)
        .where(SlotRequest.id == request_id, SlotRequest.status == RequestStatus.PENDING, *conditions)
        .values(**values)
        .execution_options(synchronize_session="fetch")
    )
    return result.rowcount == 1


def _still_fits(vehicle: Vehicle, slot: ParkingSlot):
    """Guard: the request still points at `vehicle`, and that vehicle still matches the slot."""
    fitting = select(Vehicle.id).where(
        Vehicle.id == vehicle.id,
        Vehicle.vehicle_type == slot.vehicle_type,
        Vehicle.size == slot.size,
    )
    return SlotRequest.vehicle_id.in_(fitting)


def _lost_approval(db: Session, request_id: int):
    """Explain why the guarded approval write matched no row. Always raises."""
    db.rollback()
    status = db.query(SlotRequest.status).filter(SlotRequest.id == request_id).scalar()
    if status is None:
        raise NotFoundException("Slot request not found")
    if status != RequestStatus.PENDING:
        raise BadRequestException(ALREADY_PROCESSED)
    raise ConflictException("The request's vehicle changed during approval, please retry")


# ── Owner operations ─────────────────────────────────────────────────────────

def create_request(db: Session, user_id: int, data: RequestCreate) -> SlotRequest:
    vehicle = _owned_vehicle(db, user_id, data.vehicle_id)
    if _has_pending_request(db, vehicle.id):
        raise BadRequestException(PENDING_EXISTS)

    request = SlotRequest(user_id=user_id, vehicle_id=vehicle.id, status=RequestStatus.PENDING)
    db.add(request)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race against another create for the same vehicle
        db.rollback()
        raise BadRequestException(PENDING_EXISTS)

    logger.info(f"Slot request {request.id} created for vehicle {vehicle.plate_number} by user {user_id}")
    return get_request(db, request.id)


def update_request(db: Session, request_id: int, user_id: int, data: RequestCreate) -> SlotRequest:
    """Reassign a PENDING request to another of the caller's vehicles."""
    request = get_request(db, request_id, owner_id=user_id)
    if request.status != RequestStatus.PENDING:
        raise BadRequestException("Cannot modify requests that are already processed")

    vehicle = _owned_vehicle(db, user_id, data.vehicle_id)
    if vehicle.id != request.vehicle_id and _has_pending_request(db, vehicle.id):
        raise BadRequestException(PENDING_EXISTS)

    if not _guarded_pending_update(db, request_id, vehicle_id=vehicle.id):
        db.rollback()
        raise BadRequestException("Cannot modify requests that are already processed")
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise BadRequestException(PENDING_EXISTS)

    logger.info(f"Slot request {request_id} reassigned to vehicle {vehicle.plate_number}")
    return get_request(db, request_id)


def delete_request(db: Session, request_id: int, user_id: int):
    request = get_request(db, request_id, owner_id=user_id)
    if request.status != RequestStatus.PENDING:
        raise BadRequestException("Cannot delete requests that are already processed")

    result = db.execute(
        delete(SlotRequest)
        .where(SlotRequest.id == request_id, SlotRequest.status == RequestStatus.PENDING)
        .execution_options(synchronize_session="fetch")
    )
    if result.rowcount != 1:
        db.rollback()
        raise BadRequestException("Cannot delete requests that are already processed")
    db.commit()
    logger.info(f"Slot request {request_id} deleted by user {user_id}")


# ── Admin transitions ────────────────────────────────────────────────────────

def _reserve_requested_slot(db: Session, slot_id: int, vehicle: Vehicle) -> ParkingSlot:
    slot = db.get(ParkingSlot, slot_id)
    if not slot:
        raise NotFoundException("Specified parking slot not found")
    if slot.status != SlotStatus.AVAILABLE:
        raise BadRequestException("Selected parking slot is not available")
    if not is_compatible(slot, vehicle):
        raise BadRequestException("Selected parking slot is not compatible with the vehicle")
    if not reserve_slot(db, slot.id):
        db.rollback()
        raise ConflictException("Selected parking slot was just assigned to another request")
    return slot


def _reserve_any_compatible_slot(db: Session, vehicle: Vehicle) -> ParkingSlot:
    """Allocator + guarded reserve; on a lost race, move on to the next compatible slot."""
    lost = []
    for _ in range(max(settings.SLOT_ALLOCATION_ATTEMPTS, 1)):
        slot = find_compatible_slot(db, vehicle.vehicle_type, vehicle.size, exclude_ids=lost)
        if reserve_slot(db, slot.id):
            return slot
        logger.warning(f"Slot {slot.slot_number} was reserved concurrently, trying next candidate")
        lost.append(slot.id)
    db.rollback()
    raise ConflictException("Could not reserve a compatible parking slot, please retry")


async def approve_request(db: Session, request_id: int, slot_id: int = None) -> SlotRequest:
    request = get_request(db, request_id)
    if request.status != RequestStatus.PENDING:
        raise BadRequestException(ALREADY_PROCESSED)

    vehicle = request.vehicle
    if slot_id is not None:
        slot = _reserve_requested_slot(db, slot_id, vehicle)
    else:
        slot = _reserve_any_compatible_slot(db, vehicle)

    # Slot is reserved but not committed; bind it only if the request is still
    # PENDING for the same vehicle and that vehicle still fits the slot
    if not _guarded_pending_update(db, request_id, _still_fits(vehicle, slot),
                                   status=RequestStatus.APPROVED, slot_id=slot.id,
                                   updated_at=datetime.utcnow()):
        _lost_approval(db, request_id)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictException("Parking slot is already bound to another request")

    approved = get_request(db, request_id)
    logger.info(f"Slot request {request_id} APPROVED: {vehicle.plate_number} -> slot {approved.parking_slot.slot_number}")
    await notify_request_approved(approved)
    return approved


async def reject_request(db: Session, request_id: int) -> SlotRequest:
    request = get_request(db, request_id)
    if request.status != RequestStatus.PENDING:
        raise BadRequestException(ALREADY_PROCESSED)

    if not _guarded_pending_update(db, request_id, status=RequestStatus.REJECTED,
                                   updated_at=datetime.utcnow()):
        db.rollback()
        raise BadRequestException(ALREADY_PROCESSED)
    db.commit()

    rejected = get_request(db, request_id)
    logger.info(f"Slot request {request_id} REJECTED ({rejected.vehicle.plate_number})")
    await notify_request_rejected(rejected)
    return rejected


async def update_request_status(db: Session, request_id: int, status: RequestStatus,
                                slot_id: int = None) -> SlotRequest:
    """Dispatch a requested target status to the matching transition."""
    if status == RequestStatus.APPROVED:
        return await approve_request(db, request_id, slot_id)
    if status == RequestStatus.REJECTED:
        return await reject_request(db, request_id)

    request = get_request(db, request_id)
    if request.status != RequestStatus.PENDING:
        raise BadRequestException("Cannot change status of already processed requests")

    # PENDING -> PENDING: re-affirm only, no allocation
    request.status = RequestStatus.PENDING
    request.updated_at = datetime.utcnow()
    db.commit()
    return get_request(db, request_id)
