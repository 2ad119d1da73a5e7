# app/services/slot_service.py
"""
Parking slot management + the slot allocator.

Allocator contract:
  find_compatible_slot: read-only; first AVAILABLE slot with exactly the same
                        vehicle type and size, lowest id first.
  reserve_slot:         guarded write (UPDATE ... WHERE status = 'AVAILABLE');
                        returns False if someone else reserved the slot first.
Finding and reserving are separate so an admin-chosen slot goes through the
same compatibility check before it is reserved.
"""

from sqlalchemy import or_, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.exceptions import BadRequestException, NotFoundException
from app.models.enums import Location, SlotStatus, VehicleSize, VehicleType
from app.models.parking_slot import ParkingSlot
from app.models.vehicle import Vehicle
from app.schemas.parking_slot import BulkSlotCreate, SlotCreate, SlotUpdate
from app.utils.pagination import paginate
from app.utils.logger import get_logger

logger = get_logger(__name__)


# ── Allocator ────────────────────────────────────────────────────────────────

def is_compatible(slot: ParkingSlot, vehicle: Vehicle) -> bool:
    return slot.vehicle_type == vehicle.vehicle_type and slot.size == vehicle.size


def find_compatible_slot(db: Session, vehicle_type: VehicleType, size: VehicleSize,
                         exclude_ids=()) -> ParkingSlot:
    q = db.query(ParkingSlot).filter(
        ParkingSlot.vehicle_type == vehicle_type,
        ParkingSlot.size == size,
        ParkingSlot.status == SlotStatus.AVAILABLE,
    )
    if exclude_ids:
        q = q.filter(ParkingSlot.id.notin_(list(exclude_ids)))
    slot = q.order_by(ParkingSlot.id.asc()).first()
    if not slot:
        raise BadRequestException(
            f"No available parking slots for {VehicleType(vehicle_type).value} "
            f"of size {VehicleSize(size).value}"
        )
    return slot


def reserve_slot(db: Session, slot_id: int) -> bool:
    """Mark a slot UNAVAILABLE only if it is still AVAILABLE. Caller owns the transaction."""
    result = db.execute(
        update(ParkingSlot)
        .where(ParkingSlot.id == slot_id, ParkingSlot.status == SlotStatus.AVAILABLE)
        .values(status=SlotStatus.UNAVAILABLE)
        .execution_options(synchronize_session="fetch")
    )
    return result.rowcount == 1


# ── CRUD ─────────────────────────────────────────────────────────────────────

def get_slot(db: Session, slot_id: int) -> ParkingSlot:
    slot = db.get(ParkingSlot, slot_id)
    if not slot:
        raise NotFoundException("Parking slot not found")
    return slot


def _slot_number_taken(db: Session, slot_number: str, exclude_id: int = None) -> bool:
    q = db.query(ParkingSlot.id).filter(ParkingSlot.slot_number == slot_number)
    if exclude_id is not None:
        q = q.filter(ParkingSlot.id != exclude_id)
    return q.first() is not None


def _commit_unique(db: Session, message: str):
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise BadRequestException(message)


def create_slot(db: Session, data: SlotCreate) -> ParkingSlot:
    if _slot_number_taken(db, data.slot_number):
        raise BadRequestException("Slot with this number already exists")

    slot = ParkingSlot(
        slot_number=data.slot_number,
        vehicle_type=data.vehicle_type,
        size=data.size,
        location=data.location,
        status=SlotStatus.AVAILABLE,
    )
    db.add(slot)
    _commit_unique(db, "Slot with this number already exists")
    db.refresh(slot)
    logger.info(f"Slot {slot.slot_number} created ({slot.vehicle_type.value}/{slot.size.value}, {slot.location.value})")
    return slot


def create_bulk_slots(db: Session, data: BulkSlotCreate) -> dict:
    """Create `count` slots numbered prefix+start..prefix+start+count-1, all or nothing."""
    numbers = [f"{data.prefix}{data.start_number + i}" for i in range(data.count)]

    existing = [
        n for (n,) in db.query(ParkingSlot.slot_number)
        .filter(ParkingSlot.slot_number.in_(numbers))
        .order_by(ParkingSlot.slot_number)
    ]
    if existing:
        raise BadRequestException(
            f"The following slot numbers already exist: {', '.join(existing)}",
            errors=existing,
        )

    db.add_all([
        ParkingSlot(slot_number=n, vehicle_type=data.vehicle_type, size=data.size,
                    location=data.location, status=SlotStatus.AVAILABLE)
        for n in numbers
    ])
    _commit_unique(db, "Some slot numbers were created concurrently, retry the batch")
    logger.info(f"Bulk-created {len(numbers)} slots: {numbers[0]}..{numbers[-1]}")
    return {"count": len(numbers), "message": f"Successfully created {len(numbers)} parking slots"}


def update_slot(db: Session, slot_id: int, data: SlotUpdate) -> ParkingSlot:
    slot = get_slot(db, slot_id)
    if _slot_number_taken(db, data.slot_number, exclude_id=slot_id):
        raise BadRequestException("Slot with this number already exists")
    if slot.status == SlotStatus.UNAVAILABLE and (data.vehicle_type, data.size) != (slot.vehicle_type, slot.size):
        raise BadRequestException("Cannot change type or size of a currently occupied parking slot")

    slot.slot_number = data.slot_number
    slot.vehicle_type = data.vehicle_type
    slot.size = data.size
    slot.location = data.location
    _commit_unique(db, "Slot with this number already exists")
    db.refresh(slot)
    return slot


def delete_slot(db: Session, slot_id: int) -> str:
    """Delete a free slot; returns its slot number."""
    slot = get_slot(db, slot_id)
    if slot.status == SlotStatus.UNAVAILABLE:
        raise BadRequestException("Cannot delete a currently occupied parking slot")
    number = slot.slot_number
    db.delete(slot)
    db.commit()
    logger.info(f"Slot {number} deleted")
    return number


def list_slots(db: Session, page: int, limit: int, search: str = None,
               only_available: bool = False, location: Location = None) -> dict:
    q = db.query(ParkingSlot)
    if only_available:
        q = q.filter(ParkingSlot.status == SlotStatus.AVAILABLE)
    if location:
        q = q.filter(ParkingSlot.location == location)
    if search:
        term = search.strip().lower()
        locations = [loc for loc in Location if term in loc.value.lower()]
        q = q.filter(or_(ParkingSlot.slot_number.ilike(f"%{term}%"),
                         ParkingSlot.location.in_(locations)))
    q = q.order_by(ParkingSlot.slot_number.asc())
    return paginate(q, page, limit)
