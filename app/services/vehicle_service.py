# app/services/vehicle_service.py
"""
Vehicle registration and lookup helpers.
Every operation is scoped to the owning user: another user's vehicle is reported as not found.
"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.exceptions import BadRequestException, NotFoundException
from app.models.enums import RequestStatus
from app.models.slot_request import SlotRequest
from app.models.vehicle import Vehicle
from app.schemas.vehicle import VehicleCreate
from app.utils.pagination import paginate
from app.utils.logger import get_logger

logger = get_logger(__name__)

DUPLICATE_PLATE = "Vehicle with this plate number already exists"
BOUND_VEHICLE = "Cannot change type or size of a vehicle that holds an approved parking slot"


def lookup_vehicle_by_plate(db: Session, plate_number: str):
    """Find a registered vehicle by plate number. Returns None if not found."""
    return db.query(Vehicle).filter(Vehicle.plate_number == plate_number).first()


def _holds_slot(db: Session, vehicle_id: int) -> bool:
    return db.query(SlotRequest.id).filter(
        SlotRequest.vehicle_id == vehicle_id,
        SlotRequest.status == RequestStatus.APPROVED,
    ).first() is not None


def get_owned_vehicle(db: Session, user_id: int, vehicle_id: int) -> Vehicle:
    vehicle = db.query(Vehicle).filter(Vehicle.id == vehicle_id, Vehicle.user_id == user_id).first()
    if not vehicle:
        raise NotFoundException("Vehicle not found")
    return vehicle


def create_vehicle(db: Session, user_id: int, data: VehicleCreate) -> Vehicle:
    if lookup_vehicle_by_plate(db, data.plate_number):
        raise BadRequestException(DUPLICATE_PLATE)

    vehicle = Vehicle(
        plate_number=data.plate_number,
        vehicle_type=data.vehicle_type,
        size=data.size,
        attributes=data.attributes,
        user_id=user_id,
    )
    db.add(vehicle)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise BadRequestException(DUPLICATE_PLATE)
    db.refresh(vehicle)
    logger.info(f"Vehicle {vehicle.plate_number} registered by user {user_id}")
    return vehicle


def list_vehicles(db: Session, user_id: int, page: int, limit: int, search: str = None) -> dict:
    q = db.query(Vehicle).filter(Vehicle.user_id == user_id)
    if search:
        q = q.filter(Vehicle.plate_number.ilike(f"%{search.strip()}%"))
    q = q.order_by(Vehicle.created_at.desc(), Vehicle.id.desc())
    return paginate(q, page, limit)


def update_vehicle(db: Session, user_id: int, vehicle_id: int, data: VehicleCreate) -> Vehicle:
    vehicle = get_owned_vehicle(db, user_id, vehicle_id)
    if (data.vehicle_type, data.size) != (vehicle.vehicle_type, vehicle.size) and _holds_slot(db, vehicle_id):
        raise BadRequestException(BOUND_VEHICLE)

    clash = db.query(Vehicle.id).filter(
        Vehicle.plate_number == data.plate_number, Vehicle.id != vehicle_id
    ).first()
    if clash:
        raise BadRequestException(DUPLICATE_PLATE)

    vehicle.plate_number = data.plate_number
    vehicle.vehicle_type = data.vehicle_type
    vehicle.size = data.size
    vehicle.attributes = data.attributes
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise BadRequestException(DUPLICATE_PLATE)
    db.refresh(vehicle)
    return vehicle


def delete_vehicle(db: Session, user_id: int, vehicle_id: int) -> str:
    """
    Delete a vehicle and its rejected request history.
    Returns the deleted plate number.
    Blocked while a PENDING request is open or an APPROVED request holds a slot.
    """
    vehicle = get_owned_vehicle(db, user_id, vehicle_id)

    active = db.query(SlotRequest.id).filter(
        SlotRequest.vehicle_id == vehicle_id,
        SlotRequest.status.in_([RequestStatus.PENDING, RequestStatus.APPROVED]),
    ).first()
    if active:
        raise BadRequestException("Cannot delete vehicle with active slot requests")

    plate = vehicle.plate_number
    db.query(SlotRequest).filter(SlotRequest.vehicle_id == vehicle_id).delete(synchronize_session=False)
    db.delete(vehicle)
    db.commit()
    logger.info(f"Vehicle {plate} deleted by user {user_id}")
    return plate
