# app/services/user_service.py
"""
Account management: own profile + password, and admin user administration.
Role changes are admin-only and an admin can never change their own role or delete themself.
"""

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.exceptions import BadRequestException, ForbiddenException, NotFoundException
from app.models.enums import RequestStatus
from app.models.slot_request import SlotRequest
from app.models.user import User
from app.models.vehicle import Vehicle
from app.schemas.user import PasswordUpdate, ProfileUpdate, UserUpdate
from app.utils.pagination import paginate
from app.utils.passwords import hash_password, verify_password
from app.utils.logger import get_logger

logger = get_logger(__name__)


def _find_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if not user:
        raise NotFoundException("User not found")
    return user


def _attach_counts(db: Session, users: list):
    """Set vehicle_count / request_count on each user (rendered by UserDetailOut)."""
    ids = [u.id for u in users]
    if not ids:
        return users
    vehicles = dict(db.query(Vehicle.user_id, func.count(Vehicle.id))
                    .filter(Vehicle.user_id.in_(ids)).group_by(Vehicle.user_id).all())
    requests = dict(db.query(SlotRequest.user_id, func.count(SlotRequest.id))
                    .filter(SlotRequest.user_id.in_(ids)).group_by(SlotRequest.user_id).all())
    for u in users:
        u.vehicle_count = vehicles.get(u.id, 0)
        u.request_count = requests.get(u.id, 0)
    return users


def _apply_changes(db: Session, user: User, name, email):
    if email and email != user.email:
        taken = db.query(User.id).filter(User.email == email, User.id != user.id).first()
        if taken:
            raise BadRequestException("Email already in use")
        user.email = email
    if name is not None:
        user.name = name


def _commit(db: Session):
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise BadRequestException("Email already in use")


def list_users(db: Session, page: int, limit: int, search: str = None) -> dict:
    q = db.query(User)
    if search:
        term = f"%{search.strip()}%"
        q = q.filter((User.name.ilike(term)) | (User.email.ilike(term)))
    q = q.order_by(User.created_at.desc(), User.id.desc())
    result = paginate(q, page, limit)
    _attach_counts(db, result["data"])
    return result


def get_user(db: Session, user_id: int) -> User:
    user = _find_user(db, user_id)
    _attach_counts(db, [user])
    return user


def update_profile(db: Session, user_id: int, data: ProfileUpdate) -> User:
    """Self-service update. Only name and email; role is never touched here."""
    user = _find_user(db, user_id)
    _apply_changes(db, user, data.name, data.email)
    _commit(db)
    db.refresh(user)
    return user


def update_user(db: Session, admin_id: int, user_id: int, data: UserUpdate) -> User:
    user = _find_user(db, user_id)
    if data.role is not None and data.role != user.role:
        if admin_id == user_id:
            raise ForbiddenException("You cannot change your own role")
        logger.info(f"Admin {admin_id} changed role of user {user_id}: {user.role.value} -> {data.role.value}")
        user.role = data.role
    _apply_changes(db, user, data.name, data.email)
    _commit(db)
    db.refresh(user)
    return user


def update_password(db: Session, user_id: int, data: PasswordUpdate) -> dict:
    user = _find_user(db, user_id)
    if not verify_password(data.current_password, user.password):
        raise BadRequestException("Current password is incorrect")
    user.password = hash_password(data.new_password)
    db.commit()
    return {"message": "Password updated successfully"}


def delete_user(db: Session, admin_id: int, user_id: int):
    """
    Delete a user with their vehicles and rejected request history.
    Blocked while any PENDING request is open or an APPROVED request holds a slot.
    Action logs are kept.
    """
    if admin_id == user_id:
        raise ForbiddenException("You cannot delete your own account")

    user = _find_user(db, user_id)
    active = db.query(SlotRequest.id).filter(
        SlotRequest.user_id == user_id,
        SlotRequest.status.in_([RequestStatus.PENDING, RequestStatus.APPROVED]),
    ).first()
    if active:
        raise BadRequestException("Cannot delete user with active slot requests")

    email = user.email
    db.query(SlotRequest).filter(SlotRequest.user_id == user_id).delete(synchronize_session=False)
    db.query(Vehicle).filter(Vehicle.user_id == user_id).delete(synchronize_session=False)
    db.delete(user)
    db.commit()
    logger.info(f"User {user_id} ({email}) deleted by admin {admin_id}")
