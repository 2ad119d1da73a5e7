# app/services/auth_service.py
"""Registration and login. Self-registration always yields a USER account."""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.exceptions import BadRequestException, UnauthorizedException
from app.models.enums import Role
from app.models.user import User
from app.schemas.auth import LoginIn, RegisterIn
from app.services.notification_service import notify_welcome
from app.utils.passwords import hash_password, verify_password
from app.utils.tokens import generate_token
from app.utils.logger import get_logger

logger = get_logger(__name__)


async def register(db: Session, data: RegisterIn):
    """Create a USER account. Returns (token, user)."""
    if db.query(User.id).filter(User.email == data.email).first():
        raise BadRequestException("User already exists")

    user = User(email=data.email, name=data.name, password=hash_password(data.password), role=Role.USER)
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise BadRequestException("User already exists")
    db.refresh(user)
    logger.info(f"User registered: {user.email} (id={user.id})")

    await notify_welcome(user)
    return generate_token(user.id, user.role), user


def login(db: Session, data: LoginIn):
    """Returns (token, user). Unknown email and wrong password fail identically."""
    user = db.query(User).filter(User.email == data.email).first()
    if not user or not verify_password(data.password, user.password):
        logger.warning(f"Failed login for {data.email}")
        raise UnauthorizedException("Invalid credentials")
    return generate_token(user.id, user.role), user


def ensure_admin(db: Session, email: str, password: str, name: str = None) -> User:
    """Create an ADMIN account, or promote an existing one (used by scripts/setup/create_admin.py)."""
    user = db.query(User).filter(User.email == email).first()
    if user:
        user.role = Role.ADMIN
    else:
        user = User(email=email, name=name or "Administrator", password=hash_password(password), role=Role.ADMIN)
        db.add(user)
    db.commit()
    db.refresh(user)
    return user
