# app/authorization.py
"""
Authorization gate.

Every protected route declares the permission it needs with
`Depends(require(Permission.X))`. The gate verifies the bearer token, loads the
caller's current role from the database and checks it against POLICY below,
so role rules live in one table instead of being repeated in handlers.

Ownership is expressed through Identity.owner_scope: None means "may see
everyone's rows", an int means "only rows owned by this user id".
"""

import enum
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.database import get_db
from app.exceptions import ForbiddenException, UnauthorizedException
from app.models.enums import Role
from app.models.user import User
from app.utils.tokens import verify_token


class Permission(str, enum.Enum):
    MANAGE_OWN_ACCOUNT = "account:own"
    MANAGE_OWN_VEHICLES = "vehicles:own"
    VIEW_SLOTS = "slots:read"
    MANAGE_SLOTS = "slots:write"
    SUBMIT_REQUESTS = "requests:own"
    VIEW_ALL_REQUESTS = "requests:read-all"
    DECIDE_REQUESTS = "requests:decide"
    MANAGE_USERS = "users:manage"
    VIEW_ACTION_LOGS = "logs:read"


POLICY = {
    Permission.MANAGE_OWN_ACCOUNT: {Role.USER, Role.ADMIN},
    Permission.MANAGE_OWN_VEHICLES: {Role.USER, Role.ADMIN},
    Permission.VIEW_SLOTS: {Role.USER, Role.ADMIN},
    Permission.MANAGE_SLOTS: {Role.ADMIN},
    Permission.SUBMIT_REQUESTS: {Role.USER, Role.ADMIN},
    Permission.VIEW_ALL_REQUESTS: {Role.ADMIN},
    Permission.DECIDE_REQUESTS: {Role.ADMIN},
    Permission.MANAGE_USERS: {Role.ADMIN},
    Permission.VIEW_ACTION_LOGS: {Role.ADMIN},
}

DENIED_MESSAGES = {
    Permission.MANAGE_SLOTS: "Only administrators can manage parking slots",
    Permission.DECIDE_REQUESTS: "Only administrators can approve or reject parking requests",
}


@dataclass
class Identity:
    user_id: int
    role: Role

    def can(self, permission: Permission) -> bool:
        return self.role in POLICY.get(permission, set())

    @property
    def owner_scope(self) -> Optional[int]:
        """Row filter for request visibility: None for admins, own id otherwise."""
        return None if self.can(Permission.VIEW_ALL_REQUESTS) else self.user_id

    def ensure_self_or(self, permission: Permission, user_id: int):
        """Allow acting on one's own account, or on any account with `permission`."""
        if user_id != self.user_id and not self.can(permission):
            raise ForbiddenException("Admin access required")


_bearer = HTTPBearer(auto_error=False)


def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    db: Session = Depends(get_db),
) -> Identity:
    if credentials is None or not credentials.credentials:
        raise UnauthorizedException("No token provided")

    claims = verify_token(credentials.credentials)
    user = db.get(User, claims.user_id)
    if not user:
        raise UnauthorizedException("Invalid token")
    # Role comes from the database so promotions/demotions apply immediately
    return Identity(user_id=user.id, role=user.role)


def require(permission: Permission):
    """Route dependency: resolves the caller and enforces `permission`."""
    def dependency(identity: Identity = Depends(get_current_identity)) -> Identity:
        if not identity.can(permission):
            raise ForbiddenException(DENIED_MESSAGES.get(permission, "Admin access required"))
        return identity
    return dependency
