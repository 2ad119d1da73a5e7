# app/routers/users.py
"""Own profile + password, and admin user management."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional
from app.authorization import Identity, Permission, require
from app.config import settings
from app.database import get_db
from app.schemas.common import Page
from app.schemas.user import PasswordUpdate, ProfileUpdate, UserDetailOut, UserOut, UserUpdate
from app.services import user_service
from app.services.action_log_service import log_action

router = APIRouter()
account = require(Permission.MANAGE_OWN_ACCOUNT)
admin = require(Permission.MANAGE_USERS)


@router.get("/users/profile", response_model=UserDetailOut, summary="Current user's profile")
def get_profile(identity: Identity = Depends(account), db: Session = Depends(get_db)):
    return user_service.get_user(db, identity.user_id)


@router.put("/users/profile", response_model=UserOut, summary="Update own name / email")
def update_profile(body: ProfileUpdate, identity: Identity = Depends(account), db: Session = Depends(get_db)):
    user = user_service.update_profile(db, identity.user_id, body)
    log_action(db, identity.user_id, "PROFILE_UPDATED", "Updated own profile")
    return user


@router.put("/users/password", summary="Change own password")
def update_password(body: PasswordUpdate, identity: Identity = Depends(account), db: Session = Depends(get_db)):
    result = user_service.update_password(db, identity.user_id, body)
    log_action(db, identity.user_id, "PASSWORD_UPDATED", "Changed own password")
    return {"success": True, **result}


@router.get("/users", response_model=Page[UserDetailOut], summary="List users (admin)")
def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    search: Optional[str] = None,
    identity: Identity = Depends(admin),
    db: Session = Depends(get_db),
):
    return user_service.list_users(db, page, limit, search)


@router.get("/users/{user_id}", response_model=UserDetailOut, summary="Get a user (admin, or self)")
def get_user(user_id: int, identity: Identity = Depends(account), db: Session = Depends(get_db)):
    identity.ensure_self_or(Permission.MANAGE_USERS, user_id)
    return user_service.get_user(db, user_id)


@router.put("/users/{user_id}", response_model=UserOut, summary="Update a user incl. role (admin)")
def update_user(user_id: int, body: UserUpdate, identity: Identity = Depends(admin), db: Session = Depends(get_db)):
    user = user_service.update_user(db, identity.user_id, user_id, body)
    log_action(db, identity.user_id, "USER_UPDATED", f"Updated user ID: {user_id}")
    return user


@router.delete("/users/{user_id}", summary="Delete a user (admin)")
def delete_user(user_id: int, identity: Identity = Depends(admin), db: Session = Depends(get_db)):
    user_service.delete_user(db, identity.user_id, user_id)
    log_action(db, identity.user_id, "USER_DELETED", f"Deleted user ID: {user_id}")
    return {"success": True}
