# app/routers/logs.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional
from app.authorization import Identity, Permission, require
from app.config import settings
from app.database import get_db
from app.schemas.action_log import ActionLogOut
from app.schemas.common import Page
from app.services.action_log_service import list_action_logs

router = APIRouter()


@router.get("/logs", response_model=Page[ActionLogOut], summary="Audit trail, filterable by user and action")
def get_action_logs(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=settings.MAX_PAGE_SIZE),
    user_id: Optional[int] = Query(None, alias="userId"),
    action: Optional[str] = None,
    identity: Identity = Depends(require(Permission.VIEW_ACTION_LOGS)),
    db: Session = Depends(get_db),
):
    """Newest first. `action` matches as a case-insensitive substring."""
    return list_action_logs(db, page, limit, user_id, action)
