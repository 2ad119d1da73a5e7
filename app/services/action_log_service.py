# app/services/action_log_service.py
"""
Audit trail writer + reader.
log_action is best-effort: a failed insert is rolled back and logged, never raised,
so auditing can never break the operation being audited.
"""

from sqlalchemy.orm import Session
from app.models.action_log import ActionLog
from app.utils.pagination import paginate
from app.utils.logger import get_logger

logger = get_logger(__name__)


def log_action(db: Session, user_id: int, action: str, details: str = None):
    """Append an ActionLog row and commit. Returns the row, or None if the write failed."""
    try:
        entry = ActionLog(user_id=user_id, action=action, details=details)
        db.add(entry)
        db.commit()
        logger.debug(f"[AUDIT] user={user_id} {action}: {details}")
        return entry
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to log action {action} for user {user_id}: {e}")
        return None


def list_action_logs(db: Session, page: int, limit: int, user_id: int = None, action: str = None) -> dict:
    q = db.query(ActionLog)
    if user_id:
        q = q.filter(ActionLog.user_id == user_id)
    if action:
        q = q.filter(ActionLog.action.ilike(f"%{action}%"))
    q = q.order_by(ActionLog.created_at.desc(), ActionLog.id.desc())
    return paginate(q, page, limit)
