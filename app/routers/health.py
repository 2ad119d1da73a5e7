# app/routers/health.py
"""
System health check endpoint.
Returns status of backend + DB, slot capacity and the mail transport mode.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import func, text
from app.database import get_db
from app.config import settings
from app.models.enums import RequestStatus, SlotStatus
from app.models.parking_slot import ParkingSlot
from app.models.slot_request import SlotRequest
from datetime import datetime

router = APIRouter()


@router.get("/health", summary="System health check")
def health_check(db: Session = Depends(get_db)):
    """
    Returns:
    - Backend status
    - Database connectivity
    - Slot capacity (total / available) and the pending request backlog
    - Whether outgoing mail is sent or only logged
    """
    result = {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat(),
        "backend": "ok",
        "database": "unknown",
        "mail": "smtp" if settings.EMAIL_ENABLED else "log-only",
        "parking": {},
    }

    try:
        db.execute(text("SELECT 1"))
        result["database"] = "ok"
    except Exception as e:
        result["database"] = f"error: {str(e)}"
        result["status"] = "degraded"
        return result

    by_status = dict(db.query(ParkingSlot.status, func.count(ParkingSlot.id)).group_by(ParkingSlot.status).all())
    result["parking"] = {
        "slots": sum(by_status.values()),
        "available": by_status.get(SlotStatus.AVAILABLE, 0),
        "pendingRequests": db.query(SlotRequest).filter(SlotRequest.status == RequestStatus.PENDING).count(),
    }
    return result
