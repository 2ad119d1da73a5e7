# app/services/notification_service.py
"""
User-facing notifications for account and slot-request events.

All notifications are fire-and-forget: they run after the state change has
been committed, and delivery failures are logged, never raised. The database
state is the source of truth; a mail outage must not undo an approval.
"""

from datetime import datetime
from app.models.slot_request import SlotRequest
from app.models.user import User
from app.services.email_service import send_email
from app.utils.logger import get_logger

logger = get_logger(__name__)


def _stamp(moment: datetime = None) -> str:
    """Format the decision time (the request's updated_at), falling back to now."""
    return (moment or datetime.utcnow()).strftime("%Y-%m-%d %H:%M UTC")


async def _notify(to: str, subject: str, text: str, html: str) -> bool:
    """Send one email; returns False (after logging) instead of raising on failure."""
    try:
        await send_email(to, subject, text, html)
        return True
    except Exception as e:
        logger.error(f"Notification '{subject}' to {to} failed: {e}")
        return False


async def notify_request_approved(request: SlotRequest) -> bool:
    plate = request.vehicle.plate_number
    slot = request.parking_slot
    when = _stamp(request.updated_at)
    text = (f"Your parking request for {plate} has been approved. "
            f"Slot assigned: {slot.slot_number} ({slot.location.value}). Approved at {when}.")
    html = (
        "<h2>Parking Request Approved</h2>"
        f"<p>Your parking request for vehicle <strong>{plate}</strong> has been approved.</p>"
        f"<p>Assigned parking slot: <strong>{slot.slot_number}</strong></p>"
        f"<p>Location: {slot.location.value}</p>"
        f"<p>Approval date: {when}</p>"
    )
    return await _notify(request.user.email, "Parking Slot Request Approved", text, html)


async def notify_request_rejected(request: SlotRequest) -> bool:
    plate = request.vehicle.plate_number
    when = _stamp(request.updated_at)
    text = f"Your parking request for {plate} has been rejected."
    html = (
        "<h2>Parking Request Rejected</h2>"
        f"<p>We regret to inform you that your parking request for vehicle <strong>{plate}</strong> "
        "has been rejected.</p>"
        "<p>Please contact the administration for more information.</p>"
        f"<p>Date: {when}</p>"
    )
    return await _notify(request.user.email, "Parking Slot Request Rejected", text, html)


async def notify_welcome(user: User) -> bool:
    name = user.name or "User"
    return await _notify(
        user.email,
        "Welcome to the Parking Portal",
        f"Hello {name}, welcome to the parking portal!",
        f"<p>Hello <strong>{name}</strong>, welcome to the parking portal!</p>",
    )
