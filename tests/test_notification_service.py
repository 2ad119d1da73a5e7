# tests/test_notification_service.py
import pytest
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock, patch
from app.models.enums import Location
from app.services import notification_service
from app.services.email_service import EmailDeliveryError, _build_message


def approved_request():
    request = MagicMock()
    request.vehicle.plate_number = "RAB123A"
    request.parking_slot.slot_number = "A-1"
    request.parking_slot.location = Location.NORTH
    request.user.email = "driver@example.com"
    request.updated_at = datetime(2026, 3, 14, 9, 26)
    return request


@pytest.mark.asyncio
async def test_approval_mail_names_plate_slot_and_location():
    with patch("app.services.notification_service.send_email", new_callable=AsyncMock) as send:
        assert await notification_service.notify_request_approved(approved_request()) is True

    to, subject, text, html = send.await_args.args
    assert to == "driver@example.com"
    assert subject == "Parking Slot Request Approved"
    assert "RAB123A" in text and "A-1" in text and "NORTH" in text
    assert "<strong>A-1</strong>" in html
    assert "2026-03-14 09:26 UTC" in text
    assert "Approval date: 2026-03-14 09:26 UTC" in html


@pytest.mark.asyncio
async def test_delivery_failure_is_reported_not_raised():
    failing = AsyncMock(side_effect=EmailDeliveryError("connection refused"))
    with patch("app.services.notification_service.send_email", new=failing):
        assert await notification_service.notify_request_rejected(approved_request()) is False


@pytest.mark.asyncio
async def test_disabled_transport_only_logs():
    user = MagicMock(email="new@example.com")
    user.name = None
    with patch("app.services.email_service._deliver") as deliver:
        await notification_service.notify_welcome(user)
    deliver.assert_not_called()


def test_message_has_text_and_html_parts():
    msg = _build_message("a@example.com", "Hi", "plain body", "<p>html body</p>")
    assert msg["To"] == "a@example.com"
    assert msg.is_multipart()
    assert [part.get_content_type() for part in msg.iter_parts()] == ["text/plain", "text/html"]
