# app/services/email_service.py
"""
Outgoing mail transport (SMTP).
smtplib is blocking, so delivery runs in a worker thread to keep the event loop free.
With EMAIL_ENABLED=false messages are logged instead of sent (local dev, tests).
"""

import asyncio
import smtplib
from email.message import EmailMessage
from app.config import settings
from app.utils.logger import get_logger

logger = get_logger(__name__)


class EmailDeliveryError(Exception):
    """Raised when the SMTP transport rejects or cannot deliver a message."""


def _build_message(to: str, subject: str, text: str, html: str = None) -> EmailMessage:
    msg = EmailMessage()
    msg["From"] = settings.MAIL_SENDER
    msg["To"] = to
    msg["Subject"] = subject
    msg.set_content(text)
    if html:
        msg.add_alternative(html, subtype="html")
    return msg


def _deliver(msg: EmailMessage):
    try:
        with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=10) as smtp:
            if settings.SMTP_USE_TLS:
                smtp.starttls()
            if settings.SMTP_USER:
                smtp.login(settings.SMTP_USER, settings.SMTP_PASSWORD or "")
            smtp.send_message(msg)
    except (smtplib.SMTPException, OSError) as e:
        raise EmailDeliveryError(f"Could not deliver mail to {msg['To']}: {e}") from e


async def send_email(to: str, subject: str, text: str, html: str = None):
    msg = _build_message(to, subject, text, html)
    if not settings.EMAIL_ENABLED:
        logger.info(f"[MAIL][disabled] to={to} subject={subject!r}")
        return
    await asyncio.to_thread(_deliver, msg)
    logger.info(f"[MAIL] sent to={to} subject={subject!r}")
