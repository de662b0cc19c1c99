import logging
from html import escape
from typing import Optional

from fastapi_mail import ConnectionConfig, FastMail, MessageSchema, MessageType

from core.config import settings
from models.message import Message

logger = logging.getLogger(__name__)


def mail_enabled() -> bool:
    return bool(settings.MAIL_ENABLED and settings.OWNER_EMAIL and settings.MAIL_SERVER)


def get_fast_mail() -> Optional[FastMail]:
    """Build the mail client from settings, or None when mail is disabled."""
    if not mail_enabled():
        return None

    conf = ConnectionConfig(
        MAIL_USERNAME=settings.MAIL_USERNAME or "",
        MAIL_PASSWORD=settings.MAIL_PASSWORD or "",
        MAIL_FROM=settings.MAIL_FROM or settings.OWNER_EMAIL,
        MAIL_PORT=settings.MAIL_PORT,
        MAIL_SERVER=settings.MAIL_SERVER,
        MAIL_FROM_NAME=settings.MAIL_FROM_NAME,
        MAIL_STARTTLS=settings.MAIL_STARTTLS,
        MAIL_SSL_TLS=settings.MAIL_SSL_TLS,
        USE_CREDENTIALS=settings.USE_CREDENTIALS,
    )
    return FastMail(conf)


def build_owner_notification(message: Message) -> MessageSchema:
    html = f"""
    <div style="font-family: Arial, sans-serif; padding: 15px; border: 1px solid #eee; border-radius: 8px;">
        <h2 style="color: #4F46E5;">New Contact Message</h2>
        <p><strong>Name:</strong> {escape(message.name)}</p>
        <p><strong>Email:</strong> {escape(message.email)}</p>
        <p><strong>Subject:</strong> {escape(message.subject)}</p>
        <p style="margin-top: 15px;"><strong>Message:</strong></p>
        <div style="border-left: 3px solid #ccc; padding-left: 10px; margin-top: 5px; white-space: pre-wrap;">
            {escape(message.message)}
        </div>
    </div>
    """

    return MessageSchema(
        subject=f"New contact message: {message.subject}",
        recipients=[settings.OWNER_EMAIL],
        body=html,
        subtype=MessageType.html,
    )


async def notify_owner(message: Message) -> None:
    """Email the site owner about a new message. Failures are only logged."""
    fast_mail = get_fast_mail()
    if fast_mail is None:
        return

    try:
        await fast_mail.send_message(build_owner_notification(message))
        logger.info("Owner notified about message %s", message.id)
    except Exception:
        logger.exception("Failed to send owner notification for message %s", message.id)
