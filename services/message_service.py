"""Contact message pipeline: submit, list, update flags, delete.

Each function runs against a single request-scoped Session. Store failures are
logged here with full detail and re-raised as StorageError, which the API
renders as a generic 500.
"""

import logging
import math
import re
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, func, select

from core.exceptions import NotFoundError, StorageError, ValidationError
from models.message import Message, utc_now
from schemas.message import ContactMessageCreate, MessageRead, PaginatedMessages, Pagination

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

REQUIRED_FIELDS = ("name", "email", "subject", "message")


def validate_submission(data: ContactMessageCreate) -> None:
    """Raise ValidationError for a missing field or a malformed email."""
    for field in REQUIRED_FIELDS:
        value = getattr(data, field)
        if not value:
            raise ValidationError("All fields are required")

    if not EMAIL_PATTERN.fullmatch(data.email):
        raise ValidationError("Invalid email format")


def create_message(session: Session, data: ContactMessageCreate) -> Message:
    validate_submission(data)

    message = Message(
        name=data.name,
        email=data.email,
        subject=data.subject,
        message=data.message,
        created_at=utc_now(),
        read=False,
        replied=False,
    )

    try:
        session.add(message)
        session.commit()
        session.refresh(message)
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error("Failed to save contact message", exc_info=exc)
        raise StorageError() from exc

    logger.info("Contact message saved", extra={"message_id": message.id})
    return message


def list_messages(session: Session, page: int = 1, limit: int = 10) -> PaginatedMessages:
    """Newest-first page of messages plus a freshly computed pagination descriptor.

    Messages sharing a timestamp are ordered by id so pages never overlap.

    The count and the slice are separate queries, so under concurrent writes
    they may disagree slightly.
    """
    if page < 1 or limit < 1:
        raise ValidationError("Page and limit must be positive integers")

    skip = (page - 1) * limit

    try:
        statement = (
            select(Message)
            .order_by(Message.created_at.desc(), Message.id.desc())
            .offset(skip)
            .limit(limit)
        )
        messages = session.exec(statement).all()
        total_count = session.exec(select(func.count(Message.id))).one()
    except SQLAlchemyError as exc:
        logger.error("Failed to list contact messages", exc_info=exc)
        raise StorageError() from exc

    return PaginatedMessages(
        messages=[MessageRead.model_validate(m) for m in messages],
        pagination=Pagination(
            page=page,
            limit=limit,
            total_count=total_count,
            total_pages=math.ceil(total_count / limit),
        ),
    )


def _get_or_raise(session: Session, message_id: str) -> Message:
    try:
        message = session.get(Message, message_id)
    except SQLAlchemyError as exc:
        logger.error("Failed to load contact message %s", message_id, exc_info=exc)
        raise StorageError() from exc
    if message is None:
        raise NotFoundError("Message not found")
    return message


def update_message(
    session: Session,
    message_id: Optional[str],
    read: Optional[bool] = None,
    replied: Optional[bool] = None,
) -> Message:
    """Set only the supplied flags. Re-applying a value is a no-op success."""
    if not message_id:
        raise ValidationError("Message ID is required")

    message = _get_or_raise(session, message_id)

    if read is not None:
        message.read = read
    if replied is not None:
        message.replied = replied

    try:
        session.add(message)
        session.commit()
        session.refresh(message)
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error("Failed to update contact message %s", message_id, exc_info=exc)
        raise StorageError() from exc

    return message


def delete_message(session: Session, message_id: Optional[str]) -> None:
    if not message_id:
        raise ValidationError("Message ID is required")

    message = _get_or_raise(session, message_id)

    try:
        session.delete(message)
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error("Failed to delete contact message %s", message_id, exc_info=exc)
        raise StorageError() from exc

    logger.info("Contact message deleted", extra={"message_id": message_id})
