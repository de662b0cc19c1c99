import json
from typing import Optional

import pydantic
from fastapi import APIRouter, Depends, Query, Request
from sqlmodel import Session

from core.config import settings
from core.exceptions import ValidationError
from database import get_session
from schemas.message import ActionResponse, MessageUpdate, PaginatedMessages
from services import message_service
from services.auth_service import require_admin

router = APIRouter(prefix="/admin", dependencies=[Depends(require_admin)])


async def message_update_body(request: Request) -> MessageUpdate:
    """Parse the PUT body as a dependency so the router's credential check runs first."""
    try:
        return MessageUpdate.model_validate(await request.json())
    except (json.JSONDecodeError, UnicodeDecodeError, pydantic.ValidationError) as exc:
        raise ValidationError("Invalid request") from exc


@router.get("/messages", response_model=PaginatedMessages)
def list_messages(
    page: int = Query(1, ge=1, description="Page number, starts from 1"),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE, description="Number of messages per page"),
    session: Session = Depends(get_session),
):
    return message_service.list_messages(session, page=page, limit=limit)


@router.put("/messages", response_model=ActionResponse)
def update_message(
    payload: MessageUpdate = Depends(message_update_body),
    session: Session = Depends(get_session),
):
    message_service.update_message(
        session,
        payload.message_id,
        read=payload.read,
        replied=payload.replied,
    )
    return ActionResponse(message="Message updated successfully")


@router.delete("/messages", response_model=ActionResponse)
def delete_message(
    message_id: Optional[str] = Query(None, alias="id", description="Id of the message to delete"),
    session: Session = Depends(get_session),
):
    message_service.delete_message(session, message_id)
    return ActionResponse(message="Message deleted successfully")
