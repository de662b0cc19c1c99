from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlmodel import Session

from core.mail import mail_enabled, notify_owner
from database import get_session
from schemas.message import ContactMessageCreate, ContactSubmitResponse
from services import message_service

router = APIRouter()


@router.post("/contact", status_code=status.HTTP_201_CREATED, response_model=ContactSubmitResponse)
def submit_contact_message(
    data: ContactMessageCreate,
    background_tasks: BackgroundTasks,
    session: Session = Depends(get_session),
):
    message = message_service.create_message(session, data)

    if mail_enabled():
        background_tasks.add_task(notify_owner, message)

    return ContactSubmitResponse(message_id=message.id)
