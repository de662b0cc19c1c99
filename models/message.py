from datetime import datetime, timezone
from uuid import uuid4

from sqlmodel import Field, SQLModel


def new_message_id() -> str:
    return uuid4().hex


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MessageBase(SQLModel):
    name: str
    email: str
    subject: str
    message: str


class Message(MessageBase, table=True):
    __tablename__ = "messages"

    id: str = Field(default_factory=new_message_id, primary_key=True, max_length=32)
    created_at: datetime = Field(default_factory=utc_now, nullable=False, index=True)
    read: bool = Field(default=False, nullable=False)
    replied: bool = Field(default=False, nullable=False)
