from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for payloads exchanged with the site's JS frontend (camelCase keys)."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class ContactMessageCreate(CamelModel):
    # Presence and shape are checked by message_service so that failures map to 400s
    name: Optional[str] = None
    email: Optional[str] = None
    subject: Optional[str] = None
    message: Optional[str] = None


class ContactSubmitResponse(CamelModel):
    success: bool = True
    message_id: str
    message: str = "Message sent successfully!"


class MessageRead(CamelModel):
    id: str
    name: str
    email: str
    subject: str
    message: str
    created_at: datetime
    read: bool
    replied: bool


class MessageUpdate(CamelModel):
    message_id: Optional[str] = None
    read: Optional[bool] = None
    replied: Optional[bool] = None


class Pagination(CamelModel):
    page: int = Field(description="The current page number (1-based).")
    limit: int = Field(description="The number of items per page.")
    total_count: int = Field(description="Total number of messages.")
    total_pages: int


class PaginatedMessages(CamelModel):
    messages: List[MessageRead] = Field(description="The messages on the current page, newest first.")
    pagination: Pagination


class ActionResponse(CamelModel):
    success: bool = True
    message: str
