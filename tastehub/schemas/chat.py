import uuid
from datetime import datetime
from typing import Optional

from pydantic import Field

from tastehub.schemas.response import CamelModel


class SendMessageRequest(CamelModel):
    sender_email: Optional[str] = None
    sender_name: Optional[str] = None
    text: Optional[str] = None
    file: Optional[str] = Field(None, description="Attachment reference (e.g. an uploaded file URL).")
    is_admin: Optional[bool] = Field(False, description="Null is treated as false.")
    target_email: Optional[str] = Field(None, description="Customer addressed by an admin.")
    idempotency_key: Optional[str] = Field(None, max_length=128, description="Makes a retried send safe.")


class ChatMessageResponse(CamelModel):
    id: uuid.UUID
    sender_email: str
    sender_name: Optional[str] = None
    receiver_email: str
    text: str
    file: Optional[str] = None
    is_admin: bool
    is_read: bool
    timestamp: datetime
    read_at: Optional[datetime] = None


class ConversationResponse(CamelModel):
    customer_email: str
    customer_name: Optional[str] = None
    last_message: str
    last_message_time: datetime
    admin_assigned: Optional[str] = None
    unread_count: int
    updated_at: datetime


class UnreadCountResponse(CamelModel):
    unread_count: int


class TotalUnreadResponse(CamelModel):
    total_unread: int


class ReadReceiptResponse(CamelModel):
    success: bool = True
    message: str
    modified_count: int
