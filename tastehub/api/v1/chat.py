import logging
from typing import List

from fastapi import APIRouter, Depends

from tastehub.core.exceptions import DomainError, internal_error
from tastehub.schemas.chat import (
    ChatMessageResponse,
    ConversationResponse,
    ReadReceiptResponse,
    SendMessageRequest,
    TotalUnreadResponse,
    UnreadCountResponse,
)
from tastehub.schemas.response import SuccessResponse
from tastehub.services.admin_directory import UserDirectory, get_admin_directory
from tastehub.services.chat_service import (
    send_message,
    list_messages,
    list_conversations,
    mark_customer_read,
    mark_admin_read,
    unread_count,
    admin_total_unread,
)

router = APIRouter()
log = logging.getLogger(__name__)


@router.post("/messages/send", response_model=SuccessResponse)
async def send_message_endpoint(
    payload: SendMessageRequest,
    directory: UserDirectory = Depends(get_admin_directory),
):
    """Sends a message from a customer to the admins, or from an admin to a customer."""
    try:
        message = await send_message(
            sender_email=payload.sender_email,
            sender_name=payload.sender_name,
            text=payload.text,
            directory=directory,
            file=payload.file,
            is_admin=bool(payload.is_admin),
            target_email=payload.target_email,
            idempotency_key=payload.idempotency_key,
        )
        data = ChatMessageResponse.model_validate(message).model_dump(by_alias=True, mode="json")
        return SuccessResponse(message="Message sent", data=data)
    except DomainError:
        raise
    except Exception as e:
        log.error(f"Send message error: {e}")
        raise internal_error("Failed to send message", e)


@router.get("/messages/{user_email}", response_model=List[ChatMessageResponse])
async def list_messages_endpoint(user_email: str):
    """Full thread of a user, oldest first."""
    try:
        messages = await list_messages(user_email)
        return [ChatMessageResponse.model_validate(m) for m in messages]
    except Exception as e:
        log.error(f"Get messages error: {e}")
        raise internal_error("Failed to fetch messages", e)


@router.get("/admin/conversations", response_model=List[ConversationResponse])
async def list_conversations_endpoint():
    """Conversation summaries for the admin inbox."""
    try:
        conversations = await list_conversations()
        return [ConversationResponse.model_validate(c) for c in conversations]
    except Exception as e:
        log.error(f"Get conversations error: {e}")
        raise internal_error("Failed to fetch conversations", e)


@router.put("/messages/read/{customer_email}", response_model=ReadReceiptResponse)
async def mark_customer_read_endpoint(customer_email: str):
    """Called when the customer opens the chat."""
    try:
        modified = await mark_customer_read(customer_email)
        return ReadReceiptResponse(message="Messages marked as read", modified_count=modified)
    except Exception as e:
        log.error(f"Mark messages read error: {e}")
        raise internal_error("Failed to mark messages as read", e)


@router.put("/admin/messages/read/{customer_email}", response_model=ReadReceiptResponse)
async def mark_admin_read_endpoint(
    customer_email: str,
    directory: UserDirectory = Depends(get_admin_directory),
):
    """Called when an admin opens a customer's conversation."""
    try:
        modified = await mark_admin_read(customer_email, directory)
        return ReadReceiptResponse(message="Admin messages marked as read", modified_count=modified)
    except Exception as e:
        log.error(f"Mark admin messages read error: {e}")
        raise internal_error("Failed to mark admin messages as read", e)


@router.get("/unread-count/{user_email}", response_model=UnreadCountResponse)
async def unread_count_endpoint(user_email: str):
    try:
        count = await unread_count(user_email)
        return UnreadCountResponse(unread_count=count)
    except Exception as e:
        log.error(f"Get unread count error: {e}")
        raise internal_error("Failed to get unread count", e)


@router.get("/admin/total-unread", response_model=TotalUnreadResponse)
async def admin_total_unread_endpoint(directory: UserDirectory = Depends(get_admin_directory)):
    try:
        count = await admin_total_unread(directory)
        return TotalUnreadResponse(total_unread=count)
    except Exception as e:
        log.error(f"Get admin total unread error: {e}")
        raise internal_error("Failed to get admin unread count", e)
