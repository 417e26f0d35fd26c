import logging
from typing import List, Optional

from tortoise import timezone
from tortoise.exceptions import IntegrityError
from tortoise.expressions import F, Q
from tortoise.transactions import in_transaction

from tastehub.core.config import SEND_MESSAGE_ATTEMPTS
from tastehub.core.exceptions import ConflictError, ValidationError
from tastehub.models.chat import ChatMessage, Conversation
from tastehub.models.processed_request import ProcessedRequest
from tastehub.services.admin_directory import UserDirectory, primary_admin

log = logging.getLogger(__name__)


async def _replay(sender_email: str, idempotency_key: Optional[str]) -> Optional[ChatMessage]:
    """Returns the message this sender already stored under the key, if any."""
    if not idempotency_key:
        return None
    processed = await ProcessedRequest.get_or_none(sender_email=sender_email, key=idempotency_key)
    if not processed:
        return None
    return await ChatMessage.get_or_none(id=processed.message_id)


async def send_message(
    sender_email: Optional[str],
    sender_name: Optional[str],
    text: Optional[str],
    directory: UserDirectory,
    file: Optional[str] = None,
    is_admin: bool = False,
    target_email: Optional[str] = None,
    idempotency_key: Optional[str] = None,
) -> ChatMessage:
    """
    Stores a message between a customer and the admin pool and refreshes the
    customer's conversation summary in the same transaction.

    Customers always write to the primary admin; admins write to `target_email`.
    The conversation's unread counter only moves for admin messages, since it
    backs the customer's "new message" badge.

    With an `idempotency_key`, a retried send from the same sender returns the first stored message
    and leaves the counter untouched.
    """
    if not sender_email or not sender_email.strip():
        raise ValidationError("senderEmail is required")
    if not text and not file:
        raise ValidationError("Message text or file is required")
    if is_admin and not target_email:
        raise ValidationError("targetEmail is required when an admin sends a message")

    admins = await directory.admin_emails()
    admin_email = primary_admin(admins)
    receiver_email = target_email if is_admin else admin_email
    customer_email = target_email if is_admin else sender_email

    for attempt in range(1, SEND_MESSAGE_ATTEMPTS + 1):
        replayed = await _replay(sender_email, idempotency_key)
        if replayed:
            log.info(f"Send with key {idempotency_key} already processed, replaying message {replayed.id}.")
            return replayed

        try:
            async with in_transaction() as conn:
                now = timezone.now()
                message = await ChatMessage.create(
                    sender_email=sender_email,
                    sender_name=sender_name,
                    receiver_email=receiver_email,
                    text=text or "",
                    file=file,
                    is_admin=bool(is_admin),
                    is_read=False,
                    timestamp=now,
                    using_db=conn,
                )
                if idempotency_key:
                    await ProcessedRequest.create(
                        sender_email=sender_email, key=idempotency_key, message_id=message.id, using_db=conn
                    )

                summary = {
                    "last_message": text or "",
                    "last_message_time": now,
                    "admin_assigned": admin_email,
                    "updated_at": now,
                }
                if not is_admin:
                    summary["customer_name"] = sender_name
                increment = 1 if is_admin else 0

                updated = await Conversation.filter(customer_email=customer_email).using_db(conn).update(
                    unread_count=F("unread_count") + increment,
                    **summary,
                )
                if not updated:
                    summary.setdefault("customer_name", customer_email)
                    await Conversation.create(
                        customer_email=customer_email,
                        unread_count=increment,
                        using_db=conn,
                        **summary,
                    )
            return message
        except IntegrityError as e:
            # Concurrent duplicate key or concurrent first message of a conversation
            log.warning(f"Send from {sender_email} collided (attempt {attempt}/{SEND_MESSAGE_ATTEMPTS}): {e}")

    raise ConflictError("Message could not be stored due to concurrent updates, please retry.")


async def list_messages(identifier: str) -> List[ChatMessage]:
    """Full thread of a participant, oldest first."""
    return await ChatMessage.filter(
        Q(sender_email=identifier) | Q(receiver_email=identifier)
    ).order_by("timestamp", "id")


async def list_conversations() -> List[Conversation]:
    """Admin inbox, most recent activity first."""
    return await Conversation.all().order_by("-last_message_time", "customer_email")


async def mark_customer_read(customer_email: str) -> int:
    """
    Marks every unread message addressed to the customer as read and clears the
    conversation counter. Returns how many messages changed (0 when already read).
    """
    now = timezone.now()
    async with in_transaction() as conn:
        modified = await ChatMessage.filter(receiver_email=customer_email, is_read=False).using_db(conn).update(
            is_read=True, read_at=now
        )
        await Conversation.filter(customer_email=customer_email).using_db(conn).update(
            unread_count=0, updated_at=now
        )
    log.info(f"Marked {modified} message(s) as read for customer {customer_email}.")
    return modified


async def mark_admin_read(customer_email: str, directory: UserDirectory) -> int:
    """
    Marks the customer's unread messages to any admin as read.

    The conversation counter is cleared here as well, even though it counts
    messages waiting for the customer; both read actions share that field.
    """
    admins = await directory.admin_emails()
    now = timezone.now()
    async with in_transaction() as conn:
        modified = await ChatMessage.filter(
            sender_email=customer_email, receiver_email__in=admins, is_read=False
        ).using_db(conn).update(is_read=True, read_at=now)
        await Conversation.filter(customer_email=customer_email).using_db(conn).update(
            unread_count=0, updated_at=now
        )
    log.info(f"Marked {modified} admin message(s) as read for conversation {customer_email}.")
    return modified


async def unread_count(identifier: str) -> int:
    """Live count of unread messages addressed to `identifier`."""
    return await ChatMessage.filter(receiver_email=identifier, is_read=False).count()


async def admin_total_unread(directory: UserDirectory) -> int:
    """Live count of unread messages addressed to anyone in the admin pool."""
    admins = await directory.admin_emails()
    return await ChatMessage.filter(receiver_email__in=admins, is_read=False).count()
