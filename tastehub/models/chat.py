from tortoise import fields, models
import uuid


class ChatMessage(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    sender_email = fields.CharField(max_length=255)
    sender_name = fields.CharField(max_length=255, null=True)
    receiver_email = fields.CharField(max_length=255)
    text = fields.TextField(default="")
    file = fields.CharField(max_length=1024, null=True) # Attachment reference
    is_admin = fields.BooleanField(default=False)
    is_read = fields.BooleanField(default=False)
    timestamp = fields.DatetimeField()
    read_at = fields.DatetimeField(null=True)

    class Meta:
        table = "chat_messages"
        indexes = [
            ("sender_email",),
            ("receiver_email", "is_read"),  # Unread badges
            ("timestamp",),
        ]


class Conversation(models.Model):
    """
    Per-customer summary of the thread between a customer and the admin pool.
    `unread_count` tracks admin messages awaiting the customer.
    """
    customer_email = fields.CharField(max_length=255, primary_key=True)
    customer_name = fields.CharField(max_length=255, null=True)
    last_message = fields.TextField(default="")
    last_message_time = fields.DatetimeField()
    admin_assigned = fields.CharField(max_length=255, null=True)
    unread_count = fields.IntField(default=0)
    updated_at = fields.DatetimeField()

    class Meta:
        table = "conversations"
        indexes = [
            ("last_message_time",),  # Admin inbox ordering
        ]
