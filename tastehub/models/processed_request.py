from tortoise import fields, models
import uuid


class ProcessedRequest(models.Model):
    """
    Idempotency table for chat sends. Stores the client supplied key together with
    the message it produced so a retried send replays instead of inserting again.
    Keys are scoped to the sender.
    """
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    sender_email = fields.CharField(max_length=255)
    key = fields.CharField(max_length=128)
    message_id = fields.UUIDField()
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "processed_requests"
        unique_together = (("sender_email", "key"),)
