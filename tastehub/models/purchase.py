from tortoise import fields, models
import uuid


class Purchase(models.Model):
    """
    A committed purchase. Item fields are a snapshot taken at purchase time;
    `food_id` is kept by value so later listing edits or deletes never touch it.
    """
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    food_id = fields.UUIDField()
    food_name = fields.CharField(max_length=255)
    food_image = fields.CharField(max_length=1024, null=True)
    price = fields.DecimalField(max_digits=12, decimal_places=2)
    quantity = fields.IntField()
    total_price = fields.DecimalField(max_digits=14, decimal_places=2)
    buyer_name = fields.CharField(max_length=255, null=True)
    buyer_email = fields.CharField(max_length=255)
    buyer_photo = fields.CharField(max_length=1024, null=True)
    delivery_address = fields.TextField()
    contact_number = fields.CharField(max_length=64)
    special_instructions = fields.TextField(default="")
    payment_method = fields.CharField(max_length=64, default="card")
    status = fields.CharField(max_length=64, default="pending") # Open label, set by admins
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "purchases"
        indexes = [
            ("buyer_email",),                # Customer order history
            ("created_at",),                 # Admin listing, newest first
            ("buyer_email", "created_at"),
        ]
