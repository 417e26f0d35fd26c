from tortoise import fields, models
from tortoise.validators import MinValueValidator
import uuid


class FoodItem(models.Model):
    """
    A food listing. Created and edited by the listing CRUD routes; the order
    processor only touches `quantity` and `purchase_count` through the inventory ledger.
    """
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    food_name = fields.CharField(max_length=255)
    food_image = fields.CharField(max_length=1024, null=True)
    category = fields.CharField(max_length=128, null=True)
    price = fields.DecimalField(max_digits=12, decimal_places=2)
    quantity = fields.IntField(default=0, validators=[MinValueValidator(0)]) # Remaining stock
    purchase_count = fields.IntField(default=0, validators=[MinValueValidator(0)]) # Cumulative units sold
    added_by_email = fields.CharField(max_length=255)
    added_by_name = fields.CharField(max_length=255, null=True)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "foods"
        indexes = [
            ("added_by_email",),  # "My foods" listing
        ]
