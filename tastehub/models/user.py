from tortoise import fields, models


class User(models.Model):
    """Profile record owned by the user CRUD routes; read here only to resolve the admin pool."""
    id = fields.IntField(primary_key=True)
    email = fields.CharField(max_length=255, unique=True)
    name = fields.CharField(max_length=255, null=True)
    role = fields.CharField(max_length=32, default="customer")
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "users"
        indexes = [
            ("role",),
        ]
