from enum import Enum
from tortoise import fields, models
import uuid


class Role(str, Enum):
    ADMIN = "admin"
    RESTAURANT_PARTNER = "restaurant_partner"
    DELIVERY_PARTNER = "delivery_partner"
    CUSTOMER = "customer"


class User(models.Model):
    """Authenticated identity. Every other table refers to it by plain user_id."""
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    email = fields.CharField(max_length=255, unique=True)
    password_hash = fields.CharField(max_length=255)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "users"


class Session(models.Model):
    """Opaque bearer token issued at sign-in, removed at sign-out."""
    token = fields.CharField(max_length=64, primary_key=True)
    user = fields.ForeignKeyField("models.User", related_name="sessions", on_delete=fields.CASCADE)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "sessions"


class UserRole(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    user_id = fields.UUIDField()
    role = fields.CharEnumField(Role)

    class Meta:
        table = "user_roles"
        unique_together = (("user_id", "role"),)
        indexes = [
            ("user_id",),  # Role lookup on every view resolution
        ]
