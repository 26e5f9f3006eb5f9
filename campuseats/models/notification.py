from enum import Enum
from tortoise import fields, models
import uuid


class NotificationType(str, Enum):
    DELIVERY_ASSIGNED = "delivery_assigned"
    RESTAURANT_NOTIFIED = "restaurant_notified"
    ORDER_ACCEPTED = "order_accepted"
    ORDER_DELIVERED = "order_delivered"


class Notification(models.Model):
    """
    Inbox row written as a side effect of an order status transition.
    Only the recipient reads it and flips is_read.
    """
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    user_id = fields.UUIDField()
    title = fields.CharField(max_length=255)
    message = fields.TextField()
    type = fields.CharEnumField(NotificationType)
    order_id = fields.UUIDField(null=True)
    is_read = fields.BooleanField(default=False)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "notifications"
        indexes = [
            ("user_id",),
            ("user_id", "is_read"),  # Unread badge
            ("created_at",),
        ]
