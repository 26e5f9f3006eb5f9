from tortoise import fields, models
import uuid


class Rating(models.Model):
    """
    A star rating left by a customer for a delivered order.
    menu_item_id is NULL for the overall order rating.
    """
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    user_id = fields.UUIDField()
    order_id = fields.UUIDField()
    outlet_id = fields.UUIDField()
    menu_item_id = fields.UUIDField(null=True)
    rating = fields.SmallIntField()
    review = fields.TextField(null=True)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "ratings"
        unique_together = (("user_id", "order_id", "menu_item_id"),)
        indexes = [
            ("outlet_id",),  # Outlet rating aggregation
        ]
