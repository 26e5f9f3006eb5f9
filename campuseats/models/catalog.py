from tortoise import fields, models
import uuid


class Outlet(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    name = fields.CharField(max_length=255)
    description = fields.TextField(null=True)
    image_url = fields.CharField(max_length=1024, null=True)
    cuisine_type = fields.CharField(max_length=128, null=True)
    rating = fields.FloatField(null=True)  # Static fallback when no one has rated yet
    delivery_time = fields.CharField(max_length=64, null=True)  # Display label, e.g. "20-25 min"
    is_open = fields.BooleanField(default=True)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "outlets"
        indexes = [
            ("rating",),  # Home listing is ordered by rating
        ]


class MenuItem(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    outlet = fields.ForeignKeyField("models.Outlet", related_name="menu_items", on_delete=fields.CASCADE)
    name = fields.CharField(max_length=255)
    description = fields.TextField(null=True)
    price = fields.DecimalField(max_digits=10, decimal_places=2)
    image_url = fields.CharField(max_length=1024, null=True)
    category = fields.CharField(max_length=128, null=True)
    is_vegetarian = fields.BooleanField(default=True)
    is_available = fields.BooleanField(default=True)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "menu_items"
        indexes = [
            ("outlet_id",),                  # Outlet menu queries
            ("outlet_id", "is_available"),   # Composite: outlet's orderable items
        ]
