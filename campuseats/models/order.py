from enum import Enum
from tortoise import fields, models
import uuid


class OrderStatus(str, Enum):
    PENDING = "pending"  # Placed by the customer, waiting for a delivery partner
    CONFIRMED = "confirmed"  # Delivery partner accepted, kitchen can see it
    PREPARING = "preparing"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class Order(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    user_id = fields.UUIDField(null=True)
    outlet = fields.ForeignKeyField(
        "models.Outlet", related_name="orders", null=True, on_delete=fields.SET_NULL
    )
    # Contact details are copied at checkout so later profile edits don't rewrite history
    customer_name = fields.CharField(max_length=255)
    customer_phone = fields.CharField(max_length=32)
    delivery_address = fields.TextField()
    total_amount = fields.DecimalField(max_digits=12, decimal_places=2, default=0)
    status = fields.CharEnumField(OrderStatus, default=OrderStatus.PENDING)
    delivery_partner = fields.ForeignKeyField(
        "models.DeliveryPartner", related_name="orders", null=True, on_delete=fields.SET_NULL
    )
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "orders"
        indexes = [
            ("outlet_id",),                        # Restaurant dashboard
            ("status",),                           # Status-based filtering
            ("user_id",),                          # Customer order history
            ("delivery_partner_id",),              # Partner's own orders
            ("status", "delivery_partner_id"),     # Composite: unassigned pending orders
            ("created_at",),
        ]


class OrderItem(models.Model):
    """Line snapshot taken at checkout. Never updated afterwards."""
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    order = fields.ForeignKeyField("models.Order", related_name="items", on_delete=fields.CASCADE)
    menu_item_id = fields.UUIDField(null=True)
    outlet_id = fields.UUIDField()
    item_name = fields.CharField(max_length=255)
    quantity = fields.IntField()
    price = fields.DecimalField(max_digits=10, decimal_places=2)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "order_items"
        indexes = [
            ("order_id",),  # Order line items
        ]
