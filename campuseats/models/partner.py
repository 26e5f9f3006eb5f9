from enum import Enum
from tortoise import fields, models
import uuid


class ApprovalStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class DeliveryPartnerStatus(str, Enum):
    AVAILABLE = "available"
    BUSY = "busy"
    OFFLINE = "offline"


class RestaurantPartner(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    user_id = fields.UUIDField()
    outlet = fields.ForeignKeyField(
        "models.Outlet", related_name="partners", null=True, on_delete=fields.SET_NULL
    )
    restaurant_name = fields.CharField(max_length=255)
    contact_phone = fields.CharField(max_length=32, null=True)
    status = fields.CharEnumField(ApprovalStatus, default=ApprovalStatus.PENDING)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "restaurant_partners"
        indexes = [
            ("user_id",),
            ("outlet_id",),  # Kitchen fan-out on order acceptance
        ]


class DeliveryPartner(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    user_id = fields.UUIDField(unique=True)
    name = fields.CharField(max_length=255)
    phone = fields.CharField(max_length=32, null=True)
    vehicle_type = fields.CharField(max_length=64, null=True)
    status = fields.CharEnumField(DeliveryPartnerStatus, default=DeliveryPartnerStatus.OFFLINE)
    is_accepting_orders = fields.BooleanField(default=False)
    total_deliveries = fields.IntField(default=0)
    earnings = fields.DecimalField(max_digits=12, decimal_places=2, default=0)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "delivery_partners"
