from tortoise import fields, models
import uuid


class CustomerProfile(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    user_id = fields.UUIDField(unique=True)
    name = fields.CharField(max_length=255)
    age = fields.IntField(null=True)
    gender = fields.CharField(max_length=32, null=True)
    city = fields.CharField(max_length=128, null=True)
    state = fields.CharField(max_length=128, null=True)
    country = fields.CharField(max_length=128, null=True)
    mobile_number = fields.CharField(max_length=10, null=True)
    mobile_verified = fields.BooleanField(default=False)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "customer_profiles"
