from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
import uuid
from decimal import Decimal

from campuseats.models.partner import ApprovalStatus, DeliveryPartnerStatus
from campuseats.services.profile_service import validate_mobile


class ProfileRequest(BaseModel):
    """Onboarding form. Name and a 10-digit mobile number are required."""
    name: str = Field(..., min_length=1, max_length=255)
    mobile_number: str
    age: Optional[int] = Field(None, ge=1, le=120)
    gender: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None

    @field_validator("mobile_number")
    @classmethod
    def mobile_is_ten_digits(cls, v: str) -> str:
        return validate_mobile(v)


class ProfileUpdate(BaseModel):
    """Settings screen; only the fields sent are changed."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    mobile_number: Optional[str] = None
    age: Optional[int] = Field(None, ge=1, le=120)
    gender: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_null(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("Name cannot be empty")
        return v

    @field_validator("mobile_number")
    @classmethod
    def mobile_is_ten_digits(cls, v: Optional[str]) -> Optional[str]:
        return validate_mobile(v) if v is not None else v


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    name: str
    age: Optional[int] = None
    gender: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    mobile_number: Optional[str] = None
    mobile_verified: bool


class VerifyMobileRequest(BaseModel):
    code: str = Field(..., min_length=4, max_length=8)


class DeliveryPartnerRegistration(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    phone: Optional[str] = None
    vehicle_type: Optional[str] = None


class AvailabilityUpdate(BaseModel):
    is_accepting_orders: bool


class DeliveryPartnerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    name: str
    phone: Optional[str] = None
    vehicle_type: Optional[str] = None
    status: DeliveryPartnerStatus
    is_accepting_orders: bool
    total_deliveries: int
    earnings: Decimal


class RestaurantPartnerRegistration(BaseModel):
    restaurant_name: str = Field(..., min_length=1, max_length=255)
    contact_phone: Optional[str] = None


class RestaurantPartnerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    outlet_id: Optional[uuid.UUID] = None
    restaurant_name: str
    contact_phone: Optional[str] = None
    status: ApprovalStatus
