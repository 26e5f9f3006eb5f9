from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
import uuid
from decimal import Decimal

from campuseats.models.partner import ApprovalStatus, DeliveryPartnerStatus
from campuseats.schemas.profile import DeliveryPartnerResponse, RestaurantPartnerResponse


class OutletCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    image_url: Optional[str] = None
    cuisine_type: Optional[str] = None
    delivery_time: Optional[str] = None


class OutletUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    image_url: Optional[str] = None
    cuisine_type: Optional[str] = None
    delivery_time: Optional[str] = None
    is_open: Optional[bool] = None
    rating: Optional[float] = Field(None, ge=0, le=5)


class AdminOutletResponse(BaseModel):
    """Outlet row as stored, with its listed (static) rating."""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    cuisine_type: Optional[str] = None
    delivery_time: Optional[str] = None
    is_open: bool
    rating: Optional[float] = None


class MenuItemCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    price: Decimal = Field(..., ge=0)
    image_url: Optional[str] = None
    category: Optional[str] = None
    is_vegetarian: bool = True


class MenuItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0)
    image_url: Optional[str] = None
    category: Optional[str] = None
    is_vegetarian: Optional[bool] = None
    is_available: Optional[bool] = None


class RestaurantPartnerStatusUpdate(BaseModel):
    status: ApprovalStatus
    outlet_id: Optional[uuid.UUID] = None


class DeliveryPartnerStatusUpdate(BaseModel):
    status: DeliveryPartnerStatus


class PartnersResponse(BaseModel):
    restaurant_partners: List[RestaurantPartnerResponse]
    delivery_partners: List[DeliveryPartnerResponse]
