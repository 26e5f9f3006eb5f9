from pydantic import BaseModel, Field, field_validator
from typing import Dict, List, Optional
import uuid
from datetime import datetime
from decimal import Decimal

from campuseats.models.order import Order, OrderStatus


class CheckoutRequest(BaseModel):
    """Schema for the checkout form. Cart contents come from the session's cart."""
    customer_name: str = Field(..., min_length=1, max_length=255)
    customer_phone: str
    delivery_address: str = Field(..., min_length=1)

    @field_validator("customer_phone")
    @classmethod
    def phone_is_ten_digits(cls, v: str) -> str:
        v = v.strip()
        if not (len(v) == 10 and v.isdigit()):
            raise ValueError("Please enter a valid 10-digit mobile number")
        return v


class OrderItemResponse(BaseModel):
    """Schema for an item inside the detailed order response."""
    menu_item_id: Optional[uuid.UUID] = None
    item_name: str
    quantity: int
    price: Decimal


class OrderResponse(BaseModel):
    """Schema for an order as shown on every dashboard."""
    id: uuid.UUID
    user_id: Optional[uuid.UUID] = None
    outlet_id: Optional[uuid.UUID] = None
    outlet_name: Optional[str] = None
    customer_name: str
    customer_phone: str
    delivery_address: str
    total_amount: Decimal
    status: OrderStatus
    delivery_partner_id: Optional[uuid.UUID] = None
    delivery_partner_name: Optional[str] = None
    delivery_partner_phone: Optional[str] = None
    items: List[OrderItemResponse] = []
    created_at: datetime


class RestaurantOrdersResponse(BaseModel):
    """Kitchen dashboard: orders split into active and history, plus delivered revenue."""
    active: List[OrderResponse]
    history: List[OrderResponse]
    revenue: Decimal


class RatingRequest(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    review: Optional[str] = None
    items: Dict[uuid.UUID, int] = Field(default_factory=dict, description="menu_item_id -> stars")


class RatingResponse(BaseModel):
    id: uuid.UUID
    order_id: uuid.UUID
    outlet_id: uuid.UUID
    menu_item_id: Optional[uuid.UUID] = None
    rating: int
    review: Optional[str] = None


def to_order_response(order: Order) -> OrderResponse:
    """Expects `items`, `outlet` and `delivery_partner` to be prefetched."""
    outlet = order.outlet
    courier = order.delivery_partner
    return OrderResponse(
        id=order.id,
        user_id=order.user_id,
        outlet_id=order.outlet_id,
        outlet_name=outlet.name if outlet else None,
        customer_name=order.customer_name,
        customer_phone=order.customer_phone,
        delivery_address=order.delivery_address,
        total_amount=order.total_amount,
        status=order.status,
        delivery_partner_id=order.delivery_partner_id,
        delivery_partner_name=courier.name if courier else None,
        delivery_partner_phone=courier.phone if courier else None,
        items=[
            OrderItemResponse(
                menu_item_id=i.menu_item_id, item_name=i.item_name, quantity=i.quantity, price=i.price
            )
            for i in order.items
        ],
        created_at=order.created_at,
    )
