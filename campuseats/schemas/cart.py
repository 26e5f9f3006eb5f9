from pydantic import BaseModel
from typing import List, Optional
import uuid
from decimal import Decimal

from campuseats.services.cart import Cart


class AddCartItemRequest(BaseModel):
    menu_item_id: uuid.UUID


class UpdateCartItemRequest(BaseModel):
    """A quantity of zero or less removes the line."""
    quantity: int


class CartItemResponse(BaseModel):
    menu_item_id: uuid.UUID
    outlet_id: uuid.UUID
    outlet_name: str
    name: str
    price: Decimal
    quantity: int
    line_total: Decimal
    image_url: Optional[str] = None
    is_vegetarian: bool


class CartResponse(BaseModel):
    items: List[CartItemResponse]
    total_items: int
    total_price: Decimal


def to_cart_response(cart: Cart) -> CartResponse:
    return CartResponse(
        items=[
            CartItemResponse(
                menu_item_id=i.menu_item_id,
                outlet_id=i.outlet_id,
                outlet_name=i.outlet_name,
                name=i.name,
                price=i.price,
                quantity=i.quantity,
                line_total=i.line_total,
                image_url=i.image_url,
                is_vegetarian=i.is_vegetarian,
            )
            for i in cart.items
        ],
        total_items=cart.total_items(),
        total_price=cart.total_price(),
    )
