from pydantic import BaseModel, Field
from typing import List, Optional
import uuid
from decimal import Decimal

from campuseats.models.catalog import MenuItem
from campuseats.services.catalog_service import OutletMenu, RatedOutlet


class OutletResponse(BaseModel):
    id: uuid.UUID
    name: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    cuisine_type: Optional[str] = None
    delivery_time: Optional[str] = None
    is_open: bool
    rating: float = Field(..., description="Average of customer ratings, else the outlet's listed rating.")
    rating_count: int = 0


class MenuItemResponse(BaseModel):
    id: uuid.UUID
    outlet_id: uuid.UUID
    name: str
    description: Optional[str] = None
    price: Decimal
    image_url: Optional[str] = None
    category: Optional[str] = None
    is_vegetarian: bool
    is_available: bool
    rating: Optional[float] = None
    rating_count: int = 0


class OutletMenuResponse(BaseModel):
    outlet: OutletResponse
    categories: List[str]
    items: List[MenuItemResponse]


def to_outlet_response(rated: RatedOutlet) -> OutletResponse:
    o = rated.outlet
    return OutletResponse(
        id=o.id,
        name=o.name,
        description=o.description,
        image_url=o.image_url,
        cuisine_type=o.cuisine_type,
        delivery_time=o.delivery_time,
        is_open=o.is_open,
        rating=rated.rating,
        rating_count=rated.rating_count,
    )


def to_menu_item_response(item: MenuItem, rating=None) -> MenuItemResponse:
    avg, count = rating if rating else (None, 0)
    return MenuItemResponse(
        id=item.id,
        outlet_id=item.outlet_id,
        name=item.name,
        description=item.description,
        price=item.price,
        image_url=item.image_url,
        category=item.category,
        is_vegetarian=item.is_vegetarian,
        is_available=item.is_available,
        rating=avg,
        rating_count=count,
    )


def to_outlet_menu_response(menu: OutletMenu) -> OutletMenuResponse:
    return OutletMenuResponse(
        outlet=to_outlet_response(menu.outlet),
        categories=menu.categories,
        items=[to_menu_item_response(i, menu.item_ratings.get(i.id)) for i in menu.items],
    )
