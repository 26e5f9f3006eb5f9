from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID

from campuseats.models.catalog import MenuItem
from campuseats.services.session_service import SIGNED_OUT


@dataclass
class CartItem:
    """Snapshot of a menu item taken when it was put in the cart."""
    menu_item_id: UUID
    outlet_id: UUID
    outlet_name: str
    name: str
    price: Decimal
    quantity: int = 1
    image_url: Optional[str] = None
    is_vegetarian: bool = False

    @classmethod
    def from_menu_item(cls, item: MenuItem, outlet_name: str) -> "CartItem":
        return cls(
            menu_item_id=item.id,
            outlet_id=item.outlet_id,
            outlet_name=outlet_name,
            name=item.name,
            price=Decimal(item.price),
            image_url=item.image_url,
            is_vegetarian=item.is_vegetarian,
        )

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


class Cart:
    """
    Items keyed by menu item id, in insertion order. Items from different
    outlets may coexist; checkout takes the outlet of the first item.
    """

    def __init__(self):
        self._items: Dict[UUID, CartItem] = {}

    @property
    def items(self) -> List[CartItem]:
        return list(self._items.values())

    def add_item(self, item: CartItem) -> CartItem:
        existing = self._items.get(item.menu_item_id)
        if existing:
            existing.quantity += 1
            return existing
        item.quantity = 1
        self._items[item.menu_item_id] = item
        return item

    def update_quantity(self, menu_item_id: UUID, quantity: int) -> Optional[CartItem]:
        if quantity <= 0:
            self.remove_item(menu_item_id)
            return None
        item = self._items.get(menu_item_id)
        if item is None:
            raise KeyError(menu_item_id)
        item.quantity = quantity
        return item

    def remove_item(self, menu_item_id: UUID) -> None:
        self._items.pop(menu_item_id, None)

    def clear(self) -> None:
        self._items.clear()

    def total_items(self) -> int:
        return sum(item.quantity for item in self._items.values())

    def total_price(self) -> Decimal:
        return sum((item.line_total for item in self._items.values()), Decimal("0"))

    def is_empty(self) -> bool:
        return not self._items

    @property
    def outlet_id(self) -> Optional[UUID]:
        for item in self._items.values():
            return item.outlet_id
        return None


class CartStore:
    """One cart per session token, held in process memory."""

    def __init__(self):
        self._carts: Dict[str, Cart] = {}

    def get(self, token: str) -> Cart:
        return self._carts.setdefault(token, Cart())

    def drop(self, token: str) -> None:
        self._carts.pop(token, None)

    async def on_auth_change(self, event: str, user, token: str) -> None:
        """Auth listener: a signed-out session loses its cart."""
        if event == SIGNED_OUT:
            self.drop(token)


cart_store = CartStore()


def get_cart_store() -> CartStore:
    return cart_store
