import uuid
from decimal import Decimal
from types import SimpleNamespace

import pytest
import pytest_asyncio

from campuseats.core.db import close_db, init_db
from campuseats.models import (
    ApprovalStatus,
    DeliveryPartner,
    MenuItem,
    Outlet,
    RestaurantPartner,
)
from campuseats.services.cart import Cart, CartItem


@pytest_asyncio.fixture
async def db():
    """Fresh in-memory SQLite database per test."""
    await init_db("sqlite://:memory:")
    yield
    await close_db()


@pytest_asyncio.fixture
async def world(db):
    """
    One outlet with two dishes, a customer, an online courier and an
    approved kitchen account linked to the outlet.
    """
    outlet = await Outlet.create(name="Main Canteen", cuisine_type="North Indian", rating=4.2)
    thali = await MenuItem.create(outlet=outlet, name="Veg Thali", price=Decimal("125.00"), category="Mains")
    chai = await MenuItem.create(outlet=outlet, name="Masala Chai", price=Decimal("20.00"), category="Beverages")

    courier = await DeliveryPartner.create(
        user_id=uuid.uuid4(), name="Ravi", phone="9876500000", is_accepting_orders=True
    )
    kitchen = await RestaurantPartner.create(
        user_id=uuid.uuid4(), outlet=outlet, restaurant_name="Main Canteen", status=ApprovalStatus.APPROVED
    )
    return SimpleNamespace(
        outlet=outlet,
        thali=thali,
        chai=chai,
        courier=courier,
        kitchen=kitchen,
        customer_id=uuid.uuid4(),
    )


@pytest.fixture
def make_cart():
    def _make(*entries):
        """entries: (menu_item, outlet_name, quantity)"""
        cart = Cart()
        for item, outlet_name, quantity in entries:
            cart.add_item(CartItem.from_menu_item(item, outlet_name))
            cart.update_quantity(item.id, quantity)
        return cart

    return _make
