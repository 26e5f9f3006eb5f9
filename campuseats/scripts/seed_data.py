# campuseats/scripts/seed_data.py
import asyncio
import os
from tortoise import Tortoise
from werkzeug.security import generate_password_hash
from campuseats.core.db import init_db
from campuseats.models import MenuItem, Outlet, Role, User, UserRole

ADMIN_EMAIL = os.getenv("SEED_ADMIN_EMAIL", "admin@campuseats.local")
ADMIN_PASSWORD = os.getenv("SEED_ADMIN_PASSWORD", "change-me")

OUTLETS = [
    {
        "name": "Main Canteen",
        "cuisine_type": "North Indian",
        "delivery_time": "20-25 min",
        "rating": 4.2,
        "menu": [
            ("Paneer Wrap", "149.00", "Wraps", True),
            ("Chole Bhature", "120.00", "Mains", True),
            ("Masala Chai", "20.00", "Beverages", True),
        ],
    },
    {
        "name": "Night Owl Cafe",
        "cuisine_type": "Fast Food",
        "delivery_time": "15-20 min",
        "rating": 4.5,
        "menu": [
            ("Chicken Burger", "159.00", "Burgers", False),
            ("Veg Burger", "99.00", "Burgers", True),
            ("Cold Coffee", "79.00", "Beverages", True),
        ],
    },
    {
        "name": "South Block Dosa Corner",
        "cuisine_type": "South Indian",
        "delivery_time": "25-30 min",
        "rating": 4.0,
        "menu": [
            ("Masala Dosa", "89.00", "Dosa", True),
            ("Idli Sambar", "60.00", "Breakfast", True),
            ("Filter Coffee", "30.00", "Beverages", True),
        ],
    },
]


async def seed():
    # Admin account (password only set on first run)
    admin, created = await User.get_or_create(
        email=ADMIN_EMAIL, defaults={"password_hash": generate_password_hash(ADMIN_PASSWORD)}
    )
    await UserRole.get_or_create(user_id=admin.id, role=Role.ADMIN)
    print("Admin:", admin.email, "(created)" if created else "(exists)")

    for spec in OUTLETS:
        outlet, _ = await Outlet.get_or_create(
            name=spec["name"],
            defaults={
                "cuisine_type": spec["cuisine_type"],
                "delivery_time": spec["delivery_time"],
                "rating": spec["rating"],
                "is_open": True,
            },
        )
        for name, price, category, veg in spec["menu"]:
            await MenuItem.get_or_create(
                outlet=outlet,
                name=name,
                defaults={"price": price, "category": category, "is_vegetarian": veg, "is_available": True},
            )
        print("Outlet:", outlet.name, outlet.id)

    print("Catalog seeded.")


async def main():
    await init_db()
    await seed()
    await Tortoise.close_connections()

if __name__ == "__main__":
    asyncio.run(main())
