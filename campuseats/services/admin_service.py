import logging
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from campuseats.core.config import DEFAULT_OUTLET_RATING
from campuseats.models.auth import Role
from campuseats.models.catalog import MenuItem, Outlet
from campuseats.models.partner import (
    ApprovalStatus,
    DeliveryPartner,
    DeliveryPartnerStatus,
    RestaurantPartner,
)
from campuseats.services import role_service

log = logging.getLogger(__name__)


# ----------- Outlets -----------

async def list_outlets() -> List[Outlet]:
    return await Outlet.all().order_by("name")


async def create_outlet(data: Dict[str, Any]) -> Outlet:
    data = {"is_open": True, "rating": DEFAULT_OUTLET_RATING, **data}
    outlet = await Outlet.create(**data)
    log.info(f"Outlet {outlet.id} ({outlet.name}) created.")
    return outlet


async def update_outlet(outlet_id: UUID, changes: Dict[str, Any]) -> Optional[Outlet]:
    outlet = await Outlet.get_or_none(id=outlet_id)
    if not outlet:
        return None
    for field, value in changes.items():
        setattr(outlet, field, value)
    await outlet.save()
    return outlet


async def delete_outlet(outlet_id: UUID) -> bool:
    """Removes the outlet and, by cascade, its menu. Past orders keep their snapshot lines."""
    outlet = await Outlet.get_or_none(id=outlet_id)
    if not outlet:
        return False
    await outlet.delete()
    log.info(f"Outlet {outlet_id} deleted.")
    return True


# ----------- Menu items -----------

async def list_menu_items(outlet_id: UUID) -> List[MenuItem]:
    return await MenuItem.filter(outlet_id=outlet_id).order_by("category", "name")


async def create_menu_item(outlet_id: UUID, data: Dict[str, Any]) -> MenuItem:
    if not await Outlet.filter(id=outlet_id).exists():
        raise LookupError(f"Outlet {outlet_id} not found")
    if data.get("price") is not None and data["price"] < 0:
        raise ValueError("Price cannot be negative.")
    data = {"is_available": True, **data}
    return await MenuItem.create(outlet_id=outlet_id, **data)


async def update_menu_item(item_id: UUID, changes: Dict[str, Any]) -> Optional[MenuItem]:
    item = await MenuItem.get_or_none(id=item_id)
    if not item:
        return None
    if changes.get("price") is not None and changes["price"] < 0:
        raise ValueError("Price cannot be negative.")
    for field, value in changes.items():
        setattr(item, field, value)
    await item.save()
    return item


async def delete_menu_item(item_id: UUID) -> bool:
    item = await MenuItem.get_or_none(id=item_id)
    if not item:
        return False
    await item.delete()
    return True


# ----------- Partners -----------

async def list_partners() -> Tuple[List[RestaurantPartner], List[DeliveryPartner]]:
    restaurant = await RestaurantPartner.all().order_by("-created_at")
    delivery = await DeliveryPartner.all().order_by("-created_at")
    return restaurant, delivery


async def set_restaurant_partner_status(
    partner_id: UUID, status: ApprovalStatus, outlet_id: Optional[UUID] = None
) -> Optional[RestaurantPartner]:
    """Approval grants the restaurant_partner role; it can also link the partner to an outlet."""
    partner = await RestaurantPartner.get_or_none(id=partner_id)
    if not partner:
        return None
    if outlet_id is not None:
        if not await Outlet.filter(id=outlet_id).exists():
            raise LookupError(f"Outlet {outlet_id} not found")
        partner.outlet_id = outlet_id
    partner.status = ApprovalStatus(status)
    await partner.save()

    if partner.status == ApprovalStatus.APPROVED:
        await role_service.grant_role(partner.user_id, Role.RESTAURANT_PARTNER)
    log.info(f"Restaurant partner {partner.id} marked {partner.status.value}.")
    return partner


async def set_delivery_partner_status(partner_id: UUID, status: DeliveryPartnerStatus) -> Optional[DeliveryPartner]:
    partner = await DeliveryPartner.get_or_none(id=partner_id)
    if not partner:
        return None
    partner.status = DeliveryPartnerStatus(status)
    await partner.save(update_fields=["status"])
    log.info(f"Delivery partner {partner.id} marked {partner.status.value}.")
    return partner
