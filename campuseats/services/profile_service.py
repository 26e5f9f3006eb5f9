import logging
import re
from typing import Any, Dict, Optional
from uuid import UUID

from campuseats.models.auth import Role
from campuseats.models.partner import (
    ApprovalStatus,
    DeliveryPartner,
    DeliveryPartnerStatus,
    RestaurantPartner,
)
from campuseats.models.profile import CustomerProfile
from campuseats.services import role_service
from campuseats.services.otp import SmsGateway

log = logging.getLogger(__name__)

MOBILE_PATTERN = re.compile(r"^\d{10}$")


def validate_mobile(number: str) -> str:
    number = (number or "").strip()
    if not MOBILE_PATTERN.match(number):
        raise ValueError("Please enter a valid 10-digit mobile number")
    return number


# ----------- Customer profile -----------

async def get_profile(user_id: UUID) -> Optional[CustomerProfile]:
    return await CustomerProfile.get_or_none(user_id=user_id)


async def upsert_profile(user_id: UUID, data: Dict[str, Any]) -> CustomerProfile:
    """
    Onboarding step after sign-up: writes the profile and makes the user a
    customer. Calling it again overwrites the profile; the role grant is idempotent.
    """
    data = dict(data)
    data["mobile_number"] = validate_mobile(data.get("mobile_number"))
    if not (data.get("name") or "").strip():
        raise ValueError("Name is required")

    existing = await get_profile(user_id)
    if existing and existing.mobile_number == data["mobile_number"]:
        data.setdefault("mobile_verified", existing.mobile_verified)
    else:
        data["mobile_verified"] = False

    profile, created = await CustomerProfile.update_or_create(defaults=data, user_id=user_id)
    await role_service.grant_role(user_id, Role.CUSTOMER)
    log.info(f"Profile {'created' if created else 'updated'} for user {user_id}.")
    return profile


async def update_profile(user_id: UUID, changes: Dict[str, Any]) -> Optional[CustomerProfile]:
    """Partial update from the settings screen. Changing the number clears verification."""
    profile = await get_profile(user_id)
    if not profile:
        return None
    changes = dict(changes)
    if "name" in changes and not (changes["name"] or "").strip():
        raise ValueError("Name cannot be empty")
    if "mobile_number" in changes:
        if changes["mobile_number"] is not None:
            changes["mobile_number"] = validate_mobile(changes["mobile_number"])
        # A removed or different number is no longer verified
        if changes["mobile_number"] != profile.mobile_number:
            profile.mobile_verified = False
    for field, value in changes.items():
        setattr(profile, field, value)
    await profile.save()
    return profile


async def request_mobile_otp(user_id: UUID, gateway: SmsGateway) -> CustomerProfile:
    profile = await get_profile(user_id)
    if not profile or not profile.mobile_number:
        raise ValueError("Add a mobile number to your profile first.")
    await gateway.send_otp(profile.mobile_number)
    return profile


async def verify_mobile(user_id: UUID, code: str, gateway: SmsGateway) -> CustomerProfile:
    profile = await get_profile(user_id)
    if not profile or not profile.mobile_number:
        raise ValueError("Add a mobile number to your profile first.")
    if not await gateway.verify_otp(profile.mobile_number, code):
        raise ValueError("Invalid or expired verification code.")
    profile.mobile_verified = True
    await profile.save(update_fields=["mobile_verified"])
    log.info(f"Mobile number verified for user {user_id}.")
    return profile


# ----------- Delivery partner -----------

async def get_delivery_partner(user_id: UUID) -> Optional[DeliveryPartner]:
    return await DeliveryPartner.get_or_none(user_id=user_id)


async def register_delivery_partner(
    user_id: UUID, name: str, phone: Optional[str] = None, vehicle_type: Optional[str] = None
) -> DeliveryPartner:
    if await DeliveryPartner.filter(user_id=user_id).exists():
        raise ValueError("You are already registered as a delivery partner.")
    partner = await DeliveryPartner.create(user_id=user_id, name=name, phone=phone, vehicle_type=vehicle_type)
    await role_service.grant_role(user_id, Role.DELIVERY_PARTNER)
    log.info(f"Delivery partner {partner.id} registered for user {user_id}.")
    return partner


async def set_accepting_orders(partner: DeliveryPartner, accepting: bool) -> DeliveryPartner:
    """Going online makes an idle partner available; a busy partner stays busy until delivery."""
    partner.is_accepting_orders = accepting
    if partner.status != DeliveryPartnerStatus.BUSY:
        partner.status = DeliveryPartnerStatus.AVAILABLE if accepting else DeliveryPartnerStatus.OFFLINE
    await partner.save(update_fields=["is_accepting_orders", "status"])
    log.info(f"Delivery partner {partner.id} is {'online' if accepting else 'offline'}.")
    return partner


# ----------- Restaurant partner -----------

async def get_restaurant_partner(user_id: UUID) -> Optional[RestaurantPartner]:
    return await RestaurantPartner.filter(user_id=user_id).order_by("-created_at").first()


async def register_restaurant_partner(
    user_id: UUID, restaurant_name: str, contact_phone: Optional[str] = None
) -> RestaurantPartner:
    """Applications start pending; the role is granted when an admin approves."""
    if await RestaurantPartner.filter(user_id=user_id).exists():
        raise ValueError("You have already applied as a restaurant partner.")
    partner = await RestaurantPartner.create(
        user_id=user_id,
        restaurant_name=restaurant_name,
        contact_phone=contact_phone,
        status=ApprovalStatus.PENDING,
    )
    log.info(f"Restaurant partner application {partner.id} submitted by user {user_id}.")
    return partner
