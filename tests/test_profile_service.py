import pytest
from unittest.mock import AsyncMock
from uuid import uuid4

from pydantic import ValidationError

from campuseats.models.auth import Role
from campuseats.models.partner import DeliveryPartnerStatus
from campuseats.schemas.profile import ProfileRequest, ProfileUpdate
from campuseats.services import profile_service, role_service
from campuseats.services.otp import SmsGateway


def test_mobile_validation():
    assert profile_service.validate_mobile("9876543210") == "9876543210"
    for bad in ("98765", "98765432101", "98765-4321", "", None):
        with pytest.raises(ValueError):
            profile_service.validate_mobile(bad)


def test_profile_request_rejects_short_mobile():
    with pytest.raises(ValidationError):
        ProfileRequest(name="Asha", mobile_number="98765")
    assert ProfileRequest(name="Asha", mobile_number="9876543210").mobile_number == "9876543210"


@pytest.mark.asyncio
async def test_upsert_profile_grants_customer_role(db):
    user_id = uuid4()
    profile = await profile_service.upsert_profile(user_id, {"name": "Asha", "mobile_number": "9876543210", "city": "Pune"})
    assert profile.mobile_verified is False
    assert await role_service.has_role(user_id, Role.CUSTOMER)

    again = await profile_service.upsert_profile(user_id, {"name": "Asha K", "mobile_number": "9876543210"})
    assert again.id == profile.id
    assert again.name == "Asha K"


@pytest.mark.asyncio
async def test_upsert_profile_rejects_bad_mobile_before_writing(db):
    user_id = uuid4()
    with pytest.raises(ValueError):
        await profile_service.upsert_profile(user_id, {"name": "Asha", "mobile_number": "98765"})
    assert await profile_service.get_profile(user_id) is None
    assert not await role_service.has_role(user_id, Role.CUSTOMER)


@pytest.mark.asyncio
async def test_missing_profile_is_empty_state(db):
    assert await profile_service.get_profile(uuid4()) is None
    assert await profile_service.update_profile(uuid4(), {"city": "Pune"}) is None


@pytest.mark.asyncio
async def test_mobile_otp_flow(db):
    user_id = uuid4()
    gateway = SmsGateway()
    await profile_service.upsert_profile(user_id, {"name": "Asha", "mobile_number": "9876543210"})

    await profile_service.request_mobile_otp(user_id, gateway)
    with pytest.raises(ValueError, match="Invalid"):
        await profile_service.verify_mobile(user_id, "not-it", gateway)

    challenge = gateway._challenges["9876543210"]
    profile = await profile_service.verify_mobile(user_id, challenge.code, gateway)
    assert profile.mobile_verified is True

    # A verified code cannot be replayed
    with pytest.raises(ValueError):
        await profile_service.verify_mobile(user_id, challenge.code, gateway)


@pytest.mark.asyncio
async def test_changing_mobile_clears_verification(db):
    user_id = uuid4()
    await profile_service.upsert_profile(user_id, {"name": "Asha", "mobile_number": "9876543210"})
    gateway = AsyncMock(spec=SmsGateway)
    gateway.verify_otp.return_value = True
    await profile_service.verify_mobile(user_id, "123456", gateway)

    profile = await profile_service.update_profile(user_id, {"mobile_number": "9123456780"})
    assert profile.mobile_verified is False


@pytest.mark.asyncio
async def test_removing_mobile_clears_verification(db):
    user_id = uuid4()
    await profile_service.upsert_profile(user_id, {"name": "Asha", "mobile_number": "9876543210"})
    gateway = AsyncMock(spec=SmsGateway)
    gateway.verify_otp.return_value = True
    await profile_service.verify_mobile(user_id, "123456", gateway)

    profile = await profile_service.update_profile(user_id, {"mobile_number": None})
    assert profile.mobile_number is None
    assert profile.mobile_verified is False


@pytest.mark.asyncio
async def test_update_profile_rejects_null_name_before_writing(db):
    user_id = uuid4()
    await profile_service.upsert_profile(user_id, {"name": "Asha", "mobile_number": "9876543210"})
    with pytest.raises(ValueError):
        await profile_service.update_profile(user_id, {"name": None, "city": "Pune"})
    profile = await profile_service.get_profile(user_id)
    assert profile.name == "Asha"
    assert profile.city is None


def test_profile_update_rejects_null_name():
    with pytest.raises(ValidationError):
        ProfileUpdate.model_validate({"name": None})
    assert ProfileUpdate.model_validate({"mobile_number": None}).model_dump(exclude_unset=True) == {"mobile_number": None}


@pytest.mark.asyncio
async def test_expired_otp_is_rejected():
    gateway = SmsGateway(ttl_seconds=-1)
    challenge = await gateway.send_otp("9876543210")
    assert await gateway.verify_otp("9876543210", challenge.code) is False


@pytest.mark.asyncio
async def test_delivery_partner_registration_and_availability(db):
    user_id = uuid4()
    partner = await profile_service.register_delivery_partner(user_id, "Ravi", "9876500000", "bike")
    assert partner.status == DeliveryPartnerStatus.OFFLINE
    assert partner.is_accepting_orders is False
    assert await role_service.has_role(user_id, Role.DELIVERY_PARTNER)

    with pytest.raises(ValueError):
        await profile_service.register_delivery_partner(user_id, "Ravi")

    partner = await profile_service.set_accepting_orders(partner, True)
    assert partner.status == DeliveryPartnerStatus.AVAILABLE

    partner.status = DeliveryPartnerStatus.BUSY
    partner = await profile_service.set_accepting_orders(partner, False)
    assert partner.status == DeliveryPartnerStatus.BUSY
    assert partner.is_accepting_orders is False


@pytest.mark.asyncio
async def test_restaurant_application_needs_approval(db):
    user_id = uuid4()
    await profile_service.register_restaurant_partner(user_id, "Main Canteen")
    assert not await role_service.has_role(user_id, Role.RESTAURANT_PARTNER)
    assert (await profile_service.get_restaurant_partner(user_id)).restaurant_name == "Main Canteen"
