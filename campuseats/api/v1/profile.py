import logging
from fastapi import APIRouter, Depends, HTTPException
from campuseats.api.deps import current_user
from campuseats.models.auth import User
from campuseats.schemas.profile import ProfileRequest, ProfileResponse, ProfileUpdate, VerifyMobileRequest
from campuseats.schemas.response import SuccessResponse
from campuseats.services import profile_service
from campuseats.services.otp import SmsGateway, get_sms_gateway

router = APIRouter()
log = logging.getLogger("uvicorn")


def _dump(profile):
    return ProfileResponse.model_validate(profile).model_dump() if profile else None


@router.get("", response_model=SuccessResponse)
async def get_profile_endpoint(user: User = Depends(current_user)):
    """The caller's profile, or null before onboarding."""
    try:
        return SuccessResponse(data=_dump(await profile_service.get_profile(user.id)))
    except Exception as e:
        log.error(f"Error fetching profile for user {user.id}: {e}")
        raise HTTPException(status_code=500, detail="Server failed to fetch the profile.")


@router.put("", response_model=SuccessResponse)
async def put_profile_endpoint(payload: ProfileRequest, user: User = Depends(current_user)):
    """Onboarding: stores the profile and grants the customer role."""
    try:
        profile = await profile_service.upsert_profile(user.id, payload.model_dump())
        return SuccessResponse(data=_dump(profile))
    except ValueError as e:
        log.error(f"Value error saving profile: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        log.error(f"Error saving profile for user {user.id}: {e}")
        raise HTTPException(status_code=500, detail="Server failed to save the profile.")


@router.patch("", response_model=SuccessResponse)
async def patch_profile_endpoint(payload: ProfileUpdate, user: User = Depends(current_user)):
    try:
        profile = await profile_service.update_profile(user.id, payload.model_dump(exclude_unset=True))
        if not profile:
            raise HTTPException(status_code=404, detail="Complete your profile first")
        return SuccessResponse(data=_dump(profile))
    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        log.error(f"Error updating profile for user {user.id}: {e}")
        raise HTTPException(status_code=500, detail="Server failed to update the profile.")


@router.post("/mobile/otp", response_model=SuccessResponse)
async def send_otp_endpoint(user: User = Depends(current_user), gateway: SmsGateway = Depends(get_sms_gateway)):
    try:
        await profile_service.request_mobile_otp(user.id, gateway)
        return SuccessResponse(data={"sent": True})
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        log.error(f"Error sending OTP for user {user.id}: {e}")
        raise HTTPException(status_code=500, detail="Server failed to send the verification code.")


@router.post("/mobile/verify", response_model=SuccessResponse)
async def verify_otp_endpoint(
    payload: VerifyMobileRequest,
    user: User = Depends(current_user),
    gateway: SmsGateway = Depends(get_sms_gateway),
):
    try:
        profile = await profile_service.verify_mobile(user.id, payload.code, gateway)
        return SuccessResponse(data=_dump(profile))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        log.error(f"Error verifying mobile for user {user.id}: {e}")
        raise HTTPException(status_code=500, detail="Server failed to verify the mobile number.")
