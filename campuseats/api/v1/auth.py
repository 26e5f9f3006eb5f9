import logging
from fastapi import APIRouter, Depends, HTTPException, status
from campuseats.api.deps import current_token, current_user
from campuseats.models.auth import User
from campuseats.schemas.response import SuccessResponse
from campuseats.schemas.session import SignInRequest, SignInResponse, SignUpRequest, UserResponse
from campuseats.services.session_service import AuthenticationError, SessionProvider, get_session_provider
from typing import Optional

router = APIRouter()
log = logging.getLogger("uvicorn")


@router.post("/signup", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def signup_endpoint(payload: SignUpRequest, sessions: SessionProvider = Depends(get_session_provider)):
    """
    Creates an account. The new user holds no role yet, so the session view
    resolves to the onboarding flow until a profile is saved.
    """
    try:
        user = await sessions.sign_up(payload.email, payload.password)
        return SuccessResponse(data=UserResponse(id=user.id, email=user.email).model_dump())
    except ValueError as e:
        log.error(f"Value error signing up: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        log.error(f"Error signing up: {e}")
        raise HTTPException(status_code=500, detail="Server failed to create the account.")


@router.post("/signin", response_model=SuccessResponse)
async def signin_endpoint(payload: SignInRequest, sessions: SessionProvider = Depends(get_session_provider)):
    """Exchanges email and password for a bearer token."""
    try:
        token, user = await sessions.sign_in(payload.email, payload.password)
        data = SignInResponse(token=token, user=UserResponse(id=user.id, email=user.email)).model_dump()
        return SuccessResponse(data=data)
    except AuthenticationError:
        raise
    except Exception as e:
        log.error(f"Error signing in: {e}")
        raise HTTPException(status_code=500, detail="Server failed to sign in.")


@router.post("/signout", response_model=SuccessResponse)
async def signout_endpoint(
    token: Optional[str] = Depends(current_token),
    sessions: SessionProvider = Depends(get_session_provider),
):
    """Ends the session; signing out twice is harmless."""
    if token:
        await sessions.sign_out(token)
    return SuccessResponse(data={"signed_out": True})


@router.get("/me", response_model=SuccessResponse)
async def me_endpoint(user: User = Depends(current_user)):
    return SuccessResponse(data=UserResponse(id=user.id, email=user.email).model_dump())
