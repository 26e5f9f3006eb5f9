from fastapi import APIRouter, Depends
from campuseats.api.deps import optional_user
from campuseats.models.auth import User
from campuseats.schemas.response import SuccessResponse
from campuseats.schemas.session import View, ViewDecision
from campuseats.services.role_service import resolve_view_for_user
from typing import Optional

router = APIRouter()


@router.get("/view", response_model=SuccessResponse)
async def view_endpoint(user: Optional[User] = Depends(optional_user)):
    """
    Which dashboard to render. Anonymous callers, and users whose roles could
    not be read, get the auth view.
    """
    if user is None:
        return SuccessResponse(data=ViewDecision(view=View.AUTH).model_dump())
    decision = await resolve_view_for_user(user.id)
    return SuccessResponse(data=decision.model_dump())
