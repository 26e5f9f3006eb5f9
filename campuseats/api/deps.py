from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from campuseats.models.auth import Role, User
from campuseats.models.partner import DeliveryPartner, RestaurantPartner
from campuseats.services import profile_service, role_service
from campuseats.services.session_service import SessionProvider, get_session_provider

bearer = HTTPBearer(auto_error=False)


async def current_token(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer)) -> Optional[str]:
    return credentials.credentials if credentials else None


async def optional_user(
    token: Optional[str] = Depends(current_token),
    sessions: SessionProvider = Depends(get_session_provider),
) -> Optional[User]:
    return await sessions.get_current_user(token)


async def current_user(user: Optional[User] = Depends(optional_user)) -> User:
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not signed in",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def require_token(token: Optional[str] = Depends(current_token), user: User = Depends(current_user)) -> str:
    return token


def require_role(role: Role):
    """Dependency factory: the signed-in user must hold `role`."""

    async def checker(user: User = Depends(current_user)) -> User:
        if not await role_service.has_role(user.id, role):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=f"Requires the {role.value} role")
        return user

    return checker


async def current_delivery_partner(user: User = Depends(require_role(Role.DELIVERY_PARTNER))) -> DeliveryPartner:
    partner = await profile_service.get_delivery_partner(user.id)
    if not partner:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Delivery partner profile not found")
    return partner


async def current_restaurant_partner(user: User = Depends(require_role(Role.RESTAURANT_PARTNER))) -> RestaurantPartner:
    partner = await profile_service.get_restaurant_partner(user.id)
    if not partner:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Restaurant partner profile not found")
    return partner
