import logging
from typing import Iterable
from uuid import UUID

from campuseats.models.auth import Role, UserRole
from campuseats.schemas.session import View, ViewDecision

log = logging.getLogger(__name__)


def resolve_view(roles: Iterable[Role]) -> ViewDecision:
    """
    Picks the single top-level view for a set of roles.
    Precedence: admin > restaurant_partner > customer+delivery (customer view
    with a delivery toggle) > delivery_partner > customer > auth.
    """
    held = {Role(r) for r in roles}
    ordered = sorted(held, key=lambda r: r.value)

    if Role.ADMIN in held:
        return ViewDecision(view=View.ADMIN, roles=ordered)
    if Role.RESTAURANT_PARTNER in held:
        return ViewDecision(view=View.RESTAURANT_PARTNER, roles=ordered)
    if Role.DELIVERY_PARTNER in held and Role.CUSTOMER in held:
        return ViewDecision(view=View.CUSTOMER, delivery_toggle=True, roles=ordered)
    if Role.DELIVERY_PARTNER in held:
        return ViewDecision(view=View.DELIVERY_PARTNER, roles=ordered)
    if Role.CUSTOMER in held:
        return ViewDecision(view=View.CUSTOMER, roles=ordered)
    return ViewDecision(view=View.AUTH, roles=ordered)


async def get_roles(user_id: UUID) -> list:
    return await UserRole.filter(user_id=user_id).values_list("role", flat=True)


async def resolve_view_for_user(user_id: UUID) -> ViewDecision:
    """A failed role lookup degrades to the auth view instead of erroring."""
    try:
        roles = await get_roles(user_id)
    except Exception as e:
        log.error(f"Error fetching roles for user {user_id}: {e}")
        return ViewDecision(view=View.AUTH)
    return resolve_view(roles)


async def grant_role(user_id: UUID, role: Role) -> UserRole:
    """Idempotent; a user keeps every role granted to them."""
    user_role, created = await UserRole.get_or_create(user_id=user_id, role=role)
    if created:
        log.info(f"Granted role {role.value} to user {user_id}.")
    return user_role


async def has_role(user_id: UUID, role: Role) -> bool:
    return await UserRole.filter(user_id=user_id, role=role).exists()
