import logging
from typing import Dict, List, Optional
from uuid import UUID

from campuseats.models.order import Order, OrderItem, OrderStatus
from campuseats.models.rating import Rating

log = logging.getLogger(__name__)


def _check_stars(stars: int) -> int:
    if not 1 <= stars <= 5:
        raise ValueError("Ratings must be between 1 and 5 stars.")
    return stars


async def _upsert(user_id: UUID, order: Order, menu_item_id: Optional[UUID], stars: int, review: Optional[str]) -> Rating:
    rating, _ = await Rating.update_or_create(
        defaults={"rating": stars, "review": review, "outlet_id": order.outlet_id},
        user_id=user_id,
        order_id=order.id,
        menu_item_id=menu_item_id,
    )
    return rating


async def rate_order(
    user_id: UUID,
    order_id: UUID,
    overall: int,
    review: Optional[str] = None,
    items: Optional[Dict[UUID, int]] = None,
) -> List[Rating]:
    """
    Records the customer's overall rating for a delivered order plus optional
    per-dish ratings. Re-rating overwrites the previous stars.
    """
    _check_stars(overall)
    items = {item_id: _check_stars(stars) for item_id, stars in (items or {}).items()}

    order = await Order.get_or_none(id=order_id, user_id=user_id)
    if not order:
        raise LookupError(f"Order {order_id} not found")
    if order.status != OrderStatus.DELIVERED:
        raise ValueError("Only delivered orders can be rated.")
    if order.outlet_id is None:
        raise ValueError("The outlet for this order no longer exists.")

    ordered_ids = set(
        await OrderItem.filter(order_id=order.id, menu_item_id__isnull=False).values_list("menu_item_id", flat=True)
    )
    unknown = [str(item_id) for item_id in items if item_id not in ordered_ids]
    if unknown:
        raise ValueError(f"Items not part of this order: {', '.join(unknown)}")

    saved = [await _upsert(user_id, order, None, overall, review or None)]
    for item_id, stars in items.items():
        saved.append(await _upsert(user_id, order, item_id, stars, None))

    log.info(f"User {user_id} rated order {order.id}: {overall} stars, {len(items)} item ratings.")
    return saved
