import logging
from collections import defaultdict
from typing import Dict, Iterable, List, NamedTuple, Optional, Tuple
from uuid import UUID

from tortoise.expressions import Q

from campuseats.core.config import DEFAULT_OUTLET_RATING
from campuseats.models.catalog import MenuItem, Outlet
from campuseats.models.rating import Rating

log = logging.getLogger(__name__)


class RatedOutlet(NamedTuple):
    outlet: Outlet
    rating: float
    rating_count: int


class OutletMenu(NamedTuple):
    outlet: RatedOutlet
    items: List[MenuItem]
    categories: List[str]
    item_ratings: Dict[UUID, Tuple[float, int]]


def _mean(values: List[int]) -> Tuple[float, int]:
    return round(sum(values) / len(values), 1), len(values)


def display_rating(outlet: Outlet, overall: Optional[Tuple[float, int]]) -> Tuple[float, int]:
    """Mean of the overall ratings when any exist, else the outlet's static rating."""
    if overall:
        return overall
    static = outlet.rating if outlet.rating is not None else DEFAULT_OUTLET_RATING
    return round(static, 1), 0


async def overall_ratings(outlet_ids: Iterable[UUID]) -> Dict[UUID, Tuple[float, int]]:
    """(average, count) of order-level ratings per outlet; item ratings are ignored."""
    outlet_ids = list(outlet_ids)
    if not outlet_ids:
        return {}
    rows = await Rating.filter(outlet_id__in=outlet_ids, menu_item_id__isnull=True).values_list("outlet_id", "rating")
    grouped = defaultdict(list)
    for outlet_id, stars in rows:
        grouped[outlet_id].append(stars)
    return {outlet_id: _mean(values) for outlet_id, values in grouped.items()}


async def item_ratings(outlet_id: UUID) -> Dict[UUID, Tuple[float, int]]:
    rows = await Rating.filter(outlet_id=outlet_id, menu_item_id__isnull=False).values_list("menu_item_id", "rating")
    grouped = defaultdict(list)
    for menu_item_id, stars in rows:
        grouped[menu_item_id].append(stars)
    return {menu_item_id: _mean(values) for menu_item_id, values in grouped.items()}


async def _rate(outlets: List[Outlet]) -> List[RatedOutlet]:
    try:
        summary = await overall_ratings(o.id for o in outlets)
    except Exception as e:
        log.error(f"Error fetching outlet ratings: {e}")
        summary = {}
    return [RatedOutlet(o, *display_rating(o, summary.get(o.id))) for o in outlets]


async def list_outlets(query: Optional[str] = None) -> List[RatedOutlet]:
    """
    Home listing ordered by rating. A search term matches outlet name or
    cuisine first; outlets serving a dish whose name matches follow after.
    """
    query = (query or "").strip()
    if not query:
        return await _rate(await Outlet.all().order_by("-rating", "name"))

    outlets = await Outlet.filter(
        Q(name__icontains=query) | Q(cuisine_type__icontains=query)
    ).order_by("-rating", "name")

    try:
        seen = {o.id for o in outlets}
        dish_outlet_ids = await MenuItem.filter(name__icontains=query).distinct().values_list("outlet_id", flat=True)
        extra_ids = [outlet_id for outlet_id in dish_outlet_ids if outlet_id not in seen]
        if extra_ids:
            outlets += await Outlet.filter(id__in=extra_ids).order_by("-rating", "name")
    except Exception as e:
        log.error(f"Menu search failed for '{query}', showing outlet matches only: {e}")

    return await _rate(outlets)


async def get_outlet(outlet_id: UUID) -> Optional[RatedOutlet]:
    outlet = await Outlet.get_or_none(id=outlet_id)
    if not outlet:
        return None
    return (await _rate([outlet]))[0]


async def get_outlet_menu(outlet_id: UUID, category: Optional[str] = None) -> Optional[OutletMenu]:
    rated = await get_outlet(outlet_id)
    if not rated:
        return None

    items = await MenuItem.filter(outlet_id=outlet_id, is_available=True).order_by("category", "name")
    categories = []
    for item in items:
        if item.category and item.category not in categories:
            categories.append(item.category)
    if category:
        items = [item for item in items if item.category == category]

    return OutletMenu(rated, items, categories, await item_ratings(outlet_id))
