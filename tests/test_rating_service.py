import pytest
from uuid import uuid4

from campuseats.models import Order, OrderStatus
from campuseats.models.rating import Rating
from campuseats.services import order_service, rating_service
from campuseats.services.catalog_service import display_rating, overall_ratings


async def _order(world, make_cart, status=OrderStatus.DELIVERED):
    cart = make_cart((world.thali, world.outlet.name, 2))
    order = await order_service.place_order(world.customer_id, cart, "Asha", "9876543210", "Hostel 4")
    await Order.filter(id=order.id).update(status=status)
    return order


@pytest.mark.asyncio
async def test_rerating_overwrites_instead_of_duplicating(world, make_cart):
    order = await _order(world, make_cart)

    await rating_service.rate_order(world.customer_id, order.id, 3, "Cold rotis", {world.thali.id: 2})
    saved = await rating_service.rate_order(world.customer_id, order.id, 5, "Great", {world.thali.id: 4})

    assert len(saved) == 2
    rows = await Rating.filter(order_id=order.id)
    assert len(rows) == 2
    overall = [r for r in rows if r.menu_item_id is None][0]
    dish = [r for r in rows if r.menu_item_id == world.thali.id][0]
    assert (overall.rating, overall.review) == (5, "Great")
    assert dish.rating == 4
    assert overall.outlet_id == world.outlet.id


@pytest.mark.asyncio
async def test_outlet_rating_uses_customer_stars(world, make_cart):
    order = await _order(world, make_cart)
    await rating_service.rate_order(world.customer_id, order.id, 5)

    ratings = await overall_ratings([world.outlet.id])
    assert display_rating(world.outlet, ratings.get(world.outlet.id)) == (5.0, 1)


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [OrderStatus.PENDING, OrderStatus.OUT_FOR_DELIVERY, OrderStatus.CANCELLED])
async def test_only_delivered_orders_can_be_rated(world, make_cart, status):
    order = await _order(world, make_cart, status=status)
    with pytest.raises(ValueError, match="delivered"):
        await rating_service.rate_order(world.customer_id, order.id, 4)
    assert await Rating.all().count() == 0


@pytest.mark.asyncio
async def test_items_outside_the_order_are_rejected(world, make_cart):
    order = await _order(world, make_cart)
    with pytest.raises(ValueError, match="not part of this order"):
        await rating_service.rate_order(world.customer_id, order.id, 4, items={world.chai.id: 5})
    assert await Rating.all().count() == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("stars", [0, 6])
async def test_stars_out_of_range(world, make_cart, stars):
    order = await _order(world, make_cart)
    with pytest.raises(ValueError):
        await rating_service.rate_order(world.customer_id, order.id, stars)
    with pytest.raises(ValueError):
        await rating_service.rate_order(world.customer_id, order.id, 4, items={world.thali.id: stars})


@pytest.mark.asyncio
async def test_someone_elses_order_is_not_found(world, make_cart):
    order = await _order(world, make_cart)
    with pytest.raises(LookupError):
        await rating_service.rate_order(uuid4(), order.id, 4)
