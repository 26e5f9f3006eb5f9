import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, patch
from uuid import uuid4

from campuseats.models import DeliveryPartner, Notification, NotificationType, Order, OrderStatus
from campuseats.models.partner import DeliveryPartnerStatus
from campuseats.services import order_service
from campuseats.services.lifecycle import InvalidTransition
from campuseats.services.order_service import OrderNotEligible, OrderNotFound


async def _place(world, make_cart, quantity=2):
    cart = make_cart((world.thali, world.outlet.name, quantity))
    return await order_service.place_order(world.customer_id, cart, "Asha", "9876543210", "Hostel 4, Room 12")


@pytest.mark.asyncio
async def test_place_order_snapshots_cart(world, make_cart):
    cart = make_cart((world.thali, world.outlet.name, 2), (world.chai, world.outlet.name, 1))
    order = await order_service.place_order(world.customer_id, cart, "Asha", "9876543210", "Hostel 4")

    assert order.status == OrderStatus.PENDING
    assert order.delivery_partner_id is None
    assert order.outlet_id == world.outlet.id
    assert order.total_amount == Decimal("270.00")
    assert sorted((i.item_name, i.quantity) for i in order.items) == [("Masala Chai", 1), ("Veg Thali", 2)]
    assert cart.is_empty()


@pytest.mark.asyncio
async def test_place_order_rejects_empty_cart(world, make_cart):
    with pytest.raises(ValueError, match="empty"):
        await order_service.place_order(world.customer_id, make_cart(), "Asha", "9876543210", "Hostel 4")
    assert await Order.all().count() == 0


@pytest.mark.asyncio
async def test_full_lifecycle_with_notifications_and_payout(world, make_cart):
    order = await _place(world, make_cart)
    assert order.total_amount == Decimal("250.00")

    order = await order_service.accept_order(order.id, world.courier)
    assert order.status == OrderStatus.CONFIRMED
    assert order.delivery_partner_id == world.courier.id
    assert await Notification.filter(order_id=order.id).count() == 2
    assert await Notification.filter(user_id=world.customer_id, type=NotificationType.DELIVERY_ASSIGNED).exists()
    assert await Notification.filter(user_id=world.kitchen.user_id, type=NotificationType.RESTAURANT_NOTIFIED).exists()
    courier = await DeliveryPartner.get(id=world.courier.id)
    assert courier.status == DeliveryPartnerStatus.BUSY

    order = await order_service.start_preparing(order.id, world.kitchen)
    assert order.status == OrderStatus.PREPARING
    prepared = await Notification.get(order_id=order.id, type=NotificationType.ORDER_ACCEPTED)
    assert prepared.title == "🍳 Order Being Prepared!"
    assert "Ravi" in prepared.message
    assert "Veg Thali×2" in prepared.message
    assert "₹250.00" in prepared.message

    order = await order_service.mark_out_for_delivery(order.id, courier)
    assert order.status == OrderStatus.OUT_FOR_DELIVERY
    assert await Notification.filter(order_id=order.id).count() == 3

    order = await order_service.mark_delivered(order.id, courier)
    assert order.status == OrderStatus.DELIVERED
    assert await Notification.filter(order_id=order.id, type=NotificationType.ORDER_DELIVERED).count() == 1

    courier = await DeliveryPartner.get(id=world.courier.id)
    assert courier.total_deliveries == 1
    assert courier.earnings == Decimal("50")
    assert courier.status == DeliveryPartnerStatus.AVAILABLE


@pytest.mark.asyncio
async def test_accepted_order_leaves_every_available_list(world, make_cart):
    order = await _place(world, make_cart)
    other = await DeliveryPartner.create(user_id=uuid4(), name="Meera", is_accepting_orders=True)
    assert [o.id for o in await order_service.list_available_orders(other)] == [order.id]

    await order_service.accept_order(order.id, world.courier)

    assert await order_service.list_available_orders(other) == []
    assert await order_service.list_available_orders(world.courier) == []
    assert [o.id for o in await order_service.list_partner_orders(world.courier)] == [order.id]


@pytest.mark.asyncio
async def test_second_courier_cannot_take_an_accepted_order(world, make_cart):
    order = await _place(world, make_cart)
    other = await DeliveryPartner.create(user_id=uuid4(), name="Meera", is_accepting_orders=True)
    await order_service.accept_order(order.id, world.courier)

    with pytest.raises(OrderNotEligible):
        await order_service.accept_order(order.id, other)
    assert (await Order.get(id=order.id)).delivery_partner_id == world.courier.id


@pytest.mark.asyncio
async def test_delivered_order_reports_already_accepted(world, make_cart):
    order = await _place(world, make_cart)
    other = await DeliveryPartner.create(user_id=uuid4(), name="Meera", is_accepting_orders=True)
    await order_service.accept_order(order.id, world.courier)
    await order_service.mark_out_for_delivery(order.id, world.courier)
    await order_service.mark_delivered(order.id, world.courier)

    with pytest.raises(OrderNotEligible, match="already been accepted"):
        await order_service.accept_order(order.id, other)


@pytest.mark.asyncio
async def test_offline_courier_sees_nothing_and_cannot_accept(world, make_cart):
    order = await _place(world, make_cart)
    offline = await DeliveryPartner.create(user_id=uuid4(), name="Meera", is_accepting_orders=False)

    assert await order_service.list_available_orders(offline) == []
    with pytest.raises(OrderNotEligible):
        await order_service.accept_order(order.id, offline)


@pytest.mark.asyncio
async def test_pending_orders_are_invisible_to_the_kitchen(world, make_cart):
    order = await _place(world, make_cart)
    assert await order_service.list_restaurant_orders(world.kitchen) == []

    await order_service.accept_order(order.id, world.courier)
    assert [o.id for o in await order_service.list_restaurant_orders(world.kitchen)] == [order.id]


@pytest.mark.asyncio
async def test_kitchen_cancel_is_terminal(world, make_cart):
    order = await _place(world, make_cart)
    await order_service.accept_order(order.id, world.courier)
    order = await order_service.cancel_order(order.id, world.kitchen)
    assert order.status == OrderStatus.CANCELLED

    with pytest.raises(InvalidTransition, match="final state"):
        await order_service.start_preparing(order.id, world.kitchen)
    with pytest.raises(InvalidTransition, match="final state"):
        await order_service.mark_out_for_delivery(order.id, world.courier)
    assert (await Order.get(id=order.id)).status == OrderStatus.CANCELLED


@pytest.mark.asyncio
async def test_kitchen_cannot_prepare_a_pending_order(world, make_cart):
    order = await _place(world, make_cart)
    with pytest.raises(InvalidTransition):
        await order_service.start_preparing(order.id, world.kitchen)


@pytest.mark.asyncio
async def test_only_the_assigned_courier_can_deliver(world, make_cart):
    order = await _place(world, make_cart)
    await order_service.accept_order(order.id, world.courier)
    stranger = await DeliveryPartner.create(user_id=uuid4(), name="Meera", is_accepting_orders=True)

    with pytest.raises(OrderNotEligible):
        await order_service.mark_out_for_delivery(order.id, stranger)


@pytest.mark.asyncio
async def test_courier_goes_offline_after_delivery_when_not_accepting(world, make_cart):
    order = await _place(world, make_cart)
    await order_service.accept_order(order.id, world.courier)
    courier = await DeliveryPartner.get(id=world.courier.id)
    courier.is_accepting_orders = False
    await courier.save()

    await order_service.mark_out_for_delivery(order.id, courier)
    await order_service.mark_delivered(order.id, courier)

    courier = await DeliveryPartner.get(id=world.courier.id)
    assert courier.status == DeliveryPartnerStatus.OFFLINE


@pytest.mark.asyncio
async def test_notification_failure_does_not_undo_the_transition(world, make_cart):
    order = await _place(world, make_cart)
    with patch.object(Notification, "create", new=AsyncMock(side_effect=RuntimeError("insert failed"))):
        accepted = await order_service.accept_order(order.id, world.courier)

    assert accepted.status == OrderStatus.CONFIRMED
    assert await Notification.all().count() == 0


@pytest.mark.asyncio
async def test_unknown_order(world):
    with pytest.raises(OrderNotFound):
        await order_service.accept_order(uuid4(), world.courier)


@pytest.mark.asyncio
async def test_restaurant_summary(world, make_cart):
    first = await _place(world, make_cart)
    second = await _place(world, make_cart, quantity=1)
    await order_service.accept_order(first.id, world.courier)
    await order_service.accept_order(second.id, world.courier)
    await order_service.mark_out_for_delivery(first.id, world.courier)
    await order_service.mark_delivered(first.id, world.courier)

    summary = order_service.restaurant_summary(await order_service.list_restaurant_orders(world.kitchen))
    assert [o.id for o in summary["active"]] == [second.id]
    assert [o.id for o in summary["history"]] == [first.id]
    assert summary["revenue"] == Decimal("250.00")
