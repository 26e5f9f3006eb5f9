import logging
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID

from tortoise.transactions import in_transaction

from campuseats.core.config import DELIVERY_PAYOUT
from campuseats.models.catalog import Outlet
from campuseats.models.order import Order, OrderItem, OrderStatus
from campuseats.models.partner import DeliveryPartner, DeliveryPartnerStatus, RestaurantPartner
from campuseats.services import notification_service
from campuseats.services.cart import Cart
from campuseats.services.lifecycle import (
    RESTAURANT_VISIBLE_STATUSES,
    Actor,
    ensure_transition,
)

log = logging.getLogger(__name__)

ORDER_PREFETCH = ("items", "outlet", "delivery_partner")


class OrderNotFound(LookupError):
    pass


class OrderNotEligible(ValueError):
    """The caller is not allowed to act on this order right now."""


async def get_order(order_id: UUID) -> Optional[Order]:
    """Fetches an order with its lines, outlet and courier (N+1 avoidance)."""
    return await Order.get_or_none(id=order_id).prefetch_related(*ORDER_PREFETCH)


async def _require_order(order_id: UUID) -> Order:
    order = await Order.get_or_none(id=order_id)
    if not order:
        raise OrderNotFound(f"Order {order_id} not found")
    return order


# ----------- Customer -----------

async def place_order(
    user_id: Optional[UUID],
    cart: Cart,
    customer_name: str,
    customer_phone: str,
    delivery_address: str,
) -> Order:
    """
    Checkout. Writes the order header and one snapshot line per cart item in a
    single transaction, then empties the cart. New orders start pending with
    no delivery partner.
    """
    if cart.is_empty():
        raise ValueError("Your cart is empty.")
    if not customer_name.strip() or not delivery_address.strip():
        raise ValueError("Name and delivery address are required.")

    outlet = await Outlet.get_or_none(id=cart.outlet_id)
    if not outlet:
        raise ValueError("The outlet for the items in your cart no longer exists.")

    async with in_transaction() as conn:
        order = await Order.create(
            user_id=user_id,
            outlet=outlet,
            customer_name=customer_name.strip(),
            customer_phone=customer_phone,
            delivery_address=delivery_address.strip(),
            total_amount=cart.total_price(),
            status=OrderStatus.PENDING,
            using_db=conn,
        )
        for item in cart.items:
            await OrderItem.create(
                order=order,
                menu_item_id=item.menu_item_id,
                outlet_id=item.outlet_id,
                item_name=item.name,
                quantity=item.quantity,
                price=item.price,
                using_db=conn,
            )

    cart.clear()
    log.info(f"Order {order.id} placed for user {user_id}, total {order.total_amount}.")
    return await get_order(order.id)


async def list_customer_orders(user_id: UUID) -> List[Order]:
    return await Order.filter(user_id=user_id).order_by("-created_at").prefetch_related(*ORDER_PREFETCH)


# ----------- Delivery partner -----------

async def list_available_orders(partner: DeliveryPartner) -> List[Order]:
    """Unassigned pending orders; empty while the partner is not accepting."""
    if not partner.is_accepting_orders:
        return []
    return await Order.filter(
        status=OrderStatus.PENDING, delivery_partner_id__isnull=True
    ).order_by("-created_at").prefetch_related(*ORDER_PREFETCH)


async def list_partner_orders(partner: DeliveryPartner) -> List[Order]:
    return await Order.filter(delivery_partner_id=partner.id).order_by("-created_at").prefetch_related(*ORDER_PREFETCH)


async def accept_order(order_id: UUID, partner: DeliveryPartner) -> Order:
    if not partner.is_accepting_orders:
        raise OrderNotEligible("Go online to start accepting orders.")

    async with in_transaction() as conn:
        # Row lock: two couriers racing for the same order, only one wins
        order = await Order.filter(id=order_id).select_for_update().using_db(conn).first()
        if not order:
            raise OrderNotFound(f"Order {order_id} not found")
        if order.delivery_partner_id is not None:
            raise OrderNotEligible("This order has already been accepted by another delivery partner.")
        ensure_transition(order.status, Actor.DELIVERY_PARTNER, OrderStatus.CONFIRMED)

        order.delivery_partner_id = partner.id
        order.status = OrderStatus.CONFIRMED
        await order.save(using_db=conn)

        partner.status = DeliveryPartnerStatus.BUSY
        await partner.save(update_fields=["status"], using_db=conn)

    log.info(f"Order {order.id} accepted by delivery partner {partner.id}.")
    await notification_service.notify_delivery_assigned(order, partner)
    return await get_order(order.id)


async def _courier_order(order_id: UUID, partner: DeliveryPartner, conn=None) -> Order:
    query = Order.filter(id=order_id)
    if conn is not None:
        query = query.select_for_update().using_db(conn)
    order = await query.first()
    if not order:
        raise OrderNotFound(f"Order {order_id} not found")
    if order.delivery_partner_id != partner.id:
        raise OrderNotEligible("This order is not assigned to you.")
    return order


async def mark_out_for_delivery(order_id: UUID, partner: DeliveryPartner) -> Order:
    order = await _courier_order(order_id, partner)
    ensure_transition(order.status, Actor.DELIVERY_PARTNER, OrderStatus.OUT_FOR_DELIVERY)
    order.status = OrderStatus.OUT_FOR_DELIVERY
    await order.save(update_fields=["status"])
    log.info(f"Order {order.id} picked up by delivery partner {partner.id}.")
    return await get_order(order.id)


async def mark_delivered(order_id: UUID, partner: DeliveryPartner) -> Order:
    """
    Completes the delivery. The order status and the courier's counters are
    written in one transaction; the customer notification goes out afterwards.
    """
    async with in_transaction() as conn:
        order = await _courier_order(order_id, partner, conn=conn)
        ensure_transition(order.status, Actor.DELIVERY_PARTNER, OrderStatus.DELIVERED)
        order.status = OrderStatus.DELIVERED
        await order.save(update_fields=["status"], using_db=conn)

        courier = await DeliveryPartner.filter(id=partner.id).select_for_update().using_db(conn).first()
        courier.total_deliveries += 1
        courier.earnings = Decimal(courier.earnings) + DELIVERY_PAYOUT
        courier.status = (
            DeliveryPartnerStatus.AVAILABLE if courier.is_accepting_orders else DeliveryPartnerStatus.OFFLINE
        )
        await courier.save(update_fields=["total_deliveries", "earnings", "status"], using_db=conn)

    log.info(f"Order {order.id} delivered by {courier.id}; earnings now {courier.earnings}.")
    await notification_service.notify_delivered(order)
    return await get_order(order.id)


# ----------- Restaurant partner -----------

def _require_outlet(partner: RestaurantPartner) -> UUID:
    if partner.outlet_id is None:
        raise OrderNotEligible("Your account is not linked to an outlet yet. Contact the admin.")
    return partner.outlet_id


async def _kitchen_order(order_id: UUID, partner: RestaurantPartner) -> Order:
    outlet_id = _require_outlet(partner)
    order = await Order.get_or_none(id=order_id).prefetch_related("items", "delivery_partner")
    if not order:
        raise OrderNotFound(f"Order {order_id} not found")
    if order.outlet_id != outlet_id:
        raise OrderNotEligible("This order does not belong to your outlet.")
    return order


async def list_restaurant_orders(partner: RestaurantPartner) -> List[Order]:
    """Orders for the partner's outlet that a courier has already accepted."""
    outlet_id = _require_outlet(partner)
    return await Order.filter(
        outlet_id=outlet_id, status__in=list(RESTAURANT_VISIBLE_STATUSES)
    ).order_by("-created_at").prefetch_related(*ORDER_PREFETCH)


def restaurant_summary(orders: List[Order]) -> Dict:
    """Splits a kitchen's orders into active and history and sums delivered revenue."""
    active = [o for o in orders if o.status in (OrderStatus.CONFIRMED, OrderStatus.PREPARING)]
    history = [o for o in orders if o.status not in (OrderStatus.CONFIRMED, OrderStatus.PREPARING)]
    revenue = sum((Decimal(o.total_amount) for o in orders if o.status == OrderStatus.DELIVERED), Decimal("0"))
    return {"active": active, "history": history, "revenue": revenue}


async def start_preparing(order_id: UUID, partner: RestaurantPartner) -> Order:
    order = await _kitchen_order(order_id, partner)
    ensure_transition(order.status, Actor.RESTAURANT_PARTNER, OrderStatus.PREPARING)
    order.status = OrderStatus.PREPARING
    await order.save(update_fields=["status"])
    log.info(f"Order {order.id} is being prepared by outlet {order.outlet_id}.")

    courier_name = order.delivery_partner.name if order.delivery_partner else None
    await notification_service.notify_preparing(order, order.items, courier_name)
    return await get_order(order.id)


async def cancel_order(order_id: UUID, partner: RestaurantPartner) -> Order:
    order = await _kitchen_order(order_id, partner)
    ensure_transition(order.status, Actor.RESTAURANT_PARTNER, OrderStatus.CANCELLED)
    order.status = OrderStatus.CANCELLED
    await order.save(update_fields=["status"])
    log.info(f"Order {order.id} cancelled by outlet {order.outlet_id}.")
    return await get_order(order.id)


# ----------- Admin -----------

async def list_all_orders(status: Optional[OrderStatus] = None) -> List[Order]:
    query = Order.all()
    if status:
        query = query.filter(status=status)
    return await query.order_by("-created_at").prefetch_related(*ORDER_PREFETCH)
