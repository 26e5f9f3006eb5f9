import logging
from typing import Iterable, List, Optional
from uuid import UUID

from campuseats.core.config import NOTIFICATION_FEED_LIMIT
from campuseats.models.notification import Notification, NotificationType
from campuseats.models.order import Order, OrderItem
from campuseats.models.partner import DeliveryPartner, RestaurantPartner

log = logging.getLogger(__name__)


def _short_id(order_id: UUID) -> str:
    return str(order_id).split("-")[0]


def _items_summary(items: Iterable[OrderItem]) -> str:
    return ", ".join(f"{item.item_name}×{item.quantity}" for item in items)


async def notify(
    user_id: UUID,
    title: str,
    message: str,
    type_: NotificationType,
    order_id: Optional[UUID] = None,
) -> Optional[Notification]:
    """
    Inserts one inbox row. Delivery is at-most-once: a failed insert is
    logged and dropped so the status change that triggered it still stands.
    """
    try:
        return await Notification.create(
            user_id=user_id, title=title, message=message, type=type_, order_id=order_id
        )
    except Exception as e:
        log.error(f"Failed to notify user {user_id} ({type_.value}) for order {order_id}: {e}")
        return None


# ----------- Fan-out per transition -----------

async def notify_delivery_assigned(order: Order, partner: DeliveryPartner) -> List[Notification]:
    """pending -> confirmed: tell the customer who is coming and the kitchen to start."""
    sent = []
    if order.user_id:
        sent.append(await notify(
            order.user_id,
            "🚴 Delivery Partner Assigned",
            f"{partner.name} has accepted your order #{_short_id(order.id)} and will deliver it. "
            f"Total: ₹{order.total_amount}",
            NotificationType.DELIVERY_ASSIGNED,
            order.id,
        ))

    if order.outlet_id:
        items = await OrderItem.filter(order_id=order.id)
        kitchen_user_ids = await RestaurantPartner.filter(outlet_id=order.outlet_id).values_list("user_id", flat=True)
        for user_id in kitchen_user_ids:
            sent.append(await notify(
                user_id,
                "🆕 New Order to Prepare",
                f"Order #{_short_id(order.id)} for {order.customer_name} has a delivery partner. "
                f"Please prepare: {_items_summary(items)}.",
                NotificationType.RESTAURANT_NOTIFIED,
                order.id,
            ))
    return [n for n in sent if n is not None]


async def notify_preparing(order: Order, items: Iterable[OrderItem], partner_name: Optional[str]) -> Optional[Notification]:
    if not order.user_id:
        return None
    return await notify(
        order.user_id,
        "🍳 Order Being Prepared!",
        f"Your order is now being prepared! Delivery by: {partner_name or 'Assigned partner'}. "
        f"Items: {_items_summary(items)}. Total: ₹{order.total_amount}",
        NotificationType.ORDER_ACCEPTED,
        order.id,
    )


async def notify_delivered(order: Order) -> Optional[Notification]:
    if not order.user_id:
        return None
    return await notify(
        order.user_id,
        "✅ Order Delivered",
        f"Your order #{_short_id(order.id)} has been delivered. Enjoy your meal!",
        NotificationType.ORDER_DELIVERED,
        order.id,
    )


# ----------- Inbox -----------

async def list_notifications(user_id: UUID, limit: int = NOTIFICATION_FEED_LIMIT) -> List[Notification]:
    return await Notification.filter(user_id=user_id).order_by("-created_at").limit(limit)


async def unread_count(user_id: UUID) -> int:
    return await Notification.filter(user_id=user_id, is_read=False).count()


async def mark_read(user_id: UUID, notification_id: UUID) -> Optional[Notification]:
    notification = await Notification.get_or_none(id=notification_id, user_id=user_id)
    if not notification:
        return None
    if not notification.is_read:
        notification.is_read = True
        await notification.save(update_fields=["is_read"])
    return notification


async def mark_all_read(user_id: UUID) -> int:
    return await Notification.filter(user_id=user_id, is_read=False).update(is_read=True)
