"""
Order status vocabulary and the rules for who may move an order where.

    pending --(delivery accepts)--> confirmed --(kitchen)--> preparing
    confirmed --(kitchen)--> cancelled
    confirmed / preparing --(delivery picks up)--> out_for_delivery
    out_for_delivery --(delivery)--> delivered

delivered and cancelled are terminal.
"""
from enum import Enum
from typing import FrozenSet

from campuseats.models.order import OrderStatus


class Actor(str, Enum):
    CUSTOMER = "customer"
    RESTAURANT_PARTNER = "restaurant_partner"
    DELIVERY_PARTNER = "delivery_partner"


class InvalidTransition(ValueError):
    """The requested status change is not in the transition table."""


TERMINAL_STATUSES: FrozenSet[OrderStatus] = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})

TRANSITIONS = {
    (OrderStatus.PENDING, Actor.DELIVERY_PARTNER): frozenset({OrderStatus.CONFIRMED}),
    (OrderStatus.CONFIRMED, Actor.RESTAURANT_PARTNER): frozenset({OrderStatus.PREPARING, OrderStatus.CANCELLED}),
    (OrderStatus.CONFIRMED, Actor.DELIVERY_PARTNER): frozenset({OrderStatus.OUT_FOR_DELIVERY}),
    (OrderStatus.PREPARING, Actor.DELIVERY_PARTNER): frozenset({OrderStatus.OUT_FOR_DELIVERY}),
    (OrderStatus.OUT_FOR_DELIVERY, Actor.DELIVERY_PARTNER): frozenset({OrderStatus.DELIVERED}),
}

# Pending orders stay hidden from the kitchen until a delivery partner has accepted
RESTAURANT_VISIBLE_STATUSES: FrozenSet[OrderStatus] = frozenset({
    OrderStatus.CONFIRMED,
    OrderStatus.PREPARING,
    OrderStatus.OUT_FOR_DELIVERY,
    OrderStatus.DELIVERED,
    OrderStatus.CANCELLED,
})


def allowed_targets(current: OrderStatus, actor: Actor) -> FrozenSet[OrderStatus]:
    return TRANSITIONS.get((OrderStatus(current), Actor(actor)), frozenset())


def can_transition(current: OrderStatus, actor: Actor, target: OrderStatus) -> bool:
    return OrderStatus(target) in allowed_targets(current, actor)


def ensure_transition(current: OrderStatus, actor: Actor, target: OrderStatus) -> None:
    current, actor, target = OrderStatus(current), Actor(actor), OrderStatus(target)
    if current in TERMINAL_STATUSES:
        raise InvalidTransition(f"Order is already in a final state: {current.value}. Status cannot be updated.")
    if target not in allowed_targets(current, actor):
        raise InvalidTransition(
            f"A {actor.value} cannot move an order from {current.value} to {target.value}."
        )
