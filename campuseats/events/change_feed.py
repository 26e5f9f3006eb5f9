import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional, Set, Type

from tortoise import Model
from tortoise.signals import post_delete, post_save

log = logging.getLogger(__name__)

INSERT = "INSERT"
UPDATE = "UPDATE"
DELETE = "DELETE"


def record_to_dict(instance: Model) -> Dict[str, Any]:
    """Column values of a row, keyed the way the table stores them (FKs as <name>_id)."""
    return {name: getattr(instance, name) for name in instance._meta.fields_db_projection}


class Subscription:
    """
    One live listener on a table. Events are buffered in an asyncio.Queue
    owned by the subscriber; `predicate` narrows which rows it receives.
    """

    def __init__(self, table: str, predicate: Optional[Callable[[Dict[str, Any]], bool]] = None):
        self.table = table
        self.predicate = predicate
        self.queue: asyncio.Queue = asyncio.Queue()

    def offer(self, event: Dict[str, Any]) -> None:
        if self.predicate is not None and not self.predicate(event["record"]):
            return
        self.queue.put_nowait(event)

    async def get(self) -> Dict[str, Any]:
        return await self.queue.get()


class ChangeFeed:
    """In-process change notification bus: insert/update/delete events per table."""

    def __init__(self):
        self._subscriptions: Dict[str, List[Subscription]] = {}
        self._connected: Set[Type[Model]] = set()

    def subscribe(self, table: str, predicate: Optional[Callable[[Dict[str, Any]], bool]] = None) -> Subscription:
        subscription = Subscription(table, predicate)
        self._subscriptions.setdefault(table, []).append(subscription)
        log.debug(f"Subscribed to '{table}' ({len(self._subscriptions[table])} listeners).")
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        listeners = self._subscriptions.get(subscription.table, [])
        if subscription in listeners:
            listeners.remove(subscription)

    def listener_count(self, table: str) -> int:
        return len(self._subscriptions.get(table, []))

    def publish(self, table: str, event_type: str, record: Dict[str, Any]) -> None:
        event = {"table": table, "event": event_type, "record": record}
        for subscription in list(self._subscriptions.get(table, [])):
            subscription.offer(event)

    def connect(self, *model_classes: Type[Model]) -> None:
        """Publishes every save/delete of the given models. Safe to call more than once."""
        for model_class in model_classes:
            if model_class in self._connected:
                continue
            table = model_class._meta.db_table

            async def on_save(sender, instance, created, using_db, update_fields, _table=table):
                self.publish(_table, INSERT if created else UPDATE, record_to_dict(instance))

            async def on_delete(sender, instance, using_db, _table=table):
                self.publish(_table, DELETE, record_to_dict(instance))

            post_save(model_class)(on_save)
            post_delete(model_class)(on_delete)
            self._connected.add(model_class)


feed = ChangeFeed()


def get_change_feed() -> ChangeFeed:
    """FastAPI dependency; override in tests to isolate listeners."""
    return feed
