import asyncio
import logging
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status
from fastapi.encoders import jsonable_encoder
from campuseats.events.change_feed import INSERT, ChangeFeed, Subscription, get_change_feed
from campuseats.services.session_service import SessionProvider, get_session_provider
from typing import Callable, Dict, Optional

router = APIRouter()
log = logging.getLogger("uvicorn")

# Tables a dashboard may watch. Notifications have their own per-user socket.
DASHBOARD_TABLES = {"orders", "outlets", "menu_items", "delivery_partners", "restaurant_partners", "ratings"}


def _change_signal(event: Dict) -> Dict:
    """Dashboards only learn that something changed and refetch their list."""
    return {"table": event["table"], "event": event["event"], "id": event["record"].get("id")}


async def _stream(websocket: WebSocket, subscription: Subscription, render: Callable[[Dict], Optional[Dict]]):
    """Forwards feed events until the client disconnects or a send fails."""

    async def forward():
        while True:
            message = render(await subscription.get())
            if message is not None:
                await websocket.send_json(jsonable_encoder(message))

    async def drain():
        try:
            while True:
                await websocket.receive_text()
        except WebSocketDisconnect:
            pass

    sender = asyncio.create_task(forward())
    receiver = asyncio.create_task(drain())
    try:
        await asyncio.wait({sender, receiver}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in (sender, receiver):
            task.cancel()
        await asyncio.gather(sender, receiver, return_exceptions=True)

    for task in (sender, receiver):
        if not task.cancelled() and task.exception() is not None:
            log.error(f"Realtime stream closed on error: {task.exception()}")


@router.websocket("/notifications")
async def notifications_socket(
    websocket: WebSocket,
    token: Optional[str] = None,
    sessions: SessionProvider = Depends(get_session_provider),
    feed: ChangeFeed = Depends(get_change_feed),
):
    """Pushes each new notification addressed to the signed-in user."""
    user = await sessions.get_current_user(token)
    if not user:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    subscription = feed.subscribe("notifications", lambda record: record.get("user_id") == user.id)
    log.info(f"User {user.id} subscribed to notifications.")
    try:
        await _stream(websocket, subscription, lambda e: e["record"] if e["event"] == INSERT else None)
    finally:
        feed.unsubscribe(subscription)
        log.info(f"User {user.id} unsubscribed from notifications.")


@router.websocket("/{table}")
async def table_socket(
    websocket: WebSocket,
    table: str,
    token: Optional[str] = None,
    sessions: SessionProvider = Depends(get_session_provider),
    feed: ChangeFeed = Depends(get_change_feed),
):
    user = await sessions.get_current_user(token)
    if not user or table not in DASHBOARD_TABLES:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    subscription = feed.subscribe(table)
    try:
        await _stream(websocket, subscription, _change_signal)
    finally:
        feed.unsubscribe(subscription)
