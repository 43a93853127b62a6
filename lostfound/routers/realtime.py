"""WebSocket bridge from the realtime feed to connected clients."""

import asyncio
import contextlib
import logging
from typing import Callable, Literal, Optional
import uuid

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect, status

from lostfound.realtime.feed import INSERT, RealtimeFeed, RowEvent
from lostfound.services.auth import SessionContext
from lostfound.utils.dependencies import get_feed, get_token_resolver

logger = logging.getLogger(__name__)

router = APIRouter()


async def _pump(websocket: WebSocket, queue: "asyncio.Queue[dict]") -> None:
    while True:
        payload = await queue.get()
        await websocket.send_json(payload)


async def _stop(sender: "asyncio.Task[None]") -> None:
    sender.cancel()
    # A send racing the disconnect fails with one of these
    with contextlib.suppress(asyncio.CancelledError, WebSocketDisconnect, RuntimeError):
        await sender


@router.websocket("/ws")
async def realtime_socket(
    websocket: WebSocket,
    token: str = Query(...),
    collection: Literal["notifications", "messages"] = Query("notifications"),
    item_id: Optional[uuid.UUID] = Query(None),
    feed: RealtimeFeed = Depends(get_feed),
    resolve_token: Callable[[str], Optional[SessionContext]] = Depends(get_token_resolver),
):
    context = resolve_token(token)
    if context is None or (collection == "messages" and item_id is None):
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    if collection == "notifications":
        filters = {"user_id": context.user_id}
    else:
        filters = {"item_id": item_id, "recipient_id": context.user_id}

    loop = asyncio.get_running_loop()
    queue: "asyncio.Queue[dict]" = asyncio.Queue()

    def on_event(event: RowEvent) -> None:
        # Feed callbacks run on the writer's thread
        message = {"type": event.event, "collection": event.collection, "data": event.row}
        loop.call_soon_threadsafe(queue.put_nowait, message)

    handle = feed.subscribe(collection, INSERT, filters, on_event)
    await websocket.accept()
    sender = asyncio.create_task(_pump(websocket, queue))

    try:
        while True:
            # Only used to notice the client going away
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.debug("Realtime client %s disconnected", context.user_id)
    finally:
        feed.unsubscribe(handle)
        await _stop(sender)
