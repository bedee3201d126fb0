"""WebSocket streaming of tracker display events."""

import asyncio
import json
import logging
import threading

from fastapi import WebSocket, WebSocketDisconnect

from nexus_crusher.context import AppContext
from nexus_crusher.models.events import DisplayEvent
from nexus_crusher.utils.role_normalizer import normalize_role

logger = logging.getLogger(__name__)


class SessionEventHub:
    """Bridges tracker threads to WebSocket clients.

    ``publish`` is called from any thread and hands the serialized event to
    each client's queue on that client's event loop.
    """

    def __init__(self):
        self._subscribers: set[tuple[asyncio.AbstractEventLoop, asyncio.Queue]] = set()
        self._lock = threading.Lock()

    def register(self) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue()
        with self._lock:
            self._subscribers.add((asyncio.get_running_loop(), queue))
        return queue

    def unregister(self, queue: asyncio.Queue) -> None:
        with self._lock:
            self._subscribers = {s for s in self._subscribers if s[1] is not queue}

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def publish(self, event: DisplayEvent) -> None:
        payload = event.to_dict()
        with self._lock:
            subscribers = list(self._subscribers)
        for loop, queue in subscribers:
            if loop.is_closed():
                continue
            loop.call_soon_threadsafe(queue.put_nowait, payload)


async def _handle_client_messages(websocket: WebSocket, context: AppContext) -> None:
    """Listen for client commands until the socket closes.

    Supported: ``{"type": "recommend", "role": "mid"}`` (role optional).
    """
    try:
        while True:
            data = await websocket.receive_text()
            try:
                msg = json.loads(data)
            except json.JSONDecodeError:
                logger.warning(f"Invalid JSON received: {data}")
                continue
            if not isinstance(msg, dict) or msg.get("type") != "recommend":
                await websocket.send_json({"type": "error", "text": "Unsupported message"})
                continue

            raw_role = msg.get("role")
            role = normalize_role(raw_role)
            if raw_role and role is None:
                await websocket.send_json({"type": "error", "text": f"Unknown role: {raw_role}"})
                continue
            # Result arrives through the hub as a recommendations event
            future = await asyncio.to_thread(context.tracker.request_recommendations, role)
            if future is None:
                await websocket.send_json({"type": "error", "text": "No role known yet"})
    except WebSocketDisconnect:
        pass


async def session_websocket(websocket: WebSocket, context: AppContext, hub: SessionEventHub):
    """Stream display events to one client.

    Sends the current tracker state first, then every event as JSON.
    """
    await websocket.accept()
    queue = hub.register()
    await websocket.send_json({"type": "state", **context.tracker.state.to_dict()})

    client_task = asyncio.create_task(_handle_client_messages(websocket, context))
    try:
        while not client_task.done():
            getter = asyncio.create_task(queue.get())
            done, _ = await asyncio.wait({getter, client_task}, return_when=asyncio.FIRST_COMPLETED)
            if getter in done:
                await websocket.send_json(getter.result())
            else:
                getter.cancel()
    except WebSocketDisconnect:
        pass
    finally:
        hub.unregister(queue)
        client_task.cancel()
