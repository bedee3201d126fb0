"""Champion select observation over the League client (LCU) API."""
import asyncio
import concurrent.futures
import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from lcu_driver import Connector
from pydantic import ValidationError

from nexus_crusher.exceptions import ObserverUnavailableError
from nexus_crusher.models.champion import Role
from nexus_crusher.models.session import ChampSelectSession
from nexus_crusher.utils.role_normalizer import normalize_role

logger = logging.getLogger(__name__)

SESSION_ENDPOINT = "/lol-champ-select/v1/session"

SnapshotCallback = Callable[[ChampSelectSession], None]


def assigned_role(snapshot: ChampSelectSession) -> Optional[Role]:
    """The local player's assigned position, canonicalized."""
    player = snapshot.local_player
    if player is None:
        return None
    return normalize_role(player.assigned_position)


def opposing_pick_in_role(snapshot: ChampSelectSession, role: Role) -> Optional[int]:
    """Champion id picked by the enemy in ``role``, if any is visible."""
    for member in snapshot.their_team:
        if member.champion_id > 0 and normalize_role(member.assigned_position) == role:
            return member.champion_id
    return None


class SessionObserver(ABC):
    """Source of champion select snapshots.

    Subscribers are called once per pushed snapshot, in arrival order, on
    the observer's own thread.
    """

    def __init__(self):
        self._subscribers: list[SnapshotCallback] = []
        self._subscribers_lock = threading.Lock()

    def subscribe(self, callback: SnapshotCallback) -> Callable[[], None]:
        """Register a snapshot callback. Returns a function that unsubscribes it."""
        with self._subscribers_lock:
            self._subscribers.append(callback)

        def unsubscribe():
            with self._subscribers_lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def _publish(self, snapshot: ChampSelectSession) -> None:
        with self._subscribers_lock:
            subscribers = list(self._subscribers)
        for callback in subscribers:
            try:
                callback(snapshot)
            except Exception:
                logger.exception("Session subscriber failed")

    @abstractmethod
    def current_session(self) -> Optional[ChampSelectSession]:
        """Fetch the live snapshot, or None when not in champion select."""

    @abstractmethod
    def is_session_active(self) -> bool:
        """Whether a champion select session currently exists."""

    def assigned_role(self, snapshot: ChampSelectSession) -> Optional[Role]:
        return assigned_role(snapshot)

    def opposing_pick_in_role(self, snapshot: ChampSelectSession, role: Role) -> Optional[int]:
        return opposing_pick_in_role(snapshot, role)


class LcuSessionObserver(SessionObserver):
    """Observer backed by lcu_driver.

    The connector finds the client process, authenticates from its
    lockfile and streams ``/lol-champ-select/v1/session`` over the client
    WebSocket. It blocks, so it runs on a daemon thread with its own event
    loop; synchronous callers reach that loop through
    ``asyncio.run_coroutine_threadsafe``.
    """

    def __init__(self, request_timeout: float = 2.0, connector_factory: Callable[..., Any] = Connector):
        super().__init__()
        self.request_timeout = request_timeout
        self._connector_factory = connector_factory
        self._connector = None
        self._connection = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._ready = threading.Event()

    @property
    def connected(self) -> bool:
        return self._ready.is_set() and self._connection is not None

    def connect(self, timeout: Optional[float] = None) -> bool:
        """Start the connector thread (once) and wait for the client.

        Returns:
            True if the client connected within ``timeout`` seconds. On
            False the connector keeps searching in the background.
        """
        if self._thread is None or not self._thread.is_alive():
            self._thread = threading.Thread(target=self._run, name="lcu-connector", daemon=True)
            self._thread.start()
        return self._ready.wait(timeout)

    def disconnect(self) -> None:
        """Stop the connector and forget the connection."""
        loop, connector = self._loop, self._connector
        if loop is not None and connector is not None and loop.is_running():
            future = asyncio.run_coroutine_threadsafe(connector.stop(), loop)
            try:
                future.result(self.request_timeout)
            except (concurrent.futures.TimeoutError, RuntimeError) as e:
                logger.warning(f"LCU connector did not stop cleanly: {e}")
        self._mark_disconnected()

    def _mark_disconnected(self):
        self._ready.clear()
        self._connection = None

    def _run(self):
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        self._loop = loop
        self._connector = self._connector_factory(loop=loop)
        self._register_handlers(self._connector)
        try:
            self._connector.start()
        except Exception:
            logger.exception("LCU connector stopped unexpectedly")
        finally:
            self._mark_disconnected()
            loop.close()

    def _register_handlers(self, connector):
        @connector.ready
        async def on_ready(connection):
            logger.info("Connected to League client")
            self._connection = connection
            self._ready.set()
            # Already in champion select when we attached
            status, data = await self._get(SESSION_ENDPOINT)
            if status == 200 and data:
                self.handle_session_payload(data)

        @connector.close
        async def on_close(connection):
            logger.info("League client connection closed")
            self._mark_disconnected()

        @connector.ws.register(SESSION_ENDPOINT, event_types=("CREATE", "UPDATE"))
        async def on_session(connection, event):
            self.handle_session_payload(event.data)

    def handle_session_payload(self, data: Any) -> Optional[ChampSelectSession]:
        """Validate a raw session payload and hand it to subscribers."""
        try:
            snapshot = ChampSelectSession.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Ignoring malformed champion select payload: {e}")
            return None
        self._publish(snapshot)
        return snapshot

    async def _get(self, path: str) -> tuple[int, Any]:
        response = await self._connection.request("get", path)
        if response.status != 200:
            return response.status, None
        return response.status, await response.json()

    def _request(self, path: str) -> tuple[int, Any]:
        """Run a GET on the connector loop from another thread.

        Raises:
            ObserverUnavailableError: Not connected, or no answer in time
        """
        loop = self._loop
        if not self.connected or loop is None or not loop.is_running():
            raise ObserverUnavailableError("League client is not connected")
        coro = self._get(path)
        try:
            future = asyncio.run_coroutine_threadsafe(coro, loop)
        except RuntimeError as e:
            # Loop closed between the check and the call
            coro.close()
            raise ObserverUnavailableError("League client connection closed") from e
        try:
            return future.result(self.request_timeout)
        except concurrent.futures.TimeoutError as e:
            future.cancel()
            raise ObserverUnavailableError(f"League client did not answer {path} in time") from e
        except Exception as e:
            raise ObserverUnavailableError(f"League client request {path} failed: {e}") from e

    def current_session(self) -> Optional[ChampSelectSession]:
        try:
            status, data = self._request(SESSION_ENDPOINT)
        except ObserverUnavailableError as e:
            logger.debug(f"No session: {e}")
            return None
        if status != 200 or not data:
            return None
        try:
            return ChampSelectSession.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Malformed champion select session: {e}")
            return None

    def is_session_active(self) -> bool:
        try:
            status, _ = self._request(SESSION_ENDPOINT)
        except ObserverUnavailableError as e:
            logger.debug(f"Session liveness unknown, treating as ended: {e}")
            return False
        return status == 200
