"""Champion select state machine that decides when to refresh recommendations."""
import dataclasses
import itertools
import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Callable, Optional

from nexus_crusher.models.champion import Role
from nexus_crusher.models.events import (
    DisplayEvent,
    ErrorEvent,
    OpponentChangedEvent,
    RecommendationsEvent,
    RoleChangedEvent,
    SessionEndedEvent,
    SessionStartedEvent,
)
from nexus_crusher.models.recommendations import RecommendationBatch, TriggerKind
from nexus_crusher.models.session import ChampSelectSession, SessionState
from nexus_crusher.services.recommendation_engine import RecommendationEngine
from nexus_crusher.services.session_observer import SessionObserver

logger = logging.getLogger(__name__)

EventSink = Callable[[DisplayEvent], None]


class SessionTracker:
    """Tracks one champion select at a time.

    Idle until the first snapshot arrives, then Active until the liveness
    poll reports the session gone. While Active, the role and the lane
    opponent are each re-resolved per snapshot and only a change (never a
    repeat) triggers new recommendations.

    Transitions are serialized by one lock. Engine calls run on an
    executor; each gets a request id, and a result that finishes after a
    newer request was dispatched is delivered with ``superseded=True``.
    """

    def __init__(
        self,
        engine: RecommendationEngine,
        observer: SessionObserver,
        emit: EventSink,
        count: int = 5,
        poll_interval: float = 10.0,
        executor: Optional[Executor] = None,
    ):
        self.engine = engine
        self.observer = observer
        self.count = count
        self.poll_interval = poll_interval
        self._emit_callback = emit
        self._owns_executor = executor is None
        self.executor = executor or ThreadPoolExecutor(max_workers=2, thread_name_prefix="recommend")

        self._lock = threading.Lock()
        self._state = SessionState()
        self._request_ids = itertools.count(1)
        self._latest_request_id = 0
        self._stop = threading.Event()
        self._poll_thread: Optional[threading.Thread] = None
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def state(self) -> SessionState:
        """A copy of the tracked state."""
        with self._lock:
            return dataclasses.replace(self._state)

    @property
    def latest_request_id(self) -> int:
        return self._latest_request_id

    def is_latest(self, request_id: int) -> bool:
        return request_id == self._latest_request_id

    def start(self) -> None:
        """Subscribe to the observer and start the liveness poll."""
        if self._unsubscribe is None:
            self._unsubscribe = self.observer.subscribe(self.handle_snapshot)
        if self._poll_thread is None or not self._poll_thread.is_alive():
            self._stop.clear()
            self._poll_thread = threading.Thread(target=self._poll_loop, name="liveness-poll", daemon=True)
            self._poll_thread.start()

    def stop(self) -> None:
        self._stop.set()
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if self._poll_thread is not None:
            self._poll_thread.join(timeout=1.0)
            self._poll_thread = None
        if self._owns_executor:
            self.executor.shutdown(wait=False)

    def _poll_loop(self):
        while not self._stop.wait(self.poll_interval):
            try:
                self.check_liveness()
            except Exception:
                logger.exception("Liveness check failed")

    def handle_snapshot(self, snapshot: ChampSelectSession) -> None:
        """Apply one pushed snapshot: start the session, then diff role and opponent."""
        with self._lock:
            role = self.observer.assigned_role(snapshot)

            if not self._state.active:
                self._state.active = True
                self._state.last_role = role
                self._state.last_opponent = None
                logger.info(f"Champion select started (role={role.value if role else None})")
                self._emit(SessionStartedEvent(role))
                if role is not None:
                    self._dispatch(role, None, TriggerKind.INITIAL)
            elif role is not None and role != self._state.last_role:
                previous = self._state.last_role
                self._state.last_role = role
                # The stored opponent was for the old role
                self._state.last_opponent = None
                logger.info(f"Role changed {previous} -> {role.value}")
                self._emit(RoleChangedEvent(previous, role))
                self._dispatch(role, None, TriggerKind.ROLE_CHANGED)

            role = self._state.last_role
            if role is None:
                return
            opponent_id = self.observer.opposing_pick_in_role(snapshot, role)
            if opponent_id is not None and opponent_id != self._state.last_opponent:
                self._state.last_opponent = opponent_id
                name = self.engine.matchup_table.name_of(opponent_id)
                logger.info(f"Lane opponent is now {name} ({opponent_id})")
                self._emit(OpponentChangedEvent(role, opponent_id, name))
                self._dispatch(role, opponent_id, TriggerKind.OPPONENT_CHANGED)

    def check_liveness(self) -> bool:
        """Ask the observer whether the session still exists; reset when it doesn't.

        Returns:
            True while a session is tracked and still active
        """
        with self._lock:
            if not self._state.active:
                return False
        # Client I/O stays outside the lock
        active = self.observer.is_session_active()
        if active:
            return True
        with self._lock:
            if not self._state.active:
                return False
            self._state.reset()
            logger.info("Champion select ended")
            self._emit(SessionEndedEvent())
        return False

    def request_recommendations(self, role: Optional[Role] = None) -> Optional[Future]:
        """Compute recommendations on demand without touching tracked state.

        Uses ``role`` if given, otherwise the tracked role. The opponent is
        looked up live for that role.

        Returns:
            The pending future, or None when no role is known
        """
        with self._lock:
            target = role or self._state.last_role
        if target is None:
            return None

        snapshot = self.observer.current_session()
        opponent_id = self.observer.opposing_pick_in_role(snapshot, target) if snapshot else None
        with self._lock:
            return self._dispatch(target, opponent_id, TriggerKind.MANUAL)

    def _dispatch(self, role: Role, opponent_id: Optional[int], trigger: TriggerKind) -> Optional[Future]:
        # Caller holds self._lock
        request_id = next(self._request_ids)
        self._latest_request_id = request_id
        try:
            future = self.executor.submit(self._compute, role, opponent_id, trigger, request_id)
        except RuntimeError as e:
            logger.warning(f"Recommendation request {request_id} not dispatched: {e}")
            return None
        future.add_done_callback(self._deliver)
        return future

    def _compute(
        self,
        role: Role,
        opponent_id: Optional[int],
        trigger: TriggerKind,
        request_id: int,
    ) -> RecommendationBatch:
        recommendations = self.engine.recommend(role, self.count, opponent_id)
        return RecommendationBatch(
            role=role,
            recommendations=tuple(recommendations),
            opponent_id=opponent_id,
            opponent_name=self.engine.matchup_table.name_of(opponent_id) if opponent_id is not None else None,
            request_id=request_id,
            trigger=trigger,
        )

    def _deliver(self, future: Future) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            logger.error(f"Recommendation request failed: {error}")
            self._emit(ErrorEvent(f"Could not compute recommendations: {error}"))
            return
        batch = future.result()
        self._emit(RecommendationsEvent(batch, superseded=not self.is_latest(batch.request_id)))

    def _emit(self, event: DisplayEvent) -> None:
        try:
            self._emit_callback(event)
        except Exception:
            logger.exception(f"Display sink failed on {event.type} event")
