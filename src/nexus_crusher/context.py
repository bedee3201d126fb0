"""Explicitly built application context shared by the shell and the API."""
import logging
import random
import threading
from concurrent.futures import Executor
from dataclasses import dataclass, field
from typing import Callable, Optional

from nexus_crusher.config import Settings, get_settings
from nexus_crusher.models.events import DisplayEvent
from nexus_crusher.services.data_dragon_client import DataDragonClient
from nexus_crusher.services.flavor import IntroPicker
from nexus_crusher.services.matchup_table import MatchupTable
from nexus_crusher.services.recommendation_engine import RecommendationEngine
from nexus_crusher.services.session_observer import LcuSessionObserver, SessionObserver
from nexus_crusher.services.session_tracker import SessionTracker
from nexus_crusher.services.stats_store import ChampionStatsStore

logger = logging.getLogger(__name__)

EventSink = Callable[[DisplayEvent], None]


class EventBroadcaster:
    """Fans display events out to every registered sink (shell, WebSocket hub)."""

    def __init__(self):
        self._sinks: list[EventSink] = []
        self._lock = threading.Lock()

    def add_sink(self, sink: EventSink) -> None:
        with self._lock:
            self._sinks.append(sink)

    def remove_sink(self, sink: EventSink) -> None:
        with self._lock:
            if sink in self._sinks:
                self._sinks.remove(sink)

    def __call__(self, event: DisplayEvent) -> None:
        with self._lock:
            sinks = list(self._sinks)
        for sink in sinks:
            try:
                sink(event)
            except Exception:
                logger.exception(f"Event sink failed on {event.type}")


@dataclass
class AppContext:
    settings: Settings
    stats_store: ChampionStatsStore
    matchup_table: MatchupTable
    engine: RecommendationEngine
    observer: SessionObserver
    tracker: SessionTracker
    events: EventBroadcaster = field(default_factory=EventBroadcaster)

    def start(self) -> None:
        self.tracker.start()

    def close(self) -> None:
        """Stop tracking and release client connections."""
        self.tracker.stop()
        if isinstance(self.observer, LcuSessionObserver):
            self.observer.disconnect()
        self.stats_store.client.close()


def build_context(
    settings: Optional[Settings] = None,
    observer: Optional[SessionObserver] = None,
    executor: Optional[Executor] = None,
) -> AppContext:
    """Wire every collaborator from settings.

    Args:
        settings: Defaults to the cached environment settings
        observer: Replaces the LCU observer (tests pass a fake)
        executor: Executor for engine calls; the tracker owns a pool if omitted
    """
    settings = settings or get_settings()

    client = DataDragonClient(
        base_url=settings.data_dragon_url,
        locale=settings.data_dragon_locale,
        timeout=settings.http_timeout,
        fallback_version=settings.fallback_game_version,
    )
    stats_store = ChampionStatsStore(
        cache_dir=settings.cache_dir,
        knowledge_dir=settings.knowledge_dir,
        client=client,
        cache_ttl_hours=settings.stats_cache_ttl_hours,
        estimate_missing=settings.estimate_missing_stats,
    )
    matchup_table = MatchupTable(
        knowledge_dir=settings.knowledge_dir,
        infer_symmetric=settings.infer_symmetric_matchups,
    )
    intro_picker = IntroPicker(random.Random(settings.intro_seed)) if settings.show_intros else None
    engine = RecommendationEngine(
        stats_store,
        matchup_table,
        knowledge_dir=settings.knowledge_dir,
        cache_ttl_seconds=settings.recommendation_cache_ttl_seconds,
        intro_picker=intro_picker,
    )
    if observer is None:
        observer = LcuSessionObserver(request_timeout=settings.lcu_request_timeout)

    events = EventBroadcaster()
    tracker = SessionTracker(
        engine,
        observer,
        emit=events,
        count=settings.recommendation_count,
        poll_interval=settings.liveness_poll_interval,
        executor=executor,
    )
    return AppContext(
        settings=settings,
        stats_store=stats_store,
        matchup_table=matchup_table,
        engine=engine,
        observer=observer,
        tracker=tracker,
        events=events,
    )
