"""Business logic services."""

from nexus_crusher.services.matchup_table import MatchupTable
from nexus_crusher.services.recommendation_engine import RecommendationEngine
from nexus_crusher.services.session_observer import LcuSessionObserver, SessionObserver
from nexus_crusher.services.session_tracker import SessionTracker
from nexus_crusher.services.stats_store import ChampionStatsStore

__all__ = [
    "ChampionStatsStore",
    "MatchupTable",
    "RecommendationEngine",
    "SessionObserver",
    "LcuSessionObserver",
    "SessionTracker",
]
