"""Data models for the champion select companion."""

from nexus_crusher.models.champion import (
    ROLE_ORDER,
    Champion,
    Role,
    RoleStats,
    Tier,
)
from nexus_crusher.models.recommendations import (
    Adjustment,
    Recommendation,
    RecommendationBatch,
    TriggerKind,
)
from nexus_crusher.models.session import ChampSelectSession, SessionState, TeamMember
from nexus_crusher.models.events import (
    DisplayEvent,
    ErrorEvent,
    OpponentChangedEvent,
    RecommendationsEvent,
    RoleChangedEvent,
    SessionEndedEvent,
    SessionStartedEvent,
    StatusEvent,
)

__all__ = [
    "ROLE_ORDER",
    "Champion",
    "Role",
    "RoleStats",
    "Tier",
    "Adjustment",
    "Recommendation",
    "RecommendationBatch",
    "TriggerKind",
    "ChampSelectSession",
    "SessionState",
    "TeamMember",
    "DisplayEvent",
    "ErrorEvent",
    "OpponentChangedEvent",
    "RecommendationsEvent",
    "RoleChangedEvent",
    "SessionEndedEvent",
    "SessionStartedEvent",
    "StatusEvent",
]
