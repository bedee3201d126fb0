"""Recommendation models for pick suggestions."""

from dataclasses import dataclass
from enum import Enum

from nexus_crusher.models.champion import Champion, Role


class TriggerKind(str, Enum):
    """What caused a set of recommendations to be computed."""

    INITIAL = "initial"  # Champion select just detected
    ROLE_CHANGED = "role_changed"
    OPPONENT_CHANGED = "opponent_changed"
    MANUAL = "manual"  # User asked via shell or API


@dataclass(frozen=True)
class Adjustment:
    """One scoring signal: how much it moved the score and why."""

    signal: str  # "win_rate", "pick_rate", "tier", "ban_rate", "skill", "role_synergy", "matchup"
    delta: float
    reason: str


@dataclass(frozen=True)
class Recommendation:
    """A recommended champion for a role."""

    champion: Champion
    role: Role
    score: float  # Final score after all adjustments
    reasons: tuple[str, ...]
    base_score: float = 0.0  # Upstream per-role score before adjustments
    adjustments: tuple[Adjustment, ...] = ()
    counters: tuple[str, ...] = ()  # Opponent names this pick counters
    countered_by: tuple[str, ...] = ()  # Opponent names that counter this pick
    intro: str | None = None  # Decorative, never scored

    def to_dict(self) -> dict:
        """Serialize to dictionary for JSON response."""
        stats = self.champion.stats_for(self.role)
        return {
            "champion_id": self.champion.id,
            "champion_name": self.champion.name,
            "title": self.champion.title,
            "role": self.role.value,
            "score": round(self.score, 3),
            "base_score": round(self.base_score, 3),
            "win_rate": stats.win_rate,
            "pick_rate": stats.pick_rate,
            "tier": self.champion.tier.value if self.champion.tier else None,
            "reasons": list(self.reasons),
            "components": {a.signal: round(a.delta, 3) for a in self.adjustments},
            "counters": list(self.counters),
            "countered_by": list(self.countered_by),
            "intro": self.intro,
        }


@dataclass(frozen=True)
class RecommendationBatch:
    """Engine output tagged with the request it answers.

    request_id grows monotonically per tracker; consumers can drop a batch
    whose request_id is older than the latest one they have seen.
    """

    role: Role
    recommendations: tuple[Recommendation, ...]
    opponent_id: int | None = None
    opponent_name: str | None = None
    request_id: int = 0
    trigger: TriggerKind = TriggerKind.MANUAL

    @property
    def is_empty(self) -> bool:
        return not self.recommendations

    def to_dict(self) -> dict:
        return {
            "role": self.role.value,
            "opponent_id": self.opponent_id,
            "opponent_name": self.opponent_name,
            "request_id": self.request_id,
            "trigger": self.trigger.value,
            "recommendations": [r.to_dict() for r in self.recommendations],
        }
