"""Champion, role and tier models."""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping


class Role(str, Enum):
    """The five canonical roles used everywhere past the boundary."""

    TOP = "TOP"
    JUNGLE = "JUNGLE"
    MID = "MID"
    BOTTOM = "BOTTOM"
    SUPPORT = "SUPPORT"

    @property
    def label(self) -> str:
        """Lowercase display label ("top", "bottom", ...)."""
        return self.value.lower()


# Role ordering for consistent display/sorting
ROLE_ORDER: tuple[Role, ...] = (Role.TOP, Role.JUNGLE, Role.MID, Role.BOTTOM, Role.SUPPORT)


class Tier(str, Enum):
    """Coarse meta tier, S strongest."""

    S = "S"
    A = "A"
    B = "B"
    C = "C"
    D = "D"

    @classmethod
    def parse(cls, value: Any) -> "Tier | None":
        """Parse a tier label, returning None for missing or unknown labels."""
        if isinstance(value, Tier):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().upper())
        except ValueError:
            return None


def _rate(value: Any, default: float) -> float:
    """Coerce a rate to a float clamped to [0, 1]."""
    try:
        rate = float(value)
    except (TypeError, ValueError):
        return default
    return min(1.0, max(0.0, rate))


def _number(value: Any, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class RoleStats:
    """Per-role performance for one champion."""

    win_rate: float = 0.5
    pick_rate: float = 0.05
    score: float = 5.0  # Pre-aggregated desirability, computed upstream

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "RoleStats":
        if not data:
            return NEUTRAL_ROLE_STATS
        return cls(
            win_rate=_rate(data.get("winRate", data.get("win_rate")), 0.5),
            pick_rate=_rate(data.get("pickRate", data.get("pick_rate")), 0.05),
            score=_number(data.get("score"), 5.0),
        )

    def to_dict(self) -> dict:
        return {"winRate": self.win_rate, "pickRate": self.pick_rate, "score": self.score}


NEUTRAL_ROLE_STATS = RoleStats()


@dataclass(frozen=True)
class Champion:
    """A champion with global rates and stats for every role.

    Instances are immutable; a fresh list replaces the old one on refresh.
    """

    id: int
    name: str
    title: str = ""
    win_rate: float = 0.5
    pick_rate: float = 0.05
    ban_rate: float = 0.01
    tier: Tier | None = None
    roles: Mapping[Role, RoleStats] = field(default_factory=dict)

    def __post_init__(self):
        # Every champion carries all five roles
        complete = {role: self.roles.get(role, NEUTRAL_ROLE_STATS) for role in ROLE_ORDER}
        object.__setattr__(self, "roles", MappingProxyType(complete))

    def stats_for(self, role: Role) -> RoleStats:
        """Stats for a role (always present)."""
        return self.roles[role]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Champion":
        """Build a champion from the cached/bundled JSON shape.

        Accepts both ``lanes`` (cache format) and ``roles`` keys, and any role
        synonym as lane key. Missing values fall back to neutral defaults.
        """
        from nexus_crusher.utils.role_normalizer import normalize_role

        raw_roles = data.get("lanes") or data.get("roles") or {}
        roles: dict[Role, RoleStats] = {}
        for raw_role, stats in raw_roles.items():
            role = normalize_role(raw_role)
            if role is not None:
                roles[role] = RoleStats.from_dict(stats)

        return cls(
            id=int(data["id"]),
            name=str(data.get("name") or f"Champion {data['id']}"),
            title=str(data.get("title") or ""),
            win_rate=_rate(data.get("winRate", data.get("win_rate")), 0.5),
            pick_rate=_rate(data.get("pickRate", data.get("pick_rate")), 0.05),
            ban_rate=_rate(data.get("banRate", data.get("ban_rate")), 0.01),
            tier=Tier.parse(data.get("tier")),
            roles=roles,
        )

    def to_dict(self) -> dict:
        """Serialize to the cache JSON shape."""
        return {
            "id": self.id,
            "name": self.name,
            "title": self.title,
            "winRate": self.win_rate,
            "pickRate": self.pick_rate,
            "banRate": self.ban_rate,
            "tier": self.tier.value if self.tier else None,
            "lanes": {role.value: self.roles[role].to_dict() for role in ROLE_ORDER},
        }
