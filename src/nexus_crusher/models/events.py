"""Display events emitted by the session tracker and consumed by the shell/API."""

from dataclasses import dataclass

from nexus_crusher.models.champion import Role
from nexus_crusher.models.recommendations import RecommendationBatch


@dataclass(frozen=True)
class DisplayEvent:
    """Base class for everything the shell can render."""

    type = "event"

    def to_dict(self) -> dict:
        return {"type": self.type}


@dataclass(frozen=True)
class StatusEvent(DisplayEvent):
    text: str
    type = "status"

    def to_dict(self) -> dict:
        return {"type": self.type, "text": self.text}


@dataclass(frozen=True)
class ErrorEvent(DisplayEvent):
    text: str
    type = "error"

    def to_dict(self) -> dict:
        return {"type": self.type, "text": self.text}


@dataclass(frozen=True)
class SessionStartedEvent(DisplayEvent):
    """Champion select detected; role may not be assigned yet."""

    role: Role | None
    type = "session_started"

    def to_dict(self) -> dict:
        return {"type": self.type, "role": self.role.value if self.role else None}


@dataclass(frozen=True)
class RoleChangedEvent(DisplayEvent):
    previous: Role | None
    role: Role
    type = "role_changed"

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "previous": self.previous.value if self.previous else None,
            "role": self.role.value,
        }


@dataclass(frozen=True)
class OpponentChangedEvent(DisplayEvent):
    """A new enemy pick appeared in the user's role."""

    role: Role
    opponent_id: int
    opponent_name: str
    type = "opponent_changed"

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "role": self.role.value,
            "opponent_id": self.opponent_id,
            "opponent_name": self.opponent_name,
        }


@dataclass(frozen=True)
class SessionEndedEvent(DisplayEvent):
    type = "session_ended"


@dataclass(frozen=True)
class RecommendationsEvent(DisplayEvent):
    """A finished recommendation batch.

    superseded is True when a newer request was dispatched before this one
    finished; the consumer should not show it as current.
    """

    batch: RecommendationBatch
    superseded: bool = False
    type = "recommendations"

    def to_dict(self) -> dict:
        return {"type": self.type, "superseded": self.superseded, **self.batch.to_dict()}
