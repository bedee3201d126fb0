"""Champion select snapshot and tracked session state."""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

from nexus_crusher.models.champion import Role


class _LcuModel(BaseModel):
    """Base for LCU payloads: camelCase aliases, unknown fields ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class TeamMember(_LcuModel):
    """One player slot in champion select."""

    cell_id: int = Field(-1, alias="cellId")
    assigned_position: str = Field("", alias="assignedPosition")
    champion_id: int = Field(0, alias="championId")
    champion_pick_intent: int = Field(0, alias="championPickIntent")
    summoner_id: int = Field(0, alias="summonerId")
    team: int = 0


class SessionAction(_LcuModel):
    """A pick or ban action."""

    id: int = 0
    actor_cell_id: int = Field(-1, alias="actorCellId")
    champion_id: int = Field(0, alias="championId")
    completed: bool = False
    is_ally_action: bool = Field(False, alias="isAllyAction")
    type: str = ""


class SessionTimer(_LcuModel):
    phase: str = ""
    adjusted_time_left_in_phase: int = Field(0, alias="adjustedTimeLeftInPhase")
    total_time_in_phase: int = Field(0, alias="totalTimeInPhase")
    is_infinite: bool = Field(False, alias="isInfinite")


class ChampSelectSession(_LcuModel):
    """Validated /lol-champ-select/v1/session payload."""

    local_player_cell_id: int = Field(-1, alias="localPlayerCellId")
    my_team: list[TeamMember] = Field(default_factory=list, alias="myTeam")
    their_team: list[TeamMember] = Field(default_factory=list, alias="theirTeam")
    actions: list[list[SessionAction]] = Field(default_factory=list)
    timer: SessionTimer = Field(default_factory=SessionTimer)

    @property
    def local_player(self) -> TeamMember | None:
        """The user's own slot, if present."""
        for member in self.my_team:
            if member.cell_id == self.local_player_cell_id:
                return member
        return None


@dataclass
class SessionState:
    """Everything the tracker remembers about the current champion select.

    Reset entirely when the session ends; nothing survives across sessions.
    """

    active: bool = False
    last_role: Role | None = None
    last_opponent: int | None = None

    def reset(self) -> None:
        self.active = False
        self.last_role = None
        self.last_opponent = None

    def to_dict(self) -> dict:
        return {
            "active": self.active,
            "role": self.last_role.value if self.last_role else None,
            "opponent_id": self.last_opponent,
        }
