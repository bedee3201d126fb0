"""Tests for champion select snapshot parsing and role/opponent resolution."""
from nexus_crusher.models.champion import Role
from nexus_crusher.models.session import ChampSelectSession, SessionState
from nexus_crusher.services.session_observer import assigned_role, opposing_pick_in_role

PAYLOAD = {
    "localPlayerCellId": 2,
    "myTeam": [
        {"cellId": 0, "assignedPosition": "top", "championId": 0, "summonerId": 11},
        {"cellId": 2, "assignedPosition": "middle", "championId": 0, "championPickIntent": 103},
    ],
    "theirTeam": [
        {"cellId": 5, "assignedPosition": "middle", "championId": 238},
        {"cellId": 6, "assignedPosition": "utility", "championId": 0},
    ],
    "actions": [[{"id": 1, "actorCellId": 2, "championId": 103, "type": "pick", "isAllyAction": True}]],
    "timer": {"phase": "BAN_PICK", "adjustedTimeLeftInPhase": 25000},
    "bans": {"myTeamBans": []},
    "gameId": 42,
}


def test_parses_lcu_payload():
    """Test parsing an LCU session payload."""
    session = ChampSelectSession.model_validate(PAYLOAD)

    assert session.local_player_cell_id == 2
    assert session.local_player.champion_pick_intent == 103
    assert session.their_team[0].champion_id == 238
    assert session.actions[0][0].is_ally_action
    assert session.timer.phase == "BAN_PICK"


def test_missing_fields_are_defaulted():
    """Missing fields get defaults."""
    session = ChampSelectSession.model_validate({})

    assert session.local_player is None
    assert session.my_team == []
    assert session.timer.phase == ""


def test_assigned_role_is_canonical():
    """Assigned positions map to canonical roles."""
    assert assigned_role(ChampSelectSession.model_validate(PAYLOAD)) == Role.MID


def test_no_role_when_position_blank_or_player_missing():
    """No role without a position or local player."""
    blank = ChampSelectSession.model_validate({
        "localPlayerCellId": 0,
        "myTeam": [{"cellId": 0, "assignedPosition": ""}],
    })
    assert assigned_role(blank) is None
    assert assigned_role(ChampSelectSession.model_validate({"localPlayerCellId": 9})) is None


def test_opposing_pick_in_role():
    """Only locked enemy picks in the role count."""
    session = ChampSelectSession.model_validate(PAYLOAD)

    assert opposing_pick_in_role(session, Role.MID) == 238
    # Enemy support has not picked yet
    assert opposing_pick_in_role(session, Role.SUPPORT) is None
    assert opposing_pick_in_role(session, Role.TOP) is None


def test_session_state_reset():
    """Reset clears every tracked field."""
    state = SessionState(active=True, last_role=Role.TOP, last_opponent=122)
    assert state.to_dict() == {"active": True, "role": "TOP", "opponent_id": 122}

    state.reset()

    assert state == SessionState()
