"""REST endpoint exposing the tracked champion select."""

from fastapi import APIRouter, Request
from pydantic import BaseModel

from nexus_crusher.api.routes.recommendations import get_context
from nexus_crusher.services.session_observer import LcuSessionObserver

router = APIRouter(prefix="/api", tags=["session"])


class SessionResponse(BaseModel):
    active: bool
    role: str | None
    opponent_id: int | None
    opponent_name: str | None
    client_connected: bool
    latest_request_id: int


@router.get("/session", response_model=SessionResponse)
async def get_session(request: Request):
    """Current tracker state. Never touches the League client."""
    context = get_context(request)
    state = context.tracker.state
    observer = context.observer
    connected = observer.connected if isinstance(observer, LcuSessionObserver) else True
    return SessionResponse(
        **state.to_dict(),
        opponent_name=context.matchup_table.name_of(state.last_opponent) if state.last_opponent else None,
        client_connected=connected,
        latest_request_id=context.tracker.latest_request_id,
    )
