"""REST endpoints for champion recommendations."""

from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, Request
from pydantic import BaseModel

from nexus_crusher.context import AppContext
from nexus_crusher.utils.role_normalizer import normalize_role, role_choices

router = APIRouter(prefix="/api", tags=["recommendations"])


class RecommendationItem(BaseModel):
    """One ranked champion."""

    champion_id: int
    champion_name: str
    title: str
    role: str
    score: float
    base_score: float
    win_rate: float
    pick_rate: float
    tier: str | None
    reasons: list[str]
    components: dict[str, float]
    counters: list[str]
    countered_by: list[str]
    intro: str | None = None


class RecommendationsResponse(BaseModel):
    role: str
    opponent_id: int | None
    opponent_name: str | None
    stats_source: str
    recommendations: list[RecommendationItem]


def get_context(request: Request) -> AppContext:
    """App context set up by the lifespan handler (or by tests)."""
    context = getattr(request.app.state, "context", None)
    if context is None:
        raise HTTPException(status_code=503, detail="Service not ready")
    return context


@router.get("/recommendations/{role}", response_model=RecommendationsResponse)
def get_recommendations(
    request: Request,
    role: str,
    count: Annotated[int | None, Query(ge=1, le=50)] = None,
    opponent_id: Annotated[int | None, Query(ge=1)] = None,
):
    """Rank champions for a role, optionally against an opponent id.

    Runs in the threadpool; the first call may fetch champion data.
    """
    canonical = normalize_role(role)
    if canonical is None:
        raise HTTPException(
            status_code=400,
            detail=f"Unknown role '{role}'. Expected one of: {', '.join(role_choices())}",
        )

    context = get_context(request)
    limit = count or context.settings.recommendation_count
    recommendations = context.engine.recommend(canonical, limit, opponent_id)
    return RecommendationsResponse(
        role=canonical.value,
        opponent_id=opponent_id,
        opponent_name=context.matchup_table.name_of(opponent_id) if opponent_id else None,
        stats_source=context.stats_store.source,
        recommendations=[RecommendationItem(**rec.to_dict()) for rec in recommendations],
    )
