"""Pick recommendation engine combining all scoring components."""
import dataclasses
import logging
import threading
import time
from pathlib import Path
from typing import Callable, Optional

from nexus_crusher.exceptions import StatsUnavailableError
from nexus_crusher.models.champion import Champion, Role
from nexus_crusher.models.recommendations import Adjustment, Recommendation
from nexus_crusher.services.flavor import IntroPicker
from nexus_crusher.services.matchup_table import MatchupTable
from nexus_crusher.services.scorers import MatchupScorer, StatScorer, TraitScorer
from nexus_crusher.services.stats_store import ChampionStatsStore

logger = logging.getLogger(__name__)


class RecommendationEngine:
    """Ranks champions for a role, optionally against a lane opponent.

    Score = upstream role score + stat bands + traits + matchup. Every
    adjustment that fires contributes its reason, in that order. Ranking is
    a stable sort on the final score, so ties keep the store's order.
    """

    FALLBACK_REASON = "Decent overall performance in {role}"

    def __init__(
        self,
        stats_store: ChampionStatsStore,
        matchup_table: MatchupTable,
        knowledge_dir: Optional[Path] = None,
        cache_ttl_seconds: float = 60 * 60,
        intro_picker: Optional[IntroPicker] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.stats_store = stats_store
        self.matchup_table = matchup_table
        self.stat_scorer = StatScorer()
        self.trait_scorer = TraitScorer(knowledge_dir)
        self.matchup_scorer = MatchupScorer(matchup_table)
        self.cache_ttl_seconds = cache_ttl_seconds
        self.intro_picker = intro_picker
        self._clock = clock

        self._lock = threading.Lock()
        self._snapshot: tuple[Champion, ...] | None = None
        self._cache: dict[tuple[Role, int | None], tuple[float, tuple[Recommendation, ...]]] = {}

    def recommend(
        self,
        role: Role,
        count: int = 5,
        opponent_id: Optional[int] = None,
    ) -> list[Recommendation]:
        """Return up to ``count`` recommendations for ``role``, best first.

        Args:
            role: Canonical role (normalize user input before calling)
            count: Maximum recommendations to return, must be positive
            opponent_id: Enemy champion id in the same role, if known

        Returns:
            Ranked recommendations; empty when no statistics are available
        """
        if count < 1:
            raise ValueError(f"count must be positive, got {count}")

        try:
            champions = self.stats_store.fetch_all()
        except StatsUnavailableError as e:
            logger.warning(f"No recommendations for {role.value}: {e}")
            return []
        if not champions:
            logger.warning(f"No recommendations for {role.value}: champion list is empty")
            return []

        ranked = self._ranked(champions, role, opponent_id)
        top = ranked[:count]
        if self.intro_picker is None:
            return list(top)
        return [dataclasses.replace(r, intro=self.intro_picker.pick(r.champion, role)) for r in top]

    def _ranked(
        self,
        champions: tuple[Champion, ...],
        role: Role,
        opponent_id: Optional[int],
    ) -> tuple[Recommendation, ...]:
        key = (role, opponent_id)
        now = self._clock()
        with self._lock:
            if champions is not self._snapshot:
                # New store snapshot: old results and names are stale
                self._snapshot = champions
                self._cache.clear()
                self.matchup_table.register_names({c.id: c.name for c in champions})
            cached = self._cache.get(key)
            if cached is not None and now - cached[0] < self.cache_ttl_seconds:
                return cached[1]

        candidates = [c for c in champions if c.id != opponent_id]
        scored = [self._score(champion, role, opponent_id) for champion in candidates]
        ranked = tuple(sorted(scored, key=lambda r: r.score, reverse=True))

        with self._lock:
            if champions is self._snapshot:
                self._cache[key] = (now, ranked)
        return ranked

    def _score(self, champion: Champion, role: Role, opponent_id: Optional[int]) -> Recommendation:
        base_score = champion.stats_for(role).score
        adjustments: list[Adjustment] = []
        adjustments.extend(self.stat_scorer.score(champion, role))
        adjustments.extend(self.trait_scorer.score(champion, role))

        reasons = [a.reason for a in adjustments]
        if not reasons:
            reasons.append(self.FALLBACK_REASON.format(role=role.label))

        counters: tuple[str, ...] = ()
        countered_by: tuple[str, ...] = ()
        if opponent_id is not None:
            matchup = self.matchup_scorer.score(champion, opponent_id)
            adjustments.extend(matchup.adjustments)
            reasons.extend(a.reason for a in matchup.adjustments)
            counters = matchup.counters
            countered_by = matchup.countered_by

        return Recommendation(
            champion=champion,
            role=role,
            score=base_score + sum(a.delta for a in adjustments),
            reasons=tuple(reasons),
            base_score=base_score,
            adjustments=tuple(adjustments),
            counters=counters,
            countered_by=countered_by,
        )
