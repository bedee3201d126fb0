"""Static trait scoring: skill ceiling roster and role strengths."""
import json
import logging
from pathlib import Path
from typing import Optional

from nexus_crusher.models.champion import Champion, Role
from nexus_crusher.models.recommendations import Adjustment
from nexus_crusher.utils.role_normalizer import normalize_role

logger = logging.getLogger(__name__)


class TraitScorer:
    """Scores fixed champion traits that raw stats don't capture."""

    SKILL_WIN_RATE_THRESHOLD = 0.5
    SKILL_BONUS = 0.5
    ROLE_STRENGTH_BONUS = 0.5

    def __init__(self, knowledge_dir: Optional[Path] = None):
        if knowledge_dir is None:
            knowledge_dir = Path(__file__).parents[2] / "knowledge"
        self.knowledge_dir = knowledge_dir
        self._high_skill: frozenset[str] = frozenset()
        self._role_strengths: dict[str, frozenset[Role]] = {}
        self._load_data()

    def _load_data(self):
        """Load the high-skill roster and per-champion strong roles."""
        traits_path = self.knowledge_dir / "champion_traits.json"
        if not traits_path.exists():
            logger.warning(f"champion_traits.json not found at {traits_path}")
            return
        with open(traits_path, encoding="utf-8") as f:
            data = json.load(f)

        self._high_skill = frozenset(data.get("high_skill", []))
        for name, raw_roles in data.get("role_strengths", {}).items():
            roles = {normalize_role(r) for r in raw_roles}
            self._role_strengths[name] = frozenset(r for r in roles if r is not None)

    def is_high_skill(self, champion_name: str) -> bool:
        return champion_name in self._high_skill

    def strong_roles(self, champion_name: str) -> frozenset[Role]:
        return self._role_strengths.get(champion_name, frozenset())

    def score(self, champion: Champion, role: Role) -> list[Adjustment]:
        """Trait adjustments for a champion in a role, in evaluation order."""
        adjustments = []

        if self.is_high_skill(champion.name):
            if champion.stats_for(role).win_rate > self.SKILL_WIN_RATE_THRESHOLD:
                adjustments.append(Adjustment(
                    "skill", self.SKILL_BONUS, "High skill champion - rewarding when mastered"
                ))
            else:
                adjustments.append(Adjustment("skill", 0.0, "High skill ceiling - needs practice"))

        if role in self.strong_roles(champion.name):
            adjustments.append(Adjustment(
                "role_synergy", self.ROLE_STRENGTH_BONUS, f"Particularly strong in {role.label}"
            ))

        return adjustments
