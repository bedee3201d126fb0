"""Deterministic stat estimates for champions without curated data.

No public stats API is used, so champions missing from
``champion_stats.json`` get plausible numbers derived from their id and
known main roles. Same id and roles always give the same stats.
"""
import json
import logging
from pathlib import Path
from typing import Optional

from nexus_crusher.models.champion import ROLE_ORDER, Role, RoleStats, Tier
from nexus_crusher.utils.role_normalizer import normalize_role

logger = logging.getLogger(__name__)

# When a champion has no explicit secondary role
FALLBACK_SECONDARY = {
    Role.TOP: Role.JUNGLE,
    Role.JUNGLE: Role.TOP,
    Role.MID: Role.TOP,
    Role.BOTTOM: Role.MID,
    Role.SUPPORT: Role.MID,
}


class StatsEstimator:
    """Estimates global and per-role stats for a champion."""

    def __init__(self, knowledge_dir: Optional[Path] = None):
        if knowledge_dir is None:
            knowledge_dir = Path(__file__).parents[1] / "knowledge"
        self.knowledge_dir = knowledge_dir
        self._primary: dict[str, Role] = {}
        self._secondary: dict[str, Role] = {}
        self._load_data()

    def _load_data(self):
        """Load primary/secondary role lists."""
        traits_path = self.knowledge_dir / "champion_traits.json"
        if not traits_path.exists():
            logger.warning(f"champion_traits.json not found at {traits_path}")
            return
        with open(traits_path, encoding="utf-8") as f:
            data = json.load(f)

        for raw_role, names in data.get("primary_roles", {}).items():
            role = normalize_role(raw_role)
            if role is None:
                continue
            for name in names:
                # First listing wins, matching lookup order top -> support
                self._primary.setdefault(name, role)

        for name, raw_role in data.get("secondary_roles", {}).items():
            role = normalize_role(raw_role)
            if role is not None:
                self._secondary[name] = role

    def primary_role(self, name: str) -> Role:
        """Main role for a champion; unknown champions default to mid."""
        return self._primary.get(name, Role.MID)

    def secondary_role(self, name: str) -> Role:
        if name in self._secondary:
            return self._secondary[name]
        return FALLBACK_SECONDARY[self.primary_role(name)]

    def estimate(self, champion_id: int, name: str) -> dict:
        """Estimate stats in the cache JSON shape (winRate, pickRate, banRate, tier, lanes)."""
        win_rate = 0.45 + (champion_id % 10) * 0.01
        pick_rate = 0.02 + (champion_id % 15) * 0.01
        ban_rate = 0.01 + (champion_id % 20) * 0.01

        return {
            "winRate": round(win_rate, 4),
            "pickRate": round(pick_rate, 4),
            "banRate": round(ban_rate, 4),
            "tier": self._tier(win_rate, pick_rate).value,
            "lanes": {
                role.value: self.estimate_role(champion_id, name, role).to_dict()
                for role in ROLE_ORDER
            },
        }

    def estimate_role(self, champion_id: int, name: str, role: Role) -> RoleStats:
        """Estimate stats for one role.

        Main role gets a large boost, secondary role a smaller one, every
        other role a penalty. Score blends win rate and popularity.
        """
        win_rate = 0.47 + (champion_id % 11) * 0.01
        pick_rate = 0.02 + (champion_id % 16) * 0.01

        if role == self.primary_role(name):
            win_rate += 0.04
            pick_rate += 0.08
        elif role == self.secondary_role(name):
            win_rate += 0.02
            pick_rate += 0.04
        else:
            win_rate -= 0.03
            pick_rate -= 0.015

        win_rate = max(0.4, min(0.58, win_rate))
        pick_rate = max(0.001, min(0.25, pick_rate))
        score = win_rate * 10 + pick_rate * 10 + win_rate * pick_rate * 100

        return RoleStats(
            win_rate=round(win_rate, 4),
            pick_rate=round(pick_rate, 4),
            score=round(score, 3),
        )

    @staticmethod
    def _tier(win_rate: float, pick_rate: float) -> Tier:
        # Centre popularity on 0.5 so both terms live on the same scale
        tier_score = win_rate * 0.6 + (0.5 + pick_rate) * 0.4
        if tier_score > 0.53:
            return Tier.S
        if tier_score > 0.51:
            return Tier.A
        if tier_score > 0.49:
            return Tier.B
        if tier_score < 0.47:
            return Tier.D
        return Tier.C
