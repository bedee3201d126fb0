"""Statistic band scoring: win rate, pick rate, tier and ban rate."""
from nexus_crusher.models.champion import Champion, Role, Tier
from nexus_crusher.models.recommendations import Adjustment


def _pct(rate: float) -> str:
    return f"{rate * 100:.1f}%"


class StatScorer:
    """Turns a champion's rates into score adjustments with reasons.

    Each band that matches yields one Adjustment. A zero delta still
    carries a reason (it explains something without moving the score).
    """

    # Win rate bands (role-specific)
    HIGH_WIN_RATE = 0.53
    ABOVE_AVERAGE_WIN_RATE = 0.51
    LOW_WIN_RATE = 0.47
    HIGH_WIN_RATE_BONUS = 1.0
    ABOVE_AVERAGE_WIN_RATE_BONUS = 0.5

    # Pick rate bands (role-specific). The two low bands stack.
    VERY_POPULAR_PICK_RATE = 0.15
    POPULAR_PICK_RATE = 0.10
    UNCOMMON_PICK_RATE = 0.03
    RARE_PICK_RATE = 0.01
    VERY_POPULAR_BONUS = 0.75
    POPULAR_BONUS = 0.5
    UNCOMMON_BONUS = 0.3
    RARE_BONUS = 0.4

    TIER_ADJUSTMENTS = {
        Tier.S: 1.5,
        Tier.A: 1.0,
        Tier.B: 0.5,
        Tier.D: -0.5,
    }

    # Ban rate bands (global)
    FREQUENT_BAN_RATE = 0.20
    OFTEN_BAN_RATE = 0.10
    FREQUENT_BAN_BONUS = 0.75
    OFTEN_BAN_BONUS = 0.4

    def score(self, champion: Champion, role: Role) -> list[Adjustment]:
        """All stat adjustments for a champion in a role, in evaluation order."""
        stats = champion.stats_for(role)
        adjustments: list[Adjustment] = []
        adjustments.extend(self._win_rate(stats.win_rate))
        adjustments.extend(self._pick_rate(stats.pick_rate))
        adjustments.extend(self._tier(champion.tier))
        adjustments.extend(self._ban_rate(champion.ban_rate))
        return adjustments

    def _win_rate(self, win_rate: float) -> list[Adjustment]:
        if win_rate >= self.HIGH_WIN_RATE:
            return [Adjustment("win_rate", self.HIGH_WIN_RATE_BONUS, f"High win rate ({_pct(win_rate)})")]
        if win_rate >= self.ABOVE_AVERAGE_WIN_RATE:
            return [Adjustment(
                "win_rate", self.ABOVE_AVERAGE_WIN_RATE_BONUS, f"Above average win rate ({_pct(win_rate)})"
            )]
        if win_rate < self.LOW_WIN_RATE:
            # Low win rate reads as difficulty, not weakness
            return [Adjustment("win_rate", 0.0, "Challenging to master - rewards practice")]
        return []

    def _pick_rate(self, pick_rate: float) -> list[Adjustment]:
        if pick_rate > self.VERY_POPULAR_PICK_RATE:
            return [Adjustment("pick_rate", self.VERY_POPULAR_BONUS, f"Very popular pick ({_pct(pick_rate)})")]
        if pick_rate > self.POPULAR_PICK_RATE:
            return [Adjustment("pick_rate", self.POPULAR_BONUS, f"Popular pick ({_pct(pick_rate)})")]

        adjustments = []
        if pick_rate < self.UNCOMMON_PICK_RATE:
            adjustments.append(
                Adjustment("pick_rate", self.UNCOMMON_BONUS, "Uncommon pick - may surprise opponents")
            )
        if pick_rate < self.RARE_PICK_RATE:
            adjustments.append(
                Adjustment("rare_pick", self.RARE_BONUS, "Rare pick - opponents may be unfamiliar")
            )
        return adjustments

    def _tier(self, tier: Tier | None) -> list[Adjustment]:
        delta = self.TIER_ADJUSTMENTS.get(tier) if tier else None
        if delta is None:
            return []
        if tier == Tier.B:
            reason = "Solid B-tier choice"
        elif tier == Tier.D:
            reason = "D-tier in the current meta"
        else:
            reason = f"{tier.value}-tier champion in the current meta"
        return [Adjustment("tier", delta, reason)]

    def _ban_rate(self, ban_rate: float) -> list[Adjustment]:
        if ban_rate > self.FREQUENT_BAN_RATE:
            return [Adjustment("ban_rate", self.FREQUENT_BAN_BONUS, "Frequently banned - very strong")]
        if ban_rate > self.OFTEN_BAN_RATE:
            return [Adjustment("ban_rate", self.OFTEN_BAN_BONUS, f"Often banned ({_pct(ban_rate)})")]
        return []
