"""Counter-pick scoring against a known lane opponent."""
from dataclasses import dataclass

from nexus_crusher.models.champion import Champion
from nexus_crusher.models.recommendations import Adjustment
from nexus_crusher.services.matchup_table import MatchupTable


@dataclass(frozen=True)
class MatchupResult:
    adjustments: tuple[Adjustment, ...] = ()
    counters: tuple[str, ...] = ()
    countered_by: tuple[str, ...] = ()


class MatchupScorer:
    """Applies the counter bonus and countered-by penalty.

    The counter bonus outweighs all stat and trait bonuses combined, so a
    known counter floats to the top. The penalty is smaller but still big
    enough to push a top pick down the list.
    """

    COUNTER_BONUS = 6.0
    COUNTERED_PENALTY = -4.0

    def __init__(self, matchup_table: MatchupTable):
        self.matchup_table = matchup_table

    def score(self, champion: Champion, opponent_id: int) -> MatchupResult:
        """Score one candidate against the opponent.

        Both relations are checked on the candidate's own entry and
        independently of each other; a missing entry changes nothing.
        """
        adjustments = []
        counters: tuple[str, ...] = ()
        countered_by: tuple[str, ...] = ()
        opponent_name = self.matchup_table.name_of(opponent_id)

        if opponent_id in self.matchup_table.counters(champion.id):
            adjustments.append(Adjustment(
                "counter", self.COUNTER_BONUS, f"Strong counter against {opponent_name}"
            ))
            counters = (opponent_name,)

        if opponent_id in self.matchup_table.countered_by(champion.id):
            adjustments.append(Adjustment(
                "countered", self.COUNTERED_PENALTY, f"Be careful - countered by {opponent_name}"
            ))
            countered_by = (opponent_name,)

        return MatchupResult(tuple(adjustments), counters, countered_by)
