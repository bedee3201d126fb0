"""Core scoring components for the recommendation engine."""
from nexus_crusher.services.scorers.stat_scorer import StatScorer
from nexus_crusher.services.scorers.trait_scorer import TraitScorer
from nexus_crusher.services.scorers.matchup_scorer import MatchupResult, MatchupScorer

__all__ = [
    "StatScorer",
    "TraitScorer",
    "MatchupResult",
    "MatchupScorer",
]
