"""Tests for stat, trait and matchup scorers."""
import json

import pytest

from nexus_crusher.models.champion import Champion, Role, RoleStats, Tier
from nexus_crusher.services.matchup_table import MatchupTable
from nexus_crusher.services.scorers import MatchupScorer, StatScorer, TraitScorer


def _champion(win_rate=0.5, pick_rate=0.05, ban_rate=0.01, tier=None, name="Annie", champion_id=1):
    return Champion(
        id=champion_id,
        name=name,
        ban_rate=ban_rate,
        tier=tier,
        roles={Role.TOP: RoleStats(win_rate, pick_rate, 5.0)},
    )


def _reasons(adjustments):
    return [a.reason for a in adjustments]


@pytest.fixture
def stat_scorer():
    return StatScorer()


def test_neutral_champion_has_no_stat_adjustments(stat_scorer):
    """Neutral stats produce no adjustments."""
    assert stat_scorer.score(_champion(), Role.TOP) == []


def test_high_win_rate(stat_scorer):
    """High win rate adds a full point."""
    adjustments = stat_scorer.score(_champion(win_rate=0.55), Role.TOP)
    assert [a.delta for a in adjustments] == [1.0]
    assert _reasons(adjustments) == ["High win rate (55.0%)"]


def test_above_average_win_rate(stat_scorer):
    """Above average win rate adds half a point."""
    adjustments = stat_scorer.score(_champion(win_rate=0.52), Role.TOP)
    assert _reasons(adjustments) == ["Above average win rate (52.0%)"]
    assert adjustments[0].delta == 0.5


def test_low_win_rate_explains_without_penalty(stat_scorer):
    """Low win rate gives a reason but no delta."""
    adjustments = stat_scorer.score(_champion(win_rate=0.45), Role.TOP)
    assert _reasons(adjustments) == ["Challenging to master - rewards practice"]
    assert adjustments[0].delta == 0


@pytest.mark.parametrize("pick_rate, expected", [
    (0.16, ["Very popular pick (16.0%)"]),
    (0.12, ["Popular pick (12.0%)"]),
    (0.02, ["Uncommon pick - may surprise opponents"]),
])
def test_pick_rate_bands(stat_scorer, pick_rate, expected):
    """Test pick rate bands."""
    assert _reasons(stat_scorer.score(_champion(pick_rate=pick_rate), Role.TOP)) == expected


def test_rare_pick_gets_both_low_bands(stat_scorer):
    """Very rare picks get both low pick rate bonuses."""
    adjustments = stat_scorer.score(_champion(pick_rate=0.005), Role.TOP)
    assert [a.delta for a in adjustments] == [0.3, 0.4]
    assert _reasons(adjustments)[1] == "Rare pick - opponents may be unfamiliar"


@pytest.mark.parametrize("tier, delta, reason", [
    (Tier.S, 1.5, "S-tier champion in the current meta"),
    (Tier.A, 1.0, "A-tier champion in the current meta"),
    (Tier.B, 0.5, "Solid B-tier choice"),
    (Tier.D, -0.5, "D-tier in the current meta"),
])
def test_tier_adjustments(stat_scorer, tier, delta, reason):
    """Test tier adjustments."""
    adjustments = stat_scorer.score(_champion(tier=tier), Role.TOP)
    assert [(a.delta, a.reason) for a in adjustments] == [(delta, reason)]


def test_tier_c_has_no_adjustment(stat_scorer):
    """C tier adds nothing."""
    assert stat_scorer.score(_champion(tier=Tier.C), Role.TOP) == []


def test_ban_rate_bands(stat_scorer):
    """Test ban rate bands."""
    assert _reasons(stat_scorer.score(_champion(ban_rate=0.25), Role.TOP)) == ["Frequently banned - very strong"]
    assert _reasons(stat_scorer.score(_champion(ban_rate=0.12), Role.TOP)) == ["Often banned (12.0%)"]


def test_stat_adjustments_follow_evaluation_order(stat_scorer):
    """Adjustments come in win, pick, tier, ban order."""
    champion = _champion(win_rate=0.55, pick_rate=0.12, ban_rate=0.25, tier=Tier.A)
    signals = [a.signal for a in stat_scorer.score(champion, Role.TOP)]
    assert signals == ["win_rate", "pick_rate", "tier", "ban_rate"]


@pytest.fixture
def trait_scorer(tmp_path):
    (tmp_path / "champion_traits.json").write_text(json.dumps({
        "high_skill": ["Riven"],
        "role_strengths": {"Riven": ["TOP"], "Thresh": ["UTILITY"]},
    }))
    return TraitScorer(tmp_path)


def test_high_skill_with_good_win_rate(trait_scorer):
    """High skill champions with a good win rate get a bonus."""
    adjustments = trait_scorer.score(_champion(win_rate=0.51, name="Riven"), Role.TOP)
    assert _reasons(adjustments) == [
        "High skill champion - rewarding when mastered",
        "Particularly strong in top",
    ]
    assert sum(a.delta for a in adjustments) == 1.0


def test_high_skill_with_poor_win_rate(trait_scorer):
    """High skill champions with a poor win rate get a note only."""
    adjustments = trait_scorer.score(_champion(win_rate=0.5, name="Riven"), Role.JUNGLE)
    assert [(a.delta, a.reason) for a in adjustments] == [(0.0, "High skill ceiling - needs practice")]


def test_role_strengths_are_canonicalized(trait_scorer):
    """Strong role names are canonicalized."""
    assert trait_scorer.strong_roles("Thresh") == frozenset({Role.SUPPORT})
    assert trait_scorer.strong_roles("Nobody") == frozenset()


def test_missing_traits_file_scores_nothing(tmp_path):
    """No traits file means no trait adjustments."""
    scorer = TraitScorer(tmp_path)
    assert scorer.score(_champion(name="Riven"), Role.TOP) == []


@pytest.fixture
def matchup_scorer(tmp_path):
    (tmp_path / "matchups.json").write_text(json.dumps({
        "matchups": {
            "1": {"counters": [3], "counteredBy": [2]},
        }
    }))
    (tmp_path / "champions.json").write_text(json.dumps({
        "champions": [{"id": 2, "name": "Zed"}, {"id": 3, "name": "Lux"}]
    }))
    return MatchupScorer(MatchupTable(tmp_path))


def test_counter_bonus(matchup_scorer):
    """Test counter bonus."""
    result = matchup_scorer.score(_champion(champion_id=1), 3)
    assert [(a.delta, a.reason) for a in result.adjustments] == [(6.0, "Strong counter against Lux")]
    assert result.counters == ("Lux",)
    assert result.countered_by == ()


def test_countered_penalty(matchup_scorer):
    """Test countered penalty."""
    result = matchup_scorer.score(_champion(champion_id=1), 2)
    assert [(a.delta, a.reason) for a in result.adjustments] == [(-4.0, "Be careful - countered by Zed")]
    assert result.countered_by == ("Zed",)


def test_no_entry_means_no_adjustment(matchup_scorer):
    """Champions without matchups get no adjustment."""
    assert matchup_scorer.score(_champion(champion_id=99), 2).adjustments == ()
    assert matchup_scorer.score(_champion(champion_id=1), 42).adjustments == ()


def test_counter_bonus_exceeds_every_stat_bonus_combined():
    """Counter bonus beats the maximum stat bonus."""
    best_case = (
        StatScorer.HIGH_WIN_RATE_BONUS
        + StatScorer.VERY_POPULAR_BONUS
        + max(StatScorer.TIER_ADJUSTMENTS.values())
        + StatScorer.FREQUENT_BAN_BONUS
        + TraitScorer.SKILL_BONUS
        + TraitScorer.ROLE_STRENGTH_BONUS
    )
    assert MatchupScorer.COUNTER_BONUS > best_case
