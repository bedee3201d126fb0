"""Tests for the recommendation engine."""
import json
import random

import pytest

from nexus_crusher.exceptions import StatsUnavailableError
from nexus_crusher.models.champion import Champion, Role, RoleStats, Tier
from nexus_crusher.services.flavor import INTRO_TEMPLATES, IntroPicker
from nexus_crusher.services.matchup_table import MatchupTable
from nexus_crusher.services.recommendation_engine import RecommendationEngine


class FakeStore:
    """Stats store stand-in that hands out a fixed snapshot."""

    source = "fake"

    def __init__(self, champions=(), error=None):
        self.champions = tuple(champions)
        self.error = error
        self.calls = 0

    def fetch_all(self):
        self.calls += 1
        if self.error:
            raise self.error
        return self.champions


def _top(champion_id, name, score=8.0, win_rate=0.5, pick_rate=0.05, tier=None, ban_rate=0.01):
    return Champion(
        id=champion_id,
        name=name,
        ban_rate=ban_rate,
        tier=tier,
        roles={Role.TOP: RoleStats(win_rate, pick_rate, score)},
    )


def _write_knowledge(tmp_path, matchups=None, traits=None):
    (tmp_path / "matchups.json").write_text(json.dumps({"matchups": matchups or {}}))
    (tmp_path / "champion_traits.json").write_text(json.dumps(traits or {}))
    return tmp_path


def _engine(tmp_path, champions, matchups=None, traits=None, **kwargs):
    knowledge = _write_knowledge(tmp_path, matchups, traits)
    store = FakeStore(champions)
    return RecommendationEngine(store, MatchupTable(knowledge), knowledge_dir=knowledge, **kwargs)


@pytest.fixture
def roster():
    return [
        _top(1, "Aatrox", score=7.0, win_rate=0.52, tier=Tier.A),
        _top(2, "Darius", score=8.0, win_rate=0.49),
        _top(3, "Garen", score=6.0, pick_rate=0.16, tier=Tier.B),
        _top(4, "Fiora", score=7.5, win_rate=0.46, ban_rate=0.25),
        _top(5, "Teemo", score=5.0, pick_rate=0.005, tier=Tier.D),
        _top(6, "Shen", score=7.0),
        _top(7, "Ornn", score=6.5, tier=Tier.S),
    ]


def test_results_are_bounded_sorted_and_explained(tmp_path, roster):
    """Results respect count, sort order and carry reasons."""
    engine = _engine(tmp_path, roster)

    for count in (1, 3, 5, 20):
        recs = engine.recommend(Role.TOP, count)
        assert len(recs) <= count
        scores = [r.score for r in recs]
        assert scores == sorted(scores, reverse=True)
        assert all(r.reasons for r in recs)


def test_every_role_returns_explained_results(tmp_path, roster):
    """Every role produces explained results."""
    engine = _engine(tmp_path, roster)
    for role in Role:
        recs = engine.recommend(role, 5)
        assert len(recs) == 5
        assert all(r.reasons for r in recs)


def test_fallback_reason_when_nothing_fires(tmp_path):
    """A champion with no signals gets the fallback reason."""
    engine = _engine(tmp_path, [_top(6, "Shen")])
    rec = engine.recommend(Role.TOP, 1)[0]
    assert rec.reasons == ("Decent overall performance in top",)
    assert rec.score == 8.0


def test_score_is_base_plus_adjustments(tmp_path):
    """Final score equals base plus adjustment deltas."""
    engine = _engine(tmp_path, [_top(1, "Aatrox", score=7.0, win_rate=0.52, tier=Tier.A)])
    rec = engine.recommend(Role.TOP, 1)[0]
    assert rec.base_score == 7.0
    assert rec.score == pytest.approx(8.5)
    assert rec.reasons == ("Above average win rate (52.0%)", "A-tier champion in the current meta")


def test_determinism(tmp_path, roster):
    """Same inputs give the same ranking."""
    engine = _engine(tmp_path, roster, cache_ttl_seconds=0)

    first = engine.recommend(Role.TOP, 5)
    second = engine.recommend(Role.TOP, 5)

    assert [(r.champion.id, r.score, r.reasons) for r in first] == \
        [(r.champion.id, r.score, r.reasons) for r in second]


def test_cache_returns_same_results_as_fresh_computation(tmp_path, roster):
    """Cached results match a fresh engine."""
    cached = _engine(tmp_path, roster)
    uncached = _engine(tmp_path, roster, cache_ttl_seconds=0)

    cached.recommend(Role.TOP, 5)
    assert cached.recommend(Role.TOP, 5) == uncached.recommend(Role.TOP, 5)


def test_cache_is_dropped_when_snapshot_changes(tmp_path, roster):
    """A new store snapshot invalidates cached results."""
    engine = _engine(tmp_path, roster)
    engine.recommend(Role.TOP, 3)

    engine.stats_store.champions = (_top(99, "Kled", score=20.0),)

    assert [r.champion.name for r in engine.recommend(Role.TOP, 3)] == ["Kled"]


def test_cache_expires(tmp_path, roster):
    """Cached results expire after the TTL."""
    now = [0.0]
    engine = _engine(tmp_path, roster, cache_ttl_seconds=10, clock=lambda: now[0])
    engine.recommend(Role.TOP, 1)
    engine._cache[(Role.TOP, None)] = (0.0, ())

    assert engine.recommend(Role.TOP, 1) == []
    now[0] = 11.0
    assert len(engine.recommend(Role.TOP, 1)) == 1


def test_ties_keep_store_order(tmp_path):
    """Equal scores keep store order."""
    champions = [_top(i, f"Champ{i}", score=6.0) for i in range(1, 6)]
    engine = _engine(tmp_path, champions)

    assert [r.champion.id for r in engine.recommend(Role.TOP, 5)] == [1, 2, 3, 4, 5]


def test_counter_bonus_dominates(tmp_path):
    """A counter outranks stronger stat profiles."""
    champions = [_top(1, "Plain", score=8.0, win_rate=0.55, tier=Tier.S), _top(2, "Counter", score=8.0)]
    engine = _engine(tmp_path, champions, matchups={"2": {"counters": [50], "counteredBy": []}})

    recs = engine.recommend(Role.TOP, 2, opponent_id=50)

    assert [r.champion.id for r in recs] == [2, 1]
    assert recs[0].score > recs[1].score
    assert "Strong counter against Champion 50" in recs[0].reasons
    assert recs[0].counters == ("Champion 50",)


def test_countered_penalty_lowers_score(tmp_path):
    """Being countered lowers the score."""
    champions = [_top(1, "Victim", score=8.0), _top(50, "Zed")]
    engine = _engine(tmp_path, champions, matchups={"1": {"counters": [], "counteredBy": [50]}})

    without = engine.recommend(Role.TOP, 5)[0]
    against = engine.recommend(Role.TOP, 5, opponent_id=50)[0]

    assert against.champion.id == 1
    assert against.score < without.score
    assert against.reasons[-1] == "Be careful - countered by Zed"
    assert against.countered_by == ("Zed",)


def test_matchup_reasons_come_last(tmp_path):
    """Matchup reasons follow stat reasons."""
    champions = [_top(1, "Aatrox", win_rate=0.55)]
    engine = _engine(tmp_path, champions, matchups={"1": {"counters": [50], "counteredBy": [50]}})

    rec = engine.recommend(Role.TOP, 1, opponent_id=50)[0]

    assert rec.reasons == (
        "High win rate (55.0%)",
        "Strong counter against Champion 50",
        "Be careful - countered by Champion 50",
    )
    assert rec.score == pytest.approx(8.0 + 1.0 + 6.0 - 4.0)


def test_opponent_is_never_recommended(tmp_path, roster):
    """The opponent never appears in results."""
    engine = _engine(tmp_path, roster)
    recs = engine.recommend(Role.TOP, 20, opponent_id=2)
    assert 2 not in [r.champion.id for r in recs]


def test_unknown_opponent_changes_nothing(tmp_path, roster):
    """An opponent without matchups leaves scores untouched."""
    engine = _engine(tmp_path, roster)
    plain = engine.recommend(Role.TOP, 5)
    against_unknown = engine.recommend(Role.TOP, 5, opponent_id=9999)
    assert [(r.champion.id, r.score) for r in plain] == [(r.champion.id, r.score) for r in against_unknown]


def test_store_failure_returns_empty(tmp_path):
    """Unavailable stats give an empty list."""
    knowledge = _write_knowledge(tmp_path)
    engine = RecommendationEngine(
        FakeStore(error=StatsUnavailableError("offline")), MatchupTable(knowledge), knowledge_dir=knowledge
    )
    assert engine.recommend(Role.MID, 5) == []


def test_empty_store_returns_empty(tmp_path):
    """An empty store gives an empty list."""
    assert _engine(tmp_path, []).recommend(Role.MID, 5) == []


def test_count_must_be_positive(tmp_path, roster):
    """Count below one is rejected."""
    with pytest.raises(ValueError):
        _engine(tmp_path, roster).recommend(Role.TOP, 0)


def test_intros_are_decorative(tmp_path, roster):
    """Intros never change scores or reasons."""
    picker = IntroPicker(random.Random(7))
    with_intros = _engine(tmp_path, roster, intro_picker=picker).recommend(Role.TOP, 5)
    plain = _engine(tmp_path, roster).recommend(Role.TOP, 5)

    assert [(r.champion.id, r.score, r.reasons) for r in with_intros] == \
        [(r.champion.id, r.score, r.reasons) for r in plain]
    assert all(r.intro for r in with_intros)
    assert all(r.intro not in r.reasons for r in with_intros)
    assert all(r.intro is None for r in plain)


def test_seeded_intros_are_reproducible():
    """Seeded intro pickers repeat their choices."""
    champion = _top(1, "Aatrox")
    first = [IntroPicker(random.Random(3)).pick(champion, Role.TOP) for _ in range(3)]
    second = [IntroPicker(random.Random(3)).pick(champion, Role.TOP) for _ in range(3)]
    assert first == second
    assert first[0] in {t.format(name="Aatrox", lane="top") for t in INTRO_TEMPLATES}


def test_scenario_strong_stats_beat_uncommon_pick(tmp_path):
    """X (55% win, 12% pick, A tier) beats Y (50% win, 2% pick, no tier) at equal base score."""
    x = _top(10, "X", score=8.0, win_rate=0.55, pick_rate=0.12, tier=Tier.A)
    y = _top(11, "Y", score=8.0, win_rate=0.50, pick_rate=0.02)
    engine = _engine(tmp_path, [y, x])

    recs = engine.recommend(Role.TOP, 1)

    assert [r.champion.name for r in recs] == ["X"]


def test_scenario_countered_pick_drops_below_comparable_pick(tmp_path):
    """X countered by Z ranks below a comparable champion with no relation to Z."""
    x = _top(10, "X", score=8.0)
    w = _top(12, "W", score=7.5)
    z = _top(20, "Z", score=6.0)
    engine = _engine(tmp_path, [x, w, z], matchups={"10": {"counters": [], "counteredBy": [20]}})

    names = [r.champion.name for r in engine.recommend(Role.TOP, 5, opponent_id=20)]

    assert names.index("W") < names.index("X")
    assert "Z" not in names


def test_engine_registers_store_names_for_matchups(tmp_path):
    """Store names feed matchup reasons."""
    champions = [_top(1, "Victim"), _top(777, "Newcomer")]
    engine = _engine(tmp_path, champions, matchups={"1": {"counters": [], "counteredBy": [777]}})

    rec = engine.recommend(Role.TOP, 1, opponent_id=777)[0]

    assert rec.countered_by == ("Newcomer",)
    assert engine.matchup_table.id_of("newcomer") == 777
