"""Tests for role canonicalization."""
import pytest

from nexus_crusher.models.champion import Role
from nexus_crusher.utils.role_normalizer import (
    is_valid_role,
    normalize_role,
    normalize_role_strict,
    role_choices,
)


@pytest.mark.parametrize("raw", ["MIDDLE", "MID", "mid", " Middle "])
def test_mid_synonyms(raw):
    """MIDDLE and MID canonicalize to the same role."""
    assert normalize_role(raw) == Role.MID


@pytest.mark.parametrize("raw", ["UTILITY", "SUPPORT", "SUP", "supp"])
def test_support_synonyms(raw):
    """UTILITY, SUPPORT and SUP canonicalize to the same role."""
    assert normalize_role(raw) == Role.SUPPORT


@pytest.mark.parametrize("raw", ["BOT", "BOTTOM", "ADC", "adc"])
def test_bottom_synonyms(raw):
    """Test bottom lane aliases."""
    assert normalize_role(raw) == Role.BOTTOM


def test_jungle_synonyms():
    """Test jungle aliases."""
    assert normalize_role("JG") == Role.JUNGLE
    assert normalize_role("jungle") == Role.JUNGLE


@pytest.mark.parametrize("raw", ["feeder", "", "   ", None, 3])
def test_unknown_is_no_role(raw):
    """Unrecognized input yields no role, never an error."""
    assert normalize_role(raw) is None


def test_role_passes_through():
    """Role members are returned unchanged."""
    assert normalize_role(Role.TOP) is Role.TOP


def test_strict_raises_on_unknown():
    """Strict normalization raises on unknown roles."""
    with pytest.raises(ValueError):
        normalize_role_strict("feeder")
    assert normalize_role_strict("top") == Role.TOP


def test_is_valid_role():
    """Test role validity check."""
    assert is_valid_role("utility")
    assert not is_valid_role("roam")


def test_role_choices_lists_five_roles():
    """Role choices list the five lanes."""
    assert role_choices() == ["top", "jungle", "mid", "bottom", "support"]
