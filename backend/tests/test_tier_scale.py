"""Tests for tier scale conversions."""
import pytest

from starguide.models.enums import TierRating
from starguide.utils.tier_scale import (
    TIER_ORDER,
    best_tier,
    max_teams_for_tier,
    normalize_tier,
    normalize_tier_strict,
    number_to_tier,
    score_to_tier,
    team_average_to_tier,
    tier_index,
    tier_to_number,
)


@pytest.mark.parametrize("score,expected", [
    (115, TierRating.T_MINUS_1),
    (110, TierRating.T_MINUS_HALF),
    (100, TierRating.T0),
    (97.5, TierRating.T0_5),
    (85, TierRating.T1),
    (65, TierRating.T2),
    (60, TierRating.T3),
    (35, TierRating.T5),
])
def test_score_to_tier(score, expected):
    """Cutoffs are strict: a score equal to a cutoff falls to the next tier."""
    assert score_to_tier(score) == expected


def test_score_to_tier_is_order_preserving():
    """A higher score never maps to a worse tier."""
    previous = tier_index(score_to_tier(0))
    for score in range(1, 130):
        current = tier_index(score_to_tier(score))
        assert current <= previous
        previous = current


@pytest.mark.parametrize("value,expected", [
    (-1, TierRating.T_MINUS_1),
    (-0.5, TierRating.T_MINUS_HALF),
    (0.25, TierRating.T0),
    (0.26, TierRating.T0_5),
    (2.5, TierRating.T2),
    (3.0, TierRating.T3),
    (4.9, TierRating.T5),
])
def test_number_to_tier(value, expected):
    assert number_to_tier(value) == expected


def test_number_round_trip():
    """Each tier's number maps back to the same tier."""
    for tier in TIER_ORDER:
        assert number_to_tier(tier_to_number(tier)) == tier


def test_normalize_tier():
    """Labels are parsed case-insensitively; unknown labels give None."""
    assert normalize_tier("t0.5") == TierRating.T0_5
    assert normalize_tier(" T-1 ") == TierRating.T_MINUS_1
    assert normalize_tier("T9") is None
    assert normalize_tier(None) is None


def test_normalize_tier_strict_raises():
    with pytest.raises(ValueError):
        normalize_tier_strict("S")


def test_best_tier():
    """Best of several labels, ignoring junk."""
    assert best_tier(["T1", "T0.5", "bogus"]) == TierRating.T0_5
    assert best_tier([]) is None
    assert best_tier(["bogus"]) is None


def test_team_average_to_tier():
    assert team_average_to_tier(110) == TierRating.T_MINUS_1
    assert team_average_to_tier(90) == TierRating.T0
    assert team_average_to_tier(89.9) == TierRating.T0_5
    assert team_average_to_tier(29) == TierRating.T5


def test_max_teams_for_tier():
    """Stronger tiers get more team slots."""
    assert max_teams_for_tier(TierRating.T_MINUS_1) == 5
    assert max_teams_for_tier(TierRating.T0_5) == 4
    assert max_teams_for_tier(TierRating.T1_5) == 3
    assert max_teams_for_tier(TierRating.T2) == 2
    assert max_teams_for_tier(TierRating.T4) == 1
