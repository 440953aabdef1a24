"""Tests for teammate rating scales."""
import pytest

from starguide.models.enums import GranularRating, TeammateRating
from starguide.utils.rating_scale import (
    RATING_ORDER,
    TEAMMATE_RATING_SCORES,
    is_better_rating,
    points_to_rating,
    ranking_score_rating,
    rating_index,
    round_half_up,
    score_to_base_rating,
    score_to_rating,
)


def test_rating_order_best_first():
    """S+ sorts ahead of D."""
    assert RATING_ORDER[0] == TeammateRating.S_PLUS
    assert RATING_ORDER[-1] == TeammateRating.D
    assert rating_index(TeammateRating.S) < rating_index(TeammateRating.A)


def test_teammate_scores_descend():
    """Pair scores run 6 (S+) down to 1 (D)."""
    scores = [TEAMMATE_RATING_SCORES[r] for r in RATING_ORDER]
    assert scores == [6, 5, 4, 3, 2, 1]


@pytest.mark.parametrize("score,expected", [
    (6.0, GranularRating.S),
    (4.8, GranularRating.S),
    (4.5, GranularRating.S_MINUS),
    (4.0, GranularRating.A_PLUS),
    (3.2, GranularRating.A_MINUS),
    (2.4, GranularRating.B),
    (1.0, GranularRating.C_MINUS),
    (0.5, GranularRating.D),
])
def test_score_to_rating(score, expected):
    """Granular rating cutoffs on the 0-6 scale."""
    assert score_to_rating(score) == expected


@pytest.mark.parametrize("score,expected", [
    (5.5, TeammateRating.S),
    (4.5, TeammateRating.S),
    (3.5, TeammateRating.A),
    (2.6, TeammateRating.B),
    (1.5, TeammateRating.C),
    (1.0, TeammateRating.D),
])
def test_score_to_base_rating(score, expected):
    """Plain letter cutoffs never produce S+."""
    assert score_to_base_rating(score) == expected


def test_points_to_rating():
    """S+ needs points above a plain S."""
    assert points_to_rating(60) == TeammateRating.S_PLUS
    assert points_to_rating(55) == TeammateRating.S_PLUS
    assert points_to_rating(54.9) == TeammateRating.S
    assert points_to_rating(30) == TeammateRating.B
    assert points_to_rating(0) == TeammateRating.D


def test_is_better_rating():
    """Anything outranks a missing rating."""
    assert is_better_rating(TeammateRating.D, None)
    assert is_better_rating(TeammateRating.S_PLUS, TeammateRating.S)
    assert not is_better_rating(TeammateRating.A, TeammateRating.A)
    assert not is_better_rating(TeammateRating.B, TeammateRating.A)


def test_round_half_up():
    """Halves round toward positive infinity."""
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(-7.5) == -7
    assert round_half_up(-7.6) == -8


def test_ranking_score_rating():
    """Ranking score display letters."""
    assert ranking_score_rating(95) == "S"
    assert ranking_score_rating(90) == "S"
    assert ranking_score_rating(89.9) == "A"
    assert ranking_score_rating(60) == "B"
    assert ranking_score_rating(40) == "C"
    assert ranking_score_rating(10) == "D"
