"""Teammate and team rating scales."""

import math
from typing import Optional

from starguide.models.enums import GranularRating, TeammateRating

# Best to worst
RATING_ORDER: tuple[TeammateRating, ...] = tuple(TeammateRating)

# Pair scoring scale used by team generation and bidirectional synergy
TEAMMATE_RATING_SCORES: dict[TeammateRating, int] = {
    TeammateRating.S_PLUS: 6,
    TeammateRating.S: 5,
    TeammateRating.A: 4,
    TeammateRating.B: 3,
    TeammateRating.C: 2,
    TeammateRating.D: 1,
}

# Points scale used when investment modifiers adjust a rating (+10 ~ one step)
RATING_POINTS: dict[TeammateRating, int] = {
    TeammateRating.S_PLUS: 60,
    TeammateRating.S: 50,
    TeammateRating.A: 40,
    TeammateRating.B: 30,
    TeammateRating.C: 20,
    TeammateRating.D: 10,
}

HIGH_RATINGS = frozenset({TeammateRating.S_PLUS, TeammateRating.S, TeammateRating.A})
USABLE_RATINGS = HIGH_RATINGS | {TeammateRating.B}

_POINT_CUTOFFS: list[tuple[float, TeammateRating]] = [
    (55, TeammateRating.S_PLUS),
    (45, TeammateRating.S),
    (35, TeammateRating.A),
    (25, TeammateRating.B),
    (15, TeammateRating.C),
]

_GRANULAR_CUTOFFS: list[tuple[float, GranularRating]] = [
    (4.8, GranularRating.S),
    (4.3, GranularRating.S_MINUS),
    (4.0, GranularRating.A_PLUS),
    (3.5, GranularRating.A),
    (3.0, GranularRating.A_MINUS),
    (2.7, GranularRating.B_PLUS),
    (2.3, GranularRating.B),
    (2.0, GranularRating.B_MINUS),
    (1.7, GranularRating.C_PLUS),
    (1.3, GranularRating.C),
    (1.0, GranularRating.C_MINUS),
]

_BASE_CUTOFFS: list[tuple[float, TeammateRating]] = [
    (4.5, TeammateRating.S),
    (3.5, TeammateRating.A),
    (2.5, TeammateRating.B),
    (1.5, TeammateRating.C),
]


def rating_index(rating: TeammateRating) -> int:
    """Position in RATING_ORDER; lower is better."""
    return RATING_ORDER.index(rating)


def is_better_rating(a: TeammateRating, b: Optional[TeammateRating]) -> bool:
    """True when `a` outranks `b` (anything outranks None)."""
    return b is None or rating_index(a) < rating_index(b)


def points_to_rating(points: float) -> TeammateRating:
    """Convert rating points back to a letter; S+ needs modifiers above S."""
    for cutoff, rating in _POINT_CUTOFFS:
        if points >= cutoff:
            return rating
    return TeammateRating.D


def score_to_rating(score: float) -> GranularRating:
    """Granular team rating from a 0-6 pair score."""
    for cutoff, rating in _GRANULAR_CUTOFFS:
        if score >= cutoff:
            return rating
    return GranularRating.D


def score_to_base_rating(score: float) -> TeammateRating:
    """Plain letter rating from a 0-6 pair score."""
    for cutoff, rating in _BASE_CUTOFFS:
        if score >= cutoff:
            return rating
    return TeammateRating.D


def ranking_score_rating(score: float) -> str:
    """Display letter for a team ranking score (0-105)."""
    if score >= 90:
        return "S"
    if score >= 75:
        return "A"
    if score >= 60:
        return "B"
    if score >= 40:
        return "C"
    return "D"


def round_half_up(value: float) -> int:
    """Round .5 toward positive infinity (round() rounds half to even)."""
    return math.floor(value + 0.5)
