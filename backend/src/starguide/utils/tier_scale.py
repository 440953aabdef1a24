"""Tier scale conversions.

Tiers run T-1 (best) through T5 (worst). Three numeric views exist:
- the tier axis (-1..5) used for averaging team members,
- the effective-score baseline (35..115) used with investment bonuses,
- the team-tier score (30..115) used when averaging a lineup.
"""

from typing import Iterable, Optional

from starguide.models.enums import TierRating

# Best to worst
TIER_ORDER: tuple[TierRating, ...] = tuple(TierRating)

TIER_NUMBERS: dict[TierRating, float] = {
    TierRating.T_MINUS_1: -1,
    TierRating.T_MINUS_HALF: -0.5,
    TierRating.T0: 0,
    TierRating.T0_5: 0.5,
    TierRating.T1: 1,
    TierRating.T1_5: 1.5,
    TierRating.T2: 2,
    TierRating.T3: 3,
    TierRating.T4: 4,
    TierRating.T5: 5,
}

# Baseline for effective score (E0, no light cone)
EFFECTIVE_SCORES: dict[TierRating, float] = {
    TierRating.T_MINUS_1: 115,
    TierRating.T_MINUS_HALF: 107,
    TierRating.T0: 100,
    TierRating.T0_5: 95,
    TierRating.T1: 85,
    TierRating.T1_5: 75,
    TierRating.T2: 65,
    TierRating.T3: 55,
    TierRating.T4: 45,
    TierRating.T5: 35,
}

# Per-member score when averaging a lineup into a team tier
TIER_SCORES: dict[TierRating, float] = {
    TierRating.T_MINUS_1: 115,
    TierRating.T_MINUS_HALF: 107,
    TierRating.T0: 100,
    TierRating.T0_5: 90,
    TierRating.T1: 80,
    TierRating.T1_5: 70,
    TierRating.T2: 60,
    TierRating.T3: 50,
    TierRating.T4: 40,
    TierRating.T5: 30,
}

# Tier used when a character or mode has no tier data
DEFAULT_TIER = TierRating.T2

# Strictly greater than the cutoff
_SCORE_CUTOFFS: list[tuple[float, TierRating]] = [
    (110, TierRating.T_MINUS_1),
    (103, TierRating.T_MINUS_HALF),
    (97.5, TierRating.T0),
    (90, TierRating.T0_5),
    (80, TierRating.T1),
    (70, TierRating.T1_5),
    (60, TierRating.T2),
    (50, TierRating.T3),
    (40, TierRating.T4),
]

# Less than or equal to the cutoff
_NUMBER_CUTOFFS: list[tuple[float, TierRating]] = [
    (-0.75, TierRating.T_MINUS_1),
    (-0.25, TierRating.T_MINUS_HALF),
    (0.25, TierRating.T0),
    (0.75, TierRating.T0_5),
    (1.25, TierRating.T1),
    (1.75, TierRating.T1_5),
    (2.5, TierRating.T2),
    (3.5, TierRating.T3),
    (4.5, TierRating.T4),
]

# Greater than or equal to the cutoff
_TEAM_AVERAGE_CUTOFFS: list[tuple[float, TierRating]] = [
    (110, TierRating.T_MINUS_1),
    (103, TierRating.T_MINUS_HALF),
    (90, TierRating.T0),
    (80, TierRating.T0_5),
    (70, TierRating.T1),
    (60, TierRating.T1_5),
    (50, TierRating.T2),
    (40, TierRating.T3),
    (30, TierRating.T4),
]

_TIER_LOOKUP: dict[str, TierRating] = {t.value.lower(): t for t in TierRating}


def normalize_tier(tier: Optional[str]) -> Optional[TierRating]:
    """Parse a tier label ("T0.5", "t-1", ...), returning None when unknown."""
    if tier is None:
        return None
    if isinstance(tier, TierRating):
        return tier
    return _TIER_LOOKUP.get(tier.strip().lower())


def normalize_tier_strict(tier: str) -> TierRating:
    """Parse a tier label, raising ValueError when unknown."""
    normalized = normalize_tier(tier)
    if normalized is None:
        raise ValueError(f"Unknown tier: {tier!r}")
    return normalized


def tier_index(tier: TierRating) -> int:
    """Position in TIER_ORDER; lower is better."""
    return TIER_ORDER.index(tier)


def best_tier(tiers: Iterable[str]) -> Optional[TierRating]:
    """Best of several tier labels, ignoring unknown ones."""
    parsed = [t for t in (normalize_tier(label) for label in tiers) if t is not None]
    if not parsed:
        return None
    return min(parsed, key=tier_index)


def tier_to_number(tier: TierRating) -> float:
    return TIER_NUMBERS[tier]


def number_to_tier(value: float) -> TierRating:
    for cutoff, tier in _NUMBER_CUTOFFS:
        if value <= cutoff:
            return tier
    return TierRating.T5


def score_to_tier(score: float) -> TierRating:
    """Map an effective score (can exceed 100 with investment) to a tier."""
    for cutoff, tier in _SCORE_CUTOFFS:
        if score > cutoff:
            return tier
    return TierRating.T5


def team_average_to_tier(average: float) -> TierRating:
    for cutoff, tier in _TEAM_AVERAGE_CUTOFFS:
        if average >= cutoff:
            return tier
    return TierRating.T5


def max_teams_for_tier(tier: TierRating) -> int:
    """Team slots a DPS gets in roster views; stronger DPS get more."""
    if tier in (TierRating.T_MINUS_1, TierRating.T_MINUS_HALF):
        return 5
    if tier in (TierRating.T0, TierRating.T0_5):
        return 4
    if tier in (TierRating.T1, TierRating.T1_5):
        return 3
    if tier == TierRating.T2:
        return 2
    return 1
