"""Utility modules for starguide."""

from starguide.utils.character_ids import (
    base_character_id,
    has_base_conflict,
    parse_game_mode,
    parse_game_mode_strict,
    team_key,
)
from starguide.utils.rating_scale import (
    RATING_ORDER,
    RATING_POINTS,
    TEAMMATE_RATING_SCORES,
    points_to_rating,
    round_half_up,
    score_to_base_rating,
    score_to_rating,
)
from starguide.utils.tier_scale import (
    EFFECTIVE_SCORES,
    TIER_ORDER,
    TIER_SCORES,
    normalize_tier,
    normalize_tier_strict,
    number_to_tier,
    score_to_tier,
    tier_to_number,
)

__all__ = [
    "base_character_id",
    "has_base_conflict",
    "parse_game_mode",
    "parse_game_mode_strict",
    "team_key",
    "RATING_ORDER",
    "RATING_POINTS",
    "TEAMMATE_RATING_SCORES",
    "points_to_rating",
    "round_half_up",
    "score_to_base_rating",
    "score_to_rating",
    "EFFECTIVE_SCORES",
    "TIER_ORDER",
    "TIER_SCORES",
    "normalize_tier",
    "normalize_tier_strict",
    "number_to_tier",
    "score_to_tier",
    "tier_to_number",
]
