"""Tier-based character scoring, adjusted for player investment."""

import logging
from typing import Iterable, Mapping, Optional

from starguide.models.character import Character
from starguide.models.enums import GameMode, TierRating
from starguide.models.investment import ScoreBreakdown
from starguide.models.roster import UserInvestment
from starguide.repositories.catalog_repository import CharacterCatalog
from starguide.services.scorers.investment_calculator import (
    EIDOLON_SCALING,
    LIGHT_CONE_SCALING,
    interpolate_light_cone_penalty,
)
from starguide.utils.character_ids import parse_game_mode_strict
from starguide.utils.tier_scale import (
    DEFAULT_TIER,
    EFFECTIVE_SCORES,
    TIER_SCORES,
    best_tier,
    score_to_tier,
    team_average_to_tier,
    tier_to_number,
)

logger = logging.getLogger(__name__)


class TierScorer:
    """Converts catalog tiers and investment into comparable numeric scores."""

    # Light cone points are measured against having no light cone at all
    NO_LIGHT_CONE_PENALTY = 40

    # Tier points to score points (~46 max tier points => ~16 score)
    TIER_POINTS_TO_SCORE = 0.35

    def __init__(self, catalog: Optional[CharacterCatalog] = None):
        self.catalog = catalog or CharacterCatalog()

    def best_tier_for_mode(self, character_id: str, game_mode: GameMode | str) -> TierRating:
        """Best tier across the character's roles; T2 when tier data is missing."""
        tier_data = self.catalog.get_tier_data(character_id)
        if not tier_data:
            return DEFAULT_TIER

        mode_data = tier_data.get(parse_game_mode_strict(game_mode).value)
        if not mode_data:
            return DEFAULT_TIER

        return best_tier(label for label in mode_data.values() if label) or DEFAULT_TIER

    def score_breakdown(
        self,
        character: Character,
        game_mode: GameMode | str,
        investment: Optional[UserInvestment] = None,
    ) -> ScoreBreakdown:
        """Baseline score for the tier plus the bonus earned by owned upgrades."""
        base_score = EFFECTIVE_SCORES[self.best_tier_for_mode(character.id, game_mode)]
        if investment is None or character.investment is None:
            return ScoreBreakdown(base_score=base_score, eidolon_points=0, light_cone_points=0, bonus=0)

        eidolon_points = sum(
            abs(e.penalty) * EIDOLON_SCALING
            for e in character.investment.eidolons
            if investment.eidolon_level >= e.level
        )

        light_cone_points = 0.0
        light_cone = character.investment.get_light_cone(investment.light_cone_id)
        if light_cone is not None:
            penalty = abs(interpolate_light_cone_penalty(light_cone, investment.light_cone_superimposition))
            light_cone_points = (self.NO_LIGHT_CONE_PENALTY - penalty) * LIGHT_CONE_SCALING

        bonus = (eidolon_points + light_cone_points) * self.TIER_POINTS_TO_SCORE
        return ScoreBreakdown(
            base_score=base_score,
            eidolon_points=eidolon_points,
            light_cone_points=light_cone_points,
            bonus=bonus,
        )

    def effective_score(
        self,
        character: Character,
        game_mode: GameMode | str,
        investment: Optional[UserInvestment] = None,
    ) -> float:
        """Tier baseline (35-115) plus investment bonus; never below the baseline."""
        return self.score_breakdown(character, game_mode, investment).total

    def effective_tier(
        self,
        character: Character,
        game_mode: GameMode | str,
        investment: Optional[UserInvestment] = None,
    ) -> TierRating:
        return score_to_tier(self.effective_score(character, game_mode, investment))

    def character_tier_value(
        self,
        character: Character,
        game_mode: GameMode | str,
        investments: Optional[Mapping[str, UserInvestment]] = None,
    ) -> float:
        """Position on the -1 (best) to 5 (worst) axis, investment-aware when possible."""
        investment = investments.get(character.id) if investments else None
        if investment is not None:
            return (100 - self.effective_score(character, game_mode, investment)) / 20
        return tier_to_number(self.best_tier_for_mode(character.id, game_mode))

    def team_tier_score(self, character_id: str, game_mode: GameMode | str) -> float:
        """Per-member score used when averaging a lineup."""
        return TIER_SCORES[self.best_tier_for_mode(character_id, game_mode)]

    def calculate_team_tier(
        self, character_ids: Iterable[str], game_mode: GameMode | str = GameMode.MOC
    ) -> TierRating:
        """Team tier from the average member score of a lineup."""
        scores = [self.team_tier_score(character_id, game_mode) for character_id in character_ids]
        if not scores:
            return TierRating.T5
        return team_average_to_tier(sum(scores) / len(scores))
