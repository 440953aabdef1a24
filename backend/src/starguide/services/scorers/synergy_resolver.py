"""Pairwise synergy: explicit ratings from both sides plus investment modifiers."""

import logging
from typing import Mapping, Optional

from starguide.models.character import Character
from starguide.models.enums import SynergyConfidence, TeammateRating
from starguide.models.investment import PotentialSynergyModifier
from starguide.models.roster import UserInvestment
from starguide.models.teams import (
    BidirectionalScore,
    EffectiveRating,
    SynergyModifierResult,
    SynergySource,
)
from starguide.repositories.catalog_repository import CharacterCatalog
from starguide.services.composition_selector import CompositionSelector
from starguide.utils.rating_scale import RATING_POINTS, TEAMMATE_RATING_SCORES, points_to_rating

logger = logging.getLogger(__name__)


class SynergyResolver:
    """Resolves how well two characters work together.

    Two independent signals are combined:
    - investment modifiers, collected from both characters' perspectives
      and averaged so a pair never gets double credit;
    - explicit teammate ratings, blended 0.7/0.3 between the focal side and
      the reciprocal side, and dampened when only one side has an opinion.
    """

    FOCAL_WEIGHT = 0.7
    TEAMMATE_WEIGHT = 0.3
    FOCAL_ONLY_CONFIDENCE = 0.9
    TEAMMATE_ONLY_CONFIDENCE = 0.6

    def __init__(
        self,
        catalog: Optional[CharacterCatalog] = None,
        composition_selector: Optional[CompositionSelector] = None,
    ):
        self.catalog = catalog or CharacterCatalog()
        self.compositions = composition_selector or CompositionSelector()

    def _owner_modifiers(
        self, owner: Character, target_id: str, investment: Optional[UserInvestment]
    ) -> list[SynergySource]:
        """Modifiers unlocked by the owner's eidolons and equipped light cone."""
        if owner.investment is None or investment is None:
            return []

        sources = []
        for eidolon in owner.investment.eidolons:
            if investment.eidolon_level < eidolon.level:
                continue
            modifier = next((m for m in eidolon.synergy_modifiers if m.with_character_id == target_id), None)
            if modifier:
                sources.append(SynergySource(f"{owner.name} E{eidolon.level}", modifier.modifier, modifier.reason))

        light_cone = owner.investment.get_light_cone(investment.light_cone_id)
        if light_cone is not None:
            modifier = next((m for m in light_cone.synergy_modifiers if m.with_character_id == target_id), None)
            if modifier:
                sources.append(SynergySource(f"{owner.name} + {light_cone.name}", modifier.modifier, modifier.reason))

        return sources

    def _receiver_modifiers(
        self, receiver: Character, teammate_id: str, teammate_investment: Optional[UserInvestment]
    ) -> list[SynergySource]:
        """Modifiers the receiver grants when the teammate reaches an eidolon."""
        if teammate_investment is None:
            return []

        rec = next((r for r in receiver.base_teammates.all_recs() if r.id == teammate_id), None)
        if rec is None:
            return []

        return [
            SynergySource(f"{receiver.name} values {teammate_id} E{mod.level}", mod.modifier, mod.reason)
            for mod in rec.their_investment_modifiers
            if teammate_investment.eidolon_level >= mod.level
        ]

    def bidirectional_modifier(
        self,
        a: Character,
        b: Character,
        investments: Mapping[str, UserInvestment],
    ) -> SynergyModifierResult:
        """Average of every modifier either side's investment triggers for the pair."""
        breakdown = [
            *self._owner_modifiers(a, b.id, investments.get(a.id)),
            *self._owner_modifiers(b, a.id, investments.get(b.id)),
            *self._receiver_modifiers(a, b.id, investments.get(b.id)),
            *self._receiver_modifiers(b, a.id, investments.get(a.id)),
        ]
        if not breakdown:
            return SynergyModifierResult(total=0, breakdown=[])
        total = sum(source.value for source in breakdown) / len(breakdown)
        return SynergyModifierResult(total=total, breakdown=breakdown)

    def active_modifiers(
        self,
        a: Character,
        b: Character,
        investment_a: UserInvestment,
        investment_b: UserInvestment,
    ) -> list[SynergySource]:
        """Owner-perspective modifiers currently unlocked on either side."""
        return [
            *self._owner_modifiers(a, b.id, investment_a),
            *self._owner_modifiers(b, a.id, investment_b),
        ]

    def _potential_for(
        self, owner: Character, target_id: str, investment: UserInvestment
    ) -> list[PotentialSynergyModifier]:
        if owner.investment is None:
            return []

        potential = []
        for eidolon in owner.investment.eidolons:
            if investment.eidolon_level >= eidolon.level:
                continue
            modifier = next((m for m in eidolon.synergy_modifiers if m.with_character_id == target_id), None)
            if modifier:
                label = f"{owner.name} E{eidolon.level}"
                potential.append(PotentialSynergyModifier(label, modifier.modifier, modifier.reason, requires=label))

        for light_cone in owner.investment.light_cones:
            if investment.light_cone_id == light_cone.id:
                continue
            modifier = next((m for m in light_cone.synergy_modifiers if m.with_character_id == target_id), None)
            if modifier:
                potential.append(
                    PotentialSynergyModifier(
                        f"{owner.name} + {light_cone.name}",
                        modifier.modifier,
                        modifier.reason,
                        requires=f"{owner.name} with {light_cone.name}",
                    )
                )

        return potential

    def potential_modifiers(
        self,
        a: Character,
        b: Character,
        investment_a: UserInvestment,
        investment_b: UserInvestment,
    ) -> list[PotentialSynergyModifier]:
        """Modifiers more investment on either side would unlock."""
        return [
            *self._potential_for(a, b.id, investment_a),
            *self._potential_for(b, a.id, investment_b),
        ]

    def effective_rating_with_breakdown(
        self,
        from_character: Character,
        to_character_id: str,
        composition_id: Optional[str] = None,
        investments: Optional[Mapping[str, UserInvestment]] = None,
    ) -> EffectiveRating:
        """A teammate rating after investment modifiers, with the sources used."""
        rec = self.compositions.find_teammate_rec(from_character, to_character_id, composition_id)
        base_rating = rec.rating if rec else TeammateRating.D
        base_score = RATING_POINTS[base_rating]

        modifier = SynergyModifierResult(total=0)
        if investments is not None:
            target = self.catalog.find_character(to_character_id)
            if target is not None:
                modifier = self.bidirectional_modifier(from_character, target, investments)

        effective_score = base_score + modifier.total
        return EffectiveRating(
            base_rating=base_rating,
            effective_rating=points_to_rating(effective_score),
            base_score=base_score,
            effective_score=effective_score,
            synergy_breakdown=list(modifier.breakdown),
            reason=rec.reason if rec else "",
        )

    def effective_rating(
        self,
        from_character: Character,
        to_character_id: str,
        composition_id: Optional[str] = None,
        investments: Optional[Mapping[str, UserInvestment]] = None,
    ) -> TeammateRating:
        """Rating of a teammate, raised or lowered by investment modifiers.

        Without investments this is the plain catalog rating (D when unrated).
        """
        if investments is None:
            rec = self.compositions.find_teammate_rec(from_character, to_character_id, composition_id)
            return rec.rating if rec else TeammateRating.D
        return self.effective_rating_with_breakdown(
            from_character, to_character_id, composition_id, investments
        ).effective_rating

    def bidirectional_score(
        self,
        focal: Character,
        teammate: Character,
        focal_composition_id: Optional[str] = None,
        teammate_composition_id: Optional[str] = None,
    ) -> BidirectionalScore:
        """Blend both sides' explicit ratings of each other on the 0-6 scale."""
        focal_rec = self.compositions.find_teammate_rec(focal, teammate.id, focal_composition_id)
        teammate_rec = self.compositions.find_teammate_rec(teammate, focal.id, teammate_composition_id)

        if focal_rec and teammate_rec:
            score = (
                TEAMMATE_RATING_SCORES[focal_rec.rating] * self.FOCAL_WEIGHT
                + TEAMMATE_RATING_SCORES[teammate_rec.rating] * self.TEAMMATE_WEIGHT
            )
            confidence = SynergyConfidence.MUTUAL
        elif focal_rec:
            score = TEAMMATE_RATING_SCORES[focal_rec.rating] * self.FOCAL_ONLY_CONFIDENCE
            confidence = SynergyConfidence.FOCAL_ONLY
        elif teammate_rec:
            score = TEAMMATE_RATING_SCORES[teammate_rec.rating] * self.TEAMMATE_ONLY_CONFIDENCE
            confidence = SynergyConfidence.TEAMMATE_ONLY
        else:
            score = 0.0
            confidence = SynergyConfidence.NONE

        return BidirectionalScore(
            score=score,
            confidence=confidence,
            focal_rating=focal_rec.rating if focal_rec else None,
            teammate_rating=teammate_rec.rating if teammate_rec else None,
            focal_reason=focal_rec.reason if focal_rec else None,
            teammate_reason=teammate_rec.reason if teammate_rec else None,
        )

    @staticmethod
    def combined_reason(score: BidirectionalScore, teammate: Character) -> str:
        """Best available explanation for a pair, from either perspective."""
        if score.focal_reason:
            return score.focal_reason
        if score.teammate_reason:
            return f"{teammate.name} synergy: {score.teammate_reason}"
        return f"{teammate.primary_role.value} for the team"
