"""Investment penalty math: eidolons, light cones and effectiveness."""

import logging
from typing import Mapping, Optional

from starguide.models.character import Character, LightConeDefinition
from starguide.models.enums import LightConeSource, Ownership
from starguide.models.investment import ImprovementPotential, InvestmentPenaltyBreakdown
from starguide.models.roster import UserInvestment
from starguide.utils.rating_scale import round_half_up

logger = logging.getLogger(__name__)

# Weight of each penalty kind when converting to effectiveness or score points
EIDOLON_SCALING = 0.20
LIGHT_CONE_SCALING = 0.65

# Penalty for running no recommended light cone, worse than any listed option
GENERIC_LIGHT_CONE_PENALTY = -40

# Sentinel light cone id meaning "something off-list"
GENERIC_LIGHT_CONE_ID = "generic"


def interpolate_light_cone_penalty(light_cone: LightConeDefinition, superimposition: Optional[int]) -> float:
    """Linear interpolation between the S1 and S5 anchors."""
    si = superimposition or 1
    s1, s5 = light_cone.penalties.s1, light_cone.penalties.s5
    if si == 1:
        return s1
    if si == 5:
        return s5
    return s1 + (s5 - s1) * (si - 1) / 4


def build_investment_map(roster: Mapping[str, UserInvestment]) -> dict[str, UserInvestment]:
    """Investments of characters the player owns or plans to pull."""
    return {
        character_id: investment
        for character_id, investment in roster.items()
        if investment.ownership != Ownership.NONE
    }


class InvestmentCalculator:
    """Scores how far a character's investment is from perfect (E6, signature S5)."""

    F2P_SOURCES = frozenset({
        LightConeSource.HERTA_STORE,
        LightConeSource.BATTLE_PASS,
        LightConeSource.EVENT,
        LightConeSource.CRAFTABLE,
    })

    EFFECTIVENESS_LABELS = [
        (98, "Near Perfect"),
        (95, "Excellent"),
        (90, "Very Good"),
        (85, "Good"),
        (80, "Decent"),
        (75, "Fair"),
        (70, "Functional"),
    ]

    # Eidolons at least this costly to skip are called out to the player
    TRANSFORMATIVE_EIDOLON_PENALTY = 30

    # E0 plus this much penalty reads as fully investment-dependent
    ACCESSIBILITY_PENALTY_SPAN = 150
    DEFAULT_F2P_PENALTY = -30

    def light_cone_penalty(self, character: Character, investment: Optional[UserInvestment]) -> float:
        """Penalty of the equipped light cone; 0 when there is nothing to compare against."""
        if character.investment is None or not character.investment.light_cones or investment is None:
            return 0
        light_cone = character.investment.get_light_cone(investment.light_cone_id)
        if light_cone is None:
            return GENERIC_LIGHT_CONE_PENALTY
        return interpolate_light_cone_penalty(light_cone, investment.light_cone_superimposition)

    def eidolon_penalty(self, character: Character, eidolon_level: int) -> float:
        """Sum of penalties for eidolons above the player's level."""
        if character.investment is None:
            return 0
        return sum(e.penalty for e in character.investment.eidolons if eidolon_level < e.level)

    def investment_effectiveness(self, character: Character, investment: Optional[UserInvestment]) -> float:
        """Percent of maximum potential, capped at 100."""
        if character.investment is None or investment is None:
            return 100
        eidolon = self.eidolon_penalty(character, investment.eidolon_level)
        light_cone = self.light_cone_penalty(character, investment)
        effectiveness = 100 + eidolon * EIDOLON_SCALING + light_cone * LIGHT_CONE_SCALING
        return min(effectiveness, 100)

    def effectiveness_label(self, effectiveness: float) -> str:
        for cutoff, label in self.EFFECTIVENESS_LABELS:
            if effectiveness >= cutoff:
                return label
        return "Underinvested"

    def improvement_potential(
        self, character: Character, investment: Optional[UserInvestment]
    ) -> ImprovementPotential:
        current = self.investment_effectiveness(character, investment)
        signature = character.investment.signature_light_cone if character.investment else None
        perfect = UserInvestment(
            eidolon_level=6,
            light_cone_id=signature.id if signature else None,
            light_cone_superimposition=5,
        )
        maximum = self.investment_effectiveness(character, perfect)
        return ImprovementPotential(
            current_effectiveness=current,
            max_effectiveness=maximum,
            potential_gain=maximum - current,
            percent_of_max=current / maximum * 100,
        )

    def best_f2p_light_cone(self, character: Character) -> Optional[str]:
        """Id of the best non-signature light cone from a free source."""
        if character.investment is None:
            return None
        candidates = [
            lc for lc in character.investment.light_cones
            if not lc.is_signature and lc.source in self.F2P_SOURCES
        ]
        if not candidates:
            return None
        return max(candidates, key=lambda lc: lc.penalties.s5).id

    def user_penalty(self, character: Character, investment: UserInvestment) -> float:
        """Total penalty (<= 0) for display; S2-S4 light cone values are rounded."""
        if character.investment is None:
            return 0

        penalty = self.eidolon_penalty(character, investment.eidolon_level)

        light_cone_id = investment.light_cone_id
        if not light_cone_id or light_cone_id == GENERIC_LIGHT_CONE_ID:
            return penalty + GENERIC_LIGHT_CONE_PENALTY

        light_cone = character.investment.get_light_cone(light_cone_id)
        if light_cone is None:
            logger.debug(f"Unknown light cone {light_cone_id} for {character.id}, using generic penalty")
            return penalty + GENERIC_LIGHT_CONE_PENALTY

        si = investment.light_cone_superimposition or 1
        if si in (1, 5):
            return penalty + interpolate_light_cone_penalty(light_cone, si)
        return penalty + round_half_up(interpolate_light_cone_penalty(light_cone, si))

    def penalty_percentage(self, character: Character, investment: UserInvestment) -> int:
        """User penalty as a share of the worst case (E0 with the weakest light cone at S1)."""
        if character.investment is None:
            return 0

        max_penalty = sum(e.penalty for e in character.investment.eidolons)
        if character.investment.light_cones:
            max_penalty += min(lc.penalties.s1 for lc in character.investment.light_cones)
        else:
            max_penalty += GENERIC_LIGHT_CONE_PENALTY

        if max_penalty == 0:
            return 0
        return round_half_up(self.user_penalty(character, investment) / max_penalty * 100)

    def penalty_breakdown(self, character: Character, investment: UserInvestment) -> InvestmentPenaltyBreakdown:
        if character.investment is None:
            return InvestmentPenaltyBreakdown(total=0, eidolon=0, light_cone=0)

        eidolon = self.eidolon_penalty(character, investment.eidolon_level)
        light_cone = character.investment.get_light_cone(investment.light_cone_id)
        if light_cone is None:
            light_cone_penalty = GENERIC_LIGHT_CONE_PENALTY
        else:
            light_cone_penalty = interpolate_light_cone_penalty(light_cone, investment.light_cone_superimposition)

        return InvestmentPenaltyBreakdown(
            total=eidolon + light_cone_penalty,
            eidolon=eidolon,
            light_cone=light_cone_penalty,
        )

    def investment_notes(self, character: Character) -> list[str]:
        """Short investment advice lines for the pull advisor."""
        if character.investment is None:
            return []

        notes = []
        if character.investment.minimum_viable:
            notes.append(f"Minimum: {character.investment.minimum_viable}")

        for eidolon in character.investment.eidolons:
            if abs(eidolon.penalty) >= self.TRANSFORMATIVE_EIDOLON_PENALTY:
                notes.append(f"E{eidolon.level} is transformative")

        signature = character.investment.signature_light_cone
        if signature is not None:
            gap = abs(signature.penalties.s1)
            if gap >= 20:
                notes.append(f"Signature LC important (-{gap:g} without)")
            elif gap >= 10:
                notes.append("Signature LC recommended")
            else:
                notes.append("F2P LC works well")

        return notes

    def investment_accessibility(self, character: Character) -> float:
        """1.0 when E0 with a free light cone works, 0.0 when heavily investment-dependent."""
        if character.investment is None:
            return 1.0

        e0_penalty = sum(e.penalty for e in character.investment.eidolons)
        f2p = [
            lc for lc in character.investment.light_cones
            if not lc.is_signature and lc.source != LightConeSource.SIGNATURE
        ]
        best = max(f2p, key=lambda lc: lc.penalties.s5) if f2p else None
        f2p_penalty = (best.penalties.s5 if best else 0) or self.DEFAULT_F2P_PENALTY

        return max(0.0, 1 - abs(e0_penalty + f2p_penalty) / self.ACCESSIBILITY_PENALTY_SPAN)

    def signature_superimposition(
        self, character: Character, investment: Optional[UserInvestment]
    ) -> Optional[int]:
        """Superimposition of the equipped signature, None when it is not equipped."""
        if investment is None or character.investment is None:
            return None
        light_cone = character.investment.get_light_cone(investment.light_cone_id)
        if light_cone is None or not light_cone.is_signature:
            return None
        return investment.light_cone_superimposition or 1
