"""Team-level ratings: per-mode tiers, team synergy, naming and ordering."""

import logging
from typing import Mapping, Optional, Sequence

from starguide.models.character import Character
from starguide.models.enums import (
    GameMode,
    GranularRating,
    Role,
    SynergyConfidence,
    TeammateRating,
    TierRating,
)
from starguide.models.roster import UserInvestment
from starguide.models.teams import (
    GeneratedTeam,
    ModeTeamRating,
    TeamMemberContribution,
    TeamSynergy,
)
from starguide.repositories.catalog_repository import CharacterCatalog
from starguide.services.composition_selector import CompositionSelector
from starguide.services.scorers.synergy_resolver import SynergyResolver
from starguide.services.scorers.tier_scorer import TierScorer
from starguide.utils.character_ids import parse_game_mode_strict
from starguide.utils.rating_scale import (
    TEAMMATE_RATING_SCORES,
    score_to_base_rating,
    score_to_rating,
)
from starguide.utils.tier_scale import TIER_SCORES, number_to_tier, tier_index

logger = logging.getLogger(__name__)


class TeamRatingService:
    """Scores whole teams.

    Two scoring paths live here and are intentionally kept apart:
    ``calculate_team_score`` is the raw generator score (weak-mode penalties
    are applied by the generators on top of it), while the per-mode ratings
    blend member tiers with a synergy penalty and ignore weak modes.
    """

    MODE_LABELS = {
        GameMode.MOC: "Memory of Chaos",
        GameMode.PF: "Pure Fiction",
        GameMode.AS: "Apocalyptic Shadow",
    }

    DPS_WEIGHT = 0.6
    SUPPORT_WEIGHT = 0.4

    # Average used for an empty side of the team (between T2 and T3)
    EMPTY_SIDE_TIER_VALUE = 2.5

    # Tier steps lost per point of synergy below S (5)
    SYNERGY_PENALTY_FACTOR = 0.35

    WORST_TIER_VALUE = 5
    DEFAULT_RANKING_SCORE = 50
    CURATED_S_BONUS = 5

    def __init__(
        self,
        catalog: Optional[CharacterCatalog] = None,
        tier_scorer: Optional[TierScorer] = None,
        synergy_resolver: Optional[SynergyResolver] = None,
        composition_selector: Optional[CompositionSelector] = None,
    ):
        self.catalog = catalog or CharacterCatalog()
        self.compositions = composition_selector or CompositionSelector()
        self.tier_scorer = tier_scorer or TierScorer(self.catalog)
        self.synergy = synergy_resolver or SynergyResolver(self.catalog, self.compositions)

    def calculate_mode_team_rating(
        self,
        team: Sequence[Character],
        game_mode: GameMode | str,
        investments: Optional[Mapping[str, UserInvestment]] = None,
    ) -> ModeTeamRating:
        """Tier of a team in one mode: weighted member tiers plus a synergy penalty."""
        mode = parse_game_mode_strict(game_mode)
        if not team:
            return ModeTeamRating(mode=mode, tier=TierRating.T5, score=0, label=self.MODE_LABELS[mode])

        dps_members = [c for c in team if c.is_dps_capable]
        support_members = [c for c in team if not c.is_dps_capable]

        dps_values = [self.tier_scorer.character_tier_value(c, mode, investments) for c in dps_members]
        support_values = [self.tier_scorer.character_tier_value(c, mode, investments) for c in support_members]

        dps_avg = sum(dps_values) / len(dps_values) if dps_values else self.EMPTY_SIDE_TIER_VALUE
        support_avg = sum(support_values) / len(support_values) if support_values else self.EMPTY_SIDE_TIER_VALUE

        weighted = dps_avg * self.DPS_WEIGHT + support_avg * self.SUPPORT_WEIGHT
        value = min(self.WORST_TIER_VALUE, weighted + self._synergy_penalty(team, dps_members, support_members))

        return ModeTeamRating(
            mode=mode,
            tier=number_to_tier(value),
            score=100 - value * 20,
            label=self.MODE_LABELS[mode],
        )

    def _synergy_penalty(
        self,
        team: Sequence[Character],
        dps_members: Sequence[Character],
        support_members: Sequence[Character],
    ) -> float:
        if len(team) < 2:
            return 0

        scores: list[float] = []
        if len(dps_members) >= 2:
            dps1, dps2 = dps_members[0], dps_members[1]
            scores.append(self.synergy.bidirectional_score(dps1, dps2).score)
            for support in support_members:
                first = self.synergy.bidirectional_score(dps1, support).score
                second = self.synergy.bidirectional_score(dps2, support).score
                scores.append((first + second) / 2)
        else:
            primary = dps_members[0] if dps_members else team[0]
            scores.extend(
                self.synergy.bidirectional_score(primary, c).score for c in team if c.id != primary.id
            )

        average = sum(scores) / len(scores) if scores else 0
        return max(0.0, (5 - average) * self.SYNERGY_PENALTY_FACTOR)

    def calculate_all_mode_ratings(
        self,
        team: Sequence[Character],
        investments: Optional[Mapping[str, UserInvestment]] = None,
    ) -> list[ModeTeamRating]:
        return [self.calculate_mode_team_rating(team, mode, investments) for mode in GameMode]

    def ranking_score(self, team: GeneratedTeam, game_mode: GameMode | str) -> float:
        """Sort key shared by every team list: mode score plus a curated S bonus."""
        rating = team.mode_rating(parse_game_mode_strict(game_mode))
        score = rating.score if rating else self.DEFAULT_RANKING_SCORE
        if team.curated and team.rating == GranularRating.S:
            score += self.CURATED_S_BONUS
        return score

    def calculate_team_score(
        self,
        focal: Character,
        teammates: Sequence[tuple[Character, Optional[TeammateRating]]],
        game_mode: GameMode | str,
        composition_id: Optional[str] = None,
        investments: Optional[Mapping[str, UserInvestment]] = None,
    ) -> float:
        """Inverted member tiers plus the focal character's rating of each teammate.

        A teammate without a supplied rating falls back to the focal
        character's recommendation for the composition, and adds nothing
        when there is none.
        """
        score = (5 - self.tier_scorer.character_tier_value(focal, game_mode, investments)) * 20

        for teammate, rating in teammates:
            score += (5 - self.tier_scorer.character_tier_value(teammate, game_mode, investments)) * 20
            if rating is None:
                rec = self.compositions.find_teammate_rec(focal, teammate.id, composition_id)
                rating = rec.rating if rec else None
            if rating is not None:
                score += TEAMMATE_RATING_SCORES[rating] * 20

        return score

    def calculate_team_synergy(
        self, team: Sequence[Character], game_mode: GameMode | str = GameMode.MOC
    ) -> TeamSynergy:
        """Synergy of an arbitrary team from bidirectional pair scores.

        Exactly two DPS-capable members are scored from both carries'
        perspectives; any other team is scored around its first carry.
        """
        if len(team) < 2:
            return TeamSynergy(score=0, rating=GranularRating.D)

        mode = parse_game_mode_strict(game_mode)
        dps_members = [c for c in team if c.is_dps_capable]
        if len(dps_members) == 2:
            return self._dual_carry_synergy(team, dps_members, mode)
        return self._single_carry_synergy(team, dps_members[0] if dps_members else team[0], mode)

    def _tier_total(self, team: Sequence[Character], mode: GameMode) -> float:
        return sum(TIER_SCORES[self.tier_scorer.best_tier_for_mode(c.id, mode)] for c in team)

    @staticmethod
    def _main_dps_contribution(dps: Character) -> TeamMemberContribution:
        return TeamMemberContribution(
            character_id=dps.id,
            character_name=dps.name,
            role="Main DPS",
            reason=dps.description or "Primary damage dealer",
        )

    def _synergy_rating(self, score: float, team_size: int) -> GranularRating:
        return score_to_rating(score / (team_size * 100) * 5)

    def _dual_carry_synergy(
        self, team: Sequence[Character], dps_members: Sequence[Character], mode: GameMode
    ) -> TeamSynergy:
        dps1, dps2 = dps_members
        supports = [c for c in team if c.id not in (dps1.id, dps2.id)]
        key_synergies: list[str] = []

        pair = self.synergy.bidirectional_score(dps1, dps2)
        contributions = [
            self._main_dps_contribution(dps1),
            TeamMemberContribution(
                character_id=dps2.id,
                character_name=dps2.name,
                role="Sub DPS",
                reason=pair.teammate_reason or pair.focal_reason or self.synergy.combined_reason(pair, dps2),
                rating=score_to_rating(pair.score),
                source_rating=score_to_base_rating(pair.score),
            ),
        ]

        score = self._tier_total(team, mode) + pair.score * 20

        for support in supports:
            first = self.synergy.bidirectional_score(dps1, support)
            second = self.synergy.bidirectional_score(dps2, support)
            average = (first.score + second.score) / 2

            if first.focal_reason and second.focal_reason:
                reason = f"{dps1.name}: {first.focal_reason} | {dps2.name}: {second.focal_reason}"
            elif first.focal_reason:
                reason = f"{dps1.name}: {first.focal_reason}"
            elif second.focal_reason:
                reason = f"{dps2.name}: {second.focal_reason}"
            else:
                reason = self.synergy.combined_reason(first, support)

            if SynergyConfidence.MUTUAL in (first.confidence, second.confidence):
                key_synergies.append(f"{support.name}: {reason}")

            contributions.append(
                TeamMemberContribution(
                    character_id=support.id,
                    character_name=support.name,
                    role=support.primary_role.value,
                    reason=reason,
                    rating=score_to_rating(average),
                    source_rating=score_to_base_rating(average),
                )
            )
            score += average * 20

        return TeamSynergy(
            score=score,
            rating=self._synergy_rating(score, len(team)),
            contributions=contributions,
            reasoning=[f"{c.character_name}: {c.reason}" for c in contributions if c.reason and c.character_id != dps1.id],
            key_synergies=key_synergies,
            team_summary="Dual-carry composition",
        )

    def _single_carry_synergy(
        self, team: Sequence[Character], primary: Character, mode: GameMode
    ) -> TeamSynergy:
        key_synergies: list[str] = []
        contributions: list[TeamMemberContribution] = []
        score = self._tier_total(team, mode)

        for member in team:
            if member.id == primary.id:
                contributions.append(self._main_dps_contribution(member))
                continue

            pair = self.synergy.bidirectional_score(primary, member)
            reason = self.synergy.combined_reason(pair, member)
            if pair.confidence == SynergyConfidence.MUTUAL:
                key_synergies.append(f"{member.name}: {pair.focal_reason or reason}")

            contributions.append(
                TeamMemberContribution(
                    character_id=member.id,
                    character_name=member.name,
                    role=member.primary_role.value,
                    reason=reason,
                    rating=score_to_rating(pair.score),
                    source_rating=score_to_base_rating(pair.score),
                )
            )
            score += pair.score * 20

        return TeamSynergy(
            score=score,
            rating=self._synergy_rating(score, len(team)),
            contributions=contributions,
            reasoning=[f"{c.character_name}: {c.reason}" for c in contributions if c.reason and c.character_id != primary.id],
            key_synergies=key_synergies,
            team_summary=f"Built around {primary.name}",
        )

    @staticmethod
    def generate_team_name(team: Sequence[Character], focal: Character) -> str:
        """Archetype name from the team's actual role makeup."""
        carries = [c for c in team if c.is_dps_capable]
        if len(carries) >= 2:
            other = next((c for c in carries if c.id != focal.id), None)
            if other is not None:
                return f"{focal.name}/{other.name} Dual DPS"
            return f"{focal.name} Dual DPS"
        if not any(c.has_role(Role.SUSTAIN) for c in team):
            return f"{focal.name} Sustainless"
        if sum(1 for c in team if c.has_role(Role.AMPLIFIER)) >= 2:
            return f"{focal.name} Hypercarry"
        return f"{focal.name} Team"

    @staticmethod
    def order_team_by_role(team: Sequence[Character]) -> list[Character]:
        """Canonical display order: DPS, Support DPS, Amplifier, Sustain; by name within each."""
        dps, support_dps, amplifiers, sustains = [], [], [], []
        for character in team:
            if character.has_role(Role.SUPPORT_DPS):
                support_dps.append(character)
            elif character.has_role(Role.DPS):
                dps.append(character)
            elif character.has_role(Role.SUSTAIN) and not character.has_role(Role.AMPLIFIER):
                sustains.append(character)
            else:
                amplifiers.append(character)

        ordered: list[Character] = []
        for group in (dps, support_dps, amplifiers, sustains):
            ordered.extend(sorted(group, key=lambda c: c.name))
        return ordered

    def canonical_primary_dps(
        self, team: Sequence[Character], game_mode: GameMode | str
    ) -> Optional[Character]:
        """The carry a team belongs to: best tier, ties broken by id."""
        carries = [c for c in team if c.is_dps_capable]
        if not carries:
            return None
        if len(carries) == 1:
            return carries[0]
        return min(
            carries,
            key=lambda c: (tier_index(self.tier_scorer.best_tier_for_mode(c.id, game_mode)), c.id),
        )

    @staticmethod
    def is_dual_carry_team(team: Sequence[Character]) -> bool:
        return sum(1 for c in team if c.is_dps_capable) >= 2
