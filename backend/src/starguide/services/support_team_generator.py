"""Team generation for support characters (Amplifier / Sustain)."""

import logging
from itertools import combinations, product
from typing import Iterable, Mapping, Optional, Sequence

from starguide.config import settings
from starguide.models.character import Character, Composition, TeammateRec
from starguide.models.enums import GameMode, Role, TeammateRating, TeamStructure
from starguide.models.roster import UserInvestment
from starguide.models.teams import (
    BidirectionalScore,
    EnrichedTeammate,
    GeneratedTeam,
    SupportTeamResult,
    TeamMemberContribution,
)
from starguide.repositories.catalog_repository import CharacterCatalog
from starguide.services.team_generator import TeamGenerator
from starguide.utils.character_ids import (
    base_character_id,
    has_base_conflict,
    parse_game_mode_strict,
    team_key,
)
from starguide.utils.rating_scale import (
    TEAMMATE_RATING_SCORES,
    score_to_base_rating,
    score_to_rating,
)

logger = logging.getLogger(__name__)


class SupportTeamGenerator:
    """Finds teams for a support from two directions.

    Focal teams come from the support's own compositions. Supporting teams
    come from owned carries whose compositions (or plain ratings) include the
    support, with the support forced into the lineup. Both lists share one
    set of team keys so a lineup is only ever reported once.
    """

    DYNAMIC_CANDIDATES = 3
    FORCED_PER_COMPOSITION = 4
    FORCED_PER_DPS = 6
    DEFAULT_SUPPORT_RATING = TeammateRating.B

    def __init__(
        self,
        catalog: Optional[CharacterCatalog] = None,
        team_generator: Optional[TeamGenerator] = None,
    ):
        self.catalog = catalog or CharacterCatalog()
        self.teams = team_generator or TeamGenerator(self.catalog)
        self.compositions = self.teams.compositions
        self.ratings = self.teams.ratings
        self.synergy = self.teams.synergy

    def generate_teams_for_support(
        self,
        character_id: str,
        owned_ids: Iterable[str],
        game_mode: GameMode | str | None = None,
        max_teams: Optional[int] = None,
        investments: Optional[Mapping[str, UserInvestment]] = None,
    ) -> SupportTeamResult:
        """Focal and supporting teams for a support character.

        Raises:
            CharacterNotFoundError: If ``character_id`` is not in the catalog.
        """
        support = self.catalog.get_character(character_id)
        owned = self.catalog.characters_by_ids(owned_ids)
        mode = parse_game_mode_strict(game_mode or settings.default_game_mode)
        max_teams = settings.max_support_teams if max_teams is None else max_teams
        investments = investments or None
        seen_keys: set[str] = set()

        focal_teams: list[GeneratedTeam] = []
        for composition in support.compositions:
            if not self.compositions.meets_requirements(composition, owned):
                continue
            focal_teams.extend(self._focal_curated(support, owned, composition, mode, investments, seen_keys))
            focal_teams.extend(self._focal_dynamic(support, owned, composition, mode, investments, seen_keys))
        focal_teams.sort(key=lambda t: t.score, reverse=True)

        supporting_teams: list[GeneratedTeam] = []
        owned_dps = [c for c in owned if c.is_dps_capable and c.id != support.id]

        for dps in owned_dps:
            for composition in dps.compositions:
                if not self.compositions.is_support_in_composition(support, dps, composition):
                    continue
                if not self.compositions.meets_requirements(composition, owned):
                    continue
                supporting_teams.extend(
                    self._supporting_curated(dps, support, owned, composition, mode, investments, seen_keys)
                )
                supporting_teams.extend(
                    self._forced_in_composition(dps, support, owned, composition, mode, investments, seen_keys)
                )

        for dps in owned_dps:
            if dps.compositions:
                continue
            pair = self.synergy.bidirectional_score(dps, support)
            if pair.score <= 0:
                continue
            for team in self._forced_without_composition(dps, support, pair, owned, mode, investments):
                if self._claim(team.characters, seen_keys):
                    supporting_teams.append(team)

        supporting_teams.sort(key=lambda t: self.ratings.ranking_score(t, mode), reverse=True)
        logger.debug(
            f"Support teams for {support.id}: {len(focal_teams)} focal, {len(supporting_teams)} supporting"
        )
        return SupportTeamResult(
            focal_teams=focal_teams[:max_teams],
            supporting_teams=supporting_teams[:max_teams],
        )

    @staticmethod
    def _claim(members: Sequence[Character], seen_keys: set[str]) -> bool:
        """Reserve a lineup's key; False when it was already reported."""
        key = team_key(c.id for c in members)
        if key in seen_keys:
            return False
        seen_keys.add(key)
        return True

    @staticmethod
    def support_slot(support: Character) -> Role:
        """The single slot a support fills when forced into a team."""
        if support.has_role(Role.AMPLIFIER):
            return Role.AMPLIFIER
        if support.has_role(Role.SUSTAIN):
            return Role.SUSTAIN
        return Role.SUPPORT_DPS

    @staticmethod
    def _focal_support_contribution(support: Character) -> TeamMemberContribution:
        return TeamMemberContribution(
            character_id=support.id,
            character_name=support.name,
            role=support.primary_role.value,
            reason=f"{support.primary_role.value} (Focal)",
        )

    @staticmethod
    def _mechanic(composition: Composition) -> list[str]:
        return [composition.core_mechanic] if composition.core_mechanic else []

    def _focal_curated(
        self,
        support: Character,
        owned: Sequence[Character],
        composition: Composition,
        game_mode: GameMode,
        investments: Optional[Mapping[str, UserInvestment]],
        seen_keys: set[str],
    ) -> list[GeneratedTeam]:
        weak_penalty = self.compositions.weak_mode_penalty(composition, game_mode)
        teams = []

        for curated in composition.teams:
            members = self.teams.buildable_members(curated, owned, support)
            if members is None or not self._claim(members, seen_keys):
                continue

            contributions = [
                self._focal_support_contribution(c) if c.id == support.id
                else self.teams.rated_contribution(support, c, composition.id)
                for c in members
            ]
            members_by_id = {c.id: c for c in members}
            score = self.ratings.calculate_team_score(
                support,
                [(members_by_id[c.character_id], c.source_rating) for c in contributions if c.character_id != support.id],
                game_mode,
                composition.id,
                investments,
            )
            lead = next((c for c in members if c.is_dps_capable), support)

            teams.append(
                GeneratedTeam(
                    characters=self.ratings.order_team_by_role(members),
                    name=self.ratings.generate_team_name(members, lead),
                    rating=curated.rating,
                    structure=curated.structure,
                    score=score * weak_penalty,
                    contributions=contributions,
                    reasoning=[curated.notes] if curated.notes else self._mechanic(composition),
                    key_synergies=self._mechanic(composition),
                    mode_ratings=self.ratings.calculate_all_mode_ratings(members, investments),
                    composition_id=composition.id,
                    composition_name=composition.name,
                    curated=True,
                )
            )

        return teams

    def _focal_dynamic(
        self,
        support: Character,
        owned: Sequence[Character],
        composition: Composition,
        game_mode: GameMode,
        investments: Optional[Mapping[str, UserInvestment]],
        seen_keys: set[str],
    ) -> list[GeneratedTeam]:
        """Teams built from the support's own ratings for a structured composition."""
        structure = composition.structure
        teammates = self.compositions.teammates_for_composition(support, composition.id)
        if structure is None or not teammates.dps:
            return []

        owned_by_id = {c.id: c for c in owned}

        def available(recs: list[TeammateRec]) -> list[Character]:
            found = [owned_by_id[r.id] for r in recs if r.id in owned_by_id and r.id != support.id]
            return found[: self.DYNAMIC_CANDIDATES]

        slot = self.support_slot(support)
        need_dps = structure.dps - (1 if slot == Role.SUPPORT_DPS else 0)
        need_amplifiers = structure.amplifier - (1 if slot == Role.AMPLIFIER else 0)
        need_sustains = structure.sustain - (1 if slot == Role.SUSTAIN else 0)
        if need_dps < 1 or need_amplifiers < 0 or need_sustains < 0:
            return []

        if structure.dps >= 2:
            shape = TeamStructure.DUAL_CARRY
        elif structure.sustain == 0:
            shape = TeamStructure.SUSTAINLESS
        else:
            shape = TeamStructure.HYPERCARRY

        weak_penalty = self.compositions.weak_mode_penalty(composition, game_mode)
        teams = []

        for carries in combinations(available(teammates.dps), need_dps):
            for amplifiers in combinations(available(teammates.amplifiers), need_amplifiers):
                for sustains in combinations(available(teammates.sustains), need_sustains):
                    members = [support, *carries, *amplifiers, *sustains]
                    ids = [c.id for c in members]
                    if len(set(ids)) != 4 or has_base_conflict(ids):
                        continue
                    if not self._claim(members, seen_keys):
                        continue

                    contributions = [
                        self._focal_support_contribution(support),
                        *(self.teams.rated_contribution(support, c, composition.id) for c in members[1:]),
                    ]
                    rated = [c.source_rating for c in contributions if c.source_rating]
                    average = sum(TEAMMATE_RATING_SCORES[r] for r in rated) / max(1, len(rated))

                    teams.append(
                        GeneratedTeam(
                            characters=self.ratings.order_team_by_role(members),
                            name=self.ratings.generate_team_name(members, carries[0]),
                            rating=score_to_rating(average),
                            structure=shape.value,
                            score=average * 20 * weak_penalty,
                            contributions=contributions,
                            reasoning=self._mechanic(composition),
                            mode_ratings=self.ratings.calculate_all_mode_ratings(members, investments),
                            composition_id=composition.id,
                            composition_name=composition.name,
                        )
                    )

        return teams

    def _supporting_curated(
        self,
        dps: Character,
        support: Character,
        owned: Sequence[Character],
        composition: Composition,
        game_mode: GameMode,
        investments: Optional[Mapping[str, UserInvestment]],
        seen_keys: set[str],
    ) -> list[GeneratedTeam]:
        weak_penalty = self.compositions.weak_mode_penalty(composition, game_mode)
        teams = []

        for curated in composition.teams:
            if support.id not in curated.characters:
                continue
            members = self.teams.buildable_members(curated, owned, dps)
            if members is None or not self._claim(members, seen_keys):
                continue

            contributions = [
                self.teams.focal_contribution(dps) if c.id == dps.id
                else self.teams.rated_contribution(dps, c, composition.id)
                for c in members
            ]
            members_by_id = {c.id: c for c in members}
            score = self.ratings.calculate_team_score(
                dps,
                [(members_by_id[c.character_id], c.source_rating) for c in contributions if c.character_id != dps.id],
                game_mode,
                composition.id,
                investments,
            )

            teams.append(
                GeneratedTeam(
                    characters=self.ratings.order_team_by_role(members),
                    name=f"{dps.name}: {curated.name}",
                    rating=curated.rating,
                    structure=curated.structure,
                    score=score * weak_penalty,
                    contributions=contributions,
                    reasoning=[curated.notes] if curated.notes else self._mechanic(composition),
                    key_synergies=self._mechanic(composition),
                    mode_ratings=self.ratings.calculate_all_mode_ratings(members, investments),
                    composition_id=composition.id,
                    composition_name=composition.name,
                    curated=True,
                )
            )

        return teams

    def _forced_in_composition(
        self,
        dps: Character,
        support: Character,
        owned: Sequence[Character],
        composition: Composition,
        game_mode: GameMode,
        investments: Optional[Mapping[str, UserInvestment]],
        seen_keys: set[str],
    ) -> list[GeneratedTeam]:
        """Teams from a carry's composition ratings with the support locked in."""
        owned_by_id = {c.id: c for c in owned}
        used_bases = {base_character_id(dps.id), base_character_id(support.id)}
        teammates = self.compositions.teammates_for_composition(dps, composition.id)

        def available(recs: list[TeammateRec], role: Role) -> list[tuple[Character, TeammateRating, str, Role]]:
            return [
                (owned_by_id[r.id], r.rating, r.reason, role)
                for r in recs
                if r.id in owned_by_id and base_character_id(r.id) not in used_bases
            ]

        amplifiers = available(teammates.amplifiers, Role.AMPLIFIER)
        sustains = available(teammates.sustains, Role.SUSTAIN)

        slot = self.support_slot(support)
        rec = self.compositions.find_teammate_rec(dps, support.id, composition.id)
        support_pick = (
            support,
            rec.rating if rec else self.DEFAULT_SUPPORT_RATING,
            rec.reason if rec else f"{slot.value} for {dps.name}",
            slot,
        )

        if slot == Role.AMPLIFIER:
            shape = TeamStructure.HYPERCARRY
            lineups = [(support_pick, amp, sus) for amp, sus in product(amplifiers[:3], sustains[:3])]
        elif slot == Role.SUSTAIN:
            shape = TeamStructure.HYPERCARRY
            lineups = [(amp1, amp2, support_pick) for amp1, amp2 in combinations(amplifiers[:4], 2)]
        else:
            shape = TeamStructure.DUAL_CARRY
            lineups = [(support_pick, amp, sus) for amp, sus in product(amplifiers[:3], sustains[:3])]

        weak_penalty = self.compositions.weak_mode_penalty(composition, game_mode)
        teams = []

        for picks in lineups:
            if len(teams) >= self.FORCED_PER_COMPOSITION:
                break
            members = [dps, *(character for character, _, _, _ in picks)]
            if has_base_conflict(c.id for c in members) or not self._claim(members, seen_keys):
                continue

            contributions = [self.teams.focal_contribution(dps)]
            contributions.extend(
                TeamMemberContribution(
                    character_id=character.id,
                    character_name=character.name,
                    role=role.value,
                    reason=reason,
                    rating=score_to_rating(TEAMMATE_RATING_SCORES[rating]),
                    source_rating=rating,
                )
                for character, rating, reason, role in picks
            )
            average = sum(TEAMMATE_RATING_SCORES[rating] for _, rating, _, _ in picks) / len(picks)

            teams.append(
                GeneratedTeam(
                    characters=self.ratings.order_team_by_role(members),
                    name=self.ratings.generate_team_name(members, dps),
                    rating=score_to_rating(average),
                    structure=shape.value,
                    score=average * 20 * weak_penalty,
                    contributions=contributions,
                    reasoning=self._mechanic(composition),
                    mode_ratings=self.ratings.calculate_all_mode_ratings(members, investments),
                    composition_id=composition.id,
                    composition_name=composition.name,
                )
            )

        return teams

    def _forced_without_composition(
        self,
        dps: Character,
        support: Character,
        pair: BidirectionalScore,
        owned: Sequence[Character],
        game_mode: GameMode,
        investments: Optional[Mapping[str, UserInvestment]],
    ) -> list[GeneratedTeam]:
        """Teams for a carry without compositions, scored like generated DPS teams."""
        used_bases = {base_character_id(dps.id), base_character_id(support.id)}

        def available(role: Role) -> list[EnrichedTeammate]:
            return [
                t for t in self.teams.enriched_teammates(dps, owned, role, game_mode, None, investments)
                if base_character_id(t.id) not in used_bases
            ]

        amplifiers = available(Role.AMPLIFIER)
        sustains = available(Role.SUSTAIN)
        sub_dps = available(Role.SUPPORT_DPS)

        rating = score_to_base_rating(pair.score)
        reason = pair.focal_reason or pair.teammate_reason or f"{support.primary_role.value} for {dps.name}"
        entry = EnrichedTeammate(support, rating, reason, TEAMMATE_RATING_SCORES[rating])

        slot = self.support_slot(support)
        if slot == Role.SUPPORT_DPS:
            lineups = [
                (TeamStructure.DUAL_CARRY, (entry, amp, sus))
                for amp, sus in product(amplifiers[:4], sustains[:3])
            ]
        elif slot == Role.AMPLIFIER:
            lineups = [
                (TeamStructure.HYPERCARRY, (entry, amp, sus))
                for amp, sus in product(amplifiers[:4], sustains[:3])
            ] + [
                (TeamStructure.DUAL_CARRY, (sub, entry, sus))
                for sub, sus in product(sub_dps[:3], sustains[:3])
            ]
        else:
            lineups = [
                (TeamStructure.HYPERCARRY, (amp1, amp2, entry))
                for amp1, amp2 in combinations(amplifiers[:5], 2)
            ] + [
                (TeamStructure.DUAL_CARRY, (sub, amp, entry))
                for sub, amp in product(sub_dps[:3], amplifiers[:3])
            ]

        teams = [
            self.teams.create_team_from_enriched(dps, list(mates), shape, game_mode, None, investments)
            for shape, mates in lineups
            if not has_base_conflict([dps.id, *(m.id for m in mates)])
        ]
        teams.sort(key=lambda t: t.score, reverse=True)
        return teams[: self.FORCED_PER_DPS]
