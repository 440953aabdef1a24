"""Team generation around a DPS-capable focal character."""

import logging
from itertools import combinations, product
from typing import Iterable, Mapping, Optional, Sequence

from starguide.config import settings
from starguide.models.character import Character, Composition, CuratedTeam
from starguide.models.enums import GameMode, Role, TeammateRating, TeamStructure
from starguide.models.roster import UserInvestment
from starguide.models.teams import EnrichedTeammate, GeneratedTeam, TeamMemberContribution
from starguide.repositories.catalog_repository import CharacterCatalog
from starguide.services.composition_selector import CompositionSelector
from starguide.services.relationship_lookup import RelationshipLookup
from starguide.services.team_rating_service import TeamRatingService
from starguide.utils.character_ids import (
    base_character_id,
    has_base_conflict,
    parse_game_mode_strict,
    team_key,
)
from starguide.utils.rating_scale import HIGH_RATINGS, TEAMMATE_RATING_SCORES, score_to_rating
from starguide.utils.tier_scale import tier_index

logger = logging.getLogger(__name__)
diagnostics_logger = logging.getLogger("starguide.scoring_diagnostics")


class TeamGenerator:
    """Builds ranked four-character teams for a carry from the owned roster.

    Candidates come from a layered fallback:
    1. curated teams stored on the active composition,
    2. the carry's explicit teammate ratings,
    3. characters who rate the carry (only without a composition),
    4. the best owned characters of the role by tier.

    Enumeration covers three fixed shapes and only the first few candidates
    per slot, so the result is a good shortlist rather than an optimum.
    """

    # Role counts (dps, amplifier, sustain) of each generated shape
    SHAPE_COUNTS = {
        TeamStructure.SUSTAINLESS: (1, 3, 0),
        TeamStructure.HYPERCARRY: (1, 2, 1),
        TeamStructure.DUAL_CARRY: (2, 1, 1),
    }

    FALLBACK_CANDIDATES = 5
    FALLBACK_CONFIDENCE = 0.5
    # Generic amplifier/sustain picks at T0.5 or better are rated C, the rest D
    FALLBACK_C_TIER_INDEX = 3
    WANTS_RATING = TeammateRating.C

    def __init__(
        self,
        catalog: Optional[CharacterCatalog] = None,
        rating_service: Optional[TeamRatingService] = None,
        relationships: Optional[RelationshipLookup] = None,
        composition_selector: Optional[CompositionSelector] = None,
    ):
        self.catalog = catalog or CharacterCatalog()
        self.compositions = composition_selector or CompositionSelector()
        self.ratings = rating_service or TeamRatingService(self.catalog, composition_selector=self.compositions)
        self.relationships = relationships or RelationshipLookup(self.catalog, self.compositions)
        self.synergy = self.ratings.synergy
        self.tier_scorer = self.ratings.tier_scorer

    def generate_teams(
        self,
        character_id: str,
        owned_ids: Iterable[str],
        game_mode: GameMode | str | None = None,
        composition_id: Optional[str] = None,
        max_teams: Optional[int] = None,
        investments: Optional[Mapping[str, UserInvestment]] = None,
    ) -> list[GeneratedTeam]:
        """Ranked teams for a DPS or Support DPS character.

        Raises:
            CharacterNotFoundError: If ``character_id`` is not in the catalog.
        """
        dps = self.catalog.get_character(character_id)
        owned = self.catalog.characters_by_ids(owned_ids)
        mode = parse_game_mode_strict(game_mode or settings.default_game_mode)
        return self.generate_for(
            dps,
            owned,
            mode,
            composition_id=composition_id,
            max_teams=settings.max_dps_teams if max_teams is None else max_teams,
            investments=investments,
        )

    def generate_for(
        self,
        dps: Character,
        owned: Sequence[Character],
        game_mode: GameMode,
        composition_id: Optional[str] = None,
        max_teams: int = 10,
        investments: Optional[Mapping[str, UserInvestment]] = None,
    ) -> list[GeneratedTeam]:
        """Same as ``generate_teams`` for already resolved characters."""
        if not dps.is_dps_capable:
            logger.debug(f"{dps.id} is not DPS-capable, no teams generated")
            return []

        if composition_id:
            composition = self.compositions.composition_by_id(dps, composition_id)
            if composition is None:
                logger.debug(f"Unknown composition {composition_id} for {dps.id}, using base teammates")
            elif not self.compositions.meets_requirements(composition, owned):
                logger.debug(f"Composition {composition_id} requirements not met for {dps.id}")
                return []
        else:
            composition = self.compositions.find_accessible_composition(dps, owned)

        investments = investments or None
        teams: list[GeneratedTeam] = []
        seen_keys: set[str] = set()

        if composition is not None:
            for team in self.curated_teams(dps, owned, composition, game_mode, investments):
                key = team_key(team.character_ids)
                if key not in seen_keys:
                    seen_keys.add(key)
                    teams.append(team)

        teammates = self.compositions.teammates_for_composition(dps, composition.id if composition else None)
        if len(teams) < max_teams and (teammates.amplifiers or teammates.sustains):
            generated = self.generate_from_teammate_data(
                dps, owned, game_mode, max_teams - len(teams), composition, investments
            )
            for team in generated:
                key = team_key(team.character_ids)
                if key not in seen_keys:
                    seen_keys.add(key)
                    teams.append(team)

        teams.sort(key=lambda t: t.score, reverse=True)
        logger.debug(f"Generated {len(teams)} teams for {dps.id} in {game_mode.value}")
        return teams[:max_teams]

    @staticmethod
    def focal_contribution(dps: Character) -> TeamMemberContribution:
        return TeamMemberContribution(
            character_id=dps.id,
            character_name=dps.name,
            role="Main DPS",
            reason="Main DPS",
        )

    def rated_contribution(
        self, focal: Character, member: Character, composition_id: Optional[str] = None
    ) -> TeamMemberContribution:
        """Contribution of a member as rated by the focal character's data."""
        rec = self.compositions.find_teammate_rec(focal, member.id, composition_id)
        if rec is None:
            return TeamMemberContribution(
                character_id=member.id,
                character_name=member.name,
                role=member.primary_role.value,
                reason=", ".join(role.value for role in member.roles),
            )
        return TeamMemberContribution(
            character_id=member.id,
            character_name=member.name,
            role=member.primary_role.value,
            reason=rec.reason,
            rating=score_to_rating(TEAMMATE_RATING_SCORES[rec.rating]),
            source_rating=rec.rating,
        )

    def buildable_members(
        self, curated: CuratedTeam, owned: Sequence[Character], focal: Character
    ) -> Optional[list[Character]]:
        """Members of a curated team, focal first, or None when not fully owned."""
        owned_by_id = {c.id: c for c in owned}
        if not all(cid in owned_by_id for cid in curated.characters):
            return None
        if has_base_conflict(curated.characters):
            return None
        members = [owned_by_id[cid] for cid in curated.characters]
        return sorted(members, key=lambda c: c.id != focal.id)

    def curated_teams(
        self,
        dps: Character,
        owned: Sequence[Character],
        composition: Composition,
        game_mode: GameMode,
        investments: Optional[Mapping[str, UserInvestment]] = None,
    ) -> list[GeneratedTeam]:
        """Composition teams the player can field as-is."""
        weak_penalty = self.compositions.weak_mode_penalty(composition, game_mode)
        teams = []

        for curated in composition.teams:
            members = self.buildable_members(curated, owned, dps)
            if members is None:
                continue

            contributions = [
                self.focal_contribution(dps) if c.id == dps.id else self.rated_contribution(dps, c, composition.id)
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
                    name=self.ratings.generate_team_name(members, dps),
                    rating=curated.rating,
                    structure=curated.structure,
                    score=score * weak_penalty,
                    contributions=contributions,
                    reasoning=[
                        f"{composition.name} composition",
                        *(
                            f"{c.character_name}: {c.reason}"
                            for c in contributions
                            if c.reason and c.character_id != dps.id
                        ),
                    ],
                    mode_ratings=self.ratings.calculate_all_mode_ratings(members, investments),
                    team_summary=curated.notes,
                    composition_id=composition.id,
                    composition_name=composition.name,
                    curated=True,
                )
            )

        return teams

    def _is_open(
        self, dps: Character, character: Character, seen_ids: set[str], seen_bases: set[str]
    ) -> bool:
        return (
            character.id not in seen_ids
            and base_character_id(character.id) not in seen_bases
            and not self.relationships.should_avoid(dps, character)
        )

    def enriched_teammates(
        self,
        dps: Character,
        owned: Sequence[Character],
        role: Role,
        game_mode: GameMode,
        composition: Optional[Composition] = None,
        investments: Optional[Mapping[str, UserInvestment]] = None,
    ) -> list[EnrichedTeammate]:
        """Owned candidates for one role slot, best first."""
        owned_by_id = {c.id: c for c in owned}
        composition_id = composition.id if composition else None
        teammates = self.compositions.teammates_for_composition(dps, composition_id)

        if role == Role.AMPLIFIER:
            recs = teammates.amplifiers
        elif role == Role.SUSTAIN:
            recs = teammates.sustains
        else:
            recs = [*teammates.sub_dps, *teammates.dps]

        result: list[EnrichedTeammate] = []
        seen_ids: set[str] = set()
        seen_bases = {base_character_id(dps.id)}

        def claim(character: Character):
            seen_ids.add(character.id)
            seen_bases.add(base_character_id(character.id))

        for rec in recs:
            character = owned_by_id.get(rec.id)
            if character is None or not self._is_open(dps, character, seen_ids, seen_bases):
                continue
            claim(character)
            rating = (
                self.synergy.effective_rating(dps, rec.id, composition_id, investments)
                if investments
                else rec.rating
            )
            result.append(EnrichedTeammate(character, rating, rec.reason, TEAMMATE_RATING_SCORES[rating]))

        if composition is None:
            for entry in self.relationships.who_wants(dps.id):
                character = owned_by_id.get(entry.character.id)
                if character is None or not character.has_role(role):
                    continue
                if not self._is_open(dps, character, seen_ids, seen_bases):
                    continue
                claim(character)
                result.append(
                    EnrichedTeammate(
                        character,
                        self.WANTS_RATING,
                        f"{character.name} wants {dps.name}: {entry.reason}",
                        TEAMMATE_RATING_SCORES[self.WANTS_RATING],
                    )
                )

        excluded = self.compositions.excluded_ids(composition)
        fallback = [
            c for c in owned
            if c.has_role(role) and c.id not in excluded and self._is_open(dps, c, seen_ids, seen_bases)
        ]
        fallback.sort(key=lambda c: tier_index(self.tier_scorer.best_tier_for_mode(c.id, game_mode)))

        for character in fallback[: self.FALLBACK_CANDIDATES]:
            if not self._is_open(dps, character, seen_ids, seen_bases):
                continue
            claim(character)
            tier = self.tier_scorer.best_tier_for_mode(character.id, game_mode)
            if role == Role.SUPPORT_DPS or tier_index(tier) > self.FALLBACK_C_TIER_INDEX:
                rating = TeammateRating.D
            else:
                rating = TeammateRating.C
            result.append(
                EnrichedTeammate(
                    character,
                    rating,
                    f"{tier.value} {role.value} (general pick)",
                    TEAMMATE_RATING_SCORES[rating] * self.FALLBACK_CONFIDENCE,
                )
            )

        result.sort(key=lambda t: t.score, reverse=True)
        return result

    def team_shapes(self, composition: Optional[Composition]) -> list[TeamStructure]:
        """Shapes to enumerate for a composition, in generation order."""
        structure = composition.structure if composition else None
        if structure is None:
            overrides = composition.teammate_overrides if composition else None
            if overrides is not None and overrides.sustains and all(o.excluded for o in overrides.sustains):
                return [TeamStructure.SUSTAINLESS]
            return [TeamStructure.HYPERCARRY, TeamStructure.DUAL_CARRY]
        return [shape for shape, counts in self.SHAPE_COUNTS.items() if structure.matches(*counts)]

    @staticmethod
    def _is_preferred(structure: str, preferred: str) -> bool:
        if structure == preferred:
            return True
        return structure == TeamStructure.DUAL_CARRY.value and ("dual" in preferred or "triple" in preferred)

    def generate_from_teammate_data(
        self,
        dps: Character,
        owned: Sequence[Character],
        game_mode: GameMode,
        max_teams: int,
        composition: Optional[Composition] = None,
        investments: Optional[Mapping[str, UserInvestment]] = None,
    ) -> list[GeneratedTeam]:
        """Enumerate shape-valid teams from per-role candidate lists."""
        amplifiers = self.enriched_teammates(dps, owned, Role.AMPLIFIER, game_mode, composition, investments)
        sustains = self.enriched_teammates(dps, owned, Role.SUSTAIN, game_mode, composition, investments)
        sub_dps = self.enriched_teammates(dps, owned, Role.SUPPORT_DPS, game_mode, composition, investments)
        logger.debug(
            f"Candidates for {dps.id}: {len(amplifiers)} amplifiers, "
            f"{len(sustains)} sustains, {len(sub_dps)} sub DPS"
        )

        candidates: list[tuple[TeamStructure, tuple[EnrichedTeammate, ...]]] = []
        for shape in self.team_shapes(composition):
            if shape == TeamStructure.SUSTAINLESS:
                combos = combinations(amplifiers[:6], 3)
            elif shape == TeamStructure.HYPERCARRY:
                combos = ((*pair, sustain) for pair in combinations(amplifiers[:5], 2) for sustain in sustains[:3])
            else:
                combos = product(sub_dps[:4], amplifiers[:3], sustains[:3])
            candidates.extend((shape, tuple(combo)) for combo in combos)

        teams: list[GeneratedTeam] = []
        seen_keys: set[str] = set()
        for shape, mates in candidates:
            ids = [dps.id, *(m.id for m in mates)]
            if has_base_conflict(ids):
                continue
            key = team_key(ids)
            if key in seen_keys:
                continue
            seen_keys.add(key)
            teams.append(self.create_team_from_enriched(dps, list(mates), shape, game_mode, composition, investments))

        preferred = dps.team_structures.preferred if dps.team_structures else TeamStructure.HYPERCARRY.value
        teams.sort(key=lambda t: (-t.score, not self._is_preferred(t.structure, preferred)))
        return teams[:max_teams]

    def create_team_from_enriched(
        self,
        dps: Character,
        teammates: Sequence[EnrichedTeammate],
        structure: TeamStructure,
        game_mode: GameMode,
        composition: Optional[Composition] = None,
        investments: Optional[Mapping[str, UserInvestment]] = None,
    ) -> GeneratedTeam:
        """Score one enumerated team.

        Dual-carry teams with exactly two carries are scored with team synergy
        from both carries' perspectives; everything else uses the focal
        character's direct ratings.
        """
        members = [dps, *(t.character for t in teammates)]
        weak_penalty = self.compositions.weak_mode_penalty(composition, game_mode)
        composition_id = composition.id if composition else None
        carries = sum(1 for c in members if c.is_dps_capable)

        if structure == TeamStructure.DUAL_CARRY and carries == 2:
            synergy = self.ratings.calculate_team_synergy(members, game_mode)
            team = GeneratedTeam(
                characters=self.ratings.order_team_by_role(members),
                name=self.ratings.generate_team_name(members, dps),
                rating=synergy.rating,
                structure=structure.value,
                score=synergy.score * weak_penalty,
                contributions=list(synergy.contributions),
                reasoning=list(synergy.reasoning),
                key_synergies=list(synergy.key_synergies),
                team_summary=synergy.team_summary,
            )
        else:
            contributions = [
                TeamMemberContribution(
                    character_id=dps.id,
                    character_name=dps.name,
                    role="Main DPS",
                    reason=dps.description or "Primary damage dealer",
                ),
                *(
                    TeamMemberContribution(
                        character_id=t.id,
                        character_name=t.character.name,
                        role=t.character.primary_role.value,
                        reason=t.reason,
                        rating=score_to_rating(t.score),
                        source_rating=t.rating,
                    )
                    for t in teammates
                ),
            ]
            average = sum(t.score for t in teammates) / len(teammates)
            top_rated = [t for t in teammates if t.rating in HIGH_RATINGS]
            if len(top_rated) == len(teammates):
                summary = "All top-rated teammates"
            elif top_rated:
                summary = f"{len(top_rated)} top-rated teammate{'s' if len(top_rated) > 1 else ''}"
            else:
                summary = "Mixed team"

            score = self.ratings.calculate_team_score(
                dps, [(t.character, t.rating) for t in teammates], game_mode, composition_id, investments
            )
            team = GeneratedTeam(
                characters=self.ratings.order_team_by_role(members),
                name=self.ratings.generate_team_name(members, dps),
                rating=score_to_rating(average),
                structure=structure.value,
                score=score * weak_penalty,
                contributions=contributions,
                reasoning=[
                    f"{structure.value} team built around {dps.name}",
                    *(f"{t.character.name}: {t.reason}" for t in teammates),
                ],
                key_synergies=[f"{t.character.name}: {t.reason}" for t in top_rated[:2]],
                team_summary=summary,
            )

        team.mode_ratings = self.ratings.calculate_all_mode_ratings(members, investments)
        team.composition_id = composition_id
        team.composition_name = composition.name if composition else None

        if settings.scoring_diagnostics:
            diagnostics_logger.debug(
                f"{team.name} [{team.structure}] score={team.score:.1f} "
                f"weak_penalty={weak_penalty} members={team.character_ids}"
            )
        return team
