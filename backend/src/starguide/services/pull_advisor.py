"""Pull advice: how much a candidate character would help the owned roster.

Supports are judged by the DPS teams they would join (fills a gap, upgrades
a slot, a sidegrade or low value). DPS candidates are judged by how many of
their composition slots the owned supports already cover.
"""

import logging
from typing import Callable, Iterable, Mapping, Optional, Sequence

from starguide.config import settings
from starguide.models.analysis import (
    BuildStatus,
    CompositionAnalysis,
    DPSTeamBuildingAnalysis,
    DPSWanting,
    MissingRecommendation,
    OwnedOption,
    PullVerdict,
    RatedCharacter,
    RoleCoverage,
    RoleOverlap,
    RoleOverlapEntry,
    SlotBasedGap,
    SlotCoverage,
    TeamAnalysis,
    TeamStatus,
    TeamVerdictScore,
)
from starguide.models.character import Character, Composition, CompositionStructure, TeammateRec
from starguide.models.enums import (
    BuildStatusType,
    GameMode,
    TeammateRating,
    TeamStatusType,
    TierRating,
    VerdictLevel,
)
from starguide.models.roster import UserInvestment
from starguide.models.teams import GeneratedTeam
from starguide.repositories.catalog_repository import CharacterCatalog
from starguide.services.composition_selector import CompositionSelector
from starguide.services.team_generator import TeamGenerator
from starguide.utils.character_ids import parse_game_mode_strict
from starguide.utils.rating_scale import HIGH_RATINGS, USABLE_RATINGS, rating_index, round_half_up
from starguide.utils.tier_scale import best_tier

logger = logging.getLogger(__name__)

TierLookup = Callable[[str], Optional[TierRating]]


class PullAdvisor:
    """Scores pull candidates against an owned roster."""

    GAP_CATEGORIES = ("amplifiers", "sustains", "sub_dps")
    CATEGORY_LABELS = {"amplifiers": "amplifier", "sustains": "sustain", "sub_dps": "sub-DPS"}
    STATUS_LABELS = {"amplifiers": "amplifiers", "sustains": "sustains", "sub_dps": "sub-DPS"}

    # Below this coverage a composition is too far from buildable to recommend towards
    VIABLE_COVERAGE = 40

    STATUS_BASE_SCORES = {
        TeamStatusType.FILLS: 10,
        TeamStatusType.UPGRADES: 6,
        TeamStatusType.SIDEGRADE: 2,
        TeamStatusType.LOW: 0,
    }

    TIER_WEIGHTS = {
        TierRating.T_MINUS_1: 2.0,
        TierRating.T_MINUS_HALF: 2.0,
        TierRating.T0: 2.0,
        TierRating.T0_5: 1.75,
        TierRating.T1: 1.5,
        TierRating.T1_5: 1.25,
        TierRating.T2: 1.0,
        TierRating.T3: 0.6,
        TierRating.T4: 0.4,
        TierRating.T5: 0.3,
    }
    UNKNOWN_TIER_WEIGHT = 0.5

    RATING_WEIGHTS = {
        TeammateRating.S_PLUS: 1.5,
        TeammateRating.S: 1.2,
        TeammateRating.A: 1.0,
        TeammateRating.B: 0.7,
        TeammateRating.C: 0.5,
        TeammateRating.D: 0.3,
    }

    RATING_QUALITY = {
        TeammateRating.S_PLUS: 1.0,
        TeammateRating.S: 0.9,
        TeammateRating.A: 0.8,
        TeammateRating.B: 0.6,
        TeammateRating.C: 0.4,
        TeammateRating.D: 0.2,
    }

    # Support framing, best first
    SUPPORT_VERDICT_THRESHOLDS = [
        (20, VerdictLevel.CRITICAL),
        (12, VerdictLevel.STRONG),
        (5, VerdictLevel.FLEX),
    ]
    # DPS framing, best first
    DPS_VERDICT_THRESHOLDS = [
        (16, VerdictLevel.READY),
        (10, VerdictLevel.VIABLE),
        (5, VerdictLevel.WEAK),
    ]

    def __init__(
        self,
        catalog: Optional[CharacterCatalog] = None,
        team_generator: Optional[TeamGenerator] = None,
        composition_selector: Optional[CompositionSelector] = None,
    ):
        self.catalog = catalog or CharacterCatalog()
        self.compositions = composition_selector or CompositionSelector()
        self.teams = team_generator or TeamGenerator(self.catalog, composition_selector=self.compositions)
        self.relationships = self.teams.relationships

    def dps_tier(self, character_id: str, game_mode: GameMode | str | None = None) -> Optional[TierRating]:
        """Best tier for the mode, or None when the character has no tier data."""
        mode = parse_game_mode_strict(game_mode or settings.default_game_mode)
        tier_data = self.catalog.get_tier_data(character_id) or {}
        return best_tier((tier_data.get(mode.value) or {}).values())

    @staticmethod
    def _slots_needed(structure: CompositionStructure) -> dict[str, int]:
        return {
            "amplifiers": structure.amplifier,
            "sustains": structure.sustain,
            "sub_dps": max(0, structure.dps - 1),
        }

    def _rated(
        self, recs: Sequence[TeammateRec], owned_ids: set[str], include_id: Optional[str] = None
    ) -> list[RatedCharacter]:
        """Owned S+..B entries (plus ``include_id``), best rating first."""
        rated = []
        for rec in recs:
            if rec.rating not in USABLE_RATINGS:
                continue
            if rec.id not in owned_ids and rec.id != include_id:
                continue
            character = self.catalog.find_character(rec.id)
            if character is not None:
                rated.append(RatedCharacter(character, rec.rating))
        rated.sort(key=lambda r: rating_index(r.rating))
        return rated

    def find_dps_wanting(self, candidate_id: str, owned_ids: Iterable[str]) -> list[DPSWanting]:
        """Owned carries that list the candidate as a supporting teammate."""
        owned_ids = set(owned_ids)
        wanting: list[DPSWanting] = []
        seen: set[str] = set()

        for entry in self.relationships.who_wants(candidate_id):
            holder = entry.character
            if entry.category not in self.GAP_CATEGORIES or holder.id in seen:
                continue
            if holder.id not in owned_ids or not holder.is_dps_capable:
                continue
            seen.add(holder.id)
            wanting.append(DPSWanting(holder, entry.rating, entry.category))

        return wanting

    def find_role_overlap(
        self,
        candidate_id: str,
        owned_ids: Iterable[str],
        wanting: Optional[Sequence[DPSWanting]] = None,
    ) -> list[RoleOverlap]:
        """Owned S+/S/A characters competing with the candidate for the same slot."""
        owned_ids = set(owned_ids)
        if wanting is None:
            wanting = self.find_dps_wanting(candidate_id, owned_ids)

        overlaps = []
        for want in wanting:
            teammates = self.compositions.teammates_for_composition(want.dps)
            for category in self.GAP_CATEGORIES:
                recs = teammates.category(category)
                if not any(r.id == candidate_id for r in recs):
                    continue

                alternatives = []
                for rec in recs:
                    if rec.id == candidate_id or rec.id not in owned_ids or rec.rating not in HIGH_RATINGS:
                        continue
                    character = self.catalog.find_character(rec.id)
                    if character is None:
                        continue
                    difference = rating_index(want.rating) - rating_index(rec.rating)
                    if difference < 0:
                        relationship = "upgrade"
                    elif difference == 0:
                        relationship = "sidegrade"
                    else:
                        relationship = "downgrade"
                    alternatives.append(RoleOverlapEntry(rec.id, character.name, rec.rating, relationship))

                if alternatives:
                    overlaps.append(
                        RoleOverlap(
                            dps_id=want.dps.id,
                            dps_name=want.dps.name,
                            recommended_rating=want.rating,
                            category=category,
                            alternatives=alternatives,
                        )
                    )

        return overlaps

    def select_best_composition(
        self, dps: Character, owned_ids: Iterable[str], candidate_id: str
    ) -> Optional[CompositionAnalysis]:
        """Highest-coverage composition where the candidate fills an open slot.

        Coverage is the share of non-carry slots filled by owned S+/S/A
        teammates. Compositions that are already viable without the
        candidate, or too empty to build towards, are skipped.
        """
        owned_ids = set(owned_ids)
        best: Optional[CompositionAnalysis] = None

        for composition in dps.compositions:
            structure = self.compositions.structure_for(composition)
            teammates = self.compositions.teammates_for_composition(dps, composition.id)
            needed = self._slots_needed(structure)

            filling = {
                category: [
                    r for r in teammates.category(category) if r.id in owned_ids and r.rating in HIGH_RATINGS
                ][: needed[category]]
                for category in self.GAP_CATEGORIES
            }
            total_slots = sum(needed.values())
            filled_slots = sum(len(recs) for recs in filling.values())
            coverage = filled_slots / total_slots * 100 if total_slots > 0 else 100.0

            candidate_recs = {
                category: next((r for r in teammates.category(category) if r.id == candidate_id), None)
                for category in self.GAP_CATEGORIES
            }
            if not any(candidate_recs.values()):
                continue

            category = next(
                (c for c in self.GAP_CATEGORIES if candidate_recs[c] and candidate_recs[c].rating in USABLE_RATINGS),
                None,
            )
            fills_gap = category is not None and len(filling[category]) < needed[category]

            if not fills_gap and coverage >= self.VIABLE_COVERAGE:
                continue
            if coverage < self.VIABLE_COVERAGE and filled_slots > 0:
                continue

            if fills_gap and (best is None or coverage > best.coverage_percent):
                best = CompositionAnalysis(
                    composition_id=composition.id,
                    composition_name=composition.name,
                    structure=structure,
                    coverage_percent=coverage,
                    slot_analysis={
                        c: SlotCoverage(needed[c], len(filling[c]), filling[c])
                        for c in self.GAP_CATEGORIES
                        if c != "sub_dps" or needed[c] > 0
                    },
                    recommended_category=category,
                )

        return best

    def find_slot_based_gaps(
        self,
        candidate_id: str,
        owned_ids: Iterable[str],
        wanting: Optional[Sequence[DPSWanting]] = None,
    ) -> list[SlotBasedGap]:
        owned_ids = set(owned_ids)
        if wanting is None:
            wanting = self.find_dps_wanting(candidate_id, owned_ids)

        gaps = []
        for want in wanting:
            analysis = self.select_best_composition(want.dps, owned_ids, candidate_id)
            if analysis is None or analysis.recommended_category is None:
                continue
            slots = analysis.slot_analysis.get(analysis.recommended_category)
            if slots is None:
                continue

            options = []
            for rec in slots.owned:
                character = self.catalog.find_character(rec.id)
                options.append(OwnedOption(rec.id, character.name if character else rec.id, rec.rating))

            gaps.append(
                SlotBasedGap(
                    dps_id=want.dps.id,
                    dps_name=want.dps.name,
                    composition_id=analysis.composition_id,
                    composition_name=analysis.composition_name,
                    category=analysis.recommended_category,
                    category_label=self.CATEGORY_LABELS[analysis.recommended_category],
                    slots_needed=slots.needed,
                    slots_filled=slots.filled,
                    owned_options=options,
                    recommended_rating=want.rating,
                    coverage_percent=analysis.coverage_percent,
                )
            )

        return gaps

    def analyze_teams_for_recommendation(
        self,
        candidate_id: str,
        owned_ids: Iterable[str],
        wanting: Optional[Sequence[DPSWanting]] = None,
    ) -> list[TeamAnalysis]:
        """One analysis per owned carry that wants the candidate."""
        owned_ids = set(owned_ids)
        if wanting is None:
            wanting = self.find_dps_wanting(candidate_id, owned_ids)

        analyses = []
        for want in wanting:
            selected = self.select_best_composition(want.dps, owned_ids, candidate_id)
            if selected is not None:
                composition = self.compositions.composition_by_id(want.dps, selected.composition_id)
            else:
                composition = self.compositions.primary_composition(want.dps) or next(
                    iter(want.dps.compositions), None
                )
            if composition is None:
                continue

            analysis = self._analyze_team(want.dps, composition, candidate_id, want.rating, owned_ids)
            if analysis is not None:
                analyses.append(analysis)

        return analyses

    def analyze_team_for_composition(
        self,
        dps: Character,
        composition_id: str,
        candidate_id: str,
        recommended_rating: TeammateRating,
        owned_ids: Iterable[str],
    ) -> Optional[TeamAnalysis]:
        """Same analysis as above for an explicitly chosen composition."""
        composition = self.compositions.composition_by_id(dps, composition_id)
        if composition is None:
            return None
        return self._analyze_team(dps, composition, candidate_id, recommended_rating, set(owned_ids))

    def _analyze_team(
        self,
        dps: Character,
        composition: Composition,
        candidate_id: str,
        recommended_rating: TeammateRating,
        owned_ids: set[str],
    ) -> Optional[TeamAnalysis]:
        structure = self.compositions.structure_for(composition)
        teammates = self.compositions.teammates_for_composition(dps, composition.id)

        category = next(
            (c for c in self.GAP_CATEGORIES if any(r.id == candidate_id for r in teammates.category(c))),
            None,
        )
        if category is None:
            return None

        in_category = {
            c: self._rated(teammates.category(c), owned_ids, include_id=candidate_id) for c in self.GAP_CATEGORIES
        }
        needed = self._slots_needed(structure)[category]

        status = self.calculate_team_status(
            in_category[category],
            needed,
            candidate_id,
            recommended_rating,
            self.STATUS_LABELS[category],
            composition.name,
            owned_ids,
        )

        return TeamAnalysis(
            dps=dps,
            composition=composition,
            structure=structure,
            owned_amplifiers=in_category["amplifiers"],
            owned_sustains=in_category["sustains"],
            owned_sub_dps=in_category["sub_dps"],
            recommended_category=category,
            recommended_rating=recommended_rating,
            status=status,
            all_compositions=list(dps.compositions),
        )

    @staticmethod
    def calculate_team_status(
        in_category: Sequence[RatedCharacter],
        needed: int,
        candidate_id: str,
        recommended_rating: TeammateRating,
        category_label: str,
        composition_name: str,
        owned_ids: set[str],
    ) -> TeamStatus:
        """Classify what the candidate adds to one slot category.

        ``in_category`` holds the usable entries of the category, best first,
        and may include the candidate even when it is not owned.
        """
        owned_count = sum(1 for r in in_category if r.character.id in owned_ids)

        if owned_count == 0:
            return TeamStatus(
                TeamStatusType.FILLS,
                f"Fills critical gap (need {needed} {category_label}, you have none)",
            )
        if owned_count == 1 and candidate_id in owned_ids:
            return TeamStatus(
                TeamStatusType.FILLS,
                f"Fills critical gap (need {needed} {category_label}, this is your only one)",
            )
        if owned_count < needed:
            if owned_count == needed - 1:
                return TeamStatus(
                    TeamStatusType.FILLS,
                    f"Completes {composition_name} (need {needed} {category_label}, you have {owned_count})",
                )
            return TeamStatus(
                TeamStatusType.FILLS,
                f"Fills critical gap (need {needed} {category_label}, only have {owned_count})",
            )

        extra_slot = TeamStatus(
            TeamStatusType.SIDEGRADE,
            f"Extra {category_label} slot ({owned_count}/{needed} filled)",
        )
        others = [r for r in in_category if r.character.id != candidate_id and r.character.id in owned_ids]
        if not others:
            return extra_slot

        best_other = others[0]
        candidate_index = rating_index(recommended_rating)
        best_index = rating_index(best_other.rating)

        if candidate_index < best_index:
            prefix = "Significant upgrade" if best_index - candidate_index >= 2 else "Upgrade"
            return TeamStatus(
                TeamStatusType.UPGRADES,
                f"{prefix} over {best_other.character.name} ({best_other.rating.value} → {recommended_rating.value})",
            )

        if candidate_index > best_index:
            if owned_count == needed:
                return TeamStatus(
                    TeamStatusType.LOW,
                    f"Already covered ({best_other.character.name} fills this role)",
                )
            if owned_count > needed:
                return TeamStatus(
                    TeamStatusType.LOW,
                    f"Not needed (you have {owned_count} options, only need {needed})",
                )
            return TeamStatus(
                TeamStatusType.LOW,
                f"{best_other.character.name} is better ({best_other.rating.value} vs {recommended_rating.value})",
            )

        # Same rating as the best owned option: upgrade only if it beats the worst slot holder
        top_owned = others[:needed]
        if top_owned:
            worst = top_owned[-1]
            if candidate_index < rating_index(worst.rating):
                return TeamStatus(
                    TeamStatusType.UPGRADES,
                    f"Upgrade over {worst.character.name} ({worst.rating.value} → {recommended_rating.value})",
                )

        if owned_count == needed:
            return TeamStatus(
                TeamStatusType.SIDEGRADE,
                f"Alternative option (same tier as {best_other.character.name})",
            )
        return extra_slot

    def _tier_weight(self, tier: Optional[TierRating]) -> float:
        if tier is None:
            return self.UNKNOWN_TIER_WEIGHT
        return self.TIER_WEIGHTS.get(tier, self.UNKNOWN_TIER_WEIGHT)

    @staticmethod
    def team_coverage(analysis: TeamAnalysis, candidate_owned: bool) -> float:
        """Percent of non-carry slots the roster fills for one analysed team.

        An unowned candidate is listed among the options but does not fill a
        slot yet, so one filled slot is taken back.
        """
        structure = analysis.structure
        extra_dps = max(0, structure.dps - 1)
        total_slots = structure.amplifier + structure.sustain + extra_dps
        if total_slots == 0:
            return 100.0

        amplifiers = sum(1 for a in analysis.owned_amplifiers if a.character.id != analysis.dps_id)
        filled = min(amplifiers, structure.amplifier) + min(len(analysis.owned_sustains), structure.sustain)
        if extra_dps:
            filled += min(len(analysis.owned_sub_dps), extra_dps)
        if not candidate_owned:
            filled = max(0, filled - 1)

        return filled / total_slots * 100

    def compute_pull_verdict(
        self,
        analyses: Sequence[TeamAnalysis],
        game_mode: GameMode | str | None = None,
        candidate_owned: bool = False,
        tier_lookup: Optional[TierLookup] = None,
    ) -> PullVerdict:
        """Verdict for a support candidate from its per-team analyses.

        Each team scores status base x DPS tier weight x rating weight x
        coverage bonus. Teams are combined best-first with halving weights,
        then scaled by a breadth bonus for S+/S/A memberships.
        """
        if not analyses:
            return PullVerdict(VerdictLevel.SKIP, "No teams benefit from this character", 0)

        if tier_lookup is None:
            def tier_lookup(character_id: str) -> Optional[TierRating]:
                return self.dps_tier(character_id, game_mode)

        team_scores: list[TeamVerdictScore] = []
        for analysis in analyses:
            base_score = self.STATUS_BASE_SCORES[analysis.status.type]
            if base_score == 0:
                continue

            tier = tier_lookup(analysis.dps_id)
            coverage = self.team_coverage(analysis, candidate_owned)
            if coverage >= 80:
                coverage_bonus = 1.3
            elif coverage >= 60:
                coverage_bonus = 1.1
            else:
                coverage_bonus = 1.0

            score = (
                base_score
                * self._tier_weight(tier)
                * self.RATING_WEIGHTS[analysis.recommended_rating]
                * coverage_bonus
            )
            team_scores.append(
                TeamVerdictScore(
                    dps_name=analysis.dps_name,
                    score=score,
                    status_type=analysis.status.type,
                    tier=tier.value if tier else None,
                )
            )

        team_scores.sort(key=lambda t: t.score, reverse=True)
        total = sum(team.score / 2**i for i, team in enumerate(team_scores))

        high_rated = sum(1 for a in analyses if a.recommended_rating in HIGH_RATINGS)
        total *= min(1 + high_rated * 0.1, 1.5)

        level = next(
            (level for threshold, level in self.SUPPORT_VERDICT_THRESHOLDS if total >= threshold),
            VerdictLevel.SKIP,
        )
        logger.debug(f"Pull verdict {level.value} ({total:.2f}) from {len(team_scores)} scoring teams")
        return PullVerdict(level, self.verdict_reason(team_scores), total, team_scores)

    @staticmethod
    def verdict_reason(team_scores: Sequence[TeamVerdictScore]) -> str:
        """Name the top one or two contributing teams, critical gaps first."""
        fills = [t for t in team_scores if t.status_type == TeamStatusType.FILLS]
        upgrades = [t for t in team_scores if t.status_type == TeamStatusType.UPGRADES]
        sidegrades = [t for t in team_scores if t.status_type == TeamStatusType.SIDEGRADE]

        parts = []
        if fills:
            parts.append("Critical for " + " & ".join(t.dps_name for t in fills[:2]))

        if upgrades and len(parts) < 2:
            top = upgrades[: 2 - len(parts)]
            if len(top) == 1:
                parts.append(f"Upgrades {top[0].dps_name}")
            else:
                parts.append(f"Upgrades {len(top)} teams")

        if not parts and sidegrades:
            if len(sidegrades) == 1:
                parts.append(f"Adds flexibility for {sidegrades[0].dps_name}")
            else:
                parts.append(f"Adds flexibility for {len(sidegrades)} teams")

        if not parts:
            return "Low priority for your roster"
        return ", ".join(parts)

    def analyze_team_building_for_dps(
        self, candidate_id: str, owned_ids: Iterable[str]
    ) -> Optional[DPSTeamBuildingAnalysis]:
        """How well the owned supports cover a candidate DPS.

        Uses the composition with the best mean of amplifier and sustain
        coverage. Returns None for characters without compositions.

        Raises:
            CharacterNotFoundError: If ``candidate_id`` is not in the catalog.
        """
        dps = self.catalog.get_character(candidate_id)
        owned_ids = set(owned_ids)
        if not dps.compositions:
            return None

        best_composition = dps.compositions[0]
        best_coverage = -1.0
        for composition in dps.compositions:
            structure = self.compositions.structure_for(composition)
            teammates = self.compositions.teammates_for_composition(dps, composition.id)
            amplifiers = len(self._rated(teammates.amplifiers, owned_ids))
            sustains = len(self._rated(teammates.sustains, owned_ids))

            coverage = (
                min(amplifiers, structure.amplifier) / max(structure.amplifier, 1)
                + min(sustains, structure.sustain) / max(structure.sustain, 1)
            ) / 2
            if coverage > best_coverage:
                best_coverage = coverage
                best_composition = composition

        return self._dps_building(dps, best_composition, owned_ids)

    def analyze_dps_for_composition(
        self, dps: Character, composition_id: str, owned_ids: Iterable[str]
    ) -> Optional[DPSTeamBuildingAnalysis]:
        composition = self.compositions.composition_by_id(dps, composition_id)
        if composition is None:
            return None
        return self._dps_building(dps, composition, set(owned_ids))

    def _dps_building(
        self, dps: Character, composition: Composition, owned_ids: set[str]
    ) -> DPSTeamBuildingAnalysis:
        structure = self.compositions.structure_for(composition)
        teammates = self.compositions.teammates_for_composition(dps, composition.id)
        needed = self._slots_needed(structure)

        owned = {c: self._rated(teammates.category(c), owned_ids) for c in self.GAP_CATEGORIES}
        filled = {c: min(len(owned[c]), needed[c]) for c in self.GAP_CATEGORIES}

        total_needed = sum(needed.values())
        total_filled = sum(filled.values())
        total_coverage = round_half_up(total_filled / total_needed * 100) if total_needed > 0 else 100

        qualities = [
            self.RATING_QUALITY[r.rating] for c in self.GAP_CATEGORIES for r in owned[c][: needed[c]]
        ]
        quality = sum(qualities) / len(qualities) if qualities else 0.0

        missing = []
        for category in self.GAP_CATEGORIES:
            if filled[category] >= needed[category]:
                continue
            unowned = [
                r for r in teammates.category(category) if r.rating in HIGH_RATINGS and r.id not in owned_ids
            ][:3]
            for rec in unowned:
                character = self.catalog.find_character(rec.id)
                if character is not None:
                    missing.append(MissingRecommendation(character.name, rec.rating, self.CATEGORY_LABELS[category]))

        return DPSTeamBuildingAnalysis(
            dps=dps,
            composition=composition,
            structure=structure,
            owned_amplifiers=owned["amplifiers"],
            owned_sustains=owned["sustains"],
            owned_sub_dps=owned["sub_dps"],
            amplifier_coverage=RoleCoverage(filled["amplifiers"], needed["amplifiers"]),
            sustain_coverage=RoleCoverage(filled["sustains"], needed["sustains"]),
            additional_dps_coverage=RoleCoverage(filled["sub_dps"], needed["sub_dps"]),
            total_coverage=total_coverage,
            quality_score=quality,
            status=self.calculate_dps_build_status(total_coverage, quality, filled, needed, missing),
            missing_recommendations=missing,
            all_compositions=list(dps.compositions),
        )

    @staticmethod
    def calculate_dps_build_status(
        coverage: float,
        quality: float,
        filled: Mapping[str, int],
        needed: Mapping[str, int],
        missing: Sequence[MissingRecommendation],
    ) -> BuildStatus:
        """Readiness from slot coverage, tempered by teammate quality at full coverage."""
        if coverage >= 100:
            if quality >= 0.85:
                return BuildStatus(BuildStatusType.READY, "Ready to build with strong teammates!")
            if quality >= 0.7:
                return BuildStatus(BuildStatusType.READY, "Ready to build with decent teammates.")
            return BuildStatus(
                BuildStatusType.PARTIAL, "Can build, but your teammates are weak. Consider upgrading."
            )

        open_slots = []
        for category, noun in (("amplifiers", "amplifier"), ("sustains", "sustain")):
            count = needed[category] - filled[category]
            if count > 0:
                open_slots.append(f"{count} {noun}{'s' if count > 1 else ''}")
        extra_dps = needed["sub_dps"] - filled["sub_dps"]
        if extra_dps > 0:
            open_slots.append(f"{extra_dps} sub-DPS")

        if coverage >= 80:
            return BuildStatus(BuildStatusType.ALMOST, f"Almost ready: need {', '.join(open_slots)}")

        if coverage >= 50:
            names = ", ".join(m.name for m in missing[:2])
            suffix = f" ({names} recommended)" if names else ""
            return BuildStatus(BuildStatusType.PARTIAL, f"Partially ready: need {', '.join(open_slots)}{suffix}")

        names = ", ".join(m.name for m in missing[:3])
        suffix = f" Consider pulling {names}." if names else ""
        return BuildStatus(BuildStatusType.HARD, f"Missing key teammates.{suffix}")

    def compute_dps_pull_verdict(
        self,
        analysis: Optional[DPSTeamBuildingAnalysis],
        dps_tier: Optional[TierRating] = None,
        is_owned: bool = False,
    ) -> PullVerdict:
        """Verdict for a DPS candidate: coverage x quality x 10 x tier weight."""
        if analysis is None:
            return PullVerdict(VerdictLevel.SKIP, "No team data available", 0)
        if is_owned:
            return PullVerdict(VerdictLevel.SKIP, "Already owned", 0)

        total = analysis.total_coverage / 100 * analysis.quality_score * 10 * self._tier_weight(dps_tier)
        level = next(
            (level for threshold, level in self.DPS_VERDICT_THRESHOLDS if total >= threshold),
            VerdictLevel.SKIP,
        )
        return PullVerdict(level, self.dps_verdict_reason(analysis, dps_tier), total)

    @staticmethod
    def dps_verdict_reason(analysis: DPSTeamBuildingAnalysis, dps_tier: Optional[TierRating]) -> str:
        tier_label = f" ({dps_tier.value})" if dps_tier else ""
        status = analysis.status.type

        if status == BuildStatusType.READY:
            return f"Ready to build{tier_label}"
        if status == BuildStatusType.ALMOST:
            return f"Almost ready{tier_label}"
        if status == BuildStatusType.PARTIAL:
            names = ", ".join(m.name for m in analysis.missing_recommendations[:2])
            return f"Need {names}" if names else f"Partially ready{tier_label}"
        return "Missing key supports"

    def teams_with_character(
        self,
        candidate_id: str,
        owned_ids: Iterable[str],
        game_mode: GameMode | str | None = None,
        max_teams: Optional[int] = None,
        investments: Optional[Mapping[str, UserInvestment]] = None,
    ) -> list[GeneratedTeam]:
        """Best team of each owned carry once the candidate joins the roster.

        Only teams that actually use the candidate are kept.

        Raises:
            CharacterNotFoundError: If ``candidate_id`` is not in the catalog.
        """
        candidate = self.catalog.get_character(candidate_id)
        owned = self.catalog.characters_by_ids(owned_ids)
        mode = parse_game_mode_strict(game_mode or settings.default_game_mode)
        max_teams = settings.max_simulated_teams if max_teams is None else max_teams

        simulated = list(owned)
        if all(c.id != candidate.id for c in simulated):
            simulated.append(candidate)

        teams = []
        for dps in owned:
            if not dps.is_dps_capable:
                continue
            for team in self.teams.generate_for(dps, simulated, mode, max_teams=1, investments=investments):
                if candidate.id in team.character_ids:
                    teams.append(team)

        teams.sort(key=lambda t: t.score, reverse=True)
        logger.debug(f"{len(teams)} owned carries would field {candidate.id}")
        return teams[:max_teams]
