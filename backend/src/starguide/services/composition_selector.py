"""Composition selection and composition-aware teammate resolution."""

import logging
from typing import Optional, Sequence

from starguide.models.character import (
    Character,
    Composition,
    CompositionStructure,
    TeammateRec,
    Teammates,
)
from starguide.models.enums import GameMode
from starguide.utils.character_ids import parse_game_mode_strict

logger = logging.getLogger(__name__)


class CompositionSelector:
    """Picks the composition a focal character plays and resolves its teammates.

    Stateless: every method works from the character records it is given, so a
    single instance can be shared by all services.
    """

    WEAK_MODE_PENALTY = 0.85

    # Assumed when a composition does not declare its role slots
    DEFAULT_STRUCTURE = CompositionStructure(dps=1, amplifier=2, sustain=1)

    # Categories that carry overrides, in application order
    OVERRIDE_CATEGORIES = ("dps", "sub_dps", "amplifiers", "sustains")

    # Search order for a single teammate recommendation
    LOOKUP_CATEGORIES = ("dps", "sub_dps", "support_dps", "amplifiers", "sustains")

    def primary_composition(self, character: Character) -> Optional[Composition]:
        return next((c for c in character.compositions if c.is_primary), None)

    def composition_by_id(self, character: Character, composition_id: Optional[str]) -> Optional[Composition]:
        if not composition_id:
            return None
        return next((c for c in character.compositions if c.id == composition_id), None)

    def composition_ids(self, character: Character) -> list[str]:
        return [c.id for c in character.compositions]

    def has_compositions(self, character: Character) -> bool:
        return bool(character.compositions)

    def structure_for(self, composition: Optional[Composition]) -> CompositionStructure:
        if composition is None or composition.structure is None:
            return self.DEFAULT_STRUCTURE
        return composition.structure

    def teammates_for_composition(
        self, character: Character, composition_id: Optional[str] = None
    ) -> Teammates:
        """Base teammates with a composition's overrides layered on top.

        Overrides are applied per category in declaration order: an excluded
        entry is removed, an existing entry takes the override's rating and
        reason, and an unknown id is appended only when the override rates it.
        """
        base = character.base_teammates
        composition = self.composition_by_id(character, composition_id)
        if composition is None or composition.teammate_overrides is None:
            return base

        resolved: dict[str, list[TeammateRec]] = {
            name: list(base.category(name)) for name in Teammates.CATEGORIES
        }
        overrides = composition.teammate_overrides

        for name in self.OVERRIDE_CATEGORIES:
            recs = resolved[name]
            for override in overrides.category(name):
                index = next((i for i, rec in enumerate(recs) if rec.id == override.id), None)
                if override.excluded:
                    recs = [rec for rec in recs if rec.id != override.id]
                elif index is not None:
                    existing = recs[index]
                    recs[index] = existing.model_copy(
                        update={
                            "rating": override.rating or existing.rating,
                            "reason": override.reason if override.reason is not None else existing.reason,
                        }
                    )
                elif override.rating is not None:
                    recs.append(
                        TeammateRec(id=override.id, rating=override.rating, reason=override.reason or "")
                    )
            resolved[name] = recs

        return Teammates(**resolved)

    def find_teammate_rec(
        self, character: Character, teammate_id: str, composition_id: Optional[str] = None
    ) -> Optional[TeammateRec]:
        """First recommendation for `teammate_id` across all categories."""
        teammates = self.teammates_for_composition(character, composition_id)
        for name in self.LOOKUP_CATEGORIES:
            for rec in teammates.category(name):
                if rec.id == teammate_id:
                    return rec
        return None

    def meets_requirements(self, composition: Composition, owned: Sequence[Character]) -> bool:
        """Check core, path and label prerequisites against the owned roster.

        Core eidolon and light cone minimums are treated as ownership checks.
        """
        owned_ids = {c.id for c in owned}

        for requirement in composition.core:
            if requirement.character_id not in owned_ids:
                return False

        for requirement in composition.path_requirements:
            if sum(1 for c in owned if c.path == requirement.path) < requirement.count:
                return False

        for requirement in composition.label_requirements:
            if sum(1 for c in owned if requirement.label in c.labels) < requirement.count:
                return False

        return True

    @staticmethod
    def is_accessible(composition: Composition) -> bool:
        return composition.is_accessible

    def find_accessible_composition(
        self, character: Character, owned: Sequence[Character]
    ) -> Optional[Composition]:
        """Primary if eligible, else first eligible, else first accessible, else None."""
        if not character.compositions:
            return None

        primary = self.primary_composition(character)
        if primary is not None and self.meets_requirements(primary, owned):
            return primary

        for composition in character.compositions:
            if self.meets_requirements(composition, owned):
                return composition

        accessible = next((c for c in character.compositions if c.is_accessible), None)
        if accessible is None:
            logger.debug(f"No usable composition for {character.id}, using base teammates")
        return accessible

    def weak_mode_penalty(self, composition: Optional[Composition], game_mode: GameMode | str) -> float:
        if composition is None:
            return 1.0
        return self.WEAK_MODE_PENALTY if composition.is_weak_in(parse_game_mode_strict(game_mode)) else 1.0

    def is_support_in_composition(
        self, support: Character, dps: Character, composition: Composition
    ) -> bool:
        """True when a curated team or the resolved teammate lists include the support."""
        if any(support.id in team.characters for team in composition.teams):
            return True

        teammates = self.teammates_for_composition(dps, composition.id)
        return any(
            rec.id == support.id
            for name in ("amplifiers", "sustains", "sub_dps", "dps")
            for rec in teammates.category(name)
        )

    def excluded_ids(self, composition: Optional[Composition]) -> set[str]:
        if composition is None or composition.teammate_overrides is None:
            return set()
        overrides = composition.teammate_overrides
        return {
            override.id
            for name in self.OVERRIDE_CATEGORIES
            for override in overrides.category(name)
            if override.excluded
        }
