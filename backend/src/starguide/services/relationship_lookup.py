"""Reverse relationship lookups over the catalog.

Answers "who wants this character as a teammate?" and "who avoids this
character?" from the perspective of the character holding the rating, so the
catalog never has to duplicate relationships on both sides.
"""

import logging
from collections import Counter
from typing import Optional

from starguide.models.analysis import (
    AvoidedByEntry,
    CompositionContext,
    WantedByEntry,
    WantedByGroups,
    WantedBySummary,
)
from starguide.models.character import Character
from starguide.models.enums import Role, TeammateRating
from starguide.repositories.catalog_repository import CharacterCatalog
from starguide.services.composition_selector import CompositionSelector
from starguide.utils.rating_scale import RATING_ORDER, is_better_rating, rating_index

logger = logging.getLogger(__name__)


class RelationshipLookup:
    """Lazily built reverse index of teammate ratings and avoid lists."""

    CATEGORIES = ("dps", "amplifiers", "sustains", "sub_dps", "support_dps")

    def __init__(
        self,
        catalog: Optional[CharacterCatalog] = None,
        composition_selector: Optional[CompositionSelector] = None,
    ):
        self.catalog = catalog or CharacterCatalog()
        self.compositions = composition_selector or CompositionSelector()
        self._wanted: Optional[dict[str, list[WantedByEntry]]] = None
        self._avoided: Optional[dict[str, list[AvoidedByEntry]]] = None

    def _best_entry(self, holder: Character, category: str, target_id: str) -> Optional[WantedByEntry]:
        """Best rating `holder` gives `target_id` in one category, base or any composition."""
        base_rec = next(
            (r for r in self.compositions.teammates_for_composition(holder).category(category) if r.id == target_id),
            None,
        )
        best_rating = base_rec.rating if base_rec else None
        best_reason = base_rec.reason if base_rec else ""
        best_composition = None

        for composition in holder.compositions:
            teammates = self.compositions.teammates_for_composition(holder, composition.id)
            rec = next((r for r in teammates.category(category) if r.id == target_id), None)
            if rec is not None and is_better_rating(rec.rating, best_rating):
                best_rating = rec.rating
                best_reason = rec.reason
                best_composition = composition

        if best_rating is None:
            return None

        context = None
        if best_composition is not None and base_rec is not None and best_rating != base_rec.rating:
            context = CompositionContext(best_composition.id, best_composition.name)

        return WantedByEntry(
            character=holder,
            category=category,
            rating=best_rating,
            reason=best_reason,
            composition_context=context,
        )

    def _build_index(self):
        wanted: dict[str, list[WantedByEntry]] = {}
        avoided: dict[str, list[AvoidedByEntry]] = {}
        characters = self.catalog.all_characters()

        for holder in characters:
            targets = {rec.id for rec in holder.base_teammates.all_recs()}
            for composition in holder.compositions:
                targets.update(
                    rec.id for rec in self.compositions.teammates_for_composition(holder, composition.id).all_recs()
                )
            targets.discard(holder.id)

            for target_id in targets:
                for category in self.CATEGORIES:
                    entry = self._best_entry(holder, category, target_id)
                    if entry is not None:
                        wanted.setdefault(target_id, []).append(entry)

            for avoid in holder.restrictions.avoid:
                if avoid.id != holder.id:
                    avoided.setdefault(avoid.id, []).append(AvoidedByEntry(holder, avoid.reason))

        for entries in wanted.values():
            entries.sort(key=lambda e: (rating_index(e.rating), e.character.name))
        for entries in avoided.values():
            entries.sort(key=lambda e: e.character.name)

        self._wanted = wanted
        self._avoided = avoided
        logger.debug(f"Built relationship index: {len(wanted)} wanted, {len(avoided)} avoided targets")

    def who_wants(self, character_id: str) -> list[WantedByEntry]:
        """Characters listing `character_id` as a teammate, best rating first."""
        if self._wanted is None:
            self._build_index()
        return list(self._wanted.get(character_id, []))

    def who_avoids(self, character_id: str) -> list[AvoidedByEntry]:
        if self._avoided is None:
            self._build_index()
        return list(self._avoided.get(character_id, []))

    @staticmethod
    def group_wanted_by_role(entries: list[WantedByEntry]) -> WantedByGroups:
        """Split entries into DPS, sustain and other supporting characters."""
        groups = WantedByGroups()
        for entry in entries:
            if entry.character.has_role(Role.DPS):
                groups.dps.append(entry)
            elif entry.character.has_role(Role.SUSTAIN):
                groups.sustains.append(entry)
            else:
                groups.supports.append(entry)
        return groups

    def wanted_by_summary(self, character_id: str) -> WantedBySummary:
        entries = self.who_wants(character_id)
        counts = Counter(entry.rating for entry in entries)
        by_rating: dict[TeammateRating, int] = {rating: counts.get(rating, 0) for rating in RATING_ORDER}
        return WantedBySummary(total=len(entries), by_rating=by_rating)

    @staticmethod
    def should_avoid(a: Character, b: Character) -> bool:
        """True when either character lists the other on its avoid list."""
        return a.avoids(b.id) or b.avoids(a.id)
