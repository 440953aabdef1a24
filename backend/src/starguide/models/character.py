"""Catalog records: character definitions, investment tables and compositions.

Catalog data is authored upstream and validated here on load; every record
is frozen so services can share a single catalog instance.
"""

from typing import ClassVar, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from starguide.models.enums import (
    CharacterPath,
    Element,
    GameMode,
    GranularRating,
    LightConeSource,
    Role,
    TeammateRating,
)


class CatalogRecord(BaseModel):
    """Base for immutable catalog records."""

    model_config = ConfigDict(frozen=True)


class SynergyModifier(CatalogRecord):
    """Synergy bonus unlocked by the owner's investment, naming the partner."""

    with_character_id: str
    modifier: float  # +10 is roughly one rating step
    reason: str = ""


class EidolonDefinition(CatalogRecord):
    level: int = Field(ge=1, le=6)
    penalty: float = Field(le=0)  # Cost of NOT having this eidolon
    description: str = ""
    synergy_modifiers: list[SynergyModifier] = Field(default_factory=list)


class LightConePenalties(CatalogRecord):
    s1: float = Field(le=0)
    s5: float = Field(le=0)


class LightConeDefinition(CatalogRecord):
    id: str
    name: str
    rarity: int = 5
    is_signature: bool = False
    penalties: LightConePenalties
    source: LightConeSource = LightConeSource.STANDARD
    notes: str = ""
    synergy_modifiers: list[SynergyModifier] = Field(default_factory=list)


class CharacterInvestment(CatalogRecord):
    eidolons: list[EidolonDefinition] = Field(default_factory=list)
    light_cones: list[LightConeDefinition] = Field(default_factory=list)
    investment_priority: Optional[str] = None
    minimum_viable: Optional[str] = None

    @field_validator("eidolons")
    @classmethod
    def sort_eidolons(cls, eidolons: list[EidolonDefinition]) -> list[EidolonDefinition]:
        return sorted(eidolons, key=lambda e: e.level)

    def get_light_cone(self, light_cone_id: Optional[str]) -> Optional[LightConeDefinition]:
        if not light_cone_id:
            return None
        return next((lc for lc in self.light_cones if lc.id == light_cone_id), None)

    @property
    def signature_light_cone(self) -> Optional[LightConeDefinition]:
        return next((lc for lc in self.light_cones if lc.is_signature), None)


class InvestmentModifier(CatalogRecord):
    """Receiver-side bonus keyed on the teammate's eidolon level."""

    level: int = Field(ge=1, le=6)
    modifier: float
    reason: str = ""


class TeammateRec(CatalogRecord):
    id: str
    rating: TeammateRating
    reason: str = ""
    their_investment_modifiers: list[InvestmentModifier] = Field(default_factory=list)


class Teammates(CatalogRecord):
    """Per-category teammate recommendations."""

    dps: list[TeammateRec] = Field(default_factory=list)
    sub_dps: list[TeammateRec] = Field(default_factory=list)
    support_dps: list[TeammateRec] = Field(default_factory=list)
    amplifiers: list[TeammateRec] = Field(default_factory=list)
    sustains: list[TeammateRec] = Field(default_factory=list)

    CATEGORIES: ClassVar[tuple[str, ...]] = ("dps", "sub_dps", "support_dps", "amplifiers", "sustains")

    def category(self, name: str) -> list[TeammateRec]:
        return getattr(self, name)

    def all_recs(self) -> list[TeammateRec]:
        return [rec for name in self.CATEGORIES for rec in self.category(name)]


class TeammateOverride(CatalogRecord):
    id: str
    rating: Optional[TeammateRating] = None
    reason: Optional[str] = None
    excluded: bool = False


class TeammateOverrides(CatalogRecord):
    dps: list[TeammateOverride] = Field(default_factory=list)
    sub_dps: list[TeammateOverride] = Field(default_factory=list)
    amplifiers: list[TeammateOverride] = Field(default_factory=list)
    sustains: list[TeammateOverride] = Field(default_factory=list)

    CATEGORIES: ClassVar[tuple[str, ...]] = ("dps", "sub_dps", "amplifiers", "sustains")

    def category(self, name: str) -> list[TeammateOverride]:
        return getattr(self, name)


class CompositionStructure(CatalogRecord):
    """Role-slot counts; always sums to a full team of four."""

    dps: int = Field(ge=0)
    amplifier: int = Field(ge=0)
    sustain: int = Field(ge=0)

    @model_validator(mode="after")
    def check_team_size(self) -> "CompositionStructure":
        total = self.dps + self.amplifier + self.sustain
        if total != 4:
            raise ValueError(f"structure must fill 4 slots, got {total}")
        return self

    def matches(self, dps: int, amplifier: int, sustain: int) -> bool:
        return (self.dps, self.amplifier, self.sustain) == (dps, amplifier, sustain)


class CoreRequirement(CatalogRecord):
    character_id: str
    min_eidolon: Optional[int] = None
    light_cone_ids: list[str] = Field(default_factory=list)
    reason: str = ""


class PathRequirement(CatalogRecord):
    path: CharacterPath
    count: int = Field(ge=1)
    reason: str = ""


class LabelRequirement(CatalogRecord):
    label: str
    count: int = Field(ge=1)
    reason: str = ""


class WeakMode(CatalogRecord):
    mode: GameMode
    reason: str = ""


class CuratedTeam(CatalogRecord):
    """Hand-built team stored on a composition."""

    name: str
    characters: list[str] = Field(min_length=4, max_length=4)
    rating: GranularRating = GranularRating.B
    structure: str = ""
    notes: Optional[str] = None


class Composition(CatalogRecord):
    id: str
    name: str
    description: str = ""
    is_primary: bool = False
    core_mechanic: str = ""
    weak_modes: list[WeakMode] = Field(default_factory=list)
    investment_notes: list[str] = Field(default_factory=list)
    structure: Optional[CompositionStructure] = None
    core: list[CoreRequirement] = Field(default_factory=list)
    path_requirements: list[PathRequirement] = Field(default_factory=list)
    label_requirements: list[LabelRequirement] = Field(default_factory=list)
    teammate_overrides: Optional[TeammateOverrides] = None
    teams: list[CuratedTeam] = Field(default_factory=list)

    @property
    def is_accessible(self) -> bool:
        """True when the composition has no prerequisites at all."""
        return not self.core and not self.path_requirements and not self.label_requirements

    def is_weak_in(self, game_mode: GameMode) -> bool:
        return any(weak.mode == game_mode for weak in self.weak_modes)


class TeamStructures(CatalogRecord):
    preferred: str = "hypercarry"
    viable: list[str] = Field(default_factory=list)
    notes: str = ""


class AvoidEntry(CatalogRecord):
    id: str
    reason: str = ""


class Restrictions(CatalogRecord):
    avoid: list[AvoidEntry] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class Character(CatalogRecord):
    """A catalog character definition."""

    id: str
    name: str
    element: Optional[Element] = None
    path: CharacterPath
    rarity: int = Field(default=5, ge=4, le=5)
    roles: list[Role] = Field(min_length=1)
    description: str = ""
    labels: list[str] = Field(default_factory=list)
    investment: Optional[CharacterInvestment] = None
    base_teammates: Teammates = Field(default_factory=Teammates)
    compositions: list[Composition] = Field(default_factory=list)
    team_structures: Optional[TeamStructures] = None
    restrictions: Restrictions = Field(default_factory=Restrictions)

    def has_role(self, role: Role) -> bool:
        return role in self.roles

    @property
    def is_dps_capable(self) -> bool:
        return Role.DPS in self.roles or Role.SUPPORT_DPS in self.roles

    @property
    def primary_role(self) -> Role:
        return self.roles[0]

    def avoids(self, character_id: str) -> bool:
        return any(entry.id == character_id for entry in self.restrictions.avoid)


# Tier table: character id -> mode -> role label -> tier label
CharacterTiers = dict[str, dict[str, dict[str, str]]]
