"""Pull-advisor and relationship analysis models."""

from dataclasses import dataclass, field

from starguide.models.character import Character, Composition, CompositionStructure
from starguide.models.enums import (
    BuildStatusType,
    TeammateRating,
    TeamStatusType,
    VerdictLevel,
)


@dataclass(frozen=True)
class RatedCharacter:
    """A character together with the rating some DPS gives it."""

    character: Character
    rating: TeammateRating


@dataclass(frozen=True)
class DPSWanting:
    """An owned DPS that lists the candidate as a teammate."""

    dps: Character
    rating: TeammateRating
    category: str  # amplifiers / sustains / sub_dps

    @property
    def dps_id(self) -> str:
        return self.dps.id


@dataclass(frozen=True)
class TeamStatus:
    type: TeamStatusType
    message: str


@dataclass
class TeamAnalysis:
    """How a candidate fits one DPS's team given the owned roster."""

    dps: Character
    composition: Composition
    structure: CompositionStructure
    owned_amplifiers: list[RatedCharacter]
    owned_sustains: list[RatedCharacter]
    owned_sub_dps: list[RatedCharacter]
    recommended_category: str
    recommended_rating: TeammateRating
    status: TeamStatus
    all_compositions: list[Composition] = field(default_factory=list)

    @property
    def dps_id(self) -> str:
        return self.dps.id

    @property
    def dps_name(self) -> str:
        return self.dps.name

    @property
    def composition_id(self) -> str:
        return self.composition.id

    @property
    def composition_name(self) -> str:
        return self.composition.name


@dataclass(frozen=True)
class SlotCoverage:
    needed: int
    filled: int
    owned: list = field(default_factory=list)  # TeammateRec entries filling the slots


@dataclass
class CompositionAnalysis:
    """Slot coverage of one composition for a DPS, from the candidate's angle."""

    composition_id: str
    composition_name: str
    structure: CompositionStructure
    coverage_percent: float
    slot_analysis: dict[str, SlotCoverage]  # amplifiers / sustains / sub_dps
    recommended_category: str | None


@dataclass(frozen=True)
class RoleOverlapEntry:
    character_id: str
    character_name: str
    rating: TeammateRating
    relationship: str  # upgrade / sidegrade / downgrade


@dataclass
class RoleOverlap:
    """Owned characters competing with the candidate for the same slot."""

    dps_id: str
    dps_name: str
    recommended_rating: TeammateRating
    category: str
    alternatives: list[RoleOverlapEntry] = field(default_factory=list)


@dataclass(frozen=True)
class OwnedOption:
    id: str
    name: str
    rating: TeammateRating


@dataclass
class SlotBasedGap:
    """A DPS composition slot the candidate would fill."""

    dps_id: str
    dps_name: str
    composition_id: str
    composition_name: str
    category: str
    category_label: str  # amplifier / sustain / sub-DPS
    slots_needed: int
    slots_filled: int
    owned_options: list[OwnedOption]
    recommended_rating: TeammateRating
    coverage_percent: float


@dataclass(frozen=True)
class MissingRecommendation:
    name: str
    rating: TeammateRating
    category: str  # amplifier / sustain / sub-DPS


@dataclass(frozen=True)
class BuildStatus:
    type: BuildStatusType
    message: str


@dataclass(frozen=True)
class RoleCoverage:
    filled: int
    needed: int


@dataclass
class DPSTeamBuildingAnalysis:
    """What the roster already offers a candidate DPS."""

    dps: Character
    composition: Composition
    structure: CompositionStructure
    owned_amplifiers: list[RatedCharacter]
    owned_sustains: list[RatedCharacter]
    owned_sub_dps: list[RatedCharacter]
    amplifier_coverage: RoleCoverage
    sustain_coverage: RoleCoverage
    additional_dps_coverage: RoleCoverage  # Slots beyond the main DPS
    total_coverage: int  # 0-100
    quality_score: float  # 0-1, average of filled-slot ratings
    status: BuildStatus
    missing_recommendations: list[MissingRecommendation] = field(default_factory=list)
    all_compositions: list[Composition] = field(default_factory=list)

    @property
    def dps_id(self) -> str:
        return self.dps.id

    @property
    def dps_name(self) -> str:
        return self.dps.name

    @property
    def composition_id(self) -> str:
        return self.composition.id

    @property
    def composition_name(self) -> str:
        return self.composition.name


@dataclass(frozen=True)
class TeamVerdictScore:
    """One team's contribution to a verdict, before diminishing returns."""

    dps_name: str
    score: float
    status_type: TeamStatusType
    tier: str | None


@dataclass
class PullVerdict:
    level: VerdictLevel
    reason: str
    score: float
    team_scores: list[TeamVerdictScore] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "level": self.level.value,
            "reason": self.reason,
            "score": round(self.score, 2),
            "team_scores": [
                {
                    "dps_name": t.dps_name,
                    "score": round(t.score, 2),
                    "status_type": t.status_type.value,
                    "tier": t.tier,
                }
                for t in self.team_scores
            ],
        }


@dataclass(frozen=True)
class CompositionContext:
    composition_id: str
    composition_name: str
    is_highest_rating: bool = True


@dataclass(frozen=True)
class WantedByEntry:
    """A character that lists another as a teammate."""

    character: Character
    category: str  # dps / amplifiers / sustains / sub_dps / support_dps
    rating: TeammateRating
    reason: str
    composition_context: CompositionContext | None = None


@dataclass(frozen=True)
class AvoidedByEntry:
    character: Character
    reason: str


@dataclass
class WantedByGroups:
    dps: list[WantedByEntry] = field(default_factory=list)
    supports: list[WantedByEntry] = field(default_factory=list)
    sustains: list[WantedByEntry] = field(default_factory=list)


@dataclass
class WantedBySummary:
    total: int
    by_rating: dict[TeammateRating, int]
