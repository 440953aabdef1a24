"""Team generation and scoring result models."""

from dataclasses import dataclass, field

from starguide.models.character import Character
from starguide.models.enums import (
    GameMode,
    GranularRating,
    SynergyConfidence,
    TeammateRating,
    TierRating,
)


@dataclass(frozen=True)
class TeamMemberContribution:
    """Why one member is on a team."""

    character_id: str
    character_name: str
    role: str  # "Main DPS", "Amplifier", "Sustain", ...
    reason: str
    rating: GranularRating | None = None
    source_rating: TeammateRating | None = None  # Rating as written in catalog data

    def to_dict(self) -> dict:
        return {
            "character_id": self.character_id,
            "character_name": self.character_name,
            "role": self.role,
            "rating": self.rating.value if self.rating else None,
            "source_rating": self.source_rating.value if self.source_rating else None,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class ModeTeamRating:
    """Team tier for one game mode."""

    mode: GameMode
    tier: TierRating
    score: float  # 100 - tier value * 20, higher is better
    label: str  # e.g. "Memory of Chaos"

    def to_dict(self) -> dict:
        return {
            "mode": self.mode.value,
            "tier": self.tier.value,
            "score": self.score,
            "label": self.label,
        }


@dataclass(frozen=True)
class BidirectionalScore:
    """Blended pair rating from both characters' perspectives (0-6 scale)."""

    score: float
    confidence: SynergyConfidence
    focal_rating: TeammateRating | None = None
    teammate_rating: TeammateRating | None = None
    focal_reason: str | None = None
    teammate_reason: str | None = None


@dataclass(frozen=True)
class SynergySource:
    """One investment-triggered modifier contributing to a pair's synergy."""

    source: str  # "Seele E1", "Sparkle + Earthly Escapade", ...
    value: float
    reason: str = ""


@dataclass(frozen=True)
class SynergyModifierResult:
    """Averaged modifier for a pair plus the sources that produced it."""

    total: float
    breakdown: list[SynergySource] = field(default_factory=list)


@dataclass(frozen=True)
class EffectiveRating:
    """A teammate rating before and after investment modifiers."""

    base_rating: TeammateRating
    effective_rating: TeammateRating
    base_score: float
    effective_score: float
    synergy_breakdown: list[SynergySource] = field(default_factory=list)
    reason: str = ""


@dataclass(frozen=True)
class EnrichedTeammate:
    """A candidate for one role slot around a focal carry."""

    character: Character
    rating: TeammateRating
    reason: str
    score: float  # 0-6 pair scale; halved for tier-based fallback picks

    @property
    def id(self) -> str:
        return self.character.id


@dataclass
class GeneratedTeam:
    """A scored four-character team."""

    characters: list[Character]
    name: str
    rating: GranularRating
    structure: str
    score: float
    contributions: list[TeamMemberContribution] = field(default_factory=list)
    reasoning: list[str] = field(default_factory=list)
    mode_ratings: list[ModeTeamRating] = field(default_factory=list)
    key_synergies: list[str] = field(default_factory=list)
    team_summary: str | None = None
    composition_id: str | None = None
    composition_name: str | None = None
    curated: bool = False  # Hand-built catalog team rather than enumerated

    @property
    def character_ids(self) -> list[str]:
        return [c.id for c in self.characters]

    def mode_rating(self, mode: GameMode) -> ModeTeamRating | None:
        return next((r for r in self.mode_ratings if r.mode == mode), None)

    def to_dict(self) -> dict:
        """Serialize to dictionary for JSON response."""
        return {
            "characters": self.character_ids,
            "name": self.name,
            "rating": self.rating.value,
            "structure": self.structure,
            "score": round(self.score, 2),
            "contributions": [c.to_dict() for c in self.contributions],
            "reasoning": list(self.reasoning),
            "mode_ratings": [r.to_dict() for r in self.mode_ratings],
            "key_synergies": list(self.key_synergies),
            "team_summary": self.team_summary,
            "composition_id": self.composition_id,
            "composition_name": self.composition_name,
            "curated": self.curated,
        }


@dataclass
class SupportTeamResult:
    """Teams for a support character, split by who the team is built around."""

    focal_teams: list[GeneratedTeam] = field(default_factory=list)  # Support's own compositions
    supporting_teams: list[GeneratedTeam] = field(default_factory=list)  # DPS compositions using the support

    def to_dict(self) -> dict:
        return {
            "focal_teams": [t.to_dict() for t in self.focal_teams],
            "supporting_teams": [t.to_dict() for t in self.supporting_teams],
        }


@dataclass(frozen=True)
class TeamSynergy:
    """Team-wide synergy score with the per-member explanation."""

    score: float
    rating: GranularRating
    contributions: list[TeamMemberContribution] = field(default_factory=list)
    reasoning: list[str] = field(default_factory=list)
    key_synergies: list[str] = field(default_factory=list)
    team_summary: str = ""
