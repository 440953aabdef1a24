"""Investment calculation result models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class InvestmentPenaltyBreakdown:
    """Raw penalties for missing upgrades (all values <= 0)."""

    total: float
    eidolon: float
    light_cone: float


@dataclass(frozen=True)
class ImprovementPotential:
    current_effectiveness: float
    max_effectiveness: float
    potential_gain: float
    percent_of_max: float


@dataclass(frozen=True)
class ScoreBreakdown:
    """Effective score split into the tier baseline and investment bonus."""

    base_score: float
    eidolon_points: float  # Tier points from owned eidolons
    light_cone_points: float  # Tier points from the equipped light cone
    bonus: float  # (eidolon_points + light_cone_points) scaled to score

    @property
    def total(self) -> float:
        return self.base_score + self.bonus


@dataclass(frozen=True)
class PotentialSynergyModifier:
    """A synergy modifier that more investment would unlock."""

    source: str
    value: float
    reason: str
    requires: str  # e.g. "Sparkle E1", "Seele with In the Night"
