"""Core scoring components for the team engine."""
from starguide.services.scorers.tier_scorer import TierScorer
from starguide.services.scorers.investment_calculator import (
    InvestmentCalculator,
    build_investment_map,
    interpolate_light_cone_penalty,
)
from starguide.services.scorers.synergy_resolver import SynergyResolver

__all__ = [
    "TierScorer",
    "InvestmentCalculator",
    "build_investment_map",
    "interpolate_light_cone_penalty",
    "SynergyResolver",
]
