"""Pricing decision engine: signals, aggregation, rules, bounds and A/B simulation."""

from .ab_testing import ABTestSimulator, FixedTrafficSource, RandomTrafficSource
from .aggregation import StrategyAggregator
from .bounds import enforce_bounds, round_price
from .engine import PricingEngine
from .recommendation import RecommendationBuilder
from .rules import RuleEngine
from .signals import (
    CompetitorSignal,
    CostPlusSignal,
    DemandSignal,
    SeasonalSignal,
    TimeSignal,
    ValueSignal,
)

__all__ = [
    "PricingEngine",
    # Stages
    "StrategyAggregator",
    "RuleEngine",
    "RecommendationBuilder",
    "enforce_bounds",
    "round_price",
    # Signals
    "CostPlusSignal",
    "CompetitorSignal",
    "DemandSignal",
    "ValueSignal",
    "TimeSignal",
    "SeasonalSignal",
    # A/B testing
    "ABTestSimulator",
    "RandomTrafficSource",
    "FixedTrafficSource",
]
