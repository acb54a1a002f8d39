"""
Configuration classes for the pricing engine.
Defines signal weights, margin floors and simulator ranges in a type-safe, extensible way.
"""

import logging
import math
import os
from dataclasses import dataclass, field

from utils.env import get_env_float, get_env_int, load_project_dotenv

logger = logging.getLogger(__name__)

WEIGHT_TOLERANCE = 1e-6

CANONICAL_STRATEGY_WEIGHTS = {
    "competitor": 0.30,
    "demand": 0.30,
    "cost_plus": 0.20,
    "value": 0.20,
}


@dataclass
class PricingEngineConfig:
    strategy_weights: dict[str, float] = field(
        default_factory=lambda: dict(CANONICAL_STRATEGY_WEIGHTS)
    )
    # Signals run by the aggregator; "time" and "seasonal" are opt-in
    signals: list[str] = field(
        default_factory=lambda: ["competitor", "demand", "cost_plus", "value"]
    )
    default_strategy_weight: float = 0.25
    cost_plus_markup_pct: float = 50.0
    competitor_discount: float = 0.95
    competitor_margin_floor: float = 1.1
    demand_margin_floor: float = 1.05
    low_inventory_level: float = 0.2
    high_inventory_level: float = 0.8
    scarcity_premium: float = 1.1
    clearance_discount: float = 0.9
    season_multipliers: dict[str, float] = field(
        default_factory=lambda: {
            "holiday": 1.10,
            "christmas": 1.15,
            "black_friday": 0.80,
            "summer_sale": 0.90,
            "back_to_school": 1.05,
        }
    )
    price_elasticity: float = -1.2
    significant_change_pct: float = 0.05
    significant_change_min: float = 1.0
    inventory_capacity: int = 100
    sales_window_days: int = 30

    def __post_init__(self):
        validate_strategy_weights(self.strategy_weights)
        if self.inventory_capacity <= 0:
            raise ValueError("inventory_capacity must be positive")


@dataclass
class ABTestConfig:
    # Half-open [low, high) draw ranges
    views_range: tuple[int, int] = (1000, 3000)
    conversions_range: tuple[int, int] = (50, 200)
    max_confidence: float = 95.0
    confidence_scale: float = 10.0
    similar_rate_threshold: float = 1.0
    seed: int | None = None

    def __post_init__(self):
        for label, (low, high) in (
            ("views_range", self.views_range),
            ("conversions_range", self.conversions_range),
        ):
            if low < 0 or high <= low:
                raise ValueError(f"{label} must satisfy 0 <= low < high, got {(low, high)}")
        # Draws are half-open: the largest conversion count must not exceed the fewest views
        if self.conversions_range[1] - 1 > self.views_range[0]:
            raise ValueError(
                f"conversions_range {self.conversions_range} can exceed views_range "
                f"{self.views_range}"
            )


def validate_strategy_weights(weights: dict[str, float]) -> None:
    """Raise ValueError unless the weights are non-negative and sum to 1.0."""
    if any(w < 0 for w in weights.values()):
        raise ValueError(f"Strategy weights must be non-negative: {weights}")
    total = sum(weights.values())
    if not math.isclose(total, 1.0, abs_tol=WEIGHT_TOLERANCE):
        raise ValueError(f"Strategy weights must sum to 1.0, got {total:.6f}")


def _parse_weights(raw: str) -> dict[str, float]:
    weights: dict[str, float] = {}
    for chunk in raw.split(","):
        if not chunk.strip():
            continue
        name, _, value = chunk.partition("=")
        weights[name.strip()] = float(value)
    return weights


def load_pricing_config() -> PricingEngineConfig:
    """
    Build a PricingEngineConfig from defaults overridden by environment
    variables (a project-level `.env` is loaded first).
    """
    load_project_dotenv()
    overrides: dict = {}
    if (markup := get_env_float("PRICING_COST_PLUS_MARKUP")) is not None:
        overrides["cost_plus_markup_pct"] = markup
    if (elasticity := get_env_float("PRICING_ELASTICITY")) is not None:
        overrides["price_elasticity"] = elasticity
    if (capacity := get_env_int("PRICING_INVENTORY_CAPACITY")) is not None:
        overrides["inventory_capacity"] = capacity
    if weights := os.getenv("PRICING_STRATEGY_WEIGHTS"):
        overrides["strategy_weights"] = _parse_weights(weights)
        overrides["signals"] = list(overrides["strategy_weights"])
    if overrides:
        logger.info(f"Pricing config overrides from environment: {sorted(overrides)}")
    return PricingEngineConfig(**overrides)


# Example usage:
# config = PricingEngineConfig(strategy_weights={"competitor": 0.5, "cost_plus": 0.5},
#                              signals=["competitor", "cost_plus"])
