"""
Heuristic A/B price test simulator.

Traffic (views, conversions) per variant comes from a ``TrafficSource`` so
the simulator can be driven by a seeded numpy generator or by fixed values.
"""

import logging
from datetime import datetime, timedelta
from typing import Protocol

import numpy as np

from config.config import ABTestConfig
from models.pricing import ABTestResult, ABTestVariant, Product

logger = logging.getLogger(__name__)


class TrafficSource(Protocol):
    def draw(self, variant: str, price: float, days: int) -> tuple[int, int]:
        """Return ``(views, conversions)`` for one variant."""
        ...


class RandomTrafficSource:
    """Uniform integer draws from half-open ranges using a numpy Generator."""

    def __init__(
        self,
        views_range: tuple[int, int] = (1000, 3000),
        conversions_range: tuple[int, int] = (50, 200),
        rng: np.random.Generator | None = None,
        seed: int | None = None,
    ):
        self.views_range = views_range
        self.conversions_range = conversions_range
        self.rng = rng if rng is not None else np.random.default_rng(seed)

    @classmethod
    def from_config(cls, config: ABTestConfig) -> "RandomTrafficSource":
        return cls(config.views_range, config.conversions_range, seed=config.seed)

    def draw(self, variant: str, price: float, days: int) -> tuple[int, int]:
        conversions = int(self.rng.integers(*self.conversions_range))
        views = int(self.rng.integers(*self.views_range))
        return views, min(conversions, views)


class FixedTrafficSource:
    """Returns preset ``(views, conversions)`` per variant label."""

    def __init__(self, outcomes: dict[str, tuple[int, int]]):
        self.outcomes = outcomes

    def draw(self, variant: str, price: float, days: int) -> tuple[int, int]:
        return self.outcomes[variant]


def build_variant(price: float, views: int, conversions: int) -> ABTestVariant:
    rate = conversions / views * 100 if views > 0 else 0.0
    return ABTestVariant(
        price=price,
        views=views,
        conversions=conversions,
        conversion_rate=rate,
        revenue=conversions * price,
    )


class ABTestSimulator:
    def __init__(
        self,
        traffic: TrafficSource | None = None,
        config: ABTestConfig | None = None,
    ):
        self.config = config or ABTestConfig()
        self.traffic = traffic or RandomTrafficSource.from_config(self.config)

    def confidence(self, rate_a: float, rate_b: float) -> float:
        return min(self.config.max_confidence, abs(rate_a - rate_b) * self.config.confidence_scale)

    def recommendations(
        self, a: ABTestVariant, b: ABTestVariant, winner: str
    ) -> list[str]:
        best, other = (a, b) if winner == "A" else (b, a)
        notes = [
            f"Implement Price {winner} (${best.price:.2f}) for higher revenue",
            f"Revenue increase of ${best.revenue - other.revenue:.2f} expected",
        ]
        if abs(a.conversion_rate - b.conversion_rate) < self.config.similar_rate_threshold:
            notes.append("Conversion rates are similar - consider other factors like inventory")
        return notes

    def run(
        self,
        product: Product,
        price_a: float,
        price_b: float,
        days: int = 7,
        end_date: datetime | None = None,
    ) -> ABTestResult:
        if days < 0:
            raise ValueError(f"Test duration must be non-negative, got {days}")
        a = build_variant(price_a, *self.traffic.draw("A", price_a, days))
        b = build_variant(price_b, *self.traffic.draw("B", price_b, days))
        # Ties go to B
        winner = "A" if a.revenue > b.revenue else "B"
        end = end_date or datetime.now()
        result = ABTestResult(
            product_id=product.product_id,
            variant_a=a,
            variant_b=b,
            winner=winner,
            confidence=self.confidence(a.conversion_rate, b.conversion_rate),
            start_date=end - timedelta(days=days),
            end_date=end,
            recommendations=self.recommendations(a, b, winner),
        )
        logger.info(
            f"A/B test for product {product.product_id}: winner {winner} "
            f"(A ${a.revenue:.2f} vs B ${b.revenue:.2f}, confidence {result.confidence:.1f})"
        )
        return result
