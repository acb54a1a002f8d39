"""
Weighted aggregation of signal prices into one raw price.
"""

import logging

logger = logging.getLogger(__name__)


class StrategyAggregator:
    """
    Combines per-signal prices as ``sum(price * weight) / sum(weight)``.

    Falls back to the plain mean when the total weight is zero and to the
    product's base price when no signal produced a value. A season multiplier
    is applied once to the aggregate, never per signal.
    """

    def __init__(
        self,
        weights: dict[str, float] | None = None,
        season_multipliers: dict[str, float] | None = None,
        default_weight: float = 0.25,
    ):
        self.weights = dict(weights or {})
        self.season_multipliers = {
            k.lower(): v for k, v in (season_multipliers or {}).items()
        }
        self.default_weight = default_weight

    def weight_for(self, strategy: str) -> float:
        return self.weights.get(strategy, self.default_weight)

    def weigh(self, prices: dict[str, float]) -> dict[str, tuple[float, float]]:
        """Attach the configured weight to each signal price."""
        return {name: (price, self.weight_for(name)) for name, price in prices.items()}

    def weighted_price(
        self, results: dict[str, tuple[float, float]], fallback_price: float
    ) -> float:
        if not results:
            logger.debug("No signal prices, falling back to base price")
            return fallback_price
        total_weight = sum(weight for _, weight in results.values())
        if total_weight <= 0:
            prices = [price for price, _ in results.values()]
            return sum(prices) / len(prices)
        weighted_sum = sum(price * weight for price, weight in results.values())
        return weighted_sum / total_weight

    def season_multiplier(self, season: str) -> float:
        return self.season_multipliers.get(season.strip().lower(), 1.0)

    def aggregate(
        self,
        results: dict[str, tuple[float, float]],
        fallback_price: float,
        is_seasonal_period: bool = False,
        season: str = "",
    ) -> float:
        price = self.weighted_price(results, fallback_price)
        if is_seasonal_period:
            multiplier = self.season_multiplier(season)
            logger.debug(f"Season '{season}' multiplier {multiplier:.2f} on {price:.4f}")
            price *= multiplier
        return price
