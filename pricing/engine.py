"""
PricingEngine: the entry points callers use to price products.

The engine is a pure function of its inputs. It never mutates the products,
rules or competitor prices it receives and never persists anything; writing
a new ``current_price`` and its history entry is left to the caller.
"""

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, Protocol

from config.config import ABTestConfig, PricingEngineConfig
from models.enums import CustomerSegment
from models.orders import Order
from models.pricing import (
    ABTestResult,
    CompetitorPrice,
    PriceAnalysis,
    PriceUpdateSuggestion,
    PricingContext,
    PricingRecommendation,
    PricingRule,
    Product,
    StrategyBreakdown,
)

from .ab_testing import ABTestSimulator, TrafficSource
from .aggregation import StrategyAggregator
from .analytics import context_from_orders, units_sold
from .bounds import enforce_bounds, round_price
from .recommendation import RecommendationBuilder
from .rules import RuleEngine
from .signals import build_signals, competitor_price_points

logger = logging.getLogger(__name__)

CHECKOUT_DISCOUNTS = {
    CustomerSegment.VIP: 0.10,
    CustomerSegment.REGULAR: 0.05,
    CustomerSegment.AT_RISK: 0.15,
    CustomerSegment.CHURNED: 0.15,
    CustomerSegment.NEW: 0.02,
}


class ProductLookup(Protocol):
    def get_product(self, product_id: int) -> Product | None: ...


class OrderSource(Protocol):
    def recent_orders(self, as_of: datetime | None = None, days: int = 30) -> list[Order]: ...


class PricingEngine:
    """
    Runs signals -> weighted aggregation -> rule pipeline -> corridor clamp
    -> recommendation for one product at a time.
    """

    def __init__(
        self,
        config: PricingEngineConfig | None = None,
        ab_config: ABTestConfig | None = None,
        traffic: TrafficSource | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.config = config or PricingEngineConfig()
        self.signals = build_signals(self.config)
        self.aggregator = StrategyAggregator(
            weights=self.config.strategy_weights,
            season_multipliers=self.config.season_multipliers,
            default_weight=self.config.default_strategy_weight,
        )
        self.builder = RecommendationBuilder(self.config.price_elasticity)
        self.ab_simulator = ABTestSimulator(traffic=traffic, config=ab_config)
        self.clock = clock
        logger.info(
            f"Pricing engine init (signals={[s.name for s in self.signals]}, "
            f"weights={self.config.strategy_weights})"
        )

    def _snapshot(
        self,
        product: Product,
        context: PricingContext | None,
        competitor_prices: list[CompetitorPrice] | None,
    ) -> PricingContext:
        """Freeze time and competitor data for one calculation."""
        context = context or PricingContext()
        points = competitor_price_points(product, context, competitor_prices)
        return replace(
            context,
            competitor_prices=tuple(points),
            competitor_products=(),
            as_of=context.as_of or self.clock(),
        )

    def calculate_optimal_price(
        self,
        product: Product,
        context: PricingContext | None = None,
        rules: list[PricingRule] | None = None,
        competitor_prices: list[CompetitorPrice] | None = None,
        recent_orders: list[Order] | None = None,
    ) -> PricingRecommendation:
        snapshot = self._snapshot(product, context, competitor_prices)

        signal_results = {s.name: s.compute(product, snapshot) for s in self.signals}
        weighted = self.aggregator.weigh(
            {name: result.price for name, result in signal_results.items()}
        )
        aggregated = self.aggregator.aggregate(
            weighted,
            product.base_price,
            is_seasonal_period=snapshot.is_seasonal_period,
            season=snapshot.season,
        )
        adjusted, applied_rules = RuleEngine(rules).apply(aggregated, product, snapshot)
        recommended = enforce_bounds(adjusted, product.min_price, product.max_price)

        strategies = [
            StrategyBreakdown(
                name=name, price=result.price, weight=weighted[name][1], reason=result.reason
            )
            for name, result in signal_results.items()
        ]
        if recent_orders is not None:
            sales_count = units_sold(product.product_id, recent_orders)
        else:
            sales_count = product.sales_count

        recommendation = self.builder.build(
            product,
            recommended,
            strategies=strategies,
            applied_rules=applied_rules,
            sales_count=sales_count,
            has_competitor_data=bool(snapshot.competitor_prices),
            corridor_clamped=not (product.min_price <= adjusted <= product.max_price),
            generated_at=snapshot.as_of,
        )
        logger.info(
            f"Product {product.product_id}: ${product.current_price:.2f} -> "
            f"${recommended:.2f} (aggregate {aggregated:.2f}, {len(applied_rules)} rules, "
            f"confidence {recommendation.confidence:.1f})"
        )
        return recommendation

    def recommend_for_product_id(
        self,
        product_id: int,
        catalog: ProductLookup,
        orders: OrderSource | None = None,
        context: PricingContext | None = None,
        rules: list[PricingRule] | None = None,
        competitor_prices: list[CompetitorPrice] | None = None,
    ) -> PricingRecommendation:
        """Look the product up first; unknown ids yield the not-found sentinel."""
        product = catalog.get_product(product_id)
        if product is None:
            logger.warning(f"Recommend: product {product_id} not found.")
            return PricingRecommendation.not_found()
        recent = orders.recent_orders(self.clock(), self.config.sales_window_days) if orders else None
        return self.calculate_optimal_price(product, context, rules, competitor_prices, recent)

    def run_ab_test(
        self,
        product: Product,
        context: PricingContext | None,
        price_a: float,
        price_b: float,
        days: int = 7,
    ) -> ABTestResult:
        end = (context.as_of if context else None) or self.clock()
        return self.ab_simulator.run(product, price_a, price_b, days, end_date=end)

    def analyze_all_products(
        self,
        products: list[Product],
        recent_orders: list[Order],
        rules: list[PricingRule] | None = None,
        competitor_prices: list[CompetitorPrice] | None = None,
        context: PricingContext | None = None,
    ) -> list[PriceAnalysis]:
        """
        Price every product and sort by absolute price difference, largest
        first. Without an explicit context each product gets one derived
        from the order history.
        """
        as_of = (context.as_of if context else None) or self.clock()
        results = []
        for product in products:
            product_context = context or context_from_orders(
                product, recent_orders, as_of, self.config
            )
            rec = self.calculate_optimal_price(
                product, product_context, rules, competitor_prices, recent_orders
            )
            results.append(
                PriceAnalysis(
                    product_id=product.product_id,
                    current_price=product.current_price,
                    optimal_price=rec.recommended_price,
                    price_difference=rec.price_difference,
                )
            )
        results.sort(key=lambda r: abs(r.price_difference), reverse=True)
        logger.info(f"Analyzed {len(results)} products.")
        return results

    def is_significant(self, row: PriceAnalysis, threshold: float | None = None) -> bool:
        if threshold is None:
            threshold = max(
                row.current_price * self.config.significant_change_pct,
                self.config.significant_change_min,
            )
        return abs(row.price_difference) > threshold

    def bulk_update(
        self, analysis: list[PriceAnalysis], threshold: float | None = None
    ) -> list[PriceUpdateSuggestion]:
        """
        Flag the significant changes from an analysis. Nothing is written;
        the caller decides whether to apply the suggestions.
        """
        suggestions = [
            PriceUpdateSuggestion(
                product_id=row.product_id,
                current_price=row.current_price,
                new_price=row.optimal_price,
                reason=f"Dynamic pricing adjustment: ${row.price_difference:+.2f} change",
            )
            for row in analysis
            if self.is_significant(row, threshold)
        ]
        logger.info(f"{len(suggestions)} of {len(analysis)} price changes are significant.")
        return suggestions

    def checkout_price(self, product: Product, segment: CustomerSegment | None) -> float:
        """Order-level segment discount on the current price, floored at min price."""
        discount = CHECKOUT_DISCOUNTS.get(segment, 0.0) if segment else 0.0
        return round_price(max(product.min_price, product.current_price * (1 - discount)))
