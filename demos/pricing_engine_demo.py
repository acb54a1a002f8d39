"""
Demonstration of the pricing engine acting on a small in-memory catalog.

Plays the caller's role end to end: builds inputs, asks the engine for
recommendations, flags significant changes, applies them to the catalog and
compares two candidate prices with a seeded A/B simulation.
"""

from datetime import datetime, timedelta

from config.config import ABTestConfig
from connectors.in_memory import InMemoryCatalog, InMemoryOrderHistory
from models.enums import CustomerSegment, OrderStatus, PricingRuleType
from models.orders import Order, OrderItem
from models.pricing import CompetitorPrice, PricingContext, PricingRule, Product
from pricing.engine import PricingEngine
from utils.logger import get_logger
from utils.reporting import ab_test_frame, analysis_frame, strategy_frame

logger = get_logger("demos.pricing_engine")

DEMO_NOW = datetime(2024, 3, 12, 10, 0)  # A Tuesday morning, no time premiums


def sample_products() -> list[Product]:
    return [
        Product(1, "Winter Jacket", "Clothing", 120.0, 110.0, 55.0, 60.5, 250.0,
                stock=6, demand_score=1.8, seasonality_factor=1.2, brand="Nike", rating=4.6,
                sales_count=40),
        Product(2, "Garden Hose", "Home & Garden", 35.0, 38.0, 14.0, 15.4, 60.0,
                stock=80, demand_score=0.6, rating=3.9, sales_count=12),
        Product(3, "Board Game", "Toys", 45.0, 45.0, 20.0, 22.0, 90.0,
                stock=25, demand_score=1.0, brand="Acme", rating=4.1, sales_count=3),
    ]


def sample_orders() -> list[Order]:
    orders = []
    for day in range(1, 15):
        orders.append(
            Order(
                order_id=day,
                customer_id=100 + day % 3,
                order_date=DEMO_NOW - timedelta(days=day),
                items=[OrderItem(1, 2, 110.0), OrderItem(3, day % 2, 45.0)],
                status=OrderStatus.DELIVERED,
            )
        )
    return orders


def sample_rules() -> list[PricingRule]:
    return [
        PricingRule(1, PricingRuleType.INVENTORY_BASED, "Low stock premium", priority=1,
                    min_multiplier=1.0, max_multiplier=1.3),
        PricingRule(2, PricingRuleType.COMPETITOR_BASED, "Stay near market", priority=2),
        PricingRule(3, PricingRuleType.SEASONAL_BASED, "Seasonal clothing", priority=3,
                    min_multiplier=0.9, max_multiplier=1.2, applicable_categories=("Clothing",)),
    ]


def sample_competitor_prices() -> list[CompetitorPrice]:
    return [
        CompetitorPrice(1, "Parka", "Clothing", 118.0, DEMO_NOW),
        CompetitorPrice(2, "Puffer", "Clothing", 126.0, DEMO_NOW),
        CompetitorPrice(1, "Hose 20m", "Home & Garden", 29.0, DEMO_NOW),
        CompetitorPrice(3, "Hose 30m", "Home & Garden", 33.0, DEMO_NOW, is_available=False),
    ]


def run_demo(seed: int = 42) -> dict:
    catalog = InMemoryCatalog(sample_products())
    history = InMemoryOrderHistory(sample_orders())
    rules = sample_rules()
    competitor_prices = sample_competitor_prices()
    engine = PricingEngine(ab_config=ABTestConfig(seed=seed), clock=lambda: DEMO_NOW)

    jacket = catalog.get_product(1)
    vip_context = PricingContext(
        demand_factor=1.2,
        inventory_level=0.06,
        customer_segment=CustomerSegment.VIP,
        as_of=DEMO_NOW,
    )
    recommendation = engine.calculate_optimal_price(
        jacket, vip_context, rules, competitor_prices, history.recent_orders(DEMO_NOW)
    )
    logger.info(f"Recommendation for {jacket.name}: ${recommendation.recommended_price:.2f}")
    for reason in recommendation.reasons:
        logger.info(f"  - {reason}")
    print(strategy_frame(recommendation).to_string(index=False))

    missing = engine.recommend_for_product_id(999, catalog, history)
    logger.info(f"Unknown product found? {missing.is_found}")

    analysis = engine.analyze_all_products(
        catalog.all_products(), history.recent_orders(DEMO_NOW), rules, competitor_prices
    )
    print(analysis_frame(analysis).to_string(index=False))

    suggestions = engine.bulk_update(analysis)
    applied = []
    for suggestion in suggestions:
        product = catalog.get_product(suggestion.product_id)
        if product and product.update_price(suggestion.new_price, suggestion.reason, DEMO_NOW):
            applied.append(suggestion.product_id)
    logger.info(f"Applied {len(applied)} price updates: {applied}")

    ab_result = engine.run_ab_test(jacket, vip_context, 119.99, 129.99, days=14)
    print(ab_test_frame(ab_result).to_string())
    for note in ab_result.recommendations:
        logger.info(f"A/B: {note}")

    return {
        "recommendation": recommendation,
        "analysis": analysis,
        "suggestions": suggestions,
        "applied": applied,
        "ab_result": ab_result,
        "missing": missing,
    }


if __name__ == "__main__":
    run_demo()
