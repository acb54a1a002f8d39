import logging
from dataclasses import replace
from datetime import datetime

import pytest

from models.enums import PricingRuleType
from models.pricing import PricingRule
from pricing.rules import (
    CompetitorRule,
    InventoryRule,
    RuleEngine,
    RuleVariant,
    SegmentRule,
    build_variant,
)


def make_rule(rule_type, rule_id=1, priority=1, low=0.8, high=1.5, **kwargs) -> PricingRule:
    return PricingRule(
        rule_id=rule_id,
        rule_type=rule_type,
        priority=priority,
        min_multiplier=low,
        max_multiplier=high,
        **kwargs,
    )


# --- Individual variants --- #


def test_inventory_rule_reference_scenario(base_product, neutral_context):
    product = replace(base_product, stock=5)
    engine = RuleEngine([make_rule(PricingRuleType.INVENTORY_BASED, low=1.0, high=1.3)])
    price, applied = engine.apply(92.0, product, neutral_context)
    assert price == pytest.approx(101.2)
    assert applied[0].multiplier == pytest.approx(1.10)
    assert applied[0].price_before == pytest.approx(92.0)


@pytest.mark.parametrize(
    "stock, expected_multiplier",
    [(0, 1.05), (9, 1.02), (10, None), (50, None)],
)
def test_inventory_rule_bounds(base_product, neutral_context, stock, expected_multiplier):
    product = replace(base_product, stock=stock)
    variant = InventoryRule(make_rule(PricingRuleType.INVENTORY_BASED, low=1.0, high=1.05))
    price, multiplier = variant.apply(100.0, product, neutral_context)
    if expected_multiplier is None:
        assert multiplier is None
        assert price == 100.0
    else:
        assert multiplier == pytest.approx(expected_multiplier)
        assert price == pytest.approx(100.0 * expected_multiplier)


@pytest.mark.parametrize(
    "demand_score, expected_price",
    [(1.0, 100.0), (1.5, 100.0), (1.6, 128.0), (2.5, 150.0)],
)
def test_demand_rule(base_product, neutral_context, demand_score, expected_price):
    product = replace(base_product, demand_score=demand_score)
    engine = RuleEngine([make_rule(PricingRuleType.DEMAND_BASED)])
    price, _ = engine.apply(100.0, product, neutral_context)
    assert price == pytest.approx(expected_price)


@pytest.mark.parametrize(
    "price, min_price, expected",
    [
        (120.0, 11.0, 105.0),  # more than 10% above market
        (110.0, 11.0, 110.0),  # exactly at the ceiling, untouched
        (120.0, 108.0, 108.0),  # reassignment still respects min price
    ],
)
def test_competitor_rule(base_product, neutral_context, price, min_price, expected):
    product = replace(base_product, min_price=min_price)
    context = replace(neutral_context, competitor_prices=(90.0, 110.0))
    new_price, multiplier = CompetitorRule(make_rule(PricingRuleType.COMPETITOR_BASED)).apply(
        price, product, context
    )
    assert new_price == pytest.approx(expected)
    assert multiplier is None


def test_competitor_rule_reads_competitor_products(base_product, neutral_context):
    rival = replace(base_product, product_id=99, current_price=50.0)
    context = replace(neutral_context, competitor_products=(rival,))
    engine = RuleEngine([make_rule(PricingRuleType.COMPETITOR_BASED)])
    price, applied = engine.apply(100.0, base_product, context)
    assert price == pytest.approx(52.5)
    assert applied[0].price_after == pytest.approx(52.5)


def test_competitor_rule_without_market_data(base_product, neutral_context):
    engine = RuleEngine([make_rule(PricingRuleType.COMPETITOR_BASED)])
    price, applied = engine.apply(500.0, base_product, neutral_context)
    assert price == 500.0
    assert applied == []


def test_time_rule_clamps_multiplier(base_product, neutral_context):
    saturday_evening = replace(neutral_context, as_of=datetime(2024, 3, 16, 19, 0))
    engine = RuleEngine([make_rule(PricingRuleType.TIME_BASED, low=1.0, high=1.1)])
    price, applied = engine.apply(100.0, base_product, saturday_evening)
    assert applied[0].multiplier == pytest.approx(1.1)  # 1.155 clamped
    assert price == pytest.approx(110.0)


def test_time_rule_weekday_morning_is_neutral(base_product, neutral_context):
    engine = RuleEngine([make_rule(PricingRuleType.TIME_BASED)])
    price, applied = engine.apply(100.0, base_product, neutral_context)
    assert price == pytest.approx(100.0)
    assert applied[0].multiplier == pytest.approx(1.0)


@pytest.mark.parametrize("factor, expected", [(0.7, 80.0), (1.2, 120.0), (2.0, 150.0)])
def test_seasonal_rule(base_product, neutral_context, factor, expected):
    product = replace(base_product, seasonality_factor=factor)
    engine = RuleEngine([make_rule(PricingRuleType.SEASONAL_BASED)])
    price, _ = engine.apply(100.0, product, neutral_context)
    assert price == pytest.approx(expected)


def test_segment_rule_is_noop(base_product, neutral_context):
    variant = build_variant(make_rule(PricingRuleType.CUSTOMER_SEGMENT_BASED))
    assert isinstance(variant, SegmentRule)
    assert variant.apply(100.0, base_product, neutral_context) == (100.0, None)


def test_unknown_rule_type_is_noop_and_logged(base_product, neutral_context, caplog):
    rule = make_rule("loyalty_points")
    with caplog.at_level(logging.WARNING):
        engine = RuleEngine([rule])
    assert type(engine.variants[0]) is RuleVariant
    assert "unknown rule type 'loyalty_points'" in caplog.text
    price, applied = engine.apply(100.0, base_product, neutral_context)
    assert price == 100.0
    assert applied == []


def test_rule_type_accepts_string_values(base_product, neutral_context):
    engine = RuleEngine([make_rule("seasonal_based")])
    product = replace(base_product, seasonality_factor=1.2)
    price, _ = engine.apply(100.0, product, neutral_context)
    assert price == pytest.approx(120.0)


# --- Pipeline --- #


def test_rules_run_in_priority_order(base_product, neutral_context):
    product = replace(base_product, stock=5)
    context = replace(neutral_context, competitor_prices=(100.0,))
    rules = [
        make_rule(PricingRuleType.COMPETITOR_BASED, rule_id=2, priority=2),
        make_rule(PricingRuleType.INVENTORY_BASED, rule_id=1, priority=1, low=1.0, high=1.3),
    ]
    price, applied = RuleEngine(rules).apply(120.0, product, context)
    # inventory first: 120 * 1.1 = 132, then competitor pulls back to 105
    assert [a.rule_id for a in applied] == [1, 2]
    assert price == pytest.approx(105.0)


def test_equal_priorities_keep_input_order(base_product, neutral_context):
    rules = [
        make_rule(PricingRuleType.SEASONAL_BASED, rule_id=7, priority=1),
        make_rule(PricingRuleType.TIME_BASED, rule_id=3, priority=1),
    ]
    engine = RuleEngine(rules)
    assert [v.rule.rule_id for v in engine.variants] == [7, 3]


def test_inactive_rules_are_skipped(base_product, neutral_context):
    product = replace(base_product, stock=0)
    engine = RuleEngine([make_rule(PricingRuleType.INVENTORY_BASED, is_active=False)])
    assert len(engine) == 0
    assert engine.apply(100.0, product, neutral_context) == (100.0, [])


@pytest.mark.parametrize(
    "categories, applies",
    [((), True), (("electronics",), True), (("Toys", "ELECTRONICS"), True), (("Toys",), False)],
)
def test_category_scoping(base_product, neutral_context, categories, applies):
    product = replace(base_product, seasonality_factor=1.2)
    engine = RuleEngine(
        [make_rule(PricingRuleType.SEASONAL_BASED, applicable_categories=categories)]
    )
    price, _ = engine.apply(100.0, product, neutral_context)
    assert price == pytest.approx(120.0 if applies else 100.0)


@pytest.mark.parametrize("stock", range(0, 12))
@pytest.mark.parametrize("demand_score", [0.5, 1.6, 2.0, 4.0])
@pytest.mark.parametrize("seasonality", [0.5, 1.0, 1.4])
def test_applied_multipliers_stay_within_rule_bounds(
    base_product, neutral_context, stock, demand_score, seasonality
):
    product = replace(
        base_product, stock=stock, demand_score=demand_score, seasonality_factor=seasonality
    )
    rules = [
        make_rule(PricingRuleType.INVENTORY_BASED, rule_id=1, priority=1, low=1.0, high=1.1),
        make_rule(PricingRuleType.DEMAND_BASED, rule_id=2, priority=2, low=1.0, high=1.25),
        make_rule(PricingRuleType.SEASONAL_BASED, rule_id=3, priority=3, low=0.9, high=1.2),
    ]
    bounds = {r.rule_id: (r.min_multiplier, r.max_multiplier) for r in rules}
    _, applied = RuleEngine(rules).apply(100.0, product, neutral_context)
    for step in applied:
        low, high = bounds[step.rule_id]
        assert low <= step.multiplier <= high
        assert step.price_after == pytest.approx(step.price_before * step.multiplier)
