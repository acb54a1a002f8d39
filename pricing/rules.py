"""
Priority-ordered rule pipeline applied to the aggregated price.

Each ``PricingRuleType`` has its own variant class exposing
``apply(price, product, context)``. Rules run sequentially, each one on the
previous rule's output.
"""

import logging
from datetime import datetime

from models.enums import PricingRuleType
from models.pricing import AppliedRule, PricingContext, PricingRule, Product

from .bounds import clamp
from .signals import competitor_price_points, time_multiplier

logger = logging.getLogger(__name__)

LOW_STOCK_THRESHOLD = 10
LOW_STOCK_STEP = 0.02
HIGH_DEMAND_SCORE = 1.5
DEMAND_SCORE_SCALE = 0.8
COMPETITOR_CEILING = 1.1
COMPETITOR_TARGET = 1.05


class RuleVariant:
    """
    One rule in the pipeline. ``apply`` returns the new price and the
    multiplier actually used (None when the rule did not fire or assigned
    an absolute price).
    """

    def __init__(self, rule: PricingRule):
        self.rule = rule

    def bounded(self, multiplier: float) -> float:
        return clamp(multiplier, self.rule.min_multiplier, self.rule.max_multiplier)

    def apply(
        self, price: float, product: Product, context: PricingContext
    ) -> tuple[float, float | None]:
        return price, None

    def _scale(self, price: float, raw_multiplier: float) -> tuple[float, float]:
        multiplier = self.bounded(raw_multiplier)
        return price * multiplier, multiplier


class InventoryRule(RuleVariant):
    def apply(self, price, product, context):
        if product.stock >= LOW_STOCK_THRESHOLD:
            return price, None
        return self._scale(
            price, 1.0 + (LOW_STOCK_THRESHOLD - product.stock) * LOW_STOCK_STEP
        )


class DemandRule(RuleVariant):
    def apply(self, price, product, context):
        if product.demand_score <= HIGH_DEMAND_SCORE:
            return price, None
        return self._scale(price, product.demand_score * DEMAND_SCORE_SCALE)


class CompetitorRule(RuleVariant):
    """Pulls an overpriced product back to just above the market average."""

    def apply(self, price, product, context):
        prices = competitor_price_points(product, context)
        if not prices:
            return price, None
        average = sum(prices) / len(prices)
        if price > average * COMPETITOR_CEILING:
            return max(product.min_price, average * COMPETITOR_TARGET), None
        return price, None


class TimeRule(RuleVariant):
    def apply(self, price, product, context):
        return self._scale(price, time_multiplier(context.as_of or datetime.now()))


class SeasonalRule(RuleVariant):
    def apply(self, price, product, context):
        return self._scale(price, product.seasonality_factor)


class SegmentRule(RuleVariant):
    """Segment pricing happens at checkout, so the catalog price is untouched."""


RULE_VARIANTS: dict[PricingRuleType, type[RuleVariant]] = {
    PricingRuleType.INVENTORY_BASED: InventoryRule,
    PricingRuleType.DEMAND_BASED: DemandRule,
    PricingRuleType.COMPETITOR_BASED: CompetitorRule,
    PricingRuleType.TIME_BASED: TimeRule,
    PricingRuleType.SEASONAL_BASED: SeasonalRule,
    PricingRuleType.CUSTOMER_SEGMENT_BASED: SegmentRule,
}


def _rule_type_label(rule_type: PricingRuleType | str) -> str:
    return rule_type.value if isinstance(rule_type, PricingRuleType) else str(rule_type)


def build_variant(rule: PricingRule) -> RuleVariant:
    """Pick the variant for a rule; unknown rule types become no-ops."""
    try:
        rule_type = PricingRuleType(rule.rule_type)
    except ValueError:
        logger.warning(
            f"Rule {rule.rule_id}: unknown rule type '{_rule_type_label(rule.rule_type)}', ignoring."
        )
        return RuleVariant(rule)
    return RULE_VARIANTS[rule_type](rule)


class RuleEngine:
    """
    Holds the active rules sorted ascending by priority (ties keep input
    order) and runs them as a sequential pipeline.
    """

    def __init__(self, rules: list[PricingRule] | None = None):
        active = sorted(
            (r for r in rules or [] if r.is_active), key=lambda r: r.priority
        )
        self.variants = [build_variant(r) for r in active]

    def __len__(self) -> int:
        return len(self.variants)

    def apply(
        self, price: float, product: Product, context: PricingContext
    ) -> tuple[float, list[AppliedRule]]:
        applied: list[AppliedRule] = []
        for variant in self.variants:
            rule = variant.rule
            if not rule.applies_to(product.category):
                continue
            new_price, multiplier = variant.apply(price, product, context)
            if multiplier is None and new_price == price:
                continue
            applied.append(
                AppliedRule(
                    rule_id=rule.rule_id,
                    rule_type=_rule_type_label(rule.rule_type),
                    price_before=price,
                    price_after=new_price,
                    multiplier=multiplier,
                )
            )
            logger.debug(
                f"Rule {rule.rule_id} ({_rule_type_label(rule.rule_type)}) on "
                f"product {product.product_id}: {price:.4f} -> {new_price:.4f}"
            )
            price = new_price
        return price, applied
