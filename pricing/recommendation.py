"""
Assembly of the final PricingRecommendation: deltas, confidence, reasons and
an elasticity-based impact estimate.
"""

from datetime import datetime

from models.pricing import (
    AppliedRule,
    ExpectedImpact,
    PricingRecommendation,
    Product,
    StrategyBreakdown,
)

from .bounds import round_price

LOW_STOCK = 10
HIGH_STOCK = 50
HIGH_DEMAND_SCORE = 1.5
LOW_DEMAND_SCORE = 0.7
MIN_SALES_FOR_CONFIDENCE = 5


def percentage_change(old: float, new: float) -> float:
    if old == 0:
        return 0.0
    return round((new - old) / old * 100, 2)


class RecommendationBuilder:
    def __init__(self, price_elasticity: float = -1.2):
        self.price_elasticity = price_elasticity

    def confidence(
        self, product: Product, sales_count: int, has_competitor_data: bool
    ) -> float:
        """
        Average the weights of the evidence factors present, as a percentage.
        With no evidence at all the score is a neutral 50.
        """
        factors = [
            (product.stock > 0, 0.2),
            (sales_count > MIN_SALES_FOR_CONFIDENCE, 0.3),
            (bool(product.price_history), 0.2),
            (has_competitor_data, 0.3),
        ]
        present = [weight for applies, weight in factors if applies]
        if not present:
            return 50.0
        return round(sum(present) / len(present) * 100, 2)

    def reasons(
        self,
        product: Product,
        recommended: float,
        applied_rules: list[AppliedRule],
        corridor_clamped: bool,
    ) -> list[str]:
        reasons: list[str] = []
        current = product.current_price
        if recommended > current:
            if product.stock < LOW_STOCK:
                reasons.append("Low inventory levels justify price increase")
            if product.demand_score > HIGH_DEMAND_SCORE:
                reasons.append("High demand detected")
        elif recommended < current:
            if product.stock > HIGH_STOCK:
                reasons.append("High inventory suggests price reduction")
            if product.demand_score < LOW_DEMAND_SCORE:
                reasons.append("Low demand indicates price adjustment needed")
        else:
            reasons.append("Current price is already at the recommended level")

        for rule in applied_rules:
            if rule.multiplier is not None:
                reasons.append(
                    f"Rule {rule.rule_id} ({rule.rule_type}) applied x{rule.multiplier:.2f}"
                )
            else:
                reasons.append(
                    f"Rule {rule.rule_id} ({rule.rule_type}) set price to ${rule.price_after:.2f}"
                )
        if corridor_clamped:
            reasons.append(
                f"Clamped to price corridor [${product.min_price:.2f}, ${product.max_price:.2f}]"
            )
        return reasons

    def impact(self, current: float, recommended: float) -> ExpectedImpact:
        price_change = percentage_change(current, recommended)
        demand_change = self.price_elasticity * price_change
        revenue_change = price_change + demand_change + price_change * demand_change / 100
        return ExpectedImpact(
            price_change_pct=price_change,
            demand_change_pct=round(demand_change, 2),
            revenue_change_pct=round(revenue_change, 2),
        )

    def build(
        self,
        product: Product,
        recommended: float,
        strategies: list[StrategyBreakdown],
        applied_rules: list[AppliedRule],
        sales_count: int,
        has_competitor_data: bool,
        corridor_clamped: bool = False,
        generated_at: datetime | None = None,
    ) -> PricingRecommendation:
        current = product.current_price
        return PricingRecommendation(
            product_id=product.product_id,
            product_name=product.name,
            current_price=current,
            recommended_price=recommended,
            price_difference=round_price(recommended - current),
            percentage_change=percentage_change(current, recommended),
            strategies=list(strategies),
            applied_rules=list(applied_rules),
            confidence=self.confidence(product, sales_count, has_competitor_data),
            reasons=self.reasons(product, recommended, applied_rules, corridor_clamped),
            expected_impact=self.impact(current, recommended),
            generated_at=generated_at,
        )
