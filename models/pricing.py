"""
Pricing-related data models for the pricing engine.

Inputs (``Product``, ``PricingContext``, ``PricingRule``, ``CompetitorPrice``)
are built by the caller and treated as read-only snapshots by the engine.
Outputs (``PricingRecommendation``, ``ABTestResult`` and friends) are new
values returned on every call.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import NamedTuple

from .enums import CustomerSegment, PricingRuleType


@dataclass(frozen=True)
class PriceHistoryEntry:
    """One accepted price change of a product."""

    changed_at: datetime
    old_price: float
    new_price: float
    reason: str = ""

    @property
    def price_change(self) -> float:
        return self.new_price - self.old_price

    @property
    def percentage_change(self) -> float:
        if self.old_price == 0:
            return 0.0
        return round((self.new_price - self.old_price) / self.old_price * 100, 2)


@dataclass
class Product:
    """
    Data model for a catalog product as seen by the pricing engine.
    """

    product_id: int
    name: str
    category: str
    base_price: float
    current_price: float
    cost: float
    min_price: float
    max_price: float
    stock: int = 0
    demand_score: float = 1.0
    seasonality_factor: float = 1.0
    brand: str = ""
    rating: float = 0.0
    sales_count: int = 0
    price_history: list[PriceHistoryEntry] = field(default_factory=list)

    def update_price(
        self, new_price: float, reason: str = "", when: datetime | None = None
    ) -> bool:
        """
        Caller-side price write. Rejects prices outside the corridor and
        appends to the history otherwise.
        """
        if new_price < self.min_price or new_price > self.max_price:
            return False
        self.price_history.append(
            PriceHistoryEntry(
                changed_at=when or datetime.now(),
                old_price=self.current_price,
                new_price=new_price,
                reason=reason,
            )
        )
        self.current_price = new_price
        return True

    def profit_margin(self) -> float:
        """Margin over cost in percent."""
        if self.cost == 0:
            return 0.0
        return round((self.current_price - self.cost) / self.cost * 100, 2)

    def is_low_stock(self, threshold: int = 10) -> bool:
        return self.stock <= threshold


@dataclass(frozen=True)
class CompetitorPrice:
    """A competitor's observed price for a product or category."""

    competitor_id: int
    product_name: str
    category: str
    price: float
    recorded_at: datetime | None = None
    is_available: bool = True
    source: str = ""


@dataclass(frozen=True)
class PricingRule:
    """
    A bounded catalog adjustment. Rules run in ascending ``priority`` order
    and a rule with no categories applies to every category.
    """

    rule_id: int
    rule_type: PricingRuleType | str
    name: str = ""
    is_active: bool = True
    priority: int = 1
    min_multiplier: float = 0.8
    max_multiplier: float = 1.5
    applicable_categories: tuple[str, ...] = ()
    description: str = ""

    def applies_to(self, category: str) -> bool:
        if not self.applicable_categories:
            return True
        wanted = category.lower()
        return any(c.lower() == wanted for c in self.applicable_categories)


@dataclass(frozen=True)
class PricingContext:
    """Market and customer signals for a single pricing call."""

    demand_factor: float = 1.0
    inventory_level: float = 0.5
    is_seasonal_period: bool = False
    season: str = ""
    customer_segment: CustomerSegment | None = None
    competitor_prices: tuple[float, ...] = ()
    competitor_products: tuple[Product, ...] = ()
    loyalty_discount: float = 0.0
    as_of: datetime | None = None


@dataclass(frozen=True)
class SignalResult:
    """Output of a single signal provider."""

    price: float
    reason: str


@dataclass(frozen=True)
class StrategyBreakdown:
    name: str
    price: float
    weight: float
    reason: str


@dataclass(frozen=True)
class AppliedRule:
    """Trace of one rule that changed the price in the pipeline."""

    rule_id: int
    rule_type: str
    price_before: float
    price_after: float
    multiplier: float | None = None


@dataclass(frozen=True)
class ExpectedImpact:
    price_change_pct: float = 0.0
    demand_change_pct: float = 0.0
    revenue_change_pct: float = 0.0

    @property
    def summary(self) -> str:
        return (
            f"Estimated {self.revenue_change_pct:.1f}% revenue change, "
            f"{self.demand_change_pct:.1f}% demand change"
        )


@dataclass
class PricingRecommendation:
    """
    Data model for the engine output. ``product_id == 0`` marks the
    not-found sentinel.
    """

    product_id: int
    current_price: float
    recommended_price: float
    price_difference: float
    percentage_change: float
    product_name: str = ""
    strategies: list[StrategyBreakdown] = field(default_factory=list)
    applied_rules: list[AppliedRule] = field(default_factory=list)
    confidence: float = 0.0
    reasons: list[str] = field(default_factory=list)
    expected_impact: ExpectedImpact = field(default_factory=ExpectedImpact)
    # Excluded from equality so repeated calls compare equal
    generated_at: datetime | None = field(default=None, compare=False)

    @classmethod
    def not_found(cls) -> "PricingRecommendation":
        return cls(
            product_id=0,
            current_price=0.0,
            recommended_price=0.0,
            price_difference=0.0,
            percentage_change=0.0,
        )

    @property
    def is_found(self) -> bool:
        return self.product_id != 0


class PriceAnalysis(NamedTuple):
    product_id: int
    current_price: float
    optimal_price: float
    price_difference: float


@dataclass(frozen=True)
class PriceUpdateSuggestion:
    """A significant price change flagged for the caller to apply."""

    product_id: int
    current_price: float
    new_price: float
    reason: str


@dataclass
class ABTestVariant:
    price: float
    views: int
    conversions: int
    conversion_rate: float = 0.0
    revenue: float = 0.0


@dataclass
class ABTestResult:
    product_id: int
    variant_a: ABTestVariant
    variant_b: ABTestVariant
    winner: str
    confidence: float
    start_date: datetime | None = None
    end_date: datetime | None = None
    recommendations: list[str] = field(default_factory=list)
