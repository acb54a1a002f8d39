"""
Signal providers for the pricing engine.

Each provider turns a product and a pricing context into one candidate price
and a human-readable reason. Providers are stateless: the reason travels with
the price in a ``SignalResult`` instead of being kept on the instance.
Every candidate is clamped into the product's price corridor and rounded.
"""

import logging
from datetime import date, datetime

from config.config import PricingEngineConfig
from models.enums import CustomerSegment
from models.pricing import CompetitorPrice, PricingContext, Product, SignalResult

from .bounds import enforce_bounds

logger = logging.getLogger(__name__)

WEEKEND_PREMIUM = 1.1
PEAK_HOUR_PREMIUM = 1.05
PEAK_HOURS = range(18, 22)  # 18:00 through 21:59
HOLIDAY_PREMIUM = 1.15

SEGMENT_MULTIPLIERS = {
    CustomerSegment.VIP: 1.20,
    CustomerSegment.PREMIUM: 1.15,
    CustomerSegment.REGULAR: 1.00,
    CustomerSegment.NEW: 0.95,
    CustomerSegment.CHURNED: 0.90,
    CustomerSegment.AT_RISK: 0.90,
}

BRAND_PREMIUMS = {
    "apple": 1.10,
    "samsung": 1.10,
    "nike": 1.10,
    "sony": 1.10,
    "premium": 1.15,
    "luxury": 1.15,
}

# Month -> multiplier, per category; unknown categories and months use 1.0
SEASONAL_TABLES: dict[str, dict[int, float]] = {
    "clothing": {
        **dict.fromkeys((3, 4, 5), 1.1),
        **dict.fromkeys((6, 7, 8), 0.9),
        **dict.fromkeys((9, 10, 11), 1.2),
        **dict.fromkeys((12, 1, 2), 1.3),
    },
    "toys": {
        **dict.fromkeys(range(1, 13), 0.8),
        **dict.fromkeys((6, 7, 8), 1.2),
        **dict.fromkeys((11, 12), 1.5),
    },
    "sports": {
        **dict.fromkeys(range(1, 13), 0.9),
        **dict.fromkeys((3, 4, 5), 1.3),
        **dict.fromkeys((6, 7, 8), 1.4),
        **dict.fromkeys((9, 10, 11), 1.2),
    },
    "home & garden": {
        **dict.fromkeys(range(1, 13), 0.8),
        **dict.fromkeys((3, 4, 5), 1.4),
        **dict.fromkeys((6, 7, 8), 1.2),
    },
}


def is_holiday(day: date) -> bool:
    """Fixed-date holidays plus Thanksgiving (the Thursday of Nov 22-28)."""
    if (day.month, day.day) in {(12, 25), (12, 31), (1, 1), (7, 4)}:
        return True
    return day.month == 11 and 22 <= day.day <= 28 and day.weekday() == 3


def time_multiplier(when: datetime) -> float:
    multiplier = 1.0
    if when.weekday() >= 5:
        multiplier *= WEEKEND_PREMIUM
    if when.hour in PEAK_HOURS:
        multiplier *= PEAK_HOUR_PREMIUM
    if is_holiday(when.date()):
        multiplier *= HOLIDAY_PREMIUM
    return multiplier


def seasonal_multiplier(category: str, month: int) -> float:
    return SEASONAL_TABLES.get(category.lower(), {}).get(month, 1.0)


def segment_multiplier(segment: CustomerSegment | None) -> float:
    if segment is None:
        return 1.0
    return SEGMENT_MULTIPLIERS.get(segment, 1.0)


def brand_multiplier(brand: str) -> float:
    return BRAND_PREMIUMS.get(brand.strip().lower(), 1.0)


def rating_multiplier(rating: float) -> float:
    if rating >= 4.5:
        return 1.05
    if rating >= 4.0:
        return 1.02
    if rating >= 3.5:
        return 1.0
    return 0.95


def competitor_price_points(
    product: Product,
    context: PricingContext,
    competitor_prices: list[CompetitorPrice] | None = None,
) -> list[float]:
    """
    Collect every competitor price relevant to the product: raw prices and
    competitor products from the context, plus available competitor price
    records for the product's category.
    """
    points = [float(p) for p in context.competitor_prices]
    points.extend(p.current_price for p in context.competitor_products)
    category = product.category.lower()
    points.extend(
        cp.price
        for cp in competitor_prices or []
        if cp.is_available and cp.category.lower() == category
    )
    return points


class SignalProvider:
    """Base class for a single pricing signal."""

    name: str = ""

    def compute(self, product: Product, context: PricingContext) -> SignalResult:
        raise NotImplementedError

    def _result(self, product: Product, price: float, reason: str) -> SignalResult:
        bounded = enforce_bounds(price, product.min_price, product.max_price)
        logger.debug(f"Signal {self.name} for {product.product_id}: {bounded:.2f} ({reason})")
        return SignalResult(price=bounded, reason=reason)


class CostPlusSignal(SignalProvider):
    name = "cost_plus"

    def __init__(self, markup_pct: float = 50.0):
        self.markup_pct = markup_pct

    def compute(self, product: Product, context: PricingContext) -> SignalResult:
        price = product.cost * (1 + self.markup_pct / 100)
        return self._result(
            product, price, f"Cost (${product.cost:.2f}) + {self.markup_pct:g}% markup"
        )


class CompetitorSignal(SignalProvider):
    name = "competitor"

    def __init__(self, discount: float = 0.95, margin_floor: float = 1.1):
        self.discount = discount
        self.margin_floor = margin_floor

    def compute(self, product: Product, context: PricingContext) -> SignalResult:
        prices = list(context.competitor_prices) + [
            p.current_price for p in context.competitor_products
        ]
        if not prices:
            return self._result(
                product, product.base_price, "No competitor data, using base price"
            )
        average = sum(prices) / len(prices)
        price = average * self.discount
        floor = product.cost * self.margin_floor
        if price < floor:
            return self._result(
                product, floor, "Margin protected: competitor price below minimum margin"
            )
        undercut = round((1 - self.discount) * 100)
        return self._result(
            product,
            price,
            f"Priced {undercut}% below average competitor price (${average:.2f})",
        )


class DemandSignal(SignalProvider):
    name = "demand"

    def __init__(
        self,
        low_inventory_level: float = 0.2,
        high_inventory_level: float = 0.8,
        scarcity_premium: float = 1.1,
        clearance_discount: float = 0.9,
        margin_floor: float = 1.05,
    ):
        self.low_inventory_level = low_inventory_level
        self.high_inventory_level = high_inventory_level
        self.scarcity_premium = scarcity_premium
        self.clearance_discount = clearance_discount
        self.margin_floor = margin_floor

    def compute(self, product: Product, context: PricingContext) -> SignalResult:
        factor = context.demand_factor
        price = product.base_price * factor
        if context.inventory_level < self.low_inventory_level:
            price *= self.scarcity_premium
            reason = f"Demand {factor:.2f}x with low inventory - scarcity premium"
        elif context.inventory_level > self.high_inventory_level:
            price *= self.clearance_discount
            reason = f"Demand {factor:.2f}x with high inventory - clearance pricing"
        else:
            reason = f"Demand-adjusted pricing (factor {factor:.2f}x)"

        floor = product.cost * self.margin_floor
        if price < floor:
            price = floor
            reason += " - raised to minimum margin"
        return self._result(product, price, reason)


class ValueSignal(SignalProvider):
    name = "value"

    def compute(self, product: Product, context: PricingContext) -> SignalResult:
        segment = segment_multiplier(context.customer_segment)
        brand = brand_multiplier(product.brand)
        rating = rating_multiplier(product.rating)
        price = product.base_price * segment * brand * rating
        if context.loyalty_discount > 0:
            price *= 1 - context.loyalty_discount
            reason = f"Value-based pricing with {context.loyalty_discount:.0%} loyalty discount"
        else:
            reason = (
                f"Value-based pricing (segment {segment:.2f}x, brand {brand:.2f}x, "
                f"rating {rating:.2f}x)"
            )
        return self._result(product, price, reason)


class TimeSignal(SignalProvider):
    name = "time"

    def compute(self, product: Product, context: PricingContext) -> SignalResult:
        when = context.as_of or datetime.now()
        multiplier = time_multiplier(when)
        return self._result(
            product,
            product.base_price * multiplier,
            f"Time-of-purchase multiplier {multiplier:.4g}x",
        )


class SeasonalSignal(SignalProvider):
    name = "seasonal"

    def compute(self, product: Product, context: PricingContext) -> SignalResult:
        month = (context.as_of or datetime.now()).month
        season = seasonal_multiplier(product.category, month)
        price = product.base_price * season * product.seasonality_factor
        return self._result(
            product,
            price,
            f"Seasonal multiplier {season:.2f}x for {product.category or 'uncategorized'}"
            f" (product factor {product.seasonality_factor:.2f})",
        )


def build_signals(config: PricingEngineConfig) -> list[SignalProvider]:
    """Instantiate the providers named in ``config.signals``, in order."""
    factories = {
        CostPlusSignal.name: lambda: CostPlusSignal(config.cost_plus_markup_pct),
        CompetitorSignal.name: lambda: CompetitorSignal(
            config.competitor_discount, config.competitor_margin_floor
        ),
        DemandSignal.name: lambda: DemandSignal(
            config.low_inventory_level,
            config.high_inventory_level,
            config.scarcity_premium,
            config.clearance_discount,
            config.demand_margin_floor,
        ),
        ValueSignal.name: ValueSignal,
        TimeSignal.name: TimeSignal,
        SeasonalSignal.name: SeasonalSignal,
    }
    unknown = [name for name in config.signals if name not in factories]
    if unknown:
        raise ValueError(f"Unknown pricing signals: {unknown}")
    return [factories[name]() for name in config.signals]
