"""Order-history analytics that feed pricing contexts and reports."""

import logging
from collections import defaultdict
from datetime import datetime, timedelta

import numpy as np

from config.config import PricingEngineConfig
from models.enums import OrderStatus
from models.orders import Order
from models.pricing import PricingContext, Product

from .bounds import clamp

logger = logging.getLogger(__name__)

DEFAULT_ELASTICITY = -1.0


def _counted(orders: list[Order], since: datetime | None = None) -> list[Order]:
    return [
        o
        for o in orders
        if o.status != OrderStatus.CANCELLED and (since is None or o.order_date >= since)
    ]


def units_sold(product_id: int, orders: list[Order], since: datetime | None = None) -> int:
    """Units of a product sold in non-cancelled orders, optionally since a date."""
    return sum(o.quantity_of(product_id) for o in _counted(orders, since))


def stock_pressure(stock: int) -> float:
    # Scarcer stock -> higher pressure
    return clamp(50.0 / max(1, stock), 0.1, 2.0)


def supply_demand_factor(
    product: Product, orders: list[Order], as_of: datetime, window_days: int = 30
) -> float:
    sold = units_sold(product.product_id, orders, as_of - timedelta(days=window_days))
    demand = clamp(sold / 10.0, 0.5, 2.0)
    return (demand + stock_pressure(product.stock)) / 2


def context_from_orders(
    product: Product,
    orders: list[Order],
    as_of: datetime,
    config: PricingEngineConfig | None = None,
    **overrides,
) -> PricingContext:
    """
    Derive a PricingContext for callers that have order history but no
    explicit market signals.
    """
    config = config or PricingEngineConfig()
    fields = {
        "demand_factor": supply_demand_factor(
            product, orders, as_of, config.sales_window_days
        ),
        "inventory_level": product.stock / config.inventory_capacity,
        "as_of": as_of,
    }
    fields.update(overrides)
    return PricingContext(**fields)


def estimate_price_elasticity(product_id: int, orders: list[Order]) -> float:
    """
    Arc elasticity between the lowest and highest observed unit prices.
    Returns -1.0 when fewer than two price points exist or prices barely moved.
    """
    quantity_by_price: dict[float, int] = defaultdict(int)
    for order in _counted(orders):
        for item in order.items:
            if item.product_id == product_id:
                quantity_by_price[item.unit_price] += item.quantity
    if len(quantity_by_price) < 2:
        return DEFAULT_ELASTICITY

    low_price, high_price = min(quantity_by_price), max(quantity_by_price)
    low_qty, high_qty = quantity_by_price[low_price], quantity_by_price[high_price]
    price_change = (high_price - low_price) / low_price if low_price else 0.0
    if abs(price_change) < 0.001 or low_qty == 0:
        return DEFAULT_ELASTICITY
    quantity_change = (high_qty - low_qty) / low_qty
    return quantity_change / price_change


def daily_units(product_id: int, orders: list[Order], since: datetime) -> list[int]:
    """Units per calendar day with sales, in date order."""
    per_day: dict = defaultdict(int)
    for order in _counted(orders, since):
        qty = order.quantity_of(product_id)
        if qty:
            per_day[order.order_date.date()] += qty
    return [per_day[day] for day in sorted(per_day)]


def sales_trend(values: list[float]) -> float:
    """Least-squares slope normalised by the mean."""
    if len(values) < 2:
        return 0.0
    series = np.asarray(values, dtype=float)
    mean = series.mean()
    if mean == 0:
        return 0.0
    slope = np.polyfit(np.arange(len(series)), series, 1)[0]
    return float(slope / mean)


def forecast_demand(
    product: Product,
    orders: list[Order],
    as_of: datetime,
    forecast_days: int = 30,
    history_days: int = 90,
) -> float:
    daily = daily_units(product.product_id, orders, as_of - timedelta(days=history_days))
    if len(daily) < 7:
        logger.debug(
            f"Only {len(daily)} sale days for product {product.product_id}, using sales count"
        )
        return product.sales_count * 0.1
    recent_average = float(np.mean(daily[-14:]))
    return max(0.0, recent_average * forecast_days * (1 + sales_trend(daily)))
