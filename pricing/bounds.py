"""
Price corridor enforcement.

Every price that leaves the engine passes through ``enforce_bounds``: clamp
into ``[min_price, max_price]``, then round half-up to cents.
"""

from decimal import ROUND_CEILING, ROUND_FLOOR, ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


def round_price(value: float, rounding: str = ROUND_HALF_UP) -> float:
    """Round to currency precision (half-up unless told otherwise)."""
    return float(Decimal(str(value)).quantize(CENT, rounding=rounding))


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def enforce_bounds(price: float, min_price: float, max_price: float) -> float:
    """Clamp into the corridor and round, never leaving the corridor."""
    clamped = clamp(price, min_price, max_price)
    rounded = round_price(clamped)
    # Sub-cent bounds: round inward instead of past the bound
    if rounded > max_price:
        rounded = round_price(max_price, ROUND_FLOOR)
    if rounded < min_price:
        rounded = round_price(min_price, ROUND_CEILING)
    if not min_price <= rounded <= max_price:
        # No whole cent inside the corridor
        return clamped
    return rounded
