import sys
from datetime import datetime
from pathlib import Path

import pytest

# Ensure project root is on sys.path to allow `import pricing`, `import models`, etc.
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from models.enums import CustomerSegment  # noqa: E402
from models.pricing import PricingContext, Product  # noqa: E402

# Tuesday 10:00, not a holiday: no time-based premiums apply
WEEKDAY_MORNING = datetime(2024, 3, 12, 10, 0)


@pytest.fixture
def weekday_morning() -> datetime:
    return WEEKDAY_MORNING


@pytest.fixture
def base_product() -> Product:
    """Product from the reference pricing scenario (cost 40, base 100)."""
    return Product(
        product_id=1,
        name="Desk Lamp",
        category="Electronics",
        base_price=100.0,
        current_price=100.0,
        cost=40.0,
        min_price=11.0,
        max_price=200.0,
        stock=20,
        rating=3.5,
    )


@pytest.fixture
def neutral_context(weekday_morning) -> PricingContext:
    return PricingContext(
        demand_factor=1.0,
        inventory_level=0.5,
        customer_segment=CustomerSegment.REGULAR,
        as_of=weekday_morning,
    )
