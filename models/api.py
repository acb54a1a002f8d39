"""
Boundary records for data entering the pricing engine (JSON files, API
payloads). Validation happens here so that malformed input fails loudly
before it reaches the engine, which only sees the domain dataclasses.
"""

import re
from datetime import datetime
from decimal import ROUND_CEILING, Decimal

from pydantic import BaseModel, Field, field_validator, model_validator

from .enums import CustomerSegment, OrderStatus
from .orders import Order, OrderItem
from .pricing import CompetitorPrice, PriceHistoryEntry, PricingContext, PricingRule, Product


def _snake_case(value: str) -> str:
    """'InventoryBased' / 'inventory-based' -> 'inventory_based'."""
    value = re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", value.strip())
    return value.replace("-", "_").replace(" ", "_").lower()


class PriceHistoryRecord(BaseModel):
    changed_at: datetime
    old_price: float = Field(ge=0)
    new_price: float = Field(ge=0)
    reason: str = ""

    def to_domain(self) -> PriceHistoryEntry:
        return PriceHistoryEntry(**self.model_dump())


class ProductRecord(BaseModel):
    # 0 is reserved for the not-found recommendation
    product_id: int = Field(gt=0)
    name: str = ""
    category: str
    base_price: float = Field(ge=0)
    current_price: float = Field(ge=0)
    cost: float = Field(ge=0)
    min_price: float = Field(ge=0)
    max_price: float = Field(ge=0)
    stock: int = Field(default=0, ge=0)
    demand_score: float = Field(default=1.0, ge=0)
    seasonality_factor: float = Field(default=1.0, gt=0)
    brand: str = ""
    rating: float = Field(default=0.0, ge=0, le=5)
    sales_count: int = Field(default=0, ge=0)
    price_history: list[PriceHistoryRecord] = []

    @model_validator(mode="after")
    def check_corridor(self) -> "ProductRecord":
        if self.min_price > self.max_price:
            raise ValueError(
                f"min_price {self.min_price} exceeds max_price {self.max_price}"
            )
        lowest_cent = Decimal(str(self.min_price)).quantize(Decimal("0.01"), rounding=ROUND_CEILING)
        if lowest_cent > Decimal(str(self.max_price)):
            raise ValueError(
                f"price corridor [{self.min_price}, {self.max_price}] contains no whole cent"
            )
        return self

    def to_domain(self) -> Product:
        data = self.model_dump(exclude={"price_history"})
        return Product(**data, price_history=[h.to_domain() for h in self.price_history])


class PricingRuleRecord(BaseModel):
    rule_id: int
    rule_type: str
    name: str = ""
    is_active: bool = True
    priority: int = 1
    min_multiplier: float = Field(default=0.8, gt=0)
    max_multiplier: float = Field(default=1.5, gt=0)
    applicable_categories: list[str] = []
    description: str = ""

    @field_validator("rule_type", mode="before")
    @classmethod
    def normalise_rule_type(cls, value):
        if not isinstance(value, str):
            raise ValueError("rule_type must be a string")
        return _snake_case(value)

    @field_validator("applicable_categories", mode="before")
    @classmethod
    def split_categories(cls, value):
        # Accept the comma-separated form used by older rule files
        if isinstance(value, str):
            return [c.strip() for c in value.split(",") if c.strip()]
        return value

    @model_validator(mode="after")
    def check_multipliers(self) -> "PricingRuleRecord":
        if self.min_multiplier > self.max_multiplier:
            raise ValueError(
                f"min_multiplier {self.min_multiplier} exceeds max_multiplier {self.max_multiplier}"
            )
        return self

    def to_domain(self) -> PricingRule:
        data = self.model_dump()
        data["applicable_categories"] = tuple(data["applicable_categories"])
        return PricingRule(**data)


class CompetitorPriceRecord(BaseModel):
    competitor_id: int
    product_name: str = ""
    category: str
    price: float = Field(ge=0)
    recorded_at: datetime | None = None
    is_available: bool = True
    source: str = ""

    def to_domain(self) -> CompetitorPrice:
        return CompetitorPrice(**self.model_dump())


class OrderItemRecord(BaseModel):
    product_id: int
    quantity: int = Field(ge=0)
    unit_price: float = Field(ge=0)
    discount_applied: float = Field(default=0.0, ge=0)


class OrderRecord(BaseModel):
    order_id: int
    customer_id: int
    order_date: datetime
    items: list[OrderItemRecord] = []
    status: OrderStatus = OrderStatus.PENDING

    def to_domain(self) -> Order:
        return Order(
            order_id=self.order_id,
            customer_id=self.customer_id,
            order_date=self.order_date,
            items=[OrderItem(**item.model_dump()) for item in self.items],
            status=self.status,
        )


class PricingContextRecord(BaseModel):
    """Request-side pricing signals."""

    demand_factor: float = Field(default=1.0, ge=0)
    inventory_level: float = Field(default=0.5, ge=0)
    is_seasonal_period: bool = False
    season: str = ""
    customer_segment: CustomerSegment | None = None
    competitor_prices: list[float] = []
    loyalty_discount: float = Field(default=0.0, ge=0, le=1)
    as_of: datetime | None = None

    def to_domain(self) -> PricingContext:
        data = self.model_dump()
        data["competitor_prices"] = tuple(data["competitor_prices"])
        return PricingContext(**data)
