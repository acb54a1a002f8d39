"""
Order dataclasses consumed by the pricing engine as recent sales history.
"""

from dataclasses import dataclass, field
from datetime import datetime

from .enums import OrderStatus


@dataclass(frozen=True)
class OrderItem:
    product_id: int
    quantity: int
    unit_price: float
    discount_applied: float = 0.0

    @property
    def total_price(self) -> float:
        return self.unit_price * self.quantity - self.discount_applied


@dataclass
class Order:
    """
    Data model for a customer order.
    """

    order_id: int
    customer_id: int
    order_date: datetime
    items: list[OrderItem] = field(default_factory=list)
    status: OrderStatus = OrderStatus.PENDING

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def total_amount(self) -> float:
        return sum(item.total_price for item in self.items)

    def quantity_of(self, product_id: int) -> int:
        return sum(i.quantity for i in self.items if i.product_id == product_id)
