"""
Module: connectors.in_memory

In-memory catalog and order history collaborators for the pricing engine.
"""

import logging
from datetime import datetime, timedelta

from models.orders import Order
from models.pricing import Product

logger = logging.getLogger(__name__)


class InMemoryCatalog:
    """
    Product catalog keyed by product id.
    """

    def __init__(self, products: list[Product] | None = None):
        self._products: dict[int, Product] = {}
        for product in products or []:
            self.add(product)

    def add(self, product: Product) -> None:
        if product.product_id in self._products:
            logger.warning(f"Catalog: replacing product {product.product_id}.")
        self._products[product.product_id] = product

    def get_product(self, product_id: int) -> Product | None:
        """Get a product by id, or None when unknown."""
        return self._products.get(product_id)

    def all_products(self) -> list[Product]:
        return list(self._products.values())

    def by_category(self, category: str) -> list[Product]:
        wanted = category.lower()
        return [p for p in self._products.values() if p.category.lower() == wanted]

    def __len__(self) -> int:
        return len(self._products)


class InMemoryOrderHistory:
    """
    Order history with a recent-window query.
    """

    def __init__(self, orders: list[Order] | None = None):
        self._orders: list[Order] = list(orders or [])

    def add(self, order: Order) -> None:
        self._orders.append(order)

    def recent_orders(self, as_of: datetime | None = None, days: int = 30) -> list[Order]:
        """Orders placed in the ``days`` before ``as_of`` (inclusive)."""
        end = as_of or datetime.now()
        start = end - timedelta(days=days)
        return [o for o in self._orders if start <= o.order_date <= end]

    def orders_for_product(self, product_id: int) -> list[Order]:
        return [o for o in self._orders if o.quantity_of(product_id) > 0]
