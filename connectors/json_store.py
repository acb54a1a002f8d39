"""
Module: connectors.json_store

Loads pricing inputs (products, rules, competitor prices, orders) from flat
JSON files in a data directory. Each file holds a JSON array of records.
"""

import json
import logging
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from models.api import CompetitorPriceRecord, OrderRecord, PricingRuleRecord, ProductRecord
from models.orders import Order
from models.pricing import CompetitorPrice, PricingRule, Product

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


class JsonPricingStore:
    """
    Read-only JSON data source.

    With ``strict=True`` (default) an invalid record raises
    ``pydantic.ValidationError``; otherwise it is logged and skipped.
    Missing or unparsable files always raise.
    """

    PRODUCTS_FILE = "products.json"
    RULES_FILE = "pricing_rules.json"
    COMPETITOR_PRICES_FILE = "competitor_prices.json"
    ORDERS_FILE = "orders.json"

    def __init__(self, data_dir: str | Path, strict: bool = True):
        self.data_dir = Path(data_dir)
        self.strict = strict

    def _read(self, filename: str) -> list[dict]:
        path = self.data_dir / filename
        with path.open(encoding="utf-8") as fh:
            payload = json.load(fh)
        if not isinstance(payload, list):
            raise ValueError(f"{path} must contain a JSON array, got {type(payload).__name__}")
        return payload

    def _load(self, filename: str, record_type: type[RecordT]) -> list[RecordT]:
        records = []
        for index, raw in enumerate(self._read(filename)):
            try:
                records.append(record_type.model_validate(raw))
            except ValidationError as e:
                if self.strict:
                    raise
                logger.warning(f"Skipping invalid record {index} in {filename}: {e}")
        logger.info(f"Loaded {len(records)} records from {filename}")
        return records

    def load_products(self) -> list[Product]:
        return [r.to_domain() for r in self._load(self.PRODUCTS_FILE, ProductRecord)]

    def load_rules(self) -> list[PricingRule]:
        return [r.to_domain() for r in self._load(self.RULES_FILE, PricingRuleRecord)]

    def load_competitor_prices(self) -> list[CompetitorPrice]:
        return [
            r.to_domain()
            for r in self._load(self.COMPETITOR_PRICES_FILE, CompetitorPriceRecord)
        ]

    def load_orders(self) -> list[Order]:
        return [r.to_domain() for r in self._load(self.ORDERS_FILE, OrderRecord)]
