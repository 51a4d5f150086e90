"""Typed view over one sales order row of a spreadsheet export."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping

from godown.core.dates import normalize_date

UNKNOWN = "Unknown"

# attribute -> spreadsheet column
COLUMNS: dict[str, str] = {
    "order_date": "Order Date",
    "marketplace": "Marketplace Name",
    "order_status": "Order Status",
    "shipping_status": "Shipping Status",
    "payment_mode": "Payment Mode",
    "selling_price": "Selling Price",
    "item_quantity": "Item Quantity",
    "product_name": "Product Name",
    "shipping_state": "Shipping State",
    "category": "Category",
}


def to_number(value: Any) -> float:
    """Parse a spreadsheet number; blanks and junk count as zero."""

    if value is None:
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip().replace(",", "").replace("₹", "").strip()
    if not text:
        return 0.0
    try:
        result = float(text)
    except ValueError:
        return 0.0
    if result != result or result in (float("inf"), float("-inf")):
        return 0.0
    return result


@dataclass(frozen=True, slots=True)
class SalesRecord:
    order_date: str | None = None
    marketplace: str | None = None
    order_status: str | None = None
    shipping_status: str | None = None
    payment_mode: str | None = None
    selling_price: str | None = None
    item_quantity: str | None = None
    product_name: str | None = None
    shipping_state: str | None = None
    category: str | None = None
    extra: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_row(cls, row: Mapping[str, str]) -> "SalesRecord":
        known = {attr: row.get(column) for attr, column in COLUMNS.items()}
        extra = {key: value for key, value in row.items() if key not in COLUMNS.values()}
        return cls(**known, extra=extra)

    @property
    def parsed_order_date(self) -> datetime | None:
        return normalize_date(self.order_date)

    @property
    def revenue(self) -> float:
        return to_number(self.selling_price)

    @property
    def quantity(self) -> float:
        return to_number(self.item_quantity)

    def label(self, attribute: str) -> str:
        """Categorical value of ``attribute`` with blanks mapped to ``Unknown``."""

        value = getattr(self, attribute)
        if value is None or not str(value).strip():
            return UNKNOWN
        return str(value).strip()
