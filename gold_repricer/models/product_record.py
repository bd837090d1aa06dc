from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

"""Product rows read from the marketplace inventory export."""

__all__ = [
    "ProductRecord",
    "normalize_product_id",
]


def normalize_product_id(value: Any) -> str | None:
    """Canonical string key for a product id cell.

    pandas turns integer ids into floats when the column has blanks, so
    ``123.0`` and ``123`` map to the same key. Blank cells yield None.
    """
    if value is None:
        return None
    if isinstance(value, float):
        if math.isnan(value):
            return None
        if value.is_integer():
            return str(int(value))
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class ProductRecord:
    """One inventory row.

    row_number is the 1-based worksheet row, kept for error reporting.
    old_price is None when the export has no (numeric) price for the row.
    """
    row_number: int
    product_id: str
    title: str | None
    old_price: int | None = None
