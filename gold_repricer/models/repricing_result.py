from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .price_change import PriceChange
from .product_record import ProductRecord

"""Aggregated result of one repricing pass over a spreadsheet snapshot."""


@dataclass(frozen=True)
class RepricingResult:
    """Everything the CLI needs for the report, the write back and SUMMARY.

    skipped holds rows without a usable weight (expected, not errors);
    invalid_rows counts rows rejected by pricing input validation.
    """
    spot_price: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    changes: list[PriceChange] = field(default_factory=list)
    skipped: list[ProductRecord] = field(default_factory=list)
    invalid_rows: int = 0

    @property
    def total_rows(self) -> int:
        return len(self.changes) + len(self.skipped) + self.invalid_rows

    @property
    def new_prices(self) -> dict[str, int]:
        """product id -> new price (later rows win for duplicate ids)."""
        return {c.product_id: c.new_price for c in self.changes}
