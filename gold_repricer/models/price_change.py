from __future__ import annotations

from dataclasses import dataclass

"""PriceChange model: one repriced product and its diff against the export.

Diff reporting is presentation only; nothing in the pricing core depends on
old prices.
"""

__all__ = [
    "PriceChange",
]


@dataclass(frozen=True)
class PriceChange:
    product_id: str
    title: str
    weight: float
    labor_percentage: float
    tax_percentage: float
    new_price: int
    old_price: int | None = None

    @property
    def diff(self) -> int | None:
        if self.old_price is None:
            return None
        return self.new_price - self.old_price

    @property
    def diff_percent(self) -> float:
        """Relative change in percent; 0 when there is no usable old price."""
        if not self.old_price:
            return 0.0
        return (self.new_price - self.old_price) / self.old_price * 100

    def render(self) -> list[str]:
        """Human readable report lines for this change."""
        lines = [
            self.title,
            f"   weight: {self.weight:g} g",
            f"   labor: {self.labor_percentage:g}%",
            f"   tax: {self.tax_percentage:g}%",
        ]
        if self.old_price is None:
            lines.append(f"   new price: {self.new_price:,}")
            return lines
        diff = self.new_price - self.old_price
        sign = "+" if diff >= 0 else ""
        lines.append(f"   old price: {self.old_price:,}")
        lines.append(f"   new price: {self.new_price:,}")
        lines.append(f"   change: {sign}{diff:,} ({sign}{self.diff_percent:.1f}%)")
        return lines
