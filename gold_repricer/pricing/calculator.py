from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from numbers import Real
from typing import Any

"""Retail price calculation for gold products.

The price is built up in a fixed compounding order:

    base      = weight * gold_price_per_gram
    labor     = base * labor% / 100
    profit    = (base + labor) * profit% / 100
    subtotal  = base + labor + profit
    tax       = subtotal * tax% / 100            (TaxBase.FULL)
              = (labor + profit) * tax% / 100    (TaxBase.LABOR_AND_PROFIT_ONLY)
    total     = subtotal + tax

and rounded half away from zero to a whole currency unit. An optional market
adjustment scales the spot price before step one.

``calculate_price`` is pure and performs no validation; use
``validate_pricing_input`` at the boundary where values come from config,
spreadsheets or HTTP responses.
"""

__all__ = [
    "TaxBase",
    "PricingInput",
    "InvalidInputError",
    "calculate_price",
    "round_currency",
    "validate_pricing_input",
]


class TaxBase(str, Enum):
    """Amount the tax percentage is levied on."""

    FULL = "full"  # base + labor + profit
    LABOR_AND_PROFIT_ONLY = "labor_and_profit_only"  # gold value is tax exempt


class InvalidInputError(ValueError):
    """Raised by boundary validation when a pricing input is unusable."""

    error_kind = "INVALID_INPUT"

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field


@dataclass(frozen=True)
class PricingInput:
    """All inputs of a single price calculation.

    Percentages are whole numbers (23 means 23%).
    """

    weight: float
    gold_price_per_gram: float
    labor_percentage: float
    shop_profit_percentage: float
    tax_percentage: float
    market_adjustment_percentage: float = 0
    tax_base: TaxBase = TaxBase.FULL


def round_currency(amount: float) -> int:
    """Round to the nearest whole unit, ties away from zero.

    ``Decimal(float)`` is exact, so ties are judged on the float's real value.
    """
    return int(Decimal(amount).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def calculate_price(pricing_input: PricingInput) -> int:
    """Compute the final retail price as an integer.

    Args:
        pricing_input: Weight, spot price and percentages.

    Returns:
        Rounded total price. Zero weight yields 0.
    """
    gold_price = pricing_input.gold_price_per_gram
    if pricing_input.market_adjustment_percentage:
        gold_price = gold_price * (1 + pricing_input.market_adjustment_percentage / 100)

    base_price = pricing_input.weight * gold_price
    labor_cost = base_price * (pricing_input.labor_percentage / 100)
    profit_base = base_price + labor_cost
    shop_profit = profit_base * (pricing_input.shop_profit_percentage / 100)
    subtotal_with_profit = profit_base + shop_profit

    if pricing_input.tax_base is TaxBase.LABOR_AND_PROFIT_ONLY:
        taxable = labor_cost + shop_profit
    else:
        taxable = subtotal_with_profit
    tax = taxable * (pricing_input.tax_percentage / 100)

    return round_currency(subtotal_with_profit + tax)


def _require_number(field: str, value: Any, *, allow_negative: bool = False) -> float:
    # bool is an int subclass; True as a weight is a caller bug
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidInputError(field, f"expected a number, got {type(value).__name__}")
    if math.isnan(value) or math.isinf(value):
        raise InvalidInputError(field, f"expected a finite number, got {value}")
    if not allow_negative and value < 0:
        raise InvalidInputError(field, f"must not be negative, got {value}")
    return value


def validate_pricing_input(
    *,
    weight: Any,
    gold_price_per_gram: Any,
    labor_percentage: Any,
    shop_profit_percentage: Any,
    tax_percentage: Any,
    market_adjustment_percentage: Any = 0,
    tax_base: TaxBase | str = TaxBase.FULL,
) -> PricingInput:
    """Build a PricingInput, rejecting values ``calculate_price`` must not see.

    Raises:
        InvalidInputError: If the weight is absent, any value is non-numeric,
            NaN/infinite or negative, the market adjustment is -100% or lower,
            or the tax base is unknown.
    """
    if weight is None:
        raise InvalidInputError("weight", "weight is required")

    adjustment = _require_number(
        "market_adjustment_percentage", market_adjustment_percentage, allow_negative=True
    )
    if adjustment <= -100:
        raise InvalidInputError(
            "market_adjustment_percentage", f"must be greater than -100, got {adjustment}"
        )

    try:
        resolved_tax_base = TaxBase(tax_base)
    except ValueError as e:
        raise InvalidInputError("tax_base", f"unknown tax base {tax_base!r}") from e

    return PricingInput(
        weight=_require_number("weight", weight),
        gold_price_per_gram=_require_number("gold_price_per_gram", gold_price_per_gram),
        labor_percentage=_require_number("labor_percentage", labor_percentage),
        shop_profit_percentage=_require_number("shop_profit_percentage", shop_profit_percentage),
        tax_percentage=_require_number("tax_percentage", tax_percentage),
        market_adjustment_percentage=adjustment,
        tax_base=resolved_tax_base,
    )
