"""Pricing core: weight extraction and retail price calculation.

Both functions are pure and safe to call per row in any order.
"""

from .calculator import (
    InvalidInputError,
    PricingInput,
    TaxBase,
    calculate_price,
    round_currency,
    validate_pricing_input,
)
from .weight import GRAM_UNIT, extract_weight

__all__ = [
    "GRAM_UNIT",
    "InvalidInputError",
    "PricingInput",
    "TaxBase",
    "calculate_price",
    "extract_weight",
    "round_currency",
    "validate_pricing_input",
]
