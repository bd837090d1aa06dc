from __future__ import annotations

import re
from typing import Any

"""Weight extraction from free-text product titles.

Marketplace titles declare the gold weight inline, e.g.
``"انگشتر طلا ۱۸ عیار 2.5 گرم"``. The weight is the first number that is
immediately followed (after optional whitespace) by the gram unit token.

Extraction is purely syntactic: a title without a declared weight yields
``None`` (a normal outcome, callers skip the row) and a declared zero weight
is returned as ``0.0``.
"""

__all__ = [
    "GRAM_UNIT",
    "extract_weight",
]

GRAM_UNIT = "گرم"

# Decimal separators seen in titles: ASCII period/comma, the Arabic
# decimal separator (U+066B) and the Arabic comma (U+060C). \d also matches Persian/Arabic-Indic digits.
_DECIMAL_SEPARATORS = ",٫،"
_WEIGHT_PATTERN = re.compile(rf"(\d+[.{_DECIMAL_SEPARATORS}]?\d*)\s*{GRAM_UNIT}")


def extract_weight(title: Any) -> float | None:
    """Return the weight in grams declared in ``title``, or ``None``.

    Args:
        title: Product title. Non-string values (empty spreadsheet cells)
            are treated as titles without a weight.

    Returns:
        Parsed weight as float, or None when no ``<number> گرم`` expression
        is present.
    """
    if not isinstance(title, str):
        return None
    match = _WEIGHT_PATTERN.search(title)
    if match is None:
        return None
    numeral = match.group(1)
    for sep in _DECIMAL_SEPARATORS:
        numeral = numeral.replace(sep, ".")
    return float(numeral)
