from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime, timezone

from ..logging.error_log import ErrorLogBuffer
from ..models.config_models import ProductPricingConfig
from ..models.error_record import ErrorRecord
from ..models.price_change import PriceChange
from ..models.product_record import ProductRecord
from ..models.repricing_result import RepricingResult
from ..pricing.calculator import InvalidInputError, calculate_price, validate_pricing_input
from ..pricing.weight import extract_weight
from .progress import RowProgressTracker

"""Repricing orchestration over product records.

For every record:
1. extract the weight from the title (none -> row skipped, not an error)
2. resolve the labor percentage (per product id, default on miss)
3. validate the pricing input at the boundary (invalid -> error log)
4. calculate the new price

Rows are independent of each other; the result does not depend on row order
except for which duplicate id wins in RepricingResult.new_prices.
"""

__all__ = [
    "render_changes",
    "reprice_records",
]

logger = logging.getLogger(__name__)


def reprice_records(
    records: Iterable[ProductRecord],
    spot_price: int,
    pricing: ProductPricingConfig,
    *,
    error_log: ErrorLogBuffer | None = None,
    source_name: str = "",
    sheet_name: str = "",
) -> RepricingResult:
    """Reprice every record against ``spot_price``.

    Args:
        records: Rows read from the inventory export
        spot_price: Gold price per gram
        pricing: Labor mapping, profit/tax percentages and tax base
        error_log: Receives one ErrorRecord per rejected row
        source_name: File name used in error records
        sheet_name: Sheet name used in error records

    Returns:
        RepricingResult with changes, skipped rows and invalid row count
    """
    start_time = datetime.now(timezone.utc)
    records = list(records)

    changes: list[PriceChange] = []
    skipped: list[ProductRecord] = []
    invalid_rows = 0

    with RowProgressTracker(len(records)) as progress:
        for record in records:
            progress.advance(record.product_id)

            weight = extract_weight(record.title)
            # zero weight is a data anomaly; repricing it would list the item for free
            if weight is None or weight == 0:
                logger.debug(f"row {record.row_number}: no weight in title, skipped ({record.product_id})")
                skipped.append(record)
                continue

            labor_percentage = pricing.labor_percentage_for(record.product_id)
            try:
                pricing_input = validate_pricing_input(
                    weight=weight,
                    gold_price_per_gram=spot_price,
                    labor_percentage=labor_percentage,
                    shop_profit_percentage=pricing.shop_profit_percentage,
                    tax_percentage=pricing.tax_percentage,
                    market_adjustment_percentage=pricing.market_adjustment_percentage,
                    tax_base=pricing.tax_base,
                )
            except InvalidInputError as e:
                invalid_rows += 1
                logger.warning(f"row {record.row_number}: {record.product_id} rejected: {e}")
                if error_log is not None:
                    error_log.append(
                        ErrorRecord.create(
                            file=source_name,
                            sheet=sheet_name,
                            row=record.row_number,
                            error_type=InvalidInputError.error_kind,
                            message=str(e),
                            product_id=record.product_id,
                        )
                    )
                continue

            changes.append(
                PriceChange(
                    product_id=record.product_id,
                    title=record.title or "",
                    weight=weight,
                    labor_percentage=labor_percentage,
                    tax_percentage=pricing.tax_percentage,
                    new_price=calculate_price(pricing_input),
                    old_price=record.old_price,
                )
            )

    end_time = datetime.now(timezone.utc)
    return RepricingResult(
        spot_price=spot_price,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        changes=changes,
        skipped=skipped,
        invalid_rows=invalid_rows,
    )


def render_changes(result: RepricingResult) -> list[str]:
    """Report lines for every repriced product, blank line between products."""
    lines: list[str] = []
    for change in result.changes:
        lines.extend(change.render())
        lines.append("")
    return lines
