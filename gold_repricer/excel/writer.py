from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

import openpyxl

from ..models.config_models import SpreadsheetColumns
from ..models.product_record import normalize_product_id
from .reader import UNREADABLE_WORKBOOK_ERRORS, MissingColumnsError, SheetHeaderError, SheetReadError

"""Write recalculated prices back into a copy of the inventory export.

The workbook is edited in place with openpyxl so everything except the price
cells (other columns, extra sheets) is carried over as is, then saved under a
new name. pandas is only used for reading because a DataFrame round trip
would rebuild the sheet from scratch.
"""

__all__ = [
    "resolve_output_path",
    "write_prices",
]

logger = logging.getLogger(__name__)

XLSX_SUFFIX = ".xlsx"


def resolve_output_path(name: str, directory: Path) -> Path:
    """Output path for ``name`` inside ``directory``, forcing ``.xlsx``."""
    filename = name if name.lower().endswith(XLSX_SUFFIX) else f"{name}{XLSX_SUFFIX}"
    return directory / filename


def _find_header(ws, columns: SpreadsheetColumns) -> tuple[int, dict[str, int]]:
    """Return (header row, header text -> column index) of the id header row."""
    for row in ws.iter_rows():
        texts = {
            str(cell.value).strip(): cell.column
            for cell in row
            if cell.value is not None
        }
        if columns.id_column in texts:
            return row[0].row, texts
    raise SheetHeaderError(f"no header row with column '{columns.id_column}'")


def write_prices(
    source: Path,
    destination: Path,
    new_prices: Mapping[str, int],
    columns: SpreadsheetColumns,
) -> int:
    """Copy ``source`` to ``destination`` with updated price cells.

    Args:
        source: Inventory export as downloaded
        destination: Path of the workbook to create
        new_prices: product id -> new price
        columns: Header names; the buy-box column is updated when present

    Returns:
        Number of rows whose price was written

    Raises:
        SheetReadError: Source is not a readable workbook
        SheetHeaderError: No id header row
        MissingColumnsError: The price column is absent
    """
    try:
        wb = openpyxl.load_workbook(source)
    except UNREADABLE_WORKBOOK_ERRORS as e:
        raise SheetReadError(f"cannot read workbook {source.name}: {e}") from e
    ws = wb.worksheets[0]

    header_row, header = _find_header(ws, columns)
    if columns.price_column not in header:
        raise MissingColumnsError(f"missing columns: ['{columns.price_column}']")
    id_col = header[columns.id_column]
    price_col = header[columns.price_column]
    buy_box_col = header.get(columns.buy_box_price_column) if columns.buy_box_price_column else None

    updated = 0
    for row_idx in range(header_row + 1, ws.max_row + 1):
        product_id = normalize_product_id(ws.cell(row=row_idx, column=id_col).value)
        if product_id is None or product_id not in new_prices:
            continue
        price = new_prices[product_id]
        ws.cell(row=row_idx, column=price_col).value = price
        if buy_box_col is not None:
            ws.cell(row=row_idx, column=buy_box_col).value = price
        updated += 1

    destination.parent.mkdir(parents=True, exist_ok=True)
    wb.save(destination)
    logger.debug(f"wrote {updated} prices to {destination}")
    return updated
