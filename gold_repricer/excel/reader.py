from __future__ import annotations

import math
import zipfile
from pathlib import Path
from typing import Any

import pandas as pd
from openpyxl.utils.exceptions import InvalidFileException

from ..models.config_models import SpreadsheetColumns
from ..models.product_record import ProductRecord, normalize_product_id

"""Inventory export reader.

The marketplace export is a single-sheet workbook whose header row is not
guaranteed to be the first row, so the header is located by scanning for the
id column header. Rows below the header become ProductRecords; rows without a
product id (blank or trailing rows) are dropped.
"""


# what pandas/openpyxl raise for files that are not readable workbooks
UNREADABLE_WORKBOOK_ERRORS = (ValueError, OSError, zipfile.BadZipFile, InvalidFileException)


class SheetReadError(Exception):
    """Raised when a file cannot be opened as an excel workbook."""


class SheetHeaderError(Exception):
    """Raised when no header row containing the id column exists."""

class MissingColumnsError(Exception):
    """Raised when expected columns are missing in the sheet header."""


def read_workbook(path: Path, sheet: int | str = 0) -> pd.DataFrame:
    """Read one sheet raw (no header inference, object dtype).

    Parameters
    ----------
    path: Excel file path
    sheet: sheet index or name, first sheet by default
    """
    try:
        xls = pd.ExcelFile(path)
        name = xls.sheet_names[sheet] if isinstance(sheet, int) else sheet
        return xls.parse(name, header=None, dtype=object)
    except UNREADABLE_WORKBOOK_ERRORS as e:
        raise SheetReadError(f"cannot read workbook {path.name}: {e}") from e


def _cell_text(value: Any) -> str:
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return ""
    return str(value).strip()


def locate_header(df: pd.DataFrame, id_column: str) -> int:
    """Return the positional index of the row holding ``id_column``."""
    for pos in range(df.shape[0]):
        if any(_cell_text(v) == id_column for v in df.iloc[pos].tolist()):
            return pos
    raise SheetHeaderError(f"no header row with column '{id_column}'")


def coerce_price(value: Any) -> int | None:
    """Parse a price cell; thousands separators allowed, junk yields None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
            return None
        return int(round(value))
    text = str(value).strip().replace(",", "").replace("٬", "")
    if not text:
        return None
    try:
        return int(round(float(text)))
    except ValueError:
        return None


def records_from_frame(df: pd.DataFrame, columns: SpreadsheetColumns) -> list[ProductRecord]:
    """Normalize a raw sheet into ProductRecords.

    Steps:
    1. Locate the header row by the id column header
    2. Validate id and title columns exist (price column optional for reading)
    3. Convert every following row that carries a product id
    """
    header_pos = locate_header(df, columns.id_column)
    header = [_cell_text(v) for v in df.iloc[header_pos].tolist()]

    missing = {columns.id_column, columns.title_column} - set(header)
    if missing:
        raise MissingColumnsError(f"missing columns: {sorted(missing)}")

    id_idx = header.index(columns.id_column)
    title_idx = header.index(columns.title_column)
    price_idx = header.index(columns.price_column) if columns.price_column in header else None

    records: list[ProductRecord] = []
    for pos in range(header_pos + 1, df.shape[0]):
        raw = df.iloc[pos].tolist()
        product_id = normalize_product_id(raw[id_idx])
        if product_id is None:
            continue
        title = raw[title_idx]
        records.append(
            ProductRecord(
                row_number=int(df.index[pos]) + 1,  # worksheet rows are 1-based
                product_id=product_id,
                title=title if isinstance(title, str) else None,
                old_price=coerce_price(raw[price_idx]) if price_idx is not None else None,
            )
        )
    return records


def read_product_records(path: Path, columns: SpreadsheetColumns) -> list[ProductRecord]:
    """Read the inventory export at ``path`` into ProductRecords.

    Raises:
        SheetReadError: Not a readable workbook
        SheetHeaderError: No header row found
        MissingColumnsError: id or title column absent
    """
    return records_from_frame(read_workbook(path), columns)
