from .reader import (
    MissingColumnsError,
    SheetHeaderError,
    SheetReadError,
    read_product_records,
    read_workbook,
)
from .writer import resolve_output_path, write_prices

__all__ = [
    "MissingColumnsError",
    "SheetHeaderError",
    "SheetReadError",
    "read_product_records",
    "read_workbook",
    "resolve_output_path",
    "write_prices",
]
