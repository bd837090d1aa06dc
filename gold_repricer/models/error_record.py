from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import datetime, timezone

"""ErrorRecord model for the repricing error log.

Rows the repricer rejects (invalid pricing input) and file-level failures are
recorded as JSON Lines. Rows skipped because their title declares no weight
are an expected outcome and are never recorded here.

Use row=-1 for file-level errors where no spreadsheet row applies.
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: Spreadsheet filename being processed
        sheet: Sheet name within the file
        row: Row number (1-based). -1 for file-level errors
        product_id: Marketplace product id, empty when unknown
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: Human readable description
    """
    timestamp: str
    file: str
    sheet: str
    row: int
    product_id: str
    error_type: str
    message: str

    @staticmethod
    def create(
        file: str,
        sheet: str,
        row: int,
        error_type: str,
        message: str,
        product_id: str = "",
    ) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            sheet=sheet,
            row=row,
            product_id=product_id,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        # asdict keeps the key set fixed to the dataclass fields
        return json.dumps(asdict(self), ensure_ascii=False)
