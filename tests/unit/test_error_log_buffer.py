from __future__ import annotations

import json
from pathlib import Path

from gold_repricer.logging.error_log import ErrorLogBuffer
from gold_repricer.models.error_record import ErrorRecord

"""Unit tests for ErrorRecord and ErrorLogBuffer."""


def test_error_record_row_minus_one_support():
    rec = ErrorRecord.create(
        file="inventory.xlsx",
        sheet="",
        row=-1,  # file-level error
        error_type="UPLOAD_FAILED",
        message="import rejected (HTTP 422)",
    )
    data = json.loads(rec.to_json_line())
    assert data["row"] == -1
    assert data["product_id"] == ""
    assert data["timestamp"].endswith("Z")
    assert set(data.keys()) == {"timestamp", "file", "sheet", "row", "product_id", "error_type", "message"}


def test_error_record_keeps_persian_text_readable():
    rec = ErrorRecord.create("inventory.xlsx", "products", 5, "INVALID_INPUT", "انگشتر", product_id="MOv6kw")
    line = rec.to_json_line()
    assert "انگشتر" in line
    assert json.loads(line)["product_id"] == "MOv6kw"


def test_flush_writes_json_lines(tmp_path: Path):
    buf = ErrorLogBuffer(logs_dir=tmp_path / "logs")
    buf.append(ErrorRecord.create("a.xlsx", "products", 2, "INVALID_INPUT", "weight: required"))
    buf.append(ErrorRecord.create("a.xlsx", "products", 3, "INVALID_INPUT", "tax_base: unknown"))

    path = buf.flush()

    assert path is not None and path.exists()
    assert path.name.startswith("errors-") and path.suffix == ".log"
    lines = path.read_text(encoding="utf-8").splitlines()
    assert [json.loads(line)["row"] for line in lines] == [2, 3]
    assert len(buf) == 0


def test_flush_empty_buffer_creates_nothing(tmp_path: Path):
    logs_dir = tmp_path / "logs"
    buf = ErrorLogBuffer(logs_dir=logs_dir)
    assert buf.flush() is None
    assert not logs_dir.exists()


def test_flush_appends_to_same_file(tmp_path: Path):
    buf = ErrorLogBuffer(logs_dir=tmp_path)
    buf.append(ErrorRecord.create("a.xlsx", "s", 1, "INVALID_INPUT", "x"))
    first = buf.flush()
    buf.append(ErrorRecord.create("a.xlsx", "s", 2, "INVALID_INPUT", "y"))
    second = buf.flush()
    assert first == second
    assert len(second.read_text(encoding="utf-8").splitlines()) == 2
