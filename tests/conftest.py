# Shared pytest fixtures
from __future__ import annotations
import tempfile
from pathlib import Path

import pandas as pd
import pytest

ID_COL = "ID"
TITLE_COL = "عنوان کالا"
PRICE_COL = "قیمت به تومان"
BUY_BOX_COL = "قیمت بای باکس"

SPOT_PRICE = 6809180


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        # keep real tokens out of the tests
        monkeypatch.delenv("SNAPP_TOKEN", raising=False)
        monkeypatch.delenv("NAVASAN_TOKEN", raising=False)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """pricing:
  default_labor_percentage: 20
  shop_profit_percentage: 7
  tax_percentage: 10
  tax_base: full
labor_percentages:
  MOv6kw: 16
  X9brx7: 30
spreadsheet:
  output_directory: ./out
  output_name: updated_prices.xlsx
  download_path: ./data/inventory_products.xlsx
marketplace:
  base_url: https://apix.example.test/vendors/v1
  seller_code: qPYMMA
  poll_interval_seconds: 0
  max_polls: 3
  timeout_seconds: 5
spot_price:
  url: http://quotes.example.test/latest/
  item: 18ayar
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "repricer.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


def make_workbook(path: Path, rows: list[list[object]], sheet_name: str = "products") -> Path:
    """Write ``rows`` verbatim (no pandas header/index) to a one-sheet workbook."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        pd.DataFrame(rows).to_excel(writer, sheet_name=sheet_name, header=False, index=False)
    return path


@pytest.fixture()
def export_rows() -> list[list[object]]:
    return [
        [ID_COL, TITLE_COL, PRICE_COL, BUY_BOX_COL],
        ["MOv6kw", "انگشتر طلا 0.98 گرم", 9000000, 9000000],
        ["abc123", "گردنبند طلا ۲٫۵ گرم", 20000000, 20000000],
        ["noW8t", "دستبند طلا بدون وزن", 5000000, 5000000],
    ]


@pytest.fixture()
def export_workbook(temp_workdir: Path, export_rows: list[list[object]]) -> Path:
    return make_workbook(temp_workdir / "data" / "inventory_products.xlsx", export_rows)


@pytest.fixture()
def workbook_factory():
    """make_workbook as a fixture for tests that build their own sheets."""
    return make_workbook
