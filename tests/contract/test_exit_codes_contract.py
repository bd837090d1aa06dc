from __future__ import annotations

import json
from pathlib import Path

import pytest

from gold_repricer.cli import main as cli_main
from gold_repricer.logging.init import reset_logging
from gold_repricer.models.config_models import ProductPricingConfig
from gold_repricer.services import repricer

"""Exit code contract: 0 success, 1 fatal, 2 rows rejected."""

ARGS = ["--input", "data/inventory_products.xlsx", "--gold-price", "6809180", "--no-upload"]


def test_exit_code_fatal_startup(temp_workdir: Path, capsys):
    # config/repricer.yml missing -> exit 1
    reset_logging()

    code = cli_main([])

    captured = capsys.readouterr()
    assert code == 1
    assert "ERROR config: config file not found" in captured.out


def test_exit_code_invalid_config(temp_workdir: Path, capsys):
    reset_logging()
    (temp_workdir / "config" / "repricer.yml").write_text(
        "pricing:\n  shop_profit_percentage: 7\n  tax_percentage: 10\n", encoding="utf-8"
    )

    code = cli_main([])

    assert code == 1
    assert "ERROR config: config validation failed: 'tax_base' is a required property" in capsys.readouterr().out


def test_exit_code_all_success(temp_workdir: Path, write_config, export_workbook, capsys):
    reset_logging()

    code = cli_main(ARGS)

    out = capsys.readouterr().out
    assert code == 0
    assert "ERROR" not in out
    assert "SUMMARY rows=3 repriced=2 skipped=1 invalid=0" in out


def test_exit_code_no_spot_price(temp_workdir: Path, write_config, export_workbook, capsys):
    reset_logging()

    code = cli_main(["--input", "data/inventory_products.xlsx", "--no-upload"])

    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR spot price: no spot price available (no sources configured)" in out
    assert "SUMMARY" not in out


def test_exit_code_partial_failure(temp_workdir: Path, write_config, export_workbook, monkeypatch, capsys):
    """Rows rejected by input validation -> exit 2, valid rows still written."""
    reset_logging()
    real = repricer.reprice_records

    def reprice_with_negative_labor(records, spot_price, pricing, **kwargs):
        bad = ProductPricingConfig(labor_percentages={"abc123": -5}, tax_percentage=10)
        return real(records, spot_price, bad, **kwargs)

    monkeypatch.setattr("gold_repricer.cli.__main__.reprice_records", reprice_with_negative_labor)

    code = cli_main(ARGS)

    out = capsys.readouterr().out
    assert code == 2
    assert "SUMMARY rows=3 repriced=1 skipped=1 invalid=1" in out
    assert "WARN 1 rows rejected, details in" in out
    assert (temp_workdir / "out" / "updated_prices.xlsx").exists()

    logs = list((temp_workdir / "logs").glob("errors-*.log"))
    assert len(logs) == 1
    entry = json.loads(logs[0].read_text(encoding="utf-8").splitlines()[0])
    assert entry["product_id"] == "abc123"
    assert entry["file"] == "inventory_products.xlsx"
    assert entry["row"] == 3


def test_invalid_gold_price_argument(temp_workdir: Path, write_config, capsys):
    reset_logging()
    with pytest.raises(SystemExit) as e:
        cli_main(["--gold-price", "-5"])
    assert e.value.code == 2
    assert "must be positive" in capsys.readouterr().err
