from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from dotenv import load_dotenv
from jsonschema.exceptions import ValidationError

from ..models.config_models import (
    Credentials,
    MarketplaceConfig,
    ProductPricingConfig,
    RepricerConfig,
    SpotPriceConfig,
    SpreadsheetColumns,
    SpreadsheetConfig,
)
from ..pricing.calculator import TaxBase

"""Config loader.

Responsibilities:
- Load YAML config/repricer.yml
- Validate it against config_schema.json (shipped next to this module)
- Apply defaults for the optional sections
- Load credentials from the environment / .env (python-dotenv)
"""

__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "load_config",
    "load_credentials",
    "load_env_file",
]

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/repricer.yml")

SNAPP_TOKEN_ENV = "SNAPP_TOKEN"
NAVASAN_TOKEN_ENV = "NAVASAN_TOKEN"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: If the schema file is missing or not valid JSON, or the
            config data fails validation (missing required keys, wrong types,
            unknown keys).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _build_pricing(data: dict[str, Any]) -> ProductPricingConfig:
    raw = data["pricing"]
    defaults = ProductPricingConfig()
    labor = {str(k): int(v) for k, v in (data.get("labor_percentages") or {}).items()}
    return ProductPricingConfig(
        labor_percentages=labor,
        default_labor_percentage=raw.get("default_labor_percentage", defaults.default_labor_percentage),
        shop_profit_percentage=raw["shop_profit_percentage"],
        tax_percentage=raw["tax_percentage"],
        market_adjustment_percentage=raw.get("market_adjustment_percentage", 0),
        tax_base=TaxBase(raw["tax_base"]),
    )


def _build_spreadsheet(raw: dict[str, Any]) -> SpreadsheetConfig:
    col_defaults = SpreadsheetColumns()
    defaults = SpreadsheetConfig()
    columns = SpreadsheetColumns(
        id_column=raw.get("id_column", col_defaults.id_column),
        title_column=raw.get("title_column", col_defaults.title_column),
        price_column=raw.get("price_column", col_defaults.price_column),
        # explicit null disables the buy-box column
        buy_box_price_column=raw.get("buy_box_price_column", col_defaults.buy_box_price_column),
    )
    return SpreadsheetConfig(
        columns=columns,
        download_path=raw.get("download_path", defaults.download_path),
        output_directory=raw.get("output_directory", defaults.output_directory),
        output_name=raw.get("output_name", defaults.output_name),
    )


def _build_marketplace(raw: dict[str, Any]) -> MarketplaceConfig:
    defaults = MarketplaceConfig()
    return MarketplaceConfig(
        base_url=raw.get("base_url", defaults.base_url).rstrip("/"),
        seller_code=raw.get("seller_code", defaults.seller_code),
        poll_interval_seconds=raw.get("poll_interval_seconds", defaults.poll_interval_seconds),
        max_polls=raw.get("max_polls", defaults.max_polls),
        timeout_seconds=raw.get("timeout_seconds", defaults.timeout_seconds),
    )


def _build_spot_price(raw: dict[str, Any]) -> SpotPriceConfig:
    defaults = SpotPriceConfig()
    return SpotPriceConfig(
        url=raw.get("url", defaults.url),
        item=raw.get("item", defaults.item),
        timeout_seconds=raw.get("timeout_seconds", defaults.timeout_seconds),
        fallback_price=raw.get("fallback_price", defaults.fallback_price),
    )


def load_config(path: Path) -> RepricerConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e

    _validate_config_schema(data)

    return RepricerConfig(
        pricing=_build_pricing(data),
        spreadsheet=_build_spreadsheet(data.get("spreadsheet") or {}),
        marketplace=_build_marketplace(data.get("marketplace") or {}),
        spot_price=_build_spot_price(data.get("spot_price") or {}),
    )


def load_env_file(path: Path, override: bool = False) -> bool:
    """Load ``path`` into the process environment via python-dotenv.

    Returns False when the file does not exist; real environment variables
    win unless override is set.
    """
    if not path.exists():
        return False
    return load_dotenv(dotenv_path=path, override=override)


def load_credentials() -> Credentials:
    """Read marketplace and quote-source tokens from the environment."""
    return Credentials(
        snapp_token=os.getenv(SNAPP_TOKEN_ENV) or None,
        navasan_token=os.getenv(NAVASAN_TOKEN_ENV) or None,
    )
