from __future__ import annotations

from dataclasses import dataclass, field

from ..pricing.calculator import TaxBase

"""Config dataclasses for the gold repricer.

These are the typed, already-validated counterparts of config/repricer.yml
(see gold_repricer/config/loader.py) plus the credentials read from the
environment. They are passed explicitly into the orchestration layer; the
pricing core only ever sees ProductPricingConfig values.
"""

DEFAULT_LABOR_PERCENTAGE = 20
DEFAULT_SHOP_PROFIT_PERCENTAGE = 7
DEFAULT_TAX_PERCENTAGE = 10


@dataclass(frozen=True)
class ProductPricingConfig:
    """Static pricing configuration.

    labor_percentages maps marketplace product id -> labor percentage.
    Ids missing from the mapping use default_labor_percentage.
    """
    labor_percentages: dict[str, int] = field(default_factory=dict)
    default_labor_percentage: int = DEFAULT_LABOR_PERCENTAGE
    shop_profit_percentage: float = DEFAULT_SHOP_PROFIT_PERCENTAGE
    tax_percentage: float = DEFAULT_TAX_PERCENTAGE
    market_adjustment_percentage: float = 0
    tax_base: TaxBase = TaxBase.FULL

    def labor_percentage_for(self, product_id: object) -> int:
        """Labor percentage for ``product_id`` (explicit 0 is honored)."""
        return self.labor_percentages.get(str(product_id), self.default_labor_percentage)


@dataclass(frozen=True)
class SpreadsheetColumns:
    """Header names of the marketplace inventory export."""
    id_column: str = "ID"
    title_column: str = "عنوان کالا"
    price_column: str = "قیمت به تومان"
    buy_box_price_column: str | None = "قیمت بای باکس"  # optional mirror of price


@dataclass(frozen=True)
class SpreadsheetConfig:
    columns: SpreadsheetColumns = field(default_factory=SpreadsheetColumns)
    download_path: str = "inventory_products.xlsx"  # where the export is saved
    output_directory: str = "."
    output_name: str = "updated_prices.xlsx"


@dataclass(frozen=True)
class MarketplaceConfig:
    base_url: str = "https://apix.snappshop.ir/vendors/v1"
    seller_code: str = ""
    poll_interval_seconds: float = 60
    max_polls: int = 30
    timeout_seconds: float = 30


@dataclass(frozen=True)
class SpotPriceConfig:
    url: str = "http://api.navasan.tech/latest/"
    item: str = "18ayar"  # quote key for 18 karat gold per gram
    timeout_seconds: float = 10
    fallback_price: int | None = None  # stored default when the quote is unavailable


@dataclass(frozen=True)
class Credentials:
    """Secrets loaded from the environment (.env), never from YAML."""
    snapp_token: str | None = None
    navasan_token: str | None = None


@dataclass(frozen=True)
class RepricerConfig:
    """Root configuration object."""
    pricing: ProductPricingConfig
    spreadsheet: SpreadsheetConfig = field(default_factory=SpreadsheetConfig)
    marketplace: MarketplaceConfig = field(default_factory=MarketplaceConfig)
    spot_price: SpotPriceConfig = field(default_factory=SpotPriceConfig)
