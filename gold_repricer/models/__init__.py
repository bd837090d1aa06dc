"""Domain models for the gold repricer.

Value types only; nothing here performs IO.
"""

from .config_models import (
    Credentials,
    MarketplaceConfig,
    ProductPricingConfig,
    RepricerConfig,
    SpotPriceConfig,
    SpreadsheetColumns,
    SpreadsheetConfig,
)
from .error_record import ErrorRecord
from .export_job import ExportJob, ExportStatus
from .price_change import PriceChange
from .product_record import ProductRecord, normalize_product_id
from .repricing_result import RepricingResult

__all__ = [
    # Configuration models
    "Credentials",
    "MarketplaceConfig",
    "ProductPricingConfig",
    "RepricerConfig",
    "SpotPriceConfig",
    "SpreadsheetColumns",
    "SpreadsheetConfig",
    # Processing models
    "ErrorRecord",
    "ExportJob",
    "ExportStatus",
    "PriceChange",
    "ProductRecord",
    "RepricingResult",
    "normalize_product_id",
]
