from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Protocol

import requests

from ..models.config_models import Credentials, SpotPriceConfig

"""Spot price providers.

The repricer needs one number: the current price per gram of 18 karat gold.
Where it comes from is injected as a PriceProvider:

- NavasanPriceProvider: HTTP quote source (api.navasan.tech)
- StaticPriceProvider: operator override (--gold-price) or a stored default
- FallbackPriceProvider: tries a chain of providers in order

A provider either returns a positive integer price or raises SpotPriceError.
"""

__all__ = [
    "FallbackPriceProvider",
    "NavasanPriceProvider",
    "PriceProvider",
    "SpotPriceError",
    "StaticPriceProvider",
    "build_price_provider",
    "parse_quote_value",
]

logger = logging.getLogger(__name__)


class SpotPriceError(Exception):
    """Raised when a provider cannot supply a usable spot price."""


class PriceProvider(Protocol):
    name: str

    def get_price_per_gram(self) -> int:
        ...


def parse_quote_value(value: Any) -> int:
    """Parse a quote value such as ``"6809180"`` or ``6809180.0`` to int."""
    if isinstance(value, bool):
        raise SpotPriceError(f"unusable quote value: {value!r}")
    try:
        price = int(float(str(value).replace(",", "")))
    except (TypeError, ValueError) as e:
        raise SpotPriceError(f"unusable quote value: {value!r}") from e
    if price <= 0:
        raise SpotPriceError(f"quote value must be positive, got {price}")
    return price


class NavasanPriceProvider:
    """Latest quotes from the Navasan API.

    The response is a JSON object keyed by item (``18ayar`` for 18 karat gold
    per gram), each with a ``value`` field.
    """

    name = "navasan"

    def __init__(
        self,
        api_key: str,
        *,
        url: str = SpotPriceConfig.url,
        item: str = SpotPriceConfig.item,
        timeout: float = SpotPriceConfig.timeout_seconds,
        session: requests.Session | None = None,
    ) -> None:
        self.api_key = api_key
        self.url = url
        self.item = item
        self.timeout = timeout
        self.session = session or requests.Session()

    def get_price_per_gram(self) -> int:
        try:
            resp = self.session.get(self.url, params={"api_key": self.api_key}, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except requests.RequestException as e:
            raise SpotPriceError(f"quote request failed: {e}") from e
        except ValueError as e:
            raise SpotPriceError(f"quote response is not JSON: {e}") from e

        quote = data.get(self.item) if isinstance(data, dict) else None
        if not isinstance(quote, dict) or quote.get("value") in (None, ""):
            raise SpotPriceError(f"quote '{self.item}' missing from response")
        return parse_quote_value(quote["value"])


class StaticPriceProvider:
    """Fixed price: operator override or stored default."""

    def __init__(self, price: int, name: str = "static") -> None:
        self.price = price
        self.name = name

    def get_price_per_gram(self) -> int:
        if self.price <= 0:
            raise SpotPriceError(f"{self.name} price must be positive, got {self.price}")
        return self.price


class FallbackPriceProvider:
    """Ask each provider in turn; the first usable price wins."""

    name = "fallback"

    def __init__(self, providers: Sequence[PriceProvider]) -> None:
        self.providers = list(providers)
        self.used: PriceProvider | None = None

    def get_price_per_gram(self) -> int:
        failures: list[str] = []
        for provider in self.providers:
            try:
                price = provider.get_price_per_gram()
            except SpotPriceError as e:
                logger.warning(f"spot price source '{provider.name}' failed: {e}")
                failures.append(f"{provider.name}: {e}")
                continue
            self.used = provider
            logger.info(f"spot price per gram: {price:,} (source: {provider.name})")
            return price
        detail = "; ".join(failures) if failures else "no sources configured"
        raise SpotPriceError(f"no spot price available ({detail})")


def build_price_provider(
    config: SpotPriceConfig,
    credentials: Credentials,
    override: int | None = None,
    session: requests.Session | None = None,
) -> FallbackPriceProvider:
    """Provider chain: operator override, quote API, stored default."""
    chain: list[PriceProvider] = []
    if override is not None:
        chain.append(StaticPriceProvider(override, name="operator override"))
    if credentials.navasan_token:
        chain.append(
            NavasanPriceProvider(
                credentials.navasan_token,
                url=config.url,
                item=config.item,
                timeout=config.timeout_seconds,
                session=session,
            )
        )
    if config.fallback_price is not None:
        chain.append(StaticPriceProvider(config.fallback_price, name="stored default"))
    return FallbackPriceProvider(chain)
