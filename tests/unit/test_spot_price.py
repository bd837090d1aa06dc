from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests

from gold_repricer.models.config_models import Credentials, SpotPriceConfig
from gold_repricer.services.spot_price import (
    FallbackPriceProvider,
    NavasanPriceProvider,
    SpotPriceError,
    StaticPriceProvider,
    build_price_provider,
    parse_quote_value,
)


def _session_returning(payload=None, *, exc: Exception | None = None, json_exc: Exception | None = None):
    session = MagicMock(spec=requests.Session)
    if exc is not None:
        session.get.side_effect = exc
        return session
    resp = MagicMock()
    resp.raise_for_status.return_value = None
    if json_exc is not None:
        resp.json.side_effect = json_exc
    else:
        resp.json.return_value = payload
    session.get.return_value = resp
    return session


class TestNavasanPriceProvider:
    def test_reads_18ayar_value(self):
        session = _session_returning({"18ayar": {"value": "6809180", "change": 0}})
        provider = NavasanPriceProvider("key", url="http://q.test/latest/", session=session)

        assert provider.get_price_per_gram() == 6809180
        session.get.assert_called_once_with(
            "http://q.test/latest/", params={"api_key": "key"}, timeout=10
        )

    def test_configurable_item(self):
        session = _session_returning({"sekkeh": {"value": 900}, "18ayar": {"value": 1}})
        provider = NavasanPriceProvider("key", item="sekkeh", session=session)
        assert provider.get_price_per_gram() == 900

    @pytest.mark.parametrize(
        "payload",
        [{}, {"18ayar": {}}, {"18ayar": {"value": ""}}, {"18ayar": {"value": "0"}}, ["not", "a", "dict"]],
    )
    def test_unusable_payload_raises(self, payload):
        provider = NavasanPriceProvider("key", session=_session_returning(payload))
        with pytest.raises(SpotPriceError):
            provider.get_price_per_gram()

    def test_transport_error_raises(self):
        session = _session_returning(exc=requests.ConnectionError("down"))
        with pytest.raises(SpotPriceError) as e:
            NavasanPriceProvider("key", session=session).get_price_per_gram()
        assert "quote request failed" in str(e.value)

    def test_non_json_raises(self):
        session = _session_returning(json_exc=ValueError("Expecting value"))
        with pytest.raises(SpotPriceError):
            NavasanPriceProvider("key", session=session).get_price_per_gram()


@pytest.mark.parametrize(
    "value, expected",
    [("6809180", 6809180), (6809180, 6809180), ("6,809,180", 6809180), (6809180.7, 6809180)],
)
def test_parse_quote_value(value, expected):
    assert parse_quote_value(value) == expected


@pytest.mark.parametrize("value", ["abc", None, -5, 0, True])
def test_parse_quote_value_rejects(value):
    with pytest.raises(SpotPriceError):
        parse_quote_value(value)


def test_static_provider():
    assert StaticPriceProvider(7000000).get_price_per_gram() == 7000000
    with pytest.raises(SpotPriceError):
        StaticPriceProvider(0).get_price_per_gram()


class _Failing:
    name = "broken"

    def get_price_per_gram(self) -> int:
        raise SpotPriceError("unavailable")


class TestFallbackPriceProvider:
    def test_first_success_wins(self):
        second = StaticPriceProvider(2, name="second")
        chain = FallbackPriceProvider([_Failing(), second, StaticPriceProvider(3)])
        assert chain.get_price_per_gram() == 2
        assert chain.used is second

    def test_all_failing_raises(self):
        with pytest.raises(SpotPriceError) as e:
            FallbackPriceProvider([_Failing(), _Failing()]).get_price_per_gram()
        assert "broken: unavailable" in str(e.value)

    def test_empty_chain_raises(self):
        with pytest.raises(SpotPriceError) as e:
            FallbackPriceProvider([]).get_price_per_gram()
        assert "no sources configured" in str(e.value)


class TestBuildPriceProvider:
    def test_override_comes_first(self):
        chain = build_price_provider(
            SpotPriceConfig(fallback_price=5), Credentials(navasan_token="k"), override=7000000
        )
        assert [p.name for p in chain.providers] == ["operator override", "navasan", "stored default"]
        assert chain.get_price_per_gram() == 7000000

    def test_without_token_or_fallback_chain_is_empty(self):
        chain = build_price_provider(SpotPriceConfig(), Credentials())
        assert chain.providers == []

    def test_quote_failure_falls_back_to_stored_default(self):
        session = _session_returning(exc=requests.Timeout("slow"))
        chain = build_price_provider(
            SpotPriceConfig(fallback_price=6500000), Credentials(navasan_token="k"), session=session
        )
        assert chain.get_price_per_gram() == 6500000
        assert chain.used.name == "stored default"
