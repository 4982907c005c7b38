"""
Unit tests for the geolocation and exchange rate clients.
"""

import asyncio
from decimal import Decimal

import httpx
import pytest

from geocurrency.clients.base import APIError, RateLimitError
from geocurrency.clients.exchange_rate_client import ExchangeRateClient
from geocurrency.clients.geolocation_client import GeolocationClient
from geocurrency.tests.fakes import FakeAPI


def geo_client(api: FakeAPI, timeout: float = 3.0) -> GeolocationClient:
    return GeolocationClient(url="https://geo.test/json/", timeout=timeout, transport=api.transport)


def rates_client(api: FakeAPI) -> ExchangeRateClient:
    return ExchangeRateClient(url="https://rates.test/latest", transport=api.transport)


class TestGeolocationClient:
    """Test IP geolocation lookups."""

    @pytest.mark.asyncio
    async def test_lookup(self, geo_api: FakeAPI) -> None:
        async with geo_client(geo_api) as client:
            info = await client.lookup()

        assert info.country == "BR"
        assert info.currency == "BRL"
        assert len(geo_api.calls) == 1

    @pytest.mark.asyncio
    async def test_missing_fields_are_none(self) -> None:
        async with geo_client(FakeAPI(payload={"ip": "203.0.113.7"})) as client:
            info = await client.lookup()

        assert info.country is None
        assert info.currency is None

    @pytest.mark.asyncio
    async def test_provider_error_payload(self) -> None:
        api = FakeAPI(payload={"error": True, "reason": "RateLimited"})

        async with geo_client(api) as client:
            with pytest.raises(APIError, match="RateLimited"):
                await client.lookup()

    @pytest.mark.asyncio
    async def test_rate_limited(self) -> None:
        api = FakeAPI(payload={"error": True}, status_code=429)

        async with geo_client(api) as client:
            with pytest.raises(RateLimitError):
                await client.lookup()

    @pytest.mark.asyncio
    async def test_malformed_payload(self) -> None:
        async with geo_client(FakeAPI(payload=["BR"])) as client:
            with pytest.raises(APIError):
                await client.lookup()

    @pytest.mark.asyncio
    async def test_timeout_bounds_whole_lookup(self) -> None:
        api = FakeAPI(payload={"country": "BR"}, delay=0.5)

        async with geo_client(api, timeout=0.05) as client:
            with pytest.raises(asyncio.TimeoutError):
                await client.lookup()


class TestExchangeRateClient:
    """Test USD rate fetching."""

    @pytest.mark.asyncio
    async def test_get_usd_rate(self, rates_api: FakeAPI) -> None:
        async with rates_client(rates_api) as client:
            rate = await client.get_usd_rate("brl")

        assert rate == Decimal("5.0")
        request = rates_api.calls[0]
        assert request.url.params["base"] == "USD"
        assert request.url.params["symbols"] == "BRL"

    @pytest.mark.asyncio
    async def test_rate_is_decimal_without_float_noise(self, rates_api: FakeAPI) -> None:
        async with rates_client(rates_api) as client:
            rate = await client.get_usd_rate("EUR")

        assert isinstance(rate, Decimal)
        assert rate == Decimal("0.92")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", [0, -1.5, "abc", None])
    async def test_invalid_rate_rejected(self, value) -> None:
        api = FakeAPI(payload={"rates": {"EUR": value}})

        async with rates_client(api) as client:
            with pytest.raises(APIError):
                await client.get_usd_rate("EUR")

    @pytest.mark.asyncio
    async def test_missing_rates(self) -> None:
        async with rates_client(FakeAPI(payload={"success": False})) as client:
            with pytest.raises(APIError, match="No EUR rate"):
                await client.get_usd_rate("EUR")

    @pytest.mark.asyncio
    async def test_http_error(self) -> None:
        async with rates_client(FakeAPI(payload={}, status_code=500)) as client:
            with pytest.raises(APIError) as exc_info:
                await client.get_usd_rate("EUR")

        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_connection_error(self) -> None:
        async with rates_client(FakeAPI(fail=True)) as client:
            with pytest.raises(APIError, match="Request failed"):
                await client.get_usd_rate("EUR")

    @pytest.mark.asyncio
    async def test_invalid_json(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(200, content=b"<html>"))

        async with ExchangeRateClient(url="https://rates.test/latest", transport=transport) as client:
            with pytest.raises(APIError, match="Invalid JSON"):
                await client.get_usd_rate("EUR")
