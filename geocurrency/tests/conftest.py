"""
Pytest configuration and fixtures.
"""

from typing import Callable, Optional

import pytest

from geocurrency.clients.exchange_rate_client import ExchangeRateClient
from geocurrency.clients.geolocation_client import GeolocationClient
from geocurrency.core.currency_state import CurrencyState
from geocurrency.core.request import StaticRequestContext
from geocurrency.tests.fakes import FakeAPI, ManualClock


@pytest.fixture
def geo_api() -> FakeAPI:
    """Geolocation endpoint that places the caller in Brazil."""
    return FakeAPI(payload={"ip": "203.0.113.7", "country": "BR", "currency": "BRL"})


@pytest.fixture
def rates_api() -> FakeAPI:
    """Exchange rate endpoint with a few USD-based rates."""
    return FakeAPI(
        payload={
            "base": "USD",
            "rates": {"BRL": 5.0, "EUR": 0.92, "COP": 4000, "JPY": 150.25, "USD": 1},
        }
    )


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def make_state(
    geo_api: FakeAPI, rates_api: FakeAPI, clock: ManualClock
) -> Callable[..., CurrencyState]:
    """Factory for a CurrencyState wired to the fake APIs."""

    def _make(
        request: Optional[StaticRequestContext] = None,
        geo_timeout: float = 3.0,
    ) -> CurrencyState:
        return CurrencyState(
            GeolocationClient(
                url="https://geo.test/json/", timeout=geo_timeout, transport=geo_api.transport
            ),
            ExchangeRateClient(url="https://rates.test/latest", transport=rates_api.transport),
            request=request,
            clock=clock,
        )

    return _make
