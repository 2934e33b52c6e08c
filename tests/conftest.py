# tests/conftest.py
"""
Shared fixtures: a fresh MemoryStore, the mock catalog, a stubbed rate
client and a controllable clock for every test.
"""
from decimal import Decimal
from unittest.mock import Mock

import pytest

from crossbuy.adapters.catalog import StaticCatalog
from crossbuy.adapters.persistence import MemoryStore
from crossbuy.adapters.providers import ExchangeRateClient
from crossbuy.application import (
    CartService,
    CurrencyRatesService,
    LogisticsService,
    OrderService,
    PricingEngine,
    RateCache,
    RateSource,
)

TTL_MS = 5 * 60 * 1000


class FakeClock:
    """Epoch milliseconds that only move when a test says so."""

    def __init__(self, now_ms: int = 1_700_000_000_000):
        self.now_ms = now_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, ms: int) -> None:
        self.now_ms += ms


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def catalog():
    return StaticCatalog()


@pytest.fixture
def client():
    mock_client = Mock(spec=ExchangeRateClient)
    mock_client.fetch_rate.return_value = 12.5
    return mock_client


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def currency_rates(store):
    return CurrencyRatesService(store, degraded_rate=Decimal("13"))


@pytest.fixture
def rate_source(currency_rates, client, clock):
    return RateSource(
        currency_rates,
        client,
        cache=RateCache(ttl_ms=TTL_MS),
        clock=clock,
        base_currency="CNY",
        default_markup=Decimal("1.05"),
        degraded_rate=Decimal("13"),
    )


@pytest.fixture
def pricing(rate_source):
    return PricingEngine(rate_source)


@pytest.fixture
def cart(store, catalog, pricing):
    return CartService(store, catalog, pricing)


@pytest.fixture
def orders(store, cart):
    return OrderService(store, cart)


@pytest.fixture
def logistics(store):
    return LogisticsService(store)
