# src/crossbuy/application/rate_source.py
"""
Rate Source - Multi-tier exchange rate resolution

Resolves a target currency to (rate, markup) in this order:
1. An active custom RateRecord (markup from the record)
2. The live external rate for (base, target), served from RateCache while
   fresher than the TTL (default markup)
3. The degraded constant rate when the live lookup fails (default markup)

resolve() never raises for external failures. The cache is a best-effort
latency optimization: two racing callers may both hit the API, and each
falls back on its own if its lookup fails.

Files that USE this module:
- crossbuy.application.pricing_service (PricingEngine resolves rates here)
- crossbuy.app (composition root)
- tests.test_rate_source (unit tests)

Files that this module USES:
- crossbuy.adapters.providers.base (ExchangeRateClient)
- crossbuy.application.currency_rates (custom rates)
- crossbuy.config (base currency, TTL, default markup, degraded rate)
- crossbuy.domain.models (RateResolution)
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Dict, Optional, Tuple

from crossbuy.adapters.providers.base import ExchangeRateClient
from crossbuy.application.currency_rates import CurrencyRatesService
from crossbuy.config import settings
from crossbuy.domain.models import RateResolution
from crossbuy.domain.money import is_finite_positive, to_decimal
from crossbuy.shared.validators import normalize_currency_code

logger = logging.getLogger(__name__)

Pair = Tuple[str, str]


def epoch_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class CachedRate:
    rate: Decimal
    fetched_at_ms: int


class RateCache:
    """
    Process-local TTL cache of external rates, one entry per currency pair.

    Time is passed in explicitly so callers (and tests) control "now".
    """

    def __init__(self, ttl_ms: Optional[int] = None):
        self.ttl_ms = ttl_ms if ttl_ms is not None else settings.rate_cache_ttl_ms
        self._entries: Dict[Pair, CachedRate] = {}

    def get(self, pair: Pair, now_ms: int) -> Optional[Decimal]:
        """Return the cached rate if it is younger than the TTL."""
        entry = self._entries.get(pair)
        if entry is None or now_ms - entry.fetched_at_ms >= self.ttl_ms:
            return None
        return entry.rate

    def put(self, pair: Pair, rate: Decimal, now_ms: int) -> None:
        self._entries[pair] = CachedRate(rate=rate, fetched_at_ms=now_ms)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class RateSource:
    """Resolves exchange rates from custom records, cache, live API or fallback."""

    def __init__(
        self,
        currency_rates: CurrencyRatesService,
        client: ExchangeRateClient,
        cache: Optional[RateCache] = None,
        clock: Callable[[], int] = epoch_ms,
        base_currency: Optional[str] = None,
        default_markup: Optional[Decimal] = None,
        degraded_rate: Optional[Decimal] = None,
    ):
        """
        Initialize the rate source.

        Args:
            currency_rates: Custom rate table
            client: Live exchange rate client
            cache: Rate cache (a new one with the configured TTL by default)
            clock: Returns "now" as epoch milliseconds
            base_currency: Marketplace currency (defaults to settings.base_currency)
            default_markup: Markup for non-custom rates (defaults to settings.default_markup)
            degraded_rate: Rate used when the live lookup fails (defaults to settings.degraded_rate)
        """
        self.currency_rates = currency_rates
        self.client = client
        self.cache = cache if cache is not None else RateCache()
        self.clock = clock
        self.base_currency = base_currency or settings.base_currency
        self.default_markup = default_markup if default_markup is not None else settings.default_markup
        self.degraded_rate = degraded_rate if degraded_rate is not None else settings.degraded_rate

    def resolve(self, code: Optional[str], now_ms: Optional[int] = None) -> RateResolution:
        """
        Resolve the rate and markup for a target currency.

        Args:
            code: Target currency code (defaults to settings.default_currency)
            now_ms: Optional "now" override in epoch milliseconds

        Returns:
            RateResolution; is_custom is True only for active custom records
        """
        target = normalize_currency_code(code, settings.default_currency)
        record = self.currency_rates.get_rate(target)
        if record is not None and record.is_active:
            logger.debug(
                "Using custom rate for %s: %s (markup: %s)",
                target, record.rate_from_base, record.markup,
            )
            return RateResolution(
                rate=record.rate_from_base,
                markup=record.markup,
                is_custom=True,
                source="custom",
            )

        logger.info("No active custom rate for %s, using external rate", target)
        rate, source = self.external_rate(self.base_currency, target, now_ms)
        return RateResolution(
            rate=rate,
            markup=self.default_markup,
            is_custom=False,
            source=source,
        )

    def rate(self, code: Optional[str]) -> Tuple[Decimal, Decimal]:
        """Return (rate, markup) for a target currency."""
        resolution = self.resolve(code)
        return resolution.rate, resolution.markup

    def external_rate(
        self, from_currency: str, to_currency: str, now_ms: Optional[int] = None
    ) -> Tuple[Decimal, str]:
        """
        Get the external rate for a pair, refreshing the cache when stale.

        Returns:
            (rate, source) where source is "cache", "live" or "degraded"
        """
        now = self.clock() if now_ms is None else now_ms
        pair = (from_currency, to_currency)

        cached = self.cache.get(pair, now)
        if cached is not None:
            logger.debug("Using cached %s/%s rate: %s", from_currency, to_currency, cached)
            return cached, "cache"

        rate, source = self._fetch(from_currency, to_currency)
        self.cache.put(pair, rate, now)
        return rate, source

    def _fetch(self, from_currency: str, to_currency: str) -> Tuple[Decimal, str]:
        try:
            rate = to_decimal(self.client.fetch_rate(from_currency, to_currency))
            if not is_finite_positive(rate):
                raise ValueError(f"non-positive or non-finite rate {rate}")
            return rate, "live"
        except Exception as e:
            logger.warning(
                "Failed to fetch %s/%s rate, falling back to %s: %s",
                from_currency, to_currency, self.degraded_rate, e,
            )
            return self.degraded_rate, "degraded"
