# src/crossbuy/adapters/providers/exchangerate_host.py
"""
exchangerate.host API Client for Live Exchange Rates

This module implements the HTTP client for the public convert endpoint
(GET {url}?from=CNY&to=RUB[&apikey=...]). It does not cache; caching and
fallback belong to RateSource.

Files that USE this module:
- crossbuy.app (wires the client into RateSource)
- tests.test_providers (unit tests)

Files that this module USES:
- crossbuy.adapters.providers.base (ExchangeRateClient interface)
- crossbuy.config (settings for API URL, key and timeout)
"""
import logging
import math
from typing import Any, Optional

import requests

from crossbuy.adapters.providers.base import ExchangeRateClient
from crossbuy.config import settings

log = logging.getLogger(__name__)


def _extract_rate(data: Any) -> Optional[float]:
    """
    Pull the first usable rate out of the response.

    Accepts {"rate": x}, {"result": x}, {"info": {"rate": x}} and
    {"data": {"rate": x}} shapes.
    """
    if not isinstance(data, dict):
        return None
    candidates = [
        data.get("rate"),
        data.get("result"),
        (data.get("info") or {}).get("rate") if isinstance(data.get("info"), dict) else None,
        (data.get("data") or {}).get("rate") if isinstance(data.get("data"), dict) else None,
    ]
    for value in candidates:
        if value is None or isinstance(value, bool):
            continue
        try:
            rate = float(value)
        except (TypeError, ValueError):
            continue
        if math.isfinite(rate) and rate > 0:
            return rate
    return None


class ExchangeRateHostClient(ExchangeRateClient):
    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the exchange rate client.
        
        Args:
            base_url: Optional custom API URL (defaults to settings.currency_api_url)
            api_key: Optional API key (defaults to settings.currency_api_key)
            timeout: Optional HTTP timeout in seconds (defaults to settings.http_timeout_seconds)
            session: Optional requests session (defaults to module-level requests)
        """
        self.url = base_url or settings.currency_api_url
        self.api_key = settings.currency_api_key if api_key is None else api_key
        self.timeout = timeout or settings.http_timeout_seconds
        self._http = session or requests

    def fetch_rate(self, from_currency: str, to_currency: str) -> float:
        """
        Get the live from->to rate.
        
        Returns:
            Units of to_currency per 1 from_currency
            
        Raises:
            RuntimeError: If the request fails, returns invalid JSON, or carries
                no finite positive rate
        """
        params = {"from": from_currency, "to": to_currency}
        if self.api_key:
            params["apikey"] = self.api_key

        try:
            log.info("Fetching live %s/%s rate", from_currency, to_currency)
            resp = self._http.get(self.url, params=params, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except requests.exceptions.Timeout:
            log.warning("Rate API timeout after %d seconds", self.timeout)
            raise RuntimeError(f"Rate API timeout after {self.timeout}s")
        except requests.exceptions.RequestException as e:
            log.warning("Rate API request failed: %s", e)
            raise RuntimeError(f"Rate API request failed: {e}") from e
        except ValueError as e:
            log.error("Rate API returned invalid JSON: %s", e)
            raise RuntimeError(f"Rate API returned invalid JSON: {e}") from e

        rate = _extract_rate(data)
        if rate is None:
            log.error("Rate API returned no usable rate: %s", data)
            raise RuntimeError(f"Rate API returned no usable rate for {from_currency}/{to_currency}")

        log.info("Live %s/%s rate: %s", from_currency, to_currency, rate)
        return rate
