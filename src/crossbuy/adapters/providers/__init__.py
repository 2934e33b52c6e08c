# src/crossbuy/adapters/providers/__init__.py
"""
External Rate Providers

This package contains clients for live exchange rate lookups.
"""

from crossbuy.adapters.providers.base import ExchangeRateClient
from crossbuy.adapters.providers.exchangerate_host import ExchangeRateHostClient

__all__ = ["ExchangeRateClient", "ExchangeRateHostClient"]
