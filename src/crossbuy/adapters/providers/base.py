# src/crossbuy/adapters/providers/base.py
"""
Base Provider Interface for Exchange Rate Clients

This module defines the abstract base class for external exchange rate
lookups. Implementations raise on any failure; callers decide how to degrade.

Files that USE this module:
- crossbuy.adapters.providers.exchangerate_host (ExchangeRateHostClient implements it)
- crossbuy.application.rate_source (RateSource depends on the interface)

Files that this module USES:
- None (pure interface definition)
"""
from abc import ABC, abstractmethod


class ExchangeRateClient(ABC):
    @abstractmethod
    def fetch_rate(self, from_currency: str, to_currency: str) -> float:
        """Return units of to_currency per 1 from_currency."""
        raise NotImplementedError
