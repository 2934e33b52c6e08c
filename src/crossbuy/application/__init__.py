# src/crossbuy/application/__init__.py
"""
Application Layer - Use Cases and Services

This package contains application services that orchestrate domain logic.
No direct I/O dependencies - uses adapters through interfaces.
"""

from crossbuy.application.activity import ActivityDispatcher
from crossbuy.application.cart_service import CartService
from crossbuy.application.currency_rates import CurrencyRatesService, DEFAULT_RATES
from crossbuy.application.logistics_service import LogisticsService
from crossbuy.application.order_service import OrderService
from crossbuy.application.pricing_service import PricingEngine, SERVICE_FEE_RATE
from crossbuy.application.rate_source import RateCache, RateSource

__all__ = [
    "ActivityDispatcher",
    "CartService",
    "CurrencyRatesService",
    "DEFAULT_RATES",
    "LogisticsService",
    "OrderService",
    "PricingEngine",
    "SERVICE_FEE_RATE",
    "RateCache",
    "RateSource",
]
