# src/crossbuy/app.py
"""
Application Entry Point - Service Wiring and Operator CLI

This module serves as the composition root for crossbuy. build_services()
wires the store, catalog, rate client and every application service from
settings; main() is a small command-line tool for operators to quote prices,
inspect the currency rate table and walk one order from cart to arrival
against a throwaway store (simulate).

Files that USE this module:
- crossbuy.__main__ (python -m crossbuy)
- tests.test_app (wiring and CLI tests)

Files that this module USES:
- crossbuy.shared.logging_conf (setup_logging for logging configuration)
- crossbuy.config (settings for configuration management)
- crossbuy.adapters.* (store, catalog, rate client, formatter)
- crossbuy.application.* (services)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations for forward references

import argparse  # Command-line parsing for the operator CLI
import logging  # Standard library for logging messages and errors
import sys  # System-specific parameters and functions for exit codes
from dataclasses import dataclass  # Container for the wired services
from typing import List, Optional

from crossbuy.adapters.catalog import ProductCatalog, StaticCatalog
from crossbuy.adapters.formatting import (
    format_breakdown,
    format_cargo,
    format_cart,
    format_order,
    format_quote,
    format_rates,
    format_tracking,
)
from crossbuy.adapters.persistence import MemoryStore, Store
from crossbuy.adapters.providers import ExchangeRateClient, ExchangeRateHostClient
from crossbuy.application import (
    ActivityDispatcher,
    CartService,
    CurrencyRatesService,
    LogisticsService,
    OrderService,
    PricingEngine,
    RateSource,
)
from crossbuy.config import settings
from crossbuy.domain.errors import DomainError
from crossbuy.shared.logging_conf import setup_logging
from crossbuy.shared.validators import require_amount

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Every service of one running instance, sharing one store."""
    store: Store
    catalog: ProductCatalog
    currency_rates: CurrencyRatesService
    rate_source: RateSource
    pricing: PricingEngine
    activity: ActivityDispatcher
    cart: CartService
    orders: OrderService
    logistics: LogisticsService

    def shutdown(self) -> None:
        self.activity.shutdown(wait=True)


def build_services(
    store: Optional[Store] = None,
    client: Optional[ExchangeRateClient] = None,
    catalog: Optional[ProductCatalog] = None,
) -> Services:
    """
    Wire all services.

    Args:
        store: Persistent store (a fresh MemoryStore by default)
        client: Exchange rate client (ExchangeRateHostClient by default)
        catalog: Product catalog (StaticCatalog with mock products by default)

    Returns:
        Services sharing the given store
    """
    store = store if store is not None else MemoryStore()
    client = client if client is not None else ExchangeRateHostClient()
    catalog = catalog if catalog is not None else StaticCatalog()

    currency_rates = CurrencyRatesService(store)
    rate_source = RateSource(currency_rates, client)
    pricing = PricingEngine(rate_source)
    activity = ActivityDispatcher(store)
    cart = CartService(store, catalog, pricing, activity)
    orders = OrderService(store, cart, activity)
    logistics = LogisticsService(store)

    logger.debug(
        "Services wired: base=%s default=%s cache=%d min",
        settings.base_currency, settings.default_currency, settings.rate_cache_minutes,
    )
    return Services(
        store=store,
        catalog=catalog,
        currency_rates=currency_rates,
        rate_source=rate_source,
        pricing=pricing,
        activity=activity,
        cart=cart,
        orders=orders,
        logistics=logistics,
    )


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="crossbuy", description="Cross-border pricing tools")
    sub = parser.add_subparsers(dest="command", required=True)

    quote = sub.add_parser("quote", help="Price an amount given in the base currency")
    quote.add_argument("amount", help=f"Amount in {settings.base_currency}")
    quote.add_argument("--to", dest="currency", default=None, help="Target currency code")

    rate = sub.add_parser("rate", help="Show the current rate for a currency")
    rate.add_argument("currency", nargs="?", default=None, help="Target currency code")

    sub.add_parser("rates", help="List the currency rate table")

    simulate = sub.add_parser("simulate", help="Run one order from cart to cargo arrival")
    simulate.add_argument("product_id", nargs="?", default="mock-1", help="Catalog product id")
    simulate.add_argument("--variant", default=None, help="Variant selector")
    simulate.add_argument("--qty", type=int, default=1, help="Units to order")
    simulate.add_argument("--to", dest="currency", default=None, help="Target currency code")
    simulate.add_argument("--shipping", default=None, help="Cargo shipping cost")
    return parser


def _simulate(services: Services, args: argparse.Namespace) -> None:
    owner = "simulation"
    print(format_cart(services.cart.add_line(
        owner, args.product_id, args.variant, quantity=args.qty, currency=args.currency,
    )))
    order = services.orders.create_from_cart(owner)
    print(format_order(order))
    receipt = services.logistics.create_cargo([order.id], shipping_cost=args.shipping)
    print(format_cargo(services.logistics.arrive(receipt.cargo_id)))
    print(format_tracking(services.logistics.tracking(order.id)))


def main(argv: Optional[List[str]] = None, services: Optional[Services] = None) -> int:
    """
    Run the operator CLI.

    Returns:
        Process exit code: 0 on success, 2 on invalid input
    """
    args = _parser().parse_args(argv)

    setup_logging(
        level=settings.log_level,
        log_file=settings.log_file,
        log_dir=settings.log_dir,
        max_bytes=settings.log_max_bytes,
        backup_count=settings.log_backup_count,
        log_stdout=settings.log_stdout,
    )

    owned = services is None
    services = services or build_services()
    try:
        if args.command == "quote":
            amount = require_amount(args.amount)
            breakdown = services.pricing.apply_pricing(amount, args.currency)
            print(format_breakdown(amount, services.rate_source.base_currency, breakdown))
        elif args.command == "rate":
            print(format_quote(services.pricing.quote_rate(args.currency)))
        elif args.command == "rates":
            print(format_rates(services.currency_rates.get_all()))
        elif args.command == "simulate":
            _simulate(services, args)
        return 0
    except DomainError as e:
        logger.error("%s failed: %s", args.command, e)
        print(f"Error: {e}", file=sys.stderr)
        return 2
    finally:
        if owned:
            services.shutdown()


if __name__ == "__main__":
    sys.exit(main())
