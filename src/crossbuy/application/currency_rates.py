# src/crossbuy/application/currency_rates.py
"""
Currency Rates Service - Administration of custom exchange rates

This module owns the RateRecord table: default seeding, listing, admin
updates and a plain conversion helper. RateSource reads custom rates
through it.

Files that USE this module:
- crossbuy.application.rate_source (custom rate lookup)
- crossbuy.app (GET/PUT currency rates for operators)
- tests.test_currency_rates (unit tests)

Files that this module USES:
- crossbuy.adapters.persistence.base (Store)
- crossbuy.domain.models (RateRecord)
- crossbuy.shared.validators (amount and code validation)
"""
from __future__ import annotations

import logging
import threading
from decimal import Decimal
from typing import List, Optional

from crossbuy.adapters.persistence.base import Store
from crossbuy.config import settings
from crossbuy.domain.errors import DuplicateKeyError, InvalidInputError, NotFoundError
from crossbuy.domain.models import RateRecord, utcnow
from crossbuy.shared.validators import normalize_currency_code, require_amount

logger = logging.getLogger(__name__)

# code, name, symbol, rate per 1 CNY, markup
DEFAULT_RATES = (
    ("RUB", "Российский рубль", "₽", "13.0", "1.05"),
    ("USD", "US Dollar", "$", "0.14", "1.05"),
    ("UZS", "Узбекский сум", "сўм", "1800", "1.05"),
    ("TJS", "Таджикский сомони", "ЅМ", "1.5", "1.05"),
    ("KZT", "Казахстанский тенге", "₸", "65", "1.05"),
    ("CNY", "Китайский юань", "¥", "1.0", "1.05"),
)


def default_rate_records() -> List[RateRecord]:
    return [
        RateRecord(
            code=code,
            name=name,
            symbol=symbol,
            rate_from_base=Decimal(rate),
            markup=Decimal(markup),
            is_active=True,
        )
        for code, name, symbol, rate, markup in DEFAULT_RATES
    ]


class CurrencyRatesService:
    """Reads and administers custom currency rates."""

    def __init__(self, store: Store, degraded_rate: Optional[Decimal] = None):
        """
        Args:
            store: Persistent store holding RateRecord rows
            degraded_rate: Rate used by convert() for unknown codes
                (defaults to settings.degraded_rate)
        """
        self.store = store
        self.degraded_rate = degraded_rate if degraded_rate is not None else settings.degraded_rate
        self._seeded = threading.Event()

    def ensure_defaults(self) -> int:
        """
        Seed the default table when the store holds no rates.

        Safe to call concurrently: a duplicate insert from a racing seeder is
        treated as already done.

        Returns:
            Number of rows this call inserted
        """
        if self._seeded.is_set():
            return 0
        inserted = 0
        if self.store.count_rates() == 0:
            logger.info("Initializing default currency rates...")
            for record in default_rate_records():
                try:
                    self.store.insert_rate(record)
                    inserted += 1
                except DuplicateKeyError:
                    logger.debug("Default rate %s already present", record.code)
            logger.info("Default currency rates initialized (%d inserted)", inserted)
        self._seeded.set()
        return inserted

    def get_all(self) -> List[RateRecord]:
        self.ensure_defaults()
        return self.store.list_rates()

    def get_active(self) -> List[RateRecord]:
        return [r for r in self.get_all() if r.is_active]

    def get_rate(self, code: str) -> Optional[RateRecord]:
        self.ensure_defaults()
        return self.store.get_rate(code.strip().upper())

    def update_rate(
        self,
        code: str,
        rate_from_base=None,
        markup=None,
        is_active: Optional[bool] = None,
        name: Optional[str] = None,
        symbol: Optional[str] = None,
    ) -> RateRecord:
        """
        Update a custom rate in place.

        Raises:
            NotFoundError: If no record exists for the code
            InvalidInputError: If rate <= 0 or markup < 1
        """
        record = self.get_rate(code)
        if record is None:
            raise NotFoundError(f"Currency rate {code} not found")

        if rate_from_base is not None:
            record.rate_from_base = require_amount(rate_from_base, "rate_from_base", allow_zero=False)
        if markup is not None:
            value = require_amount(markup, "markup")
            if value < 1:
                raise InvalidInputError(f"markup must be >= 1, got {markup!r}")
            record.markup = value
        if is_active is not None:
            record.is_active = bool(is_active)
        if name is not None:
            record.name = name
        if symbol is not None:
            record.symbol = symbol
        record.updated_at = utcnow()

        self.store.save_rate(record)
        logger.info(
            "Currency rate %s updated: rate=%s markup=%s active=%s",
            record.code, record.rate_from_base, record.markup, record.is_active,
        )
        return record

    def convert(self, amount, code: str) -> Decimal:
        """
        Convert a base-currency amount with the custom rate and markup.

        Unknown or inactive codes fall back to the degraded rate without markup.
        """
        value = require_amount(amount)
        target = normalize_currency_code(code, settings.default_currency)
        record = self.get_rate(target)
        if record is None or not record.is_active:
            logger.warning("Currency %s not found or inactive, using default rate", target)
            return value * self.degraded_rate
        return value * record.rate_from_base * record.markup
