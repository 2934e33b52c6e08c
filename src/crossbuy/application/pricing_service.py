# src/crossbuy/application/pricing_service.py
"""
Pricing Engine - Customer price breakdown for a base-currency amount

Steps, in fixed order and at full Decimal precision:
1. rate, markup = RateSource.resolve(target)
2. converted = amount * rate
3. converted_with_markup = converted * markup
4. service_fee_amount = converted_with_markup * SERVICE_FEE_RATE
5. final_per_item = converted_with_markup * (1 + SERVICE_FEE_RATE)
Only the output fields are rounded to cents.

Amount validation belongs to callers; apply_pricing assumes amount >= 0.

Files that USE this module:
- crossbuy.application.cart_service (prices cart lines)
- crossbuy.app (operator quotes)
- tests.test_pricing_service (unit tests)

Files that this module USES:
- crossbuy.application.rate_source (RateSource)
- crossbuy.domain.models (PriceBreakdown, RateQuote)
- crossbuy.domain.money (round2)
"""
from __future__ import annotations

from decimal import Decimal
from typing import Optional

from crossbuy.application.rate_source import RateSource
from crossbuy.config import settings
from crossbuy.domain.models import PriceBreakdown, RateQuote, utcnow
from crossbuy.domain.money import Number, round2, to_decimal
from crossbuy.shared.validators import normalize_currency_code

SERVICE_FEE_RATE = Decimal("0.03")


class PricingEngine:
    def __init__(self, rate_source: RateSource):
        self.rate_source = rate_source

    def apply_pricing(self, amount: Number, target_currency: Optional[str] = None) -> PriceBreakdown:
        """
        Turn a base-currency amount into an itemized customer price.

        Args:
            amount: Amount in the base currency (>= 0, validated by the caller)
            target_currency: Target currency (defaults to settings.default_currency)

        Returns:
            PriceBreakdown with every money field rounded to cents
        """
        target = normalize_currency_code(target_currency, settings.default_currency)
        resolution = self.rate_source.resolve(target)
        rate, markup = resolution.rate, resolution.markup

        value = to_decimal(amount)
        converted = value * rate
        converted_with_markup = converted * markup
        service_fee_amount = converted_with_markup * SERVICE_FEE_RATE
        final_per_item = converted_with_markup * (1 + SERVICE_FEE_RATE)

        return PriceBreakdown(
            currency=target,
            rate=rate,
            rate_with_markup=round2(rate * markup),
            converted=round2(converted),
            converted_with_markup=round2(converted_with_markup),
            final_per_item=round2(final_per_item),
            service_fee_percent=SERVICE_FEE_RATE,
            service_fee_amount=round2(service_fee_amount),
            is_custom_rate=resolution.is_custom,
        )

    def quote_rate(self, target_currency: Optional[str] = None) -> RateQuote:
        """Return the current base->target rate with and without markup."""
        target = normalize_currency_code(target_currency, settings.default_currency)
        resolution = self.rate_source.resolve(target)
        return RateQuote(
            base=self.rate_source.base_currency,
            target=target,
            rate=resolution.rate,
            rate_with_markup=round2(resolution.rate * resolution.markup),
            is_custom=resolution.is_custom,
            timestamp=utcnow(),
        )
