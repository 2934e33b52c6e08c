# src/crossbuy/domain/variants.py
"""
Variant Selectors - Tolerant parsing of opaque variant keys

A cart line's variant selector is an opaque string chosen by the client.
It is either a plain variant identifier ("sku-42") or a JSON object such as
'{"sku_id": "sku-42", "price": 59.0}'. Parsing never raises: anything that
cannot be understood yields None and pricing falls back to the base price.

A price carried in the selector comes from the client and is never used for
pricing; only the catalog's own variant price can override the base price.

Files that USE this module:
- crossbuy.application.cart_service (unit price resolution)
- tests.test_variants (unit tests)

Files that this module USES:
- crossbuy.domain.models (Product, ProductVariant)
- crossbuy.domain.money (to_decimal)
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, Optional

from crossbuy.domain.models import Product, ProductVariant
from crossbuy.domain.money import is_finite_positive, to_decimal

ID_KEYS = ("sku_id", "skuId", "variant_id", "variantId", "id")
PRICE_KEYS = ("price", "price_cny", "priceCny")


@dataclass(frozen=True)
class VariantToken:
    identifier: Optional[str] = None
    price: Optional[Decimal] = None


def _positive_decimal(value: Any) -> Optional[Decimal]:
    if value is None:
        return None
    try:
        amount = to_decimal(value)
    except (ValueError, TypeError):
        return None
    return amount if is_finite_positive(amount) else None


def _first(data: dict, keys: Iterable[str]) -> Any:
    for key in keys:
        if data.get(key) not in (None, ""):
            return data[key]
    return None


def parse_variant_selector(selector: Optional[str]) -> Optional[VariantToken]:
    """
    Parse a variant selector into a token.

    Args:
        selector: Opaque selector string (may be None or empty)

    Returns:
        VariantToken, or None when the selector is empty or unreadable
    """
    if selector is None or not isinstance(selector, str):
        return None
    text = selector.strip()
    if not text:
        return None

    # Only objects, arrays and quoted strings are JSON; "12.5" or "007" is an id.
    if text[0] not in "{[\"":
        return VariantToken(identifier=text)

    try:
        data = json.loads(text)
    except ValueError:
        return None

    if isinstance(data, dict):
        identifier = _first(data, ID_KEYS)
        price = _positive_decimal(_first(data, PRICE_KEYS))
        if identifier is None and price is None:
            return None
        return VariantToken(
            identifier=str(identifier) if identifier is not None else None,
            price=price,
        )
    if isinstance(data, (str, int)) and not isinstance(data, bool) and str(data):
        return VariantToken(identifier=str(data))
    return None


def match_variant(
    variants: Optional[Iterable[ProductVariant]], token: Optional[VariantToken]
) -> Optional[ProductVariant]:
    """Find the variant whose id equals the token identifier."""
    if token is None or token.identifier is None or not variants:
        return None
    for variant in variants:
        if variant is not None and str(variant.id) == token.identifier:
            return variant
    return None


def resolve_unit_price(product: Product, selector: Optional[str]) -> Decimal:
    """
    Return the base-currency unit price for a product and variant selector.

    The matched variant's price wins when it is positive; otherwise the
    product's base price is used.
    """
    variant = match_variant(product.variants, parse_variant_selector(selector))
    if variant is not None:
        price = _positive_decimal(variant.price)
        if price is not None:
            return price
    return product.base_price
