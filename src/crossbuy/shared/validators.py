# src/crossbuy/shared/validators.py
"""
Input Validation Utilities - Data Validation at the Service Boundary

This module provides validation functions for currency codes, quantities and
monetary amounts. Predicates return bool; the require_* helpers raise
InvalidInputError with a human-readable reason.

Files that USE this module:
- crossbuy.config.settings (currency code validation in field validators)
- crossbuy.application.* (quantity and amount checks)

Files that this module USES:
- crossbuy.domain.errors (InvalidInputError)
- crossbuy.domain.money (to_decimal)
"""
import re
from decimal import Decimal
from typing import Any, Optional

from crossbuy.domain.errors import InvalidInputError
from crossbuy.domain.money import to_decimal

_CURRENCY_RE = re.compile(r"^[A-Z]{3}$")

# Largest accepted monetary input, in any currency.
MAX_AMOUNT = Decimal("1000000000000")


def validate_currency_code(code: str) -> bool:
    """
    Validate ISO-4217 style currency code format.
    
    Args:
        code: Currency code to validate (e.g., "RUB")
        
    Returns:
        True if valid, False otherwise
    """
    if not code or not isinstance(code, str):
        return False
    return bool(_CURRENCY_RE.match(code))


def normalize_currency_code(code: Optional[str], default: str) -> str:
    """
    Upper-case and strip a currency code, falling back to default when empty.

    Raises:
        InvalidInputError: If the code is not three letters
    """
    text = (code or "").strip().upper() or default
    if not validate_currency_code(text):
        raise InvalidInputError(f"Invalid currency code: {code!r}")
    return text


def validate_quantity(quantity: Any) -> bool:
    """Quantities are plain ints >= 1 (bool is rejected)."""
    return isinstance(quantity, int) and not isinstance(quantity, bool) and quantity >= 1


def require_quantity(quantity: Any) -> int:
    if not validate_quantity(quantity):
        raise InvalidInputError(f"Quantity must be a positive integer, got {quantity!r}")
    return quantity


def require_amount(value: Any, name: str = "amount", allow_zero: bool = True) -> Decimal:
    """
    Convert and validate a monetary input.
    
    Args:
        value: Number or numeric string
        name: Field name used in the error message
        allow_zero: Whether 0 is accepted
        
    Returns:
        Decimal amount
        
    Raises:
        InvalidInputError: If the value is not numeric, not finite or out of range
    """
    try:
        amount = to_decimal(value)
    except (ValueError, TypeError):
        raise InvalidInputError(f"{name} must be a number, got {value!r}")
    if not amount.is_finite():
        raise InvalidInputError(f"{name} must be finite, got {value!r}")
    if amount < 0 or (amount == 0 and not allow_zero):
        bound = ">= 0" if allow_zero else "> 0"
        raise InvalidInputError(f"{name} must be {bound}, got {value!r}")
    if amount > MAX_AMOUNT:
        raise InvalidInputError(f"{name} must be <= {MAX_AMOUNT}, got {value!r}")
    return amount


def optional_amount(value: Any, name: str) -> Optional[Decimal]:
    return None if value is None else require_amount(value, name)
