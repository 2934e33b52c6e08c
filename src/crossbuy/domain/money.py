# src/crossbuy/domain/money.py
"""
Money Helpers - Decimal conversion and rounding

All monetary math runs on Decimal at full precision; only output fields are
rounded to two places with ROUND_HALF_UP.
"""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Union

CENT = Decimal("0.01")
ZERO = Decimal("0")

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
    """
    Convert a number to Decimal without binary float artefacts.

    Args:
        value: Decimal, int, float or numeric string

    Returns:
        Decimal value

    Raises:
        ValueError: If the value is not numeric
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Not a monetary value: {value!r}")
    try:
        return Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError(f"Not a monetary value: {value!r}") from e


def round2(value: Number) -> Decimal:
    """Round to cents, half up."""
    amount = to_decimal(value)
    with localcontext() as ctx:
        # quantize needs room for every integer digit plus the two cents.
        ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        return amount.quantize(CENT, ROUND_HALF_UP)


def is_finite_positive(value: Decimal) -> bool:
    return value.is_finite() and value > 0
