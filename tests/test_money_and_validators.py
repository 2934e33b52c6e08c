# tests/test_money_and_validators.py
"""
Money and Validator Tests - Decimal helpers and boundary validation

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- crossbuy.domain.money (to_decimal, round2)
- crossbuy.shared.validators (currency, quantity and amount checks)
- pytest (testing framework)
"""
from decimal import Decimal

import pytest

from crossbuy.domain.errors import InvalidInputError
from crossbuy.domain.money import is_finite_positive, round2, to_decimal
from crossbuy.shared.validators import (
    MAX_AMOUNT,
    normalize_currency_code,
    optional_amount,
    require_amount,
    require_quantity,
    validate_currency_code,
    validate_quantity,
)


class TestMoney:
    def test_to_decimal_avoids_float_artefacts(self):
        assert to_decimal(0.1) == Decimal("0.1")
        assert to_decimal("13.5") == Decimal("13.5")
        assert to_decimal(7) == Decimal("7")

    def test_to_decimal_rejects_non_numbers(self):
        with pytest.raises(ValueError):
            to_decimal("abc")
        with pytest.raises(ValueError):
            to_decimal(True)

    def test_round2_is_half_up(self):
        assert round2(Decimal("1.005")) == Decimal("1.01")
        assert round2(Decimal("2.675")) == Decimal("2.68")
        assert round2(Decimal("1.004")) == Decimal("1.00")

    def test_round2_handles_values_beyond_context_precision(self):
        value = Decimal("1e27") * Decimal("13.65")
        assert round2(value) == Decimal("13650000000000000000000000000")
        assert round2(value).as_tuple().exponent == -2

    def test_is_finite_positive(self):
        assert is_finite_positive(Decimal("0.01"))
        assert not is_finite_positive(Decimal("0"))
        assert not is_finite_positive(Decimal("-1"))
        assert not is_finite_positive(Decimal("NaN"))
        assert not is_finite_positive(Decimal("Infinity"))


class TestCurrencyCodes:
    def test_validate_currency_code(self):
        assert validate_currency_code("RUB")
        assert not validate_currency_code("rub")
        assert not validate_currency_code("RU")
        assert not validate_currency_code("")
        assert not validate_currency_code(None)

    def test_normalize_upper_cases_and_defaults(self):
        assert normalize_currency_code(" usd ", "RUB") == "USD"
        assert normalize_currency_code(None, "RUB") == "RUB"
        assert normalize_currency_code("", "RUB") == "RUB"

    def test_normalize_rejects_garbage(self):
        with pytest.raises(InvalidInputError):
            normalize_currency_code("DOLLARS", "RUB")


class TestQuantity:
    def test_validate_quantity(self):
        assert validate_quantity(1)
        assert validate_quantity(10)
        assert not validate_quantity(0)
        assert not validate_quantity(-3)
        assert not validate_quantity(1.5)
        assert not validate_quantity(True)
        assert not validate_quantity("2")

    def test_require_quantity_raises(self):
        assert require_quantity(3) == 3
        with pytest.raises(InvalidInputError, match="Quantity"):
            require_quantity(0)


class TestAmounts:
    def test_require_amount_accepts_numbers_and_strings(self):
        assert require_amount("100") == Decimal("100")
        assert require_amount(0) == Decimal("0")
        assert require_amount(12.5) == Decimal("12.5")

    def test_require_amount_rejects_negative_and_nan(self):
        with pytest.raises(InvalidInputError, match=">= 0"):
            require_amount(-1)
        with pytest.raises(InvalidInputError, match="finite"):
            require_amount("NaN")
        with pytest.raises(InvalidInputError, match="number"):
            require_amount("ten")

    def test_require_amount_rejects_absurdly_large(self):
        assert require_amount(MAX_AMOUNT) == MAX_AMOUNT
        with pytest.raises(InvalidInputError, match="<="):
            require_amount("1e20")
        with pytest.raises(InvalidInputError, match="<="):
            optional_amount(MAX_AMOUNT + 1, "shipping_cost")

    def test_require_amount_strictly_positive(self):
        with pytest.raises(InvalidInputError, match="> 0"):
            require_amount(0, "rate", allow_zero=False)

    def test_optional_amount(self):
        assert optional_amount(None, "weight") is None
        assert optional_amount("2.5", "weight") == Decimal("2.5")
