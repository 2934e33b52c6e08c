# tests/test_allocation.py
"""
Allocation Tests - Proportional shipping cost split

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- crossbuy.domain.allocation (allocate_shipping_cost)
"""
from decimal import Decimal

from crossbuy.domain.allocation import allocate_shipping_cost


class TestAllocateShippingCost:
    def test_proportional_split(self):
        fees = allocate_shipping_cost(
            {"a": Decimal("100"), "b": Decimal("200"), "c": Decimal("300")}, Decimal("60")
        )
        assert fees == {"a": Decimal("10.00"), "b": Decimal("20.00"), "c": Decimal("30.00")}

    def test_zero_subtotal_pays_nothing(self):
        fees = allocate_shipping_cost({"a": Decimal("0"), "b": Decimal("100")}, Decimal("60"))
        assert fees == {"a": Decimal("0.00"), "b": Decimal("60.00")}

    def test_all_zero_subtotals(self):
        fees = allocate_shipping_cost({"a": Decimal("0"), "b": Decimal("0")}, Decimal("60"))
        assert fees == {"a": Decimal("0.00"), "b": Decimal("0.00")}

    def test_remainder_is_not_redistributed(self):
        fees = allocate_shipping_cost(
            {"a": Decimal("1"), "b": Decimal("1"), "c": Decimal("1")}, Decimal("100")
        )
        assert set(fees.values()) == {Decimal("33.33")}
        assert sum(fees.values()) == Decimal("99.99")

    def test_deterministic(self):
        subtotals = {"a": Decimal("17.30"), "b": Decimal("82.70")}
        assert allocate_shipping_cost(subtotals, Decimal("45.5")) == allocate_shipping_cost(
            subtotals, Decimal("45.5")
        )

    def test_zero_cost(self):
        fees = allocate_shipping_cost({"a": Decimal("10")}, Decimal("0"))
        assert fees == {"a": Decimal("0.00")}
