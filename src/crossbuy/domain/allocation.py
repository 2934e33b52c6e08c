# src/crossbuy/domain/allocation.py
"""
Shipping Cost Allocation - Proportional split of a freight bill

Each order in a freight group pays a share of the cargo's shipping cost
proportional to its merchandise subtotal. Shares are rounded to cents one by
one and the rounding remainder is NOT redistributed, so the sum of fees may
differ from the shipping cost by up to one cent per order.

The function is pure: the same subtotals and cost always give the same fees,
which makes replaying a cargo arrival safe.

Files that USE this module:
- crossbuy.application.logistics_service (cargo arrival)
- tests.test_allocation (unit tests)

Files that this module USES:
- crossbuy.domain.money (round2)
"""
from __future__ import annotations

from decimal import Decimal
from typing import Dict, Mapping

from crossbuy.domain.money import ZERO, round2


def allocate_shipping_cost(
    subtotals: Mapping[str, Decimal], shipping_cost: Decimal
) -> Dict[str, Decimal]:
    """
    Split shipping_cost across orders by subtotal share.

    Args:
        subtotals: Order id -> merchandise subtotal
        shipping_cost: Total freight cost to distribute

    Returns:
        Order id -> delivery fee rounded to cents (0 for every order when
        the group's total value is 0)
    """
    total_value = sum(subtotals.values(), ZERO)
    fees: Dict[str, Decimal] = {}
    for order_id, subtotal in subtotals.items():
        share_ratio = subtotal / total_value if total_value > 0 else ZERO
        fees[order_id] = round2(shipping_cost * share_ratio)
    return fees
