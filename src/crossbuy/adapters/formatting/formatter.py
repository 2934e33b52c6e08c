# src/crossbuy/adapters/formatting/formatter.py
"""
Text Formatter - Plain Text Presentation

This module renders price breakdowns, carts, orders, tracking data and the
currency rate table as plain text for the command line and operator logs.
Money is always printed with two decimals.

Files that USE this module:
- crossbuy.app (CLI output)
- tests.test_formatter (unit tests)

Files that this module USES:
- crossbuy.domain.models (views and records to format)
"""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional

from crossbuy.domain.models import (
    CargoTracking,
    CartView,
    OrderTracking,
    OrderView,
    PriceBreakdown,
    RateQuote,
    RateRecord,
)


def _money(value: Optional[Decimal], currency: Optional[str] = None) -> str:
    if value is None:
        return "N/A"
    text = f"{value:.2f}"
    return f"{text} {currency}" if currency else text


def _when(value: Optional[datetime]) -> str:
    if value is None:
        return "—"
    return value.strftime("%Y-%m-%d %H:%M UTC")


def format_breakdown(amount: Decimal, base_currency: str, breakdown: PriceBreakdown) -> str:
    """
    Format a price breakdown as a multi-line message.

    Args:
        amount: Original amount in the base currency
        base_currency: Base currency code
        breakdown: Result of PricingEngine.apply_pricing

    Returns:
        Formatted string with the rate, each pricing step and the final price
    """
    cur = breakdown.currency
    rate_kind = "custom" if breakdown.is_custom_rate else "market"
    fee_pct = breakdown.service_fee_percent * 100
    return "\n".join(
        [
            f"{_money(amount, base_currency)} -> {cur}",
            f"Rate ({rate_kind}): {breakdown.rate} (with markup {breakdown.rate_with_markup})",
            f"Converted: {_money(breakdown.converted, cur)}",
            f"With markup: {_money(breakdown.converted_with_markup, cur)}",
            f"Service fee ({fee_pct:.0f}%): {_money(breakdown.service_fee_amount, cur)}",
            f"Final per item: {_money(breakdown.final_per_item, cur)}",
        ]
    )


def format_quote(quote: RateQuote) -> str:
    kind = "custom" if quote.is_custom else "market"
    return (
        f"1 {quote.base} = {quote.rate} {quote.target} ({kind})\n"
        f"With markup: {quote.rate_with_markup} {quote.target}\n"
        f"At {_when(quote.timestamp)}"
    )


def format_rates(records: Iterable[RateRecord]) -> str:
    """
    Format the currency rate table, one currency per line.

    Inactive currencies are marked as such.
    """
    lines = []
    for r in records:
        flag = "" if r.is_active else " [inactive]"
        lines.append(f"{r.code} {r.symbol}  {r.rate_from_base} x{r.markup}  {r.name}{flag}")
    return "\n".join(lines) if lines else "No currency rates configured"


def format_cart(cart: CartView) -> str:
    if cart.is_empty:
        return "Cart is empty"
    lines = []
    for item in cart.items:
        variant = f" [{item.variant_selector}]" if item.variant_selector else ""
        lines.append(
            f"- {item.title}{variant} x{item.quantity}: "
            f"{_money(item.price, item.currency)} = {_money(item.line_total, item.currency)}"
        )
    currency = cart.items[0].currency
    lines.append(f"Subtotal: {_money(cart.subtotal, currency)}")
    return "\n".join(lines)


def format_order(order: OrderView) -> str:
    """Format an order with its lines, totals and purchase state."""
    purchased = f"purchased {_when(order.purchased_at)}" if order.purchased else "not purchased"
    lines = [
        f"Order {order.id} ({order.status.value}, {purchased})",
        f"Created: {_when(order.created_at)}",
    ]
    for item in order.items:
        lines.append(f"- {item.title} x{item.quantity}: {_money(item.final_price_at_purchase)}")
    lines.append(f"Subtotal: {_money(order.subtotal)}")
    lines.append(f"Delivery: {_money(order.delivery_fee)}")
    lines.append(f"Total: {_money(order.total)}")
    return "\n".join(lines)


def format_tracking(tracking: OrderTracking) -> str:
    lines = [
        f"Order {tracking.order_id}: {tracking.status.value}",
        f"Delivery fee: {_money(tracking.delivery_fee)}, total: {_money(tracking.total)}",
    ]
    if not tracking.cargos:
        lines.append("Not shipped yet")
    for cargo in tracking.cargos:
        lines.append(
            f"Cargo {cargo.id}: {cargo.status.value}, arrived {_when(cargo.arrival_date)}, "
            f"shipping {_money(cargo.shipping_cost)}"
        )
    return "\n".join(lines)


def format_cargo(tracking: CargoTracking) -> str:
    return (
        f"Cargo {tracking.cargo_id}: {tracking.status.value}\n"
        f"Arrived: {_when(tracking.arrival_date)}\n"
        f"Shipping cost: {_money(tracking.shipping_cost)}\n"
        f"Orders: {', '.join(tracking.orders) or '—'}"
    )
