# src/crossbuy/adapters/formatting/__init__.py
"""
Formatting Adapters - Text Formatting

This package contains plain text formatters for operator and CLI output.
"""

from crossbuy.adapters.formatting.formatter import (
    format_breakdown,
    format_cargo,
    format_cart,
    format_order,
    format_quote,
    format_rates,
    format_tracking,
)

__all__ = [
    "format_breakdown",
    "format_cargo",
    "format_cart",
    "format_order",
    "format_quote",
    "format_rates",
    "format_tracking",
]
