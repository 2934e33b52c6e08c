# src/crossbuy/shared/__init__.py
"""
Shared Utilities - Cross-cutting Concerns

This package contains shared utilities used across all layers:
- Validation
- Logging configuration
"""

from crossbuy.shared.validators import (
    normalize_currency_code,
    optional_amount,
    require_amount,
    require_quantity,
    validate_currency_code,
    validate_quantity,
)
from crossbuy.shared.logging_conf import setup_logging

__all__ = [
    "normalize_currency_code",
    "optional_amount",
    "require_amount",
    "require_quantity",
    "validate_currency_code",
    "validate_quantity",
    "setup_logging",
]
