# src/crossbuy/adapters/__init__.py
"""
Adapters Layer - External Interfaces

This package contains all adapters for external systems:
- Providers (exchange rate API)
- Catalog (marketplace products)
- Persistence (storage)
- Formatting (output)
"""

__all__ = []
