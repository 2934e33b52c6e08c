# src/crossbuy/adapters/catalog/__init__.py
"""
Catalog Adapters - Marketplace product lookup
"""

from crossbuy.adapters.catalog.base import ProductCatalog
from crossbuy.adapters.catalog.static_catalog import StaticCatalog, mock_products

__all__ = ["ProductCatalog", "StaticCatalog", "mock_products"]
