# src/crossbuy/adapters/catalog/base.py
"""
Base Catalog Interface for Marketplace Products

Files that USE this module:
- crossbuy.adapters.catalog.static_catalog (StaticCatalog implements it)
- crossbuy.application.cart_service (product lookup)

Files that this module USES:
- crossbuy.domain.models (Product)
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from crossbuy.domain.models import Product


class ProductCatalog(ABC):
    @abstractmethod
    def get_product(self, product_id: str) -> Optional[Product]:
        """Return the product, or None when the marketplace does not know it."""
        raise NotImplementedError

    @abstractmethod
    def search(self, query: str) -> List[Product]:
        raise NotImplementedError
