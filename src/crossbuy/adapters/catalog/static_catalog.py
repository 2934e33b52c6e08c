# src/crossbuy/adapters/catalog/static_catalog.py
"""
Static Catalog - Fixed product list standing in for the marketplace client

Used by the command-line entry point and for local runs without marketplace
credentials. mock_products() builds a deterministic list of demo products,
every third one with two variants.

Files that USE this module:
- crossbuy.app (default catalog)
- tests.conftest (catalog fixture)
- tests.test_catalog (unit tests)

Files that this module USES:
- crossbuy.adapters.catalog.base (ProductCatalog interface)
- crossbuy.domain.models (Product, ProductVariant)
"""
from __future__ import annotations

from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from crossbuy.adapters.catalog.base import ProductCatalog
from crossbuy.domain.models import Product, ProductVariant


def mock_products(count: int = 20) -> List[Product]:
    products = []
    for i in range(count):
        product_id = f"mock-{i + 1}"
        variants = ()
        if i % 3 == 0:
            variants = (
                ProductVariant(id=f"{product_id}-std", name="Standard"),
                ProductVariant(id=f"{product_id}-xl", price=Decimal(59 + i * 5), name="XL"),
            )
        products.append(
            Product(
                id=product_id,
                title=f"Mock product {i + 1}",
                base_price=Decimal(49 + i * 5),
                images=(f"https://picsum.photos/seed/{product_id}/400/400",),
                variants=variants,
                rating=round(4 + (i % 10) / 10, 1),
                sales=100 + i * 13,
            )
        )
    return products


class StaticCatalog(ProductCatalog):
    def __init__(self, products: Optional[Iterable[Product]] = None):
        self._products: Dict[str, Product] = {
            p.id: p for p in (mock_products() if products is None else products)
        }

    def get_product(self, product_id: str) -> Optional[Product]:
        return self._products.get(product_id)

    def search(self, query: str) -> List[Product]:
        """Case-insensitive substring match on the title."""
        needle = (query or "").strip().lower()
        return [p for p in self._products.values() if needle in p.title.lower()]
