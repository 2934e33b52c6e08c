# src/crossbuy/application/cart_service.py
"""
Cart Service - Cart lines priced at the moment they are added

Every add or re-price resolves the unit price (variant override or base
price), runs the PricingEngine and writes a NEW PriceSnapshot; the cart line
is then pointed at it. Snapshots are never updated, so earlier ones remain
as history. Lines are unique per (cart, product, variant selector): adding
the same combination again increments the quantity.

Files that USE this module:
- crossbuy.application.order_service (cart read and clear on checkout)
- crossbuy.app (composition root)
- tests.test_cart_service (unit tests)

Files that this module USES:
- crossbuy.adapters.catalog.base (ProductCatalog)
- crossbuy.adapters.persistence.base (Store)
- crossbuy.application.pricing_service (PricingEngine)
- crossbuy.application.activity (ActivityDispatcher)
- crossbuy.domain.variants (unit price resolution)
"""
from __future__ import annotations

import logging
from typing import Optional

from crossbuy.adapters.catalog.base import ProductCatalog
from crossbuy.adapters.persistence.base import Store
from crossbuy.application.activity import ActivityDispatcher
from crossbuy.application.pricing_service import PricingEngine
from crossbuy.domain.errors import (
    DuplicateKeyError,
    InvalidInputError,
    InvalidStateError,
    NotFoundError,
)
from crossbuy.domain.models import (
    ActivityEvent,
    ActivityType,
    CartItemView,
    CartLine,
    CartView,
    PriceSnapshot,
    Product,
    new_id,
)
from crossbuy.domain.money import ZERO, is_finite_positive, round2
from crossbuy.domain.variants import resolve_unit_price
from crossbuy.shared.validators import require_quantity

logger = logging.getLogger(__name__)


def _require_owner(owner: str) -> str:
    if not owner or not str(owner).strip():
        raise InvalidInputError("Cart owner is required")
    return owner


class CartService:
    def __init__(
        self,
        store: Store,
        catalog: ProductCatalog,
        pricing: PricingEngine,
        activity: Optional[ActivityDispatcher] = None,
    ):
        self.store = store
        self.catalog = catalog
        self.pricing = pricing
        self.activity = activity

    def add_line(
        self,
        owner: str,
        product_id: str,
        variant_selector: Optional[str] = None,
        quantity: int = 1,
        currency: Optional[str] = None,
    ) -> CartView:
        """
        Add a product to the owner's cart.

        Args:
            owner: Cart owner (user id)
            product_id: Marketplace product id
            variant_selector: Opaque variant key; empty means the plain product
            quantity: Units to add (>= 1)
            currency: Target currency for pricing

        Returns:
            The updated cart

        Raises:
            InvalidInputError: If quantity < 1 or the unit price is not positive
            NotFoundError: If the product is unknown
        """
        _require_owner(owner)
        quantity = require_quantity(quantity)
        selector = variant_selector or ""

        product = self._load_product(product_id)
        snapshot = self._snapshot(product, selector, currency)
        cart_id = self._ensure_cart(owner)
        try:
            line = self.store.upsert_cart_line(cart_id, product.id, selector, quantity, snapshot.id)
        except NotFoundError:
            # The cart was checked out between lookup and write; start a new one.
            logger.debug("Cart %s of %s is gone, retrying in a new cart", cart_id, owner)
            cart_id = self._ensure_cart(owner)
            line = self.store.upsert_cart_line(cart_id, product.id, selector, quantity, snapshot.id)
        logger.info(
            "Cart %s: %s x%d (line qty %d) at %s %s",
            cart_id, product.id, quantity, line.quantity,
            snapshot.final_per_item_price, snapshot.currency,
        )

        if self.activity is not None:
            self.activity.dispatch(
                ActivityEvent(
                    activity_type=ActivityType.ADD_TO_CART,
                    user_id=owner,
                    product_id=product.id,
                    metadata={"quantity": quantity, "variant": selector},
                )
            )
        return self.get_cart(owner)

    def update_line(
        self, owner: str, line_id: str, quantity: int, currency: Optional[str] = None
    ) -> CartView:
        """Set a line's quantity and re-price it with a fresh snapshot."""
        quantity = require_quantity(quantity)
        line = self._owned_line(owner, line_id)
        product = self._load_product(line.product_id)
        snapshot = self._snapshot(product, line.variant_selector, currency)

        line.quantity = quantity
        line.snapshot_id = snapshot.id
        self.store.save_cart_line(line)
        return self.get_cart(owner)

    def remove_line(self, owner: str, line_id: str) -> CartView:
        """
        Raises:
            NotFoundError: If the line is not in the owner's cart
        """
        line = self._owned_line(owner, line_id)
        self.store.delete_cart_line(line.id)
        logger.info("Cart %s: removed line %s", line.cart_id, line.id)
        return self.get_cart(owner)

    def clear(self, owner: str) -> None:
        """Delete the owner's cart; a missing cart is a no-op."""
        if self.store.delete_cart(owner):
            logger.info("Cart of %s cleared", owner)

    def get_cart(self, owner: str) -> CartView:
        cart_id = self.store.get_cart_id(owner)
        if cart_id is None:
            return CartView()

        items = []
        for line in self.store.list_cart_lines(cart_id):
            snapshot = self.store.get_snapshot(line.snapshot_id)
            product = self.store.get_product(line.product_id)
            price = snapshot.final_per_item_price if snapshot is not None else ZERO
            items.append(
                CartItemView(
                    id=line.id,
                    product_id=line.product_id,
                    title=product.title if product is not None else line.product_id,
                    images=product.images if product is not None else (),
                    quantity=line.quantity,
                    variant_selector=line.variant_selector,
                    price=price,
                    line_total=price * line.quantity,
                    currency=snapshot.currency if snapshot is not None else None,
                )
            )
        subtotal = round2(sum((i.line_total for i in items), ZERO))
        return CartView(id=cart_id, items=tuple(items), subtotal=subtotal)

    def _load_product(self, product_id: str) -> Product:
        product = self.catalog.get_product(product_id)
        if product is None:
            raise NotFoundError(f"Product {product_id} not found")
        # Keep display data for cart and order views.
        self.store.upsert_product(product)
        return product

    def _snapshot(self, product: Product, selector: str, currency: Optional[str]) -> PriceSnapshot:
        unit_price = resolve_unit_price(product, selector)
        if not is_finite_positive(unit_price):
            raise InvalidInputError(f"Product {product.id} has no positive price")

        breakdown = self.pricing.apply_pricing(unit_price, currency)
        snapshot = PriceSnapshot(
            id=new_id(),
            product_id=product.id,
            currency=breakdown.currency,
            rate_used=breakdown.rate,
            converted_amount=breakdown.converted,
            final_per_item_price=breakdown.final_per_item,
            service_fee_percent=breakdown.service_fee_percent,
        )
        self.store.add_snapshot(snapshot)
        return snapshot

    def _ensure_cart(self, owner: str) -> str:
        cart_id = self.store.get_cart_id(owner)
        if cart_id is not None:
            return cart_id
        try:
            self.store.create_cart(owner, new_id())
        except DuplicateKeyError:
            logger.debug("Cart for %s created concurrently, re-reading", owner)
        cart_id = self.store.get_cart_id(owner)
        if cart_id is None:
            raise InvalidStateError(f"Cart for {owner} could not be created")
        return cart_id

    def _owned_line(self, owner: str, line_id: str) -> CartLine:
        cart_id = self.store.get_cart_id(owner)
        line = self.store.get_cart_line(line_id)
        if cart_id is None or line is None or line.cart_id != cart_id:
            raise NotFoundError(f"Cart item {line_id} not found")
        return line
