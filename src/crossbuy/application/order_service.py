# src/crossbuy/application/order_service.py
"""
Order Service - Cart checkout and order administration

create_from_cart turns the owner's cart into an order in one transaction:
the order is written with lines copying each cart line's snapshot price
(nothing is re-priced) and the cart is cleared. If anything fails, neither
happens. Purchase events are dispatched only after the transaction commits.

Administrative operations:
- override_status: writes any status, bypassing the state machine
- mark_purchased / unmark_purchased: the procurement-side purchase flag

Files that USE this module:
- crossbuy.app (composition root)
- tests.test_order_service (unit tests)

Files that this module USES:
- crossbuy.adapters.persistence.base (Store)
- crossbuy.application.cart_service (CartService)
- crossbuy.application.activity (ActivityDispatcher)
- crossbuy.domain.status (OrderStatus, transition)
"""
from __future__ import annotations

import logging
from typing import List, Optional, Union

from crossbuy.adapters.persistence.base import Store
from crossbuy.application.activity import ActivityDispatcher
from crossbuy.application.cart_service import CartService
from crossbuy.domain.errors import InvalidStateError, NotFoundError
from crossbuy.domain.models import (
    ActivityEvent,
    ActivityType,
    Order,
    OrderLine,
    OrderView,
    new_id,
    utcnow,
)
from crossbuy.domain.money import ZERO
from crossbuy.domain.status import OrderStatus, transition

logger = logging.getLogger(__name__)


class OrderService:
    def __init__(
        self,
        store: Store,
        cart: CartService,
        activity: Optional[ActivityDispatcher] = None,
    ):
        self.store = store
        self.cart = cart
        self.activity = activity

    def create_from_cart(self, owner: str) -> OrderView:
        """
        Create an order from the owner's current cart and clear the cart.

        Returns:
            The new order, status pending_processing, delivery fee 0

        Raises:
            InvalidStateError: If the cart is empty
        """
        with self.store.transaction():
            cart = self.cart.get_cart(owner)
            if cart.is_empty:
                raise InvalidStateError("Cart is empty")

            order = Order(
                id=new_id(),
                user_id=owner,
                subtotal=cart.subtotal,
                delivery_fee=ZERO,
                status=OrderStatus.PENDING_PROCESSING,
                lines=tuple(
                    OrderLine(
                        product_id=item.product_id,
                        title=item.title,
                        quantity=item.quantity,
                        variant_selector=item.variant_selector,
                        final_price_at_purchase=item.price,
                    )
                    for item in cart.items
                ),
            )
            self.store.add_order(order)
            self.cart.clear(owner)

        logger.info(
            "Order %s created for %s: %d lines, subtotal %s",
            order.id, owner, len(order.lines), order.subtotal,
        )
        if self.activity is not None:
            for line in order.lines:
                self.activity.dispatch(
                    ActivityEvent(
                        activity_type=ActivityType.PURCHASE,
                        user_id=owner,
                        product_id=line.product_id,
                        metadata={"order_id": order.id, "quantity": line.quantity},
                    )
                )
        return OrderView.from_order(order)

    def get_status(self, order_id: str) -> OrderView:
        return OrderView.from_order(self._get(order_id))

    def list_user_orders(self, user_id: str) -> List[OrderView]:
        """The user's orders, newest first."""
        return [OrderView.from_order(o) for o in self.store.list_orders(user_id)]

    def list_all_orders(self) -> List[OrderView]:
        return [OrderView.from_order(o) for o in self.store.list_orders()]

    def override_status(self, order_id: str, status: Union[str, OrderStatus]) -> OrderView:
        """
        Administrative escape hatch: set any status without transition checks.

        Raises:
            NotFoundError: If the order does not exist
            InvalidInputError: If the status is unknown
        """
        new_status = OrderStatus.parse(status)
        order = self._get(order_id)
        previous = order.status
        order.status = new_status
        self.store.save_order(order)
        logger.info(
            "Order %s status overridden: %s -> %s",
            order.id, previous.value, new_status.value,
        )
        return OrderView.from_order(order)

    def mark_purchased(self, order_id: str) -> OrderView:
        """
        Confirm the upstream purchase.

        Sets purchased_at on the first mark; a pending order advances to procured.
        """
        order = self._get(order_id)
        if not order.purchased:
            order.purchased = True
            order.purchased_at = utcnow()
        if order.status == OrderStatus.PENDING_PROCESSING:
            order.status = transition(order.status, OrderStatus.PROCURED)
        self.store.save_order(order)
        logger.info("Order %s marked as purchased (status %s)", order.id, order.status.value)
        return OrderView.from_order(order)

    def unmark_purchased(self, order_id: str) -> OrderView:
        """Clear the purchase flag; the status is left as it is."""
        order = self._get(order_id)
        order.purchased = False
        order.purchased_at = None
        self.store.save_order(order)
        logger.info("Order %s unmarked as purchased", order.id)
        return OrderView.from_order(order)

    def _get(self, order_id: str) -> Order:
        order = self.store.get_order(order_id)
        if order is None:
            raise NotFoundError(f"Order {order_id} not found")
        return order
