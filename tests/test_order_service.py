# tests/test_order_service.py
"""
Order Service Tests - Checkout, price freezing and administration

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- crossbuy.application.order_service (OrderService)
- crossbuy.application.activity (ActivityDispatcher)
- tests.conftest (store, cart and orders fixtures)
- unittest.mock (recorder stubs)
- pytest (testing framework)
"""
from decimal import Decimal
from unittest.mock import Mock, patch

import pytest

from crossbuy.application.activity import ActivityDispatcher
from crossbuy.application.cart_service import CartService
from crossbuy.application.order_service import OrderService
from crossbuy.domain.errors import InvalidInputError, InvalidStateError, NotFoundError
from crossbuy.domain.models import ActivityType
from crossbuy.domain.status import OrderStatus


class TestCreateFromCart:
    def test_order_from_cart(self, cart, orders):
        cart.add_line("u1", "mock-1", quantity=2, currency="RUB")
        cart.add_line("u1", "mock-2", currency="RUB")
        expected_subtotal = cart.get_cart("u1").subtotal

        order = orders.create_from_cart("u1")

        assert order.status == OrderStatus.PENDING_PROCESSING
        assert order.subtotal == expected_subtotal
        assert order.delivery_fee == Decimal("0")
        assert order.total == order.subtotal
        assert len(order.items) == 2
        assert not order.purchased

    def test_cart_cleared(self, cart, orders):
        cart.add_line("u1", "mock-1")
        orders.create_from_cart("u1")
        assert cart.get_cart("u1").is_empty

    def test_empty_cart(self, orders):
        with pytest.raises(InvalidStateError, match="Cart is empty"):
            orders.create_from_cart("u1")

    def test_prices_frozen_after_rate_change(self, cart, orders, currency_rates):
        cart.add_line("u1", "mock-1", currency="RUB")
        price_in_cart = cart.get_cart("u1").items[0].price

        currency_rates.update_rate("RUB", rate_from_base=20)
        order = orders.create_from_cart("u1")

        assert order.items[0].final_price_at_purchase == price_in_cart
        assert orders.get_status(order.id).items[0].final_price_at_purchase == price_in_cart

    def test_failed_order_write_keeps_cart(self, cart, orders, store):
        cart.add_line("u1", "mock-1")
        with patch.object(store, "add_order", side_effect=RuntimeError("disk full")):
            with pytest.raises(RuntimeError):
                orders.create_from_cart("u1")
        assert not cart.get_cart("u1").is_empty
        assert store.list_orders() == []

    def test_failing_recorder_does_not_affect_order(self, store, catalog, pricing):
        recorder = Mock()
        recorder.record.side_effect = RuntimeError("activity table locked")
        activity = ActivityDispatcher(recorder, max_workers=1)
        cart = CartService(store, catalog, pricing, activity)
        service = OrderService(store, cart, activity)

        cart.add_line("u1", "mock-1")
        order = service.create_from_cart("u1")
        activity.shutdown(wait=True)

        assert store.get_order(order.id) is not None
        kinds = [c[0][0].activity_type for c in recorder.record.call_args_list]
        assert kinds == [ActivityType.ADD_TO_CART, ActivityType.PURCHASE]


class TestQueries:
    def test_list_user_orders_newest_first(self, cart, orders):
        cart.add_line("u1", "mock-1")
        first = orders.create_from_cart("u1")
        cart.add_line("u1", "mock-2")
        second = orders.create_from_cart("u1")
        cart.add_line("u2", "mock-3")
        orders.create_from_cart("u2")

        assert [o.id for o in orders.list_user_orders("u1")] == [second.id, first.id]
        assert len(orders.list_all_orders()) == 3

    def test_get_status_unknown(self, orders):
        with pytest.raises(NotFoundError):
            orders.get_status("missing")


class TestAdministration:
    @pytest.fixture
    def order(self, cart, orders):
        cart.add_line("u1", "mock-1")
        return orders.create_from_cart("u1")

    def test_mark_purchased_moves_pending_to_procured(self, orders, order):
        view = orders.mark_purchased(order.id)
        assert view.purchased
        assert view.purchased_at is not None
        assert view.status == OrderStatus.PROCURED

    def test_mark_purchased_keeps_first_timestamp(self, orders, order):
        first = orders.mark_purchased(order.id).purchased_at
        assert orders.mark_purchased(order.id).purchased_at == first

    def test_unmark_purchased(self, orders, order):
        orders.mark_purchased(order.id)
        view = orders.unmark_purchased(order.id)
        assert not view.purchased
        assert view.purchased_at is None
        assert view.status == OrderStatus.PROCURED

    def test_override_bypasses_state_machine(self, orders, order):
        orders.override_status(order.id, "delivered")
        view = orders.override_status(order.id, "pending_processing")
        assert view.status == OrderStatus.PENDING_PROCESSING

    def test_override_unknown_status(self, orders, order):
        with pytest.raises(InvalidInputError):
            orders.override_status(order.id, "lost")
