# tests/test_memory_store.py
"""
Memory Store Tests - Unique constraints, upsert, bulk update and rollback

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- crossbuy.adapters.persistence.memory_store (MemoryStore)
- pytest (testing framework)
"""
import threading
from decimal import Decimal

import pytest

from crossbuy.application.currency_rates import default_rate_records
from crossbuy.domain.errors import DuplicateKeyError, NotFoundError
from crossbuy.domain.models import ActivityEvent, ActivityType, Order, PriceSnapshot
from crossbuy.domain.status import OrderStatus


def _snapshot(snapshot_id="s1"):
    return PriceSnapshot(
        id=snapshot_id,
        product_id="p1",
        currency="RUB",
        rate_used=Decimal("13"),
        converted_amount=Decimal("13.00"),
        final_per_item_price=Decimal("14.06"),
        service_fee_percent=Decimal("0.03"),
    )


class TestUniqueConstraints:
    def test_duplicate_rate(self, store):
        record = default_rate_records()[0]
        store.insert_rate(record)
        with pytest.raises(DuplicateKeyError):
            store.insert_rate(record)

    def test_duplicate_cart_owner(self, store):
        store.create_cart("u1", "c1")
        with pytest.raises(DuplicateKeyError):
            store.create_cart("u1", "c2")
        assert store.get_cart_id("u1") == "c1"

    def test_duplicate_snapshot(self, store):
        store.add_snapshot(_snapshot())
        with pytest.raises(DuplicateKeyError):
            store.add_snapshot(_snapshot())


class TestCartLines:
    def test_upsert_increments(self, store):
        store.create_cart("u1", "c1")
        first = store.upsert_cart_line("c1", "p1", "", 2, "s1")
        second = store.upsert_cart_line("c1", "p1", "", 3, "s2")

        assert first.id == second.id
        assert second.quantity == 5
        assert second.snapshot_id == "s2"
        assert len(store.list_cart_lines("c1")) == 1

    def test_concurrent_upserts_do_not_lose_increments(self, store):
        store.create_cart("u1", "c1")

        def add():
            for _ in range(50):
                store.upsert_cart_line("c1", "p1", "", 1, "s")

        threads = [threading.Thread(target=add) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        lines = store.list_cart_lines("c1")
        assert len(lines) == 1
        assert lines[0].quantity == 200

    def test_delete_cart_removes_lines(self, store):
        store.create_cart("u1", "c1")
        line = store.upsert_cart_line("c1", "p1", "", 1, "s1")
        assert store.delete_cart("u1")
        assert store.get_cart_line(line.id) is None
        assert not store.delete_cart("u1")

    def test_upsert_requires_a_live_cart(self, store):
        with pytest.raises(NotFoundError):
            store.upsert_cart_line("c1", "p1", "", 1, "s1")

        store.create_cart("u1", "c1")
        store.delete_cart("u1")
        with pytest.raises(NotFoundError):
            store.upsert_cart_line("c1", "p1", "", 1, "s1")
        assert store.list_cart_lines("c1") == []

    def test_returned_records_are_copies(self, store):
        store.create_cart("u1", "c1")
        line = store.upsert_cart_line("c1", "p1", "", 1, "s1")
        line.quantity = 99
        assert store.get_cart_line(line.id).quantity == 1


class TestOrders:
    def test_bulk_update(self, store):
        for order_id in ("a", "b", "c"):
            store.add_order(Order(id=order_id, user_id="u1", subtotal=Decimal("1")))

        changed = store.update_orders(["a", "b", "missing"], OrderStatus.IN_TRANSIT, "g1")

        assert changed == 2
        assert [o.id for o in store.list_orders_in_group("g1")] == ["a", "b"]
        assert store.get_order("c").status == OrderStatus.PENDING_PROCESSING

    def test_get_orders_skips_missing(self, store):
        store.add_order(Order(id="a", user_id="u1", subtotal=Decimal("1")))
        assert [o.id for o in store.get_orders(["missing", "a", "a"])] == ["a"]


class TestTransaction:
    def test_rollback_on_error(self, store):
        store.create_cart("u1", "c1")
        with pytest.raises(RuntimeError):
            with store.transaction():
                store.delete_cart("u1")
                store.add_order(Order(id="a", user_id="u1", subtotal=Decimal("1")))
                raise RuntimeError("boom")

        assert store.get_cart_id("u1") == "c1"
        assert store.get_order("a") is None

    def test_commit(self, store):
        with store.transaction():
            store.create_cart("u1", "c1")
        assert store.get_cart_id("u1") == "c1"

    def test_rollback_restores_updated_and_removed_rows(self, store):
        store.create_cart("u1", "c1")
        line = store.upsert_cart_line("c1", "p1", "", 2, "s1")
        store.add_order(Order(id="a", user_id="u1", subtotal=Decimal("1")))

        with pytest.raises(RuntimeError):
            with store.transaction():
                store.update_orders(["a"], OrderStatus.IN_TRANSIT, "g1")
                store.delete_cart("u1")
                store.record(ActivityEvent(activity_type=ActivityType.PURCHASE, user_id="u1"))
                raise RuntimeError("boom")

        order = store.get_order("a")
        assert order.status == OrderStatus.PENDING_PROCESSING
        assert order.freight_group_id is None
        assert store.get_cart_line(line.id).quantity == 2
        assert store.upsert_cart_line("c1", "p1", "", 1, "s2").id == line.id
        assert store.list_activities() == []

    def test_only_written_rows_are_copied(self, store):
        for i in range(50):
            store.add_order(Order(id=f"o{i}", user_id="u1", subtotal=Decimal("1")))

        with store.transaction():
            store.update_orders(["o7", "o7"], OrderStatus.IN_TRANSIT)
            store.create_cart("u1", "c1")
            assert [(table, key) for table, key, _ in store._undo] == [
                ("_orders", "o7"),
                ("_carts", "u1"),
            ]
        assert store._undo is None

    def test_nested_block_rolls_back_with_outer(self, store):
        with pytest.raises(RuntimeError):
            with store.transaction():
                with store.transaction():
                    store.create_cart("u1", "c1")
                store.add_order(Order(id="a", user_id="u1", subtotal=Decimal("1")))
                raise RuntimeError("boom")

        assert store.get_cart_id("u1") is None
        assert store.get_order("a") is None
