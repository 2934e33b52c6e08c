# src/crossbuy/adapters/persistence/memory_store.py
"""
Memory Store - Thread-safe in-process implementation of Store

This module keeps every table in dictionaries guarded by one re-entrant
lock. Unique constraints (rate code, cart owner, cart line key, snapshot id)
raise DuplicateKeyError like a relational store would. transaction() holds
the lock for the whole block and keeps an undo log of the rows it writes;
if the block raises those rows are put back, so a multi-row operation is
applied completely or not at all. Only touched rows are copied.

Files that USE this module:
- crossbuy.app (default store for the composition root)
- tests.* (all service tests run against it)

Files that this module USES:
- crossbuy.adapters.persistence.base (Store interface)
- crossbuy.domain.models (record types)
- crossbuy.domain.errors (DuplicateKeyError, NotFoundError)
"""
from __future__ import annotations

import copy
import logging
import threading
from contextlib import contextmanager
from dataclasses import replace
from typing import Any, Dict, Iterable, Iterator, List, Optional, Set, Tuple

from crossbuy.adapters.persistence.base import Store
from crossbuy.domain.errors import DuplicateKeyError, NotFoundError
from crossbuy.domain.models import (
    ActivityEvent,
    Cargo,
    CartLine,
    FreightGroup,
    Order,
    PriceSnapshot,
    Product,
    RateRecord,
    new_id,
)
from crossbuy.domain.status import OrderStatus

logger = logging.getLogger(__name__)

_MISSING = object()


class MemoryStore(Store):
    """In-memory store with unique constraints and rollback."""

    def __init__(self):
        self._lock = threading.RLock()
        self._rates: Dict[str, RateRecord] = {}
        self._products: Dict[str, Product] = {}
        self._snapshots: Dict[str, PriceSnapshot] = {}
        self._carts: Dict[str, str] = {}  # owner -> cart id
        self._cart_lines: Dict[str, CartLine] = {}
        self._line_keys: Dict[Tuple[str, str, str], str] = {}  # unique key -> line id
        self._orders: Dict[str, Order] = {}
        self._freight_groups: Dict[str, FreightGroup] = {}
        self._cargos: Dict[str, Cargo] = {}
        self._activities: List[ActivityEvent] = []
        # Undo log of the running transaction: (table, key, previous row).
        self._undo: Optional[List[Tuple[str, Any, Any]]] = None
        self._undo_keys: Set[Tuple[str, Any]] = set()

    @contextmanager
    def transaction(self) -> Iterator["MemoryStore"]:
        with self._lock:
            if self._undo is not None:
                # Nested blocks join the outer transaction.
                yield self
                return
            self._undo = []
            activity_mark = len(self._activities)
            try:
                yield self
            except BaseException as e:
                self._rollback(activity_mark)
                logger.debug("Transaction rolled back: %r", e)
                raise
            finally:
                self._undo = None
                self._undo_keys = set()

    def _journal(self, table: str, key: Any) -> None:
        """Remember a row's previous value before its first write in a transaction."""
        if self._undo is None or (table, key) in self._undo_keys:
            return
        self._undo_keys.add((table, key))
        previous = getattr(self, table).get(key, _MISSING)
        if previous is not _MISSING:
            previous = copy.deepcopy(previous)
        self._undo.append((table, key, previous))

    def _rollback(self, activity_mark: int) -> None:
        for table, key, previous in reversed(self._undo):
            rows = getattr(self, table)
            if previous is _MISSING:
                rows.pop(key, None)
            else:
                rows[key] = previous
        del self._activities[activity_mark:]

    # --- currency rates ---

    def count_rates(self) -> int:
        with self._lock:
            return len(self._rates)

    def insert_rate(self, record: RateRecord) -> None:
        with self._lock:
            if record.code in self._rates:
                raise DuplicateKeyError(f"Currency rate {record.code} already exists")
            self._journal("_rates", record.code)
            self._rates[record.code] = copy.deepcopy(record)

    def get_rate(self, code: str) -> Optional[RateRecord]:
        with self._lock:
            return copy.deepcopy(self._rates.get(code))

    def list_rates(self) -> List[RateRecord]:
        with self._lock:
            return [copy.deepcopy(self._rates[code]) for code in sorted(self._rates)]

    def save_rate(self, record: RateRecord) -> None:
        with self._lock:
            self._journal("_rates", record.code)
            self._rates[record.code] = copy.deepcopy(record)

    # --- products ---

    def upsert_product(self, product: Product) -> None:
        with self._lock:
            self._journal("_products", product.id)
            self._products[product.id] = product

    def get_product(self, product_id: str) -> Optional[Product]:
        with self._lock:
            return self._products.get(product_id)

    # --- snapshots ---

    def add_snapshot(self, snapshot: PriceSnapshot) -> None:
        with self._lock:
            if snapshot.id in self._snapshots:
                raise DuplicateKeyError(f"Price snapshot {snapshot.id} already exists")
            self._journal("_snapshots", snapshot.id)
            self._snapshots[snapshot.id] = snapshot

    def get_snapshot(self, snapshot_id: str) -> Optional[PriceSnapshot]:
        with self._lock:
            return self._snapshots.get(snapshot_id)

    # --- carts ---

    def get_cart_id(self, owner: str) -> Optional[str]:
        with self._lock:
            return self._carts.get(owner)

    def create_cart(self, owner: str, cart_id: str) -> None:
        with self._lock:
            if owner in self._carts:
                raise DuplicateKeyError(f"Cart for {owner} already exists")
            self._journal("_carts", owner)
            self._carts[owner] = cart_id

    def delete_cart(self, owner: str) -> bool:
        with self._lock:
            self._journal("_carts", owner)
            cart_id = self._carts.pop(owner, None)
            if cart_id is None:
                return False
            for line in [l for l in self._cart_lines.values() if l.cart_id == cart_id]:
                self._remove_line(line)
            return True

    def upsert_cart_line(
        self,
        cart_id: str,
        product_id: str,
        variant_selector: str,
        quantity: int,
        snapshot_id: str,
    ) -> CartLine:
        key = (cart_id, product_id, variant_selector)
        with self._lock:
            if cart_id not in self._carts.values():
                raise NotFoundError(f"Cart {cart_id} not found")
            line_id = self._line_keys.get(key)
            if line_id is None:
                line = CartLine(
                    id=new_id(),
                    cart_id=cart_id,
                    product_id=product_id,
                    variant_selector=variant_selector,
                    quantity=quantity,
                    snapshot_id=snapshot_id,
                )
                self._journal("_line_keys", key)
                self._line_keys[key] = line.id
            else:
                current = self._cart_lines[line_id]
                line = replace(
                    current,
                    quantity=current.quantity + quantity,
                    snapshot_id=snapshot_id,
                )
            self._journal("_cart_lines", line.id)
            self._cart_lines[line.id] = line
            return copy.deepcopy(line)

    def get_cart_line(self, line_id: str) -> Optional[CartLine]:
        with self._lock:
            return copy.deepcopy(self._cart_lines.get(line_id))

    def save_cart_line(self, line: CartLine) -> None:
        with self._lock:
            self._journal("_cart_lines", line.id)
            self._cart_lines[line.id] = copy.deepcopy(line)

    def list_cart_lines(self, cart_id: str) -> List[CartLine]:
        with self._lock:
            return [
                copy.deepcopy(line)
                for line in self._cart_lines.values()
                if line.cart_id == cart_id
            ]

    def delete_cart_line(self, line_id: str) -> bool:
        with self._lock:
            line = self._cart_lines.get(line_id)
            if line is None:
                return False
            self._remove_line(line)
            return True

    def _remove_line(self, line: CartLine) -> None:
        key = (line.cart_id, line.product_id, line.variant_selector)
        self._journal("_cart_lines", line.id)
        self._journal("_line_keys", key)
        del self._cart_lines[line.id]
        self._line_keys.pop(key, None)

    # --- orders ---

    def add_order(self, order: Order) -> None:
        with self._lock:
            if order.id in self._orders:
                raise DuplicateKeyError(f"Order {order.id} already exists")
            self._journal("_orders", order.id)
            self._orders[order.id] = copy.deepcopy(order)

    def get_order(self, order_id: str) -> Optional[Order]:
        with self._lock:
            return copy.deepcopy(self._orders.get(order_id))

    def get_orders(self, order_ids: Iterable[str]) -> List[Order]:
        with self._lock:
            return [
                copy.deepcopy(self._orders[order_id])
                for order_id in dict.fromkeys(order_ids)
                if order_id in self._orders
            ]

    def save_order(self, order: Order) -> None:
        with self._lock:
            self._journal("_orders", order.id)
            self._orders[order.id] = copy.deepcopy(order)

    def list_orders(self, user_id: Optional[str] = None) -> List[Order]:
        with self._lock:
            orders = [
                (position, copy.deepcopy(o))
                for position, o in enumerate(self._orders.values())
                if user_id is None or o.user_id == user_id
            ]
        # Insertion order breaks created_at ties.
        orders.sort(key=lambda item: (item[1].created_at, item[0]), reverse=True)
        return [o for _, o in orders]

    def list_orders_in_group(self, freight_group_id: str) -> List[Order]:
        with self._lock:
            return [
                copy.deepcopy(o)
                for o in self._orders.values()
                if o.freight_group_id == freight_group_id
            ]

    def update_orders(
        self,
        order_ids: Iterable[str],
        status: OrderStatus,
        freight_group_id: Optional[str] = None,
    ) -> int:
        changed = 0
        with self._lock:
            for order_id in dict.fromkeys(order_ids):
                order = self._orders.get(order_id)
                if order is None:
                    continue
                self._journal("_orders", order_id)
                order.status = status
                if freight_group_id is not None:
                    order.freight_group_id = freight_group_id
                changed += 1
        return changed

    # --- logistics ---

    def add_freight_group(self, group: FreightGroup) -> None:
        with self._lock:
            if group.id in self._freight_groups:
                raise DuplicateKeyError(f"Freight group {group.id} already exists")
            self._journal("_freight_groups", group.id)
            self._freight_groups[group.id] = copy.deepcopy(group)

    def get_freight_group(self, group_id: str) -> Optional[FreightGroup]:
        with self._lock:
            return copy.deepcopy(self._freight_groups.get(group_id))

    def add_cargo(self, cargo: Cargo) -> None:
        with self._lock:
            if cargo.id in self._cargos:
                raise DuplicateKeyError(f"Cargo {cargo.id} already exists")
            self._journal("_cargos", cargo.id)
            self._cargos[cargo.id] = copy.deepcopy(cargo)

    def get_cargo(self, cargo_id: str) -> Optional[Cargo]:
        with self._lock:
            return copy.deepcopy(self._cargos.get(cargo_id))

    def save_cargo(self, cargo: Cargo) -> None:
        with self._lock:
            self._journal("_cargos", cargo.id)
            self._cargos[cargo.id] = copy.deepcopy(cargo)

    def list_cargos(self, freight_group_id: Optional[str] = None) -> List[Cargo]:
        with self._lock:
            return [
                copy.deepcopy(c)
                for c in self._cargos.values()
                if freight_group_id is None or c.freight_group_id == freight_group_id
            ]

    # --- activity ---

    def record(self, event: ActivityEvent) -> None:
        with self._lock:
            self._activities.append(event)

    def list_activities(self, user_id: Optional[str] = None) -> List[ActivityEvent]:
        with self._lock:
            return [e for e in self._activities if user_id is None or e.user_id == user_id]
