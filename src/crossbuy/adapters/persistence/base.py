# src/crossbuy/adapters/persistence/base.py
"""
Store Interface - Repository contract for the persistent store

This module defines what the application layer needs from persistence:
CRUD per record type, unique constraints surfaced as DuplicateKeyError,
an upsert-on-unique-key primitive for cart lines, a bulk status update by
id set, and an all-or-nothing transaction.

Implementations return copies of stored records; a change to a returned
record is persisted only through the matching save_* method.

Files that USE this module:
- crossbuy.adapters.persistence.memory_store (MemoryStore implements Store)
- crossbuy.application.* (services depend on the interface)

Files that this module USES:
- crossbuy.domain.models (record types)
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Iterable, List, Optional

from crossbuy.domain.models import (
    ActivityEvent,
    Cargo,
    CartLine,
    FreightGroup,
    Order,
    PriceSnapshot,
    Product,
    RateRecord,
)
from crossbuy.domain.status import OrderStatus


class ActivityRecorder(ABC):
    @abstractmethod
    def record(self, event: ActivityEvent) -> None:
        """Persist one activity event."""
        raise NotImplementedError


class Store(ActivityRecorder):
    # --- transactions ---
    @abstractmethod
    def transaction(self) -> AbstractContextManager:
        """Context manager; every write inside is rolled back if the block raises."""
        raise NotImplementedError

    # --- currency rates (unique on code) ---
    @abstractmethod
    def count_rates(self) -> int: ...

    @abstractmethod
    def insert_rate(self, record: RateRecord) -> None:
        """Raises DuplicateKeyError when the code already exists."""

    @abstractmethod
    def get_rate(self, code: str) -> Optional[RateRecord]: ...

    @abstractmethod
    def list_rates(self) -> List[RateRecord]: ...

    @abstractmethod
    def save_rate(self, record: RateRecord) -> None: ...

    # --- products ---
    @abstractmethod
    def upsert_product(self, product: Product) -> None: ...

    @abstractmethod
    def get_product(self, product_id: str) -> Optional[Product]: ...

    # --- price snapshots (insert-only) ---
    @abstractmethod
    def add_snapshot(self, snapshot: PriceSnapshot) -> None:
        """Raises DuplicateKeyError when the id already exists."""

    @abstractmethod
    def get_snapshot(self, snapshot_id: str) -> Optional[PriceSnapshot]: ...

    # --- carts (unique on owner) and cart lines ---
    @abstractmethod
    def get_cart_id(self, owner: str) -> Optional[str]: ...

    @abstractmethod
    def create_cart(self, owner: str, cart_id: str) -> None:
        """Raises DuplicateKeyError when the owner already has a cart."""

    @abstractmethod
    def delete_cart(self, owner: str) -> bool:
        """Delete the owner's cart and its lines; False when there was none."""

    @abstractmethod
    def upsert_cart_line(
        self,
        cart_id: str,
        product_id: str,
        variant_selector: str,
        quantity: int,
        snapshot_id: str,
    ) -> CartLine:
        """
        Create the line for (cart_id, product_id, variant_selector) or, when it
        exists, add quantity to it and repoint it to snapshot_id.

        Raises:
            NotFoundError: If no owner holds cart_id any more
        """

    @abstractmethod
    def get_cart_line(self, line_id: str) -> Optional[CartLine]: ...

    @abstractmethod
    def save_cart_line(self, line: CartLine) -> None: ...

    @abstractmethod
    def list_cart_lines(self, cart_id: str) -> List[CartLine]: ...

    @abstractmethod
    def delete_cart_line(self, line_id: str) -> bool: ...

    # --- orders ---
    @abstractmethod
    def add_order(self, order: Order) -> None: ...

    @abstractmethod
    def get_order(self, order_id: str) -> Optional[Order]: ...

    @abstractmethod
    def get_orders(self, order_ids: Iterable[str]) -> List[Order]:
        """Return the orders that exist, in the order of order_ids."""

    @abstractmethod
    def save_order(self, order: Order) -> None: ...

    @abstractmethod
    def list_orders(self, user_id: Optional[str] = None) -> List[Order]:
        """Newest first."""

    @abstractmethod
    def list_orders_in_group(self, freight_group_id: str) -> List[Order]: ...

    @abstractmethod
    def update_orders(
        self,
        order_ids: Iterable[str],
        status: OrderStatus,
        freight_group_id: Optional[str] = None,
    ) -> int:
        """Bulk-set status (and freight group when given); returns rows changed."""

    # --- logistics ---
    @abstractmethod
    def add_freight_group(self, group: FreightGroup) -> None: ...

    @abstractmethod
    def get_freight_group(self, group_id: str) -> Optional[FreightGroup]: ...

    @abstractmethod
    def add_cargo(self, cargo: Cargo) -> None: ...

    @abstractmethod
    def get_cargo(self, cargo_id: str) -> Optional[Cargo]: ...

    @abstractmethod
    def save_cargo(self, cargo: Cargo) -> None: ...

    @abstractmethod
    def list_cargos(self, freight_group_id: Optional[str] = None) -> List[Cargo]: ...

    # --- activity ---
    @abstractmethod
    def list_activities(self, user_id: Optional[str] = None) -> List[ActivityEvent]: ...
