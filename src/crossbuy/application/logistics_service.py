# src/crossbuy/application/logistics_service.py
"""
Logistics Service - Freight consolidation and shipping cost allocation

create_cargo groups orders into a freight group, opens a cargo for it and
moves the orders to in_transit. arrive splits the cargo's shipping cost
across the group's orders by subtotal share (see domain.allocation), moves
them to awaiting_delivery_payment and marks the cargo arrived. Both run in
a single store transaction. arrive can be replayed: the same cost yields
the same fees.

Files that USE this module:
- crossbuy.app (composition root)
- tests.test_logistics_service (unit tests)

Files that this module USES:
- crossbuy.adapters.persistence.base (Store)
- crossbuy.domain.allocation (allocate_shipping_cost)
- crossbuy.domain.status (state machine)
"""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Dict, Iterable, List

from crossbuy.adapters.persistence.base import Store
from crossbuy.domain.allocation import allocate_shipping_cost
from crossbuy.domain.errors import InvalidInputError, InvalidStateError, NotFoundError
from crossbuy.domain.models import (
    Cargo,
    CargoReceipt,
    CargoTracking,
    FreightGroup,
    OrderTracking,
    new_id,
    utcnow,
)
from crossbuy.domain.money import ZERO
from crossbuy.domain.status import CargoStatus, OrderStatus, can_transition
from crossbuy.shared.validators import optional_amount

logger = logging.getLogger(__name__)


class LogisticsService:
    def __init__(self, store: Store):
        self.store = store

    def create_cargo(
        self,
        order_ids: Iterable[str],
        shipping_cost=None,
        weight=None,
        volume=None,
    ) -> CargoReceipt:
        """
        Consolidate orders into a new freight group with one cargo.

        Args:
            order_ids: Orders to ship together; unknown ids are ignored
            shipping_cost: Optional cost estimate (>= 0)
            weight: Optional cargo weight
            volume: Optional cargo volume

        Returns:
            CargoReceipt with the cargo id, freight group id and status

        Raises:
            InvalidInputError: If order_ids is empty or none of them exist
            InvalidStateError: If an order already ships in another freight
                group or cannot move to in_transit
        """
        ids = list(dict.fromkeys(order_ids or []))
        if not ids:
            raise InvalidInputError("orderIds must not be empty")
        cost = optional_amount(shipping_cost, "shipping_cost")
        weight_value = optional_amount(weight, "weight")
        volume_value = optional_amount(volume, "volume")

        with self.store.transaction():
            orders = self.store.get_orders(ids)
            if not orders:
                raise InvalidInputError("Orders not found")
            missing = set(ids) - {o.id for o in orders}
            if missing:
                logger.warning("Ignoring unknown order ids: %s", ", ".join(sorted(missing)))

            for order in orders:
                if order.freight_group_id is not None:
                    raise InvalidStateError(
                        f"Order {order.id} already belongs to freight group {order.freight_group_id}"
                    )
                if not can_transition(order.status, OrderStatus.IN_TRANSIT):
                    raise InvalidStateError(
                        f"Order {order.id} cannot ship from status {order.status.value}"
                    )

            group = FreightGroup(id=new_id())
            self.store.add_freight_group(group)
            cargo = Cargo(
                id=new_id(),
                freight_group_id=group.id,
                weight=weight_value,
                volume=volume_value,
                shipping_cost=cost,
                status=CargoStatus.CREATED,
            )
            self.store.add_cargo(cargo)
            self.store.update_orders(
                [o.id for o in orders], OrderStatus.IN_TRANSIT, freight_group_id=group.id
            )

        logger.info(
            "Cargo %s created for freight group %s with %d orders",
            cargo.id, group.id, len(orders),
        )
        return CargoReceipt(cargo_id=cargo.id, freight_group_id=group.id, status=cargo.status)

    def add_cargo(
        self, freight_group_id: str, shipping_cost=None, weight=None, volume=None
    ) -> CargoReceipt:
        """Attach a further cargo to an existing freight group."""
        if self.store.get_freight_group(freight_group_id) is None:
            raise NotFoundError(f"Freight group {freight_group_id} not found")
        cargo = Cargo(
            id=new_id(),
            freight_group_id=freight_group_id,
            weight=optional_amount(weight, "weight"),
            volume=optional_amount(volume, "volume"),
            shipping_cost=optional_amount(shipping_cost, "shipping_cost"),
        )
        self.store.add_cargo(cargo)
        logger.info("Cargo %s added to freight group %s", cargo.id, freight_group_id)
        return CargoReceipt(cargo_id=cargo.id, freight_group_id=freight_group_id, status=cargo.status)

    def arrive(self, cargo_id: str, actual_shipping_cost=None) -> CargoTracking:
        """
        Mark a cargo arrived and allocate its shipping cost to the group's orders.

        Args:
            cargo_id: Cargo that arrived
            actual_shipping_cost: Final cost; defaults to the cargo's estimate, then 0

        Returns:
            Tracking view of the cargo

        Raises:
            NotFoundError: If the cargo does not exist
            InvalidStateError: If the cargo's freight group has no orders
        """
        actual = optional_amount(actual_shipping_cost, "shipping_cost")

        with self.store.transaction():
            cargo = self._get_cargo(cargo_id)
            orders = self.store.list_orders_in_group(cargo.freight_group_id)
            if not orders:
                raise InvalidStateError("No orders linked")

            if actual is not None:
                shipping_cost = actual
            elif cargo.shipping_cost is not None:
                shipping_cost = cargo.shipping_cost
            else:
                shipping_cost = ZERO

            fees = allocate_shipping_cost({o.id: o.subtotal for o in orders}, shipping_cost)
            for order in orders:
                order.set_delivery_fee(fees[order.id])
                if can_transition(order.status, OrderStatus.AWAITING_DELIVERY_PAYMENT):
                    order.status = OrderStatus.AWAITING_DELIVERY_PAYMENT
                else:
                    logger.info(
                        "Order %s keeps status %s on arrival", order.id, order.status.value
                    )
                self.store.save_order(order)

            cargo.shipping_cost = shipping_cost
            cargo.status = CargoStatus.ARRIVED
            cargo.arrival_date = utcnow()
            self.store.save_cargo(cargo)

        allocated = sum(fees.values(), ZERO)
        logger.info(
            "Cargo %s arrived: shipping cost %s allocated %s over %d orders",
            cargo.id, shipping_cost, allocated, len(orders),
        )
        return self.tracking_by_cargo(cargo.id)

    def tracking(self, order_id: str) -> OrderTracking:
        """Status, fees and the freight group's cargos for one order."""
        order = self.store.get_order(order_id)
        if order is None:
            raise NotFoundError(f"Order {order_id} not found")
        cargos = ()
        if order.freight_group_id is not None:
            cargos = tuple(self.store.list_cargos(order.freight_group_id))
        return OrderTracking(
            order_id=order.id,
            status=order.status,
            delivery_fee=order.delivery_fee,
            total=order.total,
            cargos=cargos,
        )

    def tracking_by_cargo(self, cargo_id: str) -> CargoTracking:
        cargo = self._get_cargo(cargo_id)
        orders = self.store.list_orders_in_group(cargo.freight_group_id)
        return CargoTracking(
            cargo_id=cargo.id,
            status=cargo.status,
            arrival_date=cargo.arrival_date,
            shipping_cost=cargo.shipping_cost,
            orders=tuple(o.id for o in orders),
        )

    def delivery_fees(self, cargo_id: str) -> Dict[str, Decimal]:
        """Current delivery fee of every order in the cargo's freight group."""
        cargo = self._get_cargo(cargo_id)
        return {o.id: o.delivery_fee for o in self.store.list_orders_in_group(cargo.freight_group_id)}

    def summary(self) -> Dict[str, int]:
        cargos: List[Cargo] = self.store.list_cargos()
        return {
            "cargos": len(cargos),
            "arrived": sum(1 for c in cargos if c.status == CargoStatus.ARRIVED),
        }

    def _get_cargo(self, cargo_id: str) -> Cargo:
        cargo = self.store.get_cargo(cargo_id)
        if cargo is None:
            raise NotFoundError(f"Cargo {cargo_id} not found")
        return cargo
