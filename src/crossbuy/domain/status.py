# src/crossbuy/domain/status.py
"""
Lifecycle Statuses - Order State Machine

This module enumerates order, cargo and freight-group statuses and holds the
order state machine used by the cargo flow and the purchase flag.

OrderService.override_status does NOT go through this table: it is the
administrative escape hatch and writes any status.

Files that USE this module:
- crossbuy.application.order_service (initial status, purchase flag)
- crossbuy.application.logistics_service (in-transit and arrival moves)
- crossbuy.domain.models (status fields)

Files that this module USES:
- crossbuy.domain.errors (InvalidInputError, InvalidStateError)
"""
from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet

from crossbuy.domain.errors import InvalidInputError, InvalidStateError


class OrderStatus(str, Enum):
    PENDING_PROCESSING = "pending_processing"
    IN_TRANSIT = "in_transit"
    AWAITING_DELIVERY_PAYMENT = "awaiting_delivery_payment"
    PROCURED = "procured"
    COMPLETED = "completed"
    DELIVERED = "delivered"

    @classmethod
    def parse(cls, value: "str | OrderStatus") -> "OrderStatus":
        """
        Parse a status from its value or member name.

        Raises:
            InvalidInputError: If the value names no status
        """
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        for member in cls:
            if text.lower() == member.value or text.upper() == member.name:
                return member
        raise InvalidInputError(f"Unknown order status: {value!r}")


class CargoStatus(str, Enum):
    CREATED = "created"
    ARRIVED = "arrived"


class FreightGroupStatus(str, Enum):
    CREATED = "created"


TERMINAL_STATUSES: FrozenSet[OrderStatus] = frozenset(
    {OrderStatus.COMPLETED, OrderStatus.DELIVERED}
)

# Arrival may be replayed, hence the self-loop on AWAITING_DELIVERY_PAYMENT.
TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING_PROCESSING: frozenset({OrderStatus.IN_TRANSIT, OrderStatus.PROCURED}),
    OrderStatus.PROCURED: frozenset(
        {OrderStatus.IN_TRANSIT, OrderStatus.COMPLETED, OrderStatus.DELIVERED}
    ),
    OrderStatus.IN_TRANSIT: frozenset({OrderStatus.AWAITING_DELIVERY_PAYMENT}),
    OrderStatus.AWAITING_DELIVERY_PAYMENT: frozenset(
        {OrderStatus.AWAITING_DELIVERY_PAYMENT, OrderStatus.PROCURED}
    ),
    OrderStatus.COMPLETED: frozenset(),
    OrderStatus.DELIVERED: frozenset(),
}


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    """Return True if the modeled lifecycle allows current -> target."""
    return target in TRANSITIONS.get(current, frozenset())


def transition(current: OrderStatus, target: OrderStatus) -> OrderStatus:
    """
    Validate a lifecycle move and return the new status.

    Args:
        current: Status the order is in now
        target: Requested status

    Returns:
        The target status

    Raises:
        InvalidStateError: If the move is not in the transition table
    """
    if not can_transition(current, target):
        raise InvalidStateError(
            f"Order cannot move from {current.value} to {target.value}"
        )
    return target
