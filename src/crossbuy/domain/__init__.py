# src/crossbuy/domain/__init__.py
"""
Domain Layer - Pure Business Objects

This package contains domain models and business rules.
No dependencies on infrastructure or external systems.
"""

from crossbuy.domain.models import (
    ActivityEvent,
    ActivityType,
    Cargo,
    CargoReceipt,
    CargoTracking,
    CartItemView,
    CartLine,
    CartView,
    FreightGroup,
    Order,
    OrderLine,
    OrderTracking,
    OrderView,
    PriceBreakdown,
    PriceSnapshot,
    Product,
    ProductVariant,
    RateQuote,
    RateRecord,
    RateResolution,
)
from crossbuy.domain.errors import (
    DomainError,
    DuplicateKeyError,
    InvalidInputError,
    InvalidStateError,
    NotFoundError,
)
from crossbuy.domain.status import CargoStatus, FreightGroupStatus, OrderStatus

__all__ = [
    "ActivityEvent",
    "ActivityType",
    "Cargo",
    "CargoReceipt",
    "CargoTracking",
    "CargoStatus",
    "CartItemView",
    "CartLine",
    "CartView",
    "FreightGroup",
    "FreightGroupStatus",
    "Order",
    "OrderLine",
    "OrderStatus",
    "OrderTracking",
    "OrderView",
    "PriceBreakdown",
    "PriceSnapshot",
    "Product",
    "ProductVariant",
    "RateQuote",
    "RateRecord",
    "RateResolution",
    "DomainError",
    "DuplicateKeyError",
    "InvalidInputError",
    "InvalidStateError",
    "NotFoundError",
]
