# src/crossbuy/domain/models.py
"""
Domain Models - Pure Business Objects

This module contains domain models representing core business concepts:
- Currency rates and their resolution
- Price breakdowns and immutable price snapshots
- Products, carts and orders
- Freight groups and cargos
- Activity events

Records the store persists (RateRecord, CartLine, Order, Cargo, FreightGroup)
are mutable dataclasses; the store hands out copies, so mutating one has no
effect until it is saved back. Everything a caller must not change afterwards
(snapshots, order lines, views) is frozen.

Files that USE this module:
- crossbuy.application.* (all services use domain models)
- crossbuy.adapters.* (adapters create and store domain models)
- tests.* (tests use domain models for test data)

Files that this module USES:
- crossbuy.domain.money (ZERO default for money fields)
- crossbuy.domain.status (status enums)
"""
from __future__ import annotations  # Enable postponed evaluation of annotations

import uuid  # Random identifiers for new records
from dataclasses import dataclass, field  # Decorator for creating data classes
from datetime import datetime, timezone  # Date/time utilities for timestamps
from decimal import Decimal  # Exact arithmetic for money
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from crossbuy.domain.money import ZERO
from crossbuy.domain.status import CargoStatus, FreightGroupStatus, OrderStatus


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return uuid.uuid4().hex


# --- Currency -------------------------------------------------------------

@dataclass
class RateRecord:
    """
    Administrator-managed exchange rate from the base currency.

    Attributes:
        code: ISO currency code, unique per record (e.g. "RUB")
        name: Display name
        symbol: Currency symbol
        rate_from_base: Units of this currency per 1 base-currency unit (> 0)
        markup: Multiplicative surcharge applied after conversion (>= 1)
        is_active: Inactive records are ignored by rate resolution
    """
    code: str
    name: str
    symbol: str
    rate_from_base: Decimal
    markup: Decimal
    is_active: bool = True
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class RateResolution:
    """
    Outcome of resolving a target currency.

    Attributes:
        rate: Units of target currency per base unit
        markup: Markup multiplier to apply
        is_custom: True when the rate came from an active RateRecord
        source: "custom", "cache", "live" or "degraded"
    """
    rate: Decimal
    markup: Decimal
    is_custom: bool
    source: str


@dataclass(frozen=True)
class PriceBreakdown:
    """Itemized customer price for one unit, every output field rounded to cents."""
    currency: str
    rate: Decimal
    rate_with_markup: Decimal
    converted: Decimal
    converted_with_markup: Decimal
    final_per_item: Decimal
    service_fee_percent: Decimal
    service_fee_amount: Decimal
    is_custom_rate: bool = False

    @property
    def calculation(self) -> Dict[str, Decimal]:
        return {
            "step1_converted": self.converted,
            "step2_markup": self.converted_with_markup,
            "step3_service_fee": self.service_fee_amount,
        }

    def as_dict(self) -> Dict[str, Any]:
        """Return a JSON-shaped mapping with snake_case keys (numbers as floats)."""
        return {
            "currency": self.currency,
            "rate": float(self.rate),
            "rate_with_markup": float(self.rate_with_markup),
            "converted": float(self.converted),
            "converted_with_markup": float(self.converted_with_markup),
            "final_per_item": float(self.final_per_item),
            "service_fee_percent": float(self.service_fee_percent),
            "service_fee_amount": float(self.service_fee_amount),
            "calculation": {k: float(v) for k, v in self.calculation.items()},
        }


@dataclass(frozen=True)
class RateQuote:
    base: str
    target: str
    rate: Decimal
    rate_with_markup: Decimal
    is_custom: bool
    timestamp: datetime


@dataclass(frozen=True)
class PriceSnapshot:
    """
    Immutable record of one pricing computation.

    A new snapshot is written every time a cart line is added or re-priced;
    existing snapshots are never updated, so older ones stay as history.
    """
    id: str
    product_id: str
    currency: str
    rate_used: Decimal
    converted_amount: Decimal
    final_per_item_price: Decimal
    service_fee_percent: Decimal
    created_at: datetime = field(default_factory=utcnow)


# --- Catalog --------------------------------------------------------------

@dataclass(frozen=True)
class ProductVariant:
    id: str
    price: Optional[Decimal] = None
    name: str = ""


@dataclass(frozen=True)
class Product:
    """
    Marketplace product as returned by the catalog.

    Attributes:
        id: Marketplace product identifier
        title: Original product title
        base_price: Price in the base currency
        images: Image URLs
        variants: Purchasable variants; a variant price overrides base_price
    """
    id: str
    title: str
    base_price: Decimal
    images: Tuple[str, ...] = ()
    variants: Tuple[ProductVariant, ...] = ()
    rating: Optional[float] = None
    sales: Optional[int] = None


# --- Cart -----------------------------------------------------------------

@dataclass
class CartLine:
    """Cart line, unique per (cart_id, product_id, variant_selector)."""
    id: str
    cart_id: str
    product_id: str
    variant_selector: str
    quantity: int
    snapshot_id: str


@dataclass(frozen=True)
class CartItemView:
    id: str
    product_id: str
    title: str
    images: Tuple[str, ...]
    quantity: int
    variant_selector: str
    price: Decimal
    line_total: Decimal
    currency: Optional[str] = None


@dataclass(frozen=True)
class CartView:
    id: Optional[str] = None
    items: Tuple[CartItemView, ...] = ()
    subtotal: Decimal = ZERO

    @property
    def is_empty(self) -> bool:
        return not self.items


# --- Orders ---------------------------------------------------------------

@dataclass(frozen=True)
class OrderLine:
    """Order line; final_price_at_purchase is copied from the cart snapshot, never recomputed."""
    product_id: str
    title: str
    quantity: int
    variant_selector: str
    final_price_at_purchase: Decimal


@dataclass
class Order:
    """
    Customer order.

    Lines are frozen at creation. Only delivery_fee, total, status, the
    purchase flag and the freight-group link change afterwards, and
    total always equals subtotal + delivery_fee.
    """
    id: str
    user_id: str
    subtotal: Decimal
    lines: Tuple[OrderLine, ...] = ()
    delivery_fee: Decimal = ZERO
    total: Decimal = ZERO
    status: OrderStatus = OrderStatus.PENDING_PROCESSING
    purchased: bool = False
    purchased_at: Optional[datetime] = None
    freight_group_id: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        self.total = self.subtotal + self.delivery_fee

    def set_delivery_fee(self, fee: Decimal) -> None:
        self.delivery_fee = fee
        self.total = self.subtotal + fee


@dataclass(frozen=True)
class OrderView:
    id: str
    user_id: str
    status: OrderStatus
    subtotal: Decimal
    delivery_fee: Decimal
    total: Decimal
    purchased: bool
    purchased_at: Optional[datetime]
    created_at: datetime
    items: Tuple[OrderLine, ...]

    @classmethod
    def from_order(cls, order: Order) -> "OrderView":
        return cls(
            id=order.id,
            user_id=order.user_id,
            status=order.status,
            subtotal=order.subtotal,
            delivery_fee=order.delivery_fee,
            total=order.total,
            purchased=order.purchased,
            purchased_at=order.purchased_at,
            created_at=order.created_at,
            items=order.lines,
        )


# --- Logistics ------------------------------------------------------------

@dataclass
class FreightGroup:
    """Orders shipped together; an order joins exactly one group for its lifetime."""
    id: str
    status: FreightGroupStatus = FreightGroupStatus.CREATED
    created_at: datetime = field(default_factory=utcnow)


@dataclass
class Cargo:
    id: str
    freight_group_id: str
    weight: Optional[Decimal] = None
    volume: Optional[Decimal] = None
    shipping_cost: Optional[Decimal] = None
    status: CargoStatus = CargoStatus.CREATED
    arrival_date: Optional[datetime] = None
    created_at: datetime = field(default_factory=utcnow)


@dataclass(frozen=True)
class CargoReceipt:
    cargo_id: str
    freight_group_id: str
    status: CargoStatus


@dataclass(frozen=True)
class CargoTracking:
    cargo_id: str
    status: CargoStatus
    arrival_date: Optional[datetime]
    shipping_cost: Optional[Decimal]
    orders: Tuple[str, ...]


@dataclass(frozen=True)
class OrderTracking:
    order_id: str
    status: OrderStatus
    delivery_fee: Decimal
    total: Decimal
    cargos: Tuple[Cargo, ...] = ()


# --- Activity -------------------------------------------------------------

class ActivityType(str, Enum):
    VIEW = "view"
    SEARCH = "search"
    ADD_TO_CART = "add_to_cart"
    PURCHASE = "purchase"
    CLICK = "click"


@dataclass(frozen=True)
class ActivityEvent:
    activity_type: ActivityType
    user_id: Optional[str] = None
    product_id: Optional[str] = None
    search_query: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=utcnow)
