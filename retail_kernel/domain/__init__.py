"""
Pure domain layer.

This module contains pure data transfer objects and domain logic
with NO dependencies on:
- ORM (SQLAlchemy sessions or models)
- Database
- Time/clock (beyond the injectable Clock interface)
- I/O

All domain objects are immutable and deterministic.
"""

from retail_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from retail_kernel.domain.order_types import DeliveryPayer, DiscountType, OrderStatus
from retail_kernel.domain.pricing import (
    BundleComponentSnapshot,
    BundleSnapshot,
    LineComponent,
    OrderTotals,
    PricedLine,
    PricedOrder,
    ProductSnapshot,
    compute_totals,
    discount_amount,
    price_order,
)
from retail_kernel.domain.requests import (
    BundleLine,
    LineRequest,
    OrderRequest,
    ProductLine,
)
from retail_kernel.domain.transitions import (
    LoyaltyPolicy,
    SnapshotComponent,
    SnapshotLine,
    TransitionEffect,
    plan_transition,
    stock_footprint,
)

__all__ = [
    "BundleComponentSnapshot",
    "BundleLine",
    "BundleSnapshot",
    "Clock",
    "DeliveryPayer",
    "DeterministicClock",
    "DiscountType",
    "LineComponent",
    "LineRequest",
    "LoyaltyPolicy",
    "OrderRequest",
    "OrderStatus",
    "OrderTotals",
    "PricedLine",
    "PricedOrder",
    "ProductLine",
    "ProductSnapshot",
    "SnapshotComponent",
    "SnapshotLine",
    "SystemClock",
    "TransitionEffect",
    "compute_totals",
    "discount_amount",
    "plan_transition",
    "price_order",
    "stock_footprint",
]
