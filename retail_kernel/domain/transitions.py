"""
Transitions -- the stock and loyalty effect of moving an order between statuses.

Responsibility:
    Given the old and new status of an order, its stock footprint and its
    loyalty figures, compute the signed stock delta per product and the
    signed points delta for the customer.  Pure; StatusTransitionService
    locks the rows and applies the result.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - The effect depends only on the stock category (stock-in vs
      stock-out) and COMPLETED-ness of the two statuses, never on the
      specific pair.  Each component of the effect is therefore the
      difference of a per-status indicator, and effects telescope:
      applying A->B then B->C equals applying A->C, and A->B->A is zero.
    - old == new is a no-op.
    - Earned points and redeemed points adjust independently and add up.

Status categories:

    NEW  SHIPPED  COMPLETED  |  CANCELLED  RETURNED
    ---------- stock-out ----+------ stock-in -----
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Mapping
from uuid import UUID

from retail_kernel.domain.order_types import OrderStatus

_ZERO = Decimal("0")


@dataclass(frozen=True)
class LoyaltyPolicy:
    """
    Earned-points rule: ``points_per_block`` points for every full
    ``block_amount`` of net sale value (selling price minus discount).
    """

    block_amount: Decimal = Decimal("1000")
    points_per_block: int = 10

    def __post_init__(self) -> None:
        if self.block_amount <= _ZERO:
            raise ValueError(f"block_amount must be positive, got {self.block_amount}")
        if self.points_per_block < 0:
            raise ValueError(
                f"points_per_block must not be negative, got {self.points_per_block}"
            )

    def points_earned(self, total_selling_price: Decimal, discount: Decimal) -> int:
        """floor((total_selling_price - discount) / block_amount) * points_per_block"""
        net = total_selling_price - discount
        return math.floor(net / self.block_amount) * self.points_per_block


@dataclass(frozen=True)
class SnapshotComponent:
    product_id: UUID | None
    quantity: int


@dataclass(frozen=True)
class SnapshotLine:
    """
    The stock-relevant part of a persisted order line.

    A direct product line has ``product_id``; a bundle line has
    ``components`` with per-bundle-unit quantities.  A reference nulled by
    a catalog deletion is None and contributes nothing.
    """

    quantity: int
    product_id: UUID | None = None
    components: tuple[SnapshotComponent, ...] = ()


def stock_footprint(lines: Iterable[SnapshotLine]) -> dict[UUID, int]:
    """Total units per product held by an order in a stock-out status."""
    footprint: dict[UUID, int] = {}
    for line in lines:
        if line.product_id is not None:
            footprint[line.product_id] = footprint.get(line.product_id, 0) + line.quantity
        for component in line.components:
            if component.product_id is None:
                continue
            units = component.quantity * line.quantity
            footprint[component.product_id] = footprint.get(component.product_id, 0) + units
    return footprint


@dataclass(frozen=True)
class TransitionEffect:
    """
    Signed effect of one status move.

    stock_deltas: +n returns n units to the shelf, -n takes n units.
    earned_points_delta / redeemed_points_delta: signed customer credit.
    """

    old_status: OrderStatus
    new_status: OrderStatus
    stock_deltas: Mapping[UUID, int] = field(default_factory=dict)
    earned_points_delta: int = 0
    redeemed_points_delta: int = 0

    @property
    def is_noop(self) -> bool:
        return self.old_status == self.new_status

    @property
    def points_delta(self) -> int:
        return self.earned_points_delta + self.redeemed_points_delta

    @property
    def enters_completed(self) -> bool:
        return (
            self.new_status == OrderStatus.COMPLETED
            and self.old_status != OrderStatus.COMPLETED
        )


def _stock_direction(old: OrderStatus, new: OrderStatus) -> int:
    if old.is_stock_out and new.is_stock_in:
        return 1
    if old.is_stock_in and new.is_stock_out:
        return -1
    return 0


def plan_transition(
    old: OrderStatus,
    new: OrderStatus,
    footprint: Mapping[UUID, int],
    *,
    has_customer: bool,
    points_earned: int = 0,
    redeemed_points: int = 0,
) -> TransitionEffect:
    """
    Compute the effect of moving an order from ``old`` to ``new``.

    Args:
        footprint: units per product the order holds while stock-out.
        has_customer: loyalty effects apply only to linked orders.
        points_earned: the order's earned-points figure (LoyaltyPolicy).
        redeemed_points: points spent when the order was created.
    """
    if old == new:
        return TransitionEffect(old_status=old, new_status=new)

    direction = _stock_direction(old, new)
    stock_deltas = (
        {pid: direction * qty for pid, qty in footprint.items() if qty}
        if direction
        else {}
    )

    earned_delta = 0
    redeemed_delta = 0
    if has_customer:
        if points_earned > 0:
            if new == OrderStatus.COMPLETED:
                earned_delta = points_earned
            elif old == OrderStatus.COMPLETED:
                earned_delta = -points_earned
        if redeemed_points > 0:
            if not old.is_stock_in and new.is_stock_in:
                redeemed_delta = redeemed_points
            elif old.is_stock_in and not new.is_stock_in:
                redeemed_delta = -redeemed_points

    return TransitionEffect(
        old_status=old,
        new_status=new,
        stock_deltas=stock_deltas,
        earned_points_delta=earned_delta,
        redeemed_points_delta=redeemed_delta,
    )
