"""
StatusTransitionService -- move an order between lifecycle statuses.

Responsibility:
    Change an order's status and, in the same transaction, return stock to
    or take stock from the shelf and adjust the customer's points balance.
    The effect itself is computed by ``domain.transitions.plan_transition``;
    this service locks rows, validates and applies it.

Architecture position:
    Kernel > Services -- imperative shell around ``domain.transitions``.

Invariants enforced:
    - Same status is a no-op: a plain read, no row lock, no stock or
      points change.
    - Stock-out -> stock-in returns every unit of the order's footprint;
      stock-in -> stock-out takes it again and fails if any product no
      longer has enough.
    - Entering COMPLETED credits earned points, leaving it debits them;
      crossing into stock-in refunds redeemed points, crossing back debits
      them.  A debit that would drive the balance negative fails.
    - The order row is locked first, then products (ascending id), then
      the customer, matching the lock order of OrderService.
    - completed_at is set only when an order enters COMPLETED.

Failure modes:
    - OrderNotFoundError, InvalidRequestError for an unknown status.
    - InsufficientStockError / InsufficientPointsError on re-debit.

Audit relevance:
    Emits ``order_status_changed`` with both statuses and the applied
    stock and points deltas.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy.orm import Session

from retail_kernel.domain.clock import Clock
from retail_kernel.domain.order_types import OrderStatus
from retail_kernel.domain.transitions import (
    LoyaltyPolicy,
    SnapshotComponent,
    SnapshotLine,
    TransitionEffect,
    plan_transition,
    stock_footprint,
)
from retail_kernel.exceptions import (
    InsufficientPointsError,
    InsufficientStockError,
    InvalidRequestError,
    OrderNotFoundError,
)
from retail_kernel.logging_config import LogContext, get_logger
from retail_kernel.models.customer import Customer
from retail_kernel.models.order import Order, OrderLine
from retail_kernel.models.product import Product
from retail_kernel.selectors.order_selector import OrderInfo, order_to_info
from retail_kernel.services.base import BaseService

logger = get_logger("services.status")


def _parse_status(value: OrderStatus | str) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        raise InvalidRequestError(f"unknown order status: {value!r}") from None


def _snapshot_line(line: OrderLine) -> SnapshotLine:
    return SnapshotLine(
        quantity=line.quantity,
        product_id=line.product_id if not line.components else None,
        components=tuple(
            SnapshotComponent(product_id=c.product_id, quantity=c.quantity)
            for c in line.components
        ),
    )


class StatusTransitionService(BaseService[Order]):
    """Applies status transitions with their stock and loyalty effects."""

    def __init__(
        self,
        session: Session,
        loyalty_policy: LoyaltyPolicy | None = None,
        clock: Clock | None = None,
    ):
        super().__init__(session, clock)
        self.loyalty_policy = loyalty_policy or LoyaltyPolicy()

    def change_status(
        self, order_id: UUID, new_status: OrderStatus | str
    ) -> OrderInfo:
        """
        Move ``order_id`` to ``new_status``.

        Returns:
            OrderInfo reflecting the new status.
        """
        target = _parse_status(new_status)

        with LogContext.bind(order_id=str(order_id)):
            order = self.session.get(Order, order_id)
            if order is None:
                raise OrderNotFoundError(str(order_id))
            if order.status == target:
                return self._unchanged(order)

            # Lock only once there is something to write; re-read the status.
            order = self.lock_row(Order, order_id)
            if order is None:
                raise OrderNotFoundError(str(order_id))
            old = order.status
            if old == target:
                return self._unchanged(order)

            effect = plan_transition(
                old,
                target,
                stock_footprint(_snapshot_line(l) for l in order.lines),
                has_customer=order.customer_id is not None,
                points_earned=self.loyalty_policy.points_earned(
                    order.total_selling_price, order.discount
                ),
                redeemed_points=order.redeemed_points,
            )

            products = self._check_stock(effect)
            customer = self._check_points(order, effect)

            # All checks passed; writes start here.
            for product_id, delta in effect.stock_deltas.items():
                product = products.get(product_id)
                if product is not None:
                    product.stock += delta
            if customer is not None:
                customer.points += effect.points_delta

            order.status = target
            if effect.enters_completed:
                order.completed_at = self.clock.now()
            self.session.flush()

            logger.info(
                "order_status_changed",
                extra={
                    "old_status": old.value,
                    "new_status": target.value,
                    "stock_deltas": {
                        str(pid): d for pid, d in effect.stock_deltas.items()
                    },
                    "points_delta": effect.points_delta if customer else 0,
                },
            )
            return order_to_info(order)

    def _unchanged(self, order: Order) -> OrderInfo:
        logger.info("order_status_unchanged", extra={"status": order.status.value})
        return order_to_info(order)

    def _check_stock(self, effect: TransitionEffect) -> dict[UUID, Product]:
        # Products deleted since the sale have no row to adjust.
        products = self.lock_rows(Product, effect.stock_deltas.keys())
        for product_id, delta in sorted(
            effect.stock_deltas.items(), key=lambda kv: str(kv[0])
        ):
            product = products.get(product_id)
            if product is None or delta >= 0:
                continue
            if product.stock + delta < 0:
                logger.warning(
                    "stock_insufficient",
                    extra={
                        "product_id": str(product.id),
                        "required": -delta,
                        "available": product.stock,
                    },
                )
                raise InsufficientStockError(
                    product_id=str(product.id),
                    product_name=product.name,
                    required=-delta,
                    available=product.stock,
                )
        return products

    def _check_points(
        self, order: Order, effect: TransitionEffect
    ) -> Customer | None:
        if order.customer_id is None or effect.points_delta == 0:
            return None
        customer = self.lock_row(Customer, order.customer_id)
        if customer is None:
            return None
        if customer.points + effect.points_delta < 0:
            raise InsufficientPointsError(
                customer_id=str(customer.id),
                required=-effect.points_delta,
                available=customer.points,
            )
        return customer
