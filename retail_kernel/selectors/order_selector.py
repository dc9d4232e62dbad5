"""
Order query selector.

Provides read-only access to orders and their line snapshots, plus the
ORM-to-DTO converters the order services return.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select

from retail_kernel.domain.order_types import DeliveryPayer, DiscountType, OrderStatus
from retail_kernel.exceptions import OrderNotFoundError
from retail_kernel.models.order import Order, OrderLine
from retail_kernel.selectors.base import BaseSelector


@dataclass(frozen=True)
class OrderLineComponentInfo:
    product_id: UUID | None
    product_name: str
    quantity: int


@dataclass(frozen=True)
class OrderLineInfo:
    """Data transfer object for one line snapshot."""

    id: UUID
    product_name: str
    quantity: int
    cost_price: Decimal
    selling_price: Decimal
    product_id: UUID | None
    bundle_id: UUID | None
    is_free: bool
    components: tuple[OrderLineComponentInfo, ...]

    @property
    def line_cost(self) -> Decimal:
        return self.cost_price * self.quantity

    @property
    def line_revenue(self) -> Decimal:
        return self.selling_price * self.quantity


@dataclass(frozen=True)
class OrderInfo:
    """Data transfer object for an order."""

    id: UUID
    status: OrderStatus
    customer_id: UUID | None
    customer_name: str | None
    order_source: str | None
    total_selling_price: Decimal
    total_cost: Decimal
    total_profit: Decimal
    discount: Decimal
    discount_type: DiscountType
    packaging_cost: Decimal
    delivery_cost: Decimal
    delivery_paid_by: DeliveryPayer
    redeemed_points: int
    created_at: datetime | None
    completed_at: datetime | None
    lines: tuple[OrderLineInfo, ...]

    @property
    def is_stock_in(self) -> bool:
        return self.status.is_stock_in


def line_to_info(line: OrderLine) -> OrderLineInfo:
    return OrderLineInfo(
        id=line.id,
        product_name=line.product_name,
        quantity=line.quantity,
        cost_price=line.cost_price,
        selling_price=line.selling_price,
        product_id=line.product_id,
        bundle_id=line.bundle_id,
        is_free=line.is_free,
        components=tuple(
            OrderLineComponentInfo(
                product_id=c.product_id,
                product_name=c.product_name,
                quantity=c.quantity,
            )
            for c in line.components
        ),
    )


def order_to_info(order: Order) -> OrderInfo:
    """Convert an ORM Order (with its lines loaded) to an OrderInfo DTO."""
    return OrderInfo(
        id=order.id,
        status=order.status,
        customer_id=order.customer_id,
        customer_name=order.customer_name,
        order_source=order.order_source,
        total_selling_price=order.total_selling_price,
        total_cost=order.total_cost,
        total_profit=order.total_profit,
        discount=order.discount,
        discount_type=order.discount_type,
        packaging_cost=order.packaging_cost,
        delivery_cost=order.delivery_cost,
        delivery_paid_by=order.delivery_paid_by,
        redeemed_points=order.redeemed_points,
        created_at=order.created_at,
        completed_at=order.completed_at,
        lines=tuple(line_to_info(l) for l in order.lines),
    )


class OrderSelector(BaseSelector[Order]):
    """Selector for order queries."""

    def get_order(self, order_id: UUID) -> OrderInfo:
        """
        Raises:
            OrderNotFoundError: If the order doesn't exist.
        """
        order = self.session.get(Order, order_id)
        if order is None:
            raise OrderNotFoundError(str(order_id))
        return order_to_info(order)

    def list_orders(
        self,
        status: OrderStatus | str | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        customer_id: UUID | None = None,
    ) -> list[OrderInfo]:
        """
        List orders newest first, optionally filtered by status, an
        inclusive creation-time window and customer.
        """
        stmt = select(Order)
        if status is not None:
            stmt = stmt.where(Order.status == OrderStatus(status))
        if start is not None:
            stmt = stmt.where(Order.created_at >= start)
        if end is not None:
            stmt = stmt.where(Order.created_at <= end)
        if customer_id is not None:
            stmt = stmt.where(Order.customer_id == customer_id)
        stmt = stmt.order_by(Order.created_at.desc(), Order.id)

        orders = self.session.execute(stmt).scalars().all()
        return [order_to_info(o) for o in orders]
