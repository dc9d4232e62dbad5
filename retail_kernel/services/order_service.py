"""
OrderService -- atomic order creation.

Responsibility:
    Turn an OrderRequest into a persisted Order with snapshot lines,
    decrementing product stock and debiting redeemed loyalty points in the
    same transaction.

Architecture position:
    Kernel > Services -- imperative shell around ``domain.pricing``.

Invariants enforced:
    - All-or-nothing: every check (product/bundle/customer existence,
      per-line and aggregated stock, points balance) runs before the first
      write.  A failure leaves catalog, customer and order tables untouched
      once the caller rolls back.
    - Stock never goes negative: product rows are locked (ascending id)
      before they are read for the stock check, so concurrent orders on
      the same product serialize.
    - Lines are immutable snapshots: names and prices are copied from the
      catalog at creation.  Bundle lines also snapshot their components so
      later status transitions move the same units back and forth.
    - A new order starts in NEW and is stock-out.

Failure modes:
    - ProductNotFoundError / BundleNotFoundError for a missing reference.
    - CustomerNotFoundError when customer_id does not resolve.
    - InsufficientStockError naming the product (and bundle, if any).
    - InsufficientPointsError when redeemed_points exceeds the balance.

Audit relevance:
    Emits ``order_created`` with the order id, totals and stock movement.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from retail_kernel.domain.clock import Clock
from retail_kernel.domain.order_types import OrderStatus
from retail_kernel.domain.pricing import (
    BundleComponentSnapshot,
    BundleSnapshot,
    PricedOrder,
    ProductSnapshot,
    price_order,
)
from retail_kernel.domain.requests import OrderRequest
from retail_kernel.exceptions import (
    CustomerNotFoundError,
    InsufficientPointsError,
    InsufficientStockError,
)
from retail_kernel.logging_config import LogContext, get_logger
from retail_kernel.models.bundle import Bundle
from retail_kernel.models.customer import Customer
from retail_kernel.models.order import Order, OrderLine, OrderLineComponent
from retail_kernel.models.product import Product
from retail_kernel.selectors.order_selector import OrderInfo, order_to_info
from retail_kernel.services.base import BaseService

logger = get_logger("services.order")


def _bundle_snapshot(bundle: Bundle) -> BundleSnapshot:
    return BundleSnapshot(
        id=bundle.id,
        name=bundle.name,
        selling_price=bundle.selling_price,
        components=tuple(
            BundleComponentSnapshot(product_id=c.product_id, quantity=c.quantity)
            for c in bundle.components
        ),
    )


def _product_snapshot(product: Product) -> ProductSnapshot:
    return ProductSnapshot(
        id=product.id,
        name=product.name,
        cost_price=product.cost_price,
        selling_price=product.selling_price,
        stock=product.stock,
    )


class OrderService(BaseService[Order]):
    """Creates orders.  Status changes live in StatusTransitionService."""

    def __init__(self, session: Session, clock: Clock | None = None):
        super().__init__(session, clock)

    def create_order(self, request: OrderRequest) -> OrderInfo:
        """
        Create an order atomically.

        The caller owns the transaction: on any exception it must roll
        back (``session_scope`` does this).

        Returns:
            OrderInfo for the new order, status NEW.
        """
        with LogContext.bind(
            customer_id=str(request.customer_id) if request.customer_id else None
        ):
            bundles = self._load_bundles(request.bundle_ids)

            product_ids = set(request.product_ids)
            for bundle in bundles.values():
                product_ids.update(c.product_id for c in bundle.components)
            products = self.lock_rows(Product, product_ids)

            customer = None
            if request.customer_id is not None:
                customer = self.lock_row(Customer, request.customer_id)
                if customer is None:
                    raise CustomerNotFoundError(str(request.customer_id))

            try:
                priced = price_order(
                    request,
                    {pid: _product_snapshot(p) for pid, p in products.items()},
                    bundles,
                )
            except InsufficientStockError as exc:
                logger.warning(
                    "stock_insufficient",
                    extra={
                        "product_id": exc.product_id,
                        "required": exc.required,
                        "available": exc.available,
                    },
                )
                raise

            if customer is not None and request.redeemed_points > 0:
                if customer.points < request.redeemed_points:
                    raise InsufficientPointsError(
                        customer_id=str(customer.id),
                        required=request.redeemed_points,
                        available=customer.points,
                    )

            # All checks passed; writes start here.
            for product_id, quantity in sorted(
                priced.stock_requirements.items(), key=lambda kv: str(kv[0])
            ):
                products[product_id].stock -= quantity

            if customer is not None and request.redeemed_points > 0:
                customer.points -= request.redeemed_points

            order = self._build_order(request, priced)
            self.session.add(order)
            self.session.flush()

            logger.info(
                "order_created",
                extra={
                    "order_id": str(order.id),
                    "line_count": len(order.lines),
                    "total_selling_price": str(order.total_selling_price),
                    "total_profit": str(order.total_profit),
                    "redeemed_points": order.redeemed_points,
                    "stock_out": {
                        str(pid): qty
                        for pid, qty in priced.stock_requirements.items()
                    },
                },
            )
            return order_to_info(order)

    def _load_bundles(self, bundle_ids: set[UUID]) -> dict[UUID, BundleSnapshot]:
        if not bundle_ids:
            return {}
        rows = self.session.execute(
            select(Bundle).where(Bundle.id.in_(bundle_ids))
        ).scalars().all()
        return {b.id: _bundle_snapshot(b) for b in rows}

    def _build_order(self, request: OrderRequest, priced: PricedOrder) -> Order:
        totals = priced.totals
        lines = [
            OrderLine(
                position=line.position,
                product_name=line.name,
                quantity=line.quantity,
                cost_price=line.unit_cost,
                selling_price=line.unit_price,
                product_id=line.product_id,
                bundle_id=line.bundle_id,
                is_free=line.is_free,
                components=[
                    OrderLineComponent(
                        product_id=c.product_id,
                        product_name=c.product_name,
                        quantity=c.quantity,
                    )
                    for c in line.components
                ],
            )
            for line in priced.lines
        ]
        return Order(
            customer_id=request.customer_id,
            customer_name=request.customer_name,
            order_source=request.order_source,
            status=OrderStatus.NEW,
            total_selling_price=totals.total_selling_price,
            total_cost=totals.total_cost,
            total_profit=totals.total_profit,
            discount=totals.discount_amount,
            discount_type=request.discount_type,
            packaging_cost=request.packaging_cost,
            delivery_cost=request.delivery_cost,
            delivery_paid_by=request.delivery_paid_by,
            redeemed_points=request.redeemed_points,
            created_at=self.clock.now(),
            lines=lines,
        )
