"""
Pricing -- order line resolution, stock requirements and order totals.

Responsibility:
    Turns an ``OrderRequest`` plus snapshots of the referenced catalog
    rows into priced line snapshots, the aggregated per-product stock
    requirement, and the order's fixed monetary aggregates.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.  OrderService loads
    and locks the catalog rows, converts them to the snapshots below and
    calls ``price_order``.

Invariants enforced:
    - Every product line and every bundle component is checked against
      current stock; the aggregated requirement per product is checked
      again so a product shared between lines cannot be over-committed.
    - Stock requirements are keyed by product id: each product is
      decremented once, by its total.
    - Free lines contribute 0 revenue but their full cost and stock.
    - profit = (selling - discount_amount) - (product cost + packaging
      + delivery when the shop pays it).

Failure modes:
    - ProductNotFoundError / BundleNotFoundError for unresolved references.
    - InsufficientStockError naming the short product (and bundle).
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Mapping
from uuid import UUID

from retail_kernel.domain.order_types import DeliveryPayer, DiscountType
from retail_kernel.domain.requests import BundleLine, OrderRequest, ProductLine
from retail_kernel.exceptions import (
    BundleNotFoundError,
    InsufficientStockError,
    ProductNotFoundError,
)

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


# ---------------------------------------------------------------------------
# Catalog snapshots (input)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProductSnapshot:
    """Point-in-time view of a locked product row."""

    id: UUID
    name: str
    cost_price: Decimal
    selling_price: Decimal
    stock: int


@dataclass(frozen=True)
class BundleComponentSnapshot:
    product_id: UUID
    quantity: int


@dataclass(frozen=True)
class BundleSnapshot:
    """Point-in-time view of a bundle and its component quantities."""

    id: UUID
    name: str
    selling_price: Decimal
    components: tuple[BundleComponentSnapshot, ...]


# ---------------------------------------------------------------------------
# Priced output
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LineComponent:
    """Component of a priced bundle line, quantity per bundle unit."""

    product_id: UUID
    product_name: str
    quantity: int


@dataclass(frozen=True)
class PricedLine:
    """
    Snapshot values for one order line.

    unit_cost and unit_price are per unit; unit_price is already 0 for
    free lines.
    """

    position: int
    name: str
    quantity: int
    unit_cost: Decimal
    unit_price: Decimal
    is_free: bool
    product_id: UUID | None = None
    bundle_id: UUID | None = None
    components: tuple[LineComponent, ...] = ()

    @property
    def line_cost(self) -> Decimal:
        return self.unit_cost * self.quantity

    @property
    def line_revenue(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class OrderTotals:
    """The aggregates persisted on the order.  Fixed at creation."""

    total_selling_price: Decimal
    product_cost: Decimal
    discount_amount: Decimal
    total_cost: Decimal
    total_profit: Decimal


@dataclass(frozen=True)
class PricedOrder:
    lines: tuple[PricedLine, ...]
    stock_requirements: Mapping[UUID, int]
    totals: OrderTotals


# ---------------------------------------------------------------------------
# Functions
# ---------------------------------------------------------------------------


def discount_amount(
    total_selling_price: Decimal,
    discount: Decimal,
    discount_type: DiscountType,
) -> Decimal:
    """Convert the requested discount into an amount."""
    if discount_type == DiscountType.PERCENTAGE:
        return total_selling_price * discount / _HUNDRED
    return discount


def compute_totals(
    total_selling_price: Decimal,
    product_cost: Decimal,
    *,
    discount: Decimal = _ZERO,
    discount_type: DiscountType = DiscountType.AMOUNT,
    packaging_cost: Decimal = _ZERO,
    delivery_cost: Decimal = _ZERO,
    delivery_paid_by: DeliveryPayer = DeliveryPayer.CUSTOMER,
) -> OrderTotals:
    """
    Compute the order's fixed aggregates.

    Delivery only counts as a cost when the shop pays it; customer-paid
    delivery passes through without touching profit.
    """
    applied_discount = discount_amount(total_selling_price, discount, discount_type)
    shop_delivery = delivery_cost if delivery_paid_by == DeliveryPayer.SHOP else _ZERO
    deductible = product_cost + packaging_cost + shop_delivery
    profit = (total_selling_price - applied_discount) - deductible
    return OrderTotals(
        total_selling_price=total_selling_price,
        product_cost=product_cost,
        discount_amount=applied_discount,
        total_cost=deductible,
        total_profit=profit,
    )


def _require(
    requirements: dict[UUID, int], product_id: UUID, quantity: int
) -> None:
    requirements[product_id] = requirements.get(product_id, 0) + quantity


def _lookup_product(
    products: Mapping[UUID, ProductSnapshot], product_id: UUID
) -> ProductSnapshot:
    product = products.get(product_id)
    if product is None:
        raise ProductNotFoundError(str(product_id))
    return product


def _price_product_line(
    position: int,
    line: ProductLine,
    products: Mapping[UUID, ProductSnapshot],
    requirements: dict[UUID, int],
) -> PricedLine:
    product = _lookup_product(products, line.product_id)
    if product.stock < line.quantity:
        raise InsufficientStockError(
            product_id=str(product.id),
            product_name=product.name,
            required=line.quantity,
            available=product.stock,
        )
    _require(requirements, product.id, line.quantity)
    return PricedLine(
        position=position,
        name=product.name,
        quantity=line.quantity,
        unit_cost=product.cost_price,
        unit_price=_ZERO if line.is_free else product.selling_price,
        is_free=line.is_free,
        product_id=product.id,
    )


def _price_bundle_line(
    position: int,
    line: BundleLine,
    products: Mapping[UUID, ProductSnapshot],
    bundles: Mapping[UUID, BundleSnapshot],
    requirements: dict[UUID, int],
) -> PricedLine:
    bundle = bundles.get(line.bundle_id)
    if bundle is None:
        raise BundleNotFoundError(str(line.bundle_id))

    unit_cost = _ZERO
    components: list[LineComponent] = []
    for component in bundle.components:
        product = _lookup_product(products, component.product_id)
        required = component.quantity * line.quantity
        if product.stock < required:
            raise InsufficientStockError(
                product_id=str(product.id),
                product_name=product.name,
                required=required,
                available=product.stock,
                bundle_name=bundle.name,
            )
        _require(requirements, product.id, required)
        unit_cost += product.cost_price * component.quantity
        components.append(
            LineComponent(
                product_id=product.id,
                product_name=product.name,
                quantity=component.quantity,
            )
        )

    return PricedLine(
        position=position,
        name=bundle.name,
        quantity=line.quantity,
        unit_cost=unit_cost,
        unit_price=_ZERO if line.is_free else bundle.selling_price,
        is_free=line.is_free,
        bundle_id=bundle.id,
        components=tuple(components),
    )


def price_order(
    request: OrderRequest,
    products: Mapping[UUID, ProductSnapshot],
    bundles: Mapping[UUID, BundleSnapshot],
) -> PricedOrder:
    """
    Resolve, check and price every line of ``request``.

    ``products`` must hold every directly referenced product and every
    component product of every referenced bundle, with current stock.

    Raises:
        ProductNotFoundError, BundleNotFoundError, InsufficientStockError.
    """
    requirements: dict[UUID, int] = {}
    priced: list[PricedLine] = []

    for position, line in enumerate(request.lines):
        if isinstance(line, ProductLine):
            priced.append(_price_product_line(position, line, products, requirements))
        else:
            priced.append(
                _price_bundle_line(position, line, products, bundles, requirements)
            )

    # Per-line checks pass individually; the combined demand must fit too.
    for product_id, required in requirements.items():
        product = products[product_id]
        if product.stock < required:
            raise InsufficientStockError(
                product_id=str(product.id),
                product_name=product.name,
                required=required,
                available=product.stock,
            )

    totals = compute_totals(
        total_selling_price=sum((l.line_revenue for l in priced), _ZERO),
        product_cost=sum((l.line_cost for l in priced), _ZERO),
        discount=request.discount,
        discount_type=request.discount_type,
        packaging_cost=request.packaging_cost,
        delivery_cost=request.delivery_cost,
        delivery_paid_by=request.delivery_paid_by,
    )

    return PricedOrder(
        lines=tuple(priced),
        stock_requirements=dict(requirements),
        totals=totals,
    )
