"""
Order requests -- typed, self-validating input to the pricing engine.

Responsibility:
    A requested order line is a tagged variant: ``ProductLine`` or
    ``BundleLine``.  Exactly one reference per line is therefore a property
    of the type, not a runtime check.  ``OrderRequest`` carries the
    order-level money fields and checks their shape on construction.

Architecture position:
    Kernel > Domain -- pure, zero I/O.  Constructed by whatever validation
    layer sits in front of the kernel; the kernel trusts the shape but
    still enforces business invariants (stock, points) in the services.

Failure modes:
    - InvalidRequestError on non-positive quantity, negative money fields,
      unknown enum values, float amounts, or an empty line list.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Union
from uuid import UUID

from retail_kernel.db.types import to_money
from retail_kernel.domain.order_types import DeliveryPayer, DiscountType
from retail_kernel.exceptions import InvalidRequestError

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


def _check_quantity(quantity: int) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidRequestError(f"quantity must be an integer, got {quantity!r}")
    if quantity < 1:
        raise InvalidRequestError(f"quantity must be at least 1, got {quantity}")


def _as_uuid(value: UUID | str, what: str) -> UUID:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError as exc:
        raise InvalidRequestError(f"{what} is not a valid id: {value!r}") from exc


def _as_money(value, what: str) -> Decimal:
    try:
        amount = to_money(value)
    except ValueError as exc:
        raise InvalidRequestError(f"{what}: {exc}") from exc
    if amount < _ZERO:
        raise InvalidRequestError(f"{what} must not be negative, got {amount}")
    return amount


def _as_enum(enum_cls, value, what: str):
    try:
        return enum_cls(value)
    except ValueError as exc:
        allowed = ", ".join(m.value for m in enum_cls)
        raise InvalidRequestError(
            f"{what} must be one of {allowed}, got {value!r}"
        ) from exc


@dataclass(frozen=True)
class ProductLine:
    """Request for ``quantity`` units of a single product."""

    product_id: UUID
    quantity: int
    is_free: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "product_id", _as_uuid(self.product_id, "product_id"))
        _check_quantity(self.quantity)


@dataclass(frozen=True)
class BundleLine:
    """Request for ``quantity`` units of a bundle."""

    bundle_id: UUID
    quantity: int
    is_free: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "bundle_id", _as_uuid(self.bundle_id, "bundle_id"))
        _check_quantity(self.quantity)


LineRequest = Union[ProductLine, BundleLine]


@dataclass(frozen=True)
class OrderRequest:
    """
    A complete order creation request.

    Money fields accept Decimal, int or numeric strings and are normalized
    to Decimal.  Enum fields accept members or their string values.
    """

    lines: tuple[LineRequest, ...]
    packaging_cost: Decimal = _ZERO
    delivery_cost: Decimal = _ZERO
    delivery_paid_by: DeliveryPayer = DeliveryPayer.CUSTOMER
    discount: Decimal = _ZERO
    discount_type: DiscountType = DiscountType.AMOUNT
    customer_id: UUID | None = None
    redeemed_points: int = 0
    customer_name: str | None = None
    order_source: str | None = None

    def __post_init__(self) -> None:
        lines = tuple(self.lines)
        if not lines:
            raise InvalidRequestError("an order needs at least one line")
        for line in lines:
            if not isinstance(line, (ProductLine, BundleLine)):
                raise InvalidRequestError(
                    f"line must be a ProductLine or BundleLine, got {type(line).__name__}"
                )
        object.__setattr__(self, "lines", lines)

        object.__setattr__(
            self, "packaging_cost", _as_money(self.packaging_cost, "packaging_cost")
        )
        object.__setattr__(
            self, "delivery_cost", _as_money(self.delivery_cost, "delivery_cost")
        )
        object.__setattr__(self, "discount", _as_money(self.discount, "discount"))
        object.__setattr__(
            self,
            "delivery_paid_by",
            _as_enum(DeliveryPayer, self.delivery_paid_by, "delivery_paid_by"),
        )
        object.__setattr__(
            self,
            "discount_type",
            _as_enum(DiscountType, self.discount_type, "discount_type"),
        )
        if self.discount_type == DiscountType.PERCENTAGE and self.discount > _HUNDRED:
            raise InvalidRequestError(
                f"percentage discount cannot exceed 100, got {self.discount}"
            )

        if self.customer_id is not None:
            object.__setattr__(
                self, "customer_id", _as_uuid(self.customer_id, "customer_id")
            )

        points = self.redeemed_points
        if isinstance(points, bool) or not isinstance(points, int) or points < 0:
            raise InvalidRequestError(
                f"redeemed_points must be a non-negative integer, got {points!r}"
            )

    @property
    def product_ids(self) -> set[UUID]:
        return {l.product_id for l in self.lines if isinstance(l, ProductLine)}

    @property
    def bundle_ids(self) -> set[UUID]:
        return {l.bundle_id for l in self.lines if isinstance(l, BundleLine)}
