"""
Module: retail_kernel.models.order
Responsibility: ORM persistence for orders, their line snapshots, and the
    expanded component snapshots of bundle lines.
Architecture position: Kernel > Models.  May import from db/base.py and
    domain/order_types.py (pure enums).  MUST NOT import from services/ or
    selectors/.

Invariants enforced:
    - OrderLine cost_price/selling_price are captured at creation and never
      rewritten.  Catalog price edits do not change historical orders.
    - Order aggregates (total_selling_price, total_cost, total_profit,
      discount) are written once, at creation.  Status transitions write
      only status and completed_at.
    - Bundle lines carry an OrderLineComponent per bundle component so a
      status transition can return or re-take exactly the stock that
      creation took.
    - Deleting a product, bundle or customer nulls the reference on
      historical rows; the snapshot values survive.
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from retail_kernel.db.base import Base, TrackedBase, UUIDString
from retail_kernel.domain.order_types import DeliveryPayer, DiscountType, OrderStatus


def _enum_values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


def _enum_column(enum_cls, name: str) -> SAEnum:
    return SAEnum(
        enum_cls,
        name=name,
        native_enum=False,
        length=20,
        values_callable=_enum_values,
    )


class Order(TrackedBase):
    """
    A customer order with fixed monetary aggregates and a mutable status.

    ``discount`` holds the discount *amount* actually applied (a PERCENTAGE
    discount is converted at creation); ``discount_type`` records how the
    caller expressed it.
    """

    __tablename__ = "orders"

    __table_args__ = (
        Index("idx_order_status", "status"),
        Index("idx_order_created_at", "created_at"),
        Index("idx_order_customer", "customer_id"),
    )

    customer_id: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        ForeignKey("customers.id", ondelete="SET NULL"),
        nullable=True,
    )

    # Free text name for walk-in customers without a record
    customer_name: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    # Sales channel (instagram, shop, whatsapp, ...)
    order_source: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
    )

    status: Mapped[OrderStatus] = mapped_column(
        _enum_column(OrderStatus, "order_status"),
        nullable=False,
        default=OrderStatus.NEW,
    )

    total_selling_price: Mapped[Decimal] = mapped_column(nullable=False)
    total_cost: Mapped[Decimal] = mapped_column(nullable=False)
    total_profit: Mapped[Decimal] = mapped_column(nullable=False)

    discount: Mapped[Decimal] = mapped_column(
        nullable=False,
        default=Decimal("0"),
    )

    discount_type: Mapped[DiscountType] = mapped_column(
        _enum_column(DiscountType, "discount_type"),
        nullable=False,
        default=DiscountType.AMOUNT,
    )

    packaging_cost: Mapped[Decimal] = mapped_column(
        nullable=False,
        default=Decimal("0"),
    )

    delivery_cost: Mapped[Decimal] = mapped_column(
        nullable=False,
        default=Decimal("0"),
    )

    delivery_paid_by: Mapped[DeliveryPayer] = mapped_column(
        _enum_column(DeliveryPayer, "delivery_payer"),
        nullable=False,
        default=DeliveryPayer.CUSTOMER,
    )

    redeemed_points: Mapped[int] = mapped_column(
        nullable=False,
        default=0,
    )

    completed_at: Mapped[datetime | None] = mapped_column(
        nullable=True,
    )

    lines: Mapped[list["OrderLine"]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderLine.position",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Order {self.id} status={self.status.value}>"


class OrderLine(Base):
    """Immutable snapshot of one requested line, taken at order creation."""

    __tablename__ = "order_lines"

    order_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
    )

    position: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    # Product or bundle name at the time of sale
    product_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    quantity: Mapped[int] = mapped_column(nullable=False)

    # Unit values.  selling_price is 0 for free lines.
    cost_price: Mapped[Decimal] = mapped_column(nullable=False)
    selling_price: Mapped[Decimal] = mapped_column(nullable=False)

    product_id: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        ForeignKey("products.id", ondelete="SET NULL"),
        nullable=True,
    )

    bundle_id: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        ForeignKey("bundles.id", ondelete="SET NULL"),
        nullable=True,
    )

    is_free: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )

    order: Mapped[Order] = relationship(back_populates="lines")

    components: Mapped[list["OrderLineComponent"]] = relationship(
        back_populates="line",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class OrderLineComponent(Base):
    """Per-bundle-unit quantity of one component product of a bundle line."""

    __tablename__ = "order_line_components"

    order_line_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("order_lines.id", ondelete="CASCADE"),
        nullable=False,
    )

    product_id: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        ForeignKey("products.id", ondelete="SET NULL"),
        nullable=True,
    )

    product_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    quantity: Mapped[int] = mapped_column(nullable=False)

    line: Mapped[OrderLine] = relationship(back_populates="components")
