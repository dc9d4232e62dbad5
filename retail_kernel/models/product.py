"""
Module: retail_kernel.models.product
Responsibility: ORM persistence for sellable catalog products and their
    on-hand stock.
Architecture position: Kernel > Models.  May import from db/base.py only.
    MUST NOT import from services/, selectors/, domain/, or outer layers.

Invariants enforced:
    - stock >= 0 at every committed state (ck_products_stock_non_negative).
      Services check before writing; the constraint is the last line.
    - stock is only written by kernel services, under a row lock, inside
      the caller's transaction.

Failure modes:
    - IntegrityError if a write bypasses the services and drives stock
      negative.
"""

from datetime import date
from decimal import Decimal

from sqlalchemy import CheckConstraint, Date, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from retail_kernel.db.base import TrackedBase

DEFAULT_LOW_STOCK_THRESHOLD = 5


class Product(TrackedBase):
    """
    A catalog product with cost, selling price and stock on hand.

    Price edits only affect future orders: order lines snapshot
    cost_price and selling_price when the order is created.
    """

    __tablename__ = "products"

    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),
        Index("idx_product_name", "name"),
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    cost_price: Mapped[Decimal] = mapped_column(
        nullable=False,
    )

    selling_price: Mapped[Decimal] = mapped_column(
        nullable=False,
    )

    # Previous selling price, shown as a strike-through by the storefront
    old_price: Mapped[Decimal | None] = mapped_column(
        nullable=True,
    )

    stock: Mapped[int] = mapped_column(
        nullable=False,
        default=0,
    )

    supplier: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    barcode: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
    )

    expiry_date: Mapped[date | None] = mapped_column(
        Date,
        nullable=True,
    )

    low_stock_threshold: Mapped[int] = mapped_column(
        nullable=False,
        default=DEFAULT_LOW_STOCK_THRESHOLD,
    )

    @property
    def is_low_stock(self) -> bool:
        return self.stock <= self.low_stock_threshold

    def __repr__(self) -> str:
        return f"<Product {self.name} stock={self.stock}>"
