"""
Module: retail_kernel.models.bundle
Responsibility: ORM persistence for bundles (packages): a named set of fixed
    product quantities sold as one line at one price.
Architecture position: Kernel > Models.  May import from db/base.py and
    sibling models.  MUST NOT import from services/, selectors/, domain/.

Invariants enforced:
    - A bundle has no stock of its own.  Its availability is derived from
      the stock of its component products.
    - Component quantity > 0 (ck_bundle_components_quantity_positive).
    - A product referenced by a bundle cannot be deleted (RESTRICT).
"""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from retail_kernel.db.base import Base, TrackedBase, UUIDString
from retail_kernel.models.product import Product


class Bundle(TrackedBase):
    """A sellable package of products with its own selling price."""

    __tablename__ = "bundles"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    selling_price: Mapped[Decimal] = mapped_column(
        nullable=False,
    )

    components: Mapped[list["BundleComponent"]] = relationship(
        back_populates="bundle",
        cascade="all, delete-orphan",
        order_by="BundleComponent.position",
        lazy="selectin",
    )

    @property
    def unit_cost(self) -> Decimal:
        """Sum of component cost price times component quantity."""
        return sum(
            (c.product.cost_price * c.quantity for c in self.components),
            Decimal("0"),
        )

    def __repr__(self) -> str:
        return f"<Bundle {self.name} components={len(self.components)}>"


class BundleComponent(Base):
    """One (product, quantity) entry of a bundle."""

    __tablename__ = "bundle_components"

    __table_args__ = (
        CheckConstraint(
            "quantity > 0", name="ck_bundle_components_quantity_positive"
        ),
    )

    bundle_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("bundles.id", ondelete="CASCADE"),
        nullable=False,
    )

    product_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("products.id", ondelete="RESTRICT"),
        nullable=False,
    )

    quantity: Mapped[int] = mapped_column(
        nullable=False,
    )

    # Preserves the order components were declared in
    position: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    bundle: Mapped[Bundle] = relationship(back_populates="components")

    product: Mapped[Product] = relationship(lazy="joined")
