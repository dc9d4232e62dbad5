"""
Module: retail_kernel.models.customer
Responsibility: ORM persistence for customers and their loyalty points ledger.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - points >= 0 at every committed state (ck_customers_points_non_negative).
    - points are written only by the status transition engine, order
      creation (redemption) and points transfer, under a row lock.
    - phone is unique (uq_customer_phone).

Failure modes:
    - IntegrityError on duplicate phone; CustomerService translates it to
      DuplicatePhoneError.
"""

from sqlalchemy import CheckConstraint, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from retail_kernel.db.base import TrackedBase


class Customer(TrackedBase):
    """A customer with contact details and a loyalty points balance."""

    __tablename__ = "customers"

    __table_args__ = (
        UniqueConstraint("phone", name="uq_customer_phone"),
        CheckConstraint("points >= 0", name="ck_customers_points_non_negative"),
    )

    name: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    phone: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )

    address: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True,
    )

    instagram: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
    )

    # Free-form comma separated labels
    tags: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True,
    )

    points: Mapped[int] = mapped_column(
        nullable=False,
        default=0,
    )

    def __repr__(self) -> str:
        return f"<Customer {self.phone} points={self.points}>"
