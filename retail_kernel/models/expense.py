"""
Module: retail_kernel.models.expense
Responsibility: ORM persistence for shop operating expenses (ads, goods,
    packaging, transport).
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - amount > 0 (ck_expenses_amount_positive).
"""

from datetime import date
from decimal import Decimal
from enum import Enum

from sqlalchemy import JSON, CheckConstraint, Date, Index, String
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from retail_kernel.db.base import TrackedBase


class ExpenseType(str, Enum):
    """Expense categories."""

    ADS = "ADS"
    GOODS = "GOODS"
    PACKAGING = "PACKAGING"
    TRANSPORT = "TRANSPORT"
    EXTRA = "EXTRA"


class Expense(TrackedBase):
    """A single dated expense."""

    __tablename__ = "expenses"

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_expenses_amount_positive"),
        Index("idx_expense_incurred_on", "incurred_on"),
    )

    expense_type: Mapped[ExpenseType] = mapped_column(
        SAEnum(
            ExpenseType,
            name="expense_type",
            native_enum=False,
            length=20,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
    )

    amount: Mapped[Decimal] = mapped_column(nullable=False)

    incurred_on: Mapped[date] = mapped_column(
        Date,
        nullable=False,
    )

    description: Mapped[str | None] = mapped_column(
        String(1000),
        nullable=True,
    )

    # Named expense_metadata to avoid the SQLAlchemy reserved name
    expense_metadata: Mapped[dict | None] = mapped_column(
        JSON,
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Expense {self.expense_type.value} {self.amount} on {self.incurred_on}>"
