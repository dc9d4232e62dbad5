"""
ExpenseService -- record and remove operating expenses.

Expenses are independent of orders and stock; they feed profit reporting
only.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID

from retail_kernel.db.types import to_money
from retail_kernel.exceptions import ExpenseNotFoundError, InvalidRequestError
from retail_kernel.logging_config import get_logger
from retail_kernel.models.expense import Expense, ExpenseType
from retail_kernel.selectors.expense_selector import ExpenseInfo, expense_to_info
from retail_kernel.services.base import BaseService

logger = get_logger("services.expense")


class ExpenseService(BaseService[Expense]):
    """Service for expense bookkeeping."""

    def record_expense(
        self,
        expense_type: ExpenseType | str,
        amount: Decimal | int | str,
        incurred_on: date | None = None,
        description: str | None = None,
        metadata: dict | None = None,
    ) -> ExpenseInfo:
        """
        Record an expense.  ``incurred_on`` defaults to today's date on
        the service clock.

        Raises:
            InvalidRequestError: Unknown type or non-positive amount.
        """
        try:
            kind = ExpenseType(expense_type)
        except ValueError:
            raise InvalidRequestError(
                f"unknown expense type: {expense_type!r}"
            ) from None
        try:
            value = to_money(amount)
        except ValueError as exc:
            raise InvalidRequestError(f"amount: {exc}") from None
        if value <= 0:
            raise InvalidRequestError(f"expense amount must be positive, got {value}")

        expense = Expense(
            expense_type=kind,
            amount=value,
            incurred_on=incurred_on or self.clock.now().date(),
            description=description,
            expense_metadata=metadata,
            created_at=self.clock.now(),
        )
        self.session.add(expense)
        self.session.flush()

        logger.info(
            "expense_recorded",
            extra={
                "expense_id": str(expense.id),
                "expense_type": kind.value,
                "amount": str(value),
            },
        )
        return expense_to_info(expense)

    def delete_expense(self, expense_id: UUID) -> None:
        expense = self.session.get(Expense, expense_id)
        if expense is None:
            raise ExpenseNotFoundError(str(expense_id))
        self.session.delete(expense)
        self.session.flush()
        logger.info("expense_deleted", extra={"expense_id": str(expense_id)})
