"""Expense query selector."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, select

from retail_kernel.exceptions import ExpenseNotFoundError
from retail_kernel.models.expense import Expense, ExpenseType
from retail_kernel.selectors.base import BaseSelector


@dataclass(frozen=True)
class ExpenseInfo:
    id: UUID
    expense_type: ExpenseType
    amount: Decimal
    incurred_on: date
    description: str | None
    metadata: dict | None


def expense_to_info(expense: Expense) -> ExpenseInfo:
    return ExpenseInfo(
        id=expense.id,
        expense_type=expense.expense_type,
        amount=expense.amount,
        incurred_on=expense.incurred_on,
        description=expense.description,
        metadata=expense.expense_metadata,
    )


class ExpenseSelector(BaseSelector[Expense]):
    """Selector for expense queries."""

    def get_expense(self, expense_id: UUID) -> ExpenseInfo:
        expense = self.session.get(Expense, expense_id)
        if expense is None:
            raise ExpenseNotFoundError(str(expense_id))
        return expense_to_info(expense)

    def _filtered(self, stmt, expense_type, start, end):
        if expense_type is not None:
            stmt = stmt.where(Expense.expense_type == ExpenseType(expense_type))
        if start is not None:
            stmt = stmt.where(Expense.incurred_on >= start)
        if end is not None:
            stmt = stmt.where(Expense.incurred_on <= end)
        return stmt

    def list_expenses(
        self,
        expense_type: ExpenseType | str | None = None,
        start: date | None = None,
        end: date | None = None,
    ) -> list[ExpenseInfo]:
        """Expenses newest first, filtered by type and an inclusive date range."""
        stmt = self._filtered(select(Expense), expense_type, start, end)
        stmt = stmt.order_by(Expense.incurred_on.desc(), Expense.id)
        return [expense_to_info(e) for e in self.session.execute(stmt).scalars()]

    def total(
        self,
        expense_type: ExpenseType | str | None = None,
        start: date | None = None,
        end: date | None = None,
    ) -> Decimal:
        stmt = self._filtered(
            select(func.coalesce(func.sum(Expense.amount), 0)),
            expense_type,
            start,
            end,
        )
        return Decimal(str(self.session.execute(stmt).scalar_one()))
