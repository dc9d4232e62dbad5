"""Tests for ExpenseService and ExpenseSelector."""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from retail_kernel.exceptions import ExpenseNotFoundError, InvalidRequestError
from retail_kernel.models.expense import ExpenseType


@pytest.fixture
def june_expenses(expense_service):
    expense_service.record_expense("ADS", "3000", date(2025, 6, 1), "June campaign")
    expense_service.record_expense(ExpenseType.PACKAGING, 800, date(2025, 6, 10))
    expense_service.record_expense("ADS", "1500.50", date(2025, 6, 20))
    expense_service.record_expense("TRANSPORT", "200", date(2025, 7, 2))


class TestRecordExpense:

    def test_record_expense(self, expense_service, expense_selector):
        created = expense_service.record_expense(
            "GOODS",
            Decimal("12000"),
            date(2025, 5, 3),
            "Restock from Atlas",
            metadata={"invoice": "A-17"},
        )

        expense = expense_selector.get_expense(created.id)
        assert expense.expense_type == ExpenseType.GOODS
        assert expense.amount == Decimal("12000")
        assert expense.incurred_on == date(2025, 5, 3)
        assert expense.description == "Restock from Atlas"
        assert expense.metadata == {"invoice": "A-17"}

    def test_date_defaults_to_clock(self, expense_service, deterministic_clock):
        expense = expense_service.record_expense("EXTRA", "50")
        assert expense.incurred_on == deterministic_clock.now().date()

    @pytest.mark.parametrize("amount", ["0", "-10", 9.99, "abc"])
    def test_invalid_amount(self, expense_service, amount):
        with pytest.raises(InvalidRequestError):
            expense_service.record_expense("ADS", amount)

    def test_unknown_type(self, expense_service):
        with pytest.raises(InvalidRequestError):
            expense_service.record_expense("RENT", "100")


class TestExpenseQueries:

    def test_list_newest_first(self, expense_selector, june_expenses):
        dates = [e.incurred_on for e in expense_selector.list_expenses()]
        assert dates == sorted(dates, reverse=True)
        assert len(dates) == 4

    def test_filter_by_type_and_range(self, expense_selector, june_expenses):
        ads = expense_selector.list_expenses(
            "ADS", start=date(2025, 6, 1), end=date(2025, 6, 30)
        )
        assert [e.amount for e in ads] == [Decimal("1500.50"), Decimal("3000")]

    def test_range_is_inclusive(self, expense_selector, june_expenses):
        found = expense_selector.list_expenses(start=date(2025, 6, 10), end=date(2025, 6, 10))
        assert [e.expense_type for e in found] == [ExpenseType.PACKAGING]

    def test_total(self, expense_selector, june_expenses):
        assert expense_selector.total("ADS") == Decimal("4500.50")
        assert expense_selector.total(start=date(2025, 7, 1)) == Decimal("200")
        assert expense_selector.total("EXTRA") == Decimal("0")

    def test_delete_expense(self, expense_service, expense_selector):
        expense = expense_service.record_expense("ADS", "10")
        expense_service.delete_expense(expense.id)

        with pytest.raises(ExpenseNotFoundError):
            expense_selector.get_expense(expense.id)

    def test_delete_missing_expense(self, expense_service):
        with pytest.raises(ExpenseNotFoundError):
            expense_service.delete_expense(uuid4())
