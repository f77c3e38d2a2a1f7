"""Tests for expense aggregation."""

from __future__ import annotations

from cartledger.common.models import Expense
from cartledger.expenses.summary import summarize_expenses


def _expense(i: int, amount: float, category: str, date: str, purchased: bool = False) -> Expense:
    return Expense(
        id=i, user_id="u1", name=f"e{i}", amount=amount,
        category=category, date=date, is_purchased=purchased,
    )


EXPENSES = [
    _expense(1, 1000.0, "Food", "2026-01-05", purchased=True),
    _expense(2, 250.5, "Food", "2026-02-01T10:00:00"),
    _expense(3, 4000.0, "Rent", "2026-02-01", purchased=True),
]


def test_totals():
    summary = summarize_expenses(EXPENSES)
    assert summary.total == 5250.5
    assert summary.purchased_total == 5000.0
    assert summary.unpurchased_total == 250.5
    assert summary.expense_count == 3


def test_by_category_and_month():
    summary = summarize_expenses(EXPENSES)
    assert summary.by_category == {"Food": 1250.5, "Rent": 4000.0}
    assert summary.by_month == {"2026-01": 1000.0, "2026-02": 4250.5}


def test_remaining_budget():
    assert summarize_expenses(EXPENSES, total_budget=6000).remaining_budget == 749.5
    assert summarize_expenses(EXPENSES, total_budget=5000).remaining_budget == -250.5


def test_no_budget():
    summary = summarize_expenses(EXPENSES)
    assert summary.total_budget is None
    assert summary.remaining_budget is None


def test_empty():
    summary = summarize_expenses([], total_budget=100)
    assert summary.total == 0
    assert summary.by_category == {}
    assert summary.remaining_budget == 100
