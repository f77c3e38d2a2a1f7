"""Expense aggregation for budget tracking and charts."""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable

from ..common.models import Expense, ExpenseSummary


def summarize_expenses(
    expenses: Iterable[Expense], total_budget: float | None = None
) -> ExpenseSummary:
    """Aggregate expenses by category, by month and by purchase state.

    Months are keyed ``YYYY-MM`` from the expense date. The remaining
    budget is only computed when a budget is set; it may be negative.
    """
    by_category: dict[str, float] = defaultdict(float)
    by_month: dict[str, float] = defaultdict(float)
    total = purchased = unpurchased = 0.0
    count = 0

    for expense in expenses:
        count += 1
        total += expense.amount
        by_category[expense.category] += expense.amount
        by_month[expense.date[:7]] += expense.amount
        if expense.is_purchased:
            purchased += expense.amount
        else:
            unpurchased += expense.amount

    return ExpenseSummary(
        total=round(total, 2),
        purchased_total=round(purchased, 2),
        unpurchased_total=round(unpurchased, 2),
        by_category={k: round(v, 2) for k, v in sorted(by_category.items())},
        by_month={k: round(v, 2) for k, v in sorted(by_month.items())},
        total_budget=total_budget,
        remaining_budget=(
            round(total_budget - total, 2) if total_budget is not None else None
        ),
        expense_count=count,
    )
