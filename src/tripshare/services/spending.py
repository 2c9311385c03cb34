from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence

from tripshare.models import Expense, ExpenseCategory, SpendingSummary
from tripshare.money import MoneyLike, as_decimal


def summarize_spending(expenses: Sequence[Expense], budget: Optional[MoneyLike] = None) -> SpendingSummary:
    total = Decimal(0)
    by_category: dict[ExpenseCategory, Decimal] = {}
    for expense in expenses:
        total += expense.amount
        by_category[expense.category] = by_category.get(expense.category, Decimal(0)) + expense.amount

    summary = SpendingSummary(total_spent=total, by_category=by_category)
    if budget is not None:
        budget_value = as_decimal(budget)
        if budget_value > 0:
            summary.budget = budget_value
            summary.budget_remaining = budget_value - total
            summary.budget_progress = total / budget_value
    return summary
