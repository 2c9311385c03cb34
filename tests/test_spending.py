from decimal import Decimal

from tripshare.models import ExpenseCategory, SplitType
from tripshare.services.spending import summarize_spending
from tripshare.services.split import make_expense


def _expenses():
    return [
        make_expense("alice", "25", SplitType.FULL, category=ExpenseCategory.FOOD),
        make_expense("alice", "30.50", SplitType.FULL, category=ExpenseCategory.TRANSPORT),
        make_expense("bob", "44.50", SplitType.FULL, category=ExpenseCategory.FOOD),
    ]


def test_total_spent():
    summary = summarize_spending(_expenses())
    assert summary.total_spent == Decimal("100")
    assert summary.budget is None
    assert summary.budget_remaining is None
    assert summary.budget_progress is None


def test_by_category():
    summary = summarize_spending(_expenses())
    assert summary.by_category == {
        ExpenseCategory.FOOD: Decimal("69.50"),
        ExpenseCategory.TRANSPORT: Decimal("30.50"),
    }


def test_budget_progress():
    summary = summarize_spending(_expenses(), budget=200)
    assert summary.budget_remaining == Decimal("100")
    assert summary.budget_progress == Decimal("0.5")


def test_over_budget():
    summary = summarize_spending([make_expense("alice", "150", SplitType.FULL)], budget="100")
    assert summary.budget_remaining == Decimal("-50")
    assert summary.budget_progress == Decimal("1.5")


def test_non_positive_budget_is_ignored():
    summary = summarize_spending(_expenses(), budget=0)
    assert summary.budget is None
    assert summary.budget_progress is None


def test_no_expenses():
    summary = summarize_spending([], budget=100)
    assert summary.total_spent == 0
    assert summary.budget_progress == 0
    assert summary.by_category == {}
