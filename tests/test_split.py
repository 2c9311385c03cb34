from decimal import Decimal

import pytest

from tripshare.models import ExpenseCategory, ExpenseSplit, SplitType
from tripshare.services.split import build_splits, make_expense, split_custom, split_equally, split_full
from tripshare.services.validation import ExpenseValidationError


def test_split_equally_even():
    splits = split_equally(Decimal("100"), ["alice", "bob", "carol", "dave"])
    assert [s.amount for s in splits] == [Decimal("25.00")] * 4


def test_split_equally_remainder_goes_to_first_members():
    splits = split_equally("100", ["alice", "bob", "carol"])
    assert splits == (
        ExpenseSplit("alice", Decimal("33.34")),
        ExpenseSplit("bob", Decimal("33.33")),
        ExpenseSplit("carol", Decimal("33.33")),
    )
    assert sum(s.amount for s in splits) == Decimal("100")


def test_split_equally_two_leftover_cents():
    splits = split_equally("0.05", [1, 2, 3])
    assert [s.amount for s in splits] == [Decimal("0.02"), Decimal("0.02"), Decimal("0.01")]


def test_split_equally_rejects_empty_members():
    with pytest.raises(ValueError):
        split_equally("10", [])


def test_split_equally_rejects_negative_amount():
    with pytest.raises(ValueError):
        split_equally("-10", ["alice"])


def test_split_equally_zero_minor_units():
    splits = split_equally(1000, ["a", "b", "c"], minor_units=0)
    assert [s.amount for s in splits] == [Decimal("334"), Decimal("333"), Decimal("333")]


def test_split_custom_drops_zero_shares():
    splits = split_custom("50", {"alice": "30", "bob": "20", "carol": "0"})
    assert [s.member for s in splits] == ["alice", "bob"]


def test_split_custom_rejects_mismatched_total():
    with pytest.raises(ValueError):
        split_custom("50", {"alice": "30", "bob": "10"})


def test_split_custom_absorbs_one_cent_gap():
    splits = split_custom("10", {"alice": "3.33", "bob": "3.33", "carol": "3.33"})
    assert [s.amount for s in splits] == [Decimal("3.34"), Decimal("3.33"), Decimal("3.33")]
    assert sum(s.amount for s in splits) == Decimal("10")


def test_split_full():
    assert split_full("alice", 42.5) == (ExpenseSplit("alice", Decimal("42.50")),)


def test_build_splits_custom_limited_to_selected_members():
    splits = build_splits(
        SplitType.CUSTOM,
        "30",
        "alice",
        members=["alice", "bob"],
        custom_shares={"alice": "10", "bob": "20", "carol": "5"},
    )
    assert {s.member for s in splits} == {"alice", "bob"}


def test_make_expense_equal():
    expense = make_expense(
        "alice",
        "120",
        SplitType.EQUAL,
        members=["alice", "bob", "carol"],
        category="food",
        title="  Dinner ",
    )
    assert expense.amount == Decimal("120.00")
    assert expense.category is ExpenseCategory.FOOD
    assert expense.title == "Dinner"
    assert [s.amount for s in expense.splits] == [Decimal("40.00")] * 3


def test_make_expense_full():
    expense = make_expense("alice", "15", "full")
    assert expense.split_type is SplitType.FULL
    assert expense.splits == (ExpenseSplit("alice", Decimal("15.00")),)


def test_make_expense_rejects_non_positive_amount():
    with pytest.raises(ExpenseValidationError):
        make_expense("alice", "0", members=["alice"])


def test_make_expense_equal_requires_members():
    with pytest.raises(ExpenseValidationError):
        make_expense("alice", "10", SplitType.EQUAL, members=[])


def test_make_expense_unknown_member():
    with pytest.raises(ExpenseValidationError):
        make_expense("alice", "10", members=["alice", "mallory"], known_members=["alice", "bob"])
