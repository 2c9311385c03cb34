"""Checks an ``Expense`` must pass before it is accepted into a trip.

The balance aggregator trusts its input, so anything built outside
``make_expense`` should go through ``validate_expense`` first.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Optional

from tripshare.models import Expense, Member, SplitType
from tripshare.money import DEFAULT_MINOR_UNITS, epsilon


class ExpenseValidationError(ValueError):
    pass


def validate_expense(
    expense: Expense,
    members: Optional[Iterable[Member]] = None,
    minor_units: int = DEFAULT_MINOR_UNITS,
) -> Expense:
    if not isinstance(expense.amount, Decimal):
        raise ExpenseValidationError("Expense amount must be a Decimal.")
    if expense.amount <= 0:
        raise ExpenseValidationError("Expense amount must be positive.")

    known = set(members) if members is not None else None
    if known is not None and expense.payer not in known:
        raise ExpenseValidationError(f"Payer {expense.payer!r} is not a trip member.")

    if expense.split_type == SplitType.FULL:
        if expense.splits and (
            len(expense.splits) != 1 or expense.splits[0].member != expense.payer
        ):
            raise ExpenseValidationError("A full-amount expense can only be split to its payer.")
    elif not expense.splits:
        raise ExpenseValidationError("Select at least one member to split with.")

    seen: set[Member] = set()
    for split in expense.splits:
        if split.amount < 0:
            raise ExpenseValidationError(f"Share for {split.member!r} is negative.")
        if split.member in seen:
            raise ExpenseValidationError(f"Member {split.member!r} appears twice in splits.")
        if known is not None and split.member not in known:
            raise ExpenseValidationError(f"Member {split.member!r} is not a trip member.")
        seen.add(split.member)

    if expense.splits:
        allocated = sum((split.amount for split in expense.splits), start=Decimal(0))
        if abs(allocated - expense.amount) > epsilon(minor_units):
            raise ExpenseValidationError(
                f"Shares sum to {allocated} but the expense amount is {expense.amount}."
            )

    return expense
