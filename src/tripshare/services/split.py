from __future__ import annotations

from typing import Hashable, Iterable, Mapping, Optional, Sequence

from tripshare.models import Expense, ExpenseCategory, ExpenseSplit, Member, SplitType
from tripshare.money import DEFAULT_MINOR_UNITS, MoneyLike, quantum, to_money
from tripshare.services.validation import ExpenseValidationError, validate_expense


def split_equally(
    amount: MoneyLike,
    members: Sequence[Member],
    minor_units: int = DEFAULT_MINOR_UNITS,
) -> tuple[ExpenseSplit, ...]:
    """Divide ``amount`` evenly, handing leftover minor units to the first members."""
    total = to_money(amount, minor_units)
    if total < 0:
        raise ValueError("amount must be non-negative")
    if not members:
        raise ValueError("members must not be empty")

    unit = quantum(minor_units)
    total_units = int(total / unit)
    base_units, remainder = divmod(total_units, len(members))

    splits = []
    for index, member in enumerate(members):
        share_units = base_units + (1 if index < remainder else 0)
        splits.append(ExpenseSplit(member=member, amount=share_units * unit))
    return tuple(splits)


def split_custom(
    amount: MoneyLike,
    shares: Mapping[Member, MoneyLike],
    minor_units: int = DEFAULT_MINOR_UNITS,
) -> tuple[ExpenseSplit, ...]:
    total = to_money(amount, minor_units)
    splits = []
    for member, value in shares.items():
        share = to_money(value, minor_units)
        # blank or zero entries are not recorded
        if share <= 0:
            continue
        splits.append(ExpenseSplit(member=member, amount=share))

    allocated = sum((split.amount for split in splits), start=to_money(0, minor_units))
    drift = total - allocated
    if abs(drift) > quantum(minor_units):
        raise ValueError(f"custom shares sum to {allocated}, expected {total}")
    if drift and splits:
        # a one-unit rounding gap is absorbed by the first share
        first = splits[0]
        splits[0] = ExpenseSplit(member=first.member, amount=first.amount + drift)
    return tuple(splits)


def split_full(payer: Member, amount: MoneyLike, minor_units: int = DEFAULT_MINOR_UNITS) -> tuple[ExpenseSplit, ...]:
    return (ExpenseSplit(member=payer, amount=to_money(amount, minor_units)),)


def build_splits(
    split_type: SplitType,
    amount: MoneyLike,
    payer: Member,
    members: Sequence[Member] = (),
    custom_shares: Optional[Mapping[Member, MoneyLike]] = None,
    minor_units: int = DEFAULT_MINOR_UNITS,
) -> tuple[ExpenseSplit, ...]:
    if split_type == SplitType.FULL:
        return split_full(payer, amount, minor_units)
    if split_type == SplitType.EQUAL:
        return split_equally(amount, list(members), minor_units)
    if split_type == SplitType.CUSTOM:
        if custom_shares is None:
            raise ValueError("custom split requires custom_shares")
        selected: Iterable[Member] = members or custom_shares.keys()
        return split_custom(
            amount,
            {member: custom_shares[member] for member in selected if member in custom_shares},
            minor_units,
        )
    raise ValueError(f"unsupported split type: {split_type!r}")


def make_expense(
    payer: Member,
    amount: MoneyLike,
    split_type: SplitType = SplitType.EQUAL,
    members: Sequence[Member] = (),
    custom_shares: Optional[Mapping[Member, MoneyLike]] = None,
    category: ExpenseCategory = ExpenseCategory.OTHER,
    title: str = "",
    expense_id: Optional[Hashable] = None,
    known_members: Optional[Iterable[Member]] = None,
    minor_units: int = DEFAULT_MINOR_UNITS,
) -> Expense:
    """Build an ``Expense`` from a split policy and validate it before handing it out."""
    split_type = SplitType(split_type)
    total = to_money(amount, minor_units)
    if total <= 0:
        raise ExpenseValidationError("Expense amount must be positive.")

    try:
        splits = build_splits(split_type, total, payer, members, custom_shares, minor_units)
    except ValueError as exc:
        raise ExpenseValidationError(str(exc)) from exc

    expense = Expense(
        payer=payer,
        amount=total,
        splits=splits,
        split_type=split_type,
        category=ExpenseCategory(category),
        title=title.strip(),
        expense_id=expense_id,
    )
    validate_expense(expense, members=known_members, minor_units=minor_units)
    return expense
