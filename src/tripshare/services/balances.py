from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Sequence

from tripshare.logging import get_logger
from tripshare.models import Expense, Member, MemberBalance

log = get_logger(__name__)


def compute_balances(expenses: Sequence[Expense], members: Iterable[Member]) -> dict[Member, Decimal]:
    """Net position per member: what they paid minus what they owe.

    Every member in ``members`` is present, idle ones at zero. Members that only
    show up in expenses are appended in first-seen order. Expenses are trusted
    as given; run them through ``validate_expense`` beforehand.
    """
    balances: dict[Member, Decimal] = {member: Decimal(0) for member in members}
    member_count = len(balances)

    for expense in expenses:
        balances[expense.payer] = balances.get(expense.payer, Decimal(0)) + expense.amount
        for split in expense.effective_splits():
            balances[split.member] = balances.get(split.member, Decimal(0)) - split.amount

    if len(balances) > member_count:
        log.warning("balances.unlisted_members", count=len(balances) - member_count)
    log.debug("balances.computed", expenses=len(expenses), members=len(balances))
    return balances


def compute_member_balances(expenses: Sequence[Expense], members: Iterable[Member]) -> list[MemberBalance]:
    result: dict[Member, MemberBalance] = {member: MemberBalance(member=member) for member in members}

    def _entry(member: Member) -> MemberBalance:
        if member not in result:
            result[member] = MemberBalance(member=member)
        return result[member]

    for expense in expenses:
        _entry(expense.payer).total_paid += expense.amount
        for split in expense.effective_splits():
            _entry(split.member).total_owed += split.amount

    return sorted(result.values(), key=lambda balance: balance.net, reverse=True)
