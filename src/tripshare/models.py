from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Hashable, Optional

Member = Hashable


class SplitType(str, Enum):
    EQUAL = "equal"
    CUSTOM = "custom"
    FULL = "full"


class ExpenseCategory(str, Enum):
    FOOD = "food"
    TRANSPORT = "transport"
    ACCOMMODATION = "accommodation"
    ACTIVITY = "activity"
    SHOPPING = "shopping"
    ENTERTAINMENT = "entertainment"
    OTHER = "other"


@dataclass(slots=True, frozen=True)
class ExpenseSplit:
    member: Member
    amount: Decimal


@dataclass(slots=True, frozen=True)
class Expense:
    """One payment event: ``payer`` fronted ``amount``, divided by ``splits``.

    An empty ``splits`` tuple means the payer bears the whole amount.
    """

    payer: Member
    amount: Decimal
    splits: tuple[ExpenseSplit, ...] = ()
    split_type: SplitType = SplitType.EQUAL
    category: ExpenseCategory = ExpenseCategory.OTHER
    title: str = ""
    expense_id: Optional[Hashable] = None

    def effective_splits(self) -> tuple[ExpenseSplit, ...]:
        if self.splits:
            return self.splits
        return (ExpenseSplit(member=self.payer, amount=self.amount),)


@dataclass(slots=True)
class MemberBalance:
    member: Member
    total_paid: Decimal = Decimal(0)
    total_owed: Decimal = Decimal(0)

    @property
    def net(self) -> Decimal:
        return self.total_paid - self.total_owed

    def is_settled(self, eps: Decimal) -> bool:
        return abs(self.net) <= eps


@dataclass(slots=True, frozen=True)
class Transfer:
    from_member: Member
    to_member: Member
    amount: Decimal


@dataclass(slots=True)
class SpendingSummary:
    total_spent: Decimal
    budget: Optional[Decimal] = None
    budget_remaining: Optional[Decimal] = None
    budget_progress: Optional[Decimal] = None
    by_category: dict[ExpenseCategory, Decimal] = field(default_factory=dict)
