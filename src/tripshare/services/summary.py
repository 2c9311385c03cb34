from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Hashable, Optional, Protocol, Sequence

from tripshare.config import get_settings
from tripshare.logging import get_logger
from tripshare.models import Expense, Member, MemberBalance, SpendingSummary, Transfer
from tripshare.money import MoneyLike, epsilon, is_zero
from tripshare.services.balances import compute_balances, compute_member_balances
from tripshare.services.settlement import plan_settlement
from tripshare.services.spending import summarize_spending

log = get_logger(__name__)


class ExpenseSource(Protocol):
    async def fetch_expenses(self, trip_id: Hashable) -> Sequence[Expense]: ...

    async def fetch_members(self, trip_id: Hashable) -> Sequence[Member]: ...


@dataclass(slots=True)
class TripSummary:
    trip_id: Hashable
    balances: dict[Member, Decimal]
    member_balances: list[MemberBalance]
    transfers: list[Transfer]
    spending: SpendingSummary
    currency: str = "USD"
    settled_members: list[Member] = field(default_factory=list)


async def build_trip_summary(
    source: ExpenseSource,
    trip_id: Hashable,
    budget: Optional[MoneyLike] = None,
    minor_units: Optional[int] = None,
) -> TripSummary:
    """Read a trip's expenses and members once and derive every money view from that snapshot."""
    settings = get_settings()
    if minor_units is None:
        minor_units = settings.minor_units

    members = list(await source.fetch_members(trip_id))
    expenses = list(await source.fetch_expenses(trip_id))

    balances = compute_balances(expenses, members)
    transfers = plan_settlement(balances, minor_units=minor_units)
    member_balances = compute_member_balances(expenses, members)

    summary = TripSummary(
        trip_id=trip_id,
        balances=balances,
        member_balances=member_balances,
        transfers=transfers,
        spending=summarize_spending(expenses, budget),
        currency=settings.currency,
        settled_members=[member for member, value in balances.items() if is_zero(value, epsilon(minor_units))],
    )
    log.info("trip_summary.built", trip_id=str(trip_id), expenses=len(expenses), transfers=len(transfers))
    return summary
