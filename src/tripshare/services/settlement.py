"""Turns net balances into a list of point-to-point payments.

The planner repeatedly pairs the largest creditor with the largest debtor and
moves the smaller of the two amounts. This greedy matching needs at most
``N - 1`` transfers for ``N`` unsettled members and is usually close to the
minimum, but it is not guaranteed to be optimal: finding the true minimum is
a subset-partition problem and is not attempted here.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Mapping

from tripshare.logging import get_logger
from tripshare.models import Member, Transfer
from tripshare.money import DEFAULT_MINOR_UNITS, MoneyLike, as_decimal, epsilon, to_money

log = get_logger(__name__)


class SettlementInvariantError(ValueError):
    def __init__(self, total: Decimal, tolerance: Decimal) -> None:
        super().__init__(
            f"Balances sum to {total}, not zero (tolerance {tolerance}); "
            "expense splits probably do not add up to their amounts."
        )
        self.total = total
        self.tolerance = tolerance


@dataclass(slots=True)
class _Position:
    member: Member
    order: int
    remaining: Decimal


def assert_zero_sum(balances: Mapping[Member, MoneyLike], minor_units: int = DEFAULT_MINOR_UNITS) -> Decimal:
    tolerance = epsilon(minor_units)
    total = sum((as_decimal(value) for value in balances.values()), start=Decimal(0))
    if abs(total) > tolerance:
        log.error("settlement.invariant_violated", total=str(total), tolerance=str(tolerance))
        raise SettlementInvariantError(total, tolerance)
    return total


def _largest(positions: list[_Position]) -> _Position:
    # ties go to whoever came first in the balance mapping
    return max(positions, key=lambda position: (position.remaining, -position.order))


def plan_settlement(
    balances: Mapping[Member, MoneyLike],
    minor_units: int = DEFAULT_MINOR_UNITS,
) -> list[Transfer]:
    # noise below a minor unit is rounded away so it cannot survive matching
    quantized = {member: to_money(value, minor_units) for member, value in balances.items()}
    assert_zero_sum(quantized, minor_units)
    eps = epsilon(minor_units)

    creditors: list[_Position] = []
    debtors: list[_Position] = []
    for order, (member, value) in enumerate(quantized.items()):
        if value > eps:
            creditors.append(_Position(member, order, value))
        elif value < -eps:
            debtors.append(_Position(member, order, -value))

    transfers: list[Transfer] = []
    while creditors and debtors:
        creditor = _largest(creditors)
        debtor = _largest(debtors)

        amount = min(creditor.remaining, debtor.remaining)
        transfers.append(Transfer(from_member=debtor.member, to_member=creditor.member, amount=amount))

        creditor.remaining -= amount
        debtor.remaining -= amount
        if creditor.remaining <= eps:
            creditors.remove(creditor)
        if debtor.remaining <= eps:
            debtors.remove(debtor)

    log.debug("settlement.planned", members=len(balances), transfers=len(transfers))
    return transfers


def apply_transfers(
    balances: Mapping[Member, MoneyLike],
    transfers: Iterable[Transfer],
) -> dict[Member, Decimal]:
    """Balances after every transfer has been paid."""
    result = {member: as_decimal(value) for member, value in balances.items()}
    for transfer in transfers:
        result[transfer.from_member] = result.get(transfer.from_member, Decimal(0)) + transfer.amount
        result[transfer.to_member] = result.get(transfer.to_member, Decimal(0)) - transfer.amount
    return result
