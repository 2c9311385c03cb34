"""Fixed-point money helpers shared by the split, balance and settlement code."""

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_EVEN
from typing import Union

MoneyLike = Union[Decimal, int, str, float]

DEFAULT_MINOR_UNITS = 2


def quantum(minor_units: int = DEFAULT_MINOR_UNITS) -> Decimal:
    """Smallest representable unit, e.g. ``Decimal("0.01")`` for two digits."""
    return Decimal(1).scaleb(-minor_units)


def epsilon(minor_units: int = DEFAULT_MINOR_UNITS) -> Decimal:
    """Half a quantum. Anything strictly below it counts as zero."""
    return quantum(minor_units) / 2


def as_decimal(value: MoneyLike) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        # str() keeps 0.1 as 0.1 instead of its binary expansion
        return Decimal(str(value))
    return Decimal(value)


def to_money(value: MoneyLike, minor_units: int = DEFAULT_MINOR_UNITS) -> Decimal:
    return as_decimal(value).quantize(quantum(minor_units), rounding=ROUND_HALF_EVEN)


def is_zero(value: Decimal, eps: Decimal) -> bool:
    return abs(value) <= eps
