"""Decimal helpers for monetary amounts."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from decimal import ROUND_DOWN, Decimal, localcontext
from typing import Final, Union

from paytools.core.errors import NegativeInput

PENNY: Final = Decimal("0.01")

Amount = Union[Decimal, int, str, float]


def as_decimal(value: Amount) -> Decimal:
    """Convert ``value`` to ``Decimal`` without picking up binary float noise."""

    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


@contextmanager
def precision_for(value: Decimal, places: int = 3) -> Iterator[None]:
    """Widen the decimal context so ``value`` quantizes to ``places`` decimals.

    The default 28 digit context raises ``InvalidOperation`` for large amounts.
    """

    with localcontext() as context:
        context.prec = max(context.prec, value.adjusted() + places + 2)
        yield


def require_non_negative(value: Decimal, what: str) -> Decimal:
    if value < 0:
        raise NegativeInput(f"{what} must be non-negative (got {value})")
    return value


def round_down_to_pence(value: Decimal) -> Decimal:
    """Truncate toward zero at two decimal places."""

    with precision_for(value):
        return value.quantize(PENNY, rounding=ROUND_DOWN)


__all__ = [
    "Amount",
    "PENNY",
    "as_decimal",
    "precision_for",
    "require_non_negative",
    "round_down_to_pence",
]
