"""HMRC-specific rounding of National Insurance contributions."""

from __future__ import annotations

from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Final

from paytools.core.amounts import PENNY, Amount, as_decimal, precision_for, require_non_negative

_TENTH_OF_PENNY: Final = Decimal("0.001")
_HALF_PENNY: Final = Decimal("0.005")


class NiRoundingMode(str, Enum):
    """Where :func:`ni_round` is applied during an NI calculation."""

    PER_BAND = "per_band"
    TOTAL = "total"


def ni_round(value: Amount) -> Decimal:
    """Round an NI amount to whole pence using HMRC's third-decimal rule.

    A third decimal digit of 5 or below rounds down; 6 or above rounds up.
    Digits beyond the third are ignored, so ``10.1259`` rounds to ``10.12``.
    Only non-negative amounts are supported.
    """

    amount = require_non_negative(as_decimal(value), "NI rounding input")

    with precision_for(amount):
        truncated = amount.quantize(PENNY, rounding=ROUND_DOWN)
        fractions_of_pence = amount.quantize(_TENTH_OF_PENNY, rounding=ROUND_DOWN) - truncated

        if fractions_of_pence <= _HALF_PENNY:
            return truncated
        return amount.quantize(PENNY, rounding=ROUND_HALF_UP)


__all__ = ["NiRoundingMode", "ni_round"]
