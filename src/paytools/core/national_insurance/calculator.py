"""Marginal band calculation of employee and employer NI contributions.

Earnings below the lower earnings limit attract no contributions at all. From
the LEL upwards the employee walk runs LEL → PT → UEL → above, and the
employer walk runs LEL → ST → FUST → upper → above, where ``upper`` is the UEL
or, for categories with an upper secondary threshold (M, Z, H, V), that
threshold instead.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from decimal import Decimal

from paytools.core.amounts import Amount, as_decimal, require_non_negative
from paytools.core.errors import UnsupportedNiCategory
from paytools.core.model import (
    FiscalYear,
    NiCategory,
    NiThresholdType,
    PayFrequency,
    employer_upper_threshold,
)
from paytools.core.settings import default_ni_rounding_mode

from .rates import NiCategoryRates
from .rounding import NiRoundingMode, ni_round
from .thresholds import NiThresholdSet

_LOGGER = logging.getLogger(__name__)

_ZERO = Decimal(0)


@dataclass(frozen=True)
class NiBandContribution:
    """Earnings falling between two thresholds and the NI charged on them."""

    lower: NiThresholdType
    upper: NiThresholdType | None
    earnings: Decimal
    rate: Decimal
    contribution: Decimal


@dataclass(frozen=True)
class NiCalculationResult:
    """Employee and employer NI for one payment."""

    category: NiCategory
    gross_pay: Decimal
    rounding: NiRoundingMode
    employee_contribution: Decimal = _ZERO
    employer_contribution: Decimal = _ZERO
    employee_bands: tuple[NiBandContribution, ...] = ()
    employer_bands: tuple[NiBandContribution, ...] = ()

    @property
    def earnings_below_lel(self) -> bool:
        return not self.employee_bands and not self.employer_bands


_Band = tuple[NiThresholdType, NiThresholdType | None, Decimal, Decimal | None, Decimal]


def _walk(
    pay: Decimal, bands: Sequence[_Band], rounding: NiRoundingMode
) -> tuple[Decimal, tuple[NiBandContribution, ...]]:
    contributions: list[NiBandContribution] = []
    for lower_type, upper_type, lower, upper, rate in bands:
        if upper is not None and upper <= lower:
            continue
        top = pay if upper is None else min(pay, upper)
        earnings = top - lower if top > lower else _ZERO
        raw = earnings * rate
        contribution = ni_round(raw) if rounding is NiRoundingMode.PER_BAND else raw
        contributions.append(
            NiBandContribution(
                lower=lower_type,
                upper=upper_type,
                earnings=earnings,
                rate=rate,
                contribution=contribution,
            )
        )

    total = sum((item.contribution for item in contributions), _ZERO)
    if rounding is NiRoundingMode.TOTAL:
        total = ni_round(total)
    return total, tuple(contributions)


def compute_ni(
    rates: NiCategoryRates,
    thresholds: NiThresholdSet,
    pay: Amount,
    frequency: PayFrequency,
    rounding: NiRoundingMode | None = None,
) -> NiCalculationResult:
    """Calculate NI on ``pay`` for one period of ``frequency``."""

    gross = require_non_negative(as_decimal(pay), "NI-able pay")
    mode = rounding or default_ni_rounding_mode()

    def threshold(kind: NiThresholdType) -> Decimal:
        return thresholds.get_threshold(kind, frequency)

    lel = threshold(NiThresholdType.LEL)
    if gross < lel:
        return NiCalculationResult(category=rates.category, gross_pay=gross, rounding=mode)

    pt = threshold(NiThresholdType.PT)
    st = threshold(NiThresholdType.ST)
    uel = threshold(NiThresholdType.UEL)

    upper_type = employer_upper_threshold(rates.category)
    if upper_type not in thresholds:
        upper_type = NiThresholdType.UEL
    upper = threshold(upper_type)

    fust = threshold(NiThresholdType.FUST) if NiThresholdType.FUST in thresholds else st
    fust = min(max(fust, st), upper)

    employee_total, employee_bands = _walk(
        gross,
        (
            (NiThresholdType.LEL, NiThresholdType.PT, lel, pt, rates.employee_rate_to_pt),
            (NiThresholdType.PT, NiThresholdType.UEL, pt, uel, rates.employee_rate_pt_to_uel),
            (NiThresholdType.UEL, None, uel, None, rates.employee_rate_above_uel),
        ),
        mode,
    )
    employer_total, employer_bands = _walk(
        gross,
        (
            (NiThresholdType.LEL, NiThresholdType.ST, lel, st, rates.employer_rate_lel_to_st),
            (NiThresholdType.ST, NiThresholdType.FUST, st, fust, rates.employer_rate_st_to_fust),
            (NiThresholdType.FUST, upper_type, fust, upper, rates.employer_rate_fust_to_uel),
            (upper_type, None, upper, None, rates.employer_rate_above_uel),
        ),
        mode,
    )

    return NiCalculationResult(
        category=rates.category,
        gross_pay=gross,
        rounding=mode,
        employee_contribution=employee_total,
        employer_contribution=employer_total,
        employee_bands=employee_bands,
        employer_bands=employer_bands,
    )


@dataclass(frozen=True)
class NiCalculator:
    """NI calculator closed over the rates and thresholds for one pay date."""

    fiscal_year: FiscalYear
    frequency: PayFrequency
    tax_period: int
    rates: Mapping[NiCategory, NiCategoryRates]
    thresholds: NiThresholdSet
    rounding: NiRoundingMode = field(default_factory=default_ni_rounding_mode)

    def rates_for(self, category: NiCategory) -> NiCategoryRates:
        try:
            return self.rates[category]
        except KeyError as exc:
            raise UnsupportedNiCategory(
                f"No NI rates published for category {category.value} in tax year "
                f"{self.fiscal_year} period {self.tax_period}"
            ) from exc

    def calculate(self, category: NiCategory, pay: Amount) -> NiCalculationResult:
        result = compute_ni(
            self.rates_for(category), self.thresholds, pay, self.frequency, self.rounding
        )
        _LOGGER.debug(
            "NI category %s on %s: employee %s, employer %s",
            category.value,
            result.gross_pay,
            result.employee_contribution,
            result.employer_contribution,
        )
        return result


__all__ = [
    "NiBandContribution",
    "NiCalculationResult",
    "NiCalculator",
    "compute_ni",
]
