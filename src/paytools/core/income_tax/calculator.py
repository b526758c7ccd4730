"""Stateless PAYE income tax calculator bound to one jurisdiction and pay date."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from paytools.core.amounts import Amount, as_decimal, round_down_to_pence
from paytools.core.model import FiscalYear, Jurisdiction, PayFrequency
from paytools.core.reference_data.schema import TaxBand

from .bands import BandSlice, compute_tax_breakdown, scale_bands


@dataclass(frozen=True)
class TaxCalculationResult:
    """Outcome of a single income tax calculation."""

    taxable_pay: Decimal
    tax_due: Decimal
    cumulative: bool
    slices: tuple[BandSlice, ...]

    @property
    def unrounded_tax(self) -> Decimal:
        return sum((item.tax for item in self.slices), Decimal(0))


@dataclass(frozen=True)
class TaxCalculator:
    """Applies one year's annual bands to pay for a given tax period.

    On the cumulative basis every bounded band edge is pro-rated to
    ``tax_period / periods_per_year`` of its annual value and the calculator
    expects taxable pay to date; on the non-cumulative basis each period gets
    ``1 / periods_per_year`` of the annual bands.
    """

    fiscal_year: FiscalYear
    jurisdiction: Jurisdiction
    annual_bands: tuple[TaxBand, ...]
    frequency: PayFrequency
    tax_period: int

    def bands_for_period(self, cumulative: bool = True) -> tuple[TaxBand, ...]:
        periods = self.frequency.periods_per_year
        # Week 53 style periods fall beyond the nominal count and are taxed
        # on a non-cumulative basis.
        if cumulative and self.tax_period <= periods:
            return scale_bands(self.annual_bands, self.tax_period, periods)
        return scale_bands(self.annual_bands, 1, periods)

    def calculate_tax_due(self, taxable_pay: Amount, cumulative: bool = True) -> TaxCalculationResult:
        """Return tax due on ``taxable_pay``, rounded down to whole pence."""

        amount = as_decimal(taxable_pay)
        slices = tuple(compute_tax_breakdown(self.bands_for_period(cumulative), amount))
        total = sum((item.tax for item in slices), Decimal(0))
        return TaxCalculationResult(
            taxable_pay=amount,
            tax_due=round_down_to_pence(total),
            cumulative=cumulative and self.tax_period <= self.frequency.periods_per_year,
            slices=slices,
        )


def build_tax_calculator(
    fiscal_year: FiscalYear,
    jurisdiction: Jurisdiction,
    bands: Sequence[TaxBand],
    frequency: PayFrequency,
    tax_period: int,
) -> TaxCalculator:
    return TaxCalculator(
        fiscal_year=fiscal_year,
        jurisdiction=jurisdiction,
        annual_bands=tuple(bands),
        frequency=frequency,
        tax_period=tax_period,
    )


__all__ = ["TaxCalculationResult", "TaxCalculator", "build_tax_calculator"]
