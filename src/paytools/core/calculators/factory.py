"""Build calculators bound to the reference data in force on a pay date."""

from __future__ import annotations

import logging

from paytools.core.errors import UnsupportedJurisdiction
from paytools.core.income_tax import TaxCalculator, build_tax_calculator
from paytools.core.model import Jurisdiction, PayDate
from paytools.core.national_insurance import (
    NiCalculator,
    NiRoundingMode,
    NiThresholdSet,
    merge_category_rates,
)
from paytools.core.reference_data.store import TemporalReferenceStore
from paytools.core.settings import default_ni_rounding_mode

_LOGGER = logging.getLogger(__name__)


class CalculatorFactory:
    """Resolve a pay date against a store and hand back stateless calculators.

    The factory keeps no state of its own beyond the store, so it can be
    shared freely between threads once the store has been populated.
    """

    def __init__(self, store: TemporalReferenceStore) -> None:
        self._store = store

    @property
    def store(self) -> TemporalReferenceStore:
        return self._store

    def get_calculator(self, jurisdiction: Jurisdiction, pay_date: PayDate) -> TaxCalculator:
        """Return an income tax calculator for ``jurisdiction`` on ``pay_date``."""

        fiscal_year = pay_date.fiscal_year
        if not fiscal_year.is_valid_for_year(jurisdiction):
            raise UnsupportedJurisdiction(
                f"Jurisdiction '{jurisdiction.label}' is not valid for tax year {fiscal_year}"
            )

        band_set = self._store.get_income_tax_entry(
            fiscal_year, pay_date.frequency, pay_date.tax_period
        )
        bands = band_set.bands_for(jurisdiction)
        if bands is None:
            raise UnsupportedJurisdiction(
                f"No tax bands for '{jurisdiction.label}' in tax year {fiscal_year}"
            )

        _LOGGER.debug(
            "Resolved income tax bands %s - %s for %s period %s (%s)",
            band_set.applicable_from,
            band_set.applicable_till,
            fiscal_year,
            pay_date.tax_period,
            jurisdiction.label,
        )
        return build_tax_calculator(
            fiscal_year, jurisdiction, bands, pay_date.frequency, pay_date.tax_period
        )

    def get_ni_calculator(
        self, pay_date: PayDate, rounding: NiRoundingMode | None = None
    ) -> NiCalculator:
        """Return an NI calculator for ``pay_date``."""

        fiscal_year = pay_date.fiscal_year
        entry = self._store.get_ni_entry(fiscal_year, pay_date.frequency, pay_date.tax_period)

        _LOGGER.debug(
            "Resolved NI entry %s - %s for %s period %s",
            entry.applicable_from,
            entry.applicable_till,
            fiscal_year,
            pay_date.tax_period,
        )
        return NiCalculator(
            fiscal_year=fiscal_year,
            frequency=pay_date.frequency,
            tax_period=pay_date.tax_period,
            rates=merge_category_rates(entry.employer_rates, entry.employee_rates),
            thresholds=NiThresholdSet.from_entries(entry.ni_thresholds),
            rounding=rounding or default_ni_rounding_mode(),
        )


__all__ = ["CalculatorFactory"]
