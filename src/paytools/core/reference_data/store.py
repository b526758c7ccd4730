"""In-memory store of per-tax-year reference data.

The store is populated once (possibly from several loader threads at the same
time) and then read concurrently by calculator factories. Insertion is
first-write-wins: a second data set for the same tax year is refused rather
than overwriting the first. Every attempt is recorded as an :class:`AddResult`
so that callers can render a health summary for diagnostics.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

from paytools.core.errors import ReferenceDataInvalid, ReferenceDataMissing
from paytools.core.model import FiscalYear, Jurisdiction, NiCategory, PayFrequency
from paytools.core.national_insurance import NiCategoryRates, NiThresholdSet, merge_category_rates

from .applicability import find_applicable_entry
from .integrity import find_integrity_issues
from .schema import IncomeTaxBandSet, NiReferenceDataEntry, TaxBand, TaxYearReferenceDataSet

_LOGGER = logging.getLogger(__name__)

NO_TAX_YEARS_HEALTH = "No tax years added"


class AddOutcome(Enum):
    ADDED = "added"
    ALREADY_PRESENT = "already_present"
    REJECTED = "rejected"


@dataclass(frozen=True)
class AddResult:
    """Outcome of one attempt to register a tax year's reference data."""

    key: str
    outcome: AddOutcome
    tax_year_ending: int | None = None
    reason: str | None = None

    def __bool__(self) -> bool:
        return self.outcome is AddOutcome.ADDED

    @property
    def health_token(self) -> str:
        if self.outcome is AddOutcome.ADDED:
            return f"{self.tax_year_ending}:OK"
        if self.tax_year_ending is None:
            return f"Failed to load from '{self.key}' with message: {self.reason}"
        return f"{self.tax_year_ending}:{self.reason}"


class TemporalReferenceStore:
    """Thread-safe, first-write-wins registry of reference data sets."""

    def __init__(self, validate: bool = True) -> None:
        self._validate = validate
        self._data_sets: dict[int, TaxYearReferenceDataSet] = {}
        self._results: list[AddResult] = []
        self._lock = threading.Lock()

    def try_add(
        self, data_set: TaxYearReferenceDataSet, key: str | None = None
    ) -> AddResult:
        """Register ``data_set`` unless its tax year is already present.

        Data sets that fail the integrity checks are rejected and recorded.
        """

        year = data_set.applicable_tax_year_ending
        source = key or str(year)

        issues = find_integrity_issues(data_set) if self._validate else []

        with self._lock:
            if issues:
                result = AddResult(
                    key=source,
                    outcome=AddOutcome.REJECTED,
                    tax_year_ending=year,
                    reason="; ".join(issues),
                )
            elif year in self._data_sets:
                result = AddResult(
                    key=source,
                    outcome=AddOutcome.ALREADY_PRESENT,
                    tax_year_ending=year,
                    reason=f"Failed to load data using key '{source}'",
                )
            else:
                self._data_sets[year] = data_set
                result = AddResult(key=source, outcome=AddOutcome.ADDED, tax_year_ending=year)
            self._results.append(result)

        if result:
            _LOGGER.info("Registered reference data for tax year ending %s from %s", year, source)
        else:
            _LOGGER.warning(
                "Reference data for tax year ending %s from %s not registered: %s",
                year,
                source,
                result.reason,
            )
        return result

    def record_failure(self, key: str, reason: str) -> AddResult:
        """Record a data set that could not be loaded at all."""

        result = AddResult(key=key, outcome=AddOutcome.REJECTED, reason=reason)
        with self._lock:
            self._results.append(result)
        _LOGGER.warning("Failed to load reference data from %s: %s", key, reason)
        return result

    @property
    def results(self) -> tuple[AddResult, ...]:
        with self._lock:
            return tuple(self._results)

    @property
    def health(self) -> str:
        """Human-readable summary of every population attempt."""

        results = self.results
        if not results:
            return NO_TAX_YEARS_HEALTH
        return "|".join(result.health_token for result in results)

    @property
    def tax_years(self) -> tuple[int, ...]:
        with self._lock:
            return tuple(sorted(self._data_sets))

    def get(self, tax_year: int | FiscalYear) -> TaxYearReferenceDataSet:
        """Return the complete data set registered for ``tax_year``."""

        ending = tax_year.ending if isinstance(tax_year, FiscalYear) else int(tax_year)
        data_set = self._data_sets.get(ending)
        if data_set is None:
            raise ReferenceDataMissing(f"No reference data found for tax year ending {ending}")
        if not data_set.income_tax or not data_set.national_insurance:
            raise ReferenceDataInvalid(
                f"Reference data for tax year ending {ending} is invalid or incomplete"
            )
        return data_set

    def get_income_tax_entry(
        self, fiscal_year: FiscalYear, frequency: PayFrequency, tax_period: int
    ) -> IncomeTaxBandSet:
        data_set = self.get(fiscal_year)
        return find_applicable_entry(data_set.income_tax or (), fiscal_year, frequency, tax_period)

    def get_ni_entry(
        self, fiscal_year: FiscalYear, frequency: PayFrequency, tax_period: int
    ) -> NiReferenceDataEntry:
        data_set = self.get(fiscal_year)
        return find_applicable_entry(
            data_set.national_insurance or (), fiscal_year, frequency, tax_period
        )

    def get_tax_bands_for_tax_year_and_period(
        self, fiscal_year: FiscalYear, frequency: PayFrequency, tax_period: int
    ) -> Mapping[Jurisdiction, Sequence[TaxBand]]:
        """Return the annual tax bands in force for the period, keyed by grouping."""

        band_set = self.get_income_tax_entry(fiscal_year, frequency, tax_period)
        return MappingProxyType(
            {entry.applicable_countries: tuple(entry.bands) for entry in band_set.tax_entries}
        )

    def get_ni_rates_for_tax_year_and_period(
        self, fiscal_year: FiscalYear, frequency: PayFrequency, tax_period: int
    ) -> Mapping[NiCategory, NiCategoryRates]:
        entry = self.get_ni_entry(fiscal_year, frequency, tax_period)
        return merge_category_rates(entry.employer_rates, entry.employee_rates)

    def get_ni_thresholds_for_tax_year_and_period(
        self, fiscal_year: FiscalYear, frequency: PayFrequency, tax_period: int
    ) -> NiThresholdSet:
        entry = self.get_ni_entry(fiscal_year, frequency, tax_period)
        return NiThresholdSet.from_entries(entry.ni_thresholds)


__all__ = [
    "AddOutcome",
    "AddResult",
    "NO_TAX_YEARS_HEALTH",
    "TemporalReferenceStore",
]
