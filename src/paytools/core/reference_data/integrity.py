"""Structural checks run before a data set is accepted into the store."""

from __future__ import annotations

from paytools.core.errors import DateOutOfRange
from paytools.core.model import FiscalYear, NiThresholdType

from .applicability import find_coverage_issues
from .schema import TaxYearReferenceDataSet

REQUIRED_NI_THRESHOLDS = (
    NiThresholdType.LEL,
    NiThresholdType.PT,
    NiThresholdType.ST,
    NiThresholdType.UEL,
)


def find_integrity_issues(data_set: TaxYearReferenceDataSet) -> list[str]:
    """Return problems with the sections present in ``data_set``.

    Missing sections are not reported here; the store accepts incomplete data
    sets and reports them when they are looked up.
    """

    try:
        fiscal_year = FiscalYear(data_set.applicable_tax_year_ending)
    except DateOutOfRange as error:
        return [str(error)]

    issues: list[str] = []

    if data_set.income_tax is not None:
        issues.extend(
            f"income_tax: {issue}"
            for issue in find_coverage_issues(data_set.income_tax, fiscal_year)
        )
        for band_set in data_set.income_tax:
            scope = f"income_tax[{band_set.applicable_from}]"
            for jurisdiction in fiscal_year.jurisdictions:
                if band_set.bands_for(jurisdiction) is None:
                    issues.append(f"{scope}: no bands for '{jurisdiction.label}'")
            for jurisdiction in band_set.jurisdictions:
                if not fiscal_year.is_valid_for_year(jurisdiction):
                    issues.append(
                        f"{scope}: '{jurisdiction.label}' is not a valid grouping "
                        f"for tax year {fiscal_year}"
                    )

    if data_set.national_insurance is not None:
        issues.extend(
            f"national_insurance: {issue}"
            for issue in find_coverage_issues(data_set.national_insurance, fiscal_year)
        )
        for entry in data_set.national_insurance:
            defined = {threshold.threshold_type for threshold in entry.ni_thresholds}
            missing = [kind.value for kind in REQUIRED_NI_THRESHOLDS if kind not in defined]
            if missing:
                issues.append(
                    f"national_insurance[{entry.applicable_from}]: missing thresholds "
                    f"{', '.join(missing)}"
                )

    return issues


__all__ = ["REQUIRED_NI_THRESHOLDS", "find_integrity_issues"]
