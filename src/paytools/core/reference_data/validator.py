"""Utilities for validating reference data sets and surfacing issues."""

from __future__ import annotations

import argparse
from collections import Counter
from collections.abc import Iterable, Sequence
from decimal import Decimal

from paytools.core.errors import ReferenceDataInvalid
from paytools.core.model import NiCategory, NiThresholdType
from paytools.core.version import get_project_version

from .integrity import find_integrity_issues
from .loader import available_years, load_reference_data_set
from .schema import (
    IncomeTaxBandSet,
    NiEmployeeRatesEntry,
    NiEmployerRatesEntry,
    NiReferenceDataEntry,
    TaxYearReferenceDataSet,
)

_THRESHOLD_ORDER = (NiThresholdType.LEL, NiThresholdType.PT, NiThresholdType.UEL)


def _format_scope(scope: str, message: str) -> str:
    return f"{scope}: {message}"


def _is_rate(value: Decimal) -> bool:
    return 0 <= value <= 1


def _validate_income_tax(band_sets: Sequence[IncomeTaxBandSet]) -> list[str]:
    errors: list[str] = []
    for band_set in band_sets:
        for entry in band_set.tax_entries:
            scope = f"income_tax[{band_set.applicable_from}].{entry.applicable_countries.label}"
            for band in entry.bands:
                if not _is_rate(band.rate):
                    errors.append(
                        _format_scope(scope, f"band rate {band.rate} must be between 0 and 1")
                    )
    return errors


def _labels(categories: Iterable[NiCategory]) -> str:
    return "".join(category.value for category in categories)


def _duplicate_categories(
    entries: Iterable[NiEmployerRatesEntry] | Iterable[NiEmployeeRatesEntry],
) -> list[str]:
    counts = Counter(category.value for entry in entries for category in entry.ni_categories)
    return sorted(category for category, count in counts.items() if count > 1)


def _validate_ni_entry(entry: NiReferenceDataEntry) -> list[str]:
    errors: list[str] = []
    scope = f"national_insurance[{entry.applicable_from}]"

    for employer in entry.employer_rates:
        values = (employer.lel_to_st, employer.st_to_fust, employer.fust_to_uel, employer.above_uel)
        if not all(_is_rate(value) for value in values):
            errors.append(
                _format_scope(
                    f"{scope}.employer_rates",
                    f"rates for '{_labels(employer.ni_categories)}' must be between 0 and 1",
                )
            )

    for employee in entry.employee_rates:
        values = (employee.lel_to_pt, employee.pt_to_uel, employee.above_uel)
        if not all(_is_rate(value) for value in values):
            errors.append(
                _format_scope(
                    f"{scope}.employee_rates",
                    f"rates for '{_labels(employee.ni_categories)}' must be between 0 and 1",
                )
            )

    for side, duplicates in (
        ("employer_rates", _duplicate_categories(entry.employer_rates)),
        ("employee_rates", _duplicate_categories(entry.employee_rates)),
    ):
        if duplicates:
            errors.append(
                _format_scope(
                    f"{scope}.{side}",
                    f"categories listed more than once: {', '.join(duplicates)}",
                )
            )

    employer_categories = {c for rates in entry.employer_rates for c in rates.ni_categories}
    employee_categories = {c for rates in entry.employee_rates for c in rates.ni_categories}
    for category in sorted(employer_categories ^ employee_categories, key=lambda c: c.value):
        side = "employee" if category in employer_categories else "employer"
        errors.append(
            _format_scope(scope, f"category {category.value} has no {side} rates")
        )

    thresholds = {threshold.threshold_type: threshold for threshold in entry.ni_thresholds}
    for attribute in ("per_week", "per_month", "per_year"):
        ordered = [
            (kind, getattr(thresholds[kind], attribute))
            for kind in _THRESHOLD_ORDER
            if kind in thresholds
        ]
        for (lower_kind, lower), (upper_kind, upper) in zip(ordered, ordered[1:]):
            if lower > upper:
                errors.append(
                    _format_scope(
                        scope,
                        f"{lower_kind.value} {attribute} ({lower}) exceeds "
                        f"{upper_kind.value} ({upper})",
                    )
                )

    return errors


def validate_reference_data_set(data_set: TaxYearReferenceDataSet) -> list[str]:
    """Return a list of validation issues for the provided data set."""

    errors: list[str] = []

    if not data_set.income_tax:
        errors.append(_format_scope("income_tax", "section is missing or empty"))
    if not data_set.national_insurance:
        errors.append(_format_scope("national_insurance", "section is missing or empty"))

    errors.extend(find_integrity_issues(data_set))
    errors.extend(_validate_income_tax(data_set.income_tax or ()))
    for entry in data_set.national_insurance or ():
        errors.extend(_validate_ni_entry(entry))

    return errors


def validate_all_years(years: Sequence[int] | None = None) -> dict[int, list[str]]:
    """Validate all configured years and return issues keyed by year."""

    targets = years or available_years()
    results: dict[int, list[str]] = {}

    for year in targets:
        data_set = load_reference_data_set(year)
        results[int(year)] = validate_reference_data_set(data_set)

    return results


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate bundled HMRC reference data and report issues helpful to contributors."
    )
    parser.add_argument(
        "years",
        nargs="*",
        type=int,
        help="Specific tax years, by ending year, to validate (defaults to all configured years)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {get_project_version()}",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for running validations from the command line."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)
    years = args.years or available_years()

    if not years:
        parser.print_help()
        return 1

    exit_code = 0

    for year in years:
        try:
            data_set = load_reference_data_set(year)
        except (FileNotFoundError, ReferenceDataInvalid) as error:
            print(f"[{year}] failed to load reference data: {error}")
            exit_code = 1
            continue

        issues = validate_reference_data_set(data_set)
        if issues:
            exit_code = 1
            print(f"[{year}] {len(issues)} issue(s) detected:")
            for issue in issues:
                print(f"  - {issue}")
        else:
            print(f"[{year}] OK")

    return exit_code


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
