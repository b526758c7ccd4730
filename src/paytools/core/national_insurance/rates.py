"""Per-category NI rates merged from the employer and employee tables."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from decimal import Decimal
from types import MappingProxyType

from paytools.core.model import NiCategory
from paytools.core.reference_data.schema import NiEmployeeRatesEntry, NiEmployerRatesEntry

_ZERO = Decimal(0)


@dataclass(frozen=True)
class NiCategoryRates:
    """Employer and employee rates for one NI category.

    Either side may be missing from the published tables, in which case its
    rates stay at zero and the matching ``has_*`` flag is ``False``.
    """

    category: NiCategory
    employer_rate_lel_to_st: Decimal = _ZERO
    employer_rate_st_to_fust: Decimal = _ZERO
    employer_rate_fust_to_uel: Decimal = _ZERO
    employer_rate_above_uel: Decimal = _ZERO
    employee_rate_to_pt: Decimal = _ZERO
    employee_rate_pt_to_uel: Decimal = _ZERO
    employee_rate_above_uel: Decimal = _ZERO
    has_employer_rates: bool = False
    has_employee_rates: bool = False


def merge_category_rates(
    employer_entries: Iterable[NiEmployerRatesEntry],
    employee_entries: Iterable[NiEmployeeRatesEntry],
) -> Mapping[NiCategory, NiCategoryRates]:
    """Combine both rate tables into one read-only record per category.

    The first entry on each side that lists a category wins; later entries
    naming the same category are ignored.
    """

    merged: dict[NiCategory, NiCategoryRates] = {}

    for employer in employer_entries:
        for category in employer.ni_categories:
            current = merged.get(category) or NiCategoryRates(category=category)
            if current.has_employer_rates:
                continue
            merged[category] = replace(
                current,
                employer_rate_lel_to_st=employer.lel_to_st,
                employer_rate_st_to_fust=employer.st_to_fust,
                employer_rate_fust_to_uel=employer.fust_to_uel,
                employer_rate_above_uel=employer.above_uel,
                has_employer_rates=True,
            )

    for employee in employee_entries:
        for category in employee.ni_categories:
            current = merged.get(category) or NiCategoryRates(category=category)
            if current.has_employee_rates:
                continue
            merged[category] = replace(
                current,
                employee_rate_to_pt=employee.lel_to_pt,
                employee_rate_pt_to_uel=employee.pt_to_uel,
                employee_rate_above_uel=employee.above_uel,
                has_employee_rates=True,
            )

    return MappingProxyType(merged)


__all__ = ["NiCategoryRates", "merge_category_rates"]
