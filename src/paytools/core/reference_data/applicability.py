"""Interval matching of dated reference data entries."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, timedelta
from typing import TypeVar

from paytools.core.errors import NoApplicableEntry
from paytools.core.model import FiscalYear, PayFrequency

from .schema import ApplicableBetween

EntryT = TypeVar("EntryT", bound=ApplicableBetween)


def as_of_date(fiscal_year: FiscalYear, frequency: PayFrequency, period: int) -> date:
    """Return the date used to pick reference data for a tax period.

    Lookups use the last day of the period, so a mid-year change only takes
    effect for periods that end on or after the change date.
    """

    return fiscal_year.last_day_of_period(frequency, period)


def resolve(entries: Sequence[EntryT], as_of: date) -> EntryT:
    """Return the single entry whose window covers ``as_of``."""

    match: EntryT | None = None
    for entry in entries:
        if not entry.applies_on(as_of):
            continue
        if match is not None:
            raise NoApplicableEntry(
                f"Multiple {type(entry).__name__} entries cover {as_of.isoformat()}"
            )
        match = entry

    if match is None:
        kind = type(entries[0]).__name__ if entries else "reference data"
        raise NoApplicableEntry(
            f"Unable to find {kind} entry applicable on {as_of.isoformat()}"
        )
    return match


def find_applicable_entry(
    entries: Sequence[EntryT],
    fiscal_year: FiscalYear,
    frequency: PayFrequency,
    period: int,
) -> EntryT:
    """Resolve the entry in force at the end of the given tax period."""

    return resolve(entries, as_of_date(fiscal_year, frequency, period))


def find_coverage_issues(
    entries: Sequence[ApplicableBetween], fiscal_year: FiscalYear
) -> list[str]:
    """Describe gaps, overlaps and out-of-year windows in ``entries``.

    An empty list means the windows tile the fiscal year exactly.
    """

    if not entries:
        return ["no entries defined"]

    issues: list[str] = []
    ordered = sorted(entries, key=lambda entry: entry.applicable_from)

    for entry in ordered:
        if entry.applicable_from < fiscal_year.start or entry.applicable_till > fiscal_year.end:
            issues.append(
                f"window {entry.applicable_from} - {entry.applicable_till} falls outside "
                f"tax year {fiscal_year.start} - {fiscal_year.end}"
            )

    if ordered[0].applicable_from > fiscal_year.start:
        issues.append(f"no entry covers {fiscal_year.start} - {ordered[0].applicable_from - timedelta(days=1)}")

    # Compare each window with the one reaching furthest so far, so a window
    # nested inside a longer one is reported as an overlap and not a gap.
    furthest = ordered[0]
    for current in ordered[1:]:
        expected_start = furthest.applicable_till + timedelta(days=1)
        if current.applicable_from < expected_start:
            issues.append(
                f"windows starting {furthest.applicable_from} and {current.applicable_from} overlap"
            )
        elif current.applicable_from > expected_start:
            issues.append(
                f"no entry covers {expected_start} - {current.applicable_from - timedelta(days=1)}"
            )
        if current.applicable_till > furthest.applicable_till:
            furthest = current

    if furthest.applicable_till < fiscal_year.end:
        issues.append(
            f"no entry covers {furthest.applicable_till + timedelta(days=1)} - {fiscal_year.end}"
        )

    return issues


__all__ = ["as_of_date", "find_applicable_entry", "find_coverage_issues", "resolve"]
