"""Pay frequencies supported for PAYE tax period resolution."""

from __future__ import annotations

from enum import Enum


class PayFrequency(Enum):
    """How often an employee is paid."""

    WEEKLY = "weekly"
    TWO_WEEKLY = "two_weekly"
    FOUR_WEEKLY = "four_weekly"
    MONTHLY = "monthly"
    ANNUALLY = "annually"

    @property
    def periods_per_year(self) -> int:
        """Nominal number of pay periods in a tax year."""

        return _PERIODS_PER_YEAR[self]

    @property
    def max_periods(self) -> int:
        """Highest period index a pay date can fall into (e.g. week 53)."""

        return _MAX_PERIODS[self]

    @property
    def period_length_days(self) -> int | None:
        """Length in days for day-count frequencies; ``None`` otherwise."""

        return _PERIOD_LENGTH_DAYS.get(self)


_PERIODS_PER_YEAR = {
    PayFrequency.WEEKLY: 52,
    PayFrequency.TWO_WEEKLY: 26,
    PayFrequency.FOUR_WEEKLY: 13,
    PayFrequency.MONTHLY: 12,
    PayFrequency.ANNUALLY: 1,
}

_MAX_PERIODS = {
    PayFrequency.WEEKLY: 53,
    PayFrequency.TWO_WEEKLY: 27,
    PayFrequency.FOUR_WEEKLY: 14,
    PayFrequency.MONTHLY: 12,
    PayFrequency.ANNUALLY: 1,
}

_PERIOD_LENGTH_DAYS = {
    PayFrequency.WEEKLY: 7,
    PayFrequency.TWO_WEEKLY: 14,
    PayFrequency.FOUR_WEEKLY: 28,
}


__all__ = ["PayFrequency"]
