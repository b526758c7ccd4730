"""UK fiscal (tax) years and the pay-date arithmetic that hangs off them.

A UK tax year runs from 6 April to 5 April and is identified by the calendar
year in which it ends. Besides the start/end dates, a :class:`FiscalYear`
knows which jurisdiction groupings were legal in that year (Wales gained its
own rates from the year ending 5 April 2020) and converts pay dates into tax
periods for each :class:`PayFrequency`.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Final

from paytools.core.errors import DateOutOfRange

from .jurisdiction import Jurisdiction
from .pay_frequency import PayFrequency

MIN_TAX_YEAR_ENDING: Final = 2019
MAX_TAX_YEAR_ENDING: Final = 2027

# Wales was folded into the England/NI regime until the year ending 5 April 2019.
_WELSH_RATES_FROM_YEAR_ENDING: Final = 2020

_DEFAULT_BEFORE_WELSH_RATES: Final = (
    Jurisdiction.England | Jurisdiction.Wales | Jurisdiction.NorthernIreland
)
_DEFAULT_FROM_WELSH_RATES: Final = Jurisdiction.England | Jurisdiction.NorthernIreland

_GROUPINGS_BEFORE_WELSH_RATES: Final = (
    _DEFAULT_BEFORE_WELSH_RATES,
    Jurisdiction.Scotland,
)
_GROUPINGS_FROM_WELSH_RATES: Final = (
    _DEFAULT_FROM_WELSH_RATES,
    Jurisdiction.Wales,
    Jurisdiction.Scotland,
)


@dataclass(frozen=True)
class FiscalYear:
    """A single UK tax year, identified by the year in which it ends."""

    ending: int
    start: date = field(init=False, compare=False)
    end: date = field(init=False, compare=False)

    def __post_init__(self) -> None:
        if not MIN_TAX_YEAR_ENDING <= self.ending <= MAX_TAX_YEAR_ENDING:
            raise DateOutOfRange(
                f"Unsupported tax year ending {self.ending}; supported range is "
                f"{MIN_TAX_YEAR_ENDING} to {MAX_TAX_YEAR_ENDING}"
            )
        object.__setattr__(self, "start", date(self.ending - 1, 4, 6))
        object.__setattr__(self, "end", date(self.ending, 4, 5))

    def __str__(self) -> str:
        return f"{self.ending - 1}/{str(self.ending)[-2:]}"

    @property
    def jurisdictions(self) -> tuple[Jurisdiction, ...]:
        """Jurisdiction groupings that carry their own tax bands this year."""

        if self.ending < _WELSH_RATES_FROM_YEAR_ENDING:
            return _GROUPINGS_BEFORE_WELSH_RATES
        return _GROUPINGS_FROM_WELSH_RATES

    @property
    def default_jurisdiction(self) -> Jurisdiction:
        """Grouping that applies to anyone not in a devolved regime."""

        if self.ending < _WELSH_RATES_FROM_YEAR_ENDING:
            return _DEFAULT_BEFORE_WELSH_RATES
        return _DEFAULT_FROM_WELSH_RATES

    def is_valid_for_year(self, jurisdiction: Jurisdiction) -> bool:
        return jurisdiction in self.jurisdictions

    def contains(self, value: date) -> bool:
        return self.start <= value <= self.end

    def period_of(self, pay_date: date, frequency: PayFrequency) -> int:
        """Return the 1-based tax period that ``pay_date`` falls into.

        Monthly periods start on the 6th, so the 1st to the 5th of a month
        still belong to the previous tax month.
        """

        if not self.contains(pay_date):
            raise DateOutOfRange(
                f"Pay date of {pay_date.isoformat()} is outside this tax year "
                f"{self.start.isoformat()} - {self.end.isoformat()}"
            )

        if frequency is PayFrequency.ANNUALLY:
            return 1

        if frequency is PayFrequency.MONTHLY:
            month_number = pay_date.month + (12 if pay_date.year == self.ending else 0) - 3
            return month_number - (1 if 1 <= pay_date.day <= 5 else 0)

        day_number = (pay_date - self.start).days + 1
        return math.ceil(day_number / frequency.period_length_days)

    def last_day_of_period(self, frequency: PayFrequency, period: int) -> date:
        """Return the final calendar day of ``period`` for ``frequency``."""

        if not 1 <= period <= frequency.max_periods:
            raise DateOutOfRange(
                f"Tax period {period} is not valid for {frequency.value} pay "
                f"(expected 1 to {frequency.max_periods})"
            )

        if frequency is PayFrequency.ANNUALLY:
            return self.end

        if frequency is PayFrequency.MONTHLY:
            month_index = 4 + period
            year = self.start.year + (month_index - 1) // 12
            month = (month_index - 1) % 12 + 1
            return date(year, month, 5)

        last_day = self.start + timedelta(days=period * frequency.period_length_days - 1)
        return min(last_day, self.end)


def fiscal_year_of(value: date) -> FiscalYear:
    """Return the tax year that ``value`` falls into."""

    ending = value.year if value < date(value.year, 4, 6) else value.year + 1
    if not MIN_TAX_YEAR_ENDING <= ending <= MAX_TAX_YEAR_ENDING:
        raise DateOutOfRange(
            f"Unsupported tax year for {value.isoformat()}; date must fall within the tax "
            f"years ending 5 April {MIN_TAX_YEAR_ENDING} to 5 April {MAX_TAX_YEAR_ENDING}"
        )
    return FiscalYear(ending)


def period_of(value: date, fiscal_year: FiscalYear, frequency: PayFrequency) -> int:
    """Functional alias for :meth:`FiscalYear.period_of`."""

    return fiscal_year.period_of(value, frequency)


__all__ = [
    "FiscalYear",
    "MAX_TAX_YEAR_ENDING",
    "MIN_TAX_YEAR_ENDING",
    "fiscal_year_of",
    "period_of",
]
