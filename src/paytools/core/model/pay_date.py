"""Pay dates bound to a pay frequency."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from .fiscal_year import FiscalYear, fiscal_year_of
from .pay_frequency import PayFrequency


@dataclass(frozen=True)
class PayDate:
    """A specific pay date for a specific pay frequency.

    The tax year and tax period are derived once at construction, so a pay
    date of 20 May on a monthly payroll is always tax period 2.
    """

    date: date
    frequency: PayFrequency
    fiscal_year: FiscalYear = field(init=False)
    tax_period: int = field(init=False)

    def __post_init__(self) -> None:
        fiscal_year = fiscal_year_of(self.date)
        object.__setattr__(self, "fiscal_year", fiscal_year)
        object.__setattr__(self, "tax_period", fiscal_year.period_of(self.date, self.frequency))

    @classmethod
    def of(cls, year: int, month: int, day: int, frequency: PayFrequency) -> PayDate:
        return cls(date(year, month, day), frequency)

    @property
    def as_of_date(self) -> date:
        """Last day of this pay date's tax period, used for reference data lookups."""

        return self.fiscal_year.last_day_of_period(self.frequency, self.tax_period)


__all__ = ["PayDate"]
