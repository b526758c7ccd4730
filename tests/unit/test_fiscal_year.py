"""Unit coverage for tax year boundaries and tax period arithmetic."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from paytools.core.errors import DateOutOfRange
from paytools.core.model import (
    FiscalYear,
    Jurisdiction,
    PayFrequency,
    fiscal_year_of,
    period_of,
)

ENGLAND_AND_NI = Jurisdiction.England | Jurisdiction.NorthernIreland


def test_fiscal_year_boundaries() -> None:
    year = FiscalYear(2023)

    assert year.start == date(2022, 4, 6)
    assert year.end == date(2023, 4, 5)
    assert str(year) == "2022/23"


@pytest.mark.parametrize("ending", [2018, 2028])
def test_fiscal_year_rejects_unsupported_years(ending: int) -> None:
    with pytest.raises(DateOutOfRange):
        FiscalYear(ending)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (date(2018, 4, 6), 2019),
        (date(2023, 4, 5), 2023),
        (date(2023, 4, 6), 2024),
        (date(2024, 2, 29), 2024),
        (date(2027, 4, 5), 2027),
    ],
)
def test_fiscal_year_of(value: date, expected: int) -> None:
    assert fiscal_year_of(value) == FiscalYear(expected)


@pytest.mark.parametrize("value", [date(2018, 4, 5), date(2027, 4, 6)])
def test_fiscal_year_of_rejects_dates_outside_supported_years(value: date) -> None:
    with pytest.raises(DateOutOfRange):
        fiscal_year_of(value)


def test_jurisdiction_groupings_change_when_wales_gains_its_own_rates() -> None:
    before = FiscalYear(2019)
    after = FiscalYear(2020)

    assert before.jurisdictions == (
        Jurisdiction.England | Jurisdiction.Wales | Jurisdiction.NorthernIreland,
        Jurisdiction.Scotland,
    )
    assert before.default_jurisdiction == (
        Jurisdiction.England | Jurisdiction.Wales | Jurisdiction.NorthernIreland
    )
    assert not before.is_valid_for_year(Jurisdiction.Wales)

    assert after.jurisdictions == (ENGLAND_AND_NI, Jurisdiction.Wales, Jurisdiction.Scotland)
    assert after.default_jurisdiction == ENGLAND_AND_NI
    assert after.is_valid_for_year(Jurisdiction.Wales)
    assert not after.is_valid_for_year(Jurisdiction.England)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (date(2022, 4, 6), 1),
        (date(2022, 5, 5), 1),
        (date(2022, 5, 6), 2),
        (date(2022, 12, 25), 9),
        (date(2023, 1, 5), 9),
        (date(2023, 1, 6), 10),
        (date(2023, 3, 6), 12),
        (date(2023, 4, 1), 12),
        (date(2023, 4, 5), 12),
    ],
)
def test_monthly_tax_periods(value: date, expected: int) -> None:
    assert period_of(value, FiscalYear(2023), PayFrequency.MONTHLY) == expected


@pytest.mark.parametrize(
    ("value", "frequency", "expected"),
    [
        (date(2022, 4, 6), PayFrequency.WEEKLY, 1),
        (date(2022, 4, 12), PayFrequency.WEEKLY, 1),
        (date(2022, 4, 13), PayFrequency.WEEKLY, 2),
        (date(2023, 4, 4), PayFrequency.WEEKLY, 52),
        (date(2023, 4, 5), PayFrequency.WEEKLY, 53),
        (date(2022, 4, 19), PayFrequency.TWO_WEEKLY, 1),
        (date(2022, 4, 20), PayFrequency.TWO_WEEKLY, 2),
        (date(2023, 4, 5), PayFrequency.TWO_WEEKLY, 27),
        (date(2022, 5, 3), PayFrequency.FOUR_WEEKLY, 1),
        (date(2022, 5, 4), PayFrequency.FOUR_WEEKLY, 2),
        (date(2023, 4, 5), PayFrequency.FOUR_WEEKLY, 14),
        (date(2022, 9, 30), PayFrequency.ANNUALLY, 1),
    ],
)
def test_day_count_tax_periods(value: date, frequency: PayFrequency, expected: int) -> None:
    assert FiscalYear(2023).period_of(value, frequency) == expected


def test_leap_year_still_ends_in_week_53() -> None:
    year = FiscalYear(2024)

    assert year.period_of(date(2024, 4, 4), PayFrequency.WEEKLY) == 53
    assert year.period_of(date(2024, 4, 5), PayFrequency.WEEKLY) == 53


def test_period_of_rejects_dates_outside_the_year() -> None:
    with pytest.raises(DateOutOfRange, match="outside this tax year"):
        FiscalYear(2023).period_of(date(2023, 4, 6), PayFrequency.MONTHLY)


@pytest.mark.parametrize(
    ("frequency", "period", "expected"),
    [
        (PayFrequency.MONTHLY, 1, date(2022, 5, 5)),
        (PayFrequency.MONTHLY, 9, date(2023, 1, 5)),
        (PayFrequency.MONTHLY, 12, date(2023, 4, 5)),
        (PayFrequency.WEEKLY, 1, date(2022, 4, 12)),
        (PayFrequency.WEEKLY, 52, date(2023, 4, 4)),
        (PayFrequency.WEEKLY, 53, date(2023, 4, 5)),
        (PayFrequency.FOUR_WEEKLY, 14, date(2023, 4, 5)),
        (PayFrequency.ANNUALLY, 1, date(2023, 4, 5)),
    ],
)
def test_last_day_of_period(frequency: PayFrequency, period: int, expected: date) -> None:
    assert FiscalYear(2023).last_day_of_period(frequency, period) == expected


@pytest.mark.parametrize(
    ("frequency", "period"),
    [
        (PayFrequency.MONTHLY, 0),
        (PayFrequency.MONTHLY, 13),
        (PayFrequency.WEEKLY, 54),
        (PayFrequency.ANNUALLY, 2),
    ],
)
def test_last_day_of_period_rejects_invalid_periods(frequency: PayFrequency, period: int) -> None:
    with pytest.raises(DateOutOfRange, match=f"Tax period {period} is not valid"):
        FiscalYear(2023).last_day_of_period(frequency, period)


@pytest.mark.parametrize("frequency", list(PayFrequency))
def test_periods_never_decrease_and_contain_their_pay_date(frequency: PayFrequency) -> None:
    year = FiscalYear(2024)
    previous = 1
    current = year.start

    while current <= year.end:
        period = year.period_of(current, frequency)
        assert previous <= period <= frequency.max_periods
        assert year.last_day_of_period(frequency, period) >= current
        previous = period
        current += timedelta(days=1)

    assert previous == frequency.max_periods
