"""Unit coverage for pay dates and jurisdiction groupings."""

from __future__ import annotations

from dataclasses import FrozenInstanceError
from datetime import date

import pytest

from paytools.core.errors import DateOutOfRange
from paytools.core.model import FiscalYear, Jurisdiction, PayDate, PayFrequency


def test_pay_date_derives_year_and_period() -> None:
    pay_date = PayDate.of(2022, 5, 20, PayFrequency.MONTHLY)

    assert pay_date.fiscal_year == FiscalYear(2023)
    assert pay_date.tax_period == 2
    assert pay_date.as_of_date == date(2022, 6, 5)


def test_week_53_pay_date_looks_up_on_the_last_day_of_the_year() -> None:
    pay_date = PayDate.of(2023, 4, 5, PayFrequency.WEEKLY)

    assert pay_date.tax_period == 53
    assert pay_date.as_of_date == date(2023, 4, 5)


def test_pay_date_outside_supported_years_is_rejected() -> None:
    with pytest.raises(DateOutOfRange):
        PayDate.of(2018, 1, 1, PayFrequency.MONTHLY)


def test_pay_date_is_immutable() -> None:
    pay_date = PayDate.of(2023, 6, 30, PayFrequency.WEEKLY)

    with pytest.raises(FrozenInstanceError):
        pay_date.tax_period = 1  # type: ignore[misc]


def test_frequency_metadata() -> None:
    assert [frequency.periods_per_year for frequency in PayFrequency] == [52, 26, 13, 12, 1]
    assert [frequency.max_periods for frequency in PayFrequency] == [53, 27, 14, 12, 1]
    assert PayFrequency.MONTHLY.period_length_days is None
    assert PayFrequency.FOUR_WEEKLY.period_length_days == 28


@pytest.mark.parametrize(
    "value",
    [
        "England|NorthernIreland",
        "NorthernIreland|England",
        ["England", "NorthernIreland"],
        Jurisdiction.England | Jurisdiction.NorthernIreland,
    ],
)
def test_jurisdiction_parse(value) -> None:
    parsed = Jurisdiction.parse(value)

    assert parsed == Jurisdiction.England | Jurisdiction.NorthernIreland
    assert parsed.label == "England|NorthernIreland"
    assert parsed.countries == (Jurisdiction.England, Jurisdiction.NorthernIreland)


@pytest.mark.parametrize("value", ["", "Cornwall", ["England", "Mercia"]])
def test_jurisdiction_parse_rejects_unknown_countries(value) -> None:
    with pytest.raises(ValueError):
        Jurisdiction.parse(value)
