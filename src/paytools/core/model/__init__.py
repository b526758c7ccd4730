"""Calendar, jurisdiction and category primitives shared across the engine."""

from .fiscal_year import (
    MAX_TAX_YEAR_ENDING,
    MIN_TAX_YEAR_ENDING,
    FiscalYear,
    fiscal_year_of,
    period_of,
)
from .jurisdiction import Jurisdiction
from .ni import NiCategory, NiThresholdType, employer_upper_threshold
from .pay_date import PayDate
from .pay_frequency import PayFrequency

__all__ = [
    "FiscalYear",
    "Jurisdiction",
    "MAX_TAX_YEAR_ENDING",
    "MIN_TAX_YEAR_ENDING",
    "NiCategory",
    "NiThresholdType",
    "PayDate",
    "PayFrequency",
    "employer_upper_threshold",
    "fiscal_year_of",
    "period_of",
]
