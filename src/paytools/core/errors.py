"""Exception hierarchy raised by the reference data and calculation engine."""

from __future__ import annotations


class PaytoolsError(Exception):
    """Base class for every error surfaced by the engine."""


class DateOutOfRange(PaytoolsError, ValueError):
    """Raised when a date or tax period falls outside the supported span."""


class ReferenceDataInvalid(PaytoolsError, ValueError):
    """Raised when reference data is incomplete or violates its invariants."""


class NoApplicableEntry(ReferenceDataInvalid):
    """Raised when no single dated entry covers the requested as-of date."""


class ReferenceDataMissing(PaytoolsError, LookupError):
    """Raised when no reference data has been registered for a tax year."""


class UnsupportedJurisdiction(PaytoolsError, ValueError):
    """Raised when a jurisdiction grouping is not valid for a tax year."""


class UnsupportedNiCategory(ReferenceDataInvalid):
    """Raised when the applicable NI rates do not list the requested category."""


class NegativeInput(PaytoolsError, ValueError):
    """Raised when a calculation receives a negative monetary amount."""


__all__ = [
    "DateOutOfRange",
    "NegativeInput",
    "NoApplicableEntry",
    "PaytoolsError",
    "ReferenceDataInvalid",
    "ReferenceDataMissing",
    "UnsupportedJurisdiction",
    "UnsupportedNiCategory",
]
