"""Pydantic models describing a tax year's HMRC reference data set."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PlainValidator,
    computed_field,
    field_validator,
    model_validator,
)
from typing_extensions import Self

from paytools.core.errors import ReferenceDataInvalid
from paytools.core.model import Jurisdiction, NiCategory, NiThresholdType


def _coerce_decimal(value: Any) -> Any:
    # YAML hands over floats; going through ``str`` keeps 0.138 as 0.138.
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, str):
        try:
            return Decimal(value.strip())
        except InvalidOperation as exc:
            raise ReferenceDataInvalid(f"'{value}' is not a decimal amount") from exc
    return value


def _parse_jurisdiction(value: Any) -> Jurisdiction:
    try:
        return Jurisdiction.parse(value)
    except ValueError as exc:
        raise ReferenceDataInvalid(str(exc)) from exc


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


class ApplicableBetween(ImmutableModel):
    """Mixin for entries that apply over an inclusive date window."""

    applicable_from: date
    applicable_till: date

    @model_validator(mode="after")
    def _validate_window(self) -> Self:
        if self.applicable_till < self.applicable_from:
            raise ReferenceDataInvalid(
                f"Applicability window {self.applicable_from} - {self.applicable_till} "
                "ends before it starts"
            )
        return self

    def applies_on(self, as_of: date) -> bool:
        return self.applicable_from <= as_of <= self.applicable_till


class TaxBand(ImmutableModel):
    """Represents a single marginal income tax band."""

    description: str = ""
    lower_bound: Decimal | None = Field(default=None, alias="from")
    upper_bound: Decimal | None = Field(default=None, alias="to")
    rate: Decimal

    @field_validator("lower_bound", "upper_bound", "rate", mode="before")
    @classmethod
    def _coerce_amounts(cls, value: Any) -> Any:
        return _coerce_decimal(value)

    @model_validator(mode="after")
    def _validate_values(self) -> TaxBand:
        if self.rate < 0:
            raise ReferenceDataInvalid("Tax rates must be non-negative")
        if self.lower_bound is not None and self.lower_bound < 0:
            raise ReferenceDataInvalid("Band lower bounds must be non-negative")
        if self.upper_bound is not None and self.upper_bound <= self.lower:
            raise ReferenceDataInvalid("Band upper bounds must exceed their lower bound")
        return self

    @property
    def lower(self) -> Decimal:
        """Lower edge of the band; the bottom band starts at zero."""

        return self.lower_bound if self.lower_bound is not None else Decimal(0)

    @property
    def is_bottom_rate(self) -> bool:
        return self.lower == 0

    @property
    def is_top_rate(self) -> bool:
        return self.upper_bound is None


class IncomeTaxEntry(ImmutableModel):
    """Bands that apply to one jurisdiction grouping."""

    applicable_countries: Annotated[Jurisdiction, PlainValidator(_parse_jurisdiction)]
    bands: tuple[TaxBand, ...]

    @field_validator("bands", mode="before")
    @classmethod
    def _coerce_bands(cls, value: Any) -> Any:
        if isinstance(value, Iterable) and not isinstance(value, (str, Mapping)):
            return tuple(value)
        raise ReferenceDataInvalid("'bands' must be a list of band definitions")

    @model_validator(mode="after")
    def _validate_bands(self) -> IncomeTaxEntry:
        validate_band_sequence(self.bands)
        return self


class IncomeTaxBandSet(ApplicableBetween):
    """Income tax bands per jurisdiction grouping for one applicability window."""

    tax_entries: tuple[IncomeTaxEntry, ...]

    @model_validator(mode="after")
    def _validate_entries(self) -> IncomeTaxBandSet:
        seen: set[Jurisdiction] = set()
        for entry in self.tax_entries:
            if entry.applicable_countries in seen:
                raise ReferenceDataInvalid(
                    f"Duplicate tax bands for '{entry.applicable_countries.label}'"
                )
            seen.add(entry.applicable_countries)
        return self

    def bands_for(self, jurisdiction: Jurisdiction) -> Sequence[TaxBand] | None:
        for entry in self.tax_entries:
            if entry.applicable_countries == jurisdiction:
                return entry.bands
        return None

    @property
    def jurisdictions(self) -> tuple[Jurisdiction, ...]:
        return tuple(entry.applicable_countries for entry in self.tax_entries)


def _coerce_categories(value: Any) -> tuple[Any, ...]:
    if isinstance(value, str):
        return tuple(part for part in value.replace(",", " ").split() if part)
    if isinstance(value, Iterable):
        return tuple(value)
    raise ReferenceDataInvalid("'ni_categories' must be a list of category letters")


class NiEmployerRatesEntry(ImmutableModel):
    """Employer (secondary) contribution rates for a group of categories."""

    ni_categories: tuple[NiCategory, ...]
    lel_to_st: Decimal = Decimal(0)
    st_to_fust: Decimal = Decimal(0)
    fust_to_uel: Decimal = Decimal(0)
    above_uel: Decimal = Decimal(0)

    @field_validator("ni_categories", mode="before")
    @classmethod
    def _coerce_categories(cls, value: Any) -> tuple[Any, ...]:
        return _coerce_categories(value)

    @field_validator("lel_to_st", "st_to_fust", "fust_to_uel", "above_uel", mode="before")
    @classmethod
    def _coerce_rates(cls, value: Any) -> Any:
        return _coerce_decimal(value)


class NiEmployeeRatesEntry(ImmutableModel):
    """Employee (primary) contribution rates for a group of categories."""

    ni_categories: tuple[NiCategory, ...]
    lel_to_pt: Decimal = Decimal(0)
    pt_to_uel: Decimal = Decimal(0)
    above_uel: Decimal = Decimal(0)

    @field_validator("ni_categories", mode="before")
    @classmethod
    def _coerce_categories(cls, value: Any) -> tuple[Any, ...]:
        return _coerce_categories(value)

    @field_validator("lel_to_pt", "pt_to_uel", "above_uel", mode="before")
    @classmethod
    def _coerce_rates(cls, value: Any) -> Any:
        return _coerce_decimal(value)


class NiThresholdEntry(ImmutableModel):
    """Weekly, monthly and annual values of one NI threshold."""

    threshold_type: NiThresholdType
    per_week: Decimal
    per_month: Decimal
    per_year: Decimal

    @field_validator("per_week", "per_month", "per_year", mode="before")
    @classmethod
    def _coerce_values(cls, value: Any) -> Any:
        return _coerce_decimal(value)

    @model_validator(mode="after")
    def _validate_values(self) -> NiThresholdEntry:
        if min(self.per_week, self.per_month, self.per_year) < 0:
            raise ReferenceDataInvalid(
                f"Threshold {self.threshold_type.value} values must be non-negative"
            )
        return self


class NiReferenceDataEntry(ApplicableBetween):
    """NI thresholds and rates for one applicability window."""

    ni_thresholds: tuple[NiThresholdEntry, ...]
    employer_rates: tuple[NiEmployerRatesEntry, ...]
    employee_rates: tuple[NiEmployeeRatesEntry, ...]

    @model_validator(mode="after")
    def _validate_thresholds(self) -> NiReferenceDataEntry:
        seen: set[NiThresholdType] = set()
        for threshold in self.ni_thresholds:
            if threshold.threshold_type in seen:
                raise ReferenceDataInvalid(
                    f"Duplicate NI threshold '{threshold.threshold_type.value}'"
                )
            seen.add(threshold.threshold_type)
        return self


class TaxYearReferenceDataSet(ImmutableModel):
    """Structured representation of one tax year's reference data.

    ``income_tax`` and ``national_insurance`` are optional at the schema level
    so that an incomplete data set can still be registered and reported as
    invalid when it is looked up.
    """

    version: str
    applicable_tax_year_ending: int
    latest_update: datetime | None = None
    income_tax: tuple[IncomeTaxBandSet, ...] | None = None
    national_insurance: tuple[NiReferenceDataEntry, ...] | None = None

    @field_validator("version", mode="before")
    @classmethod
    def _coerce_version(cls, value: Any) -> str:
        return str(value)

    @computed_field
    @property
    def is_complete(self) -> bool:
        return bool(self.income_tax) and bool(self.national_insurance)


class ReferenceDataManifestEntry(ImmutableModel):
    """Entry describing a bundled tax year in the manifest."""

    year: int
    filename: str | None = None

    @computed_field
    @property
    def resolved_filename(self) -> str:
        return self.filename or f"{self.year}.yaml"


class ReferenceDataManifest(ImmutableModel):
    """Manifest describing the available reference data files."""

    years: tuple[ReferenceDataManifestEntry, ...]

    @model_validator(mode="after")
    def _validate_years(self) -> ReferenceDataManifest:
        seen: set[int] = set()
        for entry in self.years:
            if entry.year in seen:
                raise ReferenceDataInvalid(
                    f"Duplicate year {entry.year} declared in the reference data manifest"
                )
            seen.add(entry.year)
        return self

    def get_entry(self, year: int) -> ReferenceDataManifestEntry:
        for entry in self.years:
            if entry.year == year:
                return entry
        raise KeyError(year)

    @computed_field
    @property
    def supported_years(self) -> tuple[int, ...]:
        return tuple(sorted(entry.year for entry in self.years))


def validate_band_sequence(bands: Sequence[TaxBand]) -> None:
    """Raise ``ReferenceDataInvalid`` unless ``bands`` form a contiguous ladder.

    Bands may be supplied in any order; they are checked in ascending order of
    their lower bound.
    """

    if not bands:
        raise ReferenceDataInvalid("At least one tax band must be defined")

    ordered = sorted(bands, key=lambda band: band.lower)
    if ordered[0].lower != 0:
        raise ReferenceDataInvalid("The bottom tax band must start at zero")

    for current, following in zip(ordered, ordered[1:]):
        if current.upper_bound is None:
            raise ReferenceDataInvalid("Only the top tax band may be unbounded")
        if following.lower != current.upper_bound:
            raise ReferenceDataInvalid(
                f"Tax bands must be contiguous: band ending {current.upper_bound} is "
                f"followed by a band starting {following.lower}"
            )


__all__ = [
    "ApplicableBetween",
    "ImmutableModel",
    "IncomeTaxBandSet",
    "IncomeTaxEntry",
    "NiEmployeeRatesEntry",
    "NiEmployerRatesEntry",
    "NiReferenceDataEntry",
    "NiThresholdEntry",
    "ReferenceDataManifest",
    "ReferenceDataManifestEntry",
    "TaxBand",
    "TaxYearReferenceDataSet",
    "validate_band_sequence",
]
