"""NI threshold values resolved for a pay frequency."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal
from types import MappingProxyType

from paytools.core.errors import ReferenceDataInvalid
from paytools.core.model import NiThresholdType, PayFrequency
from paytools.core.reference_data.schema import NiThresholdEntry


@dataclass(frozen=True)
class NiThresholdSet:
    """Thresholds in force for one applicability window."""

    entries: Mapping[NiThresholdType, NiThresholdEntry]

    @classmethod
    def from_entries(cls, entries: Iterable[NiThresholdEntry]) -> NiThresholdSet:
        return cls(MappingProxyType({entry.threshold_type: entry for entry in entries}))

    def __contains__(self, threshold_type: object) -> bool:
        return threshold_type in self.entries

    def get_threshold(self, threshold_type: NiThresholdType, frequency: PayFrequency) -> Decimal:
        """Return the value of ``threshold_type`` for one period of ``frequency``.

        Two-weekly and four-weekly values are multiples of the weekly figure.
        """

        entry = self.entries.get(threshold_type)
        if entry is None:
            raise ReferenceDataInvalid(f"NI threshold '{threshold_type.value}' is not defined")

        if frequency is PayFrequency.WEEKLY:
            return entry.per_week
        if frequency is PayFrequency.TWO_WEEKLY:
            return entry.per_week * 2
        if frequency is PayFrequency.FOUR_WEEKLY:
            return entry.per_week * 4
        if frequency is PayFrequency.MONTHLY:
            return entry.per_month
        return entry.per_year


__all__ = ["NiThresholdSet"]
