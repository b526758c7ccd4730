"""Constituent UK countries combined into tax jurisdiction groupings."""

from __future__ import annotations

import re
from collections.abc import Iterable
from enum import Flag


class Jurisdiction(Flag):
    """Bitset of UK countries that share a set of income tax rules."""

    England = 1
    Wales = 2
    Scotland = 4
    NorthernIreland = 8

    @property
    def countries(self) -> tuple[Jurisdiction, ...]:
        """Return the individual countries in this grouping, in canonical order."""

        return tuple(country for country in _COUNTRIES if country & self)

    @property
    def label(self) -> str:
        """Return the ``England|NorthernIreland`` style label for this grouping."""

        return "|".join(country.name for country in self.countries)

    @classmethod
    def parse(cls, value: str | Iterable[str] | Jurisdiction) -> Jurisdiction:
        """Build a grouping from ``"England|NorthernIreland"`` or a list of names."""

        if isinstance(value, Jurisdiction):
            return value
        if isinstance(value, str):
            names = [part for part in re.split(r"[|,\s]+", value) if part]
        else:
            names = [str(part).strip() for part in value]
        if not names:
            raise ValueError("A jurisdiction grouping needs at least one country")

        result = cls(0)
        for name in names:
            try:
                result |= cls[name]
            except KeyError as exc:
                raise ValueError(f"Unknown country '{name}'") from exc
        return result


_COUNTRIES: tuple[Jurisdiction, ...] = (
    Jurisdiction.England,
    Jurisdiction.Wales,
    Jurisdiction.Scotland,
    Jurisdiction.NorthernIreland,
)


__all__ = ["Jurisdiction"]
