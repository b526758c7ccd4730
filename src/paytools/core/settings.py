"""Environment-driven runtime settings."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - only for static type checkers
    from paytools.core.national_insurance.rounding import NiRoundingMode

NI_ROUNDING_ENV = "PAYTOOLS_NI_ROUNDING"
REFERENCE_DATA_DIR_ENV = "PAYTOOLS_REFERENCE_DATA_DIR"

BUNDLED_REFERENCE_DATA_DIR = Path(__file__).resolve().parent / "reference_data" / "data"


def reference_data_directory() -> Path:
    """Return the directory holding ``manifest.yaml`` and the per-year files."""

    override = os.getenv(REFERENCE_DATA_DIR_ENV, "").strip()
    if override:
        return Path(override).expanduser()
    return BUNDLED_REFERENCE_DATA_DIR


def default_ni_rounding_mode() -> NiRoundingMode:
    """Return the NI rounding mode configured through the environment.

    Unknown values raise ``ValueError`` rather than silently picking a mode,
    since the two conventions differ at the penny level.
    """

    from paytools.core.national_insurance.rounding import NiRoundingMode

    raw = os.getenv(NI_ROUNDING_ENV, "").strip().lower()
    if not raw:
        return NiRoundingMode.PER_BAND
    try:
        return NiRoundingMode(raw)
    except ValueError as exc:
        allowed = ", ".join(mode.value for mode in NiRoundingMode)
        raise ValueError(
            f"{NI_ROUNDING_ENV} must be one of: {allowed} (got '{raw}')"
        ) from exc


__all__ = [
    "BUNDLED_REFERENCE_DATA_DIR",
    "NI_ROUNDING_ENV",
    "REFERENCE_DATA_DIR_ENV",
    "default_ni_rounding_mode",
    "reference_data_directory",
]
