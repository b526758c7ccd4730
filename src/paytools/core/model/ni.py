"""National Insurance category letters and threshold types."""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType


class NiCategory(str, Enum):
    """HMRC National Insurance category letter."""

    A = "A"
    B = "B"
    C = "C"
    F = "F"
    H = "H"
    I = "I"  # noqa: E741
    J = "J"
    L = "L"
    M = "M"
    S = "S"
    V = "V"
    Z = "Z"


class NiThresholdType(str, Enum):
    """Named earnings thresholds that bound the NI marginal bands."""

    LEL = "LEL"
    PT = "PT"
    ST = "ST"
    FUST = "FUST"
    UST = "UST"
    AUST = "AUST"
    VUST = "VUST"
    UEL = "UEL"
    DPT = "DPT"


# Employer contributions for these categories stop rising at an upper secondary
# threshold rather than the upper earnings limit.
EMPLOYER_UPPER_THRESHOLDS = MappingProxyType(
    {
        NiCategory.H: NiThresholdType.AUST,
        NiCategory.M: NiThresholdType.UST,
        NiCategory.Z: NiThresholdType.UST,
        NiCategory.V: NiThresholdType.VUST,
    }
)

def employer_upper_threshold(category: NiCategory) -> NiThresholdType:
    return EMPLOYER_UPPER_THRESHOLDS.get(category, NiThresholdType.UEL)


__all__ = [
    "EMPLOYER_UPPER_THRESHOLDS",
    "NiCategory",
    "NiThresholdType",
    "employer_upper_threshold",
]
