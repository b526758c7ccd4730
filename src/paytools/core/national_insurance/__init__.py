"""National Insurance rate merging, thresholds, rounding and calculation."""

from .calculator import NiBandContribution, NiCalculationResult, NiCalculator, compute_ni
from .rates import NiCategoryRates, merge_category_rates
from .rounding import NiRoundingMode, ni_round
from .thresholds import NiThresholdSet

__all__ = [
    "NiBandContribution",
    "NiCalculationResult",
    "NiCalculator",
    "NiCategoryRates",
    "NiRoundingMode",
    "NiThresholdSet",
    "compute_ni",
    "merge_category_rates",
    "ni_round",
]
