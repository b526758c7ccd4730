"""Income tax band arithmetic and calculators."""

from .bands import BandSlice, compute_tax, compute_tax_breakdown, scale_bands, sort_bands
from .calculator import TaxCalculationResult, TaxCalculator, build_tax_calculator

__all__ = [
    "BandSlice",
    "TaxCalculationResult",
    "TaxCalculator",
    "build_tax_calculator",
    "compute_tax",
    "compute_tax_breakdown",
    "scale_bands",
    "sort_bands",
]
