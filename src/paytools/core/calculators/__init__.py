"""Factories binding reference data snapshots to calculators."""

from .factory import CalculatorFactory

__all__ = ["CalculatorFactory"]
