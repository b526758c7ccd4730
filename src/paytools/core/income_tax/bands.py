"""Marginal band arithmetic for income tax."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from paytools.core.amounts import Amount, as_decimal, require_non_negative
from paytools.core.reference_data.schema import TaxBand


@dataclass(frozen=True)
class BandSlice:
    """Portion of a taxable amount charged within one band."""

    band: TaxBand
    amount: Decimal
    tax: Decimal


def sort_bands(bands: Sequence[TaxBand]) -> list[TaxBand]:
    return sorted(bands, key=lambda band: band.lower)


def compute_tax_breakdown(bands: Sequence[TaxBand], taxable_amount: Amount) -> list[BandSlice]:
    """Split ``taxable_amount`` across ``bands`` and price each slice.

    Bands are sorted ascending first, so the result depends only on the band
    set and not on the order it was supplied in.
    """

    amount = require_non_negative(as_decimal(taxable_amount), "Taxable amount")

    slices: list[BandSlice] = []
    for band in sort_bands(bands):
        lower = band.lower
        if amount <= lower:
            break
        upper = band.upper_bound
        top = amount if upper is None or amount < upper else upper
        in_band = top - lower
        slices.append(BandSlice(band=band, amount=in_band, tax=in_band * band.rate))
    return slices


def compute_tax(bands: Sequence[TaxBand], taxable_amount: Amount) -> Decimal:
    """Return the unrounded liability on ``taxable_amount``."""

    return sum(
        (item.tax for item in compute_tax_breakdown(bands, taxable_amount)),
        Decimal(0),
    )


def scale_bands(bands: Sequence[TaxBand], numerator: int, denominator: int) -> tuple[TaxBand, ...]:
    """Return ``bands`` with every bounded edge multiplied by ``numerator / denominator``."""

    factor = Decimal(numerator) / Decimal(denominator)
    scaled: list[TaxBand] = []
    for band in sort_bands(bands):
        scaled.append(
            band.model_copy(
                update={
                    "lower_bound": band.lower * factor,
                    "upper_bound": None if band.upper_bound is None else band.upper_bound * factor,
                }
            )
        )
    return tuple(scaled)


__all__ = ["BandSlice", "compute_tax", "compute_tax_breakdown", "scale_bands", "sort_bands"]
