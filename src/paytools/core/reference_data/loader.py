"""Reference data loader wrapping the shared schema models."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from functools import lru_cache
from pathlib import Path
from typing import IO, Any

import yaml
from pydantic import ValidationError

from paytools.core.errors import ReferenceDataInvalid
from paytools.core.settings import reference_data_directory

from .schema import ReferenceDataManifest, TaxYearReferenceDataSet
from .store import AddResult, TemporalReferenceStore

_LOGGER = logging.getLogger(__name__)

MANIFEST_FILENAME = "manifest.yaml"


def _load_yaml(source: Path | IO[Any], name: str) -> dict[str, Any]:
    try:
        if isinstance(source, Path):
            with source.open("r", encoding="utf-8") as handle:
                data = yaml.safe_load(handle) or {}
        else:
            data = yaml.safe_load(source) or {}
    except yaml.YAMLError as error:
        raise ReferenceDataInvalid(f"Unable to parse reference data from '{name}': {error}") from error
    if not isinstance(data, dict):
        raise ReferenceDataInvalid(f"Reference data in '{name}' must define a mapping at the top level")
    return data


def parse_reference_data(raw: Mapping[str, Any], source: str) -> TaxYearReferenceDataSet:
    """Validate a parsed mapping into a :class:`TaxYearReferenceDataSet`."""

    try:
        return TaxYearReferenceDataSet.model_validate(raw)
    except ValidationError as error:
        raise ReferenceDataInvalid(
            f"Reference data validation failed for '{source}': {error}"
        ) from error


def load_reference_data_stream(stream: IO[Any], source: str) -> TaxYearReferenceDataSet:
    """Load a data set from an open YAML (or JSON) stream."""

    return parse_reference_data(_load_yaml(stream, source), source)


@lru_cache(maxsize=1)
def load_manifest() -> ReferenceDataManifest:
    """Load and cache the reference data manifest."""

    manifest_file = reference_data_directory() / MANIFEST_FILENAME
    if not manifest_file.exists():
        raise FileNotFoundError(f"Reference data manifest not found: {manifest_file}")

    raw_manifest = _load_yaml(manifest_file, manifest_file.name)

    try:
        return ReferenceDataManifest.model_validate(raw_manifest)
    except ValidationError as error:
        raise ReferenceDataInvalid(f"Manifest validation failed: {error}") from error


def available_years() -> Sequence[int]:
    """Return the tax years (by ending year) declared in the manifest."""

    return load_manifest().supported_years


@lru_cache(maxsize=16)
def load_reference_data_set(year: int) -> TaxYearReferenceDataSet:
    """Load the data set for the tax year ending in ``year`` from disk."""

    try:
        manifest_entry = load_manifest().get_entry(year)
    except KeyError as exc:
        raise FileNotFoundError(f"Reference data for year {year} not declared in manifest") from exc

    data_file = reference_data_directory() / manifest_entry.resolved_filename
    if not data_file.exists():
        raise FileNotFoundError(f"Reference data file for year {year} missing: {data_file.name}")

    raw = _load_yaml(data_file, data_file.name)
    raw.setdefault("applicable_tax_year_ending", year)
    data_set = parse_reference_data(raw, data_file.name)

    if data_set.applicable_tax_year_ending != year:
        raise ReferenceDataInvalid(
            f"Reference data year mismatch in {data_file.name}: expected {year}, "
            f"found {data_set.applicable_tax_year_ending}"
        )

    _LOGGER.debug("Loaded reference data version %s from %s", data_set.version, data_file.name)
    return data_set


def populate_store(
    store: TemporalReferenceStore, years: Iterable[int] | None = None
) -> list[AddResult]:
    """Load each year from disk into ``store`` and return one result per year."""

    results: list[AddResult] = []
    for year in years if years is not None else available_years():
        key = str(year)
        try:
            data_set = load_reference_data_set(year)
        except (FileNotFoundError, ReferenceDataInvalid) as error:
            results.append(store.record_failure(key, str(error)))
            continue
        results.append(store.try_add(data_set, key=key))
    return results


def create_store(years: Iterable[int] | None = None) -> TemporalReferenceStore:
    """Return a store populated from the configured reference data directory."""

    store = TemporalReferenceStore()
    populate_store(store, years)
    _LOGGER.info("Reference data store health: %s", store.health)
    return store


def create_store_from_streams(streams: Sequence[IO[Any]]) -> TemporalReferenceStore:
    """Return a store populated from already-opened data streams.

    Streams are keyed by their position, so the health summary reads
    ``Failed to load from '1' ...`` for the second stream.
    """

    store = TemporalReferenceStore()
    for index, stream in enumerate(streams):
        key = str(index)
        try:
            data_set = load_reference_data_stream(stream, f"Stream #{key}")
        except ReferenceDataInvalid as error:
            store.record_failure(key, str(error))
            continue
        store.try_add(data_set, key=key)
    _LOGGER.info("Reference data store health: %s", store.health)
    return store


__all__ = [
    "MANIFEST_FILENAME",
    "available_years",
    "create_store",
    "create_store_from_streams",
    "load_manifest",
    "load_reference_data_set",
    "load_reference_data_stream",
    "parse_reference_data",
    "populate_store",
]
