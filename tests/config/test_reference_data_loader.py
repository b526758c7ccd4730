"""Coverage for reading reference data files and populating stores."""

from __future__ import annotations

import io
from decimal import Decimal
from pathlib import Path
from shutil import copy2

import pytest
import yaml
from pydantic import ValidationError

from paytools.core.errors import ReferenceDataInvalid
from paytools.core.reference_data import loader
from paytools.core.reference_data.store import AddOutcome, TemporalReferenceStore
from paytools.core.settings import BUNDLED_REFERENCE_DATA_DIR, REFERENCE_DATA_DIR_ENV


@pytest.fixture()
def isolated_data_directory(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Return a temporary copy of the bundled data patched in via the environment."""

    for path in BUNDLED_REFERENCE_DATA_DIR.glob("*.yaml"):
        copy2(path, tmp_path / path.name)

    monkeypatch.setenv(REFERENCE_DATA_DIR_ENV, str(tmp_path))
    loader.load_manifest.cache_clear()
    loader.load_reference_data_set.cache_clear()
    return tmp_path


def _add_manifest_year(directory: Path, year: int, filename: str) -> None:
    manifest_path = directory / "manifest.yaml"
    manifest = yaml.safe_load(manifest_path.read_text())
    manifest.setdefault("years", []).append({"year": year, "filename": filename})
    manifest_path.write_text(yaml.safe_dump(manifest, sort_keys=False))
    loader.load_manifest.cache_clear()


def test_available_years_come_from_the_manifest() -> None:
    assert loader.available_years() == (2023, 2024)


def test_manifest_entries_only_name_a_year_and_file(isolated_data_directory: Path) -> None:
    manifest_path = isolated_data_directory / "manifest.yaml"
    manifest = yaml.safe_load(manifest_path.read_text())
    manifest["years"][0]["notes_url"] = "https://example.invalid"
    manifest_path.write_text(yaml.safe_dump(manifest, sort_keys=False))
    loader.load_manifest.cache_clear()

    with pytest.raises(ReferenceDataInvalid, match="notes_url"):
        loader.load_manifest()


def test_bundled_years_load_with_exact_decimals() -> None:
    data_set = loader.load_reference_data_set(2024)

    assert data_set.version == "3"
    assert data_set.is_complete
    assert data_set.national_insurance[0].employer_rates[0].st_to_fust == Decimal("0.138")
    assert loader.load_reference_data_set(2024) is data_set


def test_unknown_year_is_reported_as_missing() -> None:
    with pytest.raises(FileNotFoundError, match="2030"):
        loader.load_reference_data_set(2030)


def test_year_mismatch_is_rejected(isolated_data_directory: Path) -> None:
    _add_manifest_year(isolated_data_directory, 2025, "2023-24.yaml")

    with pytest.raises(ReferenceDataInvalid, match="year mismatch"):
        loader.load_reference_data_set(2025)


def test_missing_manifest(isolated_data_directory: Path) -> None:
    (isolated_data_directory / "manifest.yaml").unlink()
    loader.load_manifest.cache_clear()

    with pytest.raises(FileNotFoundError):
        loader.available_years()


def test_schema_errors_are_wrapped() -> None:
    with pytest.raises(ReferenceDataInvalid) as excinfo:
        loader.parse_reference_data(
            {"version": 1, "applicable_tax_year_ending": 2024, "surprise": True}, "inline"
        )

    assert isinstance(excinfo.value.__cause__, ValidationError)
    assert "inline" in str(excinfo.value)


def test_malformed_yaml_is_wrapped() -> None:
    with pytest.raises(ReferenceDataInvalid, match="Unable to parse"):
        loader.load_reference_data_stream(io.StringIO("version: [1, 2"), "broken")


def test_top_level_must_be_a_mapping() -> None:
    with pytest.raises(ReferenceDataInvalid, match="mapping"):
        loader.load_reference_data_stream(io.StringIO("- 1\n- 2\n"), "list")


def test_create_store_reports_health() -> None:
    store = loader.create_store()

    assert store.tax_years == (2023, 2024)
    assert store.health == "2023:OK|2024:OK"


def test_populate_store_records_files_that_cannot_be_loaded(
    isolated_data_directory: Path,
) -> None:
    _add_manifest_year(isolated_data_directory, 2025, "2024-25.yaml")
    store = TemporalReferenceStore()

    results = loader.populate_store(store)

    assert [result.outcome for result in results] == [
        AddOutcome.ADDED,
        AddOutcome.ADDED,
        AddOutcome.REJECTED,
    ]
    assert store.health.endswith(
        "Failed to load from '2025' with message: "
        "Reference data file for year 2025 missing: 2024-25.yaml"
    )


def test_create_store_from_streams_keys_by_position() -> None:
    valid = (BUNDLED_REFERENCE_DATA_DIR / "2022-23.yaml").read_text(encoding="utf-8")

    store = loader.create_store_from_streams(
        [io.StringIO(valid), io.StringIO("income_tax: [")]
    )

    assert store.tax_years == (2023,)
    health = store.health.split("|")
    assert health[0] == "2023:OK"
    assert health[1].startswith("Failed to load from '1' with message: ")
