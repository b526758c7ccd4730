"""Test configuration utilities and shared fixtures."""

import sys
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

# Ensure the ``src`` directory is importable when tests are executed without an
# editable install. This keeps developer experience smooth for first-time
# contributors running ``pytest`` directly in VS Code.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import pytest  # noqa: E402
import yaml  # noqa: E402

from paytools.core.calculators import CalculatorFactory  # noqa: E402
from paytools.core.reference_data import loader  # noqa: E402
from paytools.core.reference_data.store import TemporalReferenceStore  # noqa: E402
from paytools.core.settings import (  # noqa: E402
    BUNDLED_REFERENCE_DATA_DIR,
    NI_ROUNDING_ENV,
    REFERENCE_DATA_DIR_ENV,
)


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Drop environment overrides and loader caches around every test."""

    monkeypatch.delenv(NI_ROUNDING_ENV, raising=False)
    monkeypatch.delenv(REFERENCE_DATA_DIR_ENV, raising=False)
    loader.load_manifest.cache_clear()
    loader.load_reference_data_set.cache_clear()

    yield

    loader.load_manifest.cache_clear()
    loader.load_reference_data_set.cache_clear()


@pytest.fixture()
def raw_reference_data() -> Callable[..., dict[str, Any]]:
    """Return a loader producing a fresh mapping parsed from a bundled file.

    The bundled files use YAML anchors, so windows that share an anchor share
    the same nested objects in the returned mapping.
    """

    def _load(filename: str = "2023-24.yaml") -> dict[str, Any]:
        path = BUNDLED_REFERENCE_DATA_DIR / filename
        return yaml.safe_load(path.read_text(encoding="utf-8"))

    return _load


@pytest.fixture()
def store() -> TemporalReferenceStore:
    """Return a store populated from the bundled reference data."""

    return loader.create_store()


@pytest.fixture()
def factory(store: TemporalReferenceStore) -> CalculatorFactory:
    return CalculatorFactory(store)
