"""Version lookup for ``paytools`` used by the reference data command line."""

from __future__ import annotations

import re
from functools import lru_cache
from importlib import metadata
from pathlib import Path
from typing import Final

PACKAGE_NAME: Final = "paytools"

_PYPROJECT = Path(__file__).resolve().parents[3] / "pyproject.toml"
_PROJECT_TABLE = re.compile(r"^\[project\]\s*$(?P<body>.*?)(?=^\[|\Z)", re.MULTILINE | re.DOTALL)
_VERSION_KEY = re.compile(r'^version\s*=\s*"(?P<version>[^"]+)"', re.MULTILINE)


def version_from_pyproject(text: str) -> str | None:
    """Return the ``[project]`` version declared in pyproject ``text``, if any."""

    table = _PROJECT_TABLE.search(text)
    match = _VERSION_KEY.search(table.group("body")) if table else None
    return match.group("version") if match else None


@lru_cache(maxsize=1)
def get_project_version() -> str:
    """Installed distribution version, or the checkout's declared one."""

    try:
        return metadata.version(PACKAGE_NAME)
    except metadata.PackageNotFoundError:
        pass

    try:
        declared = version_from_pyproject(_PYPROJECT.read_text(encoding="utf-8"))
    except OSError:
        declared = None
    # An uninstalled tree without pyproject metadata still reports something.
    return declared or "0+unknown"


__all__ = ["PACKAGE_NAME", "get_project_version", "version_from_pyproject"]
