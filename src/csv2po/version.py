"""Expose the installed csv2po version to the CLI and HTTP surfaces."""

from __future__ import annotations

import re
from functools import lru_cache
from importlib import metadata
from pathlib import Path
from typing import Final

DISTRIBUTION_NAME: Final = "csv2po"
PYPROJECT_PATH: Final = Path(__file__).resolve().parents[2] / "pyproject.toml"

_SECTION_PATTERN = re.compile(r"^\[(?P<name>[^\]]+)\]\s*$")
_VERSION_PATTERN = re.compile(r"^version\s*=\s*[\"'](?P<version>[^\"']+)[\"']")


@lru_cache(maxsize=1)
def get_project_version() -> str:
    """Return the distribution version, reading ``pyproject.toml`` for source checkouts."""

    try:
        return metadata.version(DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        return read_pyproject_version(PYPROJECT_PATH)


def read_pyproject_version(path: Path) -> str:
    """Return the ``[project]`` version declared in ``path``."""

    if not path.is_file():
        raise RuntimeError(f"Unable to locate project metadata at {path}")

    in_project = False
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        section = _SECTION_PATTERN.match(line)
        if section:
            in_project = section.group("name") == "project"
            continue
        if not in_project:
            continue
        match = _VERSION_PATTERN.match(line)
        if match:
            return match.group("version")

    raise RuntimeError(f"No project version declared in {path}")


__all__ = ["get_project_version", "read_pyproject_version"]
