"""Unit coverage for the project version helper."""

from __future__ import annotations

from importlib import metadata
from pathlib import Path

import pytest

from csv2po.version import PYPROJECT_PATH, get_project_version, read_pyproject_version


def test_pyproject_declares_a_version() -> None:
    assert read_pyproject_version(PYPROJECT_PATH) == "0.4.0"


def test_get_project_version_prefers_installed_metadata(monkeypatch) -> None:
    get_project_version.cache_clear()  # type: ignore[attr-defined]
    monkeypatch.setattr(metadata, "version", lambda package: "9.9.9")

    assert get_project_version() == "9.9.9"
    get_project_version.cache_clear()  # type: ignore[attr-defined]


def test_get_project_version_falls_back_to_pyproject(monkeypatch) -> None:
    get_project_version.cache_clear()  # type: ignore[attr-defined]

    def raise_package_not_found(_: str) -> str:
        raise metadata.PackageNotFoundError

    monkeypatch.setattr(metadata, "version", raise_package_not_found)

    assert get_project_version() == read_pyproject_version(PYPROJECT_PATH)
    get_project_version.cache_clear()  # type: ignore[attr-defined]


def test_version_outside_project_table_is_ignored(tmp_path: Path) -> None:
    pyproject = tmp_path / "pyproject.toml"
    pyproject.write_text(
        '[tool.other]\nversion = "1.0"\n\n[project]\nname = "demo"\nversion = "2.1.0"\n',
        encoding="utf-8",
    )

    assert read_pyproject_version(pyproject) == "2.1.0"


@pytest.mark.parametrize("content", [None, '[project]\nname = "demo"\n'])
def test_missing_version_raises(tmp_path: Path, content: str | None) -> None:
    pyproject = tmp_path / "pyproject.toml"
    if content is not None:
        pyproject.write_text(content, encoding="utf-8")

    with pytest.raises(RuntimeError):
        read_pyproject_version(pyproject)
