"""Test configuration utilities and shared fixtures."""

import csv
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

# Ensure the ``src`` directory is importable when tests are executed without an
# editable install.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import pytest  # noqa: E402
from flask import Flask  # noqa: E402
from flask.testing import FlaskClient  # noqa: E402

from csv2po.app import create_app  # noqa: E402
from csv2po.services.table import SourceTable  # noqa: E402

FIXED_NOW = datetime(2024, 3, 5, 9, 30, tzinfo=timezone.utc)


@pytest.fixture()
def fixed_clock() -> Callable[[], datetime]:
    """Return a clock frozen at :data:`FIXED_NOW`."""

    return lambda: FIXED_NOW


@pytest.fixture()
def make_table() -> Callable[..., SourceTable]:
    """Build a :class:`SourceTable` from a header and row dictionaries."""

    def factory(header: list[str], *rows: dict[str, str]) -> SourceTable:
        return SourceTable.from_rows(header, list(rows))

    return factory


@pytest.fixture()
def write_csv(tmp_path: Path) -> Callable[..., Path]:
    """Write rows to a CSV file inside ``tmp_path`` and return its path."""

    def writer(header: list[str], *rows: dict[str, str], name: str = "copy.csv") -> Path:
        path = tmp_path / name
        with path.open("w", encoding="utf-8", newline="") as handle:
            csv_writer = csv.DictWriter(handle, fieldnames=header)
            csv_writer.writeheader()
            csv_writer.writerows(rows)
        return path

    return writer


@pytest.fixture()
def theme_project(tmp_path: Path) -> Path:
    """Create a project with a ``frontend`` theme and an empty translations directory."""

    translations = tmp_path / "project" / "themes" / "frontend" / "translations"
    translations.mkdir(parents=True)
    return tmp_path / "project"


@pytest.fixture()
def app(monkeypatch: pytest.MonkeyPatch) -> Flask:
    """Return a configured Flask application for integration tests."""

    monkeypatch.delenv("CSV2PO_CONFIG", raising=False)
    application = create_app()
    application.config.update(TESTING=True)
    return application


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Provide a test client bound to the configured Flask app."""

    return app.test_client()
