"""Integration tests for triggering synchronisations over HTTP."""

from __future__ import annotations

from http import HTTPStatus
from pathlib import Path
from typing import Any, Callable

import polib
import pytest
import yaml
from flask.testing import FlaskClient

from csv2po.app import create_app

ENDPOINT = "/api/v1/sync/"


@pytest.fixture()
def server(tmp_path: Path, theme_project: Path) -> Callable[..., FlaskClient]:
    """Return a factory building a client whose settings file points at ``theme_project``."""

    def factory(**settings: Any) -> FlaskClient:
        payload: dict[str, Any] = {
            "project_root": str(theme_project),
            "extension_name": "frontend",
            "check_enabled_languages": False,
        }
        payload.update(settings)
        config = tmp_path / "server.yaml"
        config.write_text(yaml.safe_dump(payload), encoding="utf-8")
        application = create_app(config)
        application.config.update(TESTING=True)
        return application.test_client()

    return factory


def test_sync_endpoint_runs_synchronisation(server, write_csv) -> None:
    source = write_csv(["EN", "FR", "PAGE"], {"EN": "Hello", "FR": "Bonjour", "PAGE": "home"})

    response = server(source_path=str(source)).post(ENDPOINT)

    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    assert payload["status"] == "completed"
    assert payload["languages"] == ["fr"]
    catalog_path = Path(payload["results"][0]["path"])
    assert catalog_path.name == "frontend.fr.po"
    assert polib.pofile(str(catalog_path))[0].msgstr == "Bonjour"


def test_request_options_override_server_settings(server, write_csv) -> None:
    source = write_csv(["EN", "FR", "DE"], {"EN": "Hello", "FR": "Bonjour", "DE": "Hallo"})
    client = server(source_path=str(source), enabled_languages=["fr"])

    response = client.post(
        ENDPOINT, json={"check_enabled_languages": True, "enabled_languages": ["de"]}
    )

    assert response.status_code == HTTPStatus.OK
    assert response.get_json()["languages"] == ["de"]


@pytest.mark.parametrize(
    "option",
    [
        {"project_root": "/"},
        {"source_path": "/etc/passwd"},
        {"remote_source_url": "http://internal.example/export.csv"},
        {"translations_directory_name": "other"},
        {"extension_roots": {"theme": ["."]}},
    ],
)
def test_sync_endpoint_rejects_location_overrides(server, write_csv, option) -> None:
    source = write_csv(["EN", "FR"], {"EN": "Hello", "FR": "Bonjour"})

    response = server(source_path=str(source)).post(ENDPOINT, json=option)

    assert response.status_code == HTTPStatus.BAD_REQUEST
    payload = response.get_json()
    assert payload["error"] == "configuration_error"
    assert next(iter(option)) in payload["message"]


def test_sync_endpoint_rejects_path_like_extension_names(server, write_csv) -> None:
    source = write_csv(["EN", "FR"], {"EN": "Hello", "FR": "Bonjour"})

    response = server(source_path=str(source)).post(
        ENDPOINT, json={"extension_name": "../../outside"}
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert response.get_json()["error"] == "configuration_error"


def test_sync_endpoint_reports_per_language_failures(
    server, theme_project: Path, write_csv
) -> None:
    source = write_csv(["EN", "FR"], {"EN": "Hello", "FR": "Bonjour"})
    translations = theme_project / "themes" / "frontend" / "translations"
    (translations / "frontend.fr.po").write_text("garbage\n", encoding="utf-8")

    response = server(source_path=str(source)).post(ENDPOINT, json={"replace_all": False})

    assert response.status_code == HTTPStatus.OK
    result = response.get_json()["results"][0]
    assert result["succeeded"] is False
    assert "frontend.fr.po" in result["error"]


def test_sync_endpoint_rejects_invalid_settings(client: FlaskClient) -> None:
    response = client.post(ENDPOINT, json={"extension_type": "module"})

    assert response.status_code == HTTPStatus.BAD_REQUEST
    payload = response.get_json()
    assert payload["error"] == "configuration_error"
    assert payload["message"].startswith("Invalid settings: ")


def test_sync_endpoint_maps_missing_extension_to_bad_request(server, write_csv) -> None:
    source = write_csv(["EN", "FR"], {"EN": "Hello", "FR": "Bonjour"})

    response = server(source_path=str(source)).post(
        ENDPOINT, json={"extension_name": "backend"}
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST
    payload = response.get_json()
    assert payload["error"] == "configuration_error"
    assert payload["run_status"] == "failed"


def test_sync_endpoint_maps_parse_errors(server, tmp_path: Path) -> None:
    source = tmp_path / "copy.csv"
    source.write_bytes(b"\xff\xfe\xfa")

    response = server(source_path=str(source)).post(ENDPOINT)

    assert response.status_code == HTTPStatus.UNPROCESSABLE_ENTITY
    assert response.get_json()["error"] == "parse_error"


def test_sync_endpoint_rejects_malformed_json(client: FlaskClient) -> None:
    response = client.post(ENDPOINT, data="{not json", content_type="application/json")

    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert response.get_json()["error"] == "bad_request"


def test_sync_endpoint_rejects_non_object_json(client: FlaskClient) -> None:
    response = client.post(ENDPOINT, json=["fr"])

    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert response.get_json()["message"] == "Request JSON must be an object"
