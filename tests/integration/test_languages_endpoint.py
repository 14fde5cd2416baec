"""Integration tests for the language listing endpoint."""

from http import HTTPStatus

from flask.testing import FlaskClient


def test_languages_endpoint_lists_standard_codes(client: FlaskClient) -> None:
    response = client.get("/api/v1/languages/")

    assert response.status_code == HTTPStatus.OK
    languages = response.get_json()["languages"]
    assert {"code": "fr", "name": "French"} in languages
    assert len({entry["code"] for entry in languages}) == len(languages)
