"""Tests for loading and validating synchronisation settings."""

from __future__ import annotations

from pathlib import Path

import pytest

from csv2po.config.schema import ExtensionType, SyncMode, SyncSettings
from csv2po.config.settings import (
    CONFIG_ENVIRONMENT_VARIABLE,
    load_settings,
    load_settings_payload,
    resolve_settings,
)
from csv2po.errors import ConfigurationError


@pytest.fixture(autouse=True)
def _no_settings_file(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(CONFIG_ENVIRONMENT_VARIABLE, raising=False)


def _write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "csv2po.yaml"
    path.write_text(content, encoding="utf-8")
    return path


def test_defaults_follow_replace_all_theme_conventions() -> None:
    settings = resolve_settings({"check_enabled_languages": False})

    assert settings.extension_type is ExtensionType.THEME
    assert settings.translations_directory_name == "translations"
    assert settings.output_filename == "translations.csv"
    assert settings.source_language == "en"
    assert settings.mode is SyncMode.REPLACE_ALL
    assert settings.max_workers == 1
    assert settings.fetch_timeout == 30.0
    assert settings.roots_for(ExtensionType.MODULE)[0] == "modules"


@pytest.mark.parametrize(
    ("replace_all", "allow_update", "expected"),
    [
        (True, True, SyncMode.REPLACE_ALL),
        (True, False, SyncMode.REPLACE_ALL),
        (False, True, SyncMode.MERGE_UPDATE),
        (False, False, SyncMode.MERGE_APPEND),
    ],
)
def test_mode_is_derived_from_flags(replace_all, allow_update, expected) -> None:
    settings = resolve_settings(
        {
            "replace_all": replace_all,
            "allow_update": allow_update,
            "check_enabled_languages": False,
        }
    )

    assert settings.mode is expected


def test_yaml_file_is_loaded(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        "extension_type: module\n"
        "extension_name: shop\n"
        "replace_all: 'no'\n"
        "allow_update: 'yes'\n"
        "enabled_languages: FR, de ,fr\n",
    )

    settings = load_settings(path)

    assert settings.extension_type is ExtensionType.MODULE
    assert settings.extension_name == "shop"
    assert settings.mode is SyncMode.MERGE_UPDATE
    assert settings.enabled_languages == ("fr", "de")


def test_environment_variable_names_the_settings_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    path = _write(tmp_path, "check_enabled_languages: false\ndefault_theme: frontend\n")
    monkeypatch.setenv(CONFIG_ENVIRONMENT_VARIABLE, str(path))

    assert load_settings().default_theme == "frontend"


def test_overrides_win_over_file_but_none_is_ignored(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        "check_enabled_languages: false\nextension_name: frontend\nmax_workers: 2\n",
    )

    settings = load_settings(path, {"extension_name": "backend", "max_workers": None})

    assert settings.extension_name == "backend"
    assert settings.max_workers == 2


def test_separator_escapes_are_unescaped() -> None:
    settings = resolve_settings(
        {"check_enabled_languages": False, "plural_value_separator": "\\r\\n"}
    )

    assert settings.plural_value_separator == "\r\n"


def test_blank_names_become_none() -> None:
    settings = resolve_settings(
        {"check_enabled_languages": False, "extension_name": "  ", "remote_source_url": ""}
    )

    assert settings.extension_name is None
    assert settings.remote_source_url is None


def test_extension_roots_can_be_overridden() -> None:
    settings = resolve_settings(
        {
            "check_enabled_languages": False,
            "extension_roots": {"theme": "web/themes", "module": ["web/modules"]},
        }
    )

    assert settings.roots_for(ExtensionType.THEME) == ("web/themes",)
    assert settings.roots_for(ExtensionType.MODULE) == ("web/modules",)


@pytest.mark.parametrize(
    ("payload", "fragment"),
    [
        ({"extension_type": "module", "check_enabled_languages": False}, "extension_name"),
        ({}, "enabled_languages"),
        ({"check_enabled_languages": False, "replace_all": "maybe"}, "replace_all"),
        ({"check_enabled_languages": False, "extension_type": "profile"}, "extension_type"),
        ({"check_enabled_languages": False, "max_workers": 0}, "max_workers"),
        ({"check_enabled_languages": False, "csv_delimiter": ";;"}, "csv_delimiter"),
        ({"check_enabled_languages": False, "output_filename": "a/b.csv"}, "output_filename"),
        ({"check_enabled_languages": False, "source_language": " "}, "source_language"),
        ({"check_enabled_languages": False, "unknown_option": 1}, "unknown_option"),
        ({"check_enabled_languages": False, "extension_name": "../secrets"}, "extension_name"),
        ({"check_enabled_languages": False, "default_theme": ".."}, "default_theme"),
    ],
)
def test_invalid_settings_raise_configuration_error(payload, fragment) -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        resolve_settings(payload)

    message = str(excinfo.value)
    assert message.startswith("Invalid settings: ")
    assert fragment in message


def test_missing_settings_file_is_reported(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="not found"):
        load_settings_payload(tmp_path / "absent.yaml")


@pytest.mark.parametrize("content", ["- just\n- a list\n", "key: [unclosed\n"])
def test_malformed_settings_file_is_reported(tmp_path: Path, content: str) -> None:
    with pytest.raises(ConfigurationError):
        load_settings_payload(_write(tmp_path, content))


def test_settings_are_immutable() -> None:
    settings = SyncSettings(check_enabled_languages=False)

    with pytest.raises(Exception):
        settings.max_workers = 4  # type: ignore[misc]
