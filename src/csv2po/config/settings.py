"""Settings loader merging YAML files with command-line or HTTP overrides."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import ValidationError

from .schema import ConfigurationError, SyncSettings, format_validation_error

CONFIG_ENVIRONMENT_VARIABLE = "CSV2PO_CONFIG"

_LOGGER = logging.getLogger(__name__)


def _load_yaml(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except OSError as error:
        raise ConfigurationError(f"Unable to read settings file {path}: {error}") from error
    except yaml.YAMLError as error:
        raise ConfigurationError(f"Settings file {path} is not valid YAML: {error}") from error
    if not isinstance(data, dict):
        raise ConfigurationError("Settings file must define a mapping at the top level")
    return data


def default_settings_path() -> Path | None:
    """Return the settings file named by ``CSV2PO_CONFIG`` when present."""

    raw = os.getenv(CONFIG_ENVIRONMENT_VARIABLE, "").strip()
    return Path(raw).expanduser() if raw else None


def load_settings_payload(path: Path | None = None) -> dict[str, Any]:
    """Return the raw settings mapping stored in ``path`` (or the default file)."""

    target = path or default_settings_path()
    if target is None:
        return {}
    if not target.is_file():
        raise ConfigurationError(f"Settings file not found: {target}")
    _LOGGER.debug("Loading settings from %s", target)
    return _load_yaml(target)


def resolve_settings(
    payload: Mapping[str, Any] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> SyncSettings:
    """Validate ``payload`` with ``overrides`` applied on top of it.

    Overrides whose value is ``None`` are ignored so that unset command-line
    flags never mask values coming from a settings file.
    """

    merged: dict[str, Any] = dict(payload or {})
    for key, value in (overrides or {}).items():
        if value is not None:
            merged[key] = value

    try:
        return SyncSettings.model_validate(merged)
    except ValidationError as error:
        raise ConfigurationError(format_validation_error(error)) from error


def load_settings(
    path: Path | None = None, overrides: Mapping[str, Any] | None = None
) -> SyncSettings:
    """Load the settings file at ``path`` and apply ``overrides``."""

    return resolve_settings(load_settings_payload(path), overrides)


__all__ = [
    "CONFIG_ENVIRONMENT_VARIABLE",
    "default_settings_path",
    "load_settings",
    "load_settings_payload",
    "resolve_settings",
]
