"""Pydantic models describing the synchronisation settings."""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Sequence

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)
from typing_extensions import Self

from csv2po.errors import ConfigurationError


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


class ExtensionType(str, Enum):
    """Kind of extension whose ``translations`` directory receives catalogues."""

    THEME = "theme"
    MODULE = "module"


class SyncMode(str, Enum):
    """How incoming rows are applied to a language catalogue."""

    REPLACE_ALL = "replace_all"
    MERGE_UPDATE = "merge_update"
    MERGE_APPEND = "merge_append"

    @classmethod
    def from_flags(cls, *, replace_all: bool, allow_update: bool) -> SyncMode:
        if replace_all:
            return cls.REPLACE_ALL
        if allow_update:
            return cls.MERGE_UPDATE
        return cls.MERGE_APPEND

    @property
    def rebuilds_catalog(self) -> bool:
        return self is SyncMode.REPLACE_ALL


DEFAULT_EXTENSION_ROOTS: Mapping[ExtensionType, tuple[str, ...]] = {
    ExtensionType.THEME: ("themes", "themes/custom", "web/themes/custom"),
    ExtensionType.MODULE: ("modules", "modules/custom", "web/modules/custom"),
}

_SEPARATOR_ESCAPES = {"\\r\\n": "\r\n", "\\n": "\n", "\\r": "\r", "\\t": "\t"}


def _coerce_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"1", "true", "yes", "on"}:
            return True
        if lowered in {"0", "false", "no", "off", ""}:
            return False
    if value is None:
        return False
    if isinstance(value, int) and value in {0, 1}:
        return bool(value)
    raise ConfigurationError("Boolean flags must be explicit true/false values")


def _normalise_language_list(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, Sequence):
        raise ConfigurationError("Language lists must be a sequence or comma separated string")
    languages = (str(entry).strip().lower() for entry in value)
    return tuple(dict.fromkeys(language for language in languages if language))


class SyncSettings(ImmutableModel):
    """Settings resolved once per run and threaded through every component."""

    extension_type: ExtensionType = ExtensionType.THEME
    extension_name: str | None = None
    default_theme: str | None = None
    translations_directory_name: str = "translations"
    remote_source_url: str | None = None
    source_path: Path | None = None
    output_filename: str = "translations.csv"
    replace_all: bool = True
    allow_update: bool = False
    plural_value_separator: str = os.linesep
    check_enabled_languages: bool = True
    enabled_languages: tuple[str, ...] = ()
    source_language: str = "en"
    context_column: str = "context"
    page_column: str = "page"
    plural_column: str = "plural"
    csv_delimiter: str = ","
    fetch_timeout: float = Field(default=30.0, gt=0)
    max_workers: int = Field(default=1, ge=1)
    project_root: Path = Path(".")
    extension_roots: Mapping[ExtensionType, tuple[str, ...]] = Field(
        default_factory=lambda: dict(DEFAULT_EXTENSION_ROOTS)
    )

    @field_validator(
        "replace_all", "allow_update", "check_enabled_languages", mode="before"
    )
    @classmethod
    def _coerce_flags(cls, value: Any) -> bool:
        return _coerce_boolean(value)

    @field_validator("enabled_languages", mode="before")
    @classmethod
    def _coerce_languages(cls, value: Any) -> tuple[str, ...]:
        return _normalise_language_list(value)

    @field_validator(
        "extension_name", "default_theme", "remote_source_url", mode="before"
    )
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("extension_name", "default_theme")
    @classmethod
    def _validate_extension_name(cls, value: str | None) -> str | None:
        if value is None:
            return value
        if value in {".", ".."} or "/" in value or "\\" in value:
            raise ConfigurationError(f"'{value}' must be a single path component")
        return value

    @field_validator("source_language", "context_column", "page_column", "plural_column")
    @classmethod
    def _lowercase_columns(cls, value: str) -> str:
        normalised = value.strip().lower()
        if not normalised:
            raise ConfigurationError("Column names must not be empty")
        return normalised

    @field_validator("translations_directory_name", "output_filename")
    @classmethod
    def _validate_filename(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ConfigurationError("Directory and file names must not be empty")
        if "/" in stripped or "\\" in stripped:
            raise ConfigurationError(f"'{stripped}' must be a single path component")
        return stripped

    @field_validator("plural_value_separator", mode="before")
    @classmethod
    def _unescape_separator(cls, value: Any) -> Any:
        if isinstance(value, str):
            for escaped, literal in _SEPARATOR_ESCAPES.items():
                value = value.replace(escaped, literal)
        return value

    @field_validator("csv_delimiter")
    @classmethod
    def _validate_delimiter(cls, value: str) -> str:
        if len(value) != 1:
            raise ConfigurationError("'csv_delimiter' must be a single character")
        return value

    @field_validator("extension_roots", mode="before")
    @classmethod
    def _coerce_roots(cls, value: Any) -> Mapping[str, tuple[str, ...]]:
        if value is None:
            return dict(DEFAULT_EXTENSION_ROOTS)
        if not isinstance(value, Mapping):
            raise ConfigurationError("'extension_roots' must map extension types to directories")
        roots: dict[str, tuple[str, ...]] = {}
        for key, directories in value.items():
            if isinstance(directories, str):
                directories = [directories]
            roots[str(getattr(key, "value", key))] = tuple(str(entry) for entry in directories)
        return roots

    @model_validator(mode="after")
    def _validate_extension(self) -> Self:
        if self.extension_type is ExtensionType.MODULE and not self.extension_name:
            raise ConfigurationError("Option 'extension_name' is required for modules")
        if self.check_enabled_languages and not self.enabled_languages:
            raise ConfigurationError(
                "Option 'enabled_languages' must list at least one language "
                "when 'check_enabled_languages' is set"
            )
        return self

    @property
    def mode(self) -> SyncMode:
        return SyncMode.from_flags(
            replace_all=self.replace_all, allow_update=self.allow_update
        )

    def roots_for(self, extension_type: ExtensionType) -> tuple[str, ...]:
        return tuple(self.extension_roots.get(extension_type, ()))


def format_validation_error(error: ValidationError) -> str:
    """Return a concise human-readable description of validation issues."""

    messages: list[str] = []
    for issue in error.errors():
        location = ".".join(str(part) for part in issue.get("loc", ()))
        message = issue.get("msg", "Invalid value")
        message = message.removeprefix("Value error, ")
        if location:
            messages.append(f"{location}: {message}")
        else:
            messages.append(message)

    details = "; ".join(messages) if messages else str(error)
    return f"Invalid settings: {details}"


__all__ = [
    "DEFAULT_EXTENSION_ROOTS",
    "ConfigurationError",
    "ExtensionType",
    "ImmutableModel",
    "SyncMode",
    "SyncSettings",
    "format_validation_error",
]
