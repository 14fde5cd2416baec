"""Locate the extension that owns the catalogues and derive output paths."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Protocol, Sequence

from csv2po.config.schema import ExtensionType, SyncSettings
from csv2po.errors import ConfigurationError


class AssetPathResolver(Protocol):
    """Return the base directory of a named theme or module."""

    def resolve(self, extension_type: ExtensionType, name: str) -> Path: ...


class ExtensionPathResolver:
    """Search the configured extension roots for a directory named after the extension."""

    def __init__(
        self,
        project_root: Path,
        roots: Mapping[ExtensionType, Sequence[str]],
    ) -> None:
        self._project_root = project_root
        self._roots = roots

    @classmethod
    def from_settings(cls, settings: SyncSettings) -> ExtensionPathResolver:
        return cls(settings.project_root, settings.extension_roots)

    def candidates(self, extension_type: ExtensionType, name: str) -> list[Path]:
        return [
            self._project_root / root / name
            for root in self._roots.get(extension_type, ())
        ]

    def resolve(self, extension_type: ExtensionType, name: str) -> Path:
        candidates = self.candidates(extension_type, name)
        for candidate in candidates:
            if candidate.is_dir():
                return candidate

        searched = ", ".join(str(candidate) for candidate in candidates) or "no configured roots"
        raise ConfigurationError(
            f"Unable to locate {extension_type.value} '{name}' (searched {searched})"
        )


@dataclass(frozen=True)
class OutputLayout:
    """Where the spreadsheet copy and the per-language catalogues live."""

    extension_name: str
    translations_directory: Path
    source_filename: str

    @property
    def source_download_path(self) -> Path:
        return self.translations_directory / self.source_filename

    def catalog_path(self, language: str) -> Path:
        return self.translations_directory / f"{self.extension_name}.{language}.po"


def resolve_extension_name(settings: SyncSettings) -> str:
    """Return the extension name, defaulting themes to ``default_theme``."""

    if settings.extension_name:
        return settings.extension_name
    if settings.extension_type is ExtensionType.MODULE:
        raise ConfigurationError("Option 'extension_name' is required for modules")
    if settings.default_theme:
        return settings.default_theme
    raise ConfigurationError(
        "Option 'extension_name' is missing and no 'default_theme' is configured"
    )


def resolve_layout(settings: SyncSettings, resolver: AssetPathResolver) -> OutputLayout:
    """Resolve the output layout for ``settings`` using ``resolver``."""

    name = resolve_extension_name(settings)
    base = resolver.resolve(settings.extension_type, name)
    return OutputLayout(
        extension_name=name,
        translations_directory=base / settings.translations_directory_name,
        source_filename=settings.output_filename,
    )


__all__ = [
    "AssetPathResolver",
    "ExtensionPathResolver",
    "OutputLayout",
    "resolve_extension_name",
    "resolve_layout",
]
