"""Exception hierarchy shared by the synchronisation pipeline."""

from __future__ import annotations


class Csv2PoError(Exception):
    """Base class for every error raised by the synchronisation pipeline."""


class ConfigurationError(Csv2PoError, ValueError):
    """Raised when settings are missing, inconsistent or unresolvable."""


class FetchError(Csv2PoError):
    """Raised when the remote spreadsheet cannot be downloaded."""


class TableParseError(Csv2PoError):
    """Raised when the spreadsheet cannot be read as tabular data."""


class CatalogError(Csv2PoError):
    """Base class for per-language catalogue failures."""

    def __init__(self, language: str, path: object, message: str) -> None:
        super().__init__(message)
        self.language = language
        self.path = path


class CatalogDecodeError(CatalogError):
    """Raised when an existing catalogue file cannot be parsed."""


class CatalogWriteError(CatalogError):
    """Raised when a catalogue cannot be written to disk."""


__all__ = [
    "CatalogDecodeError",
    "CatalogError",
    "CatalogWriteError",
    "ConfigurationError",
    "Csv2PoError",
    "FetchError",
    "TableParseError",
]
