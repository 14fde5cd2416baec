"""Synchronise multilingual CSV spreadsheets into gettext PO catalogues."""

from .errors import (
    CatalogDecodeError,
    CatalogWriteError,
    ConfigurationError,
    Csv2PoError,
    FetchError,
    TableParseError,
)

__all__ = [
    "CatalogDecodeError",
    "CatalogWriteError",
    "ConfigurationError",
    "Csv2PoError",
    "FetchError",
    "TableParseError",
]
