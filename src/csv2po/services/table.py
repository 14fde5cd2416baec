"""Read the translation spreadsheet and download it from a remote location."""

from __future__ import annotations

import csv
import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import requests

from csv2po.errors import FetchError, TableParseError

_LOGGER = logging.getLogger(__name__)


class Record(Mapping[str, str]):
    """Read-only spreadsheet row whose column lookups ignore case."""

    __slots__ = ("_cells", "_columns")

    def __init__(self, cells: Mapping[str, str]) -> None:
        self._columns = tuple(cells)
        self._cells = {column.casefold(): value for column, value in cells.items()}

    def __getitem__(self, column: str) -> str:
        return self._cells[column.casefold()]

    def __contains__(self, column: object) -> bool:
        return isinstance(column, str) and column.casefold() in self._cells

    def __iter__(self) -> Iterator[str]:
        return iter(self._columns)

    def __len__(self) -> int:
        return len(self._columns)

    def __repr__(self) -> str:
        cells = {column: self[column] for column in self._columns}
        return f"Record({cells!r})"

    def cell(self, column: str) -> str:
        """Return the trimmed value of ``column`` or an empty string."""

        return (self._cells.get(column.casefold()) or "").strip()


@dataclass(frozen=True)
class SourceTable:
    """Header row and data rows parsed from the spreadsheet."""

    header: tuple[str, ...]
    records: tuple[Record, ...]

    @classmethod
    def from_rows(
        cls, header: tuple[str, ...] | list[str], rows: list[Mapping[str, str]]
    ) -> SourceTable:
        columns = tuple(header)
        records = tuple(
            Record({column: str(row.get(column) or "") for column in columns})
            for row in rows
        )
        return cls(header=columns, records=records)

    @property
    def is_empty(self) -> bool:
        return not self.records

    def __len__(self) -> int:
        return len(self.records)


class TableParser(Protocol):
    """Turn a local spreadsheet file into a :class:`SourceTable`."""

    def parse(self, path: Path) -> SourceTable: ...


class TableFetcher(Protocol):
    """Download a remote spreadsheet verbatim into ``destination``."""

    def fetch(self, url: str, destination: Path) -> Path: ...


class CsvTableParser:
    """Parse comma separated exports produced by spreadsheet applications."""

    def __init__(self, *, delimiter: str = ",", encoding: str = "utf-8-sig") -> None:
        self._delimiter = delimiter
        self._encoding = encoding

    def parse(self, path: Path) -> SourceTable:
        """Parse ``path``; columns with a blank header cell are dropped."""

        try:
            with path.open("r", encoding=self._encoding, newline="") as handle:
                reader = csv.DictReader(handle, delimiter=self._delimiter, restval="")
                header = reader.fieldnames
                if not header:
                    raise TableParseError(f"{path} has no header row")
                named = [(original.strip(), original) for original in header if original.strip()]
                if not named:
                    raise TableParseError(f"{path} has no named header column")
                if len(named) < len(header):
                    _LOGGER.debug(
                        "Ignoring %d unnamed column(s) in %s", len(header) - len(named), path
                    )
                rows = [
                    {column: row.get(original) or "" for column, original in named}
                    for row in reader
                ]
        except FileNotFoundError as error:
            raise TableParseError(f"Spreadsheet not found: {path}") from error
        except (OSError, UnicodeDecodeError, csv.Error) as error:
            raise TableParseError(f"Unable to parse {path}: {error}") from error

        columns = [column for column, _ in named]
        table = SourceTable.from_rows(columns, rows)
        _LOGGER.debug("Parsed %d record(s) with columns %s from %s", len(table), columns, path)
        return table


class HttpTableFetcher:
    """Fetch spreadsheets over HTTP(S) using :mod:`requests`."""

    def __init__(
        self, *, timeout: float = 30.0, session: requests.Session | None = None
    ) -> None:
        self._timeout = timeout
        self._session = session or requests.Session()

    def fetch(self, url: str, destination: Path) -> Path:
        try:
            response = self._session.get(url, timeout=self._timeout)
            response.raise_for_status()
        except requests.RequestException as error:
            raise FetchError(f"Unable to download {url}: {error}") from error

        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_bytes(response.content)
        except OSError as error:
            raise FetchError(f"Unable to store {url} at {destination}: {error}") from error

        _LOGGER.info("Downloaded %d byte(s) from %s to %s", len(response.content), url, destination)
        return destination


__all__ = [
    "CsvTableParser",
    "HttpTableFetcher",
    "Record",
    "SourceTable",
    "TableFetcher",
    "TableParser",
]
