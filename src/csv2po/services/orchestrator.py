"""Sequence a full spreadsheet-to-catalogue run across every language.

The orchestrator resolves where catalogues live, obtains the spreadsheet
(downloading it when a remote URL is configured), discovers the languages it
carries and then loads, synchronises and writes one catalogue per language.
Configuration, download and parse failures stop the run before any catalogue
is touched; catalogue read/write failures only skip the affected language.
Progress is reported through a :class:`SyncObserver` so callers decide how to
present it.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from time import perf_counter
from typing import Any

from csv2po.config.languages import LanguageValidityOracle, oracle_for_settings
from csv2po.config.schema import SyncSettings
from csv2po.errors import CatalogError, ConfigurationError, Csv2PoError

from .catalog import CatalogCodec, Clock, prepare_catalog, save_catalog, utc_now
from .codec import PoCatalogCodec
from .discovery import discover_languages
from .paths import AssetPathResolver, ExtensionPathResolver, OutputLayout, resolve_layout
from .synchronizer import SyncStats, SynchronizerOptions, synchronize_catalog
from .table import CsvTableParser, HttpTableFetcher, SourceTable, TableFetcher, TableParser

_LOGGER = logging.getLogger(__name__)


class RunStatus(str, Enum):
    COMPLETED = "completed"
    EMPTY = "empty"
    FAILED = "failed"


@dataclass(frozen=True)
class LanguageResult:
    """Outcome of processing a single language."""

    language: str
    path: Path
    stats: SyncStats | None = None
    entry_count: int = 0
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "language": self.language,
            "path": str(self.path),
            "succeeded": self.succeeded,
            "entries": self.entry_count,
        }
        if self.stats is not None:
            payload["applied"] = self.stats.applied
            payload["skipped"] = self.stats.skipped
        if self.error:
            payload["error"] = self.error
        return payload


@dataclass
class SyncReport:
    """Summary of a run returned to the CLI and HTTP callers."""

    status: RunStatus
    source_path: Path | None = None
    languages: tuple[str, ...] = ()
    results: list[LanguageResult] = field(default_factory=list)
    fatal_error: Csv2PoError | None = None

    @property
    def succeeded(self) -> list[LanguageResult]:
        return [result for result in self.results if result.succeeded]

    @property
    def failed(self) -> list[LanguageResult]:
        return [result for result in self.results if not result.succeeded]

    @property
    def exit_code(self) -> int:
        if self.status is RunStatus.FAILED:
            return 1
        if self.results and not self.succeeded:
            return 1
        return 0

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "status": self.status.value,
            "languages": list(self.languages),
            "results": [result.as_dict() for result in self.results],
        }
        if self.source_path is not None:
            payload["source"] = str(self.source_path)
        if self.fatal_error is not None:
            payload["error"] = str(self.fatal_error)
        return payload


class SyncObserver:
    """Lifecycle hooks invoked by :class:`SyncOrchestrator`.

    Language hooks run on worker threads when ``max_workers`` is above one.
    """

    def on_start(self, settings: SyncSettings) -> None:
        pass

    def on_fetch(self, url: str, destination: Path) -> None:
        pass

    def on_table_read(self, path: Path, table: SourceTable, languages: tuple[str, ...]) -> None:
        pass

    def on_language_start(self, language: str, path: Path) -> None:
        pass

    def on_language_done(self, result: LanguageResult) -> None:
        pass

    def on_language_failed(self, result: LanguageResult) -> None:
        pass

    def on_fatal(self, error: Csv2PoError) -> None:
        pass

    def on_finish(self, report: SyncReport) -> None:
        pass


class LoggingObserver(SyncObserver):
    """Forward lifecycle events to :mod:`logging`."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or _LOGGER

    def on_fetch(self, url: str, destination: Path) -> None:
        self._logger.info("Downloading %s to %s", url, destination)

    def on_table_read(self, path: Path, table: SourceTable, languages: tuple[str, ...]) -> None:
        self._logger.info(
            "Read %d record(s) from %s; languages: %s",
            len(table),
            path,
            ", ".join(languages) or "none",
        )

    def on_language_start(self, language: str, path: Path) -> None:
        self._logger.info("Processing %s catalogue %s", language, path)

    def on_language_done(self, result: LanguageResult) -> None:
        self._logger.info("Wrote %s with %d entries", result.path, result.entry_count)

    def on_language_failed(self, result: LanguageResult) -> None:
        self._logger.error("Skipped %s: %s", result.language, result.error)

    def on_fatal(self, error: Csv2PoError) -> None:
        self._logger.error("%s", error)


class SyncOrchestrator:
    """Run the spreadsheet-to-catalogue pipeline with injectable collaborators."""

    def __init__(
        self,
        *,
        fetcher: TableFetcher | None = None,
        parser: TableParser | None = None,
        codec: CatalogCodec | None = None,
        oracle: LanguageValidityOracle | None = None,
        resolver: AssetPathResolver | None = None,
        observer: SyncObserver | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self._fetcher = fetcher
        self._parser = parser
        self._codec = codec or PoCatalogCodec()
        self._oracle = oracle
        self._resolver = resolver
        self._observer = observer or LoggingObserver()
        self._clock = clock

    def run(self, settings: SyncSettings) -> SyncReport:
        started = perf_counter()
        self._observer.on_start(settings)

        try:
            layout = resolve_layout(
                settings, self._resolver or ExtensionPathResolver.from_settings(settings)
            )
            source_path = self._obtain_source(settings, layout)
            parser = self._parser or CsvTableParser(delimiter=settings.csv_delimiter)
            table = parser.parse(source_path)
        except Csv2PoError as error:
            self._observer.on_fatal(error)
            report = SyncReport(status=RunStatus.FAILED, fatal_error=error)
            self._observer.on_finish(report)
            return report

        if table.is_empty:
            report = SyncReport(status=RunStatus.EMPTY, source_path=source_path)
            self._observer.on_table_read(source_path, table, ())
            self._observer.on_finish(report)
            return report

        oracle = self._oracle or oracle_for_settings(settings)
        languages = discover_languages(table.header, settings.source_language, oracle)
        self._observer.on_table_read(source_path, table, languages)

        results = self._process_languages(settings, table, layout, languages)
        report = SyncReport(
            status=RunStatus.COMPLETED,
            source_path=source_path,
            languages=languages,
            results=results,
        )
        _LOGGER.debug(
            "Synchronised %d language(s) in %.1f ms",
            len(languages),
            (perf_counter() - started) * 1000,
        )
        self._observer.on_finish(report)
        return report

    def _obtain_source(self, settings: SyncSettings, layout: OutputLayout) -> Path:
        if settings.remote_source_url:
            destination = layout.source_download_path
            fetcher = self._fetcher or HttpTableFetcher(timeout=settings.fetch_timeout)
            self._observer.on_fetch(settings.remote_source_url, destination)
            return fetcher.fetch(settings.remote_source_url, destination)

        if settings.source_path is not None:
            if not settings.source_path.is_file():
                raise ConfigurationError(f"Spreadsheet not found: {settings.source_path}")
            return settings.source_path

        if layout.source_download_path.is_file():
            return layout.source_download_path

        raise ConfigurationError(
            "No spreadsheet source available: set 'remote_source_url' or 'source_path'"
        )

    def _process_languages(
        self,
        settings: SyncSettings,
        table: SourceTable,
        layout: OutputLayout,
        languages: tuple[str, ...],
    ) -> list[LanguageResult]:
        options = SynchronizerOptions(
            mode=settings.mode,
            plural_separator=settings.plural_value_separator,
            source_column=settings.source_language,
            context_column=settings.context_column,
            page_column=settings.page_column,
            plural_column=settings.plural_column,
        )

        def process(language: str) -> LanguageResult:
            return self._process_language(language, table, layout, options)

        workers = min(settings.max_workers, len(languages))
        if workers <= 1:
            return [process(language) for language in languages]

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="csv2po") as executor:
            return list(executor.map(process, languages))

    def _process_language(
        self,
        language: str,
        table: SourceTable,
        layout: OutputLayout,
        options: SynchronizerOptions,
    ) -> LanguageResult:
        path = layout.catalog_path(language)
        self._observer.on_language_start(language, path)

        try:
            catalog = prepare_catalog(language, path, options.mode, self._codec, clock=self._clock)
            stats = synchronize_catalog(catalog, table.records, language, options)
            save_catalog(catalog, path, self._codec)
        except CatalogError as error:
            result = LanguageResult(language=language, path=path, error=str(error))
            self._observer.on_language_failed(result)
            return result

        result = LanguageResult(
            language=language, path=path, stats=stats, entry_count=len(catalog)
        )
        self._observer.on_language_done(result)
        return result


def run_sync(settings: SyncSettings, **collaborators: Any) -> SyncReport:
    """Convenience wrapper building a :class:`SyncOrchestrator` and running it."""

    return SyncOrchestrator(**collaborators).run(settings)


__all__ = [
    "LanguageResult",
    "LoggingObserver",
    "RunStatus",
    "SyncObserver",
    "SyncOrchestrator",
    "SyncReport",
    "run_sync",
]
