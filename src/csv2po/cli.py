"""Command-line entry point for synchronising spreadsheets into PO catalogues."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Sequence, TextIO

from csv2po.config.languages import load_standard_languages
from csv2po.config.schema import SyncSettings
from csv2po.config.settings import load_settings
from csv2po.errors import Csv2PoError
from csv2po.services.orchestrator import (
    LanguageResult,
    SyncObserver,
    SyncOrchestrator,
    SyncReport,
)
from csv2po.services.table import SourceTable
from csv2po.version import get_project_version


class ConsoleObserver(SyncObserver):
    """Print progress messages for interactive runs."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream or sys.stdout

    def _emit(self, message: str) -> None:
        print(message, file=self._stream)

    def on_fetch(self, url: str, destination: Path) -> None:
        self._emit(f"Downloading {url}...")

    def on_table_read(self, path: Path, table: SourceTable, languages: tuple[str, ...]) -> None:
        if table.is_empty:
            self._emit(f"{path} has no rows; nothing to do")
            return
        self._emit(f"Read {len(table)} row(s) from {path}")
        if not languages:
            self._emit("No enabled language columns found")

    def on_language_start(self, language: str, path: Path) -> None:
        self._emit(f"Treating {path}...")

    def on_language_done(self, result: LanguageResult) -> None:
        self._emit(f"[{result.language}] {result.path} generated ({result.entry_count} entries)")

    def on_language_failed(self, result: LanguageResult) -> None:
        self._emit(f"[{result.language}] failed: {result.error}")

    def on_fatal(self, error: Csv2PoError) -> None:
        self._emit(f"error: {error}")

    def on_finish(self, report: SyncReport) -> None:
        if report.results:
            self._emit(
                f"Done: {len(report.succeeded)} catalogue(s) written, "
                f"{len(report.failed)} failed"
            )


def _add_sync_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "source_path",
        nargs="?",
        type=Path,
        help="Local CSV file (ignored when --remote-source-url is given)",
    )
    parser.add_argument("--config", type=Path, help="YAML settings file")
    parser.add_argument("--extension-type", choices=["theme", "module"])
    parser.add_argument("--extension-name", help="Theme or module machine name")
    parser.add_argument("--translations-directory-name")
    parser.add_argument("--remote-source-url", help="Download the CSV from this URL first")
    parser.add_argument("--output-filename", help="File name of the downloaded CSV copy")
    parser.add_argument(
        "--replace-all",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Rebuild every catalogue from scratch (default)",
    )
    parser.add_argument(
        "--allow-update",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="When merging, update matching entries instead of appending",
    )
    parser.add_argument(
        "--plural-value-separator",
        help="Separator between singular and plural forms in a cell (\\n by default)",
    )
    parser.add_argument(
        "--check-enabled-languages",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Accept only --enabled-language columns instead of any standard language",
    )
    parser.add_argument(
        "--enabled-language",
        dest="enabled_languages",
        action="append",
        help="Enabled language identifier (repeatable)",
    )
    parser.add_argument("--source-language", help="Column holding the source text")
    parser.add_argument("--project-root", type=Path)
    parser.add_argument("--max-workers", type=int)


_SETTING_ARGUMENTS = (
    "source_path",
    "extension_type",
    "extension_name",
    "translations_directory_name",
    "remote_source_url",
    "output_filename",
    "replace_all",
    "allow_update",
    "plural_value_separator",
    "check_enabled_languages",
    "enabled_languages",
    "source_language",
    "project_root",
    "max_workers",
)


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="csv2po",
        description="Synchronise a translation spreadsheet into gettext PO catalogues.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {get_project_version()}"
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="Increase logging output"
    )
    subcommands = parser.add_subparsers(dest="command", required=True)

    sync = subcommands.add_parser("sync", help="Convert the spreadsheet into PO files")
    _add_sync_arguments(sync)

    subcommands.add_parser("languages", help="List the standard language identifiers")
    return parser


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _settings_from_arguments(args: argparse.Namespace) -> SyncSettings:
    overrides: dict[str, Any] = {name: getattr(args, name) for name in _SETTING_ARGUMENTS}
    return load_settings(args.config, overrides)


def _list_languages() -> int:
    for code, name in load_standard_languages().items():
        print(f"{code}\t{name}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for running synchronisations from the command line."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    if args.command == "languages":
        return _list_languages()

    observer = ConsoleObserver()
    try:
        settings = _settings_from_arguments(args)
    except Csv2PoError as error:
        observer.on_fatal(error)
        return 1

    report = SyncOrchestrator(observer=observer).run(settings)
    return report.exit_code


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
