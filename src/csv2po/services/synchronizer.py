"""Apply spreadsheet rows for one language to a translation catalogue.

Every qualifying row (non-empty source and target cells) becomes one catalogue
entry. The :class:`~csv2po.config.schema.SyncMode` decides whether an entry is
created or reused, ``PAGE`` labels open commented sections and ``PLURAL``
rows split both cells into singular and plural forms.

A plural row resolves its entry again on the singular form. The section
comment block opened by the row is attached to that final entry, so plural
entries carry page comments like any other entry instead of starting bare.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Iterable

from csv2po.config.schema import SyncMode

from .catalog import Catalog, CatalogEntry
from .table import Record

_LOGGER = logging.getLogger(__name__)

SECTION_RULE = "-" * 69
SECTION_PREFIX = "------ "
SECTION_MARKER = "------"


@dataclass(frozen=True)
class SynchronizerOptions:
    """Column names and policies used while applying rows."""

    mode: SyncMode = SyncMode.REPLACE_ALL
    plural_separator: str = os.linesep
    source_column: str = "en"
    context_column: str = "context"
    page_column: str = "page"
    plural_column: str = "plural"


@dataclass
class SyncStats:
    """Counters describing a single synchronisation pass."""

    created: int = 0
    updated: int = 0
    replaced: int = 0
    skipped: int = 0
    plurals: int = 0

    @property
    def applied(self) -> int:
        return self.created + self.updated + self.replaced


def section_comments(label: str) -> list[str]:
    """Return the comment block that opens a new ``label`` section."""

    return [SECTION_RULE, f"{SECTION_PREFIX}{label.upper()}", SECTION_MARKER]


def split_plural(text: str, separator: str) -> list[str]:
    """Split ``text`` on ``separator``; an empty separator never splits."""

    if not separator:
        return [text]
    return text.split(separator)


class EntrySynchronizer:
    """Mutate a catalogue in place from the rows of a spreadsheet."""

    def __init__(self, options: SynchronizerOptions) -> None:
        self._options = options

    @property
    def options(self) -> SynchronizerOptions:
        return self._options

    def synchronize(
        self, catalog: Catalog, records: Iterable[Record], language: str
    ) -> SyncStats:
        stats = SyncStats()
        previous_label = ""

        for record in records:
            source = record.cell(self._options.source_column)
            target = record.cell(language)
            if not source or not target:
                stats.skipped += 1
                continue

            context = record.cell(self._options.context_column) or None
            entry, existing = self._resolve_entry(catalog, context, source)

            section: list[str] = []
            label = record.cell(self._options.page_column)
            if label and label.casefold() != previous_label.casefold():
                section = section_comments(label)
                previous_label = label

            if record.cell(self._options.plural_column):
                entry, existing = self._apply_plural(catalog, entry, existing, source, target)
                if entry.is_plural:
                    stats.plurals += 1
            else:
                entry.translate(target)

            if section:
                entry.add_comments(section)
            self._store(catalog, entry, existing, stats)

        _LOGGER.debug(
            "Synchronised %s: %d created, %d updated, %d replaced, %d skipped",
            language,
            stats.created,
            stats.updated,
            stats.replaced,
            stats.skipped,
        )
        return stats

    def _resolve_entry(
        self, catalog: Catalog, context: str | None, source: str
    ) -> tuple[CatalogEntry, CatalogEntry | None]:
        """Return the entry to mutate and the catalogue entry it supersedes, if any."""

        mode = self._options.mode
        existing = catalog.find(context, source)

        if mode is SyncMode.MERGE_UPDATE and existing is not None:
            return existing, existing
        if mode is SyncMode.REPLACE_ALL:
            return CatalogEntry(singular=source, context=context), existing
        return CatalogEntry(singular=source, context=context), None

    def _apply_plural(
        self,
        catalog: Catalog,
        entry: CatalogEntry,
        existing: CatalogEntry | None,
        source: str,
        target: str,
    ) -> tuple[CatalogEntry, CatalogEntry | None]:
        separator = self._options.plural_separator
        source_parts = split_plural(source, separator)
        target_parts = split_plural(target, separator)

        if len(target_parts) != 2 or len(source_parts) != len(target_parts):
            entry.translate(target)
            return entry, existing

        singular, plural = source_parts
        plural_entry, plural_existing = self._resolve_entry(catalog, entry.context, singular)
        plural_entry.translate_plural(plural, target_parts[0], target_parts[1])
        return plural_entry, plural_existing

    def _store(
        self,
        catalog: Catalog,
        entry: CatalogEntry,
        existing: CatalogEntry | None,
        stats: SyncStats,
    ) -> None:
        if existing is entry:
            stats.updated += 1
        elif existing is not None:
            catalog.replace(existing, entry)
            stats.replaced += 1
        else:
            catalog.add(entry)
            stats.created += 1


def synchronize_catalog(
    catalog: Catalog,
    records: Iterable[Record],
    language: str,
    options: SynchronizerOptions,
) -> SyncStats:
    """Apply ``records`` to ``catalog`` for ``language`` using ``options``."""

    return EntrySynchronizer(options).synchronize(catalog, records, language)


__all__ = [
    "EntrySynchronizer",
    "SECTION_MARKER",
    "SECTION_PREFIX",
    "SECTION_RULE",
    "SyncStats",
    "SynchronizerOptions",
    "section_comments",
    "split_plural",
    "synchronize_catalog",
]
