"""In-memory translation catalogues and the helpers that create or load them.

A :class:`Catalog` mirrors one language's PO file: an ordered header block
and an ordered list of entries. Lookups are keyed on ``(context, source)``
but the list may hold several entries sharing a key, which is how append-only
merges keep earlier translations around.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Iterator, NamedTuple, Protocol

from csv2po.config.schema import SyncMode

_LOGGER = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M+0000"
DEFAULT_PLURAL_FORMS = "nplurals=2; plural=(n>1);"
CREATION_DATE_HEADER = "POT-Creation-Date"
REVISION_DATE_HEADER = "PO-Revision-Date"

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """Render ``moment`` the way gettext headers expect, in UTC."""

    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.strftime(TIMESTAMP_FORMAT)


class TranslationKey(NamedTuple):
    """Identity of an entry inside one catalogue."""

    context: str
    source: str

    @classmethod
    def of(cls, context: str | None, source: str) -> TranslationKey:
        return cls(context or "", source)


@dataclass(eq=False)
class CatalogEntry:
    """One translatable unit of a catalogue.

    ``translation`` and ``plural_translation`` hold plural forms 0 and 1;
    ``extra_plural_translations`` keeps forms 2 and above for languages with
    more than two plural forms.
    """

    singular: str
    context: str | None = None
    translation: str = ""
    plural: str | None = None
    plural_translation: str | None = None
    extra_plural_translations: dict[int, str] = field(default_factory=dict)
    comments: list[str] = field(default_factory=list)
    extracted_comment: str = ""
    flags: list[str] = field(default_factory=list)
    occurrences: list[tuple[str, str]] = field(default_factory=list)
    previous_singular: str | None = None
    previous_plural: str | None = None
    previous_context: str | None = None
    obsolete: bool = False

    @property
    def key(self) -> TranslationKey:
        return TranslationKey.of(self.context, self.singular)

    @property
    def is_plural(self) -> bool:
        return self.plural is not None

    def plural_forms(self) -> dict[int, str]:
        """Return every plural form indexed the way ``msgstr[n]`` numbers them."""

        forms = {0: self.translation, 1: self.plural_translation or ""}
        forms.update(self.extra_plural_translations)
        return forms

    def translate(self, translation: str) -> None:
        self.translation = translation

    def translate_plural(
        self, plural: str, translation: str, plural_translation: str
    ) -> None:
        self.plural = plural
        self.translation = translation
        self.plural_translation = plural_translation

    def add_comments(self, lines: list[str]) -> None:
        """Append ``lines`` unless the same block is already attached."""

        width = len(lines)
        if not width:
            return
        for start in range(len(self.comments) - width + 1):
            if self.comments[start : start + width] == lines:
                return
        self.comments.extend(lines)


@dataclass
class Catalog:
    """A language's header block and ordered entries.

    Entries must be added through :meth:`add` and :meth:`replace` so that the
    key index used by :meth:`find` stays in step with ``entries``.
    """

    language: str
    headers: dict[str, str] = field(default_factory=dict)
    entries: list[CatalogEntry] = field(default_factory=list)
    header_comment: str = ""
    header_fuzzy: bool = False
    _index: dict[TranslationKey, CatalogEntry] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )
    _members: set[int] = field(default_factory=set, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        for entry in self.entries:
            self._register(entry)

    def __iter__(self) -> Iterator[CatalogEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def _register(self, entry: CatalogEntry) -> None:
        self._members.add(id(entry))
        if not entry.obsolete:
            self._index.setdefault(entry.key, entry)

    def _reindex(self, key: TranslationKey) -> None:
        self._index.pop(key, None)
        for entry in self.entries:
            if not entry.obsolete and entry.key == key:
                self._index[key] = entry
                return

    def find(self, context: str | None, source: str) -> CatalogEntry | None:
        """Return the first live entry registered under ``(context, source)``."""

        return self._index.get(TranslationKey.of(context, source))

    def contains(self, entry: CatalogEntry) -> bool:
        return id(entry) in self._members

    def add(self, entry: CatalogEntry) -> CatalogEntry:
        """Append ``entry`` unless this exact entry is already part of the catalogue."""

        if not self.contains(entry):
            self.entries.append(entry)
            self._register(entry)
        return entry

    def replace(self, current: CatalogEntry, replacement: CatalogEntry) -> CatalogEntry:
        """Put ``replacement`` at the position held by ``current``."""

        if not self.contains(current):
            return self.add(replacement)

        position = next(
            index for index, candidate in enumerate(self.entries) if candidate is current
        )
        self.entries[position] = replacement
        self._members.discard(id(current))
        self._members.add(id(replacement))
        self._reindex(current.key)
        if replacement.key != current.key:
            self._reindex(replacement.key)
        return replacement

    def keys(self) -> list[TranslationKey]:
        return [entry.key for entry in self.entries if not entry.obsolete]


class CatalogCodec(Protocol):
    """Read and write catalogues in their on-disk representation."""

    def decode(self, path: Path, language: str) -> Catalog: ...

    def encode(self, catalog: Catalog, path: Path) -> None: ...


def default_headers(language: str, *, now: datetime) -> dict[str, str]:
    return {
        "Language": language,
        "MIME-Version": "1.0",
        "Content-Type": "text/plain; charset=UTF-8",
        "Content-Transfer-Encoding": "8bit",
        "Plural-Forms": DEFAULT_PLURAL_FORMS,
        CREATION_DATE_HEADER: format_timestamp(now),
    }


def new_catalog(language: str, *, now: datetime | None = None) -> Catalog:
    """Return an empty catalogue carrying the standard gettext headers."""

    return Catalog(language=language, headers=default_headers(language, now=now or utc_now()))


def prepare_catalog(
    language: str,
    path: Path,
    mode: SyncMode,
    codec: CatalogCodec,
    *,
    clock: Clock = utc_now,
) -> Catalog:
    """Return the catalogue that ``language`` rows will be applied to.

    Rebuilds ignore whatever exists at ``path``. Merges decode the existing
    file and fall back to a fresh catalogue when there is none. The revision
    timestamp is refreshed in both cases; decoding failures propagate as
    :class:`~csv2po.errors.CatalogDecodeError`.
    """

    now = clock()
    if mode.rebuilds_catalog or not path.exists():
        catalog = new_catalog(language, now=now)
        _LOGGER.debug("Starting a fresh %s catalogue for %s", language, path)
    else:
        catalog = codec.decode(path, language)
        _LOGGER.debug("Merging into %d existing %s entries from %s", len(catalog), language, path)

    catalog.headers[REVISION_DATE_HEADER] = format_timestamp(now)
    return catalog


def save_catalog(catalog: Catalog, path: Path, codec: CatalogCodec) -> Path:
    """Persist ``catalog`` at ``path``, replacing any previous content."""

    codec.encode(catalog, path)
    _LOGGER.debug("Wrote %d %s entries to %s", len(catalog), catalog.language, path)
    return path


__all__ = [
    "Catalog",
    "CatalogCodec",
    "CatalogEntry",
    "Clock",
    "DEFAULT_PLURAL_FORMS",
    "TIMESTAMP_FORMAT",
    "TranslationKey",
    "default_headers",
    "format_timestamp",
    "new_catalog",
    "prepare_catalog",
    "save_catalog",
    "utc_now",
]
