"""Map spreadsheet header columns to the languages that receive catalogues."""

from __future__ import annotations

from typing import Callable, Iterable


def discover_languages(
    header: Iterable[str],
    source_column: str,
    is_valid_language: Callable[[str], bool],
) -> tuple[str, ...]:
    """Return the lower-cased language identifiers found in ``header``.

    The source column is skipped whatever its case, columns rejected by
    ``is_valid_language`` are ignored and repeated languages keep their first
    position. An empty result is a valid outcome.
    """

    source = source_column.strip().lower()
    languages: dict[str, None] = {}

    for column in header:
        candidate = column.strip().lower()
        if not candidate or candidate == source or candidate in languages:
            continue
        if is_valid_language(candidate):
            languages[candidate] = None

    return tuple(languages)


__all__ = ["discover_languages"]
