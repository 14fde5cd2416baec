"""PO file codec built on :mod:`polib`."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import polib

from csv2po.errors import CatalogDecodeError, CatalogWriteError

from .catalog import Catalog, CatalogEntry


def _entry_from_po(po_entry: polib.POEntry) -> CatalogEntry:
    entry = CatalogEntry(
        singular=po_entry.msgid,
        context=po_entry.msgctxt or None,
        translation=po_entry.msgstr,
        comments=po_entry.tcomment.split("\n") if po_entry.tcomment else [],
        extracted_comment=po_entry.comment or "",
        flags=list(po_entry.flags),
        occurrences=[tuple(occurrence) for occurrence in po_entry.occurrences],
        previous_singular=po_entry.previous_msgid or None,
        previous_plural=po_entry.previous_msgid_plural or None,
        previous_context=po_entry.previous_msgctxt or None,
        obsolete=bool(po_entry.obsolete),
    )
    if po_entry.msgid_plural:
        forms = {int(index): text for index, text in po_entry.msgstr_plural.items()}
        entry.translate_plural(
            po_entry.msgid_plural,
            forms.pop(0, ""),
            forms.pop(1, ""),
        )
        entry.extra_plural_translations = forms
    return entry


def _entry_to_po(entry: CatalogEntry) -> polib.POEntry:
    kwargs: dict[str, Any] = {
        "msgid": entry.singular,
        "msgctxt": entry.context or None,
        "tcomment": "\n".join(entry.comments),
        "comment": entry.extracted_comment,
        "flags": list(entry.flags),
        "occurrences": list(entry.occurrences),
        "previous_msgid": entry.previous_singular,
        "previous_msgid_plural": entry.previous_plural,
        "previous_msgctxt": entry.previous_context,
        "obsolete": entry.obsolete,
    }
    if entry.is_plural:
        kwargs["msgid_plural"] = entry.plural
        kwargs["msgstr_plural"] = dict(sorted(entry.plural_forms().items()))
    else:
        kwargs["msgstr"] = entry.translation
    return polib.POEntry(**kwargs)


class PoCatalogCodec:
    """Translate between :class:`Catalog` objects and gettext PO files.

    Everything polib reads from an existing file survives a decode/encode
    round trip: the header comment and fuzzy flag, extracted (``#.``) and
    previous (``#|``) comments and every ``msgstr[n]`` form.
    """

    def __init__(self, *, wrapwidth: int = 78) -> None:
        self._wrapwidth = wrapwidth

    def decode(self, path: Path, language: str) -> Catalog:
        try:
            po_file = polib.pofile(str(path), wrapwidth=self._wrapwidth)
        except (OSError, ValueError) as error:
            raise CatalogDecodeError(language, path, f"Unable to read {path}: {error}") from error

        return Catalog(
            language=language,
            headers={str(key): str(value) for key, value in po_file.metadata.items()},
            entries=[_entry_from_po(po_entry) for po_entry in po_file],
            header_comment=po_file.header or "",
            header_fuzzy=bool(po_file.metadata_is_fuzzy),
        )

    def encode(self, catalog: Catalog, path: Path) -> None:
        po_file = polib.POFile(wrapwidth=self._wrapwidth)
        po_file.header = catalog.header_comment
        po_file.metadata = dict(catalog.headers)
        po_file.metadata_is_fuzzy = catalog.header_fuzzy
        for entry in catalog.entries:
            po_file.append(_entry_to_po(entry))

        try:
            po_file.save(str(path))
        except OSError as error:
            raise CatalogWriteError(
                catalog.language, path, f"Unable to write {path}: {error}"
            ) from error


__all__ = ["PoCatalogCodec"]
