"""Language validity oracles backed by the standard list or enabled registry."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Iterable, Mapping, Protocol

import yaml

from .schema import ConfigurationError, SyncSettings

LANGUAGES_FILE = Path(__file__).resolve().parent / "data" / "languages.yaml"


class LanguageValidityOracle(Protocol):
    """Answer whether a lower-cased language identifier may receive a catalogue."""

    def __call__(self, language: str) -> bool: ...


@lru_cache(maxsize=1)
def load_standard_languages() -> Mapping[str, str]:
    """Return the standard language identifiers mapped to their English names."""

    with LANGUAGES_FILE.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    languages = data.get("languages") if isinstance(data, dict) else None
    if not isinstance(languages, dict) or not languages:
        raise ConfigurationError(f"Standard language list missing from {LANGUAGES_FILE}")

    return {str(code).lower(): str(name) for code, name in languages.items()}


class KnownLanguageOracle:
    """Accept any identifier present in the standard language list."""

    def __init__(self, languages: Iterable[str] | None = None) -> None:
        source = load_standard_languages() if languages is None else languages
        self._languages = frozenset(language.lower() for language in source)

    def __call__(self, language: str) -> bool:
        return language in self._languages


class EnabledLanguageOracle:
    """Accept only identifiers registered as enabled for the current site."""

    def __init__(self, enabled: Iterable[str]) -> None:
        self._enabled = frozenset(language.strip().lower() for language in enabled)

    def __call__(self, language: str) -> bool:
        return language in self._enabled

    @property
    def enabled(self) -> frozenset[str]:
        return self._enabled


def oracle_for_settings(settings: SyncSettings) -> LanguageValidityOracle:
    """Select the validity policy requested by ``check_enabled_languages``."""

    if settings.check_enabled_languages:
        return EnabledLanguageOracle(settings.enabled_languages)
    return KnownLanguageOracle()


__all__ = [
    "EnabledLanguageOracle",
    "KnownLanguageOracle",
    "LANGUAGES_FILE",
    "LanguageValidityOracle",
    "load_standard_languages",
    "oracle_for_settings",
]
