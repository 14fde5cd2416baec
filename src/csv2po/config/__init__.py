"""Settings models, loaders and language policies."""

from .languages import (
    EnabledLanguageOracle,
    KnownLanguageOracle,
    LanguageValidityOracle,
    load_standard_languages,
    oracle_for_settings,
)
from .schema import ConfigurationError, ExtensionType, SyncMode, SyncSettings
from .settings import load_settings, resolve_settings

__all__ = [
    "ConfigurationError",
    "EnabledLanguageOracle",
    "ExtensionType",
    "KnownLanguageOracle",
    "LanguageValidityOracle",
    "SyncMode",
    "SyncSettings",
    "load_settings",
    "load_standard_languages",
    "oracle_for_settings",
    "resolve_settings",
]
