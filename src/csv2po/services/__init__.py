"""Service-layer building blocks of the synchronisation pipeline."""

from .catalog import Catalog, CatalogEntry, TranslationKey, new_catalog, prepare_catalog, save_catalog
from .codec import PoCatalogCodec
from .discovery import discover_languages
from .orchestrator import (
    LanguageResult,
    LoggingObserver,
    RunStatus,
    SyncObserver,
    SyncOrchestrator,
    SyncReport,
    run_sync,
)
from .synchronizer import EntrySynchronizer, SynchronizerOptions, synchronize_catalog
from .table import CsvTableParser, HttpTableFetcher, Record, SourceTable

__all__ = [
    "Catalog",
    "CatalogEntry",
    "CsvTableParser",
    "EntrySynchronizer",
    "HttpTableFetcher",
    "LanguageResult",
    "LoggingObserver",
    "PoCatalogCodec",
    "Record",
    "RunStatus",
    "SourceTable",
    "SyncObserver",
    "SyncOrchestrator",
    "SyncReport",
    "SynchronizerOptions",
    "TranslationKey",
    "discover_languages",
    "new_catalog",
    "prepare_catalog",
    "run_sync",
    "save_catalog",
    "synchronize_catalog",
]
