"""HN Sync package."""

from hn_sync.config import SyncConfig, check_supported
from hn_sync.engine import Lag, SyncEngine, SyncReport, plan_batches
from hn_sync.errors import (
    ConfigError,
    DecodeError,
    EmptyStoreError,
    FetchError,
    StoreError,
    SyncError,
)

# Ingest
from hn_sync.ingest.fetcher import BatchFetcher
from hn_sync.ingest.hub import NewsHub
from hn_sync.ingest.item import Item, parse_sql_value

# Storage
from hn_sync.storage import (
    FileItemStore,
    ItemStore,
    SqliteItemStore,
    open_store,
)

__all__ = [
    # config
    "SyncConfig",
    "check_supported",
    # engine
    "Lag",
    "SyncEngine",
    "SyncReport",
    "plan_batches",
    # errors
    "ConfigError",
    "DecodeError",
    "EmptyStoreError",
    "FetchError",
    "StoreError",
    "SyncError",
    # Ingest
    "BatchFetcher",
    "NewsHub",
    "Item",
    "parse_sql_value",
    # Storage
    "FileItemStore",
    "ItemStore",
    "SqliteItemStore",
    "open_store",
]
