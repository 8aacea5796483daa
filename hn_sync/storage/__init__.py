"""Storage subpackage: persistence backends for synced items."""

from hn_sync.errors import ConfigError
from hn_sync.storage.base import ItemStore
from hn_sync.storage.file import FileItemStore
from hn_sync.storage.sqlite import SqliteItemStore


def open_store(backend: str, uri: str) -> ItemStore:
    if backend == "file":
        return FileItemStore(uri)
    if backend == "sqlite":
        return SqliteItemStore(uri)
    if backend == "postgres":
        from hn_sync.storage.postgres import PostgresItemStore

        return PostgresItemStore(uri)
    raise ConfigError(f"unsupported store backend: {backend!r}")


__all__ = [
    "FileItemStore",
    "ItemStore",
    "SqliteItemStore",
    "open_store",
]
