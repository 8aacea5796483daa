from __future__ import annotations

import sqlite3
from typing import Sequence

from hn_sync.errors import EmptyStoreError, StoreError
from hn_sync.ingest.item import COLUMNS, Item
from hn_sync.storage.base import ItemStore

CREATE_ITEMS_TABLE = """
CREATE TABLE IF NOT EXISTS items (
    id INTEGER NOT NULL PRIMARY KEY,
    deleted INTEGER DEFAULT 0,
    type VARCHAR(16) DEFAULT NULL,
    who VARCHAR(255) DEFAULT NULL,
    time INTEGER DEFAULT NULL,
    dead INTEGER DEFAULT 0,
    kids TEXT DEFAULT NULL,
    title TEXT DEFAULT NULL,
    content TEXT DEFAULT NULL,
    score INTEGER DEFAULT NULL,
    url TEXT DEFAULT NULL,
    parent INTEGER DEFAULT NULL
)
"""

INSERT_ITEM = (
    f"INSERT INTO items ({', '.join(COLUMNS)}) "
    f"VALUES ({', '.join('?' for _ in COLUMNS)}) "
    "ON CONFLICT (id) DO NOTHING"
)


class SqliteItemStore(ItemStore):
    backend = "sqlite"

    def __init__(self, uri: str) -> None:
        self.uri = uri
        try:
            self.conn = sqlite3.connect(uri)
            with self.conn:
                self.conn.execute(CREATE_ITEMS_TABLE)
        except sqlite3.Error as exc:
            raise StoreError(f"cannot open sqlite store {uri}: {exc}") from exc

    def last_known_id(self) -> int:
        try:
            row = self.conn.execute("SELECT max(id) FROM items").fetchone()
        except sqlite3.Error as exc:
            raise StoreError(f"cannot read last item id: {exc}") from exc
        if row is None or row[0] is None:
            raise EmptyStoreError(f"no items stored in {self.uri}")
        return int(row[0])

    def store_batch(self, items: Sequence[Item]) -> None:
        if not items:
            return
        try:
            with self.conn:
                self.conn.executemany(INSERT_ITEM, [item.to_row() for item in items])
        except sqlite3.Error as exc:
            raise StoreError(f"cannot insert {len(items)} items: {exc}") from exc

    def close(self) -> None:
        self.conn.close()
