from __future__ import annotations

from typing import Sequence

import psycopg

from hn_sync.errors import EmptyStoreError, StoreError
from hn_sync.ingest.item import COLUMNS, Item
from hn_sync.storage.base import ItemStore

CREATE_ITEMS_TABLE = """
CREATE TABLE IF NOT EXISTS items (
    id BIGINT NOT NULL PRIMARY KEY,
    deleted SMALLINT DEFAULT 0,
    type VARCHAR(16) DEFAULT NULL,
    who VARCHAR(255) DEFAULT NULL,
    time BIGINT DEFAULT NULL,
    dead SMALLINT DEFAULT 0,
    kids TEXT DEFAULT NULL,
    title TEXT DEFAULT NULL,
    content TEXT DEFAULT NULL,
    score BIGINT DEFAULT NULL,
    url TEXT DEFAULT NULL,
    parent BIGINT DEFAULT NULL
)
"""

INSERT_ITEM = (
    f"INSERT INTO items ({', '.join(COLUMNS)}) "
    f"VALUES ({', '.join('%s' for _ in COLUMNS)}) "
    "ON CONFLICT (id) DO NOTHING"
)


class PostgresItemStore(ItemStore):
    backend = "postgres"

    def __init__(self, dsn: str) -> None:
        try:
            self.conn = psycopg.connect(dsn)
            with self.conn.cursor() as cur:
                cur.execute(CREATE_ITEMS_TABLE)
            self.conn.commit()
        except psycopg.Error as exc:
            raise StoreError(f"cannot open postgres store: {exc}") from exc

    def last_known_id(self) -> int:
        try:
            with self.conn.cursor() as cur:
                cur.execute("SELECT max(id) FROM items")
                row = cur.fetchone()
            self.conn.commit()
        except psycopg.Error as exc:
            self.conn.rollback()
            raise StoreError(f"cannot read last item id: {exc}") from exc
        if row is None or row[0] is None:
            raise EmptyStoreError("no items stored in postgres table items")
        return int(row[0])

    def store_batch(self, items: Sequence[Item]) -> None:
        if not items:
            return
        try:
            with self.conn.cursor() as cur:
                cur.executemany(INSERT_ITEM, [item.to_row() for item in items])
            self.conn.commit()
        except psycopg.Error as exc:
            self.conn.rollback()
            raise StoreError(f"cannot insert {len(items)} items: {exc}") from exc

    def close(self) -> None:
        self.conn.close()
