from __future__ import annotations

import os
from pathlib import Path
from typing import Sequence

from hn_sync.errors import EmptyStoreError, StoreError
from hn_sync.ingest.item import Item
from hn_sync.storage.base import ItemStore

ITEMS_FILENAME = "items.sql"
CURSOR_FILENAME = "cursor"


class FileItemStore(ItemStore):
    """Append-only text store under a directory.

    ``items.sql`` holds one SQL value tuple per item; ``cursor`` holds the
    highest ID written so far and is replaced atomically after each batch.
    """

    backend = "file"

    def __init__(self, directory: str | os.PathLike[str]) -> None:
        self.directory = Path(directory)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StoreError(f"cannot create store dir {self.directory}: {exc}") from exc
        self.items_path = self.directory / ITEMS_FILENAME
        self.cursor_path = self.directory / CURSOR_FILENAME

    def last_known_id(self) -> int:
        try:
            raw = self.cursor_path.read_text(encoding="utf-8").strip()
        except FileNotFoundError as exc:
            raise EmptyStoreError(f"no items stored in {self.directory}") from exc
        except OSError as exc:
            raise StoreError(f"cannot read cursor {self.cursor_path}: {exc}") from exc
        try:
            return int(raw)
        except ValueError as exc:
            raise StoreError(f"corrupt cursor file {self.cursor_path}: {raw!r}") from exc

    def _write_cursor(self, value: int) -> None:
        tmp_path = self.cursor_path.with_suffix(".tmp")
        tmp_path.write_text(f"{value}\n", encoding="utf-8")
        os.replace(tmp_path, self.cursor_path)

    def store_batch(self, items: Sequence[Item]) -> None:
        if not items:
            return
        payload = "".join(f"{item.to_sql_value()}\n" for item in items)
        try:
            current = self.last_known_id()
        except EmptyStoreError:
            current = None
        highest = max(item.id for item in items)
        if current is not None:
            highest = max(highest, current)
        try:
            with self.items_path.open("a", encoding="utf-8") as handle:
                handle.write(payload)
            self._write_cursor(highest)
        except OSError as exc:
            raise StoreError(f"cannot write {self.items_path}: {exc}") from exc
