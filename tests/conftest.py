"""Shared fakes for engine and fetcher tests."""
from __future__ import annotations

import asyncio
import json
from typing import Sequence

import pytest

from hn_sync.config import SyncConfig
from hn_sync.errors import EmptyStoreError, FetchError, StoreError
from hn_sync.ingest.item import Item
from hn_sync.storage.base import ItemStore


def item_doc(item_id: int, **fields: object) -> str:
    payload: dict[str, object] = {
        "id": item_id,
        "type": "story",
        "time": 1_600_000_000 + item_id,
        "by": "pg",
        "title": f"Story {item_id}",
    }
    payload.update(fields)
    return json.dumps(payload)


class FakeHub:
    """In-memory feed: every ID up to ``max_id`` exists unless told otherwise."""

    def __init__(
        self,
        max_id: int,
        *,
        docs: dict[int, str] | None = None,
        hang: Sequence[int] = (),
        fail: Sequence[int] = (),
        max_error: Exception | None = None,
    ) -> None:
        self.max_id = max_id
        self.docs = docs or {}
        self.hang = set(hang)
        self.fail = set(fail)
        self.max_error = max_error
        self.max_calls = 0
        self.requested: list[int] = []

    async def fetch_max_item(self) -> int:
        self.max_calls += 1
        if self.max_error is not None:
            raise self.max_error
        return self.max_id

    async def fetch_item(self, item_id: int) -> str:
        self.requested.append(item_id)
        if item_id in self.hang:
            await asyncio.Event().wait()
        if item_id in self.fail:
            raise FetchError(f"GET item {item_id} returned HTTP 500")
        if item_id in self.docs:
            return self.docs[item_id]
        return item_doc(item_id)


class RecordingStore(ItemStore):
    backend = "memory"

    def __init__(
        self,
        cursor: int | None = None,
        *,
        read_error: StoreError | None = None,
        write_error: StoreError | None = None,
    ) -> None:
        self.cursor = cursor
        self.read_error = read_error
        self.write_error = write_error
        self.items: dict[int, Item] = {}
        self.writes: list[list[int]] = []

    def last_known_id(self) -> int:
        if self.read_error is not None:
            raise self.read_error
        ids = list(self.items)
        if self.cursor is not None:
            ids.append(self.cursor)
        if not ids:
            raise EmptyStoreError("memory store is empty")
        return max(ids)

    def store_batch(self, items: Sequence[Item]) -> None:
        if self.write_error is not None:
            raise self.write_error
        self.writes.append(sorted(item.id for item in items))
        for item in items:
            self.items[item.id] = item


@pytest.fixture
def config() -> SyncConfig:
    return SyncConfig(
        hub_url="http://feed.invalid/v0/",
        batch_size=5,
        fetch_timeout_s=0.2,
        fetch_concurrency=4,
        run_many_limit=5,
    )
