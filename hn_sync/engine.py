from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Protocol

from hn_sync.config import SyncConfig
from hn_sync.errors import ConfigError, EmptyStoreError, FetchError, StoreError
from hn_sync.ingest.fetcher import BatchFetcher
from hn_sync.ingest.item import Item
from hn_sync.monitoring.logging_utils import get_event_logger
from hn_sync.monitoring.metrics import BATCH_SECONDS, record_drop, record_store
from hn_sync.storage.base import ItemStore

log_event = get_event_logger("sync")


class Feed(Protocol):
    async def fetch_max_item(self) -> int: ...

    async def fetch_item(self, item_id: int) -> str: ...


@dataclass
class SyncReport:
    mode: str
    max_id: int
    start_cursor: int
    cursor: int
    batches: int = 0
    stored: int = 0
    dropped: int = 0

    @property
    def backlog(self) -> int:
        return max(0, self.max_id - self.cursor)


@dataclass(frozen=True)
class Lag:
    max_id: int
    cursor: int

    @property
    def backlog(self) -> int:
        return max(0, self.max_id - self.cursor)


def plan_batches(cursor: int, max_id: int, batch_size: int) -> Iterator[range]:
    """Yield contiguous ID ranges covering ``(cursor, max_id]``.

    The last range is short when the backlog is not a multiple of
    ``batch_size``.
    """
    if batch_size < 1:
        raise ValueError("batch_size must be >= 1")
    while max_id > cursor:
        upper = min(cursor + batch_size, max_id)
        yield range(cursor + 1, upper + 1)
        cursor = upper


class SyncEngine:
    """Mirror the feed into a store, one bounded batch at a time.

    Batches run strictly one after another; only the items inside a batch
    are fetched concurrently. The cursor is read from the store once per
    run and then advanced in memory to each batch boundary, whether or not
    every item in the batch made it. Items dropped inside a batch are not
    revisited; a run only re-covers IDs above the store's highest stored
    ID.
    """

    def __init__(
        self,
        hub: Feed,
        store: ItemStore,
        config: SyncConfig,
        fetcher: BatchFetcher | None = None,
    ) -> None:
        self.hub = hub
        self.store = store
        self.config = config
        self.fetcher = fetcher or BatchFetcher(
            hub,
            concurrency=config.fetch_concurrency,
            timeout_s=config.fetch_timeout_s,
        )

    async def read_max_id(self) -> int:
        try:
            return await self.hub.fetch_max_item()
        except FetchError as exc:
            raise FetchError(f"failed to read max item id from feed: {exc}") from exc

    def read_cursor(self) -> int:
        try:
            cursor = self.store.last_known_id()
        except EmptyStoreError as exc:
            if self.config.start_id is None:
                raise EmptyStoreError(
                    f"failed to read cursor from {self.store.backend} store: {exc}; "
                    "set SYNC_START_ID (or --start-id) to seed an empty store"
                ) from exc
            cursor = self.config.start_id
            log_event("cursor", id=cursor, source="start_id")
            return cursor
        except StoreError as exc:
            raise StoreError(
                f"failed to read cursor from {self.store.backend} store: {exc}"
            ) from exc
        log_event("cursor", id=cursor, source=self.store.backend)
        return cursor

    async def check_lag(self) -> Lag:
        max_id = await self.read_max_id()
        return Lag(max_id=max_id, cursor=self.read_cursor())

    def _store(self, items: list[Item], report: SyncReport) -> None:
        if not items:
            return
        try:
            self.store.store_batch(items)
        except StoreError as exc:
            record_drop("store")
            report.dropped += len(items)
            log_event(
                "drop",
                ids=",".join(str(item.id) for item in items),
                reason="store",
                error=str(exc),
            )
            return
        record_store(self.store.backend, len(items))
        report.stored += len(items)
        log_event("stored", backend=self.store.backend, count=len(items))

    async def run_one(self) -> SyncReport:
        """Store only the newest item, if the store is behind."""
        max_id = await self.read_max_id()
        cursor = self.read_cursor()
        report = SyncReport("run_one", max_id=max_id, start_cursor=cursor, cursor=cursor)
        if max_id <= cursor:
            log_event("idle", max_id=max_id, cursor=cursor)
            return report
        item = await self.fetcher.fetch_one(max_id)
        if item is None:
            report.dropped += 1
        else:
            self._store([item], report)
        report.batches = 1
        report.cursor = max_id
        log_event("done", mode=report.mode, stored=report.stored, cursor=report.cursor)
        return report

    async def catch_up(self, limit: int | None = None, mode: str = "sync_data") -> SyncReport:
        """Sync every ID between the cursor and the feed max seen at entry.

        ``limit`` caps the number of IDs attempted in this run.
        """
        max_id = await self.read_max_id()
        cursor = self.read_cursor()
        report = SyncReport(mode, max_id=max_id, start_cursor=cursor, cursor=cursor)
        target = max_id if limit is None else min(max_id, cursor + limit)
        if target <= cursor:
            log_event("idle", max_id=max_id, cursor=cursor)
            return report
        for batch in plan_batches(cursor, target, self.config.batch_size):
            with BATCH_SECONDS.time():
                items = await self.fetcher.fetch_batch(batch)
                self._store(items, report)
            report.dropped += len(batch) - len(items)
            report.batches += 1
            report.cursor = batch[-1]
            log_event(
                "batch",
                low=batch[0],
                high=batch[-1],
                fetched=len(items),
                missing=len(batch) - len(items),
            )
        log_event(
            "done",
            mode=report.mode,
            batches=report.batches,
            stored=report.stored,
            dropped=report.dropped,
            cursor=report.cursor,
        )
        return report

    async def sync_data(self) -> SyncReport:
        return await self.catch_up(mode="sync_data")

    async def run_many(self) -> SyncReport:
        return await self.catch_up(limit=self.config.run_many_limit, mode="run_many")

    async def run(self, mode: str) -> SyncReport:
        if mode == "run_one":
            return await self.run_one()
        if mode == "run_many":
            return await self.run_many()
        if mode == "sync_data":
            return await self.sync_data()
        raise ConfigError(f"unsupported sync mode: {mode!r}")
