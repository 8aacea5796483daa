from __future__ import annotations

import asyncio
from typing import Iterable, Protocol

from hn_sync.errors import DecodeError, FetchError
from hn_sync.ingest.item import MIN_ITEM_BODY_LEN, Item
from hn_sync.monitoring.logging_utils import get_event_logger
from hn_sync.monitoring.metrics import record_drop, record_fetch

log_event = get_event_logger("fetcher")


class ItemSource(Protocol):
    async def fetch_item(self, item_id: int) -> str: ...


class BatchFetcher:
    """Fetch a batch of items concurrently, keeping only the ones that succeed.

    The fetcher is built once per engine and reused for every batch. At most
    ``concurrency`` requests are in flight at a time. Each request gets its
    own ``timeout_s`` deadline, counted from the moment it takes a slot, so
    waiting for a slot never eats into an item's budget. A request that
    misses its deadline is cancelled and counted as absent.

    Results come back in arrival order, not ID order. Fetch errors, decode
    errors, short bodies, timeouts and unexpected errors are logged with the
    item ID and dropped; a batch with no successes returns an empty list.
    Tasks still pending when the join exits are cancelled.
    """

    def __init__(self, hub: ItemSource, *, concurrency: int, timeout_s: float) -> None:
        self._hub = hub
        self._timeout_s = timeout_s
        self._slots = asyncio.Semaphore(concurrency)

    def _drop(self, item_id: int, reason: str, **fields: object) -> None:
        record_drop(reason)
        log_event("drop", id=item_id, reason=reason, **fields)

    async def fetch_one(self, item_id: int) -> Item | None:
        async with self._slots:
            try:
                raw = await asyncio.wait_for(
                    self._hub.fetch_item(item_id), timeout=self._timeout_s
                )
            except asyncio.TimeoutError:
                self._drop(item_id, "timeout", after_s=self._timeout_s)
                return None
            except FetchError as exc:
                self._drop(item_id, "fetch", error=str(exc))
                return None
            except Exception as exc:
                self._drop(item_id, "error", error=f"{type(exc).__name__}: {exc}")
                return None
        if raw is None or len(raw.strip()) < MIN_ITEM_BODY_LEN:
            self._drop(item_id, "invalid", body=repr((raw or "")[:20]))
            return None
        try:
            item = Item.from_json(raw)
        except DecodeError as exc:
            self._drop(item_id, "decode", error=str(exc))
            return None
        record_fetch()
        return item

    async def fetch_batch(self, item_ids: Iterable[int]) -> list[Item]:
        tasks = [asyncio.create_task(self.fetch_one(item_id)) for item_id in item_ids]
        items: list[Item] = []
        try:
            for next_done in asyncio.as_completed(tasks):
                item = await next_done
                if item is not None:
                    items.append(item)
        finally:
            pending = [task for task in tasks if not task.done()]
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)
        return items
