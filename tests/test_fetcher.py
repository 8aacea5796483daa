import asyncio
import time

import pytest

from hn_sync.ingest.fetcher import BatchFetcher
from tests.conftest import FakeHub, item_doc


async def test_fetch_batch_returns_every_decoded_item() -> None:
    hub = FakeHub(max_id=110)
    fetcher = BatchFetcher(hub, concurrency=4, timeout_s=1)

    items = await fetcher.fetch_batch(range(101, 106))

    assert sorted(item.id for item in items) == [101, 102, 103, 104, 105]
    assert sorted(hub.requested) == [101, 102, 103, 104, 105]


async def test_hung_fetch_is_dropped_after_timeout() -> None:
    hub = FakeHub(max_id=110, hang=[103])
    fetcher = BatchFetcher(hub, concurrency=4, timeout_s=0.2)

    started = time.monotonic()
    items = await fetcher.fetch_batch(range(101, 106))
    elapsed = time.monotonic() - started

    assert sorted(item.id for item in items) == [101, 102, 104, 105]
    assert elapsed < 2


async def test_failures_are_absorbed_not_raised() -> None:
    hub = FakeHub(
        max_id=110,
        fail=[101],
        docs={
            102: "null",
            103: '{"id": 103, "time": 1}',
            104: "{not json at all}",
        },
    )
    fetcher = BatchFetcher(hub, concurrency=2, timeout_s=1)

    items = await fetcher.fetch_batch(range(101, 106))

    assert [item.id for item in items] == [105]


async def test_batch_with_zero_successes_is_empty() -> None:
    hub = FakeHub(max_id=110, fail=[1, 2, 3])
    fetcher = BatchFetcher(hub, concurrency=2, timeout_s=1)

    assert await fetcher.fetch_batch([1, 2, 3]) == []


async def test_results_arrive_in_completion_order() -> None:
    class SlowFirstHub(FakeHub):
        async def fetch_item(self, item_id: int) -> str:
            if item_id == 1:
                await asyncio.sleep(0.1)
            return item_doc(item_id)

    fetcher = BatchFetcher(SlowFirstHub(max_id=2), concurrency=2, timeout_s=1)

    items = await fetcher.fetch_batch([1, 2])

    assert [item.id for item in items] == [2, 1]


async def test_in_flight_requests_are_capped() -> None:
    class CountingHub(FakeHub):
        def __init__(self) -> None:
            super().__init__(max_id=20)
            self.in_flight = 0
            self.peak = 0

        async def fetch_item(self, item_id: int) -> str:
            self.in_flight += 1
            self.peak = max(self.peak, self.in_flight)
            await asyncio.sleep(0.01)
            self.in_flight -= 1
            return item_doc(item_id)

    hub = CountingHub()
    fetcher = BatchFetcher(hub, concurrency=3, timeout_s=1)

    items = await fetcher.fetch_batch(range(1, 13))

    assert len(items) == 12
    assert hub.peak == 3


async def test_unexpected_error_drops_only_that_item() -> None:
    class BrokenHub(FakeHub):
        async def fetch_item(self, item_id: int) -> str:
            if item_id == 2:
                raise RuntimeError("connection pool exhausted")
            return await super().fetch_item(item_id)

    fetcher = BatchFetcher(BrokenHub(max_id=3), concurrency=3, timeout_s=1)

    items = await fetcher.fetch_batch([1, 2, 3])

    assert sorted(item.id for item in items) == [1, 3]


async def test_cancelled_join_cancels_pending_fetches() -> None:
    class TrackingHub(FakeHub):
        def __init__(self) -> None:
            super().__init__(max_id=3, hang=[3])
            self.cancelled: list[int] = []

        async def fetch_item(self, item_id: int) -> str:
            try:
                return await super().fetch_item(item_id)
            except asyncio.CancelledError:
                self.cancelled.append(item_id)
                raise

    hub = TrackingHub()
    fetcher = BatchFetcher(hub, concurrency=3, timeout_s=30)

    join = asyncio.create_task(fetcher.fetch_batch([1, 2, 3]))
    await asyncio.sleep(0.05)
    join.cancel()
    with pytest.raises(asyncio.CancelledError):
        await join

    assert hub.cancelled == [3]
