from prometheus_client import Counter, Histogram


ITEMS_FETCHED = Counter("hn_items_fetched_total", "Total items fetched and decoded")
ITEMS_DROPPED = Counter(
    "hn_items_dropped_total", "Total batch members dropped", ["reason"]
)
ITEMS_STORED = Counter(
    "hn_items_stored_total", "Total items written to the store", ["backend"]
)
BATCH_SECONDS = Histogram(
    "hn_batch_seconds",
    "Wall time of one fetch-and-store batch in seconds",
    buckets=(0.1, 0.25, 0.5, 1, 2, 5, 10, 30),
)


def record_fetch() -> None:
    ITEMS_FETCHED.inc()


def record_drop(reason: str) -> None:
    ITEMS_DROPPED.labels(reason=reason).inc()


def record_store(backend: str, count: int = 1) -> None:
    ITEMS_STORED.labels(backend=backend).inc(count)
