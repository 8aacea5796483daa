"""Ingest subpackage: feed access and item decoding."""

from hn_sync.ingest.fetcher import BatchFetcher
from hn_sync.ingest.hub import NewsHub
from hn_sync.ingest.item import (
    COLUMNS,
    MIN_ITEM_BODY_LEN,
    Item,
    parse_sql_value,
    quote_sql,
)

__all__ = [
    # fetcher
    "BatchFetcher",
    # hub
    "NewsHub",
    # item
    "COLUMNS",
    "MIN_ITEM_BODY_LEN",
    "Item",
    "parse_sql_value",
    "quote_sql",
]
