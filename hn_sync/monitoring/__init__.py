"""Monitoring subpackage: observability components."""

from hn_sync.monitoring.logging_utils import (
    configure_logging,
    get_event_logger,
    get_logger,
    log_event,
)
from hn_sync.monitoring.metrics import (
    BATCH_SECONDS,
    ITEMS_DROPPED,
    ITEMS_FETCHED,
    ITEMS_STORED,
    record_drop,
    record_fetch,
    record_store,
)
from hn_sync.monitoring.metrics_server import run_metrics_server

__all__ = [
    # logging
    "configure_logging",
    "get_event_logger",
    "get_logger",
    "log_event",
    # metrics
    "BATCH_SECONDS",
    "ITEMS_DROPPED",
    "ITEMS_FETCHED",
    "ITEMS_STORED",
    "record_drop",
    "record_fetch",
    "record_store",
    # metrics_server
    "run_metrics_server",
]
