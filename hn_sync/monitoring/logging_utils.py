import logging
from functools import partial
from typing import Callable

LOG_FORMAT = "%(asctime)s | %(name)s | %(message)s"
LOG_DATEFMT = "%H:%M:%S"

ROOT_LOGGER = "hn_sync"


def _ensure_logging_configured() -> None:
    if logging.getLogger().handlers:
        return
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT, datefmt=LOG_DATEFMT)


def configure_logging(events_enabled: bool) -> None:
    """Turn event lines on or off for every ``hn_sync.*`` logger."""
    _ensure_logging_configured()
    level = logging.INFO if events_enabled else logging.WARNING
    logging.getLogger(ROOT_LOGGER).setLevel(level)


def get_logger(name: str) -> logging.Logger:
    _ensure_logging_configured()
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def log_event(logger: logging.Logger, event: str, **fields: object) -> None:
    if not logger.isEnabledFor(logging.INFO):
        return
    parts = " ".join(f"{key}={value}" for key, value in fields.items())
    logger.info("%-8s %s", event.upper(), parts)


def get_event_logger(name: str) -> Callable[..., None]:
    logger = get_logger(name)
    return partial(log_event, logger)
