class SyncError(Exception):
    """Base class for every error raised by hn_sync."""


class FetchError(SyncError):
    """Transport failure, non-2xx status or malformed body from the feed."""


class DecodeError(SyncError):
    """Item document does not match the expected shape."""


class StoreError(SyncError):
    """I/O or query failure in a persistence backend."""


class EmptyStoreError(StoreError):
    """The store holds no items, so there is no cursor to read."""


class ConfigError(SyncError):
    """Unsupported mode/backend combination or invalid setting."""
