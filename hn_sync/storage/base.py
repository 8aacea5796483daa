from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from hn_sync.ingest.item import Item


class ItemStore(ABC):
    """Persistence port used by the sync engine.

    Implementations own the cursor: ``last_known_id`` must read it from the
    backend every time and raise ``EmptyStoreError`` when nothing has been
    stored yet.
    """

    backend = "base"

    @abstractmethod
    def last_known_id(self) -> int: ...

    @abstractmethod
    def store_batch(self, items: Sequence[Item]) -> None:
        """Write ``items`` in one bulk operation."""

    def store_one(self, item: Item) -> None:
        self.store_batch([item])

    def close(self) -> None:
        return None

    def __enter__(self) -> ItemStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
