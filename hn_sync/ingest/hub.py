from __future__ import annotations

import asyncio

import aiohttp

from hn_sync.config import SyncConfig
from hn_sync.errors import FetchError
from hn_sync.monitoring.logging_utils import get_event_logger

log_event = get_event_logger("hub")


class NewsHub:
    """Read-only client for the item feed.

    One ``aiohttp.ClientSession`` is shared by every request, including the
    concurrent item fetches of a batch. TLS certificate validation is off
    unless ``verify_tls`` is set.
    """

    def __init__(
        self,
        config: SyncConfig,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self.base_uri = config.hub_url.rstrip("/")
        self._config = config
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> NewsHub:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            connector = None
            if not self._config.verify_tls:
                connector = aiohttp.TCPConnector(ssl=False)
            self._session = aiohttp.ClientSession(
                headers={"User-Agent": self._config.user_agent},
                timeout=aiohttp.ClientTimeout(total=self._config.request_timeout_s),
                connector=connector,
            )
        return self._session

    async def close(self) -> None:
        if self._session is not None and self._owns_session:
            await self._session.close()
        self._session = None

    def max_item_url(self) -> str:
        return f"{self.base_uri}/maxitem.json"

    def item_url(self, item_id: int) -> str:
        return f"{self.base_uri}/item/{item_id}.json"

    async def fetch_text(self, url: str) -> str:
        session = self._get_session()
        try:
            async with session.get(url) as response:
                body = await response.text()
                if response.status >= 300 or response.status < 200:
                    raise FetchError(f"GET {url} returned HTTP {response.status}")
                return body
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise FetchError(f"GET {url} failed: {type(exc).__name__}: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise FetchError(f"GET {url} returned an undecodable body: {exc}") from exc

    async def fetch_max_item(self) -> int:
        body = await self.fetch_text(self.max_item_url())
        try:
            max_id = int(body.strip())
        except ValueError as exc:
            raise FetchError(f"max item body is not an integer: {body[:40]!r}") from exc
        log_event("max_item", id=max_id)
        return max_id

    async def fetch_item(self, item_id: int) -> str:
        return await self.fetch_text(self.item_url(item_id))
