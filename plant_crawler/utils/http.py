from __future__ import annotations

import asyncio
from typing import Optional, Protocol
from aiohttp import ClientSession, ClientTimeout
import aiohttp
import logging

from ..errors import BodyReadError, FetchError

logger = logging.getLogger(__name__)


class PageFetcher(Protocol):
    """
    Transport seam used by every stage of the crawl.
    Implementations raise FetchError (or BodyReadError) instead of returning None.
    """

    async def fetch_text(self, url: str) -> str:
        ...

    async def fetch_bytes(self, url: str) -> bytes:
        ...


async def _fetch(
    session: ClientSession,
    url: str,
    *,
    binary: bool,
    timeout: float,
    user_agent: Optional[str],
    retries: int,
) -> str | bytes:
    headers = {}
    if user_agent:
        headers["User-Agent"] = user_agent

    attempts = retries + 1
    attempt = 0
    while True:
        attempt += 1
        error: FetchError
        try:
            async with session.get(url, headers=headers, timeout=ClientTimeout(total=timeout)) as resp:
                resp.raise_for_status()
                try:
                    if binary:
                        return await resp.read()
                    return await resp.text()
                except (aiohttp.ClientError, asyncio.TimeoutError, UnicodeDecodeError) as exc:
                    error = BodyReadError(url, exc)
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            error = FetchError(url, exc)
        logger.debug("fetch attempt %s/%s failed for %s: %r", attempt, attempts, url, error.reason)
        if attempt >= attempts:
            raise error


async def fetch_text(
    session: ClientSession,
    url: str,
    *,
    timeout: float = 15.0,
    user_agent: Optional[str] = None,
    retries: int = 0,
) -> str:
    """
    Fetch a URL and return body text. Raises FetchError once all attempts fail.
    """
    return await _fetch(session, url, binary=False, timeout=timeout, user_agent=user_agent, retries=retries)


async def fetch_bytes(
    session: ClientSession,
    url: str,
    *,
    timeout: float = 15.0,
    user_agent: Optional[str] = None,
    retries: int = 0,
) -> bytes:
    """
    Fetch a URL and return the raw body. Raises FetchError or BodyReadError.
    """
    return await _fetch(session, url, binary=True, timeout=timeout, user_agent=user_agent, retries=retries)


def create_session() -> ClientSession:
    """
    Create a shared aiohttp ClientSession.
    """
    # Note: caller is responsible for closing the session (await session.close()).
    connector = aiohttp.TCPConnector(limit=0)  # unlimited; concurrency managed via semaphore
    return aiohttp.ClientSession(connector=connector)


class HttpFetcher:
    """PageFetcher backed by an aiohttp session."""

    def __init__(
        self,
        session: ClientSession,
        *,
        timeout: float = 15.0,
        user_agent: Optional[str] = None,
        retries: int = 0,
    ) -> None:
        self.session = session
        self.timeout = timeout
        self.user_agent = user_agent
        self.retries = retries

    async def fetch_text(self, url: str) -> str:
        return await fetch_text(
            self.session, url, timeout=self.timeout, user_agent=self.user_agent, retries=self.retries
        )

    async def fetch_bytes(self, url: str) -> bytes:
        return await fetch_bytes(
            self.session, url, timeout=self.timeout, user_agent=self.user_agent, retries=self.retries
        )


class BoundedFetcher:
    """
    Caps in-flight fetches of the wrapped fetcher.
    Categories fan out over their own pages, so the cap has to live here
    rather than only in the stage worker pools.
    """

    def __init__(self, inner: PageFetcher, limit: int) -> None:
        self.inner = inner
        self._sem = asyncio.Semaphore(limit)

    async def fetch_text(self, url: str) -> str:
        async with self._sem:
            return await self.inner.fetch_text(url)

    async def fetch_bytes(self, url: str) -> bytes:
        async with self._sem:
            return await self.inner.fetch_bytes(url)
