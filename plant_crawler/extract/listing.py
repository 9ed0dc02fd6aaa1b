from __future__ import annotations

import logging
from typing import List, Optional

from ..adapters.base import SiteAdapter
from ..engines.pool import bounded_map
from ..errors import FetchError, PaginationError
from ..utils.http import PageFetcher

logger = logging.getLogger(__name__)


def page_url(category_url: str, page: int) -> str:
    return f"{category_url.rstrip('/')}/page/{page}"


class PaginationResolver:
    """
    Collects plant page URLs from every listing page of one category.
    Duplicates are kept; the pipeline dedups once across all categories.
    """

    def __init__(self, fetcher: PageFetcher, adapter: SiteAdapter, concurrency: int) -> None:
        self.fetcher = fetcher
        self.adapter = adapter
        self.concurrency = concurrency

    def page_urls(self, category_url: str, count: int) -> List[str]:
        return [page_url(category_url, n) for n in range(1, count + 1)]

    async def resolve_pages(self, category_url: str) -> Optional[List[str]]:
        """Return the category's plant URLs, or None when the category is unavailable."""
        try:
            html = await self.fetcher.fetch_text(category_url)
        except FetchError as exc:
            logger.warning("Skipping category %s: %s", category_url, exc)
            return None

        try:
            count = self.adapter.page_count(html)
        except PaginationError as exc:
            logger.warning("Skipping category %s: %s", category_url, exc)
            return None
        except Exception as exc:  # broad catch: odd markup drops this category only
            logger.warning("Skipping category %s: unexpected %r", category_url, exc)
            return None

        pages = self.page_urls(category_url, count)
        logger.debug("Category %s has %d page(s)", category_url, count)
        chunks = await bounded_map(pages, self._listing, self.concurrency)
        return [url for chunk in chunks for url in chunk]

    async def _listing(self, url: str) -> List[str]:
        try:
            html = await self.fetcher.fetch_text(url)
        except FetchError as exc:
            logger.debug("Listing page %s unavailable: %s", url, exc)
            return []
        try:
            return self.adapter.detail_urls(html, url)
        except Exception as exc:  # broad catch: odd markup drops this page only
            logger.warning("Skipping listing page %s: unexpected %r", url, exc)
            return []
