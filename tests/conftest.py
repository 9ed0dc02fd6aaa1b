"""Shared fixtures: an in-memory fetcher and builders for catalog markup."""

from __future__ import annotations

import asyncio
from typing import Dict, Iterable, List, Optional, Set, Tuple

import pytest

from plant_crawler.errors import BodyReadError, FetchError

FRONT_URL = "https://plants.test/"


class FakeFetcher:
    """Serves canned pages and counts how many fetches are in flight at once."""

    def __init__(
        self,
        pages: Optional[Dict[str, str]] = None,
        images: Optional[Dict[str, bytes]] = None,
        *,
        delay: float = 0.001,
    ) -> None:
        self.pages = dict(pages or {})
        self.images = dict(images or {})
        self.broken_bodies: Set[str] = set()
        self.delay = delay
        self.calls: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def _enter(self, url: str) -> None:
        self.calls.append(url)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        await asyncio.sleep(self.delay)

    async def fetch_text(self, url: str) -> str:
        await self._enter(url)
        try:
            if url not in self.pages:
                raise FetchError(url, "404 Not Found")
            return self.pages[url]
        finally:
            self.in_flight -= 1

    async def fetch_bytes(self, url: str) -> bytes:
        await self._enter(url)
        try:
            if url in self.broken_bodies:
                raise BodyReadError(url, "connection reset")
            if url not in self.images:
                raise FetchError(url, "404 Not Found")
            return self.images[url]
        finally:
            self.in_flight -= 1

    def count(self, url: str) -> int:
        return self.calls.count(url)


def front_page(category_urls: Iterable[str]) -> str:
    items = "\n".join(
        f'<li class="cat-item cat-item-{i}"><a href="{url}">Category {i}</a></li>'
        for i, url in enumerate(category_urls, start=1)
    )
    return f"<html><body><aside><ul>\n{items}\n</ul></aside></body></html>"


def nav_links(last_page: int) -> str:
    """WordPress pagination bar: numbers, dots, last page, next link, newline separated."""
    parts = ['<span aria-current="page" class="page-numbers current">1</span>']
    if last_page > 3:
        parts.append('<a class="page-numbers" href="#">2</a>')
        parts.append('<span class="page-numbers dots">&hellip;</span>')
    elif last_page == 3:
        parts.append('<a class="page-numbers" href="#">2</a>')
    parts.append(f'<a class="page-numbers" href="#">{last_page}</a>')
    parts.append('<a class="next page-numbers" href="#">Next</a>')
    return '<nav class="navigation pagination"><div class="nav-links">' + "\n".join(parts) + "</div></nav>"


def listing_page(detail_urls: Iterable[str], last_page: Optional[int] = None) -> str:
    cards = "\n".join(
        f'<article><h2><a itemprop="url" href="{url}">Plant</a></h2></article>' for url in detail_urls
    )
    nav = nav_links(last_page) if last_page else ""
    return f"<html><body><main>\n{cards}\n</main>{nav}</body></html>"


DEFAULT_ROWS: Tuple[Tuple[str, str], ...] = (
    ("Температура", "18-24 °C"),
    ("Влажность воздуха", "Высокая"),
    ("Полив", "Умеренный"),
)


def detail_page(
    name: Optional[str] = "Монстера",
    image_src: Optional[str] = "https://plants.test/img/plant.jpg",
    rows: Optional[Iterable[Tuple[str, str]]] = DEFAULT_ROWS,
) -> str:
    title = f'<h1 class="entry-title">{name} — уход в домашних условиях</h1>' if name is not None else ""
    image = (
        f'<img itemprop="url image" data-src="{image_src}" src="data:image/gif;base64,R0lGOD">'
        if image_src is not None
        else ""
    )
    table = ""
    if rows is not None:
        body = "\n".join(f"<tr><td>{label}</td><td>{value}</td></tr>" for label, value in rows)
        table = f"<table><tbody>\n{body}\n</tbody></table>"
    return f"<html><body><article>{title}{image}<div class='entry-content'>{table}</div></article></body></html>"


@pytest.fixture
def fake_fetcher() -> type:
    return FakeFetcher


@pytest.fixture
def pages() -> object:
    """Markup builders, bundled so tests do not import conftest directly."""
    class _Pages:
        front = staticmethod(front_page)
        listing = staticmethod(listing_page)
        detail = staticmethod(detail_page)
        nav = staticmethod(nav_links)
        FRONT_URL = FRONT_URL

    return _Pages
