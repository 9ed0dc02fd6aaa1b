from __future__ import annotations

import re
from typing import List, Optional, Tuple

from bs4 import BeautifulSoup, Tag

from .base import DetailPage
from .pagination import OffsetPageCount, PageCountStrategy
from ..errors import ImageMissingError, MalformedRowError, TableMissingError, TitleMissingError
from ..utils.parsing import absolute_url, element_children, first_element_child, make_soup, node_text

# Every plant table has a watering row; it is how the table is told apart from other tables.
TABLE_KEYWORD = "полив"
TITLE_SEPARATOR = re.compile(r"[—–]")
CELL_TAGS = ("td", "th")


class KomnatnieRasteniyaAdapter:
    """
    Adapter for the komnatnie-rastenija.ru WordPress catalog:
    front page -> category listings (paginated) -> plant pages.
    """
    name = "komnatnie-rastenija"

    def __init__(self, page_counter: Optional[PageCountStrategy] = None) -> None:
        self.page_counter = page_counter or OffsetPageCount()

    # ---- Listing pages -------------------------------------------------------

    def category_urls(self, html: str, base_url: str) -> List[str]:
        soup = make_soup(html)
        urls: List[str] = []
        for item in soup.select(".cat-item"):
            link = first_element_child(item)
            href = link.get("href") if link is not None else None
            url = absolute_url(href, base_url) if href else None
            if url is None:
                continue
            urls.append(url)
        return urls

    def page_count(self, html: str) -> int:
        nav = make_soup(html).select_one(".nav-links")
        if nav is None:
            return 1
        return self.page_counter.count(nav)

    def detail_urls(self, html: str, base_url: str) -> List[str]:
        soup = make_soup(html)
        urls: List[str] = []
        for a in soup.find_all("a", attrs={"itemprop": "url"}):
            href = a.get("href")
            url = absolute_url(href, base_url) if href else None
            if url is not None:
                urls.append(url)
        return urls

    # ---- Plant page ----------------------------------------------------------

    def parse_detail(self, html: str, url: str) -> DetailPage:
        soup = make_soup(html)
        return DetailPage(
            name=self._name(soup, url),
            image_url=self._image_url(soup, url),
            rows=self._rows(soup, url),
        )

    def _name(self, soup: BeautifulSoup, url: str) -> str:
        title = soup.select_one(".entry-title")
        if title is None:
            raise TitleMissingError(url)
        name = TITLE_SEPARATOR.split(node_text(title), maxsplit=1)[0].strip()
        if not name:
            raise TitleMissingError(url, "empty title")
        return name

    def _image_url(self, soup: BeautifulSoup, url: str) -> str:
        node = soup.find(attrs={"itemprop": "url image"})
        if node is None:
            raise ImageMissingError(url)
        # Images are lazy-loaded; the real source sits in data-src.
        src = node.get("data-src") or node.get("src")
        image_url = absolute_url(src, url) if src else None
        if image_url is None:
            raise ImageMissingError(url, f"unusable image source {src!r}")
        return image_url

    def _rows(self, soup: BeautifulSoup, url: str) -> List[Tuple[str, str]]:
        anchor = next(
            (td for td in soup.find_all("td") if TABLE_KEYWORD in node_text(td).lower()),
            None,
        )
        if anchor is None:
            raise TableMissingError(url)

        # td -> tr -> tbody (or table when the markup omits tbody)
        body = anchor.parent.parent if anchor.parent is not None else None
        if not isinstance(body, Tag):
            raise TableMissingError(url, "table cell has no enclosing table")

        rows: List[Tuple[str, str]] = []
        for tr in element_children(body):
            if tr.name != "tr":
                continue
            cells = [c for c in element_children(tr) if c.name in CELL_TAGS]
            if len(cells) < 2:
                raise MalformedRowError(url, node_text(tr) or "<empty row>")
            rows.append((node_text(cells[0]), node_text(cells[1])))
        return rows
