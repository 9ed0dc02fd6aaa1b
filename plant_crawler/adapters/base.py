from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Protocol, Tuple


@dataclass
class DetailPage:
    """Raw pieces of a detail page, before the image is archived and rows classified."""

    name: str
    image_url: str
    rows: List[Tuple[str, str]] = field(default_factory=list)


class SiteAdapter(Protocol):
    """
    Interface for site-specific parsing logic.
    Adapters are pure: the engine owns HTTP, concurrency and storage.
    """

    name: str

    def category_urls(self, html: str, base_url: str) -> List[str]:
        """Category listing URLs found on the front page, in document order."""
        ...

    def page_count(self, html: str) -> int:
        """Number of listing pages, read from the first page of a category."""
        ...

    def detail_urls(self, html: str, base_url: str) -> List[str]:
        """Detail page URLs linked from one listing page."""
        ...

    def parse_detail(self, html: str, url: str) -> DetailPage:
        """
        Parse a detail page. Raises an ExtractionError subclass when the title,
        image or attribute table cannot be found.
        """
        ...
