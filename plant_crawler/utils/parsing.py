from __future__ import annotations

from typing import List, Optional
from urllib.parse import urljoin, urlparse, urlunparse

from bs4 import BeautifulSoup, Tag
from bs4.element import PageElement


def make_soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def normalize_url(url: str) -> str:
    """
    Normalize URL by removing the fragment.
    """
    parts = list(urlparse(url))
    parts[5] = ""  # strip fragment
    return urlunparse(parts)


def absolute_url(href: str, base_url: str) -> Optional[str]:
    """Resolve ``href`` against ``base_url``; None when the href is not a valid URL."""
    try:
        return normalize_url(urljoin(base_url, href.strip()))
    except ValueError:
        return None


def node_text(node: Optional[PageElement]) -> str:
    """Text of a tag or a bare string node, whitespace-collapsed."""
    if node is None:
        return ""
    if isinstance(node, Tag):
        raw = node.get_text(" ")
    else:
        raw = str(node)
    return " ".join(raw.split())


def element_children(node: Tag) -> List[Tag]:
    """Direct children that are tags (text and comments skipped)."""
    return [child for child in node.children if isinstance(child, Tag)]


def first_element_child(node: Tag) -> Optional[Tag]:
    for child in node.children:
        if isinstance(child, Tag):
            return child
    return None
