"""Strategies that turn a pagination navigation element into a page count."""
from __future__ import annotations

from typing import Dict, List, Protocol, Type

from bs4 import Tag

from ..errors import PaginationError
from ..utils.parsing import element_children, node_text


class PageCountStrategy(Protocol):
    name: str

    def count(self, nav: Tag) -> int:
        ...


class OffsetPageCount:
    """
    Reads the third-from-last child node of the navigation element.

    Children include whitespace text nodes, as in the served markup
    (``<span>1</span>\\n<a>2</a>\\n ... <a>N</a>\\n<a class="next">``),
    which puts the last page number exactly at that offset.
    """
    name = "offset"
    offset = 3

    def count(self, nav: Tag) -> int:
        children = list(nav.children)
        if len(children) < self.offset:
            raise PaginationError(f"navigation has {len(children)} children, need at least {self.offset}")
        text = node_text(children[len(children) - self.offset])
        try:
            return int(text)
        except ValueError:
            raise PaginationError(f"page indicator {text!r} is not a number") from None


class MaxNumericPageCount:
    """Largest integer label among the navigation's element children."""
    name = "max-numeric"

    def count(self, nav: Tag) -> int:
        numbers: List[int] = []
        for child in element_children(nav):
            text = "".join(node_text(child).split())
            if text.isdecimal():
                numbers.append(int(text))
        if not numbers:
            raise PaginationError("navigation has no numeric page labels")
        return max(numbers)


_STRATEGIES: Dict[str, Type[PageCountStrategy]] = {
    OffsetPageCount.name: OffsetPageCount,
    MaxNumericPageCount.name: MaxNumericPageCount,
}


def get_strategy(name: str) -> PageCountStrategy:
    try:
        return _STRATEGIES[name]()
    except KeyError:
        raise ValueError(f"unknown pagination strategy {name!r}") from None
