from __future__ import annotations

from typing import Protocol

from ..models import Houseplant


class Storage(Protocol):
    """
    Destination for extracted plants. ``insert`` is awaited once per record,
    from many extraction tasks at a time; any exception it raises ends the crawl.
    """

    async def insert(self, plant: Houseplant) -> None:
        ...

    def close(self) -> None:
        ...
