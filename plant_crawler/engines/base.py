from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List
from abc import ABC, abstractmethod

from ..models import Houseplant


class CrawlStage(str, Enum):
    START = "start"
    CATEGORIES_FETCHED = "categories_fetched"
    PAGES_RESOLVED = "pages_resolved"
    URLS_DEDUPED = "urls_deduped"
    RECORDS_EXTRACTED = "records_extracted"
    DONE = "done"
    FAILED = "failed"


@dataclass
class CrawlReport:
    records: List[Houseplant] = field(default_factory=list)
    category_count: int = 0
    page_url_count: int = 0  # plant URLs collected before dedup
    detail_url_count: int = 0  # unique plant URLs handed to extraction
    failed_count: int = 0
    stored_count: int = 0

    def summary(self) -> Dict[str, Any]:
        return {
            "categories": self.category_count,
            "collected_urls": self.page_url_count,
            "unique_urls": self.detail_url_count,
            "extracted": len(self.records),
            "failed": self.failed_count,
            "stored": self.stored_count,
        }


class CrawlEngine(ABC):
    """
    Abstract engine interface. Implementations own the crawl lifecycle.
    """
    @abstractmethod
    async def crawl(self) -> CrawlReport:  # pragma: no cover - interface
        ...
