from __future__ import annotations

import logging
from typing import Callable, List, Optional

from .base import CrawlEngine, CrawlReport, CrawlStage
from .pool import bounded_map
from ..adapters.base import SiteAdapter
from ..adapters.komnatnie import KomnatnieRasteniyaAdapter
from ..adapters.pagination import get_strategy
from ..config import CrawlConfig
from ..errors import ExtractionError, FetchError, FrontPageError, StorageError
from ..extract.classifier import AttributeClassifier
from ..extract.detail import DetailExtractor
from ..extract.images import ImageArchiver
from ..extract.listing import PaginationResolver
from ..models import Houseplant
from ..storage.base import Storage
from ..utils.http import BoundedFetcher, HttpFetcher, PageFetcher, create_session

logger = logging.getLogger(__name__)


class CrawlPipeline(CrawlEngine):
    """
    Three-stage crawl of the plant catalog:

    1. fetch the front page once and read the category links;
    2. resolve every category into plant page URLs (bounded fan-out),
       then sort and dedup the whole set;
    3. extract every unique plant page (bounded fan-out), storing each
       record as soon as it is extracted.

    Stage 2 drains completely before stage 3 starts. Only two failures end
    the run: an unreachable front page and a storage error. Everything
    else drops one category or one plant and is logged where it happens.
    """

    def __init__(
        self,
        config: Optional[CrawlConfig] = None,
        storage: Optional[Storage] = None,
        *,
        fetcher: Optional[PageFetcher] = None,
        adapter: Optional[SiteAdapter] = None,
        classifier: Optional[AttributeClassifier] = None,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        self.config = config or CrawlConfig()
        self.storage = storage
        self.adapter = adapter or KomnatnieRasteniyaAdapter(get_strategy(self.config.pagination))
        self.classifier = classifier or AttributeClassifier()
        self.clock = clock
        self._fetcher = fetcher
        self.stage = CrawlStage.START

    async def run(self) -> List[Houseplant]:
        report = await self.crawl()
        return report.records

    async def crawl(self) -> CrawlReport:
        self.stage = CrawlStage.START
        if self._fetcher is not None:
            return await self._crawl(self._fetcher)

        cfg = self.config
        session = create_session()
        try:
            fetcher = HttpFetcher(
                session,
                timeout=cfg.request_timeout,
                user_agent=cfg.user_agent,
                retries=cfg.retries,
            )
            return await self._crawl(fetcher)
        finally:
            await session.close()

    async def _crawl(self, transport: PageFetcher) -> CrawlReport:
        cfg = self.config
        fetcher = BoundedFetcher(transport, cfg.concurrency)
        report = CrawlReport()

        # ---- Stage A: categories ----
        logger.info("Crawling %s", cfg.start_url)
        try:
            front = await fetcher.fetch_text(cfg.start_url)
        except FetchError as exc:
            self.stage = CrawlStage.FAILED
            raise FrontPageError(cfg.start_url, exc) from exc
        categories = self.adapter.category_urls(front, cfg.start_url)
        report.category_count = len(categories)
        self.stage = CrawlStage.CATEGORIES_FETCHED
        logger.info("[1/3] Found %d categories", len(categories))

        # ---- Stage B: plant URLs per category ----
        resolver = PaginationResolver(fetcher, self.adapter, cfg.concurrency)
        per_category = await bounded_map(categories, resolver.resolve_pages, cfg.concurrency)
        collected = [url for urls in per_category if urls is not None for url in urls]
        report.page_url_count = len(collected)
        self.stage = CrawlStage.PAGES_RESOLVED

        # Categories overlap, so the same plant can be listed more than once.
        unique = sorted(set(collected))
        report.detail_url_count = len(unique)
        self.stage = CrawlStage.URLS_DEDUPED
        logger.info("[2/3] Collected %d plant links (%d unique)", len(collected), len(unique))

        # ---- Stage C: plant pages ----
        archiver = ImageArchiver(fetcher, cfg.image_dir, clock=self.clock)
        extractor = DetailExtractor(fetcher, self.adapter, archiver, self.classifier)

        async def extract_one(url: str) -> Optional[Houseplant]:
            try:
                plant = await extractor.extract(url)
            except ExtractionError as exc:
                logger.warning("Skipping %s", exc)
                return None
            except Exception as exc:  # broad catch to keep the crawl moving past odd markup
                logger.warning("Skipping %s: unexpected %r", url, exc)
                return None
            if self.storage is not None:
                try:
                    await self.storage.insert(plant)
                except Exception as exc:
                    raise StorageError(f"failed to store {plant.name!r} from {url}: {exc!r}") from exc
            return plant

        try:
            results = await bounded_map(unique, extract_one, cfg.concurrency)
        except StorageError:
            self.stage = CrawlStage.FAILED
            logger.error("Storage failed; in-flight extractions were cancelled")
            raise
        report.records = [plant for plant in results if plant is not None]
        report.failed_count = len(unique) - len(report.records)
        if self.storage is not None:
            report.stored_count = len(report.records)
        self.stage = CrawlStage.RECORDS_EXTRACTED
        logger.info("[3/3] Extracted %d plants, %d failed", len(report.records), report.failed_count)

        self.stage = CrawlStage.DONE
        return report
