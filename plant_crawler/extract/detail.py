from __future__ import annotations

import logging
from typing import Optional

from .classifier import AttributeClassifier
from .images import ImageArchiver
from ..adapters.base import SiteAdapter
from ..errors import DownloadError, DetailFetchError, FetchError, ImageDownloadError
from ..models import Houseplant
from ..utils.http import PageFetcher

logger = logging.getLogger(__name__)


class DetailExtractor:
    """
    Turns one plant page into a Houseplant.

    The page is parsed in full before the image is downloaded, so pages with
    no usable table leave no orphaned image behind. Every failure surfaces as
    an ExtractionError subclass carrying the page URL.
    """

    def __init__(
        self,
        fetcher: PageFetcher,
        adapter: SiteAdapter,
        archiver: ImageArchiver,
        classifier: Optional[AttributeClassifier] = None,
    ) -> None:
        self.fetcher = fetcher
        self.adapter = adapter
        self.archiver = archiver
        self.classifier = classifier or AttributeClassifier()

    async def extract(self, url: str) -> Houseplant:
        try:
            html = await self.fetcher.fetch_text(url)
        except FetchError as exc:
            raise DetailFetchError(url, exc.reason) from exc

        page = self.adapter.parse_detail(html, url)

        try:
            image = await self.archiver.archive(page.image_url)
        except DownloadError as exc:
            raise ImageDownloadError(url, exc) from exc

        plant = Houseplant(
            name=page.name,
            image=image,
            attributes=self.classifier.classify(page.rows),
        )
        logger.debug("Extracted %r from %s", plant.name, url)
        return plant
