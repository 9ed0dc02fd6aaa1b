from __future__ import annotations

from typing import Optional


class CrawlerError(Exception):
    """Base class for every error raised by the crawler."""


class FetchError(CrawlerError):
    """The transport could not deliver a page."""

    def __init__(self, url: str, reason: object = None) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"failed to fetch {url}: {reason!r}")


class BodyReadError(FetchError):
    """A response arrived but its body could not be read."""


class FrontPageError(CrawlerError):
    def __init__(self, url: str, cause: Optional[BaseException] = None) -> None:
        self.url = url
        super().__init__(f"front page {url} is unavailable: {cause!r}")


class PaginationError(CrawlerError):
    """Navigation markup exists but no page count can be read from it."""


# ---- Image downloads ----

class DownloadError(CrawlerError):
    describe = "could not archive image"

    def __init__(self, url: str, reason: object = None) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"{self.describe} {url}: {reason!r}")


class ImageFetchError(DownloadError):
    describe = "could not fetch image"


class ImageReadError(DownloadError):
    describe = "could not read image body"


class ImageWriteError(DownloadError):
    describe = "could not write image"


# ---- Detail page extraction ----

class ExtractionError(CrawlerError):
    """A detail page could not be turned into a record."""

    message = "extraction failed"

    def __init__(self, url: str, detail: object = None) -> None:
        self.url = url
        self.detail = detail
        text = f"{self.message}: {url}"
        if detail is not None:
            text = f"{text} ({detail})"
        super().__init__(text)


class DetailFetchError(ExtractionError):
    message = "detail page unavailable"


class TitleMissingError(ExtractionError):
    message = "title not found"


class ImageMissingError(ExtractionError):
    message = "image not found"


class ImageDownloadError(ExtractionError):
    message = "image download failed"


class TableMissingError(ExtractionError):
    message = "plant table not found"


class MalformedRowError(ExtractionError):
    message = "table row has fewer than two cells"


class StorageError(CrawlerError):
    """The storage backend rejected a record; the run cannot continue."""
