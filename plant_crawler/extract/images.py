from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Callable, Optional, Set

from ..errors import BodyReadError, FetchError, ImageFetchError, ImageReadError, ImageWriteError
from ..utils.http import PageFetcher

logger = logging.getLogger(__name__)


def epoch_millis() -> int:
    return time.time_ns() // 1_000_000


class ImageArchiver:
    """
    Downloads images into a flat directory as ``<epoch-millis>.jpg``.

    Names are claimed synchronously on the event loop, so two downloads that
    finish within the same millisecond get ``<millis>-1.jpg`` instead of
    overwriting each other.
    """
    extension = ".jpg"

    def __init__(
        self,
        fetcher: PageFetcher,
        image_dir: str | Path,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        self.fetcher = fetcher
        self.image_dir = Path(image_dir)
        self.clock = clock or epoch_millis
        self._claimed: Set[str] = set()

    async def archive(self, image_url: str) -> str:
        """Download ``image_url`` and return the filename written under ``image_dir``."""
        try:
            data = await self.fetcher.fetch_bytes(image_url)
        except BodyReadError as exc:
            raise ImageReadError(image_url, exc.reason) from exc
        except FetchError as exc:
            raise ImageFetchError(image_url, exc.reason) from exc

        filename = self._claim_filename()
        path = self.image_dir / filename
        try:
            self.image_dir.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as exc:
            raise ImageWriteError(image_url, exc) from exc

        logger.debug("Saved %s (%d bytes) from %s", filename, len(data), image_url)
        return filename

    def _claim_filename(self) -> str:
        stem = str(self.clock())
        filename = stem + self.extension
        suffix = 0
        while filename in self._claimed:
            suffix += 1
            filename = f"{stem}-{suffix}{self.extension}"
        self._claimed.add(filename)
        return filename
