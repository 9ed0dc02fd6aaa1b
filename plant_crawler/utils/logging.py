from __future__ import annotations

import logging
import os

_LEVELS = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}

# aiohttp is chatty at DEBUG; keep it one notch quieter than the crawler.
_NOISY_LOGGERS = ("aiohttp", "asyncio")


def setup_logging(level: str | int | None = None) -> None:
    """
    Configure application logging. Level comes from the argument,
    then PLANT_CRAWLER_LOG_LEVEL, then INFO.
    """
    if level is None:
        level = os.getenv("PLANT_CRAWLER_LOG_LEVEL", "INFO")

    if isinstance(level, str):
        level = _LEVELS.get(level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.INFO))
