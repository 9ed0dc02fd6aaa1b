"""Houseplant catalog crawler."""

from .version import __version__
from .config import CrawlConfig
from .models import Attribute, Attributes, Houseplant
from .engines.pipeline import CrawlPipeline

__all__ = [
    "__version__",
    "Attribute",
    "Attributes",
    "CrawlConfig",
    "CrawlPipeline",
    "Houseplant",
]
