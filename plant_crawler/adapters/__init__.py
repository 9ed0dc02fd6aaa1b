from .base import DetailPage, SiteAdapter
from .komnatnie import KomnatnieRasteniyaAdapter
from .pagination import MaxNumericPageCount, OffsetPageCount, get_strategy

__all__ = [
    "DetailPage",
    "KomnatnieRasteniyaAdapter",
    "MaxNumericPageCount",
    "OffsetPageCount",
    "SiteAdapter",
    "get_strategy",
]
