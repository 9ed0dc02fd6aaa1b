"""Storage backends selectable by name or by ``module:Class`` dotted path."""
from __future__ import annotations

import importlib
from typing import Dict, Optional, Type

from .base import Storage
from .csv_storage import CSVStorage
from .json_storage import JSONLinesStorage
from .sqlite_storage import SQLiteStorage

BACKENDS: Dict[str, Type] = {
    "jsonl": JSONLinesStorage,
    "csv": CSVStorage,
    "sqlite": SQLiteStorage,
}


def _load_class(dotted: str) -> Type:
    if ":" in dotted:
        module_name, symbol_name = dotted.split(":", 1)
    else:
        module_name, symbol_name = dotted.rsplit(".", 1)
    module = importlib.import_module(module_name)
    return getattr(module, symbol_name)


def create_storage(backend: Optional[str], path: str) -> Optional[Storage]:
    """
    Build a storage backend. ``None`` or an empty name disables persistence.
    Custom backends are classes taking the storage path as their only argument.
    """
    if not backend:
        return None
    cls = BACKENDS.get(backend.lower())
    if cls is None:
        if "." not in backend and ":" not in backend:
            raise ValueError(f"unknown storage backend {backend!r}; expected one of {sorted(BACKENDS)}")
        cls = _load_class(backend)
    return cls(path)


__all__ = ["BACKENDS", "CSVStorage", "JSONLinesStorage", "SQLiteStorage", "Storage", "create_storage"]
