from __future__ import annotations

import asyncio
import sqlite3
from pathlib import Path
from typing import List, Optional

from ..models import Attributes, Houseplant


class SQLiteStorage:
    """
    Keeps plants in a single ``houseplants`` table, one column per attribute slot.
    Only attribute values are stored; the page labels are not.

    Inserts run in a worker thread so the crawl keeps fetching while sqlite commits.
    """

    table = "houseplants"

    def __init__(self, path: str) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Used from asyncio.to_thread workers, one write at a time.
        self._conn = sqlite3.connect(self.path, check_same_thread=False)
        self._slots = Attributes.slot_names()
        self._columns = ["name", "image", *self._slots]
        self._write_lock: Optional[asyncio.Lock] = None
        self.init_database()

    def init_database(self) -> None:
        slot_columns = ",\n".join(f"    {slot} TEXT" for slot in self._slots)
        with self._conn:
            self._conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {self.table} (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    image TEXT NOT NULL,
                {slot_columns},
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
                """
            )

    def _write(self, values: List[Optional[str]]) -> None:
        placeholders = ", ".join("?" for _ in self._columns)
        with self._conn:
            self._conn.execute(
                f"INSERT INTO {self.table} ({', '.join(self._columns)}) VALUES ({placeholders})",
                values,
            )

    async def insert(self, plant: Houseplant) -> None:
        values = [plant.name, plant.image, *(plant.attributes.value_of(s) for s in self._slots)]
        # Created lazily so the lock binds to the running loop.
        if self._write_lock is None:
            self._write_lock = asyncio.Lock()
        async with self._write_lock:
            await asyncio.to_thread(self._write, values)

    def count(self) -> int:
        return self._conn.execute(f"SELECT COUNT(*) FROM {self.table}").fetchone()[0]

    def close(self) -> None:
        self._conn.close()
