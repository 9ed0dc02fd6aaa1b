from __future__ import annotations

import json
from pathlib import Path

from ..models import Houseplant


class JSONLinesStorage:
    """One JSON object per line, appended as plants arrive."""

    def __init__(self, path: str) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(self.path, "a", encoding="utf-8")

    async def insert(self, plant: Houseplant) -> None:
        # Written without awaiting, so concurrent inserts never interleave lines.
        self._file.write(json.dumps(plant.to_dict(), ensure_ascii=False) + "\n")
        self._file.flush()

    def close(self) -> None:
        self._file.close()
