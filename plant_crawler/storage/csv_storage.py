from __future__ import annotations

import csv
from pathlib import Path
from typing import List

from ..models import Attributes, Houseplant


class CSVStorage:
    """
    Writes one row per plant: name, image, then a label/value column pair per attribute slot.
    """

    def __init__(self, path: str) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        is_new = not self.path.exists() or self.path.stat().st_size == 0
        self._file = open(self.path, "a", encoding="utf-8", newline="")
        self._writer = csv.writer(self._file)
        if is_new:
            self._writer.writerow(self.headers())
            self._file.flush()

    @staticmethod
    def headers() -> List[str]:
        out = ["name", "image"]
        for slot in Attributes.slot_names():
            out.extend([f"{slot}_parameter", slot])
        return out

    async def insert(self, plant: Houseplant) -> None:
        row = [plant.name, plant.image]
        for slot in Attributes.slot_names():
            attr = getattr(plant.attributes, slot)
            row.extend([attr.parameter, attr.value] if attr is not None else ["", ""])
        self._writer.writerow(row)
        self._file.flush()

    def close(self) -> None:
        self._file.close()
