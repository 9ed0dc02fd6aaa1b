"""
Maps free-text table labels onto the fixed attribute schema.

Labels come from Russian-language plant tables, so the patterns are Cyrillic
stems. Each label is lower-cased and tested against the patterns in priority
order; the first hit picks the slot, and a label nothing matches lands in
``features``. Later rows overwrite earlier rows that picked the same slot.
"""
from __future__ import annotations

import re
from typing import Dict, Iterable, Pattern, Sequence, Tuple

from ..models import Attribute, Attributes

FALLBACK_SLOT = "features"

AttributePattern = Tuple[str, Pattern[str]]

DEFAULT_PATTERNS: Tuple[AttributePattern, ...] = (
    ("temperature", re.compile(r"температ")),
    ("humidity", re.compile(r"влажн")),
    ("illumination", re.compile(r"освещен")),
    ("watering", re.compile(r"полив")),
    ("soil", re.compile(r"грунт")),
    ("fertilizer", re.compile(r"подкорм|удобрен")),
    ("transplant", re.compile(r"пересад")),
    ("propagation", re.compile(r"размнож")),
    ("features", re.compile(r"особен")),
)


class AttributeClassifier:
    def __init__(self, patterns: Sequence[AttributePattern] = DEFAULT_PATTERNS) -> None:
        known = set(Attributes.slot_names())
        for slot, _ in patterns:
            if slot not in known:
                raise ValueError(f"unknown attribute slot {slot!r}")
        self.patterns: Tuple[AttributePattern, ...] = tuple(patterns)

    def slot_for(self, label: str) -> str:
        lowered = label.lower()
        for slot, pattern in self.patterns:
            if pattern.search(lowered):
                return slot
        return FALLBACK_SLOT

    def classify(self, rows: Iterable[Tuple[str, str]]) -> Attributes:
        slots: Dict[str, Attribute] = {}
        for label, value in rows:
            slots[self.slot_for(label)] = Attribute(parameter=label, value=value)
        return Attributes(**slots)


def classify_rows(rows: Iterable[Tuple[str, str]]) -> Attributes:
    """Classify with the default pattern table."""
    return _DEFAULT.classify(rows)


_DEFAULT = AttributeClassifier()
