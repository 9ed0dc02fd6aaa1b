from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Attribute:
    """One table row: the label as printed on the page and its content."""

    parameter: str
    value: str

    def to_dict(self) -> Dict[str, str]:
        return {"parameter": self.parameter, "value": self.value}


@dataclass(frozen=True)
class Attributes:
    """Fixed attribute schema of a plant. Every slot is optional."""

    temperature: Optional[Attribute] = None
    humidity: Optional[Attribute] = None
    illumination: Optional[Attribute] = None
    watering: Optional[Attribute] = None
    soil: Optional[Attribute] = None
    fertilizer: Optional[Attribute] = None
    transplant: Optional[Attribute] = None
    propagation: Optional[Attribute] = None
    features: Optional[Attribute] = None

    @classmethod
    def slot_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def value_of(self, slot: str) -> Optional[str]:
        attr = getattr(self, slot)
        return attr.value if attr is not None else None

    def populated(self) -> Dict[str, Attribute]:
        return {name: getattr(self, name) for name in self.slot_names() if getattr(self, name) is not None}

    def to_dict(self) -> Dict[str, Any]:
        # Drop unset slots for a cleaner export.
        return {name: attr.to_dict() for name, attr in self.populated().items()}


@dataclass(frozen=True)
class Houseplant:
    """A fully extracted plant record."""

    name: str
    image: str  # filename relative to the image directory
    attributes: Attributes

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "image": self.image,
            "attributes": self.attributes.to_dict(),
        }
