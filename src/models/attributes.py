"""
Attribute data models.

Pure data classes for the candidates mined from descriptions and the
AttributeSet the engine returns. Everything here is created fresh per
extraction call.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class AttributeCandidate:
    """
    A raw token found in a description, before canonicalization.

    source_index is the position in the source list/markdown block and keeps
    ordering deterministic. label is only set for material/other candidates.
    """
    kind: str
    raw_text: str
    source_index: int = 0
    label: str = ""
    dialect: str = ""


@dataclass(frozen=True)
class ColorAttribute:
    """Canonical color name with at most one attached image."""
    name: str
    image_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "imageUrl": self.image_url}


@dataclass(frozen=True)
class SizeAttribute:
    """
    Canonical size label and its derived sort key.

    sort_key groups numeric sizes first (by value), then scale words
    (XS..XXXL by rank), then anything else (lexical).
    """
    label: str
    sort_key: Tuple[Any, ...] = ()


@dataclass(frozen=True)
class MaterialAttribute:
    label: str
    value: str

    def to_dict(self) -> Dict[str, str]:
        return {"label": self.label, "value": self.value}


@dataclass(frozen=True)
class OtherAttribute:
    label: str
    value: str

    def to_dict(self) -> Dict[str, str]:
        return {"label": self.label, "value": self.value}


@dataclass(frozen=True)
class AttributeSet:
    """
    The engine's sole output.

    Serializes to JSON with stable field names: colors[].name,
    colors[].imageUrl, sizes[], materials[].label/value, other[].label/value.
    """
    colors: Tuple[ColorAttribute, ...] = ()
    sizes: Tuple[SizeAttribute, ...] = ()
    materials: Tuple[MaterialAttribute, ...] = ()
    other: Tuple[OtherAttribute, ...] = ()

    @property
    def color_names(self) -> list:
        return [c.name for c in self.colors]

    @property
    def size_labels(self) -> list:
        return [s.label for s in self.sizes]

    def is_empty(self) -> bool:
        return not (self.colors or self.sizes or self.materials or self.other)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "colors": [c.to_dict() for c in self.colors],
            "sizes": self.size_labels,
            "materials": [m.to_dict() for m in self.materials],
            "other": [o.to_dict() for o in self.other],
        }


@dataclass
class ExtractionDiagnostics:
    """
    Call-scoped counters of degraded input.

    Reasons: legacy_json_invalid, variant_entry_skipped, dimensions_invalid,
    properties_invalid, gallery_json_invalid, stage_failed.
    """
    product_id: str = ""
    counts: Counter = field(default_factory=Counter)

    def record(self, reason: str, amount: int = 1) -> None:
        self.counts[reason] += amount

    def __getitem__(self, reason: str) -> int:
        return self.counts[reason]

    @property
    def total(self) -> int:
        return sum(self.counts.values())
