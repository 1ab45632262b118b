"""
Attribute Canonicalizer

Turns raw description candidates into canonical attribute values:

- Colors: title-cased, trimmed, de-duplicated case-insensitively in
  first-seen order
- Sizes: cleaned ("no.6" -> "6"), de-duplicated and sorted (numbers by
  value, XS..XXXL by rank, anything else lexically)
- Materials / other: one entry per label, first wins

When a description yields no colors or sizes, the orchestrator asks for the
variant-derived fallbacks (colors_from_variants / sizes_from_variants).
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from ..common.config_loader import Vocabulary, load_vocabulary
from ..common.constants import CANDIDATE_KINDS, KIND_COLOR, KIND_MATERIAL, KIND_OTHER, KIND_SIZE
from ..common.text_utils import clean_text, title_case
from ..models import (
    AttributeCandidate,
    MaterialAttribute,
    OtherAttribute,
    SizeAttribute,
    Variant,
)
from .sizes import clean_size, size_sort_key, trailing_size_token
from .variant_colors import color_token_from_name, known_variant_color

logger = logging.getLogger(__name__)


@dataclass
class CanonicalAttributes:
    """Canonicalizer output, before images are bound to colors."""
    colors: List[str] = field(default_factory=list)
    sizes: List[SizeAttribute] = field(default_factory=list)
    materials: List[MaterialAttribute] = field(default_factory=list)
    other: List[OtherAttribute] = field(default_factory=list)


class AttributeCanonicalizer:
    """
    Normalizes and de-duplicates attribute candidates.

    Usage:
        canonicalizer = AttributeCanonicalizer()
        result = canonicalizer.canonicalize(candidates)
        result.colors   # ['White Gold', 'Yellow Gold']
        result.sizes    # [SizeAttribute(label='6', ...), ...]
    """

    def __init__(self, vocabulary: Optional[Vocabulary] = None):
        """
        Initialize the canonicalizer.

        Args:
            vocabulary: Optional vocabulary. If None, loads from config.
        """
        self.vocabulary = vocabulary if vocabulary is not None else load_vocabulary()

    def canonicalize(self, candidates: Iterable[AttributeCandidate]) -> CanonicalAttributes:
        """
        Canonicalize candidates of every kind.

        Args:
            candidates: Parser output, any order

        Returns:
            CanonicalAttributes with colors, sorted sizes, materials, other
        """
        by_kind = {kind: [] for kind in CANDIDATE_KINDS}
        for candidate in candidates:
            if candidate.kind in by_kind:
                by_kind[candidate.kind].append(candidate)

        for kind_candidates in by_kind.values():
            kind_candidates.sort(key=lambda c: c.source_index)

        materials = self.canonical_pairs(by_kind[KIND_MATERIAL], MaterialAttribute)
        taken = {m.label.lower() for m in materials}
        other = self.canonical_pairs(by_kind[KIND_OTHER], OtherAttribute, taken)

        return CanonicalAttributes(
            colors=self.canonical_colors(c.raw_text for c in by_kind[KIND_COLOR]),
            sizes=self.canonical_sizes(c.raw_text for c in by_kind[KIND_SIZE]),
            materials=materials,
            other=other,
        )

    # ── Colors ────────────────────────────────────────────────────────────────

    def canonical_color(self, raw: str) -> str:
        """Title-case and trim one color ("white gold" -> "White Gold")."""
        return title_case(clean_text(raw), self.vocabulary.minor_words)

    def canonical_colors(self, raw_colors: Iterable[str]) -> List[str]:
        """Canonical colors, de-duplicated case-insensitively in first-seen order."""
        colors = []
        seen = set()
        for raw in raw_colors:
            color = self.canonical_color(raw) if raw else ""
            if not color or color.lower() in seen:
                continue
            seen.add(color.lower())
            colors.append(color)
        return colors

    def colors_from_variants(self, variants: Iterable[Variant]) -> List[str]:
        """
        Derive colors from variant names/properties.

        Only known colors are kept ("Black-S", "Brown-M", "Black-L" ->
        ["Black", "Brown"]).
        """
        derived = []
        for variant in variants:
            color = known_variant_color(variant, self.vocabulary)
            if color:
                derived.append(color)
        return self.canonical_colors(derived)

    # ── Sizes ─────────────────────────────────────────────────────────────────

    def canonical_sizes(self, raw_sizes: Iterable[str]) -> List[SizeAttribute]:
        """Clean, de-duplicate and sort size tokens."""
        labels = []
        seen = set()
        for raw in raw_sizes:
            label = clean_size(raw, self.vocabulary)
            if not label or label.upper() in seen:
                continue
            seen.add(label.upper())
            labels.append(label)

        sizes = [SizeAttribute(label=label, sort_key=size_sort_key(label, self.vocabulary)) for label in labels]
        sizes.sort(key=lambda s: s.sort_key)
        return sizes

    def sizes_from_variants(self, variants: Iterable[Variant]) -> List[SizeAttribute]:
        """
        Derive sizes from variant properties.

        Structured properties contribute value2/value3. Variants without them
        offer the trailing token of their opaque properties or display name
        ("Black Zone2-S" -> "S"), provided the key starts with a known color.
        """
        raw_sizes = []
        for variant in variants:
            declared = [
                str(variant.properties[key])
                for key in ("value2", "value3")
                if variant.properties.get(key) not in (None, "")
            ]
            if declared:
                raw_sizes.extend(declared)
                continue

            for key in (variant.properties_text, variant.display_name):
                token = color_token_from_name(key, self.vocabulary)
                if token and self.vocabulary.is_known_color(token):
                    trailing = trailing_size_token(key)
                    if trailing:
                        raw_sizes.append(trailing)
                        break

        return self.canonical_sizes(raw_sizes)

    # ── Materials / other ─────────────────────────────────────────────────────

    def canonical_pairs(self, candidates: Iterable[AttributeCandidate], cls, taken=None) -> list:
        """One label/value pair per label (case-insensitive), first wins."""
        pairs = []
        seen = set(taken or ())
        for candidate in candidates:
            label = clean_text(candidate.label)
            value = clean_text(candidate.raw_text)
            if not label or not value or label.lower() in seen:
                continue
            seen.add(label.lower())
            pairs.append(cls(label=label, value=value))
        return pairs
