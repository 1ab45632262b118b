"""
Image Reconciler

Binds each canonical color to at most one image. Rules are evaluated in
order for every color, first hit wins:

1. variant_name   - a variant whose name yields exactly this color
2. color_map      - {variant color -> first image}: exact, then substring
                    containment either way ("leather red" / "red")
3. url_keyword    - a gallery URL carrying a color keyword ("..._noir.jpg"),
                    exact color first, then a color word of the name
4. variant_order  - first unused variant image, in variant order
5. gallery_order  - first unused gallery image, in gallery order

A color nothing matches keeps image_url=None. Every bound image is claimed in
the call's ImageOwnership and is never handed to a second color. The semantic
rules (1-3) run for every color before the ordered fallbacks (4-5) so a
fallback never takes an image a later color matches by name.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple
from urllib.parse import unquote, urlparse

from ..common.config_loader import Vocabulary, load_vocabulary
from ..common.constants import MIN_PARTIAL_MATCH_LENGTH
from ..models import ColorAttribute, Variant
from .variant_colors import variant_color, variant_name_color

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageOwnership:
    """
    Images already bound to a color in the current extraction call.

    Immutable: claim() returns a new value, so ownership is passed and
    returned explicitly and never outlives the call.
    """
    owned: FrozenSet[str] = frozenset()

    def owns(self, image_url: str) -> bool:
        return image_url in self.owned

    def claim(self, image_url: str) -> "ImageOwnership":
        return ImageOwnership(self.owned | {image_url})

    def __len__(self) -> int:
        return len(self.owned)


@dataclass(frozen=True)
class ReconcileContext:
    """Lookups built once per call from the variants and the gallery."""
    variant_name_colors: Tuple[Tuple[str, str], ...]
    color_map: Tuple[Tuple[str, str], ...]
    variant_images: Tuple[str, ...]
    gallery_images: Tuple[str, ...]
    gallery_colors: Tuple[Tuple[str, FrozenSet[str]], ...]
    url_keywords: Tuple[Tuple[str, Tuple[str, ...]], ...]


def _keyword_pattern(keyword: str) -> "re.Pattern":
    # Letters/digits on either side mean the keyword is part of another word
    return re.compile(r'(?<![a-z0-9])' + re.escape(keyword) + r'(?![a-z0-9])')


def _unique(items: Iterable[str]) -> Tuple[str, ...]:
    seen = set()
    result = []
    for item in items:
        if item and item not in seen:
            seen.add(item)
            result.append(item)
    return tuple(result)


def _contains_either_way(a: str, b: str) -> bool:
    if len(a) < MIN_PARTIAL_MATCH_LENGTH or len(b) < MIN_PARTIAL_MATCH_LENGTH:
        return False
    return a in b or b in a


# ── Rules ─────────────────────────────────────────────────────────────────────

def match_variant_name(color: str, context: ReconcileContext, ownership: ImageOwnership) -> Optional[str]:
    """Rule 1: variant whose name-derived color equals the target."""
    for token, image in context.variant_name_colors:
        if token == color and not ownership.owns(image):
            return image
    return None


def match_color_map(color: str, context: ReconcileContext, ownership: ImageOwnership) -> Optional[str]:
    """Rule 2: exact, then partial, match against the variant color map."""
    for variant_color_name, image in context.color_map:
        if variant_color_name == color and not ownership.owns(image):
            return image
    for variant_color_name, image in context.color_map:
        if _contains_either_way(variant_color_name, color) and not ownership.owns(image):
            return image
    return None


def match_url_keyword(color: str, context: ReconcileContext, ownership: ImageOwnership) -> Optional[str]:
    """Rule 3: gallery URL carrying a keyword of the color."""
    if not context.gallery_colors:
        return None

    words = [w for w in color.split() if len(w) >= MIN_PARTIAL_MATCH_LENGTH]
    exact_keys = set()
    partial_keys = set()
    for canonical, keywords in context.url_keywords:
        if color == canonical or color in keywords:
            exact_keys.add(canonical)
        if any(w == canonical or w in keywords for w in words):
            partial_keys.add(canonical)

    for keys in (exact_keys, partial_keys):
        if not keys:
            continue
        for image, detected in context.gallery_colors:
            if detected & keys and not ownership.owns(image):
                return image
    return None


def next_variant_image(color: str, context: ReconcileContext, ownership: ImageOwnership) -> Optional[str]:
    """Rule 4: first unused variant image."""
    for image in context.variant_images:
        if not ownership.owns(image):
            return image
    return None


def next_gallery_image(color: str, context: ReconcileContext, ownership: ImageOwnership) -> Optional[str]:
    """Rule 5: first unused gallery image."""
    for image in context.gallery_images:
        if not ownership.owns(image):
            return image
    return None


Rule = Callable[[str, ReconcileContext, ImageOwnership], Optional[str]]

SEMANTIC_RULES: Tuple[Tuple[str, Rule], ...] = (
    ("variant_name", match_variant_name),
    ("color_map", match_color_map),
    ("url_keyword", match_url_keyword),
)

FALLBACK_RULES: Tuple[Tuple[str, Rule], ...] = (
    ("variant_order", next_variant_image),
    ("gallery_order", next_gallery_image),
)


class ImageReconciler:
    """
    Assigns at most one image per color, never the same image twice.

    Usage:
        reconciler = ImageReconciler()
        colors = reconciler.reconcile(["Black", "Brown"], variants, gallery)
        # -> [ColorAttribute(name='Black', image_url='...'), ...]
    """

    def __init__(self, vocabulary: Optional[Vocabulary] = None):
        """
        Initialize the reconciler.

        Args:
            vocabulary: Optional vocabulary. If None, loads from config.
        """
        self.vocabulary = vocabulary if vocabulary is not None else load_vocabulary()
        # Abbreviations ("br", "pt") also name countries and locales, so they
        # are only looked for in the file name
        self._keyword_patterns: Tuple[Tuple[str, Tuple["re.Pattern", ...], Tuple["re.Pattern", ...]], ...] = tuple(
            (
                canonical,
                tuple(_keyword_pattern(k) for k in keywords if len(k) >= MIN_PARTIAL_MATCH_LENGTH),
                tuple(_keyword_pattern(k) for k in keywords if len(k) < MIN_PARTIAL_MATCH_LENGTH),
            )
            for canonical, keywords in self.vocabulary.url_keywords
        )

    def reconcile(
        self,
        colors: Sequence[str],
        variants: Sequence[Variant],
        gallery_images: Sequence[str],
    ) -> List[ColorAttribute]:
        """
        Bind images to colors.

        Args:
            colors: Canonical color names, in display order
            variants: Normalized variants
            gallery_images: Product gallery URLs, in order

        Returns:
            One ColorAttribute per color, same order
        """
        assigned, _ownership = self.assign(colors, variants, gallery_images)
        return assigned

    def assign(
        self,
        colors: Sequence[str],
        variants: Sequence[Variant],
        gallery_images: Sequence[str],
        ownership: Optional[ImageOwnership] = None,
        product_id: str = "",
    ) -> Tuple[List[ColorAttribute], ImageOwnership]:
        """
        Bind images to colors, threading ownership explicitly.

        Returns:
            (color attributes, ownership after the call)
        """
        if ownership is None:
            ownership = ImageOwnership()

        context = self.build_context(variants, gallery_images)
        images: Dict[int, str] = {}

        for rules in (SEMANTIC_RULES, FALLBACK_RULES):
            for idx, name in enumerate(colors):
                if idx in images:
                    continue
                image, rule_name = self._apply_rules(name.lower(), context, ownership, rules)
                if image:
                    ownership = ownership.claim(image)
                    images[idx] = image
                    logger.debug("[%s] color %r bound via %s: %s", product_id, name, rule_name, image)

        assigned = []
        for idx, name in enumerate(colors):
            if idx not in images:
                logger.debug("[%s] color %r has no image", product_id, name)
            assigned.append(ColorAttribute(name=name, image_url=images.get(idx)))
        return assigned, ownership

    def _apply_rules(
        self,
        color: str,
        context: ReconcileContext,
        ownership: ImageOwnership,
        rules: Tuple[Tuple[str, Rule], ...],
    ) -> Tuple[Optional[str], str]:
        for rule_name, rule in rules:
            image = rule(color, context, ownership)
            if image:
                return image, rule_name
        return None, ""

    def build_context(self, variants: Sequence[Variant], gallery_images: Sequence[str]) -> ReconcileContext:
        """Derive variant colors, the color map and gallery URL colors once."""
        variant_name_colors = []
        color_map: Dict[str, str] = {}
        for variant in variants:
            if not variant.image_url:
                continue
            name_color = variant_name_color(variant, self.vocabulary)
            if name_color:
                variant_name_colors.append((name_color, variant.image_url))
            color = variant_color(variant, self.vocabulary)
            if color and color not in color_map:
                color_map[color] = variant.image_url

        gallery = _unique(gallery_images)
        return ReconcileContext(
            variant_name_colors=tuple(variant_name_colors),
            color_map=tuple(color_map.items()),
            variant_images=_unique(v.image_url for v in variants),
            gallery_images=gallery,
            gallery_colors=tuple((url, self.colors_in_url(url)) for url in gallery),
            url_keywords=self.vocabulary.url_keywords,
        )

    def colors_in_url(self, image_url: str) -> FrozenSet[str]:
        """
        Canonical colors whose keywords appear as whole tokens in the URL path.

        Keywords shorter than three letters ("br", "pt") only count in the
        file name, not in directory segments.

        Example:
            >>> reconciler.colors_in_url("https://cdn.example.com/p/boot_noir_01.jpg")
            frozenset({'black'})
        """
        if not image_url:
            return frozenset()
        try:
            path = unquote(urlparse(image_url).path or image_url).lower()
        except ValueError:
            path = image_url.lower()

        filename = path.rsplit("/", 1)[-1]
        found = set()
        for canonical, path_patterns, filename_patterns in self._keyword_patterns:
            if any(p.search(path) for p in path_patterns) or any(p.search(filename) for p in filename_patterns):
                found.add(canonical)
        return frozenset(found)
