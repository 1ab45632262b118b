"""
Format Normalizer

Converts the three supplier variant shapes into one canonical Variant list:

1. Structured variant records (catalog relation, one dict per variant)
2. Legacy free-form JSON array of variant blobs with inconsistent keys
3. Nothing at all

Malformed individual entries are skipped, malformed fields fall back to
defaults; every degradation is counted on the call's ExtractionDiagnostics.
"""

import json
import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from ..models import ExtractionDiagnostics, Variant, VariantDimensions

logger = logging.getLogger(__name__)

# Key fallback chains for legacy variant blobs, first non-empty value wins
LEGACY_KEYS = {
    "external_id": ("vid", "variantId"),
    "name": ("variantNameEn", "variantName", "name", "variantKey"),
    "sku": ("variantSku", "sku"),
    "price": ("variantSellPrice", "variantPrice", "price", "sellPrice"),
    "stock": ("variantStock", "stock"),
    "weight": ("variantWeight", "weight"),
    "dimensions": ("variantDimensions", "dimensions"),
    "image": ("variantImage", "image"),
    "properties": ("variantProperties", "properties", "variantKey"),
}

# Key fallback chains for structured variant records
RECORD_KEYS = {
    "external_id": ("cjVariantId", "externalId", "id"),
    "name": ("name", "displayName", "variantNameEn"),
    "sku": ("sku",),
    "price": ("price",),
    "stock": ("stock",),
    "weight": ("weight", "weightGrams"),
    "dimensions": ("dimensions",),
    "image": ("image", "imageUrl"),
    "properties": ("properties", "propertiesRaw"),
}


def _first(data: Dict[str, Any], keys: Iterable[str]) -> Any:
    """Return the first value that is not None/empty for the given keys."""
    for key in keys:
        value = data.get(key)
        if value is not None and value != "":
            return value
    return None


def _to_decimal(value: Any) -> Decimal:
    if value is None or isinstance(value, bool):
        return Decimal("0")
    try:
        result = Decimal(str(value).strip().replace(",", "."))
    except (InvalidOperation, ValueError):
        return Decimal("0")
    return result if result.is_finite() else Decimal("0")


def _to_int(value: Any) -> int:
    if value is None or isinstance(value, bool):
        return 0
    try:
        return max(int(float(str(value).strip())), 0)
    except (TypeError, ValueError, OverflowError):
        return 0


def _to_float(value: Any) -> float:
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        result = float(str(value).strip().replace(",", "."))
    except (TypeError, ValueError):
        return 0.0
    # NaN and infinities are not weights
    return result if result == result and abs(result) != float("inf") else 0.0


def _is_json_like(text: str) -> bool:
    stripped = text.lstrip()
    return stripped[:1] in ('{', '[', '"')


class FormatNormalizer:
    """
    Normalizes supplier variant data into canonical Variant records.

    Usage:
        normalizer = FormatNormalizer()
        variants = normalizer.normalize(product_variants, legacy_json)
        gallery = normalizer.normalize_gallery(product_images)
    """

    def normalize(
        self,
        variant_records: Optional[Iterable[Any]] = None,
        legacy_variant_json: Optional[Any] = None,
        diagnostics: Optional[ExtractionDiagnostics] = None,
    ) -> List[Variant]:
        """
        Convert whichever variant shape is present into a Variant list.

        Priority order:
        1. Structured variant records (if non-empty)
        2. Legacy JSON array (if it parses to a non-empty list)
        3. Empty list

        Args:
            variant_records: Structured variant dicts from the catalog
            legacy_variant_json: Legacy variants as a JSON string or a list
            diagnostics: Call-scoped counters (created if not given)

        Returns:
            List of Variant in source order
        """
        if diagnostics is None:
            diagnostics = ExtractionDiagnostics()

        records = list(variant_records or [])
        if records:
            return self._map_entries(records, RECORD_KEYS, diagnostics, synthesize_names=False)

        legacy = self.parse_legacy_json(legacy_variant_json, diagnostics)
        if legacy:
            return self._map_entries(legacy, LEGACY_KEYS, diagnostics, synthesize_names=True)

        return []

    def parse_legacy_json(
        self,
        legacy_variant_json: Optional[Any],
        diagnostics: Optional[ExtractionDiagnostics] = None,
    ) -> List[Any]:
        """
        Parse the legacy variants field into a list.

        Returns:
            Parsed list, or empty list if absent, malformed or not an array
        """
        if legacy_variant_json is None or legacy_variant_json == "":
            return []

        if isinstance(legacy_variant_json, (list, tuple)):
            return list(legacy_variant_json)

        if not isinstance(legacy_variant_json, str):
            return []

        try:
            parsed = json.loads(legacy_variant_json)
        except (json.JSONDecodeError, ValueError):
            if diagnostics is not None:
                diagnostics.record("legacy_json_invalid")
            logger.debug("legacy variants JSON could not be parsed")
            return []

        if isinstance(parsed, list):
            return parsed
        return []

    def normalize_gallery(
        self,
        gallery_images: Any,
        diagnostics: Optional[ExtractionDiagnostics] = None,
    ) -> Tuple[str, ...]:
        """
        Normalize the product gallery into an ordered tuple of unique URLs.

        Accepts a list of URLs, a list of {"url": ...} objects, a JSON-encoded
        array string, or a single URL string.
        """
        if not gallery_images:
            return ()

        items: List[Any]
        if isinstance(gallery_images, str):
            text = gallery_images.strip()
            if text.startswith('['):
                try:
                    parsed = json.loads(text)
                except (json.JSONDecodeError, ValueError):
                    if diagnostics is not None:
                        diagnostics.record("gallery_json_invalid")
                    return ()
                items = parsed if isinstance(parsed, list) else []
            else:
                items = [text]
        elif isinstance(gallery_images, (list, tuple)):
            items = list(gallery_images)
        else:
            return ()

        urls: List[str] = []
        seen = set()
        for item in items:
            if isinstance(item, dict):
                item = item.get("url") or item.get("src") or ""
            if not isinstance(item, str):
                continue
            url = item.strip()
            if url and url not in seen:
                seen.add(url)
                urls.append(url)
        return tuple(urls)

    # ── Entry mapping ────────────────────────────────────────────────────────

    def _map_entries(
        self,
        entries: List[Any],
        keys: Dict[str, Tuple[str, ...]],
        diagnostics: ExtractionDiagnostics,
        synthesize_names: bool,
    ) -> List[Variant]:
        variants = []
        for idx, entry in enumerate(entries):
            if not isinstance(entry, dict):
                diagnostics.record("variant_entry_skipped")
                logger.debug("skipping variant entry %d: not an object (%s)", idx, type(entry).__name__)
                continue
            variants.append(self._map_entry(idx, entry, keys, diagnostics, synthesize_names))
        return variants

    def _map_entry(
        self,
        idx: int,
        entry: Dict[str, Any],
        keys: Dict[str, Tuple[str, ...]],
        diagnostics: ExtractionDiagnostics,
        synthesize_names: bool,
    ) -> Variant:
        name = _first(entry, keys["name"])
        name = str(name).strip() if name is not None else ""
        if not name and synthesize_names:
            name = f"Variant {idx + 1}"

        external_id = _first(entry, keys["external_id"])
        sku = _first(entry, keys["sku"])
        image = _first(entry, keys["image"])

        return Variant(
            external_id=str(external_id) if external_id is not None else "",
            display_name=name,
            sku=str(sku) if sku is not None else "",
            price=_to_decimal(_first(entry, keys["price"])),
            stock=_to_int(_first(entry, keys["stock"])),
            weight_grams=_to_float(_first(entry, keys["weight"])),
            dimensions=self.parse_dimensions(_first(entry, keys["dimensions"]), diagnostics),
            image_url=image.strip() if isinstance(image, str) else "",
            properties_raw=self.parse_properties(_first(entry, keys["properties"]), diagnostics),
            is_active=self._is_active(entry),
        )

    def parse_dimensions(
        self,
        value: Any,
        diagnostics: Optional[ExtractionDiagnostics] = None,
    ) -> Union[VariantDimensions, str]:
        """
        Parse variant dimensions.

        Dicts and JSON-encoded dicts become VariantDimensions; other plain
        strings (e.g. "30x20x10 cm") are kept raw; malformed JSON yields an
        empty VariantDimensions.
        """
        if value is None or value == "":
            return VariantDimensions()

        if isinstance(value, str):
            if not _is_json_like(value):
                return value.strip()
            try:
                value = json.loads(value)
            except (json.JSONDecodeError, ValueError):
                if diagnostics is not None:
                    diagnostics.record("dimensions_invalid")
                return VariantDimensions()
            if isinstance(value, str):
                return value.strip()

        if isinstance(value, dict):
            return VariantDimensions(
                length=_to_float(value.get("length")),
                width=_to_float(value.get("width")),
                height=_to_float(value.get("height")),
            )

        return VariantDimensions()

    def parse_properties(
        self,
        value: Any,
        diagnostics: Optional[ExtractionDiagnostics] = None,
    ) -> Union[Dict[str, Any], str]:
        """
        Parse variant properties.

        Dicts and JSON-encoded dicts stay structured; JSON-encoded strings and
        plain text (e.g. a legacy key "Black Zone2-S") are kept as opaque
        strings; malformed JSON yields an empty dict.
        """
        if value is None or value == "":
            return {}

        if isinstance(value, str):
            if not _is_json_like(value):
                return value.strip()
            try:
                value = json.loads(value)
            except (json.JSONDecodeError, ValueError):
                if diagnostics is not None:
                    diagnostics.record("properties_invalid")
                return {}

        if isinstance(value, dict):
            return dict(value)
        if isinstance(value, str):
            return value.strip()

        return {}

    def _is_active(self, entry: Dict[str, Any]) -> bool:
        if entry.get("isActive") is False:
            return False
        status = entry.get("status")
        return not (isinstance(status, str) and status.lower() == "inactive")
