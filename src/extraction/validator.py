"""
Attribute Set Validator

Checks an extracted AttributeSet against the engine's output invariants.
Used by the batch script to flag suspicious products; the engine itself
never depends on it.
"""

from __future__ import annotations

from urllib.parse import urlparse

from ..models import AttributeSet


class AttributeSetValidator:
    """Validates an AttributeSet against its invariants."""

    def __init__(self, attribute_set: AttributeSet):
        self.attribute_set = attribute_set

    def validate(self) -> dict:
        """
        Run all validations.

        Returns a dict with keys:
          overall_valid - False if any error fires
          counts        - number of colors/sizes/materials/other
          errors        - invariant violations (duplicate images, unsorted sizes, ...)
          warnings      - quality hints (colors without image, odd image URLs)
          issues        - combined list of errors + warnings
        """
        errors: list[str] = []
        warnings: list[str] = []
        s = self.attribute_set

        # ── Error checks ─────────────────────────────────────────────────────

        # colors: non-empty names, unique case-insensitively
        seen_names: set[str] = set()
        for color in s.colors:
            if not color.name or not color.name.strip():
                errors.append("colors: empty color name")
                continue
            key = color.name.lower()
            if key in seen_names:
                errors.append(f"colors: duplicate name {color.name!r}")
            seen_names.add(key)

        # colors: an image is bound to at most one color
        seen_images: dict[str, str] = {}
        for color in s.colors:
            if not color.image_url:
                continue
            if color.image_url in seen_images:
                errors.append(
                    f"colors: image reused by {seen_images[color.image_url]!r} "
                    f"and {color.name!r} ({color.image_url[:60]!r})"
                )
            else:
                seen_images[color.image_url] = color.name

        # sizes: non-empty, unique, already in sort order
        labels = [size.label for size in s.sizes]
        if any(not label or not label.strip() for label in labels):
            errors.append("sizes: empty size label")
        if len({label.upper() for label in labels}) != len(labels):
            errors.append(f"sizes: duplicate labels ({labels})")
        sort_keys = [size.sort_key for size in s.sizes]
        if sort_keys != sorted(sort_keys):
            errors.append(f"sizes: not in sort order ({labels})")

        # materials / other: label and value both present
        for group_name, pairs in (("materials", s.materials), ("other", s.other)):
            for pair in pairs:
                if not pair.label or not pair.label.strip():
                    errors.append(f"{group_name}: empty label (value {pair.value!r})")
                if not pair.value or not pair.value.strip():
                    errors.append(f"{group_name}: empty value for {pair.label!r}")

        # ── Warning checks ────────────────────────────────────────────────────

        missing_images = [c.name for c in s.colors if not c.image_url]
        if s.colors and missing_images:
            warnings.append(
                f"colors: {len(missing_images)}/{len(s.colors)} without image ({missing_images})"
            )

        for url in seen_images:
            parsed = urlparse(url)
            if parsed.scheme not in ("http", "https") or not parsed.netloc:
                warnings.append(f"image URL: not an absolute http(s) URL ({url[:60]!r})")

        if s.is_empty():
            warnings.append("attributes: nothing extracted")

        return {
            "overall_valid": not errors,
            "counts": {
                "colors": len(s.colors),
                "sizes": len(s.sizes),
                "materials": len(s.materials),
                "other": len(s.other),
            },
            "errors": errors,
            "warnings": warnings,
            "issues": errors + warnings,
        }
