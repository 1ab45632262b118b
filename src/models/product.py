"""
Product data models.

Input records handed over by the catalog service and the canonical Variant
every supplier shape is normalized into. No business logic - only data
structure definitions.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Optional, Tuple, Union


@dataclass(frozen=True)
class VariantDimensions:
    """Parsed package dimensions of a variant."""
    length: float = 0.0
    width: float = 0.0
    height: float = 0.0


@dataclass(frozen=True)
class Variant:
    """
    One purchasable variation of a product, in canonical form.

    Built once per extraction call by FormatNormalizer from either a
    structured variant record or a legacy JSON blob. Never mutated.

    properties_raw is either a mapping (structured supplier properties such
    as {"value1": "Black", "value2": "42"}) or an opaque string (e.g. a
    legacy variant key "Black Zone2-S").
    """
    external_id: str = ""
    display_name: str = ""
    sku: str = ""
    price: Decimal = Decimal("0")
    stock: int = 0
    weight_grams: float = 0.0
    dimensions: Union[VariantDimensions, str] = field(default_factory=VariantDimensions)
    image_url: str = ""
    properties_raw: Union[Dict[str, Any], str] = field(default_factory=dict)
    is_active: bool = True

    @property
    def properties(self) -> Dict[str, Any]:
        """Structured properties, or an empty dict for opaque ones."""
        return self.properties_raw if isinstance(self.properties_raw, dict) else {}

    @property
    def properties_text(self) -> str:
        """Opaque properties string, or empty string for structured ones."""
        return self.properties_raw if isinstance(self.properties_raw, str) else ""


@dataclass(frozen=True)
class ProductRecord:
    """
    A product as the catalog service hands it to the engine.

    product_id is only used to tag log lines. gallery_images may be a list
    of URLs, a list of {"url": ...} objects or a JSON-encoded array; the
    normalizer turns it into an ordered tuple of URLs.
    """
    product_id: str = ""
    description: str = ""
    gallery_images: Any = ()
    variant_records: Tuple[Any, ...] = ()
    legacy_variant_json: Optional[Any] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProductRecord":
        """
        Build a record from a catalog service payload.

        Recognizes the catalog's key names (id, description, images/image,
        productVariants, variants).
        """
        images = data.get("images")
        if not images:
            images = data.get("image") or ()

        records = data.get("productVariants")
        if not isinstance(records, (list, tuple)):
            records = ()
        description = data.get("description")

        return cls(
            product_id=str(data.get("id") or data.get("productId") or ""),
            description=description if isinstance(description, str) else "",
            gallery_images=images,
            variant_records=tuple(records),
            legacy_variant_json=data.get("variants"),
        )
