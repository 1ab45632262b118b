"""
Extraction Orchestrator

Single entry point of the engine. Sequences the stages for one product:

    FormatNormalizer -> DescriptionParser -> AttributeCanonicalizer
    -> ImageReconciler -> AttributeSet

Fallbacks:
- No description colors: colors come from variant names/properties
- No description sizes: sizes come from variant properties/keys

Each stage is wrapped: a stage that raises is logged, counted as
"stage_failed" and degrades its attribute kind to empty. extract() never
raises for bad product data and keeps no state between calls, so it can be
mapped over many products from any number of threads.
"""

import logging
from functools import lru_cache
from typing import Any, Callable, List, Optional, Tuple

from ..common.config_loader import Vocabulary, load_vocabulary
from ..models import AttributeSet, ExtractionDiagnostics, ProductRecord
from .canonicalizer import AttributeCanonicalizer, CanonicalAttributes
from .format_normalizer import FormatNormalizer
from .image_reconciler import ImageReconciler
from .parsers import DescriptionParser

logger = logging.getLogger(__name__)


class ExtractionOrchestrator:
    """
    Extracts the AttributeSet of one product.

    Usage:
        orchestrator = ExtractionOrchestrator()
        attribute_set = orchestrator.extract(
            ProductRecord(product_id="p1", description="Color: Black, Brown"),
        )
        attribute_set.to_dict()
        # -> {'colors': [{'name': 'Black', 'imageUrl': None}, ...], ...}
    """

    def __init__(self, vocabulary: Optional[Vocabulary] = None):
        """
        Initialize the orchestrator and its stages.

        Args:
            vocabulary: Optional vocabulary shared by all stages. If None,
                loads from config.
        """
        self.vocabulary = vocabulary if vocabulary is not None else load_vocabulary()
        self.normalizer = FormatNormalizer()
        self.parser = DescriptionParser(self.vocabulary)
        self.canonicalizer = AttributeCanonicalizer(self.vocabulary)
        self.reconciler = ImageReconciler(self.vocabulary)

    def extract(
        self,
        product: Any,
        variant_records: Optional[Any] = None,
        legacy_variant_json: Optional[Any] = None,
    ) -> AttributeSet:
        """
        Extract attributes of one product.

        Args:
            product: ProductRecord, catalog payload dict, or None
            variant_records: Structured variant records (overrides the product's)
            legacy_variant_json: Legacy variant JSON (overrides the product's)

        Returns:
            AttributeSet (possibly empty, never None)
        """
        attribute_set, _diagnostics = self.extract_with_diagnostics(
            product, variant_records, legacy_variant_json,
        )
        return attribute_set

    def extract_with_diagnostics(
        self,
        product: Any,
        variant_records: Optional[Any] = None,
        legacy_variant_json: Optional[Any] = None,
    ) -> Tuple[AttributeSet, ExtractionDiagnostics]:
        """
        Extract attributes of one product, also returning degradation counters.

        Returns:
            (AttributeSet, ExtractionDiagnostics)
        """
        record = self._as_record(product)
        if variant_records is None:
            variant_records = record.variant_records
        if legacy_variant_json is None:
            legacy_variant_json = record.legacy_variant_json

        diagnostics = ExtractionDiagnostics(product_id=record.product_id)

        variants = self._run_stage(
            "normalize", diagnostics, list,
            self.normalizer.normalize, variant_records, legacy_variant_json, diagnostics,
        )
        gallery = self._run_stage(
            "gallery", diagnostics, tuple,
            self.normalizer.normalize_gallery, record.gallery_images, diagnostics,
        )
        candidates = self._run_stage(
            "parse", diagnostics, list,
            self.parser.parse_candidates, record.description,
        )
        canonical = self._run_stage(
            "canonicalize", diagnostics, CanonicalAttributes,
            self.canonicalizer.canonicalize, candidates,
        )

        colors = canonical.colors
        if not colors and variants:
            colors = self._run_stage(
                "variant_colors", diagnostics, list,
                self.canonicalizer.colors_from_variants, variants,
            )
            if colors:
                logger.debug("[%s] colors derived from variants: %s", record.product_id, colors)

        sizes = canonical.sizes
        if not sizes and variants:
            sizes = self._run_stage(
                "variant_sizes", diagnostics, list,
                self.canonicalizer.sizes_from_variants, variants,
            )

        color_attributes = self._run_stage(
            "reconcile", diagnostics, list,
            self._reconcile, colors, variants, gallery, record.product_id,
        )

        attribute_set = AttributeSet(
            colors=tuple(color_attributes),
            sizes=tuple(sizes),
            materials=tuple(canonical.materials),
            other=tuple(canonical.other),
        )

        if diagnostics.total:
            logger.debug("[%s] degraded input: %s", record.product_id, dict(diagnostics.counts))
        return attribute_set, diagnostics

    def _reconcile(self, colors: List[str], variants, gallery, product_id: str) -> list:
        assigned, _ownership = self.reconciler.assign(colors, variants, gallery, product_id=product_id)
        return assigned

    def _run_stage(
        self,
        stage: str,
        diagnostics: ExtractionDiagnostics,
        default_factory: Callable[[], Any],
        func: Callable[..., Any],
        *args: Any,
    ) -> Any:
        """Run one stage; on any exception log it and return an empty result."""
        try:
            return func(*args)
        except Exception as exc:
            diagnostics.record("stage_failed")
            logger.warning(
                "[%s] %s stage failed, continuing without it: %s",
                diagnostics.product_id, stage, exc,
            )
            return default_factory()

    def _as_record(self, product: Any) -> ProductRecord:
        if isinstance(product, ProductRecord):
            return product
        if isinstance(product, dict):
            return ProductRecord.from_dict(product)
        if product is not None:
            logger.debug("unsupported product type %s, treating as empty", type(product).__name__)
        return ProductRecord()


@lru_cache(maxsize=1)
def get_orchestrator() -> ExtractionOrchestrator:
    """Shared orchestrator using the bundled vocabulary."""
    return ExtractionOrchestrator()


def extract(
    product: Any,
    variant_records: Optional[Any] = None,
    legacy_variant_json: Optional[Any] = None,
) -> AttributeSet:
    """
    Convenience wrapper around ExtractionOrchestrator.extract().

    Example:
        >>> extract({"id": "p1", "description": "Size: no.6, no.7"}).size_labels
        ['6', '7']
    """
    return get_orchestrator().extract(product, variant_records, legacy_variant_json)
