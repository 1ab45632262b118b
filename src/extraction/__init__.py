"""
Attribute extraction engine.

Modules:
    format_normalizer - FormatNormalizer for structured/legacy variant data
    variant_colors - Leading color token chain for variant names
    sizes - Size acceptance rules and sort keys
    canonicalizer - AttributeCanonicalizer (dedupe, title-case, sort)
    image_reconciler - ImageReconciler (one image per color, never reused)
    orchestrator - ExtractionOrchestrator and the extract() entry point
    validator - AttributeSetValidator for output invariants
    parsers - Description and bold spec field parsers
"""

from .canonicalizer import AttributeCanonicalizer, CanonicalAttributes
from .format_normalizer import FormatNormalizer
from .image_reconciler import ImageOwnership, ImageReconciler
from .orchestrator import ExtractionOrchestrator, extract, get_orchestrator
from .parsers import DescriptionParser, SpecFieldParser
from .validator import AttributeSetValidator
from .variant_colors import color_token_from_name

__all__ = [
    # Entry point
    'ExtractionOrchestrator',
    'extract',
    'get_orchestrator',
    # Stages
    'FormatNormalizer',
    'DescriptionParser',
    'SpecFieldParser',
    'AttributeCanonicalizer',
    'CanonicalAttributes',
    'ImageReconciler',
    'ImageOwnership',
    # Helpers
    'color_token_from_name',
    # Validation
    'AttributeSetValidator',
]
