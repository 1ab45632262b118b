"""
Data models for attribute extraction.

This module contains pure data classes with no business logic.
"""

from .attributes import (
    AttributeCandidate,
    AttributeSet,
    ColorAttribute,
    ExtractionDiagnostics,
    MaterialAttribute,
    OtherAttribute,
    SizeAttribute,
)
from .product import ProductRecord, Variant, VariantDimensions

__all__ = [
    'AttributeCandidate',
    'AttributeSet',
    'ColorAttribute',
    'ExtractionDiagnostics',
    'MaterialAttribute',
    'OtherAttribute',
    'ProductRecord',
    'SizeAttribute',
    'Variant',
    'VariantDimensions',
]
