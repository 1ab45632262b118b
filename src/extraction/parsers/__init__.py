"""
Specialized parsers for supplier description text.

Each parser handles a specific part of the description:
- DescriptionParser: color and size sections (markdown blocks, inline labels)
- SpecFieldParser: bold material / other spec fields
"""

from .description_parser import DescriptionParser
from .spec_fields import SpecFieldParser

__all__ = [
    'DescriptionParser',
    'SpecFieldParser',
]
