"""
Catalog Attribute Extraction Engine

Derives purchasable attributes (colors, sizes, materials, other specs) and a
representative image per color from heterogeneous supplier product data.

Modules:
    models      - Data models (Variant, ProductRecord, AttributeSet, ...)
    common      - Shared utilities (config loader, logging, text utils)
    extraction  - Normalizer, description parsers, canonicalizer, image
                  reconciler and the orchestrator that sequences them
"""
