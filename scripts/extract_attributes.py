#!/usr/bin/env python3
"""
Batch Attribute Extraction Script

Re-extracts colors, sizes, materials and other specs for every product in a
JSON export of the catalog and writes the results keyed by product id.

Input: a JSON array of product objects (or {"products": [...]}) using the
catalog's keys: id, description, images, productVariants, variants.

Output: {"<product id>": {"attributes": {...}, "validation": {...}}, ...}

Usage:
    python3 scripts/extract_attributes.py --input data/products.json
    python3 scripts/extract_attributes.py --input data/products.json --output data/attributes.json
    python3 scripts/extract_attributes.py --input data/products.json --workers 8 --verbose
"""

import argparse
import json
import logging
import os
import sys
from concurrent.futures import ThreadPoolExecutor

# Add project root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from src.common.log_config import setup_logging
from src.extraction import AttributeSetValidator, ExtractionOrchestrator
from src.models import ProductRecord

logger = logging.getLogger(__name__)


def load_products(path: str) -> list:
    """Read product objects from a JSON export."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = data.get("products", [])
    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON array of products in {path}")

    return [ProductRecord.from_dict(item) for item in data if isinstance(item, dict)]


def process_product(orchestrator: ExtractionOrchestrator, product: ProductRecord) -> tuple:
    """Extract and validate one product. Returns (product_id, result dict)."""
    attribute_set, diagnostics = orchestrator.extract_with_diagnostics(product)
    validation = AttributeSetValidator(attribute_set).validate()

    result = {
        "attributes": attribute_set.to_dict(),
        "validation": {
            "overall_valid": validation["overall_valid"],
            "issues": validation["issues"],
        },
    }
    if diagnostics.total:
        result["diagnostics"] = dict(sorted(diagnostics.counts.items()))
    return product.product_id, result


def main():
    parser = argparse.ArgumentParser(
        description="Extract color/size/material attributes for a product export"
    )
    parser.add_argument(
        "--input", "-i",
        required=True,
        help="Input JSON file with product records"
    )
    parser.add_argument(
        "--output", "-o",
        help="Output JSON file (default: stdout)"
    )
    parser.add_argument(
        "--workers", "-w",
        type=int,
        default=1,
        help="Number of worker threads (default: 1)"
    )
    parser.add_argument(
        "--limit", "-l",
        type=int,
        default=0,
        help="Limit number of products to process (0 = no limit)"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (debug) logging"
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress info messages, show only warnings and errors"
    )

    args = parser.parse_args()
    setup_logging(verbose=args.verbose, quiet=args.quiet)

    if not os.path.exists(args.input):
        logger.error("Input file not found: %s", args.input)
        sys.exit(1)

    try:
        products = load_products(args.input)
    except (json.JSONDecodeError, ValueError) as e:
        logger.error("Could not read products from %s: %s", args.input, e)
        sys.exit(1)

    if args.limit:
        products = products[:args.limit]

    if not products:
        logger.error("No products found in input file")
        sys.exit(1)

    logger.info("Extracting attributes for %d products (%d workers)", len(products), args.workers)

    orchestrator = ExtractionOrchestrator()
    with ThreadPoolExecutor(max_workers=max(1, args.workers)) as ex:
        results = list(ex.map(lambda p: process_product(orchestrator, p), products))

    output = {}
    invalid = 0
    for product_id, result in results:
        if not result["validation"]["overall_valid"]:
            invalid += 1
            logger.warning("[%s] %s", product_id, "; ".join(result["validation"]["issues"]))
        key = product_id or f"product-{len(output) + 1}"
        if key in output:
            suffix = 2
            while f"{key}-{suffix}" in output:
                suffix += 1
            logger.warning("Duplicate product id %s, writing it as %s-%d", key, key, suffix)
            key = f"{key}-{suffix}"
        output[key] = result

    payload = json.dumps(output, ensure_ascii=False, indent=2)
    if args.output:
        os.makedirs(os.path.dirname(args.output) or ".", exist_ok=True)
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(payload + "\n")
        logger.info("Wrote %d products to %s", len(output), args.output)
    else:
        print(payload)

    logger.info("Done: %d products, %d with invariant violations", len(output), invalid)


if __name__ == "__main__":
    main()
