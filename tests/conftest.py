"""Shared test fixtures."""

from decimal import Decimal

import pytest

from src.common.config_loader import FieldLabel, Vocabulary, load_vocabulary
from src.extraction import ExtractionOrchestrator
from src.models import Variant


@pytest.fixture
def vocabulary():
    """The bundled vocabulary from config/."""
    return load_vocabulary()


@pytest.fixture
def small_vocabulary():
    """A hand-built vocabulary, independent of the YAML files."""
    return Vocabulary(
        known_colors=frozenset({"black", "brown", "red"}),
        url_keywords=(
            ("black", ("black", "noir")),
            ("red", ("red", "rouge")),
        ),
        size_tokens=frozenset({"s", "m", "l", "xl"}),
        size_scale={"S": 1, "M": 2, "L": 3, "XL": 4},
        descriptive_suffixes=("lining", "single"),
        non_color_words=frozenset({"warm", "single", "lining"}),
        minor_words=frozenset({"and"}),
        field_labels=(
            FieldLabel(label="Upper material", kind="material", aliases=("upper material",), max_length=50),
        ),
    )


@pytest.fixture
def make_variant():
    """Factory for Variant records with sensible defaults."""
    def _make(display_name="", image_url="", properties_raw=None, **kwargs):
        return Variant(
            display_name=display_name,
            image_url=image_url,
            properties_raw=properties_raw if properties_raw is not None else {},
            price=kwargs.pop("price", Decimal("0")),
            **kwargs,
        )
    return _make


@pytest.fixture
def orchestrator(vocabulary):
    return ExtractionOrchestrator(vocabulary)


@pytest.fixture
def boot_records():
    """Structured variant records of a boot sold in two colors and three sizes."""
    return [
        {"cjVariantId": "v1", "name": "Black-S", "image": "https://cdn.example.com/v/1001.jpg", "price": "19.90"},
        {"cjVariantId": "v2", "name": "Brown-M", "image": "https://cdn.example.com/v/1002.jpg", "price": "19.90"},
        {"cjVariantId": "v3", "name": "Black-L", "image": "https://cdn.example.com/v/1003.jpg", "price": "21.50"},
    ]


@pytest.fixture
def legacy_zone_json():
    return (
        '[{"variantKey":"Black Zone2-S","variantImage":"u1"},'
        '{"variantKey":"Blue Zone4-M","variantImage":"u2"}]'
    )
