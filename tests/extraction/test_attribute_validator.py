"""Tests for src/extraction/validator.py"""

from src.extraction.validator import AttributeSetValidator
from src.models import (
    AttributeSet,
    ColorAttribute,
    MaterialAttribute,
    OtherAttribute,
    ProductRecord,
    SizeAttribute,
)


def _valid_set():
    return AttributeSet(
        colors=(
            ColorAttribute("Black", "https://cdn.example.com/v/1.jpg"),
            ColorAttribute("Brown", "https://cdn.example.com/v/2.jpg"),
        ),
        sizes=(SizeAttribute("38", (0, 38.0, "38")), SizeAttribute("39", (0, 39.0, "39"))),
        materials=(MaterialAttribute("Upper material", "PU"),),
        other=(OtherAttribute("Style", "Casual"),),
    )


class TestValidate:
    def test_valid_set(self):
        result = AttributeSetValidator(_valid_set()).validate()
        assert result["overall_valid"] is True
        assert result["errors"] == []
        assert result["issues"] == []

    def test_result_structure(self):
        result = AttributeSetValidator(_valid_set()).validate()
        assert set(result) == {"overall_valid", "counts", "errors", "warnings", "issues"}
        assert result["counts"] == {"colors": 2, "sizes": 2, "materials": 1, "other": 1}

    def test_extractor_output_is_valid(self, orchestrator, boot_records):
        attribute_set = orchestrator.extract(
            ProductRecord(description="Color: Black, Brown, Red\n**Style:** Casual"),
            variant_records=boot_records,
        )
        assert AttributeSetValidator(attribute_set).validate()["overall_valid"] is True


class TestErrors:
    def test_duplicate_color_name(self):
        s = AttributeSet(colors=(ColorAttribute("Black"), ColorAttribute("black")))
        result = AttributeSetValidator(s).validate()
        assert result["overall_valid"] is False
        assert any("duplicate name" in e for e in result["errors"])

    def test_reused_image(self):
        s = AttributeSet(colors=(ColorAttribute("Black", "u1"), ColorAttribute("Brown", "u1")))
        result = AttributeSetValidator(s).validate()
        assert any("image reused" in e for e in result["errors"])

    def test_unsorted_sizes(self):
        s = AttributeSet(sizes=(SizeAttribute("XL", (1, 5.0, "XL")), SizeAttribute("S", (1, 2.0, "S"))))
        result = AttributeSetValidator(s).validate()
        assert any("not in sort order" in e for e in result["errors"])

    def test_duplicate_sizes(self):
        s = AttributeSet(sizes=(SizeAttribute("S", (1, 2.0, "S")), SizeAttribute("s", (1, 2.0, "s"))))
        result = AttributeSetValidator(s).validate()
        assert any("duplicate labels" in e for e in result["errors"])

    def test_empty_material_value(self):
        s = AttributeSet(materials=(MaterialAttribute("Upper material", " "),))
        result = AttributeSetValidator(s).validate()
        assert result["errors"] == ["materials: empty value for 'Upper material'"]


class TestWarnings:
    def test_color_without_image(self):
        s = AttributeSet(colors=(ColorAttribute("White Gold"), ColorAttribute("Yellow Gold", "https://cdn.example.com/y.jpg")))
        result = AttributeSetValidator(s).validate()
        assert result["overall_valid"] is True
        assert result["warnings"] == ["colors: 1/2 without image (['White Gold'])"]

    def test_relative_image_url(self):
        s = AttributeSet(colors=(ColorAttribute("Black", "u1"),))
        result = AttributeSetValidator(s).validate()
        assert any("not an absolute" in w for w in result["warnings"])

    def test_empty_set(self):
        result = AttributeSetValidator(AttributeSet()).validate()
        assert result["overall_valid"] is True
        assert result["warnings"] == ["attributes: nothing extracted"]
