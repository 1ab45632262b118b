"""Tests for src/extraction/format_normalizer.py"""

from decimal import Decimal

from src.extraction.format_normalizer import FormatNormalizer
from src.models import ExtractionDiagnostics, VariantDimensions


class TestStructuredRecords:
    def test_maps_fields(self):
        variants = FormatNormalizer().normalize([{
            "cjVariantId": "CJ-1",
            "name": "Black-42",
            "sku": "SKU-1",
            "price": "12,50",
            "stock": "7",
            "weight": "350",
            "dimensions": '{"length": 30, "width": 20, "height": 10}',
            "image": " https://cdn.example.com/v/1.jpg ",
            "properties": '{"value1": "Black", "value2": "42"}',
        }])
        assert len(variants) == 1
        v = variants[0]
        assert v.external_id == "CJ-1"
        assert v.display_name == "Black-42"
        assert v.sku == "SKU-1"
        assert v.price == Decimal("12.50")
        assert v.stock == 7
        assert v.weight_grams == 350.0
        assert v.dimensions == VariantDimensions(30.0, 20.0, 10.0)
        assert v.image_url == "https://cdn.example.com/v/1.jpg"
        assert v.properties == {"value1": "Black", "value2": "42"}

    def test_structured_wins_over_legacy(self):
        variants = FormatNormalizer().normalize(
            [{"name": "Brown-S"}],
            '[{"variantKey": "Black-S"}]',
        )
        assert [v.display_name for v in variants] == ["Brown-S"]

    def test_missing_name_is_not_synthesized(self):
        variants = FormatNormalizer().normalize([{"sku": "A"}])
        assert variants[0].display_name == ""

    def test_negative_stock_clamped(self):
        variants = FormatNormalizer().normalize([{"name": "A", "stock": -5}])
        assert variants[0].stock == 0

    def test_bad_numbers_default(self):
        v = FormatNormalizer().normalize([{"name": "A", "price": "abc", "weight": "n/a", "stock": None}])[0]
        assert v.price == Decimal("0")
        assert v.weight_grams == 0.0
        assert v.stock == 0

    def test_inactive(self):
        variants = FormatNormalizer().normalize([
            {"name": "A", "isActive": False},
            {"name": "B", "status": "INACTIVE"},
            {"name": "C"},
        ])
        assert [v.is_active for v in variants] == [False, False, True]

    def test_order_preserved(self):
        names = ["Black-S", "Brown-M", "Black-L"]
        variants = FormatNormalizer().normalize([{"name": n} for n in names])
        assert [v.display_name for v in variants] == names


class TestLegacyJson:
    def test_key_fallbacks(self):
        variants = FormatNormalizer().normalize(None, (
            '[{"vid": "7", "variantNameEn": "Black-S", "variantSellPrice": 9.5,'
            ' "variantImage": "u1", "variantSku": "S1", "variantWeight": 120}]'
        ))
        v = variants[0]
        assert v.external_id == "7"
        assert v.display_name == "Black-S"
        assert v.price == Decimal("9.5")
        assert v.image_url == "u1"
        assert v.sku == "S1"
        assert v.weight_grams == 120.0

    def test_variant_key_used_as_name_and_properties(self, legacy_zone_json):
        variants = FormatNormalizer().normalize([], legacy_zone_json)
        assert [v.display_name for v in variants] == ["Black Zone2-S", "Blue Zone4-M"]
        assert variants[0].properties_text == "Black Zone2-S"
        assert [v.image_url for v in variants] == ["u1", "u2"]

    def test_synthesized_name(self):
        variants = FormatNormalizer().normalize(None, '[{"variantImage": "u1"}, {"variantImage": "u2"}]')
        assert [v.display_name for v in variants] == ["Variant 1", "Variant 2"]

    def test_already_parsed_list(self):
        variants = FormatNormalizer().normalize(None, [{"variantName": "Red-38"}])
        assert variants[0].display_name == "Red-38"

    def test_malformed_json_counted(self):
        diagnostics = ExtractionDiagnostics()
        variants = FormatNormalizer().normalize(None, '[{"variantKey": "Black', diagnostics)
        assert variants == []
        assert diagnostics["legacy_json_invalid"] == 1

    def test_non_array_json(self):
        diagnostics = ExtractionDiagnostics()
        assert FormatNormalizer().normalize(None, '{"variantKey": "Black"}', diagnostics) == []
        assert diagnostics.total == 0

    def test_non_object_entries_skipped(self):
        diagnostics = ExtractionDiagnostics()
        variants = FormatNormalizer().normalize(None, '["junk", 3, {"variantKey": "Red-38"}]', diagnostics)
        assert [v.display_name for v in variants] == ["Red-38"]
        assert diagnostics["variant_entry_skipped"] == 2

    def test_nothing(self):
        assert FormatNormalizer().normalize(None, None) == []
        assert FormatNormalizer().normalize([], "") == []


class TestFieldParsing:
    def test_malformed_dimensions(self):
        diagnostics = ExtractionDiagnostics()
        result = FormatNormalizer().parse_dimensions('{"length": 3', diagnostics)
        assert result == VariantDimensions()
        assert diagnostics["dimensions_invalid"] == 1

    def test_raw_dimensions_string_kept(self):
        assert FormatNormalizer().parse_dimensions("30x20x10 cm") == "30x20x10 cm"

    def test_dimensions_dict(self):
        assert FormatNormalizer().parse_dimensions({"length": "2.5"}) == VariantDimensions(length=2.5)

    def test_malformed_properties(self):
        diagnostics = ExtractionDiagnostics()
        assert FormatNormalizer().parse_properties('{"value1": ', diagnostics) == {}
        assert diagnostics["properties_invalid"] == 1

    def test_opaque_properties(self):
        assert FormatNormalizer().parse_properties("Black Zone2-S") == "Black Zone2-S"

    def test_json_string_properties(self):
        assert FormatNormalizer().parse_properties('"Brown-M"') == "Brown-M"


class TestGallery:
    def test_list_of_urls(self):
        gallery = FormatNormalizer().normalize_gallery(["a.jpg", " b.jpg ", "a.jpg", ""])
        assert gallery == ("a.jpg", "b.jpg")

    def test_list_of_objects(self):
        assert FormatNormalizer().normalize_gallery([{"url": "a.jpg"}, {"src": "b.jpg"}, 5]) == ("a.jpg", "b.jpg")

    def test_json_array_string(self):
        assert FormatNormalizer().normalize_gallery('["a.jpg", "b.jpg"]') == ("a.jpg", "b.jpg")

    def test_single_url(self):
        assert FormatNormalizer().normalize_gallery("https://cdn.example.com/a.jpg") == ("https://cdn.example.com/a.jpg",)

    def test_malformed_json_counted(self):
        diagnostics = ExtractionDiagnostics()
        assert FormatNormalizer().normalize_gallery('["a.jpg", ', diagnostics) == ()
        assert diagnostics["gallery_json_invalid"] == 1

    def test_empty(self):
        assert FormatNormalizer().normalize_gallery(None) == ()
        assert FormatNormalizer().normalize_gallery([]) == ()
