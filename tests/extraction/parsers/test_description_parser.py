"""Tests for src/extraction/parsers/description_parser.py"""

import pytest

from src.common.constants import DIALECT_INLINE, DIALECT_MARKDOWN, KIND_COLOR, KIND_OTHER, KIND_SIZE
from src.extraction.parsers import DescriptionParser


def _raw(candidates, kind):
    return [c.raw_text for c in candidates if c.kind == kind]


@pytest.fixture
def parser(vocabulary):
    return DescriptionParser(vocabulary)


class TestInlineColors:
    def test_product_codes_stripped(self, parser):
        candidates = parser.parse_candidates("Color: white gold Q911, yellow gold Q912")
        assert _raw(candidates, KIND_COLOR) == ["white gold", "yellow gold"]
        assert all(c.dialect == DIALECT_INLINE for c in candidates)

    def test_non_color_words_excluded(self, parser):
        candidates = parser.parse_candidates("Color: Warm, Single, Black")
        assert _raw(candidates, KIND_COLOR) == ["Black"]

    def test_french_label(self, parser):
        candidates = parser.parse_candidates("Couleur: Noir, Blanc")
        assert _raw(candidates, KIND_COLOR) == ["Noir", "Blanc"]

    def test_run_ends_at_next_label(self, parser):
        candidates = parser.parse_candidates("Color: Black, Brown Style: Classic")
        assert _raw(candidates, KIND_COLOR) == ["Black", "Brown"]

    def test_run_ends_at_two_word_label(self, parser):
        candidates = parser.parse_candidates("Color: Black, White Heel Height: 5cm")
        assert _raw(candidates, KIND_COLOR) == ["Black", "White"]

    def test_run_ends_at_material_label(self, parser):
        candidates = parser.parse_candidates("Color: Black, Red Upper Material: PU")
        assert _raw(candidates, KIND_COLOR) == ["Black", "Red"]

    def test_two_word_color_before_label(self, parser):
        candidates = parser.parse_candidates("Color: Black, Dark Blue Size: M")
        assert _raw(candidates, KIND_COLOR) == ["Black", "Dark Blue"]

    def test_trailing_full_stop(self, parser):
        candidates = parser.parse_candidates("Color: Black, Brown.\nSize: 38")
        assert _raw(candidates, KIND_COLOR) == ["Black", "Brown"]
        assert _raw(candidates, KIND_SIZE) == ["38"]

    def test_words_containing_exclusions_kept(self, parser):
        candidates = parser.parse_candidates("Color: Hotpink, Mistletoe, Uniform, Black")
        assert _raw(candidates, KIND_COLOR) == ["Hotpink", "Mistletoe", "Uniform", "Black"]

    def test_run_ends_at_line_end(self, parser):
        candidates = parser.parse_candidates("Color: Black\nMade with care")
        assert _raw(candidates, KIND_COLOR) == ["Black"]

    def test_bold_label(self, parser):
        candidates = parser.parse_candidates("**Color:** Red; Green")
        assert _raw(candidates, KIND_COLOR) == ["Red", "Green"]

    def test_source_index_follows_list_order(self, parser):
        candidates = parser.parse_colors("Color: Pink, Beige, Khaki")
        assert [c.source_index for c in candidates] == [0, 1, 2]


class TestMarkdownColors:
    DESCRIPTION = (
        "Winter boots for everyday wear.\n"
        "\n"
        "### 🎨 Couleurs disponibles\n"
        "- Black\n"
        "- 8808 leather red\n"
        "- Brown single lining\n"
        "- Apricot (plush)\n"
        "\n"
        "Color: Should not be read"
    )

    def test_block_preferred_over_inline(self, parser):
        candidates = parser.parse_candidates(self.DESCRIPTION)
        assert _raw(candidates, KIND_COLOR) == ["Black", "leather red", "Brown", "Apricot"]
        assert all(c.dialect == DIALECT_MARKDOWN for c in candidates if c.kind == KIND_COLOR)

    def test_block_ends_at_heading(self, parser):
        text = "## Available colors\n- Navy\n- Ivory\n## Sizes\n- 38"
        assert _raw(parser.parse_colors(text), KIND_COLOR) == ["Navy", "Ivory"]

    def test_block_ends_after_bullets(self, parser):
        text = "### Colors\n- Navy\n- Ivory\nThe leather is soft"
        assert _raw(parser.parse_colors(text), KIND_COLOR) == ["Navy", "Ivory"]

    def test_length_bound_is_stricter_for_markdown(self, parser):
        long_color = "Very very long pale champagne shade"
        assert parser.clean_color(long_color, DIALECT_MARKDOWN) == ""
        assert parser.clean_color(long_color, DIALECT_INLINE) == long_color

    def test_html_description(self, parser):
        html = "<h3>Colors</h3><ul><li>Black</li><li>Brown</li></ul><p>Soft lining.</p>"
        assert _raw(parser.parse_candidates(html), KIND_COLOR) == ["Black", "Brown"]


class TestCleanColor:
    @pytest.mark.parametrize("raw, expected", [
        ("- Black", "Black"),
        ("8808 leather red", "leather red"),
        ("white gold Q911", "white gold"),
        ("Brown single lining", "Brown"),
        ("Grey (fleece inside)", "Grey"),
        ("Gold 18mm", "Gold"),
        ("Rose-Gold", "Rose Gold"),
        ("Silver 925", "Silver"),
        ("Brown.", "Brown"),
        ("Navy!", "Navy"),
        ("Hotpink", "Hotpink"),
        ("Mistletoe", "Mistletoe"),
        ("Uniform", "Uniform"),
    ])
    def test_cleaned(self, parser, raw, expected):
        assert parser.clean_color(raw) == expected

    @pytest.mark.parametrize("raw", [
        "Warm",
        "Single",
        "Warm lining",
        "Cold.",
        "XL",
        "Size M",
        "38",
        "**Style**",
        "Upper material: PU",
        "",
    ])
    def test_rejected(self, parser, raw):
        assert parser.clean_color(raw) == ""


class TestSizes:
    def test_inline_numbered(self, parser):
        candidates = parser.parse_candidates("Size: no.6, no.7, no.8")
        assert _raw(candidates, KIND_SIZE) == ["no.6", "no.7", "no.8"]

    def test_french_label(self, parser):
        assert _raw(parser.parse_sizes("Taille: S, M, L"), KIND_SIZE) == ["S", "M", "L"]

    def test_unrecognized_dropped(self, parser):
        assert _raw(parser.parse_sizes("Size: 38, One size, 39"), KIND_SIZE) == ["38", "39"]

    def test_block_stops_at_bold_line(self, parser):
        text = "### 📏 Tailles\n38\n39\n**Upper material:** PU"
        assert _raw(parser.parse_sizes(text), KIND_SIZE) == ["38", "39"]

    def test_labeled_line_becomes_other(self, parser):
        text = "### Sizes\n- 38\n- 39\n- Heel height: 5cm"
        candidates = parser.parse_sizes(text)
        assert _raw(candidates, KIND_SIZE) == ["38", "39"]
        other = [c for c in candidates if c.kind == KIND_OTHER]
        assert len(other) == 1
        assert other[0].label == "Heel height"
        assert other[0].raw_text == "5cm"


class TestParseCandidates:
    def test_all_kinds(self, parser):
        text = (
            "**Upper material:** PU\n"
            "**Style:** Casual\n"
            "Color: Black, Brown\n"
            "Size: 38, 39\n"
        )
        candidates = parser.parse_candidates(text)
        kinds = [c.kind for c in candidates]
        assert kinds == ["color", "color", "size", "size", "material", "other"]

    def test_no_sections(self, parser):
        assert parser.parse_candidates("Comfortable shoes for daily walks.") == []

    def test_empty_and_non_string(self, parser):
        assert parser.parse_candidates("") == []
        assert parser.parse_candidates(None) == []
        assert parser.parse_candidates(42) == []
