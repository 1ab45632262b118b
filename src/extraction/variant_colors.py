"""
Variant Color Tokens

Extracts the leading color token from a variant name using one ordered
chain of patterns:

1. "{Color} Zone{n}..."                   ("Black Zone2-S"        -> black)
2. "{Color}-{digits}"                     ("Brown-35"             -> brown)
3. "{Color} single|double|...|lining"     ("Brown Single Liner-35" -> brown)
4. "... {Color} {digits}" (known colors)  ("Side Zipper Black 35" -> black)
5. First word fallback                    ("Black-S"              -> black)

The chain is a data structure (COLOR_TOKEN_RULES) so each rule can be tested
on its own. Both the canonicalizer (color fallback from variants) and the
image reconciler (variant/color matching) use it.
"""

import re
from typing import Callable, Optional, Tuple

from ..common.config_loader import Vocabulary
from ..models import Variant

_ZONE_RE = re.compile(r'^([A-Za-z]+)\s*Zone\d+', re.IGNORECASE)
_COLOR_DIGITS_RE = re.compile(r'^([A-Za-z]+)[-\s]+\d+$')
_DESCRIPTIVE_RE = re.compile(
    r'^([A-Za-z]+)\s+(?:single|double|triple|fur|liner|lining|material)\b',
    re.IGNORECASE,
)
_TRAILING_COLOR_RE = re.compile(r'([A-Za-z]+)\s+\d+$')
_WORD_SPLIT_RE = re.compile(r'[-\s]+')
_LETTERS_RE = re.compile(r'^[A-Za-z]+$')

# Numbers, numeric ranges and decimals are sizes, not colors
_NUMERIC_RE = re.compile(r'^\d+(?:-\d+)?(?:\.\d+)?$')
_SCALE_SIZE_RE = re.compile(r'^(?:xs|s|m|l|xl|xxl|xxxl)$', re.IGNORECASE)
_COLOR_TEXT_RE = re.compile(r'^[A-Za-z][A-Za-z\s]*$')


def _zone_rule(name: str, vocabulary: Vocabulary) -> str:
    match = _ZONE_RE.match(name)
    return match.group(1) if match else ""


def _color_digits_rule(name: str, vocabulary: Vocabulary) -> str:
    match = _COLOR_DIGITS_RE.match(name)
    return match.group(1) if match else ""


def _descriptive_suffix_rule(name: str, vocabulary: Vocabulary) -> str:
    match = _DESCRIPTIVE_RE.match(name)
    return match.group(1) if match else ""


def _trailing_color_rule(name: str, vocabulary: Vocabulary) -> str:
    match = _TRAILING_COLOR_RE.search(name)
    if match and vocabulary.is_known_color(match.group(1)):
        return match.group(1)
    return ""


def _first_word_rule(name: str, vocabulary: Vocabulary) -> str:
    first = _WORD_SPLIT_RE.split(name, maxsplit=1)[0]
    if first and _LETTERS_RE.match(first) and first.lower() not in vocabulary.size_tokens:
        return first
    return ""


# Ordered (rule name, rule) pairs, first non-empty result wins
COLOR_TOKEN_RULES: Tuple[Tuple[str, Callable[[str, Vocabulary], str]], ...] = (
    ("zone", _zone_rule),
    ("color_digits", _color_digits_rule),
    ("descriptive_suffix", _descriptive_suffix_rule),
    ("trailing_color", _trailing_color_rule),
    ("first_word", _first_word_rule),
)


def color_token_from_name(name: str, vocabulary: Vocabulary) -> str:
    """
    Extract the leading color token from a variant name.

    Args:
        name: Variant display name or opaque properties string
        vocabulary: Known colors and size tokens

    Returns:
        Lowercase color token, or empty string if no rule matched

    Example:
        >>> color_token_from_name("Black Zone2-S", vocabulary)
        'black'
    """
    if not name or not isinstance(name, str):
        return ""

    name = name.strip()
    for _rule_name, rule in COLOR_TOKEN_RULES:
        token = rule(name, vocabulary)
        if token:
            return token.lower()
    return ""


def color_from_properties(variant: Variant, vocabulary: Vocabulary) -> str:
    """
    Color declared by structured properties (value1), lowercased.

    Numbers, ranges and size words are rejected.
    """
    value = variant.properties.get("value1")
    if not isinstance(value, str):
        return ""
    value = ' '.join(value.split())
    if not value or _NUMERIC_RE.match(value) or _SCALE_SIZE_RE.match(value):
        return ""
    if value.lower() in vocabulary.size_tokens or not _COLOR_TEXT_RE.match(value):
        return ""
    return value.lower()


def variant_name_color(variant: Variant, vocabulary: Vocabulary) -> str:
    """Leading color token from the display name, else from opaque properties."""
    return (
        color_token_from_name(variant.display_name, vocabulary)
        or color_token_from_name(variant.properties_text, vocabulary)
    )


def variant_color(variant: Variant, vocabulary: Vocabulary) -> str:
    """
    Best-effort color of a variant, any vocabulary.

    Name patterns first, then structured properties value1.
    """
    return variant_name_color(variant, vocabulary) or color_from_properties(variant, vocabulary)


def known_variant_color(variant: Variant, vocabulary: Vocabulary) -> Optional[str]:
    """
    Color of a variant restricted to the known-color vocabulary.

    Name-derived tokens must be known colors. A structured value1 is accepted
    when at least one of its words is a known color ("Navy Blue").

    Returns:
        Lowercase color, or None
    """
    for text in (variant.display_name, variant.properties_text):
        token = color_token_from_name(text, vocabulary)
        if token and vocabulary.is_known_color(token):
            return token

    declared = color_from_properties(variant, vocabulary)
    if declared and any(vocabulary.is_known_color(word) for word in declared.split()):
        return declared

    return None
