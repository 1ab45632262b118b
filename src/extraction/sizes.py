"""
Size Tokens

Acceptance rules and ordering for size labels, shared by the description
parser (size lines) and the canonicalizer (size fallback from variants).
"""

import re
from typing import Any, Tuple

from ..common.config_loader import Vocabulary

_PREFIX_RES = (
    re.compile(r'^[-*•]\s*'),
    re.compile(r'^no\.\s*', re.IGNORECASE),
    re.compile(r'^#\s*'),
    re.compile(r'^(?:size|taille)\b\s*', re.IGNORECASE),
)

_RANGE_RE = re.compile(r'^\d{2}-\d{2}$')
_NUMBER_RE = re.compile(r'^\d{1,3}(?:\.\d)?$')
_REGIONAL_RE = re.compile(r'^(EU|US|UK)\s*(\d{1,3}(?:\.\d)?)$', re.IGNORECASE)
_LONG_WORD_RE = re.compile(r'[A-Za-z]{5,}')
_LEADING_NUMBER_RE = re.compile(r'^(?:(?:EU|US|UK)\s*)?(\d+(?:\.\d+)?)', re.IGNORECASE)
_TRAILING_TOKEN_RE = re.compile(r'[-\s]([A-Za-z0-9.]+)$')

# Sort groups: numbers first, then scale words, then anything else
_GROUP_NUMERIC = 0
_GROUP_SCALE = 1
_GROUP_LEXICAL = 2


def strip_size_prefix(raw: str) -> str:
    """Remove bullet, "no.", "#" and "size" prefixes ("no.6" -> "6")."""
    text = raw.strip()
    for prefix_re in _PREFIX_RES:
        text = prefix_re.sub('', text).strip()
    return text


def clean_size(raw: Any, vocabulary: Vocabulary, max_length: int = 0) -> str:
    """
    Clean a raw size token and return its canonical label.

    Accepted shapes: two-digit range ("36-37"), integer/decimal ("6", "42",
    "36.5"), scale word ("XL"), regional number ("EU 42"). Tokens longer
    than max_length, containing "*" or ":" or a 5+ letter word are rejected.

    Args:
        raw: Raw token ("no.6", "- XL", "eu42")
        vocabulary: Provides the size scale
        max_length: Length bound (defaults to vocabulary.max_size_length)

    Returns:
        Canonical label, or empty string if the token is not a size

    Example:
        >>> clean_size("no.6", vocabulary)
        '6'
    """
    if not isinstance(raw, str) or not raw.strip():
        return ""

    max_length = max_length or vocabulary.max_size_length
    size = strip_size_prefix(raw)

    if not size or len(size) > max_length:
        return ""
    if '*' in size or ':' in size or _LONG_WORD_RE.search(size):
        return ""

    if _RANGE_RE.match(size) or _NUMBER_RE.match(size):
        return size

    if vocabulary.size_rank(size) is not None:
        return size.upper()

    regional = _REGIONAL_RE.match(size)
    if regional:
        return f"{regional.group(1).upper()} {regional.group(2)}"

    return ""


def trailing_size_token(text: str) -> str:
    """
    Trailing token of a variant key ("Black Zone2-S" -> "S").

    Returns the raw token; callers still run clean_size() on it.
    """
    if not text or not isinstance(text, str):
        return ""
    match = _TRAILING_TOKEN_RE.search(text.strip())
    return match.group(1) if match else ""


def size_sort_key(label: str, vocabulary: Vocabulary) -> Tuple[Any, ...]:
    """
    Derive the sort key of a size label.

    Numeric and range labels sort by their leading number, scale words by
    their rank (XS < S < ... < XXXL), everything else lexically. The groups
    never interleave.
    """
    number = _LEADING_NUMBER_RE.match(label)
    if number:
        return (_GROUP_NUMERIC, float(number.group(1)), label)

    rank = vocabulary.size_rank(label)
    if rank is not None:
        return (_GROUP_SCALE, float(rank), label)

    return (_GROUP_LEXICAL, 0.0, label.lower())
