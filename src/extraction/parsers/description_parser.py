"""
Description Parser

Mines color and size candidates out of free-text supplier descriptions.
Two layouts are understood in one pass:

- Markdown-block dialect: a heading line naming the section, followed by
  newline-delimited bullet lines:

      ### 🎨 Couleurs disponibles
      - Black
      - 8808 leather red

- Inline-label dialect: "Color:" / "Couleur:" / "Size:" / "Taille:" followed
  by a comma-separated run, ending at the next capitalized "Label:" or the
  end of the line:

      Color: white gold Q911, yellow gold Q912 Style: Classic

For each kind the markdown block is tried first, then the inline label. If
neither is present the kind yields nothing. Lines shaped "Label: value" found
inside a block are emitted as "other" candidates. Bold fields for materials
and other specs are handled by SpecFieldParser.
"""

import logging
import re
from typing import List, Optional, Tuple

from ...common.config_loader import Vocabulary, load_vocabulary
from ...common.constants import (
    DIALECT_INLINE,
    DIALECT_MARKDOWN,
    KIND_COLOR,
    KIND_OTHER,
    KIND_SIZE,
)
from ...common.text_utils import clean_text, html_to_text
from ...models import AttributeCandidate
from ..sizes import clean_size
from .spec_fields import SpecFieldParser

logger = logging.getLogger(__name__)

# Section headings ("### 🎨 Couleurs disponibles", "## Available colors")
_COLOR_HEADING_RE = re.compile(
    r'^\s*#{1,6}[^\w\n]*(?:available\s+)?(?:colou?rs?|couleurs?)\b[^\n]*$',
    re.IGNORECASE,
)
_SIZE_HEADING_RE = re.compile(
    r'^\s*#{1,6}[^\w\n]*(?:available\s+)?(?:sizes?|tailles?)\b[^\n]*$',
    re.IGNORECASE,
)

# Inline labels. The terminating "Label:" lookahead is case-sensitive: a
# lower-case word followed by a colon does not end the run.
_INLINE_COLOR_LABEL = r'(?<![A-Za-z])(?i:colou?rs?|couleurs?)'
_INLINE_SIZE_LABEL = r'(?<![A-Za-z])(?i:sizes?|tailles?)'


def _label_end(known_colors) -> str:
    """
    Lookahead ending an inline run at the next "Label:" token.

    Accepts "Style:", "Heel shape:" and title-cased pairs such as
    "Heel Height:". A pair never starts right after a list separator or with
    a known color, so "Black, Dark Blue Size: M" still ends after "Blue".
    """
    not_color = ''
    if known_colors:
        words = sorted((re.escape(c) for c in known_colors), key=len, reverse=True)
        not_color = r'(?!(?i:%s)\s)' % '|'.join(words)
    pair = r'(?<![,;])\s+\**' + not_color + r'[A-Z][a-z]+\s+[A-Z][a-z]+\s*\**\s*:'
    single = r'\s+\**[A-Z][a-z]+(?:\s+[a-z]+)?\s*\**\s*:'
    return r'(?=%s|%s|\s*$)' % (pair, single)


def _inline_re(label: str, known_colors) -> "re.Pattern":
    return re.compile(
        label + r'\s*\**\s*:\s*\**\s*(?P<value>[^\n]+?)' + _label_end(known_colors),
        re.MULTILINE,
    )


_BULLET_RE = re.compile(r'^\s*(?:[-*•+]|\d+[.)])\s+')
_LIST_SPLIT_RE = re.compile(r'[,;]')

# Color-line cleanup, applied in order
_LEADING_CODE_RE = re.compile(r'^\d+[-_\s]*')
_TRAILING_CODE_RE = re.compile(r'[-_\s]+(?=[A-Za-z]*\d)[A-Za-z0-9]+$')
_TRAILING_DIGITS_RE = re.compile(r'[-_\s]*\d+$')
_PARENTHETICAL_RE = re.compile(r'\s*(?:\([^)]*\)|\[[^\]]*\])')
_UNIT_RE = re.compile(r'\s*\d+(?:[.,]\d+)?\s*(?:mm|cm|m|inch(?:es)?|in)\b', re.IGNORECASE)
_EDGE_PUNCTUATION = '.,;!'
_SEPARATORS_RE = re.compile(r'[-_\s]+')
_LETTERS_ONLY_RE = re.compile(r'^[^\W\d_]+(?: [^\W\d_]+)*$')
_SIZE_WORD_RE = re.compile(r'^(?:(?:size|taille)\s*[xslm]+|[xslm]+\s*(?:size|taille))$')

_MAX_LABEL_LENGTH = 40
_MAX_LABELED_VALUE_LENGTH = 100


class DescriptionParser:
    """
    Scans a description for color, size, material and other-spec candidates.

    Usage:
        parser = DescriptionParser()
        candidates = parser.parse_candidates("Color: Black, Brown\\nSize: 38, 39")
        # -> [AttributeCandidate(kind='color', raw_text='Black', ...), ...]
    """

    def __init__(self, vocabulary: Optional[Vocabulary] = None):
        """
        Initialize the parser.

        Args:
            vocabulary: Optional vocabulary. If None, loads from config.
        """
        self.vocabulary = vocabulary if vocabulary is not None else load_vocabulary()
        self.spec_fields = SpecFieldParser(self.vocabulary)
        self._inline_color_re = _inline_re(_INLINE_COLOR_LABEL, self.vocabulary.known_colors)
        self._inline_size_re = _inline_re(_INLINE_SIZE_LABEL, self.vocabulary.known_colors)

    def parse_candidates(self, description: str) -> List[AttributeCandidate]:
        """
        Parse every candidate kind out of a description.

        Args:
            description: Raw description (HTML, markdown or plain text)

        Returns:
            Candidates in kind order (colors, sizes, materials/other), each
            kind in source order
        """
        if not description or not isinstance(description, str):
            return []

        text = html_to_text(description)
        candidates: List[AttributeCandidate] = []
        candidates.extend(self.parse_colors(text))
        candidates.extend(self.parse_sizes(text))
        candidates.extend(self.spec_fields.parse(text))
        return candidates

    # ── Colors ────────────────────────────────────────────────────────────────

    def parse_colors(self, text: str) -> List[AttributeCandidate]:
        """Color candidates (plus labeled "other" lines found in the section)."""
        dialect, items = self._find_items(text, _COLOR_HEADING_RE, self._inline_color_re, stop_at_bold=False)
        if not items:
            return []

        candidates = []
        for raw in items:
            labeled = self._labeled_candidate(raw, len(candidates), dialect)
            if labeled is not None:
                candidates.append(labeled)
                continue

            color = self.clean_color(raw, dialect)
            if color:
                candidates.append(AttributeCandidate(
                    kind=KIND_COLOR,
                    raw_text=color,
                    source_index=len(candidates),
                    dialect=dialect,
                ))
            else:
                logger.debug("rejected color candidate %r", raw)
        return candidates

    def clean_color(self, raw: str, dialect: str = DIALECT_INLINE) -> str:
        """
        Clean one color entry, or reject it.

        Cleanup order: bullets and leading numeric codes, trailing product
        codes, parenthetical qualifiers, unit measurements, descriptive
        suffixes ("Brown single lining" -> "Brown").

        Returns:
            Cleaned color text, or empty string if rejected
        """
        vocab = self.vocabulary
        color = _BULLET_RE.sub('', raw.strip()).strip()
        color = color.strip(_EDGE_PUNCTUATION).strip()

        if '**' in color or ':' in color:
            return ""

        color = _LEADING_CODE_RE.sub('', color)
        color = _TRAILING_CODE_RE.sub('', color)
        color = _PARENTHETICAL_RE.sub('', color)
        color = _UNIT_RE.sub('', color)
        color = _TRAILING_CODE_RE.sub('', color)
        color = _TRAILING_DIGITS_RE.sub('', color)
        color = _SEPARATORS_RE.sub(' ', color).strip()

        words = color.split(' ')
        if any(word.lower() in vocab.descriptive_suffixes for word in words):
            # Keep only the leading word ("Brown single lining" -> "Brown")
            color = words[0]

        if not color or not _LETTERS_ONLY_RE.match(color):
            return ""

        lower = color.lower()
        if self._is_size_word(lower):
            return ""
        if self._is_non_color(lower):
            return ""

        max_length = (
            vocab.max_markdown_color_length
            if dialect == DIALECT_MARKDOWN
            else vocab.max_inline_color_length
        )
        if len(color) > max_length:
            return ""

        return color

    def _is_size_word(self, lower: str) -> bool:
        return lower in self.vocabulary.size_tokens or bool(_SIZE_WORD_RE.match(lower))

    def _is_non_color(self, lower: str) -> bool:
        """True if every word of the text is a descriptive non-color word."""
        excluded = self.vocabulary.non_color_words
        return all(word in excluded for word in lower.split())

    # ── Sizes ─────────────────────────────────────────────────────────────────

    def parse_sizes(self, text: str) -> List[AttributeCandidate]:
        """Size candidates (plus labeled "other" lines found in the section)."""
        dialect, items = self._find_items(text, _SIZE_HEADING_RE, self._inline_size_re, stop_at_bold=True)
        if not items:
            return []

        candidates = []
        for raw in items:
            labeled = self._labeled_candidate(raw, len(candidates), dialect)
            if labeled is not None:
                candidates.append(labeled)
                continue

            if clean_size(raw, self.vocabulary):
                candidates.append(AttributeCandidate(
                    kind=KIND_SIZE,
                    raw_text=raw.strip(),
                    source_index=len(candidates),
                    dialect=dialect,
                ))
            else:
                logger.debug("rejected size candidate %r", raw)
        return candidates

    # ── Shared helpers ────────────────────────────────────────────────────────

    def _find_items(
        self,
        text: str,
        heading_re: "re.Pattern",
        inline_re: "re.Pattern",
        stop_at_bold: bool,
    ) -> Tuple[str, List[str]]:
        """
        Locate a section and split it into raw entries.

        Returns:
            (dialect, entries); entries is empty if no section was found
        """
        block = self._markdown_block(text, heading_re, stop_at_bold)
        if block:
            return DIALECT_MARKDOWN, self._split_entries(block)

        match = inline_re.search(text)
        if match:
            return DIALECT_INLINE, self._split_entries([match.group('value')])

        return "", []

    def _markdown_block(self, text: str, heading_re: "re.Pattern", stop_at_bold: bool) -> List[str]:
        """
        Lines following the first matching heading.

        The block ends at a blank line, the next heading, a bold line (sizes
        only), or the first non-bullet line after bullet lines.
        """
        lines = text.split('\n')
        for idx, line in enumerate(lines):
            if not heading_re.match(line):
                continue

            block: List[str] = []
            bulleted = False
            for follow in lines[idx + 1:]:
                stripped = follow.strip()
                if not stripped or stripped.startswith('#'):
                    break
                if stop_at_bold and stripped.startswith('**'):
                    break
                is_bullet = bool(_BULLET_RE.match(stripped))
                if bulleted and not is_bullet:
                    break
                bulleted = bulleted or is_bullet
                block.append(stripped)
            return block
        return []

    def _split_entries(self, lines: List[str]) -> List[str]:
        """Split block lines / inline runs into individual entries."""
        entries = []
        for line in lines:
            line = _BULLET_RE.sub('', line.strip())
            if ':' in line:
                # A labeled spec line is one entry
                entries.append(line)
                continue
            for piece in _LIST_SPLIT_RE.split(line):
                piece = piece.strip()
                if piece:
                    entries.append(piece)
        return entries

    def _labeled_candidate(self, raw: str, index: int, dialect: str) -> Optional[AttributeCandidate]:
        """Turn a "Label: value" entry into an "other" candidate."""
        if ':' not in raw:
            return None

        label, _, value = raw.partition(':')
        label = clean_text(label.replace('*', ''))
        value = clean_text(value.replace('*', ''))
        if not label or not value:
            return None
        if len(label) > _MAX_LABEL_LENGTH or len(value) > _MAX_LABELED_VALUE_LENGTH:
            return None

        return AttributeCandidate(
            kind=KIND_OTHER,
            raw_text=value,
            source_index=index,
            label=label,
            dialect=dialect,
        )
