"""
Spec Field Parser

Extracts material and other short key/value specs from bold description
fields, e.g.:

    **Upper material:** PU
    **Hauteur du talon:** 5cm

Each entry of the field label table (config/attributes.yaml) has one display
label and English/French aliases. Values longer than the entry's bound or
still containing markup are discarded.
"""

import re
from typing import List, Optional, Tuple

from ...common.config_loader import FieldLabel, Vocabulary, load_vocabulary
from ...common.text_utils import clean_text
from ...models import AttributeCandidate

_MARKUP_RE = re.compile(r'\*\*|<[^>]+>|\[[^\]]*\]\(')


def _field_pattern(alias: str) -> "re.Pattern":
    """Pattern capturing the value of one bold field, up to the next bold marker or newline."""
    return re.compile(
        r'\*\*\s*' + re.escape(alias) + r'\s*:?\s*\*\*\s*:?\s*([^\n*]+)',
        re.IGNORECASE,
    )


class SpecFieldParser:
    """
    Parses bold "**Label:** value" fields listed in the field label table.

    Usage:
        parser = SpecFieldParser()
        candidates = parser.parse("**Upper material:** PU")
        # -> [AttributeCandidate(kind='material', label='Upper material', raw_text='PU')]
    """

    def __init__(self, vocabulary: Optional[Vocabulary] = None):
        self.vocabulary = vocabulary if vocabulary is not None else load_vocabulary()
        self._patterns: List[Tuple[FieldLabel, List["re.Pattern"]]] = [
            (field_label, [_field_pattern(alias) for alias in field_label.aliases])
            for field_label in self.vocabulary.field_labels
        ]

    def parse(self, text: str) -> List[AttributeCandidate]:
        """
        Extract every table field present in the text.

        Args:
            text: Description text (already converted from HTML)

        Returns:
            Candidates in table order, one per field at most
        """
        if not text:
            return []

        candidates = []
        for index, (field_label, patterns) in enumerate(self._patterns):
            value = self._match_value(text, patterns)
            if not value or len(value) > field_label.max_length:
                continue
            candidates.append(AttributeCandidate(
                kind=field_label.kind,
                raw_text=value,
                source_index=index,
                label=field_label.label,
            ))
        return candidates

    def _match_value(self, text: str, patterns: List["re.Pattern"]) -> str:
        """Value of the first alias that matches with a usable value."""
        for pattern in patterns:
            match = pattern.search(text)
            if not match:
                continue
            value = clean_text(match.group(1))
            if value and not _MARKUP_RE.search(value):
                return value
        return ""
