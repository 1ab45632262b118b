"""
Text Utilities

Helper functions for text processing and cleanup.
"""

import re
from typing import Iterable

from bs4 import BeautifulSoup

_HTML_TAG_RE = re.compile(r'<\s*/?\s*[a-zA-Z][a-zA-Z0-9]*(?:\s[^<>]*)?/?\s*>')

# Block elements that start a new line in the text rendering
_BLOCK_TAGS = ['p', 'div', 'tr', 'ul', 'ol', 'table', 'section']
_HEADING_TAGS = ['h1', 'h2', 'h3', 'h4', 'h5', 'h6']


def clean_text(text: str) -> str:
    """Collapse runs of whitespace and strip the ends."""
    if not text:
        return ""
    if not isinstance(text, str):
        text = str(text)
    return ' '.join(text.split()).strip()


def looks_like_html(text: str) -> bool:
    """Return True if text contains at least one HTML tag."""
    return bool(text) and bool(_HTML_TAG_RE.search(text))


def html_to_text(text: str) -> str:
    """
    Convert an HTML description to the markdown-ish text the description
    parser understands.

    Block elements and <br> become newlines, headings become "### " lines,
    <li> becomes a "- " bullet line and <strong>/<b> become **bold**.
    Plain text is returned unchanged.

    Args:
        text: Raw supplier description (HTML, markdown or plain text)

    Returns:
        Text with one logical line per block

    Example:
        >>> html_to_text("<p><b>Style:</b> Casual</p><ul><li>Black</li></ul>")
        '**Style:** Casual\\n- Black'
    """
    if not text:
        return ""
    if not looks_like_html(text):
        return text

    soup = BeautifulSoup(text, "lxml")

    for tag in soup.find_all(['script', 'style']):
        tag.decompose()

    for tag in soup.find_all(['strong', 'b']):
        inner = tag.get_text()
        if inner.strip():
            tag.replace_with(f"**{inner.strip()}**")
        else:
            tag.replace_with(inner)

    for tag in soup.find_all('br'):
        tag.replace_with("\n")

    for tag in soup.find_all(_HEADING_TAGS):
        heading = clean_text(tag.get_text())
        tag.replace_with(f"\n### {heading}\n" if heading else "\n")

    for tag in soup.find_all('li'):
        tag.insert_before("\n- ")
        tag.insert_after("\n")
        tag.unwrap()

    for tag in soup.find_all(_BLOCK_TAGS):
        tag.insert_before("\n")
        tag.insert_after("\n")
        tag.unwrap()

    rendered = soup.get_text().replace('\xa0', ' ')

    # One line per block
    lines = [line.strip() for line in rendered.split('\n')]
    return '\n'.join(line for line in lines if line)


def title_case(text: str, minor_words: Iterable[str] = ()) -> str:
    """
    Capitalize every word except minor words ("and", "of", ...).

    The first word is always capitalized.

    Example:
        >>> title_case("gold white diamond")
        'Gold White Diamond'
    """
    minor = {w.lower() for w in minor_words}
    words = clean_text(text).split(' ')
    result = []
    for idx, word in enumerate(words):
        if not word:
            continue
        lower = word.lower()
        if idx > 0 and lower in minor:
            result.append(lower)
        else:
            result.append(lower[0].upper() + lower[1:])
    return ' '.join(result)
