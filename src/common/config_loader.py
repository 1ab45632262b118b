"""
Configuration Loader

Loads YAML configuration files for the color vocabulary, URL color keywords,
size tokens, non-color exclusion words and bold description field labels.
"""

from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml


def _get_config_dir() -> Path:
    """Get the config directory path."""
    # Try relative to this file first
    module_dir = Path(__file__).parent.parent.parent
    config_dir = module_dir / 'config'

    if config_dir.exists():
        return config_dir

    # Try current working directory
    cwd_config = Path.cwd() / 'config'
    if cwd_config.exists():
        return cwd_config

    raise FileNotFoundError(
        f"Config directory not found. Tried: {config_dir}, {cwd_config}"
    )


def load_config(filename: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        filename: Name of the config file (e.g., 'colors.yaml')

    Returns:
        Parsed YAML content as dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    config_path = _get_config_dir() / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


@dataclass(frozen=True)
class FieldLabel:
    """One bold description field ("**Upper material:** PU")."""
    label: str
    kind: str
    aliases: Tuple[str, ...]
    max_length: int = 100


@dataclass(frozen=True)
class Vocabulary:
    """
    Everything the extraction engine knows about words.

    Built once from config/colors.yaml and config/attributes.yaml by
    load_vocabulary(); tests build small ones directly.
    """
    known_colors: frozenset = frozenset()
    url_keywords: Tuple[Tuple[str, Tuple[str, ...]], ...] = ()
    size_tokens: frozenset = frozenset()
    size_scale: Dict[str, int] = field(default_factory=dict)
    descriptive_suffixes: Tuple[str, ...] = ()
    non_color_words: frozenset = frozenset()
    minor_words: frozenset = frozenset()
    field_labels: Tuple[FieldLabel, ...] = ()
    max_markdown_color_length: int = 30
    max_inline_color_length: int = 50
    max_size_length: int = 20

    def is_known_color(self, token: str) -> bool:
        return token.lower() in self.known_colors

    def size_rank(self, token: str) -> Optional[int]:
        return self.size_scale.get(token.upper())


def load_color_vocabulary() -> List[str]:
    """
    Load the list of known color names.

    Returns:
        Lowercase color names

    Example:
        ['black', 'white', 'brown', ...]
    """
    config = load_config('colors.yaml')
    return [str(c).lower() for c in config.get('known_colors', [])]


def load_url_keywords() -> Dict[str, List[str]]:
    """
    Load the color -> URL keyword synonym table.

    Returns:
        Ordered dictionary mapping canonical color to its keywords

    Example:
        {
            'black': ['black', 'noir', 'noire', 'bk'],
            'gray': ['gray', 'grey', 'gris', 'grise', 'gy'],
            ...
        }
    """
    config = load_config('colors.yaml')
    return {
        str(color).lower(): [str(k).lower() for k in keywords]
        for color, keywords in config.get('url_keywords', {}).items()
    }


def load_field_labels(config: Optional[Dict[str, Any]] = None) -> List[FieldLabel]:
    """
    Load the bold field label table used for materials and other specs.

    Args:
        config: Parsed attributes.yaml (if None, loads from config)

    Returns:
        List of FieldLabel entries in declaration order
    """
    if config is None:
        config = load_config('attributes.yaml')

    labels = []
    for entry in config.get('field_labels', []):
        labels.append(FieldLabel(
            label=entry['label'],
            kind=entry.get('kind', 'other'),
            aliases=tuple(str(a).lower() for a in entry.get('aliases', [entry['label']])),
            max_length=int(entry.get('max_length', 100)),
        ))
    return labels


@lru_cache(maxsize=1)
def load_vocabulary() -> Vocabulary:
    """
    Build the default Vocabulary from the bundled YAML files.

    The result is cached for the lifetime of the process; it is immutable
    so sharing it between concurrent extractions is safe.
    """
    attributes = load_config('attributes.yaml')
    max_color = attributes.get('max_color_length', {})

    return Vocabulary(
        known_colors=frozenset(load_color_vocabulary()),
        url_keywords=tuple(
            (color, tuple(keywords))
            for color, keywords in load_url_keywords().items()
        ),
        size_tokens=frozenset(str(t).lower() for t in attributes.get('size_tokens', [])),
        size_scale={str(k).upper(): int(v) for k, v in attributes.get('size_scale', {}).items()},
        descriptive_suffixes=tuple(str(s).lower() for s in attributes.get('descriptive_suffixes', [])),
        non_color_words=frozenset(str(w).lower() for w in attributes.get('non_color_words', [])),
        minor_words=frozenset(str(w).lower() for w in attributes.get('minor_words', [])),
        field_labels=tuple(load_field_labels(attributes)),
        max_markdown_color_length=int(max_color.get('markdown', 30)),
        max_inline_color_length=int(max_color.get('inline', 50)),
        max_size_length=int(attributes.get('max_size_length', 20)),
    )
