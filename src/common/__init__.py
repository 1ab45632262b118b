# Common utilities
from .config_loader import (
    FieldLabel,
    Vocabulary,
    load_color_vocabulary,
    load_config,
    load_field_labels,
    load_url_keywords,
    load_vocabulary,
)
from .log_config import setup_logging
from .text_utils import clean_text, html_to_text, looks_like_html, title_case
