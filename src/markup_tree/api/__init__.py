"""Public parsing API for the markup-to-tree pipeline."""

from .adapters import to_element_tree, to_lxml
from .parser import (
    SAMPLE_MARKUP,
    MarkupParser,
    parse,
    parse_file,
    parse_string,
)

__all__ = [
    "SAMPLE_MARKUP",
    "MarkupParser",
    "parse",
    "parse_file",
    "parse_string",
    "to_element_tree",
    "to_lxml",
]
