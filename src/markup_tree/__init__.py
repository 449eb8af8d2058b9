"""Markup Tree.

A minimal markup-to-tree pipeline: a lexer turns markup text into start tag,
end tag and text tokens, and a tree builder turns those tokens into a rooted
tree of element and text nodes using an explicit open-element stack.

Progressive API Disclosure:
- Level 1: Pure functions - tokenize(), build_tree()
- Level 2: Parsing with diagnostics - parse(), parse_string(), parse_file()
- Level 3: Configured parser - MarkupParser with ParserConfig
"""

__version__ = "0.1.0"
__author__ = "Markup Tree Team"

# Level 1: the core pipeline
from .tokenization import Token, TokenType, tokenize
from .tree import Node, ParseResult, build_tree, render_tree

# Level 2 and 3: parsing API and configuration
from .api import MarkupParser, parse, parse_file, parse_string
from .shared import ParserConfig

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Core pipeline
    "tokenize",
    "build_tree",
    "Token",
    "TokenType",
    "Node",
    "render_tree",

    # Parsing API
    "parse",
    "parse_string",
    "parse_file",
    "MarkupParser",
    "ParseResult",

    # Configuration
    "ParserConfig",
]
