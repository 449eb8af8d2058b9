"""Tokenization engine for the markup-to-tree pipeline.

Key Components:
    tokenize: Pure function turning markup text into a token list
    MarkupTokenizer: Wrapper adding logging, timing and diagnostics
    Token: Immutable token holding a type and a value
    TokenType: Start tag, end tag or text
"""

from .tokenizer import (
    MarkupTokenizer,
    Token,
    TokenizationResult,
    TokenType,
    tokenize,
)

__all__ = [
    "MarkupTokenizer",
    "Token",
    "TokenType",
    "TokenizationResult",
    "tokenize",
]
