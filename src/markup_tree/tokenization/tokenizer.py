"""Markup tokenization.

This module implements the lexer that turns raw markup text into an ordered
sequence of start tag, end tag and text tokens. The lexer never fails: every
input string produces some token sequence.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from markup_tree.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    get_logger,
)

TAG_OPEN = "<"
TAG_CLOSE = ">"
END_TAG_MARKER = "/"


class TokenType(Enum):
    """Token kinds produced by the lexer."""

    START_TAG = "StartTag"
    END_TAG = "EndTag"
    TEXT = "Text"

    @property
    def label(self) -> str:
        return self.value


@dataclass(frozen=True)
class Token:
    """A tag boundary or a run of text.

    ``value`` holds the tag name for start and end tags and the literal text
    for text tokens.
    """

    type: TokenType
    value: str

    def __str__(self) -> str:
        return f"{self.type.label}: {self.value}"


def _scan(text: str) -> Tuple[List[Token], List[int]]:
    """Scan ``text`` once, returning tokens and offsets of unterminated tags."""
    tokens: List[Token] = []
    unterminated: List[int] = []
    buffer: List[str] = []
    pos = 0
    length = len(text)

    while pos < length:
        char = text[pos]

        if char != TAG_OPEN:
            buffer.append(char)
            pos += 1
            continue

        if buffer:
            tokens.append(Token(TokenType.TEXT, "".join(buffer)))
            buffer = []

        tag_start = pos
        is_end_tag = pos + 1 < length and text[pos + 1] == END_TAG_MARKER
        pos += 2 if is_end_tag else 1

        close = text.find(TAG_CLOSE, pos)
        if close == -1:
            name = text[pos:]
            pos = length
            unterminated.append(tag_start)
        else:
            name = text[pos:close]
            pos = close + 1

        tokens.append(
            Token(TokenType.END_TAG if is_end_tag else TokenType.START_TAG, name)
        )

    if buffer:
        tokens.append(Token(TokenType.TEXT, "".join(buffer)))

    return tokens, unterminated


def tokenize(text: str) -> List[Token]:
    """Convert markup text into an ordered list of tokens.

    Pure function; never raises for malformed markup. A tag that is not
    terminated by ``>`` still yields a token holding the name collected up to
    the end of input.

    Examples:
        >>> [str(token) for token in tokenize("hi <b>bold</b>")]
        ['Text: hi ', 'StartTag: b', 'Text: bold', 'EndTag: b']
    """
    tokens, _ = _scan(text)
    return tokens


@dataclass
class TokenizationResult:
    """Result of tokenization with metadata and diagnostics."""

    tokens: List[Token]
    character_count: int = 0
    unterminated_tags: int = 0
    processing_time_ms: float = 0.0
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)

    @property
    def token_count(self) -> int:
        """Get the total number of tokens."""
        return len(self.tokens)

    @property
    def token_type_distribution(self) -> Dict[str, int]:
        """Count tokens per token type label."""
        distribution: Dict[str, int] = {}
        for token in self.tokens:
            label = token.type.label
            distribution[label] = distribution.get(label, 0) + 1
        return distribution


class MarkupTokenizer:
    """Tokenizer wrapper that adds logging, timing and diagnostics.

    Produces exactly the token sequence of :func:`tokenize`.
    """

    def __init__(
        self,
        correlation_id: Optional[str] = None,
        report_unterminated_tags: bool = True
    ) -> None:
        """Initialize the tokenizer.

        Args:
            correlation_id: Optional correlation ID for tracking requests
            report_unterminated_tags: Emit a warning diagnostic for each tag
                cut off by the end of input
        """
        self.correlation_id = correlation_id
        self.report_unterminated_tags = report_unterminated_tags
        self.logger = get_logger(__name__, correlation_id, "tokenizer")

    def tokenize(self, text: str) -> TokenizationResult:
        """Tokenize markup text.

        Args:
            text: Markup to tokenize

        Returns:
            TokenizationResult holding the tokens and metadata
        """
        start_time = time.time()
        self.logger.debug(
            "Starting tokenization", extra={"character_count": len(text)}
        )

        tokens, unterminated = _scan(text)
        result = TokenizationResult(
            tokens=tokens,
            character_count=len(text),
            unterminated_tags=len(unterminated),
        )

        if self.report_unterminated_tags:
            for offset in unterminated:
                result.diagnostics.append(
                    DiagnosticEntry(
                        severity=DiagnosticSeverity.WARNING,
                        message="Tag not terminated before end of input",
                        component="tokenizer",
                        position={"offset": offset},
                        correlation_id=self.correlation_id,
                    )
                )

        result.processing_time_ms = (time.time() - start_time) * 1000
        self.logger.info(
            "Tokenization completed",
            extra={
                "token_count": result.token_count,
                "unterminated_tags": result.unterminated_tags,
                "processing_time_ms": result.processing_time_ms,
            },
        )
        return result
