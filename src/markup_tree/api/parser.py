"""Parser API for the markup-to-tree pipeline.

Module-level functions cover the common cases; ``MarkupParser`` binds a
configuration and correlation ID for repeated use. Malformed markup never
raises; only unreadable input (missing files, undecodable bytes, unsupported
input types) does.
"""

import time
from pathlib import Path
from typing import BinaryIO, List, Optional, TextIO, Union

from markup_tree.shared import ParserConfig, get_logger
from markup_tree.tokenization import MarkupTokenizer, Token
from markup_tree.tree import ParseResult, TreeBuilder

# Type definitions for input data
InputType = Union[str, bytes, BinaryIO, TextIO, Path]

# Constants for API operations
PREVIEW_LENGTH = 100  # Max length for content preview in logs
MS_PER_SECOND = 1000

SAMPLE_MARKUP = "<html><body><div>Hello <b>world</b></div></body></html>"


def parse(
    input_data: InputType,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> ParseResult:
    """Parse markup from a string, bytes, path or file-like object.

    Args:
        input_data: Markup as str, bytes, ``pathlib.Path`` or object with ``read()``
        config: Optional parser configuration
        correlation_id: Optional correlation ID for request tracking

    Returns:
        ParseResult containing the tree and diagnostics

    Raises:
        TypeError: If the input type is not supported

    Examples:
        >>> parse("<a><b>x</b></a>").root.element_names()
        ['a', 'b']
        >>> parse(b"<p>hi</p>").root.text_content
        'hi'
    """
    config = config or ParserConfig()

    if isinstance(input_data, str):
        return parse_string(input_data, config, correlation_id)
    if isinstance(input_data, bytes):
        return parse_string(input_data.decode(config.encoding), config, correlation_id)
    if isinstance(input_data, Path):
        return parse_file(input_data, config=config, correlation_id=correlation_id)
    if hasattr(input_data, "read"):
        content = input_data.read()
        if isinstance(content, bytes):
            content = content.decode(config.encoding)
        return parse_string(content, config, correlation_id)

    raise TypeError(f"Unsupported input type: {type(input_data).__name__}")


def parse_string(
    markup: str,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> ParseResult:
    """Tokenize and build a tree from a markup string.

    Examples:
        >>> result = parse_string("hi <b>bold</b> end")
        >>> [child.name for child in result.root.children]
        ['hi ', 'b', ' end']
    """
    config = config or ParserConfig()
    logger = get_logger(__name__, correlation_id, "parse_string")
    start_time = time.time()

    logger.debug(
        "Starting string parse operation",
        extra={
            "content_length": len(markup),
            "preview": (
                markup[:PREVIEW_LENGTH] + "..."
                if len(markup) > PREVIEW_LENGTH else markup
            ),
        },
    )

    tokenizer = MarkupTokenizer(
        correlation_id=correlation_id,
        report_unterminated_tags=config.report_unterminated_tags,
    )
    tokenization = tokenizer.tokenize(markup)

    builder = TreeBuilder(config=config, correlation_id=correlation_id)
    result = builder.build(tokenization.tokens)

    result.diagnostics[:0] = tokenization.diagnostics
    result.performance.characters_processed = tokenization.character_count
    result.performance.tokens_generated = tokenization.token_count
    result.performance.processing_time_ms = (time.time() - start_time) * MS_PER_SECOND

    logger.info(
        "String parse completed",
        extra={
            "element_count": result.element_count,
            "diagnostic_count": len(result.diagnostics),
            "processing_time_ms": result.performance.processing_time_ms,
        },
    )
    return result


def parse_file(
    file_path: Union[str, Path],
    encoding: Optional[str] = None,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> ParseResult:
    """Read a markup file and parse its content.

    Args:
        file_path: Path to the file
        encoding: Text encoding, defaults to ``config.encoding``
        config: Optional parser configuration
        correlation_id: Optional correlation ID for request tracking

    Raises:
        OSError: If the file cannot be read
        UnicodeDecodeError: If the file is not valid in the chosen encoding
    """
    config = config or ParserConfig()
    path_obj = Path(file_path)
    logger = get_logger(__name__, correlation_id, "parse_file")

    logger.info(
        "Starting file parse operation",
        extra={"file_path": str(path_obj), "encoding": encoding or config.encoding},
    )
    content = path_obj.read_text(encoding=encoding or config.encoding)
    return parse_string(content, config, correlation_id)


class MarkupParser:
    """Reusable parser bound to a configuration.

    Examples:
        >>> parser = MarkupParser(ParserConfig(root_name="root"))
        >>> parser.parse_string("<p>x</p>").root.name
        'root'
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id

    def tokenize(self, markup: str) -> List[Token]:
        """Tokenize markup without building a tree."""
        tokenizer = MarkupTokenizer(
            correlation_id=self.correlation_id,
            report_unterminated_tags=self.config.report_unterminated_tags,
        )
        return tokenizer.tokenize(markup).tokens

    def parse(self, input_data: InputType) -> ParseResult:
        return parse(input_data, self.config, self.correlation_id)

    def parse_string(self, markup: str) -> ParseResult:
        return parse_string(markup, self.config, self.correlation_id)

    def parse_file(
        self, file_path: Union[str, Path], encoding: Optional[str] = None
    ) -> ParseResult:
        return parse_file(file_path, encoding, self.config, self.correlation_id)
