"""Tree building from token sequences.

This module converts a token sequence into a rooted tree of element and text
nodes, driven by an explicit stack of open elements. The synthetic root is
never popped, so the current insertion point always resolves to a valid
element even when the input holds more end tags than start tags.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional

from markup_tree.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    ParserConfig,
    PerformanceMetrics,
    get_logger,
)
from markup_tree.tokenization import Token, TokenType

DEFAULT_ROOT_NAME = "document"


@dataclass(eq=False)
class Node:
    """An element or a text leaf in the document tree.

    ``name`` holds the tag name for elements and the literal text for text
    nodes. Children are owned by their parent; there is no back-reference.
    """

    name: str
    is_text: bool = False
    children: List["Node"] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.is_text and self.children:
            raise ValueError("Text nodes cannot have children")

    @classmethod
    def element(cls, name: str) -> "Node":
        return cls(name=name)

    @classmethod
    def text(cls, data: str) -> "Node":
        return cls(name=data, is_text=True)

    def add_child(self, child: "Node") -> None:
        """Append a child node."""
        if not isinstance(child, Node):
            raise TypeError("Child must be a Node instance")
        if self.is_text:
            raise ValueError("Text nodes cannot have children")
        self.children.append(child)

    def iter(self) -> Iterator["Node"]:
        """Iterate over this node and its descendants in document order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def element_names(self) -> List[str]:
        """Names of element descendants in pre-order, excluding this node."""
        return [
            node.name for node in self.iter()
            if node is not self and not node.is_text
        ]

    @property
    def text_content(self) -> str:
        """Concatenated text of all descendant text nodes."""
        return "".join(node.name for node in self.iter() if node.is_text)

    @property
    def depth(self) -> int:
        """Height of the subtree rooted here (a leaf has depth 0)."""
        height = 0
        stack = [(self, 0)]
        while stack:
            node, level = stack.pop()
            height = max(height, level)
            stack.extend((child, level + 1) for child in node.children)
        return height

    def to_dict(self) -> Dict[str, Any]:
        """Convert node and its subtree to dictionary representation."""
        data = _node_fields(self)
        stack = [(self, data)]
        while stack:
            node, node_data = stack.pop()
            for child in node.children:
                child_data = _node_fields(child)
                node_data["children"].append(child_data)
                stack.append((child, child_data))
        return data

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        pairs = [(self, other)]
        while pairs:
            left, right = pairs.pop()
            if (
                left.name != right.name
                or left.is_text != right.is_text
                or len(left.children) != len(right.children)
            ):
                return False
            pairs.extend(zip(left.children, right.children))
        return True

    def __repr__(self) -> str:
        if self.is_text:
            return f"Node.text({self.name!r})"
        return f"Node.element({self.name!r}, children={len(self.children)})"


def _node_fields(node: Node) -> Dict[str, Any]:
    if node.is_text:
        return {"name": node.name, "is_text": True}
    return {"name": node.name, "is_text": False, "children": []}


class OpenElementStack:
    """Stack of open elements whose bottom entry, the root, is never removed."""

    def __init__(self, root: Node) -> None:
        self._nodes: List[Node] = [root]

    @property
    def root(self) -> Node:
        return self._nodes[0]

    @property
    def current(self) -> Node:
        """The element new children attach to."""
        return self._nodes[-1]

    @property
    def depth(self) -> int:
        return len(self._nodes)

    def push(self, node: Node) -> None:
        self._nodes.append(node)

    def pop(self) -> Optional[Node]:
        """Pop the current element, or return None if only the root is open."""
        if len(self._nodes) == 1:
            return None
        return self._nodes.pop()

    def names(self) -> List[str]:
        """Names of open elements, root first."""
        return [node.name for node in self._nodes]


def build_tree(tokens: Iterable[Token], root_name: str = DEFAULT_ROOT_NAME) -> Node:
    """Build a node tree from a token sequence and return its root.

    End tags close the current element without checking its name. Unclosed
    elements are accepted and end tags with nothing left to close are
    ignored.

    Examples:
        >>> from markup_tree.tokenization import tokenize
        >>> build_tree(tokenize("<a><b>x</b></a>")).element_names()
        ['a', 'b']
    """
    stack = OpenElementStack(Node.element(root_name))
    for token in tokens:
        if token.type is TokenType.START_TAG:
            node = Node.element(token.value)
            stack.current.add_child(node)
            stack.push(node)
        elif token.type is TokenType.END_TAG:
            stack.pop()
        elif token.type is TokenType.TEXT:
            stack.current.add_child(Node.text(token.value))
    return stack.root


@dataclass
class ParseResult:
    """Tree built from a token sequence along with diagnostics and metadata."""

    root: Node = field(default_factory=lambda: Node.element(DEFAULT_ROOT_NAME))
    tokens: List[Token] = field(default_factory=list)
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    performance: PerformanceMetrics = field(default_factory=PerformanceMetrics)
    open_elements: List[str] = field(default_factory=list)
    stray_end_tags: int = 0
    mismatched_end_tags: int = 0
    correlation_id: Optional[str] = None

    @property
    def element_count(self) -> int:
        """Number of elements in the tree, excluding the root."""
        return sum(
            1 for node in self.root.iter()
            if node is not self.root and not node.is_text
        )

    @property
    def text_count(self) -> int:
        return sum(1 for node in self.root.iter() if node.is_text)

    @property
    def is_balanced(self) -> bool:
        """True when every end tag closed an element and nothing stayed open."""
        return self.stray_end_tags == 0 and len(self.open_elements) <= 1

    @property
    def has_warnings(self) -> bool:
        return any(
            diag.severity in (
                DiagnosticSeverity.WARNING,
                DiagnosticSeverity.ERROR,
                DiagnosticSeverity.CRITICAL,
            )
            for diag in self.diagnostics
        )

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        position: Optional[Dict[str, int]] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Add diagnostic entry to result."""
        self.diagnostics.append(
            DiagnosticEntry(
                severity=severity,
                message=message,
                component=component,
                position=position,
                details=details,
                correlation_id=self.correlation_id,
            )
        )

    def get_diagnostics_by_severity(
        self,
        severity: DiagnosticSeverity
    ) -> List[DiagnosticEntry]:
        """Get diagnostics of specific severity level."""
        return [diag for diag in self.diagnostics if diag.severity == severity]

    def summary(self) -> Dict[str, Any]:
        """Get summary statistics for the parse result."""
        return {
            "element_count": self.element_count,
            "text_count": self.text_count,
            "token_count": len(self.tokens),
            "max_depth": self.root.depth,
            "is_balanced": self.is_balanced,
            "open_elements": list(self.open_elements),
            "stray_end_tags": self.stray_end_tags,
            "mismatched_end_tags": self.mismatched_end_tags,
            "diagnostics": [diag.to_dict() for diag in self.diagnostics],
            "performance": self.performance.to_dict(),
        }


class TreeBuilder:
    """Tree builder that reports tolerated irregularities as diagnostics.

    Builds the same tree as :func:`build_tree`; reporting never changes the
    structure.
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize tree builder.

        Args:
            config: Parser configuration, defaults to ``ParserConfig()``
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "tree_builder")

    def build(self, tokens: Iterable[Token]) -> ParseResult:
        """Build a document tree from a token sequence.

        Args:
            tokens: Tokens in emission order

        Returns:
            ParseResult containing the tree and diagnostics
        """
        start_time = time.time()
        token_list = list(tokens)
        self.logger.debug(
            "Starting tree building", extra={"token_count": len(token_list)}
        )

        stack = OpenElementStack(Node.element(self.config.root_name))
        result = ParseResult(
            root=stack.root,
            tokens=token_list,
            correlation_id=self.correlation_id,
        )
        nodes_created = 0

        for index, token in enumerate(token_list):
            if token.type is TokenType.START_TAG:
                node = Node.element(token.value)
                stack.current.add_child(node)
                stack.push(node)
                nodes_created += 1
            elif token.type is TokenType.END_TAG:
                closed = stack.pop()
                if closed is None:
                    result.stray_end_tags += 1
                    result.add_diagnostic(
                        DiagnosticSeverity.WARNING,
                        f"End tag </{token.value}> ignored: no open element",
                        "tree_builder",
                        position={"token_index": index},
                    )
                elif closed.name != token.value:
                    result.mismatched_end_tags += 1
                    if self.config.report_mismatched_end_tags:
                        result.add_diagnostic(
                            DiagnosticSeverity.INFO,
                            f"End tag </{token.value}> closed <{closed.name}>",
                            "tree_builder",
                            position={"token_index": index},
                            details={"expected": closed.name, "found": token.value},
                        )
            elif token.type is TokenType.TEXT:
                stack.current.add_child(Node.text(token.value))
                nodes_created += 1

        result.open_elements = stack.names()
        if stack.depth > 1:
            unclosed = result.open_elements[1:]
            result.add_diagnostic(
                DiagnosticSeverity.INFO,
                f"{len(unclosed)} element(s) left open at end of input",
                "tree_builder",
                details={"open_elements": unclosed},
            )

        result.performance.processing_time_ms = (time.time() - start_time) * 1000
        result.performance.tokens_consumed = len(token_list)
        result.performance.nodes_created = nodes_created

        self.logger.info(
            "Tree building completed",
            extra={
                "element_count": result.element_count,
                "stray_end_tags": result.stray_end_tags,
                "open_elements": len(result.open_elements) - 1,
            },
        )
        return result
