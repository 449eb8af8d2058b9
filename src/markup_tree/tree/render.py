"""Plain-text renderings of tokens and trees for inspection."""

from typing import Any, Dict, Iterable, List

from markup_tree.tokenization import Token

from .builder import Node


def render_tokens(tokens: Iterable[Token]) -> str:
    """Render one ``Type: value`` line per token."""
    return "\n".join(str(token) for token in tokens)


def render_tree(node: Node, indent: str = "  ") -> str:
    """Render an indented dump of a tree.

    Elements appear as ``<name>`` and, except at depth 0, are followed by a
    ``</name>`` line after their children. Text nodes appear as
    ``Text: "data"``.

    Examples:
        >>> from markup_tree import parse_string
        >>> print(render_tree(parse_string("<b>x</b>").root))
        <document>
          <b>
            Text: "x"
          </b>
    """
    lines: List[str] = []
    # (node, depth, closing) entries; a closing entry emits the end tag line
    stack = [(node, 0, False)]
    while stack:
        current, depth, closing = stack.pop()
        prefix = indent * depth
        if closing:
            lines.append(f"{prefix}</{current.name}>")
        elif current.is_text:
            lines.append(f'{prefix}Text: "{current.name}"')
        else:
            lines.append(f"{prefix}<{current.name}>")
            if depth > 0:
                stack.append((current, depth, True))
            stack.extend(
                (child, depth + 1, False) for child in reversed(current.children)
            )
    return "\n".join(lines)


def node_to_dict(node: Node) -> Dict[str, Any]:
    """Convert a tree to a JSON-serialisable dictionary."""
    return node.to_dict()
