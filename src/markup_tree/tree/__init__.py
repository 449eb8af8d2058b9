"""Tree building engine for the markup-to-tree pipeline.

Key Components:
    build_tree: Pure function building a node tree from tokens
    TreeBuilder: Builder that also reports tolerated irregularities
    Node: Element or text node
    OpenElementStack: Open-element stack that never loses its root
    ParseResult: Tree plus diagnostics and metadata
"""

from .builder import (
    DEFAULT_ROOT_NAME,
    Node,
    OpenElementStack,
    ParseResult,
    TreeBuilder,
    build_tree,
)
from .render import node_to_dict, render_tokens, render_tree

__all__ = [
    "DEFAULT_ROOT_NAME",
    "Node",
    "OpenElementStack",
    "ParseResult",
    "TreeBuilder",
    "build_tree",
    "node_to_dict",
    "render_tokens",
    "render_tree",
]
