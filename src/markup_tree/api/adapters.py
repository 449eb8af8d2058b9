"""Conversion of finished trees into ElementTree and lxml element trees.

Text nodes have no element counterpart in either library: a text node that
precedes every element child becomes the parent's ``text``, any later text
node becomes the ``tail`` of the element before it. Adjacent text nodes are
concatenated.
"""

import xml.etree.ElementTree as ET
from typing import Any, Callable, Union

import lxml.etree

from markup_tree.tree import Node, ParseResult

TreeSource = Union[Node, ParseResult]


def _root_of(source: TreeSource) -> Node:
    if isinstance(source, ParseResult):
        return source.root
    if isinstance(source, Node):
        return source
    raise TypeError("Source must be a Node or ParseResult instance")


def _convert(node: Node, make_element: Callable[[str], Any]) -> Any:
    if node.is_text:
        raise ValueError("Cannot convert a text node to an element")

    root = make_element(node.name)
    stack = [(node, root)]
    while stack:
        current, element = stack.pop()
        last_child = None
        for child in current.children:
            if child.is_text:
                if last_child is None:
                    element.text = (element.text or "") + child.name
                else:
                    last_child.tail = (last_child.tail or "") + child.name
                continue
            last_child = make_element(child.name)
            element.append(last_child)
            stack.append((child, last_child))
    return root


def to_element_tree(source: TreeSource) -> ET.Element:
    """Convert a tree to a standard library ``ElementTree`` element.

    Examples:
        >>> from markup_tree import parse_string
        >>> ET.tostring(to_element_tree(parse_string("a<b>c</b>d")), encoding="unicode")
        '<document>a<b>c</b>d</document>'
    """
    return _convert(_root_of(source), ET.Element)


def to_lxml(source: TreeSource) -> "lxml.etree._Element":
    """Convert a tree to an ``lxml.etree`` element.

    lxml only accepts XML names, so an element whose name is not a valid XML
    name (for example the empty name produced by ``<>``) raises ``ValueError``.
    """
    return _convert(_root_of(source), lxml.etree.Element)
