"""Utility functions for tree-sitter syntax tree traversal.

These helpers are shared by the declaration extractor and the annotation
scanner.
"""

import re

from tree_sitter import Node

_DEFAULT_ENCODING = "utf-8"

_WHITESPACE = re.compile(r"\s+")

# Node types tree-sitter-swift emits for comments
COMMENT_TYPES = frozenset({"comment", "multiline_comment"})

# Conditional compilation lines (`#if`, `#else`, `#endif`) between a comment
# and the declaration it leads
DIRECTIVE_TYPES = frozenset({"directive"})


def normalise_whitespace(text: str) -> str:
    """Collapse every whitespace run to a single space and trim the ends.

    Args:
        text: Raw source text

    Returns:
        Text with normalised whitespace

    """
    return _WHITESPACE.sub(" ", text).strip()


def get_node_text(node: Node, normalise: bool = False) -> str:
    """Get the text content of an AST node.

    Args:
        node: Tree-sitter node
        normalise: Collapse whitespace runs to single spaces

    Returns:
        Text content of the node

    """
    text = (node.text or b"").decode(_DEFAULT_ENCODING)
    return normalise_whitespace(text) if normalise else text


def get_text_between(node: Node, start_byte: int, end_byte: int) -> str:
    """Get the source text of a byte range inside a node.

    Args:
        node: Node whose text covers the range
        start_byte: Absolute start offset, clamped to the node
        end_byte: Absolute end offset, clamped to the node

    Returns:
        Text of the range with normalised whitespace

    """
    source = node.text or b""
    start = max(start_byte - node.start_byte, 0)
    end = min(end_byte - node.start_byte, len(source))
    return normalise_whitespace(source[start:end].decode(_DEFAULT_ENCODING))


def find_child_by_type(node: Node, child_type: str) -> Node | None:
    """Find the first direct child of a specific type.

    Args:
        node: Parent node to search in
        child_type: Type of child node to find

    Returns:
        First matching child node or None

    """
    for child in node.children:
        if child.type == child_type:
            return child
    return None


def find_children_by_type(node: Node, child_type: str) -> list[Node]:
    """Find all direct children of a specific type.

    Args:
        node: Parent node to search in
        child_type: Type of children to find

    Returns:
        List of matching child nodes

    """
    return [child for child in node.children if child.type == child_type]


def get_leading_comments(node: Node) -> list[str]:
    """Extract the comments directly preceding a node.

    Walks backwards over comment siblings, stepping over `#if` lines. A
    comment that starts on the row where the element before it ends is a
    trailing comment of that element and does not lead the node, so
    ``let x = 1 // note`` never annotates the declaration on the next line.

    Args:
        node: The AST node to find comments for

    Returns:
        Comment texts in source order

    """
    comments: list[Node] = []
    previous = node.prev_sibling
    while previous is not None and (
        previous.type in COMMENT_TYPES or previous.type in DIRECTIVE_TYPES
    ):
        if previous.type in COMMENT_TYPES:
            comments.append(previous)
        previous = previous.prev_sibling
    comments.reverse()

    if previous is not None:
        end_row = previous.end_point[0]
        while comments and comments[0].start_point[0] == end_row:
            end_row = comments.pop(0).end_point[0]

    return [get_node_text(comment).strip() for comment in comments]
