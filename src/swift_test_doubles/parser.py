"""Swift source parser using tree-sitter."""

import logging

import tree_sitter_swift
from tree_sitter import Language, Node, Parser

from swift_test_doubles.errors import ParserError

logger = logging.getLogger(__name__)

_SWIFT_LANGUAGE = Language(tree_sitter_swift.language())

# Constants
_DEFAULT_ENCODING = "utf-8"
_LINE_INDEX_OFFSET = 1


def _get_parser() -> Parser:
    """Get a tree-sitter Parser object configured for Swift.

    Returns:
        Tree-sitter Parser object configured for Swift

    """
    parser = Parser()
    parser.language = _SWIFT_LANGUAGE
    return parser


def _find_first_error(node: Node) -> Node | None:
    """Find the first ERROR or missing node in source order."""
    for child in node.children:
        if child.is_error or child.is_missing:
            return child
        if child.has_error:
            return _find_first_error(child)
    return node if node.is_error else None


class SwiftSourceParser:
    """Parser for Swift source code using tree-sitter.

    Unlike a general purpose code analyser, the generator cannot work from a
    partially recovered tree: a marker may end up attached to the wrong
    declaration. Any syntax error reported by tree-sitter is therefore raised
    as ParserError.
    """

    def __init__(self) -> None:
        """Initialise the parser."""
        self.parser = _get_parser()
        self.tree_sitter_language = _SWIFT_LANGUAGE

    def parse(self, source_code: str) -> Node:
        """Parse source code string.

        Args:
            source_code: Swift source code to parse

        Returns:
            AST root node

        Raises:
            ParserError: If the source contains syntax errors

        """
        tree = self.parser.parse(bytes(source_code, _DEFAULT_ENCODING))
        root = tree.root_node
        if root.has_error:
            raise self._syntax_error(root)
        return root

    def _syntax_error(self, root: Node) -> ParserError:
        error_node = _find_first_error(root) or root
        line = error_node.start_point[0] + _LINE_INDEX_OFFSET
        if error_node.is_missing:
            message = f"missing '{error_node.type}'"
        else:
            text = (error_node.text or b"").decode(_DEFAULT_ENCODING, "replace")
            snippet = " ".join(text.split())[:40]
            message = "invalid Swift syntax"
            if snippet:
                message += f" near '{snippet}'"
        logger.debug("Parse failed at line %d: %s", line, message)
        return ParserError(message, line=line)
