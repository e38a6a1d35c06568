"""Marker-driven discovery of annotated declarations."""

import logging
from collections.abc import Iterator

from tree_sitter import Node

from swift_test_doubles.errors import MarkerMismatchError
from swift_test_doubles.extractor import LINE_INDEX_OFFSET, DeclarationExtractor
from swift_test_doubles.models import ArtifactKind, ScannedDeclaration
from swift_test_doubles.parser import SwiftSourceParser
from swift_test_doubles.syntax import (
    COMMENT_TYPES,
    DIRECTIVE_TYPES,
    find_child_by_type,
    find_children_by_type,
    get_leading_comments,
    get_node_text,
)

logger = logging.getLogger(__name__)

MARKERS: dict[ArtifactKind, str] = {
    ArtifactKind.SPY: "// TestDoubles:spy",
    ArtifactKind.MOCK: "// TestDoubles:mock",
    ArtifactKind.RECORD_FACTORY: "// TestDoubles:struct",
}

# Declaration kind each artifact kind must be attached to
_EXPECTED_KINDS: dict[ArtifactKind, str] = {
    ArtifactKind.SPY: "protocol",
    ArtifactKind.MOCK: "protocol",
    ArtifactKind.RECORD_FACTORY: "struct",
}

# Declarations whose body can hold nested declarations
_TYPE_DECLARATION_TYPES = frozenset({"class_declaration", "protocol_declaration"})


def contains_markers(source_code: str) -> bool:
    """Check whether raw source text mentions any known marker."""
    return any(marker in source_code for marker in MARKERS.values())


def declaration_kind(node: Node) -> str:
    """Return the Swift keyword a declaration node was introduced with.

    tree-sitter-swift parses ``struct``, ``class``, ``enum``, ``actor`` and
    ``extension`` as ``class_declaration`` and records the keyword in the
    ``declaration_kind`` field.
    """
    if node.type == "class_declaration":
        kind = node.child_by_field_name("declaration_kind")
        if kind is not None:
            return kind.type
    return node.type.removesuffix("_declaration")


class AnnotationScanner:
    """Finds declarations preceded by marker comments.

    A marker is recognised when its text occurs in the comments leading a
    declaration. Each marker found before a declaration of the expected kind
    yields one ``ScannedDeclaration``; markers before a declaration of the
    wrong kind are dropped, or rejected when ``strict_markers`` is set.
    """

    def __init__(
        self,
        parser: SwiftSourceParser | None = None,
        extractor: DeclarationExtractor | None = None,
        strict_markers: bool = False,
    ) -> None:
        """Initialise the scanner.

        Args:
            parser: Parser used by ``scan``; a new one is created if omitted
            extractor: Declaration extractor; a new one is created if omitted
            strict_markers: Raise MarkerMismatchError for misplaced markers

        """
        self._parser = parser or SwiftSourceParser()
        self._extractor = extractor or DeclarationExtractor()
        self._strict_markers = strict_markers

    def scan(self, source_code: str) -> list[ScannedDeclaration]:
        """Parse source code and return annotated declarations in source order.

        Args:
            source_code: Swift source text

        Returns:
            Annotated declarations with the artifact kind each marker asks for

        Raises:
            ParserError: If the source cannot be parsed
            MarkerMismatchError: If strict markers are enabled and a marker
                precedes a declaration of the wrong kind

        """
        return self.scan_tree(self._parser.parse(source_code))

    def scan_tree(self, root: Node) -> list[ScannedDeclaration]:
        """Return annotated declarations of an already parsed tree."""
        scanned: list[ScannedDeclaration] = []
        for node, enclosing in self._iter_declarations(root, ()):
            for kind in self._markers_of(node):
                if declaration_kind(node) != _EXPECTED_KINDS[kind]:
                    self._report_mismatch(kind, node)
                    continue
                if kind.is_test_double:
                    declaration = self._extractor.extract_interface(node)
                else:
                    declaration = self._extractor.extract_record(node, enclosing)
                scanned.append(ScannedDeclaration(kind=kind, declaration=declaration))
                logger.debug(
                    "Found %s marker for %s at line %d",
                    kind.value,
                    declaration.name,
                    declaration.line,
                )
        return scanned

    def imports(self, root: Node) -> list[str]:
        """Return the modules imported at file level, in order, without duplicates."""
        modules: list[str] = []
        for node in find_children_by_type(root, "import_declaration"):
            path = find_child_by_type(node, "identifier")
            if path is None:
                continue
            module = get_node_text(path, normalise=True).split(".")[0].strip()
            if module and module not in modules:
                modules.append(module)
        return modules

    def _markers_of(self, node: Node) -> list[ArtifactKind]:
        comments = get_leading_comments(node)
        if not comments:
            return []
        return [
            kind
            for kind, marker in MARKERS.items()
            if any(marker in comment for comment in comments)
        ]

    def _report_mismatch(self, kind: ArtifactKind, node: Node) -> None:
        name_node = node.child_by_field_name("name")
        name = get_node_text(name_node, normalise=True) if name_node else node.type
        message = (
            f"Marker '{MARKERS[kind]}' precedes {declaration_kind(node)} "
            f"declaration '{name}' at line {node.start_point[0] + LINE_INDEX_OFFSET}"
            f", expected {_EXPECTED_KINDS[kind]} declaration"
        )
        if self._strict_markers:
            raise MarkerMismatchError(message)
        logger.debug("Ignoring marker: %s", message)

    def _iter_declarations(
        self, node: Node, enclosing: tuple[str, ...]
    ) -> Iterator[tuple[Node, tuple[str, ...]]]:
        """Yield declarations depth-first with the names of their enclosing types."""
        for child in node.named_children:
            if child.type in COMMENT_TYPES or child.type in DIRECTIVE_TYPES:
                continue
            yield child, enclosing
            if child.type in _TYPE_DECLARATION_TYPES:
                body = child.child_by_field_name("body")
                if body is None:
                    continue
                name_node = child.child_by_field_name("name")
                name = get_node_text(name_node, normalise=True) if name_node else ""
                yield from self._iter_declarations(body, (*enclosing, name))
