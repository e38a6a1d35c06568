"""Declaration model extraction.

This module turns tree-sitter-swift protocol and struct nodes into the
declaration models the code generator consumes.
"""

import logging
import re
from dataclasses import dataclass

from tree_sitter import Node

from swift_test_doubles.models import (
    Field,
    InterfaceDeclaration,
    MethodSignature,
    Parameter,
    RecordDeclaration,
)
from swift_test_doubles.syntax import (
    find_child_by_type,
    find_children_by_type,
    get_node_text,
    get_text_between,
)

logger = logging.getLogger(__name__)

# Line index offset (tree-sitter uses 0-based, we want 1-based)
LINE_INDEX_OFFSET = 1

# Properties that are not part of a struct's memberwise initialiser
_NON_INSTANCE_MODIFIERS = frozenset({"static", "class"})

# Accessor blocks that keep a property stored
_OBSERVER_PREFIXES = ("{ willSet", "{ didSet")

_THROWS = re.compile(r"\b(?:re)?throws\b(?:\s*\(([^)]*)\))?")

_RETURN_ARROW = "->"

# Node types that open a generic "where" clause
_WHERE_CLAUSE_TYPES = ("where_keyword", "type_constraints")


@dataclass
class _Binding:
    """One ``name: Type = value`` binding of a property declaration."""

    name: str
    annotation: Node | None = None
    has_value: bool = False
    is_computed: bool = False


class DeclarationExtractor:
    """Extracts declaration models from tree-sitter-swift nodes.

    Handles extraction of:
    - Protocols: method requirements with parameters, return type and effects
    - Structs: stored properties with explicit type annotations
    """

    def extract_interface(self, node: Node) -> InterfaceDeclaration:
        """Extract a protocol declaration.

        Only plain method requirements are considered; property, initialiser,
        subscript and associated type requirements are ignored.

        Args:
            node: ``protocol_declaration`` node

        Returns:
            InterfaceDeclaration with methods in declaration order

        """
        name = self._get_name(node)
        methods = [
            self._extract_method(member)
            for member in self._get_members(node)
            if member.type == "protocol_function_declaration"
        ]
        logger.debug("Extracted protocol %s with %d methods", name, len(methods))

        return InterfaceDeclaration(
            name=name,
            methods=methods,
            line=node.start_point[0] + LINE_INDEX_OFFSET,
        )

    def extract_record(
        self, node: Node, enclosing: tuple[str, ...] = ()
    ) -> RecordDeclaration:
        """Extract a struct declaration.

        Args:
            node: ``class_declaration`` node whose declaration kind is ``struct``
            enclosing: Names of the types the struct is nested in, outermost first

        Returns:
            RecordDeclaration with fields in declaration order

        """
        name = self._get_name(node)
        fields: list[Field] = []
        for member in self._get_members(node):
            if member.type == "property_declaration":
                fields.extend(self._extract_fields(member))
        logger.debug("Extracted struct %s with %d fields", name, len(fields))

        return RecordDeclaration(
            name=name,
            qualified_name=".".join((*enclosing, name)),
            fields=fields,
            line=node.start_point[0] + LINE_INDEX_OFFSET,
        )

    def _get_name(self, node: Node) -> str:
        name_node = node.child_by_field_name("name")
        return get_node_text(name_node, normalise=True) if name_node else "<anonymous>"

    def _get_members(self, node: Node) -> list[Node]:
        body = node.child_by_field_name("body")
        return body.named_children if body else []

    def _extract_method(self, node: Node) -> MethodSignature:
        name = self._get_name(node)
        parameters = [
            self._extract_parameter(parameter)
            for parameter in find_children_by_type(node, "parameter")
        ]
        type_parameters = find_child_by_type(node, "type_parameters")

        # Effects and return type follow the parameter list, up to the
        # generic "where" clause
        close_paren = find_child_by_type(node, ")")
        tail_start = close_paren.end_byte if close_paren else node.end_byte
        where_start = self._find_child_start(node, tail_start, _WHERE_CLAUSE_TYPES)
        body_start = self._find_child_start(node, tail_start, ("function_body",))
        tail_end = where_start if where_start is not None else body_start
        tail = get_text_between(node, tail_start, tail_end or node.end_byte)
        effects, arrow, return_type = tail.partition(_RETURN_ARROW)

        throws_match = _THROWS.search(effects)
        thrown_type = None
        if throws_match and throws_match.group(1):
            thrown_type = throws_match.group(1).strip() or None

        where_clause = None
        if where_start is not None:
            where_clause = get_text_between(
                node, where_start, body_start or node.end_byte
            )

        return MethodSignature(
            name=name,
            parameters=parameters,
            return_type=return_type.strip() if arrow else None,
            is_async="async" in effects.split(),
            is_throws=throws_match is not None,
            thrown_type=thrown_type,
            generic_clause=(
                get_node_text(type_parameters, normalise=True)
                if type_parameters
                else None
            ),
            where_clause=where_clause,
        )

    def _find_child_start(
        self, node: Node, after_byte: int, child_types: tuple[str, ...]
    ) -> int | None:
        for child in node.children:
            if child.start_byte >= after_byte and child.type in child_types:
                return child.start_byte
        return None

    def _extract_parameter(self, node: Node) -> Parameter:
        """Extract ``label name: Type`` from a parameter node."""
        colon = find_child_by_type(node, ":")
        if colon is None:
            return Parameter(name="_", type=get_node_text(node, normalise=True))

        words = get_text_between(node, node.start_byte, colon.start_byte).split()
        name = words[-1] if words else "_"
        label = words[0] if len(words) > 1 else None
        if label == name:
            label = None

        type_text = get_text_between(node, colon.end_byte, node.end_byte)
        return Parameter(name=name, type=type_text or "Any", label=label)

    def _extract_fields(self, node: Node) -> list[Field]:
        """Extract memberwise-initialisable fields from a property declaration."""
        modifiers = find_child_by_type(node, "modifiers")
        if modifiers is not None and _NON_INSTANCE_MODIFIERS.intersection(
            get_node_text(modifiers).split()
        ):
            return []

        binding_pattern = find_child_by_type(node, "value_binding_pattern")
        is_constant = binding_pattern is not None and (
            get_node_text(binding_pattern, normalise=True) == "let"
        )

        bindings = self._get_bindings(node)
        fields: list[Field] = []
        for binding, annotation in zip(
            bindings, self._binding_annotations(bindings), strict=True
        ):
            if annotation is None:
                logger.debug(
                    "Skipping property %s without type annotation", binding.name
                )
                continue
            if binding.is_computed:
                logger.debug("Skipping computed property %s", binding.name)
                continue
            if is_constant and binding.has_value:
                logger.debug("Skipping initialised constant %s", binding.name)
                continue

            type_text = get_node_text(annotation, normalise=True).removeprefix(":")
            fields.append(Field(name=binding.name, type=type_text.strip()))
        return fields

    def _get_bindings(self, node: Node) -> list[_Binding]:
        """Group the children of a property declaration by binding.

        ``var a = 1, b: Int`` is one node whose children run ``pattern``,
        ``=``, value, ``,``, ``pattern``, ``type_annotation``; every
        ``pattern`` starts a new binding.
        """
        bindings: list[_Binding] = []
        for child in node.children:
            if child.type == "pattern":
                bindings.append(_Binding(name=get_node_text(child, normalise=True)))
            elif not bindings:
                continue
            elif child.type == "type_annotation":
                bindings[-1].annotation = child
            elif child.type == "=":
                bindings[-1].has_value = True
            elif child.type == "computed_property":
                accessors = get_node_text(child, normalise=True)
                if not accessors.startswith(_OBSERVER_PREFIXES):
                    bindings[-1].is_computed = True
        return bindings

    def _binding_annotations(self, bindings: list[_Binding]) -> list[Node | None]:
        """Resolve the type annotation of each binding in a declaration.

        In ``var a, b: Int`` the annotation of ``b`` also types ``a``. A
        binding with an initial value never borrows a later annotation.
        """
        resolved: list[Node | None] = []
        following: Node | None = None
        for binding in reversed(bindings):
            if binding.annotation is not None:
                following = binding.annotation
            elif binding.has_value:
                following = None
            resolved.append(binding.annotation or following)
        return resolved[::-1]
