"""Rendering of call-recording test doubles for protocols.

Spies and mocks are rendered by the same algorithm; the artifact kind only
selects the type name suffix.
"""

import logging
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass

from swift_test_doubles.config import GeneratorConfig
from swift_test_doubles.errors import GenerationError
from swift_test_doubles.generator.base import (
    SourceWriter,
    build_import_block,
    upper_first,
)
from swift_test_doubles.models import (
    ArtifactKind,
    GeneratedArtifact,
    InterfaceDeclaration,
    MethodSignature,
    Parameter,
)
from swift_test_doubles.types import (
    is_non_escaping_closure,
    parameter_form,
    stored_form,
)
from swift_test_doubles.types.text import generic_parameter_names, mentions_identifier

logger = logging.getLogger(__name__)

_DEFAULT_ERROR_TYPE = "Error"

# Storage type for values whose type depends on a method generic parameter
_TYPE_ERASED = "Any"


@dataclass(frozen=True)
class _MethodMembers:
    """Names of the members generated for one protocol method."""

    method: MethodSignature
    base: str

    @property
    def call_struct(self) -> str:
        return f"{upper_first(self.base)}Call"

    @property
    def calls(self) -> str:
        return f"{self.base}Calls"

    @property
    def call_count(self) -> str:
        return f"{self.base}CallCount"

    @property
    def error_to_throw(self) -> str:
        return f"{self.base}ErrorToThrow"

    @property
    def return_value(self) -> str:
        return f"{self.base}ReturnValue"

    @property
    def error_producer_type(self) -> str:
        return f"(() -> {self.method.thrown_type or _DEFAULT_ERROR_TYPE})?"

    @property
    def recorded_parameters(self) -> list[Parameter]:
        """Parameters kept in the call record.

        Non-escaping closures cannot be stored and are left out.
        """
        return [
            parameter
            for parameter in self.method.parameters
            if not is_non_escaping_closure(parameter.type)
        ]

    @property
    def returns_generic(self) -> bool:
        return self.method.has_return_value and self.is_generic(
            self.method.return_type or ""
        )

    def is_generic(self, type_text: str) -> bool:
        names = generic_parameter_names(self.method.generic_clause)
        return mentions_identifier(type_text, names)

    def stored_type(self, type_text: str) -> str:
        """Spell a parameter or return type for a stored property."""
        return _TYPE_ERASED if self.is_generic(type_text) else stored_form(type_text)


def _argument_name(parameter: Parameter) -> str:
    if parameter.label and parameter.label != "_":
        return parameter.label
    return parameter.name


def member_bases(methods: Sequence[MethodSignature]) -> list[str]:
    """Choose a unique member name prefix for every method.

    A method name used once is its own prefix. Overloads append their
    argument names (``fetch(id:)`` -> ``fetchId``) and, if that still
    collides, a counter.
    """
    occurrences = Counter(method.name for method in methods)
    bases: list[str] = []
    for method in methods:
        base = method.name
        if occurrences[method.name] > 1:
            base += "".join(
                upper_first(_argument_name(parameter))
                for parameter in method.parameters
            )
        candidate = base
        counter = 2
        while candidate in bases:
            candidate = f"{base}{counter}"
            counter += 1
        bases.append(candidate)
    return bases


class ProtocolDoubleRenderer:
    """Renders a spy or mock class implementing a protocol.

    The generated class records every call, returns values injected at
    construction time and can be told to throw from any throwing method.
    """

    def __init__(self, config: GeneratorConfig | None = None) -> None:
        self._config = config or GeneratorConfig()

    def render_double(
        self,
        interface: InterfaceDeclaration,
        kind: ArtifactKind,
        imports: Sequence[str] = (),
    ) -> GeneratedArtifact:
        """Render the test double for a protocol.

        Args:
            interface: Protocol to implement
            kind: SPY or MOCK, selecting the type name suffix
            imports: Modules imported by the source file

        Returns:
            Generated artifact named ``<Protocol><Suffix>``

        Raises:
            GenerationError: If kind is not a test double kind

        """
        if not kind.is_test_double:
            raise GenerationError(
                f"Cannot render {kind.value} artifact for protocol '{interface.name}'"
            )

        identity = f"{interface.name}{kind.suffix}"
        members = [
            _MethodMembers(method=method, base=base)
            for method, base in zip(
                interface.methods, member_bases(interface.methods), strict=True
            )
        ]

        writer = SourceWriter(self._config.indent)
        writer.lines(build_import_block(imports, self._config.testable_import))
        writer.blank()
        writer.line(f"final class {identity}: {interface.name} {{")
        self._render_call_structs(writer, members)
        self._render_properties(writer, members)
        self._render_initialiser(writer, members)
        self._render_methods(writer, members)
        writer.close_block(0)

        logger.debug(
            "Rendered %s with %d methods", identity, len(interface.methods)
        )
        return GeneratedArtifact(
            identity=identity,
            kind=kind,
            declaration_name=interface.name,
            source_text=writer.render(),
        )

    def _render_call_structs(
        self, writer: SourceWriter, members: list[_MethodMembers]
    ) -> None:
        for member in members:
            if not member.method.has_parameters:
                continue
            recorded = member.recorded_parameters
            if not recorded:
                writer.line(f"struct {member.call_struct} {{}}", 1)
                writer.blank()
                continue
            writer.line(f"struct {member.call_struct} {{", 1)
            for parameter in recorded:
                stored_type = member.stored_type(parameter.type)
                writer.line(f"let {parameter.name}: {stored_type}", 2)
            writer.line("}", 1)
            writer.blank()

    def _render_properties(
        self, writer: SourceWriter, members: list[_MethodMembers]
    ) -> None:
        for member in members:
            if member.method.has_parameters:
                writer.line(
                    f"private(set) var {member.calls} = [{member.call_struct}]()", 1
                )
            else:
                writer.line(f"private(set) var {member.call_count} = 0", 1)

        for member in members:
            if member.method.is_throws:
                writer.line(
                    f"private let {member.error_to_throw}: "
                    f"{member.error_producer_type}",
                    1,
                )

        for member in members:
            if member.method.has_return_value:
                return_type = member.stored_type(member.method.return_type or "")
                writer.line(f"private let {member.return_value}: {return_type}", 1)
        writer.blank()

    def _render_initialiser(
        self, writer: SourceWriter, members: list[_MethodMembers]
    ) -> None:
        returning = [member for member in members if member.method.has_return_value]
        throwing = [member for member in members if member.method.is_throws]

        parameters = [
            f"{member.return_value}: {self._return_parameter_type(member)}"
            for member in returning
        ] + [
            f"{member.error_to_throw}: {member.error_producer_type} = nil"
            for member in throwing
        ]
        if not parameters:
            writer.line("init() {}", 1)
            writer.blank()
            return

        writer.argument_list(parameters, 1, "init(", ") {")
        for name in [member.return_value for member in returning] + [
            member.error_to_throw for member in throwing
        ]:
            writer.line(f"self.{name} = {name}", 2)
        writer.line("}", 1)
        writer.blank()

    def _render_methods(
        self, writer: SourceWriter, members: list[_MethodMembers]
    ) -> None:
        for position, member in enumerate(members):
            if position:
                writer.blank()
            method = member.method
            writer.line(f"func {self._signature(method)} {{", 1)

            if method.has_parameters:
                arguments = ", ".join(
                    f"{parameter.name}: {parameter.name}"
                    for parameter in member.recorded_parameters
                )
                record = f"{member.call_struct}({arguments})"
                writer.line(f"{member.calls}.append({record})", 2)
            else:
                writer.line(f"{member.call_count} += 1", 2)

            if method.is_throws:
                writer.blank()
                writer.line(f"if let {member.error_to_throw} {{", 2)
                writer.line(f"throw {member.error_to_throw}()", 3)
                writer.line("}", 2)

            if member.returns_generic:
                writer.blank()
                writer.line(
                    f"return {member.return_value} as! {method.return_type}", 2
                )
            elif method.has_return_value:
                writer.blank()
                writer.line(f"return {member.return_value}", 2)

            writer.line("}", 1)

    def _signature(self, method: MethodSignature) -> str:
        parameters = ", ".join(
            f"{parameter.label} {parameter.name}: {parameter.type}"
            if parameter.label
            else f"{parameter.name}: {parameter.type}"
            for parameter in method.parameters
        )
        signature = f"{method.name}{method.generic_clause or ''}({parameters})"
        if method.is_async:
            signature += " async"
        if method.is_throws:
            signature += " throws"
            if method.thrown_type:
                signature += f"({method.thrown_type})"
        if method.has_return_value:
            signature += f" -> {method.return_type}"
        if method.where_clause:
            signature += f" {method.where_clause}"
        return signature

    def _return_parameter_type(self, member: _MethodMembers) -> str:
        if member.returns_generic:
            return _TYPE_ERASED
        return parameter_form(member.method.return_type or "")
