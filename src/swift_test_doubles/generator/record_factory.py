"""Rendering of default-valued factory extensions for structs."""

import logging
from collections.abc import Sequence

from swift_test_doubles.config import GeneratorConfig
from swift_test_doubles.generator.base import SourceWriter, build_import_block
from swift_test_doubles.models import (
    ArtifactKind,
    GeneratedArtifact,
    RecordDeclaration,
)
from swift_test_doubles.types import parameter_form, synthesize_default

logger = logging.getLogger(__name__)

FACTORY_NAME = "makeMock"


class RecordFactoryRenderer:
    """Renders a ``makeMock`` factory extension for a struct.

    Every stored property becomes a factory parameter with a synthesised
    default, and the body forwards all parameters to the memberwise
    initialiser in declaration order.
    """

    def __init__(self, config: GeneratorConfig | None = None) -> None:
        self._config = config or GeneratorConfig()

    def render(
        self, record: RecordDeclaration, imports: Sequence[str] = ()
    ) -> GeneratedArtifact:
        """Render the factory extension for a struct.

        Args:
            record: Struct to build
            imports: Modules imported by the source file

        Returns:
            Generated artifact named ``<Struct>+Mock``. Field types whose
            default fell back to a quoted type name are listed in
            ``fallback_types``.

        """
        kind = ArtifactKind.RECORD_FACTORY
        parameters: list[str] = []
        fallback_types: list[str] = []
        for field in record.fields:
            default = synthesize_default(
                field.type, prefer_value=self._config.populate_optional_closures
            )
            if default.is_fallback and field.type not in fallback_types:
                fallback_types.append(field.type)
            parameters.append(
                f"{field.name}: {parameter_form(field.type)} = {default.literal}"
            )
        arguments = [f"{field.name}: {field.name}" for field in record.fields]

        writer = SourceWriter(self._config.indent)
        writer.lines(build_import_block(imports, self._config.testable_import))
        writer.blank()
        writer.line(f"extension {record.qualified_name} {{")
        writer.argument_list(
            parameters, 1, f"static func {FACTORY_NAME}(", ") -> Self {"
        )
        writer.argument_list(arguments, 2, f"{record.qualified_name}(", ")")
        writer.line("}", 1)
        writer.close_block(0)

        if fallback_types:
            logger.debug(
                "Factory for %s uses fallback defaults for: %s",
                record.qualified_name,
                ", ".join(fallback_types),
            )
        return GeneratedArtifact(
            identity=f"{record.name}{kind.suffix}",
            kind=kind,
            declaration_name=record.name,
            source_text=writer.render(),
            fallback_types=fallback_types,
        )
