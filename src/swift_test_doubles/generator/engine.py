"""Code generation engine dispatching scanned declarations to renderers."""

import logging
from collections.abc import Sequence

from swift_test_doubles.config import GeneratorConfig
from swift_test_doubles.errors import GenerationError
from swift_test_doubles.generator.record_factory import RecordFactoryRenderer
from swift_test_doubles.generator.protocol_double import ProtocolDoubleRenderer
from swift_test_doubles.models import (
    GeneratedArtifact,
    InterfaceDeclaration,
    RecordDeclaration,
    ScannedDeclaration,
)

logger = logging.getLogger(__name__)


class CodeGenerator:
    """Generates one artifact per scanned declaration.

    Generation is deterministic: the same declarations and imports always
    produce byte-identical artifacts in the same order.
    """

    def __init__(self, config: GeneratorConfig | None = None) -> None:
        """Initialise the generator.

        Args:
            config: Generator configuration; defaults are used if omitted

        """
        self._config = config or GeneratorConfig()
        self._double_renderer = ProtocolDoubleRenderer(self._config)
        self._factory_renderer = RecordFactoryRenderer(self._config)

    def generate(
        self, scanned: Sequence[ScannedDeclaration], imports: Sequence[str] = ()
    ) -> list[GeneratedArtifact]:
        """Render artifacts for scanned declarations.

        Args:
            scanned: Declarations in source order
            imports: Modules imported by the source file

        Returns:
            Artifacts in the order of ``scanned``

        Raises:
            GenerationError: If a declaration does not match its artifact kind
                or two artifacts would share an identity

        """
        artifacts: list[GeneratedArtifact] = []
        identities: set[str] = set()
        for item in scanned:
            artifact = self._render(item, imports)
            if artifact.identity in identities:
                raise GenerationError(
                    f"Duplicate artifact '{artifact.identity}': more than one "
                    f"declaration named '{artifact.declaration_name}' is marked"
                )
            identities.add(artifact.identity)
            artifacts.append(artifact)

        logger.info("Generated %d artifacts", len(artifacts))
        return artifacts

    def _render(
        self, item: ScannedDeclaration, imports: Sequence[str]
    ) -> GeneratedArtifact:
        declaration = item.declaration
        if item.kind.is_test_double and isinstance(declaration, InterfaceDeclaration):
            return self._double_renderer.render_double(declaration, item.kind, imports)
        if not item.kind.is_test_double and isinstance(declaration, RecordDeclaration):
            return self._factory_renderer.render(declaration, imports)
        raise GenerationError(
            f"Cannot render {item.kind.value} artifact for '{declaration.name}'"
        )
