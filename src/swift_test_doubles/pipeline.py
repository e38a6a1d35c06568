"""Generation pipeline for a single Swift source file.

Reads the file, scans it for marker comments, renders every requested
artifact and writes each one to ``<output directory>/<identity>.swift``.
"""

import logging
from collections.abc import Callable
from pathlib import Path

from swift_test_doubles.config import GeneratorConfig
from swift_test_doubles.errors import (
    ArtifactWriteError,
    GenerationError,
    MarkerMismatchError,
    ParserError,
    SourceReadError,
)
from swift_test_doubles.generator import CodeGenerator
from swift_test_doubles.models import (
    ArtifactWriteFailure,
    GeneratedArtifact,
    GenerationResult,
    GenerationStatus,
)
from swift_test_doubles.scanner import AnnotationScanner, contains_markers
from swift_test_doubles.parser import SwiftSourceParser

logger = logging.getLogger(__name__)

OutputDirectoryResolver = Callable[[Path], Path]

NO_MARKERS_REASON = "no TestDoubles markers found"
NO_DECLARATIONS_REASON = "markers found but no matching declarations"


class GenerationPipeline:
    """Runs scanning, generation and writing for one input file at a time.

    The pipeline keeps no state between files, so one instance can process
    any number of inputs.
    """

    def __init__(
        self,
        config: GeneratorConfig | None = None,
        output_directory_resolver: OutputDirectoryResolver | None = None,
    ) -> None:
        """Initialise the pipeline.

        Args:
            config: Generator configuration; defaults are used if omitted
            output_directory_resolver: Maps an input path to the directory its
                artifacts are written to when no directory is passed to
                ``run``. Defaults to the input file's directory.

        """
        self._config = config or GeneratorConfig()
        self._resolver = output_directory_resolver
        self._parser = SwiftSourceParser()
        self._scanner = AnnotationScanner(
            parser=self._parser, strict_markers=self._config.strict_markers
        )
        self._generator = CodeGenerator(self._config)

    def generate_from_text(
        self, input_path: Path, source_code: str
    ) -> GenerationResult:
        """Generate artifacts from source text without touching the file system.

        Args:
            input_path: Path the text was read from, used for reporting
            source_code: Swift source text

        Returns:
            Result with status ``generated`` (possibly with no artifacts when
            markers do not match any declaration), ``skipped`` when the text
            contains no marker, or ``failed`` when it cannot be parsed

        """
        if not contains_markers(source_code):
            logger.debug("Skipping %s: %s", input_path, NO_MARKERS_REASON)
            return GenerationResult(
                input_path=input_path,
                status=GenerationStatus.SKIPPED,
                skip_reason=NO_MARKERS_REASON,
            )

        try:
            tree = self._parser.parse(source_code)
            scanned = self._scanner.scan_tree(tree)
            artifacts = self._generator.generate(scanned, self._scanner.imports(tree))
        except (ParserError, MarkerMismatchError, GenerationError) as e:
            logger.error("Failed to generate from %s: %s", input_path, e)
            return GenerationResult(
                input_path=input_path, status=GenerationStatus.FAILED, error=str(e)
            )

        fallback_types: list[str] = []
        for artifact in artifacts:
            for type_text in artifact.fallback_types:
                if type_text not in fallback_types:
                    fallback_types.append(type_text)
        if fallback_types:
            logger.warning(
                "%s: no typed default for %s, using quoted type names",
                input_path,
                ", ".join(fallback_types),
            )

        return GenerationResult(
            input_path=input_path,
            status=GenerationStatus.GENERATED,
            skip_reason=None if artifacts else NO_DECLARATIONS_REASON,
            artifacts=artifacts,
            fallback_types=fallback_types,
        )

    def run(
        self, input_path: Path, output_directory: Path | None = None
    ) -> GenerationResult:
        """Generate and write the artifacts for one source file.

        Artifacts are written independently: a failed write is recorded in
        the result and the remaining artifacts are still written.

        Args:
            input_path: Swift source file
            output_directory: Directory for artifacts; falls back to the
                resolver, then to the input file's directory

        Returns:
            Result describing generated, written and failed artifacts

        Raises:
            SourceReadError: If the input file is missing or unreadable

        """
        source_code = self._read_source(input_path)
        if source_code is None:
            return GenerationResult(
                input_path=input_path,
                status=GenerationStatus.SKIPPED,
                skip_reason=(
                    f"file exceeds maximum size of {self._config.max_file_size} bytes"
                ),
            )

        result = self.generate_from_text(input_path, source_code)
        if not result.artifacts:
            return result

        target = self.resolve_output_directory(input_path, output_directory)
        for artifact in result.artifacts:
            path = target / artifact.file_name
            try:
                self.write_artifact(artifact, path)
            except ArtifactWriteError as e:
                logger.error("%s", e)
                result.write_failures.append(
                    ArtifactWriteFailure(
                        identity=artifact.identity, path=path, error=str(e)
                    )
                )
            else:
                result.written_paths.append(path)

        logger.info(
            "Wrote %d of %d artifacts for %s to %s",
            len(result.written_paths),
            len(result.artifacts),
            input_path,
            target,
        )
        return result

    def resolve_output_directory(
        self, input_path: Path, output_directory: Path | None = None
    ) -> Path:
        """Return the directory artifacts for ``input_path`` are written to."""
        if output_directory is not None:
            return output_directory
        if self._resolver is not None:
            return self._resolver(input_path)
        return input_path.parent

    def write_artifact(self, artifact: GeneratedArtifact, path: Path) -> None:
        """Write one artifact, creating its directory if needed.

        Raises:
            ArtifactWriteError: If the directory or file cannot be written

        """
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(artifact.source_text, encoding="utf-8")
        except OSError as e:
            raise ArtifactWriteError(
                f"Cannot write {artifact.identity} to {path}: {e}"
            ) from e
        logger.debug("Wrote %s", path)

    def _read_source(self, input_path: Path) -> str | None:
        """Read a source file, returning None when it is too large."""
        try:
            size = input_path.stat().st_size
            if size > self._config.max_file_size:
                logger.warning(
                    "Skipping %s: %d bytes exceeds limit of %d",
                    input_path,
                    size,
                    self._config.max_file_size,
                )
                return None
            return input_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise SourceReadError(f"Cannot read source file {input_path}: {e}") from e
