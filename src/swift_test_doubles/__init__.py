"""Test double generator for Swift.

Scans Swift source files for ``// TestDoubles:`` marker comments and
generates call-recording spies and mocks for annotated protocols and
default-valued ``makeMock`` factories for annotated structs.

Use in pipeline: AnnotationScanner → CodeGenerator → GenerationPipeline writes
"""

from swift_test_doubles.config import GeneratorConfig
from swift_test_doubles.errors import (
    ArtifactWriteError,
    GenerationError,
    GeneratorConfigError,
    MarkerMismatchError,
    ParserError,
    SourceReadError,
    SwiftTestDoublesError,
)
from swift_test_doubles.extractor import DeclarationExtractor
from swift_test_doubles.generator import CodeGenerator
from swift_test_doubles.layout import infer_output_directory
from swift_test_doubles.models import (
    ArtifactKind,
    Field,
    GeneratedArtifact,
    GenerationResult,
    GenerationStatus,
    InterfaceDeclaration,
    MethodSignature,
    Parameter,
    RecordDeclaration,
    ScannedDeclaration,
)
from swift_test_doubles.pipeline import GenerationPipeline
from swift_test_doubles.scanner import AnnotationScanner, contains_markers

__all__ = [
    # Pipeline
    "AnnotationScanner",
    "CodeGenerator",
    "DeclarationExtractor",
    "GenerationPipeline",
    "GeneratorConfig",
    "contains_markers",
    "infer_output_directory",
    # Models
    "ArtifactKind",
    "Field",
    "GeneratedArtifact",
    "GenerationResult",
    "GenerationStatus",
    "InterfaceDeclaration",
    "MethodSignature",
    "Parameter",
    "RecordDeclaration",
    "ScannedDeclaration",
    # Errors
    "ArtifactWriteError",
    "GenerationError",
    "GeneratorConfigError",
    "MarkerMismatchError",
    "ParserError",
    "SourceReadError",
    "SwiftTestDoublesError",
]
