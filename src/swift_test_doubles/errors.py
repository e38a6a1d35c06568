"""Error classes for the test doubles generator.

This module provides:
- SwiftTestDoublesError: Base exception class for all generator errors
- SourceReadError: Input file cannot be read
- ParserError: Source text cannot be parsed
- MarkerMismatchError: Marker comment precedes a declaration of the wrong kind
- GenerationError: Rendering an artifact failed
- ArtifactWriteError: A generated artifact could not be written
- GeneratorConfigError: Configuration is invalid
"""


class SwiftTestDoublesError(Exception):
    """Base exception for all test doubles generator errors."""

    pass


class SourceReadError(SwiftTestDoublesError):
    """Raised when an input source file is missing or unreadable."""

    pass


class ParserError(SwiftTestDoublesError):
    """Raised when source text cannot be parsed."""

    def __init__(self, message: str, line: int | None = None) -> None:
        """Initialise parser error with an optional source line.

        Args:
            message: Description of the syntax problem
            line: 1-based line where the problem was detected

        """
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)
        self.line = line


class MarkerMismatchError(SwiftTestDoublesError):
    """Raised when a marker comment precedes a declaration of the wrong kind.

    Only raised when strict marker checking is enabled; by default such
    markers are ignored.
    """

    pass


class GenerationError(SwiftTestDoublesError):
    """Raised when an artifact cannot be rendered."""

    pass


class ArtifactWriteError(SwiftTestDoublesError):
    """Raised when a generated artifact cannot be written."""

    pass


class GeneratorConfigError(SwiftTestDoublesError):
    """Raised when generator configuration is invalid."""

    pass
