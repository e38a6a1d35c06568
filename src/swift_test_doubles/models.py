"""Data models for extracted declarations and generated artifacts."""

from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, computed_field

# Return types that mean "returns nothing"
VOID_TYPES = frozenset({"Void", "()", "Swift.Void"})


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class Parameter(_FrozenModel):
    """A method parameter.

    ``name`` is the identifier the parameter is bound to inside the method
    body; ``label`` is the external argument label when it is spelled
    differently (``_`` for unlabelled arguments).
    """

    name: str
    type: str
    label: str | None = None


class MethodSignature(_FrozenModel):
    """A method requirement declared by a protocol."""

    name: str
    parameters: list[Parameter] = []
    return_type: str | None = None
    is_async: bool = False
    is_throws: bool = False
    thrown_type: str | None = None
    generic_clause: str | None = None
    where_clause: str | None = None

    @property
    def has_parameters(self) -> bool:
        return bool(self.parameters)

    @property
    def has_return_value(self) -> bool:
        """True when the method returns something other than Void."""
        return bool(self.return_type) and self.return_type not in VOID_TYPES


class InterfaceDeclaration(_FrozenModel):
    """A protocol declaration and its method requirements."""

    name: str
    methods: list[MethodSignature] = []
    line: int = 0


class Field(_FrozenModel):
    """A stored property of a record."""

    name: str
    type: str


class RecordDeclaration(_FrozenModel):
    """A struct declaration and its memberwise-initialisable properties."""

    name: str
    qualified_name: str
    fields: list[Field] = []
    line: int = 0


class ArtifactKind(StrEnum):
    """Kind of generated artifact, selected by the marker comment."""

    SPY = "spy"
    MOCK = "mock"
    RECORD_FACTORY = "record_factory"

    @property
    def suffix(self) -> str:
        """Suffix appended to the declaration name to form the artifact identity."""
        return _ARTIFACT_SUFFIXES[self]

    @property
    def is_test_double(self) -> bool:
        return self in (ArtifactKind.SPY, ArtifactKind.MOCK)


_ARTIFACT_SUFFIXES = {
    ArtifactKind.SPY: "Spy",
    ArtifactKind.MOCK: "Mock",
    ArtifactKind.RECORD_FACTORY: "+Mock",
}


class ScannedDeclaration(_FrozenModel):
    """A declaration found by the scanner together with the artifact it asks for."""

    kind: ArtifactKind
    declaration: InterfaceDeclaration | RecordDeclaration

    @property
    def identity(self) -> str:
        return f"{self.declaration.name}{self.kind.suffix}"


class GeneratedArtifact(_FrozenModel):
    """Generated Swift source for one declaration."""

    identity: str
    kind: ArtifactKind
    declaration_name: str
    source_text: str
    fallback_types: list[str] = []

    @computed_field  # type: ignore[prop-decorator]
    @property
    def file_name(self) -> str:
        return f"{self.identity}.swift"


class GenerationStatus(StrEnum):
    """Outcome of running the pipeline over one input file."""

    GENERATED = "generated"
    SKIPPED = "skipped"
    FAILED = "failed"


class ArtifactWriteFailure(_FrozenModel):
    """An artifact that could not be written."""

    identity: str
    path: Path
    error: str


class GenerationResult(BaseModel):
    """Result of processing a single input file."""

    input_path: Path
    status: GenerationStatus
    skip_reason: str | None = None
    error: str | None = None
    artifacts: list[GeneratedArtifact] = []
    written_paths: list[Path] = []
    write_failures: list[ArtifactWriteFailure] = []
    fallback_types: list[str] = []

    @property
    def succeeded(self) -> bool:
        """True unless the file failed or an artifact could not be written."""
        return self.status != GenerationStatus.FAILED and not self.write_failures
