"""Tests for CodeGenerator."""

import pytest

from swift_test_doubles.errors import GenerationError
from swift_test_doubles.generator import CodeGenerator
from swift_test_doubles.models import (
    ArtifactKind,
    InterfaceDeclaration,
    MethodSignature,
    RecordDeclaration,
    ScannedDeclaration,
)

CLOCK = InterfaceDeclaration(
    name="Clock", methods=[MethodSignature(name="now", return_type="Date")]
)
SETTINGS = RecordDeclaration(name="Settings", qualified_name="Settings")


class TestGenerate:
    """Test dispatching of scanned declarations."""

    def test_one_artifact_per_declaration_in_order(self) -> None:
        """Test that artifacts follow the order of the scanned declarations."""
        scanned = [
            ScannedDeclaration(kind=ArtifactKind.RECORD_FACTORY, declaration=SETTINGS),
            ScannedDeclaration(kind=ArtifactKind.SPY, declaration=CLOCK),
            ScannedDeclaration(kind=ArtifactKind.MOCK, declaration=CLOCK),
        ]

        artifacts = CodeGenerator().generate(scanned)

        assert [artifact.identity for artifact in artifacts] == [
            "Settings+Mock",
            "ClockSpy",
            "ClockMock",
        ]

    def test_imports_are_passed_to_renderers(self) -> None:
        """Test that every artifact carries the source imports."""
        scanned = [ScannedDeclaration(kind=ArtifactKind.SPY, declaration=CLOCK)]

        artifacts = CodeGenerator().generate(scanned, imports=["Combine"])

        source = artifacts[0].source_text
        assert source.startswith("import Foundation\nimport Combine\n")

    def test_no_declarations(self) -> None:
        """Test that nothing is generated for an empty scan."""
        assert CodeGenerator().generate([]) == []

    def test_duplicate_identity_fails(self) -> None:
        """Test that two declarations with one name and kind are rejected."""
        other = RecordDeclaration(name="Settings", qualified_name="Audio.Settings")
        scanned = [
            ScannedDeclaration(kind=ArtifactKind.RECORD_FACTORY, declaration=SETTINGS),
            ScannedDeclaration(kind=ArtifactKind.RECORD_FACTORY, declaration=other),
        ]

        with pytest.raises(
            GenerationError, match="Duplicate artifact 'Settings\\+Mock'"
        ):
            CodeGenerator().generate(scanned)

    @pytest.mark.parametrize(
        ("kind", "declaration"),
        [
            (ArtifactKind.SPY, SETTINGS),
            (ArtifactKind.RECORD_FACTORY, CLOCK),
        ],
        ids=["spy_for_record", "factory_for_interface"],
    )
    def test_kind_and_declaration_mismatch(
        self,
        kind: ArtifactKind,
        declaration: InterfaceDeclaration | RecordDeclaration,
    ) -> None:
        """Test that a declaration of the wrong model type is rejected."""
        scanned = [ScannedDeclaration(kind=kind, declaration=declaration)]

        with pytest.raises(GenerationError, match="Cannot render"):
            CodeGenerator().generate(scanned)
