"""Tests for the generator's CLI commands.

These tests exercise the public command functions and the Typer
application with real temporary files.
"""

from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest
import typer
from rich.console import Console
from typer.testing import CliRunner

from swift_test_doubles.__main__ import app
from swift_test_doubles.cli import CLIError, generate_command, inspect_command
from swift_test_doubles.cli.errors import cli_error_handler
from swift_test_doubles.cli.generate import load_generator_config

SWIFT_SERVICE_FILE = """\
import Foundation

// TestDoubles:spy
protocol ArticleService {
    func articles() async throws -> [Article]
}

// TestDoubles:struct
struct Article {
    let id: UUID
    let author: User
    let onOpen: (() -> Void)?
}
"""


@pytest.fixture(autouse=True)
def wide_console() -> Iterator[None]:
    """Render Rich output without wrapping, whatever the terminal width."""
    with (
        patch("swift_test_doubles.cli.generate.console", Console(width=200)),
        patch("swift_test_doubles.cli.formatting.console", Console(width=200)),
        patch("swift_test_doubles.cli.errors.console", Console(width=200)),
    ):
        yield


@pytest.fixture
def source_file(tmp_path: Path) -> Path:
    path = tmp_path / "App" / "Sources" / "ArticleService.swift"
    path.parent.mkdir(parents=True)
    path.write_text(SWIFT_SERVICE_FILE, encoding="utf-8")
    return path


@pytest.fixture
def broken_file(tmp_path: Path) -> Path:
    path = tmp_path / "Broken.swift"
    path.write_text("// TestDoubles:spy\nprotocol Broken {\n", encoding="utf-8")
    return path


class TestGenerateCommand:
    """Test generate_command functionality."""

    def test_generates_into_output_directory(
        self, source_file: Path, tmp_path: Path
    ) -> None:
        """Test that artifacts are written to the given directory."""
        output = tmp_path / "Generated"

        generate_command([source_file], output_dir=output)

        assert sorted(path.name for path in output.iterdir()) == [
            "Article+Mock.swift",
            "ArticleServiceSpy.swift",
        ]

    def test_infers_output_directory_from_project_layout(
        self, source_file: Path, tmp_path: Path
    ) -> None:
        """Test that the test target directory is used without --output-dir."""
        generate_command([source_file])

        assert (tmp_path / "AppTests" / "Sources" / "ArticleServiceSpy.swift").exists()

    def test_testable_import_option(self, source_file: Path, tmp_path: Path) -> None:
        """Test that --testable-import reaches every artifact."""
        output = tmp_path / "Generated"

        generate_command([source_file], output_dir=output, testable_import="App")

        for path in output.iterdir():
            assert "@testable import App\n" in path.read_text(encoding="utf-8")

    def test_failed_input_exits_with_error_after_processing_all(
        self, source_file: Path, broken_file: Path, tmp_path: Path
    ) -> None:
        """Test that one failing input does not stop the others."""
        output = tmp_path / "Generated"

        with pytest.raises(typer.Exit) as exc_info:
            generate_command([broken_file, source_file], output_dir=output)

        assert exc_info.value.exit_code == 1
        assert (output / "ArticleServiceSpy.swift").exists()

    def test_missing_input_exits_with_error(
        self, source_file: Path, tmp_path: Path
    ) -> None:
        """Test that unreadable inputs are reported as failures."""
        output = tmp_path / "Generated"

        with pytest.raises(typer.Exit):
            generate_command(
                [tmp_path / "Missing.swift", source_file], output_dir=output
            )

        assert (output / "Article+Mock.swift").exists()

    def test_write_failure_exits_with_error(
        self, source_file: Path, tmp_path: Path
    ) -> None:
        """Test that unwritable artifacts make the command fail."""
        blocker = tmp_path / "Generated"
        blocker.write_text("", encoding="utf-8")

        with pytest.raises(typer.Exit):
            generate_command([source_file], output_dir=blocker)

    def test_strict_markers_option(self, tmp_path: Path) -> None:
        """Test that --strict-markers rejects misplaced markers."""
        path = tmp_path / "Settings.swift"
        path.write_text("// TestDoubles:spy\nstruct Settings {}\n", encoding="utf-8")

        generate_command([path], output_dir=tmp_path / "Generated")
        with pytest.raises(typer.Exit):
            generate_command(
                [path], output_dir=tmp_path / "Generated", strict_markers=True
            )

    def test_invalid_testable_import(self, source_file: Path) -> None:
        """Test that an invalid module name is reported as a CLI error."""
        with pytest.raises(typer.Exit):
            generate_command([source_file], testable_import="My-App")

    def test_skipped_file_succeeds(self, tmp_path: Path) -> None:
        """Test that files without markers do not fail the command."""
        path = tmp_path / "Plain.swift"
        path.write_text("struct Plain {}\n", encoding="utf-8")

        generate_command([path], output_dir=tmp_path / "Generated")

        assert not (tmp_path / "Generated").exists()

    def test_prints_summary(
        self, source_file: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test that the summary table and fallback warning are printed."""
        generate_command([source_file], output_dir=tmp_path / "Generated")

        output = capsys.readouterr().out
        assert "Test Doubles Generation Summary" in output
        assert "No typed default for: User" in output

    def test_verbose_mode_changes_log_level(
        self, source_file: Path, tmp_path: Path
    ) -> None:
        """Test that verbose mode configures debug logging."""
        with patch("swift_test_doubles.cli.generate.setup_logging") as mock_setup:
            generate_command(
                [source_file], output_dir=tmp_path / "Generated", verbose=True
            )

        mock_setup.assert_called_once_with(level="DEBUG")

    def test_respects_log_level_parameter(
        self, source_file: Path, tmp_path: Path
    ) -> None:
        """Test that the log level is passed to logging setup."""
        with patch("swift_test_doubles.cli.generate.setup_logging") as mock_setup:
            generate_command(
                [source_file], output_dir=tmp_path / "Generated", log_level="WARNING"
            )

        mock_setup.assert_called_once_with(level="WARNING")


class TestLoadGeneratorConfig:
    """Test merging of configuration files and command line overrides."""

    def test_overrides_replace_file_values(self, tmp_path: Path) -> None:
        """Test that CLI values win and None values are ignored."""
        path = tmp_path / "config.yaml"
        path.write_text(
            "testable_import: Core\npopulate_optional_closures: true\n",
            encoding="utf-8",
        )

        config = load_generator_config(
            path, {"testable_import": "App", "strict_markers": None}
        )

        assert config.testable_import == "App"
        assert config.populate_optional_closures is True
        assert config.strict_markers is False

    def test_defaults_without_file(self) -> None:
        """Test that no file and no overrides give the defaults."""
        config = load_generator_config(None)

        assert config.testable_import is None

    def test_config_file_applies_to_generation(
        self, source_file: Path, tmp_path: Path
    ) -> None:
        """Test that configuration file options change the generated code."""
        path = tmp_path / "config.yaml"
        path.write_text("populate_optional_closures: true\n", encoding="utf-8")
        output = tmp_path / "Generated"

        generate_command([source_file], output_dir=output, config_path=path)

        factory = (output / "Article+Mock.swift").read_text(encoding="utf-8")
        assert "onOpen: (() -> Void)? = {}" in factory

    def test_invalid_config_file_exits(self, source_file: Path, tmp_path: Path) -> None:
        """Test that an invalid configuration file is reported as a CLI error."""
        path = tmp_path / "config.yaml"
        path.write_text("unknown_option: 1\n", encoding="utf-8")

        with pytest.raises(typer.Exit):
            generate_command([source_file], config_path=path)


class TestInspectCommand:
    """Test inspect_command functionality."""

    def test_lists_declarations_and_defaults(
        self, source_file: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test that annotated declarations and field defaults are shown."""
        inspect_command(source_file)

        output = capsys.readouterr().out
        assert "ArticleServiceSpy" in output
        assert "Article+Mock" in output
        assert "articles() async throws -> [Article]" in output
        assert 'author: User = "user" (fallback)' in output
        assert "onOpen: (() -> Void)? = nil" in output

    def test_does_not_write_files(self, source_file: Path) -> None:
        """Test that inspection leaves the file system untouched."""
        before = sorted(source_file.parent.iterdir())

        inspect_command(source_file)

        assert sorted(source_file.parent.iterdir()) == before

    def test_file_without_markers(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test that unmarked files are reported as skipped."""
        path = tmp_path / "Plain.swift"
        path.write_text("struct Plain {}\n", encoding="utf-8")

        inspect_command(path)

        assert "no TestDoubles markers found" in capsys.readouterr().out

    def test_missing_file_exits(self, tmp_path: Path) -> None:
        """Test that an unreadable file exits with an error."""
        with pytest.raises(typer.Exit):
            inspect_command(tmp_path / "Missing.swift")

    def test_parse_error_exits(self, broken_file: Path) -> None:
        """Test that unparsable files exit with an error."""
        with pytest.raises(typer.Exit):
            inspect_command(broken_file)


class TestApplication:
    """Test the Typer application wiring."""

    def test_generate(self, source_file: Path, tmp_path: Path) -> None:
        """Test the generate command through the command line."""
        output = tmp_path / "Generated"

        result = CliRunner().invoke(
            app, ["generate", str(source_file), "-o", str(output)]
        )

        assert result.exit_code == 0
        assert (output / "ArticleServiceSpy.swift").exists()

    def test_generate_failure_exit_code(self, broken_file: Path) -> None:
        """Test that failures surface as exit code 1."""
        result = CliRunner().invoke(app, ["generate", str(broken_file)])

        assert result.exit_code == 1

    def test_generate_requires_inputs(self) -> None:
        """Test that at least one input file is required."""
        result = CliRunner().invoke(app, ["generate"])

        assert result.exit_code != 0

    def test_inspect(self, source_file: Path) -> None:
        """Test the inspect command through the command line."""
        result = CliRunner().invoke(app, ["inspect", str(source_file)])

        assert result.exit_code == 0
        assert "ArticleServiceSpy" in result.stdout


class TestCLIError:
    """Test CLIError and the error handler."""

    def test_cli_error_with_command_context(self) -> None:
        """Test that the command name prefixes the message."""
        error = CLIError("Something failed", command="generate")

        assert str(error) == "CLI command 'generate' failed: Something failed"
        assert error.command == "generate"

    def test_cli_error_without_command_context(self) -> None:
        """Test the plain message without a command."""
        original = ValueError("bad value")
        error = CLIError("Something failed", original_error=original)

        assert str(error) == "Something failed"
        assert error.original_error is original

    def test_error_handler_converts_exceptions_to_exit(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test that unexpected errors become an error panel and exit code 1."""
        with pytest.raises(typer.Exit) as exc_info:
            with cli_error_handler("generate", "Generation failed"):
                raise RuntimeError("disk on fire")

        assert exc_info.value.exit_code == 1
        assert isinstance(exc_info.value.__cause__, CLIError)
        assert "disk on fire" in capsys.readouterr().out

    def test_error_handler_passes_exit_through(self) -> None:
        """Test that typer.Exit is not wrapped."""
        with pytest.raises(typer.Exit) as exc_info:
            with cli_error_handler("generate", "Generation failed"):
                raise typer.Exit(3)

        assert exc_info.value.exit_code == 3
