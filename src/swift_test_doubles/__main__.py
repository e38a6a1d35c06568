"""Main entry point for the Swift test doubles generator.

This module provides the command-line interface, including commands for:
- Generating spies, mocks and factory extensions from annotated Swift files
- Inspecting the annotated declarations of a file without writing anything
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv

from swift_test_doubles.cli import generate_command, inspect_command

# Load environment variables (e.g. SWIFT_TEST_DOUBLES_ENV) from the working directory
load_dotenv(Path.cwd() / ".env")

app = typer.Typer(name="swift-test-doubles")


@app.command()
def generate(  # noqa: PLR0913 - CLI entry point with many options
    inputs: Annotated[
        list[Path],
        typer.Argument(
            help="Swift source files containing '// TestDoubles:' markers",
            file_okay=True,
            dir_okay=False,
        ),
    ],
    output_dir: Annotated[
        Path | None,
        typer.Option(
            "--output-dir",
            "-o",
            help="Directory for generated files (inferred from the project layout if omitted)",
            file_okay=False,
            dir_okay=True,
            rich_help_panel="Output",
        ),
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            help="YAML file with generator configuration",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
        ),
    ] = None,
    testable_import: Annotated[
        str | None,
        typer.Option(
            "--testable-import",
            help="Module to add as '@testable import <module>' to every generated file",
            rich_help_panel="Output",
        ),
    ] = None,
    strict_markers: Annotated[
        bool,
        typer.Option(
            "--strict-markers",
            help="Fail when a marker precedes a declaration of the wrong kind",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable CLI verbose output (sets log level to DEBUG)",
        ),
    ] = False,
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            help="Set logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
            case_sensitive=False,
        ),
    ] = "INFO",
) -> None:
    """Generate test doubles for annotated protocols and structs.

    Example:
        swift-test-doubles generate Sources/App/Services/UserService.swift -o Tests/AppTests
        swift-test-doubles generate Sources/App/Models/*.swift --testable-import App

    """
    generate_command(
        inputs,
        output_dir,
        config,
        testable_import,
        strict_markers,
        verbose,
        log_level,
    )


@app.command()
def inspect(
    input_file: Annotated[
        Path,
        typer.Argument(
            help="Swift source file to inspect",
            file_okay=True,
            dir_okay=False,
        ),
    ],
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            help="YAML file with generator configuration",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
        ),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            help="Set logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
            case_sensitive=False,
        ),
    ] = "INFO",
) -> None:
    """Show annotated declarations and the defaults chosen for struct fields."""
    inspect_command(input_file, config, log_level)


if __name__ == "__main__":
    app()
