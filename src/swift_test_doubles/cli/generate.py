"""CLI command implementations for generating and inspecting test doubles."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape

from swift_test_doubles.cli.errors import CLIError, cli_error_handler
from swift_test_doubles.cli.formatting import OutputFormatter
from swift_test_doubles.config import GeneratorConfig
from swift_test_doubles.errors import SourceReadError
from swift_test_doubles.layout import infer_output_directory
from swift_test_doubles.logging import setup_logging
from swift_test_doubles.models import GenerationResult, GenerationStatus
from swift_test_doubles.pipeline import NO_MARKERS_REASON, GenerationPipeline
from swift_test_doubles.scanner import AnnotationScanner, contains_markers

logger = logging.getLogger(__name__)
console = Console()


def load_generator_config(
    config_path: Path | None, overrides: dict[str, Any] | None = None
) -> GeneratorConfig:
    """Load configuration from an optional YAML file and apply CLI overrides.

    Args:
        config_path: YAML configuration file, or None for defaults
        overrides: Values given on the command line; None values are ignored

    Returns:
        Validated configuration

    Raises:
        GeneratorConfigError: If the file or the combined values are invalid

    """
    config = (
        GeneratorConfig.from_file(config_path) if config_path else GeneratorConfig()
    )
    updates = {
        key: value for key, value in (overrides or {}).items() if value is not None
    }
    if not updates:
        return config
    return GeneratorConfig.from_properties({**config.model_dump(), **updates})


def generate_command(  # noqa: PLR0913 - CLI entry point with many options
    inputs: list[Path],
    output_dir: Path | None = None,
    config_path: Path | None = None,
    testable_import: str | None = None,
    strict_markers: bool = False,
    verbose: bool = False,
    log_level: str = "INFO",
) -> None:
    """CLI command implementation for generating test doubles.

    Every input is processed even when an earlier one fails. The command
    exits with code 1 if any input could not be read or parsed, or any
    artifact could not be written.

    Args:
        inputs: Swift source files
        output_dir: Directory for all artifacts; inferred per file if None
        config_path: YAML configuration file
        testable_import: Module to import with ``@testable``
        strict_markers: Fail on markers before the wrong kind of declaration
        verbose: Show written files and debug logging
        log_level: Logging level

    """
    setup_logging(level="DEBUG" if verbose else log_level)

    with cli_error_handler("generate", "Test double generation failed"):
        config = load_generator_config(
            config_path,
            {
                "testable_import": testable_import,
                "strict_markers": True if strict_markers else None,
            },
        )
        pipeline = GenerationPipeline(
            config, output_directory_resolver=infer_output_directory
        )

        results: list[GenerationResult] = []
        for input_path in inputs:
            try:
                results.append(pipeline.run(input_path, output_dir))
            except SourceReadError as e:
                logger.error("%s", e)
                results.append(
                    GenerationResult(
                        input_path=input_path,
                        status=GenerationStatus.FAILED,
                        error=str(e),
                    )
                )

        OutputFormatter().format_generation_results(results, verbose=verbose)

    failed = [result for result in results if not result.succeeded]
    if failed:
        logger.error("%d of %d inputs failed", len(failed), len(results))
        raise typer.Exit(1)


def inspect_command(
    input_path: Path, config_path: Path | None = None, log_level: str = "INFO"
) -> None:
    """CLI command implementation for inspecting annotated declarations.

    Prints what would be generated for a file without writing anything.

    Args:
        input_path: Swift source file
        config_path: YAML configuration file
        log_level: Logging level

    """
    setup_logging(level=log_level)

    with cli_error_handler("inspect", "Inspection failed"):
        config = load_generator_config(config_path)
        try:
            source_code = input_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise CLIError(
                f"Cannot read source file {input_path}: {e}", command="inspect"
            ) from e

        if not contains_markers(source_code):
            skipped = escape(str(input_path))
            console.print(f"[yellow]Skipped {skipped}: {NO_MARKERS_REASON}[/yellow]")
            return

        scanned = AnnotationScanner(strict_markers=config.strict_markers).scan(
            source_code
        )
        OutputFormatter().format_inspection(
            input_path, scanned, config.populate_optional_closures
        )
