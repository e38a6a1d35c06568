"""Output formatting for CLI commands."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from swift_test_doubles.models import (
    GenerationResult,
    GenerationStatus,
    InterfaceDeclaration,
    MethodSignature,
    RecordDeclaration,
    ScannedDeclaration,
)
from swift_test_doubles.types import synthesize_default

logger = logging.getLogger(__name__)
console = Console()


class OutputFormatter:
    """Handles formatting CLI output for different commands."""

    # Status text constants
    STATUS_GENERATED = "[green]Generated[/green]"
    STATUS_FAILED = "[red]Failed[/red]"
    STATUS_SKIPPED = "[yellow]Skipped[/yellow]"

    def _status_text(self, result: GenerationResult) -> str:
        if result.status == GenerationStatus.FAILED or result.write_failures:
            return self.STATUS_FAILED
        if result.status == GenerationStatus.SKIPPED:
            return self.STATUS_SKIPPED
        return self.STATUS_GENERATED

    def _details_text(self, result: GenerationResult) -> str:
        if result.status == GenerationStatus.FAILED:
            return escape(result.error or "Unknown error")
        if result.status == GenerationStatus.SKIPPED or not result.artifacts:
            return escape(result.skip_reason or "")
        return escape(", ".join(artifact.file_name for artifact in result.artifacts))

    def _print_failure_details(self, results: Sequence[GenerationResult]) -> None:
        """Print error panels for inputs that failed or had unwritten artifacts."""
        for result in results:
            messages: list[str] = []
            if result.status == GenerationStatus.FAILED:
                messages.append(result.error or "Unknown error")
            messages.extend(failure.error for failure in result.write_failures)
            if not messages:
                continue
            console.print(
                Panel(
                    "\n".join(f"[red]{escape(message)}[/red]" for message in messages),
                    title=f"Error in {escape(str(result.input_path))}",
                    border_style="red",
                )
            )

    def _print_written_paths(self, results: Sequence[GenerationResult]) -> None:
        for result in results:
            if not result.written_paths:
                continue
            tree = Tree(f"[bold green]{escape(str(result.input_path))}[/bold green]")
            for path in result.written_paths:
                tree.add(f"[white]{escape(str(path))}[/white]")
            console.print(tree)

    def format_generation_results(
        self, results: Sequence[GenerationResult], verbose: bool = False
    ) -> None:
        """Format and print the outcome of a generate run.

        Args:
            results: One result per input file, in input order
            verbose: Also list every written file

        """
        table = Table(
            title="Test Doubles Generation Summary",
            show_header=True,
            header_style="bold magenta",
        )
        table.add_column("Input", style="cyan", no_wrap=True)
        table.add_column("Status")
        table.add_column("Artifacts", style="blue", justify="right")
        table.add_column("Details")

        for result in results:
            table.add_row(
                escape(str(result.input_path)),
                self._status_text(result),
                str(len(result.artifacts)),
                self._details_text(result),
            )
        console.print(table)

        fallback_types = sorted(
            {type_text for result in results for type_text in result.fallback_types}
        )
        if fallback_types:
            console.print(
                "[yellow]⚠️  No typed default for: "
                f"{escape(', '.join(fallback_types))}; "
                "quoted type names were used instead[/yellow]"
            )

        if verbose:
            self._print_written_paths(results)
        self._print_failure_details(results)

    def format_inspection(
        self,
        input_path: Path,
        scanned: Sequence[ScannedDeclaration],
        populate_optional_closures: bool = False,
    ) -> None:
        """Print the annotated declarations of a file and the defaults they get.

        Args:
            input_path: Inspected file
            scanned: Declarations found by the scanner
            populate_optional_closures: Default optional closures to a no-op closure

        """
        root = Tree(f"[bold]{escape(str(input_path))}[/bold]")
        if not scanned:
            root.add("[yellow]No annotated declarations[/yellow]")

        for item in scanned:
            declaration = item.declaration
            branch = root.add(
                f"[cyan]{escape(item.identity)}[/cyan] "
                f"({item.kind.value}, line {declaration.line})"
            )
            if isinstance(declaration, InterfaceDeclaration):
                self._add_methods(branch, declaration)
            elif isinstance(declaration, RecordDeclaration):
                self._add_fields(branch, declaration, populate_optional_closures)

        console.print(root)

    def _add_methods(self, branch: Tree, interface: InterfaceDeclaration) -> None:
        if not interface.methods:
            branch.add("[dim]no methods[/dim]")
        for method in interface.methods:
            branch.add(escape(self._describe_method(method)))

    def _describe_method(self, method: MethodSignature) -> str:
        parameters = ", ".join(
            f"{parameter.name}: {parameter.type}" for parameter in method.parameters
        )
        description = f"{method.name}({parameters})"
        if method.is_async:
            description += " async"
        if method.is_throws:
            description += " throws"
        if method.has_return_value:
            description += f" -> {method.return_type}"
        return description

    def _add_fields(
        self,
        branch: Tree,
        record: RecordDeclaration,
        populate_optional_closures: bool,
    ) -> None:
        if not record.fields:
            branch.add("[dim]no stored properties[/dim]")
        for field in record.fields:
            default = synthesize_default(
                field.type, prefer_value=populate_optional_closures
            )
            literal = escape(default.literal)
            if default.is_fallback:
                literal = f"[yellow]{literal} (fallback)[/yellow]"
            else:
                literal = f"[green]{literal}[/green]"
            branch.add(
                f"{escape(field.name)}: {escape(field.type)} = {literal} "
                f"[dim]{default.shape.value}[/dim]"
            )
