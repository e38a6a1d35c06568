"""CLI command implementations for the test doubles generator."""

from swift_test_doubles.cli.errors import CLIError
from swift_test_doubles.cli.generate import generate_command, inspect_command

__all__ = [
    "CLIError",
    "generate_command",
    "inspect_command",
]
