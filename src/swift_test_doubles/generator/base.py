"""Shared building blocks for rendering Swift source."""

from collections.abc import Iterable

_FOUNDATION = "Foundation"


def build_import_block(
    imports: Iterable[str], testable_import: str | None = None
) -> list[str]:
    """Build the import lines every generated file starts with.

    Foundation comes first, followed by the modules the source file imports
    in their original order, then an optional ``@testable import``.

    Args:
        imports: Modules imported by the source file
        testable_import: Module to import with ``@testable``

    Returns:
        Import lines without trailing newlines

    """
    lines = [f"import {_FOUNDATION}"]
    for module in imports:
        if module in (_FOUNDATION, testable_import):
            continue
        line = f"import {module}"
        if line not in lines:
            lines.append(line)
    if testable_import:
        lines.append(f"@testable import {testable_import}")
    return lines


def upper_first(name: str) -> str:
    """Upper-case the first character only (``fetchItems`` -> ``FetchItems``)."""
    return name[:1].upper() + name[1:]


class SourceWriter:
    """Accumulates lines of Swift source at a given indentation."""

    def __init__(self, indent: str = "    ") -> None:
        self._indent = indent
        self._lines: list[str] = []

    def line(self, text: str = "", level: int = 0) -> None:
        """Append a line, indented ``level`` times (blank lines carry no indent)."""
        self._lines.append(f"{self._indent * level}{text}" if text else "")

    def lines(self, texts: Iterable[str], level: int = 0) -> None:
        for text in texts:
            self.line(text, level)

    def blank(self) -> None:
        """Append a blank line unless the previous line is blank or opens a block."""
        if self._lines and self._lines[-1] and not self._lines[-1].endswith("{"):
            self._lines.append("")

    def close_block(self, level: int = 0) -> None:
        """Drop trailing blank lines and append a closing brace."""
        while self._lines and not self._lines[-1]:
            self._lines.pop()
        self.line("}", level)

    def argument_list(
        self, items: list[str], level: int, opener: str, closer: str
    ) -> None:
        """Append ``opener``, one item per line separated by commas, then ``closer``.

        An empty item list is rendered on a single line.
        """
        if not items:
            self.line(f"{opener}{closer}", level)
            return
        self.line(opener, level)
        for position, item in enumerate(items):
            separator = "," if position < len(items) - 1 else ""
            self.line(f"{item}{separator}", level + 1)
        self.line(closer, level)

    def render(self) -> str:
        """Return the accumulated source with a single trailing newline."""
        return "\n".join(self._lines).rstrip("\n") + "\n"
