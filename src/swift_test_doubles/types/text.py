"""Bracket-aware helpers for working with type expression text."""

import re
from collections.abc import Iterable, Iterator

_OPENERS = {"(": ")", "[": "]", "<": ">"}
_CLOSERS = frozenset(_OPENERS.values())

# Leading attribute with an optional argument list, e.g. "@Sendable", "@MainActor"
_LEADING_ATTRIBUTE = re.compile(r"@[A-Za-z_][A-Za-z0-9_]*(?:\([^()]*\))?\s*")

# Words that qualify a type without changing which default it takes
_TYPE_QUALIFIERS = ("any", "some", "inout", "borrowing", "consuming", "sending")


def _top_level_positions(text: str) -> Iterator[tuple[int, int]]:
    """Yield ``(index, depth)`` for every character, treating ``->`` as one token."""
    depth = 0
    index = 0
    while index < len(text):
        char = text[index]
        if text.startswith("->", index):
            yield index, depth
            index += 2
            continue
        if char in _OPENERS:
            yield index, depth
            depth += 1
        elif char in _CLOSERS:
            depth = max(depth - 1, 0)
            yield index, depth
        else:
            yield index, depth
        index += 1


def find_top_level(text: str, target: str) -> int:
    """Find the first occurrence of ``target`` outside any bracket pair.

    Args:
        text: Type expression text
        target: Substring to look for (``"->"``, ``":"``, ``","``...)

    Returns:
        Index of the occurrence, or -1 if there is none

    """
    for index, depth in _top_level_positions(text):
        if depth == 0 and text.startswith(target, index):
            return index
    return -1


def split_top_level(text: str, separator: str = ",") -> list[str]:
    """Split text on a separator that is not nested inside brackets.

    Empty segments are dropped, so ``"()"`` contents split to ``[]``.

    Args:
        text: Text to split
        separator: Single-character separator

    Returns:
        Stripped segments in order

    """
    segments: list[str] = []
    start = 0
    for index, depth in _top_level_positions(text):
        if depth == 0 and text[index] == separator:
            segments.append(text[start:index])
            start = index + 1
    segments.append(text[start:])
    return [segment.strip() for segment in segments if segment.strip()]


def matching_close(text: str, open_index: int) -> int:
    """Return the index of the bracket closing the one at ``open_index``, or -1."""
    depth = 0
    for index, _ in _top_level_positions(text):
        if index < open_index:
            continue
        char = text[index]
        if char in _OPENERS:
            depth += 1
        elif char in _CLOSERS:
            depth -= 1
            if depth == 0:
                return index
    return -1


def is_wrapped(text: str, opener: str) -> bool:
    """Check whether the whole text is one bracket group starting with ``opener``."""
    return text.startswith(opener) and matching_close(text, 0) == len(text) - 1


def strip_leading_attributes(text: str) -> tuple[tuple[str, ...], str]:
    """Separate leading ``@attribute`` tokens from a type expression.

    Returns:
        Attributes in source order and the remaining type text

    """
    attributes: list[str] = []
    rest = text.strip()
    while match := _LEADING_ATTRIBUTE.match(rest):
        attributes.append(match.group(0).strip())
        rest = rest[match.end() :]
    return tuple(attributes), rest.strip()


def strip_qualifiers(text: str) -> str:
    """Remove leading ``any``/``some``/ownership qualifiers."""
    rest = text.strip()
    while True:
        for qualifier in _TYPE_QUALIFIERS:
            if rest.startswith(qualifier + " "):
                rest = rest[len(qualifier) :].lstrip()
                break
        else:
            return rest


def normalise_type(text: str) -> str:
    """Reduce a type expression to the part that decides its default value.

    Leading attributes, qualifiers and redundant parentheses around a single
    type are removed: ``@escaping (() -> Void)`` becomes ``() -> Void`` and
    ``any Service`` becomes ``Service``.
    """
    current = " ".join(text.split())
    while True:
        _, stripped = strip_leading_attributes(current)
        stripped = strip_qualifiers(stripped)
        if is_wrapped(stripped, "("):
            inner = stripped[1:-1].strip()
            elements = split_top_level(inner)
            if len(elements) == 1 and find_top_level(inner, ":") < 0:
                stripped = inner
        if stripped == current:
            return current
        current = stripped


def generic_parameter_names(clause: str | None) -> tuple[str, ...]:
    """List the type parameter names declared by a generic clause.

    ``<T: Decodable, each U>`` declares ``T`` and ``U``.
    """
    if not clause or not is_wrapped(clause.strip(), "<"):
        return ()
    names: list[str] = []
    for parameter in split_top_level(clause.strip()[1:-1]):
        head = parameter.split(":", 1)[0].split()
        if head:
            names.append(head[-1])
    return tuple(names)


def mentions_identifier(text: str, names: Iterable[str]) -> bool:
    """Check whether a type expression refers to any of the given type names."""
    return any(re.search(rf"(?<![\w.]){re.escape(name)}\b", text) for name in names)
