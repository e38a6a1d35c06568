"""Function type decomposition and no-op closure synthesis.

A function type may need different spellings depending on where it is
written. As a stored property type it must not carry ``@escaping``, while as
an initialiser parameter whose value gets stored it must. ``stored_form`` and
``parameter_form`` convert between the two.
"""

import re
from dataclasses import dataclass

from swift_test_doubles.models import VOID_TYPES
from swift_test_doubles.types.text import (
    find_top_level,
    matching_close,
    normalise_type,
    split_top_level,
    strip_leading_attributes,
    strip_qualifiers,
)

# Attributes valid only on function types in parameter position
_PARAMETER_ONLY_ATTRIBUTES = re.compile(r"@(?:escaping|autoclosure)\b\s*")

# Qualifiers valid only in parameter position
_PARAMETER_ONLY_QUALIFIERS = re.compile(r"^(?:inout|borrowing|consuming|sending)\s+")

_VARIADIC_SUFFIX = "..."


@dataclass(frozen=True)
class FunctionType:
    """A function type split into its parts.

    Attributes:
        attributes: Leading attributes in source order (``@escaping``, ``@Sendable``)
        parameters: Parameter types, one entry per parameter
        effects: Effect words between the parameter list and the arrow
        return_type: Return type text

    """

    attributes: tuple[str, ...]
    parameters: tuple[str, ...]
    effects: tuple[str, ...]
    return_type: str

    @property
    def returns_value(self) -> bool:
        return normalise_type(self.return_type) not in VOID_TYPES


def is_function_type(type_text: str) -> bool:
    """Check whether a type expression is a non-optional function type."""
    return find_top_level(normalise_type(type_text), "->") >= 0


def split_function_type(type_text: str) -> FunctionType:
    """Split a function type into attributes, parameters, effects and return type.

    Parameters are counted by splitting on commas outside any bracket pair,
    so a parameter that is itself a function or a tuple counts once.

    Args:
        type_text: Function type text, e.g. ``@escaping (Int, String) throws -> Bool``

    Returns:
        The decomposed function type

    Raises:
        ValueError: If the text is not a function type

    """
    attributes, rest = strip_leading_attributes(" ".join(type_text.split()))
    rest = normalise_type(rest)
    arrow = find_top_level(rest, "->")
    if arrow < 0:
        raise ValueError(f"Not a function type: {type_text!r}")

    head = rest[:arrow].strip()
    return_type = rest[arrow + 2 :].strip()

    if head.startswith("("):
        close = matching_close(head, 0)
        if close < 0:
            raise ValueError(f"Unbalanced parameter list in {type_text!r}")
        parameters = tuple(split_top_level(head[1:close]))
        effects = tuple(head[close + 1 :].split())
    else:
        # Unparenthesised single parameter ("Int -> Void")
        words = head.split()
        parameters = (words[0],) if words else ()
        effects = tuple(words[1:])

    return FunctionType(
        attributes=attributes,
        parameters=parameters,
        effects=effects,
        return_type=return_type,
    )


def render_closure(function_type: FunctionType, return_literal: str | None) -> str:
    """Render a closure literal that ignores its arguments.

    Args:
        function_type: Function type the closure must satisfy
        return_literal: Expression the closure evaluates to, or None for Void

    Returns:
        ``{}``, ``{ _, _ in }``, ``{ 0 }`` or ``{ _ in 0 }`` style closure text

    """
    arguments = ", ".join("_" for _ in function_type.parameters)
    if not arguments and return_literal is None:
        return "{}"
    if not arguments:
        return f"{{ {return_literal} }}"
    if return_literal is None:
        return f"{{ {arguments} in }}"
    return f"{{ {arguments} in {return_literal} }}"


def stored_form(type_text: str) -> str:
    """Spell a type the way a stored property declaration accepts it.

    Removes ``@escaping``/``@autoclosure`` and parameter ownership qualifiers,
    turns a variadic ``T...`` into ``[T]`` and an opaque ``some P`` into
    ``any P``.
    """
    text = _PARAMETER_ONLY_ATTRIBUTES.sub("", " ".join(type_text.split())).strip()
    text = _PARAMETER_ONLY_QUALIFIERS.sub("", text)
    if text.endswith(_VARIADIC_SUFFIX):
        text = f"[{text.removesuffix(_VARIADIC_SUFFIX).strip()}]"
    if text.startswith("some "):
        text = "any " + text.removeprefix("some ").lstrip()
    return text


def parameter_form(type_text: str) -> str:
    """Spell a type for an initialiser parameter whose value is stored.

    Non-optional function types need ``@escaping`` there; everything else is
    returned unchanged.
    """
    text = " ".join(type_text.split())
    if not is_function_type(text):
        return text
    attributes, _ = strip_leading_attributes(strip_qualifiers(text))
    if "@escaping" in attributes:
        return text
    return f"@escaping {text}"


def is_non_escaping_closure(type_text: str) -> bool:
    """Check whether a parameter type is a closure that cannot be stored.

    A non-optional function type parameter without ``@escaping`` (including
    an ``@autoclosure``) may not outlive the call, so a double cannot keep it.
    """
    text = " ".join(type_text.split())
    if not is_function_type(text):
        return False
    attributes, _ = strip_leading_attributes(strip_qualifiers(text))
    return "@escaping" not in attributes
