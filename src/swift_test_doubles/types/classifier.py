"""Syntactic type classification and default literal synthesis.

Types are never resolved against declarations. A type expression is matched
against an ordered list of shapes and the first match decides its default:

1. primitive name from a fixed table
2. optional (``T?``, ``T!``, ``Optional<T>``)
3. bracketed container (``[T]`` or ``[K: V]``)
4. function type (contains a top-level arrow)
5. named generic container (``Array<T>``, ``Set<T>``, ``Dictionary<K, V>``)
6. tuple (``(A, B)``)
7. anything else, which falls back to a quoted lower-cased type name

The fallback rarely produces a value of the right type, so it is reported
through ``DefaultValue.is_fallback`` instead of passing as a typed success.
"""

import logging
from dataclasses import dataclass
from enum import StrEnum

from swift_test_doubles.models import VOID_TYPES
from swift_test_doubles.types.closures import render_closure, split_function_type
from swift_test_doubles.types.text import (
    find_top_level,
    is_wrapped,
    normalise_type,
    split_top_level,
)

logger = logging.getLogger(__name__)


class TypeShape(StrEnum):
    """Classification bucket of a type expression."""

    PRIMITIVE = "primitive"
    OPTIONAL = "optional"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    SET = "set"
    TUPLE = "tuple"
    CLOSURE = "closure"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class DefaultValue:
    """A synthesised default literal and how it was obtained."""

    literal: str
    shape: TypeShape
    is_fallback: bool = False


_INTEGER_TYPES = (
    "Int",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "UInt",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
)

PRIMITIVE_DEFAULTS: dict[str, str] = {
    "String": '"name"',
    "Substring": '"name"',
    **dict.fromkeys(_INTEGER_TYPES, "0"),
    "Double": "0.0",
    "Float": "0.0",
    "CGFloat": "0.0",
    "Decimal": "0.0",
    "Bool": "false",
    "UUID": "UUID()",
    "Date": "Date()",
    "Data": "Data()",
}

_MODULE_PREFIXES = ("Swift.", "Foundation.")

_NAMED_CONTAINERS: dict[str, TypeShape] = {
    "Array": TypeShape.SEQUENCE,
    "ContiguousArray": TypeShape.SEQUENCE,
    "Set": TypeShape.SET,
    "Dictionary": TypeShape.MAPPING,
}

_EMPTY_CONTAINERS: dict[TypeShape, str] = {
    TypeShape.SEQUENCE: "[]",
    TypeShape.MAPPING: "[:]",
    TypeShape.SET: "Set()",
}

_OPTIONAL_SUFFIXES = ("?", "!")
_OPTIONAL_GENERIC = "Optional<"
_ABSENT = "nil"


def _strip_module(name: str) -> str:
    for prefix in _MODULE_PREFIXES:
        if name.startswith(prefix):
            return name.removeprefix(prefix)
    return name


def _generic_name(text: str) -> str | None:
    """Return ``Name`` for a complete ``Name<...>`` expression, else None."""
    open_index = text.find("<")
    if open_index <= 0 or not text.endswith(">"):
        return None
    if not is_wrapped(text[open_index:], "<"):
        return None
    return _strip_module(text[:open_index].strip())


def _unwrap_optional(text: str) -> str | None:
    """Return the wrapped type when the whole expression is optional, else None.

    A trailing ``?`` on the return type of an unparenthesised function type
    belongs to the return type, so ``() -> Int?`` is not optional.
    """
    if text.endswith(_OPTIONAL_SUFFIXES):
        if find_top_level(text, "->") >= 0:
            return None
        return text[:-1].strip()
    if _generic_name(text) == "Optional":
        return text[text.index("<") + 1 : -1].strip()
    return None


def classify(type_text: str) -> TypeShape:
    """Classify a type expression into the shape that decides its default.

    Args:
        type_text: Type expression as written in source

    Returns:
        The first matching shape in classification order

    """
    text = normalise_type(type_text)

    if _strip_module(text) in PRIMITIVE_DEFAULTS:
        return TypeShape.PRIMITIVE
    if _unwrap_optional(text) is not None:
        return TypeShape.OPTIONAL
    if is_wrapped(text, "["):
        if find_top_level(text[1:-1], ":") >= 0:
            return TypeShape.MAPPING
        return TypeShape.SEQUENCE
    if find_top_level(text, "->") >= 0:
        return TypeShape.CLOSURE
    container = _NAMED_CONTAINERS.get(_generic_name(text) or "")
    if container is not None:
        return container
    if text in VOID_TYPES or is_wrapped(text, "("):
        return TypeShape.TUPLE
    return TypeShape.UNKNOWN


def synthesize_default(type_text: str, prefer_value: bool = False) -> DefaultValue:
    """Synthesise a default literal for a type expression.

    Args:
        type_text: Type expression as written in source
        prefer_value: For optional function types, produce a no-op closure
            instead of ``nil``. Other optionals always default to ``nil``.

    Returns:
        The literal together with the shape it was derived from. Tuples and
        closures whose parts fall back are themselves marked as fallbacks.

    """
    text = normalise_type(type_text)
    shape = classify(text)

    match shape:
        case TypeShape.PRIMITIVE:
            return DefaultValue(PRIMITIVE_DEFAULTS[_strip_module(text)], shape)
        case TypeShape.OPTIONAL:
            wrapped = _unwrap_optional(text) or ""
            if prefer_value and classify(wrapped) == TypeShape.CLOSURE:
                stub = _closure_default(wrapped)
                return DefaultValue(stub.literal, shape, stub.is_fallback)
            return DefaultValue(_ABSENT, shape)
        case TypeShape.SEQUENCE | TypeShape.MAPPING | TypeShape.SET:
            return DefaultValue(_EMPTY_CONTAINERS[shape], shape)
        case TypeShape.CLOSURE:
            return _closure_default(text)
        case TypeShape.TUPLE:
            return _tuple_default(text)

    literal = _fallback_literal(text)
    logger.debug("No default known for type %r, falling back to %s", text, literal)
    return DefaultValue(literal, TypeShape.UNKNOWN, is_fallback=True)


def default_literal(type_text: str, prefer_value: bool = False) -> str:
    """Return the default literal for a type expression.

    See ``synthesize_default`` for the meaning of ``prefer_value``.
    """
    return synthesize_default(type_text, prefer_value).literal


def closure_stub(type_text: str) -> str:
    """Return a no-op closure literal for a function type."""
    return _closure_default(type_text).literal


def _closure_default(type_text: str) -> DefaultValue:
    function_type = split_function_type(type_text)
    if not function_type.returns_value:
        return DefaultValue(render_closure(function_type, None), TypeShape.CLOSURE)
    returned = synthesize_default(function_type.return_type)
    return DefaultValue(
        render_closure(function_type, returned.literal),
        TypeShape.CLOSURE,
        returned.is_fallback,
    )


def _tuple_default(text: str) -> DefaultValue:
    if text in VOID_TYPES:
        return DefaultValue("()", TypeShape.TUPLE)

    elements: list[str] = []
    is_fallback = False
    for element in split_top_level(text[1:-1]):
        label_end = find_top_level(element, ":")
        label = element[:label_end].strip() if label_end >= 0 else None
        element_type = element[label_end + 1 :] if label_end >= 0 else element
        value = synthesize_default(element_type)
        is_fallback = is_fallback or value.is_fallback
        elements.append(f"{label}: {value.literal}" if label else value.literal)
    return DefaultValue(f"({', '.join(elements)})", TypeShape.TUPLE, is_fallback)


def _fallback_literal(text: str) -> str:
    name = text.split("<", 1)[0].strip()
    return '"' + name.lower().replace("\\", "").replace('"', "") + '"'
