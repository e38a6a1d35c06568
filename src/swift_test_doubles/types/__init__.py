"""Default value synthesis for Swift type expressions."""

from swift_test_doubles.types.classifier import (
    DefaultValue,
    TypeShape,
    classify,
    closure_stub,
    default_literal,
    synthesize_default,
)
from swift_test_doubles.types.closures import (
    FunctionType,
    is_function_type,
    is_non_escaping_closure,
    parameter_form,
    split_function_type,
    stored_form,
)

__all__ = [
    # Classification
    "DefaultValue",
    "TypeShape",
    "classify",
    "closure_stub",
    "default_literal",
    "synthesize_default",
    # Function types
    "FunctionType",
    "is_function_type",
    "is_non_escaping_closure",
    "parameter_form",
    "split_function_type",
    "stored_form",
]
