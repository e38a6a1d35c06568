"""Tests for function type decomposition and closure spellings."""

import pytest

from swift_test_doubles.types.closures import (
    FunctionType,
    is_function_type,
    is_non_escaping_closure,
    parameter_form,
    render_closure,
    split_function_type,
    stored_form,
)


class TestSplitFunctionType:
    """Test decomposition of function types."""

    def test_attributes_parameters_effects_and_return(self) -> None:
        """Test a fully decorated function type."""
        function_type = split_function_type("@escaping (Int, String) throws -> Bool")

        assert function_type == FunctionType(
            attributes=("@escaping",),
            parameters=("Int", "String"),
            effects=("throws",),
            return_type="Bool",
        )
        assert function_type.returns_value

    def test_nested_parameters_count_once(self) -> None:
        """Test that function and dictionary parameters are single parameters."""
        function_type = split_function_type("((Int) -> Void, [String: Int]) -> Void")

        assert function_type.parameters == ("(Int) -> Void", "[String: Int]")
        assert not function_type.returns_value

    def test_no_parameters_with_effects(self) -> None:
        """Test an empty parameter list followed by effects."""
        function_type = split_function_type("() async throws -> Void")

        assert function_type.parameters == ()
        assert function_type.effects == ("async", "throws")

    def test_unparenthesised_parameter(self) -> None:
        """Test the 'Int -> String' spelling."""
        function_type = split_function_type("Int -> String")

        assert function_type.parameters == ("Int",)
        assert function_type.return_type == "String"

    def test_curried_function_returns_a_function(self) -> None:
        """Test that the first top-level arrow splits the type."""
        function_type = split_function_type("(Int) -> (String) -> Void")

        assert function_type.parameters == ("Int",)
        assert function_type.return_type == "(String) -> Void"
        assert function_type.returns_value

    def test_redundant_parentheses(self) -> None:
        """Test that a parenthesised function type is unwrapped."""
        function_type = split_function_type("(() -> Void)")

        assert function_type.parameters == ()
        assert function_type.return_type == "Void"

    @pytest.mark.parametrize(
        "text",
        ["[String]", "(() -> Void)?", "Int"],
        ids=["array", "optional_function", "primitive"],
    )
    def test_not_a_function_type(self, text: str) -> None:
        """Test that non-function types are rejected."""
        with pytest.raises(ValueError, match="Not a function type"):
            split_function_type(text)

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("@escaping () -> Void", True),
            ("() -> Int?", True),
            ("(() -> Void)?", False),
            ("[() -> Void]", False),
        ],
        ids=["escaping", "optional_return", "optional_function", "array"],
    )
    def test_is_function_type(self, text: str, expected: bool) -> None:
        """Test detection of non-optional function types."""
        assert is_function_type(text) is expected


class TestRenderClosure:
    """Test no-op closure literals."""

    @pytest.mark.parametrize(
        ("parameters", "return_literal", "expected"),
        [
            ((), None, "{}"),
            (("Int", "String"), None, "{ _, _ in }"),
            ((), "0", "{ 0 }"),
            (("Int",), "0", "{ _ in 0 }"),
        ],
        ids=["void_no_arguments", "void_arguments", "value", "value_arguments"],
    )
    def test_render_closure(
        self,
        parameters: tuple[str, ...],
        return_literal: str | None,
        expected: str,
    ) -> None:
        """Test closure shapes for each combination of arguments and result."""
        function_type = FunctionType(
            attributes=(),
            parameters=parameters,
            effects=(),
            return_type="Void" if return_literal is None else "Int",
        )

        assert render_closure(function_type, return_literal) == expected


class TestTypeSpellings:
    """Test property and parameter spellings of types."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("@escaping (Int) -> Void", "(Int) -> Void"),
            ("@autoclosure @escaping () -> Bool", "() -> Bool"),
            ("@Sendable (Int) -> Void", "@Sendable (Int) -> Void"),
            ("inout [Int]", "[Int]"),
            ("String...", "[String]"),
            ("some Collection", "any Collection"),
            ("String", "String"),
        ],
        ids=[
            "escaping",
            "autoclosure",
            "sendable_kept",
            "inout",
            "variadic",
            "opaque",
            "plain",
        ],
    )
    def test_stored_form(self, text: str, expected: str) -> None:
        """Test spellings accepted by stored property declarations."""
        assert stored_form(text) == expected

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("(Int) -> Void", "@escaping (Int) -> Void"),
            ("@escaping () -> Void", "@escaping () -> Void"),
            ("@Sendable () -> Void", "@escaping @Sendable () -> Void"),
            ("(() -> Void)?", "(() -> Void)?"),
            ("String", "String"),
        ],
        ids=["function", "already_escaping", "sendable", "optional", "plain"],
    )
    def test_parameter_form(self, text: str, expected: str) -> None:
        """Test that only non-optional function types become escaping."""
        assert parameter_form(text) == expected

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("() -> Void", True),
            ("@Sendable (Int) throws -> Bool", True),
            ("@autoclosure () -> Bool", True),
            ("@escaping () -> Void", False),
            ("@escaping @autoclosure () -> Bool", False),
            ("(() -> Void)?", False),
            ("[() -> Void]", False),
            ("String", False),
        ],
        ids=[
            "plain_closure",
            "sendable",
            "autoclosure",
            "escaping",
            "escaping_autoclosure",
            "optional",
            "array_of_closures",
            "not_a_closure",
        ],
    )
    def test_is_non_escaping_closure(self, text: str, expected: bool) -> None:
        """Test which parameter types cannot be kept after the call returns."""
        assert is_non_escaping_closure(text) is expected
