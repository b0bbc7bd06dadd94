"""
Tests for built-in functions.
"""

import io

import pytest

from emlang import ArityError, TypeError as EmTypeError
from emlang.runtime import (
    BuiltinFunction, BuiltinRegistry, get_builtin_registry, call_builtin,
    ValueKind, null_val, number_val, string_val, bool_val, array_val,
    wrap_value,
)

from builders import (
    load, func, call, show, assign, num, text, name, arr, tail,
)


# --- Builtin Tests ---

class TestBuiltins:
    """Test the built-in function registry."""

    def test_print_writes_display_text(self):
        out = io.StringIO()
        registry = BuiltinRegistry(output=out)
        result = registry.get_function("print")(
            [number_val(1), string_val("a"), wrap_value([1, "b"])]
        )
        assert result.kind == ValueKind.NULL
        assert out.getvalue() == '1 a [1, "b"]\n'

    def test_print_without_arguments(self):
        out = io.StringIO()
        BuiltinRegistry(output=out).get_function("print")([])
        assert out.getvalue() == "\n"

    def test_len_function(self):
        """Test len on arrays and strings."""
        assert call_builtin("len", [wrap_value([1, 2, 3])]) == number_val(3)
        assert call_builtin("len", [string_val("hello")]) == number_val(5)
        assert call_builtin("len", [array_val([])]) == number_val(0)

    def test_len_rejects_numbers(self):
        with pytest.raises(EmTypeError):
            call_builtin("len", [number_val(3)])

    def test_str_and_type(self):
        assert call_builtin("str", [number_val(2.5)]) == string_val("2.5")
        assert call_builtin("str", [bool_val(False)]) == string_val("false")
        assert call_builtin("type", [null_val()]) == string_val("null")
        assert call_builtin("type", [wrap_value({})]) == string_val("object")

    def test_push_leaves_argument_untouched(self):
        before = wrap_value([1])
        result = call_builtin("push", [before, string_val("x")])
        assert result == wrap_value([1, "x"])
        assert before == wrap_value([1])

    def test_push_requires_array(self):
        with pytest.raises(EmTypeError):
            call_builtin("push", [string_val("ab"), number_val(1)])

    def test_fixed_arity_checked(self):
        with pytest.raises(ArityError) as exc:
            call_builtin("len", [])
        assert exc.value.code == "E403"
        assert "Built-in len takes 1 argument(s), got 0" in exc.value.diagnostic.message

    def test_unknown_function_raises(self):
        """Test that calling unknown function raises KeyError."""
        with pytest.raises(KeyError):
            call_builtin("nonexistent_function", [])

    def test_register_and_unregister(self):
        registry = BuiltinRegistry()
        registry.register(BuiltinFunction("twice", lambda v: number_val(v.data * 2), 1))
        assert "twice" in registry
        assert registry.get_function("twice")([number_val(4)]) == number_val(8)
        registry.unregister("twice")
        registry.unregister("never_registered")
        assert registry.get_function("twice") is None

    def test_global_registry_is_shared(self):
        assert get_builtin_registry() is get_builtin_registry()
        assert {"print", "len", "str", "type", "push"} <= set(get_builtin_registry().names())

    def test_builtin_called_from_program(self):
        printed, _, _ = load(
            assign("xs", arr(num(1), num(2))),
            assign("ys", call("push", name("xs"), num(3))),
            show(call("len", name("xs")), call("len", name("ys")), name("ys")),
        )
        assert printed == "2 3 [1, 2, 3]\n"

    def test_builtin_argument_errors_propagate(self):
        """A bad built-in argument is an evaluation error, not a crash."""
        with pytest.raises(EmTypeError):
            load(show(call("len", num(1))))

    def test_builtin_shadows_user_function(self):
        printed, interp, _ = load(
            func("len", ["x"], tail(num(99))),
            show(call("len", text("abc"))),
        )
        assert printed == "3\n"
        assert "len" in interp.heap

    def test_copy_is_independent(self):
        out = io.StringIO()
        registry = BuiltinRegistry(output=out)
        clone = registry.copy()
        clone.unregister("print")
        assert "print" in registry
        assert "print" not in clone
        clone.get_function("str")([number_val(1)])
        registry.get_function("print")([string_val("still here")])
        assert out.getvalue() == "still here\n"
