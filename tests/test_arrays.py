"""
Tests for array reads, writes and nested index-chain updates.
"""

import math

import pytest

from emlang import ast, IndexError as EmIndexError, PropertyError, TypeError as EmTypeError
from emlang.runtime import number_val, wrap_value

from builders import (
    num, text, name, assign, call, stmt, show, tail, func, klass, new,
    member, index, arr, load,
)


def grid():
    return arr(arr(num(0), num(0)), arr(num(0), num(0)))


# --- Read tests ---

class TestArrayRead:
    """Test reading elements."""

    def test_read_element(self):
        printed, _, _ = load(show(index(arr(num(4), text("b")), num(1))))
        assert printed == "b\n"

    def test_fractional_index_truncates(self):
        _, _, frame = load(
            assign("a", arr(num(10), num(20), num(30))),
            assign("r", index("a", num(1.7))),
        )
        assert frame.get("r") == number_val(20)

    @pytest.mark.parametrize("bad", [num(-1), text("0"), num(math.inf), num(math.nan)])
    def test_invalid_index(self, bad):
        with pytest.raises(EmIndexError) as exc:
            load(assign("a", arr(num(1))), stmt(index("a", bad)))
        assert exc.value.code == "E404"

    def test_out_of_bounds(self):
        with pytest.raises(EmIndexError) as exc:
            load(assign("a", arr(num(1), num(2), num(3))), stmt(index("a", num(3))))
        assert exc.value.diagnostic.message == "Index 3 out of bounds for array of length 3"

    def test_non_array_not_indexable(self):
        with pytest.raises(EmIndexError) as exc:
            load(stmt(index(text("abc"), num(0))))
        assert exc.value.diagnostic.message == "Type string isn't indexable"

    def test_read_gives_a_copy(self):
        _, _, frame = load(
            assign("g", grid()),
            assign("row", index("g", num(0))),
            assign(index("row", num(0)), num(1)),
        )
        assert frame.get("g") == wrap_value([[0, 0], [0, 0]])
        assert frame.get("row") == wrap_value([1, 0])


# --- Write tests ---

class TestArrayWrite:
    """Test element assignment."""

    def test_write_out_of_bounds_leaves_array(self):
        with pytest.raises(EmIndexError):
            load(assign("a", arr(num(1))), assign(index("a", num(1)), num(2)))

    def test_non_integral_write(self):
        with pytest.raises(EmIndexError):
            load(assign("a", arr(num(1), num(2))), assign(index("a", num(0.5)), num(2)))

    def test_two_dimensional_write(self):
        printed, _, frame = load(
            assign("g", grid()),
            assign(index("g", num(1), num(0)), num(5)),
            show(name("g")),
        )
        assert printed == "[[0, 0], [5, 0]]\n"

    def test_three_dimensional_write(self):
        _, _, frame = load(
            assign("cube", arr(arr(arr(num(0))), arr(arr(num(0), num(0))))),
            assign(index("cube", num(1), num(0), num(1)), num(7)),
        )
        assert frame.get("cube") == wrap_value([[[0]], [[0, 7]]])

    def test_write_through_property(self):
        printed, _, _ = load(
            klass("Bag", func("~init", ["self"],
                              assign(member("self", "items"), arr(num(1), num(2), num(3))))),
            assign("b", new("Bag")),
            assign(index(member("b", "items"), num(1)), num(7)),
            show(member("b", "items")),
        )
        assert printed == "[1, 7, 3]\n"

    def test_write_property_of_element(self):
        printed, _, _ = load(
            klass("P", func("~init", ["self", "x"], assign(member("self", "x"), name("x")))),
            assign("pts", arr(new("P", num(1)), new("P", num(2)))),
            assign(member(index("pts", num(0)), "x"), num(9)),
            show(member(index("pts", num(0)), "x"), member(index("pts", num(1)), "x")),
        )
        assert printed == "9 2\n"

    def test_missing_intermediate_property(self):
        with pytest.raises(PropertyError):
            load(
                klass("Bag"),
                assign("b", new("Bag")),
                assign(index(member("b", "items"), num(0)), num(1)),
            )

    def test_write_into_unbound_variable(self):
        with pytest.raises(EmIndexError) as exc:
            load(assign(index("nope", num(0)), num(1)))
        assert exc.value.diagnostic.message == "Type null isn't indexable"

    def test_index_evaluated_before_value(self):
        printed, _, frame = load(
            func("idx", [], show(text("index")), tail(num(0))),
            func("val", [], show(text("value")), tail(num(1))),
            assign("a", arr(num(0))),
            assign(index("a", call("idx")), call("val")),
        )
        assert printed == "index\nvalue\n"
        assert frame.get("a") == wrap_value([1])

    def test_write_to_temporary(self):
        printed, _, _ = load(show(ast.Assignment(index(arr(num(1)), num(0)), num(5))))
        assert printed == "5\n"

    def test_stored_value_is_a_copy(self):
        _, _, frame = load(
            assign("inner", arr(num(1))),
            assign("outer", arr(name("inner"))),
            assign(index("inner", num(0)), num(2)),
        )
        assert frame.get("outer") == wrap_value([[1]])


# --- Argument tests ---

class TestArrayArguments:
    """Test arrays passed to functions."""

    def test_function_gets_a_copy(self):
        _, _, frame = load(
            func("zap", ["xs"], assign(index("xs", num(0)), num(99)), tail(name("xs"))),
            assign("xs", arr(num(1), num(2))),
            assign("ys", call("zap", name("xs"))),
        )
        assert frame.get("xs") == wrap_value([1, 2])
        assert frame.get("ys") == wrap_value([99, 2])

    def test_index_on_call_result(self):
        printed, _, _ = load(
            func("pair", [], tail(arr(text("l"), text("r")))),
            show(index(call("pair"), num(1))),
        )
        assert printed == "r\n"
