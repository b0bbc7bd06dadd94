"""
Runtime values for the emlang evaluator.

A Value pairs the raw Python data with its ValueKind tag. Arrays hold a
list of Values and objects a dict of property name to Value; both are
owned by the Value that contains them, so ``clone()`` hands out an
independent copy. Functions share their (immutable) body subtree.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional
from enum import Enum
from decimal import Decimal
import math

from ..ast import Block


class ValueKind(Enum):
    """
    The closed set of value variants.

    The numeric values give the fixed order used when comparing values of
    different kinds with < > <= >=.
    """
    NULL = 0
    NUMBER = 1
    STRING = 2
    BOOLEAN = 3
    ARRAY = 4
    NAMEREF = 5
    FUNCTION = 6
    OBJECT = 7

    @property
    def rank(self) -> int:
        return self.value

    @property
    def type_name(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class FunctionData:
    """A user function: declared name, formal parameters and body."""
    name: str
    params: tuple
    body: Block

    def signature(self) -> str:
        return f"{self.name}({', '.join(self.params)})"


@dataclass
class Value:
    """
    A runtime value tagged with its kind.

    The `data` field holds the Python representation:
    None, float, str, bool, list of Values, NameRef name (str),
    FunctionData, or dict of property name to Value.
    """
    data: Any
    kind: ValueKind

    def __repr__(self) -> str:
        return f"Value({self.data!r}, {self.kind.name})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return values_equal(self, other)

    __hash__ = None

    def clone(self) -> "Value":
        """Return an independent copy (arrays and objects are copied deeply)."""
        if self.kind == ValueKind.ARRAY:
            return Value([item.clone() for item in self.data], ValueKind.ARRAY)
        if self.kind == ValueKind.OBJECT:
            return Value({k: v.clone() for k, v in self.data.items()}, ValueKind.OBJECT)
        return Value(self.data, self.kind)

    def is_true(self) -> bool:
        """Only the Boolean ``true`` takes a branch; every other value is false."""
        return self.kind == ValueKind.BOOLEAN and self.data is True

    @property
    def is_null(self) -> bool:
        return self.kind == ValueKind.NULL

    def get_prop(self, name: str) -> Optional["Value"]:
        """Look up an object property (None when absent)."""
        return self.data.get(name)

    def set_prop(self, name: str, value: "Value") -> None:
        self.data[name] = value


# Convenience constructors

def null_val() -> Value:
    """Create the null value."""
    return Value(None, ValueKind.NULL)


def number_val(x: float) -> Value:
    """Create a number value."""
    return Value(float(x), ValueKind.NUMBER)


def string_val(s: str) -> Value:
    """Create a string value."""
    return Value(str(s), ValueKind.STRING)


def bool_val(b: bool) -> Value:
    """Create a boolean value."""
    return Value(bool(b), ValueKind.BOOLEAN)


def array_val(items: List[Value]) -> Value:
    """Create an array value that owns the given items."""
    return Value(list(items), ValueKind.ARRAY)


def nameref_val(name: str) -> Value:
    """Create a deferred reference to a variable."""
    return Value(name, ValueKind.NAMEREF)


def function_val(name: str, params: List[str], body: Block) -> Value:
    """Create a function value."""
    return Value(FunctionData(name, tuple(params), body), ValueKind.FUNCTION)


def object_val(props: Dict[str, Value] = None) -> Value:
    """Create an object value from a property map."""
    return Value(dict(props or {}), ValueKind.OBJECT)


def wrap_value(data: Any) -> Value:
    """Convert plain Python data into a Value."""
    if isinstance(data, Value):
        return data
    if data is None:
        return null_val()
    if isinstance(data, bool):
        return bool_val(data)
    if isinstance(data, (int, float)):
        return number_val(data)
    if isinstance(data, str):
        return string_val(data)
    if isinstance(data, (list, tuple)):
        return array_val([wrap_value(item) for item in data])
    if isinstance(data, dict):
        return object_val({str(k): wrap_value(v) for k, v in data.items()})
    raise ValueError(f"cannot convert {type(data).__name__} to a Value")


def unwrap_value(v: Value) -> Any:
    """Extract plain Python data from a Value (arrays and objects recursively)."""
    if v.kind == ValueKind.ARRAY:
        return [unwrap_value(item) for item in v.data]
    if v.kind == ValueKind.OBJECT:
        return {k: unwrap_value(item) for k, item in v.data.items()}
    return v.data


# Equality and ordering

def values_equal(a: Value, b: Value) -> bool:
    """Structural, variant-aware equality. Different kinds are never equal."""
    if a.kind != b.kind:
        return False
    if a.kind == ValueKind.ARRAY:
        return len(a.data) == len(b.data) and all(
            values_equal(x, y) for x, y in zip(a.data, b.data)
        )
    if a.kind == ValueKind.OBJECT:
        return a.data.keys() == b.data.keys() and all(
            values_equal(v, b.data[k]) for k, v in a.data.items()
        )
    return a.data == b.data


def _cmp(x, y) -> Optional[int]:
    if x < y:
        return -1
    if x > y:
        return 1
    if x == y:
        return 0
    return None  # NaN


def compare_values(a: Value, b: Value) -> Optional[int]:
    """
    Order two values: -1, 0, 1, or None when they are unordered.

    Values of different kinds order by ValueKind rank. Within a kind:
    numbers, strings and names compare naturally (NaN is unordered),
    false < true, arrays lexicographically, functions by name then
    parameters, and objects by their number of properties.
    """
    if a.kind != b.kind:
        return _cmp(a.kind.rank, b.kind.rank)

    kind = a.kind
    if kind == ValueKind.NULL:
        return 0
    if kind in (ValueKind.NUMBER, ValueKind.STRING, ValueKind.BOOLEAN, ValueKind.NAMEREF):
        return _cmp(a.data, b.data)
    if kind == ValueKind.ARRAY:
        for x, y in zip(a.data, b.data):
            order = compare_values(x, y)
            if order != 0:
                return order
        return _cmp(len(a.data), len(b.data))
    if kind == ValueKind.FUNCTION:
        return _cmp((a.data.name, a.data.params), (b.data.name, b.data.params))
    return _cmp(len(a.data), len(b.data))


# Display

def format_number(x: float) -> str:
    """
    Render a number the way the language prints it.

    Uses the shortest digits that round-trip, always in positional
    notation (``0.00001``, never ``1e-05``); whole numbers drop the
    fraction (``5``) and negative zero keeps its sign (``-0``).
    """
    if math.isnan(x):
        return "NaN"
    if math.isinf(x):
        return "inf" if x > 0 else "-inf"
    text = format(Decimal(repr(x)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _quoted(v: Value, render_object) -> str:
    if v.kind == ValueKind.STRING:
        return f'"{v.data}"'
    return display(v, render_object)


def display(value: Value, render_object: Callable[[Value], Optional[str]] = None) -> str:
    """
    Render a value as display text.

    ``render_object`` is consulted for objects first (it runs a
    ``~display`` method when the object has one); when it is absent or
    returns None the raw property map is shown.
    """
    kind = value.kind
    if kind == ValueKind.NULL:
        return "null"
    if kind == ValueKind.NUMBER:
        return format_number(value.data)
    if kind == ValueKind.STRING:
        return value.data
    if kind == ValueKind.BOOLEAN:
        return "true" if value.data else "false"
    if kind == ValueKind.ARRAY:
        return "[" + ", ".join(_quoted(item, render_object) for item in value.data) + "]"
    if kind == ValueKind.NAMEREF:
        return value.data
    if kind == ValueKind.FUNCTION:
        return f"<func {value.data.signature()}>"

    if render_object is not None:
        text = render_object(value)
        if text is not None:
            return text
    members = ", ".join(
        f'"{name}": {_quoted(prop, render_object)}' for name, prop in value.data.items()
    )
    return "{" + members + "}"
