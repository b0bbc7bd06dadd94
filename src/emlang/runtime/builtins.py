"""
Built-in function registry for the emlang evaluator.

Built-ins are native functions taking evaluated argument Values and
returning one Value. The interpreter consults the registry before the
heap, so a built-in shadows a user function of the same name unless it
is unregistered (see ``RuntimeConfig.disabled_builtins``).
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, TextIO
import copy
import sys

from .values import (
    Value, ValueKind, null_val, number_val, string_val, array_val, display,
)
from ..errors import error_arity, error_type_mismatch


@dataclass
class BuiltinFunction:
    """
    A built-in function and its implementation.

    ``arity`` is the exact argument count, or None for variadic functions.
    """
    name: str
    implementation: Callable[..., Value]
    arity: Optional[int] = None
    doc: str = ""

    def __call__(self, args: List[Value]) -> Value:
        if self.arity is not None and len(args) != self.arity:
            raise error_arity("Built-in", self.name, self.arity, len(args))
        return self.implementation(*args)


class BuiltinRegistry:
    """
    Registry of all built-in functions.

    Args:
        output: Stream that ``print`` writes to (defaults to sys.stdout at call time)
        render: Value-to-text function used by ``print`` and ``str``
    """

    def __init__(self, output: TextIO = None, render: Callable[[Value], str] = None):
        self._functions: Dict[str, BuiltinFunction] = {}
        self.output = output
        self.render = render or display
        self._register_all()

    def get_function(self, name: str) -> Optional[BuiltinFunction]:
        """Look up a function by name."""
        return self._functions.get(name)

    def register(self, func: BuiltinFunction) -> None:
        """Register a function."""
        self._functions[func.name] = func

    def unregister(self, name: str) -> None:
        """Remove a function; unknown names are ignored."""
        self._functions.pop(name, None)

    def copy(self) -> "BuiltinRegistry":
        """A registry with the same functions that can be changed independently."""
        other = copy.copy(self)
        other._functions = dict(self._functions)
        return other

    def names(self) -> List[str]:
        return sorted(self._functions)

    def __contains__(self, name: str) -> bool:
        return name in self._functions

    def _register_all(self) -> None:
        """Register all built-in functions."""
        self._register_io_functions()
        self._register_utility_functions()

    # --- I/O ---

    def _register_io_functions(self) -> None:

        def _print(*args: Value) -> Value:
            stream = self.output if self.output is not None else sys.stdout
            stream.write(" ".join(self.render(arg) for arg in args) + "\n")
            return null_val()

        self.register(BuiltinFunction(
            "print", _print,
            doc="Write the display text of each argument, space separated, then a newline.",
        ))

    # --- Utilities ---

    def _register_utility_functions(self) -> None:

        def _len(v: Value) -> Value:
            if v.kind in (ValueKind.ARRAY, ValueKind.STRING):
                return number_val(len(v.data))
            raise error_type_mismatch(f"len() expects an array or string, got {v.kind.type_name}")

        def _str(v: Value) -> Value:
            return string_val(self.render(v))

        def _type(v: Value) -> Value:
            return string_val(v.kind.type_name)

        def _push(arr: Value, item: Value) -> Value:
            if arr.kind != ValueKind.ARRAY:
                raise error_type_mismatch(f"push() expects an array, got {arr.kind.type_name}")
            return array_val([v.clone() for v in arr.data] + [item.clone()])

        self.register(BuiltinFunction("len", _len, 1, "Length of an array or string."))
        self.register(BuiltinFunction("str", _str, 1, "Display text of a value."))
        self.register(BuiltinFunction("type", _type, 1, "Kind name of a value."))
        self.register(BuiltinFunction(
            "push", _push, 2,
            "A new array with the item appended; the argument is left untouched.",
        ))


# Global singleton registry
_registry: Optional[BuiltinRegistry] = None


def get_builtin_registry() -> BuiltinRegistry:
    """Get the global built-in function registry."""
    global _registry
    if _registry is None:
        _registry = BuiltinRegistry()
    return _registry


def call_builtin(name: str, args: List[Value]) -> Value:
    """
    Call a built-in function by name.

    Raises KeyError if the function is not registered.
    """
    func = get_builtin_registry().get_function(name)
    if func is None:
        raise KeyError(f"Unknown built-in function: {name}")
    return func(args)
