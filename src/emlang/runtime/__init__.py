"""
emlang runtime - tree-walking evaluator.

This package provides:
- Interpreter: Evaluates syntax trees and runs programs from ``main``
- Value: Tagged runtime values with display and ordering rules
- Frame / Heap: Per-invocation bindings and shared definitions
- BuiltinRegistry: Native functions consulted before user functions
"""

from .values import (
    Value,
    ValueKind,
    FunctionData,
    null_val,
    number_val,
    string_val,
    bool_val,
    array_val,
    nameref_val,
    function_val,
    object_val,
    wrap_value,
    unwrap_value,
    values_equal,
    compare_values,
    display,
    format_number,
)

from .context import (
    Frame,
    Heap,
    create_frame,
)

from .builtins import (
    BuiltinFunction,
    BuiltinRegistry,
    get_builtin_registry,
    call_builtin,
)

from .interpreter import (
    Interpreter,
    Completion,
    ExecutionResult,
    run_program,
)

__all__ = [
    # Values
    'Value',
    'ValueKind',
    'FunctionData',
    'null_val',
    'number_val',
    'string_val',
    'bool_val',
    'array_val',
    'nameref_val',
    'function_val',
    'object_val',
    'wrap_value',
    'unwrap_value',
    'values_equal',
    'compare_values',
    'display',
    'format_number',

    # Context
    'Frame',
    'Heap',
    'create_frame',

    # Builtins
    'BuiltinFunction',
    'BuiltinRegistry',
    'get_builtin_registry',
    'call_builtin',

    # Interpreter
    'Interpreter',
    'Completion',
    'ExecutionResult',
    'run_program',
]
