"""
emlang - evaluator for a small dynamically-typed scripting language.

The language has numbers, strings, booleans, arrays, user functions and
classes whose instances are plain values. This package evaluates syntax
trees produced by an external parser:

    from emlang import ast, Interpreter
    from emlang.tokens import LiteralKind, Operator

    tree = ast.Block([
        ast.FunctionDef("main", ["args"], ast.Block([
            ast.ExpressionStatement(ast.FunctionCall("print", [
                ast.BinaryOp(
                    ast.Literal(2.0, LiteralKind.NUMBER),
                    Operator.PLUS,
                    ast.Literal(3.0, LiteralKind.NUMBER),
                ),
            ])),
        ])),
    ])
    result = Interpreter().run(tree, [])
    if not result.success:
        print(result.report())
"""

import logging

from .tokens import (
    Operator,
    Keyword,
    LiteralKind,
    SourceLocation,
    SourceSpan,
)

from . import ast

from .errors import (
    ErrorSeverity,
    Diagnostic,
    DiagnosticCollector,
    EvalError,
    TypeError,
    UndefinedError,
    ArityError,
    IndexError,
    PropertyError,
    UnexpectedNodeError,
    MethodError,
    CallDepthError,
)

from .config import (
    RuntimeConfig,
    load_config,
    save_config,
)

from .runtime import (
    Value,
    ValueKind,
    Frame,
    Heap,
    create_frame,
    BuiltinFunction,
    BuiltinRegistry,
    Interpreter,
    Completion,
    ExecutionResult,
    run_program,
    display,
    wrap_value,
    unwrap_value,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # Enumerations and locations
    'Operator',
    'Keyword',
    'LiteralKind',
    'SourceLocation',
    'SourceSpan',
    'ast',

    # Errors
    'ErrorSeverity',
    'Diagnostic',
    'DiagnosticCollector',
    'EvalError',
    'TypeError',
    'UndefinedError',
    'ArityError',
    'IndexError',
    'PropertyError',
    'UnexpectedNodeError',
    'MethodError',
    'CallDepthError',

    # Configuration
    'RuntimeConfig',
    'load_config',
    'save_config',

    # Runtime
    'Value',
    'ValueKind',
    'Frame',
    'Heap',
    'create_frame',
    'BuiltinFunction',
    'BuiltinRegistry',
    'Interpreter',
    'Completion',
    'ExecutionResult',
    'run_program',
    'display',
    'wrap_value',
    'unwrap_value',
]
