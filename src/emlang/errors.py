"""
Evaluation errors and diagnostics.

Error code ranges:
- E4xx: Evaluation (runtime) errors
- W4xx: Evaluation warnings

Every error kind is an ``EvalError`` carrying a ``Diagnostic``. Errors
propagate through every nested evaluation call; only the top-level
driver turns one into a user-visible report.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List
from .tokens import SourceSpan


class ErrorSeverity(Enum):
    """Severity levels for diagnostics."""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    HINT = "hint"


@dataclass
class Diagnostic:
    """A single diagnostic message (error, warning, etc.)."""
    code: str                       # E401, E404, etc.
    message: str                    # Human-readable message
    severity: ErrorSeverity
    span: Optional[SourceSpan] = None
    hints: List[str] = field(default_factory=list)

    def format(self) -> str:
        """Format the diagnostic for display."""
        header = f"{self.severity.value}[{self.code}]: {self.message}"
        parts = [f"{self.span.start}: {header}" if self.span else header]
        for hint in self.hints:
            parts.append(f"    = hint: {hint}")
        return "\n".join(parts)

    def to_json(self) -> dict:
        """Convert to JSON-serializable dict for tooling integration."""
        data = {
            "code": self.code,
            "message": self.message,
            "severity": self.severity.value,
            "hints": self.hints,
        }
        if self.span is not None:
            data["range"] = {
                "start": {"line": self.span.start.line, "column": self.span.start.column},
                "end": {"line": self.span.end.line, "column": self.span.end.column},
            }
        return data


class EvalError(Exception):
    """Base exception for evaluation errors."""

    def __init__(self, diagnostic: Diagnostic):
        self.diagnostic = diagnostic
        super().__init__(diagnostic.message)

    @property
    def code(self) -> str:
        return self.diagnostic.code

    def __str__(self) -> str:
        return self.diagnostic.format()


class TypeError(EvalError):
    """Operand, operator or property-target type mismatch (E401)."""
    pass


class UndefinedError(EvalError):
    """Unknown function or class name (E402)."""
    pass


class ArityError(EvalError):
    """Argument count does not match the declared parameters (E403)."""
    pass


class IndexError(EvalError):
    """Array index out of bounds, non-integral, or non-array target (E404)."""
    pass


class PropertyError(EvalError):
    """Missing property on an object (E405)."""
    pass


class UnexpectedNodeError(EvalError):
    """Structurally invalid tree shape reaching the evaluator (E406)."""
    pass


class MethodError(EvalError):
    """Method missing on the receiver, or not a function (E407)."""
    pass


class CallDepthError(EvalError):
    """Nested invocations exceeded the configured limit (E408)."""
    pass


def _diag(code: str, message: str, span: Optional[SourceSpan], hints: List[str] = None) -> Diagnostic:
    return Diagnostic(
        code=code,
        message=message,
        severity=ErrorSeverity.ERROR,
        span=span,
        hints=hints or [],
    )


# --- Type errors ---

def error_type_mismatch(message: str, span: SourceSpan = None) -> TypeError:
    """E401: Generic operand/target type mismatch."""
    return TypeError(_diag("E401", message, span))


def error_not_an_object(what: str, span: SourceSpan = None) -> TypeError:
    """E401: Property access or assignment on a non-object."""
    return TypeError(_diag("E401", f"{what} is not an object", span))


def error_not_a_function(name: str, found: str, span: SourceSpan = None) -> TypeError:
    """E401: A heap entry used as a function is something else."""
    return TypeError(_diag("E401", f"Expected function for {name}, found {found}", span))


def error_not_a_class(name: str, found: str, span: SourceSpan = None) -> TypeError:
    """E401: A heap entry used as a class is something else."""
    return TypeError(_diag("E401", f"Expected class for {name}, got {found}", span))


# --- Undefined names ---

def error_undefined_function(name: str, span: SourceSpan = None) -> UndefinedError:
    """E402: Unknown function name."""
    return UndefinedError(_diag("E402", f"Couldn't find identifier {name}", span))


def error_undefined_class(name: str, span: SourceSpan = None) -> UndefinedError:
    """E402: Unknown class name."""
    return UndefinedError(_diag("E402", f"Class {name} is not defined", span))


# --- Arity ---

def error_arity(kind: str, name: str, expected: int, got: int, span: SourceSpan = None) -> ArityError:
    """E403: Argument count mismatch for a function, method or constructor."""
    return ArityError(_diag(
        "E403",
        f"{kind} {name} takes {expected} argument(s), got {got}",
        span,
    ))


def error_missing_receiver(kind: str, name: str, span: SourceSpan = None) -> ArityError:
    """E403: A method or constructor declared without its receiver parameter."""
    return ArityError(_diag(
        "E403",
        f"{kind} {name} declares no parameters; the first parameter receives self",
        span,
    ))


# --- Indexing ---

def error_index_out_of_bounds(index: int, length: int, span: SourceSpan = None) -> IndexError:
    """E404: Index past the end of the array."""
    return IndexError(_diag("E404", f"Index {index} out of bounds for array of length {length}", span))


def error_bad_index(found: str, span: SourceSpan = None) -> IndexError:
    """E404: Index is not a non-negative integral number."""
    return IndexError(_diag(
        "E404",
        f"Index must be a non-negative whole number, found {found}",
        span,
    ))


def error_not_indexable(found: str, span: SourceSpan = None) -> IndexError:
    """E404: Indexing into something that is not an array."""
    return IndexError(_diag("E404", f"Type {found} isn't indexable", span))


# --- Properties and methods ---

def error_missing_property(owner: str, prop: str, span: SourceSpan = None) -> PropertyError:
    """E405: Property absent from an object."""
    return PropertyError(_diag("E405", f"{owner} has no property {prop}", span))


def error_missing_method(owner: str, method: str, span: SourceSpan = None) -> MethodError:
    """E407: Method absent from an object or not callable."""
    return MethodError(_diag("E407", f"{owner} has no method {method}", span))


# --- Tree shape ---

def error_unexpected_node(what: str, span: SourceSpan = None) -> UnexpectedNodeError:
    """E406: Malformed tree reached the evaluator."""
    return UnexpectedNodeError(_diag("E406", f"Unexpected {what}", span))


# --- Limits ---

def error_call_depth(limit: int, name: str, span: SourceSpan = None) -> CallDepthError:
    """E408: Too many nested invocations."""
    return CallDepthError(_diag(
        "E408",
        f"Call depth limit of {limit} exceeded while calling {name}",
        span,
        hints=["raise max_call_depth in the runtime configuration"],
    ))


class DiagnosticCollector:
    """Collects diagnostics during a run."""

    def __init__(self):
        self.diagnostics: List[Diagnostic] = []
        self._error_count = 0

    def add(self, diagnostic: Diagnostic) -> None:
        """Add a diagnostic."""
        self.diagnostics.append(diagnostic)
        if diagnostic.severity == ErrorSeverity.ERROR:
            self._error_count += 1

    def add_error(self, error: EvalError) -> None:
        """Add an error exception as a diagnostic."""
        self.add(error.diagnostic)

    @property
    def error_count(self) -> int:
        return self._error_count

    @property
    def has_errors(self) -> bool:
        return self._error_count > 0

    def format_all(self) -> str:
        """Format all diagnostics for display."""
        parts = [d.format() for d in self.diagnostics]
        if self._error_count > 0:
            parts.append(f"{self._error_count} error(s)")
        return "\n\n".join(parts)

    def to_json(self) -> dict:
        """Convert all diagnostics to JSON format."""
        return {
            "diagnostics": [d.to_json() for d in self.diagnostics],
            "error_count": self._error_count,
        }
