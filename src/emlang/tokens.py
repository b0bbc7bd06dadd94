"""
Closed enumerations shared by the parser boundary and the evaluator.

The external parser resolves operator text and keywords to these enums
once, so the evaluator dispatches on structure instead of comparing
operator characters or keyword strings at run time.
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Optional


class Operator(Enum):
    """Binary operators understood by the evaluator."""

    # --- Arithmetic ---
    PLUS = "+"
    MINUS = "-"
    STAR = "*"
    SLASH = "/"

    # --- Comparison ---
    EQ = "=="
    NE = "!="
    GE = ">="
    LE = "<="
    LT = "<"
    GT = ">"

    @property
    def symbol(self) -> str:
        return self.value

    @property
    def is_arithmetic(self) -> bool:
        return self in ARITHMETIC_OPERATORS

    @property
    def is_comparison(self) -> bool:
        return self in COMPARISON_OPERATORS

    @classmethod
    def from_symbol(cls, text: str) -> "Operator":
        """Map operator text (e.g. ``"<="``) to its enum member."""
        try:
            return cls(text)
        except ValueError:
            raise ValueError(f"unknown operator '{text}'") from None


ARITHMETIC_OPERATORS = frozenset({
    Operator.PLUS, Operator.MINUS, Operator.STAR, Operator.SLASH,
})

COMPARISON_OPERATORS = frozenset({
    Operator.EQ, Operator.NE, Operator.GE, Operator.LE, Operator.LT, Operator.GT,
})


class Keyword(Enum):
    """Keywords that appear in call position (``return x;``)."""
    RETURN = "return"

    @classmethod
    def from_text(cls, text: str) -> "Keyword":
        try:
            return cls(text)
        except ValueError:
            raise ValueError(f"unknown keyword '{text}'") from None


class LiteralKind(Enum):
    """Kinds of literal the parser can hand over."""
    NUMBER = auto()
    STRING = auto()
    BOOL = auto()


@dataclass(frozen=True)
class SourceLocation:
    """Represents a position in source code."""
    line: int           # 1-indexed line number
    column: int         # 1-indexed column number
    offset: int = 0     # 0-indexed character offset from start
    filename: Optional[str] = None

    def __str__(self) -> str:
        if self.filename:
            return f"{self.filename}:{self.line}:{self.column}"
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class SourceSpan:
    """Represents a range in source code."""
    start: SourceLocation
    end: SourceLocation

    def __str__(self) -> str:
        if self.start.filename:
            return f"{self.start.filename}:{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"
        return f"{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"
