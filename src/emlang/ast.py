"""
Abstract Syntax Tree (AST) node definitions for emlang.

The tree is built by an external parser and handed to the evaluator
fully formed. Every node may carry a source span for error reporting;
nodes built by hand (tests, embedding code) can leave it out.
"""

from dataclasses import dataclass, field
from typing import Optional, List, Union
from abc import ABC
from .tokens import SourceSpan, Operator, Keyword, LiteralKind


# =============================================================================
# Base Classes
# =============================================================================

@dataclass
class AstNode(ABC):
    """Base class for all AST nodes."""
    span: Optional[SourceSpan] = field(default=None, kw_only=True, compare=False)


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass
class Expression(AstNode):
    """Base class for all expressions."""
    pass


@dataclass
class Literal(Expression):
    """A literal value (number, string, bool)."""
    value: Union[float, str, bool]
    literal_type: LiteralKind


@dataclass
class Identifier(Expression):
    """A variable reference, resolved against the current frame."""
    name: str


@dataclass
class Reference(Expression):
    """
    A bare identifier in deferred position.

    Evaluates to a NameRef value instead of the bound value; consumers
    (arithmetic, argument binding) resolve it against their frame.
    """
    name: str


@dataclass
class BinaryOp(Expression):
    """An arithmetic or comparison operation (e.g., a + b, x < y)."""
    left: Expression
    operator: Operator
    right: Expression


@dataclass
class MemberAccess(Expression):
    """Property access (e.g., point.x)."""
    object: Expression
    member: str


@dataclass
class IndexAccess(Expression):
    """Index access (e.g., grid[1][2])."""
    object: Expression
    index: Expression


@dataclass
class ArrayLiteral(Expression):
    """An array literal (e.g., [1, 2, 3])."""
    elements: List[Expression]


@dataclass
class FunctionCall(Expression):
    """A call to a built-in or user function by name (e.g., add(1, 2))."""
    callee: str
    arguments: List[Expression]


@dataclass
class KeywordCall(Expression):
    """A keyword in call position (e.g., return a + b)."""
    keyword: Keyword
    operand: Optional[Expression] = None


@dataclass
class MethodCall(Expression):
    """A method call on an object (e.g., counter.bump(2))."""
    object: Expression
    method: str
    arguments: List[Expression]


@dataclass
class NewExpr(Expression):
    """Object construction (e.g., new Point(1, 2))."""
    class_name: str
    arguments: List[Expression]


@dataclass
class Assignment(Expression):
    """
    Assignment to a name, an array slot or an object property.

    The target is an Identifier, an IndexAccess chain (a[i][j]) or a
    MemberAccess (self.x).
    """
    target: Expression
    value: Expression


# =============================================================================
# Statement Nodes
# =============================================================================

@dataclass
class Statement(AstNode):
    """Base class for all statements."""
    pass


@dataclass
class Block(Statement):
    """A sequence of statements."""
    statements: List[AstNode]


@dataclass
class TailReturn(Statement):
    """
    The trailing expression of a block.

    The block stops here and yields the expression's value as its own.
    """
    value: AstNode


@dataclass
class ExpressionStatement(Statement):
    """An expression evaluated for its side effects."""
    expression: AstNode


@dataclass
class IfStatement(Statement):
    """
    An if/elseif/else chain.

    ``else_branch`` is a Block (else), another IfStatement (elseif) or None.
    """
    condition: Expression
    then_branch: Block
    else_branch: Optional[Union["IfStatement", Block]] = None


@dataclass
class WhileStatement(Statement):
    """A while loop."""
    condition: Expression
    body: Block


@dataclass
class ForStatement(Statement):
    """A C-style for loop: for (init; condition; increment) { ... }."""
    initializer: Optional[AstNode]
    condition: Expression
    increment: Optional[AstNode]
    body: Block


@dataclass
class FunctionDef(Statement):
    """A named function definition (also used for methods inside a class)."""
    name: str
    parameters: List[str]
    body: Block


@dataclass
class ClassDef(Statement):
    """A class definition; the body holds only FunctionDef nodes."""
    name: str
    body: Block
