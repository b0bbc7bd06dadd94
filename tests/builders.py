"""
Shorthand constructors for building syntax trees in tests.

The evaluator receives trees from an external parser; these helpers
stand in for it so each test reads close to the source it models.
"""

import io

from emlang import ast, Interpreter, create_frame
from emlang.tokens import Keyword, LiteralKind, Operator


def num(x):
    return ast.Literal(float(x), LiteralKind.NUMBER)


def text(s):
    return ast.Literal(s, LiteralKind.STRING)


def boolean(b):
    return ast.Literal(b, LiteralKind.BOOL)


def name(n):
    return ast.Identifier(n)


def ref(n):
    return ast.Reference(n)


def op(left, symbol, right):
    return ast.BinaryOp(left, Operator.from_symbol(symbol), right)


def assign(target, value):
    if isinstance(target, str):
        target = ast.Identifier(target)
    return ast.ExpressionStatement(ast.Assignment(target, value))


def call(callee, *args):
    return ast.FunctionCall(callee, list(args))


def ret(value=None):
    return ast.ExpressionStatement(ast.KeywordCall(Keyword.RETURN, value))


def stmt(expr):
    return ast.ExpressionStatement(expr)


def show(*args):
    return stmt(call("print", *args))


def block(*statements):
    return ast.Block(list(statements))


def tail(expr):
    return ast.TailReturn(expr)


def func(fname, params, *body):
    return ast.FunctionDef(fname, list(params), block(*body))


def klass(cname, *methods):
    return ast.ClassDef(cname, block(*methods))


def new(cname, *args):
    return ast.NewExpr(cname, list(args))


def method(obj, mname, *args):
    if isinstance(obj, str):
        obj = ast.Identifier(obj)
    return ast.MethodCall(obj, mname, list(args))


def member(obj, prop):
    if isinstance(obj, str):
        obj = ast.Identifier(obj)
    return ast.MemberAccess(obj, prop)


def index(obj, *indices):
    node = ast.Identifier(obj) if isinstance(obj, str) else obj
    for i in indices:
        node = ast.IndexAccess(node, i)
    return node


def arr(*elements):
    return ast.ArrayLiteral(list(elements))


def if_(condition, then, else_=None):
    return ast.IfStatement(condition, then, else_)


def while_(condition, *body):
    return ast.WhileStatement(condition, block(*body))


def for_(init, condition, increment, *body):
    return ast.ForStatement(init, condition, increment, block(*body))


def load(*statements, config=None):
    """
    Walk a top-level program and capture what it prints.

    Returns (printed text, interpreter, global frame).
    """
    out = io.StringIO()
    interp = Interpreter(config=config, output=out)
    frame = create_frame("global")
    interp.load(block(*statements), frame)
    return out.getvalue(), interp, frame
