"""
Tree-walking interpreter for emlang programs.

Evaluates AST nodes by dispatching on node type. Statement-level nodes
produce a Completion, which records whether a ``return`` is unwinding;
blocks and loops stop as soon as they see one, and the flag is dropped
at the function boundary, where the completion's value becomes the
call's result.
"""

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, List, Optional, TextIO, Tuple
import logging
import math
import sys

from .values import (
    Value, ValueKind, FunctionData,
    null_val, number_val, string_val, bool_val, array_val, nameref_val,
    function_val, wrap_value, values_equal, compare_values, display,
)
from .context import Frame, Heap, create_frame
from .builtins import BuiltinRegistry
from . import arrays, objects

from ..ast import (
    AstNode, Block, TailReturn, ExpressionStatement,
    IfStatement, WhileStatement, ForStatement, FunctionDef, ClassDef,
    Literal, Identifier, Reference, BinaryOp, MemberAccess, IndexAccess,
    ArrayLiteral, FunctionCall, KeywordCall, MethodCall, NewExpr, Assignment,
)
from ..config import RuntimeConfig
from ..errors import (
    EvalError, Diagnostic, DiagnosticCollector,
    error_type_mismatch, error_not_an_object, error_not_a_function, error_not_a_class,
    error_undefined_function, error_undefined_class, error_arity,
    error_missing_property, error_missing_method, error_unexpected_node,
    error_call_depth, error_missing_receiver,
)
from ..tokens import Keyword, LiteralKind, Operator, SourceSpan

logger = logging.getLogger(__name__)

# Python frames used by one language-level call, with room for nested
# expressions; sizes the recursion limit while a program runs.
FRAMES_PER_CALL = 30
MAX_RECURSION_LIMIT = 8000


@dataclass
class Completion:
    """The outcome of executing a node: its value, and whether a return is in progress."""
    value: Value
    returning: bool = False


@dataclass
class ExecutionResult:
    """Result of running a program."""
    success: bool
    value: Optional[Value] = None
    error_message: Optional[str] = None
    diagnostic: Optional[Diagnostic] = None

    def report(self) -> str:
        """User-facing summary of a failed run."""
        if self.success:
            return ""
        return f"Interpreter crashed because: {self.error_message}"


class Interpreter:
    """
    Tree-walking evaluator.

    Owns the heap (named functions and class templates) and the built-in
    registry; frames are created per invocation and passed explicitly.
    """

    def __init__(
        self,
        config: RuntimeConfig = None,
        builtins: BuiltinRegistry = None,
        output: TextIO = None,
    ):
        """
        Initialize the interpreter.

        Args:
            config: Runtime settings (entry point, call depth limit, disabled built-ins)
            builtins: Built-in registry; a fresh one writing to ``output`` by default
            output: Stream for ``print`` (defaults to sys.stdout)
        """
        self.config = config or RuntimeConfig()
        self.heap = Heap()
        if builtins is None:
            builtins = BuiltinRegistry(output=output, render=self.display)
        elif self.config.disabled_builtins:
            # A caller's registry may be shared; disable names on a private copy.
            builtins = builtins.copy()
        for name in self.config.disabled_builtins:
            builtins.unregister(name)
        self.builtins = builtins
        self.diagnostics = DiagnosticCollector()
        self._depth = 0

    # ------------------------------------------------------------------
    # Program entry
    # ------------------------------------------------------------------

    def run(self, tree: AstNode, args: Any = None) -> ExecutionResult:
        """
        Run a whole program.

        Walks the top-level tree (registering every function and class and
        running any top-level statements), then calls the entry point
        with ``args`` as its single argument. An evaluation error halts
        the run and is reported in the result.
        """
        frame = create_frame("global")
        try:
            self.load(tree, frame)
            value = self.call_entry(wrap_value(args))
        except RecursionError:
            # Nesting too deep outside any call (e.g. a huge expression tree).
            return self._halted(error_call_depth(self.config.max_call_depth, self.config.entry_point))
        except EvalError as e:
            return self._halted(e)
        return ExecutionResult(success=True, value=value)

    def _halted(self, error: EvalError) -> ExecutionResult:
        self.diagnostics.add_error(error)
        logger.debug("run halted: %s", error.diagnostic.message)
        return ExecutionResult(
            success=False,
            error_message=error.diagnostic.message,
            diagnostic=error.diagnostic,
        )

    def load(self, tree: AstNode, frame: Frame) -> Value:
        """Walk the top-level tree in ``frame``."""
        value = self.execute(tree, frame).value
        logger.debug("loaded program; heap holds %s", self.heap.names())
        return value

    def call_entry(self, argument: Value) -> Value:
        """Call the entry-point function with one externally supplied value."""
        name = self.config.entry_point
        func = self._lookup_function(name, None)
        if len(func.params) != 1:
            raise error_arity("Function", name, len(func.params), 1)
        callee = create_frame(name, {func.params[0]: argument})
        return self._run_body(name, func.body, callee, None)

    def run_interactive(self, tree: AstNode, frame: Frame) -> str:
        """
        Evaluate a tree in a long-lived frame and return its display text.

        Used by interactive sessions that keep one frame (and this
        interpreter's heap) across inputs. Errors propagate to the caller.
        """
        return self.display(self.evaluate(tree, frame))

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def evaluate(self, node: AstNode, frame: Frame) -> Value:
        """Evaluate a node to a Value (a return signal, if any, is not propagated)."""
        return self.execute(node, frame).value

    def execute(self, node: AstNode, frame: Frame) -> Completion:
        """Execute a node, reporting whether a ``return`` is unwinding."""
        if isinstance(node, Block):
            return self._execute_block(node, frame)
        elif isinstance(node, TailReturn):
            return self.execute(node.value, frame)
        elif isinstance(node, ExpressionStatement):
            return self.execute(node.expression, frame)
        elif isinstance(node, IfStatement):
            return self._execute_if(node, frame)
        elif isinstance(node, WhileStatement):
            return self._execute_while(node, frame)
        elif isinstance(node, ForStatement):
            return self._execute_for(node, frame)
        elif isinstance(node, KeywordCall):
            return self._execute_keyword(node, frame)
        return Completion(self._evaluate_expression(node, frame))

    def _evaluate_expression(self, expr: AstNode, frame: Frame) -> Value:
        if isinstance(expr, Literal):
            return self._eval_literal(expr)
        elif isinstance(expr, Identifier):
            return frame.get(expr.name)
        elif isinstance(expr, Reference):
            return nameref_val(expr.name)
        elif isinstance(expr, BinaryOp):
            return self._eval_binary_op(expr, frame)
        elif isinstance(expr, Assignment):
            return self._eval_assignment(expr, frame)
        elif isinstance(expr, FunctionCall):
            return self.call(expr.callee, expr.arguments, frame, expr.span)
        elif isinstance(expr, MethodCall):
            return self.invoke_method(expr.object, expr.method, expr.arguments, frame, expr.span)
        elif isinstance(expr, NewExpr):
            return self.construct(expr.class_name, expr.arguments, frame, expr.span)
        elif isinstance(expr, MemberAccess):
            return self._eval_member_access(expr, frame)
        elif isinstance(expr, IndexAccess):
            container = self.evaluate(expr.object, frame)
            index = self.evaluate(expr.index, frame)
            return arrays.get_item(container, index, expr.span)
        elif isinstance(expr, ArrayLiteral):
            return array_val([self.evaluate(e, frame) for e in expr.elements])
        elif isinstance(expr, FunctionDef):
            return self.define_function(expr)
        elif isinstance(expr, ClassDef):
            return self.define_class(expr)
        elif isinstance(expr, AstNode):
            # Node kinds this evaluator does not know evaluate to null.
            return null_val()
        raise error_unexpected_node(f"{type(expr).__name__} in syntax tree")

    # ------------------------------------------------------------------
    # Statements and control flow
    # ------------------------------------------------------------------

    def _execute_block(self, block: Block, frame: Frame) -> Completion:
        for stmt in block.statements:
            if isinstance(stmt, TailReturn):
                return self.execute(stmt.value, frame)
            completion = self.execute(stmt, frame)
            if completion.returning:
                return completion
        return Completion(null_val())

    def _execute_if(self, stmt: IfStatement, frame: Frame) -> Completion:
        if self.evaluate(stmt.condition, frame).is_true():
            return self.execute(stmt.then_branch, frame)
        if stmt.else_branch is None:
            return Completion(null_val())
        return self.execute(stmt.else_branch, frame)

    def _execute_while(self, stmt: WhileStatement, frame: Frame) -> Completion:
        result = null_val()
        while self.evaluate(stmt.condition, frame).is_true():
            completion = self.execute(stmt.body, frame)
            if completion.returning:
                return completion
            result = completion.value
        return Completion(result)

    def _execute_for(self, stmt: ForStatement, frame: Frame) -> Completion:
        result = null_val()
        if stmt.initializer is not None:
            self.evaluate(stmt.initializer, frame)
        while self.evaluate(stmt.condition, frame).is_true():
            completion = self.execute(stmt.body, frame)
            if completion.returning:
                return completion
            result = completion.value
            if stmt.increment is not None:
                self.evaluate(stmt.increment, frame)
        return Completion(result)

    def _execute_keyword(self, call: KeywordCall, frame: Frame) -> Completion:
        if call.keyword == Keyword.RETURN:
            value = null_val() if call.operand is None else self.evaluate(call.operand, frame)
            return Completion(value, returning=True)
        raise error_unexpected_node(f"keyword {call.keyword!r}", call.span)

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _eval_literal(self, lit: Literal) -> Value:
        if lit.literal_type == LiteralKind.NUMBER:
            return number_val(lit.value)
        elif lit.literal_type == LiteralKind.STRING:
            return string_val(lit.value)
        elif lit.literal_type == LiteralKind.BOOL:
            return bool_val(lit.value)
        raise error_unexpected_node(f"literal type {lit.literal_type!r}", lit.span)

    def _resolve(self, value: Value, frame: Frame) -> Value:
        """Replace a NameRef by the value currently bound to its name."""
        if value.kind == ValueKind.NAMEREF:
            return frame.get(value.data)
        return value

    def _eval_binary_op(self, op: BinaryOp, frame: Frame) -> Value:
        left = self.evaluate(op.left, frame)
        right = self.evaluate(op.right, frame)

        if op.operator.is_comparison:
            return bool_val(_compare(op.operator, left, right))

        left = self._resolve(left, frame)
        right = self._resolve(right, frame)

        # Only a string on the left concatenates; "x" on the right reads as 0.
        if op.operator == Operator.PLUS and left.kind == ValueKind.STRING:
            return string_val(left.data + self.display(right))

        a = _as_number(left)
        b = _as_number(right)
        if op.operator == Operator.PLUS:
            return number_val(a + b)
        elif op.operator == Operator.MINUS:
            return number_val(a - b)
        elif op.operator == Operator.STAR:
            return number_val(a * b)
        elif op.operator == Operator.SLASH:
            return number_val(_divide(a, b))
        raise error_type_mismatch(f"Invalid operator: {op.operator.symbol}", op.span)

    def _eval_member_access(self, access: MemberAccess, frame: Frame) -> Value:
        obj = self.evaluate(access.object, frame)
        if obj.kind != ValueKind.OBJECT:
            raise error_not_an_object(self.display(obj), access.span)
        prop = obj.get_prop(access.member)
        if prop is None:
            raise error_missing_property(objects.class_name(obj), access.member, access.span)
        return prop

    def _eval_assignment(self, assign: Assignment, frame: Frame) -> Value:
        target = assign.target
        if isinstance(target, Identifier):
            value = self.evaluate(assign.value, frame)
            frame.set(target.name, value)
            return value.clone()
        if not isinstance(target, (IndexAccess, MemberAccess)):
            raise error_unexpected_node(
                f"assignment target {type(target).__name__}", assign.span
            )

        root, steps = _place_path(target)
        # A root that is not a plain variable is a temporary; writes to it
        # are not observable afterwards.
        temporary = None if isinstance(root, Identifier) else self.evaluate(root, frame)
        keys = [
            (self.evaluate(key, frame) if is_index else key, is_index, span)
            for key, is_index, span in steps
        ]
        value = self.evaluate(assign.value, frame)

        if temporary is not None:
            container = temporary
        else:
            container = frame.slot(root.name) or null_val()

        for key, is_index, span in keys[:-1]:
            container = self._descend(container, key, is_index, span)

        key, is_index, span = keys[-1]
        if is_index:
            arrays.set_item(container, key, value, span)
        else:
            if container.kind != ValueKind.OBJECT:
                raise error_not_an_object(self.display(container), span)
            container.set_prop(key, value)
        return value.clone()

    def _descend(self, container: Value, key, is_index: bool, span: SourceSpan) -> Value:
        """Step one level into a container, returning the stored child."""
        if is_index:
            return arrays.item_slot(container, key, strict=True, span=span)
        if container.kind != ValueKind.OBJECT:
            raise error_not_an_object(self.display(container), span)
        child = container.get_prop(key)
        if child is None:
            raise error_missing_property(objects.class_name(container), key, span)
        return child

    # ------------------------------------------------------------------
    # Definitions
    # ------------------------------------------------------------------

    def define_function(self, node: FunctionDef) -> Value:
        """Register a named function in the heap."""
        func = function_val(node.name, node.parameters, node.body)
        self.heap.define(node.name, func)
        logger.debug("defined function %s", func.data.signature())
        return func.clone()

    def define_class(self, node: ClassDef) -> Value:
        """Register a class template in the heap; its body may only define methods."""
        if not isinstance(node.body, Block):
            raise error_unexpected_node(
                f"{type(node.body).__name__} as body of class {node.name}", node.span
            )
        methods = {}
        for member in node.body.statements:
            if not isinstance(member, FunctionDef):
                raise error_unexpected_node(
                    f"{type(member).__name__} in class definition", member.span
                )
            methods[member.name] = function_val(member.name, member.parameters, member.body)

        template = objects.make_template(node.name, methods)
        self.heap.define(node.name, template)
        logger.debug("defined class %s with members %s", node.name, sorted(methods))
        return template.clone()

    # ------------------------------------------------------------------
    # Calls
    # ------------------------------------------------------------------

    def call(self, name: str, args: List[AstNode], frame: Frame, span: SourceSpan = None) -> Value:
        """
        Call a built-in or heap function by name.

        Arguments are evaluated in the caller's frame. A NameRef argument
        is resolved against the caller's frame before binding, so a bare
        identifier forwards its current value.
        """
        builtin = self.builtins.get_function(name)
        if builtin is not None:
            values = [self.evaluate(arg, frame) for arg in args]
            return builtin(values)

        func = self._lookup_function(name, span)
        if len(args) != len(func.params):
            raise error_arity("Function", name, len(func.params), len(args), span)

        callee = create_frame(name)
        for param, arg in zip(func.params, args):
            callee.set(param, self._argument(arg, frame))
        return self._run_body(name, func.body, callee, span)

    def invoke_method(
        self,
        receiver_expr: AstNode,
        method_name: str,
        args: List[AstNode],
        frame: Frame,
        span: SourceSpan = None,
    ) -> Value:
        """
        Call a method on the object ``receiver_expr`` evaluates to.

        The method runs with a copy of the receiver bound to ``self``;
        changes it makes to ``self`` do not reach the caller's variable.

        >>> from emlang import ast
        >>> from emlang.runtime import create_frame
        >>> interp = Interpreter()
        >>> bump = ast.FunctionDef("bump", ["self"], ast.Block([
        ...     ast.ExpressionStatement(ast.Assignment(
        ...         ast.MemberAccess(ast.Identifier("self"), "x"),
        ...         ast.Literal(1.0, LiteralKind.NUMBER))),
        ... ]))
        >>> frame = create_frame()
        >>> _ = interp.load(ast.Block([
        ...     ast.ClassDef("Counter", ast.Block([bump])),
        ...     ast.Assignment(ast.Identifier("o"), ast.NewExpr("Counter", [])),
        ... ]), frame)
        >>> interp.invoke_method(ast.Identifier("o"), "bump", [], frame)
        Value(None, NULL)
        >>> frame.get("o").get_prop("x") is None
        True
        """
        receiver = self.evaluate(receiver_expr, frame)
        if receiver.kind != ValueKind.OBJECT:
            raise error_not_an_object(self.display(receiver), span)

        owner = objects.class_name(receiver)
        method = objects.find_method(receiver, method_name)
        if method is None:
            raise error_missing_method(owner, method_name, span)

        qualified = f"{owner}.{method_name}"
        self._check_receiver_arity("Method", qualified, method, args, span)
        callee = create_frame(qualified, {objects.RECEIVER: receiver})
        for param, arg in zip(method.params[1:], args):
            callee.set(param, self._argument(arg, frame))
        return self._run_body(qualified, method.body, callee, span)

    def construct(self, name: str, args: List[AstNode], frame: Frame, span: SourceSpan = None) -> Value:
        """
        Build an instance of class ``name``.

        The instance starts as a clone of the template; when the class
        has a ``~init`` constructor it runs with the clone bound to
        ``self``, and the final state of ``self`` is the instance.
        """
        template = self.heap.lookup(name)
        if template is None:
            raise error_undefined_class(name, span)
        if template.kind != ValueKind.OBJECT:
            raise error_not_a_class(name, template.kind.type_name, span)

        instance = template.clone()
        init = objects.constructor(template)
        if init is None:
            logger.debug("constructed %s without constructor", name)
            return instance

        qualified = f"{name}.{objects.INIT_PROP}"
        self._check_receiver_arity("Constructor for", name, init, args, span)
        callee = create_frame(qualified, {objects.RECEIVER: instance})
        for param, arg in zip(init.params[1:], args):
            callee.set(param, self._argument(arg, frame))
        self._run_body(qualified, init.body, callee, span)
        logger.debug("constructed %s", name)
        return callee.slot(objects.RECEIVER) or null_val()

    def _check_receiver_arity(self, kind: str, name: str, func: FunctionData,
                              args: List[AstNode], span: SourceSpan) -> None:
        # The first declared parameter is the receiver, not a user argument.
        if not func.params:
            raise error_missing_receiver(kind, name, span)
        expected = len(func.params) - 1
        if len(args) != expected:
            raise error_arity(kind, name, expected, len(args), span)

    def _lookup_function(self, name: str, span: Optional[SourceSpan]) -> FunctionData:
        func = self.heap.lookup(name)
        if func is None:
            raise error_undefined_function(name, span)
        if func.kind != ValueKind.FUNCTION:
            raise error_not_a_function(name, func.kind.type_name, span)
        return func.data

    def _argument(self, arg: AstNode, frame: Frame) -> Value:
        return self._resolve(self.evaluate(arg, frame), frame)

    def _run_body(self, name: str, body: AstNode, frame: Frame, span: Optional[SourceSpan]) -> Value:
        with self._invocation(name, span):
            return self.execute(body, frame).value

    @contextmanager
    def _invocation(self, name: str, span: Optional[SourceSpan]):
        """
        Track nesting depth across function, method and constructor bodies.

        The outermost invocation raises Python's recursion limit to fit
        ``max_call_depth`` (up to MAX_RECURSION_LIMIT) for its duration.
        Should Python's limit still be reached first, the RecursionError is
        reported as a CallDepthError like any other overly deep nesting.
        """
        limit = self.config.max_call_depth
        if self._depth >= limit:
            raise error_call_depth(limit, name, span)
        saved = sys.getrecursionlimit() if self._depth == 0 else None
        if saved is not None:
            sys.setrecursionlimit(max(saved, min(MAX_RECURSION_LIMIT, saved + limit * FRAMES_PER_CALL)))
        self._depth += 1
        logger.debug("enter %s (depth %d)", name, self._depth)
        try:
            yield
        except RecursionError:
            raise error_call_depth(limit, name, span) from None
        finally:
            self._depth -= 1
            if saved is not None:
                sys.setrecursionlimit(saved)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def display(self, value: Value) -> str:
        """Render a value, running ``~display`` methods for objects that define one."""
        return display(value, self._render_object)

    def _render_object(self, obj: Value) -> Optional[str]:
        method = objects.display_method(obj)
        if method is None:
            return None
        callee = create_frame(objects.DISPLAY_PROP, {objects.RECEIVER: obj.clone()})
        result = self._run_body(f"{objects.class_name(obj)}.{objects.DISPLAY_PROP}",
                                method.body, callee, None)
        return self.display(result)


# ----------------------------------------------------------------------
# Operator helpers
# ----------------------------------------------------------------------

def _as_number(v: Value) -> float:
    """Arithmetic reads anything but a number as 0."""
    if v.kind == ValueKind.NUMBER:
        return v.data
    return 0.0


def _divide(a: float, b: float) -> float:
    """IEEE-754 division: x/0 is +-inf, 0/0 and nan/0 are nan."""
    if b != 0:
        return a / b
    if a == 0 or math.isnan(a):
        return math.nan
    return math.copysign(math.inf, a) * math.copysign(1.0, b)


def _compare(op: Operator, left: Value, right: Value) -> bool:
    if op == Operator.EQ:
        return values_equal(left, right)
    if op == Operator.NE:
        return not values_equal(left, right)
    order = compare_values(left, right)
    if order is None:
        return False
    if op == Operator.LT:
        return order < 0
    if op == Operator.GT:
        return order > 0
    if op == Operator.LE:
        return order <= 0
    return order >= 0


def _place_path(target: AstNode) -> Tuple[AstNode, List[Tuple[Any, bool, Optional[SourceSpan]]]]:
    """
    Split an assignment target like ``a[i].x[j]`` into its root and steps.

    Each step is (index expression or property name, is_index, span),
    ordered from the root outward.
    """
    steps = []
    node = target
    while isinstance(node, (IndexAccess, MemberAccess)):
        if isinstance(node, IndexAccess):
            steps.append((node.index, True, node.span))
        else:
            steps.append((node.member, False, node.span))
        node = node.object
    steps.reverse()
    return node, steps


# Convenience function for simple execution
def run_program(
    tree: AstNode,
    args: Any = None,
    config: RuntimeConfig = None,
    output: TextIO = None,
) -> ExecutionResult:
    """
    Run a program tree with a fresh interpreter.

    This is a convenience wrapper around Interpreter.run().
    """
    interpreter = Interpreter(config=config, output=output)
    return interpreter.run(tree, args)
