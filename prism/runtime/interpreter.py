import math
from contextlib import contextmanager
from operator import add, ge, gt, le, lt, mul, sub
from typing import Callable, Dict, Iterator, List, Optional, TextIO, Type, TypeVar

from prism.language.prism_types import PrismObject, prism_equality, prism_object_to_str, prism_truth
from prism.lexing.token import Tk, Token
from prism.parsing.expr import *
from prism.parsing.stmt import *
from prism.runtime.environment import Environment
from prism.utilities import are_of_expected_type
from prism.utilities.error import NOT_REACHED, ErrorHandler, PrismRuntimeError


def prism_division(left: float, right: float) -> float:
    """IEEE 754 division: dividing by zero gives an infinity or NaN instead of raising."""
    try:
        return left / right
    except ZeroDivisionError:
        if left == 0 or math.isnan(left):
            return math.nan
        # The sign of the zero divisor matters: 1 / -0 is -inf.
        return math.copysign(math.inf, left) * math.copysign(1.0, right)


BINARY_OPERATIONS: Dict[Tk, Callable[[PrismObject, PrismObject], PrismObject]] = {
    Tk.PLUS: add,
    Tk.MINUS: sub,
    Tk.STAR: mul,
    Tk.SLASH: prism_division,
    Tk.GREATER: gt,
    Tk.GREATER_EQUAL: ge,
    Tk.LESS: lt,
    Tk.LESS_EQUAL: le,
    Tk.EQUAL_EQUAL: prism_equality,
    Tk.BANG_EQUAL: lambda l, r: not prism_equality(l, r),
}

E = TypeVar("E", BinaryExpr, LogicalExpr)


class Interpreter:
    """Tree-walking evaluator.

    Globals persist across calls to `interpret()`, so a REPL can feed it one line at a time."""
    _environment: Environment

    def __init__(self, error_handler: ErrorHandler, *, output: Optional[TextIO] = None) -> None:
        self._error_handler = error_handler
        self._output = output
        self.reinitialize_environment()

    def interpret(self, stmts: List[Stmt]) -> None:
        """Execute `stmts` in order. A runtime error abandons the remaining statements
        and is reported to the error handler."""
        try:
            for stmt in stmts:
                self._execute(stmt)
        except PrismRuntimeError as error:
            self._error_handler.err(error)

    def reinitialize_environment(self) -> None:
        self.globals = Environment()
        self._environment = self.globals

    # ~~~ Helper functions ~~~

    def _expect_number_operand(self, operator: Token, *operand: PrismObject) -> None:
        """Enforce that the `operand`s passed are numbers. Otherwise,
        emit an error at the given `operator` token."""
        if not are_of_expected_type({float}, *operand):
            raise PrismRuntimeError.at_token(
                operator,
                "Operand must be a number." if len(operand) == 1 else "Operands must be numbers."
            )

    def _expect_number_or_string_operand(self, operator: Token, *operand: PrismObject) -> None:
        """Enforce that the `operand`s passed are all numbers or all strings.
        Otherwise, emit an error at the given `operator` token."""
        if not are_of_expected_type({float, str}, *operand):
            raise PrismRuntimeError.at_token(operator, "Operands must be two numbers or two strings.")

    @contextmanager
    def _sub_environment(self) -> Iterator[Environment]:
        """Enter a fresh scope nested in the current one, and restore the current one
        on the way out, even if a runtime error is unwinding through the block."""
        outer = self._environment
        self._environment = Environment(outer)
        try:
            yield self._environment
        finally:
            self._environment = outer

    # ~~~ Statement interpreters ~~~

    def _execute(self, stmt: Stmt) -> None:
        match stmt:
            case BlockStmt():
                with self._sub_environment():
                    for inner_stmt in stmt.statements:
                        self._execute(inner_stmt)
            case ExpressionStmt():
                self._evaluate(stmt.expression)
            case IfStmt():
                if prism_truth(self._evaluate(stmt.condition)):
                    self._execute(stmt.then_branch)
                elif stmt.else_branch is not None:
                    self._execute(stmt.else_branch)
            case PrintStmt():
                print(prism_object_to_str(self._evaluate(stmt.expression)), file=self._output)
            case VarStmt():
                value: PrismObject = None
                if stmt.initializer is not None:
                    value = self._evaluate(stmt.initializer)
                self._environment.define(stmt.name.lexeme, value)
            case WhileStmt():
                while prism_truth(self._evaluate(stmt.condition)):
                    self._execute(stmt.body)
            case _:
                raise NOT_REACHED

    # ~~~ Expression interpreters ~~~

    def _evaluate(self, expr: Expr) -> PrismObject:
        match expr:
            case LiteralExpr():
                return expr.value
            case GroupingExpr():
                return self._evaluate(expr.expression)
            case VariableExpr():
                return self._environment.get(expr.name)
            case AssignmentExpr():
                value = self._evaluate(expr.value)
                self._environment.assign(expr.name, value)
                return value
            case LogicalExpr():
                return self._logical(expr)
            case UnaryExpr():
                return self._unary(expr)
            case BinaryExpr():
                return self._binary(expr)
            case _:
                raise NOT_REACHED

    def _logical(self, expr: LogicalExpr) -> PrismObject:
        """Short-circuit. The deciding operand is returned as is, not as a boolean.

        A run of `and`s and `or`s is folded from the innermost left operand outwards."""
        chain = self._left_chain(expr, LogicalExpr)
        try:
            value = self._evaluate(chain[-1].left)
            for node in reversed(chain):
                if node.operator.token_type is Tk.OR:
                    if prism_truth(value):
                        continue
                elif not prism_truth(value):
                    continue
                value = self._evaluate(node.right)
        except RecursionError:
            raise PrismRuntimeError.at_token(expr.operator, "Stack overflow.") from None
        return value

    def _unary(self, expr: UnaryExpr) -> PrismObject:
        """Evaluate the operand and then apply the correct unary operation.

        There are two unary operations: logical negation and arithmetic negation."""
        try:
            right = self._evaluate(expr.right)
        except RecursionError:
            raise PrismRuntimeError.at_token(expr.operator, "Stack overflow.") from None

        if (op := expr.operator.token_type) is Tk.BANG:
            return not prism_truth(right)
        if op is Tk.MINUS:
            self._expect_number_operand(expr.operator, right)
            return -right  # type: ignore  # Previous line ensures that right is of type float.

        raise NOT_REACHED

    def _binary(self, expr: BinaryExpr) -> PrismObject:
        """Evaluate the two operands, ensure that their types match, and finally
        apply the correct binary operation.

        The binary operations include comparisons, equality, the four arithmetic operations,
        and string concatenation. A left-associative run such as `1 + 2 + 3` is folded
        from the innermost left operand outwards instead of recursing once per operand."""
        chain = self._left_chain(expr, BinaryExpr)
        try:
            left = self._evaluate(chain[-1].left)
            for node in reversed(chain):
                left = self._binary_operation(node.operator, left, self._evaluate(node.right))
        except RecursionError:
            raise PrismRuntimeError.at_token(expr.operator, "Stack overflow.") from None
        return left

    def _binary_operation(self, operator: Token, left: PrismObject, right: PrismObject) -> PrismObject:
        if (op := operator.token_type) not in BINARY_OPERATIONS:
            raise NOT_REACHED
        # Note that we do not do implicit casts. That Pandora's box is not to be opened...
        if op is Tk.PLUS:  # Used for both arithmetic addition and string concatenation.
            self._expect_number_or_string_operand(operator, left, right)
        elif op in {Tk.BANG_EQUAL, Tk.EQUAL_EQUAL}:  # Equality comparisons are valid on all values.
            pass
        else:  # Arithmetic operations and comparisons.
            self._expect_number_operand(operator, left, right)
        return BINARY_OPERATIONS[op](left, right)

    @staticmethod
    def _left_chain(expr: E, node_type: Type[E]) -> List[E]:
        """Collect `expr` and every node of the same type down its left operands, outermost first."""
        chain = [expr]
        while isinstance(left := chain[-1].left, node_type):  # type: ignore
            chain.append(left)
        return chain
