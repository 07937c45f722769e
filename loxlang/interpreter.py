"""Interpreter.

This is a tree-walk interpreter for evaluating AST nodes produced by the parser and annotated
by the resolver. It supports arithmetic, variables, closures, function calls, conditionals,
loops, and output statements.

1. Execution Model
The interpreter evaluates the abstract syntax tree in a top-down, recursive manner.
Statements are executed via `execute()` and expressions are evaluated via `evaluate()`.

2. Environment
The interpreter keeps a chain of `Environment` objects. The global environment lives as long
as the interpreter; blocks and function calls push a new environment and restore the previous
one on every exit path. A function call's environment encloses the function's closure, not
the caller's environment.

3. Variable Lookup
The resolver hands over a map from node id to scope distance. A variable with a distance is
read exactly that many environments out; one without is a global looked up by name.

4. Control Flow
`return` and `break` are not exceptions. `execute()` returns None when a statement completes
normally, or a `ReturnSignal` / `BreakSignal` that enclosing blocks pass up until a function
call or loop consumes it.

5. Error Handling
Runtime errors (type mismatches, undefined variables, bad calls, stack overflow) are raised as
`LoxRuntimeError` with the offending token and end the run.


File: interpreter.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

import math
from dataclasses import dataclass
from typing import Callable

from loxlang.callables import LoxCallable, LoxFunction, NativeFunction, clock
from loxlang.environment import Environment
from loxlang.exceptions import ArityMismatchError, ErrorKind, LoxRuntimeError
from loxlang.lexer import Token, TokenType
from loxlang.nodes import (
    Assign,
    Binary,
    Block,
    Break,
    Call,
    Expr,
    Expression,
    Function,
    Grouping,
    If,
    Literal,
    Logical,
    Print,
    Return,
    Stmt,
    Unary,
    Var,
    Variable,
    While,
)


@dataclass
class ReturnSignal:
    """A `return` unwinding towards the function call that owns it."""
    value: object


class BreakSignal:
    """A `break` unwinding towards the innermost loop."""


BREAK = BreakSignal()


def is_truthy(value: object) -> bool:
    """
    Only nil and false are falsy.
    """
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(left: object, right: object) -> bool:
    """
    Equality without coercion: values of different kinds are never equal.
    """
    if type(left) is not type(right):
        return False
    return left == right


def stringify(value: object) -> str:
    """
    Render a value the way `print` shows it.
    """
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "inf" if value > 0 else "-inf"
        if value.is_integer():
            if value == 0 and math.copysign(1.0, value) < 0:
                return "-0"
            return str(int(value))
        return repr(value)
    return str(value)


def divide(left: float, right: float) -> float:
    """
    IEEE-754 division: dividing by zero gives an infinity or NaN.
    """
    if right == 0:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


class Interpreter:
    """Tree-walk interpreter for loxlang."""

    def __init__(self, output: Callable[[str], None] | None = None, file: str | None = None):
        """
        Initialize the interpreter.

        Parameters:
            output (Callable[[str], None]): Sink for `print`. Defaults to the built-in print.
            file (str): Name of the script, used in error messages.
        """
        self.output = output if output is not None else print
        self.file = file
        self.globals = Environment()
        self.environment = self.globals
        self.locals: dict[int, int] = {}
        # First node id free for the next parse fed to this interpreter.
        self.node_count = 0

        self.define_native("clock", 0, clock)

    def define_native(self, name: str, arity: int, function: Callable[..., object]) -> None:
        """
        Install a host function into the global environment.
        """
        self.globals.define(name, NativeFunction(name, arity, function))

    def resolve(self, locals_: dict[int, int]) -> None:
        """
        Merge scope distances produced by the resolver.
        """
        self.locals.update(locals_)

    def interpret(self, statements: list[Stmt]) -> None:
        """
        Execute a resolved program.

        Raises:
            LoxRuntimeError: On the first runtime error. Remaining statements are skipped.
        """
        try:
            for stmt in statements:
                self.execute(stmt)
        except RecursionError:
            raise LoxRuntimeError(
                ErrorKind.STACK_OVERFLOW, "Stack overflow", file=self.file
            ) from None
        except LoxRuntimeError as e:
            if e.file is None:
                e.file = self.file
            raise

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def execute(self, stmt: Stmt) -> ReturnSignal | BreakSignal | None:
        """
        Execute one statement.

        Returns:
            None on normal completion, otherwise the signal to propagate.
        """
        match stmt:
            case Expression(expression=expr):
                self.evaluate(expr)

            case Print(expression=expr):
                self.output(stringify(self.evaluate(expr)))

            case Var(name=name, initializer=initializer):
                # The name is bound to nil while its initializer runs, so a
                # global `var a = a;` reads nil instead of failing.
                if name.lexeme not in self.environment.values:
                    self.environment.define(name.lexeme, None)
                value = None
                if initializer is not None:
                    value = self.evaluate(initializer)
                self.environment.define(name.lexeme, value)

            case Block(statements=statements):
                return self.execute_block(statements, Environment(self.environment))

            case If(condition=condition, then_branch=then_branch, else_branch=else_branch):
                if is_truthy(self.evaluate(condition)):
                    return self.execute(then_branch)
                if else_branch is not None:
                    return self.execute(else_branch)

            case While(condition=condition, body=body):
                while is_truthy(self.evaluate(condition)):
                    signal = self.execute(body)
                    if signal is BREAK:
                        break
                    if signal is not None:
                        return signal

            case Function(name=name):
                self.environment.define(name.lexeme, LoxFunction(stmt, self.environment))

            case Return(value=value):
                result = None
                if value is not None:
                    result = self.evaluate(value)
                return ReturnSignal(result)

            case Break():
                return BREAK

            case _:
                raise TypeError(f"Unknown statement type: {type(stmt).__name__}")
        return None

    def execute_block(self, statements: list[Stmt], environment: Environment):
        """
        Execute statements inside ``environment``, restoring the current
        environment afterwards however the block exits.
        """
        previous = self.environment
        self.environment = environment
        try:
            for stmt in statements:
                signal = self.execute(stmt)
                if signal is not None:
                    return signal
            return None
        finally:
            self.environment = previous

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def evaluate(self, expr: Expr) -> object:
        """
        Recursively evaluate an expression node and return its value.

        Raises:
            LoxRuntimeError: On type errors, undefined variables and bad calls.
        """
        match expr:
            case Literal(value=value):
                return value

            case Grouping(expression=inner):
                return self.evaluate(inner)

            case Unary(operator=operator, right=right):
                operand = self.evaluate(right)
                if operator.type == TokenType.BANG:
                    return not is_truthy(operand)
                _check_number_operand(operator, operand)
                return -operand

            case Binary():
                return self._eval_binary(expr)

            case Logical(left=left, operator=operator, right=right):
                lhs = self.evaluate(left)
                if operator.type == TokenType.OR:
                    if is_truthy(lhs):
                        return lhs
                elif not is_truthy(lhs):
                    return lhs
                return self.evaluate(right)

            case Variable(name=name):
                return self._look_up(name, expr)

            case Assign(name=name, value=value_expr):
                value = self.evaluate(value_expr)
                distance = self.locals.get(expr.node_id)
                if distance is not None:
                    self.environment.assign_at(distance, name, value)
                else:
                    self.globals.assign(name, value)
                return value

            case Call():
                return self._eval_call(expr)

        raise TypeError(f"Unknown expression type: {type(expr).__name__}")

    def _look_up(self, name: Token, expr: Expr) -> object:
        distance = self.locals.get(expr.node_id)
        if distance is not None:
            return self.environment.get_at(distance, name)
        return self.globals.get(name)

    def _eval_binary(self, expr: Binary) -> object:
        lhs = self.evaluate(expr.left)
        rhs = self.evaluate(expr.right)
        operator = expr.operator

        match operator.type:
            # Arithmetic
            case TokenType.PLUS:
                if isinstance(lhs, str) and isinstance(rhs, str):
                    return lhs + rhs
                if _is_number(lhs) and _is_number(rhs):
                    return lhs + rhs
                raise LoxRuntimeError(
                    ErrorKind.OPERANDS_MUST_BE_NUMBERS_OR_STRINGS,
                    "Operands must be two numbers or two strings",
                    operator,
                )
            case TokenType.MINUS:
                _check_number_operands(operator, lhs, rhs)
                return lhs - rhs
            case TokenType.STAR:
                _check_number_operands(operator, lhs, rhs)
                return lhs * rhs
            case TokenType.SLASH:
                _check_number_operands(operator, lhs, rhs)
                return divide(lhs, rhs)
            # Comparison
            case TokenType.GREATER:
                _check_number_operands(operator, lhs, rhs)
                return lhs > rhs
            case TokenType.GREATER_EQUAL:
                _check_number_operands(operator, lhs, rhs)
                return lhs >= rhs
            case TokenType.LESS:
                _check_number_operands(operator, lhs, rhs)
                return lhs < rhs
            case TokenType.LESS_EQUAL:
                _check_number_operands(operator, lhs, rhs)
                return lhs <= rhs
            # Equality
            case TokenType.EQUAL_EQUAL:
                return is_equal(lhs, rhs)
            case TokenType.BANG_EQUAL:
                return not is_equal(lhs, rhs)

        raise TypeError(f"Unknown binary operator '{operator.lexeme}'")

    def _eval_call(self, expr: Call) -> object:
        callee = self.evaluate(expr.callee)
        arguments = [self.evaluate(argument) for argument in expr.arguments]

        if not isinstance(callee, LoxCallable):
            raise LoxRuntimeError(
                ErrorKind.NOT_CALLABLE,
                "Can only call functions",
                expr.paren,
            )
        if len(arguments) != callee.arity():
            raise ArityMismatchError(callee.arity(), len(arguments), expr.paren)

        try:
            return callee.call(self, arguments)
        except RecursionError:
            raise LoxRuntimeError(
                ErrorKind.STACK_OVERFLOW,
                "Stack overflow",
                expr.paren,
            ) from None


def _is_number(value: object) -> bool:
    return isinstance(value, float)


def _check_number_operand(operator: Token, operand: object) -> None:
    if not _is_number(operand):
        raise LoxRuntimeError(
            ErrorKind.OPERAND_MUST_BE_NUMBER,
            "Operand must be a number",
            operator,
        )


def _check_number_operands(operator: Token, left: object, right: object) -> None:
    if not (_is_number(left) and _is_number(right)):
        raise LoxRuntimeError(
            ErrorKind.OPERANDS_MUST_BE_NUMBERS,
            "Operands must be numbers",
            operator,
        )
