"""Resolver.

A static pass run between parsing and interpretation. It walks the AST once,
keeping a stack of block and function scopes, and records for every local
variable reference how many scopes out its binding lives. The interpreter
uses that distance to go straight to the right environment.

References that are not found in any local scope get no entry: they are
globals and are looked up by name at runtime, which lets functions refer to
globals declared later in the file. The top level is therefore not pushed as
a scope.

Problems found along the way (reading a local in its own initializer,
declaring a local twice, ``return`` or ``break`` in the wrong place) are
collected in ``errors`` instead of being raised.


File: resolver.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

from enum import Enum

from loxlang.exceptions import ErrorKind, ResolutionError
from loxlang.lexer import Token
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


class FunctionType(Enum):
    NONE = "none"
    FUNCTION = "function"


class Resolver:
    """Static scope resolver."""

    def __init__(self, file: str | None = None):
        # Each scope maps a name to False while declared, True once defined.
        self.scopes: list[dict[str, bool]] = []
        self.locals: dict[int, int] = {}
        self.errors: list[ResolutionError] = []
        self.file = file
        self.current_function = FunctionType.NONE
        self.loop_depth = 0

    def resolve(self, statements: list[Stmt]) -> dict[int, int]:
        """
        Resolve a whole program.

        Parameters:
            statements (list): Top-level statements from the parser.

        Returns:
            dict[int, int]: scope distance keyed by node id.
        """
        for stmt in statements:
            try:
                self.resolve_stmt(stmt)
            except RecursionError:
                self.scopes = []
                self.current_function = FunctionType.NONE
                self.loop_depth = 0
                self.errors.append(
                    ResolutionError(ErrorKind.NESTING_TOO_DEEP, "Nesting too deep", file=self.file)
                )
        return self.locals

    # ------------------------------------------------------------------
    # Scopes
    # ------------------------------------------------------------------

    def begin_scope(self) -> None:
        self.scopes.append({})

    def end_scope(self) -> None:
        self.scopes.pop()

    def declare(self, name: Token) -> None:
        if not self.scopes:
            return
        scope = self.scopes[-1]
        if name.lexeme in scope:
            self.error(
                ErrorKind.DUPLICATE_VARIABLE_IN_SCOPE,
                f"Already a variable named '{name.lexeme}' in this scope",
                name,
            )
        scope[name.lexeme] = False

    def define(self, name: Token) -> None:
        if not self.scopes:
            return
        self.scopes[-1][name.lexeme] = True

    def resolve_local(self, expr: Expr, name: Token) -> None:
        """
        Record how many scopes out ``name`` is bound, if it is local.
        """
        for distance, scope in enumerate(reversed(self.scopes)):
            if name.lexeme in scope:
                self.locals[expr.node_id] = distance
                return

    def error(self, kind: ErrorKind, message: str, token: Token) -> None:
        self.errors.append(ResolutionError(kind, message, token, file=self.file))

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def resolve_stmt(self, stmt: Stmt) -> None:
        match stmt:
            case Block(statements=statements):
                self.begin_scope()
                for inner in statements:
                    self.resolve_stmt(inner)
                self.end_scope()

            case Var(name=name, initializer=initializer):
                self.declare(name)
                if initializer is not None:
                    self.resolve_expr(initializer)
                self.define(name)

            case Function(name=name):
                # Defined before the body so the function can call itself.
                self.declare(name)
                self.define(name)
                self.resolve_function(stmt, FunctionType.FUNCTION)

            case Expression(expression=expr) | Print(expression=expr):
                self.resolve_expr(expr)

            case If(condition=condition, then_branch=then_branch, else_branch=else_branch):
                self.resolve_expr(condition)
                self.resolve_stmt(then_branch)
                if else_branch is not None:
                    self.resolve_stmt(else_branch)

            case While(condition=condition, body=body):
                self.resolve_expr(condition)
                self.loop_depth += 1
                self.resolve_stmt(body)
                self.loop_depth -= 1

            case Return(keyword=keyword, value=value):
                if self.current_function == FunctionType.NONE:
                    self.error(
                        ErrorKind.RETURN_OUTSIDE_FUNCTION,
                        "Can't return from top-level code",
                        keyword,
                    )
                if value is not None:
                    self.resolve_expr(value)

            case Break(keyword=keyword):
                if self.loop_depth == 0:
                    self.error(
                        ErrorKind.BREAK_OUTSIDE_LOOP,
                        "Can't break outside of a loop",
                        keyword,
                    )

            case _:
                raise TypeError(f"Unknown statement type: {type(stmt).__name__}")

    def resolve_function(self, function: Function, function_type: FunctionType) -> None:
        """
        Resolve a function body in a fresh scope holding its parameters.
        """
        enclosing_function = self.current_function
        enclosing_loops = self.loop_depth
        self.current_function = function_type
        self.loop_depth = 0

        self.begin_scope()
        for param in function.params:
            self.declare(param)
            self.define(param)
        for stmt in function.body:
            self.resolve_stmt(stmt)
        self.end_scope()

        self.current_function = enclosing_function
        self.loop_depth = enclosing_loops

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def resolve_expr(self, expr: Expr) -> None:
        match expr:
            case Variable(name=name):
                if self.scopes and self.scopes[-1].get(name.lexeme) is False:
                    self.error(
                        ErrorKind.SELF_REFERENTIAL_INITIALIZER,
                        f"Can't read local variable '{name.lexeme}' in its own initializer",
                        name,
                    )
                self.resolve_local(expr, name)

            case Assign(name=name, value=value):
                self.resolve_expr(value)
                self.resolve_local(expr, name)

            case Binary(left=left, right=right) | Logical(left=left, right=right):
                self.resolve_expr(left)
                self.resolve_expr(right)

            case Call(callee=callee, arguments=arguments):
                self.resolve_expr(callee)
                for argument in arguments:
                    self.resolve_expr(argument)

            case Grouping(expression=inner) | Unary(right=inner):
                self.resolve_expr(inner)

            case Literal():
                pass

            case _:
                raise TypeError(f"Unknown expression type: {type(expr).__name__}")
