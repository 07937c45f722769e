"""Abstract syntax tree for loxlang.

The parser builds these nodes and the resolver and interpreter only read
them. Each node gets a ``node_id`` from the parser when it is created. The id
is left out of equality, so two parses of the same source compare equal, but
it is what the resolver keys its scope distances on: two ``x`` references
that look the same are still different nodes.


File: nodes.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

from dataclasses import dataclass, field

from loxlang.lexer import Token


@dataclass
class Node:
    """Base class for every AST node."""

    node_id: int = field(default=-1, compare=False, repr=False, kw_only=True)


# ---- Expressions ----

@dataclass
class Expr(Node):
    """Base class for expression nodes."""


@dataclass
class Literal(Expr):
    """A constant: number, string, boolean or nil."""
    value: object

    def __eq__(self, other):
        if other.__class__ is not self.__class__:
            return NotImplemented
        # False == 0.0 in Python, but not here.
        return type(self.value) is type(other.value) and self.value == other.value


@dataclass
class Grouping(Expr):
    """A parenthesized expression."""
    expression: Expr


@dataclass
class Unary(Expr):
    """A prefix ``!`` or ``-`` applied to one operand."""
    operator: Token
    right: Expr


@dataclass
class Binary(Expr):
    """An arithmetic, comparison or equality operator."""
    left: Expr
    operator: Token
    right: Expr


@dataclass
class Logical(Expr):
    """A short-circuiting ``and`` / ``or``."""
    left: Expr
    operator: Token
    right: Expr


@dataclass
class Variable(Expr):
    """A read of a named variable."""
    name: Token


@dataclass
class Assign(Expr):
    """Assignment to an existing variable."""
    name: Token
    value: Expr


@dataclass
class Call(Expr):
    """A call. ``paren`` is the closing parenthesis, kept for error locations."""
    callee: Expr
    paren: Token
    arguments: list[Expr]


# ---- Statements ----

@dataclass
class Stmt(Node):
    """Base class for statement nodes."""


@dataclass
class Expression(Stmt):
    expression: Expr


@dataclass
class Print(Stmt):
    expression: Expr


@dataclass
class Var(Stmt):
    name: Token
    initializer: Expr | None


@dataclass
class Block(Stmt):
    statements: list[Stmt]


@dataclass
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Stmt | None


@dataclass
class While(Stmt):
    condition: Expr
    body: Stmt


@dataclass
class Function(Stmt):
    name: Token
    params: list[Token]
    body: list[Stmt]


@dataclass
class Return(Stmt):
    keyword: Token
    value: Expr | None


@dataclass
class Break(Stmt):
    keyword: Token
