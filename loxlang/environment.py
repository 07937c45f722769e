"""Environment.

A chain of variable scopes. Each block entry and each function call gets a
new :class:`Environment` whose ``enclosing`` link points at the scope it was
created in (for a call, the function's closure). Environments are shared by
plain reference, so a scope captured by a closure stays alive for as long as
that closure does.


File: environment.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

from loxlang.exceptions import ErrorKind, LoxRuntimeError
from loxlang.lexer import Token


class Environment:
    """One lexical scope plus a link to the scope around it."""

    def __init__(self, enclosing: 'Environment | None' = None):
        self.values: dict[str, object] = {}
        self.enclosing = enclosing

    def define(self, name: str, value: object) -> None:
        """
        Bind ``name`` in this scope, replacing any existing binding here.
        """
        self.values[name] = value

    def get(self, name: Token) -> object:
        """
        Look ``name`` up in this scope and then outwards.

        Raises:
            LoxRuntimeError: If no scope in the chain binds the name.
        """
        env = self
        while env is not None:
            if name.lexeme in env.values:
                return env.values[name.lexeme]
            env = env.enclosing
        raise _undefined(name)

    def assign(self, name: Token, value: object) -> None:
        """
        Rebind an existing variable. Never creates a new binding.
        """
        env = self
        while env is not None:
            if name.lexeme in env.values:
                env.values[name.lexeme] = value
                return
            env = env.enclosing
        raise _undefined(name)

    def ancestor(self, distance: int) -> 'Environment':
        env = self
        for _ in range(distance):
            env = env.enclosing
        return env

    def get_at(self, distance: int, name: Token) -> object:
        """
        Read a variable exactly ``distance`` scopes out.
        """
        values = self.ancestor(distance).values
        if name.lexeme not in values:
            raise _undefined(name)
        return values[name.lexeme]

    def assign_at(self, distance: int, name: Token, value: object) -> None:
        self.ancestor(distance).values[name.lexeme] = value

    def __repr__(self) -> str:
        return f"Environment({list(self.values)}, enclosing={self.enclosing is not None})"


def _undefined(name: Token) -> LoxRuntimeError:
    return LoxRuntimeError(
        ErrorKind.UNDEFINED_VARIABLE,
        f"Undefined variable '{name.lexeme}'",
        name,
    )
