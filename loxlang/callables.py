"""Callable runtime values.

There are exactly two kinds of callable: :class:`LoxFunction`, built from a
``fun`` declaration, and :class:`NativeFunction`, a Python function installed
into the global environment by the host. Both expose ``arity()`` and
``call(interpreter, arguments)``.


File: callables.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

import time
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable

from loxlang.environment import Environment
from loxlang.nodes import Function

if TYPE_CHECKING:
    from loxlang.interpreter import Interpreter


class LoxCallable(ABC):
    """Anything that can appear on the left of a call."""

    @abstractmethod
    def arity(self) -> int:
        """Return the exact number of arguments the callable takes."""

    @abstractmethod
    def call(self, interpreter: 'Interpreter', arguments: list[object]) -> object:
        """Invoke the callable with already evaluated arguments."""


class LoxFunction(LoxCallable):
    """Runtime representation of a user-defined function."""

    def __init__(self, declaration: Function, closure: Environment):
        self.declaration = declaration
        # The environment active where the function was declared, not where
        # it is called from.
        self.closure = closure

    def arity(self) -> int:
        return len(self.declaration.params)

    def call(self, interpreter: 'Interpreter', arguments: list[object]) -> object:
        from loxlang.interpreter import ReturnSignal

        environment = Environment(self.closure)
        for param, argument in zip(self.declaration.params, arguments):
            environment.define(param.lexeme, argument)

        signal = interpreter.execute_block(self.declaration.body, environment)
        if isinstance(signal, ReturnSignal):
            return signal.value
        return None

    def __str__(self) -> str:
        return f"<fn {self.declaration.name.lexeme}>"

    def __repr__(self) -> str:
        return f"LoxFunction({self.declaration.name.lexeme!r}, arity={self.arity()})"


class NativeFunction(LoxCallable):
    """A host function exposed to scripts."""

    def __init__(self, name: str, arity: int, function: Callable[..., object]):
        self.name = name
        self._arity = arity
        self.function = function

    def arity(self) -> int:
        return self._arity

    def call(self, interpreter: 'Interpreter', arguments: list[object]) -> object:
        result = self.function(*arguments)
        # Scripts only ever see floats as numbers.
        if isinstance(result, int) and not isinstance(result, bool):
            return float(result)
        return result

    def __str__(self) -> str:
        return "<native fn>"

    def __repr__(self) -> str:
        return f"NativeFunction({self.name!r}, arity={self._arity})"


def clock() -> float:
    """
    Seconds since the Unix epoch as a float.
    """
    return time.time()
