"""loxlang: a tree-walking interpreter.

File: __init__.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

from loxlang.interpreter import Interpreter
from loxlang.lexer import scan
from loxlang.parser import Parser
from loxlang.resolver import Resolver
from loxlang.runner import RunResult, analyze, run

__all__ = ["Interpreter", "Parser", "Resolver", "RunResult", "analyze", "run", "scan"]
