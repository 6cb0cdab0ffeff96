"""
porthsim - lexer, parser and tree-walking simulator for a small
stack-based language.

Usage:
    from porthsim import Program, execute

    program = Program.from_path("hello.porth")
    execute(program)
"""

from __future__ import annotations

from ._version import get_version
from .core.errors import (
    LexingError,
    ParseError,
    PorthError,
    SimulationError,
)
from .core.evaluator import execute
from .core.lexer import tokenize
from .core.parser import parse_file
from .core.program import Program

__version__ = get_version()

__all__ = [
    "__version__",
    "Program",
    "execute",
    "parse_file",
    "tokenize",
    "PorthError",
    "LexingError",
    "ParseError",
    "SimulationError",
]
