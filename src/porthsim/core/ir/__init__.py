"""
porthsim intermediate representation types.

Locations, tokens and the operation tree. All types are re-exported from
this package.
"""

from .location import SourceLocation, SourcePosition
from .operations import (
    IfOp,
    IfStarBlock,
    Intrinsic,
    IntrinsicOp,
    OpBlock,
    OpKind,
    Operation,
    PushInt,
    WhileOp,
    parse_intrinsic,
)
from .tokens import U64_MAX, Marker, Token, TokenKind, parse_marker, parse_u64

__all__ = [
    # Locations
    "SourceLocation",
    "SourcePosition",
    # Tokens
    "Marker",
    "Token",
    "TokenKind",
    "U64_MAX",
    "parse_marker",
    "parse_u64",
    # Operations
    "Intrinsic",
    "IntrinsicOp",
    "IfOp",
    "IfStarBlock",
    "OpBlock",
    "OpKind",
    "Operation",
    "PushInt",
    "WhileOp",
    "parse_intrinsic",
]
