"""
Render an operation tree back to porthsim source.

One operation per line, nested blocks indented. Parsing the output gives a
tree that executes exactly like the one it came from; only locations differ.
"""

from __future__ import annotations

from .ir.operations import IfOp, IntrinsicOp, Operation, PushInt, WhileOp
from .ir.tokens import Marker
from .program import Program

INDENT = "  "

# A finished line, or a nested block still to expand at the given depth
_Pending = str | tuple[list[Operation], int]


def format_program(program: Program) -> str:
    """Source text for a whole program, newline-terminated."""
    lines = format_block(program.root_block)
    return "".join(f"{line}\n" for line in lines)


def format_block(block: list[Operation], depth: int = 0) -> list[str]:
    """Lines for ``block`` at nesting ``depth``."""
    lines: list[str] = []
    pending: list[_Pending] = [(block, depth)]

    while pending:
        item = pending.pop()
        if isinstance(item, str):
            lines.append(item)
            continue
        ops, level = item
        for op in reversed(ops):
            pending.extend(reversed(_expand_op(op, level)))

    return lines


def _expand_op(op: Operation, depth: int) -> list[_Pending]:
    pad = INDENT * depth
    kind = op.kind

    if isinstance(kind, PushInt | IntrinsicOp):
        return [f"{pad}{kind}"]

    if isinstance(kind, IfOp):
        parts: list[_Pending] = [f"{pad}{Marker.IF}", (kind.if_block, depth + 1)]
        for link in kind.if_star_blocks:
            parts.append(f"{pad}{Marker.ELSE}")
            parts.append((link.cond_block, depth + 1))
            parts.append(f"{pad}{Marker.IF_STAR}")
            parts.append((link.inner_block, depth + 1))
        if kind.else_block is not None:
            parts.append(f"{pad}{Marker.ELSE}")
            parts.append((kind.else_block, depth + 1))
        parts.append(f"{pad}{Marker.END}")
        return parts

    if isinstance(kind, WhileOp):
        return [
            f"{pad}{Marker.WHILE}",
            (kind.cond_block, depth + 1),
            f"{pad}{Marker.DO}",
            (kind.do_block, depth + 1),
            f"{pad}{Marker.END}",
        ]

    raise TypeError(f"Unknown operation type: {type(kind).__name__}")
