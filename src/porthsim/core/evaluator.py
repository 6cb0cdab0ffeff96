"""
Tree-walking simulator for porthsim programs.

Executes an operation tree against a single LIFO stack of unsigned 64-bit
integers. The stack is shared by every nested block for the whole run.

Arithmetic wraps modulo 2**64. Wraparound on ``+`` and ``-`` is logged as
a warning tagged with the operation's location; ``*`` wraps silently.
Conditions are true when greater than zero; values other than 0 and 1 are
accepted but logged as a warning.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from dataclasses import dataclass
from typing import TextIO

from .errors import DivideByZeroError, SimulationError, StackUnderflowError
from .ir.location import SourceLocation
from .ir.operations import (
    IfOp,
    Intrinsic,
    IntrinsicOp,
    Operation,
    PushInt,
    WhileOp,
)
from .ir.tokens import U64_MAX
from .program import Program

logger = logging.getLogger(__name__)


@dataclass
class _BlockFrame:
    """Operations of a block that have not run yet."""

    ops: Iterator[Operation]


@dataclass
class _IfStarFrame:
    """Tests if* link ``index`` once its condition block has run."""

    if_op: IfOp
    index: int


@dataclass
class _WhileFrame:
    """Tests a while condition once its condition block has run."""

    while_op: WhileOp
    do_location: SourceLocation


_Frame = _BlockFrame | _IfStarFrame | _WhileFrame


class ValueStack:
    """LIFO stack of u64 values; popping an empty stack is an underflow."""

    def __init__(self) -> None:
        self._values: list[int] = []

    def push(self, value: int) -> None:
        self._values.append(value)

    def pop(self) -> int:
        if not self._values:
            raise StackUnderflowError()
        return self._values.pop()

    def to_list(self) -> list[int]:
        """Values from bottom to top."""
        return list(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"ValueStack({self._values!r})"


class Evaluator:
    """Runs programs and keeps the value stack between blocks."""

    def __init__(self, output: TextIO | None = None) -> None:
        self.stack = ValueStack()
        self.output = output if output is not None else sys.stdout

    def run(self, program: Program) -> None:
        """
        Execute ``program`` from the top of its root block.

        Raises:
            SimulationError: On stack underflow or division by zero, located
                at the innermost operation that failed
        """
        self.execute_block(program.root_block)

    def execute_block(self, block: list[Operation]) -> None:
        """
        Execute ``block`` and everything nested in it.

        Blocks still to run are kept on an explicit frame stack, innermost
        last, so nesting depth is limited only by memory.
        """
        frames: list[_Frame] = [_BlockFrame(iter(block))]

        while frames:
            frame = frames.pop()

            if isinstance(frame, _IfStarFrame):
                self._check_if_star(frame, frames)
                continue
            if isinstance(frame, _WhileFrame):
                self._check_while(frame, frames)
                continue

            op = next(frame.ops, None)
            if op is None:
                continue
            frames.append(frame)

            try:
                self._execute_op(op, frames)
            except SimulationError as e:
                e.with_location(op.location)
                raise

    def _execute_op(self, op: Operation, frames: list[_Frame]) -> None:
        kind = op.kind

        if isinstance(kind, PushInt):
            self.stack.push(kind.value)
        elif isinstance(kind, IntrinsicOp):
            self._execute_intrinsic(kind.intrinsic, op.location)
        elif isinstance(kind, IfOp):
            self._enter_if(kind, op.location, frames)
        elif isinstance(kind, WhileOp):
            self._enter_while(kind, op.location, frames)
        else:
            raise TypeError(f"Unknown operation type: {type(kind).__name__}")

    def _execute_intrinsic(self, intrinsic: Intrinsic, location: SourceLocation) -> None:
        stack = self.stack

        if intrinsic == Intrinsic.DUP:
            a = stack.pop()
            stack.push(a)
            stack.push(a)

        elif intrinsic == Intrinsic.SWAP:
            b = stack.pop()
            a = stack.pop()
            stack.push(b)
            stack.push(a)

        elif intrinsic == Intrinsic.DROP:
            stack.pop()

        elif intrinsic == Intrinsic.PRINT:
            a = stack.pop()
            print(f"{a} ({a:#018x})", file=self.output)

        elif intrinsic == Intrinsic.OVER:
            b = stack.pop()
            a = stack.pop()
            stack.push(a)
            stack.push(b)
            stack.push(a)

        elif intrinsic == Intrinsic.ROT:
            c = stack.pop()
            b = stack.pop()
            a = stack.pop()
            stack.push(b)
            stack.push(c)
            stack.push(a)

        elif intrinsic == Intrinsic.PLUS:
            b = stack.pop()
            a = stack.pop()
            result = a + b
            if result > U64_MAX:
                logger.warning("%s: operation `%s` overflowed", location, intrinsic)
            stack.push(result & U64_MAX)

        elif intrinsic == Intrinsic.SUBTRACT:
            b = stack.pop()
            a = stack.pop()
            result = a - b
            if result < 0:
                logger.warning("%s: operation `%s` overflowed", location, intrinsic)
            stack.push(result & U64_MAX)

        elif intrinsic == Intrinsic.MULTIPLY:
            b = stack.pop()
            a = stack.pop()
            stack.push((a * b) & U64_MAX)

        elif intrinsic == Intrinsic.DIVMOD:
            b = stack.pop()
            a = stack.pop()
            if b == 0:
                raise DivideByZeroError()
            stack.push(a // b)
            stack.push(a % b)

        else:
            raise TypeError(f"Unknown intrinsic: {intrinsic!r}")

    # -- Control flow --
    #
    # Frames pushed last run first. A condition block is scheduled above
    # the frame that tests its result once it has run.

    def _enter_if(self, if_op: IfOp, location: SourceLocation, frames: list[_Frame]) -> None:
        if is_condition_true(self.stack.pop(), location):
            frames.append(_BlockFrame(iter(if_op.if_block)))
        else:
            self._schedule_if_link(if_op, 0, frames)

    def _schedule_if_link(self, if_op: IfOp, index: int, frames: list[_Frame]) -> None:
        """Try if* link ``index``, or fall through to the else block."""
        if index < len(if_op.if_star_blocks):
            frames.append(_IfStarFrame(if_op, index))
            frames.append(_BlockFrame(iter(if_op.if_star_blocks[index].cond_block)))
        elif if_op.else_block is not None:
            frames.append(_BlockFrame(iter(if_op.else_block)))

    def _check_if_star(self, frame: _IfStarFrame, frames: list[_Frame]) -> None:
        link = frame.if_op.if_star_blocks[frame.index]
        if is_condition_true(self._pop_condition(link.location), link.location):
            frames.append(_BlockFrame(iter(link.inner_block)))
        else:
            self._schedule_if_link(frame.if_op, frame.index + 1, frames)

    def _enter_while(
        self, while_op: WhileOp, location: SourceLocation, frames: list[_Frame]
    ) -> None:
        frames.append(_WhileFrame(while_op, while_op.do_location or location))
        frames.append(_BlockFrame(iter(while_op.cond_block)))

    def _check_while(self, frame: _WhileFrame, frames: list[_Frame]) -> None:
        if is_condition_true(self._pop_condition(frame.do_location), frame.do_location):
            frames.append(frame)
            frames.append(_BlockFrame(iter(frame.while_op.cond_block)))
            frames.append(_BlockFrame(iter(frame.while_op.do_block)))

    def _pop_condition(self, location: SourceLocation) -> int:
        try:
            return self.stack.pop()
        except StackUnderflowError as e:
            e.with_location(location)
            raise


def is_condition_true(value: int, location: SourceLocation) -> bool:
    """Truthiness of a popped condition value."""
    if value not in (0, 1):
        logger.warning("%s: non-binary value (%d) used as a boolean condition", location, value)
    return value > 0


def execute(program: Program, output: TextIO | None = None) -> Evaluator:
    """Run ``program`` on a fresh stack.

    Args:
        program: Parsed program.
        output: Stream for ``print``; defaults to stdout.

    Returns:
        The evaluator, so callers can inspect the final stack.

    Raises:
        SimulationError: If execution fails.
    """
    evaluator = Evaluator(output)
    evaluator.run(program)
    return evaluator
