"""
Block parser for porthsim.

Grammar:
    program  → unit*
    unit     → INT | WORD | if_op | while_op
    if_op    → "if" unit* ("else" unit* "if*" unit*)* ("else" unit*)? "end"
    while_op → "while" unit* "do" unit* "end"

Open ``if``/``while`` blocks are kept on an explicit stack, innermost last,
so nesting depth is limited only by memory. ``if`` and ``while`` push a
frame; ``else``, ``if*``, ``do`` and ``end`` are checked against the state
of the innermost frame, and ``end`` pops it as a finished IfOp/WhileOp.

Every ParseError raised while blocks are open picks up a note pointing at
the marker that opened each of them, innermost block first.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path

from .errors import (
    MissingMarkerError,
    MissingMarkerReason,
    NoteKind,
    ParseError,
    UnexpectedMarkerError,
    UnexpectedMarkerReason,
    UnknownWordError,
)
from .ir.location import SourceLocation
from .ir.operations import (
    IfOp,
    IfStarBlock,
    IntrinsicOp,
    Operation,
    PushInt,
    WhileOp,
    parse_intrinsic,
)
from .ir.tokens import Marker, Token, TokenKind
from .lexer import Lexer

logger = logging.getLogger(__name__)


class _IfState(Enum):
    IF = auto()
    IF_STAR = auto()
    ELSE = auto()


class _WhileState(Enum):
    COND = auto()
    DO = auto()


@dataclass
class _IfFrame:
    """An ``if`` block that has been opened but not yet closed."""

    location: SourceLocation
    if_block: list[Operation] = field(default_factory=list)
    chain: list[tuple[SourceLocation, list[Operation], list[Operation]]] = field(
        default_factory=list
    )
    else_block: list[Operation] | None = None
    state: _IfState = _IfState.IF

    marker = Marker.IF

    @property
    def current(self) -> list[Operation]:
        if self.state == _IfState.IF_STAR:
            return self.chain[-1][2]
        if self.state == _IfState.ELSE:
            assert self.else_block is not None
            return self.else_block
        return self.if_block


@dataclass
class _WhileFrame:
    """A ``while`` block that has been opened but not yet closed."""

    location: SourceLocation
    cond_block: list[Operation] = field(default_factory=list)
    do_block: list[Operation] = field(default_factory=list)
    do_location: SourceLocation | None = None
    state: _WhileState = _WhileState.COND

    marker = Marker.WHILE

    @property
    def current(self) -> list[Operation]:
        return self.do_block if self.state == _WhileState.DO else self.cond_block


_Frame = _IfFrame | _WhileFrame


class Parser:
    """Builds an operation tree from the tokens of one lexer."""

    def __init__(self, lexer: Lexer) -> None:
        self.lexer = lexer
        self.root: list[Operation] = []
        self._stack: list[_Frame] = []

    def parse(self) -> list[Operation]:
        """
        Parse the whole token stream into the root block.

        Raises:
            ParseError: On the first structural or lexical-resolution fault
            SourceFileError: If reading the source fails
        """
        try:
            for token in self.lexer:
                self._feed(token)

            if self._stack:
                raise MissingMarkerError(
                    Marker.END,
                    MissingMarkerReason.BLOCK_NOT_CLOSED,
                    location=self.lexer.current_location(),
                )
        except ParseError as e:
            for frame in reversed(self._stack):
                e.add_note(NoteKind.BLOCK_START, frame.marker, frame.location)
            raise

        return self.root

    def _append(self, op: Operation) -> None:
        if self._stack:
            self._stack[-1].current.append(op)
        else:
            logger.debug("Parsed operation: %s", op)
            self.root.append(op)

    def _feed(self, token: Token) -> None:
        if token.kind == TokenKind.WORD:
            assert isinstance(token.value, str)
            self._append(self._parse_word(token.value, token.location))
            return

        if token.kind == TokenKind.INT:
            assert isinstance(token.value, int)
            self._append(Operation(kind=PushInt(value=token.value), location=token.location))
            return

        assert isinstance(token.value, Marker)
        marker, location = token.value, token.location

        if marker == Marker.IF:
            self._stack.append(_IfFrame(location))
            return
        if marker == Marker.WHILE:
            self._stack.append(_WhileFrame(location))
            return

        if not self._stack:
            raise UnexpectedMarkerError(
                marker,
                UnexpectedMarkerReason.FREE_FLOATING,
                location=location,
            )

        frame = self._stack[-1]
        if isinstance(frame, _IfFrame):
            closed = self._if_marker(frame, marker, location)
        else:
            closed = self._while_marker(frame, marker, location)

        if closed is not None:
            self._stack.pop()
            self._append(closed)

    def _parse_word(self, text: str, location: SourceLocation) -> Operation:
        intrinsic = parse_intrinsic(text)
        if intrinsic is None:
            raise UnknownWordError(text, location=location)
        return Operation(kind=IntrinsicOp(intrinsic=intrinsic), location=location)

    # -- Block state machines --

    def _if_marker(
        self, frame: _IfFrame, marker: Marker, location: SourceLocation
    ) -> Operation | None:
        """Apply ``marker`` to an open if block; returns the IfOp on ``end``."""
        if marker == Marker.ELSE:
            if frame.state == _IfState.ELSE:
                raise UnexpectedMarkerError(
                    Marker.ELSE,
                    UnexpectedMarkerReason.REPEATED,
                    block=Marker.IF,
                    location=location,
                )
            frame.else_block = []
            frame.state = _IfState.ELSE
            return None

        if marker == Marker.IF_STAR:
            if frame.state != _IfState.ELSE or frame.else_block is None:
                raise UnexpectedMarkerError(
                    Marker.IF_STAR,
                    UnexpectedMarkerReason.GENERAL,
                    detail=(
                        f"`{Marker.IF_STAR}` must follow an `{Marker.ELSE}` "
                        "with a condition block"
                    ),
                    location=location,
                )
            # The block opened by the preceding else is this link's condition
            frame.chain.append((location, frame.else_block, []))
            frame.else_block = None
            frame.state = _IfState.IF_STAR
            return None

        if marker == Marker.END:
            if_op = IfOp(
                if_block=frame.if_block,
                if_star_blocks=[
                    IfStarBlock(location=loc, cond_block=cond, inner_block=inner)
                    for loc, cond, inner in frame.chain
                ],
                else_block=frame.else_block,
            )
            return Operation(kind=if_op, location=frame.location)

        raise UnexpectedMarkerError(
            marker,
            UnexpectedMarkerReason.NOT_APPLICABLE,
            block=Marker.IF,
            location=location,
        )

    def _while_marker(
        self, frame: _WhileFrame, marker: Marker, location: SourceLocation
    ) -> Operation | None:
        """Apply ``marker`` to an open while block; returns the WhileOp on ``end``."""
        if marker == Marker.DO:
            if frame.state == _WhileState.DO:
                raise UnexpectedMarkerError(
                    Marker.DO,
                    UnexpectedMarkerReason.REPEATED,
                    block=Marker.WHILE,
                    location=location,
                )
            frame.do_location = location
            frame.state = _WhileState.DO
            return None

        if marker == Marker.END:
            if frame.state == _WhileState.COND:
                raise MissingMarkerError(
                    Marker.DO,
                    MissingMarkerReason.REQUIRED_BY_BLOCK,
                    block=Marker.WHILE,
                    location=location,
                )
            while_op = WhileOp(
                cond_block=frame.cond_block,
                do_location=frame.do_location,
                do_block=frame.do_block,
            )
            return Operation(kind=while_op, location=frame.location)

        raise UnexpectedMarkerError(
            marker,
            UnexpectedMarkerReason.NOT_APPLICABLE,
            block=Marker.WHILE,
            location=location,
        )


def parse_file(path: str | Path) -> list[Operation]:
    """Lex and parse the file at ``path`` into its root block."""
    with Lexer.open(path) as lexer:
        return Parser(lexer).parse()
