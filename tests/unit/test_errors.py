"""Tests for porthsim diagnostics."""

from __future__ import annotations

from pathlib import Path

from porthsim.core.errors import (
    MissingMarkerError,
    MissingMarkerReason,
    NoteKind,
    ParseError,
    PorthError,
    SimulationError,
    SourceFileError,
    StackUnderflowError,
    UnexpectedMarkerError,
    UnexpectedMarkerReason,
    UnknownWordError,
)
from porthsim.core.ir import Marker, SourceLocation, SourcePosition


def _loc(line: int, column: int) -> SourceLocation:
    return SourceLocation(file=Path("prog.porth"), position=SourcePosition(line=line, column=column))


class TestLocation:
    def test_location_attached_once(self) -> None:
        err = StackUnderflowError()
        assert not err.has_location
        err.with_location(_loc(3, 4))
        err.with_location(_loc(1, 1))
        assert err.location == _loc(3, 4)

    def test_unknown_location_rendering(self) -> None:
        assert str(StackUnderflowError()) == "Unknown Location --> [Simulation] Stack underflowed"

    def test_location_rendering(self) -> None:
        err = UnknownWordError("x", location=_loc(2, 5))
        assert str(err) == "prog.porth:2:5 --> [Parsing] Unknown word: `x`"

    def test_location_without_position(self) -> None:
        assert str(SourceLocation(file=Path("prog.porth"))) == "prog.porth"


class TestNotes:
    def test_notes_keep_insertion_order(self) -> None:
        err = MissingMarkerError(Marker.END, MissingMarkerReason.BLOCK_NOT_CLOSED)
        err.add_note(NoteKind.BLOCK_START, Marker.IF, _loc(2, 1))
        err.add_note(NoteKind.BLOCK_START, Marker.WHILE, _loc(1, 1))
        assert [n.marker for n in err.notes] == [Marker.IF, Marker.WHILE]
        assert str(err.notes[0]) == "prog.porth:2:1 --> `if` block starts here"


class TestMessages:
    def test_free_floating(self) -> None:
        err = UnexpectedMarkerError(Marker.END, UnexpectedMarkerReason.FREE_FLOATING)
        assert err.message == "Unexpected token `end`: `end` must be associated with a block"

    def test_repeated(self) -> None:
        err = UnexpectedMarkerError(Marker.ELSE, UnexpectedMarkerReason.REPEATED, block=Marker.IF)
        assert "`else` cannot appear twice in succession within the same `if` block" in err.message

    def test_not_applicable(self) -> None:
        err = UnexpectedMarkerError(
            Marker.DO, UnexpectedMarkerReason.NOT_APPLICABLE, block=Marker.IF
        )
        assert "`do` cannot appear within an `if` block" in err.message

    def test_block_not_closed(self) -> None:
        err = MissingMarkerError(Marker.END, MissingMarkerReason.BLOCK_NOT_CLOSED)
        assert err.message == (
            "Missing expected token `end`: Expected an `end` token to end the block"
        )

    def test_required_by_block(self) -> None:
        err = MissingMarkerError(
            Marker.DO, MissingMarkerReason.REQUIRED_BY_BLOCK, block=Marker.WHILE
        )
        assert "`while` block is required to contain a `do` block" in err.message

    def test_file_error(self) -> None:
        err = SourceFileError(Path("gone.porth"), "No such file or directory")
        assert str(err) == (
            "Unknown Location --> [Lexing] "
            "Failed to read the file 'gone.porth': No such file or directory"
        )


class TestHierarchy:
    def test_stage_bases(self) -> None:
        assert issubclass(UnknownWordError, ParseError)
        assert issubclass(StackUnderflowError, SimulationError)
        assert issubclass(ParseError, PorthError)
        assert issubclass(PorthError, Exception)
