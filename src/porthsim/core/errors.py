"""
Error types for porthsim lexing, parsing and simulation.

Errors are data: a kind, an optional primary location and an ordered list
of notes. They are raised without a location; the nearest frame that knows
the relevant location attaches it, and enclosing block contexts append
notes while the error unwinds. Rendering is left to the caller.
"""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from .ir.location import SourceLocation
from .ir.tokens import Marker


class ErrorKind(StrEnum):
    """Machine-readable error kinds."""

    FILE_IO = "file_io"
    UNEXPECTED_MARKER = "unexpected_marker"
    MISSING_MARKER = "missing_marker"
    UNKNOWN_WORD = "unknown_word"
    STACK_UNDERFLOW = "stack_underflow"
    DIVIDE_BY_ZERO = "divide_by_zero"


class NoteKind(StrEnum):
    """Kinds of supplementary notes attached to an error."""

    BLOCK_START = "block_start"


class Note(BaseModel):
    """A supplementary diagnostic pointing at a related source location."""

    kind: NoteKind
    marker: Marker
    location: SourceLocation

    model_config = ConfigDict(frozen=True)

    @property
    def message(self) -> str:
        return f"`{self.marker}` block starts here"

    def __str__(self) -> str:
        return f"{self.location} --> {self.message}"


class PorthError(Exception):
    """Base exception for all porthsim errors."""

    kind: ErrorKind
    stage = "Error"

    def __init__(self, location: SourceLocation | None = None) -> None:
        self.location = location
        self.notes: list[Note] = []
        super().__init__(self.message)

    @property
    def message(self) -> str:
        """Human-readable description, derived from the error's data."""
        raise NotImplementedError

    @property
    def has_location(self) -> bool:
        return self.location is not None

    def with_location(self, location: SourceLocation) -> PorthError:
        """Attach ``location`` unless a location is already set."""
        if not self.has_location:
            self.location = location
        return self

    def add_note(self, kind: NoteKind, marker: Marker, location: SourceLocation) -> PorthError:
        """Append a note; notes keep the order in which they were added."""
        self.notes.append(Note(kind=kind, marker=marker, location=location))
        return self

    def __str__(self) -> str:
        where = str(self.location) if self.location else "Unknown Location"
        return f"{where} --> [{self.stage}] {self.message}"


# ---------------------------------------------------------------------------
# Lexing
# ---------------------------------------------------------------------------


class LexingError(PorthError):
    """Raised when the source text cannot be turned into tokens."""

    stage = "Lexing"


class SourceFileError(LexingError):
    """
    Raised when the source file cannot be opened or read.

    The underlying OSError/UnicodeDecodeError is chained as ``__cause__``.
    """

    kind = ErrorKind.FILE_IO

    def __init__(self, path: Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__()

    @property
    def message(self) -> str:
        return f"Failed to read the file {str(self.path)!r}: {self.reason}"


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


class ParseError(PorthError):
    """
    Raised when the token stream does not form a well-structured program.

    Examples:
    - A block marker with no enclosing block
    - A block that is never closed
    - A word that is not an intrinsic
    """

    stage = "Parsing"


class UnexpectedMarkerReason(StrEnum):
    GENERAL = "general"
    FREE_FLOATING = "free_floating"
    REPEATED = "repeated"
    NOT_APPLICABLE = "not_applicable"


class UnexpectedMarkerError(ParseError):
    """A marker appeared where its block structure does not allow it."""

    kind = ErrorKind.UNEXPECTED_MARKER

    def __init__(
        self,
        marker: Marker,
        reason: UnexpectedMarkerReason,
        block: Marker | None = None,
        detail: str | None = None,
        location: SourceLocation | None = None,
    ) -> None:
        self.marker = marker
        self.reason = reason
        self.block = block
        self.detail = detail
        super().__init__(location)

    @property
    def message(self) -> str:
        if self.reason == UnexpectedMarkerReason.FREE_FLOATING:
            text = f"`{self.marker}` must be associated with a block"
        elif self.reason == UnexpectedMarkerReason.REPEATED:
            text = (
                f"`{self.marker}` cannot appear twice in succession "
                f"within the same `{self.block}` block"
            )
        elif self.reason == UnexpectedMarkerReason.NOT_APPLICABLE:
            text = f"`{self.marker}` cannot appear within an `{self.block}` block"
        else:
            text = self.detail or ""
        return f"Unexpected token `{self.marker}`: {text}"


class MissingMarkerReason(StrEnum):
    BLOCK_NOT_CLOSED = "block_not_closed"
    REQUIRED_BY_BLOCK = "required_by_block"


class MissingMarkerError(ParseError):
    """A marker the enclosing block needs never appeared."""

    kind = ErrorKind.MISSING_MARKER

    def __init__(
        self,
        marker: Marker,
        reason: MissingMarkerReason,
        block: Marker | None = None,
        location: SourceLocation | None = None,
    ) -> None:
        self.marker = marker
        self.reason = reason
        self.block = block
        super().__init__(location)

    @property
    def message(self) -> str:
        if self.reason == MissingMarkerReason.BLOCK_NOT_CLOSED:
            text = f"Expected an `{Marker.END}` token to end the block"
        else:
            text = f"`{self.block}` block is required to contain a `{self.marker}` block"
        return f"Missing expected token `{self.marker}`: {text}"


class UnknownWordError(ParseError):
    """A word matched no intrinsic."""

    kind = ErrorKind.UNKNOWN_WORD

    def __init__(self, word: str, location: SourceLocation | None = None) -> None:
        self.word = word
        super().__init__(location)

    @property
    def message(self) -> str:
        return f"Unknown word: `{self.word}`"


# ---------------------------------------------------------------------------
# Simulation
# ---------------------------------------------------------------------------


class SimulationError(PorthError):
    """Raised when a parsed program fails while it runs."""

    stage = "Simulation"


class StackUnderflowError(SimulationError):
    kind = ErrorKind.STACK_UNDERFLOW

    @property
    def message(self) -> str:
        return "Stack underflowed"


class DivideByZeroError(SimulationError):
    kind = ErrorKind.DIVIDE_BY_ZERO

    @property
    def message(self) -> str:
        return "Division by zero"
