"""
Source location types.

Locations are captured by the lexer and copied into tokens, operations and
diagnostics. They are only ever displayed, never compared to drive behaviour.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class SourcePosition(BaseModel):
    """A 1-based line/column pair inside a source file."""

    line: int = Field(ge=1, description="Line number (1-indexed)")
    column: int = Field(ge=1, description="Column number (1-indexed)")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


class SourceLocation(BaseModel):
    """
    A file path plus an optional position.

    The position is absent until the lexer has read the first line of the
    file, so a location taken before any read only names the file.
    """

    file: Path = Field(description="Path of the source file")
    position: SourcePosition | None = Field(default=None, description="Line/column, if known")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        if self.position is None:
            return str(self.file)
        return f"{self.file}:{self.position}"

    @property
    def line(self) -> int | None:
        return self.position.line if self.position else None

    @property
    def column(self) -> int | None:
        return self.position.column if self.position else None
