"""
Lexer for porthsim source files.

Reads the source one line at a time and hands out whitespace-delimited
tokens on demand, stamping each with the line and column it starts at.

A buffered remainder that begins with ``//`` is a comment and is discarded
up to the end of the physical line. The check only happens at a token
boundary, so ``5//x`` is a single word rather than ``5`` plus a comment.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from pathlib import Path
from typing import TextIO

from .errors import SourceFileError
from .ir.location import SourceLocation, SourcePosition
from .ir.tokens import Token

logger = logging.getLogger(__name__)

COMMENT_PREFIX = "//"

_WHITESPACE_RE = re.compile(r"\s")


class Lexer:
    """
    Pull-based lexer over an open text stream.

    The lexer owns its stream; use it as a context manager (or call
    ``close``) to release the file.
    """

    def __init__(self, reader: TextIO, file: Path):
        """
        Initialize lexer.

        Args:
            reader: Open text stream positioned at the start of the source
            file: Source file path (for locations and error reporting)
        """
        self.reader = reader
        self.file = Path(file)
        self.line = 0  # no line read yet, so no position
        self.column = 1
        self.buffer = ""

    @classmethod
    def open(cls, path: str | Path) -> Lexer:
        """Open ``path`` for lexing.

        Raises:
            SourceFileError: If the file cannot be opened
        """
        path = Path(path)
        try:
            reader = path.open(encoding="utf-8")
        except OSError as e:
            raise SourceFileError(path, e.strerror or str(e)) from e

        logger.debug("Opened file: %s", path)
        return cls(reader, path)

    def close(self) -> None:
        self.reader.close()

    def __enter__(self) -> Lexer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __iter__(self) -> Iterator[Token]:
        while (token := self.next_token()) is not None:
            yield token

    def current_location(self) -> SourceLocation:
        """Location of the read cursor; has no position before the first line."""
        position = SourcePosition(line=self.line, column=self.column) if self.line else None
        return SourceLocation(file=self.file, position=position)

    def next_token(self) -> Token | None:
        """
        Lex the next token.

        Returns:
            The next token, or None at end of file

        Raises:
            SourceFileError: If reading the file fails
        """
        text = ""
        location = self.current_location()

        while not text:
            if not self.buffer and not self._read_line():
                return None

            if self.buffer.startswith(COMMENT_PREFIX):
                self.buffer = ""
                continue

            location = self.current_location()
            initial_len = len(self.buffer)

            match = _WHITESPACE_RE.search(self.buffer)
            end = match.start() if match else len(self.buffer)

            # Leading whitespace yields an empty capture; the loop then
            # retries from the first non-blank column.
            text = self.buffer[:end]
            self.buffer = self.buffer[end:].lstrip()
            self.column += initial_len - len(self.buffer)

        token = Token.from_text(text, location)
        logger.debug("Lexed token: %r", token)
        return token

    def _read_line(self) -> bool:
        """Buffer the next physical line. Returns False at end of file."""
        try:
            line = self.reader.readline()
        except (OSError, UnicodeDecodeError) as e:
            raise SourceFileError(self.file, str(e)) from e

        if not line:
            return False

        self.line += 1
        self.column = 1
        self.buffer = line

        logger.debug("Read %d characters from %s: %r", len(line), self.current_location(), line)
        return True


def tokenize(path: str | Path) -> list[Token]:
    """Lex an entire file into a list of tokens.

    Public helper for tooling that wants the raw token stream; the parser
    pulls tokens from a Lexer one at a time instead.
    """
    with Lexer.open(path) as lexer:
        return list(lexer)
