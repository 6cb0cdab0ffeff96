"""
Program loading.

A Program owns the root operation block of one source file. It is built
once and never modified afterwards.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from .ir.operations import Operation
from .parser import parse_file

logger = logging.getLogger(__name__)


class Program(BaseModel):
    """A fully parsed program."""

    root_block: list[Operation] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_path(cls, path: str | Path) -> Program:
        """
        Lex and parse the source file at ``path``.

        Raises:
            SourceFileError: If the file cannot be opened or read
            ParseError: If the source is not a well-formed program
        """
        root_block = parse_file(path)

        logger.info("Parsed program at file: %s", path)
        logger.debug("Root block has %d operations", len(root_block))

        return cls(root_block=root_block)
