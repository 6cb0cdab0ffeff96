"""Shared pytest fixtures for porthsim tests."""

from __future__ import annotations

import io
import logging
from collections.abc import Callable
from pathlib import Path

import pytest

from porthsim.core.evaluator import execute
from porthsim.core.program import Program


@pytest.fixture(autouse=True)
def _reset_package_log_level():
    """CLI tests change the porthsim logger level; restore it after each test."""
    yield
    logging.getLogger("porthsim").setLevel(logging.NOTSET)


@pytest.fixture
def write_source(tmp_path: Path) -> Callable[[str], Path]:
    """Return a helper that writes source text to a file and returns its path."""

    def _write(text: str, name: str = "main.porth") -> Path:
        path = tmp_path / name
        path.write_text(text)
        return path

    return _write


@pytest.fixture
def run_source(write_source: Callable[[str], Path]) -> Callable[[str], tuple[str, list[int]]]:
    """Return a helper that parses and runs source text.

    The helper returns the printed output and the final stack (bottom to top).
    """

    def _run(text: str) -> tuple[str, list[int]]:
        program = Program.from_path(write_source(text))
        out = io.StringIO()
        evaluator = execute(program, output=out)
        return out.getvalue(), evaluator.stack.to_list()

    return _run
