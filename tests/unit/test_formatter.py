"""Tests for rendering operation trees back to source."""

from __future__ import annotations

import io

from porthsim.core.evaluator import execute
from porthsim.core.formatter import format_program
from porthsim.core.program import Program


class TestFormatProgram:
    def test_flat_program(self, write_source) -> None:
        program = Program.from_path(write_source("34   35 +\n  print // done\n"))
        assert format_program(program) == "34\n35\n+\nprint\n"

    def test_empty_program(self, write_source) -> None:
        assert format_program(Program.from_path(write_source(""))) == ""

    def test_if_chain_layout(self, write_source) -> None:
        program = Program.from_path(write_source("1 if 2 else 3 if* 4 else 5 end\n"))
        assert format_program(program) == (
            "1\n"
            "if\n"
            "  2\n"
            "else\n"
            "  3\n"
            "if*\n"
            "  4\n"
            "else\n"
            "  5\n"
            "end\n"
        )

    def test_empty_else_is_rendered(self, write_source) -> None:
        program = Program.from_path(write_source("0 if 1 else end\n"))
        assert format_program(program) == "0\nif\n  1\nelse\nend\n"

    def test_nested_while(self, write_source) -> None:
        program = Program.from_path(write_source("3 while dup do 1 if drop end end\n"))
        assert format_program(program) == (
            "3\n"
            "while\n"
            "  dup\n"
            "do\n"
            "  1\n"
            "  if\n"
            "    drop\n"
            "  end\n"
            "end\n"
        )


class TestRoundTrip:
    SOURCE = (
        "10 while dup do\n"
        "  dup 3 divmod swap drop\n"
        "  if 1 print else dup 2 divmod swap drop if* 2 print else 3 print end\n"
        "  1 -\n"
        "end drop\n"
    )

    def test_reparse_gives_same_text(self, write_source) -> None:
        first = format_program(Program.from_path(write_source(self.SOURCE, name="a.porth")))
        second = format_program(Program.from_path(write_source(first, name="b.porth")))
        assert first == second

    def test_reparse_behaves_the_same(self, write_source) -> None:
        original = Program.from_path(write_source(self.SOURCE, name="a.porth"))
        reparsed = Program.from_path(write_source(format_program(original), name="b.porth"))

        out_a, out_b = io.StringIO(), io.StringIO()
        stack_a = execute(original, output=out_a).stack.to_list()
        stack_b = execute(reparsed, output=out_b).stack.to_list()

        assert out_a.getvalue() != ""
        assert out_a.getvalue() == out_b.getvalue()
        assert stack_a == stack_b


class TestDeepNesting:
    def test_deeply_nested_program_formats(self, write_source) -> None:
        depth = 1000
        program = Program.from_path(write_source("1 if " * depth + "end " * depth + "\n"))

        lines = format_program(program).splitlines()

        assert len(lines) == 3 * depth
        assert lines[:4] == ["1", "if", "  1", "  if"]
        assert lines[2 * depth - 1] == "  " * (depth - 1) + "if"
        assert lines[2 * depth] == "  " * (depth - 1) + "end"
        assert lines[-1] == "end"
