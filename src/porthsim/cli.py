"""
porthsim CLI - Entry point.

Commands:
- sim: parse and simulate a source file
- dump: parse a source file and print its operation tree as source
"""

from __future__ import annotations

import platform
from pathlib import Path

import typer

from porthsim._version import get_version
from porthsim.core.config import configure_logging
from porthsim.core.errors import PorthError
from porthsim.core.evaluator import execute
from porthsim.core.formatter import format_program
from porthsim.core.program import Program


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"porthsim version {get_version()}")
        typer.echo(f"  Python:        {platform.python_implementation()} {platform.python_version()}")
        raise typer.Exit()


def format_diagnostic(error: PorthError) -> list[str]:
    """Primary line followed by one indented line per note, in order."""
    lines = [str(error)]
    lines.extend(f"    {note}" for note in error.notes)
    return lines


def _report(error: PorthError) -> None:
    for line in format_diagnostic(error):
        typer.echo(line, err=True)


# =============================================================================
# Main Application
# =============================================================================

app = typer.Typer(
    help="porthsim: simulator for a small stack-based language",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version information",
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="trace, debug, info, warning, error or off (default: $PORTHSIM_LOG or info)",
    ),
) -> None:
    """porthsim CLI main callback for global options."""
    configure_logging(log_level)


@app.command()
def sim(
    source_file: Path = typer.Argument(..., help="Source file to simulate"),  # noqa: B008
) -> None:
    """
    Parse SOURCE_FILE and simulate it.

    Output of `print` goes to stdout; diagnostics go to stderr.
    """
    try:
        program = Program.from_path(source_file)
        execute(program)
    except PorthError as e:
        _report(e)
        raise typer.Exit(code=1)


@app.command()
def dump(
    source_file: Path = typer.Argument(..., help="Source file to parse"),  # noqa: B008
) -> None:
    """
    Parse SOURCE_FILE and print its operation tree as normalized source.
    """
    try:
        program = Program.from_path(source_file)
    except PorthError as e:
        _report(e)
        raise typer.Exit(code=1)

    typer.echo(format_program(program), nl=False)


def main(argv: list[str] | None = None) -> None:
    app(args=argv)


if __name__ == "__main__":
    main()
