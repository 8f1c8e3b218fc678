"""
Text CLI commands.

Each command reads FILE, or stdin when FILE is omitted or "-".
"""

from pathlib import Path
from typing import List, Optional

import typer

from bashlike.cli.utils import echo_lines, handle_errors, read_input
from bashlike.commands import text as text_commands


def _file_arg():
    return typer.Argument(None, help="Input file (default: stdin)")


def _lines(content: str) -> List[str]:
    if not content:
        return []
    lines = content.split("\n")
    if content.endswith("\n"):
        lines.pop()
    return lines


def grep(
    pattern: str = typer.Argument(..., help="Regular expression"),
    path: Optional[Path] = _file_arg(),
) -> None:
    """Print lines matching PATTERN."""
    with handle_errors():
        matches = text_commands.grep(pattern, "\n".join(_lines(read_input(path))))
    echo_lines(matches)
    if not matches:
        raise typer.Exit(code=1)


def wc(path: Optional[Path] = _file_arg()) -> None:
    """Print newline, word and character counts."""
    with handle_errors():
        counts = text_commands.wc(read_input(path))
    typer.echo(f"{counts.lines} {counts.words} {counts.chars}")


def head(
    path: Optional[Path] = _file_arg(),
    lines: int = typer.Option(10, "--lines", "-n", help="Number of lines"),
) -> None:
    """Print the first lines of the input."""
    with handle_errors():
        content = read_input(path)
    echo_lines(_lines(text_commands.head(content, lines)))


def tail(
    path: Optional[Path] = _file_arg(),
    lines: int = typer.Option(10, "--lines", "-n", help="Number of lines"),
) -> None:
    """Print the last lines of the input."""
    with handle_errors():
        content = "\n".join(_lines(read_input(path)))
    echo_lines(_lines(text_commands.tail(content, lines)))


def sort(path: Optional[Path] = _file_arg()) -> None:
    """Print the input lines sorted."""
    with handle_errors():
        content = read_input(path)
    echo_lines(text_commands.sort_lines(_lines(content)))


def uniq(path: Optional[Path] = _file_arg()) -> None:
    """Print the input with adjacent duplicate lines removed."""
    with handle_errors():
        content = read_input(path)
    echo_lines(text_commands.uniq(_lines(content)))


def cut(
    path: Optional[Path] = _file_arg(),
    delimiter: str = typer.Option("\t", "--delimiter", "-d", help="Field delimiter"),
    fields: List[int] = typer.Option(..., "--fields", "-f", help="1-based field index (repeatable)"),
) -> None:
    """Print selected fields of each line."""
    with handle_errors():
        content = "\n".join(_lines(read_input(path)))
    echo_lines(text_commands.cut(content, delimiter, fields))


def tr(
    from_chars: str = typer.Argument(..., help="Characters to replace"),
    to_chars: str = typer.Argument(..., help="Replacement characters"),
    path: Optional[Path] = _file_arg(),
) -> None:
    """Translate characters."""
    with handle_errors():
        result = text_commands.tr(read_input(path), from_chars, to_chars)
    typer.echo(result, nl=False)


def sed(
    old: str = typer.Argument(..., help="Literal text to replace"),
    new: str = typer.Argument(..., help="Replacement text"),
    path: Optional[Path] = _file_arg(),
) -> None:
    """Replace every occurrence of OLD with NEW."""
    with handle_errors():
        result = text_commands.sed(read_input(path), old, new)
    typer.echo(result, nl=False)
