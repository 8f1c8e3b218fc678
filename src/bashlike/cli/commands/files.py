"""
File, path and process CLI commands.
"""

from pathlib import Path
from typing import List

import typer

from bashlike.cli.utils import echo_lines, handle_errors
from bashlike.commands import files as file_commands
from bashlike.commands import process as process_commands


def cat(paths: List[Path] = typer.Argument(..., help="Files to print")) -> None:
    """Print the content of one or more files."""
    with handle_errors():
        for path in paths:
            typer.echo(file_commands.cat(path), nl=False)


def ls(path: Path = typer.Argument(Path("."), help="Directory to list")) -> None:
    """List directory entries sorted by name."""
    with handle_errors():
        names = file_commands.ls(path)
    echo_lines(names)


def find(
    root: Path = typer.Argument(Path("."), help="Directory to walk"),
    name: str = typer.Option("*", "--name", help="Glob matched against base names"),
) -> None:
    """Print paths under ROOT whose base name matches --name."""
    with handle_errors():
        matches = file_commands.find(root, name)
    echo_lines(matches)


def basename(path: str = typer.Argument(..., help="Path")) -> None:
    """Print the last element of PATH."""
    typer.echo(file_commands.basename(path))


def dirname(path: str = typer.Argument(..., help="Path")) -> None:
    """Print PATH up to its last separator."""
    typer.echo(file_commands.dirname(path))


def test(
    expression: List[str] = typer.Argument(..., help="CONDITION [ARG...], e.g. -f notes.txt"),
) -> None:
    """Evaluate a condition; exit status 0 when true, 1 when false."""
    condition, *args = expression
    with handle_errors():
        result = file_commands.test(condition, *args)
    raise typer.Exit(code=0 if result else 1)


def expr(expression: str = typer.Argument(..., help='Expression such as "2 + 3"')) -> None:
    """Evaluate an integer expression with the system expr program."""
    with handle_errors():
        value = process_commands.expr(expression)
    typer.echo(value)
