"""CLI utility functions: config overrides, verbosity, input and error handling."""

from __future__ import annotations

import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import typer
import yaml
from rich.console import Console
from rich.markup import escape

from bashlike.commands.files import cat
from bashlike.config.settings import Settings, _deep_merge, config_service
from bashlike.exceptions import BashlikeError
from bashlike.utils.logging import get_logger

_LEVELS = ["critical", "error", "warning", "info", "debug"]

error_console = Console(stderr=True)
logger = get_logger("cli")


def compute_verbosity(base_level: str, verbose: int, quiet: int) -> str:
    idx = (
        _LEVELS.index(base_level.lower())
        if base_level.lower() in _LEVELS
        else _LEVELS.index("warning")
    )
    idx = max(0, min(len(_LEVELS) - 1, idx + verbose - quiet))
    return _LEVELS[idx]


def load_settings_with_cli_overrides(
    *,
    config_path: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> Settings:
    """Load settings and apply optional extra config file and CLI overrides."""

    base = config_service.load().model_dump()

    if config_path:
        extra = (
            yaml.safe_load(config_path.read_text(encoding="utf-8"))
            if config_path.exists()
            else {}
        )
        if extra:
            base = _deep_merge(base, extra)

    if cli_overrides:
        base = _deep_merge(base, cli_overrides)

    return Settings.from_dict(base)


def read_input(path: Path | None) -> str:
    """Read a file argument, or stdin when it is missing or ``-``."""
    if path is None or str(path) == "-":
        return sys.stdin.read()
    return cat(path)


def echo_lines(lines: list[str]) -> None:
    for line in lines:
        typer.echo(line)


@contextmanager
def handle_errors() -> Iterator[None]:
    """Report library errors on stderr and exit with status 1."""
    try:
        yield
    except BashlikeError as exc:
        logger.debug("cli.command_failed", error=exc.to_dict())
        error_console.print(f"[bold red]error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc
