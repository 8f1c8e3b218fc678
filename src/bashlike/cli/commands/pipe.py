"""
Pipe CLI command.

Runs a chain of steps over a file or stdin:

    bashlike pipe app.log -s "grep ERROR" -s "cut ' ' 3" -s sort -s uniq
"""

import io
from pathlib import Path
from typing import List, Optional

import typer

from bashlike.cli.utils import handle_errors, read_input
from bashlike.commands.stages import parse_stage
from bashlike.config.settings import get_settings
from bashlike.core.cancellation import CancellationToken
from bashlike.core.pipeline import Pipeline
from bashlike.utils.logging import get_logger, timed_operation

logger = get_logger("cli.pipe")


def pipe(
    path: Optional[Path] = typer.Argument(None, help="Input file (default: stdin)"),
    steps: List[str] = typer.Option(..., "--step", "-s", help="Pipeline step (repeatable)"),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", "-t", min=0, help="Cancel the run after this many seconds (0 = none)"
    ),
) -> None:
    """Run STEPs in order, feeding each one's output to the next."""
    limit = timeout if timeout is not None else get_settings().execution.timeout_seconds

    with handle_errors():
        pipeline = Pipeline(parse_stage(step) for step in steps)
        content = read_input(path)

        token = CancellationToken.with_timeout(limit) if limit else CancellationToken()
        try:
            with timed_operation("pipe.run", logger=logger, stages=len(pipeline)):
                result = pipeline.execute(token, io.StringIO(content))
        finally:
            token.dispose()

    typer.echo(result.read(), nl=False)
