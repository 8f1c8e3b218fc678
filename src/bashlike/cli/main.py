"""
Main CLI application definition.

bashlike: shell-style text, file and process utilities with a
cancellable pipeline runner.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import typer
import yaml
from rich.markup import escape

from bashlike.cli import utils as cli_utils
from bashlike.cli.commands import (
    config as config_commands,
    files as file_commands,
    pipe as pipe_commands,
    text as text_commands,
)
from bashlike.config.settings import config_service, set_settings
from bashlike.utils.logging import (
    configure_from_settings,
    generate_execution_id,
    set_execution_context,
)

app = typer.Typer(
    name="bashlike",
    help="""bashlike: shell-style utilities and pipelines

    \b
    EXAMPLES:
      bashlike grep ERROR app.log
      bashlike cut -d , -f 2 data.csv
      bashlike pipe app.log -s "grep ERROR" -s sort -s uniq
      bashlike find . --name "*.py"
      bashlike config show
    """,
    add_completion=False,
    no_args_is_help=True,
)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to config YAML"
    ),
    output: Optional[str] = typer.Option(
        None, "--output", "-o", help="Log output format (text|json)"
    ),
    color: Optional[bool] = typer.Option(
        None, "--color/--no-color", help="Enable or disable color output"
    ),
    verbose: int = typer.Option(
        0, "--verbose", "-v", count=True, help="Increase verbosity (stackable)"
    ),
    quiet: int = typer.Option(
        0, "--quiet", "-q", count=True, help="Decrease verbosity (stackable)"
    ),
):
    """Global options and configuration bootstrap."""
    cli_overrides: Dict[str, Any] = {"general": {}}

    if output:
        cli_overrides["general"]["output_format"] = output
    if color is not None:
        cli_overrides["general"]["color_enabled"] = color

    try:
        base_level = config_service.load().general.verbosity
        cli_overrides["general"]["verbosity"] = cli_utils.compute_verbosity(
            base_level, verbose, quiet
        )
        settings = cli_utils.load_settings_with_cli_overrides(
            config_path=config,
            cli_overrides=cli_overrides,
        )
    except (ValueError, yaml.YAMLError) as exc:
        cli_utils.error_console.print(f"[bold red]error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    set_settings(settings)
    configure_from_settings(settings)
    set_execution_context(
        execution_id=generate_execution_id(),
        command=ctx.invoked_subcommand,
    )
    ctx.obj = {"settings": settings}

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command()
def version():
    """Show version information."""
    from bashlike import __version__

    typer.echo(f"bashlike version {__version__}")


@app.command()
def init():
    """Write the effective configuration to the user config file."""
    path = config_service.save(config_service.load(), scope="user")
    typer.echo(f"Initialized user configuration at {path}")


# Text commands
for _name in ("grep", "wc", "head", "tail", "sort", "uniq", "cut", "tr", "sed"):
    app.command(_name)(getattr(text_commands, _name))

# File, path and process commands
for _name in ("cat", "ls", "find", "basename", "dirname", "expr"):
    app.command(_name)(getattr(file_commands, _name))

app.command("test", context_settings={"ignore_unknown_options": True})(
    file_commands.test
)
app.command("pipe")(pipe_commands.pipe)

app.add_typer(config_commands.app, name="config")


if __name__ == "__main__":
    app()
