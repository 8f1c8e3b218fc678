"""Config command implementation."""

from __future__ import annotations

import json

import typer
import yaml

from bashlike.config.settings import _parse_scalar, config_service

app = typer.Typer(name="config", help="Configuration management")


def _validate_scope(scope: str) -> str:
    scope_value = scope.lower()
    if scope_value not in {"user", "project"}:
        raise typer.BadParameter("Scope must be 'user' or 'project'")
    return scope_value


@app.command()
def show(format: str = typer.Option("yaml", help="Output format: yaml or json")) -> None:
    """Show the effective configuration after all layers are merged."""

    data = config_service.load().model_dump()

    if format.lower() == "json":
        typer.echo(json.dumps(data, indent=2))
    else:
        typer.echo(yaml.safe_dump(data, sort_keys=False))


@app.command()
def get(key: str = typer.Argument(..., help="Dot path (e.g., execution.timeout_seconds)")) -> None:
    """Get a configuration value by key path."""

    try:
        value = config_service.get_value(key)
    except KeyError:
        typer.echo(f"Unknown key: {key}", err=True)
        raise typer.Exit(code=1)
    typer.echo(value)


@app.command("set")
def set_value(
    key: str = typer.Argument(..., help="Dot path (e.g., general.verbosity)"),
    value: str = typer.Argument(..., help="Value to set (JSON or plain text)"),
    scope: str = typer.Option("user", case_sensitive=False, help="Scope: user or project"),
) -> None:
    """Set a configuration value in the selected scope."""

    scope_value = _validate_scope(scope)
    try:
        target = config_service.set_value(key, _parse_scalar(value), scope=scope_value)  # type: ignore[arg-type]
    except KeyError:
        typer.echo(f"Unknown key: {key}", err=True)
        raise typer.Exit(code=1)
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(f"Set {key} in {scope_value} config ({target})")


@app.command()
def reset(
    scope: str = typer.Option("user", case_sensitive=False, help="Scope: user or project")
) -> None:
    """Remove scoped config file to fall back to lower-priority sources."""

    scope_value = _validate_scope(scope)
    config_service.reset(scope=scope_value)  # type: ignore[arg-type]
    typer.echo(f"Reset {scope_value} config")
