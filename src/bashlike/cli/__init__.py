"""CLI module for bashlike."""

from bashlike.cli.main import app

__all__ = ["app"]
