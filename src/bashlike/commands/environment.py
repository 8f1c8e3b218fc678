"""Process environment helpers: env, set_env, pwd, cd."""

from __future__ import annotations

import os

from bashlike.exceptions import FileOperationError
from bashlike.utils.logging import get_logger

logger = get_logger("commands.environment")


def env(key: str) -> str:
    """Value of environment variable ``key``, or ``""`` when unset."""
    return os.environ.get(key, "")


def set_env(key: str, value: str) -> None:
    """Set environment variable ``key`` for this process and its children."""
    if not key or "=" in key or "\0" in key or "\0" in value:
        raise FileOperationError(
            "set_env",
            key,
            ValueError(f"illegal environment variable name or value: {key!r}"),
        )
    try:
        os.environ[key] = value
    except (OSError, ValueError) as exc:
        raise FileOperationError("set_env", key, exc) from exc


def pwd() -> str:
    """Current working directory."""
    try:
        return os.getcwd()
    except OSError as exc:
        raise FileOperationError("pwd", original_exception=exc) from exc


def cd(path: str) -> None:
    """Change the current working directory."""
    try:
        os.chdir(path)
    except OSError as exc:
        raise FileOperationError("cd", path, exc) from exc
    logger.debug("env.cd", path=path)
