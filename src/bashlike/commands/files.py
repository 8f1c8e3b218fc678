"""Filesystem helpers: cat, ls, mkdir, rm, find, write/append and path tests.

Every OS-level failure is re-raised as ``FileOperationError`` with the
original exception attached.
"""

from __future__ import annotations

import fnmatch
import os
import shutil
import stat
from typing import Union

from bashlike.config.settings import get_settings
from bashlike.exceptions import FileOperationError, InvalidArgumentError
from bashlike.utils.logging import get_logger

logger = get_logger("commands.files")

PathLike = Union[str, os.PathLike]

_SEPARATORS = os.sep + (os.altsep or "")


def cat(path: PathLike) -> str:
    """Read a whole file and return its content."""
    encoding = get_settings().files.encoding
    try:
        with open(path, "r", encoding=encoding, newline="") as handle:
            return handle.read()
    except (OSError, UnicodeError) as exc:
        raise FileOperationError("cat", str(path), exc) from exc


def ls(path: PathLike = ".") -> list[str]:
    """List the entry names of a directory, sorted by name."""
    try:
        return sorted(os.listdir(path))
    except OSError as exc:
        raise FileOperationError("ls", str(path), exc) from exc


def mkdir(path: PathLike) -> None:
    """Create a directory and any missing parents. Existing directories are fine."""
    try:
        os.makedirs(path, mode=get_settings().files.dir_mode, exist_ok=True)
    except OSError as exc:
        raise FileOperationError("mkdir", str(path), exc) from exc
    logger.debug("files.mkdir", path=str(path))


def rm(path: PathLike) -> None:
    """Remove a file, symlink or directory tree. Missing paths are ignored."""
    try:
        mode = os.lstat(path).st_mode
    except FileNotFoundError:
        return
    except OSError as exc:
        raise FileOperationError("rm", str(path), exc) from exc

    try:
        if stat.S_ISDIR(mode):
            shutil.rmtree(path)
        else:
            os.remove(path)
    except FileNotFoundError:
        return
    except OSError as exc:
        raise FileOperationError("rm", str(path), exc) from exc
    logger.debug("files.removed", path=str(path))


def _write(path: PathLike, content: str, flags: int, operation: str) -> None:
    settings = get_settings().files
    try:
        fd = os.open(path, flags, settings.file_mode)
        with os.fdopen(fd, "w", encoding=settings.encoding, newline="") as handle:
            handle.write(content)
    except (OSError, UnicodeError) as exc:
        raise FileOperationError(operation, str(path), exc) from exc
    logger.debug(f"files.{operation}", path=str(path), chars=len(content))


def write_file(path: PathLike, content: str) -> None:
    """Create or truncate ``path`` and write ``content`` to it."""
    _write(path, content, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, "write_file")


def append_file(path: PathLike, content: str) -> None:
    """Append ``content`` to ``path``, creating the file if needed."""
    _write(path, content, os.O_WRONLY | os.O_CREAT | os.O_APPEND, "append_file")


def find(root: PathLike, pattern: str) -> list[str]:
    """Walk ``root`` and return every path whose base name matches ``pattern``.

    The walk is depth-first in lexical order, starts with ``root`` itself and
    does not follow symlinks. Matching is a case-sensitive glob.
    """
    root = os.fspath(root)
    matches: list[str] = []

    def visit(path: str) -> None:
        try:
            mode = os.lstat(path).st_mode
        except OSError as exc:
            raise FileOperationError("find", path, exc) from exc

        if fnmatch.fnmatchcase(basename(path), pattern):
            matches.append(path)

        if stat.S_ISDIR(mode):
            try:
                names = sorted(os.listdir(path))
            except OSError as exc:
                raise FileOperationError("find", path, exc) from exc
            for name in names:
                visit(os.path.join(path, name))

    visit(root)
    return matches


def basename(path: str) -> str:
    """Last element of ``path``; trailing separators are ignored.

    ``basename("")`` is ``"."`` and a path made only of separators yields
    the separator.
    """
    if not path:
        return "."
    stripped = path.rstrip(_SEPARATORS)
    if not stripped:
        return os.sep
    return os.path.basename(stripped)


def dirname(path: str) -> str:
    """Everything up to the last separator of ``path``, normalized.

    Unlike shell ``dirname``, a trailing separator ends the last element,
    so ``dirname("a/b/")`` is ``"a/b"``. ``dirname("file")`` is ``"."``.
    """
    head = os.path.dirname(path)
    if not head:
        return "."
    cleaned = os.path.normpath(head)
    # POSIX normpath keeps a leading "//"
    if cleaned.startswith(os.sep * 2):
        cleaned = os.sep + cleaned.lstrip(_SEPARATORS)
    return cleaned


def test(condition: str, *args: str) -> bool:
    """Evaluate a ``test``-style condition.

    Supported conditions: ``-e``, ``-f``, ``-d`` (paths), ``-z``, ``-n``
    (strings), ``=`` and ``!=`` (string comparison).
    """
    unary = {"-e", "-f", "-d", "-z", "-n"}
    binary = {"=", "!="}

    if condition in unary:
        if len(args) != 1:
            raise InvalidArgumentError(
                f"condition {condition} expects 1 argument, got {len(args)}",
                condition=condition,
            )
    elif condition in binary:
        if len(args) != 2:
            raise InvalidArgumentError(
                f"condition {condition} expects 2 arguments, got {len(args)}",
                condition=condition,
            )
    else:
        raise InvalidArgumentError(
            f"unsupported test condition: {condition}", condition=condition
        )

    if condition == "-e":
        return os.path.exists(args[0])
    if condition == "-f":
        return os.path.exists(args[0]) and not os.path.isdir(args[0])
    if condition == "-d":
        return os.path.isdir(args[0])
    if condition == "-z":
        return len(args[0]) == 0
    if condition == "-n":
        return len(args[0]) > 0
    if condition == "=":
        return args[0] == args[1]
    return args[0] != args[1]
