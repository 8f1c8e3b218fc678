"""Text-processing helpers modelled on grep, cut, sed, awk, sort, uniq, wc, tr,
head and tail.

All helpers work on fully materialized strings; lines are the pieces
between ``"\\n"`` characters.
"""

from __future__ import annotations

import re
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TextIO

from bashlike.exceptions import FileOperationError, InvalidArgumentError, InvalidRegexError


@dataclass(frozen=True)
class WordCount:
    """Result of ``wc``."""

    lines: int
    words: int
    chars: int
    bytes: int


def _compile(pattern: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise InvalidRegexError(pattern, exc) from exc


def echo(*args: object, stream: TextIO | None = None) -> None:
    """Write ``args`` separated by spaces and followed by a newline."""
    try:
        print(*args, file=stream or sys.stdout)
    except OSError as exc:
        raise FileOperationError("echo", original_exception=exc) from exc


def read_line(stream: TextIO | None = None) -> str:
    """Read one line from ``stream`` (stdin by default), whitespace-trimmed.

    Raises ``FileOperationError`` if the stream ends before a newline.
    """
    source = stream or sys.stdin
    try:
        line = source.readline()
    except OSError as exc:
        raise FileOperationError("read_line", original_exception=exc) from exc
    if not line.endswith("\n"):
        raise FileOperationError(
            "read_line", original_exception=EOFError("end of input before newline")
        )
    return line.strip()


def grep(pattern: str, text: str) -> list[str]:
    """Return the lines of ``text`` that contain a match for ``pattern``."""
    regex = _compile(pattern)
    return [line for line in text.split("\n") if regex.search(line)]


def cut(text: str, delimiter: str, fields: Sequence[int]) -> list[str]:
    """Select 1-based ``fields`` from each line.

    Fields are taken in the order given; indices outside a line's range are
    skipped. An empty delimiter splits a line into characters.
    """
    result = []
    for line in text.split("\n"):
        parts = line.split(delimiter) if delimiter else list(line)
        selected = [parts[f - 1] for f in fields if 0 < f <= len(parts)]
        result.append(delimiter.join(selected))
    return result


def sed(text: str, old: str, new: str) -> str:
    """Replace every literal occurrence of ``old`` with ``new``."""
    return text.replace(old, new)


def awk(text: str, pattern: str, action: Callable[[list[str]], str]) -> list[str]:
    """Apply ``action`` to the whitespace-split fields of each matching line."""
    regex = _compile(pattern)
    return [action(line.split()) for line in text.split("\n") if regex.search(line)]


def sort_lines(lines: Sequence[str]) -> list[str]:
    return sorted(lines)


def uniq(lines: Sequence[str]) -> list[str]:
    """Drop adjacent duplicate lines."""
    result: list[str] = []
    for i, line in enumerate(lines):
        if i == 0 or line != lines[i - 1]:
            result.append(line)
    return result


def wc(text: str) -> WordCount:
    """Count newlines, whitespace-separated words, characters and UTF-8 bytes."""
    return WordCount(
        lines=text.count("\n"),
        words=len(text.split()),
        chars=len(text),
        bytes=len(text.encode("utf-8")),
    )


def tr(text: str, from_chars: str, to_chars: str) -> str:
    """Translate each character of ``from_chars`` to the one at the same index
    in ``to_chars``."""
    if len(from_chars) != len(to_chars):
        raise InvalidArgumentError(
            "'from' and 'to' must have the same length",
            from_length=len(from_chars),
            to_length=len(to_chars),
        )
    return text.translate(str.maketrans(from_chars, to_chars))


def head(text: str, n: int) -> str:
    """First ``n`` lines of ``text``."""
    if n <= 0:
        return ""
    return "\n".join(text.split("\n", n)[:n])


def tail(text: str, n: int) -> str:
    """Last ``n`` lines of ``text``."""
    if n <= 0:
        return ""
    return "\n".join(text.split("\n")[-n:])
