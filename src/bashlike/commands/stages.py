"""Adapters that turn the text helpers and external commands into pipeline
stages.

    >>> chain = Pipeline([parse_stage("grep ERROR"), parse_stage("sort"), parse_stage("uniq")])
    >>> chain.execute(CancellationToken(), io.StringIO(log_text)).read()
"""

from __future__ import annotations

import io
import shlex
from collections.abc import Callable

from bashlike.commands import text as text_commands
from bashlike.commands.process import check_result, run_process
from bashlike.config.settings import get_settings
from bashlike.core.cancellation import CancellationToken
from bashlike.core.pipeline import Stage, Stream
from bashlike.exceptions import InvalidArgumentError

TextTransform = Callable[[str], str]


def _read_text(stream: Stream) -> str:
    data = stream.read()
    if isinstance(data, bytes):
        return data.decode(get_settings().files.encoding, errors="replace")
    return data


def text_stage(func: TextTransform, name: str | None = None) -> Stage:
    """Wrap a ``str -> str`` function as a stage."""

    def handler(token: CancellationToken, stream: Stream) -> Stream:
        return io.StringIO(func(_read_text(stream)))

    return Stage(name or getattr(func, "__name__", "text"), handler)


def process_stage(command: str, *args: str, timeout: float | None = None) -> Stage:
    """Feed the stage input to an external command and yield its output.

    The pipeline's token is forwarded to the process, so cancelling the run
    kills a command that is still executing.
    """
    argv = [command, *args]

    def handler(token: CancellationToken, stream: Stream) -> Stream:
        result = run_process(argv, token=token, timeout=timeout, input=_read_text(stream))
        if result.cancelled:
            token.raise_if_cancelled()
        return io.StringIO(check_result(result))

    return Stage(" ".join(argv), handler)


# Line-oriented helpers treat a trailing newline as a terminator, not as an
# extra empty line.
def _split(text: str) -> list[str]:
    if not text:
        return []
    lines = text.split("\n")
    if text.endswith("\n"):
        lines.pop()
    return lines


def _join(lines: list[str]) -> str:
    return "".join(f"{line}\n" for line in lines)


def _int_arg(step: str, value: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise InvalidArgumentError(
            f"{step}: expected an integer, got {value!r}", step=step
        ) from exc


def _grep(args: list[str]) -> TextTransform:
    (pattern,) = args
    # fail at build time on a bad pattern
    text_commands.grep(pattern, "")

    def run(text: str) -> str:
        lines = _split(text)
        if not lines:
            return ""
        return _join(text_commands.grep(pattern, "\n".join(lines)))

    return run


def _sort(args: list[str]) -> TextTransform:
    return lambda text: _join(text_commands.sort_lines(_split(text)))


def _uniq(args: list[str]) -> TextTransform:
    return lambda text: _join(text_commands.uniq(_split(text)))


def _head(args: list[str]) -> TextTransform:
    n = _int_arg("head", args[0]) if args else 10

    def run(text: str) -> str:
        lines = _split(text)
        if not lines or n <= 0:
            return ""
        return _join(text_commands.head("\n".join(lines), n).split("\n"))

    return run


def _tail(args: list[str]) -> TextTransform:
    n = _int_arg("tail", args[0]) if args else 10

    def run(text: str) -> str:
        lines = _split(text)
        if not lines or n <= 0:
            return ""
        return _join(text_commands.tail("\n".join(lines), n).split("\n"))

    return run


def _sed(args: list[str]) -> TextTransform:
    old, new = args
    return lambda text: text_commands.sed(text, old, new)


def _tr(args: list[str]) -> TextTransform:
    from_chars, to_chars = args
    if len(from_chars) != len(to_chars):
        raise InvalidArgumentError("tr: 'from' and 'to' must have the same length", step="tr")
    return lambda text: text_commands.tr(text, from_chars, to_chars)


def _cut(args: list[str]) -> TextTransform:
    delimiter, *raw_fields = args
    if not raw_fields:
        raise InvalidArgumentError("cut: at least one field is required", step="cut")
    fields = [_int_arg("cut", f) for f in raw_fields]

    def run(text: str) -> str:
        lines = _split(text)
        if not lines:
            return ""
        return _join(text_commands.cut("\n".join(lines), delimiter, fields))

    return run


def _wc(args: list[str]) -> TextTransform:
    def run(text: str) -> str:
        counts = text_commands.wc(text)
        return f"{counts.lines} {counts.words} {counts.chars}\n"

    return run


_BUILDERS: dict[str, tuple[Callable[[list[str]], TextTransform], int, int]] = {
    # name: (builder, min args, max args)
    "grep": (_grep, 1, 1),
    "sort": (_sort, 0, 0),
    "uniq": (_uniq, 0, 0),
    "head": (_head, 0, 1),
    "tail": (_tail, 0, 1),
    "sed": (_sed, 2, 2),
    "tr": (_tr, 2, 2),
    "cut": (_cut, 2, 64),
    "wc": (_wc, 0, 0),
}


def parse_stage(step: str) -> Stage:
    """Build a stage from a shell-like step such as ``"grep ERROR"``.

    Built-in steps: grep, sort, uniq, head, tail, sed, tr, cut, wc. Any
    other program name becomes a ``process_stage``.
    """
    try:
        argv = shlex.split(step)
    except ValueError as exc:
        raise InvalidArgumentError(f"cannot parse step {step!r}: {exc}", step=step) from exc
    if not argv:
        raise InvalidArgumentError("empty pipeline step", step=step)

    name, args = argv[0], argv[1:]
    if name not in _BUILDERS:
        return process_stage(name, *args)

    builder, min_args, max_args = _BUILDERS[name]
    if not min_args <= len(args) <= max_args:
        raise InvalidArgumentError(
            f"{name}: expected {min_args}..{max_args} arguments, got {len(args)}",
            step=step,
        )
    return text_stage(builder(args), name=step)
