"""External process execution with cancellation support.

Commands are spawned directly (no shell) with stdout and stderr merged.
A ``CancellationToken`` is polled while the process runs; once it is
cancelled, or the timeout expires, the process is killed.
"""

from __future__ import annotations

import subprocess
import time
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from bashlike.config.settings import get_settings
from bashlike.core.cancellation import CancellationToken
from bashlike.exceptions import CommandExecutionError, InvalidArgumentError
from bashlike.utils.logging import get_logger

logger = get_logger("commands.process")


@dataclass
class ProcessResult:
    """Outcome of a finished, killed or never-started process."""

    command: list[str]
    output: str
    return_code: int
    duration_ms: float
    cancelled: bool = False
    timed_out: bool = False

    @property
    def success(self) -> bool:
        return self.return_code == 0 and not (self.cancelled or self.timed_out)

    def to_dict(self) -> dict[str, Any]:
        return {
            "command": self.command,
            "output": self.output,
            "return_code": self.return_code,
            "duration_ms": self.duration_ms,
            "cancelled": self.cancelled,
            "timed_out": self.timed_out,
            "success": self.success,
        }


def _default_timeout(timeout: float | None) -> float | None:
    if timeout is not None:
        return timeout or None
    return get_settings().execution.timeout_seconds or None


def run_process(
    argv: Sequence[str],
    token: CancellationToken | None = None,
    timeout: float | None = None,
    input: str | None = None,
) -> ProcessResult:
    """Run ``argv`` to completion and return its combined output.

    Args:
        argv: Program followed by its arguments.
        token: Polled while the process runs; cancellation kills it. A token
            that is already cancelled prevents the process from starting.
        timeout: Seconds before the process is killed. ``None`` uses
            ``execution.timeout_seconds``; ``0`` disables the limit.
        input: Text written to the process's stdin.

    Raises:
        CommandExecutionError: If the program cannot be started.
    """
    command = list(argv)
    if not command:
        raise InvalidArgumentError("command must not be empty")

    settings = get_settings()
    limit = _default_timeout(timeout)
    poll = settings.execution.poll_interval_seconds
    start = time.perf_counter()

    if token is not None and token.is_cancelled:
        return ProcessResult(command, "", -1, 0.0, cancelled=True)

    logger.debug("process.started", command=command, timeout=limit)
    try:
        process = subprocess.Popen(
            command,
            stdin=subprocess.PIPE if input is not None else subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            encoding=settings.files.encoding,
            errors="replace",
        )
    except OSError as exc:
        raise CommandExecutionError(command, "cannot start process", original_exception=exc) from exc

    deadline = start + limit if limit else None
    pending_input = input
    cancelled = timed_out = False
    output = ""

    while True:
        if token is not None and token.is_cancelled:
            cancelled = True
            break
        wait = poll
        if deadline is not None:
            remaining = deadline - time.perf_counter()
            if remaining <= 0:
                timed_out = True
                break
            wait = min(wait, remaining)
        try:
            output, _ = process.communicate(pending_input, timeout=wait)
            break
        except subprocess.TimeoutExpired:
            # stdin was fully handed over on the first call
            pending_input = None

    if cancelled or timed_out:
        process.kill()
        output, _ = process.communicate()

    result = ProcessResult(
        command=command,
        output=output or "",
        return_code=process.returncode if not (cancelled or timed_out) else -1,
        duration_ms=round((time.perf_counter() - start) * 1000, 2),
        cancelled=cancelled,
        timed_out=timed_out,
    )
    logger.debug(
        "process.finished",
        command=command,
        return_code=result.return_code,
        duration_ms=result.duration_ms,
        cancelled=cancelled,
        timed_out=timed_out,
    )
    return result


def check_result(result: ProcessResult, ok_codes: Iterable[int] = (0,)) -> str:
    """Return the output of a successful result, raise otherwise."""
    if result.cancelled:
        raise CommandExecutionError(result.command, "cancelled", output=result.output, cancelled=True)
    if result.timed_out:
        raise CommandExecutionError(result.command, "timed out", output=result.output)
    if result.return_code not in ok_codes:
        raise CommandExecutionError(
            result.command,
            f"exit status {result.return_code}",
            return_code=result.return_code,
            output=result.output,
        )
    return result.output


def exec_command(
    command: str,
    *args: str,
    token: CancellationToken | None = None,
    timeout: float | None = None,
) -> str:
    """Run ``command`` with ``args`` and return its combined output.

    Raises ``CommandExecutionError`` on a non-zero exit status, cancellation
    or timeout.
    """
    return check_result(run_process([command, *args], token=token, timeout=timeout))


def xargs(
    items: Iterable[str],
    command: str,
    *args: str,
    token: CancellationToken | None = None,
    timeout: float | None = None,
) -> str:
    """Run ``command args... item`` for each item and concatenate the outputs.

    Stops at the first failing invocation.
    """
    chunks = []
    for item in items:
        chunks.append(exec_command(command, *args, item, token=token, timeout=timeout))
    return "".join(chunks)


def expr(expression: str, token: CancellationToken | None = None) -> int:
    """Evaluate an integer expression with the system ``expr`` program.

    Tokens must be whitespace separated, e.g. ``"2 + 3"``.
    """
    argv = ["expr", *expression.split()]
    # expr exits 1 when the result is zero or null; that is still a result
    output = check_result(run_process(argv, token=token), ok_codes=(0, 1)).strip()
    try:
        return int(output)
    except ValueError as exc:
        raise InvalidArgumentError(
            f"expression did not evaluate to an integer: {output!r}",
            expression=expression,
        ) from exc
