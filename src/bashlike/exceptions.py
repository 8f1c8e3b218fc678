"""Exceptions shared by the command helpers and the pipeline chain."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Categorized error codes for bashlike operations."""

    INVALID_REGEX = "invalid_regex"
    COMMAND_EXECUTION = "command_execution"
    IO_ERROR = "io_error"
    INVALID_ARGUMENT = "invalid_argument"
    CANCELLED = "cancelled"


@dataclass(eq=False)
class BashlikeError(Exception):
    """Base exception for all bashlike errors.

    Carries an error code, a human readable message, optional details and
    the underlying exception that triggered it.
    """

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)
    original_exception: Exception | None = None

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:
        text = f"[{self.code.value}] {self.message}"
        if self.original_exception is not None:
            text += f": {self.original_exception}"
        return text

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict[str, Any]:
        """Convert error to serializable dictionary."""
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
            "original_exception": str(self.original_exception) if self.original_exception else None,
        }


class InvalidRegexError(BashlikeError):
    """Raised when a search pattern does not compile."""

    def __init__(self, pattern: str, original_exception: Exception | None = None) -> None:
        super().__init__(
            code=ErrorCode.INVALID_REGEX,
            message=f"invalid regex pattern {pattern!r}",
            details={"pattern": pattern},
            original_exception=original_exception,
        )


class CommandExecutionError(BashlikeError):
    """Raised when an external command cannot run or exits unsuccessfully."""

    def __init__(
        self,
        command: list[str],
        reason: str,
        return_code: int | None = None,
        output: str = "",
        cancelled: bool = False,
        original_exception: Exception | None = None,
    ) -> None:
        self.command = command
        self.return_code = return_code
        self.output = output
        self.cancelled = cancelled
        super().__init__(
            code=ErrorCode.COMMAND_EXECUTION,
            message=f"error executing {' '.join(command)!r}: {reason}",
            details={
                "command": command,
                "return_code": return_code,
                "cancelled": cancelled,
            },
            original_exception=original_exception,
        )


class FileOperationError(BashlikeError):
    """Raised when a filesystem or stream operation fails."""

    def __init__(
        self,
        operation: str,
        path: str = "",
        original_exception: Exception | None = None,
    ) -> None:
        self.operation = operation
        self.path = path
        target = f" {path!r}" if path else ""
        super().__init__(
            code=ErrorCode.IO_ERROR,
            message=f"I/O error during {operation}{target}",
            details={"operation": operation, "path": path},
            original_exception=original_exception,
        )


class InvalidArgumentError(BashlikeError):
    """Raised when a helper receives arguments it cannot work with."""

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(
            code=ErrorCode.INVALID_ARGUMENT,
            message=message,
            details=details,
        )
