"""Cancellation token shared between a pipeline run and its stages."""

from __future__ import annotations

import threading
from enum import Enum

from bashlike.exceptions import BashlikeError, ErrorCode


class CancellationReason(Enum):
    """Reason a token was cancelled."""

    USER_REQUESTED = "user_requested"
    TIMEOUT = "timeout"
    EXTERNAL = "external"


class PipelineCancelledError(BashlikeError):
    """Raised when a pipeline observes its cancellation token set."""

    def __init__(self, reason: CancellationReason = CancellationReason.USER_REQUESTED) -> None:
        self.reason = reason
        super().__init__(
            code=ErrorCode.CANCELLED,
            message=f"pipeline cancelled: {reason.value}",
            details={"reason": reason.value},
        )


class CancellationToken:
    """Write-once "stop requested" flag.

    Once cancelled a token stays cancelled; the first reason wins. A token
    may be shared by any number of threads.

    Example:
        >>> token = CancellationToken()
        >>> token.cancel()
        >>> token.is_cancelled
        True
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._reason: CancellationReason | None = None
        self._timer: threading.Timer | None = None

    @classmethod
    def with_timeout(
        cls,
        seconds: float,
        reason: CancellationReason = CancellationReason.TIMEOUT,
    ) -> CancellationToken:
        """Create a token that cancels itself once ``seconds`` have elapsed."""
        if seconds < 0:
            raise ValueError("timeout must not be negative")
        token = cls()
        timer = threading.Timer(seconds, token.cancel, args=(reason,))
        timer.daemon = True
        token._timer = timer
        timer.start()
        return token

    def cancel(self, reason: CancellationReason = CancellationReason.USER_REQUESTED) -> None:
        """Request cancellation. Later calls are no-ops."""
        with self._lock:
            if self._event.is_set():
                return
            self._reason = reason
            self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> CancellationReason | None:
        return self._reason

    def raise_if_cancelled(self) -> None:
        """Raise ``PipelineCancelledError`` if cancellation was requested."""
        if self._event.is_set():
            raise PipelineCancelledError(self._reason or CancellationReason.USER_REQUESTED)

    def wait(self, timeout: float | None = None) -> bool:
        """Block until cancelled or ``timeout`` expires. Returns the flag."""
        return self._event.wait(timeout)

    def dispose(self) -> None:
        """Stop a pending auto-cancel timer, if any."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def __repr__(self) -> str:
        state = self._reason.value if self._reason else "active"
        return f"CancellationToken({state})"
