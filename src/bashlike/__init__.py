"""
bashlike: shell-style file and text helpers, a cancellable pipeline chain
and a reader/writer-locked concurrent map.
"""

from bashlike.core import (
    CancellationReason,
    CancellationToken,
    ConcurrentMap,
    Pipeline,
    PipelineCancelledError,
    Stage,
)
from bashlike.exceptions import (
    BashlikeError,
    CommandExecutionError,
    ErrorCode,
    FileOperationError,
    InvalidArgumentError,
    InvalidRegexError,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "CancellationReason",
    "CancellationToken",
    "ConcurrentMap",
    "Pipeline",
    "PipelineCancelledError",
    "Stage",
    "BashlikeError",
    "CommandExecutionError",
    "ErrorCode",
    "FileOperationError",
    "InvalidArgumentError",
    "InvalidRegexError",
]
