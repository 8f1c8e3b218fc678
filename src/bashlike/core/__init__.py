"""
Core components: the pipeline chain and the concurrent map.
"""

from bashlike.core.cancellation import (
    CancellationReason,
    CancellationToken,
    PipelineCancelledError,
)
from bashlike.core.concurrent_map import ConcurrentMap, ReadWriteLock
from bashlike.core.pipeline import Pipeline, Stage, StageHandler, Stream

__all__ = [
    "CancellationReason",
    "CancellationToken",
    "PipelineCancelledError",
    "ConcurrentMap",
    "ReadWriteLock",
    "Pipeline",
    "Stage",
    "StageHandler",
    "Stream",
]
