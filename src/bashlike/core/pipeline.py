"""Sequential pipeline chain.

A ``Pipeline`` owns an ordered tuple of ``Stage`` descriptors. Executing it
threads a stream through each stage in turn:

    token -> [stage 1] -> stream -> [stage 2] -> stream -> ... -> result

The cancellation token is checked before every stage, never while one is
running. Stage exceptions propagate untouched.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import IO, Any

from bashlike.core.cancellation import CancellationToken

Stream = IO[Any]
StageHandler = Callable[[CancellationToken, Stream], Stream]


@dataclass(frozen=True)
class Stage:
    """A named transform step.

    Attributes:
        name: Human-readable name, used in ``repr``.
        handler: Callable taking ``(token, stream)`` and returning a stream.
    """

    name: str
    handler: StageHandler

    def __call__(self, token: CancellationToken, stream: Stream) -> Stream:
        return self.handler(token, stream)


def _stage_name(handler: Callable[..., Any]) -> str:
    return getattr(handler, "__name__", type(handler).__name__)


class Pipeline:
    """Ordered chain of stages with sequential execution.

    Immutable: ``pipe()`` returns a new pipeline.
    """

    def __init__(self, stages: Iterable[Stage] | None = None) -> None:
        self._stages: tuple[Stage, ...] = tuple(stages or ())

    @classmethod
    def of(cls, *handlers: StageHandler | Stage) -> Pipeline:
        """Build a pipeline from stages or bare handler callables."""
        return cls(
            h if isinstance(h, Stage) else Stage(_stage_name(h), h) for h in handlers
        )

    @property
    def stages(self) -> tuple[Stage, ...]:
        return self._stages

    def pipe(self, handler: StageHandler | Stage, name: str | None = None) -> Pipeline:
        """Return a new pipeline with ``handler`` appended."""
        if isinstance(handler, Stage):
            stage = handler if name is None else Stage(name, handler.handler)
        else:
            stage = Stage(name or _stage_name(handler), handler)
        return Pipeline(self._stages + (stage,))

    def execute(self, token: CancellationToken | None, stream: Stream) -> Stream:
        """Run every stage in order and return the final stream.

        Args:
            token: Cancellation token polled before each stage. ``None``
                means the run cannot be cancelled.
            stream: Input for the first stage.

        Raises:
            PipelineCancelledError: If the token is cancelled before a stage.
            Exception: Whatever a stage raises, unchanged.
        """
        token = token or CancellationToken()
        current = stream
        for stage in self._stages:
            token.raise_if_cancelled()
            current = stage.handler(token, current)
        return current

    def __len__(self) -> int:
        return len(self._stages)

    def __repr__(self) -> str:
        return f"Pipeline(stages={[s.name for s in self._stages]})"
