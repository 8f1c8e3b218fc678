"""Thread-safe string-keyed map guarded by a reader/writer lock."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Generic, TypeVar

V = TypeVar("V")


class ReadWriteLock:
    """Multiple readers or one writer.

    Writer-preferring: once a writer is waiting, new readers block until it
    has finished, so a steady stream of readers cannot starve writers.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


class ConcurrentMap(Generic[V]):
    """Map from ``str`` keys to values of type ``V``, safe for concurrent use.

    Every operation is atomic with respect to every other operation on the
    same instance. Values are stored by reference.

    Example:
        >>> counts: ConcurrentMap[int] = ConcurrentMap()
        >>> counts.set("k", 42)
        >>> counts.get("k")
        (42, True)
        >>> counts.get("missing")
        (None, False)
    """

    def __init__(self, default: V | None = None) -> None:
        self._lock = ReadWriteLock()
        self._items: dict[str, V] = {}
        self._default = default

    def set(self, key: str, value: V) -> None:
        """Insert or overwrite ``key``."""
        with self._lock.write_locked():
            self._items[key] = value

    def get(self, key: str) -> tuple[V | None, bool]:
        """Return ``(value, True)`` or ``(default, False)`` if absent."""
        with self._lock.read_locked():
            if key in self._items:
                return self._items[key], True
            return self._default, False

    def delete(self, key: str) -> None:
        """Remove ``key``; absent keys are ignored."""
        with self._lock.write_locked():
            self._items.pop(key, None)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
