"""Lock scopes guarding cache population."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum


class LockScope(str, Enum):
    """How ``SymbolCache.download`` calls are serialized.

    ``GLOBAL`` holds one lock for the whole download, so every key waits on
    every other. ``PER_KEY`` stripes by relative path: distinct keys run in
    parallel while duplicate requests for one key remain single-flight.
    """

    GLOBAL = "global"
    PER_KEY = "per_key"


class _PathLock:
    __slots__ = ("lock", "users")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.users = 0


class DownloadLocks:
    """Serializes downloads according to a ``LockScope``.

    Per-key locks are reference counted and dropped once the last holder or
    waiter for a path leaves, so the registry only tracks in-flight keys.
    """

    def __init__(self, scope: LockScope = LockScope.GLOBAL) -> None:
        self.scope = LockScope(scope)
        self._global = threading.Lock()
        self._by_path: dict[str, _PathLock] = {}
        self._registry = threading.Lock()

    def __len__(self) -> int:
        with self._registry:
            return len(self._by_path)

    @contextmanager
    def hold(self, relative: str) -> Iterator[None]:
        """Hold the lock a download of `relative` must run under."""
        if self.scope is LockScope.GLOBAL:
            with self._global:
                yield
            return

        with self._registry:
            entry = self._by_path.get(relative)
            if entry is None:
                entry = self._by_path[relative] = _PathLock()
            entry.users += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._registry:
                entry.users -= 1
                if entry.users == 0:
                    del self._by_path[relative]


__all__ = ["DownloadLocks", "LockScope"]
