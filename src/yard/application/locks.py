"""Keyed locks that serialise writers per structure and per project.

Two staff members reserving the last unit of the same structure must not
both pass the ceiling check against the same stale figure. Every write
path takes the lock of each entity it is about to read-and-change
*before* reading it, so the check and the delta happen against state no
one else can touch in between.

Global acquisition order: the project lock first (at most one per
operation), then structure locks in ascending ID order. Every caller
following that order makes deadlocks impossible.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Iterator
from contextlib import ExitStack, contextmanager


class KeyedLocks:
    """Per-key locks that only exist while someone holds or waits for them."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        # key -> [lock, number of holders and waiters]
        self._locks: dict[tuple[str, int], list] = {}

    @contextmanager
    def _held(self, key: tuple[str, int]) -> Iterator[None]:
        with self._guard:
            entry = self._locks.setdefault(key, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[key]

    @contextmanager
    def hold(self, kind: str, ids: Iterable[int]) -> Iterator[None]:
        """Hold the locks of every ``(kind, id)`` in ascending ID order."""
        with ExitStack() as stack:
            for entity_id in sorted(set(ids)):
                stack.enter_context(self._held((kind, entity_id)))
            yield

    def __len__(self) -> int:
        """Number of keys currently held or waited for."""
        with self._guard:
            return len(self._locks)
