"""
Concurrent Candidate Accumulator

Per-tree searches running on different threads all report into one
CandidateSet. An index proposed by several trees is stored once.
"""

from __future__ import annotations

import threading
from typing import Iterable


class CandidateSet:
    """
    Thread-safe, deduplicating set of point indexes.

    Thread Safety:
        All mutation goes through a single lock; inserts are never lost and
        never duplicated. Reads take the same lock and return copies.
    """

    __slots__ = ("_indexes", "_lock")

    def __init__(self) -> None:
        self._indexes: set[int] = set()
        self._lock = threading.Lock()

    def add(self, idx: int) -> bool:
        """Insert one index. Returns True if it was not already present."""
        with self._lock:
            if idx in self._indexes:
                return False
            self._indexes.add(idx)
            return True

    def update(self, indexes: Iterable[int]) -> int:
        """Insert many indexes under one lock. Returns how many were new."""
        with self._lock:
            before = len(self._indexes)
            self._indexes.update(indexes)
            return len(self._indexes) - before

    def snapshot(self) -> list[int]:
        """Sorted copy of the current members."""
        with self._lock:
            return sorted(self._indexes)

    def __contains__(self, idx: object) -> bool:
        with self._lock:
            return idx in self._indexes

    def __len__(self) -> int:
        with self._lock:
            return len(self._indexes)
