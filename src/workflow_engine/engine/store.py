"""In-memory keyed store.

Single-process and lock-guarded. Each primitive holds the lock only for its own
duration, so callers on different keys never wait on each other for longer
than a dict operation.
"""

from __future__ import annotations

import threading
from typing import Generic, TypeVar

K = TypeVar("K")
V = TypeVar("V")


class InMemoryStore(Generic[K, V]):
    """Thread-safe dict with insert-if-absent and compare-and-swap."""

    def __init__(self) -> None:
        self._items: dict[K, V] = {}
        self._lock = threading.Lock()

    def get(self, key: K) -> V | None:
        with self._lock:
            return self._items.get(key)

    def insert_if_absent(self, key: K, value: V) -> bool:
        with self._lock:
            if key in self._items:
                return False
            self._items[key] = value
            return True

    def list_all(self) -> list[V]:
        with self._lock:
            return list(self._items.values())

    def compare_and_swap(self, key: K, expected: V, new: V) -> bool:
        """Replace the value at ``key`` only if it still equals ``expected``.

        Values are immutable records, so equality means nobody committed in
        between the caller's read and this swap.
        """

        with self._lock:
            if key not in self._items or self._items[key] != expected:
                return False
            self._items[key] = new
            return True
