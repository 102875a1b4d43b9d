"""
Thread-safe allocator for article ids.
"""
import threading
from typing import Iterable


class IdAllocator:
    """Hands out strictly increasing integer ids."""

    def __init__(self, initial: int = 1):
        self._next = initial
        self._lock = threading.Lock()

    def next(self) -> int:
        """Return an id greater than every id returned before."""
        with self._lock:
            current = self._next
            self._next += 1
            return current

    def peek(self) -> int:
        """Return the id the next call to ``next`` will produce."""
        with self._lock:
            return self._next

    def resume_after(self, ids: Iterable[int]) -> None:
        """
        Move the counter past the highest of the given ids.

        The counter never moves backwards, so ids handed out earlier are never
        reused.
        """
        highest = max(ids, default=0)
        with self._lock:
            if highest + 1 > self._next:
                self._next = highest + 1
