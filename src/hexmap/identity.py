"""Entity identity allocation."""

import threading
from itertools import count


class IdentityAllocator:
    """Monotonic identity source, owned by whatever context creates entities.

    Identities start at `start` and are never reused. Allocation is guarded
    by a lock so entities may be created from more than one thread.
    """

    def __init__(self, start: int = 0):
        self._counter = count(start)
        self._lock = threading.Lock()
        self._last: int | None = None

    def next_identity(self) -> int:
        """Return a fresh identity."""
        with self._lock:
            identity = next(self._counter)
            self._last = identity
            return identity

    @property
    def last_identity(self) -> int | None:
        """Most recently allocated identity, or None before the first."""
        return self._last
