import threading
from typing import Optional


class SharedCounter:
    """Remaining message budget shared by the move workers.

    A worker reserves before it receives and settles afterwards, giving back
    whatever it reserved but did not move.
    """

    def __init__(self, total: int):
        self.total = total
        self._remaining = total
        self._moved = 0
        self._lock = threading.Lock()

    @property
    def remaining(self) -> int:
        with self._lock:
            return self._remaining

    @property
    def moved(self) -> int:
        with self._lock:
            return self._moved

    def reserve(self, count: int) -> int:
        with self._lock:
            reserved = max(0, min(count, self._remaining))
            self._remaining -= reserved
            return reserved

    def settle(self, reserved: int, moved: int):
        if moved < 0 or moved > reserved:
            raise ValueError(f'Cannot settle {moved} moved messages against {reserved} reserved')
        with self._lock:
            self._remaining += reserved - moved
            self._moved += moved


class ErrorSlot:
    """Holds the first error reported by any worker"""

    def __init__(self):
        self._error: Optional[BaseException] = None
        self._lock = threading.Lock()

    def set(self, error: BaseException) -> bool:
        with self._lock:
            if self._error is not None:
                return False
            self._error = error
            return True

    def is_set(self) -> bool:
        with self._lock:
            return self._error is not None

    @property
    def error(self) -> Optional[BaseException]:
        with self._lock:
            return self._error
