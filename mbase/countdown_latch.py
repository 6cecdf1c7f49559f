"""A one-shot latch that releases waiters when its count reaches zero."""

from __future__ import annotations

import threading


class CountDownLatch:
    """Blocks callers of :meth:`wait` until :meth:`count_down` brings the count to zero."""

    def __init__(self, count: int) -> None:
        self._cond = threading.Condition()
        self._count = count

    def wait(self) -> None:
        """Block until the count is zero or below."""
        with self._cond:
            while self._count > 0:
                self._cond.wait()

    def count_down(self) -> None:
        """Decrease the count by one, waking all waiters when it reaches zero."""
        with self._cond:
            self._count -= 1
            if self._count == 0:
                self._cond.notify_all()

    @property
    def count(self) -> int:
        with self._cond:
            return self._count