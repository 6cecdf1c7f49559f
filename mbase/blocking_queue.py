"""A fixed-capacity ring buffer and blocking queues built on conditions."""

from __future__ import annotations

import threading
from collections import deque
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class CircularBuffer(Generic[T]):
    """A ring buffer with ``capacity`` slots; one slot always stays free.

    It therefore holds at most ``capacity - 1`` items.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError("Invalid capacity")
        self._items: list[Optional[T]] = [None] * capacity
        self._read = 0
        self._write = 0

    @property
    def capacity(self) -> int:
        return len(self._items)

    def __len__(self) -> int:
        cap = len(self._items)
        return (self._write + cap - self._read) % cap

    def empty(self) -> bool:
        return self._read == self._write

    def full(self) -> bool:
        return (self._write + 1) % len(self._items) == self._read

    def push_back(self, item: T) -> bool:
        """Store ``item`` at the back; return False if the buffer is full."""
        if self.full():
            return False
        self._items[self._write] = item
        self._write = (self._write + 1) % len(self._items)
        return True

    def pop_front(self) -> None:
        """Discard the front item; does nothing when empty."""
        if self.empty():
            return
        self._items[self._read] = None
        self._read = (self._read + 1) % len(self._items)

    def front(self) -> Optional[T]:
        """The front item, or None when empty."""
        if self.empty():
            return None
        return self._items[self._read]


class BlockingQueue(Generic[T]):
    """An unbounded FIFO queue whose :meth:`take` blocks while it is empty."""

    def __init__(self) -> None:
        self._not_empty = threading.Condition()
        self._queue: deque[T] = deque()

    def put(self, item: T) -> None:
        with self._not_empty:
            self._queue.append(item)
            self._not_empty.notify()

    def take(self) -> T:
        with self._not_empty:
            while not self._queue:
                self._not_empty.wait()
            return self._queue.popleft()

    def __len__(self) -> int:
        with self._not_empty:
            return len(self._queue)


class BoundedBlockingQueue(Generic[T]):
    """A FIFO queue on a :class:`CircularBuffer` of ``max_size`` slots.

    :meth:`put` blocks while it is full and :meth:`take` while it is empty.
    """

    def __init__(self, max_size: int) -> None:
        self._lock = threading.Lock()
        self._not_empty = threading.Condition(self._lock)
        self._not_full = threading.Condition(self._lock)
        self._queue: CircularBuffer[T] = CircularBuffer(max_size)

    def put(self, item: T) -> None:
        with self._lock:
            while self._queue.full():
                self._not_full.wait()
            self._queue.push_back(item)
            self._not_empty.notify()

    def take(self) -> T:
        with self._lock:
            while self._queue.empty():
                self._not_empty.wait()
            item = self._queue.front()
            self._queue.pop_front()
            self._not_full.notify()
            return item  # type: ignore[return-value]

    def empty(self) -> bool:
        with self._lock:
            return self._queue.empty()

    def full(self) -> bool:
        with self._lock:
            return self._queue.full()

    def __len__(self) -> int:
        with self._lock:
            return len(self._queue)

    @property
    def capacity(self) -> int:
        return self._queue.capacity