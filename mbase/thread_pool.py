"""A fixed set of worker threads taking tasks from a shared queue."""

from __future__ import annotations

import sys
import threading
from collections import deque
from typing import Callable, Optional

from mbase.errors import TracedError
from mbase.thread import Thread

Task = Callable[[], object]


class ThreadPool:
    """Runs submitted tasks on worker threads.

    With no worker threads, :meth:`run` executes the task in the caller.
    Tasks still queued when :meth:`stop` is called are not run.
    """

    def __init__(self, name: str = "ThreadPool") -> None:
        self._lock = threading.Lock()
        self._not_empty = threading.Condition(self._lock)
        self._not_full = threading.Condition(self._lock)
        self._name = name
        self._queue: deque[Task] = deque()
        self._threads: list[Thread] = []
        self._max_queue_size = 0
        self._running = False
        self._joined = False
        self.thread_init_callback: Optional[Task] = None

    @property
    def name(self) -> str:
        return self._name

    @property
    def max_queue_size(self) -> int:
        return self._max_queue_size

    @max_queue_size.setter
    def max_queue_size(self, size: int) -> None:
        """Bound the queue; zero means unbounded. Set before :meth:`start`."""
        self._max_queue_size = size

    @property
    def queue_size(self) -> int:
        with self._lock:
            return len(self._queue)

    def start(self, num_threads: int) -> None:
        if self._threads:
            raise RuntimeError("thread pool already started")
        self._running = True
        for i in range(num_threads):
            thread = Thread(self._run_in_thread, f"{self._name}{i + 1}")
            self._threads.append(thread)
            thread.start()
        if num_threads == 0 and self.thread_init_callback is not None:
            self.thread_init_callback()

    def stop(self) -> None:
        """Stop the workers and wait for them; re-raise the first worker error."""
        with self._lock:
            self._running = False
            self._not_empty.notify_all()
        if self._joined:
            return
        self._joined = True
        errors: list[Exception] = []
        for thread in self._threads:
            try:
                thread.join()
            except Exception as exc:
                errors.append(exc)
        if errors:
            raise errors[0]

    def run(self, task: Task) -> None:
        """Queue ``task``; blocks while a bounded queue is full."""
        if not self._threads:
            task()
            return
        with self._lock:
            while self._is_full():
                self._not_full.wait()
            self._queue.append(task)
            self._not_empty.notify()

    def _is_full(self) -> bool:
        return self._max_queue_size > 0 and len(self._queue) >= self._max_queue_size

    def _take(self) -> Optional[Task]:
        with self._lock:
            while not self._queue and self._running:
                self._not_empty.wait()
            if not self._queue:
                return None
            task = self._queue.popleft()
            if self._max_queue_size > 0:
                self._not_full.notify()
            return task

    def _run_in_thread(self) -> None:
        try:
            if self.thread_init_callback is not None:
                self.thread_init_callback()
            while self._running:
                task = self._take()
                if task is not None:
                    task()
        except Exception as exc:
            sys.stderr.write(f"exception caught in ThreadPool {self._name}\n")
            sys.stderr.write(f"reason: {exc}\n")
            if isinstance(exc, TracedError):
                sys.stderr.write(f"stack trace: {exc.stack_trace}\n")
            raise

    def __enter__(self) -> ThreadPool:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._running:
            self.stop()