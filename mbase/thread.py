"""Threads that report their kernel id on start, and an atomic integer."""

from __future__ import annotations

import sys
import threading
from typing import Callable, Optional

from mbase import current_thread
from mbase.countdown_latch import CountDownLatch
from mbase.errors import TracedError


class AtomicInteger:
    """An integer whose read-modify-write operations are atomic."""

    def __init__(self, value: int = 0) -> None:
        self._lock = threading.Lock()
        self._value = value

    def get(self) -> int:
        with self._lock:
            return self._value

    def get_and_add(self, x: int) -> int:
        with self._lock:
            old = self._value
            self._value += x
            return old

    def add_and_get(self, x: int) -> int:
        with self._lock:
            self._value += x
            return self._value

    def increment_and_get(self) -> int:
        return self.add_and_get(1)

    def decrement_and_get(self) -> int:
        return self.add_and_get(-1)

    def get_and_set(self, new_value: int) -> int:
        with self._lock:
            old = self._value
            self._value = new_value
            return old


class Thread:
    """Runs ``func`` in a new thread; :meth:`start` returns once its id is known.

    An exception raised by ``func`` is reported on stderr and raised again
    from :meth:`join`.
    """

    _num_created = AtomicInteger()

    def __init__(self, func: Callable[[], object], name: str = "") -> None:
        self._func = func
        self._started = False
        self._joined = False
        self._tid = 0
        self._latch = CountDownLatch(1)
        self._error: Optional[BaseException] = None
        self._thread: Optional[threading.Thread] = None
        num = Thread._num_created.increment_and_get()
        self._name = name or f"Thread{num}"

    @classmethod
    def num_created(cls) -> int:
        return cls._num_created.get()

    @property
    def started(self) -> bool:
        return self._started

    @property
    def tid(self) -> int:
        return self._tid

    @property
    def name(self) -> str:
        return self._name

    def start(self) -> None:
        if self._started:
            raise RuntimeError("thread already started")
        self._started = True
        self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
        try:
            self._thread.start()
        except RuntimeError:
            self._started = False
            raise
        self._latch.wait()

    def join(self) -> None:
        """Wait for the thread to end; re-raise what its function raised."""
        if not self._started or self._thread is None:
            raise RuntimeError("thread not started")
        if self._joined:
            raise RuntimeError("thread already joined")
        self._joined = True
        self._thread.join()
        if self._error is not None:
            raise self._error

    def _run(self) -> None:
        self._tid = current_thread.tid()
        self._latch.count_down()
        current_thread.set_name(self._name)
        try:
            self._func()
        except Exception as exc:
            current_thread.set_name("crashed")
            sys.stderr.write(f"exception caught in Thread {self._name}\n")
            sys.stderr.write(f"reason: {exc}\n")
            if isinstance(exc, TracedError):
                sys.stderr.write(f"stack trace: {exc.stack_trace}\n")
            self._error = exc
        else:
            current_thread.set_name("finished")