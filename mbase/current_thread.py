"""Facts about the calling thread: kernel thread id, name and stack."""

from __future__ import annotations

import os
import threading
import time
import traceback


class _ThreadState(threading.local):
    def __init__(self) -> None:
        self.cached_tid = 0
        self.tid_string = ""
        self.name = "main" if threading.current_thread() is threading.main_thread() else "unknown"


_state = _ThreadState()


def _after_fork_in_child() -> None:
    _state.cached_tid = 0
    _state.tid_string = ""
    _state.name = "main"
    tid()


if hasattr(os, "register_at_fork"):
    os.register_at_fork(after_in_child=_after_fork_in_child)


def tid() -> int:
    """Return the kernel thread id of the calling thread (cached per thread)."""
    if _state.cached_tid == 0:
        _state.cached_tid = threading.get_native_id()
        _state.tid_string = "%5d " % _state.cached_tid
    return _state.cached_tid


def tid_string() -> str:
    """The thread id right-aligned in five columns plus a space, for log lines."""
    tid()
    return _state.tid_string


def name() -> str:
    """The name of the calling thread: ``main`` for the main thread by default."""
    return _state.name


def set_name(name: str) -> None:
    """Set the name reported for the calling thread."""
    _state.name = name


def is_main_thread() -> bool:
    """Whether the calling thread is the process's initial thread."""
    return tid() == os.getpid()


def sleep_usec(usec: int) -> None:
    """Sleep for ``usec`` microseconds."""
    time.sleep(usec / 1_000_000)


def stack_trace(demangle: bool = False) -> str:
    """Return the caller's stack, one frame per line, innermost last.

    With ``demangle`` the source line of each frame is included as well.
    """
    frames = traceback.extract_stack()[:-1]
    lines = []
    for frame in frames:
        entry = f"{frame.filename}:{frame.lineno} in {frame.name}"
        if demangle and frame.line:
            entry += f" | {frame.line.strip()}"
        lines.append(entry + "\n")
    return "".join(lines)