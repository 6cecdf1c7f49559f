"""An exception that records the stack where it was created."""

from __future__ import annotations

from mbase.current_thread import stack_trace


class TracedError(Exception):
    """An error carrying a message and the stack trace at construction time."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
        self.stack_trace = stack_trace(False)

    def __str__(self) -> str:
        return self.message