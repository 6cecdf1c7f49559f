"""Log files that roll over by size and once per day."""

from __future__ import annotations

import contextlib
import threading
import time
from types import TracebackType
from typing import Callable, ContextManager

from mbase import process_info
from mbase.fileutil import AppendFile

ROLL_PER_SECONDS = 60 * 60 * 24


def get_log_file_name(basename: str, now: int) -> str:
    """``basename.YYYYmmdd-HHMMSS.hostname.pid.log`` for UTC time ``now``."""
    stamp = time.strftime(".%Y%m%d-%H%M%S.", time.gmtime(now))
    return f"{basename}{stamp}{process_info.hostname()}.{process_info.pid()}.log"


class LogFile:
    """Appends log data to a file, starting a new file when it grows past
    ``roll_size`` bytes or a new UTC day begins.

    Files are created in the current directory; ``basename`` must not hold '/'.
    """

    def __init__(
        self,
        basename: str,
        roll_size: int,
        thread_safe: bool = True,
        flush_interval: int = 3,
        check_every_n: int = 1024,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if "/" in basename:
            raise ValueError("basename must not contain '/'")
        self._basename = basename
        self._roll_size = roll_size
        self._flush_interval = flush_interval
        self._check_every_n = check_every_n
        self._clock = clock
        self._lock: ContextManager[object] = (
            threading.Lock() if thread_safe else contextlib.nullcontext()
        )
        self._count = 0
        self._start_of_period = 0
        self._last_roll = 0
        self._last_flush = 0
        self._file: AppendFile | None = None
        self.roll_file()

    @property
    def filename(self) -> str | None:
        """Name of the file currently written to."""
        return self._filename if self._file is not None else None

    def _now(self) -> int:
        return int(self._clock())

    def append(self, data: bytes | str) -> None:
        with self._lock:
            self._append_unlocked(data)

    def flush(self) -> None:
        with self._lock:
            if self._file is not None:
                self._file.flush()

    def _append_unlocked(self, data: bytes | str) -> None:
        if self._file is None:
            raise ValueError("log file is closed")
        self._file.append(data)
        if self._file.written_bytes > self._roll_size:
            self.roll_file()
            return
        self._count += 1
        if self._count >= self._check_every_n:
            self._count = 0
            now = self._now()
            this_period = now // ROLL_PER_SECONDS * ROLL_PER_SECONDS
            if this_period != self._start_of_period:
                self.roll_file()
            elif now - self._last_flush > self._flush_interval:
                self._last_flush = now
                self._file.flush()

    def roll_file(self) -> bool:
        """Start a new file unless one was started within the current second."""
        now = self._now()
        filename = get_log_file_name(self._basename, now)
        start = now // ROLL_PER_SECONDS * ROLL_PER_SECONDS
        if now > self._last_roll:
            self._last_roll = now
            self._last_flush = now
            self._start_of_period = start
            old = self._file
            self._file = AppendFile(filename)
            self._filename = filename
            if old is not None:
                old.close()
            return True
        return False

    def close(self) -> None:
        with self._lock:
            if self._file is not None:
                self._file.close()
                self._file = None

    def __enter__(self) -> LogFile:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()