"""Line-oriented logging with levels, pluggable output and a fixed line layout.

Each line reads::

    YYYYMMDD HH:MM:SS.uuuuuuZ  tid LEVEL  [func ]message - file:line
"""

from __future__ import annotations

import enum
import os
import sys
import threading
from typing import Callable, Optional, TypeVar

from mbase import current_thread
from mbase.logstream import Fmt, LogStream
from mbase.timestamp import MICRO_SECONDS_PER_SECOND, Timestamp
from mbase.timezone import TimeZone, to_utc_time

T = TypeVar("T")

OutputFunc = Callable[[bytes], object]
FlushFunc = Callable[[], object]


class LogLevel(enum.IntEnum):
    TRACE = 0
    DEBUG = 1
    INFO = 2
    WARN = 3
    ERROR = 4
    FATAL = 5


_LEVEL_NAMES = {
    LogLevel.TRACE: "TRACE ",
    LogLevel.DEBUG: "DEBUG ",
    LogLevel.INFO: "INFO  ",
    LogLevel.WARN: "WARN  ",
    LogLevel.ERROR: "ERROR ",
    LogLevel.FATAL: "FATAL ",
}


class FatalLogError(RuntimeError):
    """Raised after a FATAL line has been written and flushed."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


def _init_log_level() -> LogLevel:
    if "MBASE_LOG_TRACE" in os.environ:
        return LogLevel.TRACE
    if "MBASE_LOG_DEBUG" in os.environ:
        return LogLevel.DEBUG
    return LogLevel.INFO


def _default_output(data: bytes) -> None:
    stream = sys.stdout
    raw = getattr(stream, "buffer", None)
    if raw is not None:
        raw.write(data)
    else:
        stream.write(data.decode("utf-8", errors="replace"))


def _default_flush() -> None:
    sys.stdout.flush()


_log_level: LogLevel = _init_log_level()
_output: OutputFunc = _default_output
_flush: FlushFunc = _default_flush
_time_zone: TimeZone = TimeZone()


class _TimeCache(threading.local):
    def __init__(self) -> None:
        self.seconds: Optional[int] = None
        self.zone: Optional[TimeZone] = None
        self.text = ""


_time_cache = _TimeCache()


def log_level() -> LogLevel:
    return _log_level


def set_log_level(level: LogLevel) -> None:
    global _log_level
    _log_level = LogLevel(level)


def set_output(func: Optional[OutputFunc]) -> None:
    """Send finished lines (as bytes) to ``func``; ``None`` restores stdout."""
    global _output
    _output = func if func is not None else _default_output


def set_flush(func: Optional[FlushFunc]) -> None:
    """Use ``func`` to flush before a fatal error; ``None`` restores stdout's flush."""
    global _flush
    _flush = func if func is not None else _default_flush


def set_time_zone(tz: Optional[TimeZone]) -> None:
    """Print times in ``tz``; an invalid zone or ``None`` means UTC."""
    global _time_zone
    _time_zone = tz if tz is not None else TimeZone()


def strerror_tl(saved_errno: int) -> str:
    return os.strerror(saved_errno)


class Logger:
    """One log line in the making; ``finish`` writes it out.

    Usable as a context manager: the line is finished on leaving the block.
    """

    def __init__(
        self,
        file: str,
        line: int,
        level: LogLevel = LogLevel.INFO,
        func: Optional[str] = None,
        saved_errno: int = 0,
    ) -> None:
        self.time = Timestamp.now()
        self.stream = LogStream()
        self.level = LogLevel(level)
        self.line = line
        self.basename = str(file).rsplit("/", 1)[-1]
        self._result: Optional[bytes] = None
        self._format_time()
        self.stream << current_thread.tid_string() << _LEVEL_NAMES[self.level]
        if saved_errno:
            self.stream << strerror_tl(saved_errno) << " (errno=" << saved_errno << ") "
        if func is not None:
            self.stream << func << " "

    def _format_time(self) -> None:
        seconds, microseconds = divmod(
            self.time.micro_seconds_since_epoch, MICRO_SECONDS_PER_SECOND
        )
        tz = _time_zone
        cache = _time_cache
        if cache.seconds != seconds or cache.zone is not tz:
            tm = tz.to_local_time(seconds) if tz.valid() else to_utc_time(seconds)
            cache.text = "%4d%02d%02d %02d:%02d:%02d" % (
                tm.year, tm.month, tm.day, tm.hour, tm.minute, tm.second,
            )
            cache.seconds = seconds
            cache.zone = tz
        suffix = ".%06d " if tz.valid() else ".%06dZ "
        self.stream << cache.text << Fmt(suffix, microseconds)

    def __lshift__(self, value: object) -> Logger:
        self.stream << value
        return self

    def finish(self) -> bytes:
        """Complete the line, hand it to the output and return it.

        A FATAL line is flushed and then :class:`FatalLogError` is raised.
        Calling it again returns the same line without writing it twice.
        """
        if self._result is not None:
            return self._result
        self.stream << " - " << self.basename << ":" << self.line << "\n"
        data = self.stream.buffer.data()
        self._result = data
        _output(data)
        if self.level == LogLevel.FATAL:
            _flush()
            raise FatalLogError(data.decode("utf-8", errors="replace"))
        return data

    def __enter__(self) -> Logger:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.finish()


def _loggable(message: object) -> object:
    if isinstance(message, (str, bytes, bytearray, memoryview)):
        return message
    return str(message)


def _handled_errno() -> int:
    exc = sys.exc_info()[1]
    if isinstance(exc, OSError) and exc.errno:
        return exc.errno
    return 0


def _log(
    level: LogLevel,
    message: object,
    *,
    filtered: bool = True,
    with_func: bool = False,
    saved_errno: int = 0,
) -> None:
    if filtered and _log_level > level:
        return
    frame = sys._getframe(2)
    code = frame.f_code
    logger = Logger(
        code.co_filename,
        frame.f_lineno,
        level,
        code.co_name if with_func else None,
        saved_errno,
    )
    logger << _loggable(message)
    logger.finish()


def log_trace(message: object) -> None:
    _log(LogLevel.TRACE, message, with_func=True)


def log_debug(message: object) -> None:
    _log(LogLevel.DEBUG, message, with_func=True)


def log_info(message: object) -> None:
    _log(LogLevel.INFO, message)


def log_warn(message: object) -> None:
    _log(LogLevel.WARN, message, filtered=False)


def log_error(message: object) -> None:
    _log(LogLevel.ERROR, message, filtered=False)


def log_fatal(message: object) -> None:
    _log(LogLevel.FATAL, message, filtered=False)


def log_syserr(message: object) -> None:
    """Log at ERROR, naming the errno of the OSError being handled, if any."""
    _log(LogLevel.ERROR, message, filtered=False, saved_errno=_handled_errno())


def log_sysfatal(message: object) -> None:
    """Log at FATAL, naming the errno of the OSError being handled, if any."""
    _log(LogLevel.FATAL, message, filtered=False, saved_errno=_handled_errno())


def check_not_null(file: str, line: int, names: str, value: Optional[T]) -> T:
    """Return ``value``; if it is ``None`` log ``names`` as FATAL and raise."""
    if value is None:
        logger = Logger(file, line, LogLevel.FATAL)
        logger << names
        logger.finish()
    return value  # type: ignore[return-value]