"""Information about the running process, mostly read from ``/proc``."""

from __future__ import annotations

import os
import socket
from dataclasses import dataclass

from mbase import current_thread
from mbase.fileutil import read_file
from mbase.timestamp import Timestamp

_START_TIME = Timestamp.now()
_CLOCK_TICKS = int(os.sysconf("SC_CLK_TCK"))
_PAGE_SIZE = int(os.sysconf("SC_PAGE_SIZE"))
_PROC_READ_LIMIT = 65536


@dataclass(frozen=True)
class CpuTime:
    """User and system CPU time consumed by the process, in seconds."""

    user_seconds: float = 0.0
    system_seconds: float = 0.0

    def total(self) -> float:
        return self.user_seconds + self.system_seconds


def pid() -> int:
    return os.getpid()


def pid_string() -> str:
    return str(pid())


def uid() -> int:
    return os.getuid()


def username() -> str:
    """The login name of the real user, or ``unknownuser``."""
    try:
        import pwd

        return pwd.getpwuid(uid()).pw_name
    except (ImportError, KeyError):
        return "unknownuser"


def euid() -> int:
    return os.geteuid()


def start_time() -> Timestamp:
    """When this module was first loaded, taken as the process start."""
    return _START_TIME


def clock_ticks_per_second() -> int:
    return _CLOCK_TICKS


def page_size() -> int:
    return _PAGE_SIZE


def is_debug_build() -> bool:
    return __debug__


def hostname() -> str:
    try:
        return socket.gethostname()
    except OSError:
        return "unknownhost"


def procname(stat: str | None = None) -> str:
    """The command name between the parentheses of a ``stat`` line."""
    if stat is None:
        stat = proc_stat()
    lp = stat.find("(")
    rp = stat.rfind(")")
    if lp != -1 and rp != -1 and lp < rp:
        return stat[lp + 1:rp]
    return ""


def _read_proc(path: str) -> str:
    try:
        content = read_file(path, _PROC_READ_LIMIT).content
    except OSError:
        return ""
    return content.decode("utf-8", errors="replace")


def proc_status() -> str:
    """Contents of ``/proc/self/status``, or an empty string."""
    return _read_proc("/proc/self/status")


def proc_stat() -> str:
    """Contents of ``/proc/self/stat``, or an empty string."""
    return _read_proc("/proc/self/stat")


def thread_stat() -> str:
    """Contents of ``/proc/self/task/<tid>/stat`` for the calling thread."""
    return _read_proc(f"/proc/self/task/{current_thread.tid()}/stat")


def exe_path() -> str:
    try:
        return os.readlink("/proc/self/exe")
    except OSError:
        return ""


def _numeric_entries(dirpath: str) -> list[int]:
    try:
        names = os.listdir(dirpath)
    except OSError:
        return []
    return [int(n) for n in names if n[:1].isdigit()]


def opened_files() -> int:
    """Number of open file descriptors."""
    return len(_numeric_entries("/proc/self/fd"))


def max_open_files() -> int:
    """The soft limit on open files, or the current count if unavailable."""
    try:
        import resource

        soft, _hard = resource.getrlimit(resource.RLIMIT_NOFILE)
    except (ImportError, OSError, ValueError):
        return opened_files()
    return int(soft)


def cpu_time() -> CpuTime:
    t = os.times()
    return CpuTime(user_seconds=t.user, system_seconds=t.system)


def num_threads() -> int:
    """Thread count from the ``Threads:`` line of the status file, or 0."""
    status = proc_status()
    pos = status.find("Threads:")
    if pos == -1:
        return 0
    digits = ""
    for ch in status[pos + 8:].lstrip(" \t"):
        if not ch.isdigit():
            break
        digits += ch
    return int(digits) if digits else 0


def threads() -> list[int]:
    """Sorted kernel ids of the process's threads."""
    return sorted(_numeric_entries("/proc/self/task"))