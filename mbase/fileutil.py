"""Reading small files whole and appending to files through a buffer."""

from __future__ import annotations

import errno
import os
import stat
from dataclasses import dataclass
from pathlib import Path
from types import TracebackType
from typing import Union

BUFFER_SIZE = 64 * 1024

PathLike = Union[str, Path]


@dataclass(frozen=True)
class FileContent:
    """What a file read produced: its bytes plus size and times from stat."""

    content: bytes
    file_size: int = 0
    modify_time: int = 0
    create_time: int = 0


class ReadSmallFile:
    """An open file descriptor for reading small files (up to about 64 KiB)."""

    def __init__(self, filename: PathLike) -> None:
        self._filename = os.fspath(filename)
        self._fd: int | None = os.open(self._filename, os.O_RDONLY | os.O_CLOEXEC)

    def _require_fd(self) -> int:
        if self._fd is None:
            raise ValueError("file is closed")
        return self._fd

    def read_to_string(self, max_size: int) -> FileContent:
        """Read up to ``max_size`` bytes from the current position."""
        fd = self._require_fd()
        st = os.fstat(fd)
        file_size = 0
        if stat.S_ISREG(st.st_mode):
            file_size = st.st_size
        elif stat.S_ISDIR(st.st_mode):
            raise OSError(errno.EISDIR, os.strerror(errno.EISDIR), self._filename)

        chunks: list[bytes] = []
        total = 0
        while total < max_size:
            chunk = os.read(fd, min(max_size - total, BUFFER_SIZE))
            if not chunk:
                break
            chunks.append(chunk)
            total += len(chunk)
        return FileContent(
            content=b"".join(chunks),
            file_size=file_size,
            modify_time=int(st.st_mtime),
            create_time=int(st.st_ctime),
        )

    def read_to_buffer(self) -> bytes:
        """Read at most ``BUFFER_SIZE - 1`` bytes from the start of the file."""
        return os.pread(self._require_fd(), BUFFER_SIZE - 1, 0)

    def close(self) -> None:
        if self._fd is not None:
            os.close(self._fd)
            self._fd = None

    def __enter__(self) -> ReadSmallFile:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def read_file(filename: PathLike, max_size: int) -> FileContent:
    """Read up to ``max_size`` bytes of a file; raise OSError on failure."""
    with ReadSmallFile(filename) as f:
        return f.read_to_string(max_size)


class AppendFile:
    """A file opened for appending through a 64 KiB buffer; not thread safe."""

    def __init__(self, filename: PathLike) -> None:
        self._file = open(filename, "ab", buffering=BUFFER_SIZE)
        self._written_bytes = 0

    @property
    def written_bytes(self) -> int:
        return self._written_bytes

    def append(self, data: bytes | bytearray | memoryview | str) -> None:
        chunk = data.encode("utf-8") if isinstance(data, str) else bytes(data)
        self._file.write(chunk)
        self._written_bytes += len(chunk)

    def flush(self) -> None:
        self._file.flush()

    def close(self) -> None:
        self._file.close()

    def __enter__(self) -> AppendFile:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()