"""Fixed-size log buffers, a stream that formats values into them, and size formatting."""

from __future__ import annotations

from typing import Union

SMALL_BUFFER = 4000
LARGE_BUFFER = 4000 * 1000

_MAX_NUMERIC_SIZE = 32
_FMT_CAPACITY = 32

BytesLike = Union[bytes, bytearray, memoryview, str]


def _to_bytes(data: BytesLike) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


class FixedBuffer:
    """A byte buffer of fixed capacity; appends that do not fit are dropped whole."""

    def __init__(self, size: int = SMALL_BUFFER) -> None:
        if size < 1:
            raise ValueError("buffer size must be positive")
        self._data = bytearray(size)
        self._cur = 0

    @property
    def size(self) -> int:
        return len(self._data)

    def append(self, data: BytesLike) -> bool:
        """Append ``data`` if it fits with room to spare; return whether it was stored."""
        chunk = _to_bytes(data)
        n = len(chunk)
        if self.avail() > n:
            self._data[self._cur:self._cur + n] = chunk
            self._cur += n
            return True
        return False

    def data(self) -> bytes:
        return bytes(self._data[:self._cur])

    def __len__(self) -> int:
        return self._cur

    def avail(self) -> int:
        return len(self._data) - self._cur

    def reset(self) -> None:
        self._cur = 0

    def bzero(self) -> None:
        """Zero the whole storage without moving the write position."""
        self._data[:] = bytes(len(self._data))

    def to_string(self) -> str:
        return self.data().decode("utf-8", errors="replace")

    def __str__(self) -> str:
        return self.to_string()


class Fmt:
    """A single number formatted with a printf-style format, at most 31 bytes long."""

    def __init__(self, fmt: str, val: int | float) -> None:
        if not isinstance(val, (int, float)):
            raise TypeError("Fmt needs an arithmetic value")
        text = (fmt % val).encode("utf-8")
        if len(text) >= _FMT_CAPACITY:
            raise ValueError(f"formatted value longer than {_FMT_CAPACITY - 1} bytes")
        self.data = text

    def __len__(self) -> int:
        return len(self.data)

    def __str__(self) -> str:
        return self.data.decode("utf-8")


class LogStream:
    """Formats values into a small fixed buffer with the ``<<`` operator."""

    def __init__(self, size: int = SMALL_BUFFER) -> None:
        self._buffer = FixedBuffer(size)

    @property
    def buffer(self) -> FixedBuffer:
        return self._buffer

    def append(self, data: BytesLike) -> None:
        self._buffer.append(data)

    def reset_buffer(self) -> None:
        self._buffer.reset()

    def _append_numeric(self, text: str) -> None:
        if self._buffer.avail() >= _MAX_NUMERIC_SIZE:
            self._buffer.append(text)

    def __lshift__(self, value: object) -> LogStream:
        if isinstance(value, bool):
            self._buffer.append("1" if value else "0")
        elif isinstance(value, int):
            self._append_numeric(str(value))
        elif isinstance(value, float):
            self._append_numeric("%.12g" % value)
        elif isinstance(value, (str, bytes, bytearray, memoryview)):
            self._buffer.append(value)
        elif value is None:
            self._buffer.append("(null)")
        elif isinstance(value, FixedBuffer):
            self._buffer.append(value.data())
        elif isinstance(value, Fmt):
            self._buffer.append(value.data)
        else:
            raise TypeError(f"cannot log a value of type {type(value).__name__}")
        return self

    def __str__(self) -> str:
        return self._buffer.to_string()


_SI_STEPS = [
    (9995, "%.2fk", 1e3),
    (99950, "%.1fk", 1e3),
    (999500, "%.0fk", 1e3),
    (9995000, "%.2fM", 1e6),
    (99950000, "%.1fM", 1e6),
    (999500000, "%.0fM", 1e6),
    (9995000000, "%.2fG", 1e9),
    (99950000000, "%.1fG", 1e9),
    (999500000000, "%.0fG", 1e9),
    (9995000000000, "%.2fT", 1e12),
    (99950000000000, "%.1fT", 1e12),
    (999500000000000, "%.0fT", 1e12),
    (9995000000000000, "%.2fP", 1e15),
    (99950000000000000, "%.1fP", 1e15),
    (999500000000000000, "%.0fP", 1e15),
]


def format_si(n: int) -> str:
    """Format a quantity with SI suffixes (k, M, G, T, P, E) in at most 5 characters."""
    if n < 1000:
        return "%d" % n
    value = float(n)
    for limit, fmt, divisor in _SI_STEPS:
        if n < limit:
            return fmt % (value / divisor)
    return "%.2fE" % (value / 1e18)


def format_iec(n: int) -> str:
    """Format a quantity with binary suffixes (Ki .. Ei) in at most 6 characters."""
    value = float(n)
    ki = 1024.0
    if value < ki:
        return "%d" % n
    unit = ki
    for suffix in ("Ki", "Mi", "Gi", "Ti", "Pi"):
        if value < unit * 9.995:
            return "%.2f%s" % (value / unit, suffix)
        if value < unit * 99.95:
            return "%.1f%s" % (value / unit, suffix)
        if value < unit * 1023.5:
            return "%.0f%s" % (value / unit, suffix)
        unit *= 1024.0
    if value < unit * 9.995:
        return "%.2fEi" % (value / unit)
    return "%.1fEi" % (value / unit)