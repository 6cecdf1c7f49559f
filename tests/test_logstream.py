import pytest

from mbase.logstream import (
    LARGE_BUFFER,
    SMALL_BUFFER,
    FixedBuffer,
    Fmt,
    LogStream,
    format_iec,
    format_si,
)


def test_buffer_append_and_data():
    buf = FixedBuffer(16)
    assert buf.append(b"hello")
    assert buf.data() == b"hello"
    assert len(buf) == 5
    assert buf.avail() == 11


def test_buffer_rejects_data_that_does_not_leave_room():
    buf = FixedBuffer(8)
    assert not buf.append(b"x" * 8)
    assert buf.data() == b""
    assert buf.append(b"x" * 7)
    assert buf.avail() == 1


def test_buffer_reset_and_bzero():
    buf = FixedBuffer(16)
    buf.append("abc")
    buf.bzero()
    assert buf.data() == b"\x00" * 3
    buf.reset()
    assert len(buf) == 0
    assert buf.avail() == 16


def test_buffer_to_string():
    buf = FixedBuffer()
    buf.append("hé")
    assert buf.to_string() == "hé"
    assert buf.size == SMALL_BUFFER


def test_large_buffer_size():
    assert FixedBuffer(LARGE_BUFFER).avail() == LARGE_BUFFER


def test_bool_and_none():
    s = LogStream()
    s << True << False << None
    assert s.buffer.to_string() == "10(null)"


def test_integers():
    s = LogStream()
    s << 0
    assert s.buffer.to_string() == "0"
    s.reset_buffer()
    s << -123 << " " << 456
    assert s.buffer.to_string() == "-123 456"


def test_floats():
    s = LogStream()
    s << 0.1
    assert s.buffer.to_string() == "0.1"
    s.reset_buffer()
    s << 1.5
    assert s.buffer.to_string() == "1.5"
    s.reset_buffer()
    s << 1e20
    assert s.buffer.to_string() == "1e+20"


def test_strings_bytes_and_buffers():
    s = LogStream()
    other = FixedBuffer()
    other.append("inner")
    s << "a" << b"b" << other << Fmt("%d", 42)
    assert s.buffer.to_string() == "abinner42"


def test_unsupported_type_raises():
    s = LogStream()
    s << "kept"
    with pytest.raises(TypeError):
        s << object()
    assert s.buffer.to_string() == "kept"


def test_numbers_dropped_when_space_is_short():
    s = LogStream()
    s.append("x" * (SMALL_BUFFER - 21))
    before = len(s.buffer)
    s << 12345
    assert len(s.buffer) == before
    s << "y"
    assert len(s.buffer) == before + 1


def test_long_string_dropped():
    s = LogStream()
    s << "z" * SMALL_BUFFER
    assert len(s.buffer) == 0
    s << "z" * (SMALL_BUFFER - 1)
    assert len(s.buffer) == SMALL_BUFFER - 1


def test_fmt():
    f = Fmt("%4.2f", 1.2)
    assert f.data == b"1.20"
    assert len(f) == 4
    with pytest.raises(ValueError):
        Fmt("%40d", 1)
    with pytest.raises(TypeError):
        Fmt("%s", "text")


@pytest.mark.parametrize(
    "n, expected",
    [(0, "0"), (999, "999"), (1000, "1.00k"), (999499, "999k"), (1000000, "1.00M")],
)
def test_format_si(n, expected):
    assert format_si(n) == expected


@pytest.mark.parametrize(
    "n, expected",
    [
        (1023, "1023"),
        (1024, "1.00Ki"),
        (10229, "9.99Ki"),
        (10240, "10.0Ki"),
        (102297, "99.9Ki"),
        (102400, "100Ki"),
        (1023 * 1024, "1023Ki"),
        (1024 * 1024, "1.00Mi"),
    ],
)
def test_format_iec(n, expected):
    assert format_iec(n) == expected


def test_format_lengths_are_bounded():
    n = 1
    while n < 2**62:
        for m in (n - 1, n, n + 1, n * 9995 // 10000, n * 99 // 100):
            assert len(format_si(m)) <= 5
            assert len(format_iec(m)) <= 6
        n = n * 3 + 1