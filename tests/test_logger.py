import errno
import os
import re

import pytest

from mbase.logger import (
    FatalLogError,
    Logger,
    LogLevel,
    check_not_null,
    log_debug,
    log_error,
    log_fatal,
    log_info,
    log_level,
    log_syserr,
    log_sysfatal,
    log_trace,
    log_warn,
    set_flush,
    set_log_level,
    set_output,
    set_time_zone,
    strerror_tl,
)
from mbase.timezone import TimeZone


@pytest.fixture
def captured():
    lines = []
    flushes = []
    saved = log_level()
    set_output(lines.append)
    set_flush(lambda: flushes.append(True))
    set_log_level(LogLevel.INFO)
    yield lines, flushes
    set_output(None)
    set_flush(None)
    set_log_level(saved)
    set_time_zone(None)


UTC_LINE = re.compile(
    rb"^\d{8} \d{2}:\d{2}:\d{2}\.\d{6}Z +\d+ INFO  hello - test_logger\.py:\d+\n$"
)


def test_info_line_layout(captured):
    lines, _ = captured
    log_info("hello")
    assert len(lines) == 1
    assert UTC_LINE.match(lines[0])


def test_level_filtering(captured):
    lines, _ = captured
    set_log_level(LogLevel.WARN)
    log_info("hidden")
    log_debug("hidden")
    assert lines == []
    log_warn("shown")
    log_error("also")
    assert len(lines) == 2
    assert b"WARN  shown - " in lines[0]
    assert b"ERROR also - " in lines[1]


def test_trace_includes_function_name(captured):
    lines, _ = captured
    set_log_level(LogLevel.TRACE)
    log_trace("hi")
    assert b"TRACE test_trace_includes_function_name hi - " in lines[0]


def test_debug_hidden_at_info(captured):
    lines, _ = captured
    log_debug("x")
    assert lines == []


def test_non_string_message(captured):
    lines, _ = captured
    log_info(123)
    assert b"INFO  123 - " in lines[0]


def test_fatal_flushes_and_raises(captured):
    lines, flushes = captured
    with pytest.raises(FatalLogError) as info:
        log_fatal("boom")
    assert flushes == [True]
    assert b"FATAL boom - " in lines[0]
    assert "boom" in info.value.message


def test_syserr_reports_handled_errno(captured):
    lines, _ = captured
    try:
        raise FileNotFoundError(errno.ENOENT, "missing")
    except OSError:
        log_syserr("open failed")
    expected = f"{os.strerror(errno.ENOENT)} (errno={errno.ENOENT}) open failed".encode()
    assert expected in lines[0]
    assert b"ERROR " in lines[0]


def test_syserr_without_error(captured):
    lines, _ = captured
    log_syserr("plain")
    assert b"errno=" not in lines[0]
    assert b"ERROR plain - " in lines[0]


def test_sysfatal_raises(captured):
    lines, flushes = captured
    with pytest.raises(FatalLogError):
        log_sysfatal("dead")
    assert b"FATAL dead - " in lines[0]
    assert flushes == [True]


def test_logger_explicit_source(captured):
    lines, _ = captured
    logger = Logger("/src/net/foo.cc", 42, LogLevel.WARN)
    logger << "x=" << 5
    out = logger.finish()
    assert out.endswith(b"WARN  x=5 - foo.cc:42\n")
    assert lines == [out]
    assert logger.finish() == out
    assert len(lines) == 1


def test_logger_context_manager(captured):
    lines, _ = captured
    with Logger("bar.cc", 7) as logger:
        logger << "inside"
    assert lines[0].endswith(b"INFO  inside - bar.cc:7\n")


def test_logger_with_func_and_errno(captured):
    lines, _ = captured
    logger = Logger("a.cc", 1, LogLevel.ERROR, "doit", errno.EACCES)
    logger.finish()
    expected = f"ERROR {os.strerror(errno.EACCES)} (errno={errno.EACCES}) doit  - a.cc:1\n"
    assert lines[0].endswith(expected.encode())


def test_time_zone_drops_z_suffix(captured):
    lines, _ = captured
    set_time_zone(TimeZone.fixed(8 * 3600, "CST"))
    log_warn("tz")
    assert len(lines) == 1
    assert lines[0][24:25] == b" "
    assert b" WARN  tz - " in lines[0]
    assert re.match(rb"^\d{8} \d{2}:\d{2}:\d{2}\.\d{6} +\d+ WARN  tz - ", lines[0])
    set_time_zone(None)
    log_warn("utc")
    assert len(lines) == 2
    assert lines[1][24:26] == b"Z "
    assert re.match(rb"^\d{8} \d{2}:\d{2}:\d{2}\.\d{6}Z ", lines[1])


def test_check_not_null(captured):
    lines, _ = captured
    assert check_not_null("c.cc", 3, "'ptr' Must be non NULL", 17) == 17
    assert lines == []
    with pytest.raises(FatalLogError):
        check_not_null("c.cc", 3, "'ptr' Must be non NULL", None)
    assert lines[0].endswith(b"FATAL 'ptr' Must be non NULL - c.cc:3\n")


def test_strerror_tl():
    assert strerror_tl(errno.ENOENT) == os.strerror(errno.ENOENT)


def test_level_order_and_setter(captured):
    assert LogLevel.TRACE < LogLevel.DEBUG < LogLevel.INFO < LogLevel.FATAL
    set_log_level(LogLevel.ERROR)
    assert log_level() is LogLevel.ERROR