# mbase

Building blocks for multi-threaded server programs: time handling, log line
formatting with rolling log files, and thread coordination.

## Installation

```
pip install mbase
```

Python 3.10 or later is needed. There are no third-party dependencies. The
process-information helpers read `/proc` and so expect Linux.

## What is inside

| Module | Contents |
| --- | --- |
| `mbase.timestamp` | `Timestamp` (UTC, microsecond resolution), `time_difference`, `add_time` |
| `mbase.date` | `Date` on Julian day numbers, `YearMonthDay`, `get_julian_day_number`, `get_year_month_day` |
| `mbase.timezone` | `TimeZone` from TZif files or fixed offsets, `BrokenDownTime`, `to_utc_time`, `from_utc_time`, `from_utc_tm`, `parse_tzif` |
| `mbase.logstream` | `FixedBuffer`, `LogStream`, `Fmt`, `format_si`, `format_iec` |
| `mbase.fileutil` | `ReadSmallFile`, `read_file`, `FileContent`, `AppendFile` |
| `mbase.current_thread` | `tid`, `tid_string`, `name`, `set_name`, `is_main_thread`, `sleep_usec`, `stack_trace` |
| `mbase.errors` | `TracedError`, an exception that records the stack where it was created |
| `mbase.process_info` | `pid`, `hostname`, `username`, `cpu_time`, `threads`, `opened_files`, `procname` and related helpers |
| `mbase.logfile` | `LogFile`, which rolls by size and by UTC day, and `get_log_file_name` |
| `mbase.logger` | `Logger`, `LogLevel`, `FatalLogError`, `log_info` and the other level functions, `set_output`, `set_flush`, `set_time_zone`, `check_not_null` |
| `mbase.countdown_latch` | `CountDownLatch` |
| `mbase.blocking_queue` | `CircularBuffer`, `BlockingQueue`, `BoundedBlockingQueue` |
| `mbase.thread` | `Thread`, `AtomicInteger` |
| `mbase.thread_pool` | `ThreadPool` with an optional bounded task queue |
| `mbase.weak_callback` | `WeakCallback`, `make_weak_callback` |

## Examples

### Timestamps and dates

```python
from mbase.timestamp import Timestamp, add_time, time_difference
from mbase.date import Date

start = Timestamp.now()
later = add_time(start, 1.5)
print(time_difference(later, start))     # 1.5
print(start.to_formatted_string(True))   # e.g. 20240102 03:04:05.123456

d = Date.from_ymd(2024, 2, 29)
print(d.to_iso_string(), d.week_day())   # 2024-02-29 4  (0 is Sunday)
```

### Time zones

```python
from mbase.timezone import TimeZone, from_utc_time

tz = TimeZone.fixed(8 * 3600, "CST")
seconds = from_utc_time(2024, 7, 1, 12, 0, 0)
local = tz.to_local_time(seconds)
print(local.hour, local.zone)            # 20 CST
assert tz.from_local_time(local) == seconds
```

`TimeZone.from_file(path)` loads a TZif file; only its version 1 section is
read, and malformed data raises `ValueError`.

### Logging

Each line has the form
`YYYYMMDD HH:MM:SS.uuuuuuZ  tid LEVEL  message - file:line`
(without the `Z` when a time zone has been set with `set_time_zone`).

```python
from mbase import logger
from mbase.logger import LogLevel

logger.set_log_level(LogLevel.DEBUG)
logger.log_info("server started")
logger.log_warn("queue is getting long")
```

The starting level is INFO, or DEBUG / TRACE when the environment variable
`MBASE_LOG_DEBUG` / `MBASE_LOG_TRACE` is set. `log_fatal` writes and flushes
its line, then raises `FatalLogError`.

Lines go to standard output unless `set_output` names another function taking
bytes, for example a rolling log file:

```python
from mbase import logger
from mbase.logfile import LogFile

with LogFile("myserver", 500 * 1000 * 1000) as log_file:
    logger.set_output(log_file.append)
    logger.log_info("written to myserver.<date>-<time>.<host>.<pid>.log")
    logger.set_output(None)
```

### Thread pool

```python
from mbase.thread_pool import ThreadPool

pool = ThreadPool("worker")
pool.max_queue_size = 100        # optional; 0 means unbounded
pool.start(4)
for i in range(10):
    pool.run(lambda i=i: print("task", i))
pool.stop()
```

With `start(0)`, `run` executes each task in the calling thread. Tasks still
queued when `stop` is called are not run.

### Queues and latches

```python
from mbase.blocking_queue import BoundedBlockingQueue
from mbase.countdown_latch import CountDownLatch

queue = BoundedBlockingQueue(16)   # holds at most 15 items
queue.put("job")
assert queue.take() == "job"

latch = CountDownLatch(1)
latch.count_down()
latch.wait()   # returns at once, because the count is already zero
```

## What it does not do

There is no background log writer: `LogFile.append` writes in the calling
thread, under a lock when `thread_safe` is true. To keep file writes off a
hot path, pair a `BlockingQueue` with a `Thread` yourself.

## Running the tests

```
pip install -e ".[test]"
pytest
```