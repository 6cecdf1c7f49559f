"""Time zones read from TZif data, and UTC broken-down time conversion."""

from __future__ import annotations

import struct
from bisect import bisect_left
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Callable

from mbase.date import JULIAN_DAY_OF_1970_01_01, Date

SECONDS_PER_DAY = 24 * 60 * 60


def _cdiv(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


@dataclass(frozen=True)
class BrokenDownTime:
    """Calendar time split into fields; ``month`` is 1-12, ``week_day`` 0 is Sunday."""

    year: int
    month: int
    day: int
    hour: int = 0
    minute: int = 0
    second: int = 0
    week_day: int = 0
    year_day: int = 0
    is_dst: bool = False
    gmt_offset: int = 0
    zone: str = ""


@dataclass(frozen=True)
class _Transition:
    gmttime: int
    localtime: int
    localtime_idx: int


@dataclass(frozen=True)
class _Localtime:
    gmt_offset: int
    is_dst: bool
    abbr_idx: int


@dataclass
class _ZoneData:
    transitions: list[_Transition] = field(default_factory=list)
    localtimes: list[_Localtime] = field(default_factory=list)
    abbreviation: bytes = b""

    def zone_name(self, local: _Localtime) -> str:
        raw = self.abbreviation[local.abbr_idx:].split(b"\0", 1)[0]
        return raw.decode("ascii", errors="replace")

    def find_localtime(self, value: int, key: Callable[[_Transition], int]) -> _Localtime:
        transitions = self.transitions
        if not transitions or value < key(transitions[0]):
            return self.localtimes[0]
        keys = [key(t) for t in transitions]
        i = bisect_left(keys, value)
        if i == len(keys):
            return self.localtimes[transitions[-1].localtime_idx]
        if keys[i] != value:
            i -= 1
        return self.localtimes[transitions[i].localtime_idx]


class _Reader:
    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._pos = 0

    def read_bytes(self, n: int) -> bytes:
        if n < 0 or self._pos + n > len(self._data):
            raise ValueError("no enough data")
        chunk = self._data[self._pos:self._pos + n]
        self._pos += n
        return chunk

    def read_int32(self) -> int:
        if self._pos + 4 > len(self._data):
            raise ValueError("bad int32_t data")
        return struct.unpack(">i", self.read_bytes(4))[0]

    def read_uint8(self) -> int:
        if self._pos + 1 > len(self._data):
            raise ValueError("bad uint8_t data")
        return self.read_bytes(1)[0]


def parse_tzif(data: bytes) -> _ZoneData:
    """Parse the version 1 part of TZif data; raise ValueError if malformed."""
    reader = _Reader(data)
    if reader.read_bytes(4) != b"TZif":
        raise ValueError("bad head")
    reader.read_bytes(1)  # version
    reader.read_bytes(15)

    _isgmtcnt = reader.read_int32()
    _isstdcnt = reader.read_int32()
    _leapcnt = reader.read_int32()
    timecnt = reader.read_int32()
    typecnt = reader.read_int32()
    charcnt = reader.read_int32()

    trans = [reader.read_int32() for _ in range(timecnt)]
    indexes = [reader.read_uint8() for _ in range(timecnt)]

    zone = _ZoneData()
    for _ in range(typecnt):
        gmtoff = reader.read_int32()
        isdst = reader.read_uint8()
        abbrind = reader.read_uint8()
        zone.localtimes.append(_Localtime(gmtoff, bool(isdst), abbrind))
    if not zone.localtimes:
        raise ValueError("no local time types")

    for t, idx in zip(trans, indexes):
        if idx >= len(zone.localtimes):
            raise ValueError("bad local time index")
        zone.transitions.append(_Transition(t, t + zone.localtimes[idx].gmt_offset, idx))

    zone.abbreviation = reader.read_bytes(charcnt)
    return zone


class TimeZone:
    """A time zone for local/UTC conversion; a default instance is invalid."""

    def __init__(self, data: _ZoneData | None = None) -> None:
        self._data = data

    @classmethod
    def from_file(cls, zonefile: str | Path) -> TimeZone:
        """Load a zone from a TZif file such as ``/usr/share/zoneinfo/UTC``."""
        return cls(parse_tzif(Path(zonefile).read_bytes()))

    @classmethod
    def fixed(cls, east_of_utc: int, name: str) -> TimeZone:
        """A zone with a constant offset of ``east_of_utc`` seconds."""
        data = _ZoneData(
            localtimes=[_Localtime(east_of_utc, False, 0)],
            abbreviation=name.encode("ascii"),
        )
        return cls(data)

    def valid(self) -> bool:
        return self._data is not None

    def _require(self) -> _ZoneData:
        if self._data is None:
            raise ValueError("invalid time zone")
        return self._data

    def to_local_time(self, seconds_since_epoch: int) -> BrokenDownTime:
        data = self._require()
        local = data.find_localtime(seconds_since_epoch, lambda t: t.gmttime)
        utc = to_utc_time(seconds_since_epoch + local.gmt_offset, True)
        return replace(
            utc,
            is_dst=local.is_dst,
            gmt_offset=local.gmt_offset,
            zone=data.zone_name(local),
        )

    def from_local_time(self, local_tm: BrokenDownTime) -> int:
        data = self._require()
        seconds = from_utc_tm(local_tm)
        local = data.find_localtime(seconds, lambda t: t.localtime)
        if local_tm.is_dst:
            try_tm = self.to_local_time(seconds - local.gmt_offset)
            if (
                not try_tm.is_dst
                and try_tm.hour == local_tm.hour
                and try_tm.minute == local_tm.minute
            ):
                seconds -= 3600
        return seconds - local.gmt_offset


def to_utc_time(seconds_since_epoch: int, yday: bool = False) -> BrokenDownTime:
    """Split seconds since the epoch into UTC fields, like gmtime(3)."""
    seconds = seconds_since_epoch - SECONDS_PER_DAY * _cdiv(seconds_since_epoch, SECONDS_PER_DAY)
    days = _cdiv(seconds_since_epoch, SECONDS_PER_DAY)
    if seconds < 0:
        seconds += SECONDS_PER_DAY
        days -= 1
    minutes, second = divmod(seconds, 60)
    hour, minute = divmod(minutes, 60)
    date = Date(days + JULIAN_DAY_OF_1970_01_01)
    ymd = date.year_month_day()
    year_day = 0
    if yday:
        year_day = date.julian_day_number - Date.from_ymd(ymd.year, 1, 1).julian_day_number
    return BrokenDownTime(
        year=ymd.year,
        month=ymd.month,
        day=ymd.day,
        hour=hour,
        minute=minute,
        second=second,
        week_day=date.week_day(),
        year_day=year_day,
        zone="GMT",
    )


def from_utc_tm(utc: BrokenDownTime) -> int:
    """Seconds since the epoch for UTC fields, like timegm(3)."""
    return from_utc_time(utc.year, utc.month, utc.day, utc.hour, utc.minute, utc.second)


def from_utc_time(year: int, month: int, day: int, hour: int, minute: int, seconds: int) -> int:
    """Seconds since the epoch for a UTC date and time."""
    date = Date.from_ymd(year, month, day)
    seconds_in_day = hour * 3600 + minute * 60 + seconds
    days = date.julian_day_number - JULIAN_DAY_OF_1970_01_01
    return days * SECONDS_PER_DAY + seconds_in_day