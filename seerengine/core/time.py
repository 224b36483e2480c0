"""Time conversion helpers used across SeerEngine.

Every formula in the engine runs on a single continuous time axis: the
Julian day of the UTC instant.  :class:`Instant` captures a civil date,
local clock time and UTC offset exactly as a birth certificate or a
user's device reports them, and converts 1:1 to that axis.
"""

from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass
from typing import Final

__all__ = [
    "J2000",
    "Instant",
    "ensure_utc",
    "julian_centuries",
    "julian_day",
    "julian_day_from_datetime",
]


J2000: Final[float] = 2451545.0
DAYS_PER_CENTURY: Final[float] = 36525.0


def ensure_utc(moment: _dt.datetime) -> _dt.datetime:
    """Return ``moment`` converted to UTC."""

    tzinfo = moment.tzinfo
    if tzinfo is None:
        return moment.replace(tzinfo=_dt.UTC)
    return moment.astimezone(_dt.UTC)


@dataclass(frozen=True)
class Instant:
    """Civil date and time with the UTC offset in force at that moment."""

    year: int
    month: int
    day: int
    hour: int = 12
    minute: int = 0
    second: float = 0.0
    utc_offset_hours: float = 0.0

    @classmethod
    def from_datetime(cls, moment: _dt.datetime) -> "Instant":
        """Build an instant from a ``datetime`` (naive values are read as UTC)."""

        offset = moment.utcoffset()
        hours = offset.total_seconds() / 3600.0 if offset is not None else 0.0
        return cls(
            year=moment.year,
            month=moment.month,
            day=moment.day,
            hour=moment.hour,
            minute=moment.minute,
            second=moment.second + moment.microsecond / 1e6,
            utc_offset_hours=hours,
        )

    @classmethod
    def now(cls) -> "Instant":
        return cls.from_datetime(_dt.datetime.now(tz=_dt.UTC))

    @property
    def local_hour(self) -> float:
        """Local civil clock time as a fractional hour."""

        return self.hour + self.minute / 60.0 + self.second / 3600.0

    def to_utc_datetime(self) -> _dt.datetime:
        whole = int(self.second)
        micro = min(999_999, int((self.second - whole) * 1e6))
        tz = _dt.timezone(_dt.timedelta(hours=self.utc_offset_hours))
        local = _dt.datetime(
            self.year, self.month, self.day, self.hour, self.minute, whole, micro, tzinfo=tz
        )
        return local.astimezone(_dt.UTC)

    @property
    def julian_day(self) -> float:
        return julian_day(self)

    def isoformat(self) -> str:
        return self.to_utc_datetime().isoformat()


def julian_day_from_datetime(moment: _dt.datetime) -> float:
    """Return the Julian day for a ``moment`` expressed in (or converted to) UTC."""

    moment = ensure_utc(moment)
    year = moment.year
    month = moment.month
    day = moment.day
    frac = (
        moment.hour + moment.minute / 60.0 + (moment.second + moment.microsecond / 1e6) / 3600.0
    ) / 24.0

    if month <= 2:
        year -= 1
        month += 12

    a = year // 100
    b = 2 - a + (a // 4)
    jd = int(365.25 * (year + 4716)) + int(30.6001 * (month + 1)) + day + b - 1524.5
    return jd + frac


def julian_day(instant: Instant) -> float:
    """Return the Julian day of ``instant`` on the UTC time axis."""

    return julian_day_from_datetime(instant.to_utc_datetime())


def julian_centuries(jd: float) -> float:
    """Julian centuries elapsed since J2000.0."""

    return (jd - J2000) / DAYS_PER_CENTURY
