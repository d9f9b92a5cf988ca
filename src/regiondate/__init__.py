# The MIT License (MIT)
#
# Copyright (c) Arie Bovenberg
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

# Maintainer's notes:
#
# - Why is everything in one file?
#   - Flat is better than nested
#   - It prevents circular imports since the classes 'know' about each other
#   - It's easier to vendor (i.e. copy-paste) this library if needed
# - No calendar math lives here. The Gregorian engine leans on the standard
#   library (datetime, calendar, zoneinfo) and all locale text comes from
#   Babel's CLDR data. This module only resolves fields and picks units.
# - An Instant never remembers a region. Every region-dependent operation
#   takes an optional ``region=`` and falls back to ``default_region()``.
from __future__ import annotations

__version__ = "0.1.0"

import logging
import re
import threading
import time
from abc import ABC, abstractmethod
from calendar import isleap, monthrange
from dataclasses import dataclass
from math import floor
from datetime import (
    date as _date,
    datetime as _datetime,
    timedelta as _timedelta,
    timezone as _timezone,
)
from typing import (
    TYPE_CHECKING,
    Callable,
    ClassVar,
    Iterable,
    Literal,
    NamedTuple,
    no_type_check,
    overload,
)
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from babel import Locale, UnknownLocaleError, default_locale
from babel.dates import (
    TIMEDELTA_UNITS,
    format_date,
    format_datetime,
    format_time,
    format_timedelta,
    get_datetime_format,
)
from babel.lists import format_list
from babel.units import UnknownUnitError, format_unit

__all__ = [
    "Instant",
    "Region",
    "Components",
    "WallTime",
    "CalendarEngine",
    "GregorianCalendar",
    "Period",
    "Duration",
    "default_region",
    "set_default_region",
    "ALL_UNITS",
    "InvalidComponentCombination",
    "InvalidDate",
    "DoesntExistInZone",
    "UnresolvableRegion",
    "NoResult",
    "InvalidFormat",
]

_logger = logging.getLogger(__name__)

MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY, SUNDAY = range(1, 8)

Unit = Literal[
    "year", "month", "week", "day", "hour", "minute", "second", "nanosecond"
]
BoundaryUnit = Literal[
    "year", "month", "week", "day", "hour", "minute", "second"
]
Style = Literal["short", "medium", "long", "full"]
Disambiguate = Literal["raise", "compatible"]

ALL_UNITS: tuple[Unit, ...] = (
    "year",
    "month",
    "week",
    "day",
    "hour",
    "minute",
    "second",
    "nanosecond",
)
"""All units, from largest to smallest. Also the order in which
:meth:`Instant.add` applies them."""


class WallTime(NamedTuple):
    """The primary fields of a date as read from a wall clock in a region.

    This is what a :class:`CalendarEngine` needs to find the instant back.
    """

    era: int
    year: int
    month: int
    day: int
    hour: int = 0
    minute: int = 0
    second: int = 0
    nanosecond: int = 0


@dataclass(frozen=True)
class Components:
    """The calendar fields of an :class:`Instant`, as seen in a :class:`Region`.

    The first eight fields are primary: together they pin down the instant
    (see :attr:`wall_time`). The rest are derived from them.
    Weekdays follow ISO 8601: 1 is Monday and 7 is Sunday.

    Example
    -------

    >>> c = Instant.from_fields(year=2021, month=1, day=2).in_region()
    >>> c.weekday, c.week_of_year, c.year_for_week_of_year
    (6, 53, 2020)

    """

    era: int
    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: int
    nanosecond: int
    weekday: int
    week_of_year: int
    year_for_week_of_year: int
    week_of_month: int
    weekday_ordinal: int
    day_of_year: int
    month_days: int
    leap_year: bool
    leap_month: bool
    nearest_hour: int

    @property
    def wall_time(self) -> WallTime:
        return WallTime(
            self.era,
            self.year,
            self.month,
            self.day,
            self.hour,
            self.minute,
            self.second,
            self.nanosecond,
        )


class CalendarEngine(ABC):
    """The calendar rules a :class:`Region` delegates to.

    Engines turn instants into :class:`Components` and back, and shift
    wall clock dates by calendar units. They never deal with locales.
    Subclass this to plug in another calendar, or a fake one in tests.
    """

    identifier: ClassVar[str]
    field_hierarchy: ClassVar[tuple[Unit, ...]] = ALL_UNITS
    weekend_days: ClassVar[frozenset[int]] = frozenset({SATURDAY, SUNDAY})
    # the latest wall time the engine can represent
    last_wall_time: ClassVar[WallTime]

    @abstractmethod
    def project(self, instant: Instant, zone: ZoneInfo) -> Components:
        """Decompose the instant into fields, using the offset of ``zone``
        at that instant"""

    @abstractmethod
    def unproject(
        self,
        wall: WallTime,
        zone: ZoneInfo,
        disambiguate: Disambiguate = "raise",
    ) -> Instant:
        """Find the instant at which the wall clock in ``zone`` reads ``wall``.

        Raises
        ------
        InvalidDate
            If the fields don't form a valid date.
        DoesntExistInZone
            If the wall time is skipped in the zone and
            ``disambiguate="raise"``.
        """

    @abstractmethod
    def is_valid(self, wall: WallTime) -> bool:
        """Whether the fields form a valid date, ignoring timezones"""

    @abstractmethod
    def add_units(self, wall: WallTime, unit: Unit, amount: int) -> WallTime:
        """Shift the date of a wall time by a number of calendar units
        (year, month, week or day). The time of day is kept."""

    @abstractmethod
    def start_of(self, wall: WallTime, unit: Unit) -> WallTime:
        """Reset all fields smaller than ``unit`` (year, month, week, or day)"""

    @abstractmethod
    def from_week_date(
        self, era: int, year_for_week_of_year: int, week_of_year: int, weekday: int
    ) -> tuple[int, int, int]:
        """Convert a week date to (year, month, day)"""

    @abstractmethod
    def day_number(self, wall: WallTime) -> int:
        """A running count of days, such that consecutive days differ by one"""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class GregorianCalendar(CalendarEngine):
    """The proleptic Gregorian calendar with ISO 8601 weeks,
    as implemented by the standard library.

    Only the common era (era 1) within years 1-9999 is supported.
    Weeks start on Monday. The first week of the year is the one containing
    the first Thursday.
    ``week_of_month`` counts Monday-started weeks, where week 1 is the one
    containing the first day of the month.
    """

    identifier = "gregorian"
    last_wall_time = WallTime(1, 9999, 12, 31, 23, 59, 59, 999_999_999)

    def project(self, instant: Instant, zone: ZoneInfo) -> Components:
        secs, nanos = divmod(instant._ns, 1_000_000_000)
        dt = (_EPOCH + _timedelta(seconds=secs)).astimezone(zone)
        year, month, day = dt.year, dt.month, dt.day
        iso_year, iso_week, iso_weekday = dt.isocalendar()
        return Components(
            era=1,
            year=year,
            month=month,
            day=day,
            hour=dt.hour,
            minute=dt.minute,
            second=dt.second,
            nanosecond=nanos,
            weekday=iso_weekday,
            week_of_year=iso_week,
            year_for_week_of_year=iso_year,
            week_of_month=(day + _date(year, month, 1).weekday() - 1) // 7 + 1,
            weekday_ordinal=(day - 1) // 7 + 1,
            day_of_year=dt.timetuple().tm_yday,
            month_days=monthrange(year, month)[1],
            leap_year=isleap(year),
            leap_month=False,
            nearest_hour=_nearest_hour(secs, dt, zone),
        )

    def unproject(
        self,
        wall: WallTime,
        zone: ZoneInfo,
        disambiguate: Disambiguate = "raise",
    ) -> Instant:
        try:
            dt = _resolve_gap(
                self._py_datetime(wall, zone), zone, disambiguate
            )
        except OverflowError:
            # valid locally, but out of range in UTC
            raise InvalidDate.for_fields(wall, self) from None
        delta = dt - _EPOCH
        return Instant._from_ns(
            (delta.days * 86_400 + delta.seconds) * 1_000_000_000
            + wall.nanosecond
        )

    def is_valid(self, wall: WallTime) -> bool:
        try:
            self._py_datetime(wall, None)
        except InvalidDate:
            return False
        return True

    def add_units(self, wall: WallTime, unit: Unit, amount: int) -> WallTime:
        if unit == "year":
            year = wall.year + amount
            return wall._replace(
                year=year, day=min(wall.day, monthrange(year, wall.month)[1])
            )
        elif unit == "month":
            year_overflow, month = divmod(wall.month - 1 + amount, 12)
            year = wall.year + year_overflow
            month += 1
            return wall._replace(
                year=year,
                month=month,
                day=min(wall.day, monthrange(year, month)[1]),
            )
        elif unit == "week" or unit == "day":
            days = amount * 7 if unit == "week" else amount
            try:
                d = _date(wall.year, wall.month, wall.day) + _timedelta(
                    days=days
                )
            except OverflowError:
                raise InvalidDate.for_fields(
                    wall._replace(day=wall.day + days), self
                ) from None
            return wall._replace(year=d.year, month=d.month, day=d.day)
        raise ValueError(f"Cannot shift a date by {unit!r}")

    def start_of(self, wall: WallTime, unit: Unit) -> WallTime:
        era, year, month, day, *_ = wall
        if unit == "year":
            return WallTime(era, year, 1, 1)
        elif unit == "month":
            return WallTime(era, year, month, 1)
        elif unit == "week":
            d = _date(year, month, day)
            d -= _timedelta(days=d.isoweekday() - MONDAY)
            return WallTime(era, d.year, d.month, d.day)
        elif unit == "day":
            return WallTime(era, year, month, day)
        raise ValueError(f"{unit!r} is not a calendar unit")

    def from_week_date(
        self, era: int, year_for_week_of_year: int, week_of_year: int, weekday: int
    ) -> tuple[int, int, int]:
        try:
            if era != 1:
                raise ValueError()
            d = _date.fromisocalendar(
                year_for_week_of_year, week_of_year, weekday
            )
        except ValueError:
            raise InvalidDate.for_week_date(
                era, year_for_week_of_year, week_of_year, weekday, self
            ) from None
        return d.year, d.month, d.day

    def day_number(self, wall: WallTime) -> int:
        return _date(wall.year, wall.month, wall.day).toordinal()

    def _py_datetime(self, wall: WallTime, zone: ZoneInfo | None) -> _datetime:
        era, year, month, day, hour, minute, second, nanosecond = wall
        try:
            if era != 1 or not 0 <= nanosecond < 1_000_000_000:
                raise ValueError()
            return _datetime(year, month, day, hour, minute, second, tzinfo=zone)
        except ValueError:
            raise InvalidDate.for_fields(wall, self) from None


_CALENDARS: dict[str, CalendarEngine] = {
    GregorianCalendar.identifier: GregorianCalendar()
}


def _host_locale() -> str:
    return default_locale("LC_TIME") or "en_US"


class Region:
    """A calendar, timezone and locale to interpret instants in.

    The calendar and timezone decide the fields of a date.
    The locale only affects names and formatting, never arithmetic.

    Example
    -------

    >>> amsterdam = Region(tz="Europe/Amsterdam", locale="nl_NL")
    >>> Instant.from_timestamp(0).in_region(amsterdam).hour
    1
    >>> Region(tz="Mars/Olympus_Mons")
    Traceback (most recent call last):
      ...
    UnresolvableRegion: Unknown timezone 'Mars/Olympus_Mons'

    If no locale is given, the host's locale is used.
    """

    __slots__ = ("_calendar", "_zone", "_locale")

    def __init__(
        self,
        calendar: str | CalendarEngine = "gregorian",
        tz: str = "UTC",
        locale: str | None = None,
    ) -> None:
        if isinstance(calendar, CalendarEngine):
            self._calendar = calendar
        else:
            try:
                self._calendar = _CALENDARS[calendar]
            except KeyError:
                raise UnresolvableRegion.for_calendar(calendar) from None
        try:
            self._zone = ZoneInfo(tz)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise UnresolvableRegion.for_timezone(tz) from e
        self._locale = _host_locale() if locale is None else locale

    @property
    def calendar(self) -> CalendarEngine:
        return self._calendar

    @property
    def zone(self) -> ZoneInfo:
        return self._zone

    @property
    def tz(self) -> str:
        """The timezone ID"""
        return self._zone.key

    @property
    def locale(self) -> str:
        """The locale identifier, e.g. ``"en_US"``"""
        return self._locale

    def locale_data(self) -> Locale:
        """The CLDR data for this region's locale

        Raises
        ------
        UnresolvableRegion
            If there is no data for the locale.
        """
        try:
            return Locale.parse(self._locale)
        except (UnknownLocaleError, ValueError) as e:
            raise UnresolvableRegion.for_locale(self._locale) from e

    def project(self, instant: Instant, /) -> Components:
        """The fields of the instant in this region"""
        return self._calendar.project(instant, self._zone)

    def unproject(self, components: Components | WallTime, /) -> Instant:
        """The instant at which the fields occur in this region.

        Only the primary fields are considered.
        If the wall time occurs twice (clocks set back), the earlier
        occurrence is chosen.

        Raises
        ------
        InvalidDate
            If the fields don't form a valid date.
        DoesntExistInZone
            If the wall time is skipped by a DST transition.
        """
        if isinstance(components, Components):
            components = components.wall_time
        return self._calendar.unproject(components, self._zone)

    def replace(
        self,
        *,
        calendar: str | CalendarEngine | None = None,
        tz: str | None = None,
        locale: str | None = None,
    ) -> Region:
        """Create a new region with the given parts replaced

        Example
        -------

        >>> Region(tz="UTC", locale="en_US").replace(locale="de_DE")
        Region(gregorian, UTC, de_DE)

        """
        return Region(
            self._calendar if calendar is None else calendar,
            self.tz if tz is None else tz,
            self._locale if locale is None else locale,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Region):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def _key(self) -> tuple[type, str, str, str]:
        # Engines hold no state beyond their class, but an identifier
        # may be reused by an unrelated engine.
        return (
            type(self._calendar),
            self._calendar.identifier,
            self._zone.key,
            self._locale,
        )

    def __repr__(self) -> str:
        return (
            f"Region({self._calendar.identifier}, "
            f"{self._zone.key}, {self._locale})"
        )


_default_region_lock = threading.Lock()
_default_region = Region()


def default_region() -> Region:
    """The region used whenever ``region=`` is omitted.

    Starts out as the Gregorian calendar in UTC, with the host's locale.
    """
    with _default_region_lock:
        return _default_region


def set_default_region(region: Region, /) -> None:
    """Replace the process-wide default region. The last write wins."""
    global _default_region
    if not isinstance(region, Region):
        raise TypeError(f"Expected a Region, got {region!r}")
    with _default_region_lock:
        _default_region = region
    _logger.debug("Default region set to %r", region)


def _resolve_region(region: Region | None) -> Region:
    return default_region() if region is None else region


class Duration:
    """A fixed amount of elapsed time: hours, minutes, seconds, nanoseconds

    The inputs are normalized, so 90 minutes becomes 1 hour and 30 minutes,
    for example.

    Examples
    --------

    >>> d = Duration(hours=1, minutes=30)
    Duration(01:30:00)
    >>> d.in_minutes()
    90.0

    """

    __slots__ = ("_total_ns",)

    def __init__(
        self,
        *,
        hours: float = 0,
        minutes: float = 0,
        seconds: float = 0,
        nanoseconds: int = 0,
    ) -> None:
        assert type(nanoseconds) is int  # catch this common mistake
        self._total_ns = (
            # Cast individual components to int to avoid floating point errors
            int(hours * 3_600_000_000_000)
            + int(minutes * 60_000_000_000)
            + int(seconds * 1_000_000_000)
            + nanoseconds
        )

    ZERO: ClassVar[Duration]
    """A duration of zero"""

    def in_hours(self) -> float:
        """The total duration in hours

        Example
        -------

        >>> d = Duration(hours=1, minutes=30)
        >>> d.in_hours()
        1.5

        """
        return self._total_ns / 3_600_000_000_000

    def in_minutes(self) -> float:
        return self._total_ns / 60_000_000_000

    def in_seconds(self) -> float:
        """The total duration in seconds

        Example
        -------

        >>> d = Duration(minutes=2, seconds=1, nanoseconds=500_000_000)
        >>> d.in_seconds()
        121.5

        """
        return self._total_ns / 1_000_000_000

    def in_nanoseconds(self) -> int:
        return self._total_ns

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self._total_ns == other._total_ns

    def __hash__(self) -> int:
        return hash(self._total_ns)

    def __lt__(self, other: Duration) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self._total_ns < other._total_ns

    def __le__(self, other: Duration) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self._total_ns <= other._total_ns

    def __gt__(self, other: Duration) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self._total_ns > other._total_ns

    def __ge__(self, other: Duration) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self._total_ns >= other._total_ns

    def __bool__(self) -> bool:
        """True if the duration is non-zero"""
        return bool(self._total_ns)

    def __add__(self, other: Duration) -> Duration:
        if not isinstance(other, Duration):
            return NotImplemented
        return Duration(nanoseconds=self._total_ns + other._total_ns)

    def __sub__(self, other: Duration) -> Duration:
        if not isinstance(other, Duration):
            return NotImplemented
        return Duration(nanoseconds=self._total_ns - other._total_ns)

    def __mul__(self, other: float) -> Duration:
        """Multiply by a number

        Example
        -------

        >>> d = Duration(hours=1, minutes=30)
        >>> d * 2.5
        Duration(03:45:00)

        """
        if not isinstance(other, (int, float)):
            return NotImplemented
        return Duration(nanoseconds=int(self._total_ns * other))

    def __neg__(self) -> Duration:
        return Duration(nanoseconds=-self._total_ns)

    @overload
    def __truediv__(self, other: float) -> Duration: ...

    @overload
    def __truediv__(self, other: Duration) -> float: ...

    def __truediv__(self, other: float | Duration) -> Duration | float:
        """Divide by a number or another duration

        Example
        -------

        >>> d = Duration(hours=1, minutes=30)
        >>> d / 2
        Duration(00:45:00)
        >>> d / Duration(minutes=30)
        3.0

        """
        if isinstance(other, Duration):
            return self._total_ns / other._total_ns
        elif isinstance(other, (int, float)):
            return Duration(nanoseconds=int(self._total_ns / other))
        return NotImplemented

    def __abs__(self) -> Duration:
        return Duration(nanoseconds=abs(self._total_ns))

    def canonical_format(self) -> str:
        """The duration in canonical format.

        The format is:

        .. code-block:: text

           HH:MM:SS(.fffffffff)

        For example:

        .. code-block:: text

           01:24:45.0089

        """
        hrs, mins, secs, ns = abs(self).as_tuple()
        return f"{'-'*(self._total_ns < 0)}{hrs:02}:{mins:02}:{secs:02}" + (
            f".{ns:09}".rstrip("0") * bool(ns)
        )

    @classmethod
    def from_canonical_format(cls, s: str, /) -> Duration:
        """Create from a canonical string representation.

        Inverse of :meth:`canonical_format`

        Example
        -------

        >>> Duration.from_canonical_format("01:30:00")
        Duration(01:30:00)

        Raises
        ------
        InvalidFormat
            If the string does not match this exact format.

        """
        if not (match := _match_duration(s)):
            raise InvalidFormat()
        sign, hours, mins, secs, fraction = match.groups()
        return cls(
            nanoseconds=(-1 if sign == "-" else 1)
            * (
                int(hours) * 3_600_000_000_000
                + int(mins) * 60_000_000_000
                + int(secs) * 1_000_000_000
                + int((fraction or "").ljust(9, "0"))
            )
        )

    __str__ = canonical_format

    def py_timedelta(self) -> _timedelta:
        """Convert to a :class:`~datetime.timedelta`,
        truncating to microseconds"""
        return _timedelta(microseconds=self._total_ns // 1_000)

    @classmethod
    def from_py_timedelta(cls, td: _timedelta, /) -> Duration:
        return Duration(
            nanoseconds=td.microseconds * 1_000,
            seconds=td.seconds,
            hours=td.days * 24,
        )

    def as_period(self) -> Period:
        """Convert to a :class:`Period`

        Example
        -------

        >>> d = Duration(minutes=90)
        >>> d.as_period()
        Period(PT1H30M)

        """
        h, m, s, ns = self.as_tuple()
        return Period(hours=h, minutes=m, seconds=s, nanoseconds=ns)

    def as_tuple(self) -> tuple[int, int, int, int]:
        """Convert to a tuple of (hours, minutes, seconds, nanoseconds)

        Example
        -------

        >>> d = Duration(hours=1, minutes=30, nanoseconds=5_000_000_090)
        >>> d.as_tuple()
        (1, 30, 5, 90)

        """
        hours, rem = divmod(abs(self._total_ns), 3_600_000_000_000)
        mins, rem = divmod(rem, 60_000_000_000)
        secs, ns = divmod(rem, 1_000_000_000)
        return (
            (hours, mins, secs, ns)
            if self._total_ns >= 0
            else (-hours, -mins, -secs, -ns)
        )

    def __repr__(self) -> str:
        return f"Duration({self})"


Duration.ZERO = Duration()


class Period:
    """A bundle of calendar components: years, months, weeks, days, hours,
    minutes, seconds and nanoseconds.

    This is what :meth:`Instant.add` and :meth:`Instant.difference` deal in.

    The canonical string format is:

    .. code-block:: text

        PnYnMnWnDTnHnMn(.fffffffff)S

    For example:

    .. code-block:: text

        P1DT5H30M
        PT3H
        P2M
        P1Y2M-3W4DT5H6M7.0089S

    Note
    ----
    Aside from nanoseconds, the fields are not normalized.
    For example, "90 minutes" is not converted to "1 hour and 30 minutes".

    """

    __slots__ = (
        "_years",
        "_months",
        "_weeks",
        "_days",
        "_hours",
        "_minutes",
        "_seconds",
        "_nanoseconds",
    )

    ZERO: ClassVar[Period]
    """A period of zero"""

    def __init__(
        self,
        *,
        years: int = 0,
        months: int = 0,
        weeks: int = 0,
        days: int = 0,
        hours: int = 0,
        minutes: int = 0,
        seconds: int = 0,
        nanoseconds: int = 0,
    ) -> None:
        self._years = years
        self._months = months
        self._weeks = weeks
        self._days = days
        self._hours = hours
        self._minutes = minutes
        seconds_extra, self._nanoseconds = divmod(nanoseconds, 1_000_000_000)
        self._seconds = seconds + seconds_extra

    @property
    def years(self) -> int:
        return self._years

    @property
    def months(self) -> int:
        return self._months

    @property
    def weeks(self) -> int:
        return self._weeks

    @property
    def days(self) -> int:
        return self._days

    @property
    def hours(self) -> int:
        return self._hours

    @property
    def minutes(self) -> int:
        return self._minutes

    @property
    def seconds(self) -> int:
        return self._seconds

    @property
    def nanoseconds(self) -> int:
        return self._nanoseconds

    def __eq__(self, other: object) -> bool:
        """Compare for equality of all fields

        Note
        ----
        Periods are equal if they have the same values for all fields.
        No normalization is done, so "one minute" is not equal to "60 seconds".

        Example
        -------

        >>> p = Period(hours=1, minutes=30)
        >>> p == Period(days=0, hours=1, minutes=30)
        True
        >>> # same duration, but different field values
        >>> p == Period(minutes=90)
        False
        """
        if not isinstance(other, Period):
            return NotImplemented
        return self.as_tuple() == other.as_tuple()

    def __hash__(self) -> int:
        return hash(self.as_tuple())

    def __bool__(self) -> bool:
        """True if any field is non-zero

        Example
        -------

        >>> bool(Period())
        False
        >>> bool(Period(hours=-1))
        True

        """
        return any(self.as_tuple())

    def canonical_format(self) -> str:
        """The period in canonical format.

        Example
        -------

        >>> p = Period(hours=1, minutes=30)
        >>> p.canonical_format()
        'PT1H30M'

        """
        if self._nanoseconds:
            total = self._seconds * 1_000_000_000 + self._nanoseconds
            whole, fraction = divmod(abs(total), 1_000_000_000)
            seconds = f"{'-'*(total < 0)}{whole}.{fraction:09}".rstrip("0")
        else:
            seconds = str(self._seconds)
        date = (
            f"{self._years}Y" * bool(self._years),
            f"{self._months}M" * bool(self._months),
            f"{self._weeks}W" * bool(self._weeks),
            f"{self._days}D" * bool(self._days),
        )
        time = (
            f"{self._hours}H" * bool(self._hours),
            f"{self._minutes}M" * bool(self._minutes),
            f"{seconds}S" * bool(self._seconds or self._nanoseconds),
        )
        return "P" + (
            "".join((*date, "T" if any(time) else "", *time)) or "0D"
        )

    @classmethod
    def from_canonical_format(cls, s: str, /) -> Period:
        """Create from a canonical string representation.

        Inverse of :meth:`canonical_format`

        Example
        -------

        >>> Period.from_canonical_format("P1Y2M-3W4DT5H6M7.0089S")
        Period(P1Y2M-3W4DT5H6M7.0089S)

        Raises
        ------
        InvalidFormat
            If the string does not match this exact format.

        """
        if not (match := _match_period(s)) or s == "P":
            raise InvalidFormat()
        years, months, weeks, days, hours, minutes, seconds = match.groups()
        nanoseconds = 0
        if seconds:
            sign = -1 if seconds.startswith("-") else 1
            whole, _, fraction = seconds.lstrip("+-").partition(".")
            nanoseconds = sign * (
                int(whole) * 1_000_000_000 + int(fraction.ljust(9, "0"))
            )
        return cls(
            years=int(years or 0),
            months=int(months or 0),
            weeks=int(weeks or 0),
            days=int(days or 0),
            hours=int(hours or 0),
            minutes=int(minutes or 0),
            nanoseconds=nanoseconds,
        )

    __str__ = canonical_format

    if TYPE_CHECKING:

        def replace(
            self,
            *,
            years: int = ...,
            months: int = ...,
            weeks: int = ...,
            days: int = ...,
            hours: int = ...,
            minutes: int = ...,
            seconds: int = ...,
            nanoseconds: int = ...,
        ) -> Period: ...

    else:

        def replace(self, **kwargs) -> Period:
            """Create a new instance with the given fields replaced.

            Example
            -------

            >>> p = Period(years=1, months=2)
            >>> p.replace(years=2)
            Period(P2Y2M)

            """
            return Period(
                years=kwargs.get("years", self._years),
                months=kwargs.get("months", self._months),
                weeks=kwargs.get("weeks", self._weeks),
                days=kwargs.get("days", self._days),
                hours=kwargs.get("hours", self._hours),
                minutes=kwargs.get("minutes", self._minutes),
                seconds=kwargs.get("seconds", self._seconds),
                nanoseconds=kwargs.get("nanoseconds", self._nanoseconds),
            )

    def __repr__(self) -> str:
        return f"Period({self})"

    def __neg__(self) -> Period:
        """Negate each field of the period

        Example
        -------

        >>> p = Period(weeks=2, days=-3, hours=10)
        >>> -p
        Period(P-2W3DT-10H)

        """
        return Period(
            years=-self._years,
            months=-self._months,
            weeks=-self._weeks,
            days=-self._days,
            hours=-self._hours,
            minutes=-self._minutes,
            seconds=-self._seconds,
            nanoseconds=-self._nanoseconds,
        )

    def __mul__(self, other: int) -> Period:
        """Multiply each field by a round number

        Example
        -------

        >>> p = Period(weeks=2, hours=1, minutes=30)
        >>> p * 2
        Period(P4WT2H60M)

        """
        if not isinstance(other, int):
            return NotImplemented
        return Period(
            years=self._years * other,
            months=self._months * other,
            weeks=self._weeks * other,
            days=self._days * other,
            hours=self._hours * other,
            minutes=self._minutes * other,
            seconds=self._seconds * other,
            nanoseconds=self._nanoseconds * other,
        )

    def __add__(self, other: Period | Duration) -> Period:
        """Add the fields of another period (or a duration) to this one

        Example
        -------

        >>> p = Period(weeks=2, hours=1, minutes=30)
        >>> p + Period(days=-4, minutes=15)
        Period(P2W-4DT1H45M)

        """
        if isinstance(other, Period):
            return Period(
                years=self._years + other._years,
                months=self._months + other._months,
                weeks=self._weeks + other._weeks,
                days=self._days + other._days,
                hours=self._hours + other._hours,
                minutes=self._minutes + other._minutes,
                seconds=self._seconds + other._seconds,
                nanoseconds=self._nanoseconds + other._nanoseconds,
            )
        elif isinstance(other, Duration):
            hrs, mins, secs, ns = other.as_tuple()
            return self.replace(
                hours=self._hours + hrs,
                minutes=self._minutes + mins,
                seconds=self._seconds + secs,
                nanoseconds=self._nanoseconds + ns,
            )
        else:
            return NotImplemented

    def __radd__(self, other: Duration) -> Period:
        if isinstance(other, Duration):
            return self + other
        return NotImplemented

    def __sub__(self, other: Period | Duration) -> Period:
        if isinstance(other, (Period, Duration)):
            return self + (-other)
        return NotImplemented

    def fixed_component(self) -> Duration:
        """The part of the period with a fixed length: weeks, days
        and the time of day. Weeks count as 7 days and days as 24 hours.

        Example
        -------

        >>> p = Period(months=1, days=1, minutes=90)
        >>> p.fixed_component()
        Duration(25:30:00)

        """
        return Duration(
            hours=self._weeks * 168 + self._days * 24 + self._hours,
            minutes=self._minutes,
            seconds=self._seconds,
            nanoseconds=self._nanoseconds,
        )

    def as_tuple(self) -> tuple[int, int, int, int, int, int, int, int]:
        """Convert to a tuple of (years, months, weeks, days, hours, minutes,
        seconds, nanoseconds)

        Example
        -------

        >>> p = Period(weeks=2, hours=1, minutes=30)
        >>> p.as_tuple()
        (0, 0, 2, 0, 1, 30, 0, 0)

        """
        return (
            self._years,
            self._months,
            self._weeks,
            self._days,
            self._hours,
            self._minutes,
            self._seconds,
            self._nanoseconds,
        )


Period.ZERO = Period()


def _region_field(name: str) -> property:
    return property(
        lambda self: getattr(self.in_region(), name),
        doc=f"The {name.replace('_', ' ')} in the default region",
    )


class Instant:
    """An exact moment in time, independent of any calendar or timezone.

    Internally this is a count of nanoseconds since the UNIX epoch.
    To read calendar fields, the instant is projected into a :class:`Region`.

    Example
    -------

    >>> from regiondate import Instant, Region
    >>> moon_landing = Instant.from_fields(
    ...     year=1969, month=7, day=20, hour=20, minute=17
    ... )
    >>> moon_landing.in_region(Region(tz="America/New_York")).hour
    16
    >>> moon_landing.add(years=50)
    Instant(2019-07-20T20:17:00Z)

    Note
    ----

    The canonical string format is:

    .. code-block:: text

        YYYY-MM-DDTHH:MM:SS(.fffffffff)Z

    The fields read by properties such as :attr:`year` use the
    default region. Use :meth:`in_region` for any other region.
    """

    __slots__ = ("_ns", "__weakref__")
    _ns: int

    def __init__(self) -> None:
        raise TypeError(
            "Use Instant.now(), Instant.from_fields() "
            "or one of the other from_* constructors"
        )

    @classmethod
    def _from_ns(cls, ns: int, /) -> Instant:
        self = _object_new(cls)
        self._ns = ns
        return self

    @classmethod
    def now(cls) -> Instant:
        """The current instant, according to the host clock"""
        return cls._from_ns(_time_ns())

    @classmethod
    def from_timestamp(cls, i: float, /) -> Instant:
        """Create an instance from a UNIX timestamp in seconds.
        The inverse of :meth:`timestamp`.

        Example
        -------

        >>> Instant.from_timestamp(1_123_000_000.5)
        Instant(2005-08-02T16:26:40.500000000Z)

        """
        if isinstance(i, int):
            return cls._from_ns(i * 1_000_000_000)
        # split first: the product would exceed the float's precision
        secs = floor(i)
        return cls._from_ns(
            secs * 1_000_000_000 + round((i - secs) * 1_000_000_000)
        )

    @classmethod
    def from_timestamp_nanos(cls, i: int, /) -> Instant:
        return cls._from_ns(i)

    def timestamp(self) -> float:
        return self._ns / 1_000_000_000

    def timestamp_nanos(self) -> int:
        return self._ns

    @classmethod
    def from_py_datetime(cls, d: _datetime, /) -> Instant:
        """Create from an aware :class:`~datetime.datetime`

        Raises
        ------
        ValueError
            If the datetime is naive.
        """
        if d.utcoffset() is None:
            raise ValueError(
                "Can only create Instant from an aware datetime, "
                f"got {d!r}"
            )
        delta = d - _EPOCH
        return cls._from_ns(
            (delta.days * 86_400 + delta.seconds) * 1_000_000_000
            + delta.microseconds * 1_000
        )

    def py_datetime(self, region: Region | None = None) -> _datetime:
        """The instant as an aware :class:`~datetime.datetime` in the
        region's timezone, truncated to microseconds"""
        secs, nanos = divmod(self._ns, 1_000_000_000)
        return (
            _EPOCH + _timedelta(seconds=secs, microseconds=nanos // 1_000)
        ).astimezone(_resolve_region(region).zone)

    @classmethod
    def from_fields(
        cls,
        *,
        reference: Instant | None = None,
        era: int | None = None,
        year: int | None = None,
        month: int | None = None,
        day: int | None = None,
        year_for_week_of_year: int | None = None,
        week_of_year: int | None = None,
        weekday: int | None = None,
        hour: int | None = None,
        minute: int | None = None,
        second: int | None = None,
        nanosecond: int | None = None,
        region: Region | None = None,
    ) -> Instant:
        """Create an instant from calendar fields.

        Each field takes, in order of precedence:

        1. The value passed here
        2. The field of ``reference``, as seen in the region
        3. A default: era 1, 2001-01-01 00:00:00.000000000

        The date can be given either as year/month/day, or as an ISO week
        date (year_for_week_of_year/week_of_year/weekday).
        Mixing the two is an error.

        Example
        -------

        >>> Instant.from_fields(year=2021, month=1, day=31)
        Instant(2021-01-31T00:00:00Z)
        >>> Instant.from_fields(year_for_week_of_year=2021, week_of_year=1, weekday=1)
        Instant(2021-01-04T00:00:00Z)
        >>> Instant.from_fields()
        Instant(2001-01-01T00:00:00Z)

        Raises
        ------
        InvalidComponentCombination
            If both year/month/day and ISO week fields are given.
        InvalidDate
            If the resolved fields don't form a valid date.
            Values are never clamped, so February 30th raises.
        DoesntExistInZone
            If the wall time is skipped in the region's timezone.
        """
        given = {
            name: value
            for name, value in (
                ("era", era),
                ("year", year),
                ("month", month),
                ("day", day),
                ("year_for_week_of_year", year_for_week_of_year),
                ("week_of_year", week_of_year),
                ("weekday", weekday),
                ("hour", hour),
                ("minute", minute),
                ("second", second),
                ("nanosecond", nanosecond),
            )
            if value is not None
        }
        return _resolve_fields(given, reference, _resolve_region(region))

    if TYPE_CHECKING:

        def replace(
            self,
            *,
            era: int | None = None,
            year: int | None = None,
            month: int | None = None,
            day: int | None = None,
            year_for_week_of_year: int | None = None,
            week_of_year: int | None = None,
            weekday: int | None = None,
            hour: int | None = None,
            minute: int | None = None,
            second: int | None = None,
            nanosecond: int | None = None,
            region: Region | None = None,
        ) -> Instant: ...

    else:

        def replace(self, **kwargs) -> Instant:
            """Create a new instant with some fields replaced.
            Same as :meth:`from_fields` with ``reference=self``.

            Example
            -------

            >>> d = Instant.from_fields(year=2021, month=1, day=31, hour=9)
            >>> d.replace(day=1, minute=30)
            Instant(2021-01-01T09:30:00Z)

            """
            return self.from_fields(reference=self, **kwargs)

    @classmethod
    def from_components(
        cls, components: Components | WallTime, /, region: Region | None = None
    ) -> Instant:
        """Create an instant from a complete set of fields.
        The inverse of :meth:`in_region`."""
        return _resolve_region(region).unproject(components)

    def in_region(self, region: Region | None = None) -> Components:
        """The calendar fields of this instant in the given region

        Example
        -------

        >>> d = Instant.from_timestamp(0)
        >>> d.in_region(Region(tz="Asia/Tokyo")).hour
        9

        """
        return _resolve_region(region).project(self)

    if TYPE_CHECKING:

        @property
        def era(self) -> int: ...

        @property
        def year(self) -> int: ...

        @property
        def month(self) -> int: ...

        @property
        def day(self) -> int: ...

        @property
        def hour(self) -> int: ...

        @property
        def minute(self) -> int: ...

        @property
        def second(self) -> int: ...

        @property
        def nanosecond(self) -> int: ...

        @property
        def weekday(self) -> int: ...

        @property
        def weekday_ordinal(self) -> int: ...

        @property
        def week_of_year(self) -> int: ...

        @property
        def week_of_month(self) -> int: ...

        @property
        def year_for_week_of_year(self) -> int: ...

        @property
        def day_of_year(self) -> int: ...

        @property
        def month_days(self) -> int: ...

        @property
        def nearest_hour(self) -> int: ...

    else:
        era = _region_field("era")
        year = _region_field("year")
        month = _region_field("month")
        day = _region_field("day")
        hour = _region_field("hour")
        minute = _region_field("minute")
        second = _region_field("second")
        nanosecond = _region_field("nanosecond")
        weekday = _region_field("weekday")
        weekday_ordinal = _region_field("weekday_ordinal")
        week_of_year = _region_field("week_of_year")
        week_of_month = _region_field("week_of_month")
        year_for_week_of_year = _region_field("year_for_week_of_year")
        day_of_year = _region_field("day_of_year")
        month_days = _region_field("month_days")
        nearest_hour = _region_field("nearest_hour")

    @property
    def month_name(self) -> str | None:
        """The full month name in the default region's locale.
        Use ``format("MMMM", region)`` for other regions."""
        return self.format("MMMM")

    def add(
        self,
        *,
        years: int = 0,
        months: int = 0,
        weeks: int = 0,
        days: int = 0,
        hours: int = 0,
        minutes: int = 0,
        seconds: int = 0,
        nanoseconds: int = 0,
        region: Region | None = None,
    ) -> Instant:
        """Add calendar components, from largest to smallest.

        Years and months are added to the wall clock in the region.
        If the day doesn't exist in the resulting month, the last day
        of that month is used. If the resulting wall time is skipped by a
        DST transition, it's moved forward by the length of the gap.

        Weeks, days and smaller units are then added as fixed amounts of
        elapsed time: a day is always 24 hours.

        Example
        -------

        >>> d = Instant.from_fields(year=2021, month=1, day=31)
        >>> d.add(months=1)
        Instant(2021-02-28T00:00:00Z)
        >>> d.add(days=1, hours=12)
        Instant(2021-02-01T12:00:00Z)

        """
        result = self
        if years or months:
            region = _resolve_region(region)
            engine = region.calendar
            for unit, amount in (("year", years), ("month", months)):
                if amount:
                    wall = engine.add_units(
                        region.project(result).wall_time, unit, amount
                    )
                    result = engine.unproject(wall, region.zone, "compatible")
        return result._shift(
            weeks * _UNIT_NANOS["week"]
            + days * _UNIT_NANOS["day"]
            + hours * _UNIT_NANOS["hour"]
            + minutes * _UNIT_NANOS["minute"]
            + seconds * _UNIT_NANOS["second"]
            + nanoseconds
        )

    def _shift(self, ns: int) -> Instant:
        return self._from_ns(self._ns + ns) if ns else self

    def __add__(self, delta: Period | Duration) -> Instant:
        """Add a period (in the default region) or an exact duration

        Example
        -------

        >>> d = Instant.from_fields(year=2020, month=2, day=29)
        >>> d + Period(years=1)
        Instant(2021-02-28T00:00:00Z)
        >>> d + Duration(hours=36)
        Instant(2020-03-01T12:00:00Z)

        """
        if isinstance(delta, Duration):
            return self._shift(delta._total_ns)
        elif isinstance(delta, Period):
            years, months, weeks, days, hours, mins, secs, ns = delta.as_tuple()
            return self.add(
                years=years,
                months=months,
                weeks=weeks,
                days=days,
                hours=hours,
                minutes=mins,
                seconds=secs,
                nanoseconds=ns,
            )
        return NotImplemented

    if TYPE_CHECKING:

        @overload
        def __sub__(self, other: Instant) -> Duration: ...

        @overload
        def __sub__(self, other: Period | Duration) -> Instant: ...

        def __sub__(
            self, other: Instant | Period | Duration
        ) -> Instant | Duration: ...

    else:

        def __sub__(self, other):
            """Subtract another instant, a period or a duration.

            Subtracting a period is the same as adding its negation.
            """
            if isinstance(other, Instant):
                return Duration(nanoseconds=self._ns - other._ns)
            elif isinstance(other, (Period, Duration)):
                return self + (-other)
            return NotImplemented

    def difference(
        self,
        other: Instant,
        /,
        units: Iterable[Unit] = ALL_UNITS,
        region: Region | None = None,
    ) -> Period:
        """The difference from this instant to ``other``, as a period
        expressed in the given units.

        Years and months count whole steps on the wall clock, the
        way :meth:`add` takes them. The remaining elapsed time is divided
        over the smaller units, rounding towards zero.
        If ``other`` is earlier, the result is the negation of
        ``other.difference(self)``.

        Example
        -------

        >>> a = Instant.from_fields(year=2021, month=1, day=31)
        >>> b = Instant.from_fields(year=2021, month=3, day=2, hour=5)
        >>> a.difference(b, units=("month", "day", "hour"))
        Period(P1M2DT5H)

        Note
        ----
        Like all periods, nanoseconds overflow into seconds.
        """
        region = _resolve_region(region)
        wanted = set(units)
        if not wanted.issubset(ALL_UNITS):
            raise ValueError(f"Unknown units: {sorted(wanted - set(ALL_UNITS))}")
        if other < self:
            return -other.difference(self, wanted, region)
        cursor = self
        counts: dict[str, int] = {}
        for unit in ALL_UNITS:
            if unit not in wanted:
                continue
            if unit == "year" or unit == "month":
                amount = _calendar_steps(cursor, other, unit, region)
            else:
                amount = (other._ns - cursor._ns) // _UNIT_NANOS[unit]
            if amount:
                cursor = cursor.add(**{f"{unit}s": amount}, region=region)
            counts[f"{unit}s"] = amount
        return Period(**counts)

    def start_of(
        self, unit: BoundaryUnit, /, region: Region | None = None
    ) -> Instant:
        """The first instant of the unit containing this instant

        Example
        -------

        >>> d = Instant.from_fields(year=2021, month=1, day=31, hour=14)
        >>> d.start_of("month")
        Instant(2021-01-01T00:00:00Z)
        >>> d.start_of("week")  # weeks start on Monday
        Instant(2021-01-25T00:00:00Z)

        """
        region = _resolve_region(region)
        if unit in _CLOCK_UNITS:
            c = region.project(self)
            return self._shift(-_elapsed_in(c, unit))
        engine = region.calendar
        wall = engine.start_of(region.project(self).wall_time, unit)
        return engine.unproject(wall, region.zone, "compatible")

    def end_of(
        self, unit: BoundaryUnit, /, region: Region | None = None
    ) -> Instant:
        """The last instant (to the nanosecond) of the unit
        containing this instant

        Example
        -------

        >>> d = Instant.from_fields(year=2021, month=2, day=3)
        >>> d.end_of("month")
        Instant(2021-02-28T23:59:59.999999999Z)

        """
        region = _resolve_region(region)
        if unit in _CLOCK_UNITS:
            return self.start_of(unit, region)._shift(_UNIT_NANOS[unit] - 1)
        engine = region.calendar
        start = engine.start_of(region.project(self).wall_time, unit)
        try:
            following = engine.unproject(
                engine.add_units(start, unit, 1), region.zone, "compatible"
            )
        except InvalidDate:
            # the unit runs until the end of the calendar's range
            return _last_instant(engine, region.zone)
        return following._shift(-1)

    def is_in(
        self, unit: BoundaryUnit, other: Instant, /, region: Region | None = None
    ) -> bool:
        """Whether both instants fall in the same unit (e.g. the same week)"""
        return self.start_of(unit, region) == other.start_of(unit, region)

    def is_before(
        self, unit: BoundaryUnit, other: Instant, /, region: Region | None = None
    ) -> bool:
        """Whether this instant's unit ends before ``other``'s unit starts

        Example
        -------

        >>> a = Instant.from_fields(year=2021, month=1, day=31, hour=23)
        >>> b = Instant.from_fields(year=2021, month=2, day=1)
        >>> a.is_before("day", b), a.is_before("year", b)
        (True, False)

        """
        return self.end_of(unit, region) < other.start_of(unit, region)

    def is_after(
        self, unit: BoundaryUnit, other: Instant, /, region: Region | None = None
    ) -> bool:
        return self.start_of(unit, region) > other.end_of(unit, region)

    def is_in_today(self, region: Region | None = None) -> bool:
        return self.is_in("day", Instant.today(region), region)

    def is_in_yesterday(self, region: Region | None = None) -> bool:
        return self.is_in("day", Instant.yesterday(region), region)

    def is_in_tomorrow(self, region: Region | None = None) -> bool:
        return self.is_in("day", Instant.tomorrow(region), region)

    def is_in_same_day_as(
        self, other: Instant, /, region: Region | None = None
    ) -> bool:
        return self.is_in("day", other, region)

    def is_in_weekend(self, region: Region | None = None) -> bool:
        """Whether this instant falls on a weekend day of the region's
        calendar"""
        region = _resolve_region(region)
        return region.project(self).weekday in region.calendar.weekend_days

    def is_in_leap_year(self, region: Region | None = None) -> bool:
        return _resolve_region(region).project(self).leap_year

    def is_in_leap_month(self, region: Region | None = None) -> bool:
        return _resolve_region(region).project(self).leap_month

    def first_day_of_week(self, region: Region | None = None) -> int:
        """The day of the month on which this instant's week starts"""
        return self.start_of("week", region).in_region(region).day

    def last_day_of_week(self, region: Region | None = None) -> int:
        """The day of the month on which this instant's week ends"""
        return self.end_of("week", region).in_region(region).day

    @classmethod
    def today(cls, region: Region | None = None) -> Instant:
        """The start of the current day in the region"""
        return cls._start_of_day_from_now(0, region)

    @classmethod
    def yesterday(cls, region: Region | None = None) -> Instant:
        return cls._start_of_day_from_now(-1, region)

    @classmethod
    def tomorrow(cls, region: Region | None = None) -> Instant:
        return cls._start_of_day_from_now(1, region)

    @classmethod
    def _start_of_day_from_now(
        cls, days: int, region: Region | None
    ) -> Instant:
        region = _resolve_region(region)
        engine = region.calendar
        wall = engine.start_of(region.project(cls.now()).wall_time, "day")
        return engine.unproject(
            engine.add_units(wall, "day", days), region.zone, "compatible"
        )

    def format(self, pattern: str, /, region: Region | None = None) -> str | None:
        """Format with a Unicode (LDML) date pattern, in the region's
        timezone and locale.

        Returns ``None`` if the region's locale can't be resolved.

        Example
        -------

        >>> d = Instant.from_fields(year=2021, month=1, day=31, hour=15)
        >>> d.format("EEEE d MMMM y, HH:mm", Region(locale="nl_NL"))
        'zondag 31 januari 2021, 15:00'

        """
        region = _resolve_region(region)
        dt = self.py_datetime(region)
        return _render(
            region, lambda locale: format_datetime(dt, pattern, locale=locale)
        )

    def format_style(
        self,
        style: Style | None = None,
        *,
        date_style: Style | None = None,
        time_style: Style | None = None,
        region: Region | None = None,
        relative: bool = False,
    ) -> str | None:
        """Format with the locale's predefined styles.

        ``style`` applies to both the date and the time part, unless
        ``date_style`` or ``time_style`` override it. A part without a style
        is left out. With ``relative=True``, the date part is phrased
        relative to the current day (e.g. "in 1 day").

        Returns ``None`` if there's nothing to format or the region's locale
        can't be resolved.

        Example
        -------

        >>> d = Instant.from_fields(year=2021, month=1, day=31, hour=15)
        >>> d.format_style(date_style="medium", region=Region(locale="en_US"))
        'Jan 31, 2021'
        >>> d.format_style("short", region=Region(locale="de_DE"))
        '31.01.21, 15:00'

        """
        date_style = date_style or style
        time_style = time_style or style
        if date_style is None and time_style is None:
            return None
        region = _resolve_region(region)
        dt = self.py_datetime(region)

        def render(locale: Locale) -> str:
            date_part = time_part = None
            if date_style is not None:
                date_part = (
                    self._relative_day(region, locale, date_style)
                    if relative
                    else format_date(dt, date_style, locale=locale)
                )
            if time_style is not None:
                time_part = format_time(dt, time_style, locale=locale)
            if date_part is None or time_part is None:
                return date_part or time_part or ""
            return (
                get_datetime_format(date_style, locale=locale)
                .replace("'", "")
                .replace("{0}", time_part)
                .replace("{1}", date_part)
            )

        return _render(region, render)

    def _relative_day(self, region: Region, locale: Locale, style: Style) -> str:
        engine = region.calendar
        days = engine.day_number(region.project(self).wall_time) - (
            engine.day_number(region.project(Instant.now()).wall_time)
        )
        return format_timedelta(
            _timedelta(days=days),
            granularity="day",
            threshold=_ONLY_GRANULARITY,
            add_direction=True,
            format="short" if style == "short" else "long",
            locale=locale,
        )

    def to_relative_string(
        self,
        reference: Instant | None = None,
        region: Region | None = None,
        *,
        abbreviated: bool = False,
        max_units: int = 1,
    ) -> str | None:
        """Describe the time between ``reference`` (default: now) and this
        instant, e.g. "2 hours, 5 minutes".

        The largest non-zero units are mentioned first, up to ``max_units``
        of them. Units are years, months, weeks, days, hours, minutes and
        seconds. There is no indication of direction:
        see :meth:`to_natural_string` for that.

        Example
        -------

        >>> a = Instant.from_fields(year=2021, month=1, day=31)
        >>> b = a.add(hours=2, minutes=5, seconds=3)
        >>> en = Region(locale="en")
        >>> b.to_relative_string(a, en)
        '2 hours'
        >>> b.to_relative_string(a, en, max_units=2)
        '2 hours, 5 minutes'
        >>> a.to_relative_string(b, en, abbreviated=True, max_units=3)
        '2 hr, 5 min, 3 sec'

        """
        region = _resolve_region(region)
        units = self._phrase_units(reference, region, max_units)
        length: Literal["short", "long"] = "short" if abbreviated else "long"

        def render(locale: Locale) -> str:
            return format_list(
                [
                    format_unit(
                        abs(value), f"duration-{unit}", length=length, locale=locale
                    )
                    for unit, value in units
                ],
                style=_list_style(
                    locale, "unit-short" if abbreviated else "unit"
                ),
                locale=locale,
            )

        return _render(region, render)

    def to_natural_string(
        self,
        reference: Instant | None = None,
        region: Region | None = None,
        *,
        abbreviated: bool = False,
    ) -> str | None:
        """A colloquial phrase for this instant, relative to ``reference``
        (default: now), using the largest non-zero unit.

        Example
        -------

        >>> a = Instant.from_fields(year=2021, month=1, day=31)
        >>> en = Region(locale="en")
        >>> a.add(minutes=3, seconds=10).to_natural_string(a, en)
        'in 3 minutes'
        >>> a.add(months=-2).to_natural_string(a, en)
        '2 months ago'

        """
        region = _resolve_region(region)
        ((unit, value),) = self._phrase_units(reference, region, 1)
        return _render(
            region,
            lambda locale: format_timedelta(
                _timedelta(seconds=value * _TIMEDELTA_SECONDS[unit]),
                granularity=unit,
                threshold=_ONLY_GRANULARITY,
                add_direction=True,
                format="short" if abbreviated else "long",
                locale=locale,
            ),
        )

    def _phrase_units(
        self, reference: Instant | None, region: Region, max_units: int
    ) -> list[tuple[Unit, int]]:
        if max_units < 1:
            raise ValueError("max_units must be at least 1")
        delta = (Instant.now() if reference is None else reference).difference(
            self, _PHRASE_UNITS, region
        )
        nonzero = [
            (unit, value)
            for unit, value in zip(_PHRASE_UNITS, delta.as_tuple())
            if value
        ]
        return nonzero[:max_units] or [("second", 0)]

    def canonical_format(self) -> str:
        """The instant in canonical (UTC, RFC 3339) format.

        Example
        -------

        >>> Instant.from_timestamp_nanos(1_500_000_000_000_000_001).canonical_format()
        '2017-07-14T02:40:00.000000001Z'

        """
        secs, nanos = divmod(self._ns, 1_000_000_000)
        dt = _EPOCH + _timedelta(seconds=secs)
        return f"{dt.isoformat()[:-6]}" + f".{nanos:09}" * bool(nanos) + "Z"

    @classmethod
    def from_canonical_format(cls, s: str, /) -> Instant:
        """Create from the canonical string representation.
        Inverse of :meth:`canonical_format`.

        Raises
        ------
        InvalidFormat
            If the string does not match this exact format.
        """
        if not (match := _match_instant_str(s)):
            raise InvalidFormat()
        head, fraction = match.groups()
        try:
            dt = _fromisoformat(head).replace(tzinfo=_UTC)
        except ValueError:
            raise InvalidFormat() from None
        return cls.from_py_datetime(dt)._shift(
            int((fraction or "").ljust(9, "0"))
        )

    __str__ = canonical_format

    def __repr__(self) -> str:
        return f"Instant({self})"

    # Hiding __eq__ from mypy ensures that --strict-equality works
    if not TYPE_CHECKING:  # pragma: no branch

        def __eq__(self, other: object) -> bool:
            """Instants are equal if they denote the same moment,
            regardless of how they were created"""
            if not isinstance(other, Instant):
                return NotImplemented
            return self._ns == other._ns

    def __hash__(self) -> int:
        return hash(self._ns)

    def __lt__(self, other: Instant) -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return self._ns < other._ns

    def __le__(self, other: Instant) -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return self._ns <= other._ns

    def __gt__(self, other: Instant) -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return self._ns > other._ns

    def __ge__(self, other: Instant) -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return self._ns >= other._ns

    # We don't need to copy, because it's immutable
    def __copy__(self) -> Instant:
        return self

    def __deepcopy__(self, _: object) -> Instant:
        return self

    # a custom pickle implementation with a smaller payload
    def __reduce__(self) -> tuple[object, ...]:
        return (_unpkl_instant, (self._ns,))


# A separate unpickling function allows us to make backwards-compatible changes
# to the pickling format in the future
@no_type_check
def _unpkl_instant(ns: int) -> Instant:
    return Instant._from_ns(ns)


def _resolve_fields(
    given: dict[str, int], reference: Instant | None, region: Region
) -> Instant:
    absolute = _ABSOLUTE_FIELDS.intersection(given)
    week = _WEEK_FIELDS.intersection(given)
    if absolute and week:
        raise InvalidComponentCombination.for_fields(absolute, week)
    base = None if reference is None else region.project(reference)

    def pick(name: str) -> int:
        if name in given:
            return given[name]
        elif base is not None:
            return getattr(base, name)
        return _FIELD_DEFAULTS[name]

    engine = region.calendar
    era = pick("era")
    if week:
        year, month, day = engine.from_week_date(
            era,
            pick("year_for_week_of_year"),
            pick("week_of_year"),
            pick("weekday"),
        )
    else:
        year, month, day = pick("year"), pick("month"), pick("day")
    return engine.unproject(
        WallTime(
            era,
            year,
            month,
            day,
            pick("hour"),
            pick("minute"),
            pick("second"),
            pick("nanosecond"),
        ),
        region.zone,
    )


def _calendar_steps(
    start: Instant, end: Instant, unit: Unit, region: Region
) -> int:
    # The wall clock fields give an upper bound; day clamping and
    # time of day can only make the true count smaller.
    a, b = region.project(start), region.project(end)
    if unit == "year":
        steps = b.year - a.year
    else:
        steps = (b.year - a.year) * 12 + b.month - a.month
    while steps > 0 and start.add(**{f"{unit}s": steps}, region=region) > end:
        steps -= 1
    return steps


def _elapsed_in(c: Components, unit: BoundaryUnit) -> int:
    elapsed = c.nanosecond
    if unit != "second":
        elapsed += c.second * _UNIT_NANOS["second"]
        if unit == "hour":
            elapsed += c.minute * _UNIT_NANOS["minute"]
    return elapsed


def _last_instant(engine: CalendarEngine, zone: ZoneInfo) -> Instant:
    try:
        return engine.unproject(engine.last_wall_time, zone, "compatible")
    except InvalidDate:
        # zones behind UTC reach the end of the range in UTC first
        return Instant._from_ns(_MAX_NS)


def _list_style(locale: Locale, style: str) -> str:
    # Some locales only override part of a list style in their CLDR data,
    # so Babel can't join more than two items with it.
    for candidate in (style, *_LIST_STYLE_FALLBACKS[style]):
        patterns = locale.list_patterns.get(candidate, {})
        if _LIST_PATTERN_PARTS.issubset(patterns):
            return candidate
    raise NoResult.for_list_style(locale, style)


def _render(region: Region, render: Callable[[Locale], str]) -> str | None:
    try:
        text = render(region.locale_data())
        if not text:
            raise NoResult.for_region(region)
    except (UnresolvableRegion, NoResult) as e:
        _logger.debug("Formatting yielded no result: %s", e)
        return None
    except (KeyError, UnknownUnitError) as e:
        # incomplete CLDR data for the locale
        _logger.debug("Formatting failed in %r: %r", region, e)
        return None
    return text


def _resolve_gap(
    dt: _datetime, zone: ZoneInfo, disambiguate: Disambiguate
) -> _datetime:
    # Non-existent times: they don't survive a UTC roundtrip
    if dt.astimezone(_UTC).astimezone(zone) != dt:
        if disambiguate == "raise":
            raise DoesntExistInZone.for_timezone(dt, zone)
        # fold=0 uses the offset from before the gap,
        # so normalizing shifts forward by the length of the gap
        dt = dt.astimezone(_UTC).astimezone(zone)
    # Ambiguous times keep fold=0: the earlier of the two
    return dt


def _nearest_hour(secs: int, dt: _datetime, zone: ZoneInfo) -> int:
    try:
        return (_EPOCH + _timedelta(seconds=secs + 1800)).astimezone(zone).hour
    except OverflowError:
        # half an hour later is past the last representable date
        return (dt.hour + (dt.minute >= 30)) % 24


def _format_wall(wall: WallTime) -> str:
    era, year, month, day, hour, minute, second, nanosecond = wall
    return (
        f"{year:04}-{month:02}-{day:02} "
        f"{hour:02}:{minute:02}:{second:02}.{nanosecond:09} (era {era})"
    )


class InvalidComponentCombination(ValueError):
    """Fields of the year/month/day and ISO week calendars were mixed"""

    @staticmethod
    def for_fields(
        absolute: Iterable[str], week: Iterable[str]
    ) -> InvalidComponentCombination:
        return InvalidComponentCombination(
            f"Cannot combine {', '.join(sorted(absolute))} "
            f"with {', '.join(sorted(week))}. "
            "Use either year/month/day or "
            "year_for_week_of_year/week_of_year/weekday"
        )


class InvalidDate(ValueError):
    """The calendar doesn't accept the given fields"""

    @staticmethod
    def for_fields(wall: WallTime, calendar: CalendarEngine) -> InvalidDate:
        return InvalidDate(
            f"{_format_wall(wall)} is not a valid date "
            f"in the {calendar.identifier} calendar"
        )

    @staticmethod
    def for_week_date(
        era: int,
        year_for_week_of_year: int,
        week_of_year: int,
        weekday: int,
        calendar: CalendarEngine,
    ) -> InvalidDate:
        return InvalidDate(
            f"{year_for_week_of_year}-W{week_of_year:02}-{weekday} (era {era}) "
            f"is not a valid week date in the {calendar.identifier} calendar"
        )


class DoesntExistInZone(InvalidDate):
    """A wall time doesnt exist in a timezone, e.g. because of DST"""

    @staticmethod
    def for_timezone(d: _datetime, tz: ZoneInfo) -> DoesntExistInZone:
        return DoesntExistInZone(
            f"{d.replace(tzinfo=None)} doesn't exist in timezone {tz.key}"
        )


class UnresolvableRegion(ValueError):
    """There is no data for a region's calendar, timezone or locale"""

    @staticmethod
    def for_calendar(calendar: str) -> UnresolvableRegion:
        return UnresolvableRegion(
            f"Unknown calendar {calendar!r}. "
            f"Available: {', '.join(sorted(_CALENDARS))}"
        )

    @staticmethod
    def for_timezone(tz: str) -> UnresolvableRegion:
        return UnresolvableRegion(f"Unknown timezone {tz!r}")

    @staticmethod
    def for_locale(locale: str) -> UnresolvableRegion:
        return UnresolvableRegion(f"No locale data for {locale!r}")


class NoResult(Exception):
    """The locale engine produced no text"""

    @staticmethod
    def for_region(region: Region) -> NoResult:
        return NoResult(f"No text could be produced for {region!r}")

    @staticmethod
    def for_list_style(locale: Locale, style: str) -> NoResult:
        return NoResult(f"No complete {style!r} list patterns for {locale}")


class InvalidFormat(ValueError):
    """A string has an invalid format"""


# Helpers that pre-compute/lookup as much as possible
_UTC = _timezone.utc
_EPOCH = _datetime(1970, 1, 1, tzinfo=_UTC)
# 9999-12-31T23:59:59.999999999Z
_MAX_NS = (
    (_datetime(9999, 12, 31, tzinfo=_UTC) - _EPOCH).days + 1
) * 86_400 * 1_000_000_000 - 1
_object_new = object.__new__
_fromisoformat = _datetime.fromisoformat
_time_ns = time.time_ns
_UNIT_NANOS: dict[str, int] = {
    "week": 604_800_000_000_000,
    "day": 86_400_000_000_000,
    "hour": 3_600_000_000_000,
    "minute": 60_000_000_000,
    "second": 1_000_000_000,
    "nanosecond": 1,
}
_CLOCK_UNITS = frozenset({"hour", "minute", "second"})
_LIST_PATTERN_PARTS = frozenset({"start", "middle", "end"})
_LIST_STYLE_FALLBACKS: dict[str, tuple[str, ...]] = {
    "unit-short": ("unit", "standard"),
    "unit": ("standard",),
}
_PHRASE_UNITS: tuple[Unit, ...] = ALL_UNITS[:-1]
_TIMEDELTA_SECONDS = dict(TIMEDELTA_UNITS)
# a threshold no value reaches, so Babel uses exactly the granularity given
_ONLY_GRANULARITY = float("inf")
_ABSOLUTE_FIELDS = frozenset({"year", "month", "day"})
_WEEK_FIELDS = frozenset({"year_for_week_of_year", "week_of_year", "weekday"})
_FIELD_DEFAULTS = {
    "era": 1,
    "year": 2001,
    "month": 1,
    "day": 1,
    # 2001-W01-1 is 2001-01-01, so both families share a default date
    "year_for_week_of_year": 2001,
    "week_of_year": 1,
    "weekday": MONDAY,
    "hour": 0,
    "minute": 0,
    "second": 0,
    "nanosecond": 0,
}
_match_instant_str = re.compile(
    r"(\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})(?:\.(\d{1,9}))?Z"
).fullmatch
_match_period = re.compile(
    r"P(?:([-+]?\d+)Y)?(?:([-+]?\d+)M)?(?:([-+]?\d+)W)?(?:([-+]?\d+)D)?"
    r"(?:T(?:([-+]?\d+)H)?(?:([-+]?\d+)M)?(?:([-+]?\d+(?:\.\d{1,9})?)?S)?)?"
).fullmatch
_match_duration = re.compile(
    r"([-+]?)(\d{2,}):([0-5]\d):([0-5]\d)(?:\.(\d{1,9}))?"
).fullmatch
