"""RFC 5322 ``date-time`` grammar (section 3.3).

date-time   = [ day-of-week "," ] date time [CFWS]
date        = day month year
time        = time-of-day zone

Values are kept exactly as written: the zone is a sign plus hour/minute
offsets and is never normalised to UTC, and the weekday name is not checked
against the calendar date.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import NamedTuple

from .combinators import as_str, cfws, digit, fws, is_digit, optional, tag, take_while1, two_digits
from .errors import Input, KnownError, Res


class Day(str, Enum):
    """Weekday names as abbreviated in ``day-of-week``."""

    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"


class Month(str, Enum):
    JANUARY = "january"
    FEBRUARY = "february"
    MARCH = "march"
    APRIL = "april"
    MAY = "may"
    JUNE = "june"
    JULY = "july"
    AUGUST = "august"
    SEPTEMBER = "september"
    OCTOBER = "october"
    NOVEMBER = "november"
    DECEMBER = "december"

    @property
    def number(self) -> int:
        return list(Month).index(self) + 1


class Zone(NamedTuple):
    """``+hhmm`` / ``-hhmm``; ``sign`` is True for ``+``."""

    sign: bool
    hours: int
    minutes: int


class Time(NamedTuple):
    hour: int
    minute: int
    second: int
    zone: Zone


class Date(NamedTuple):
    day: int
    month: Month
    year: int


class DateTime(NamedTuple):
    day_of_week: Day | None
    date: Date
    time: Time

    def to_datetime(self) -> datetime:
        """Convert to an aware :class:`datetime.datetime`.

        A leap second is clamped to 59.  Raises :class:`KnownError` when the
        calendar date or the offset cannot be represented.
        """
        zone = self.time.zone
        offset = timedelta(hours=zone.hours, minutes=zone.minutes)
        if not zone.sign:
            offset = -offset
        try:
            return datetime(
                self.date.year,
                self.date.month.number,
                self.date.day,
                self.time.hour,
                self.time.minute,
                min(self.time.second, 59),
                tzinfo=timezone(offset),
            )
        except ValueError as exc:
            raise KnownError(f"date-time cannot be represented: {exc}") from None

    def into_owned(self) -> DateTime:
        return self


_DAY_NAMES = {
    b"mon": Day.MONDAY,
    b"tue": Day.TUESDAY,
    b"wed": Day.WEDNESDAY,
    b"thu": Day.THURSDAY,
    b"fri": Day.FRIDAY,
    b"sat": Day.SATURDAY,
    b"sun": Day.SUNDAY,
}

_MONTH_NAMES = {
    b"jan": Month.JANUARY,
    b"feb": Month.FEBRUARY,
    b"mar": Month.MARCH,
    b"apr": Month.APRIL,
    b"may": Month.MAY,
    b"jun": Month.JUNE,
    b"jul": Month.JULY,
    b"aug": Month.AUGUST,
    b"sep": Month.SEPTEMBER,
    b"oct": Month.OCTOBER,
    b"nov": Month.NOVEMBER,
    b"dec": Month.DECEMBER,
}


def day_name(input: Input) -> Res[Day]:
    if len(input) < 3:
        raise KnownError("Expected day_name, but characters are missing (at least 3).")
    letters = bytes(input[:3]).lower()
    if letters not in _DAY_NAMES:
        raise KnownError("Not a valid day_name")
    return input[3:], _DAY_NAMES[letters]


def month(input: Input) -> Res[Month]:
    if len(input) < 3:
        raise KnownError("Expected month, but characters are missing (at least 3).")
    letters = bytes(input[:3]).lower()
    if letters not in _MONTH_NAMES:
        raise KnownError("Not a valid month")
    return input[3:], _MONTH_NAMES[letters]


def day_of_week(input: Input) -> Res[Day]:
    """[FWS] day-name ","

    A name without the comma is an error; callers that allow the weekday to
    be missing wrap this rule in :func:`optional`.
    """
    input, _ = optional(input, fws)
    input, day = day_name(input)
    input, _ = tag(input, b",")
    return input, day


def year(input: Input) -> Res[int]:
    """FWS 4*DIGIT FWS, no earlier than 1990.

    Any number of digits is read, up to the interpreter's int conversion
    limit (4300 digits by default); longer years raise "Failed to parse year".
    """
    input, _ = fws(input)
    try:
        input, digits = take_while1(input, is_digit)
    except KnownError:
        raise KnownError("no digit in year") from None
    if len(digits) < 4:
        raise KnownError("year is expected to have 4 digits or more")
    try:
        value = int(as_str(digits))
    except ValueError:
        # more digits than the interpreter converts
        raise KnownError("Failed to parse year") from None
    if value < 1990:
        raise KnownError("year must be after 1990")
    input, _ = fws(input)
    return input, value


def day(input: Input) -> Res[int]:
    input, _ = optional(input, fws)
    input, value = digit(input)
    rest, second = optional(input, digit)
    if second is not None:
        value = value * 10 + second
        input = rest
    if not 1 <= value <= 31:
        raise KnownError("day must be between 1 and 31")
    input, _ = fws(input)
    return input, value


def time_of_day(input: Input) -> Res[tuple[int, int, int]]:
    """hour ":" minute [ ":" second ]

    A ``:`` that is not followed by two digits leaves the seconds at 0 and
    the colon unconsumed.
    """
    input, hour = two_digits(input)
    if hour > 23:
        raise KnownError("There is only 24 hours in a day")
    input, _ = tag(input, b":")
    input, minutes = two_digits(input)
    if minutes > 59:
        raise KnownError("There is only 60 minutes per hour")

    if input[:1] == b":":
        rest, seconds = optional(input[1:], two_digits)
        if seconds is not None:
            # 60 is a leap second
            if seconds > 60:
                raise KnownError("There is only 60 seconds in a minute")
            return rest, (hour, minutes, seconds)

    return input, (hour, minutes, 0)


def zone(input: Input) -> Res[Zone]:
    input, _ = fws(input)
    if not len(input):
        raise KnownError("Expected more characters in zone")
    if input[0] == ord("+"):
        sign = True
    elif input[0] == ord("-"):
        sign = False
    else:
        raise KnownError("Invalid sign character in zone")
    input, hours = two_digits(input[1:])
    input, minutes = two_digits(input)
    if minutes > 59:
        raise KnownError("zone minutes out of range")
    return input, Zone(sign, hours, minutes)


def time(input: Input) -> Res[Time]:
    input, (hour, minute, second) = time_of_day(input)
    input, tz = zone(input)
    return input, Time(hour, minute, second, tz)


def date(input: Input) -> Res[Date]:
    input, d = day(input)
    input, m = month(input)
    input, y = year(input)
    return input, Date(d, m, y)


def date_time(input: Input) -> Res[DateTime]:
    input, weekday = optional(input, day_of_week)
    input, d = date(input)
    input, t = time(input)
    input, _ = optional(input, cfws)
    return input, DateTime(weekday, d, t)


def parse_date_time(input: Input) -> Res[DateTime]:
    """Parse a ``date-time`` without copying ``input``.

    The remainder is a :class:`memoryview` over the caller's buffer.
    """
    if not isinstance(input, memoryview):
        input = memoryview(input)
    return date_time(input)
