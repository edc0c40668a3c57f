"""Date and time parsing for WordCamp schedule and session pages.

The schedule page prints human-authored headings such as
``"Wednesday, June 4, 2025"`` and per-session strings such as
``"10:00 - 10:45 CEST"``. Session pages additionally carry a
machine-readable ``datetime`` attribute. This module turns both into
:class:`~datetime.datetime` values.

Every failure raises a subclass of :class:`ParseError` carrying the raw
text, so the caller can skip a single block or session and continue.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)
"""Month names as printed in day headings, January first."""

# "10:00 - 10:45 CEST", "10:00–10:45", "14:00"
_TIME_RE = re.compile(
    r"(\d{1,2}):(\d{2})\s*(?:[-–]\s*(\d{1,2}):(\d{2}))?\s*([A-Za-z]{3,5}\b)?"
)


class ParseError(ValueError):
    """Raised when page text cannot be turned into a date or time.

    :param message: Human readable reason.
    :param raw: The offending text as found on the page.
    """

    def __init__(self, message: str, raw: str) -> None:
        super().__init__(f"{message}: {raw!r}")
        self.raw = raw


class DateParseError(ParseError):
    """A day heading could not be parsed."""


class TimeParseError(ParseError):
    """A session time or timestamp could not be parsed."""


@dataclass(frozen=True)
class DayContext:
    """The calendar date shared by all sessions of one schedule block."""

    year: int
    month: int
    day: int

    def to_date(self) -> date:
        """Return the day as a :class:`~datetime.date`.

        :returns: The calendar date of the schedule block.
        """
        return date(self.year, self.month, self.day)


@dataclass(frozen=True)
class TimeRange:
    """Wall-clock start/end parsed from a session time string.

    :param explicit_end: ``False`` when the end was derived from the
        default duration rather than read from the text.
    :param label: Timezone label found after the times (e.g. ``"CEST"``),
        informational only.
    """

    start_hour: int
    start_minute: int
    end_hour: int
    end_minute: int
    explicit_end: bool
    label: str | None = None


def parse_day_heading(text: str) -> DayContext:
    """Parse a schedule day heading.

    Two shapes are recognised, told apart by the number of comma-separated
    parts:

    * ``"Wednesday, June 4, 2025"``
    * ``"June 4, 2025"``

    :param text: The heading text.
    :returns: The parsed :class:`DayContext`.
    :raises DateParseError: On any other shape, an unknown month name,
        a non-numeric day/year or an impossible date.
    """
    raw = text
    parts = text.strip().split(", ")

    if len(parts) == 3:
        month_day, year_text = parts[1], parts[2]
    elif len(parts) == 2:
        month_day, year_text = parts[0], parts[1]
    else:
        raise DateParseError("Unexpected date format (too many/few commas)", raw)

    pieces = month_day.split()
    if len(pieces) != 2:
        raise DateParseError("Expected '<Month> <Day>'", raw)
    month_name, day_text = pieces

    if month_name not in MONTH_NAMES:
        raise DateParseError(f"Unknown month name {month_name!r}", raw)
    month = MONTH_NAMES.index(month_name) + 1

    # Leading digits only, so "4th" reads as 4
    day_m = re.match(r"\d+", day_text)
    year_m = re.match(r"\d+", year_text.strip())
    if not day_m or not year_m:
        raise DateParseError("Day or year is not a number", raw)
    day, year = int(day_m.group()), int(year_m.group())

    try:
        date(year, month, day)
    except ValueError as exc:
        raise DateParseError(str(exc), raw) from None

    return DayContext(year, month, day)


def add_minutes_wrapping(hour: int, minute: int, minutes: int) -> tuple[int, int]:
    """Add *minutes* to a wall-clock time, wrapping the hour at 24.

    The date is not advanced: ``23:30`` plus an hour is ``00:30`` on the
    same calendar day.
    """
    total = minute + minutes
    hour += total // 60
    return hour % 24, total % 60


def _check_clock(hour: int, minute: int, raw: str) -> None:
    if hour > 23 or minute > 59:
        raise TimeParseError("Time out of range", raw)


def parse_time_text(text: str, default_minutes: int = 60) -> TimeRange:
    """Extract a start time and optional end time from session text.

    Accepts ``"10:00 - 10:45 CEST"``, ``"10:00–10:45"`` and ``"14:00"``.
    When only a start is present the end is *default_minutes* later, with
    the hour wrapping at midnight (see :func:`add_minutes_wrapping`).

    :param text: The free-text time from the page.
    :param default_minutes: Duration used when no end time is given.
    :returns: The parsed :class:`TimeRange`.
    :raises TimeParseError: If no time is found or a time is out of range.
    """
    m = _TIME_RE.search(text)
    if not m:
        raise TimeParseError("Could not extract time string", text)

    start_hour, start_minute = int(m.group(1)), int(m.group(2))
    _check_clock(start_hour, start_minute, text)

    if m.group(3) is not None:
        end_hour, end_minute = int(m.group(3)), int(m.group(4))
        _check_clock(end_hour, end_minute, text)
        explicit = True
    else:
        end_hour, end_minute = add_minutes_wrapping(
            start_hour, start_minute, default_minutes
        )
        explicit = False

    label = m.group(5).upper() if m.group(5) else None
    return TimeRange(start_hour, start_minute, end_hour, end_minute, explicit, label)


def to_utc(day: DayContext, hour: int, minute: int, offset_minutes: int) -> datetime:
    """Convert a wall-clock time at a fixed UTC offset to a UTC datetime.

    This is plain arithmetic, not timezone-aware: the source page is known
    to print every time at the same offset. Results before midnight UTC
    fall on the previous day.

    :param day: The schedule day.
    :param hour: Local hour.
    :param minute: Local minute.
    :param offset_minutes: Offset of the page's times east of UTC, e.g.
        ``120`` for CEST.
    :returns: An aware datetime in UTC.
    """
    local = datetime(day.year, day.month, day.day, hour, minute)
    return (local - timedelta(minutes=offset_minutes)).replace(tzinfo=timezone.utc)


def parse_timestamp(value: str, default_offset_minutes: int = 0) -> datetime:
    """Parse the ``datetime`` attribute of a session page ``<time>`` tag.

    :param value: ISO-8601 text such as ``"2025-06-06T10:00:00+02:00"``.
    :param default_offset_minutes: Offset attached when *value* carries
        none.
    :returns: An aware datetime.
    :raises TimeParseError: If *value* is not ISO-8601.
    """
    text = value.strip()
    # fromisoformat() before 3.11 rejects a trailing "Z"
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(text)
    except ValueError:
        raise TimeParseError("Invalid datetime attribute", value) from None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone(timedelta(minutes=default_offset_minutes)))
    return dt


def resolve_session_end(
    start: datetime,
    time_text: str,
    default_minutes: int,
    offset_minutes: int | None = None,
    wrap: bool = False,
) -> datetime:
    """Work out the end of a session from its page.

    An explicit ``"HH:MM - HH:MM"`` range in *time_text* sets the end on
    the start's date as seen at the page's offset. Without one the end is
    *default_minutes* after *start*.

    :param start: Authoritative start from the ``datetime`` attribute.
    :param time_text: Human-readable text of the ``<time>`` tag, e.g.
        ``"June 6, 2025 at 10:00 - 11:00 CEST"``.
    :param default_minutes: Fallback duration.
    :param offset_minutes: Offset the page prints its times at, east of
        UTC. Defaults to the offset of *start*.
    :param wrap: Keep the default end on the start's calendar day,
        wrapping the hour at midnight like :func:`add_minutes_wrapping`.
    :returns: The end, at the same offset as *start*.
    """
    try:
        span = parse_time_text(time_text, default_minutes)
    except TimeParseError:
        span = None

    if span is not None and span.explicit_end:
        local = start
        if offset_minutes is not None:
            local = start.astimezone(timezone(timedelta(minutes=offset_minutes)))
        end = local.replace(
            hour=span.end_hour, minute=span.end_minute, second=0, microsecond=0
        )
        return end.astimezone(start.tzinfo)
    if wrap:
        hour, minute = add_minutes_wrapping(start.hour, start.minute, default_minutes)
        return start.replace(hour=hour, minute=minute, second=0, microsecond=0)
    return start + timedelta(minutes=default_minutes)
