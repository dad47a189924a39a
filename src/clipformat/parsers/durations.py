"""Duration parsing and calendar/clock arithmetic.

Adds or subtracts durations such as "2h30m", "1mo" or "2 hours 30 minutes"
to a date ("12/16/25 + 1 day") or a time of day ("9am + 2h").

Month and year arithmetic carries into the year and lets an overflowing
day of month roll forward through the calendar (Jan 31 + 1 month is
Mar 3 in a common year). Week and day arithmetic is plain calendar
arithmetic via timedelta. Time-of-day arithmetic wraps at midnight in
either direction.

Relative anchors other than "today" ("tomorrow", "next friday") are
resolved with dateparser against the injected clock.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any

import dateparser  # type: ignore[import-untyped]

from clipformat.patterns import PatternCache

from .base import ValueParser
from .dates import resolve_year

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400

_DURATION_PART = re.compile(
    r"(\d+)\s*("
    r"years?|yrs?|y|"
    r"months?|mos?|"
    r"weeks?|wks?|w|"
    r"days?|d|"
    r"hours?|hrs?|h|"
    r"minutes?|mins?|m|"
    r"seconds?|secs?|s"
    r")(?![a-z])",
    re.IGNORECASE,
)
_DURATION_FILLER = re.compile(r"^(?:[\s,]|and)*$", re.IGNORECASE)

_TIME = re.compile(r"^(\d{1,2})(?::(\d{2}))?\s*(?:([ap])\.?\s*(?:m\.?)?)?$", re.IGNORECASE)
_RELATIVE_ANCHOR = re.compile(r"^(?:tomorrow|yesterday|(?:next|last|this)\s+[a-z]+)$")
_ISO_DATE = re.compile(r"^(\d{4})[/.\-](\d{1,2})[/.\-](\d{1,2})$")
_US_DATE = re.compile(r"^(\d{1,2})[/.\-](\d{1,2})(?:[/.\-](\d{4}|\d{2}))?$")
_SEPARATOR_SPACING = re.compile(r"\s*([/.\-])\s*")


@dataclass(frozen=True)
class Duration:
    """A parsed duration; calendar and clock units are kept apart."""

    years: int = 0
    months: int = 0
    weeks: int = 0
    days: int = 0
    hours: int = 0
    minutes: int = 0
    seconds: int = 0

    @property
    def has_date_units(self) -> bool:
        return bool(self.years or self.months or self.weeks or self.days)

    @property
    def has_time_units(self) -> bool:
        return bool(self.hours or self.minutes or self.seconds)

    @property
    def total_months(self) -> int:
        return self.years * 12 + self.months

    @property
    def total_days(self) -> int:
        return self.weeks * 7 + self.days

    @property
    def total_seconds(self) -> int:
        return self.hours * 3600 + self.minutes * 60 + self.seconds


@dataclass(frozen=True)
class TimeOfDay:
    """Clock time; meridiem is "am"/"pm" for 12-hour input, else None."""

    hour: int
    minute: int
    meridiem: str | None = None

    def seconds_since_midnight(self) -> int:
        hour = self.hour
        if self.meridiem == "pm" and hour != 12:
            hour += 12
        elif self.meridiem == "am" and hour == 12:
            hour = 0
        return hour * 3600 + self.minute * 60


def _unit_field(unit: str) -> str:
    unit = unit.lower()
    if unit.startswith("y"):
        return "years"
    if unit.startswith("mo"):
        return "months"
    if unit.startswith("w"):
        return "weeks"
    if unit.startswith("d"):
        return "days"
    if unit.startswith("h"):
        return "hours"
    if unit.startswith("m"):
        return "minutes"
    return "seconds"


def parse_duration(text: str) -> Duration | None:
    """Parse a duration made of number/unit pairs.

    Accepts abbreviations ("2h30m", "1mo", "3d", "2w", "1y", "45s") and
    words ("2 hours 30 minutes", "3 weeks and 2 days"). "m" is minutes,
    "mo" is months.

    Returns:
        Duration, or None if text holds anything but number/unit pairs.
    """
    if not text:
        return None
    totals: dict[str, int] = {}
    for found in _DURATION_PART.finditer(text):
        field = _unit_field(found.group(2))
        totals[field] = totals.get(field, 0) + int(found.group(1))
    if not totals:
        return None
    if not _DURATION_FILLER.match(_DURATION_PART.sub("", text)):
        return None
    return Duration(**totals)


def parse_time(text: str) -> TimeOfDay | None:
    """Parse "9am", "9 a.m.", "9:30pm", "12a" or 24-hour "14:30".

    A bare number without minutes or a meridiem is not a time.
    """
    found = _TIME.match((text or "").strip())
    if not found:
        return None
    hour = int(found.group(1))
    minutes = found.group(2)
    meridiem = found.group(3)
    if minutes is None and meridiem is None:
        return None
    minute = int(minutes) if minutes is not None else 0
    if minute > 59:
        return None
    if meridiem is not None:
        if not 1 <= hour <= 12:
            return None
        return TimeOfDay(hour, minute, meridiem.lower() + "m")
    if hour > 23:
        return None
    return TimeOfDay(hour, minute)


def format_time(seconds: int, twelve_hour: bool) -> str:
    """Format seconds since midnight, wrapping past either end of the day."""
    seconds %= SECONDS_PER_DAY
    hour, minute = seconds // 3600, seconds % 3600 // 60
    if not twelve_hour:
        return f"{hour}:{minute:02d}"
    suffix = "PM" if hour >= 12 else "AM"
    display = hour % 12 or 12
    return f"{display}:{minute:02d} {suffix}"


def shift_time(time_of_day: TimeOfDay, duration: Duration, sign: int = 1) -> str | None:
    """Add (sign=1) or subtract (sign=-1) a clock duration from a time."""
    if duration.has_date_units:
        return None
    seconds = time_of_day.seconds_since_midnight() + sign * duration.total_seconds
    return format_time(seconds, twelve_hour=time_of_day.meridiem is not None)


def add_months(value: date, months: int) -> date:
    """Shift by whole months, rolling an overflowing day into the next month."""
    index = value.year * 12 + value.month - 1 + months
    year, month_index = divmod(index, 12)
    return date(year, month_index + 1, 1) + timedelta(days=value.day - 1)


def shift_date(value: date, duration: Duration, sign: int = 1) -> date | None:
    """Add (sign=1) or subtract (sign=-1) a calendar duration from a date."""
    if duration.has_time_units:
        return None
    try:
        shifted = add_months(value, sign * duration.total_months)
        return shifted + timedelta(days=sign * duration.total_days)
    except (ValueError, OverflowError):
        return None


def parse_date(text: str, now: datetime) -> date | None:
    """Parse a date anchor.

    Accepts "today", relative words ("tomorrow", "yesterday",
    "next friday"), "MM/DD/YYYY", "MM/DD/YY", "YYYY-MM-DD" and "MM/DD"
    (current year). Spaces around separators are ignored.
    """
    cleaned = _SEPARATOR_SPACING.sub(r"\1", (text or "").strip().lower())
    if not cleaned:
        return None
    if cleaned == "today":
        return now.date()
    if _RELATIVE_ANCHOR.match(cleaned):
        resolved = dateparser.parse(
            cleaned,
            languages=["en"],
            settings={"RELATIVE_BASE": now.replace(tzinfo=None), "PREFER_DATES_FROM": "future"},
        )
        if resolved is None:
            logger.debug(f"Relative date '{cleaned}' could not be resolved")
            return None
        return resolved.date()

    try:
        if found := _ISO_DATE.match(cleaned):
            year, month, day = (int(g) for g in found.groups())
            return date(year, month, day)
        if found := _US_DATE.match(cleaned):
            month, day = int(found.group(1)), int(found.group(2))
            year = resolve_year(int(found.group(3)), now) if found.group(3) else now.year
            return date(year, month, day)
    except ValueError:
        return None
    return None


def _as_duration(duration: Duration | str) -> Duration | None:
    return duration if isinstance(duration, Duration) else parse_duration(duration)


def add_to_date(anchor: str, duration: Duration | str, now: datetime, sign: int = 1) -> str | None:
    """Shift a date anchor by a duration.

    Returns:
        "MM/DD/YYYY", or None if either part does not parse.

    Example:
        ```python
        add_to_date("12/16/25", "1 day", now)  # "12/17/2025"
        ```
    """
    parsed = _as_duration(duration)
    start = parse_date(anchor, now)
    if parsed is None or start is None:
        return None
    shifted = shift_date(start, parsed, sign)
    return f"{shifted:%m/%d/%Y}" if shifted else None


def subtract_from_date(anchor: str, duration: Duration | str, now: datetime) -> str | None:
    return add_to_date(anchor, duration, now, sign=-1)


def add_to_time(anchor: str, duration: Duration | str, now: datetime | None = None, sign: int = 1) -> str | None:
    """Shift a time anchor ("now", "9am", "14:30") by a clock duration."""
    parsed = _as_duration(duration)
    if parsed is None:
        return None
    if anchor.strip().lower() == "now":
        current = now or datetime.now()
        time_of_day: TimeOfDay | None = TimeOfDay(current.hour, current.minute)
    else:
        time_of_day = parse_time(anchor)
    if time_of_day is None:
        return None
    return shift_time(time_of_day, parsed, sign)


def subtract_from_time(anchor: str, duration: Duration | str, now: datetime | None = None) -> str | None:
    return add_to_time(anchor, duration, now, sign=-1)


class TimeCalculator(ValueParser):
    """Evaluate "anchor +/- duration" expressions for dates and clock times.

    Example:
        ```python
        calc = TimeCalculator()
        calc.process("2025-12-16 + 1 week")  # "12/23/2025"
        calc.process("14:30 - 45m")          # "13:45"
        calc.process("11pm + 2h")            # "1:00 AM"
        ```
    """

    name: str = "time_calc"

    def __init__(
        self,
        patterns: PatternCache | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        super().__init__(patterns)
        self._clock = clock or datetime.now

    def now(self, context: Any = None) -> datetime:
        clock = getattr(context, "clock", None) or self._clock
        return clock()

    def _split(self, name: str, text: str, context: Any) -> tuple[str, int, str] | None:
        entry = self.pattern(name, context)
        found = entry.search(text.strip()) if entry else None
        if not found:
            return None
        sign = 1 if found.group("op") == "+" else -1
        return found.group("anchor"), sign, found.group("duration").strip()

    def is_candidate(self, text: str, context: Any = None) -> bool:
        if not text:
            return False
        return any(self._split(name, text, context) for name in ("date_calc", "time_calc"))

    def process(self, text: str, context: Any = None) -> str | None:
        if not text:
            return None
        now = self.now(context)

        date_parts = self._split("date_calc", text, context)
        if date_parts:
            anchor, sign, duration = date_parts
            result = add_to_date(anchor, duration, now, sign)
            if result:
                return result

        time_parts = self._split("time_calc", text, context)
        if time_parts:
            anchor, sign, duration = time_parts
            return add_to_time(anchor, duration, now, sign)
        return None
