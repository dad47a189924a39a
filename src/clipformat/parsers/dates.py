"""Date range parser.

Turns a copied range such as "5/6/23 to 6/7/23", "May 6, 2023 - June 7"
or "2023-05-06T10:00:00Z through 2023-05-07" into a normalized
"MM/DD/YYYY to MM/DD/YYYY, N days" description, N counting both ends.

Three grammars are recognized side by side: numeric (M/D/YY[YY] with "/",
"." or "-"), ISO (YYYY-MM-DD, anything after the date such as a time or
zone is ignored) and month-name text ("Dec 30, 2023", "6 May 2023",
"Jan 2nd").
"""

from __future__ import annotations

import calendar
import re
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Any

from clipformat.patterns import PatternCache

from .base import ValueParser, normalize_minus

MONTHS: dict[str, int] = {
    "january": 1, "jan": 1,
    "february": 2, "feb": 2,
    "march": 3, "mar": 3,
    "april": 4, "apr": 4,
    "may": 5,
    "june": 6, "jun": 6,
    "july": 7, "jul": 7,
    "august": 8, "aug": 8,
    "september": 9, "sep": 9, "sept": 9,
    "october": 10, "oct": 10,
    "november": 11, "nov": 11,
    "december": 12, "dec": 12,
}  # fmt: skip

# Window for two-digit years: up to this many years after "now" stays in
# the current century, anything later falls back a century.
TWO_DIGIT_YEAR_WINDOW = 30

_TOKEN_PATTERNS = ("date_token", "date_token_iso", "date_token_text", "date_token_text_day_first")
_TOKEN_EDGE_CHARS = " \t\r\n,-:()"
_RANGE_WORDS = (" to ", " and ", " through ", " thru ")

_ORDINAL = re.compile(r"(\d)(?:st|nd|rd|th)\b", re.IGNORECASE)
_ISO = re.compile(r"^(\d{4})[-./](\d{2})[-./](\d{2})")
_NUMERIC = re.compile(r"^(\d+)[/.\-](\d+)[/.\-](\d+)$")
_NUMERIC_NO_YEAR = re.compile(r"^(\d+)[/.\-](\d+)$")
_MONTH_FIRST = re.compile(r"^([A-Za-z.]+)\s+(\d{1,2})(.*)$")
_DAY_FIRST = re.compile(r"^(\d{1,2})\s+([A-Za-z.]+)(.*)$")
_TRAILING_YEAR = re.compile(r"^\s*,?\s*(\d{2,4})$")


@dataclass
class DateParts:
    """Month/day/year parsed from one token; year may still be unknown."""

    month: int
    day: int
    year: int | None = None
    inferred_year: bool = False

    def to_date(self) -> date | None:
        if self.year is None or not is_valid_date(self.month, self.day, self.year):
            return None
        return date(self.year, self.month, self.day)


@dataclass(frozen=True)
class DateToken:
    """A date-like token located in text.

    Attributes:
        start: Offset of the cleaned token in the source text.
        text: Token text with surrounding punctuation removed.
        parts: Parsed components, or None if the token is not a real date.
    """

    start: int
    text: str
    parts: DateParts | None

    @property
    def end(self) -> int:
        return self.start + len(self.text)


def resolve_year(year: int, now: datetime | date) -> int:
    """Expand a two-digit year relative to now.

    The current century is used unless that lands more than
    TWO_DIGIT_YEAR_WINDOW years in the future, in which case the previous
    century is used. Years of three or more digits are returned unchanged.
    """
    if year >= 100:
        return year
    century = now.year // 100 * 100
    if year + century > now.year + TWO_DIGIT_YEAR_WINDOW:
        century -= 100
    return year + century


def is_valid_date(month: int, day: int, year: int) -> bool:
    """True for a real calendar day in 1900 or later."""
    if year < 1900 or not 1 <= month <= 12 or day < 1:
        return False
    return day <= calendar.monthrange(year, month)[1]


def _valid_parts(parts: DateParts | None) -> DateParts | None:
    if parts is None:
        return None
    # Year-less dates are checked against a leap year so Feb 29 survives.
    year = parts.year if parts.year is not None else 2000
    return parts if is_valid_date(parts.month, parts.day, year) else None


def parse_date_parts(token: str, now: datetime | date) -> DateParts | None:
    """Parse a single date token in any supported grammar.

    Args:
        token: Candidate token, e.g. "05/06/23", "2023-05-06T10:00Z",
            "Dec 30, 2023", "6 May" or "Jan 2nd".
        now: Reference time for two-digit year expansion.

    Returns:
        DateParts (year None when the token has none), or None.
    """
    cleaned = normalize_minus(token or "").strip().rstrip(".,")
    cleaned = _ORDINAL.sub(r"\1", cleaned)
    if not cleaned:
        return None

    if found := _ISO.match(cleaned):
        year, month, day = (int(g) for g in found.groups())
        return DateParts(month=month, day=day, year=year)

    if found := _NUMERIC.match(cleaned):
        month, day, year = (int(g) for g in found.groups())
        return DateParts(month=month, day=day, year=resolve_year(year, now))

    if found := _NUMERIC_NO_YEAR.match(cleaned):
        month, day = (int(g) for g in found.groups())
        return DateParts(month=month, day=day)

    for pattern, month_group, day_group in ((_MONTH_FIRST, 1, 2), (_DAY_FIRST, 2, 1)):
        found = pattern.match(cleaned)
        if not found:
            continue
        month = MONTHS.get(found.group(month_group).replace(".", "").lower())
        if month is None:
            return None
        day = int(found.group(day_group))
        trailing = found.group(3)
        if not trailing.strip(" ,"):
            return DateParts(month=month, day=day)
        year_match = _TRAILING_YEAR.match(trailing)
        if not year_match:
            return None
        return DateParts(month=month, day=day, year=resolve_year(int(year_match.group(1)), now))

    return None


class DateRangeParser(ValueParser):
    """Describe a date range with normalized dates and an inclusive day count.

    When one end omits its year it borrows the other end's; if that makes
    the range run backwards, the year-less end is moved across the year
    boundary ("Dec 30, 2023 to Jan 2" ends in 2024).

    Example:
        ```python
        parser = DateRangeParser()
        parser.describe_range("5/6/23 to 6/7/23")
        # "05/06/2023 to 06/07/2023, 33 days"
        parser.describe_range("Dec 30, 2023 to Jan 2")
        # "12/30/2023 to 01/02/2024, 4 days"
        ```
    """

    name: str = "date"

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

    def locate_tokens(self, text: str, context: Any = None) -> list[DateToken]:
        """Find every date-like token, ordered by position.

        Tokens that start at the same offset are ordered longest first. A
        real date overlapping an earlier real date is dropped, so "May 23"
        is not reported again inside "6 May 23".
        """
        if not text:
            return []
        source = normalize_minus(text)
        now = self.now(context)
        seen: set[tuple[int, int]] = set()
        found: list[tuple[int, int, str]] = []

        for name in _TOKEN_PATTERNS:
            entry = self.pattern(name, context)
            if entry is None:
                continue
            for match in entry.finditer(source):
                raw = match.group(0)
                cleaned = raw.strip(_TOKEN_EDGE_CHARS)
                if not cleaned:
                    continue
                key = (match.start(), match.end())
                if key in seen:
                    continue
                seen.add(key)
                offset = match.start() + len(raw) - len(raw.lstrip(_TOKEN_EDGE_CHARS))
                found.append((offset, -len(cleaned), cleaned))

        found.sort()
        tokens: list[DateToken] = []
        covered = 0
        for start, _, cleaned in found:
            parts = _valid_parts(parse_date_parts(cleaned, now))
            if parts is not None:
                if start < covered:
                    continue
                covered = start + len(cleaned)
            tokens.append(DateToken(start, cleaned, parts))
        return tokens

    def is_range_candidate(self, text: str, context: Any = None) -> bool:
        """True if text holds two real dates joined by a range separator."""
        if not text:
            return False
        valid = [token for token in self.locate_tokens(text, context) if token.parts]
        if len(valid) < 2:
            return False
        # Only the text between the two dates can separate them.
        gap = normalize_minus(text)[valid[0].end : valid[1].start].lower()
        if any(word in f" {gap} " for word in _RANGE_WORDS):
            return True
        return "-" in gap

    def describe_range(self, text: str, context: Any = None) -> str | None:
        """Describe the first two dates in text as a range.

        Returns:
            "MM/DD/YYYY to MM/DD/YYYY, N days", or None if two valid dates
            cannot be found.
        """
        if not text:
            return None
        parsed = [replace(token.parts) for token in self.locate_tokens(text, context) if token.parts]
        if len(parsed) < 2:
            return None
        first, second = parsed[0], parsed[1]

        if first.year is None and second.year is not None:
            first.year, first.inferred_year = second.year, True
        if second.year is None and first.year is not None:
            second.year, second.inferred_year = first.year, True
        if first.year is None and second.year is None:
            current = self.now(context).year
            first.year = second.year = current
            first.inferred_year = second.inferred_year = True

        start, end = first.to_date(), second.to_date()
        if start is None or end is None:
            return None

        if end < start:
            if second.inferred_year and second.year is not None:
                second.year += 1
                end = second.to_date()
            elif first.inferred_year and first.year is not None:
                first.year -= 1
                start = first.to_date()
            if start is None or end is None:
                return None

        if end < start:
            start, end = end, start

        days = (end - start).days + 1
        return f"{start:%m/%d/%Y} to {end:%m/%d/%Y}, {days} days"

    def is_candidate(self, text: str, context: Any = None) -> bool:
        return self.is_range_candidate(text, context)

    def process(self, text: str, context: Any = None) -> str | None:
        return self.describe_range(text, context)
