"""Value parsers for clipboard content.

Each parser is a standalone, stateless unit with is_candidate() and
process(). Parsers never raise for bad input; they return None.

Example:
    ```python
    from clipformat.parsers import ArithmeticEvaluator, default_parsers

    ArithmeticEvaluator().evaluate("(3+4)*2^2")  # "28"

    parsers = default_parsers()
    parsers["units"].process("100 km to mi")  # "62.14 mi"
    ```
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import datetime

from clipformat.patterns import PatternCache

from .arithmetic import ArithmeticEvaluator, normalize_number_token
from .base import ValueParser, normalize_minus
from .benefits import BenefitCalculator, parse_benefit_table
from .combinations import CombinationCalculator, combine_percentages
from .currency import format_currency
from .dates import DateParts, DateRangeParser, DateToken, parse_date_parts, resolve_year
from .durations import (
    Duration,
    TimeCalculator,
    TimeOfDay,
    add_to_date,
    add_to_time,
    parse_date,
    parse_duration,
    parse_time,
    subtract_from_date,
    subtract_from_time,
)
from .navigation import NavigationResolver
from .phone import PhoneFormatter
from .units import UnitConverter


def default_parsers(
    patterns: PatternCache | None = None,
    clock: Callable[[], datetime] | None = None,
    benefit_table: Mapping[int, float] | None = None,
) -> dict[str, ValueParser]:
    """Create one instance of every built-in parser, keyed by name.

    Args:
        patterns: Shared pattern cache. Defaults to a new cache holding
            the default catalogue.
        clock: Source of "now" for date and time parsers.
        benefit_table: Percent -> weeks lookup for the benefit calculator.

    Returns:
        Mapping of parser name to parser.
    """
    shared = patterns if patterns is not None else PatternCache.with_defaults()
    parsers: list[ValueParser] = [
        ArithmeticEvaluator(shared),
        DateRangeParser(shared, clock=clock),
        TimeCalculator(shared, clock=clock),
        PhoneFormatter(shared),
        CombinationCalculator(shared),
        BenefitCalculator(shared, table=benefit_table),
        UnitConverter(shared),
        NavigationResolver(shared),
    ]
    return {parser.name: parser for parser in parsers}


__all__ = [
    "ArithmeticEvaluator",
    "BenefitCalculator",
    "CombinationCalculator",
    "DateParts",
    "DateRangeParser",
    "DateToken",
    "Duration",
    "NavigationResolver",
    "PhoneFormatter",
    "TimeCalculator",
    "TimeOfDay",
    "UnitConverter",
    "ValueParser",
    "add_to_date",
    "add_to_time",
    "combine_percentages",
    "default_parsers",
    "format_currency",
    "normalize_minus",
    "normalize_number_token",
    "parse_benefit_table",
    "parse_date",
    "parse_date_parts",
    "parse_duration",
    "parse_time",
    "resolve_year",
    "subtract_from_date",
    "subtract_from_time",
]
