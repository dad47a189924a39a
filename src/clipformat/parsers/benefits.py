"""Permanent disability (PD) benefit calculator.

"15pd" or "15% PD" looks up the number of benefit weeks for a 15% rating
in the injected benefit table and prices them at the configured weekly
rate.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from typing import Any

from clipformat.patterns import PatternCache

from .base import ValueParser, config_value
from .currency import format_currency

logger = logging.getLogger(__name__)

DEFAULT_BENEFIT_PER_WEEK = 290

_TABLE_LINE = re.compile(r"(\d+)\s*:\s*([\d.]+)")


def parse_benefit_table(lines: Iterable[str]) -> dict[int, float]:
    """Parse "percent: weeks" lines into a lookup table.

    Lines that do not hold a percent/weeks pair are skipped.

    Example:
        ```python
        parse_benefit_table(["15: 10", "16 : 11.25", "# comment"])
        # {15: 10.0, 16: 11.25}
        ```
    """
    table: dict[int, float] = {}
    for line in lines:
        found = _TABLE_LINE.search(str(line))
        if not found:
            continue
        try:
            table[int(found.group(1))] = float(found.group(2))
        except ValueError:
            logger.debug(f"Skipping malformed benefit table line: {line!r}")
    return table


class BenefitCalculator(ValueParser):
    """Convert a PD rating to benefit weeks and a dollar amount.

    Example:
        ```python
        calc = BenefitCalculator(table={15: 10})
        calc.process("15pd")  # "15% PD = 10.00 weeks = $2,900.00"
        ```
    """

    name: str = "benefit"

    def __init__(
        self,
        patterns: PatternCache | None = None,
        table: Mapping[int, float] | None = None,
    ) -> None:
        super().__init__(patterns)
        self._table: Mapping[int, float] = table or {}

    def table(self, context: Any = None) -> Mapping[int, float]:
        injected = getattr(context, "benefit_table", None)
        return injected if injected is not None else self._table

    def percent(self, text: str, context: Any = None) -> int | None:
        entry = self.pattern("benefit_percent", context)
        found = entry.search(text.strip().upper()) if entry and text else None
        return int(found.group(1)) if found else None

    def is_candidate(self, text: str, context: Any = None) -> bool:
        return self.percent(text, context) is not None

    def process(self, text: str, context: Any = None) -> str | None:
        percent = self.percent(text, context)
        if percent is None:
            return None
        weeks = self.table(context).get(percent)
        if weeks is None:
            return None
        per_week = config_value(context, "benefits.benefit_per_week", DEFAULT_BENEFIT_PER_WEEK)
        amount = format_currency(weeks * per_week)
        if amount is None:
            logger.warning(f"Currency formatting failed for {percent}% PD amount")
            return None
        return f"{percent}% PD = {weeks:.2f} weeks = {amount}"
