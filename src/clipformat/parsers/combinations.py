"""Combined percentage calculator.

Combines impairment-style percentages with the "combined values" rule:
each additional percentage applies only to the portion not yet covered,
``r = r + p * (1 - r)``, starting from the largest value.
"""

from __future__ import annotations

import math
import re
from typing import Any

from .base import ValueParser

_NUMBER = re.compile(r"\d+")
_ALLOWED = re.compile(r"[\d\s_cC%]")


def combine_percentages(values: list[int]) -> str | None:
    """Render the step-by-step combination of values.

    Values are sorted descending; each step rounds half up to a whole
    percent for display while the running total keeps full precision.

    Example:
        ```python
        combine_percentages([5, 10, 3])  # "10% c 5% = 15% c 3% = 17%"
        ```
    """
    if len(values) < 2:
        return None
    ordered = sorted(values, reverse=True)
    running = ordered[0] / 100
    parts = [f"{ordered[0]}%"]
    for value in ordered[1:]:
        pct = value / 100
        running = running + pct * (1 - running)
        parts.append(f" c {value}% = {math.floor(running * 100 + 0.5)}%")
    return "".join(parts)


class CombinationCalculator(ValueParser):
    """Evaluate "10 c 5 c 3" style combinations."""

    name: str = "combinations"

    def is_candidate(self, text: str, context: Any = None) -> bool:
        if not text or not any(ch in "cC" for ch in text):
            return False
        return len(_ALLOWED.sub("", text)) <= 2

    def process(self, text: str, context: Any = None) -> str | None:
        if not self.is_candidate(text, context):
            return None
        return combine_percentages([int(found) for found in _NUMBER.findall(text)])
