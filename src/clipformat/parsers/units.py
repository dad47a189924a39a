"""Unit conversion parser.

Uses Pint for unit recognition and conversion: "100 km to mi",
"5 lb in kg", "72 F to C", "1.5 GB to MB".
"""

from __future__ import annotations

from typing import Any

from pint import UnitRegistry
from pint.errors import DimensionalityError, OffsetUnitCalculusError, UndefinedUnitError

from .arithmetic import normalize_number_token
from .base import ValueParser

# Initialize unit registry once
_ureg: Any = UnitRegistry()

# Clipboard spellings that Pint reads differently (C is coulomb, F is farad)
UNIT_ALIASES: dict[str, str] = {
    "C": "degC",
    "°C": "degC",
    "F": "degF",
    "°F": "degF",
    "K": "kelvin",
    "kph": "kilometer / hour",
    "kmh": "kilometer / hour",
    "MB": "megabyte",
    "GB": "gigabyte",
    "TB": "terabyte",
}


def resolve_unit(unit: str) -> str:
    return UNIT_ALIASES.get(unit, unit)


def format_magnitude(value: float) -> str:
    """Format a converted magnitude.

    Tiny values keep six significant digits, large values two decimals,
    everything else two decimals with trailing zeros dropped.
    """
    if abs(value) < 0.01:
        return f"{value:.6g}"
    if abs(value) >= 1000:
        return f"{value:.2f}"
    return f"{value:.2f}".rstrip("0").rstrip(".")


def convert(value: float, from_unit: str, to_unit: str) -> float | None:
    """Convert value between units; None for unknown or incompatible units."""
    try:
        quantity = _ureg.Quantity(value, resolve_unit(from_unit))
        return float(quantity.to(resolve_unit(to_unit)).magnitude)
    except (UndefinedUnitError, DimensionalityError, OffsetUnitCalculusError, ValueError):
        return None


class UnitConverter(ValueParser):
    """Convert "<number> <unit> to|in <unit>" expressions.

    Example:
        ```python
        converter = UnitConverter()
        converter.process("100 km to mi")  # "62.14 mi"
        converter.process("5 kg to mi")    # None
        ```
    """

    name: str = "units"

    def _parse(self, text: str, context: Any) -> tuple[float, str, str] | None:
        entry = self.pattern("unit_conversion", context)
        found = entry.search(text.strip()) if entry and text else None
        if not found:
            return None
        raw_value, from_unit, _, to_unit = found.groups()
        try:
            value = float(normalize_number_token(raw_value))
        except ValueError:
            return None
        return value, from_unit, to_unit

    def is_candidate(self, text: str, context: Any = None) -> bool:
        return self._parse(text, context) is not None

    def process(self, text: str, context: Any = None) -> str | None:
        parsed = self._parse(text, context)
        if parsed is None:
            return None
        value, from_unit, to_unit = parsed
        result = convert(value, from_unit, to_unit)
        if result is None:
            return None
        return f"{format_magnitude(result)} {to_unit}"
