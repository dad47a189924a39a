"""Currency formatting."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

_CENTS = Decimal("0.01")


def format_currency(value: float | int | str | Decimal) -> str | None:
    """Format a number as US dollars.

    Rounds half-up to cents and groups thousands. The sign goes before the
    dollar marker.

    Args:
        value: Amount to format.

    Returns:
        Formatted amount such as "$2,359.13" or "-$5.00", or None if value
        is not a finite number.

    Example:
        ```python
        format_currency(2359.1299999999756)  # "$2,359.13"
        format_currency(-5)                  # "-$5.00"
        ```
    """
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if not amount.is_finite():
        return None

    rounded = abs(amount).quantize(_CENTS, rounding=ROUND_HALF_UP)
    formatted = f"${rounded:,.2f}"
    if amount < 0 and rounded != 0:
        return "-" + formatted
    return formatted
