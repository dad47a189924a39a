"""Phone number formatter for "number;extension" dial strings."""

from __future__ import annotations

import re
from typing import Any

from .base import ValueParser

_NON_DIGIT = re.compile(r"\D")


class PhoneFormatter(ValueParser):
    """Format "5551234567;home" as "(555) 123-4567,,,home".

    Every field after the first becomes a ",,,"-prefixed suffix, the dial
    pause sequence used by softphones. The first field must hold exactly
    ten digits once punctuation is removed.
    """

    name: str = "phone"

    def is_candidate(self, text: str, context: Any = None) -> bool:
        if not text:
            return False
        entry = self.pattern("phone_semicolon", context)
        if entry is None:
            return ";" in text
        return entry.contains(text)

    def format(self, text: str) -> str | None:
        fields = [field for field in text.split(";") if field]
        if len(fields) < 2:
            return None
        digits = _NON_DIGIT.sub("", fields[0])
        if len(digits) != 10:
            return None
        formatted = f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"
        return formatted + "".join(f",,,{field}" for field in fields[1:])

    def process(self, text: str, context: Any = None) -> str | None:
        if not self.is_candidate(text, context):
            return None
        return self.format(text)
