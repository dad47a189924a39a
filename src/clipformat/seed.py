"""Seed extraction.

A seed is the trailing part of a selection most likely to be a
transformable expression: in "Total: 5 + 3" it is "5 + 3". The extractor
splits text into (prefix, seed) with ``prefix + seed == text`` so the
host can replace only the seed.

Strategies are tried in order and the first one that applies wins:

1. date range: split right before the first date of a date range
2. arithmetic: the whole text or its whitespace-delimited tail made only
   of numbers, operators, currency markers and the combination marker
3. separator: split after the last "= ", ": ", "(", "[" or "{"
4. whitespace: split after the last whitespace character
5. fallback: the whole text is the seed
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from typing import Any

from clipformat.parsers.dates import DateRangeParser

logger = logging.getLogger(__name__)

Split = tuple[str, str]
Strategy = Callable[[str, Any], Split | None]

_ARITHMETIC_CHARS = r"[\d.\s()+\-*/%^cC$,]"
_ARITHMETIC_ONLY = re.compile(rf"^{_ARITHMETIC_CHARS}+$")
_ARITHMETIC_TAIL = re.compile(rf"^(.*?)(\s+)({_ARITHMETIC_CHARS}+)$", re.DOTALL)
_ARITHMETIC_ANCHOR = re.compile(r"[\d(]")
_SEPARATOR = re.compile(r"(?:[=:]\s|[(\[{])\s*(?=\S)")
_WHITESPACE = re.compile(r"\s")


class SeedExtractor:
    """Split text into (prefix, seed).

    Example:
        ```python
        extractor = SeedExtractor()
        extractor.extract("Total: 5 + 3")     # ("Total: ", "5 + 3")
        extractor.extract("Stay 5/6/23 to 6/7/23")
        # ("Stay ", "5/6/23 to 6/7/23")
        extractor.extract("note = hello")     # ("note = ", "hello")
        ```
    """

    def __init__(
        self,
        date_parser: DateRangeParser | None = None,
        strategies: Sequence[Strategy] | None = None,
    ) -> None:
        self._dates = date_parser or DateRangeParser()
        self._strategies: list[Strategy] = list(strategies) if strategies is not None else [
            self.date_range_strategy,
            arithmetic_strategy,
            separator_strategy,
            whitespace_strategy,
        ]

    def extract(self, text: str, context: Any = None) -> Split:
        """Split text; ``prefix + seed == text`` always holds."""
        if not text:
            return "", ""
        for strategy in self._strategies:
            split = strategy(text, context)
            if split is not None:
                logger.debug(f"Seed strategy {getattr(strategy, '__name__', strategy)} split at {len(split[0])}")
                return split
        return "", text

    def date_range_strategy(self, text: str, context: Any = None) -> Split | None:
        if not self._dates.is_range_candidate(text, context):
            return None
        for token in self._dates.locate_tokens(text, context):
            if token.parts is not None:
                return text[: token.start], text[token.start :]
        return None


def arithmetic_strategy(text: str, context: Any = None) -> Split | None:
    if _ARITHMETIC_ONLY.match(text) and _ARITHMETIC_ANCHOR.search(text):
        return "", text
    found = _ARITHMETIC_TAIL.match(text)
    if found and _ARITHMETIC_ANCHOR.search(found.group(3)):
        return found.group(1) + found.group(2), found.group(3)
    return None


def separator_strategy(text: str, context: Any = None) -> Split | None:
    split_at = max((found.end() for found in _SEPARATOR.finditer(text)), default=0)
    if split_at == 0:
        return None
    return text[:split_at], text[split_at:]


def whitespace_strategy(text: str, context: Any = None) -> Split | None:
    last = None
    for last in _WHITESPACE.finditer(text):
        pass
    if last is None:
        return None
    return text[: last.end()], text[last.end() :]
