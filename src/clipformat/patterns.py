"""Named pattern registry with lazily compiled, LRU-bounded matchers.

Patterns are registered by name as raw regular expressions and compiled on
first use. Compiled matchers live in an OrderedDict-based LRU cache; an
optional weak-reference cache can hand an evicted matcher back without
recompiling while something else still holds it. Eviction only ever drops
a compiled form, never a registration, so a lookup after eviction simply
recompiles.

The cache is not safe for concurrent mutation. A host that shares one
instance across threads must serialize register()/compiled() calls.
"""

from __future__ import annotations

import logging
import re
import weakref
from collections import OrderedDict
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

logger = logging.getLogger(__name__)

DEFAULT_CACHE_SIZE = 100

# Default pattern catalogue shared by the value parsers.
DEFAULT_PATTERNS: dict[str, str] = {
    "arithmetic_candidate": r"^[\s$\d.,()+\-*/%^]+$",
    "phone_semicolon": r"\d+;.+",
    "date_token": r"\d+[/.\-]\d+[/.\-]\d+",
    "date_full": r"^\d{1,2}[/.\-]\d{1,2}[/.\-]\d{2,4}$",
    "date_token_iso": r"\d{4}[/.\-]\d{2}[/.\-]\d{2}",
    "date_token_text": r"[A-Za-z.]+\s+\d{1,2}(?!\d)(?:st|nd|rd|th)?[, ]*\d{0,4}",
    "date_token_text_day_first": r"(?<!\d)\d{1,2}(?:st|nd|rd|th)?\s+[A-Za-z]{3,}\.?(?:,?\s+\d{2,4}(?!\d))?",
    "date_range_dash": r"^(\d+[/.\-]\d+[/.\-]\d+)-(\d+[/.\-]\d+[/.\-]\d+)$",
    "localized_number": r"^\s*[+-]?[\d.,]+\s*$",
    "combination_candidate": r"(?i)^\s*\d+\s*%?\s*(?:c\s*\d+\s*%?\s*)+$",
    "benefit_percent": r"(?i)^(\d+)%*\s*[pd]+$",
    "unit_conversion": r"^([\d.,]+)\s*([A-Za-z/°]+)\s+(to|in)\s+([A-Za-z/°]+)$",
    "date_calc": (
        r"(?i)^(?P<anchor>today|tomorrow|yesterday|(?:next|last|this)\s+[a-z]+"
        r"|\d{4}\s*[/.\-]\s*\d{1,2}\s*[/.\-]\s*\d{1,2}"
        r"|\d{1,2}\s*[/.\-]\s*\d{1,2}(?:\s*[/.\-]\s*\d{2,4})?)"
        r"\s*(?P<op>[+-])\s*(?P<duration>[\w\s]+)$"
    ),
    "time_calc": (
        r"(?i)^(?P<anchor>now|\d{1,2}(?::\d{2})?\s*(?:[ap]\.?m?\.?)?)"
        r"\s*(?P<op>[+-])\s*(?P<duration>[\w\s]+)$"
    ),
}


class CompiledPattern:
    """A compiled pattern behind a fixed contains/match/raw contract.

    Attributes:
        name: Registered pattern name.
        raw: Source regular expression.
        regex: The compiled ``re.Pattern``.
    """

    def __init__(self, name: str, raw: str) -> None:
        self.name = name
        self.raw = raw
        self.regex = re.compile(raw)

    def contains(self, text: object) -> bool:
        """True if the pattern occurs anywhere in text."""
        return isinstance(text, str) and self.regex.search(text) is not None

    def match(self, text: object) -> str | None:
        """Return the first matched substring, or None.

        Mirrors a search: the pattern carries its own anchors.
        """
        if not isinstance(text, str):
            return None
        found = self.regex.search(text)
        return found.group(0) if found else None

    def search(self, text: object) -> re.Match[str] | None:
        """Return the full match object for the first occurrence, or None."""
        if not isinstance(text, str):
            return None
        return self.regex.search(text)

    def finditer(self, text: object) -> Iterator[re.Match[str]]:
        """Iterate over all non-overlapping occurrences."""
        if not isinstance(text, str):
            return iter(())
        return self.regex.finditer(text)

    def __repr__(self) -> str:
        return f"CompiledPattern({self.name!r}, {self.raw!r})"


class PatternCache:
    """Registry of named patterns with a bounded compiled-form cache.

    Example:
        ```python
        patterns = PatternCache.with_defaults()
        patterns.contains("phone_semicolon", "5551234567;home")  # True

        patterns.register("ticket", r"[A-Z]+-\\d+")
        patterns.match("ticket", "see ABC-123")  # "ABC-123"
        ```
    """

    def __init__(
        self,
        patterns: dict[str, str] | None = None,
        max_size: int = DEFAULT_CACHE_SIZE,
        weak_refs: bool = True,
    ) -> None:
        """Initialize the cache.

        Args:
            patterns: Initial name -> raw regex registrations.
            max_size: Maximum number of compiled patterns kept resident.
            weak_refs: Enable the secondary weak-reference cache.
        """
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self._raw: dict[str, str] = dict(patterns or {})
        self._max_size = max_size
        self._cache: OrderedDict[str, CompiledPattern] = OrderedDict()
        self._weak: weakref.WeakValueDictionary[str, CompiledPattern] | None = (
            weakref.WeakValueDictionary() if weak_refs else None
        )
        self._hits = 0
        self._misses = 0
        self._weak_hits = 0
        self._evictions = 0

    @classmethod
    def with_defaults(cls, max_size: int = DEFAULT_CACHE_SIZE, weak_refs: bool = True) -> PatternCache:
        """Create a cache pre-registered with DEFAULT_PATTERNS."""
        return cls(DEFAULT_PATTERNS, max_size=max_size, weak_refs=weak_refs)

    def register(self, name: str, raw: str) -> None:
        """Create or overwrite a pattern, invalidating its compiled form."""
        self._raw[name] = raw
        self._cache.pop(name, None)
        if self._weak is not None:
            self._weak.pop(name, None)

    def ensure(self, name: str, raw: str) -> CompiledPattern | None:
        """Register raw under name only if the name is unknown."""
        if name not in self._raw:
            self.register(name, raw)
        return self.compiled(name)

    def get(self, name: str) -> str | None:
        """Return the raw pattern registered under name."""
        return self._raw.get(name)

    def is_registered(self, name: str) -> bool:
        return name in self._raw

    def names(self) -> list[str]:
        return list(self._raw)

    def compiled(self, name: str) -> CompiledPattern | None:
        """Return the compiled matcher for name, compiling on first use.

        Args:
            name: Registered pattern name.

        Returns:
            The compiled pattern, or None if the name is unregistered or
            its raw pattern does not compile.
        """
        entry = self._cache.get(name)
        if entry is not None:
            self._hits += 1
            self._cache.move_to_end(name)
            return entry

        raw = self._raw.get(name)
        if raw is None:
            return None

        if self._weak is not None:
            entry = self._weak.get(name)
            if entry is not None and entry.raw == raw:
                self._weak_hits += 1
                self._store(name, entry)
                return entry

        try:
            entry = CompiledPattern(name, raw)
        except re.error as e:
            logger.warning(f"Pattern '{name}' failed to compile: {e}")
            return None

        self._misses += 1
        self._store(name, entry)
        if self._weak is not None:
            self._weak[name] = entry
        return entry

    def _store(self, name: str, entry: CompiledPattern) -> None:
        if len(self._cache) >= self._max_size:
            evicted_name, _ = self._cache.popitem(last=False)
            self._evictions += 1
            logger.debug(f"Evicted compiled pattern '{evicted_name}' (size={len(self._cache)})")
        self._cache[name] = entry

    def contains(self, name: str, text: object) -> bool:
        """True if the named pattern occurs in text; False if unregistered."""
        entry = self.compiled(name)
        return entry.contains(text) if entry else False

    def match(self, name: str, text: object) -> str | None:
        """First match of the named pattern in text; None if unregistered."""
        entry = self.compiled(name)
        return entry.match(text) if entry else None

    def precompile(self, names: Iterable[str] | None = None) -> None:
        """Compile the given (or all) registered patterns ahead of use."""
        for name in list(names) if names is not None else self.names():
            self.compiled(name)

    def clear(self) -> None:
        """Drop all compiled forms. Registrations are kept."""
        self._cache.clear()
        if self._weak is not None:
            self._weak.clear()

    @property
    def max_size(self) -> int:
        return self._max_size

    def __len__(self) -> int:
        """Number of compiled patterns currently resident."""
        return len(self._cache)

    def __contains__(self, name: object) -> bool:
        return name in self._raw

    @property
    def hit_rate(self) -> float:
        """Fraction of compiled() lookups served without compiling."""
        served = self._hits + self._weak_hits
        total = served + self._misses
        if total == 0:
            return 0.0
        return served / total

    @property
    def stats(self) -> dict[str, int | float]:
        """Cache statistics."""
        return {
            "hits": self._hits,
            "misses": self._misses,
            "weak_hits": self._weak_hits,
            "evictions": self._evictions,
            "size": len(self._cache),
            "max_size": self._max_size,
            "hit_rate": self.hit_rate,
        }
