"""Base class for value parsers.

Value parsers are stateless units that decide whether a piece of text
belongs to their domain (is_candidate) and compute its replacement
(process). They never raise for bad input: malformed numbers, impossible
dates or a zero divisor all produce None.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from clipformat.patterns import PatternCache

if TYPE_CHECKING:
    from clipformat.patterns import CompiledPattern


class ValueParser(ABC):
    """Abstract base class for value parsers.

    Subclasses set ``name`` and implement is_candidate() and process().
    The optional ``context`` argument is the per-call execution context;
    parsers read configuration overrides and injected patterns from it
    when present and fall back to their own defaults otherwise.

    Example:
        ```python
        class EchoParser(ValueParser):
            name = "echo"

            def is_candidate(self, text, context=None):
                return text.startswith("echo:")

            def process(self, text, context=None):
                return text.removeprefix("echo:").strip()
        ```
    """

    name: str = "base"

    def __init__(self, patterns: PatternCache | None = None) -> None:
        """Initialize the parser.

        Args:
            patterns: Pattern source. Defaults to a private cache holding
                the default pattern catalogue.
        """
        self._patterns = patterns if patterns is not None else PatternCache.with_defaults()

    @property
    def patterns(self) -> PatternCache:
        return self._patterns

    def pattern(self, name: str, context: Any = None) -> CompiledPattern | None:
        """Resolve a named pattern, preferring the context's pattern source."""
        source = getattr(context, "patterns", None)
        if source is not None:
            entry = source.compiled(name)
            if entry is not None:
                return entry
        return self._patterns.compiled(name)

    @abstractmethod
    def is_candidate(self, text: str, context: Any = None) -> bool:
        """Return True if text looks like this parser's input."""
        ...

    @abstractmethod
    def process(self, text: str, context: Any = None) -> str | None:
        """Compute the replacement for text.

        Returns:
            The replacement string, or None when text cannot be handled.
        """
        ...


def config_value(context: Any, path: str, default: Any = None) -> Any:
    """Read a dotted config path from a context's config accessor."""
    config = getattr(context, "config", None)
    if config is None:
        return default
    return config.get(path, default)


def normalize_minus(text: str) -> str:
    """Replace en dash, em dash and minus sign with an ASCII hyphen."""
    return text.replace("–", "-").replace("—", "-").replace("−", "-")
