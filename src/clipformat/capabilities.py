"""Injected capabilities and the per-call execution context.

The core performs no I/O of its own. Everything it needs from the host
(a logger, configuration, patterns, the benefit table, a launcher for
navigation and a clock) arrives through a Capabilities record, whose
fields are checked against each recognizer's declared requirements when
the pipeline is assembled.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from clipformat.config import ConfigAccessor

if TYPE_CHECKING:
    from clipformat.models import SideEffect
    from clipformat.parsers.base import ValueParser
    from clipformat.patterns import CompiledPattern


@runtime_checkable
class Logger(Protocol):
    """Leveled logger; structlog and stdlib loggers both satisfy it."""

    def debug(self, event: str, *args: Any, **kwargs: Any) -> Any: ...

    def info(self, event: str, *args: Any, **kwargs: Any) -> Any: ...

    def warning(self, event: str, *args: Any, **kwargs: Any) -> Any: ...

    def error(self, event: str, *args: Any, **kwargs: Any) -> Any: ...


@runtime_checkable
class PatternSource(Protocol):
    """Anything that resolves a pattern name to a compiled pattern."""

    def compiled(self, name: str) -> CompiledPattern | None: ...


@runtime_checkable
class Launcher(Protocol):
    """Host hook that performs navigation side effects.

    open() returns True when the target was dispatched.
    """

    def open(self, effect: SideEffect) -> bool: ...


@dataclass
class Capabilities:
    """Typed registry of host-provided collaborators.

    Every field is optional; recognizers name the ones they need in
    ``required_capabilities`` and assembly fails if any is missing.
    """

    logger: Logger | None = None
    config: ConfigAccessor | None = None
    patterns: PatternSource | None = None
    benefit_table: Mapping[int, float] | None = None
    parsers: Mapping[str, ValueParser] | None = None
    launcher: Launcher | None = None
    clock: Callable[[], datetime] | None = None

    @classmethod
    def names(cls) -> frozenset[str]:
        """All known capability names."""
        return frozenset(f.name for f in fields(cls))

    def missing(self, names: list[str] | tuple[str, ...]) -> list[str]:
        """Names from ``names`` whose capability is absent."""
        return [name for name in names if getattr(self, name, None) is None]

    def merged(self, overrides: Capabilities | None) -> Capabilities:
        """Return a copy with every non-None field of overrides applied."""
        if overrides is None:
            return self
        changes = {
            f.name: getattr(overrides, f.name)
            for f in fields(overrides)
            if getattr(overrides, f.name) is not None
        }
        return replace(self, **changes)


@dataclass
class ExecutionContext:
    """Per-call state handed to every recognizer during one process() call.

    Capability fields mirror Capabilities, with caller overrides already
    applied. The scratch fields record what happened during the scan so
    later recognizers can see earlier matches.
    """

    logger: Logger | None = None
    config: ConfigAccessor | None = None
    patterns: PatternSource | None = None
    benefit_table: Mapping[int, float] | None = None
    parsers: Mapping[str, ValueParser] | None = None
    launcher: Launcher | None = None
    clock: Callable[[], datetime] | None = None
    options: Any = None

    matches: list[str] = field(default_factory=list)
    consulted: list[str] = field(default_factory=list)
    last_match_id: str | None = None
    last_side_effect: SideEffect | None = None

    @classmethod
    def from_capabilities(cls, capabilities: Capabilities, **overrides: Any) -> ExecutionContext:
        """Build a fresh context from injected defaults and per-call overrides.

        A ``config`` override given as a mapping is deep-merged over the
        injected configuration instead of replacing it.
        """
        values = {f.name: getattr(capabilities, f.name) for f in fields(capabilities)}
        config_overrides = overrides.pop("config", None)
        unknown = set(overrides) - set(values) - {"options"}
        if unknown:
            raise TypeError(f"Unknown execution context overrides: {', '.join(sorted(unknown))}")
        values.update(overrides)

        if isinstance(config_overrides, Mapping):
            base = values.get("config")
            if base is None:
                values["config"] = ConfigAccessor(None, config_overrides)
            else:
                values["config"] = base.with_overrides(config_overrides)
        elif config_overrides is not None:
            values["config"] = config_overrides
        return cls(**values)

    @property
    def matched(self) -> bool:
        return bool(self.matches)
