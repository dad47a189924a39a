"""Recognizer value types."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from clipformat.capabilities import ExecutionContext
    from clipformat.models import SideEffect


@dataclass(frozen=True)
class Recognition:
    """Raw output of a recognizer before the registry attaches provenance."""

    output: str
    side_effect: SideEffect | None = None
    side_effect_only: bool = False


MatchFunction = Callable[[str, "ExecutionContext"], "str | Recognition | None"]


@dataclass(frozen=True)
class Recognizer:
    """A named, prioritized content matcher.

    Attributes:
        id: Unique identifier.
        priority: Lower runs earlier; ties keep registration order.
        match: Callable taking (text, context) and returning the
            replacement text, a Recognition, or None for no match.
        required_capabilities: Capability names validated at construction.
    """

    id: str
    match: MatchFunction
    priority: int = 100
    required_capabilities: tuple[str, ...] = field(default_factory=tuple)

    def __call__(self, text: str, context: ExecutionContext) -> str | Recognition | None:
        return self.match(text, context)
