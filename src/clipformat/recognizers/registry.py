"""Priority-ordered recognizer registry and dispatch."""

from __future__ import annotations

import bisect
import logging
from typing import Any

from clipformat.capabilities import Capabilities, ExecutionContext
from clipformat.exceptions import DuplicateRecognizerError, RegistryFinalizedError
from clipformat.models import MatchResult, ProcessOptions

from .base import Recognition, Recognizer

logger = logging.getLogger(__name__)


class RecognizerRegistry:
    """Ordered set of recognizers with single-pass dispatch.

    Recognizers run in ascending priority; equal priorities keep
    registration order. Each recognizer runs inside a failure boundary:
    an exception is logged through the injected logger and counts as no
    match, so one faulty recognizer never breaks dispatch.

    Example:
        ```python
        registry = RecognizerRegistry(capabilities)
        registry.register(factory.create({"id": "phone", "priority": 50, "capability_key": "phone"}))
        registry.finalize()

        result = registry.process("5551234567;home")
        result.output      # "(555) 123-4567,,,home"
        result.matched_id  # "phone"
        ```
    """

    def __init__(self, capabilities: Capabilities | None = None) -> None:
        self._capabilities = capabilities or Capabilities()
        self._recognizers: list[Recognizer] = []
        self._ids: set[str] = set()
        self._finalized = False

    @property
    def capabilities(self) -> Capabilities:
        return self._capabilities

    @property
    def recognizers(self) -> tuple[Recognizer, ...]:
        return tuple(self._recognizers)

    @property
    def ids(self) -> list[str]:
        return [recognizer.id for recognizer in self._recognizers]

    @property
    def finalized(self) -> bool:
        return self._finalized

    def __len__(self) -> int:
        return len(self._recognizers)

    def __contains__(self, recognizer_id: object) -> bool:
        return recognizer_id in self._ids

    def get(self, recognizer_id: str) -> Recognizer | None:
        for recognizer in self._recognizers:
            if recognizer.id == recognizer_id:
                return recognizer
        return None

    def register(self, recognizer: Recognizer) -> None:
        """Insert a recognizer in priority order.

        Raises:
            RegistryFinalizedError: finalize() was already called.
            DuplicateRecognizerError: The id is already registered.
        """
        if self._finalized:
            raise RegistryFinalizedError(f"Registry is finalized; cannot register '{recognizer.id}'")
        if recognizer.id in self._ids:
            raise DuplicateRecognizerError(recognizer.id)

        priorities = [existing.priority for existing in self._recognizers]
        index = bisect.bisect_right(priorities, recognizer.priority)
        self._recognizers.insert(index, recognizer)
        self._ids.add(recognizer.id)

    def finalize(self) -> None:
        """Freeze the recognizer set."""
        self._finalized = True

    def process(
        self,
        text: str,
        options: ProcessOptions | None = None,
        **overrides: Any,
    ) -> MatchResult | None:
        """Run recognizers over text and return the first match.

        Args:
            text: Input text, used as given.
            options: Dispatch options. With ``early_exit=False`` every
                recognizer runs once and later ones can see earlier
                matches in the context; the first match is still returned.
            **overrides: Per-call capability overrides (for example
                ``config={"templates": {...}}`` or ``clock=...``).

        Returns:
            MatchResult with provenance, or None if nothing matched.
        """
        options = options or ProcessOptions()
        context = ExecutionContext.from_capabilities(self._capabilities, options=options, **overrides)
        log = context.logger or logger
        first: MatchResult | None = None

        for recognizer in self._recognizers:
            context.consulted.append(recognizer.id)
            try:
                raw = recognizer(text, context)
            except Exception as e:
                log.warning(f"Recognizer '{recognizer.id}' failed: {e}")
                continue
            if raw is None:
                continue

            result = _to_match_result(recognizer.id, raw)
            log.debug(f"Recognizer '{recognizer.id}' matched")
            context.matches.append(recognizer.id)
            context.last_match_id = recognizer.id
            if result.side_effect is not None:
                context.last_side_effect = result.side_effect
            if first is None:
                first = result
            if options.early_exit:
                break

        return first


def _to_match_result(recognizer_id: str, raw: str | Recognition | MatchResult) -> MatchResult:
    if isinstance(raw, MatchResult):
        return raw
    if isinstance(raw, Recognition):
        return MatchResult(
            output=raw.output,
            matched_id=recognizer_id,
            side_effect=raw.side_effect,
            side_effect_only=raw.side_effect_only,
        )
    return MatchResult(output=str(raw), matched_id=recognizer_id)
