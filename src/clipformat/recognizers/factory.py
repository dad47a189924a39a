"""Recognizer construction from declarative specs.

A spec either supplies a ``custom_match`` callable or names a value
parser (``capability_key``) with a ``default_parser`` fallback. Parser
backed recognizers call the parser's candidate method and, when it
accepts the text, its transform method. Either step can be replaced by a
callable receiving (text, context, parser).

All validation happens here, at assembly time: an unknown or absent
capability, a missing parser or a parser without the required methods
raises a ConstructionError before the recognizer is ever registered.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from clipformat.capabilities import Capabilities
from clipformat.exceptions import InvalidRecognizerSpecError, MissingDependencyError

from .base import Recognition, Recognizer

if TYPE_CHECKING:
    from clipformat.capabilities import ExecutionContext

logger = logging.getLogger(__name__)


class RecognizerSpec(BaseModel):
    """Declarative description of a recognizer."""

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    id: str = Field(min_length=1, description="Unique recognizer id")
    priority: int = Field(default=100, description="Lower runs earlier")
    required_capabilities: tuple[str, ...] = Field(
        default=(), description="Capability names that must be present"
    )
    capability_key: str | None = Field(default=None, description="Name of the value parser to use")
    default_parser: Any = Field(default=None, description="Parser used when none is injected")
    candidate_method: str = Field(default="is_candidate", description="Parser method deciding candidacy")
    transform_method: str = Field(default="process", description="Parser method computing output")
    candidate_check: Callable[..., Any] | None = Field(
        default=None, description="Replaces the candidate method: (text, context, parser) -> bool"
    )
    transform: Callable[..., Any] | None = Field(
        default=None, description="Replaces the transform method: (text, context, parser) -> output"
    )
    custom_match: Callable[..., Any] | None = Field(
        default=None, description="Complete match function: (text, context) -> output"
    )

    @model_validator(mode="after")
    def _check_source(self) -> RecognizerSpec:
        if self.custom_match is None and self.capability_key is None:
            raise ValueError("either custom_match or capability_key is required")
        return self


def _missing_methods(parser: Any, spec: RecognizerSpec) -> list[str]:
    required = []
    if spec.candidate_check is None:
        required.append(spec.candidate_method)
    if spec.transform is None:
        required.append(spec.transform_method)
    return [name for name in required if not callable(getattr(parser, name, None))]


class RecognizerFactory:
    """Build validated recognizers against a set of capabilities.

    Example:
        ```python
        factory = RecognizerFactory(Capabilities(parsers=default_parsers()))
        phone = factory.create({"id": "phone", "priority": 50, "capability_key": "phone"})
        ```
    """

    def __init__(self, capabilities: Capabilities | None = None) -> None:
        self._capabilities = capabilities or Capabilities()

    @property
    def capabilities(self) -> Capabilities:
        return self._capabilities

    def create(self, spec: RecognizerSpec | Mapping[str, Any]) -> Recognizer:
        """Create a recognizer from a spec.

        Raises:
            InvalidRecognizerSpecError: The spec is malformed, names an
                unknown capability, or resolves to no usable parser.
            MissingDependencyError: A required capability is absent.
        """
        spec = self._validate(spec)

        unknown = sorted(set(spec.required_capabilities) - Capabilities.names())
        if unknown:
            raise InvalidRecognizerSpecError(spec.id, f"unknown capabilities: {', '.join(unknown)}")
        missing = self._capabilities.missing(spec.required_capabilities)
        if missing:
            raise MissingDependencyError(spec.id, missing)

        if spec.custom_match is not None:
            match = spec.custom_match
        else:
            match = self._parser_match(spec)

        logger.debug(f"Created recognizer '{spec.id}' (priority={spec.priority})")
        return Recognizer(
            id=spec.id,
            match=match,
            priority=spec.priority,
            required_capabilities=tuple(spec.required_capabilities),
        )

    def _validate(self, spec: RecognizerSpec | Mapping[str, Any]) -> RecognizerSpec:
        if isinstance(spec, RecognizerSpec):
            return spec
        if not isinstance(spec, Mapping):
            raise InvalidRecognizerSpecError(None, f"spec must be a mapping, got {type(spec).__name__}")
        try:
            return RecognizerSpec.model_validate(dict(spec))
        except ValidationError as e:
            recognizer_id = spec.get("id") if isinstance(spec.get("id"), str) else None
            raise InvalidRecognizerSpecError(recognizer_id, str(e)) from e

    def _parser_match(self, spec: RecognizerSpec) -> Callable[[str, ExecutionContext], str | Recognition | None]:
        key = spec.capability_key
        if key is None:
            raise InvalidRecognizerSpecError(spec.id, "either custom_match or capability_key is required")
        injected = self._capabilities.parsers or {}
        resolved = injected.get(key, spec.default_parser)
        if resolved is None:
            raise InvalidRecognizerSpecError(spec.id, f"no parser available for '{key}'")
        missing = _missing_methods(resolved, spec)
        if missing:
            raise InvalidRecognizerSpecError(spec.id, f"parser '{key}' lacks methods: {', '.join(missing)}")

        def match(text: str, context: ExecutionContext) -> str | Recognition | None:
            parser = (context.parsers or {}).get(key, resolved)
            if parser is not resolved and _missing_methods(parser, spec):
                logger.warning(f"Injected parser '{key}' is unusable for '{spec.id}'; using default")
                parser = resolved

            if spec.candidate_check is not None:
                accepted = spec.candidate_check(text, context, parser)
            else:
                accepted = getattr(parser, spec.candidate_method)(text, context)
            if not accepted:
                return None

            if spec.transform is not None:
                return spec.transform(text, context, parser)
            return getattr(parser, spec.transform_method)(text, context)

        return match
