"""Pipeline assembly and the clipboard engine.

Example:
    ```python
    from clipformat import PipelineBuilder

    engine = PipelineBuilder().build()
    engine.process("$120422.50-$118063.37").output  # "$2,359.13"
    engine.process_seed("Total: 5 + 3").output      # "Total: 8"
    ```

Hosts extend the pipeline before it is built:

    ```python
    def tickets(builder):
        builder.register_pattern("ticket", r"^[A-Z]+-\\d+$")
        builder.register_recognizer({"id": "ticket", "priority": 40, "custom_match": ...})

    engine = PipelineBuilder(capabilities=Capabilities(launcher=my_launcher)).apply(tickets).build()
    ```
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import replace
from datetime import datetime
from typing import Any

from clipformat.capabilities import Capabilities
from clipformat.config import ConfigAccessor, Settings, load_settings
from clipformat.exceptions import ConstructionError
from clipformat.logging import configure_logging, get_logger
from clipformat.models import MatchResult, ProcessOptions
from clipformat.parsers import ValueParser, default_parsers
from clipformat.patterns import PatternCache
from clipformat.recognizers import (
    Recognizer,
    RecognizerFactory,
    RecognizerRegistry,
    RecognizerSpec,
    builtin_specs,
)
from clipformat.seed import SeedExtractor

logger = logging.getLogger(__name__)

Extension = Callable[["PipelineBuilder"], Any]


class ClipboardEngine:
    """Entry point for hosts: whole-text and seed-only processing."""

    def __init__(self, registry: RecognizerRegistry, seed_extractor: SeedExtractor | None = None) -> None:
        self._registry = registry
        self._seeds = seed_extractor or SeedExtractor()

    @property
    def registry(self) -> RecognizerRegistry:
        return self._registry

    def process(self, text: str | None, early_exit: bool = True, **overrides: Any) -> MatchResult | None:
        """Process trimmed text; empty or whitespace-only input yields None."""
        trimmed = (text or "").strip()
        if not trimmed:
            return None
        return self._registry.process(trimmed, ProcessOptions(early_exit=early_exit), **overrides)

    def process_seed(self, text: str | None, early_exit: bool = True, **overrides: Any) -> MatchResult | None:
        """Process only the seed of text and splice the output back.

        Returns:
            A MatchResult whose output is ``prefix + output``. For
            side-effect-only matches the output is text unchanged. None
            if there is no seed or nothing matched.
        """
        if not text:
            return None
        prefix, seed = self._seeds.extract(text)
        logger.debug(f"Seed split: prefix={prefix!r} seed={seed!r}")
        result = self.process(seed, early_exit=early_exit, **overrides)
        if result is None:
            return None
        if result.side_effect_only:
            return result.model_copy(update={"output": text})
        return result.model_copy(update={"output": prefix + result.output})


class PipelineBuilder:
    """Assemble a ClipboardEngine from settings, capabilities and extensions.

    Built-in recognizers are always registered; navigation only when it is
    enabled in settings and a launcher capability is supplied.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        capabilities: Capabilities | None = None,
        include_builtins: bool = True,
    ) -> None:
        self._settings = settings or load_settings()
        configure_logging(level=self._settings.logging.level, format=self._settings.logging.format)
        self._patterns = PatternCache.with_defaults(
            max_size=self._settings.cache.max_size,
            weak_refs=self._settings.cache.weak_refs,
        )
        defaults = Capabilities(
            logger=get_logger("clipformat"),
            config=ConfigAccessor(self._settings),
            patterns=self._patterns,
            benefit_table={},
            clock=datetime.now,
        )
        self._capabilities = defaults.merged(capabilities)
        self._include_builtins = include_builtins
        self._parsers: dict[str, ValueParser] = {}
        self._recognizers: list[RecognizerSpec | Mapping[str, Any] | Recognizer] = []
        self._extensions: list[Extension] = []

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def capabilities(self) -> Capabilities:
        return self._capabilities

    @property
    def extensions(self) -> list[Extension]:
        return list(self._extensions)

    def register_pattern(self, name: str, raw: str) -> PipelineBuilder:
        """Register a named pattern with the shared pattern cache."""
        patterns = self._capabilities.patterns
        if not isinstance(patterns, PatternCache):
            raise ConstructionError("Injected pattern source does not accept registrations")
        patterns.register(name, raw)
        return self

    def register_parser(self, parser: ValueParser, name: str | None = None) -> PipelineBuilder:
        """Add or replace a value parser, keyed by name or parser.name."""
        self._parsers[name or parser.name] = parser
        return self

    def register_recognizer(self, recognizer: RecognizerSpec | Mapping[str, Any] | Recognizer) -> PipelineBuilder:
        """Queue a recognizer (or a spec for one) for registration at build()."""
        self._recognizers.append(recognizer)
        return self

    def apply(self, extension: Extension) -> PipelineBuilder:
        """Run an extension against this builder.

        Extensions run immediately, in the order they are applied.
        """
        self._extensions.append(extension)
        extension(self)
        return self

    def build(self) -> ClipboardEngine:
        """Validate and register every recognizer, then finalize.

        Raises:
            ConstructionError: A recognizer could not be constructed or
                registered.
        """
        shared = self._capabilities.patterns
        patterns = shared if isinstance(shared, PatternCache) else self._patterns
        parsers = default_parsers(patterns, clock=self._capabilities.clock)
        parsers.update(self._capabilities.parsers or {})
        parsers.update(self._parsers)
        capabilities = replace(self._capabilities, parsers=parsers)

        factory = RecognizerFactory(capabilities)
        registry = RecognizerRegistry(capabilities)

        if self._include_builtins:
            include_navigation = self._settings.navigation.enabled and capabilities.launcher is not None
            if self._settings.navigation.enabled and not include_navigation:
                logger.info("No launcher supplied; navigation recognizer not registered")
            for spec in builtin_specs(include_navigation=include_navigation):
                registry.register(factory.create(spec))

        for item in self._recognizers:
            registry.register(item if isinstance(item, Recognizer) else factory.create(item))

        registry.finalize()
        logger.debug(f"Pipeline built with recognizers: {', '.join(registry.ids)}")

        date_parser = parsers.get("date")
        seeds = SeedExtractor(date_parser) if hasattr(date_parser, "locate_tokens") else SeedExtractor()
        return ClipboardEngine(registry, seeds)
