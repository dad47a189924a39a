"""Clipformat: clipboard content recognition and transformation.

Turns copied text into something more useful: evaluated arithmetic,
normalized date ranges, date/time arithmetic, formatted phone numbers,
combined percentages, disability benefit amounts, unit conversions, or a
navigation action for paths, URLs and search terms.

Quick Start:
    from clipformat import PipelineBuilder

    engine = PipelineBuilder().build()
    engine.process("1,234.5+2").output               # "1236.5"
    engine.process("5/6/23 to 6/7/23").output        # "05/06/2023 to 06/07/2023, 33 days"
    engine.process_seed("Budget: $10*2").output      # "Budget: $20.00"

The core performs no I/O. Hosts inject a logger, configuration, the
benefit table, a launcher and a clock through Capabilities.
"""

__version__ = "0.1.0"

# Capabilities
from .capabilities import Capabilities, ExecutionContext, Launcher

# Configuration
from .config import ConfigAccessor, Settings, load_settings

# Engine
from .engine import ClipboardEngine, PipelineBuilder

# Exceptions
from .exceptions import (
    ClipformatError,
    ConfigurationError,
    ConstructionError,
    DuplicateRecognizerError,
    InvalidRecognizerSpecError,
    MissingDependencyError,
    RegistryFinalizedError,
)

# Logging
from .logging import bind_context, clear_context, configure_logging, get_logger

# Models
from .models import MatchResult, ProcessOptions, SideEffect, SideEffectType

# Patterns
from .patterns import DEFAULT_PATTERNS, CompiledPattern, PatternCache

# Recognizers
from .recognizers import Recognizer, RecognizerFactory, RecognizerRegistry, RecognizerSpec

# Seeds
from .seed import SeedExtractor

__all__ = [
    "__version__",
    # Capabilities
    "Capabilities",
    "ExecutionContext",
    "Launcher",
    # Configuration
    "ConfigAccessor",
    "Settings",
    "load_settings",
    # Engine
    "ClipboardEngine",
    "PipelineBuilder",
    # Exceptions
    "ClipformatError",
    "ConfigurationError",
    "ConstructionError",
    "DuplicateRecognizerError",
    "InvalidRecognizerSpecError",
    "MissingDependencyError",
    "RegistryFinalizedError",
    # Logging
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    # Models
    "MatchResult",
    "ProcessOptions",
    "SideEffect",
    "SideEffectType",
    # Patterns
    "DEFAULT_PATTERNS",
    "CompiledPattern",
    "PatternCache",
    # Recognizers
    "Recognizer",
    "RecognizerFactory",
    "RecognizerRegistry",
    "RecognizerSpec",
    # Seeds
    "SeedExtractor",
]
