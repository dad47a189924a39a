"""Recognizers: prioritized matchers built from value parsers.

Example:
    ```python
    from clipformat.capabilities import Capabilities
    from clipformat.parsers import default_parsers
    from clipformat.recognizers import RecognizerFactory, RecognizerRegistry, builtin_specs

    capabilities = Capabilities(parsers=default_parsers())
    factory = RecognizerFactory(capabilities)
    registry = RecognizerRegistry(capabilities)
    for spec in builtin_specs(include_navigation=False):
        registry.register(factory.create(spec))
    registry.finalize()

    registry.process("10 c 5 c 3").output  # "10% c 5% = 15% c 3% = 17%"
    ```
"""

from .base import Recognition, Recognizer
from .builtin import NAVIGATION_PRIORITY, builtin_specs, navigate
from .factory import RecognizerFactory, RecognizerSpec
from .registry import RecognizerRegistry

__all__ = [
    "NAVIGATION_PRIORITY",
    "Recognition",
    "Recognizer",
    "RecognizerFactory",
    "RecognizerRegistry",
    "RecognizerSpec",
    "builtin_specs",
    "navigate",
]
