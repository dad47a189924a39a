"""Navigation target classification.

Decides what opening a piece of copied text means: a local path for the
file manager, a web URL, an application URL (any other scheme), or
otherwise a web search. Classification is pure; dispatching the result is
left to the host's launcher.
"""

from __future__ import annotations

import os
import re
from typing import Any
from urllib.parse import quote

from clipformat.models import SideEffect, SideEffectType

from .base import ValueParser, config_value

DEFAULT_SEARCH_URL = "https://kagi.com/search?q="

_LOCAL_PATH = re.compile(r"^(?:~|\.{1,2})?/\S")
_HTTP_URL = re.compile(r"^https?://.+", re.IGNORECASE)
_SCHEME = re.compile(r"^([A-Za-z][\w+\-.]*):\S")
_ARITHMETIC_LIKE = re.compile(r"^[\d.\s()+\-*/%^cC]+$")


def is_local_path(text: str) -> bool:
    return bool(_LOCAL_PATH.match(text))


def is_http_url(text: str) -> bool:
    return bool(_HTTP_URL.match(text))


def is_app_url(text: str) -> bool:
    found = _SCHEME.match(text)
    return bool(found) and found.group(1).lower() not in ("http", "https")


def looks_arithmetic(text: str) -> bool:
    """True for text that is numbers and operators once "$" is dropped."""
    return bool(_ARITHMETIC_LIKE.match(text.replace("$", "")))


def search_url(query: str, base: str = DEFAULT_SEARCH_URL) -> str:
    return base + quote(query, safe="")


class NavigationResolver(ValueParser):
    """Classify text as a navigation target.

    Example:
        ```python
        resolver = NavigationResolver()
        resolver.resolve("https://example.com").type  # SideEffectType.BROWSER
        resolver.resolve("ssh://host").type           # SideEffectType.APP_URL
        resolver.resolve("hello world").url
        # "https://kagi.com/search?q=hello%20world"
        ```
    """

    name: str = "navigation"

    def is_candidate(self, text: str, context: Any = None) -> bool:
        if not text or not text.strip():
            return False
        if not config_value(context, "navigation.enabled", True):
            return False
        return not looks_arithmetic(text.strip())

    def resolve(self, text: str, context: Any = None) -> SideEffect | None:
        """Build the side effect opening text would perform."""
        if not self.is_candidate(text, context):
            return None
        target = text.strip()

        if is_local_path(target):
            return SideEffect(
                type=SideEffectType.QSPACE,
                path=os.path.expanduser(target),
                message="Opened in QSpace",
            )
        if is_http_url(target):
            return SideEffect(type=SideEffectType.BROWSER, url=target, message="Opened in browser")
        if is_app_url(target):
            return SideEffect(type=SideEffectType.APP_URL, url=target, message="Opened application URL")

        base = config_value(context, "navigation.search_url", DEFAULT_SEARCH_URL)
        return SideEffect(
            type=SideEffectType.KAGI_SEARCH,
            url=search_url(target, base),
            query=target,
            message="Searching Kagi",
        )

    def process(self, text: str, context: Any = None) -> str | None:
        """Return the trimmed target if text is navigable."""
        return text.strip() if self.resolve(text, context) else None
