"""Result models shared by the recognizers and the engine."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SideEffectType(str, Enum):
    """Kind of navigation dispatched for a match."""

    QSPACE = "qspace"  # Local path opened in the file manager
    BROWSER = "browser"  # http(s) URL
    APP_URL = "app_url"  # Any other URL scheme
    KAGI_SEARCH = "kagi_search"  # Free text sent to web search


class SideEffect(BaseModel):
    """An action performed on behalf of a match, separate from its text output."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: SideEffectType = Field(description="Kind of action")
    message: str = Field(description="Short human-readable summary")
    url: str | None = Field(default=None, description="URL opened, if any")
    path: str | None = Field(default=None, description="Expanded local path, if any")
    query: str | None = Field(default=None, description="Search query, if any")


class MatchResult(BaseModel):
    """Outcome of a successful recognition.

    When ``side_effect_only`` is set the host should leave the clipboard
    unchanged; ``output`` then echoes the trimmed input.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    output: str = Field(description="Replacement text")
    matched_id: str = Field(description="Id of the recognizer that produced the output")
    side_effect: SideEffect | None = Field(default=None, description="Action performed, if any")
    side_effect_only: bool = Field(default=False, description="True if output is not a replacement")


class ProcessOptions(BaseModel):
    """Per-call options for RecognizerRegistry.process()."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    early_exit: bool = Field(default=True, description="Stop at the first matching recognizer")
