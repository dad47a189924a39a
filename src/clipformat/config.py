"""Configuration management for Clipformat."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings

from clipformat.exceptions import ConfigurationError


_MISSING = object()


class LoggingSettings(BaseModel):
    """Log level and renderer for the default structlog logger."""

    level: str = Field(
        default="WARNING",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    format: Literal["json", "text"] = Field(
        default="text",
        description="Renderer: json for log shipping, text for a console",
    )

    @field_validator("level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {value}")
        return level


class CacheSettings(BaseModel):
    """Pattern cache bounds.

    Attributes:
        max_size: Maximum number of compiled patterns kept resident.
        weak_refs: Keep a secondary weak-reference cache so evicted
            patterns still referenced elsewhere can be resurrected.
    """

    max_size: int = Field(
        default=100,
        ge=1,
        le=10000,
        description="Maximum resident compiled patterns (LRU bound)",
    )
    weak_refs: bool = Field(
        default=True,
        description="Enable the secondary weak-reference cache",
    )


class TemplateSettings(BaseModel):
    """Output templates.

    The arithmetic template may use ${input}, ${result} and ${numeric}.
    """

    arithmetic: str | None = Field(
        default=None,
        description='Arithmetic output template, e.g. "${input} = ${result}"',
    )


class BenefitSettings(BaseModel):
    """Permanent disability benefit computation."""

    benefit_per_week: float = Field(
        default=290,
        gt=0,
        description="Dollar amount paid per benefit week",
    )


class NavigationSettings(BaseModel):
    """Catch-all navigation recognizer."""

    enabled: bool = Field(
        default=True,
        description="Register the navigation recognizer",
    )
    search_url: str = Field(
        default="https://kagi.com/search?q=",
        description="Search URL prefix; the URL-encoded query is appended",
    )

    @field_validator("search_url")
    @classmethod
    def _require_scheme(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError("search_url must be an http(s) URL")
        return value


class Settings(BaseSettings):
    """Clipformat configuration loaded from environment variables.

    All settings can be overridden via environment variables with
    the CLIPFORMAT_ prefix, using "__" for nested sections. For example:
        CLIPFORMAT_CACHE__MAX_SIZE=50
        CLIPFORMAT_TEMPLATES__ARITHMETIC='${input} = ${result}'
        CLIPFORMAT_BENEFITS__BENEFIT_PER_WEEK=310
    """

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    templates: TemplateSettings = Field(default_factory=TemplateSettings)
    benefits: BenefitSettings = Field(default_factory=BenefitSettings)
    navigation: NavigationSettings = Field(default_factory=NavigationSettings)

    model_config = {
        "env_prefix": "CLIPFORMAT_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_nested_delimiter": "__",
    }


def load_settings(**values: Any) -> Settings:
    """Load settings from the environment, with explicit values on top.

    Raises:
        ConfigurationError: If any value fails validation.
    """
    try:
        return Settings(**values)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def merge_config(base: Mapping[str, Any], overrides: Mapping[str, Any] | None) -> dict[str, Any]:
    """Deep-merge override values over a base mapping.

    Nested mappings are merged key by key; any other override value
    replaces the base value. Neither input is modified.

    Args:
        base: Default configuration.
        overrides: Caller-supplied values (may be None).

    Returns:
        A new merged dictionary.
    """
    result: dict[str, Any] = {}
    for key, value in base.items():
        result[key] = merge_config(value, None) if isinstance(value, Mapping) else value

    for key, value in (overrides or {}).items():
        current = result.get(key)
        if isinstance(value, Mapping) and isinstance(current, Mapping):
            result[key] = merge_config(current, value)
        else:
            result[key] = value
    return result


class ConfigAccessor:
    """Dotted-path read access over settings merged with overrides.

    Example:
        ```python
        accessor = ConfigAccessor(Settings())
        accessor.get("benefits.benefit_per_week")  # 290.0

        per_call = accessor.with_overrides({"templates": {"arithmetic": "= ${result}"}})
        per_call.get("templates.arithmetic")  # "= ${result}"
        ```
    """

    def __init__(
        self,
        settings: Settings | Mapping[str, Any] | None = None,
        overrides: Mapping[str, Any] | None = None,
    ) -> None:
        if settings is None:
            base: Mapping[str, Any] = {}
        elif isinstance(settings, BaseModel):
            base = settings.model_dump()
        else:
            base = settings
        self._data = merge_config(base, overrides)

    def get(self, path: str, default: Any = None) -> Any:
        """Look up a value by dotted path.

        Args:
            path: Dotted key path, e.g. "templates.arithmetic".
            default: Returned when any segment is missing.

        Returns:
            The value, or default.
        """
        if not path:
            return default
        current: Any = self._data
        for key in path.split("."):
            if not isinstance(current, Mapping):
                return default
            current = current.get(key, _MISSING)
            if current is _MISSING:
                return default
        return current

    def with_overrides(self, overrides: Mapping[str, Any] | None) -> ConfigAccessor:
        """Return a new accessor with overrides merged over this one."""
        if not overrides:
            return self
        return ConfigAccessor(self._data, overrides)

    @property
    def raw(self) -> dict[str, Any]:
        """A copy of the merged configuration."""
        return merge_config(self._data, None)
