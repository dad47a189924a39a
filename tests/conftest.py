"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from datetime import datetime

import pytest

from clipformat.capabilities import Capabilities
from clipformat.config import ConfigAccessor, Settings
from clipformat.models import SideEffect
from clipformat.parsers import default_parsers
from clipformat.patterns import PatternCache

FIXED_NOW = datetime(2026, 10, 19, 12, 0)


def fixed_clock() -> datetime:
    """Clock pinned to Monday 2026-10-19 12:00."""
    return FIXED_NOW


class RecordingLauncher:
    """Launcher double that records every dispatched side effect."""

    def __init__(self, succeed: bool = True) -> None:
        self.succeed = succeed
        self.opened: list[SideEffect] = []

    def open(self, effect: SideEffect) -> bool:
        self.opened.append(effect)
        return self.succeed


class RecordingLogger:
    """Logger double collecting (level, message) pairs."""

    def __init__(self) -> None:
        self.records: list[tuple[str, str]] = []

    def debug(self, event, *args, **kwargs):
        self.records.append(("debug", event))

    def info(self, event, *args, **kwargs):
        self.records.append(("info", event))

    def warning(self, event, *args, **kwargs):
        self.records.append(("warning", event))

    def error(self, event, *args, **kwargs):
        self.records.append(("error", event))

    def messages(self, level: str) -> list[str]:
        return [message for record_level, message in self.records if record_level == level]


@pytest.fixture
def clock():
    return fixed_clock


@pytest.fixture
def patterns() -> PatternCache:
    """A fresh pattern cache with the default catalogue."""
    return PatternCache.with_defaults()


@pytest.fixture
def settings() -> Settings:
    """Default settings, isolated from any .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def launcher() -> RecordingLauncher:
    return RecordingLauncher()


@pytest.fixture
def recording_logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def benefit_table() -> dict[int, float]:
    return {10: 7.0, 15: 10.0, 20: 13.25}


@pytest.fixture
def capabilities(patterns, settings, launcher, recording_logger, benefit_table) -> Capabilities:
    """Every capability present, with a fixed clock and recording doubles."""
    return Capabilities(
        logger=recording_logger,
        config=ConfigAccessor(settings),
        patterns=patterns,
        benefit_table=benefit_table,
        parsers=default_parsers(patterns, clock=fixed_clock),
        launcher=launcher,
        clock=fixed_clock,
    )
