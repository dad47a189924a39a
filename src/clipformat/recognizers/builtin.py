"""Built-in recognizer specs.

Priorities (lower runs first):

    phone          50
    combinations   60
    benefit        70
    date_range     80
    units          85
    time_calc      90
    arithmetic    100
    navigation  10000  (catch-all)
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

from clipformat.parsers import (
    ArithmeticEvaluator,
    BenefitCalculator,
    CombinationCalculator,
    DateRangeParser,
    NavigationResolver,
    PhoneFormatter,
    TimeCalculator,
    UnitConverter,
)

from .base import Recognition
from .factory import RecognizerSpec

if TYPE_CHECKING:
    from clipformat.capabilities import ExecutionContext

logger = logging.getLogger(__name__)

NAVIGATION_PRIORITY = 10000


@lru_cache(maxsize=1)
def default_navigation_resolver() -> NavigationResolver:
    """Resolver used when no navigation parser is injected, built on first use."""
    return NavigationResolver()


def navigate(text: str, context: ExecutionContext) -> Recognition | None:
    """Dispatch text as a navigation target through the launcher.

    Declines when an earlier recognizer already matched, for
    arithmetic-looking text, and when the launcher reports failure.
    """
    if context.matches:
        return None
    resolver = (context.parsers or {}).get("navigation") or default_navigation_resolver()
    effect = resolver.resolve(text, context)
    if effect is None:
        return None
    if context.launcher is None or not context.launcher.open(effect):
        (context.logger or logger).warning(f"Navigation dispatch failed for {effect.type.value}")
        return None
    context.last_side_effect = effect
    return Recognition(output=text.strip(), side_effect=effect, side_effect_only=True)


def builtin_specs(include_navigation: bool = True) -> list[RecognizerSpec]:
    """Specs for every built-in recognizer, in priority order."""
    specs = [
        RecognizerSpec(id="phone", priority=50, capability_key="phone", default_parser=PhoneFormatter()),
        RecognizerSpec(
            id="combinations",
            priority=60,
            capability_key="combinations",
            default_parser=CombinationCalculator(),
        ),
        RecognizerSpec(id="benefit", priority=70, capability_key="benefit", default_parser=BenefitCalculator()),
        RecognizerSpec(
            id="date_range",
            priority=80,
            capability_key="date",
            default_parser=DateRangeParser(),
            candidate_method="is_range_candidate",
            transform_method="describe_range",
        ),
        RecognizerSpec(id="units", priority=85, capability_key="units", default_parser=UnitConverter()),
        RecognizerSpec(id="time_calc", priority=90, capability_key="time_calc", default_parser=TimeCalculator()),
        RecognizerSpec(
            id="arithmetic",
            priority=100,
            capability_key="arithmetic",
            default_parser=ArithmeticEvaluator(),
        ),
    ]
    if include_navigation:
        specs.append(
            RecognizerSpec(
                id="navigation",
                priority=NAVIGATION_PRIORITY,
                required_capabilities=("launcher",),
                custom_match=navigate,
            )
        )
    return specs
