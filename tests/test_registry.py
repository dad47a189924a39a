"""Tests for recognizer registration and dispatch."""

import pytest

from clipformat.capabilities import Capabilities, ExecutionContext
from clipformat.exceptions import DuplicateRecognizerError, RegistryFinalizedError
from clipformat.models import ProcessOptions, SideEffect, SideEffectType
from clipformat.recognizers import (
    Recognition,
    Recognizer,
    RecognizerFactory,
    RecognizerRegistry,
    builtin_specs,
)
from clipformat.recognizers.builtin import default_navigation_resolver, navigate

from conftest import RecordingLauncher, RecordingLogger


def constant(recognizer_id, output, priority=100, calls=None):
    """Recognizer that always returns output and records its calls."""

    def match(text, context):
        if calls is not None:
            calls.append(recognizer_id)
        return output

    return Recognizer(id=recognizer_id, match=match, priority=priority)


@pytest.fixture
def builtin_registry(capabilities):
    registry = RecognizerRegistry(capabilities)
    factory = RecognizerFactory(capabilities)
    for spec in builtin_specs():
        registry.register(factory.create(spec))
    registry.finalize()
    return registry


class TestRegistration:
    """Tests for register/finalize."""

    def test_priority_order(self):
        """Recognizers are kept in ascending priority."""
        registry = RecognizerRegistry()
        registry.register(constant("c", None, 30))
        registry.register(constant("a", None, 10))
        registry.register(constant("b", None, 20))
        assert registry.ids == ["a", "b", "c"]

    def test_ties_keep_registration_order(self):
        """Equal priorities run in registration order."""
        registry = RecognizerRegistry()
        for name in ("first", "second", "third"):
            registry.register(constant(name, None, 50))
        registry.register(constant("early", None, 10))
        assert registry.ids == ["early", "first", "second", "third"]

    def test_duplicate_rejected(self):
        """Ids are unique."""
        registry = RecognizerRegistry()
        registry.register(constant("a", None))
        with pytest.raises(DuplicateRecognizerError):
            registry.register(constant("a", None))

    def test_finalized_rejects(self):
        """No registration after finalize."""
        registry = RecognizerRegistry()
        registry.finalize()
        with pytest.raises(RegistryFinalizedError):
            registry.register(constant("a", None))
        assert registry.finalized

    def test_lookup(self):
        """Recognizers can be looked up by id."""
        registry = RecognizerRegistry()
        registry.register(constant("a", None))
        assert "a" in registry
        assert registry.get("a").id == "a"
        assert registry.get("b") is None
        assert len(registry) == 1


class TestDispatch:
    """Tests for RecognizerRegistry.process."""

    def test_first_match_wins(self):
        """The lowest-priority match is returned with provenance."""
        registry = RecognizerRegistry()
        registry.register(constant("late", "B", 20))
        registry.register(constant("early", "A", 10))
        result = registry.process("x")
        assert result.output == "A"
        assert result.matched_id == "early"
        assert not result.side_effect_only

    def test_no_match(self):
        """None when nothing matches."""
        registry = RecognizerRegistry()
        registry.register(constant("a", None))
        assert registry.process("x") is None

    def test_early_exit_stops_scan(self):
        """With early_exit only recognizers up to the match run."""
        calls = []
        registry = RecognizerRegistry()
        registry.register(constant("a", "A", 10, calls))
        registry.register(constant("b", "B", 20, calls))
        registry.process("x")
        assert calls == ["a"]

    def test_full_scan_returns_first(self):
        """Without early_exit every recognizer runs once; the first match is returned."""
        calls = []
        registry = RecognizerRegistry()
        registry.register(constant("a", None, 5, calls))
        registry.register(constant("b", "B", 10, calls))
        registry.register(constant("c", "C", 20, calls))
        result = registry.process("x", ProcessOptions(early_exit=False))
        assert calls == ["a", "b", "c"]
        assert result.matched_id == "b"

    def test_later_recognizers_see_matches(self):
        """The context records earlier matches for later recognizers."""
        seen = []

        def observer(text, context):
            seen.append(list(context.matches))
            return None

        registry = RecognizerRegistry()
        registry.register(constant("a", "A", 10))
        registry.register(Recognizer(id="observer", match=observer, priority=20))
        registry.process("x", ProcessOptions(early_exit=False))
        assert seen == [["a"]]

    def test_failure_boundary(self):
        """A raising recognizer is logged and skipped."""
        logger = RecordingLogger()

        def boom(text, context):
            raise RuntimeError("kaput")

        registry = RecognizerRegistry(Capabilities(logger=logger))
        registry.register(Recognizer(id="boom", match=boom, priority=10))
        registry.register(constant("ok", "fine", 20))
        result = registry.process("x")
        assert result.output == "fine"
        assert any("boom" in message and "kaput" in message for message in logger.messages("warning"))

    def test_recognition_side_effect(self):
        """Recognition results carry side effects through."""
        effect = SideEffect(type=SideEffectType.BROWSER, url="https://x.test", message="Opened in browser")
        registry = RecognizerRegistry()
        registry.register(
            Recognizer(id="nav", match=lambda t, c: Recognition(output=t, side_effect=effect, side_effect_only=True))
        )
        result = registry.process("https://x.test")
        assert result.side_effect == effect
        assert result.side_effect_only

    def test_fresh_context_per_call(self):
        """Scratch state does not leak between calls."""
        seen = []

        def observer(text, context):
            seen.append(len(context.matches))
            return "x"

        registry = RecognizerRegistry()
        registry.register(Recognizer(id="observer", match=observer))
        registry.process("a")
        registry.process("b")
        assert seen == [0, 0]

    def test_config_override_per_call(self, builtin_registry):
        """Config overrides merge over injected configuration for one call."""
        templated = builtin_registry.process("2*3", config={"templates": {"arithmetic": "${input} = ${result}"}})
        assert templated.output == "2*3 = 6"
        assert builtin_registry.process("2*3").output == "6"


class TestBuiltins:
    """Tests for the built-in recognizer set."""

    def test_priorities(self, builtin_registry):
        """Built-ins are ordered by their fixed priorities."""
        assert builtin_registry.ids == [
            "phone",
            "combinations",
            "benefit",
            "date_range",
            "units",
            "time_calc",
            "arithmetic",
            "navigation",
        ]

    @pytest.mark.parametrize(
        "text, matched_id, output",
        [
            ("5551234567;home", "phone", "(555) 123-4567,,,home"),
            ("10 c 5 c 3", "combinations", "10% c 5% = 15% c 3% = 17%"),
            ("15pd", "benefit", "15% PD = 10.00 weeks = $2,900.00"),
            ("5/6/23 to 6/7/23", "date_range", "05/06/2023 to 06/07/2023, 33 days"),
            ("100 km to mi", "units", "62.14 mi"),
            ("12/16/25 + 1 day", "time_calc", "12/17/2025"),
            ("9am + 2h", "time_calc", "11:00 AM"),
            ("5 - 3", "arithmetic", "2"),
            ("$10*2", "arithmetic", "$20.00"),
        ],
    )
    def test_routing(self, builtin_registry, text, matched_id, output):
        """Each kind of content reaches its recognizer."""
        result = builtin_registry.process(text)
        assert result.matched_id == matched_id
        assert result.output == output

    def test_navigation_catch_all(self, builtin_registry, launcher):
        """Unrecognized text is dispatched to the launcher."""
        result = builtin_registry.process("https://example.com")
        assert result.matched_id == "navigation"
        assert result.side_effect_only
        assert result.output == "https://example.com"
        assert launcher.opened[0].type == SideEffectType.BROWSER

    def test_navigation_declines_after_match(self, builtin_registry, launcher):
        """In a full scan navigation does not fire once something matched."""
        result = builtin_registry.process("2+2", ProcessOptions(early_exit=False))
        assert result.matched_id == "arithmetic"
        assert launcher.opened == []

    def test_navigation_declines_arithmetic(self, builtin_registry, launcher):
        """Arithmetic-looking text that fails to evaluate is not searched."""
        assert builtin_registry.process("1/0") is None
        assert launcher.opened == []

    def test_launcher_failure(self, capabilities):
        """A failed dispatch is not a match."""
        failing = RecordingLauncher(succeed=False)
        caps = Capabilities(**{**capabilities.__dict__, "launcher": failing})
        registry = RecognizerRegistry(caps)
        registry.register(RecognizerFactory(caps).create(builtin_specs()[-1]))
        assert registry.process("cats") is None
        assert len(failing.opened) == 1

    def test_navigation_without_injected_parser(self, launcher):
        """The shared default resolver handles navigation when none is injected."""
        context = ExecutionContext(launcher=launcher)
        recognition = navigate("~/Documents", context)
        assert recognition.side_effect.type == SideEffectType.QSPACE
        assert default_navigation_resolver() is default_navigation_resolver()
