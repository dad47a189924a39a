"""Tests for phone, combination, benefit, unit and navigation parsers."""

import os

import pytest

from clipformat.config import ConfigAccessor
from clipformat.models import SideEffectType
from clipformat.parsers import (
    BenefitCalculator,
    CombinationCalculator,
    NavigationResolver,
    PhoneFormatter,
    UnitConverter,
    combine_percentages,
    default_parsers,
    parse_benefit_table,
)
from clipformat.parsers.units import format_magnitude


class Context:
    """Minimal execution context stand-in."""

    def __init__(self, config=None, benefit_table=None):
        self.patterns = None
        self.config = ConfigAccessor(config or {})
        self.benefit_table = benefit_table


class TestPhoneFormatter:
    """Tests for PhoneFormatter."""

    def test_format_with_extension(self):
        """Extra fields become dial-pause suffixes."""
        formatter = PhoneFormatter()
        assert formatter.process("5551234567;home") == "(555) 123-4567,,,home"
        assert formatter.process("555-123-4567;ext;9") == "(555) 123-4567,,,ext,,,9"

    def test_requires_ten_digits(self):
        """The number field must have exactly ten digits."""
        assert PhoneFormatter().process("123;home") is None
        assert PhoneFormatter().process("15551234567;home") is None

    def test_candidate(self):
        """A semicolon after digits is required."""
        formatter = PhoneFormatter()
        assert formatter.is_candidate("5551234567;home")
        assert not formatter.is_candidate("5551234567")
        assert formatter.process("5551234567;") is None


class TestCombinationCalculator:
    """Tests for combined percentages."""

    def test_three_values(self):
        """Running totals round half up at each step."""
        assert CombinationCalculator().process("10 c 5 c 3") == "10% c 5% = 15% c 3% = 17%"

    def test_sorted_descending(self):
        """Values are combined largest first."""
        assert CombinationCalculator().process("5c10") == "10% c 5% = 15%"
        assert CombinationCalculator().process("20 C 30") == "30% c 20% = 44%"

    def test_percent_signs(self):
        """Percent signs are allowed."""
        assert CombinationCalculator().process("10% c 5%") == "10% c 5% = 15%"

    def test_needs_two_values(self):
        """A single value is not a combination."""
        assert CombinationCalculator().process("10 c") is None
        assert combine_percentages([10]) is None

    def test_candidate(self):
        """Free text is not a candidate."""
        assert not CombinationCalculator().is_candidate("hello world")
        assert not CombinationCalculator().is_candidate("10 + 5")


class TestBenefitCalculator:
    """Tests for the PD benefit calculator."""

    def test_lookup(self, benefit_table):
        """Weeks come from the table and are priced at 290 per week."""
        calc = BenefitCalculator(table=benefit_table)
        assert calc.process("15pd") == "15% PD = 10.00 weeks = $2,900.00"
        assert calc.process("20% PD") == "20% PD = 13.25 weeks = $3,842.50"

    def test_unknown_percent(self, benefit_table):
        """Ratings missing from the table give None."""
        assert BenefitCalculator(table=benefit_table).process("99pd") is None

    def test_context_table_and_rate(self):
        """The context's table and configured rate take precedence."""
        context = Context(config={"benefits": {"benefit_per_week": 300}}, benefit_table={15: 10})
        assert BenefitCalculator().process("15 pd", context) == "15% PD = 10.00 weeks = $3,000.00"

    def test_candidate(self):
        """Only percent + PD is a candidate."""
        calc = BenefitCalculator()
        assert calc.is_candidate("15pd")
        assert calc.is_candidate("15%PD")
        assert not calc.is_candidate("pd 15")

    def test_parse_table(self):
        """Table lines are "percent: weeks"; other lines are skipped."""
        table = parse_benefit_table(["15: 10", "16 : 11.25", "# heading", ""])
        assert table == {15: 10.0, 16: 11.25}


class TestUnitConverter:
    """Tests for the unit converter."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("100 km to mi", "62.14 mi"),
            ("5 lb in kg", "2.27 kg"),
            ("212 F to C", "100 C"),
            ("1.5 GB to MB", "1500.00 MB"),
            ("60 mph to kph", "96.56 kph"),
            ("1,000 m to km", "1 km"),
            ("1 mm to km", "1e-06 km"),
        ],
    )
    def test_conversions(self, text, expected):
        """Conversions format by magnitude."""
        assert UnitConverter().process(text) == expected

    @pytest.mark.parametrize("text", ["5 kg to mi", "5 foo to bar", "100 km", "km to mi"])
    def test_failures(self, text):
        """Incompatible, unknown or incomplete conversions give None."""
        assert UnitConverter().process(text) is None

    def test_format_magnitude(self):
        """Trailing zeros are dropped in the middle range only."""
        assert format_magnitude(2.5) == "2.5"
        assert format_magnitude(1234.5) == "1234.50"
        assert format_magnitude(0.001234567) == "0.00123457"


class TestNavigationResolver:
    """Tests for navigation classification."""

    @pytest.fixture
    def resolver(self):
        return NavigationResolver()

    def test_local_paths(self, resolver):
        """Home, absolute and relative paths open in the file manager."""
        effect = resolver.resolve("~/Documents")
        assert effect.type == SideEffectType.QSPACE
        assert effect.path == os.path.expanduser("~/Documents")
        assert effect.message == "Opened in QSpace"
        for path in ("/usr/local", "./notes", "../up"):
            assert resolver.resolve(path).type == SideEffectType.QSPACE

    def test_web_url(self, resolver):
        """http(s) URLs open in the browser."""
        effect = resolver.resolve("  https://example.com/a  ")
        assert effect.type == SideEffectType.BROWSER
        assert effect.url == "https://example.com/a"
        assert effect.message == "Opened in browser"

    def test_app_url(self, resolver):
        """Other schemes are application URLs."""
        for url in ("ssh://host", "obsidian://open?vault=x", "mailto:me@example.com"):
            effect = resolver.resolve(url)
            assert effect.type == SideEffectType.APP_URL
            assert effect.message == "Opened application URL"

    def test_search(self, resolver):
        """Anything else becomes an encoded web search."""
        effect = resolver.resolve("cats & dogs")
        assert effect.type == SideEffectType.KAGI_SEARCH
        assert effect.url == "https://kagi.com/search?q=cats%20%26%20dogs"
        assert effect.query == "cats & dogs"
        assert effect.message == "Searching Kagi"

    def test_label_with_colon_is_search(self, resolver):
        """A word followed by ": " is not a URL scheme."""
        assert resolver.resolve("note: buy milk").type == SideEffectType.KAGI_SEARCH

    def test_arithmetic_declined(self, resolver):
        """Arithmetic-looking text is never navigated."""
        assert resolver.resolve("2 + 2") is None
        assert resolver.resolve("$5") is None
        assert resolver.resolve("   ") is None

    def test_configured_search_url(self, resolver):
        """The search URL prefix comes from configuration."""
        context = Context(config={"navigation": {"search_url": "https://duckduckgo.com/?q="}})
        assert resolver.resolve("cats", context).url == "https://duckduckgo.com/?q=cats"

    def test_disabled(self, resolver):
        """Navigation can be switched off."""
        context = Context(config={"navigation": {"enabled": False}})
        assert resolver.resolve("cats", context) is None

    def test_process_returns_trimmed(self, resolver):
        """process echoes the trimmed target."""
        assert resolver.process("  cats  ") == "cats"


class TestDefaultParsers:
    """Tests for default_parsers."""

    def test_all_parsers_share_patterns(self, patterns):
        """Every built-in parser is present and uses the shared cache."""
        parsers = default_parsers(patterns)
        assert set(parsers) == {
            "arithmetic",
            "date",
            "time_calc",
            "phone",
            "combinations",
            "benefit",
            "units",
            "navigation",
        }
        assert all(parser.patterns is patterns for parser in parsers.values())
