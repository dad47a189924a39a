"""Tests for seed extraction."""

import pytest

from clipformat.parsers import DateRangeParser
from clipformat.seed import SeedExtractor, arithmetic_strategy, separator_strategy, whitespace_strategy

from conftest import fixed_clock


@pytest.fixture
def extractor():
    return SeedExtractor(DateRangeParser(clock=fixed_clock))


class TestSeedExtractor:
    """Tests for SeedExtractor.extract."""

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "   ",
            "Total: 5 + 3",
            "Stay 5/6/23 to 6/7/23",
            "note = hello",
            "call (555) 123",
            "one two three",
            "single",
            "trailing space ",
            "x = 1\ny = 2 * 3",
        ],
    )
    def test_prefix_plus_seed_is_text(self, extractor, text):
        """prefix + seed always reconstructs the input."""
        prefix, seed = extractor.extract(text)
        assert prefix + seed == text

    def test_empty_input(self, extractor):
        """Empty input yields two empty strings."""
        assert extractor.extract("") == ("", "")

    def test_whitespace_only(self, extractor):
        """Whitespace-only input has an empty seed."""
        assert extractor.extract("   ") == ("   ", "")

    def test_date_range_split_before_first_date(self, extractor):
        """Date ranges split right before the first date."""
        assert extractor.extract("Stay 5/6/23 to 6/7/23") == ("Stay ", "5/6/23 to 6/7/23")

    def test_text_date_range(self, extractor):
        """Month-name ranges split before the month."""
        assert extractor.extract("Trip: Dec 30, 2023 to Jan 2") == ("Trip: ", "Dec 30, 2023 to Jan 2")

    def test_arithmetic_tail(self, extractor):
        """A trailing arithmetic expression becomes the seed."""
        assert extractor.extract("Total: 5 + 3") == ("Total: ", "5 + 3")

    def test_pure_arithmetic(self, extractor):
        """A whole-text expression is entirely seed."""
        assert extractor.extract("(3+4)*2") == ("", "(3+4)*2")

    def test_currency_tail(self, extractor):
        """Dollar amounts are part of the arithmetic seed."""
        assert extractor.extract("Budget: $10*2") == ("Budget: ", "$10*2")

    def test_separator(self, extractor):
        """Text after the last separator is the seed."""
        assert extractor.extract("note = hello") == ("note = ", "hello")

    def test_whitespace_fallback(self, extractor):
        """Without separators the last word is the seed."""
        assert extractor.extract("search for kittens") == ("search for ", "kittens")

    def test_whole_string_fallback(self, extractor):
        """A single word is entirely seed."""
        assert extractor.extract("kittens") == ("", "kittens")


class TestStrategies:
    """Tests for individual strategies."""

    def test_arithmetic_needs_digit_or_paren(self):
        """Operator-only tails are not arithmetic."""
        assert arithmetic_strategy("word + -") is None

    def test_arithmetic_with_combination_marker(self):
        """The combination marker c is allowed in arithmetic seeds."""
        assert arithmetic_strategy("combined 10 c 5") == ("combined ", "10 c 5")

    def test_separator_takes_last(self):
        """The last separator wins."""
        assert separator_strategy("a: b = c") == ("a: b = ", "c")

    def test_separator_bracket_without_space(self):
        """Opening brackets split even without following whitespace."""
        assert separator_strategy("list[item") == ("list[", "item")

    def test_separator_requires_following_text(self):
        """A separator at the end of text does not split."""
        assert separator_strategy("value = ") is None

    def test_whitespace_none_without_space(self):
        """No whitespace means no split."""
        assert whitespace_strategy("word") is None
