# tests/unit/test_matchers.py

"""Tests for include/exclude matchers."""

import pytest

from gitfind.exceptions import ConfigurationError
from gitfind.locator.matchers import Literal, Pattern, any_matches, parse_matcher


class TestParseMatcher:
    def test_plain_text_is_literal(self):
        assert parse_matcher("archive") == Literal("archive")

    def test_slashes_make_a_pattern(self):
        matcher = parse_matcher("/^\\./old-/")
        assert isinstance(matcher, Pattern)
        assert matcher.regex.pattern == "^\\./old-"
        assert str(matcher) == "/^\\./old-/"

    def test_single_slash_is_literal(self):
        assert isinstance(parse_matcher("/"), Literal)

    def test_invalid_regex_raises(self):
        with pytest.raises(ConfigurationError, match="Invalid pattern"):
            parse_matcher("/(unclosed/")

    def test_empty_name_raises(self):
        with pytest.raises(ConfigurationError):
            parse_matcher("")


class TestMatching:
    def test_literal_matches_basename(self):
        assert Literal("vendor").matches("./src/vendor")
        assert not Literal("vendor").matches("./src/vendors")

    def test_literal_matches_full_display_path(self):
        assert Literal("./src/app").matches("./src/app")

    def test_pattern_searches_display_path(self):
        matcher = parse_matcher("/forks?/")
        assert matcher.matches("./github/forks/x")
        assert not matcher.matches("./github/mine/x")

    def test_any_matches(self):
        matchers = (Literal("a"), parse_matcher("/b$/"))
        assert any_matches(matchers, "./x/a")
        assert any_matches(matchers, "./x/b")
        assert not any_matches(matchers, "./x/c")
        assert not any_matches((), "./x/a")
