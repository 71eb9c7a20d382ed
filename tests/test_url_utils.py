"""Input detection and ignore patterns."""

from __future__ import annotations

import pytest

from linkcheck.core.config import ConfigurationError
from linkcheck.utils.url_utils import IgnoreFilter, get_headers, is_url, split_patterns


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("https://example.com", True),
        ("http://localhost:8000/docs", True),
        ("README.md", False),
        ("./docs", False),
        ("mailto:a@b.com", False),
    ],
)
def test_is_url(value: str, expected: bool) -> None:
    assert is_url(value) is expected


def test_plain_word_matches_anywhere() -> None:
    ignore = IgnoreFilter(["localhost"])
    assert ignore.is_ignored("http://localhost:3000/x")
    assert not ignore.is_ignored("https://example.com")


def test_glob_patterns() -> None:
    ignore = IgnoreFilter(["*.test.local", "https://example.com/private/*"])
    assert ignore.is_ignored("https://api.test.local/health")
    assert ignore.is_ignored("https://example.com/private/report")
    assert not ignore.is_ignored("https://example.com/public")


def test_empty_filter_ignores_nothing() -> None:
    assert not IgnoreFilter().is_ignored("https://example.com")


def test_invalid_pattern_is_a_configuration_error() -> None:
    with pytest.raises(ConfigurationError, match="invalid ignore pattern"):
        IgnoreFilter(["(unclosed"])


def test_split_patterns_flattens_comma_lists() -> None:
    assert split_patterns(["example.com, test.local", "", "other.org"]) == ["example.com", "test.local", "other.org"]


def test_headers_carry_user_agent() -> None:
    assert get_headers("linkchecker-test")["User-Agent"] == "linkchecker-test"
