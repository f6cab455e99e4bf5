from __future__ import annotations

import pytest

from switchyard.core.matcher import glob_to_regex, matches
from switchyard.core.model import ConditionType

DOMAIN = ConditionType.DOMAIN
KEYWORD = ConditionType.KEYWORD
GLOB = ConditionType.GLOB
REGEX = ConditionType.REGEX


@pytest.mark.parametrize(
    ("url", "pattern", "condition_type", "expected"),
    [
        ("https://github.com", "github.com", DOMAIN, True),
        ("https://GitHub.COM/x", "github.com", DOMAIN, True),
        ("https://github.com/user/repo", "github.com", DOMAIN, True),
        ("https://github.com:8443/", "GITHUB.com", DOMAIN, True),
        ("https://gitlab.com", "github.com", DOMAIN, False),
        ("https://api.github.com", "github.com", DOMAIN, False),
        ("https://github.com", "github", KEYWORD, True),
        ("https://example.com/github/repo", "github", KEYWORD, True),
        ("https://GITHUB.com", "GitHub", KEYWORD, True),
        ("https://gitlab.com", "github", KEYWORD, False),
        ("https://github.com/user/repo", r"github\.com", REGEX, True),
        ("https://github.com/user123/repo", r"github\.com/user\d+", REGEX, True),
        ("https://github.com", r"gitlab\.com", REGEX, False),
        ("https://github.com", "[invalid(regex", REGEX, False),
        ("https://api.github.com", "*.github.com", GLOB, True),
        ("https://deep.sub.example.com", "*.example.com", GLOB, True),
        ("https://different.com", "*.example.com", GLOB, False),
        ("https://github.com", "github.com", GLOB, True),
        ("https://example.com/path", "example.com*", GLOB, True),
        ("https://test.example.com", "*.example.*", GLOB, True),
        ("https://example.com/docs/page", "https://example.com/docs/*", GLOB, True),
        ("https://example.com", "[invalid", GLOB, False),
        ("https://githubXcom", "github.com", GLOB, False),
    ],
)
def test_matches(url: str, pattern: str, condition_type: ConditionType, expected: bool) -> None:
    assert matches(url, pattern, condition_type) is expected


@pytest.mark.parametrize("condition_type", list(ConditionType))
def test_empty_pattern_never_matches(condition_type: ConditionType) -> None:
    assert matches("https://example.com", "", condition_type) is False


def test_glob_is_anchored() -> None:
    assert matches("https://notgithub.com.evil.org", "github.com", GLOB) is False


def test_glob_escapes_regex_metacharacters() -> None:
    assert glob_to_regex("a+b.com") == r"^a\+b\.com$"
    assert glob_to_regex("*.example.com") == r"^.*\.example\.com$"
    assert matches("https://aab.com", "a+b.com", GLOB) is False
    assert matches("https://a+b.com", "a+b.com", GLOB) is True


def test_condition_type_accepts_plain_string() -> None:
    assert matches("https://github.com", "github.com", "domain") is True  # type: ignore[arg-type]


@pytest.mark.parametrize("condition_type", [ConditionType.REGEX, GLOB])
def test_deeply_nested_pattern_does_not_match(condition_type: ConditionType) -> None:
    pattern = "(" * 2000 + "a" + ")" * 2000
    assert matches("https://a.com", pattern, condition_type) is False


def test_glob_does_not_match_before_trailing_newline() -> None:
    assert matches("https://a.com\n", "a.com", GLOB) is False
    assert matches("https://a.com\n", "a.com", ConditionType.DOMAIN) is False
