"""Condition pattern matching against URLs."""

from __future__ import annotations

import re
from collections.abc import Callable

from switchyard.core.model import Condition, ConditionType
from switchyard.core.url import extract_domain

# Deeply nested patterns overflow the recursive regex parser.
PATTERN_ERRORS = (re.error, RecursionError, OverflowError)


def glob_to_regex(pattern: str) -> str:
    """Translate a ``*`` wildcard pattern into an anchored regular expression."""
    return "^" + ".*".join(re.escape(part) for part in pattern.split("*")) + "$"


def _match_domain(url: str, pattern: str) -> bool:
    return extract_domain(url).casefold() == pattern.casefold()


def _match_keyword(url: str, pattern: str) -> bool:
    return pattern.lower() in url.lower()


def _match_glob(url: str, pattern: str) -> bool:
    try:
        compiled = re.compile(glob_to_regex(pattern))
    except PATTERN_ERRORS:
        return False
    return compiled.fullmatch(extract_domain(url)) is not None or compiled.fullmatch(url) is not None


def _match_regex(url: str, pattern: str) -> bool:
    try:
        compiled = re.compile(pattern)
    except PATTERN_ERRORS:
        return False
    return compiled.search(url) is not None


_MATCHERS: dict[ConditionType, Callable[[str, str], bool]] = {
    ConditionType.DOMAIN: _match_domain,
    ConditionType.KEYWORD: _match_keyword,
    ConditionType.GLOB: _match_glob,
    ConditionType.REGEX: _match_regex,
}


def matches(url: str, pattern: str, condition_type: ConditionType) -> bool:
    if not pattern:
        return False
    return _MATCHERS[ConditionType(condition_type)](url, pattern)


def condition_matches(condition: Condition, url: str) -> bool:
    return matches(url, condition.pattern, condition.type)
