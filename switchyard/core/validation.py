"""Edit-time validation for conditions and rules."""

from __future__ import annotations

import re

from switchyard.core.errors import ConditionValidationError, RuleValidationError
from switchyard.core.matcher import PATTERN_ERRORS
from switchyard.core.model import Condition, ConditionType, Rule

_HOST_CHARS_RE = re.compile(r"^[A-Za-z0-9._-]*$")


def _first_invalid_char(value: str) -> str | None:
    for ch in value:
        if not _HOST_CHARS_RE.match(ch):
            return ch
    return None


def validate_domain_pattern(pattern: str) -> None:
    if not pattern:
        raise ConditionValidationError("Domain cannot be empty")
    if "*" in pattern or "?" in pattern:
        raise ConditionValidationError(
            "Wildcards not allowed in domain patterns (use glob type instead)"
        )
    if " " in pattern:
        raise ConditionValidationError("Domain cannot contain spaces")
    if pattern.startswith(".") or pattern.endswith("."):
        raise ConditionValidationError("Domain cannot start or end with a dot")
    if pattern.startswith("-") or pattern.endswith("-"):
        raise ConditionValidationError("Domain cannot start or end with a hyphen")
    invalid = _first_invalid_char(pattern)
    if invalid is not None:
        raise ConditionValidationError(f"Domain contains invalid character: {invalid}")


def validate_glob_pattern(pattern: str) -> None:
    if not pattern:
        raise ConditionValidationError("Wildcard pattern cannot be empty")
    if " " in pattern:
        raise ConditionValidationError("Wildcard pattern cannot contain spaces")
    invalid = _first_invalid_char(pattern.replace("*", "X"))
    if invalid is not None:
        raise ConditionValidationError(f"Wildcard pattern contains invalid character: {invalid}")
    if pattern.startswith(".") and not pattern.startswith(".*"):
        raise ConditionValidationError("Wildcard pattern cannot start with a dot")
    if pattern.endswith(".") and not pattern.endswith("*."):
        raise ConditionValidationError("Wildcard pattern cannot end with a dot")


def validate_condition(condition: Condition) -> None:
    """Raise ``ConditionValidationError`` if the pattern is unusable for its type."""
    if not condition.pattern:
        raise ConditionValidationError("Pattern cannot be empty")

    condition_type = ConditionType(condition.type)
    if condition_type is ConditionType.DOMAIN:
        validate_domain_pattern(condition.pattern)
    elif condition_type is ConditionType.GLOB:
        validate_glob_pattern(condition.pattern)
    elif condition_type is ConditionType.REGEX:
        try:
            re.compile(condition.pattern)
        except PATTERN_ERRORS as exc:
            raise ConditionValidationError(f"Invalid regex: {exc}") from exc


def validate_rule(rule: Rule) -> None:
    if not rule.conditions:
        raise RuleValidationError("A rule needs at least one condition")
    for index, condition in enumerate(rule.conditions, start=1):
        try:
            validate_condition(condition)
        except ConditionValidationError as exc:
            raise RuleValidationError(f"Condition {index} ({condition.type.value}): {exc}") from exc
    if not rule.always_ask and not rule.browser:
        raise RuleValidationError("A rule needs a target browser unless it always asks")
