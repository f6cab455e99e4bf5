"""Ordered rule evaluation."""

from __future__ import annotations

from switchyard.core.matcher import condition_matches
from switchyard.core.model import Config, Rule, RuleLogic, RuleMatch


def evaluate_rule(rule: Rule, url: str) -> bool:
    # A rule without conditions never matches, whatever its logic.
    if not rule.conditions:
        return False
    if rule.logic is RuleLogic.ANY:
        return any(condition_matches(condition, url) for condition in rule.conditions)
    return all(condition_matches(condition, url) for condition in rule.conditions)


def match_rule(config: Config, url: str) -> RuleMatch:
    """Return the first rule in stored order that matches ``url``."""
    for rule in config.rules:
        if evaluate_rule(rule, url):
            return RuleMatch(
                matched=True,
                browser_id=rule.browser,
                always_ask=rule.always_ask,
                rule=rule,
            )
    return RuleMatch(matched=False)
