"""Human-readable rule summaries."""

from __future__ import annotations

from switchyard.core.model import ConditionType, Rule, RuleLogic

_TYPE_LABELS = {
    ConditionType.DOMAIN: "Exact domain",
    ConditionType.KEYWORD: "URL contains",
    ConditionType.GLOB: "Wildcard",
    ConditionType.REGEX: "Regex",
}


def type_label(condition_type: ConditionType) -> str:
    return _TYPE_LABELS[ConditionType(condition_type)]


def format_rule_summary(rule: Rule, browser_name: str) -> str:
    """Summarize a rule, e.g. ``Exact domain: github.com · Opens in Firefox``."""
    if not rule.conditions:
        return "No conditions"

    outcome = "Always ask" if rule.always_ask else f"Opens in {browser_name}"
    if len(rule.conditions) == 1:
        condition = rule.conditions[0]
        return f"{type_label(condition.type)}: {condition.pattern} · {outcome}"

    logic_text = "Any match" if rule.logic is RuleLogic.ANY else "All match"
    return f"{len(rule.conditions)} conditions ({logic_text}) · {outcome}"
