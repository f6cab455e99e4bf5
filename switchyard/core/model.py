"""Core data models used across config store, routing, service, and CLI."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ConditionType(str, Enum):
    DOMAIN = "domain"
    KEYWORD = "keyword"
    GLOB = "glob"
    REGEX = "regex"


class RuleLogic(str, Enum):
    ALL = "all"
    ANY = "any"


@dataclass(frozen=True)
class Condition:
    type: ConditionType
    pattern: str


@dataclass(frozen=True)
class Rule:
    conditions: tuple[Condition, ...]
    name: str = ""
    logic: RuleLogic = RuleLogic.ALL
    browser: str = ""
    always_ask: bool = False


@dataclass(frozen=True)
class Config:
    prompt_on_click: bool = True
    fallback_browser: str | None = None
    check_default_browser: bool = True
    force_dark_mode: bool = False
    hidden_browsers: tuple[str, ...] = ()
    rules: tuple[Rule, ...] = ()


@dataclass(frozen=True)
class DesktopAction:
    """An extra launch mode a browser advertises, e.g. "New Private Window"."""

    id: str
    name: str
    exec: str


@dataclass(frozen=True)
class Browser:
    id: str
    name: str
    exec: str
    icon: str = ""
    actions: tuple[DesktopAction, ...] = ()


@dataclass(frozen=True)
class RuleMatch:
    matched: bool
    browser_id: str = ""
    always_ask: bool = False
    rule: Rule | None = None


@dataclass(frozen=True)
class Launch:
    browser_id: str
    url: str


@dataclass(frozen=True)
class ShowPicker:
    url: str


Action = Launch | ShowPicker
