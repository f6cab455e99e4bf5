"""Stable public API for building tooling on top of switchyard.

This module is the supported integration surface for third-party callers
such as a graphical picker or settings window. Avoid importing from
private/internal modules unless intentionally depending on non-stable
internals.
"""

from __future__ import annotations

from switchyard.core.config_store import ConfigStore, LoadedConfig, WriteGuard, load_config, save_config
from switchyard.core.errors import (
    BrowserNotFoundError,
    ConditionValidationError,
    ConfigLoadError,
    ConfigSaveError,
    ConfigValidationError,
    DefaultBrowserError,
    LaunchError,
    NothingToRouteError,
    RuleValidationError,
    SwitchyardError,
)
from switchyard.core.matcher import matches
from switchyard.core.model import (
    Action,
    Browser,
    Condition,
    ConditionType,
    Config,
    DesktopAction,
    Launch,
    Rule,
    RuleLogic,
    RuleMatch,
    ShowPicker,
)
from switchyard.core.routing import decide
from switchyard.core.rules import evaluate_rule, match_rule
from switchyard.core.service import Choice, Chooser, OpenResult, SwitchyardService
from switchyard.core.url import extract_domain, sanitize_url
from switchyard.desktop.base import BrowserSource, Launcher

__all__ = [
    "SwitchyardError",
    "BrowserNotFoundError",
    "ConditionValidationError",
    "ConfigLoadError",
    "ConfigSaveError",
    "ConfigValidationError",
    "DefaultBrowserError",
    "LaunchError",
    "NothingToRouteError",
    "RuleValidationError",
    "Action",
    "Browser",
    "Condition",
    "ConditionType",
    "Config",
    "DesktopAction",
    "Launch",
    "Rule",
    "RuleLogic",
    "RuleMatch",
    "ShowPicker",
    "ConfigStore",
    "LoadedConfig",
    "WriteGuard",
    "load_config",
    "save_config",
    "decide",
    "evaluate_rule",
    "match_rule",
    "matches",
    "extract_domain",
    "sanitize_url",
    "BrowserSource",
    "Launcher",
    "Choice",
    "Chooser",
    "OpenResult",
    "Client",
]


class Client:
    """Public client for interacting with switchyard core capabilities.

    A `Client` instance wraps config loading, browser discovery, routing, and
    launching behind a stable API intended for third-party frontends.
    """

    def __init__(
        self,
        *,
        store: ConfigStore | None = None,
        launcher: Launcher | None = None,
        browser_source: BrowserSource | None = None,
    ) -> None:
        self._service = SwitchyardService(
            store=store,
            launcher=launcher,
            browser_source=browser_source,
        )

    @property
    def load_warnings(self) -> tuple[str, ...]:
        return self._service.load_warnings

    @property
    def config(self) -> Config:
        return self._service.config

    def list_browsers(self, *, include_hidden: bool = True) -> list[Browser]:
        return self._service.list_browsers(include_hidden=include_hidden)

    def route(self, url: str) -> Action:
        return self._service.route(url)

    def open_url(self, url: str, choose: Chooser) -> OpenResult:
        return self._service.open_url(url, choose)

    def launch(self, browser_id: str, url: str, *, action_id: str | None = None) -> Browser:
        return self._service.launch(browser_id, url, action_id=action_id)

    def add_rule(self, rule: Rule) -> Config:
        return self._service.add_rule(rule)

    def get_rule(self, index: int) -> Rule:
        return self._service.get_rule(index)

    def replace_rule(self, index: int, rule: Rule) -> Config:
        return self._service.replace_rule(index, rule)

    def move_rule(self, index: int, new_index: int) -> Config:
        return self._service.move_rule(index, new_index)

    def remove_rule(self, index: int) -> Rule:
        return self._service.remove_rule(index)
