"""Service layer used by CLI and future UI frontends."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable
from dataclasses import dataclass

from switchyard.core.config_store import ConfigStore
from switchyard.core.errors import (
    BrowserNotFoundError,
    LaunchError,
    NothingToRouteError,
    RuleValidationError,
)
from switchyard.core.model import Action, Browser, Config, DesktopAction, Launch, Rule
from switchyard.core.routing import decide, find_browser
from switchyard.core.url import sanitize_url
from switchyard.core.validation import validate_rule
from switchyard.desktop.base import BrowserSource, Launcher
from switchyard.desktop.discovery import discover_browsers, picker_browsers
from switchyard.desktop.launcher import DesktopLauncher

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Choice:
    """What the user picked: a browser, optionally one of its desktop actions."""

    browser: Browser
    action: DesktopAction | None = None


Chooser = Callable[[list[Browser], str], Choice | None]


@dataclass(frozen=True)
class OpenResult:
    action: Action
    browser: Browser | None
    desktop_action: DesktopAction | None = None


class SwitchyardService:
    def __init__(
        self,
        *,
        store: ConfigStore | None = None,
        launcher: Launcher | None = None,
        browser_source: BrowserSource | None = None,
    ) -> None:
        self.store = store or ConfigStore()
        self.load_warnings = self.store.load_warnings
        self.launcher = launcher or DesktopLauncher()
        self._browser_source = browser_source or discover_browsers
        self._browsers: list[Browser] | None = None

    @property
    def config(self) -> Config:
        return self.store.config

    def list_browsers(self, *, include_hidden: bool = True) -> list[Browser]:
        if self._browsers is None:
            self._browsers = list(self._browser_source())
        if include_hidden:
            return list(self._browsers)
        return picker_browsers(self._browsers, self.config)

    def browser_name(self, browser_id: str) -> str:
        browser = find_browser(self.list_browsers(), browser_id)
        return browser.name if browser else browser_id

    def route(self, raw_url: str) -> Action:
        if not sanitize_url(raw_url):
            raise NothingToRouteError("Nothing to route")
        return decide(self.config, self.list_browsers(), raw_url)

    def launch(self, browser_id: str, url: str, *, action_id: str | None = None) -> Browser:
        browser = self._require_browser(browser_id)
        if action_id is None:
            started = self.launcher.launch(browser, url)
        else:
            started = self.launcher.launch_action(browser, self._require_action(browser, action_id), url)
        if not started:
            raise LaunchError(f"Could not launch {browser.name} ({browser.id})")
        return browser

    def open_url(self, raw_url: str, choose: Chooser) -> OpenResult:
        """Route ``raw_url`` and launch the outcome.

        ``choose`` plays the picker: it receives the visible browsers and the
        sanitized URL and returns a ``Choice``, or ``None`` to cancel.
        """
        action = self.route(raw_url)
        if isinstance(action, Launch):
            return OpenResult(action=action, browser=self.launch(action.browser_id, action.url))

        chosen = choose(self.list_browsers(include_hidden=False), action.url)
        if chosen is None:
            LOGGER.info("Picker cancelled for %s", action.url)
            return OpenResult(action=action, browser=None)
        action_id = chosen.action.id if chosen.action else None
        browser = self.launch(chosen.browser.id, action.url, action_id=action_id)
        return OpenResult(action=action, browser=browser, desktop_action=chosen.action)

    def get_rule(self, index: int) -> Rule:
        self._check_index(index)
        return self.config.rules[index - 1]

    def add_rule(self, rule: Rule) -> Config:
        self._validate_rule(rule)
        config = dataclasses.replace(self.config, rules=(*self.config.rules, rule))
        self.store.save(config)
        return config

    def replace_rule(self, index: int, rule: Rule) -> Config:
        self._check_index(index)
        self._validate_rule(rule)
        rules = list(self.config.rules)
        rules[index - 1] = rule
        config = dataclasses.replace(self.config, rules=tuple(rules))
        self.store.save(config)
        return config

    def move_rule(self, index: int, new_index: int) -> Config:
        """Move rule ``index`` to position ``new_index``; both are 1-based."""
        self._check_index(index)
        self._check_index(new_index)
        rules = list(self.config.rules)
        rules.insert(new_index - 1, rules.pop(index - 1))
        config = dataclasses.replace(self.config, rules=tuple(rules))
        if index != new_index:
            self.store.save(config)
        return config

    def remove_rule(self, index: int) -> Rule:
        self._check_index(index)
        rules = list(self.config.rules)
        removed = rules.pop(index - 1)
        self.store.save(dataclasses.replace(self.config, rules=tuple(rules)))
        return removed

    def update_settings(
        self,
        *,
        prompt_on_click: bool | None = None,
        fallback_browser: str | None = None,
        clear_fallback: bool = False,
        hide: tuple[str, ...] = (),
        unhide: tuple[str, ...] = (),
        check_default_browser: bool | None = None,
    ) -> Config:
        config = self.config
        changes: dict[str, object] = {}
        if prompt_on_click is not None:
            changes["prompt_on_click"] = prompt_on_click
        if clear_fallback:
            changes["fallback_browser"] = None
        elif fallback_browser is not None:
            changes["fallback_browser"] = self._require_browser(fallback_browser).id
        if hide or unhide:
            hidden = [b for b in config.hidden_browsers if b not in unhide]
            hidden.extend(b for b in hide if b not in hidden)
            changes["hidden_browsers"] = tuple(hidden)
        if check_default_browser is not None:
            changes["check_default_browser"] = check_default_browser

        if not changes:
            return config
        config = dataclasses.replace(config, **changes)
        self.store.save(config)
        return config

    def _check_index(self, index: int) -> None:
        count = len(self.config.rules)
        if not 1 <= index <= count:
            raise RuleValidationError(f"No rule #{index}; there are {count} rules")

    def _validate_rule(self, rule: Rule) -> None:
        validate_rule(rule)
        if rule.browser and not rule.always_ask:
            self._require_browser(rule.browser)

    def _require_browser(self, browser_id: str) -> Browser:
        browser = find_browser(self.list_browsers(), browser_id)
        if browser is None:
            raise BrowserNotFoundError(
                f"Unknown browser '{browser_id}'. Use 'switchyard browsers --all' to list installed browsers."
            )
        return browser

    def _require_action(self, browser: Browser, action_id: str) -> DesktopAction:
        for desktop_action in browser.actions:
            if desktop_action.id == action_id:
                return desktop_action
        raise BrowserNotFoundError(f"{browser.name} ({browser.id}) has no action '{action_id}'")
