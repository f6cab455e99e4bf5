"""Routing decision: launch a browser directly or ask the user."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from switchyard.core.model import Action, Browser, Config, Launch, ShowPicker
from switchyard.core.rules import match_rule
from switchyard.core.url import sanitize_url

LOGGER = logging.getLogger(__name__)


def find_browser(browsers: Iterable[Browser], browser_id: str | None) -> Browser | None:
    if not browser_id:
        return None
    for browser in browsers:
        if browser.id == browser_id:
            return browser
    return None


def decide(config: Config, browsers: Iterable[Browser], raw_url: str) -> Action:
    """Turn an incoming URL into a ``Launch`` or ``ShowPicker`` action.

    A rule whose target is not installed counts as no match, so routing falls
    through to the fallback browser (when prompting is off) and then to the
    picker.
    """
    browsers = tuple(browsers)
    url = sanitize_url(raw_url)
    result = match_rule(config, url)

    if result.matched:
        rule_name = result.rule.name if result.rule and result.rule.name else "<unnamed>"
        if result.always_ask:
            LOGGER.debug("Rule %s matched %s with always_ask", rule_name, url)
            return ShowPicker(url=url)
        if find_browser(browsers, result.browser_id) is not None:
            LOGGER.debug("Rule %s matched %s -> %s", rule_name, url, result.browser_id)
            return Launch(browser_id=result.browser_id, url=url)
        LOGGER.warning(
            "Rule %s targets browser '%s' which is not installed", rule_name, result.browser_id
        )

    if not config.prompt_on_click and find_browser(browsers, config.fallback_browser) is not None:
        LOGGER.debug("No actionable rule for %s, using fallback %s", url, config.fallback_browser)
        return Launch(browser_id=config.fallback_browser, url=url)

    LOGGER.debug("No actionable rule for %s, showing picker", url)
    return ShowPicker(url=url)
