from __future__ import annotations

from switchyard.core.model import Browser, Condition, ConditionType, Config, Launch, Rule, ShowPicker
from switchyard.core.routing import decide, find_browser

FIREFOX = Browser(id="firefox.desktop", name="Firefox", exec="firefox %u")
CHROMIUM = Browser(id="chromium.desktop", name="Chromium", exec="chromium %U")
BROWSERS = [FIREFOX, CHROMIUM]


def _domain_rule(pattern: str, browser: str = "", always_ask: bool = False) -> Rule:
    return Rule(
        conditions=(Condition(type=ConditionType.DOMAIN, pattern=pattern),),
        browser=browser,
        always_ask=always_ask,
    )


def test_matching_rule_launches_its_browser() -> None:
    config = Config(rules=(_domain_rule("github.com", "chromium.desktop"),))
    assert decide(config, BROWSERS, "github.com/org") == Launch(
        browser_id="chromium.desktop", url="https://github.com/org"
    )


def test_always_ask_rule_shows_picker_even_without_prompting() -> None:
    config = Config(
        prompt_on_click=False,
        fallback_browser="firefox.desktop",
        rules=(_domain_rule("bank.example", "chromium.desktop", always_ask=True),),
    )
    assert decide(config, BROWSERS, "https://bank.example/login") == ShowPicker(
        url="https://bank.example/login"
    )


def test_rule_with_missing_browser_falls_back() -> None:
    config = Config(
        prompt_on_click=False,
        fallback_browser="firefox.desktop",
        rules=(_domain_rule("github.com", "uninstalled.desktop"),),
    )
    assert decide(config, BROWSERS, "https://github.com") == Launch(
        browser_id="firefox.desktop", url="https://github.com"
    )


def test_rule_with_missing_browser_shows_picker_when_prompting() -> None:
    config = Config(
        prompt_on_click=True,
        fallback_browser="firefox.desktop",
        rules=(_domain_rule("github.com", "uninstalled.desktop"),),
    )
    assert isinstance(decide(config, BROWSERS, "https://github.com"), ShowPicker)


def test_fallback_used_when_nothing_matches_and_prompt_disabled() -> None:
    config = Config(prompt_on_click=False, fallback_browser="firefox.desktop", rules=())
    assert decide(config, BROWSERS, "https://example.com") == Launch(
        browser_id="firefox.desktop", url="https://example.com"
    )


def test_missing_fallback_shows_picker() -> None:
    config = Config(prompt_on_click=False, fallback_browser="firefox.desktop", rules=())
    assert decide(config, [CHROMIUM], "https://example.com") == ShowPicker(url="https://example.com")


def test_unset_fallback_shows_picker() -> None:
    config = Config(prompt_on_click=False, fallback_browser=None)
    assert isinstance(decide(config, BROWSERS, "https://example.com"), ShowPicker)


def test_prompt_on_click_ignores_fallback() -> None:
    config = Config(prompt_on_click=True, fallback_browser="firefox.desktop")
    assert isinstance(decide(config, BROWSERS, "https://example.com"), ShowPicker)


def test_default_config_shows_picker() -> None:
    assert decide(Config(), BROWSERS, "https://example.com") == ShowPicker(url="https://example.com")


def test_hidden_browser_can_still_be_a_rule_target() -> None:
    config = Config(
        hidden_browsers=("chromium.desktop",),
        rules=(_domain_rule("github.com", "chromium.desktop"),),
    )
    assert decide(config, BROWSERS, "https://github.com") == Launch(
        browser_id="chromium.desktop", url="https://github.com"
    )


def test_decide_accepts_any_iterable_of_browsers() -> None:
    config = Config(prompt_on_click=False, fallback_browser="chromium.desktop")
    assert decide(config, iter(BROWSERS), "https://example.com") == Launch(
        browser_id="chromium.desktop", url="https://example.com"
    )


def test_find_browser() -> None:
    assert find_browser(BROWSERS, "firefox.desktop") is FIREFOX
    assert find_browser(BROWSERS, "missing.desktop") is None
    assert find_browser(BROWSERS, None) is None
