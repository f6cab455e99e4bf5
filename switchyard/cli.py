"""Typer CLI entrypoint."""

from __future__ import annotations

import dataclasses
import string

import typer

from switchyard.core.errors import RuleValidationError, SwitchyardError
from switchyard.core.formatting import format_rule_summary
from switchyard.core.logs import setup_logging
from switchyard.core.model import Browser, Condition, ConditionType, Launch, Rule, RuleLogic
from switchyard.core.service import Choice, SwitchyardService
from switchyard.desktop import default_browser
from switchyard.desktop.discovery import app_id

app = typer.Typer(help="Route links to the right browser by rules, or ask")
rules_app = typer.Typer(help="Inspect and edit routing rules")
app.add_typer(rules_app, name="rules")


@app.callback()
def main(
    log_level: str = typer.Option("WARNING", "--log-level", help="DEBUG, INFO, WARNING or ERROR"),
) -> None:
    setup_logging(log_level)


def _build_service() -> SwitchyardService:
    service = SwitchyardService()
    for warning in getattr(service, "load_warnings", ()):
        typer.echo(f"Warning: {warning}", err=True)
    return service


def _remind_default_browser(service: SwitchyardService) -> None:
    if service.config.check_default_browser and not default_browser.is_default_browser():
        typer.echo(
            "Warning: switchyard is not the default web browser. Run 'switchyard default --set', "
            "or 'switchyard settings --no-check-default' to stop this reminder.",
            err=True,
        )


def _picker_choices(browsers: list[Browser]) -> dict[str, tuple[str, Choice]]:
    """Number the browsers; their desktop actions get a letter, e.g. ``2a``."""
    choices: dict[str, tuple[str, Choice]] = {}
    for index, browser in enumerate(browsers, start=1):
        choices[str(index)] = (browser.name, Choice(browser=browser))
        for letter, action in zip(string.ascii_lowercase, browser.actions):
            choices[f"{index}{letter}"] = (f"{browser.name}: {action.name}", Choice(browser=browser, action=action))
    return choices


def _prompt_for_browser(browsers: list[Browser], url: str) -> Choice | None:
    if not browsers:
        raise SwitchyardError("No browsers available to pick from")

    choices = _picker_choices(browsers)
    typer.echo(f"Open {url} with:")
    for key, (label, _) in choices.items():
        typer.echo(f"  {key}. {label}")
    typer.echo("  0. Cancel")

    while True:
        key = typer.prompt("Browser", default="1").strip().lower()
        if key == "0":
            return None
        if key in choices:
            return choices[key][1]
        typer.echo("Pick one of the entries above, or 0 to cancel", err=True)


def _parse_condition(text: str) -> Condition:
    kind, sep, pattern = text.partition(":")
    valid = ", ".join(t.value for t in ConditionType)
    if not sep:
        raise RuleValidationError(f"Condition '{text}' must look like TYPE:PATTERN ({valid})")
    try:
        condition_type = ConditionType(kind.strip().lower())
    except ValueError:
        raise RuleValidationError(f"Unknown condition type '{kind}'. Use one of: {valid}") from None
    return Condition(type=condition_type, pattern=pattern)


@app.command("open")
def open_url(url: str) -> None:
    """Open URL in the browser chosen by the rules, or ask which one to use."""
    try:
        service = _build_service()
        _remind_default_browser(service)
        result = service.open_url(url, _prompt_for_browser)
        if result.browser is None:
            typer.echo("Cancelled")
            return
        via = f" ({result.desktop_action.name})" if result.desktop_action else ""
        typer.echo(f"Opened {result.action.url} in {result.browser.name}{via}")
    except SwitchyardError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("route")
def route_url(url: str) -> None:
    """Show what opening URL would do, without launching anything."""
    try:
        service = _build_service()
        _remind_default_browser(service)
        action = service.route(url)
        if isinstance(action, Launch):
            name = service.browser_name(action.browser_id)
            typer.echo(f"{action.url} -> {name} ({action.browser_id})")
        else:
            typer.echo(f"{action.url} -> <picker>")
    except SwitchyardError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("browsers")
def list_browsers(
    show_all: bool = typer.Option(False, "--all", help="Include browsers hidden from the picker"),
) -> None:
    """List installed browsers."""
    try:
        service = _build_service()
        browsers = service.list_browsers(include_hidden=show_all)
        if not browsers:
            typer.echo("No browsers found")
            return

        hidden = set(service.config.hidden_browsers)
        for browser in sorted(browsers, key=lambda b: b.name.lower()):
            marker = " [hidden]" if browser.id in hidden else ""
            typer.echo(f"{browser.id}: {browser.name}{marker}")
    except SwitchyardError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@rules_app.command("list")
def list_rules() -> None:
    """List rules in evaluation order."""
    try:
        service = _build_service()
        rules = service.config.rules
        if not rules:
            typer.echo("No rules configured")
            return

        for index, rule in enumerate(rules, start=1):
            summary = format_rule_summary(rule, service.browser_name(rule.browser))
            typer.echo(f"{index}. {rule.name or '<unnamed>'}: {summary}")
            if len(rule.conditions) > 1:
                for condition in rule.conditions:
                    typer.echo(f"     {condition.type.value}: {condition.pattern}")
    except SwitchyardError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@rules_app.command("add")
def add_rule(
    condition: list[str] = typer.Option(..., "--condition", "-c", help="TYPE:PATTERN, repeatable"),
    browser: str = typer.Option("", "--browser", "-b", help="Desktop id of the target browser"),
    logic: RuleLogic = typer.Option(RuleLogic.ALL, "--logic", help="Combine conditions with all/any"),
    always_ask: bool = typer.Option(False, "--always-ask", help="Show the picker when this rule matches"),
    name: str = typer.Option("", "--name", help="Label for the rule"),
) -> None:
    """Append a rule; rules are tried in order and the first match wins."""
    try:
        service = _build_service()
        rule = Rule(
            name=name,
            conditions=tuple(_parse_condition(text) for text in condition),
            logic=logic,
            browser=browser,
            always_ask=always_ask,
        )
        config = service.add_rule(rule)
        summary = format_rule_summary(rule, service.browser_name(rule.browser))
        typer.echo(f"Added rule #{len(config.rules)}: {summary}")
    except SwitchyardError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@rules_app.command("remove")
def remove_rule(index: int = typer.Argument(..., help="Rule number as shown by 'rules list'")) -> None:
    """Remove a rule by its position."""
    try:
        service = _build_service()
        removed = service.remove_rule(index)
        typer.echo(f"Removed rule #{index} ({removed.name or '<unnamed>'})")
    except SwitchyardError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@rules_app.command("edit")
def edit_rule(
    index: int = typer.Argument(..., help="Rule number as shown by 'rules list'"),
    condition: list[str] | None = typer.Option(
        None, "--condition", "-c", help="TYPE:PATTERN, repeatable; replaces all conditions"
    ),
    browser: str | None = typer.Option(None, "--browser", "-b", help="Desktop id of the target browser"),
    logic: RuleLogic | None = typer.Option(None, "--logic", help="Combine conditions with all/any"),
    always_ask: bool | None = typer.Option(
        None, "--always-ask/--no-always-ask", help="Show the picker when this rule matches"
    ),
    name: str | None = typer.Option(None, "--name", help="Label for the rule"),
) -> None:
    """Change a rule in place; options that are not given keep their value."""
    try:
        service = _build_service()
        changes: dict[str, object] = {}
        if condition:
            changes["conditions"] = tuple(_parse_condition(text) for text in condition)
        if browser is not None:
            changes["browser"] = browser
        if logic is not None:
            changes["logic"] = logic
        if always_ask is not None:
            changes["always_ask"] = always_ask
        if name is not None:
            changes["name"] = name

        rule = dataclasses.replace(service.get_rule(index), **changes)
        service.replace_rule(index, rule)
        summary = format_rule_summary(rule, service.browser_name(rule.browser))
        typer.echo(f"Updated rule #{index}: {summary}")
    except SwitchyardError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@rules_app.command("move")
def move_rule(
    index: int = typer.Argument(..., help="Rule number as shown by 'rules list'"),
    new_index: int = typer.Argument(..., help="Position to move it to; 1 is tried first"),
) -> None:
    """Change the order in which rules are tried."""
    try:
        service = _build_service()
        config = service.move_rule(index, new_index)
        moved = config.rules[new_index - 1]
        typer.echo(f"Moved rule #{index} ({moved.name or '<unnamed>'}) to #{new_index}")
    except SwitchyardError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("settings")
def settings(
    prompt: bool | None = typer.Option(
        None, "--prompt/--no-prompt", help="Show the picker when no rule matches"
    ),
    fallback: str | None = typer.Option(None, "--fallback", help="Browser used when not prompting"),
    clear_fallback: bool = typer.Option(False, "--clear-fallback", help="Unset the fallback browser"),
    hide: list[str] | None = typer.Option(None, "--hide", help="Hide a browser from the picker, repeatable"),
    unhide: list[str] | None = typer.Option(None, "--unhide", help="Show a hidden browser again, repeatable"),
    check_default: bool | None = typer.Option(
        None, "--check-default/--no-check-default", help="Remind when switchyard is not the default browser"
    ),
) -> None:
    """Show or change routing settings."""
    try:
        service = _build_service()
        config = service.update_settings(
            prompt_on_click=prompt,
            fallback_browser=fallback,
            clear_fallback=clear_fallback,
            hide=tuple(hide or ()),
            unhide=tuple(unhide or ()),
            check_default_browser=check_default,
        )
        fallback_name = (
            f"{service.browser_name(config.fallback_browser)} ({config.fallback_browser})"
            if config.fallback_browser
            else "<none>"
        )
        typer.echo(f"prompt_on_click: {str(config.prompt_on_click).lower()}")
        typer.echo(f"fallback_browser: {fallback_name}")
        typer.echo(f"hidden_browsers: {', '.join(config.hidden_browsers) or '<none>'}")
        typer.echo(f"check_default_browser: {str(config.check_default_browser).lower()}")
        typer.echo(f"config: {service.store.path}")
    except SwitchyardError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("default")
def default(
    set_default: bool = typer.Option(False, "--set", help="Make switchyard the default web browser"),
) -> None:
    """Report whether switchyard is the default web browser, or make it so."""
    try:
        if set_default:
            default_browser.set_as_default_browser()
            service = _build_service()
            service.update_settings(check_default_browser=False)
            typer.echo("switchyard is now the default web browser")
            return

        current = default_browser.current_default_browser()
        if current == f"{app_id()}.desktop":
            typer.echo("switchyard is the default web browser")
        else:
            typer.echo(f"Default web browser: {current or '<unknown>'}")
    except SwitchyardError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


def run() -> None:
    app()


if __name__ == "__main__":
    run()
