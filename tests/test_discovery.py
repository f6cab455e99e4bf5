from __future__ import annotations

from pathlib import Path

import pytest

from switchyard.core.model import Browser, Config, DesktopAction
from switchyard.desktop.discovery import (
    app_id,
    application_dirs,
    discover_browsers,
    parse_desktop_entry,
    picker_browsers,
)


def _entry(directory: Path, name: str, content: str) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_text(content, encoding="utf-8")
    return path


FIREFOX_ENTRY = """[Desktop Entry]
Name=Firefox
Name[de]=Firefox Webbrowser
Exec=firefox %u
Icon=firefox
MimeType=text/html;x-scheme-handler/http;x-scheme-handler/https;

[Desktop Action new-private-window]
Name=New Private Window
Exec=firefox --private-window %u
"""


def test_parse_browser_entry(tmp_path: Path) -> None:
    path = _entry(tmp_path, "firefox.desktop", FIREFOX_ENTRY)
    browser = parse_desktop_entry(path, "firefox.desktop")
    assert browser == Browser(
        id="firefox.desktop",
        name="Firefox",
        exec="firefox %u",
        icon="firefox",
        actions=(
            DesktopAction(id="new-private-window", name="New Private Window", exec="firefox --private-window %u"),
        ),
    )


@pytest.mark.parametrize(
    "content",
    [
        "[Desktop Entry]\nName=Editor\nExec=editor %F\nMimeType=text/plain;\n",
        "[Desktop Entry]\nName=Hidden\nExec=hidden %u\nMimeType=x-scheme-handler/http;\nNoDisplay=true\n",
        "[Desktop Entry]\nExec=noname %u\nMimeType=x-scheme-handler/http;\n",
        "[Desktop Entry]\nName=NoExec\nMimeType=x-scheme-handler/http;\n",
        "[Other Group]\nName=Wrong\nExec=wrong %u\nMimeType=x-scheme-handler/http;\n",
    ],
)
def test_non_browser_entries_are_skipped(tmp_path: Path, content: str) -> None:
    path = _entry(tmp_path, "app.desktop", content)
    assert parse_desktop_entry(path, "app.desktop") is None


def test_discover_skips_own_entry_and_duplicates(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("FLATPAK_ID", raising=False)
    user_dir = tmp_path / "user"
    system_dir = tmp_path / "system"
    _entry(user_dir, "firefox.desktop", FIREFOX_ENTRY.replace("Name=Firefox\n", "Name=My Firefox\n"))
    _entry(system_dir, "firefox.desktop", FIREFOX_ENTRY)
    _entry(
        system_dir,
        f"{app_id()}.desktop",
        "[Desktop Entry]\nName=Switchyard\nExec=switchyard open %u\nMimeType=x-scheme-handler/http;\n",
    )
    _entry(
        system_dir,
        "chromium.desktop",
        "[Desktop Entry]\nName=Chromium\nExec=chromium %U\nMimeType=x-scheme-handler/http;\n",
    )
    _entry(system_dir, "notes.txt", "not a desktop entry")

    browsers = discover_browsers([user_dir, system_dir, tmp_path / "missing"])
    assert [b.id for b in browsers] == ["firefox.desktop", "chromium.desktop"]
    assert browsers[0].name == "My Firefox"


def test_app_id_uses_flatpak_id(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FLATPAK_ID", "io.github.alyraffauf.Switchyard.Devel")
    assert app_id() == "io.github.alyraffauf.Switchyard.Devel"
    monkeypatch.delenv("FLATPAK_ID")
    assert app_id() == "io.github.alyraffauf.Switchyard"


def test_application_dirs_from_xdg_data_dirs(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("FLATPAK_ID", raising=False)
    monkeypatch.setenv("XDG_DATA_DIRS", "/opt/share::/usr/share")
    assert application_dirs() == [Path("/opt/share/applications"), Path("/usr/share/applications")]


def test_application_dirs_fallback(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("FLATPAK_ID", raising=False)
    monkeypatch.delenv("XDG_DATA_DIRS", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    dirs = application_dirs()
    assert dirs[0] == tmp_path / ".local/share/applications"
    assert Path("/usr/share/applications") in dirs
    assert Path("/var/lib/snapd/desktop/applications") in dirs


def test_application_dirs_in_flatpak_add_host_paths(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FLATPAK_ID", "io.github.alyraffauf.Switchyard")
    monkeypatch.setenv("XDG_DATA_DIRS", "/app/share")
    dirs = application_dirs()
    assert dirs[0] == Path("/app/share/applications")
    assert Path("/var/lib/flatpak/exports/share/applications") in dirs


def test_picker_browsers_hides_and_sorts() -> None:
    browsers = [
        Browser(id="z.desktop", name="zen", exec="zen"),
        Browser(id="b.desktop", name="Brave", exec="brave"),
        Browser(id="h.desktop", name="Hidden", exec="hidden"),
    ]
    visible = picker_browsers(browsers, Config(hidden_browsers=("h.desktop",)))
    assert [b.id for b in visible] == ["b.desktop", "z.desktop"]


def test_actions_key_selects_and_orders_actions(tmp_path: Path) -> None:
    content = """[Desktop Entry]
Name=Chromium
Exec=chromium %U
MimeType=x-scheme-handler/http;
Actions=new-private-window;new-window;

[Desktop Action new-window]
Name=New Window
Exec=chromium --new-window

[Desktop Action unlisted]
Name=Unlisted
Exec=chromium --unlisted

[Desktop Action new-private-window]
Name=New Incognito Window
Exec=chromium --incognito

[Desktop Action broken]
Name=No Exec
"""
    browser = parse_desktop_entry(_entry(tmp_path, "chromium.desktop", content), "chromium.desktop")
    assert browser is not None
    assert [(a.id, a.name) for a in browser.actions] == [
        ("new-private-window", "New Incognito Window"),
        ("new-window", "New Window"),
    ]


def test_repeated_keys_last_line_wins(tmp_path: Path) -> None:
    content = (
        "[Desktop Entry]\n# comment\nName=Old\nExec=old %u\nName=Browser\nExec=browser %u\n"
        "MimeType=x-scheme-handler/http;\n"
    )
    browser = parse_desktop_entry(_entry(tmp_path, "b.desktop", content), "b.desktop")
    assert browser is not None
    assert (browser.name, browser.exec) == ("Browser", "browser %u")
