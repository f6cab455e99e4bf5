"""Browser discovery from XDG desktop entries."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from switchyard.core.model import Browser, Config, DesktopAction

DEFAULT_APP_ID = "io.github.alyraffauf.Switchyard"
_HTTP_HANDLER_MIME = "x-scheme-handler/http"
_ACTION_GROUP_PREFIX = "Desktop Action "
LOGGER = logging.getLogger(__name__)


def app_id() -> str:
    return os.environ.get("FLATPAK_ID") or DEFAULT_APP_ID


def in_flatpak() -> bool:
    return bool(os.environ.get("FLATPAK_ID"))


def application_dirs() -> list[Path]:
    dirs: list[Path] = []

    def _add(path: Path) -> None:
        if path not in dirs:
            dirs.append(path)

    home = Path.home()
    user_dirs = [
        home / ".local/share/applications",
        home / ".local/share/flatpak/exports/share/applications",
    ]
    system_dirs = [
        Path("/usr/share/applications"),
        Path("/var/lib/flatpak/exports/share/applications"),
        Path("/var/lib/snapd/desktop/applications"),
    ]

    xdg_data_dirs = os.environ.get("XDG_DATA_DIRS", "")
    for entry in xdg_data_dirs.split(":"):
        if entry:
            _add(Path(entry) / "applications")

    # The sandbox grants read access to the host's application directories.
    if in_flatpak():
        for path in [user_dirs[0], user_dirs[1], *system_dirs]:
            _add(path)

    if not dirs:
        for path in [*user_dirs, Path("/usr/local/share/applications"), *system_dirs]:
            _add(path)

    return dirs


def _desktop_actions(entry: dict[str, str], groups: dict[str, dict[str, str]]) -> tuple[DesktopAction, ...]:
    # Actions= names the groups to offer and their order; without it every
    # action group in the file is offered.
    if "Actions" in entry:
        action_ids = [a.strip() for a in entry["Actions"].split(";") if a.strip()]
    else:
        action_ids = list(groups)

    actions: list[DesktopAction] = []
    for action_id in action_ids:
        group = groups.get(action_id, {})
        name = group.get("Name", "")
        exec_line = group.get("Exec", "")
        if name and exec_line:
            actions.append(DesktopAction(id=action_id, name=name, exec=exec_line))
    return tuple(actions)


def parse_desktop_entry(path: Path, desktop_id: str) -> Browser | None:
    """Parse a desktop entry, returning a ``Browser`` for web URL handlers only.

    Keys are read from the ``[Desktop Entry]`` group and from
    ``[Desktop Action <id>]`` groups. When a key repeats within a group the
    last line wins.
    """
    try:
        content = path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        LOGGER.debug("Skipping unreadable desktop entry %s: %s", path, exc)
        return None

    entry: dict[str, str] = {}
    action_groups: dict[str, dict[str, str]] = {}
    group: dict[str, str] | None = None
    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("["):
            header = line.strip("[]").strip()
            if header == "Desktop Entry":
                group = entry
            elif header.startswith(_ACTION_GROUP_PREFIX):
                action_id = header[len(_ACTION_GROUP_PREFIX):].strip()
                group = action_groups.setdefault(action_id, {})
            else:
                group = None
            continue
        if group is None or "=" not in line:
            continue
        key, value = line.split("=", 1)
        # Localized keys like Name[de] are distinct keys and never used.
        group[key.strip()] = value.strip()

    if entry.get("NoDisplay", "").lower() == "true":
        return None
    if _HTTP_HANDLER_MIME not in entry.get("MimeType", ""):
        return None
    name = entry.get("Name", "")
    exec_line = entry.get("Exec", "")
    if not name or not exec_line:
        return None

    return Browser(
        id=desktop_id,
        name=name,
        exec=exec_line,
        icon=entry.get("Icon", ""),
        actions=_desktop_actions(entry, action_groups),
    )


def discover_browsers(dirs: Iterable[Path] | None = None) -> list[Browser]:
    """Return installed web browsers, excluding this application itself."""
    own_id = f"{app_id()}.desktop"
    seen: set[str] = set()
    browsers: list[Browser] = []

    for directory in dirs if dirs is not None else application_dirs():
        if not directory.is_dir():
            continue
        for path in sorted(directory.iterdir()):
            if path.suffix != ".desktop" or path.name in seen:
                continue
            browser = parse_desktop_entry(path, path.name)
            if browser is None or browser.id == own_id:
                continue
            seen.add(path.name)
            browsers.append(browser)

    return browsers


def picker_browsers(browsers: Iterable[Browser], config: Config) -> list[Browser]:
    """Browsers offered in the picker: visible ones, sorted by display name."""
    hidden = set(config.hidden_browsers)
    return sorted((b for b in browsers if b.id not in hidden), key=lambda b: b.name.lower())
