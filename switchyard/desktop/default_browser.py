"""Default web browser integration through xdg-settings."""

from __future__ import annotations

import subprocess

from switchyard.core.errors import DefaultBrowserError
from switchyard.desktop.discovery import app_id
from switchyard.desktop.launcher import host_command


def _run_xdg_settings(*args: str) -> subprocess.CompletedProcess[str] | None:
    try:
        return subprocess.run(
            host_command(["xdg-settings", *args]),
            check=False,
            capture_output=True,
            text=True,
        )
    except FileNotFoundError:
        return None


def current_default_browser() -> str | None:
    result = _run_xdg_settings("get", "default-web-browser")
    if result is None or result.returncode != 0:
        return None
    return result.stdout.strip() or None


def is_default_browser() -> bool:
    return current_default_browser() == f"{app_id()}.desktop"


def set_as_default_browser() -> None:
    desktop_id = f"{app_id()}.desktop"
    result = _run_xdg_settings("set", "default-web-browser", desktop_id)
    if result is None:
        raise DefaultBrowserError("xdg-settings is not installed")
    if result.returncode != 0:
        stderr = (result.stderr or "").strip()
        raise DefaultBrowserError(f"xdg-settings could not set {desktop_id} as default browser: {stderr}")
