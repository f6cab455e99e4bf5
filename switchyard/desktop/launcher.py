"""Browser process launching from desktop entry Exec lines."""

from __future__ import annotations

import logging
import re
import shlex
import subprocess
import threading
from collections.abc import Sequence

from switchyard.core.errors import LaunchError
from switchyard.core.model import Browser, DesktopAction
from switchyard.desktop.discovery import in_flatpak

LOGGER = logging.getLogger(__name__)

_URL_FIELD_CODES = frozenset({"%u", "%U", "%f", "%F"})
_FIELD_CODE_RE = re.compile(r"%[uUfFick%]")


def host_command(args: Sequence[str]) -> list[str]:
    """Wrap ``args`` so they run on the host when inside a Flatpak sandbox."""
    if in_flatpak() and (not args or args[0] != "flatpak-spawn"):
        return ["flatpak-spawn", "--host", *args]
    return list(args)


def build_command(exec_line: str, url: str) -> list[str]:
    """Expand an Exec line for ``url``.

    URL field codes are replaced with the URL, icon/name/location codes are
    dropped, ``%%`` becomes ``%``, and the URL is appended when the line has
    no URL field code.
    """
    try:
        tokens = shlex.split(exec_line)
    except ValueError:
        tokens = exec_line.split()

    has_url_code = False

    def _expand(match: re.Match[str]) -> str:
        nonlocal has_url_code
        code = match.group(0)
        if code in _URL_FIELD_CODES:
            has_url_code = True
            return url
        if code == "%%":
            return "%"
        return ""

    # One pass per token, so percent-escapes inside the URL are left alone.
    args: list[str] = []
    for token in tokens:
        token = _FIELD_CODE_RE.sub(_expand, token)
        if token:
            args.append(token)

    if not has_url_code and url:
        args.append(url)
    return args


def _reap(process: subprocess.Popen[bytes]) -> None:
    process.wait()


class DesktopLauncher:
    def spawn(self, args: Sequence[str]) -> subprocess.Popen[bytes]:
        try:
            process = subprocess.Popen(
                list(args),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as exc:
            raise LaunchError(f"Could not start {args[0]}: {exc}") from exc
        threading.Thread(target=_reap, args=(process,), daemon=True).start()
        return process

    def launch(self, browser: Browser, url: str) -> bool:
        return self._run(browser.id, browser.exec, url)

    def launch_action(self, browser: Browser, action: DesktopAction, url: str) -> bool:
        return self._run(f"{browser.id} action {action.id}", action.exec, url)

    def _run(self, label: str, exec_line: str, url: str) -> bool:
        args = build_command(exec_line, url)
        if not args:
            LOGGER.error("%s has an empty Exec line", label)
            return False

        command = host_command(args)
        LOGGER.info("Running: %s", " ".join(command))
        try:
            self.spawn(command)
        except LaunchError as exc:
            LOGGER.error("Error launching %s: %s", label, exc)
            return False
        return True
