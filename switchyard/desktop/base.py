"""Desktop collaborator interfaces."""

from __future__ import annotations

from typing import Protocol

from switchyard.core.model import Browser, DesktopAction


class Launcher(Protocol):
    def launch(self, browser: Browser, url: str) -> bool:
        """Start ``browser`` on ``url`` without waiting; return whether it started."""

    def launch_action(self, browser: Browser, action: DesktopAction, url: str) -> bool:
        """Start one of ``browser``'s desktop actions on ``url``."""


class BrowserSource(Protocol):
    def __call__(self) -> list[Browser]:
        """Return the browsers registered on this system."""
