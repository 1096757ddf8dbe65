"""Keyboard shortcuts for the overlay.

Escape always asks the host to close every menu. The function-key shortcuts
are a development convenience and are ignored inside the host environment.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType

from pyhud._host import HostSender
from pyhud.bus import NotificationBus

_logger = logging.getLogger(__name__)

ESCAPE = "Escape"

DEV_SHORTCUTS: Mapping[str, str] = MappingProxyType(
    {
        "F1": "toggleHud",
        "F2": "openMenu",
        "F3": "toggleGps",
    }
)


class KeyboardShortcuts:
    """Maps key presses to host-bound requests and local notifications."""

    def __init__(
        self,
        host: HostSender,
        bus: NotificationBus,
        *,
        host_environment: bool,
        shortcuts: Mapping[str, str] = DEV_SHORTCUTS,
    ) -> None:
        self._host = host
        self._bus = bus
        self._host_environment = host_environment
        self._shortcuts = dict(shortcuts)

    def handle_key_down(self, key: str) -> bool:
        """Handle a key press. Returns whether the key was consumed."""
        if key == ESCAPE:
            self._host.send("closeAllMenus", {})
            self._bus.emit("escapePressed", None)
            return True

        if self._host_environment:
            return False

        action = self._shortcuts.get(key)
        if action is None:
            return False
        _logger.debug("Shortcut %s -> %s", key, action)
        self._host.send(action, {})
        return True

    def handle_key_up(self, key: str) -> None:
        self._bus.emit("keyReleased", {"key": key})
