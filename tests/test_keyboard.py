from __future__ import annotations

from typing import Any

from pyhud.bus import NotificationBus
from pyhud.keyboard import KeyboardShortcuts


class _RecordingHost:
    def __init__(self) -> None:
        self.sent: list[tuple[str, Any]] = []

    def send(self, action: str, payload: Any = None) -> None:
        self.sent.append((action, payload))


def _keyboard(*, host_environment: bool) -> tuple[KeyboardShortcuts, _RecordingHost, list[tuple[str, Any]]]:
    host = _RecordingHost()
    bus = NotificationBus()
    notifications: list[tuple[str, Any]] = []
    bus.subscribe("*", lambda name, payload: notifications.append((name, payload)))
    return KeyboardShortcuts(host, bus, host_environment=host_environment), host, notifications


def test_escape_always_closes_menus() -> None:
    for host_environment in (False, True):
        keyboard, host, notifications = _keyboard(host_environment=host_environment)

        assert keyboard.handle_key_down("Escape") is True
        assert host.sent == [("closeAllMenus", {})]
        assert notifications == [("escapePressed", None)]


def test_function_keys_in_development() -> None:
    keyboard, host, _notifications = _keyboard(host_environment=False)

    assert keyboard.handle_key_down("F1")
    assert keyboard.handle_key_down("F2")
    assert keyboard.handle_key_down("F3")
    assert keyboard.handle_key_down("F4") is False

    assert [action for action, _ in host.sent] == ["toggleHud", "openMenu", "toggleGps"]


def test_function_keys_disabled_inside_host() -> None:
    keyboard, host, _notifications = _keyboard(host_environment=True)

    assert keyboard.handle_key_down("F1") is False
    assert host.sent == []


def test_key_up_is_broadcast() -> None:
    keyboard, _host, notifications = _keyboard(host_environment=False)

    keyboard.handle_key_up("F2")

    assert notifications == [("keyReleased", {"key": "F2"})]
