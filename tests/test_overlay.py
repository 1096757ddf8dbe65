from __future__ import annotations

import asyncio
from typing import Any

import pytest

from pyhud.config import HudConfig
from pyhud.overlay import HudOverlay, MenuType


class _RecordingHost:
    def __init__(self) -> None:
        self.sent: list[tuple[str, Any]] = []

    def send(self, action: str, payload: Any = None) -> None:
        self.sent.append((action, payload))


def _overlay(**config: Any) -> tuple[HudOverlay, _RecordingHost]:
    host = _RecordingHost()
    return HudOverlay(HudConfig(**config), host=host), host


def test_overlay_starts_with_default_state() -> None:
    hud, _host = _overlay()

    assert hud.store.get("currentTheme") == "cyberpunk"
    assert hud.store.get("cash") == 0
    assert hud.store.get("playerStats")["health"] == 100


def test_handle_message_reaches_subscribers() -> None:
    hud, _host = _overlay()
    received: list[Any] = []
    hud.subscribe("moneyUpdated", lambda _name, payload: received.append(payload))

    assert hud.handle_message("nui-game-internal", {"action": "updatemoney", "cash": 500, "bank": 1200})

    assert received == [{"cash": 500, "bank": 1200}]
    assert hud.store.get("bank") == 1200


def test_open_and_close_menu_notify_store_and_focus_host() -> None:
    hud, host = _overlay()
    changes: list[tuple[Any, Any, str]] = []
    hud.store.subscribe("settingsMenuOpen", lambda new, old, key: changes.append((new, old, key)))

    hud.open_menu(MenuType.SETTINGS)
    hud.close_menu("settings")

    assert changes == [(True, False, "settingsMenuOpen"), (False, True, "settingsMenuOpen")]
    assert host.sent == [
        ("setNuiFocus", {"focus": True, "cursor": True}),
        ("setNuiFocus", {"focus": False, "cursor": False}),
    ]


def test_close_all_menus_closes_only_open_ones() -> None:
    hud, host = _overlay()
    hud.open_menu()
    host.sent.clear()

    hud.close_all_menus()

    assert hud.store.get("menuOpen") is False
    assert host.sent == [("setNuiFocus", {"focus": False, "cursor": False})]


def test_settings_update_reset_and_save() -> None:
    hud, host = _overlay()

    assert hud.update_settings({"hudOpacity": 0.5, "debugMode": True})
    assert hud.store.get("settings")["hudOpacity"] == 0.5

    hud.save_settings()
    assert host.sent[-1][0] == "saveSettings"
    assert host.sent[-1][1]["debugMode"] is True

    assert hud.reset_settings()
    assert hud.store.get("settings")["hudOpacity"] == 1.0
    assert hud.store.get("settings")["debugMode"] is False


def test_restart_hud_sends_request() -> None:
    hud, host = _overlay()

    hud.restart_hud()

    assert host.sent == [("restartHud", {})]


def test_key_down_uses_environment() -> None:
    hud, host = _overlay(host_environment=True)

    assert hud.key_down("F1") is False
    assert hud.key_down("Escape") is True
    assert host.sent == [("closeAllMenus", {})]


@pytest.mark.asyncio
async def test_context_manager_attaches_loop_handler() -> None:
    loop = asyncio.get_running_loop()
    previous = loop.get_exception_handler()

    async with HudOverlay(HudConfig(), host=_RecordingHost()) as hud:
        loop.call_exception_handler({"message": "stray failure", "exception": RuntimeError("x")})
        assert hud.pipeline.error_count == 1

    assert loop.get_exception_handler() is previous
