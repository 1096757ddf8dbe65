"""High-level overlay facade.

:class:`HudOverlay` builds the store, notification bus, host client, event
pipeline and keyboard mapping once and wires them together. It also exposes
the UI intents the presentation layer triggers (menus, settings, focus).
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from enum import StrEnum
from typing import Any

import aiohttp

from pyhud._constants import DEFAULT_SETTINGS, DEFAULT_STATE
from pyhud._host import HostClient, HostMessage, HostSender
from pyhud.bus import NotificationBus, NotificationListener
from pyhud.config import HudConfig
from pyhud.ingestion.pipeline import EventPipeline
from pyhud.keyboard import KeyboardShortcuts
from pyhud.state.store import ReactiveStore
from pyhud.state.validators import register_default_validators
from pyhud.theme import ThemeCollaborator

_logger = logging.getLogger(__name__)

_FOCUS_GLOW_COLOR = "#00ffff"


class MenuType(StrEnum):
    MAIN = "main"
    SETTINGS = "settings"


_MENU_KEYS: Mapping[MenuType, str] = {
    MenuType.MAIN: "menuOpen",
    MenuType.SETTINGS: "settingsMenuOpen",
}


class HudOverlay:
    """Composition root of the overlay core.

    Usage::

        async with HudOverlay(HudConfig.from_env()) as hud:
            hud.bus.subscribe("moneyUpdated", on_money)
            hud.handle_message("nui-game-internal", {"action": "updatemoney", "cash": 500})

    Parameters
    ----------
    config : HudConfig | None
        Overlay configuration. Defaults to :meth:`HudConfig.from_env`.
    theme : ThemeCollaborator | None
        Optional visual-feedback layer.
    host : HostSender | None
        Host-bound request channel. Defaults to a :class:`HostClient`.
    http_session : aiohttp.ClientSession | None
        Session for the default host client. The overlay does not close a
        session it did not create.
    """

    def __init__(
        self,
        config: HudConfig | None = None,
        *,
        theme: ThemeCollaborator | None = None,
        host: HostSender | None = None,
        http_session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config or HudConfig.from_env()
        self._theme = theme

        self.store = ReactiveStore(error_threshold=self._config.store_error_threshold)
        self.store.initialize(DEFAULT_STATE)
        register_default_validators(self.store)

        self.bus = NotificationBus()
        self._owned_host: HostClient | None = None
        if host is None:
            self._owned_host = HostClient(self._config, http_session)
            host = self._owned_host
        self.host: HostSender = host

        self.pipeline = EventPipeline(self.store, self.bus, self._config, theme=theme, host=self.host)
        self.keyboard = KeyboardShortcuts(
            self.host,
            self.bus,
            host_environment=self._config.host_environment,
        )

    @property
    def config(self) -> HudConfig:
        return self._config

    async def __aenter__(self) -> HudOverlay:
        self.pipeline.attach(asyncio.get_running_loop())
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    async def close(self) -> None:
        self.pipeline.detach()
        if self._owned_host is not None:
            await self._owned_host.close()

    # ------------------------------------------------------------------
    # Inbound
    # ------------------------------------------------------------------

    def handle_message(self, origin: str, data: Any) -> bool:
        """Feed one raw host message into the pipeline."""
        return self.pipeline.ingress(HostMessage(origin=origin, data=data))

    def key_down(self, key: str) -> bool:
        return self.keyboard.handle_key_down(key)

    def key_up(self, key: str) -> None:
        self.keyboard.handle_key_up(key)

    def subscribe(self, name: str, listener: NotificationListener) -> Any:
        """Shortcut for ``bus.subscribe``."""
        return self.bus.subscribe(name, listener)

    # ------------------------------------------------------------------
    # Menus
    # ------------------------------------------------------------------

    def open_menu(self, menu: MenuType | str = MenuType.MAIN) -> None:
        menu = MenuType(menu)
        self.store.set(_MENU_KEYS[menu], True)
        _logger.debug("Menu opened: %s", menu)
        self._menu_state_changed(True)

    def close_menu(self, menu: MenuType | str = MenuType.MAIN) -> None:
        menu = MenuType(menu)
        self.store.set(_MENU_KEYS[menu], False)
        _logger.debug("Menu closed: %s", menu)
        self._menu_state_changed(False)

    def close_all_menus(self) -> None:
        for menu, key in _MENU_KEYS.items():
            if self.store.get(key):
                self.close_menu(menu)

    def _menu_state_changed(self, is_open: bool) -> None:
        self.set_nui_focus(is_open, is_open)
        if self._theme is not None and is_open:
            self._theme.trigger_glow("hud-container", _FOCUS_GLOW_COLOR, 1.5)

    def set_nui_focus(self, focus: bool, cursor: bool) -> None:
        self.pipeline.send_to_host("setNuiFocus", {"focus": focus, "cursor": cursor})

    # ------------------------------------------------------------------
    # Settings and system
    # ------------------------------------------------------------------

    def update_settings(self, changes: Mapping[str, Any]) -> bool:
        """Merge *changes* into the stored settings."""
        settings = self.store.get("settings") or {}
        settings.update(changes)
        return self.store.set("settings", settings)

    def reset_settings(self) -> bool:
        ok = self.update_settings(DEFAULT_SETTINGS)
        _logger.info("Settings reset to defaults")
        return ok

    def save_settings(self) -> None:
        self.pipeline.send_to_host("saveSettings", self.store.get("settings") or {})
        _logger.info("Settings saved")

    def restart_hud(self) -> None:
        self.pipeline.send_to_host("restartHud", {})
        if self._theme is not None:
            self._theme.trigger_glow("hud-container", _FOCUS_GLOW_COLOR, 2.0)
        _logger.info("HUD restart requested")
