"""Static defaults shared across pyhud modules."""

from __future__ import annotations

from typing import Any

from pyhud.state.events import ActionType, RateLimitRule

DEFAULT_RESOURCE_NAME = "qb-hud"

HOST_ORIGIN = "nui-game-internal"

DEV_ORIGIN_MARKERS: tuple[str, ...] = ("localhost", "127.0.0.1")

# High-frequency actions only; anything absent is unlimited.
DEFAULT_RATE_LIMITS: dict[str, RateLimitRule] = {
    ActionType.HUD_TICK.value: RateLimitRule(max_events=100, window_ms=1000),
    ActionType.UPDATE.value: RateLimitRule(max_events=60, window_ms=1000),
    ActionType.TRIGGER_GLOW.value: RateLimitRule(max_events=10, window_ms=1000),
    ActionType.VALUE_CHANGED.value: RateLimitRule(max_events=20, window_ms=1000),
}

THEME_NAMES: tuple[str, ...] = ("cyberpunk", "synthwave", "matrix")

HUD_POSITIONS: tuple[str, ...] = ("top-left", "top-right", "bottom-left", "bottom-right")

DEFAULT_PLAYER_STATS: dict[str, Any] = {
    "health": 100,
    "armor": 0,
    "hunger": 100,
    "thirst": 100,
    "stress": 0,
    "stamina": 100,
    "oxygen": 100,
}

DEFAULT_VEHICLE_STATS: dict[str, Any] = {
    "speed": 0,
    "engine": 100,
    "nos": 0,
    "fuel": 100,
    "altitude": 0,
    "seatbelt": False,
    "nitroActive": False,
    "cruise": False,
}

DEFAULT_HUD_STATE: dict[str, Any] = {
    "visible": True,
    "playerDead": False,
    "armed": False,
    "talking": False,
    "radio": 0,
    "voice": 1,
    "parachute": -1,
    "dev": False,
}

DEFAULT_SETTINGS: dict[str, Any] = {
    "hudVisible": True,
    "showHealth": True,
    "showArmor": True,
    "showHunger": True,
    "showThirst": True,
    "showStress": True,
    "showStamina": True,
    "showOxygen": True,
    "hudOpacity": 1.0,
    "performanceMode": False,
    "animationsEnabled": True,
    "debugMode": False,
}

DEFAULT_STATE: dict[str, Any] = {
    "playerStats": DEFAULT_PLAYER_STATS,
    "vehicleStats": DEFAULT_VEHICLE_STATS,
    "hudState": DEFAULT_HUD_STATE,
    "settings": DEFAULT_SETTINGS,
    "currentTheme": "cyberpunk",
    "menuOpen": False,
    "settingsMenuOpen": False,
    "hudVisible": True,
    "inVehicle": False,
    "compassVisible": False,
    "compassHeading": 0,
    "gpsActive": False,
    "gpsPosition": "top-right",
    "gpsTheme": "cyberpunk",
    "cash": 0,
    "bank": 0,
    "neonIntensity": 0.8,
    "animationsEnabled": True,
}
