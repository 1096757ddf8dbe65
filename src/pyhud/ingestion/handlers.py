"""Per-action handlers.

Each handler turns one accepted host event into store writes and an outbound
notification:

- parse the payload into its typed model (malformed fields become ``None``)
- clamp numeric fields into their bounds, falling back to the stored value
- write to the store silently
- optionally ask the theme collaborator for visual feedback
- emit a semantically-named notification

Handlers never touch the queue. Exceptions propagate to the pipeline, which
counts them as handler faults.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from pyhud._constants import DEFAULT_HUD_STATE, DEFAULT_PLAYER_STATS, DEFAULT_VEHICLE_STATS
from pyhud._redact import redact_for_log
from pyhud.config import HudConfig
from pyhud.ingestion.normalize import clamp_with_fallback
from pyhud.models import (
    CompassPayload,
    CriticalAlertPayload,
    EffectsPayload,
    GlowPayload,
    GpsLocationPayload,
    GpsPositionPayload,
    GpsThemePayload,
    GpsTogglePayload,
    HeadingPayload,
    HudTickPayload,
    MoneyPayload,
    NeonIntensityPayload,
    ThemePayload,
    ValueChangedPayload,
    VehiclePayload,
)
from pyhud.state.events import ActionType, InboundEvent
from pyhud.state.store import ReactiveStore
from pyhud.theme import DEPOSIT_COLOR, WITHDRAWAL_COLOR, ThemeCollaborator, palette_color

_logger = logging.getLogger(__name__)

# (low, high) bounds for clamped numeric fields.
STAT_BOUNDS = (0, 100)
SPEED_BOUNDS = (0, 999)
ALTITUDE_BOUNDS = (-1000, 100_000)
HEADING_BOUNDS = (0, 360)
RADIO_BOUNDS = (0, 999)
VOICE_BOUNDS = (0, 3)
PARACHUTE_BOUNDS = (-1, 3)
NEON_BOUNDS = (0, 2)

_CRITICAL_LOW_STATS = ("health", "armor", "hunger", "thirst", "oxygen")
_MONEY_ACCOUNTS = ("cash", "bank")
_BASE_ANIMATION_MS = 500.0


@dataclass(frozen=True)
class HandlerContext:
    """Collaborators a handler may use."""

    store: ReactiveStore
    emit: Callable[[str, Any], Any]
    config: HudConfig
    theme: ThemeCollaborator | None = None


Handler = Callable[[HandlerContext, InboundEvent], None]


def _clamp(value: Any, fallback: Any, bounds: tuple[float, float]) -> Any:
    low, high = bounds
    return clamp_with_fallback(value, fallback, low=low, high=high)


def _stored_section(store: ReactiveStore, key: str, defaults: Mapping[str, Any]) -> dict[str, Any]:
    """Stored mapping for *key* layered over *defaults*."""
    current = store.get(key)
    merged = dict(defaults)
    if isinstance(current, dict):
        merged.update(current)
    return merged


def _flag(value: bool | None, previous: Any) -> Any:
    return previous if value is None else value


# ---------------------------------------------------------------------------
# HUD display
# ---------------------------------------------------------------------------


def check_critical_values(ctx: HandlerContext, payload: HudTickPayload) -> None:
    """Ask the theme layer to flash stats that crossed their critical threshold."""
    if ctx.theme is None:
        return
    for stat in _CRITICAL_LOW_STATS:
        value = getattr(payload, stat)
        if value is not None and value <= ctx.config.critical_threshold:
            ctx.theme.trigger_critical_alert(f".{stat}-indicator", value)
    if payload.stress is not None and payload.stress >= ctx.config.stress_critical_threshold:
        ctx.theme.trigger_critical_alert(".stress-indicator", payload.stress)


def handle_hud_tick(ctx: HandlerContext, event: InboundEvent) -> None:
    payload = HudTickPayload.model_validate(event.payload)
    store = ctx.store

    previous_stats = _stored_section(store, "playerStats", DEFAULT_PLAYER_STATS)
    player_stats = {
        stat: _clamp(getattr(payload, stat), previous_stats[stat], STAT_BOUNDS)
        for stat in ("health", "armor", "hunger", "thirst", "stress", "oxygen")
    }
    # Stamina mirrors oxygen; the host does not send it separately.
    player_stats["stamina"] = _clamp(payload.oxygen, previous_stats["stamina"], STAT_BOUNDS)

    previous_hud = _stored_section(store, "hudState", DEFAULT_HUD_STATE)
    visible = payload.show is not False
    hud_state = {
        "visible": visible,
        "playerDead": payload.player_dead is True,
        "armed": payload.armed is True,
        "talking": payload.talking is True,
        "radio": _clamp(payload.radio, previous_hud["radio"], RADIO_BOUNDS),
        "voice": _clamp(payload.voice, previous_hud["voice"], VOICE_BOUNDS),
        "parachute": _clamp(payload.parachute, previous_hud["parachute"], PARACHUTE_BOUNDS),
        "dev": payload.dev is True,
    }

    updates: dict[str, Any] = {
        "playerStats": player_stats,
        "hudState": hud_state,
        "hudVisible": visible,
    }

    if payload.has_vehicle_fields:
        vehicle_stats = _stored_section(store, "vehicleStats", DEFAULT_VEHICLE_STATS)
        vehicle_stats.update(
            {
                "speed": _clamp(payload.speed, vehicle_stats["speed"], SPEED_BOUNDS),
                "engine": _clamp(payload.engine, vehicle_stats["engine"], STAT_BOUNDS),
                "nos": _clamp(payload.nos, vehicle_stats["nos"], STAT_BOUNDS),
                "nitroActive": payload.nitro_active is True,
                "cruise": payload.cruise is True,
            }
        )
        updates["vehicleStats"] = vehicle_stats

    store.update_multiple(updates, silent=True)
    check_critical_values(ctx, payload)
    ctx.emit("hudDataUpdated", event.payload)


def handle_vehicle(ctx: HandlerContext, event: InboundEvent) -> None:
    payload = VehiclePayload.model_validate(event.payload)
    vehicle_stats = _stored_section(ctx.store, "vehicleStats", DEFAULT_VEHICLE_STATS)
    vehicle_stats.update(
        {
            "speed": _clamp(payload.speed, vehicle_stats["speed"], SPEED_BOUNDS),
            "fuel": _clamp(payload.fuel, vehicle_stats["fuel"], STAT_BOUNDS),
            "altitude": _clamp(payload.altitude, vehicle_stats["altitude"], ALTITUDE_BOUNDS),
            "seatbelt": payload.seatbelt is True,
        }
    )
    ctx.store.update_multiple({"inVehicle": payload.show is True, "vehicleStats": vehicle_stats}, silent=True)

    if (
        ctx.theme is not None
        and payload.fuel is not None
        and vehicle_stats["fuel"] <= ctx.config.fuel_critical_threshold
    ):
        ctx.theme.trigger_critical_alert(".fuel-indicator", vehicle_stats["fuel"])

    ctx.emit("vehicleDataUpdated", event.payload)


def handle_compass(ctx: HandlerContext, event: InboundEvent) -> None:
    payload = CompassPayload.model_validate(event.payload)
    previous = _stored_section(ctx.store, "compassSettings", {})
    ctx.store.update_multiple(
        {
            "compassVisible": payload.show is True,
            "streetNames": {
                "street1": payload.street1 or "",
                "street2": payload.street2 or "",
            },
            "compassSettings": {
                "showCompass": _flag(payload.show_compass, previous.get("showCompass", True)),
                "showStreets": _flag(payload.show_streets, previous.get("showStreets", True)),
                "showPointer": _flag(payload.show_pointer, previous.get("showPointer", True)),
                "showDegrees": _flag(payload.show_degrees, previous.get("showDegrees", True)),
            },
        },
        silent=True,
    )
    ctx.emit("compassUpdated", event.payload)


def handle_compass_heading(ctx: HandlerContext, event: InboundEvent) -> None:
    if "value" not in event.payload:
        return
    payload = HeadingPayload.model_validate(event.payload)
    previous = ctx.store.get("compassHeading", 0)
    heading = payload.value
    if heading is not None:
        # Headings wrap rather than clamp.
        heading = heading % 360
    ctx.store.set("compassHeading", _clamp(heading, previous, HEADING_BOUNDS), silent=True)
    ctx.emit("compassDirectionUpdated", event.payload)


# ---------------------------------------------------------------------------
# Menus
# ---------------------------------------------------------------------------


def handle_menu_open(ctx: HandlerContext, event: InboundEvent) -> None:
    ctx.store.set("menuOpen", True, silent=True)
    if ctx.theme is not None:
        color = palette_color(ctx.store.get("currentTheme"), "secondary")
        ctx.theme.trigger_glow(".main-menu-container", color, 1.2)
    ctx.emit("menuOpened", event.payload)


def handle_settings_open(ctx: HandlerContext, event: InboundEvent) -> None:
    ctx.store.set("settingsMenuOpen", True, silent=True)
    ctx.emit("settingsMenuOpened", event.payload)


# ---------------------------------------------------------------------------
# Theme and effects
# ---------------------------------------------------------------------------


def handle_theme_update(ctx: HandlerContext, event: InboundEvent) -> None:
    payload = ThemePayload.model_validate(event.payload)
    if payload.theme is None:
        return
    if not ctx.store.set("currentTheme", payload.theme, silent=True):
        _logger.warning("Rejected theme update: %r", payload.theme)
        return
    if ctx.theme is not None:
        ctx.theme.set_theme(payload.theme, True)
    ctx.emit("themeUpdated", event.payload)


def handle_glow(ctx: HandlerContext, event: InboundEvent) -> None:
    payload = GlowPayload.model_validate(event.payload)
    if payload.element is None or payload.color is None:
        return
    if ctx.theme is not None:
        intensity = payload.intensity if payload.intensity is not None else 1.0
        ctx.theme.trigger_glow(payload.element, payload.color, intensity)
    ctx.emit("glowTriggered", event.payload)


def handle_critical_alert(ctx: HandlerContext, event: InboundEvent) -> None:
    payload = CriticalAlertPayload.model_validate(event.payload)
    if payload.stat_type is None or payload.value is None:
        return
    if ctx.theme is not None:
        ctx.theme.trigger_critical_alert(f".{payload.stat_type}-indicator", payload.value)
    ctx.emit("criticalAlertTriggered", event.payload)


def handle_value_changed(ctx: HandlerContext, event: InboundEvent) -> None:
    payload = ValueChangedPayload.model_validate(event.payload)
    if payload.stat_type is None or payload.new_value is None:
        return
    if ctx.theme is not None:
        speed = payload.animation_speed if payload.animation_speed else 1.0
        ctx.theme.animate_value_change(
            f".{payload.stat_type}-value",
            payload.old_value or 0,
            payload.new_value,
            _BASE_ANIMATION_MS / speed,
        )
    ctx.emit("valueChanged", event.payload)


def handle_effects_toggle(ctx: HandlerContext, event: InboundEvent) -> None:
    payload = EffectsPayload.model_validate(event.payload)
    enabled = payload.enabled is True
    ctx.store.set("animationsEnabled", enabled, silent=True)
    if ctx.theme is not None:
        ctx.theme.set_animations_enabled(enabled)
    ctx.emit("effectsToggled", event.payload)


def handle_neon_intensity(ctx: HandlerContext, event: InboundEvent) -> None:
    payload = NeonIntensityPayload.model_validate(event.payload)
    if payload.intensity is not None:
        intensity = _clamp(payload.intensity, ctx.store.get("neonIntensity", 0.8), NEON_BOUNDS)
        ctx.store.set("neonIntensity", intensity, silent=True)
        if ctx.theme is not None:
            ctx.theme.set_neon_intensity(intensity)
    ctx.emit("neonIntensityChanged", event.payload)


def handle_theme_sync(ctx: HandlerContext, event: InboundEvent) -> None:
    payload = ThemePayload.model_validate(event.payload)
    if payload.theme is not None and ctx.store.set("currentTheme", payload.theme, silent=True):
        if ctx.theme is not None:
            ctx.theme.set_theme(payload.theme, False)
    ctx.emit("themeSync", event.payload)


# ---------------------------------------------------------------------------
# GPS
# ---------------------------------------------------------------------------


def handle_gps_toggle(ctx: HandlerContext, event: InboundEvent) -> None:
    payload = GpsTogglePayload.model_validate(event.payload)
    active = payload.show is True
    ctx.store.set("gpsActive", active, silent=True)
    ctx.emit("gpsToggled", {"active": active})


def handle_gps_location(ctx: HandlerContext, event: InboundEvent) -> None:
    payload = GpsLocationPayload.model_validate(event.payload)
    ctx.store.update_multiple(
        {
            "gpsLocation": payload.location or "UNKNOWN",
            "gpsDirection": payload.direction or "↑",
            "gpsDistance": payload.distance or "0.0KM",
            "gpsStreets": {
                "street1": payload.street1 or "",
                "street2": payload.street2 or "",
            },
        },
        silent=True,
    )
    ctx.emit("gpsLocationUpdated", event.payload)


def handle_gps_stats(ctx: HandlerContext, event: InboundEvent) -> None:
    ctx.store.set("gpsStats", event.payload, silent=True)
    ctx.emit("gpsStatsUpdated", event.payload)


def handle_gps_position(ctx: HandlerContext, event: InboundEvent) -> None:
    payload = GpsPositionPayload.model_validate(event.payload)
    if not ctx.store.set("gpsPosition", payload.position or "top-right", silent=True):
        _logger.warning("Rejected GPS position: %r", payload.position)
        return
    ctx.emit("gpsPositionChanged", event.payload)


def handle_gps_theme(ctx: HandlerContext, event: InboundEvent) -> None:
    payload = GpsThemePayload.model_validate(event.payload)
    if not ctx.store.set("gpsTheme", payload.theme or "cyberpunk", silent=True):
        _logger.warning("Rejected GPS theme: %r", payload.theme)
        return
    ctx.emit("gpsThemeChanged", event.payload)


# ---------------------------------------------------------------------------
# Money
# ---------------------------------------------------------------------------


def handle_money_show(ctx: HandlerContext, event: InboundEvent) -> None:
    payload = MoneyPayload.model_validate(event.payload)
    account = payload.money_type
    if account in _MONEY_ACCOUNTS:
        previous = ctx.store.get(account, 0)
        ctx.store.set(account, clamp_with_fallback(getattr(payload, account), previous), silent=True)
    else:
        _logger.debug("Money show without a known account: %r", account)
    ctx.emit("moneyShown", event.payload)


def handle_money_update(ctx: HandlerContext, event: InboundEvent) -> None:
    payload = MoneyPayload.model_validate(event.payload)
    ctx.store.update_multiple(
        {
            "cash": clamp_with_fallback(payload.cash, ctx.store.get("cash", 0)),
            "bank": clamp_with_fallback(payload.bank, ctx.store.get("bank", 0)),
        },
        silent=True,
    )
    if ctx.theme is not None and payload.money_type:
        color = WITHDRAWAL_COLOR if payload.minus else DEPOSIT_COLOR
        ctx.theme.trigger_glow(f"#{payload.money_type}", color, 1.2)
    ctx.emit("moneyUpdated", event.payload)


# ---------------------------------------------------------------------------
# Dispatch table
# ---------------------------------------------------------------------------


def handle_unknown(ctx: HandlerContext, event: InboundEvent) -> None:
    """Default arm: log and forward, never raise."""
    _logger.warning("Unknown event action: %r %s", event.action_type, redact_for_log(event.payload))
    ctx.emit("unknownEvent", event.model_dump())


HANDLERS: Mapping[ActionType, Handler] = MappingProxyType(
    {
        ActionType.HUD_TICK: handle_hud_tick,
        ActionType.CAR: handle_vehicle,
        ActionType.BASEPLATE: handle_compass,
        ActionType.UPDATE: handle_compass_heading,
        ActionType.OPEN: handle_menu_open,
        ActionType.OPEN_SETTINGS: handle_settings_open,
        ActionType.UPDATE_THEME: handle_theme_update,
        ActionType.TRIGGER_GLOW: handle_glow,
        ActionType.CRITICAL_ALERT: handle_critical_alert,
        ActionType.VALUE_CHANGED: handle_value_changed,
        ActionType.TOGGLE_GPS_HUD: handle_gps_toggle,
        ActionType.UPDATE_GPS_LOCATION: handle_gps_location,
        ActionType.UPDATE_GPS_STATS: handle_gps_stats,
        ActionType.SET_GPS_POSITION: handle_gps_position,
        ActionType.SET_GPS_THEME: handle_gps_theme,
        ActionType.SHOW: handle_money_show,
        ActionType.UPDATE_MONEY: handle_money_update,
        ActionType.SET_EFFECTS_ENABLED: handle_effects_toggle,
        ActionType.SET_NEON_INTENSITY: handle_neon_intensity,
        ActionType.SYNC_THEME: handle_theme_sync,
    }
)
