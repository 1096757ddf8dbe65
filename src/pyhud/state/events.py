"""Inbound event types.

Every raw host message that passes the pipeline's admission checks is turned
into an :class:`InboundEvent`. Only the pipeline creates them; handlers read
them.
"""

from __future__ import annotations

import time
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _now_ms() -> int:
    return int(time.time() * 1000)


class ActionType(StrEnum):
    """Closed set of host actions with a dedicated handler."""

    HUD_TICK = "hudtick"
    CAR = "car"
    BASEPLATE = "baseplate"
    UPDATE = "update"
    OPEN = "open"
    OPEN_SETTINGS = "openSettings"
    UPDATE_THEME = "updateTheme"
    TRIGGER_GLOW = "triggerGlow"
    CRITICAL_ALERT = "criticalAlert"
    VALUE_CHANGED = "valueChanged"
    TOGGLE_GPS_HUD = "toggleGpsHud"
    UPDATE_GPS_LOCATION = "updateGpsLocation"
    UPDATE_GPS_STATS = "updateGpsStats"
    SET_GPS_POSITION = "setGpsPosition"
    SET_GPS_THEME = "setGpsTheme"
    SHOW = "show"
    UPDATE_MONEY = "updatemoney"
    SET_EFFECTS_ENABLED = "setEffectsEnabled"
    SET_NEON_INTENSITY = "setNeonIntensity"
    SYNC_THEME = "syncTheme"

    @classmethod
    def parse(cls, value: str) -> ActionType | None:
        """Return the member for *value*, or ``None`` for unknown actions."""
        try:
            return cls(value)
        except ValueError:
            return None


class EventSource(StrEnum):
    HOST = "host"
    DEVELOPMENT = "development"


class RateLimitRule(BaseModel):
    """At most ``max_events`` accepted events per trailing ``window_ms``."""

    model_config = ConfigDict(frozen=True)

    max_events: int = Field(..., gt=0)
    window_ms: int = Field(..., gt=0)


class InboundEvent(BaseModel):
    """An accepted host message waiting in (or consumed from) the queue."""

    model_config = ConfigDict(frozen=True)

    action_type: str = Field(..., description="Action discriminator as sent by the host")
    payload: dict[str, Any] = Field(default_factory=dict, description="Message fields without 'action'")
    timestamp: int = Field(default_factory=_now_ms, description="Acceptance time, epoch milliseconds")
    source: EventSource = EventSource.HOST

    @field_validator("action_type", mode="before")
    @classmethod
    def _normalize_action(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()
