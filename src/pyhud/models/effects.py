"""Theme and visual-effect payloads."""

from __future__ import annotations

from pyhud.models._base import HudBaseModel, HudFlag, HudNumber, HudText


class ThemePayload(HudBaseModel):
    theme: HudText = None


class GlowPayload(HudBaseModel):
    element: HudText = None
    color: HudText = None
    intensity: HudNumber = None


class CriticalAlertPayload(HudBaseModel):
    stat_type: HudText = None
    value: HudNumber = None


class ValueChangedPayload(HudBaseModel):
    stat_type: HudText = None
    old_value: HudNumber = None
    new_value: HudNumber = None
    animation_speed: HudNumber = None


class EffectsPayload(HudBaseModel):
    enabled: HudFlag = None


class NeonIntensityPayload(HudBaseModel):
    intensity: HudNumber = None
