"""Typed host payload models."""

from pyhud.models._base import HudBaseModel
from pyhud.models.compass import CompassPayload, HeadingPayload
from pyhud.models.effects import (
    CriticalAlertPayload,
    EffectsPayload,
    GlowPayload,
    NeonIntensityPayload,
    ThemePayload,
    ValueChangedPayload,
)
from pyhud.models.gps import GpsLocationPayload, GpsPositionPayload, GpsThemePayload, GpsTogglePayload
from pyhud.models.hud import HudTickPayload
from pyhud.models.money import MoneyPayload
from pyhud.models.vehicle import VehiclePayload

__all__ = [
    "CompassPayload",
    "CriticalAlertPayload",
    "EffectsPayload",
    "GlowPayload",
    "GpsLocationPayload",
    "GpsPositionPayload",
    "GpsThemePayload",
    "GpsTogglePayload",
    "HeadingPayload",
    "HudBaseModel",
    "HudTickPayload",
    "MoneyPayload",
    "NeonIntensityPayload",
    "ThemePayload",
    "ValueChangedPayload",
    "VehiclePayload",
]
