"""GPS overlay payloads."""

from __future__ import annotations

from pyhud.models._base import HudBaseModel, HudFlag, HudText


class GpsTogglePayload(HudBaseModel):
    show: HudFlag = None


class GpsLocationPayload(HudBaseModel):
    location: HudText = None
    direction: HudText = None
    distance: HudText = None
    street1: HudText = None
    street2: HudText = None


class GpsPositionPayload(HudBaseModel):
    position: HudText = None


class GpsThemePayload(HudBaseModel):
    theme: HudText = None
